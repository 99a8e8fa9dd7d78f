"""Privy signing backend.

Uses Privy's server wallet API. The signer has a two-phase lifecycle: it is
constructed with credentials only, and ``init()`` fetches the wallet's public
key. Until ``init()`` succeeds the signer reports unavailable and refuses to
sign. A failed ``init()`` leaves the signer unusable but may be retried.

Reference:
- https://docs.privy.io/api-reference/wallets/solana/sign-transaction
"""

import base64
import logging
from typing import Optional

import httpx

from solana_signers.config import DEFAULT_PRIVY_API_BASE_URL
from solana_signers.errors import (
    ConfigError,
    InvalidPublicKeyError,
    NotAvailableError,
    SigningFailedError,
)
from solana_signers.sdk import Pubkey, Signature, Transaction, pubkey_from_str
from solana_signers.signing.base import SignedTransaction, SignerType
from solana_signers.signing.remote import DEFAULT_TIMEOUT, RemoteSigner
from solana_signers.signing.types import (
    PrivySignTransactionParams,
    PrivySignTransactionRequest,
    PrivySignTransactionResponse,
    PrivyWalletResponse,
)
from solana_signers.transaction_util import (
    add_signature_to_transaction,
    deserialize_transaction,
    get_signing_keypair_position,
)

logger = logging.getLogger(__name__)


class PrivySigner(RemoteSigner):
    """Privy wallet API signing backend.

    Authenticates with HTTP Basic auth built from the app id and secret.
    Privy returns a fully signed transaction; the signature for this wallet
    is read back out of it.
    """

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        wallet_id: str,
        api_base_url: str = DEFAULT_PRIVY_API_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay_ms: int = 0,
        unsafe_debug: bool = False,
    ):
        """Initialize Privy signer. Call ``init()`` before signing.

        Args:
            app_id: Privy application ID
            app_secret: Privy application secret
            wallet_id: Privy wallet ID
            api_base_url: Privy API base URL

        Raises:
            ConfigError: If a required field is empty
        """
        if not app_id or not app_secret or not wallet_id:
            raise ConfigError("Missing required configuration fields (app_id, app_secret, or wallet_id)")

        super().__init__(
            SignerType.PRIVY,
            client=client,
            timeout=timeout,
            request_delay_ms=request_delay_ms,
            unsafe_debug=unsafe_debug,
        )
        self.app_id = app_id
        self._app_secret = app_secret
        self.wallet_id = wallet_id
        self.api_base_url = api_base_url.rstrip("/")
        # Default (all-zero) pubkey marks the signer as not initialized
        self._public_key = Pubkey.default()

    def _headers(self) -> dict:
        credentials = f"{self.app_id}:{self._app_secret}".encode()
        return {
            "Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}",
            "privy-app-id": self.app_id,
        }

    @property
    def initialized(self) -> bool:
        return self._public_key != Pubkey.default()

    async def init(self) -> None:
        """Fetch and store the wallet public key.

        Must not be called concurrently with itself.

        Raises:
            RemoteApiError: On a non-success status
            HttpError: On transport failure
            SerializationError: If the response cannot be parsed
            InvalidPublicKeyError: If the wallet address is not a public key
        """
        self._public_key = await self._fetch_public_key()
        logger.info(f"Privy wallet {self.wallet_id} initialized")

    async def _fetch_public_key(self) -> Pubkey:
        url = f"{self.api_base_url}/wallets/{self.wallet_id}"

        response = await self._send("Privy API get_public_key", "GET", url, headers=self._headers())
        wallet = self._parse(response, PrivyWalletResponse, "Privy wallet")

        try:
            return pubkey_from_str(wallet.address)
        except ValueError as e:
            raise InvalidPublicKeyError("Invalid public key from Privy API") from e

    async def _sign_bytes(self, payload: bytes) -> SignedTransaction:
        """Send bytes to the wallet RPC and extract this wallet's signature.

        Returns:
            SignedTransaction with Privy's encoded signed transaction
        """
        if not self.initialized:
            raise NotAvailableError("Privy signer is not initialized; call init() first")

        url = f"{self.api_base_url}/wallets/{self.wallet_id}/rpc"
        request = PrivySignTransactionRequest(
            params=PrivySignTransactionParams(
                transaction=base64.b64encode(payload).decode("ascii"),
            ),
        )

        headers = self._headers()
        headers["Content-Type"] = "application/json"

        response = await self._send(
            "Privy API sign_transaction",
            "POST",
            url,
            headers=headers,
            json=request.model_dump(),
        )
        result = self._parse(response, PrivySignTransactionResponse, "Privy sign")

        encoded = result.data.signed_transaction
        signed_tx = deserialize_transaction(encoded)

        try:
            index = get_signing_keypair_position(signed_tx, self._public_key)
        except SigningFailedError as e:
            raise SigningFailedError("Signer public key not found in transaction") from e

        signatures = signed_tx.signatures
        if index >= len(signatures) or signatures[index] == Signature.default():
            raise SigningFailedError("No signature found for signer public key")

        return SignedTransaction(encoded, signatures[index])

    def pubkey(self) -> Pubkey:
        return self._public_key

    async def sign_message(self, message: bytes) -> Signature:
        signed = await self._sign_bytes(message)
        return signed.signature

    async def sign_transaction(self, transaction: Transaction) -> SignedTransaction:
        signed = await self._sign_bytes(transaction.message_data())
        add_signature_to_transaction(transaction, self._public_key, signed.signature)
        return signed

    async def sign_partial_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self.sign_transaction(transaction)

    async def is_available(self) -> bool:
        """Local check only: available once the public key has been fetched."""
        return self.initialized
