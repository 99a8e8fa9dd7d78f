"""HashiCorp Vault signing backend.

Uses Vault's transit secrets engine. The private key never leaves Vault;
signing happens server side and only the signature comes back.

Setup:
1. Enable the transit engine: ``vault secrets enable transit``
2. Create an Ed25519 key: ``vault write transit/keys/my-key type=ed25519``
3. Read the public key and convert it to base58 for ``pubkey``

Reference:
- https://developer.hashicorp.com/vault/api-docs/secret/transit
"""

import base64
import binascii
import logging
from typing import Optional

import httpx

from solana_signers.errors import (
    ConfigError,
    InvalidPublicKeyError,
    RemoteApiError,
    SerializationError,
    SigningFailedError,
)
from solana_signers.sdk import (
    SIGNATURE_LENGTH,
    Pubkey,
    Signature,
    Transaction,
    pubkey_from_str,
    signature_from_bytes,
)
from solana_signers.signing.base import SignedTransaction, SignerType
from solana_signers.signing.remote import DEFAULT_TIMEOUT, RemoteSigner
from solana_signers.signing.types import VaultSignRequest, VaultSignResponse
from solana_signers.transaction_util import add_signature_to_transaction, serialize_transaction

logger = logging.getLogger(__name__)

VAULT_SIGNATURE_PREFIX = "vault:v1:"


class VaultSigner(RemoteSigner):
    """Vault transit signing backend.

    Authenticates with a static token in the ``X-Vault-Token`` header.
    """

    def __init__(
        self,
        vault_addr: str,
        vault_token: str,
        key_name: str,
        pubkey: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay_ms: int = 0,
        unsafe_debug: bool = False,
    ):
        """Initialize Vault signer.

        Args:
            vault_addr: Vault server address, e.g. https://vault.example.com
            vault_token: Vault token with access to the transit key
            key_name: Name of the transit key
            pubkey: Base58 Solana public key of the transit key

        Raises:
            ConfigError: If a required field is empty
            InvalidPublicKeyError: If pubkey is not a valid base58 public key
        """
        if not vault_addr or not vault_token or not key_name:
            raise ConfigError("Missing required configuration fields (vault_addr, vault_token, or key_name)")

        try:
            parsed_pubkey = pubkey_from_str(pubkey)
        except ValueError as e:
            raise InvalidPublicKeyError(f"Failed to decode base58 public key: {e}") from e

        super().__init__(
            SignerType.VAULT,
            client=client,
            timeout=timeout,
            request_delay_ms=request_delay_ms,
            unsafe_debug=unsafe_debug,
        )
        self.vault_addr = vault_addr.rstrip("/")
        self._token = vault_token
        self.key_name = key_name
        self._pubkey = parsed_pubkey

    def _headers(self) -> dict:
        return {"X-Vault-Token": self._token}

    def pubkey(self) -> Pubkey:
        return self._pubkey

    async def _sign_bytes(self, payload: bytes) -> Signature:
        """Sign bytes with the transit key."""
        url = f"{self.vault_addr}/v1/transit/sign/{self.key_name}"
        request = VaultSignRequest(input=base64.b64encode(payload).decode("ascii"))

        response = await self._send(
            "Vault API",
            "POST",
            url,
            headers=self._headers(),
            json=request.model_dump(),
        )
        result = self._parse(response, VaultSignResponse, "Vault")

        if result.data is None or not result.data.signature:
            raise RemoteApiError("No signature in Vault response")

        return self._decode_signature(result.data.signature)

    @staticmethod
    def _decode_signature(vault_signature: str) -> Signature:
        """Strip the ``vault:v1:`` prefix and decode the base64 signature."""
        encoded = vault_signature
        if encoded.startswith(VAULT_SIGNATURE_PREFIX):
            encoded = encoded[len(VAULT_SIGNATURE_PREFIX):]

        try:
            sig_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SerializationError("Failed to decode signature") from e

        if len(sig_bytes) != SIGNATURE_LENGTH:
            raise SigningFailedError(
                f"Invalid signature format: expected {SIGNATURE_LENGTH} bytes, got {len(sig_bytes)}"
            )

        return signature_from_bytes(sig_bytes)

    async def _sign_and_serialize(self, transaction: Transaction) -> SignedTransaction:
        signature = await self._sign_bytes(transaction.message_data())
        add_signature_to_transaction(transaction, self._pubkey, signature)
        return SignedTransaction(serialize_transaction(transaction), signature)

    async def sign_message(self, message: bytes) -> Signature:
        return await self._sign_bytes(message)

    async def sign_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self._sign_and_serialize(transaction)

    async def sign_partial_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self._sign_and_serialize(transaction)

    async def is_available(self) -> bool:
        """Check the transit key is reachable with this token.

        Only verifies the key metadata can be read, not that signing works.
        """
        url = f"{self.vault_addr}/v1/transit/keys/{self.key_name}"
        return await self._probe("GET", url, headers=self._headers())
