"""Turnkey signing backend.

Uses Turnkey's ``sign_raw_payload`` activity. Requests are authenticated with
a per-request stamp (see ``stamper``) instead of a bearer token. The Solana
key itself lives in Turnkey and is referenced by its private key ID.

Turnkey returns the Ed25519 signature split into ``r`` and ``s`` hex
components, which may be shorter than 32 bytes each. They are left-padded and
concatenated into the 64-byte signature.

Reference:
- https://docs.turnkey.com/api-reference/activities/sign-raw-payload
"""

import logging
import time
from typing import Optional

import httpx

from solana_signers.config import DEFAULT_TURNKEY_API_BASE_URL
from solana_signers.errors import (
    ConfigError,
    InvalidPublicKeyError,
    SerializationError,
    SigningFailedError,
)
from solana_signers.sdk import Pubkey, Signature, Transaction, pubkey_from_str, signature_from_bytes
from solana_signers.signing.base import SignedTransaction, SignerType
from solana_signers.signing.remote import DEFAULT_TIMEOUT, RemoteSigner
from solana_signers.signing.stamper import ApiKeyStamper
from solana_signers.signing.types import (
    TurnkeyActivityResponse,
    TurnkeySignParameters,
    TurnkeySignRequest,
    TurnkeyWhoAmIRequest,
)
from solana_signers.transaction_util import add_signature_to_transaction, serialize_transaction

logger = logging.getLogger(__name__)

COMPONENT_LENGTH = 32


def signature_from_components(r_hex: str, s_hex: str) -> bytes:
    """Rebuild a 64-byte signature from hex ``r`` and ``s`` components.

    Each component is right-aligned in a 32-byte buffer, so ``r = "01"``
    becomes 31 zero bytes followed by 0x01.

    Raises:
        SerializationError: If a component is not valid hex
        SigningFailedError: If a component is longer than 32 bytes
    """
    try:
        r_bytes = bytes.fromhex(r_hex)
    except ValueError as e:
        raise SerializationError(f"Failed to decode r: {e}") from e
    try:
        s_bytes = bytes.fromhex(s_hex)
    except ValueError as e:
        raise SerializationError(f"Failed to decode s: {e}") from e

    if len(r_bytes) > COMPONENT_LENGTH or len(s_bytes) > COMPONENT_LENGTH:
        raise SigningFailedError("Invalid signature component length")

    return r_bytes.rjust(COMPONENT_LENGTH, b"\x00") + s_bytes.rjust(COMPONENT_LENGTH, b"\x00")


class TurnkeySigner(RemoteSigner):
    """Turnkey raw payload signing backend."""

    def __init__(
        self,
        api_public_key: str,
        api_private_key: str,
        organization_id: str,
        private_key_id: str,
        public_key: str,
        api_base_url: str = DEFAULT_TURNKEY_API_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay_ms: int = 0,
        unsafe_debug: bool = False,
    ):
        """Initialize Turnkey signer.

        Args:
            api_public_key: Turnkey API public key (hex)
            api_private_key: Turnkey API private key (hex), used only for stamps
            organization_id: Turnkey organization ID
            private_key_id: Turnkey private key ID holding the Solana key
            public_key: Base58 Solana public key of that private key
            api_base_url: Turnkey API base URL

        Raises:
            ConfigError: If a required field is empty
            InvalidPublicKeyError: If public_key is not a valid base58 public key
            InvalidPrivateKeyError: If api_private_key is not a valid P-256 key
        """
        if not api_public_key or not api_private_key or not organization_id or not private_key_id:
            raise ConfigError(
                "Missing required configuration fields "
                "(api_public_key, api_private_key, organization_id, or private_key_id)"
            )

        try:
            parsed_pubkey = pubkey_from_str(public_key)
        except ValueError as e:
            raise InvalidPublicKeyError(f"Invalid public key: {e}") from e

        stamper = ApiKeyStamper(api_public_key, api_private_key)

        super().__init__(
            SignerType.TURNKEY,
            client=client,
            timeout=timeout,
            request_delay_ms=request_delay_ms,
            unsafe_debug=unsafe_debug,
        )
        self.organization_id = organization_id
        self.private_key_id = private_key_id
        self.api_base_url = api_base_url.rstrip("/")
        self._public_key = parsed_pubkey
        self._stamper = stamper

    def pubkey(self) -> Pubkey:
        return self._public_key

    def _stamped_headers(self, body: str) -> dict:
        headers = {"Content-Type": "application/json"}
        headers.update(self._stamper.headers(body))
        return headers

    async def _sign_bytes(self, message: bytes) -> Signature:
        request = TurnkeySignRequest(
            timestamp_ms=str(int(time.time() * 1000)),
            organization_id=self.organization_id,
            parameters=TurnkeySignParameters(
                sign_with=self.private_key_id,
                payload=message.hex(),
            ),
        )
        body = request.model_dump_json(by_alias=True)

        url = f"{self.api_base_url}/public/v1/submit/sign_raw_payload"
        response = await self._send(
            "Turnkey API",
            "POST",
            url,
            headers=self._stamped_headers(body),
            content=body,
        )
        result = self._parse(response, TurnkeyActivityResponse, "Turnkey")

        activity_result = result.activity.result
        if activity_result is None or activity_result.sign_raw_payload_result is None:
            raise SigningFailedError("Invalid response from Turnkey API")

        sign_result = activity_result.sign_raw_payload_result
        return signature_from_bytes(signature_from_components(sign_result.r, sign_result.s))

    async def _sign_and_serialize(self, transaction: Transaction) -> SignedTransaction:
        signature = await self._sign_bytes(transaction.message_data())
        add_signature_to_transaction(transaction, self._public_key, signature)
        return SignedTransaction(serialize_transaction(transaction), signature)

    async def sign_message(self, message: bytes) -> Signature:
        return await self._sign_bytes(message)

    async def sign_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self._sign_and_serialize(transaction)

    async def sign_partial_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self._sign_and_serialize(transaction)

    async def is_available(self) -> bool:
        """Stamped whoami call; any success status counts as available."""
        body = TurnkeyWhoAmIRequest(organization_id=self.organization_id).model_dump_json(
            by_alias=True
        )
        url = f"{self.api_base_url}/public/v1/query/whoami"
        return await self._probe("POST", url, headers=self._stamped_headers(body), content=body)
