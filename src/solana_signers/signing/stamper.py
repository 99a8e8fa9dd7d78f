"""Turnkey API key stamping.

Every Turnkey request carries an ``X-Stamp`` header: the request body signed
with the API key (P-256, deterministic ECDSA over SHA-256, DER encoded),
wrapped in a small JSON document and base64url encoded without padding.
This key only authenticates requests; it never signs Solana payloads.
"""

import base64
import binascii
import hashlib
import json
import logging

from ecdsa import NIST256p, SigningKey
from ecdsa.errors import MalformedPointError
from ecdsa.util import sigencode_der

from solana_signers.errors import InvalidPrivateKeyError

logger = logging.getLogger(__name__)

STAMP_HEADER_NAME = "X-Stamp"
STAMP_SCHEME = "SIGNATURE_SCHEME_TK_API_P256"
API_PRIVATE_KEY_LENGTH = 32


class ApiKeyStamper:
    """Creates X-Stamp header values for Turnkey API authentication."""

    def __init__(self, api_public_key: str, api_private_key: str):
        """
        Args:
            api_public_key: API public key as hex (sent verbatim in the stamp)
            api_private_key: API private key as hex (32 bytes)

        Raises:
            InvalidPrivateKeyError: If the private key is not a valid P-256 scalar
        """
        try:
            private_key_bytes = bytes.fromhex(api_private_key)
        except ValueError as e:
            raise InvalidPrivateKeyError(f"Failed to decode private key: {e}") from e

        if len(private_key_bytes) != API_PRIVATE_KEY_LENGTH:
            raise InvalidPrivateKeyError("Invalid private key length")

        try:
            self._signing_key = SigningKey.from_string(
                private_key_bytes, curve=NIST256p, hashfunc=hashlib.sha256
            )
        except (ValueError, MalformedPointError) as e:
            raise InvalidPrivateKeyError(f"Invalid signing key: {e}") from e

        self.api_public_key = api_public_key

    def sign(self, message: bytes) -> bytes:
        """DER-encoded deterministic (RFC 6979) ECDSA signature."""
        return self._signing_key.sign_deterministic(
            message, hashfunc=hashlib.sha256, sigencode=sigencode_der
        )

    def stamp(self, body: str) -> str:
        """Stamp a request body.

        Args:
            body: Exact request body that will be sent

        Returns:
            Base64url (no padding) encoded stamp JSON
        """
        signature_hex = binascii.hexlify(self.sign(body.encode("utf-8"))).decode("ascii")

        stamp = {
            "public_key": self.api_public_key,
            "signature": signature_hex,
            "scheme": STAMP_SCHEME,
        }
        stamp_json = json.dumps(stamp, separators=(",", ":"))

        return base64.urlsafe_b64encode(stamp_json.encode("utf-8")).rstrip(b"=").decode("ascii")

    def headers(self, body: str) -> dict:
        return {STAMP_HEADER_NAME: self.stamp(body)}
