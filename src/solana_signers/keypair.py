"""Private key string parsing.

Accepted formats:
- Path to a JSON keypair file (``solana-keygen`` output, array of 64 ints)
- Inline byte array, e.g. ``[41,99,180,...]``
- Base58 string of the 64-byte keypair
"""

import json
import logging
import os

import base58

from solana_signers.errors import InvalidPrivateKeyError, SignerIOError
from solana_signers.sdk import KEYPAIR_LENGTH, Keypair, keypair_from_bytes

logger = logging.getLogger(__name__)


def keypair_from_private_key_string(private_key: str) -> Keypair:
    """Parse a private key in any supported format.

    Raises:
        InvalidPrivateKeyError: If the value cannot be parsed into a keypair
        SignerIOError: If the value names a file that cannot be read
    """
    if os.path.isfile(private_key):
        try:
            with open(private_key, encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise SignerIOError(f"Failed to read keypair file: {e}") from e
        logger.debug("Loading keypair from JSON file")
        return keypair_from_json(content)

    stripped = private_key.strip()
    if stripped.startswith("[") and stripped.endswith("]"):
        return keypair_from_byte_array_string(stripped)

    return keypair_from_base58(stripped)


def keypair_from_base58(private_key: str) -> Keypair:
    try:
        decoded = base58.b58decode(private_key)
    except ValueError as e:
        raise InvalidPrivateKeyError(f"Invalid base58 string: {e}") from e

    if len(decoded) != KEYPAIR_LENGTH:
        raise InvalidPrivateKeyError(
            f"Invalid private key length: expected {KEYPAIR_LENGTH} bytes, got {len(decoded)}"
        )

    return _to_keypair(decoded)


def keypair_from_byte_array_string(array_str: str) -> Keypair:
    """Parse ``[1,2,3,...]`` into a keypair."""
    trimmed = array_str.strip()

    if not (trimmed.startswith("[") and trimmed.endswith("]")):
        raise InvalidPrivateKeyError("Byte array string must start with '[' and end with ']'")

    inner = trimmed[1:-1]
    if not inner.strip():
        raise InvalidPrivateKeyError("Byte array string cannot be empty")

    try:
        values = [int(part.strip()) for part in inner.split(",")]
    except ValueError as e:
        raise InvalidPrivateKeyError(f"Failed to parse byte array: {e}") from e

    return _keypair_from_ints(values)


def keypair_from_json(content: str) -> Keypair:
    """Parse the JSON keypair file format (array of 64 ints)."""
    try:
        values = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidPrivateKeyError(
            "Invalid JSON keypair format. Expected a JSON array of 64 bytes"
        ) from e

    if not isinstance(values, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in values
    ):
        raise InvalidPrivateKeyError(
            "Invalid JSON keypair format. Expected a JSON array of 64 bytes"
        )

    return _keypair_from_ints(values)


def _keypair_from_ints(values: list[int]) -> Keypair:
    if any(v < 0 or v > 255 for v in values):
        raise InvalidPrivateKeyError("Byte values must be in range 0-255")

    if len(values) != KEYPAIR_LENGTH:
        raise InvalidPrivateKeyError(
            f"Private key must be exactly {KEYPAIR_LENGTH} bytes, got {len(values)}"
        )

    return _to_keypair(bytes(values))


def _to_keypair(data: bytes) -> Keypair:
    try:
        return keypair_from_bytes(data)
    except ValueError as e:
        raise InvalidPrivateKeyError(f"Invalid private key bytes: {e}") from e
