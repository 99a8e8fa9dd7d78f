"""Solana SDK adapter.

Everything else in the package imports Solana types from here rather than
from ``solders`` directly, so the SDK binding can be swapped in one place.
"""

import base58
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

PUBKEY_LENGTH = 32
SIGNATURE_LENGTH = 64
KEYPAIR_LENGTH = 64

__all__ = [
    "Hash",
    "Keypair",
    "Message",
    "Pubkey",
    "Signature",
    "Transaction",
    "KEYPAIR_LENGTH",
    "PUBKEY_LENGTH",
    "SIGNATURE_LENGTH",
    "keypair_from_bytes",
    "keypair_pubkey",
    "pubkey_from_bytes",
    "pubkey_from_str",
    "signature_from_bytes",
]


def keypair_from_bytes(data: bytes) -> Keypair:
    """Build a keypair from 64 bytes (32-byte secret followed by the pubkey).

    Raises:
        ValueError: If the bytes do not form a consistent Ed25519 keypair
    """
    if len(data) != KEYPAIR_LENGTH:
        raise ValueError(f"expected {KEYPAIR_LENGTH} bytes, got {len(data)}")
    return Keypair.from_bytes(bytes(data))


def keypair_pubkey(keypair: Keypair) -> Pubkey:
    return keypair.pubkey()


def pubkey_from_bytes(data: bytes) -> Pubkey:
    if len(data) != PUBKEY_LENGTH:
        raise ValueError(f"expected {PUBKEY_LENGTH} bytes, got {len(data)}")
    return Pubkey.from_bytes(bytes(data))


def pubkey_from_str(value: str) -> Pubkey:
    """Parse a base58 public key.

    Raises:
        ValueError: If the string is not base58 or not 32 bytes
    """
    return pubkey_from_bytes(base58.b58decode(value.strip()))


def signature_from_bytes(data: bytes) -> Signature:
    if len(data) != SIGNATURE_LENGTH:
        raise ValueError(f"expected {SIGNATURE_LENGTH} bytes, got {len(data)}")
    return Signature.from_bytes(bytes(data))
