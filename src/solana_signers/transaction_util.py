"""Signature assembly for Solana transactions.

Remote backends only return a bare 64-byte signature. These helpers put it in
the right slot of a (possibly multi-signer) transaction and encode the result
for transport.
"""

import base64
import binascii
import logging

from solana_signers.errors import SerializationError, SigningFailedError
from solana_signers.sdk import Pubkey, Signature, Transaction

logger = logging.getLogger(__name__)


def serialize_transaction(transaction: Transaction) -> str:
    """Encode a transaction as base64 of its binary wire format."""
    try:
        raw = bytes(transaction)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize transaction: {e}") from e
    return base64.b64encode(raw).decode("ascii")


def deserialize_transaction(encoded: str) -> Transaction:
    """Decode a base64 wire transaction."""
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SerializationError(f"Failed to decode transaction: {e}") from e

    try:
        return Transaction.from_bytes(raw)
    except ValueError as e:
        raise SerializationError(f"Failed to deserialize transaction: {e}") from e


def get_signing_keypair_position(transaction: Transaction, pubkey: Pubkey) -> int:
    """Index of ``pubkey`` within the required-signer prefix of the account keys.

    Raises:
        SigningFailedError: If the pubkey is not a required signer
    """
    message = transaction.message
    num_required_signatures = message.header.num_required_signatures
    account_keys = message.account_keys

    if len(account_keys) < num_required_signatures:
        raise SigningFailedError("Invalid account index: not enough account keys")

    for index, key in enumerate(account_keys[:num_required_signatures]):
        if key == pubkey:
            return index

    raise SigningFailedError(f"Pubkey {pubkey} not found in transaction signers")


def add_signature_to_transaction(
    transaction: Transaction,
    pubkey: Pubkey,
    signature: Signature,
) -> None:
    """Write ``signature`` into the slot belonging to ``pubkey``.

    Other slots are left as they are, so signers can add their signatures
    one at a time. The transaction is not modified if the pubkey is not a
    required signer.
    """
    position = get_signing_keypair_position(transaction, pubkey)

    num_required_signatures = transaction.message.header.num_required_signatures
    signatures = list(transaction.signatures)
    if len(signatures) < num_required_signatures:
        signatures.extend(
            Signature.default() for _ in range(num_required_signatures - len(signatures))
        )

    signatures[position] = signature
    transaction.signatures = signatures
    logger.debug(f"Placed signature for {pubkey} at index {position}")
