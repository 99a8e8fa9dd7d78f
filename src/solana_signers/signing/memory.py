"""Memory signing backend.

Signs with an Ed25519 keypair held in process memory. Suitable for:
- Development/testing
- Hot wallets with small balances
- Fee payers in relayer setups

WARNING: The private key lives in process memory. Use Vault, Privy or
Turnkey for keys that guard significant funds.
"""

import logging

from solana_signers.errors import InvalidPrivateKeyError, SigningFailedError
from solana_signers.keypair import keypair_from_private_key_string
from solana_signers.sdk import Keypair, Pubkey, Signature, Transaction, keypair_from_bytes
from solana_signers.signing.base import SignedTransaction, SignerType, SolanaSigner
from solana_signers.transaction_util import serialize_transaction

logger = logging.getLogger(__name__)


class MemorySigner(SolanaSigner):
    """Local signing backend using an in-memory keypair."""

    def __init__(self, keypair: Keypair):
        super().__init__(SignerType.MEMORY)
        self._keypair = keypair

    @classmethod
    def from_bytes(cls, private_key: bytes) -> "MemorySigner":
        """Create from the 64-byte keypair (secret key followed by pubkey)."""
        try:
            keypair = keypair_from_bytes(private_key)
        except ValueError as e:
            raise InvalidPrivateKeyError(f"Invalid private key bytes: {e}") from e
        return cls(keypair)

    @classmethod
    def from_private_key_string(cls, private_key: str) -> "MemorySigner":
        """Create from a base58 string, byte array string or keypair file path."""
        return cls(keypair_from_private_key_string(private_key))

    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    def _sign_bytes(self, data: bytes) -> Signature:
        return self._keypair.sign_message(data)

    async def sign_message(self, message: bytes) -> Signature:
        return self._sign_bytes(message)

    async def sign_transaction(self, transaction: Transaction) -> SignedTransaction:
        """Sign with the SDK's full signing routine.

        Fails if this keypair is not the only missing required signer.
        """
        signature = self._sign_bytes(transaction.message_data())
        try:
            transaction.sign([self._keypair], transaction.message.recent_blockhash)
        except Exception as e:
            raise SigningFailedError(f"Failed to sign transaction: {e}") from e

        return SignedTransaction(serialize_transaction(transaction), signature)

    async def sign_partial_transaction(self, transaction: Transaction) -> SignedTransaction:
        signature = self._sign_bytes(transaction.message_data())
        try:
            transaction.partial_sign([self._keypair], transaction.message.recent_blockhash)
        except Exception as e:
            raise SigningFailedError(f"Failed to partially sign transaction: {e}") from e

        return SignedTransaction(serialize_transaction(transaction), signature)

    async def is_available(self) -> bool:
        """No external dependency, always available."""
        return True
