"""Base interfaces for Solana signing.

Signing flow:
1. Caller builds a transaction (this package never builds one)
2. Backend signs the transaction's message bytes, locally or remotely
3. Signature is placed in the signer's slot of the transaction
4. Transaction is re-encoded as base64 and returned with the signature
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import NamedTuple, Sequence

from solana_signers.sdk import Pubkey, Signature, Transaction

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Type of signing backend."""
    MEMORY = "memory"         # Keypair held in process memory
    VAULT = "vault"           # HashiCorp Vault transit engine
    PRIVY = "privy"           # Privy wallet API
    TURNKEY = "turnkey"       # Turnkey raw payload signing


class SignedTransaction(NamedTuple):
    """Result of signing a transaction.

    Attributes:
        transaction: Base64 encoded wire transaction
        signature: Signature produced by this signer
    """
    transaction: str
    signature: Signature


class SolanaSigner(ABC):
    """Abstract base class for Solana signing backends.

    Implementations never expose private keys. All operations are safe to
    call concurrently; backends hold no mutable state touched by signing.
    """

    def __init__(self, signer_type: SignerType):
        self.signer_type = signer_type

    @abstractmethod
    def pubkey(self) -> Pubkey:
        """Public key of this signer. Never performs I/O."""

    @abstractmethod
    async def sign_message(self, message: bytes) -> Signature:
        """Sign arbitrary bytes.

        Args:
            message: Bytes to sign

        Returns:
            64-byte Ed25519 signature over the message
        """

    @abstractmethod
    async def sign_transaction(self, transaction: Transaction) -> SignedTransaction:
        """Sign a transaction in place.

        Args:
            transaction: Transaction to sign (modified in place)

        Returns:
            SignedTransaction with the base64 transaction and the signature
        """

    @abstractmethod
    async def sign_partial_transaction(self, transaction: Transaction) -> SignedTransaction:
        """Sign a transaction that other signers still have to sign.

        Same as sign_transaction, but the returned encoding is allowed to
        contain empty signature slots for the other required signers.
        """

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the signing backend is usable. Never raises."""

    async def sign_messages(self, messages: Sequence[bytes]) -> list[Signature]:
        """Sign several messages concurrently, preserving order."""
        return list(
            await asyncio.gather(
                *(self._delayed(i, self.sign_message, m) for i, m in enumerate(messages))
            )
        )

    async def sign_transactions(
        self, transactions: Sequence[Transaction]
    ) -> list[SignedTransaction]:
        """Sign several transactions concurrently, preserving order."""
        return list(
            await asyncio.gather(
                *(self._delayed(i, self.sign_transaction, tx) for i, tx in enumerate(transactions))
            )
        )

    @property
    def request_delay_ms(self) -> int:
        """Spacing between batched requests. Local backends need none."""
        return 0

    async def _delayed(self, index: int, func, arg):
        if self.request_delay_ms > 0 and index > 0:
            await asyncio.sleep(index * self.request_delay_ms / 1000)
        return await func(arg)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.signer_type.value}, pubkey={self.pubkey()})"
