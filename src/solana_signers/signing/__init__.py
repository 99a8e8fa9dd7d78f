"""Solana signing backends.

Provides interchangeable signing implementations:
- MemorySigner: Keypair held in process memory
- VaultSigner: HashiCorp Vault transit engine
- PrivySigner: Privy wallet API
- TurnkeySigner: Turnkey raw payload signing
"""

from solana_signers.signing.base import (
    SignedTransaction,
    SignerType,
    SolanaSigner,
)
from solana_signers.signing.factory import Signer, get_signer
from solana_signers.signing.memory import MemorySigner
from solana_signers.signing.privy import PrivySigner
from solana_signers.signing.turnkey import TurnkeySigner
from solana_signers.signing.vault import VaultSigner

__all__ = [
    "SignedTransaction",
    "SignerType",
    "SolanaSigner",
    "Signer",
    "MemorySigner",
    "PrivySigner",
    "TurnkeySigner",
    "VaultSigner",
    "get_signer",
]
