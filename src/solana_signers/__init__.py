"""Solana transaction and message signing over local and remote key custody."""

from solana_signers.errors import ErrorKind, SignerError
from solana_signers.signing import (
    MemorySigner,
    PrivySigner,
    SignedTransaction,
    Signer,
    SignerType,
    SolanaSigner,
    TurnkeySigner,
    VaultSigner,
    get_signer,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "SignerError",
    "MemorySigner",
    "PrivySigner",
    "SignedTransaction",
    "Signer",
    "SignerType",
    "SolanaSigner",
    "TurnkeySigner",
    "VaultSigner",
    "get_signer",
]
