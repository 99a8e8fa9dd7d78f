"""Signer factory.

``Signer`` holds exactly one backend and forwards the signing contract to it,
so callers can keep "some signer" without knowing which one. ``get_signer()``
builds the backend selected by the environment.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Optional

from solana_signers.config import Settings, get_settings
from solana_signers.errors import ConfigError
from solana_signers.sdk import Pubkey, Signature, Transaction
from solana_signers.signing.base import SignedTransaction, SignerType, SolanaSigner
from solana_signers.signing.memory import MemorySigner
from solana_signers.signing.privy import PrivySigner
from solana_signers.signing.remote import RemoteSigner
from solana_signers.signing.turnkey import TurnkeySigner
from solana_signers.signing.vault import VaultSigner

logger = logging.getLogger(__name__)

_BACKENDS = (MemorySigner, VaultSigner, PrivySigner, TurnkeySigner)


class Signer(SolanaSigner):
    """Unified signer over one of the supported backends."""

    def __init__(self, backend: SolanaSigner):
        if not isinstance(backend, _BACKENDS):
            raise ConfigError(f"Unsupported signer backend: {type(backend).__name__}")
        super().__init__(backend.signer_type)
        self.backend = backend

    @classmethod
    def from_memory(cls, private_key: str) -> "Signer":
        """Create a memory signer from a private key string."""
        return cls(MemorySigner.from_private_key_string(private_key))

    @classmethod
    def from_vault(cls, vault_addr: str, vault_token: str, key_name: str, pubkey: str, **kwargs) -> "Signer":
        return cls(VaultSigner(vault_addr, vault_token, key_name, pubkey, **kwargs))

    @classmethod
    async def from_privy(cls, app_id: str, app_secret: str, wallet_id: str, **kwargs) -> "Signer":
        """Create and initialize a Privy signer.

        Initialization happens exactly once here, so the returned signer is
        ready to sign.
        """
        signer = PrivySigner(app_id, app_secret, wallet_id, **kwargs)
        try:
            await signer.init()
        except Exception:
            await signer.aclose()
            raise
        return cls(signer)

    @classmethod
    def from_turnkey(
        cls,
        api_public_key: str,
        api_private_key: str,
        organization_id: str,
        private_key_id: str,
        public_key: str,
        **kwargs,
    ) -> "Signer":
        return cls(
            TurnkeySigner(
                api_public_key, api_private_key, organization_id, private_key_id, public_key, **kwargs
            )
        )

    def pubkey(self) -> Pubkey:
        return self.backend.pubkey()

    async def sign_message(self, message: bytes) -> Signature:
        return await self.backend.sign_message(message)

    async def sign_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self.backend.sign_transaction(transaction)

    async def sign_partial_transaction(self, transaction: Transaction) -> SignedTransaction:
        return await self.backend.sign_partial_transaction(transaction)

    async def is_available(self) -> bool:
        return await self.backend.is_available()

    @property
    def request_delay_ms(self) -> int:
        return self.backend.request_delay_ms

    async def aclose(self) -> None:
        if isinstance(self.backend, RemoteSigner):
            await self.backend.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def __repr__(self) -> str:
        return f"Signer({self.backend!r})"


@lru_cache(maxsize=1)
def get_signer_type() -> SignerType:
    """Determine which signer to use based on environment.

    Priority:
    1. SIGNER_BACKEND environment variable (explicit)
    2. Turnkey credentials present -> Turnkey
    3. Privy credentials present -> Privy
    4. Vault credentials present -> Vault
    5. Default to Memory

    Returns:
        SignerType enum
    """
    settings = get_settings()
    explicit = settings.signer_backend.strip().lower()

    if explicit:
        try:
            return SignerType(explicit)
        except ValueError as e:
            raise ConfigError(f"Unknown SIGNER_BACKEND: {explicit}") from e

    if settings.has_turnkey:
        return SignerType.TURNKEY
    if settings.has_privy:
        return SignerType.PRIVY
    if settings.has_vault:
        return SignerType.VAULT

    return SignerType.MEMORY


_signer_instance: Optional[Signer] = None
_signer_lock = asyncio.Lock()


async def get_signer() -> Signer:
    """Get the configured signer instance.

    Returns a singleton for the configured signer type. Privy signers are
    initialized before being returned. Concurrent first calls build a
    single signer.

    Raises:
        ConfigError: If the selected backend is missing credentials
    """
    global _signer_instance

    if _signer_instance is not None:
        return _signer_instance

    async with _signer_lock:
        if _signer_instance is None:
            signer_type = get_signer_type()
            logger.info(f"Initializing {signer_type.value} signer")
            _signer_instance = await build_signer(signer_type, get_settings())

    return _signer_instance


async def build_signer(signer_type: SignerType, settings: Settings) -> Signer:
    """Build a signer of the given type from settings."""
    http_options = {
        "timeout": settings.http_timeout,
        "request_delay_ms": settings.request_delay_ms,
        "unsafe_debug": settings.unsafe_debug,
    }

    if signer_type == SignerType.TURNKEY:
        if not settings.has_turnkey or not settings.turnkey_public_key:
            raise ConfigError("Turnkey signer selected but TURNKEY_* settings are incomplete")
        return Signer.from_turnkey(
            settings.turnkey_api_public_key,
            settings.turnkey_api_private_key,
            settings.turnkey_organization_id,
            settings.turnkey_private_key_id,
            settings.turnkey_public_key,
            api_base_url=settings.turnkey_api_base_url,
            **http_options,
        )

    if signer_type == SignerType.PRIVY:
        if not settings.has_privy:
            raise ConfigError("Privy signer selected but PRIVY_* settings are incomplete")
        return await Signer.from_privy(
            settings.privy_app_id,
            settings.privy_app_secret,
            settings.privy_wallet_id,
            api_base_url=settings.privy_api_base_url,
            **http_options,
        )

    if signer_type == SignerType.VAULT:
        if not settings.has_vault or not settings.vault_pubkey:
            raise ConfigError("Vault signer selected but VAULT_* settings are incomplete")
        return Signer.from_vault(
            settings.vault_addr,
            settings.vault_token,
            settings.vault_key_name,
            settings.vault_pubkey,
            **http_options,
        )

    if not settings.solana_private_key:
        raise ConfigError("Memory signer selected but SOLANA_PRIVATE_KEY is not set")
    return Signer.from_memory(settings.solana_private_key)


async def reset_signer() -> None:
    """Reset the signer instance (for testing)."""
    global _signer_instance, _signer_lock
    if _signer_instance is not None:
        await _signer_instance.aclose()
    _signer_instance = None
    _signer_lock = asyncio.Lock()
    get_signer_type.cache_clear()
    get_settings.cache_clear()


async def get_signer_info() -> dict:
    """Get information about the current signer configuration.

    Returns:
        Dict with signer type, public key and health status
    """
    signer = await get_signer()
    healthy = await signer.is_available()

    return {
        "type": signer.signer_type.value,
        "pubkey": str(signer.pubkey()),
        "healthy": healthy,
        "class": signer.backend.__class__.__name__,
    }
