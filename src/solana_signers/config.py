"""Signer configuration using pydantic-settings.

Credentials for every backend can be supplied through environment variables
or a ``.env`` file. Only the backend selected by ``SIGNER_BACKEND`` (or
auto-detected from the credentials present) is constructed.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRIVY_API_BASE_URL = "https://api.privy.io/v1"
DEFAULT_TURNKEY_API_BASE_URL = "https://api.turnkey.com"


class Settings(BaseSettings):
    """Signer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Backend selection
    # ======================
    signer_backend: str = Field(
        default="", description="memory, vault, privy or turnkey (empty = auto-detect)"
    )

    # ======================
    # Memory
    # ======================
    solana_private_key: Optional[str] = Field(
        default=None, description="Base58 keypair, byte array string or keypair file path"
    )

    # ======================
    # HashiCorp Vault
    # ======================
    vault_addr: Optional[str] = Field(default=None, description="Vault server address")
    vault_token: Optional[str] = Field(default=None, description="Vault token")
    vault_key_name: Optional[str] = Field(default=None, description="Transit key name")
    vault_pubkey: Optional[str] = Field(default=None, description="Base58 Solana public key")

    # ======================
    # Privy
    # ======================
    privy_app_id: Optional[str] = Field(default=None, description="Privy application ID")
    privy_app_secret: Optional[str] = Field(default=None, description="Privy application secret")
    privy_wallet_id: Optional[str] = Field(default=None, description="Privy wallet ID")
    privy_api_base_url: str = Field(
        default=DEFAULT_PRIVY_API_BASE_URL, description="Privy API base URL"
    )

    # ======================
    # Turnkey
    # ======================
    turnkey_api_public_key: Optional[str] = Field(
        default=None, description="Turnkey API public key (hex, compressed P-256)"
    )
    turnkey_api_private_key: Optional[str] = Field(
        default=None, description="Turnkey API private key (hex)"
    )
    turnkey_organization_id: Optional[str] = Field(default=None, description="Turnkey organization ID")
    turnkey_private_key_id: Optional[str] = Field(default=None, description="Turnkey private key ID")
    turnkey_public_key: Optional[str] = Field(default=None, description="Base58 Solana public key")
    turnkey_api_base_url: str = Field(
        default=DEFAULT_TURNKEY_API_BASE_URL, description="Turnkey API base URL"
    )

    # ======================
    # HTTP
    # ======================
    http_timeout: float = Field(default=30.0, description="Remote API timeout in seconds")
    request_delay_ms: int = Field(
        default=0, description="Spacing between batched remote signing requests"
    )
    unsafe_debug: bool = Field(
        default=False, description="Log remote API error bodies (may contain sensitive data)"
    )

    @property
    def has_vault(self) -> bool:
        return bool(self.vault_addr and self.vault_token and self.vault_key_name)

    @property
    def has_privy(self) -> bool:
        return bool(self.privy_app_id and self.privy_app_secret and self.privy_wallet_id)

    @property
    def has_turnkey(self) -> bool:
        return bool(
            self.turnkey_api_public_key
            and self.turnkey_api_private_key
            and self.turnkey_organization_id
            and self.turnkey_private_key_id
        )

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""

        def _secret(value: Optional[str]) -> str:
            return "***" if value else "(not set)"

        return {
            "signer_backend": self.signer_backend or "(auto)",
            "memory": {"private_key": _secret(self.solana_private_key)},
            "vault": {
                "addr": self.vault_addr or "(not set)",
                "token": _secret(self.vault_token),
                "key_name": self.vault_key_name or "(not set)",
                "pubkey": self.vault_pubkey or "(not set)",
            },
            "privy": {
                "api_base_url": self.privy_api_base_url,
                "app_id": self.privy_app_id or "(not set)",
                "app_secret": _secret(self.privy_app_secret),
                "wallet_id": self.privy_wallet_id or "(not set)",
            },
            "turnkey": {
                "api_base_url": self.turnkey_api_base_url,
                "api_public_key": self.turnkey_api_public_key or "(not set)",
                "api_private_key": _secret(self.turnkey_api_private_key),
                "organization_id": self.turnkey_organization_id or "(not set)",
                "private_key_id": self.turnkey_private_key_id or "(not set)",
                "public_key": self.turnkey_public_key or "(not set)",
            },
            "http": {
                "timeout": self.http_timeout,
                "request_delay_ms": self.request_delay_ms,
                "unsafe_debug": self.unsafe_debug,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
