"""Application configuration using pydantic-settings.

Everything that varies per deployment (database, RPC overrides, the set of
supported chains, timeouts) is read from environment variables or `.env`.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Database
    # ======================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/movebridge.db",
        description="Database connection URL",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Chains and RPC
    # ======================
    supported_chain_ids: str = Field(
        default="8453", description="Comma-separated list of chain IDs queried by default"
    )
    rpc_url: str = Field(
        default="", description="RPC endpoint override used for every chain (empty = registry default)"
    )
    rpc_timeout_seconds: float = Field(
        default=10.0, description="Timeout for each outbound RPC request"
    )

    # ======================
    # Token contract overrides
    # ======================
    usdc_address: str = Field(default="", description="USDC contract override (empty = registry)")
    usdt_address: str = Field(default="", description="USDT contract override (empty = registry)")

    # ======================
    # Ledger
    # ======================
    ledger_timeout_seconds: float = Field(
        default=0.8, description="Upper bound for a single ledger read"
    )

    @property
    def chain_ids(self) -> list[int]:
        """Parse supported chain IDs into a list of integers."""
        if not self.supported_chain_ids:
            return []
        return [int(cid.strip()) for cid in self.supported_chain_ids.split(",") if cid.strip()]

    @property
    def token_address_overrides(self) -> dict[str, str]:
        """Per-token contract overrides, keyed by symbol. Empty values are dropped."""
        overrides = {
            "USDC": self.usdc_address.strip(),
            "USDT": self.usdt_address.strip(),
        }
        return {symbol: address for symbol, address in overrides.items() if address}

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "database_url": self._redact_url(self.database_url),
            "chains": {
                "supported": self.chain_ids,
                "rpc_override": self._redact_url(self.rpc_url) if self.rpc_url else "(not set)",
                "rpc_timeout_seconds": self.rpc_timeout_seconds,
            },
            "token_overrides": self.token_address_overrides or "(none)",
            "ledger_timeout_seconds": self.ledger_timeout_seconds,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact credentials embedded in a URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
