"""Production configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from .env file and MARKETLEDGER_* environment variables.

The listing fee and operator identity are fixed when a ledger is first
initialized; a persisted ledger refuses to reopen under different values.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ProdConfig(BaseSettings):
    """Production configuration with environment variable overrides.

    All settings can be overridden via MARKETLEDGER_* environment variables
    or a .env file in the project root.

    Examples
    --------
    Override via environment::

        export MARKETLEDGER_ENVIRONMENT=staging
        export MARKETLEDGER_LOG_LEVEL=DEBUG
        export MARKETLEDGER_LISTING_FEE=25

    Or via .env file::

        MARKETLEDGER_ENVIRONMENT=production
        MARKETLEDGER_OPERATOR=treasury
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MARKETLEDGER_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage
    ledger_path: Path = Path(".marketledger/ledger.db")

    # Marketplace parameters (fixed at initialization)
    listing_fee: int = 1
    operator: str = "operator"
    ledger_address: str = "marketledger"  # custody + escrow identity
    registry_ref: str = "registry-0"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level instance for CLI defaults; import as
# `from marketledger.config import config`
config = ProdConfig()
