"""
LedgerCalc - Configuration Settings

This module handles engine configuration using Pydantic Settings.
Environment variables (prefix LEDGERCALC_) are loaded from .env file.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledgercalc.schemas.decimal_profile import DecimalProfile


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGERCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===========================================
    # APPLICATION CONFIGURATION
    # ===========================================
    app_name: str = "LedgerCalc"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ===========================================
    # COMPANY DECIMAL DEFAULTS
    # ===========================================
    amount_decimals: int = Field(default=2, ge=0)
    local_amount_decimals: int = Field(default=2, ge=0)
    country_amount_decimals: int = Field(default=2, ge=0)
    exchange_rate_decimals: int = Field(default=6, ge=0)

    # Third reporting currency (company-level flag)
    country_currency_enabled: bool = False

    @property
    def decimal_profile(self) -> DecimalProfile:
        """Build the default decimal profile from the configured decimals."""
        return DecimalProfile(
            amount_decimals=self.amount_decimals,
            local_amount_decimals=self.local_amount_decimals,
            country_amount_decimals=self.country_amount_decimals,
            exchange_rate_decimals=self.exchange_rate_decimals,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reading .env file on every call.
    """
    return Settings()


def configure_logging(config: Optional[Settings] = None) -> None:
    """Configure root logging for processes embedding the engine."""
    config = config or get_settings()
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


# Export settings instance
settings = get_settings()
