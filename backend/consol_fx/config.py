# backend/consol_fx/config.py
"""
Engine configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- LOG_LEVEL / LOG_FORMAT: Logging setup (see consol_fx.utils.logging)
- FX_*: Consolidation FX defaults

The FX settings only supply defaults. A Policy passed explicitly to the
converter always wins over configuration.

Usage:
    from consol_fx.config import settings

    fallback = settings.fx_fallback_reporting_currency
"""
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from consol_fx.services.constants import (
    DEFAULT_BALANCE_SHEET_METHOD,
    DEFAULT_PROFIT_LOSS_METHOD,
    DEFAULT_REPORTING_CURRENCY,
)

# Look for a .env next to the backend/ directory
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    FX Settings:
        - FX_FALLBACK_REPORTING_CURRENCY: Currency used when a Policy has no
          reporting currency (default: "USD")
        - FX_PROFIT_LOSS_METHOD: Default P&L method (default: AVERAGE)
        - FX_BALANCE_SHEET_METHOD: Default balance sheet method (default: CLOSING)
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format"
    )

    # =========================================================================
    # CONSOLIDATION FX
    # =========================================================================
    fx_fallback_reporting_currency: str = Field(
        default=DEFAULT_REPORTING_CURRENCY,
        min_length=3,
        max_length=3,
        description="Reporting currency used when a policy leaves it empty"
    )
    fx_profit_loss_method: Literal["AVERAGE", "CLOSING"] = Field(
        default=DEFAULT_PROFIT_LOSS_METHOD,
        description="Default rate method for profit-and-loss lines"
    )
    fx_balance_sheet_method: Literal["AVERAGE", "CLOSING"] = Field(
        default=DEFAULT_BALANCE_SHEET_METHOD,
        description="Default rate method for balance sheet lines"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("fx_fallback_reporting_currency", mode="before")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Normalize currency: uppercase and strip."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("fx_profit_loss_method", "fx_balance_sheet_method", mode="before")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def validate_fx_config(self) -> "Settings":
        """Warn in production when both statement types share one rate method."""
        if (
                self.environment == "production"
                and self.fx_profit_loss_method == self.fx_balance_sheet_method
        ):
            import warnings
            warnings.warn(
                "FX_PROFIT_LOSS_METHOD and FX_BALANCE_SHEET_METHOD are both "
                f"{self.fx_profit_loss_method}. Both statements will translate at the same rate.",
                UserWarning,
                stacklevel=2,
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
