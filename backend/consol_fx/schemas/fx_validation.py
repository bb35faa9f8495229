# backend/consol_fx/schemas/fx_validation.py
"""
Pydantic schemas for FX validation summaries.

These schemas are the serialisable form of a RateGapResult, shaped for
operators: one row per missing (pair, method), one row per usable
(pair, method). They are produced by
consol_fx.services.fx.summary.build_validation_summary().
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ROW SCHEMAS
# =============================================================================

class FXValidationGapRow(BaseModel):
    """A single missing (pair, method) for a period."""

    pair: str = Field(..., description="Currency pair code (e.g., IDRUSD)")
    period: str = Field(..., pattern=r"^\d{4}-\d{2}$", description="Period (YYYY-MM)")
    method: str = Field(..., description="Missing method (AVERAGE or CLOSING)")

    model_config = ConfigDict(frozen=True)

    @field_validator("pair", "method")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Normalize codes: uppercase and strip."""
        return v.strip().upper()


class FXAvailabilityRow(BaseModel):
    """A single usable (pair, method) for a period."""

    pair: str = Field(..., description="Currency pair code (e.g., IDRUSD)")
    period: str = Field(..., pattern=r"^\d{4}-\d{2}$", description="Period (YYYY-MM)")
    method: str = Field(..., description="Usable method (AVERAGE or CLOSING)")

    model_config = ConfigDict(frozen=True)

    @field_validator("pair", "method")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Normalize codes: uppercase and strip."""
        return v.strip().upper()


# =============================================================================
# SUMMARY SCHEMA
# =============================================================================

class FXValidationSummary(BaseModel):
    """Outcome of a pre-flight FX validation run."""

    ok: bool = Field(..., description="True when no rate is missing")
    period: str = Field(..., pattern=r"^\d{4}-\d{2}$", description="Validated period (YYYY-MM)")
    checked: int = Field(..., ge=0, description="Distinct pairs queried")
    gaps: list[FXValidationGapRow] = Field(default_factory=list)
    available_quotes: list[FXAvailabilityRow] = Field(default_factory=list)
