# backend/consol_fx/schemas/__init__.py
"""
Pydantic schemas for serialisable engine output.

Usage:
    from consol_fx.schemas import FXValidationSummary
"""

from consol_fx.schemas.fx_validation import (
    FXAvailabilityRow,
    FXValidationGapRow,
    FXValidationSummary,
)

__all__ = [
    "FXAvailabilityRow",
    "FXValidationGapRow",
    "FXValidationSummary",
]
