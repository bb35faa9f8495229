# backend/consol_fx/utils/__init__.py
"""
Utility modules for the consolidation FX engine.

This package contains cross-cutting utilities:
- context: Correlation IDs and CallContext (cancellation / deadlines)
- logging: Logging configuration with correlation ID support
- date_utils: Period normalisation helpers

Usage:
    from consol_fx.utils import setup_logging
    from consol_fx.utils import CallContext, set_correlation_id
    from consol_fx.utils.date_utils import month_start
"""

from consol_fx.utils.context import (
    CallContext,
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from consol_fx.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "CallContext",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
