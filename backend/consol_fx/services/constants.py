# backend/consol_fx/services/constants.py
"""
Centralized constants for the consolidation FX engine.

This module is the single source of truth for the defaults the converter
and validator fall back on. Configuration (consol_fx.config) reads its
defaults from here, so overriding an environment variable never requires
touching the services.

Usage:
    from consol_fx.services.constants import (
        DEFAULT_REPORTING_CURRENCY,
        GAP_EXIT_CODE,
    )
"""

from decimal import Decimal


# =============================================================================
# REPORTING CURRENCY
# =============================================================================

# Reporting currency assumed when a Policy leaves it empty.
# Kept for compatibility with existing group setups; an empty reporting
# currency may become a hard configuration error (see DESIGN.md).
DEFAULT_REPORTING_CURRENCY: str = "USD"


# =============================================================================
# RATE METHODS
# =============================================================================

# Profit-and-loss lines translate at the period average rate
DEFAULT_PROFIT_LOSS_METHOD: str = "AVERAGE"

# Balance sheet lines translate at the period closing rate
DEFAULT_BALANCE_SHEET_METHOD: str = "CLOSING"


# =============================================================================
# CONVERSION
# =============================================================================

# Rate applied when local currency equals the reporting currency
PARITY_RATE: Decimal = Decimal("1")

# Zero amount used for deltas and empty batches
ZERO: Decimal = Decimal("0")


# =============================================================================
# OPERATOR REPORTING
# =============================================================================

# Period label format used in summaries ("2025-08")
PERIOD_LABEL_FORMAT: str = "%Y-%m"

# Exit code for shell wrappers when validation finds gaps
GAP_EXIT_CODE: int = 10
