# backend/consol_fx/services/fx/__init__.py
"""
Consolidation FX package.

This package translates subsidiary statements into the group reporting
currency and checks, before a consolidation run, that every rate it will
need is published.

Usage:
    from consol_fx.services.fx import (
        FXConverter,
        Policy,
        Quote,
        Line,
        Requirement,
        Method,
        validate_rates,
    )

    result = validate_rates(provider, period, requirements)
    if result.ok:
        converter = FXConverter(policy, result.available)
        pl = converter.convert_profit_loss(pl_lines)
        bs = converter.convert_balance_sheet(bs_lines)

Architecture:
    fx/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Value objects and enums
    ├── policy.py                # Policy and method -> rate resolution
    ├── converter.py             # FXConverter (all-or-nothing batches)
    ├── validator.py             # RateGapValidator (pre-flight gaps)
    ├── requirements.py          # Requirements from member currencies
    └── summary.py               # Operator summaries and text report

Data Flow:
    Member currencies -> build_requirements -> Requirements
    Requirements + QuoteProvider -> RateGapValidator -> RateGapResult
    RateGapResult.available + Policy -> FXConverter -> ConversionResult
"""

from consol_fx.services.fx.converter import FXConverter
from consol_fx.services.fx.policy import (
    Policy,
    default_policy,
    is_usable_rate,
    resolve_rate,
)
from consol_fx.services.fx.requirements import (
    build_requirements,
    collect_required_currencies,
    requirements_for_policy,
)
from consol_fx.services.fx.summary import (
    build_validation_summary,
    exit_code_for,
    render_validation_report,
)
from consol_fx.services.fx.types import (
    ConversionResult,
    CurrencyPair,
    Gap,
    Line,
    Method,
    Quote,
    RateGapResult,
    Requirement,
    StatementType,
)
from consol_fx.services.fx.validator import RateGapValidator, validate_rates

__all__ = [
    # Services
    "FXConverter",
    "RateGapValidator",
    "validate_rates",
    # Policy
    "Policy",
    "default_policy",
    "resolve_rate",
    "is_usable_rate",
    # Requirements
    "collect_required_currencies",
    "build_requirements",
    "requirements_for_policy",
    # Summary
    "build_validation_summary",
    "render_validation_report",
    "exit_code_for",
    # Types
    "Method",
    "StatementType",
    "CurrencyPair",
    "Quote",
    "Line",
    "ConversionResult",
    "Requirement",
    "Gap",
    "RateGapResult",
]
