# backend/consol_fx/services/__init__.py
"""
Service layer for consolidation FX.

Services:
- Have NO transport knowledge (no HTTP, no CLI formatting)
- Raise domain-specific exceptions
- Receive collaborators (quote providers, quotes) as parameters
- Are easily testable via dependency injection

Usage:
    from consol_fx.services import FXConverter, RateGapValidator
    from consol_fx.services import MissingRateError, ValidationError

Architecture:
    services/
    ├── __init__.py                  # This file - main exports
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Named defaults
    ├── protocols.py                 # QuoteProvider interface
    └── fx/                          # Conversion and rate-gap validation
"""

# Exceptions and constants first: config and utils import them directly
from consol_fx.services.exceptions import (
    ServiceError,
    ValidationError,
    ConfigurationError,
    ConverterNotConfiguredError,
    UnsupportedMethodError,
    FXRateError,
    MissingRateError,
    ContextError,
    OperationCancelledError,
    DeadlineExceededError,
)
from consol_fx.services import constants
from consol_fx.services.protocols import QuoteProvider
from consol_fx.services.fx import (
    FXConverter,
    RateGapValidator,
    validate_rates,
    Policy,
    ConversionResult,
    RateGapResult,
)

__all__ = [
    # ==========================================================================
    # Services
    # ==========================================================================
    "FXConverter",
    "RateGapValidator",
    "validate_rates",
    "Policy",
    "ConversionResult",
    "RateGapResult",
    "QuoteProvider",
    "constants",

    # ==========================================================================
    # Exceptions
    # ==========================================================================
    "ServiceError",
    "ValidationError",
    "ConfigurationError",
    "ConverterNotConfiguredError",
    "UnsupportedMethodError",
    "FXRateError",
    "MissingRateError",
    "ContextError",
    "OperationCancelledError",
    "DeadlineExceededError",
]
