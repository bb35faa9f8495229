# backend/consol_fx/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO transport
knowledge. Callers (the consolidation orchestrator, a CLI, an API layer)
decide how to present them.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── ConfigurationError
    │   ├── ConverterNotConfiguredError
    │   └── UnsupportedMethodError
    ├── FXRateError
    │   └── MissingRateError
    └── ContextError
        ├── OperationCancelledError
        └── DeadlineExceededError

Rate gaps found by the validator are NOT exceptions. They are reported as
Gap records inside a successful RateGapResult.

Errors raised by a QuoteProvider are never wrapped, so callers can tell
"rate store is down" apart from "rates are not published yet".
"""

from collections.abc import Iterable


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when caller input is malformed.

    Examples:
    - No quote provider supplied
    - Missing period
    - Requirement with an empty pair or no methods

    These indicate a caller bug and are never retried.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(ServiceError):
    """
    Base exception for misconfigured engine components.
    """
    pass


class ConverterNotConfiguredError(ConfigurationError):
    """
    Raised when a converter is used without a Policy.

    This is a construction problem, not a data problem: the converter
    never guesses a policy on the caller's behalf.
    """

    def __init__(self) -> None:
        super().__init__("FX converter is not configured: policy required")


class UnsupportedMethodError(ConfigurationError):
    """
    Raised when a conversion method other than AVERAGE or CLOSING is used.

    Attributes:
        method: The rejected method value
        pair: Currency pair the method was requested for (optional)
    """

    def __init__(self, method: object, pair: str | None = None) -> None:
        self.method = method
        self.pair = pair
        message = f"Unsupported FX method {method!r}"
        if pair:
            message += f" for pair {pair}"
        super().__init__(message)


# =============================================================================
# FX RATE ERRORS
# =============================================================================


class FXRateError(ServiceError):
    """
    Base exception for FX rate errors.
    """
    pass


class MissingRateError(FXRateError):
    """
    Raised when a conversion batch needs rates that are not usable.

    Lists EVERY missing pair found across the batch, not only the first.
    No lines are converted when this is raised; the caller enters the
    missing rates and retries the whole batch.

    Attributes:
        pairs: Sorted, de-duplicated missing pairs (e.g. ("EURUSD", "IDRUSD"))
        method: Method whose rate was missing (optional)
    """

    def __init__(self, pairs: Iterable[str], method: str | None = None) -> None:
        self.pairs = tuple(sorted(set(pairs)))
        self.method = method
        message = f"Missing FX rates for: {', '.join(self.pairs)}"
        if method:
            message += f" ({method})"
        super().__init__(message)


# =============================================================================
# CONTEXT ERRORS
# =============================================================================


class ContextError(ServiceError):
    """
    Base exception for calls aborted through a CallContext.
    """
    pass


class OperationCancelledError(ContextError):
    """
    Raised when a caller cancels a running validation.
    """

    def __init__(self, message: str = "Operation cancelled") -> None:
        super().__init__(message)


class DeadlineExceededError(ContextError):
    """
    Raised when a validation runs past its deadline.

    Attributes:
        timeout: Configured timeout in seconds (optional)
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        message = "Deadline exceeded"
        if timeout is not None:
            message += f" after {timeout:g}s"
        super().__init__(message)


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    # Configuration
    "ConfigurationError",
    "ConverterNotConfiguredError",
    "UnsupportedMethodError",
    # FX Rate
    "FXRateError",
    "MissingRateError",
    # Context
    "ContextError",
    "OperationCancelledError",
    "DeadlineExceededError",
]
