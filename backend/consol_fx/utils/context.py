# backend/consol_fx/utils/context.py
"""
Call context management for the consolidation FX engine.

This module provides:
- Correlation ID storage (contextvars) so every log line emitted during a
  consolidation run can be traced back to it
- CallContext, a cancellation/deadline handle the validator checks before
  each rate-store lookup

contextvars storage is async-safe and propagates through async/await calls.
CallContext is thread-safe: one thread may cancel while another validates.

Usage:
    from consol_fx.utils.context import CallContext, set_correlation_id

    set_correlation_id("consol-2025-08-group-7")

    ctx = CallContext.with_timeout(5.0)
    result = validate_rates(provider, period, requirements, ctx=ctx)
"""

from __future__ import annotations

import threading
import time
from contextvars import ContextVar

from consol_fx.services.exceptions import DeadlineExceededError, OperationCancelledError

# =============================================================================
# CONTEXT VARIABLES
# =============================================================================

# Correlation ID for run tracing
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """
    Get the current run's correlation ID.

    Returns:
        The correlation ID for the current run, or None if not set.
    """
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current run.

    Args:
        correlation_id: Unique identifier for this run
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID."""
    _correlation_id_var.set(None)


# =============================================================================
# CANCELLATION
# =============================================================================

class CallContext:
    """
    Cancellation and deadline handle for a single engine call.

    The validator calls check() before every provider lookup and aborts
    the remaining lookups as soon as the context is done.

    Attributes:
        timeout: Seconds allowed from construction (None = no deadline)

    Example:
        ctx = CallContext()
        worker = threading.Thread(target=run_validation, args=(ctx,))
        worker.start()
        ctx.cancel()   # remaining provider calls are skipped
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("timeout cannot be negative")
        self.timeout = timeout
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @classmethod
    def with_timeout(cls, seconds: float) -> CallContext:
        """Create a context that expires ``seconds`` from now."""
        return cls(timeout=seconds)

    def cancel(self) -> None:
        """Cancel the context. Safe to call from any thread, more than once."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def time_remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """
        Raise if the context is done.

        Raises:
            OperationCancelledError: If cancel() was called
            DeadlineExceededError: If the deadline has passed
        """
        if self.cancelled:
            raise OperationCancelledError()
        if self.expired:
            raise DeadlineExceededError(self.timeout)
