# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Stub quote provider (records calls, simulates failures)
- Policies and periods used across converter / validator tests
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime
from decimal import Decimal

import pytest

from consol_fx.services.fx import Method, Policy, Quote


# =============================================================================
# STUB QUOTE PROVIDER
# =============================================================================

class StubQuoteProvider:
    """
    In-memory implementation of the QuoteProvider protocol for testing.

    Allows configuring quotes per pair and simulating errors.
    """

    def __init__(self, quotes: dict[str, Quote] | None = None):
        self._quotes: dict[str, Quote] = dict(quotes or {})
        self._errors: dict[str, Exception] = {}
        self._error: Exception | None = None
        self.calls: list[tuple[datetime, str]] = []
        self.on_call = None

    def add_quote(self, pair: str, average, closing) -> None:
        """Configure a quote for a pair."""
        self._quotes[pair.upper()] = Quote(average=average, closing=closing)

    def add_error(self, pair: str, error: Exception) -> None:
        """Fail lookups for one pair."""
        self._errors[pair.upper()] = error

    def fail_all(self, error: Exception) -> None:
        """Fail every lookup."""
        self._error = error

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def pairs_requested(self) -> list[str]:
        return [pair for _, pair in self.calls]

    def quote_for_period(self, period: datetime, pair: str) -> Quote | None:
        self.calls.append((period, pair))
        if self.on_call is not None:
            self.on_call(pair)
        if self._error is not None:
            raise self._error
        if pair in self._errors:
            raise self._errors[pair]
        return self._quotes.get(pair)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def provider() -> StubQuoteProvider:
    """Empty stub provider; tests add quotes as needed."""
    return StubQuoteProvider()


@pytest.fixture
def usd_policy() -> Policy:
    """USD reporting, P&L at AVERAGE, balance sheet at CLOSING."""
    return Policy(
        reporting_currency="USD",
        profit_loss_method=Method.AVERAGE,
        balance_sheet_method=Method.CLOSING,
    )


@pytest.fixture
def idr_quote() -> Quote:
    """IDR -> USD quote for August 2025."""
    return Quote(average=Decimal("0.00007"), closing=Decimal("0.000065"))


@pytest.fixture
def period() -> date:
    """A date in the middle of August 2025."""
    return date(2025, 8, 7)


@pytest.fixture
def make_provider():
    """Factory for independent stub providers sharing a quote map."""
    def _make(quotes: dict[str, Quote] | None = None) -> StubQuoteProvider:
        return StubQuoteProvider(quotes)
    return _make
