# backend/consol_fx/services/fx/policy.py
"""
FX conversion policy for consolidated reports.

A Policy states the group reporting currency and which rate method each
statement type translates at:

    Profit and loss  -> AVERAGE (default)
    Balance sheet    -> CLOSING (default)

Resolving a method to a rate means picking Quote.average for AVERAGE and
Quote.closing for CLOSING. There is no third option.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from consol_fx.services.constants import (
    DEFAULT_BALANCE_SHEET_METHOD,
    DEFAULT_PROFIT_LOSS_METHOD,
)
from consol_fx.services.exceptions import UnsupportedMethodError
from consol_fx.services.fx.types import (
    Method,
    Quote,
    StatementType,
    normalize_currency,
    sort_methods,
)

if TYPE_CHECKING:
    from consol_fx.config import Settings


@dataclass(frozen=True)
class Policy:
    """
    Currency conversion policy.

    Attributes:
        reporting_currency: ISO code of the group currency (case-insensitive;
                            "" lets the converter apply its fallback)
        profit_loss_method: Method for P&L lines (None -> AVERAGE)
        balance_sheet_method: Method for balance sheet lines (None -> CLOSING)

    Raises:
        UnsupportedMethodError: If either method is not AVERAGE or CLOSING
    """

    reporting_currency: str = ""
    profit_loss_method: Method | None = None
    balance_sheet_method: Method | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "reporting_currency", normalize_currency(self.reporting_currency))
        object.__setattr__(
            self,
            "profit_loss_method",
            Method.parse(self.profit_loss_method or DEFAULT_PROFIT_LOSS_METHOD),
        )
        object.__setattr__(
            self,
            "balance_sheet_method",
            Method.parse(self.balance_sheet_method or DEFAULT_BALANCE_SHEET_METHOD),
        )

    def method_for(self, statement: StatementType) -> Method:
        """Return the method configured for a statement type."""
        if statement == StatementType.PROFIT_LOSS:
            return self.profit_loss_method
        if statement == StatementType.BALANCE_SHEET:
            return self.balance_sheet_method
        raise ValueError(f"Unknown statement type: {statement!r}")

    @property
    def required_methods(self) -> tuple[Method, ...]:
        """Methods needed to convert both statements under this policy."""
        return sort_methods((self.profit_loss_method, self.balance_sheet_method))

    @classmethod
    def from_settings(cls, settings: Settings, reporting_currency: str = "") -> Policy:
        """
        Build a policy from configuration.

        Args:
            settings: Loaded Settings instance
            reporting_currency: Group currency; empty leaves the fallback
                                to the converter
        """
        return cls(
            reporting_currency=reporting_currency,
            profit_loss_method=Method.parse(settings.fx_profit_loss_method),
            balance_sheet_method=Method.parse(settings.fx_balance_sheet_method),
        )


def default_policy(reporting_currency: str = "") -> Policy:
    """Baseline policy: P&L at AVERAGE, balance sheet at CLOSING."""
    return Policy(
        reporting_currency=reporting_currency,
        profit_loss_method=Method.AVERAGE,
        balance_sheet_method=Method.CLOSING,
    )


def resolve_rate(quote: Quote, method: Method | str) -> Decimal:
    """
    Select the rate a method translates at.

    The returned rate may be zero or negative; callers decide whether it
    is usable (see is_usable_rate).

    Raises:
        UnsupportedMethodError: For any method other than AVERAGE / CLOSING
    """
    method = Method.parse(method)
    if method is Method.AVERAGE:
        return quote.average
    if method is Method.CLOSING:
        return quote.closing
    raise UnsupportedMethodError(method)


def is_usable_rate(rate: Decimal) -> bool:
    """A rate is usable only if finite and strictly positive."""
    return rate.is_finite() and rate > 0
