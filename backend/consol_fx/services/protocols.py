# backend/consol_fx/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- Rate stores satisfy the protocol without inheriting from it
- Test stubs work without explicit inheritance
- The engine never imports a persistence layer
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from consol_fx.services.fx.types import Quote


@runtime_checkable
class QuoteProvider(Protocol):
    """
    Interface required by the rate-gap validator.

    Implemented by the rate persistence layer, which resolves a currency
    pair's average and closing rates as published for a period.

    Contract:
        - ``period`` is always the first day of a month, midnight UTC
        - ``pair`` is an uppercase concatenation such as "IDRUSD"
        - Return None when nothing is stored for the pair and period
        - Raise on infrastructure failure; the validator propagates it
    """

    def quote_for_period(self, period: datetime, pair: str) -> Quote | None:
        ...
