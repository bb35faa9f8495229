# backend/consol_fx/services/fx/converter.py
"""
FX converter for consolidated statements.

Translates a batch of subsidiary lines into the group reporting currency
and computes the net translation delta (the amount the posting layer books
to the cumulative translation adjustment).

All-or-nothing guarantee:
    Conversion runs in two passes.

    1. Resolve a rate for every line and collect EVERY missing pair.
    2. Only if nothing is missing, compute the converted lines.

    A batch with any missing rate raises MissingRateError and yields no
    converted lines, so partially translated statements never reach the
    consolidation.

Usage:
    converter = FXConverter(
        Policy(reporting_currency="USD"),
        quotes={"IDRUSD": Quote(average=Decimal("0.00007"), closing=Decimal("0.000065"))},
    )
    result = converter.convert_profit_loss(lines)
    cta += result.delta
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from decimal import Decimal

from consol_fx.services.constants import PARITY_RATE, ZERO
from consol_fx.services.exceptions import ConverterNotConfiguredError, MissingRateError
from consol_fx.services.fx.policy import Policy, is_usable_rate, resolve_rate
from consol_fx.services.fx.types import (
    ConversionResult,
    CurrencyPair,
    Line,
    Method,
    Quote,
    StatementType,
    normalize_currency,
    normalize_pair,
)

logger = logging.getLogger(__name__)


def _configured_fallback_currency() -> str:
    # Imported lazily: config depends on services.constants
    from consol_fx.config import settings
    return settings.fx_fallback_reporting_currency


class FXConverter:
    """
    Applies an FX Policy to batches of statement lines.

    Stateless between calls: the policy and quote mapping are fixed at
    construction and never modified, so one converter can serve several
    threads with independent inputs.

    Attributes:
        policy: Conversion policy (None makes every call fail)
        quotes: Quote per normalised pair code
    """

    def __init__(
            self,
            policy: Policy | None,
            quotes: Mapping[CurrencyPair | str, Quote] | None = None,
            fallback_currency: str | None = None,
    ) -> None:
        """
        Initialize the converter.

        Args:
            policy: Conversion policy. Required for conversion; a converter
                    built without one raises ConverterNotConfiguredError.
            quotes: Quotes keyed by pair ("IDRUSD" or CurrencyPair). Copied;
                    the caller's mapping is never touched.
            fallback_currency: Reporting currency used when the policy has
                               none. Defaults to
                               settings.fx_fallback_reporting_currency.
        """
        self.policy = policy
        self.quotes: dict[str, Quote] = {
            normalize_pair(pair): quote for pair, quote in (quotes or {}).items()
        }
        self._fallback_currency = normalize_currency(fallback_currency) or None

    # =========================================================================
    # PUBLIC METHODS
    # =========================================================================

    def convert_profit_loss(self, lines: Iterable[Line]) -> ConversionResult:
        """Convert P&L lines at the policy's profit-and-loss method."""
        return self.convert(StatementType.PROFIT_LOSS, lines)

    def convert_balance_sheet(self, lines: Iterable[Line]) -> ConversionResult:
        """Convert balance sheet lines at the policy's balance sheet method."""
        return self.convert(StatementType.BALANCE_SHEET, lines)

    def convert(self, statement: StatementType, lines: Iterable[Line]) -> ConversionResult:
        """
        Convert a batch of lines for one statement type.

        Args:
            statement: Statement type selecting the policy method
            lines: Lines to translate

        Returns:
            ConversionResult with every line converted and the total delta

        Raises:
            ConverterNotConfiguredError: If the converter has no policy
            MissingRateError: If any line lacks a usable rate (lists all
                              missing pairs; nothing is converted)
        """
        if self.policy is None:
            raise ConverterNotConfiguredError()

        method = self.policy.method_for(statement)
        target = self.reporting_currency
        batch = list(lines)

        result = ConversionResult(
            statement=statement,
            method=method,
            reporting_currency=target,
        )
        if not batch:
            return result

        # Pass 1: resolve every rate, collect every gap
        rates = self._resolve_rates(batch, target, method)

        # Pass 2: nothing missing, translate the whole batch
        delta = ZERO
        converted: list[Line] = []
        for line, rate in zip(batch, rates):
            new_amount = line.local_amount * rate
            delta += new_amount - line.group_amount
            converted.append(replace(line, group_amount=new_amount))

        result.lines = converted
        result.delta = delta

        logger.info(
            f"Converted {len(converted)} {statement.value} line(s) to {target} "
            f"at {method.value}: delta={delta}"
        )
        return result

    @property
    def reporting_currency(self) -> str:
        """Target currency: the policy's, else the configured fallback."""
        if self.policy is None:
            raise ConverterNotConfiguredError()
        if self.policy.reporting_currency:
            return self.policy.reporting_currency
        fallback = self._fallback_currency or _configured_fallback_currency()
        logger.warning(f"Policy has no reporting currency, falling back to {fallback}")
        return fallback

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    def _resolve_rates(self, batch: list[Line], target: str, method: Method) -> list[Decimal]:
        """
        Resolve one rate per line.

        Raises:
            MissingRateError: With every missing pair in the batch
        """
        rates: list[Decimal] = []
        missing: set[str] = set()

        for line in batch:
            local = normalize_currency(line.local_currency) or target
            if local == target:
                rates.append(PARITY_RATE)
                continue

            pair = CurrencyPair(base=local, quote=target).code
            quote = self.quotes.get(pair)
            rate = resolve_rate(quote, method) if quote is not None else ZERO
            if not is_usable_rate(rate):
                missing.add(pair)
                continue

            logger.debug(f"{line.account_code}: {pair} {method.value} rate {rate}")
            rates.append(rate)

        if missing:
            error = MissingRateError(missing, method=method.value)
            logger.warning(f"Conversion blocked: {error}")
            raise error

        return rates
