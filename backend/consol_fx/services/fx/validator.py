# backend/consol_fx/services/fx/validator.py
"""
Pre-flight validation of FX rates for a consolidation run.

Before starting a run, the orchestrator declares which conversion methods
each currency pair needs. The validator asks the rate store once per
distinct pair and reports exactly which (pair, method) combinations are
unusable for the period, without converting anything.

Rules:
- Input is validated up front; a malformed request touches no provider
- The period is normalised to the first day of its month, UTC
- Requirements naming the same pair are merged (union of methods)
- Pairs are evaluated in sorted order, one provider call each
- A provider error aborts the run and propagates unchanged
- No quote for a pair -> Gap listing every required method
- A quote -> stored in ``available``; each required method whose rate is
  not strictly positive becomes part of the pair's Gap

Gaps are findings, not errors: a run with gaps returns normally and the
orchestrator refuses to start consolidation until they are resolved.

Usage:
    result = validate_rates(provider, date(2025, 8, 7), [
        Requirement("IDRUSD", (Method.AVERAGE, Method.CLOSING)),
    ])
    if not result.ok:
        show_gaps(result.gaps)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING

from consol_fx.services.exceptions import ValidationError
from consol_fx.services.fx.policy import is_usable_rate, resolve_rate
from consol_fx.services.fx.types import (
    Gap,
    Method,
    Quote,
    RateGapResult,
    Requirement,
    normalize_pair,
    sort_methods,
)
from consol_fx.utils.date_utils import month_start, period_label

if TYPE_CHECKING:
    from consol_fx.services.protocols import QuoteProvider
    from consol_fx.utils.context import CallContext

logger = logging.getLogger(__name__)


class RateGapValidator:
    """
    Reports missing FX rates per (pair, method) for a period.

    Stateless: every call allocates a fresh RateGapResult and never
    mutates the caller's requirements or provider.
    """

    def validate(
            self,
            provider: QuoteProvider | None,
            as_of: date | datetime | None,
            requirements: Iterable[Requirement],
            ctx: CallContext | None = None,
    ) -> RateGapResult:
        """
        Validate that every required method has a usable rate.

        Args:
            provider: Rate store lookup (quote_for_period)
            as_of: Any date inside the period to validate
            requirements: Pairs and the methods they need
            ctx: Optional cancellation / deadline handle, checked before
                 each provider call

        Returns:
            RateGapResult with gaps, available quotes and checked count

        Raises:
            ValidationError: Missing provider or period, malformed requirement
            UnsupportedMethodError: Requirement names an unknown method
            OperationCancelledError / DeadlineExceededError: ctx is done
            Exception: Whatever the provider raises, unchanged
        """
        if provider is None:
            raise ValidationError("FX quote provider required", field="provider")
        if as_of is None:
            raise ValidationError("FX validation period is required", field="as_of")

        required = self._merge_requirements(requirements)
        period = month_start(as_of)
        result = RateGapResult(period=period)

        if not required:
            logger.debug(f"No FX requirements for {period_label(period)}, nothing to check")
            return result

        for pair in sorted(required):
            if ctx is not None:
                ctx.check()

            methods = required[pair]
            try:
                quote = provider.quote_for_period(period, pair)
            except Exception:
                logger.error(
                    f"Quote provider failed for {pair} at {period_label(period)}",
                    exc_info=True,
                )
                raise
            result.checked += 1

            if quote is None:
                logger.debug(f"{pair}: no quote for {period_label(period)}")
                result.gaps.append(Gap(pair=pair, methods=sort_methods(methods)))
                continue

            result.available[pair] = quote
            missing = self._missing_methods(quote, methods)
            if missing:
                result.gaps.append(Gap(pair=pair, methods=missing))

        if result.gaps:
            logger.warning(
                f"FX validation found {len(result.gaps)} gap(s) for {period_label(period)}: "
                + "; ".join(
                    f"{gap.pair} missing {', '.join(m.value for m in gap.methods)}"
                    for gap in result.gaps
                )
            )
        else:
            logger.info(
                f"FX validation passed for {period_label(period)}: "
                f"{result.checked} pair(s) checked"
            )
        return result

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    @staticmethod
    def _merge_requirements(requirements: Iterable[Requirement]) -> dict[str, set[Method]]:
        """
        Group requirements by normalised pair, unioning their methods.

        Raises:
            ValidationError: Empty pair or no methods
            UnsupportedMethodError: Method outside AVERAGE / CLOSING
        """
        merged: dict[str, set[Method]] = {}
        for requirement in requirements:
            pair = normalize_pair(requirement.pair)
            if not pair:
                raise ValidationError("FX requirement pair required", field="pair")
            if not requirement.methods:
                raise ValidationError(f"FX methods required for pair {pair}", field="methods")

            methods = merged.setdefault(pair, set())
            for method in requirement.methods:
                methods.add(Method.parse(method, pair=pair))
        return merged

    @staticmethod
    def _missing_methods(quote: Quote, required: set[Method]) -> tuple[Method, ...]:
        """Required methods whose rate on ``quote`` is not usable."""
        return sort_methods(
            method for method in required
            if not is_usable_rate(resolve_rate(quote, method))
        )


def validate_rates(
        provider: QuoteProvider | None,
        as_of: date | datetime | None,
        requirements: Iterable[Requirement],
        ctx: CallContext | None = None,
) -> RateGapResult:
    """Module-level shortcut for RateGapValidator().validate()."""
    return RateGapValidator().validate(provider, as_of, requirements, ctx=ctx)
