# backend/consol_fx/services/fx/summary.py
"""
Operator-facing views of a validation result.

- build_validation_summary(): flat, sorted rows for JSON output
- render_validation_report(): plain-text report for terminals and logs
- exit_code_for(): 0 when clean, GAP_EXIT_CODE when gaps exist
"""

from __future__ import annotations

from collections.abc import Iterable

from consol_fx.schemas.fx_validation import (
    FXAvailabilityRow,
    FXValidationGapRow,
    FXValidationSummary,
)
from consol_fx.services.constants import GAP_EXIT_CODE
from consol_fx.services.fx.policy import is_usable_rate, resolve_rate
from consol_fx.services.fx.types import Method, Quote, RateGapResult, normalize_pair
from consol_fx.utils.date_utils import period_label


def usable_methods(quote: Quote) -> list[Method]:
    """Methods with a strictly positive rate on ``quote``, in name order."""
    return [method for method in Method if is_usable_rate(resolve_rate(quote, method))]


def build_validation_summary(result: RateGapResult) -> FXValidationSummary:
    """
    Flatten a RateGapResult into one row per (pair, method).

    Gap rows and availability rows are both sorted by pair, then method.
    """
    period = period_label(result.period)

    gaps = sorted(
        (
            FXValidationGapRow(pair=gap.pair, period=period, method=method.value)
            for gap in result.gaps
            for method in gap.methods
        ),
        key=lambda row: (row.pair, row.method),
    )
    available = sorted(
        (
            FXAvailabilityRow(pair=pair, period=period, method=method.value)
            for pair, quote in result.available.items()
            for method in usable_methods(quote)
        ),
        key=lambda row: (row.pair, row.method),
    )

    return FXValidationSummary(
        ok=not gaps,
        period=period,
        checked=result.checked,
        gaps=gaps,
        available_quotes=available,
    )


def render_validation_report(
        result: RateGapResult,
        reporting_currency: str | None = None,
        requested_pairs: Iterable[str] | None = None,
) -> str:
    """
    Render a validation result as human-readable text.

    Example output:
        FX validation (USD) for period 2025-08
        1 gap(s) detected:
         - IDRUSD missing AVERAGE
        Checked pairs:
         - IDRUSD (CLOSING)
         - JPYUSD (AVERAGE, CLOSING)
    """
    period = period_label(result.period)
    header = "FX validation"
    if reporting_currency:
        header += f" ({reporting_currency.strip().upper()})"
    lines = [f"{header} for period {period}"]

    if result.ok:
        lines.append("All required FX rates are present.")
    else:
        lines.append(f"{len(result.gaps)} gap(s) detected:")
        for gap in result.gaps:
            missing = ", ".join(method.value for method in gap.methods)
            lines.append(f" - {gap.pair} missing {missing}")

    checked_pairs = sorted(set(result.available) | {gap.pair for gap in result.gaps})
    if checked_pairs:
        lines.append("Checked pairs:")
        for pair in checked_pairs:
            quote = result.available.get(pair)
            if quote is None:
                lines.append(f" - {pair} (missing)")
                continue
            methods = usable_methods(quote)
            status = ", ".join(method.value for method in methods) if methods else "no usable rates"
            lines.append(f" - {pair} ({status})")

    requested = [normalize_pair(pair) for pair in requested_pairs or ()]
    if requested:
        lines.append(f"Requested pairs: {', '.join(requested)}")

    return "\n".join(lines)


def exit_code_for(result: RateGapResult) -> int:
    """Process exit code for shell wrappers: 0 when clean, else GAP_EXIT_CODE."""
    return 0 if result.ok else GAP_EXIT_CODE
