# backend/tests/services/fx/test_validator.py
"""
Tests for the rate-gap validator.

This module tests:
- Gap detection (missing pair, method-level gaps)
- Requirement merging and order independence
- Input validation before any provider call
- Provider error propagation
- Cancellation and deadlines
"""

import random
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from consol_fx.services.exceptions import (
    DeadlineExceededError,
    OperationCancelledError,
    UnsupportedMethodError,
    ValidationError,
)
from consol_fx.services.fx import (
    CurrencyPair,
    Gap,
    Method,
    Quote,
    RateGapValidator,
    Requirement,
    validate_rates,
)
from consol_fx.utils.context import CallContext

BOTH = (Method.AVERAGE, Method.CLOSING)


class RateStoreDown(Exception):
    pass


# =============================================================================
# GAP DETECTION
# =============================================================================

class TestGapDetection:
    """Tests for gap reporting."""

    def test_all_rates_available(self, provider, period):
        """A complete quote produces no gaps and is exposed in available."""
        provider.add_quote("IDRUSD", Decimal("1.2"), Decimal("1.25"))

        result = validate_rates(provider, datetime(2025, 8, 7, 12, 0), [
            Requirement(pair="idrusd", methods=BOTH),
        ])

        assert result.gaps == []
        assert result.ok is True
        assert result.checked == 1
        assert result.available["IDRUSD"].average == Decimal("1.2")

    def test_pair_without_quote(self, provider, period):
        """No quote at all: every required method is a gap."""
        result = validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=BOTH)])

        assert result.gaps == [Gap(pair="IDRUSD", methods=BOTH)]
        assert result.checked == 1
        assert result.available == {}
        assert result.ok is False

    def test_method_level_gap(self, provider, period):
        """Average of 0 is a gap for AVERAGE only; CLOSING is usable."""
        provider.add_quote("IDRUSD", 0, Decimal("1.3"))

        result = validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=BOTH)])

        assert result.gaps == [Gap(pair="IDRUSD", methods=(Method.AVERAGE,))]
        assert "IDRUSD" in result.available

    def test_negative_rate_is_gap(self, provider, period):
        provider.add_quote("JPYUSD", Decimal("0.009"), Decimal("-1"))

        result = validate_rates(provider, period, [Requirement(pair="JPYUSD", methods=BOTH)])

        assert result.gaps == [Gap(pair="JPYUSD", methods=(Method.CLOSING,))]

    def test_nan_rate_is_gap(self, provider, period):
        """A NaN average is reported as a gap, not raised."""
        provider.add_quote("IDRUSD", float("nan"), 1.3)

        result = validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=("AVERAGE", "CLOSING"))])

        assert result.gaps == [Gap(pair="IDRUSD", methods=(Method.AVERAGE,))]
        assert result.checked == 1
        assert "IDRUSD" in result.available

    def test_infinite_rate_is_gap(self, provider, period):
        provider.add_quote("JPYUSD", Decimal("0.009"), Decimal("Infinity"))

        result = validate_rates(provider, period, [Requirement(pair="JPYUSD", methods=BOTH)])

        assert result.gaps == [Gap(pair="JPYUSD", methods=(Method.CLOSING,))]

    def test_single_method_requirement(self, provider, period):
        """A bare method name is one method, not a sequence of letters."""
        provider.add_quote("IDRUSD", 0, 1)

        result = validate_rates(provider, period, [Requirement(pair="IDRUSD", methods="average")])

        assert result.gaps == [Gap(pair="IDRUSD", methods=(Method.AVERAGE,))]

    def test_only_required_methods_checked(self, provider, period):
        """An unusable CLOSING rate is not a gap when only AVERAGE is needed."""
        provider.add_quote("IDRUSD", Decimal("0.00007"), 0)

        result = validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=(Method.AVERAGE,))])

        assert result.ok is True
        assert result.available["IDRUSD"].closing == Decimal("0")

    def test_gaps_in_pair_order(self, provider, period):
        provider.add_quote("EURUSD", Decimal("1.1"), 0)

        result = validate_rates(provider, period, [
            Requirement(pair="SGDUSD", methods=(Method.CLOSING,)),
            Requirement(pair="EURUSD", methods=BOTH),
            Requirement(pair="AUDUSD", methods=(Method.AVERAGE,)),
        ])

        assert result.missing_pairs == ["AUDUSD", "EURUSD", "SGDUSD"]
        assert result.gap_for("eurusd") == Gap(pair="EURUSD", methods=(Method.CLOSING,))
        assert result.gap_for("JPYUSD") is None

    def test_period_normalized_to_month_start(self, provider):
        """Provider sees the first of the month, midnight UTC."""
        provider.add_quote("IDRUSD", 1, 1)

        result = validate_rates(provider, date(2025, 8, 31), [Requirement(pair="IDRUSD", methods=BOTH)])

        expected = datetime(2025, 8, 1, tzinfo=timezone.utc)
        assert result.period == expected
        assert provider.calls == [(expected, "IDRUSD")]

    def test_currency_pair_requirement(self, provider, period):
        """Structured pairs validate under their canonical code."""
        provider.add_quote("IDRUSD", 1, 1)

        result = validate_rates(provider, period, [
            Requirement(pair=CurrencyPair("idr", "usd"), methods=BOTH),
        ])

        assert result.ok is True
        assert provider.pairs_requested == ["IDRUSD"]


# =============================================================================
# MERGING & ORDERING
# =============================================================================

class TestRequirementMerging:
    """Requirements naming the same pair are merged."""

    def test_pair_checked_once(self, provider, period):
        result = validate_rates(provider, period, [
            Requirement(pair="IDRUSD", methods=(Method.AVERAGE,)),
            Requirement(pair="idrusd", methods=(Method.CLOSING,)),
            Requirement(pair=" IDRUSD ", methods=(Method.AVERAGE,)),
        ])

        assert provider.call_count == 1
        assert result.checked == 1
        assert result.gaps == [Gap(pair="IDRUSD", methods=BOTH)]

    def test_split_requirement_equals_combined(self, make_provider, period):
        """{X,[AVG,CLS]} and {X,[AVG]} + {X,[CLS]} give identical results."""
        quotes = {"IDRUSD": Quote(average=0, closing=Decimal("1.3"))}

        combined = validate_rates(make_provider(quotes), period, [
            Requirement(pair="IDRUSD", methods=BOTH),
        ])
        split = validate_rates(make_provider(quotes), period, [
            Requirement(pair="IDRUSD", methods=(Method.AVERAGE,)),
            Requirement(pair="IDRUSD", methods=(Method.CLOSING,)),
        ])

        assert split == combined

    def test_order_independent(self, make_provider, period):
        """Permuting requirements yields the same gaps and checked count."""
        quotes = {
            "EURUSD": Quote(average=Decimal("1.1"), closing=Decimal("1.09")),
            "JPYUSD": Quote(average=0, closing=Decimal("0.0095")),
        }
        requirements = [
            Requirement(pair="EURUSD", methods=BOTH),
            Requirement(pair="JPYUSD", methods=BOTH),
            Requirement(pair="IDRUSD", methods=(Method.CLOSING,)),
            Requirement(pair="JPYUSD", methods=(Method.AVERAGE,)),
        ]
        baseline = validate_rates(make_provider(quotes), period, requirements)

        rng = random.Random(7)
        for _ in range(5):
            shuffled = requirements[:]
            rng.shuffle(shuffled)
            provider = make_provider(quotes)

            result = validate_rates(provider, period, shuffled)

            assert result == baseline
            assert provider.pairs_requested == ["EURUSD", "IDRUSD", "JPYUSD"]

    def test_requirements_not_mutated(self, provider, period):
        requirements = [Requirement(pair="idrusd", methods=("average",))]

        validate_rates(provider, period, requirements)

        assert requirements == [Requirement(pair="idrusd", methods=("average",))]

    def test_fresh_result_each_call(self, provider, period):
        provider.add_quote("IDRUSD", 1, 1)
        validator = RateGapValidator()
        requirements = [Requirement(pair="IDRUSD", methods=BOTH)]

        first = validator.validate(provider, period, requirements)
        second = validator.validate(provider, period, requirements)

        assert first == second
        assert first is not second
        assert first.available is not second.available


# =============================================================================
# INPUT VALIDATION
# =============================================================================

class TestInputValidation:
    """Malformed input fails before any provider call."""

    def test_empty_requirements(self, provider, period):
        result = validate_rates(provider, period, [])

        assert result.gaps == []
        assert result.available == {}
        assert result.checked == 0
        assert provider.call_count == 0

    def test_requires_provider(self, period):
        with pytest.raises(ValidationError) as exc_info:
            validate_rates(None, period, [Requirement(pair="IDRUSD", methods=(Method.AVERAGE,))])

        assert exc_info.value.field == "provider"

    def test_requires_period(self, provider):
        with pytest.raises(ValidationError):
            validate_rates(provider, None, [Requirement(pair="IDRUSD", methods=(Method.AVERAGE,))])

    def test_empty_pair(self, provider, period):
        with pytest.raises(ValidationError):
            validate_rates(provider, period, [Requirement(pair="  ", methods=(Method.AVERAGE,))])

    def test_no_methods(self, provider, period):
        with pytest.raises(ValidationError):
            validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=())])

    def test_unsupported_method(self, provider, period):
        with pytest.raises(UnsupportedMethodError) as exc_info:
            validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=("SPOT",))])

        assert exc_info.value.pair == "IDRUSD"

    def test_bad_requirement_late_in_list_blocks_all_calls(self, provider, period):
        """Validation happens before the first lookup."""
        with pytest.raises(ValidationError):
            validate_rates(provider, period, [
                Requirement(pair="EURUSD", methods=BOTH),
                Requirement(pair="", methods=BOTH),
            ])

        assert provider.call_count == 0

    def test_method_names_accepted(self, provider, period):
        provider.add_quote("IDRUSD", 1, 0)

        result = validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=("average", "Closing"))])

        assert result.gaps == [Gap(pair="IDRUSD", methods=(Method.CLOSING,))]


# =============================================================================
# PROVIDER ERRORS
# =============================================================================

class TestProviderErrors:
    """Provider failures abort the run."""

    def test_error_propagates_unchanged(self, provider, period):
        error = RateStoreDown("boom")
        provider.fail_all(error)

        with pytest.raises(RateStoreDown) as exc_info:
            validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=(Method.AVERAGE,))])

        assert exc_info.value is error

    def test_first_failure_in_sorted_order_aborts(self, provider, period):
        """Pairs after the failing one are never requested."""
        provider.add_quote("AUDUSD", 1, 1)
        provider.add_error("EURUSD", RateStoreDown("eur"))
        provider.add_error("JPYUSD", RateStoreDown("jpy"))

        with pytest.raises(RateStoreDown, match="eur"):
            validate_rates(provider, period, [
                Requirement(pair="JPYUSD", methods=BOTH),
                Requirement(pair="EURUSD", methods=BOTH),
                Requirement(pair="AUDUSD", methods=BOTH),
                Requirement(pair="SGDUSD", methods=BOTH),
            ])

        assert provider.pairs_requested == ["AUDUSD", "EURUSD"]


# =============================================================================
# CANCELLATION
# =============================================================================

class TestCancellation:
    """CallContext is honored before each provider call."""

    def test_cancelled_before_start(self, provider, period):
        ctx = CallContext()
        ctx.cancel()

        with pytest.raises(OperationCancelledError):
            validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=BOTH)], ctx=ctx)

        assert provider.call_count == 0

    def test_cancelled_mid_run(self, provider, period):
        """Cancelling during a lookup stops the remaining lookups."""
        ctx = CallContext()
        provider.on_call = lambda pair: ctx.cancel() if pair == "EURUSD" else None

        with pytest.raises(OperationCancelledError):
            validate_rates(provider, period, [
                Requirement(pair="AUDUSD", methods=BOTH),
                Requirement(pair="EURUSD", methods=BOTH),
                Requirement(pair="JPYUSD", methods=BOTH),
            ], ctx=ctx)

        assert provider.pairs_requested == ["AUDUSD", "EURUSD"]

    def test_deadline_exceeded(self, provider, period):
        ctx = CallContext(timeout=0)

        with pytest.raises(DeadlineExceededError):
            validate_rates(provider, period, [Requirement(pair="IDRUSD", methods=BOTH)], ctx=ctx)

        assert provider.call_count == 0

    def test_live_context_completes(self, provider, period):
        provider.add_quote("IDRUSD", 1, 1)

        result = validate_rates(
            provider, period, [Requirement(pair="IDRUSD", methods=BOTH)],
            ctx=CallContext.with_timeout(60),
        )

        assert result.ok is True
