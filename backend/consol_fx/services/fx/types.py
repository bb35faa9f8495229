# backend/consol_fx/services/fx/types.py
"""
Data types for consolidation FX conversion and rate-gap validation.

These dataclasses are internal value objects. They are NOT Pydantic
schemas - serialisable operator output lives in
consol_fx/schemas/fx_validation.py.

Design Principles:
- Immutable value objects (frozen=True)
- Decimal for ALL amounts and rates (ints, strings and floats are coerced)
- Currency codes and pairs always uppercase, no separator
- Closed Method enum: anything else is a configuration error

Type Hierarchy:
    Method           - AVERAGE | CLOSING
    StatementType    - PROFIT_LOSS | BALANCE_SHEET
    CurrencyPair     - (base, quote) with canonical "IDRUSD" code
    Quote            - Average and closing rate for one pair
    Line             - One amount to translate
    ConversionResult - Converted lines + translation delta
    Requirement      - Methods a pair must support
    Gap              - Methods a pair is missing
    RateGapResult    - Outcome of a validation run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from consol_fx.services.constants import ZERO
from consol_fx.services.exceptions import UnsupportedMethodError, ValidationError


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """
    Coerce a numeric value to Decimal.

    Floats go through str() so 0.00007 becomes Decimal("0.00007") rather
    than its binary expansion. None becomes zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def normalize_currency(code: str | None) -> str:
    """Uppercase and strip a currency code. None becomes ""."""
    return (code or "").strip().upper()


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Method(str, Enum):
    """Supported FX conversion methods."""
    AVERAGE = "AVERAGE"  # Period average rate (P&L)
    CLOSING = "CLOSING"  # Period-end closing rate (balance sheet)

    @classmethod
    def parse(cls, value: Method | str, pair: str | None = None) -> Method:
        """
        Convert a Method or method name into a Method.

        Raises:
            UnsupportedMethodError: For any value outside AVERAGE / CLOSING
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise UnsupportedMethodError(value, pair=pair)


class StatementType(str, Enum):
    """Financial statement a batch of lines belongs to."""
    PROFIT_LOSS = "PROFIT_LOSS"
    BALANCE_SHEET = "BALANCE_SHEET"


def sort_methods(methods) -> tuple[Method, ...]:
    """Return methods de-duplicated and in name order (AVERAGE, CLOSING)."""
    return tuple(sorted(set(methods), key=lambda m: m.value))


# =============================================================================
# CURRENCY PAIR & QUOTE
# =============================================================================

@dataclass(frozen=True)
class CurrencyPair:
    """
    A (base, quote) currency pair.

    ``code`` is the lookup key used by rate stores: base + quote, uppercase,
    no separator. Converting 1 base unit yields ``rate`` quote units.

    Attributes:
        base: Local (subsidiary) currency, e.g. "IDR"
        quote: Reporting (group) currency, e.g. "USD"
    """

    base: str
    quote: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", normalize_currency(self.base))
        object.__setattr__(self, "quote", normalize_currency(self.quote))
        if not self.base or not self.quote:
            raise ValidationError("Currency pair needs both currencies", field="pair")

    @property
    def code(self) -> str:
        return f"{self.base}{self.quote}"

    @property
    def is_parity(self) -> bool:
        """True when both sides are the same currency (rate 1)."""
        return self.base == self.quote

    @classmethod
    def parse(cls, code: str) -> CurrencyPair:
        """
        Split a six-letter pair code such as "idrusd" into its currencies.

        Raises:
            ValidationError: If the code is not two three-letter ISO codes
        """
        cleaned = normalize_currency(code)
        if len(cleaned) != 6 or not cleaned.isalpha():
            raise ValidationError(f"Invalid currency pair code: '{code}'", field="pair")
        return cls(base=cleaned[:3], quote=cleaned[3:])

    def __str__(self) -> str:
        return self.code


def normalize_pair(pair: CurrencyPair | str | None) -> str:
    """Canonical string key for a pair: uppercase, no separator."""
    if isinstance(pair, CurrencyPair):
        return pair.code
    return normalize_currency(pair)


@dataclass(frozen=True)
class Quote:
    """
    Average and closing rates for one currency pair and period.

    A rate is usable only if it is finite and strictly positive. The two rates are
    independent: a Quote with average=0 and closing=1.3 is usable for
    CLOSING and missing for AVERAGE.
    """

    average: Decimal = ZERO
    closing: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "average", to_decimal(self.average))
        object.__setattr__(self, "closing", to_decimal(self.closing))


# =============================================================================
# CONVERSION
# =============================================================================

@dataclass(frozen=True)
class Line:
    """
    A single amount eligible for FX translation.

    Attributes:
        account_code: Group account the amount is posted to
        local_currency: Currency of local_amount ("" means reporting currency)
        local_amount: Amount in local currency
        group_amount: Previous group-currency amount; only used to compute
                      the translation delta, never as conversion input
    """

    account_code: str
    local_currency: str = ""
    local_amount: Decimal = ZERO
    group_amount: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "local_amount", to_decimal(self.local_amount))
        object.__setattr__(self, "group_amount", to_decimal(self.group_amount))


@dataclass
class ConversionResult:
    """
    Output of a successful batch conversion.

    Attributes:
        lines: Every input line with group_amount re-translated
        delta: Sum of (new group_amount - prior group_amount)
        statement: Statement type the batch was converted as
        method: Rate method applied to foreign-currency lines
        reporting_currency: Target currency of the conversion
    """

    lines: list[Line] = field(default_factory=list)
    delta: Decimal = ZERO
    statement: StatementType | None = None
    method: Method | None = None
    reporting_currency: str = ""

    @property
    def total_group_amount(self) -> Decimal:
        return sum((line.group_amount for line in self.lines), ZERO)


# =============================================================================
# VALIDATION
# =============================================================================

@dataclass(frozen=True)
class Requirement:
    """
    Conversion methods that must be usable for one pair.

    Attributes:
        pair: Pair code or CurrencyPair (stored as given; the validator
              normalises it)
        methods: Methods required (must be non-empty; a single name is
                 treated as a one-element tuple)
    """

    pair: CurrencyPair | str
    methods: tuple[Method | str, ...] = ()

    def __post_init__(self) -> None:
        methods = self.methods
        # A lone name (or Method, which is a str) means one method
        if isinstance(methods, str):
            methods = (methods,)
        object.__setattr__(self, "methods", tuple(methods))


@dataclass(frozen=True)
class Gap:
    """
    Methods that are unusable for a pair in the validated period.

    Attributes:
        pair: Normalised pair code, e.g. "IDRUSD"
        methods: Missing methods, in name order
    """

    pair: str
    methods: tuple[Method, ...]


@dataclass
class RateGapResult:
    """
    Result of a rate-gap validation run.

    Attributes:
        period: First day of the validated month, midnight UTC
        checked: Distinct pairs queried (not requirements)
        gaps: Gaps in pair order
        available: Every quote the provider returned, gap or not
    """

    period: datetime
    checked: int = 0
    gaps: list[Gap] = field(default_factory=list)
    available: dict[str, Quote] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when every required (pair, method) is usable."""
        return len(self.gaps) == 0

    @property
    def missing_pairs(self) -> list[str]:
        return [gap.pair for gap in self.gaps]

    def gap_for(self, pair: CurrencyPair | str) -> Gap | None:
        """Return the gap for ``pair`` or None if it is fully usable."""
        key = normalize_pair(pair)
        for gap in self.gaps:
            if gap.pair == key:
                return gap
        return None
