# backend/consol_fx/utils/date_utils.py
"""
Date utility functions for the consolidation FX engine.

FX rates for consolidation are published per closing period (one month),
so every period the engine sees is normalised to the first day of its
month at midnight UTC.

Usage:
    from consol_fx.utils.date_utils import month_start, period_label

    period = month_start(date(2025, 8, 7))   # 2025-08-01 00:00:00+00:00
    period_label(period)                     # "2025-08"
"""

from datetime import date, datetime, timezone

from consol_fx.services.constants import PERIOD_LABEL_FORMAT


def month_start(as_of: date | datetime) -> datetime:
    """
    Normalise a date or datetime to the first day of its month, UTC.

    The calendar year and month are taken from ``as_of`` as given; an aware
    datetime is not shifted to UTC first.

    Args:
        as_of: Any date or datetime inside the period

    Returns:
        Timezone-aware datetime at midnight UTC on the 1st of the month

    Example:
        >>> month_start(datetime(2025, 8, 7, 12, 0))
        datetime.datetime(2025, 8, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    return datetime(as_of.year, as_of.month, 1, tzinfo=timezone.utc)


def period_label(period: date | datetime) -> str:
    """Format a period as "YYYY-MM"."""
    return period.strftime(PERIOD_LABEL_FORMAT)
