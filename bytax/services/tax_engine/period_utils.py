"""Reporting period date range utilities.

Belarus LLCs file VAT and income tax returns monthly or quarterly; annual
ranges are used for year-end summaries.
"""
from datetime import date, timedelta
from typing import Optional, Tuple

from bytax.core.exceptions import InvalidPeriodError


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def calculate_period_range(
    period_type: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
) -> Tuple[date, date]:
    """Calculate start_date and end_date for a given period type.

    Args:
        period_type: 'month', 'quarter', or 'year'
        year: Required for all period types
        month: Required for 'month'
        quarter: Required for 'quarter' (1-4)

    Returns:
        Tuple of (start_date, end_date) inclusive

    Raises:
        InvalidPeriodError: If required parameters are missing or invalid
    """
    if not year:
        raise InvalidPeriodError("year is required for all period types")

    if period_type == "month":
        if not month:
            raise InvalidPeriodError("month required for monthly periods")
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"Invalid month: {year}-{month}")
        return (date(year, month, 1), _month_end(year, month))

    elif period_type == "quarter":
        if not quarter:
            raise InvalidPeriodError("quarter required for quarterly periods")
        if not 1 <= quarter <= 4:
            raise InvalidPeriodError(f"Invalid quarter: {year}-Q{quarter}")
        first_month = (quarter - 1) * 3 + 1
        return (date(year, first_month, 1), _month_end(year, first_month + 2))

    elif period_type == "year":
        return (date(year, 1, 1), date(year, 12, 31))

    else:
        raise InvalidPeriodError(f"Invalid period_type: {period_type}. Must be month/quarter/year")


def validate_period(period_start: date, period_end: date) -> None:
    """Reject inverted ranges; a single-day period is allowed."""
    if period_start > period_end:
        raise InvalidPeriodError(
            "period_start must not be after period_end",
            period_start=period_start,
            period_end=period_end,
        )
