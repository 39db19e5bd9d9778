"""Tests for reporting period utilities."""
from datetime import date

import pytest

from bytax.core.exceptions import InvalidPeriodError
from bytax.services.tax_engine import calculate_period_range, validate_period


@pytest.mark.parametrize(
    "period_type,kwargs,expected",
    [
        ("month", {"year": 2024, "month": 2}, (date(2024, 2, 1), date(2024, 2, 29))),
        ("month", {"year": 2026, "month": 12}, (date(2026, 12, 1), date(2026, 12, 31))),
        ("quarter", {"year": 2026, "quarter": 1}, (date(2026, 1, 1), date(2026, 3, 31))),
        ("quarter", {"year": 2026, "quarter": 2}, (date(2026, 4, 1), date(2026, 6, 30))),
        ("year", {"year": 2026}, (date(2026, 1, 1), date(2026, 12, 31))),
    ],
)
def test_calculate_period_range(period_type, kwargs, expected):
    assert calculate_period_range(period_type, **kwargs) == expected


@pytest.mark.parametrize(
    "period_type,kwargs",
    [
        ("month", {"month": 1}),
        ("month", {"year": 2026}),
        ("month", {"year": 2026, "month": 13}),
        ("quarter", {"year": 2026, "quarter": 5}),
        ("week", {"year": 2026}),
    ],
)
def test_invalid_period_arguments(period_type, kwargs):
    with pytest.raises(InvalidPeriodError):
        calculate_period_range(period_type, **kwargs)


def test_validate_period():
    validate_period(date(2026, 1, 1), date(2026, 1, 1))

    with pytest.raises(InvalidPeriodError) as exc_info:
        validate_period(date(2026, 2, 1), date(2026, 1, 31))
    assert exc_info.value.details == {"period_start": "2026-02-01", "period_end": "2026-01-31"}
