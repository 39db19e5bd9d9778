"""
Reporting Period Routes.
"""
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query

from bytax.services.tax_engine import calculate_period_range

from .schemas import PeriodRangeOut

router = APIRouter()


@router.get("/periods/{period_type}", response_model=PeriodRangeOut)
def get_period_range(
    period_type: Literal["month", "quarter", "year"],
    year: int = Query(..., ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
    quarter: int | None = Query(None, ge=1, le=4),
):
    """Inclusive date range for a monthly, quarterly or yearly return."""
    start, end = calculate_period_range(period_type, year=year, month=month, quarter=quarter)
    return {"period_type": period_type, "period_start": start, "period_end": end}
