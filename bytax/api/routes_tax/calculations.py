"""
Tax Calculation Routes.

Runs the tax engine for a business and period, stores results as drafts,
lists stored calculations and finalizes them.
"""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from bytax.api.dependencies import get_record_store, get_tax_engine
from bytax.services.tax_engine import SQLAlchemyRecordStore, TaxCalculationEngine

from .schemas import StoredCalculationOut, TaxCalculationOut, TaxCalculationRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/calculations", response_model=TaxCalculationOut)
def calculate(
    payload: TaxCalculationRequest,
    engine: Annotated[TaxCalculationEngine, Depends(get_tax_engine)],
):
    """
    Calculate income tax, VAT and social contributions for a period.

    With `save` (the default) the result is appended to the calculation
    log as a draft; every call creates a new row.
    """
    if payload.save:
        result, stored = engine.calculate_and_save(payload.business_id, payload.period_start, payload.period_end)
    else:
        result = engine.calculate_taxes(payload.business_id, payload.period_start, payload.period_end)
        stored = None

    return {
        "business_id": payload.business_id,
        "period_start": payload.period_start,
        "period_end": payload.period_end,
        **result.to_dict(),
        "calculation": stored,
    }


@router.get("/calculations", response_model=list[StoredCalculationOut])
def list_calculations(
    store: Annotated[SQLAlchemyRecordStore, Depends(get_record_store)],
    business_id: int | None = Query(None, description="Only calculations for this business"),
):
    """Stored calculations, newest first."""
    return store.list_tax_calculations(business_id)


@router.post("/calculations/{calculation_id}/finalize", response_model=StoredCalculationOut)
def finalize_calculation(
    calculation_id: int,
    store: Annotated[SQLAlchemyRecordStore, Depends(get_record_store)],
):
    """Move a draft calculation to final. Final calculations cannot change."""
    return store.finalize_tax_calculation(calculation_id)
