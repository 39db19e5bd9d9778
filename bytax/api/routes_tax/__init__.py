"""
Tax API Routes Module.

All routes are prefixed with /tax.

Sub-modules:
- calculations: run, save, list and finalize tax calculations
- periods: reporting period date ranges
"""
from __future__ import annotations

from fastapi import APIRouter

from .calculations import router as calculations_router
from .periods import router as periods_router

router = APIRouter(prefix="/tax", tags=["tax"])

router.include_router(calculations_router)
router.include_router(periods_router)

__all__ = ["router"]
