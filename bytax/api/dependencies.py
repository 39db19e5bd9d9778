from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from bytax.db.session import get_db
from bytax.services.tax_engine import SQLAlchemyRecordStore, TaxCalculationEngine


def get_record_store(db: Annotated[Session, Depends(get_db)]) -> SQLAlchemyRecordStore:
    return SQLAlchemyRecordStore(db)


def get_tax_engine(
    store: Annotated[SQLAlchemyRecordStore, Depends(get_record_store)],
) -> TaxCalculationEngine:
    return TaxCalculationEngine(store)
