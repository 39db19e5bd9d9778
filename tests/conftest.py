from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402
from itertools import count  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bytax.core.config import settings  # noqa: E402
from bytax.core.exceptions import (  # noqa: E402
    InvalidCalculationStatusError,
    TaxCalculationNotFoundError,
)
from bytax.db import session as db_session_module  # noqa: E402
from bytax.db.base_class import Base  # noqa: E402
from bytax.db.session import SessionLocal  # noqa: E402
from bytax.models import tax_models  # noqa: E402,F401 - registers tables
from bytax.services.tax_engine import (  # noqa: E402
    BusinessProfile,
    NewTaxCalculation,
    StoredCalculation,
    TaxRateRecord,
)

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")


test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Ensure application code uses the test engine
settings.DATABASE_URL = TEST_DATABASE_URL  # type: ignore[attr-defined]
settings.ENV = "test"  # type: ignore[attr-defined]
db_session_module.engine = test_engine  # type: ignore[assignment]
SessionLocal.configure(bind=test_engine)


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


class InMemoryRecordStore:
    """RecordStore fake holding plain records in lists.

    Filters mirror the SQLAlchemy store. Set `fail_on` to an operation name
    mapped to an exception instance to make that call raise.
    """

    def __init__(self):
        self.businesses: dict[int, BusinessProfile] = {}
        self.rates: list[TaxRateRecord] = []
        self.revenues = []
        self.expenses = []
        self.payroll = []
        self.calculations: list[StoredCalculation] = []
        self.fail_on: dict[str, Exception] = {}
        self.calls: list[tuple] = []
        self._ids = count(1)

    def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def find_business(self, business_id: int) -> Optional[BusinessProfile]:
        self._enter("find_business", business_id)
        return self.businesses.get(business_id)

    def list_active_tax_rates(self, regime: str) -> list[TaxRateRecord]:
        self._enter("list_active_tax_rates", regime)
        return [r for r in self.rates if r.regime == regime and r.effective_to is None]

    def list_revenues(self, business_id, start, end):
        self._enter("list_revenues", business_id, start, end)
        return [
            r for r in self.revenues
            if r.business_id == business_id and r.period_start >= start and r.period_end <= end
        ]

    def list_expenses(self, business_id, start, end):
        self._enter("list_expenses", business_id, start, end)
        return [
            e for e in self.expenses
            if e.business_id == business_id and start <= e.expense_date <= end
        ]

    def list_payroll(self, business_id, first_year, last_year):
        self._enter("list_payroll", business_id, first_year, last_year)
        return [
            p for p in self.payroll
            if p.business_id == business_id and first_year <= p.period_year <= last_year
        ]

    def insert_tax_calculation(self, record: NewTaxCalculation) -> StoredCalculation:
        self._enter("insert_tax_calculation", record.business_id)
        stored = StoredCalculation(id=next(self._ids), **record.__dict__)
        self.calculations.append(stored)
        return stored

    def list_tax_calculations(self, business_id=None):
        self._enter("list_tax_calculations", business_id)
        rows = [c for c in self.calculations if business_id is None or c.business_id == business_id]
        return list(reversed(rows))

    def finalize_tax_calculation(self, calculation_id: int) -> StoredCalculation:
        self._enter("finalize_tax_calculation", calculation_id)
        for i, calc in enumerate(self.calculations):
            if calc.id == calculation_id:
                if calc.status != "draft":
                    raise InvalidCalculationStatusError(calc.status, "final")
                final = StoredCalculation(**{**calc.__dict__, "status": "final"})
                self.calculations[i] = final
                return final
        raise TaxCalculationNotFoundError(calculation_id)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def add_rate(memory_store):
    """Add an active rate (percentage) to the in-memory store."""
    def _add(regime: str, rate_type: str, value: str, effective_from: date = date(2020, 1, 1), effective_to=None):
        rate = TaxRateRecord(
            regime=regime,
            rate_type=rate_type,
            rate_value=Decimal(value),
            effective_from=effective_from,
            effective_to=effective_to,
        )
        memory_store.rates.append(rate)
        return rate
    return _add


# FastAPI TestClient fixture
from fastapi.testclient import TestClient  # noqa: E402
from bytax.api.main import app  # noqa: E402


@pytest.fixture
def client():  # noqa: D401 - simple factory fixture
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)
