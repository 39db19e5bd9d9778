"""Record store capability used by the tax engine.

`RecordStore` names the handful of fetch/insert operations the engine needs.
`SQLAlchemyRecordStore` is the production binding; tests use an in-memory
implementation of the same protocol.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional, Protocol

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from bytax.core.exceptions import (
    CalculationPersistError,
    InvalidCalculationStatusError,
    RecordStoreError,
    StoreUnavailableError,
    TaxCalculationNotFoundError,
)
from bytax.models.tax_models import (
    Business,
    CalculationStatus,
    Expense,
    PayrollEntry,
    Revenue,
    TaxCalculation,
    TaxRate,
)

from .records import (
    BusinessProfile,
    ExpenseRecord,
    NewTaxCalculation,
    PayrollRecord,
    RevenueRecord,
    StoredCalculation,
    TaxRateRecord,
)

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def find_business(self, business_id: int) -> Optional[BusinessProfile]: ...

    def list_active_tax_rates(self, regime: str) -> list[TaxRateRecord]: ...

    def list_revenues(self, business_id: int, start: date, end: date) -> list[RevenueRecord]: ...

    def list_expenses(self, business_id: int, start: date, end: date) -> list[ExpenseRecord]: ...

    def list_payroll(self, business_id: int, first_year: int, last_year: int) -> list[PayrollRecord]: ...

    def insert_tax_calculation(self, record: NewTaxCalculation) -> StoredCalculation: ...

    def list_tax_calculations(self, business_id: Optional[int] = None) -> list[StoredCalculation]: ...

    def finalize_tax_calculation(self, calculation_id: int) -> StoredCalculation: ...


def _money(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_stored(row: TaxCalculation) -> StoredCalculation:
    return StoredCalculation(
        id=row.id,
        business_id=row.business_id,
        period_start=row.period_start,
        period_end=row.period_end,
        total_revenue=_money(row.total_revenue),
        total_expenses=_money(row.total_expenses),
        taxable_income=_money(row.taxable_income),
        income_tax=_money(row.income_tax),
        vat_payable=_money(row.vat_payable),
        social_contributions=_money(row.social_contributions),
        total_tax_liability=_money(row.total_tax_liability),
        status=row.status,
        created_at=row.created_at,
    )


class SQLAlchemyRecordStore:
    """RecordStore over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _reading(self, operation: str) -> Iterator[None]:
        # A failed statement leaves the transaction unusable; roll back so a
        # caller that recovers (rate loading) can keep using the session.
        try:
            yield
        except (OperationalError, PoolTimeoutError) as exc:
            self.db.rollback()
            logger.warning("Record store unavailable during %s: %s", operation, exc)
            raise StoreUnavailableError(operation, str(exc)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Record store failure during %s: %s", operation, exc)
            raise RecordStoreError(operation, str(exc)) from exc

    def find_business(self, business_id: int) -> Optional[BusinessProfile]:
        with self._reading("find_business"):
            business = self.db.query(Business).filter(Business.id == business_id).one_or_none()
        if business is None:
            return None
        return BusinessProfile(
            id=business.id,
            tax_regime=business.tax_regime,
            vat_applicable=bool(business.vat_applicable),
            status=business.status,
            name=business.name,
        )

    def list_active_tax_rates(self, regime: str) -> list[TaxRateRecord]:
        with self._reading("list_active_tax_rates"):
            rows = (
                self.db.query(TaxRate)
                .filter(TaxRate.regime == regime, TaxRate.effective_to.is_(None))
                .order_by(TaxRate.id)
                .all()
            )
        return [
            TaxRateRecord(
                regime=r.regime,
                rate_type=r.rate_type,
                rate_value=_money(r.rate_value),
                effective_from=r.effective_from,
                effective_to=r.effective_to,
            )
            for r in rows
        ]

    def list_revenues(self, business_id: int, start: date, end: date) -> list[RevenueRecord]:
        with self._reading("list_revenues"):
            rows = (
                self.db.query(Revenue)
                .filter(
                    Revenue.business_id == business_id,
                    Revenue.period_start >= start,
                    Revenue.period_end <= end,
                )
                .order_by(Revenue.id)
                .all()
            )
        return [
            RevenueRecord(
                business_id=r.business_id,
                amount=_money(r.amount),
                period_start=r.period_start,
                period_end=r.period_end,
                description=r.description,
                vat_included=bool(r.vat_included),
            )
            for r in rows
        ]

    def list_expenses(self, business_id: int, start: date, end: date) -> list[ExpenseRecord]:
        with self._reading("list_expenses"):
            rows = (
                self.db.query(Expense)
                .filter(
                    Expense.business_id == business_id,
                    Expense.expense_date >= start,
                    Expense.expense_date <= end,
                )
                .order_by(Expense.id)
                .all()
            )
        return [
            ExpenseRecord(
                business_id=e.business_id,
                amount=_money(e.amount),
                expense_date=e.expense_date,
                category=e.category,
                vat_deductible=bool(e.vat_deductible),
            )
            for e in rows
        ]

    def list_payroll(self, business_id: int, first_year: int, last_year: int) -> list[PayrollRecord]:
        with self._reading("list_payroll"):
            rows = (
                self.db.query(PayrollEntry)
                .filter(
                    PayrollEntry.business_id == business_id,
                    PayrollEntry.period_year >= first_year,
                    PayrollEntry.period_year <= last_year,
                )
                .order_by(PayrollEntry.id)
                .all()
            )
        return [
            PayrollRecord(
                business_id=p.business_id,
                employee_name=p.employee_name,
                gross_salary=_money(p.gross_salary),
                period_month=p.period_month,
                period_year=p.period_year,
                income_tax=_money(p.income_tax) if p.income_tax is not None else None,
            )
            for p in rows
        ]

    def insert_tax_calculation(self, record: NewTaxCalculation) -> StoredCalculation:
        row = TaxCalculation(
            business_id=record.business_id,
            period_start=record.period_start,
            period_end=record.period_end,
            total_revenue=record.total_revenue,
            total_expenses=record.total_expenses,
            taxable_income=record.taxable_income,
            income_tax=record.income_tax,
            vat_payable=record.vat_payable,
            social_contributions=record.social_contributions,
            total_tax_liability=record.total_tax_liability,
            status=record.status,
        )
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error saving tax calculation for business %s", record.business_id)
            raise CalculationPersistError(record.business_id, str(exc)) from exc
        return _to_stored(row)

    def list_tax_calculations(self, business_id: Optional[int] = None) -> list[StoredCalculation]:
        with self._reading("list_tax_calculations"):
            q = self.db.query(TaxCalculation)
            if business_id is not None:
                q = q.filter(TaxCalculation.business_id == business_id)
            rows = q.order_by(TaxCalculation.created_at.desc(), TaxCalculation.id.desc()).all()
        return [_to_stored(r) for r in rows]

    def finalize_tax_calculation(self, calculation_id: int) -> StoredCalculation:
        with self._reading("finalize_tax_calculation"):
            row = self.db.query(TaxCalculation).filter(TaxCalculation.id == calculation_id).one_or_none()
        if row is None:
            raise TaxCalculationNotFoundError(calculation_id)
        if row.status != CalculationStatus.DRAFT.value:
            raise InvalidCalculationStatusError(row.status, CalculationStatus.FINAL.value)

        row.status = CalculationStatus.FINAL.value
        try:
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error finalizing tax calculation %s", calculation_id)
            raise CalculationPersistError(row.business_id, str(exc)) from exc
        logger.info("Finalized tax calculation %s", calculation_id)
        return _to_stored(row)
