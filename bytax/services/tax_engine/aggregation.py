"""Loads the revenue, expense and payroll records of a reporting period.

Filters:
- revenues: containment, the record's own period must lie fully inside
  the window (a record starting before the window is excluded)
- expenses: expense_date within the window
- payroll: fetched by year range, then kept when the first day of the
  payroll month lies within the window

Store failures propagate; a calculation never runs on partial data.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from .records import ExpenseRecord, PayrollRecord, RevenueRecord
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatedRecords:
    revenues: list[RevenueRecord] = field(default_factory=list)
    expenses: list[ExpenseRecord] = field(default_factory=list)
    payroll: list[PayrollRecord] = field(default_factory=list)

    @property
    def total_revenue(self) -> Decimal:
        return sum((r.amount for r in self.revenues), Decimal("0"))

    @property
    def total_expenses(self) -> Decimal:
        return sum((e.amount for e in self.expenses), Decimal("0"))

    @property
    def total_payroll(self) -> Decimal:
        return sum((p.gross_salary for p in self.payroll), Decimal("0"))

    @property
    def vat_deductible_expenses(self) -> Decimal:
        return sum((e.amount for e in self.expenses if e.vat_deductible), Decimal("0"))


def payroll_in_period(entry: PayrollRecord, start: date, end: date) -> bool:
    return start <= entry.period_date <= end


def aggregate_records(store: RecordStore, business_id: int, start: date, end: date) -> AggregatedRecords:
    revenues = store.list_revenues(business_id, start, end)
    expenses = store.list_expenses(business_id, start, end)
    payroll = [
        p for p in store.list_payroll(business_id, start.year, end.year)
        if payroll_in_period(p, start, end)
    ]
    logger.debug(
        "Aggregated business %s %s..%s: %d revenues, %d expenses, %d payroll entries",
        business_id,
        start,
        end,
        len(revenues),
        len(expenses),
        len(payroll),
    )
    return AggregatedRecords(revenues=revenues, expenses=expenses, payroll=payroll)
