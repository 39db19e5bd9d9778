"""Plain records exchanged between the tax engine and the record store.

The engine never sees ORM objects; stores map their rows into these frozen
dataclasses so an in-memory store and the SQLAlchemy store are
interchangeable.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class BusinessProfile:
    id: int
    tax_regime: str
    vat_applicable: bool
    status: str = "active"
    name: str = ""


@dataclass(frozen=True)
class TaxRateRecord:
    regime: str
    rate_type: str
    rate_value: Decimal  # percentage, 0-100
    effective_from: date
    effective_to: Optional[date] = None


@dataclass(frozen=True)
class RevenueRecord:
    business_id: int
    amount: Decimal
    period_start: date
    period_end: date
    description: Optional[str] = None
    vat_included: bool = False


@dataclass(frozen=True)
class ExpenseRecord:
    business_id: int
    amount: Decimal
    expense_date: date
    category: str = "other"
    vat_deductible: bool = False


@dataclass(frozen=True)
class PayrollRecord:
    business_id: int
    employee_name: str
    gross_salary: Decimal
    period_month: int
    period_year: int
    income_tax: Optional[Decimal] = None

    @property
    def period_date(self) -> date:
        """First day of the payroll month."""
        return date(self.period_year, self.period_month, 1)


@dataclass(frozen=True)
class RevenueLine:
    amount: Decimal
    date: date
    description: str


@dataclass(frozen=True)
class ExpenseLine:
    amount: Decimal
    date: date
    category: str


@dataclass(frozen=True)
class PayrollLine:
    salary: Decimal
    employee: str
    tax: Decimal


@dataclass(frozen=True)
class TaxBreakdown:
    revenue_details: list[RevenueLine] = field(default_factory=list)
    expense_details: list[ExpenseLine] = field(default_factory=list)
    payroll_details: list[PayrollLine] = field(default_factory=list)


@dataclass(frozen=True)
class TaxCalculationResult:
    total_revenue: Decimal
    total_expenses: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    vat_payable: Decimal
    social_contributions: Decimal
    total_tax_liability: Decimal
    breakdown: TaxBreakdown = field(default_factory=TaxBreakdown)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_revenue": self.total_revenue,
            "total_expenses": self.total_expenses,
            "taxable_income": self.taxable_income,
            "income_tax": self.income_tax,
            "vat_payable": self.vat_payable,
            "social_contributions": self.social_contributions,
            "total_tax_liability": self.total_tax_liability,
            "breakdown": {
                "revenue_details": [
                    {"amount": r.amount, "date": r.date, "description": r.description}
                    for r in self.breakdown.revenue_details
                ],
                "expense_details": [
                    {"amount": e.amount, "date": e.date, "category": e.category}
                    for e in self.breakdown.expense_details
                ],
                "payroll_details": [
                    {"salary": p.salary, "employee": p.employee, "tax": p.tax}
                    for p in self.breakdown.payroll_details
                ],
            },
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class NewTaxCalculation:
    """Row to append to the tax calculation log."""
    business_id: int
    period_start: date
    period_end: date
    total_revenue: Decimal
    total_expenses: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    vat_payable: Decimal
    social_contributions: Decimal
    total_tax_liability: Decimal
    status: str = "draft"


@dataclass(frozen=True)
class StoredCalculation:
    id: int
    business_id: int
    period_start: date
    period_end: date
    total_revenue: Decimal
    total_expenses: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    vat_payable: Decimal
    social_contributions: Decimal
    total_tax_liability: Decimal
    status: str
    created_at: Optional[datetime] = None
