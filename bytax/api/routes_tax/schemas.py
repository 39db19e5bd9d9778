"""
Shared Pydantic schemas for tax-related routes.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TaxCalculationRequest(BaseModel):
    """Run a tax calculation for a business and inclusive period."""

    business_id: int
    period_start: dt.date
    period_end: dt.date
    save: bool = Field(True, description="Store the result as a draft calculation")


class RevenueLineOut(BaseModel):
    amount: Decimal
    date: dt.date
    description: str


class ExpenseLineOut(BaseModel):
    amount: Decimal
    date: dt.date
    category: str


class PayrollLineOut(BaseModel):
    salary: Decimal
    employee: str
    tax: Decimal


class TaxBreakdownOut(BaseModel):
    revenue_details: list[RevenueLineOut]
    expense_details: list[ExpenseLineOut]
    payroll_details: list[PayrollLineOut]


class StoredCalculationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    business_id: int
    period_start: dt.date
    period_end: dt.date
    total_revenue: Decimal
    total_expenses: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    vat_payable: Decimal
    social_contributions: Decimal
    total_tax_liability: Decimal
    status: Literal["draft", "final"]
    created_at: dt.datetime | None = None


class TaxCalculationOut(BaseModel):
    business_id: int
    period_start: dt.date
    period_end: dt.date
    total_revenue: Decimal
    total_expenses: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    vat_payable: Decimal
    social_contributions: Decimal
    total_tax_liability: Decimal
    breakdown: TaxBreakdownOut
    warnings: list[str] = []
    calculation: StoredCalculationOut | None = None


class PeriodRangeOut(BaseModel):
    period_type: str
    period_start: dt.date
    period_end: dt.date
