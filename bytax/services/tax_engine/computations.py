"""Tax liability derivation.

Pure computation: no store access. Takes the business profile, the
aggregated records and the rate table and produces the clamped,
quantized liability breakdown.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .aggregation import AggregatedRecords
from .rates import RateTable
from .records import (
    BusinessProfile,
    ExpenseLine,
    PayrollLine,
    RevenueLine,
    TaxBreakdown,
    TaxCalculationResult,
)
from .regimes import get_regime_rules

DEFAULT_QUANTUM = Decimal("0.01")
DEFAULT_REVENUE_DESCRIPTION = "Revenue"


def clamp_non_negative(value: Decimal, quantum: Decimal = DEFAULT_QUANTUM) -> Decimal:
    """Floor at zero, then round to the money quantum."""
    if value < 0:
        value = Decimal("0")
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def build_breakdown(records: AggregatedRecords) -> TaxBreakdown:
    return TaxBreakdown(
        revenue_details=[
            RevenueLine(
                amount=r.amount,
                date=r.period_start,
                description=r.description or DEFAULT_REVENUE_DESCRIPTION,
            )
            for r in records.revenues
        ],
        expense_details=[
            ExpenseLine(amount=e.amount, date=e.expense_date, category=e.category)
            for e in records.expenses
        ],
        # Per-entry tax is what the payroll screen stored, not recomputed here
        payroll_details=[
            PayrollLine(
                salary=p.gross_salary,
                employee=p.employee_name,
                tax=p.income_tax if p.income_tax is not None else Decimal("0"),
            )
            for p in records.payroll
        ],
    )


def derive_tax_liability(
    business: BusinessProfile,
    records: AggregatedRecords,
    rates: RateTable,
    quantum: Decimal = DEFAULT_QUANTUM,
) -> TaxCalculationResult:
    """
    Compute income tax, VAT and social contributions for one period.

    Steps:
    1. taxable_income = revenue - expenses - gross payroll (may be negative)
    2. income_tax = taxable_income * income tax rate, from the unclamped base
    3. vat_payable = (revenue - VAT-deductible expenses) * VAT rate, when VAT applies
    4. social_contributions per regime (general only)
    5. each component floored at zero on its own, never netted
    6. total = sum of the floored components, floored again
    """
    rules = get_regime_rules(business.tax_regime)

    total_revenue = records.total_revenue
    total_expenses = records.total_expenses
    total_payroll = records.total_payroll

    taxable_income = total_revenue - total_expenses - total_payroll
    income_tax = rules.income_tax(taxable_income, rates)
    vat_payable = rules.vat_payable(business.vat_applicable, records, rates)
    social_contributions = rules.social_contributions(total_payroll, rates)

    income_tax = clamp_non_negative(income_tax, quantum)
    vat_payable = clamp_non_negative(vat_payable, quantum)
    social_contributions = clamp_non_negative(social_contributions, quantum)
    total_tax_liability = clamp_non_negative(income_tax + vat_payable + social_contributions, quantum)

    return TaxCalculationResult(
        total_revenue=total_revenue.quantize(quantum, rounding=ROUND_HALF_UP),
        total_expenses=total_expenses.quantize(quantum, rounding=ROUND_HALF_UP),
        taxable_income=clamp_non_negative(taxable_income, quantum),
        income_tax=income_tax,
        vat_payable=vat_payable,
        social_contributions=social_contributions,
        total_tax_liability=total_tax_liability,
        breakdown=build_breakdown(records),
        warnings=rates.warnings,
    )
