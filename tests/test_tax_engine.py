"""Tests for the tax calculation engine (in-memory record store)."""
from datetime import date
from decimal import Decimal

import pytest

from bytax.core import config
from bytax.core.exceptions import (
    BusinessNotFoundError,
    CalculationPersistError,
    InvalidCalculationStatusError,
    InvalidPeriodError,
    RecordStoreError,
    StoreUnavailableError,
    UnsupportedRegimeError,
)
from bytax.services.tax_engine import (
    RATE_LOAD_FAILED,
    BusinessProfile,
    ExpenseRecord,
    PayrollRecord,
    RevenueRecord,
    TaxCalculationEngine,
)
from bytax.services.tax_engine.regimes import RegimeRules

Q1_START = date(2026, 1, 1)
Q1_END = date(2026, 3, 31)

MONEY_FIELDS = (
    "total_revenue",
    "total_expenses",
    "taxable_income",
    "income_tax",
    "vat_payable",
    "social_contributions",
    "total_tax_liability",
)


@pytest.fixture
def business_factory(memory_store):
    def _create(business_id=1, regime="simplified", vat_applicable=False):
        business = BusinessProfile(id=business_id, tax_regime=regime, vat_applicable=vat_applicable, name="Test LLC")
        memory_store.businesses[business_id] = business
        return business
    return _create


def add_revenue(store, amount, start=Q1_START, end=Q1_END, business_id=1, description=None):
    store.revenues.append(
        RevenueRecord(business_id=business_id, amount=Decimal(amount), period_start=start, period_end=end, description=description)
    )


def add_expense(store, amount, on=date(2026, 2, 10), deductible=False, category="rent", business_id=1):
    store.expenses.append(
        ExpenseRecord(business_id=business_id, amount=Decimal(amount), expense_date=on, category=category, vat_deductible=deductible)
    )


def add_payroll(store, salary, month=2, year=2026, name="Ivan Petrov", income_tax=None, business_id=1):
    store.payroll.append(
        PayrollRecord(
            business_id=business_id,
            employee_name=name,
            gross_salary=Decimal(salary),
            period_month=month,
            period_year=year,
            income_tax=Decimal(income_tax) if income_tax is not None else None,
        )
    )


def test_simplified_regime_with_vat(memory_store, business_factory, add_rate):
    business_factory(regime="simplified", vat_applicable=True)
    add_rate("simplified", "income_tax", "16")
    add_rate("simplified", "vat", "20")
    add_revenue(memory_store, "1000")
    add_expense(memory_store, "200", deductible=True)

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.total_revenue == Decimal("1000")
    assert result.total_expenses == Decimal("200")
    assert result.taxable_income == Decimal("800")
    assert result.income_tax == Decimal("128")
    assert result.vat_payable == Decimal("160")
    assert result.social_contributions == Decimal("0")
    assert result.total_tax_liability == Decimal("288")
    assert result.warnings == []


def test_general_regime_with_payroll(memory_store, business_factory, add_rate):
    business_factory(regime="general", vat_applicable=False)
    add_rate("general", "income_tax", "18")
    add_rate("general", "social", "34")
    add_revenue(memory_store, "5000")
    add_expense(memory_store, "1000")
    add_payroll(memory_store, "2000")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.taxable_income == Decimal("2000")
    assert result.income_tax == Decimal("360")
    assert result.vat_payable == Decimal("0")
    assert result.social_contributions == Decimal("680")
    assert result.total_tax_liability == Decimal("1040")


def test_negative_taxable_income_is_clamped(memory_store, business_factory, add_rate):
    business_factory(regime="simplified", vat_applicable=True)
    add_rate("simplified", "income_tax", "16")
    add_rate("simplified", "vat", "20")
    add_revenue(memory_store, "100")
    add_expense(memory_store, "500", deductible=True)

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.taxable_income == Decimal("0")
    assert result.income_tax == Decimal("0")
    # VAT on expenses exceeds VAT on revenue: floored on its own
    assert result.vat_payable == Decimal("0")
    assert result.total_tax_liability == Decimal("0")
    for name in MONEY_FIELDS:
        assert getattr(result, name) >= 0


def test_components_are_floored_independently(memory_store, business_factory, add_rate):
    """A negative income tax never reduces the social contribution."""
    business_factory(regime="general", vat_applicable=False)
    add_rate("general", "income_tax", "18")
    add_rate("general", "social", "34")
    add_revenue(memory_store, "1000")
    add_payroll(memory_store, "3000")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.income_tax == Decimal("0")
    assert result.social_contributions == Decimal("1020")
    assert result.total_tax_liability == Decimal("1020")
    assert result.total_tax_liability == result.income_tax + result.vat_payable + result.social_contributions


def test_simplified_regime_never_charges_social(memory_store, business_factory, add_rate):
    business_factory(regime="simplified")
    add_rate("simplified", "income_tax", "16")
    add_rate("simplified", "social", "34")
    add_revenue(memory_store, "100000")
    add_payroll(memory_store, "50000")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.social_contributions == Decimal("0")
    assert result.income_tax == Decimal("8000")


def test_vat_not_applicable_ignores_vat_flags(memory_store, business_factory, add_rate):
    business_factory(regime="general", vat_applicable=False)
    add_rate("general", "vat", "20")
    add_revenue(memory_store, "1000")
    add_expense(memory_store, "100", deductible=True)

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.vat_payable == Decimal("0")


def test_missing_rate_zeroes_component_and_warns(memory_store, business_factory, add_rate):
    business_factory(regime="simplified", vat_applicable=True)
    add_rate("simplified", "vat", "20")
    add_revenue(memory_store, "1000")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.income_tax == Decimal("0")
    assert result.vat_payable == Decimal("200")
    assert result.total_tax_liability == Decimal("200")
    assert result.warnings == ["missing_rate:income_tax"]


def test_general_regime_without_payroll_needs_no_social_rate(memory_store, business_factory, add_rate):
    business_factory(regime="general", vat_applicable=False)
    add_rate("general", "income_tax", "20")
    add_revenue(memory_store, "1000")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.social_contributions == Decimal("0")
    assert result.income_tax == Decimal("200")
    assert result.warnings == []


def test_business_not_found_computes_nothing(memory_store):
    engine = TaxCalculationEngine(memory_store)

    with pytest.raises(BusinessNotFoundError) as exc_info:
        engine.calculate_taxes(42, Q1_START, Q1_END)

    assert exc_info.value.status_code == 404
    assert [c[0] for c in memory_store.calls] == ["find_business"]


def test_rate_load_failure_is_fail_open(memory_store, business_factory, add_rate, caplog):
    business_factory(regime="general", vat_applicable=True)
    add_rate("general", "income_tax", "18")
    add_revenue(memory_store, "1000")
    memory_store.fail_on["list_active_tax_rates"] = StoreUnavailableError("list_active_tax_rates", "timeout")

    with caplog.at_level("WARNING"):
        result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.total_revenue == Decimal("1000")
    assert result.total_tax_liability == Decimal("0")
    assert result.warnings == [RATE_LOAD_FAILED]
    assert "Failed to load tax rates" in caplog.text


@pytest.mark.parametrize("operation", ["list_revenues", "list_expenses", "list_payroll"])
def test_record_fetch_failure_propagates(memory_store, business_factory, operation):
    business_factory()
    memory_store.fail_on[operation] = RecordStoreError(operation, "relation does not exist")

    with pytest.raises(RecordStoreError):
        TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)


def test_inverted_period_rejected(memory_store, business_factory):
    business_factory()

    with pytest.raises(InvalidPeriodError):
        TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_END, Q1_START)
    assert memory_store.calls == []


def test_unknown_regime_rejected(memory_store, business_factory):
    business_factory(regime="patent")

    with pytest.raises(UnsupportedRegimeError):
        TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)


def test_breakdown_lines(memory_store, business_factory, add_rate):
    business_factory(regime="general")
    add_revenue(memory_store, "700", start=date(2026, 1, 1), end=date(2026, 1, 31), description="Consulting")
    add_revenue(memory_store, "300", start=date(2026, 2, 1), end=date(2026, 2, 28))
    add_expense(memory_store, "50", on=date(2026, 3, 5), category="utilities")
    add_payroll(memory_store, "1500", month=1, name="Anna Sidorova", income_tax="195")
    add_payroll(memory_store, "1500", month=2, name="Anna Sidorova")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)
    breakdown = result.breakdown

    assert [(r.amount, r.date, r.description) for r in breakdown.revenue_details] == [
        (Decimal("700"), date(2026, 1, 1), "Consulting"),
        (Decimal("300"), date(2026, 2, 1), "Revenue"),
    ]
    assert [(e.amount, e.date, e.category) for e in breakdown.expense_details] == [
        (Decimal("50"), date(2026, 3, 5), "utilities"),
    ]
    assert [(p.salary, p.employee, p.tax) for p in breakdown.payroll_details] == [
        (Decimal("1500"), "Anna Sidorova", Decimal("195")),
        (Decimal("1500"), "Anna Sidorova", Decimal("0")),
    ]


def test_results_are_rounded_to_kopecks(memory_store, business_factory, add_rate):
    business_factory(regime="simplified")
    add_rate("simplified", "income_tax", "6")
    add_revenue(memory_store, "333.33")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    # 333.33 * 0.06 = 19.9998
    assert result.income_tax == Decimal("20.00")
    assert str(result.income_tax) == "20.00"


def test_future_dated_rate_used_by_default(memory_store, business_factory, add_rate):
    business_factory(regime="simplified")
    add_rate("simplified", "income_tax", "16", effective_from=date(2027, 1, 1))
    add_revenue(memory_store, "1000")

    result = TaxCalculationEngine(memory_store).calculate_taxes(1, Q1_START, Q1_END)

    assert result.income_tax == Decimal("160")


def test_future_dated_rate_ignored_when_enforced(memory_store, business_factory, add_rate):
    business_factory(regime="simplified")
    add_rate("simplified", "income_tax", "16", effective_from=date(2027, 1, 1))
    add_revenue(memory_store, "1000")
    strict = config.TestSettings(TAX_RATES_ENFORCE_EFFECTIVE_FROM=True)

    result = TaxCalculationEngine(memory_store, settings=strict).calculate_taxes(1, Q1_START, Q1_END)

    assert result.income_tax == Decimal("0")
    assert result.warnings == ["missing_rate:income_tax"]


def test_save_appends_draft(memory_store, business_factory, add_rate):
    business_factory(regime="simplified", vat_applicable=True)
    add_rate("simplified", "income_tax", "16")
    add_rate("simplified", "vat", "20")
    add_revenue(memory_store, "1000")
    add_expense(memory_store, "200", deductible=True)
    engine = TaxCalculationEngine(memory_store)

    result = engine.calculate_taxes(1, Q1_START, Q1_END)
    first = engine.save_tax_calculation(1, Q1_START, Q1_END, result)
    second = engine.save_tax_calculation(1, Q1_START, Q1_END, result)

    assert first.status == "draft"
    assert first.total_tax_liability == Decimal("288")
    assert first.id != second.id
    assert len(memory_store.calculations) == 2


def test_save_rejects_unknown_status(memory_store, business_factory):
    business_factory()
    engine = TaxCalculationEngine(memory_store)
    result = engine.calculate_taxes(1, Q1_START, Q1_END)

    with pytest.raises(InvalidCalculationStatusError):
        engine.save_tax_calculation(1, Q1_START, Q1_END, result, status="submitted")
    assert memory_store.calculations == []


def test_save_failure_propagates(memory_store, business_factory):
    business_factory()
    engine = TaxCalculationEngine(memory_store)
    result = engine.calculate_taxes(1, Q1_START, Q1_END)
    memory_store.fail_on["insert_tax_calculation"] = CalculationPersistError(1, "disk full")

    with pytest.raises(CalculationPersistError):
        engine.save_tax_calculation(1, Q1_START, Q1_END, result)


def test_calculate_and_save_as_final(memory_store, business_factory):
    business_factory()
    engine = TaxCalculationEngine(memory_store)

    result, stored = engine.calculate_and_save(1, Q1_START, Q1_END, status="final")

    assert stored.status == "final"
    assert stored.total_tax_liability == result.total_tax_liability


def test_rates_reloaded_per_calculation(memory_store, business_factory, add_rate):
    business_factory()
    add_rate("simplified", "income_tax", "16")
    engine = TaxCalculationEngine(memory_store)

    engine.calculate_taxes(1, Q1_START, Q1_END)
    engine.calculate_taxes(1, Q1_START, Q1_END)

    assert [c[0] for c in memory_store.calls].count("list_active_tax_rates") == 2


def test_regime_without_social_rule_cannot_be_built():
    class IncompleteRules(RegimeRules):
        regime = "patent"

    with pytest.raises(TypeError):
        IncompleteRules()
