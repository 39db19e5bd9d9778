"""Tax Calculation Engine.

Computes Belarus LLC tax liabilities (income tax, VAT, social
contributions) for a business and reporting period.

Sub-modules:
- records: plain records exchanged with the record store
- store: RecordStore protocol and its SQLAlchemy binding
- rates: active rate table per regime (fail-open loading)
- aggregation: revenue / expense / payroll selection for a period
- regimes: simplified vs general regime rules
- computations: liability derivation, clamping and breakdown
- period_utils: monthly / quarterly / yearly date ranges
- engine: TaxCalculationEngine orchestrating the pipeline
"""
from .aggregation import AggregatedRecords, aggregate_records, payroll_in_period
from .computations import clamp_non_negative, derive_tax_liability
from .engine import TaxCalculationEngine
from .period_utils import calculate_period_range, validate_period
from .rates import RATE_LOAD_FAILED, RateTable, is_rate_effective
from .records import (
    BusinessProfile,
    ExpenseRecord,
    NewTaxCalculation,
    PayrollRecord,
    RevenueRecord,
    StoredCalculation,
    TaxCalculationResult,
    TaxRateRecord,
)
from .regimes import GeneralRegimeRules, SimplifiedRegimeRules, get_regime_rules
from .store import RecordStore, SQLAlchemyRecordStore

__all__ = [
    # Records
    "BusinessProfile",
    "ExpenseRecord",
    "NewTaxCalculation",
    "PayrollRecord",
    "RevenueRecord",
    "StoredCalculation",
    "TaxCalculationResult",
    "TaxRateRecord",
    # Store
    "RecordStore",
    "SQLAlchemyRecordStore",
    # Rates
    "RATE_LOAD_FAILED",
    "RateTable",
    "is_rate_effective",
    # Aggregation and derivation
    "AggregatedRecords",
    "aggregate_records",
    "payroll_in_period",
    "GeneralRegimeRules",
    "SimplifiedRegimeRules",
    "get_regime_rules",
    "clamp_non_negative",
    "derive_tax_liability",
    # Utilities
    "calculate_period_range",
    "validate_period",
    # Engine
    "TaxCalculationEngine",
]
