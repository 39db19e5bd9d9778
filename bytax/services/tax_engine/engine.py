"""
Tax Calculation Engine.

Pipeline for one request:
    find business -> load rates -> load period records -> derive -> (persist)

Failure policy:
- missing business aborts before anything is computed
- rate loading is fail-open (empty table, warning on the result)
- record fetches and persistence propagate their errors; nothing is
  retried here, callers decide whether a transient failure is worth
  another attempt
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from bytax.core.config import BaseAppSettings, settings as default_settings
from bytax.core.exceptions import BusinessNotFoundError, InvalidCalculationStatusError
from bytax.models.tax_models import CalculationStatus

from .aggregation import aggregate_records
from .computations import derive_tax_liability
from .period_utils import validate_period
from .rates import RateTable
from .records import NewTaxCalculation, StoredCalculation, TaxCalculationResult
from .store import RecordStore

logger = logging.getLogger(__name__)


class TaxCalculationEngine:
    """Computes and stores tax liabilities against a RecordStore."""

    def __init__(self, store: RecordStore, settings: Optional[BaseAppSettings] = None):
        self.store = store
        self.settings = settings or default_settings
        self.quantum = Decimal(self.settings.MONEY_QUANTUM)

    def load_rates(self, regime: str, period_end: date) -> RateTable:
        as_of = period_end if self.settings.TAX_RATES_ENFORCE_EFFECTIVE_FROM else None
        return RateTable.load(self.store, regime, as_of=as_of)

    def calculate_taxes(self, business_id: int, period_start: date, period_end: date) -> TaxCalculationResult:
        validate_period(period_start, period_end)

        business = self.store.find_business(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)

        rates = self.load_rates(business.tax_regime, period_end)
        records = aggregate_records(self.store, business_id, period_start, period_end)
        result = derive_tax_liability(business, records, rates, quantum=self.quantum)

        logger.info(
            "Tax calculation for business %s (%s to %s, %s): revenue=%s expenses=%s total_liability=%s",
            business_id,
            period_start,
            period_end,
            business.tax_regime,
            result.total_revenue,
            result.total_expenses,
            result.total_tax_liability,
            extra={"business_id": business_id, "regime": business.tax_regime},
        )
        if result.warnings:
            logger.warning("Tax calculation for business %s has warnings: %s", business_id, result.warnings)
        return result

    def save_tax_calculation(
        self,
        business_id: int,
        period_start: date,
        period_end: date,
        result: TaxCalculationResult,
        status: str = CalculationStatus.DRAFT.value,
    ) -> StoredCalculation:
        """Append the result to the calculation log. Storage errors propagate."""
        if status not in {s.value for s in CalculationStatus}:
            raise InvalidCalculationStatusError(new_status=status)

        stored = self.store.insert_tax_calculation(
            NewTaxCalculation(
                business_id=business_id,
                period_start=period_start,
                period_end=period_end,
                total_revenue=result.total_revenue,
                total_expenses=result.total_expenses,
                taxable_income=result.taxable_income,
                income_tax=result.income_tax,
                vat_payable=result.vat_payable,
                social_contributions=result.social_contributions,
                total_tax_liability=result.total_tax_liability,
                status=status,
            )
        )
        logger.info(
            "Saved %s tax calculation %s for business %s",
            status,
            stored.id,
            business_id,
            extra={"calculation_id": stored.id, "business_id": business_id},
        )
        return stored

    def calculate_and_save(
        self,
        business_id: int,
        period_start: date,
        period_end: date,
        status: str = CalculationStatus.DRAFT.value,
    ) -> tuple[TaxCalculationResult, StoredCalculation]:
        result = self.calculate_taxes(business_id, period_start, period_end)
        stored = self.save_tax_calculation(business_id, period_start, period_end, result, status)
        return result, stored
