"""Regime-specific tax rules, kept side by side.

Both Belarus regimes share the income tax and VAT formulas; they differ only
in social contributions, which the general regime levies on gross payroll
and the simplified regime does not.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from bytax.core.exceptions import UnsupportedRegimeError
from bytax.models.tax_models import RateType, TaxRegime

from .aggregation import AggregatedRecords
from .rates import RateTable


class RegimeRules(ABC):
    """Income tax and VAT formulas common to every regime."""

    regime: TaxRegime

    def income_tax(self, taxable_income: Decimal, rates: RateTable) -> Decimal:
        return taxable_income * rates.rate_for(RateType.INCOME_TAX.value)

    def vat_payable(self, vat_applicable: bool, records: AggregatedRecords, rates: RateTable) -> Decimal:
        if not vat_applicable:
            return Decimal("0")
        vat_rate = rates.rate_for(RateType.VAT.value)
        output_vat = records.total_revenue * vat_rate
        input_vat = records.vat_deductible_expenses * vat_rate
        return output_vat - input_vat

    @abstractmethod
    def social_contributions(self, total_payroll: Decimal, rates: RateTable) -> Decimal:
        """Social levy on gross payroll for the period."""


class SimplifiedRegimeRules(RegimeRules):
    regime = TaxRegime.SIMPLIFIED

    def social_contributions(self, total_payroll: Decimal, rates: RateTable) -> Decimal:
        # No social levy under the simplified regime, whatever the payroll.
        return Decimal("0")


class GeneralRegimeRules(RegimeRules):
    regime = TaxRegime.GENERAL

    def social_contributions(self, total_payroll: Decimal, rates: RateTable) -> Decimal:
        if not total_payroll:
            # No payroll, no levy; the social rate is not consulted.
            return Decimal("0")
        return total_payroll * rates.rate_for(RateType.SOCIAL.value)


REGIME_RULES: dict[str, RegimeRules] = {
    TaxRegime.SIMPLIFIED.value: SimplifiedRegimeRules(),
    TaxRegime.GENERAL.value: GeneralRegimeRules(),
}


def get_regime_rules(regime: str) -> RegimeRules:
    try:
        return REGIME_RULES[regime]
    except KeyError:
        raise UnsupportedRegimeError(regime, sorted(REGIME_RULES)) from None
