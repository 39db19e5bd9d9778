"""
Tax Rate Table Maintenance.

Rates are never edited in place or deleted: a new rate supersedes the active
one by closing it (effective_to = day before the new rate starts) and
inserting a fresh row. This keeps at most one open-ended row per
(regime, rate_type), which the tax engine relies on.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from bytax.core.exceptions import TaxCalculationError
from bytax.models.tax_models import RateType, TaxRate, TaxRegime

logger = logging.getLogger(__name__)


# Belarus rates for LLCs as of 2026 (percent)
DEFAULT_RATES: dict[str, dict[str, Decimal]] = {
    TaxRegime.SIMPLIFIED.value: {
        RateType.INCOME_TAX.value: Decimal("6"),
        RateType.VAT.value: Decimal("20"),
    },
    TaxRegime.GENERAL.value: {
        RateType.INCOME_TAX.value: Decimal("20"),
        RateType.VAT.value: Decimal("20"),
        RateType.SOCIAL.value: Decimal("34"),
    },
}


class TaxRateService:
    def __init__(self, db: Session):
        self.db = db

    def get_active_rate(self, regime: str, rate_type: str) -> Optional[TaxRate]:
        return (
            self.db.query(TaxRate)
            .filter(
                TaxRate.regime == regime,
                TaxRate.rate_type == rate_type,
                TaxRate.effective_to.is_(None),
            )
            .order_by(TaxRate.effective_from.desc())
            .first()
        )

    def supersede_rate(
        self,
        regime: str,
        rate_type: str,
        rate_value: Decimal,
        effective_from: date,
        description: Optional[str] = None,
    ) -> TaxRate:
        """Close the active rate (if any) and insert the new one."""
        if regime not in {r.value for r in TaxRegime}:
            raise TaxCalculationError(f"Unknown regime '{regime}'", code="TAX305", status_code=422)
        if rate_type not in {t.value for t in RateType}:
            raise TaxCalculationError(f"Unknown rate type '{rate_type}'", code="TAX305", status_code=422)
        if not Decimal("0") <= rate_value <= Decimal("100"):
            raise TaxCalculationError(
                "Rate value must be a percentage between 0 and 100",
                code="TAX305",
                status_code=422,
                details={"rate_value": str(rate_value)},
            )

        current = self.get_active_rate(regime, rate_type)
        if current is not None:
            if current.effective_from >= effective_from:
                raise TaxCalculationError(
                    "New rate must start after the active rate",
                    code="TAX305",
                    status_code=409,
                    details={
                        "active_effective_from": current.effective_from.isoformat(),
                        "effective_from": effective_from.isoformat(),
                    },
                )
            current.effective_to = effective_from - timedelta(days=1)

        new_rate = TaxRate(
            regime=regime,
            rate_type=rate_type,
            rate_value=rate_value,
            effective_from=effective_from,
            description=description,
        )
        self.db.add(new_rate)
        self.db.commit()
        self.db.refresh(new_rate)
        logger.info(
            "Rate %s/%s set to %s%% from %s (superseded: %s)",
            regime,
            rate_type,
            rate_value,
            effective_from,
            current.id if current is not None else None,
        )
        return new_rate

    def seed_defaults(self, effective_from: date) -> list[TaxRate]:
        """Insert DEFAULT_RATES where no active rate exists yet."""
        created = []
        for regime, rates in DEFAULT_RATES.items():
            for rate_type, value in rates.items():
                if self.get_active_rate(regime, rate_type) is not None:
                    continue
                created.append(self.supersede_rate(regime, rate_type, value, effective_from))
        return created
