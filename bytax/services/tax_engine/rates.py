"""Active tax-rate table for one regime.

Loaded fresh for every calculation. Loading is fail-open: a store failure
leaves the table empty (every tax component becomes zero) and is reported
as a warning instead of aborting the calculation.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from bytax.core.exceptions import ByTaxException, RateLoadError

from .records import TaxRateRecord
from .store import RecordStore

logger = logging.getLogger(__name__)

RATE_LOAD_FAILED = "rate_load_failed"
MISSING_RATE_PREFIX = "missing_rate:"

_HUNDRED = Decimal("100")


def is_rate_effective(rate: TaxRateRecord, as_of: Optional[date]) -> bool:
    """Whether an open-ended rate row applies on ``as_of``.

    With ``as_of=None`` every row the store reports as active counts, even
    one whose effective_from lies in the future.
    """
    if as_of is None:
        return True
    return rate.effective_from <= as_of


class RateTable:
    def __init__(self, regime: str, rates: list[TaxRateRecord], load_failed: bool = False):
        self.regime = regime
        self.load_failed = load_failed
        self._rates: dict[str, TaxRateRecord] = {}
        self._missing: list[str] = []
        for rate in rates:
            if rate.rate_type in self._rates:
                logger.warning(
                    "Multiple active %s rates for regime %s; using the first one",
                    rate.rate_type,
                    regime,
                )
                continue
            self._rates[rate.rate_type] = rate

    @classmethod
    def load(cls, store: RecordStore, regime: str, as_of: Optional[date] = None) -> RateTable:
        try:
            rows = store.list_active_tax_rates(regime)
        except ByTaxException as exc:
            error = RateLoadError(regime, exc.message)
            logger.warning("%s [%s]; all tax components will be zero: %s", error.message, error.code, exc.message)
            return cls(regime, [], load_failed=True)
        return cls(regime, [r for r in rows if is_rate_effective(r, as_of)])

    def rate_for(self, rate_type: str) -> Decimal:
        """Active rate as a fraction (16% -> 0.16); 0 when no rate exists."""
        rate = self._rates.get(rate_type)
        if rate is None:
            if rate_type not in self._missing:
                self._missing.append(rate_type)
                logger.debug("No active %s rate for regime %s", rate_type, self.regime)
            return Decimal("0")
        return rate.rate_value / _HUNDRED

    @property
    def warnings(self) -> list[str]:
        if self.load_failed:
            return [RATE_LOAD_FAILED]
        return [f"{MISSING_RATE_PREFIX}{rate_type}" for rate_type in self._missing]

    def __contains__(self, rate_type: str) -> bool:
        return rate_type in self._rates

    def __len__(self) -> int:
        return len(self._rates)
