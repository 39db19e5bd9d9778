#!/usr/bin/env python3
"""Seed or supersede Belarus tax rates.

Usage:
    python scripts/seed_tax_rates.py --defaults
    python scripts/seed_tax_rates.py --regime general --type vat --value 20 --from 2027-01-01
"""

import argparse
import sys
from datetime import date
from decimal import Decimal

from bytax.core.exceptions import ByTaxException
from bytax.db.session import session_scope
from bytax.services.tax_rate_service import TaxRateService


def main() -> int:
    parser = argparse.ArgumentParser(description="Maintain the tax rate table")
    parser.add_argument("--defaults", action="store_true", help="Insert default rates where none are active")
    parser.add_argument("--regime", choices=["simplified", "general"])
    parser.add_argument("--type", dest="rate_type", choices=["income_tax", "vat", "social", "payroll"])
    parser.add_argument("--value", type=Decimal, help="Rate in percent, e.g. 20")
    parser.add_argument("--from", dest="effective_from", type=date.fromisoformat, default=date.today())
    args = parser.parse_args()

    with session_scope() as db:
        service = TaxRateService(db)
        try:
            if args.defaults:
                created = service.seed_defaults(args.effective_from)
                print(f"Created {len(created)} rate(s)")
                return 0
            if not (args.regime and args.rate_type and args.value is not None):
                parser.error("--regime, --type and --value are required unless --defaults is given")
            rate = service.supersede_rate(args.regime, args.rate_type, args.value, args.effective_from)
        except ByTaxException as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        print(f"Active {rate.regime}/{rate.rate_type}: {rate.rate_value}% from {rate.effective_from}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
