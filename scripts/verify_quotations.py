#!/usr/bin/env python
"""
Verification pipeline - validates the catalog and re-prices stored quotations.

Usage:
    python scripts/verify_quotations.py [--store PATH] [--skip-catalog]
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from led_quote.config.settings import get_settings
from led_quote.data.build_catalog import validate_catalog
from led_quote.data.catalog import load_catalog
from led_quote.engine import PricingEngine
from led_quote.services.dashboard_service import DashboardService
from led_quote.services.quotation_service import QuotationService


def main():
    parser = argparse.ArgumentParser(description="Re-price stored quotations against the current catalog")
    parser.add_argument("--store", type=Path, help="Quotation store JSON (default from settings)")
    parser.add_argument("--tolerance", type=float, default=1.0, help="Allowed difference in rupees")
    parser.add_argument("--skip-catalog", action="store_true", help="Skip catalog validation")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = get_settings()

    print("=" * 60)
    print("QUOTATION VERIFICATION")
    print("=" * 60)
    print()

    catalog = load_catalog(settings.products_csv, settings.controllers_csv)

    if not args.skip_catalog:
        print("[1/2] Validating catalog...")
        report = validate_catalog(catalog, verbose=True)
        if report["status"] != "success":
            print("\n❌ CATALOG INVALID")
            for error in report["errors"]:
                print(f"  ERROR: {error}")
            sys.exit(1)
        print()

    print("[2/2] Re-pricing stored quotations...")
    service = QuotationService(args.store or settings.quotation_store)
    engine = PricingEngine(catalog, settings.constants)
    results = DashboardService(service.list_quotations()).verify_records(engine, tolerance=args.tolerance)

    mismatches = [r for r in results if not r["is_valid"]]
    for result in mismatches:
        print(f"  MISMATCH {result['quotation_id']}: {result['message']}")

    print()
    print("=" * 60)
    if mismatches:
        print(f"❌ {len(mismatches)} of {len(results)} quotations drifted")
        print("=" * 60)
        sys.exit(1)
    print(f"✅ {len(results)} quotations verified")
    print("=" * 60)


if __name__ == "__main__":
    main()
