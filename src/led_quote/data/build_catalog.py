"""
Catalog validation - builds a data-quality report for a catalog snapshot.

Checks every product and controller for:
- missing or non-numeric tier prices (these would price as degraded)
- tier ordering: reseller <= channel <= end user
- rental products without cabinet tiers, jumbo products without a fixed area
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..engine.models import TierPrices
from ..engine.unit_price import parse_price
from .catalog import Catalog


def _tier_prices(product) -> TierPrices:
    if product.is_rental and product.rental_prices is not None:
        return product.rental_prices
    return TierPrices(
        end_user=product.price,
        reseller=product.reseller_price,
        channel=product.si_channel_price,
    )


def check_tier_ordering(prices: TierPrices) -> Optional[str]:
    """Return a message when reseller <= channel <= end user does not hold."""
    reseller = parse_price(prices.reseller)
    channel = parse_price(prices.channel)
    end_user = parse_price(prices.end_user)
    if None in (reseller, channel, end_user):
        return None
    if not reseller <= channel <= end_user:
        return f"reseller {reseller:.2f} / channel {channel:.2f} / end user {end_user:.2f}"
    return None


def validate_catalog(catalog: Catalog, output_path: Optional[Path] = None, verbose: bool = False) -> dict:
    """
    Validate a catalog snapshot.

    Args:
        catalog: Snapshot to check
        output_path: Optional path to write the JSON report to
        verbose: Print progress messages

    Returns:
        Report dictionary
    """
    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": dict(catalog.loaded_from),
        "catalog_hash": catalog.source_hash,
        "metrics": {},
        "warnings": [],
        "errors": [],
    }

    missing_prices = []
    ordering_violations = []
    for product in catalog.products.values():
        prices = _tier_prices(product)
        for tier_name, raw in (("end_user", prices.end_user), ("channel", prices.channel),
                               ("reseller", prices.reseller)):
            if parse_price(raw) is None:
                missing_prices.append(f"{product.id}.{tier_name}")

        violation = check_tier_ordering(prices)
        if violation:
            ordering_violations.append(product.id)
            report["warnings"].append(f"Tier ordering violated for {product.id}: {violation}")

        if product.is_rental and product.rental_prices is None:
            report["errors"].append(f"Rental product {product.id} has no cabinet tier prices")
        if product.is_jumbo and product.fixed_area() is None:
            report["warnings"].append(
                f"Jumbo product {product.id} has no fixed area for P{product.pixel_pitch}, "
                "it will be billed by requested area"
            )

    for name, prices in catalog.controllers.items():
        violation = check_tier_ordering(prices)
        if violation:
            ordering_violations.append(name)
            report["warnings"].append(f"Tier ordering violated for controller {name}: {violation}")

    if missing_prices:
        report["warnings"].append(
            f"{len(missing_prices)} tier prices unavailable, quotations for them will be degraded"
        )

    report["metrics"] = {
        "product_count": len(catalog.products),
        "controller_count": len(catalog.controllers),
        "missing_tier_prices": missing_prices,
        "tier_ordering_violations": ordering_violations,
    }
    report["status"] = "failed" if report["errors"] else "success"

    if verbose:
        print(f"Validated {len(catalog.products)} products and {len(catalog.controllers)} controllers")
        for warning in report["warnings"]:
            print(f"WARNING: {warning}")
        for error in report["errors"]:
            print(f"ERROR: {error}")

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2)

    return report
