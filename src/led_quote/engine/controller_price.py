"""
Controller Price Resolver - prices the controller/processor line (Section B).
"""
import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import UNRESOLVED_PRICE
from .models import ProductSpec, BuyerTier, TierPrices, PricingIssue

logger = logging.getLogger(__name__)

VENDOR_PREFIX = re.compile(r"^\s*nova(?:star)?\s+", re.IGNORECASE)


@dataclass
class ControllerPriceResult:
    price: float
    applicable: bool
    normalized_name: Optional[str] = None
    issue: Optional[PricingIssue] = None


def normalize_controller_name(name: Optional[str]) -> Optional[str]:
    """'Nova TB2 ' -> 'TB2'. Returns None for blank input."""
    if name is None:
        return None
    stripped = VENDOR_PREFIX.sub("", str(name)).strip()
    return stripped or None


def lookup_controller(name: str, controller_prices: Mapping[str, TierPrices]) -> Optional[TierPrices]:
    """Exact match first, then case-insensitive."""
    if name in controller_prices:
        return controller_prices[name]
    folded = name.casefold()
    for key, prices in controller_prices.items():
        if key.casefold() == folded:
            return prices
    return None


def resolve_controller_price(
    name: Optional[str],
    tier: BuyerTier,
    product: ProductSpec,
    controller_prices: Mapping[str, TierPrices],
) -> ControllerPriceResult:
    if product.is_jumbo:
        # Jumbo prices include the controller
        return ControllerPriceResult(price=0.0, applicable=False)

    normalized = normalize_controller_name(name)
    if normalized is None:
        return ControllerPriceResult(price=0.0, applicable=True)

    prices = lookup_controller(normalized, controller_prices)
    if prices is not None:
        return ControllerPriceResult(
            price=float(prices.for_tier(tier)),
            applicable=True,
            normalized_name=normalized,
        )

    logger.warning("Unrecognized controller %r (normalized %r), pricing it at 0", name, normalized)
    issue = PricingIssue(
        kind=UNRESOLVED_PRICE,
        field="controller",
        message=f"Controller {name!r} not found in price table",
        raw_value=str(name),
    )
    return ControllerPriceResult(price=0.0, applicable=True, normalized_name=normalized, issue=issue)
