"""
Unit Price Resolver - selects the per-unit product price for a buyer tier.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..config.settings import PricingConstants, DEFAULT_CONSTANTS
from .errors import UNRESOLVED_PRICE
from .models import ProductSpec, BuyerTier, PricingIssue

logger = logging.getLogger(__name__)

NOT_AVAILABLE = {"NA", "N/A", ""}

_STANDARD_FIELDS = {
    BuyerTier.END_USER: "price",
    BuyerTier.CHANNEL: "si_channel_price",
    BuyerTier.RESELLER: "reseller_price",
}

_RENTAL_FIELDS = {
    BuyerTier.END_USER: "rental_prices.end_user",
    BuyerTier.CHANNEL: "rental_prices.channel",
    BuyerTier.RESELLER: "rental_prices.reseller",
}


@dataclass
class UnitPriceResult:
    price: float
    source_field: str
    issue: Optional[PricingIssue] = None


def parse_price(raw) -> Optional[float]:
    """Interpret a raw catalog price; None when it is absent or unusable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if text.upper() in NOT_AVAILABLE:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value


def resolve_unit_price(
    product: ProductSpec,
    tier: BuyerTier,
    constants: PricingConstants = DEFAULT_CONSTANTS,
) -> UnitPriceResult:
    """
    Pick the unit price for the tier.

    Rental products with cabinet tiers use those; everything else uses
    price / si_channel_price / reseller_price. A missing or non-numeric
    value falls back to the default unit price and is reported as an issue.
    """
    if product.is_rental and product.rental_prices is not None:
        source_field = _RENTAL_FIELDS[tier]
        raw = product.rental_prices.for_tier(tier)
    else:
        source_field = _STANDARD_FIELDS[tier]
        raw = getattr(product, source_field)

    price = parse_price(raw)
    if price is not None:
        return UnitPriceResult(price=price, source_field=source_field)

    logger.warning(
        "No usable %s price for product %s (field %s = %r), using default %.2f",
        tier.display_name, product.id, source_field, raw, constants.default_unit_price,
    )
    issue = PricingIssue(
        kind=UNRESOLVED_PRICE,
        field=source_field,
        message=f"{tier.display_name} price missing for {product.id}, default unit price used",
        raw_value=None if raw is None else str(raw),
    )
    return UnitPriceResult(price=constants.default_unit_price, source_field=source_field, issue=issue)
