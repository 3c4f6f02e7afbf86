"""
Quantity Calculator - converts a requested display size into the billable
quantity for the product family.

Rental products are billed per cabinet, jumbo products by a fixed area per
pixel pitch, everything else by the requested area in square feet.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from ..config.settings import PricingConstants, DEFAULT_CONSTANTS
from .errors import MissingInputError, OUT_OF_RANGE
from .models import ProductSpec, CabinetGrid, PricingIssue
from .totals import round_money

logger = logging.getLogger(__name__)

UNIT_SQFT = "sqft"
UNIT_CABINETS = "cabinets"


@dataclass
class QuantityResult:
    quantity: float
    unit: str
    rule: str
    issues: list[PricingIssue] = field(default_factory=list)


def mm_to_feet(mm: float, constants: PricingConstants = DEFAULT_CONSTANTS) -> float:
    return (mm / 1000) * constants.feet_per_meter


def _not_positive(value) -> bool:
    return value is None or math.isnan(value) or value <= 0


def _side_product(a: float, b: float) -> Optional[float]:
    """a × b, or None when either side is NaN, zero or negative."""
    if _not_positive(a) or _not_positive(b):
        return None
    return a * b


def screen_area_sqft(width_mm: float, height_mm: float,
                     constants: PricingConstants = DEFAULT_CONSTANTS) -> float:
    """Requested screen area in square feet, rounded to 2 decimals."""
    area = _side_product(mm_to_feet(width_mm, constants), mm_to_feet(height_mm, constants))
    if area is None or math.isinf(area):
        return 0.0
    return float(round_money(area))


def _clamp(quantity: Optional[float], constants: PricingConstants) -> tuple[float, Optional[PricingIssue]]:
    if quantity is None or math.isnan(quantity) or quantity <= 0:
        issue = PricingIssue(
            kind=OUT_OF_RANGE,
            field="quantity",
            message=f"Quantity {quantity} is not positive, using {constants.fallback_quantity}",
            raw_value=str(quantity),
        )
        return constants.fallback_quantity, issue

    clamped = max(constants.min_quantity, min(quantity, constants.max_quantity))
    if clamped != quantity:
        issue = PricingIssue(
            kind=OUT_OF_RANGE,
            field="quantity",
            message=f"Quantity {quantity} clamped to {clamped}",
            raw_value=str(quantity),
        )
        return clamped, issue
    return quantity, None


def calculate_quantity(
    product: ProductSpec,
    width_mm: float,
    height_mm: float,
    grid: Optional[CabinetGrid] = None,
    constants: PricingConstants = DEFAULT_CONSTANTS,
) -> QuantityResult:
    """Resolve the billable quantity and its unit label."""
    if product.is_rental:
        if grid is None:
            raise MissingInputError(
                f"Cabinet grid is required for rental product {product.id}",
                field="cabinet_grid",
            )
        cabinets = _side_product(grid.columns, grid.rows)
        raw = float(cabinets) if cabinets is not None else None
        unit, rule = UNIT_CABINETS, f"{grid.columns} × {grid.rows} cabinets"
    elif product.is_jumbo and product.fixed_area() is not None:
        raw, unit, rule = product.fixed_area(), UNIT_SQFT, f"fixed jumbo area for P{product.pixel_pitch}"
    else:
        area = _side_product(mm_to_feet(width_mm, constants), mm_to_feet(height_mm, constants))
        raw = area if area is None or math.isinf(area) else float(round_money(area))
        unit, rule = UNIT_SQFT, f"{width_mm} mm × {height_mm} mm"

    quantity, issue = _clamp(raw, constants)
    result = QuantityResult(quantity=quantity, unit=unit, rule=rule)
    if issue:
        logger.warning("Quantity out of range for product %s: %s", product.id, issue.message)
        result.issues.append(issue)
    return result
