"""
Structure & Installation Calculator (Section C).

Indoor screens pay structure per cabinet, outdoor screens per square foot.
Installation is always per square foot. An operator override replaces both.
"""
from dataclasses import dataclass
from typing import Optional

from ..config.settings import PricingConstants, DEFAULT_CONSTANTS
from .models import ProductSpec, CabinetGrid, PricingOverride
from .totals import round_money

SOURCE_OVERRIDE = "override"
SOURCE_RATES = "rates"


@dataclass
class StructureResult:
    structure_price: float
    installation_price: float
    source: str
    cabinet_count: int
    note: str = ""

    @property
    def base_price(self) -> float:
        return float(round_money(round_money(self.structure_price) + round_money(self.installation_price)))


def cabinet_count(product: ProductSpec, width_mm: float, height_mm: float,
                  grid: Optional[CabinetGrid] = None) -> int:
    """
    Cabinets in the layout, used for indoor structure pricing.

    A grid with a non-positive side counts as 1. Without a grid the count
    is derived from the requested size and the product's cabinet size;
    it is not a flat single cabinet.
    """
    if grid is not None:
        return grid.count if grid.columns > 0 and grid.rows > 0 else 1
    if not product.cabinet_width_mm or not product.cabinet_height_mm:
        return 1
    try:
        columns = max(1, round(width_mm / product.cabinet_width_mm))
        rows = max(1, round(height_mm / product.cabinet_height_mm))
    except (ValueError, OverflowError):
        # NaN or infinite dimensions
        return 1
    return int(columns * rows)


def calculate_structure_and_installation(
    environment: str,
    area_sqft: float,
    cabinets: int,
    override: Optional[PricingOverride] = None,
    constants: PricingConstants = DEFAULT_CONSTANTS,
) -> StructureResult:
    note = ""
    if override is not None and override.complete:
        if override.installation_mode == "per_sqft":
            installation = float(round_money(area_sqft * override.installation_price))
        else:
            installation = float(override.installation_price)
        return StructureResult(
            structure_price=float(override.structure_price),
            installation_price=installation,
            source=SOURCE_OVERRIDE,
            cabinet_count=cabinets,
        )
    if override is not None:
        note = "partial override ignored, both structure and installation prices are required"

    if (environment or "").strip().lower() == "indoor":
        structure = round_money(cabinets * constants.indoor_structure_per_cabinet)
    else:
        structure = round_money(area_sqft * constants.outdoor_structure_per_sqft)
    installation = round_money(area_sqft * constants.installation_per_sqft)

    return StructureResult(
        structure_price=float(structure),
        installation_price=float(installation),
        source=SOURCE_RATES,
        cabinet_count=cabinets,
        note=note,
    )
