"""
Quotation Pricing Engine - assembles a QuotationBreakdown from a product
and a display request.

compute_quotation() is the one place quotation arithmetic happens. The
preview, the document renderer, the quotation store and the dashboard all
consume its breakdown and never recompute partial totals:

1. Validate inputs (fail fast on missing or malformed fields)
2. Quantity: cabinets, fixed jumbo area or requested area
3. Unit price for the buyer tier (Section A)
4. Controller price for the buyer tier (Section B, omitted for jumbo)
5. Structure + installation from screen area and environment (Section C)
6. Tax per section, grand total rounded to the rupee
"""
import logging
from typing import TYPE_CHECKING, Mapping, Optional

from ..config.settings import PricingConstants, DEFAULT_CONSTANTS
from .errors import MissingInputError, InvalidInputError
from .models import (
    BuyerTier, DisplayRequest, ProductSpec, QuotationBreakdown, TierPrices, TraceStep,
)
from .controller_price import resolve_controller_price
from .quantity import calculate_quantity, screen_area_sqft
from .structure import calculate_structure_and_installation, cabinet_count
from .totals import build_section, grand_total, round_money
from .unit_price import resolve_unit_price

if TYPE_CHECKING:
    from ..data.catalog import Catalog

logger = logging.getLogger(__name__)


def _money(value: float) -> str:
    return f"₹{value:,.2f}"


def _require_dimension(value, field: str) -> float:
    if value is None:
        raise MissingInputError(f"{field} is required", field=field)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be numeric, got {value!r}", field=field) from None


def _validate(product: Optional[ProductSpec], request: Optional[DisplayRequest]) -> tuple[float, float, BuyerTier]:
    if product is None:
        raise MissingInputError("Product specification is required", field="product")
    if request is None:
        raise MissingInputError("Display request is required", field="request")
    if not product.id:
        raise MissingInputError("Product id is required", field="product.id")
    if product.category is None:
        raise MissingInputError(f"Product {product.id} has no category", field="product.category")
    if not product.environment:
        raise MissingInputError(f"Product {product.id} has no environment", field="product.environment")
    if request.buyer_tier is None:
        raise MissingInputError("Buyer tier is required", field="buyer_tier")

    width = _require_dimension(request.width_mm, "width_mm")
    height = _require_dimension(request.height_mm, "height_mm")
    return width, height, BuyerTier.parse(request.buyer_tier)


def compute_quotation(
    product: ProductSpec,
    request: DisplayRequest,
    controller_prices: Optional[Mapping[str, TierPrices]] = None,
    constants: Optional[PricingConstants] = None,
) -> QuotationBreakdown:
    """
    Price one display configuration.

    Raises MissingInputError / InvalidInputError before any arithmetic when
    an input is unusable. Unresolved prices do not raise: the breakdown is
    returned with degraded=True and the failing field named.
    """
    constants = constants or DEFAULT_CONSTANTS
    controller_prices = controller_prices or {}
    width, height, tier = _validate(product, request)

    issues = []
    trace = [
        TraceStep("Product", f"{product.name} ({product.category}, {product.environment})", product.id),
        TraceStep("Buyer Tier", "Pricing tier", tier.display_name),
    ]

    # Section A: display product
    quantity = calculate_quantity(product, width, height, request.cabinet_grid, constants)
    issues.extend(quantity.issues)
    trace.append(TraceStep("Quantity", quantity.rule, f"{quantity.quantity} {quantity.unit}"))

    unit_price = resolve_unit_price(product, tier, constants)
    if unit_price.issue:
        issues.append(unit_price.issue)
        trace.append(TraceStep("Unit Price", f"{unit_price.source_field} unavailable, default used",
                               _money(unit_price.price)))
    else:
        trace.append(TraceStep("Unit Price", f"Using {unit_price.source_field}", _money(unit_price.price)))

    product_base = round_money(round_money(unit_price.price) * round_money(quantity.quantity))
    section_a = build_section(product_base, constants.tax_rate)
    trace.append(TraceStep("Section A", f"{quantity.quantity} × {_money(unit_price.price)}",
                           _money(section_a.total)))

    # Section B: controller
    controller = resolve_controller_price(request.controller, tier, product, controller_prices)
    section_b = None
    if controller.applicable:
        if controller.issue:
            issues.append(controller.issue)
        section_b = build_section(controller.price, constants.tax_rate)
        trace.append(TraceStep("Section B", f"Controller {controller.normalized_name or 'none'}",
                               _money(section_b.total)))
    else:
        trace.append(TraceStep("Section B", "Omitted, controller included in jumbo pricing"))

    # Section C: structure + installation, always from the requested area
    area = screen_area_sqft(width, height, constants)
    cabinets = cabinet_count(product, width, height, request.cabinet_grid)
    structure = calculate_structure_and_installation(
        product.environment, area, cabinets, request.override, constants,
    )
    if structure.note:
        trace.append(TraceStep("Override", structure.note))
    trace.append(TraceStep(
        "Structure",
        f"{structure.source}, {area} sq ft, {cabinets} cabinets",
        f"{_money(structure.structure_price)} + {_money(structure.installation_price)}",
    ))
    section_c = build_section(structure.base_price, constants.tax_rate)

    total = grand_total(section_a, section_b, section_c)
    trace.append(TraceStep("Grand Total", "A + B + C, rounded to the rupee", _money(total)))

    breakdown = QuotationBreakdown(
        product_id=product.id,
        product_name=product.name,
        buyer_tier=tier,
        quantity=quantity.quantity,
        quantity_unit=quantity.unit,
        unit_price=unit_price.price,
        section_a=section_a,
        section_b=section_b,
        section_c=section_c,
        grand_total=total,
        tax_rate=constants.tax_rate,
        area_sqft=area,
        controller=request.controller if controller.applicable else None,
        issues=tuple(issues),
        trace=tuple(trace),
    )
    logger.debug("Priced %s for %s: %.0f (degraded=%s)",
                 product.id, tier.display_name, total, breakdown.degraded)
    return breakdown


class PricingEngine:
    """
    Catalog-bound entry point.

    Holds one read-only catalog snapshot; every calculate() call prices
    against that snapshot, so a catalog reload is never seen mid-computation.
    """

    def __init__(self, catalog: "Catalog", constants: Optional[PricingConstants] = None):
        self.catalog = catalog
        self.constants = constants or DEFAULT_CONSTANTS

    def calculate(self, request: DisplayRequest) -> QuotationBreakdown:
        """Look up request.product_id and price the request."""
        if request is None:
            raise MissingInputError("Display request is required", field="request")
        if not request.product_id:
            raise MissingInputError("Product id is required", field="product_id")
        product = self.catalog.get_product(request.product_id)
        return compute_quotation(product, request, self.catalog.controllers, self.constants)
