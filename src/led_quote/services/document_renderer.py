"""
Document Renderer - lays a QuotationBreakdown out as a plain-text quotation.

Every figure printed comes straight from the breakdown.
"""
from typing import Optional

from ..engine.models import QuotationBreakdown
from ..engine.totals import round_money

RULE = "-" * 60


def format_indian_number(value: float, decimals: int = 0) -> str:
    """Group digits the Indian way: 1234567.5 -> '12,34,567.50' (decimals=2)."""
    rounded = round_money(value, decimals)
    sign = "-" if rounded < 0 else ""
    text = f"{abs(rounded):.{decimals}f}"
    whole, _, fraction = text.partition(".")
    if len(whole) > 3:
        head, last_three = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [last_three])
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def format_inr(value: float, decimals: int = 2) -> str:
    return f"₹{format_indian_number(value, decimals)}"


def _pct(rate: float) -> str:
    return f"{rate * 100:g}%"


def render_quotation(
    breakdown: QuotationBreakdown,
    customer: Optional[dict] = None,
    sales_person: Optional[str] = None,
    quotation_id: Optional[str] = None,
) -> str:
    """Render a quotation as text. Jumbo quotations have no Section B."""
    customer = customer or {}
    tax = _pct(breakdown.tax_rate)
    lines = []
    if quotation_id:
        lines.append(f"Quotation: {quotation_id}")
    if customer.get("name"):
        lines.append(f"Customer: {customer['name']}")
    for key in ("email", "phone"):
        if customer.get(key):
            lines.append(f"{key.title()}: {customer[key]}")
    if sales_person:
        lines.append(f"Sales Person: {sales_person}")
    lines.append(f"Pricing: {breakdown.buyer_tier.display_name}")
    lines.append(RULE)

    a = breakdown.section_a
    quantity_label = "cabinets" if breakdown.quantity_unit == "cabinets" else "sq ft"
    lines.append(f"A. {breakdown.product_name}")
    lines.append(f"   Quantity: {breakdown.quantity} {quantity_label} @ {format_inr(breakdown.unit_price)}")
    lines.append(f"   Price: {format_inr(a.base_price)}  GST ({tax}): {format_inr(a.tax_amount)}")
    lines.append(f"   Total A: {format_inr(a.total)}")

    b = breakdown.section_b
    if b is not None:
        lines.append(f"B. Control System: {breakdown.controller or 'None selected'}")
        lines.append(f"   Price: {format_inr(b.base_price)}  GST ({tax}): {format_inr(b.tax_amount)}")
        lines.append(f"   Total B: {format_inr(b.total)}")

    c = breakdown.section_c
    lines.append("C. Structure and Installation")
    lines.append(f"   Price: {format_inr(c.base_price)}  Combined GST ({tax}): {format_inr(c.tax_amount)}")
    lines.append(f"   Total C: {format_inr(c.total)}")

    lines.append(RULE)
    label = "(A + B + C)" if b is not None else "(A + C)"
    lines.append(f"Grand Total {label}: {format_inr(breakdown.grand_total, 0)}")
    if breakdown.degraded:
        lines.append(f"NOTE: provisional pricing, unresolved: {', '.join(breakdown.unresolved_fields)}")
    return "\n".join(lines)
