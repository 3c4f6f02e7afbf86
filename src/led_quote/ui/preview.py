"""
Table rows for the quotation preview.

Every amount shown is read from the breakdown; the preview never adds or
multiplies prices itself.
"""
from ..engine.models import QuotationBreakdown
from ..services.document_renderer import format_inr


def preview_rows(breakdown: QuotationBreakdown) -> list[dict]:
    """One row per section plus the grand total. Jumbo quotations have no B row."""
    unit = "cabinets" if breakdown.quantity_unit == "cabinets" else "sq ft"
    rows = [{
        'Section': 'A',
        'Item': breakdown.product_name,
        'Quantity': f"{breakdown.quantity:g} {unit}",
        'Unit Price': format_inr(breakdown.unit_price),
        'Price': format_inr(breakdown.section_a.base_price),
        'GST': format_inr(breakdown.section_a.tax_amount),
        'Total': format_inr(breakdown.section_a.total),
    }]
    if breakdown.section_b is not None:
        b = breakdown.section_b
        rows.append({
            'Section': 'B',
            'Item': f"Controller: {breakdown.controller or 'none'}",
            'Quantity': "1",
            'Unit Price': format_inr(b.base_price),
            'Price': format_inr(b.base_price),
            'GST': format_inr(b.tax_amount),
            'Total': format_inr(b.total),
        })
    c = breakdown.section_c
    rows.append({
        'Section': 'C',
        'Item': 'Structure and Installation',
        'Quantity': f"{breakdown.area_sqft:g} sq ft",
        'Unit Price': '',
        'Price': format_inr(c.base_price),
        'GST': format_inr(c.tax_amount),
        'Total': format_inr(c.total),
    })
    rows.append({
        'Section': 'Grand Total',
        'Item': '(A + B + C)' if breakdown.section_b is not None else '(A + C)',
        'Quantity': '',
        'Unit Price': '',
        'Price': '',
        'GST': '',
        'Total': format_inr(breakdown.grand_total, 0),
    })
    return rows
