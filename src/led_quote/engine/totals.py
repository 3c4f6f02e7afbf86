"""
Section totals and tax aggregation.

All money arithmetic runs through Decimal with half-up rounding so the
preview, the document, the stored record and the dashboard agree to the
paisa. Values leave this module as floats.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .models import SectionBreakdown


def to_decimal(value) -> Decimal:
    # str() keeps the shortest repr of a float, so 0.18 stays 0.18
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_money(value, places: int = 2) -> Decimal:
    """Round half-up to the given number of decimal places."""
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def build_section(base_price, tax_rate) -> SectionBreakdown:
    """Apply the flat tax rate to one priced section."""
    base = round_money(base_price)
    tax = round_money(base * to_decimal(tax_rate))
    total = round_money(base + tax)
    return SectionBreakdown(base_price=float(base), tax_amount=float(tax), total=float(total))


def grand_total(
    section_a: SectionBreakdown,
    section_b: Optional[SectionBreakdown],
    section_c: SectionBreakdown,
) -> float:
    """Sum the section totals and round to the whole rupee."""
    total = to_decimal(section_a.total) + to_decimal(section_c.total)
    if section_b is not None:
        total += to_decimal(section_b.total)
    return float(round_money(total, 0))
