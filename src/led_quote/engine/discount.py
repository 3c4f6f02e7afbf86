"""
Discounts on a finished quotation.

A discount never edits the breakdown it is applied to. It produces a new
DiscountedQuotation that carries the original breakdown alongside the
discounted figures.
"""
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInputError
from .models import QuotationBreakdown
from .totals import round_money, to_decimal

DISCOUNT_KINDS = ("led", "controller", "total")


@dataclass(frozen=True)
class DiscountInfo:
    kind: str        # "led" (Section A), "controller" (Section B) or "total"
    percent: float   # 0 < percent <= 100


@dataclass(frozen=True)
class DiscountedQuotation:
    original: QuotationBreakdown
    discount: DiscountInfo
    section_a_total: float
    section_b_total: Optional[float]
    grand_total: float
    discount_amount: float

    def to_dict(self) -> dict:
        return {
            "original": self.original.to_dict(),
            "discount": {"kind": self.discount.kind, "percent": self.discount.percent},
            "section_a_total": self.section_a_total,
            "section_b_total": self.section_b_total,
            "grand_total": self.grand_total,
            "discount_amount": self.discount_amount,
        }


def apply_discount(breakdown: QuotationBreakdown, info: DiscountInfo) -> DiscountedQuotation:
    if info.kind not in DISCOUNT_KINDS:
        raise InvalidInputError(f"Unknown discount type: {info.kind!r}", field="discount.kind")
    if not 0 < info.percent <= 100:
        raise InvalidInputError(f"Discount percent must be in (0, 100], got {info.percent}",
                                field="discount.percent")

    rate = to_decimal(info.percent) / 100
    a_total = to_decimal(breakdown.section_a.total)
    b_total = to_decimal(breakdown.section_b.total) if breakdown.section_b else None
    c_total = to_decimal(breakdown.section_c.total)

    if info.kind == "led":
        amount = round_money(a_total * rate)
        a_total = round_money(a_total - amount)
        total = round_money(a_total + (b_total or 0) + c_total, 0)
    elif info.kind == "controller":
        if b_total is None:
            raise InvalidInputError(
                f"Quotation for {breakdown.product_id} has no controller section to discount",
                field="discount.kind",
            )
        amount = round_money(b_total * rate)
        b_total = round_money(b_total - amount)
        total = round_money(a_total + b_total + c_total, 0)
    else:
        # Whole-quotation discount keeps paise
        amount = round_money(to_decimal(breakdown.grand_total) * rate)
        total = round_money(to_decimal(breakdown.grand_total) - amount)

    return DiscountedQuotation(
        original=breakdown,
        discount=info,
        section_a_total=float(a_total),
        section_b_total=float(b_total) if b_total is not None else None,
        grand_total=float(total),
        discount_amount=float(amount),
    )
