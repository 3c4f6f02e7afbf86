"""
Data models for the quotation pricing engine.

Uses dataclasses for structured, type-safe data representation. Everything
the engine returns is frozen: a consumer that needs a different number must
run the engine again rather than edit a breakdown.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .errors import InvalidInputError, UNRESOLVED_PRICE


class BuyerTier(str, Enum):
    """Pricing category of the purchaser."""
    END_USER = "endUser"
    RESELLER = "reseller"
    CHANNEL = "siChannel"

    @property
    def display_name(self) -> str:
        return _TIER_DISPLAY[self]

    @classmethod
    def parse(cls, value) -> 'BuyerTier':
        """Accept the enum, its stored value, or a display label like 'End User'."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace(" ", "").replace("_", "").replace("-", "")
        if key in _TIER_ALIASES:
            return _TIER_ALIASES[key]
        raise InvalidInputError(f"Unknown buyer tier: {value!r}", field="buyer_tier")


_TIER_DISPLAY = {
    BuyerTier.END_USER: "End User",
    BuyerTier.RESELLER: "Reseller",
    BuyerTier.CHANNEL: "Channel",
}

_TIER_ALIASES = {
    "enduser": BuyerTier.END_USER,
    "endcustomer": BuyerTier.END_USER,
    "reseller": BuyerTier.RESELLER,
    "sichannel": BuyerTier.CHANNEL,
    "channel": BuyerTier.CHANNEL,
}


@dataclass(frozen=True)
class TierPrices:
    """One price per buyer tier (rental cabinets, controllers)."""
    end_user: Any
    reseller: Any
    channel: Any

    def for_tier(self, tier: BuyerTier):
        if tier == BuyerTier.RESELLER:
            return self.reseller
        if tier == BuyerTier.CHANNEL:
            return self.channel
        return self.end_user


@dataclass(frozen=True)
class ProductSpec:
    """A catalog product. Raw tier prices may be 'NA' or None."""
    id: str
    name: str
    category: str
    environment: str
    pixel_pitch: Optional[float] = None
    price: Any = None                # End User
    si_channel_price: Any = None     # Channel
    reseller_price: Any = None       # Reseller
    rental_prices: Optional[TierPrices] = None
    cabinet_width_mm: Optional[float] = None
    cabinet_height_mm: Optional[float] = None
    fixed_area_by_pitch: dict[float, float] = field(default_factory=dict)

    @property
    def is_rental(self) -> bool:
        return "rental" in (self.category or "").lower()

    @property
    def is_jumbo(self) -> bool:
        return "jumbo" in (self.category or "").lower() or (self.id or "").lower().startswith("jumbo-")

    @property
    def is_indoor(self) -> bool:
        return (self.environment or "").strip().lower() == "indoor"

    def fixed_area(self) -> Optional[float]:
        """Fixed billed area for this product's pixel pitch, if any."""
        if self.pixel_pitch is None:
            return None
        return self.fixed_area_by_pitch.get(float(self.pixel_pitch))


@dataclass(frozen=True)
class CabinetGrid:
    columns: int
    rows: int

    @property
    def count(self) -> int:
        return self.columns * self.rows


@dataclass(frozen=True)
class PricingOverride:
    """Operator-supplied structure and installation prices."""
    structure_price: Optional[float] = None
    installation_price: Optional[float] = None
    installation_mode: str = "fixed"  # "fixed" or "per_sqft"

    @property
    def complete(self) -> bool:
        return self.structure_price is not None and self.installation_price is not None


@dataclass
class DisplayRequest:
    """A single pricing attempt for one product."""
    width_mm: Optional[float]
    height_mm: Optional[float]
    buyer_tier: Any
    cabinet_grid: Optional[CabinetGrid] = None
    controller: Optional[str] = None
    override: Optional[PricingOverride] = None
    product_id: Optional[str] = None

    def to_dict(self) -> dict:
        tier = self.buyer_tier.value if isinstance(self.buyer_tier, BuyerTier) else self.buyer_tier
        return {
            "product_id": self.product_id,
            "width_mm": self.width_mm,
            "height_mm": self.height_mm,
            "buyer_tier": tier,
            "cabinet_grid": (
                {"columns": self.cabinet_grid.columns, "rows": self.cabinet_grid.rows}
                if self.cabinet_grid else None
            ),
            "controller": self.controller,
            "override": (
                {
                    "structure_price": self.override.structure_price,
                    "installation_price": self.override.installation_price,
                    "installation_mode": self.override.installation_mode,
                }
                if self.override else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DisplayRequest':
        grid = data.get("cabinet_grid")
        override = data.get("override")
        return cls(
            width_mm=data.get("width_mm"),
            height_mm=data.get("height_mm"),
            buyer_tier=data.get("buyer_tier"),
            cabinet_grid=CabinetGrid(int(grid["columns"]), int(grid["rows"])) if grid else None,
            controller=data.get("controller"),
            override=PricingOverride(**override) if override else None,
            product_id=data.get("product_id"),
        )


@dataclass(frozen=True)
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class PricingIssue:
    """A soft condition the engine tolerated while pricing."""
    kind: str
    field: str
    message: str
    raw_value: Optional[str] = None


@dataclass(frozen=True)
class SectionBreakdown:
    base_price: float
    tax_amount: float
    total: float

    def to_dict(self) -> dict:
        return {"base_price": self.base_price, "tax_amount": self.tax_amount, "total": self.total}


@dataclass(frozen=True)
class QuotationBreakdown:
    """
    Complete, immutable result of one pricing computation.

    Section A is the display product, B the controller (None for jumbo
    products), C the combined structure and installation.
    """
    product_id: str
    product_name: str
    buyer_tier: BuyerTier
    quantity: float
    quantity_unit: str
    unit_price: float
    section_a: SectionBreakdown
    section_b: Optional[SectionBreakdown]
    section_c: SectionBreakdown
    grand_total: float
    tax_rate: float
    area_sqft: float
    controller: Optional[str] = None
    issues: tuple[PricingIssue, ...] = ()
    trace: tuple[TraceStep, ...] = ()

    @property
    def degraded(self) -> bool:
        return any(issue.kind == UNRESOLVED_PRICE for issue in self.issues)

    @property
    def unresolved_fields(self) -> tuple[str, ...]:
        return tuple(issue.field for issue in self.issues if issue.kind == UNRESOLVED_PRICE)

    @property
    def unresolved_field(self) -> Optional[str]:
        fields = self.unresolved_fields
        return fields[0] if fields else None

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """JSON-ready form handed to persistence and the API."""
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "buyer_tier": self.buyer_tier.value,
            "buyer_tier_name": self.buyer_tier.display_name,
            "quantity": self.quantity,
            "quantity_unit": self.quantity_unit,
            "unit_price": self.unit_price,
            "section_a": self.section_a.to_dict(),
            "section_b": self.section_b.to_dict() if self.section_b else None,
            "section_c": self.section_c.to_dict(),
            "grand_total": self.grand_total,
            "tax_rate": self.tax_rate,
            "area_sqft": self.area_sqft,
            "controller": self.controller,
            "degraded": self.degraded,
            "unresolved_fields": list(self.unresolved_fields),
            "issues": [
                {"kind": i.kind, "field": i.field, "message": i.message, "raw_value": i.raw_value}
                for i in self.issues
            ],
        }
