"""
Pydantic request/response models for the HTTP API.
"""
from typing import Optional

from pydantic import BaseModel, Field

from ..engine.discount import DiscountInfo
from ..engine.models import CabinetGrid, DisplayRequest, PricingOverride


class QuoteRequest(BaseModel):
    """Request model for pricing one display configuration."""
    product_id: str
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    buyer_tier: Optional[str] = None
    cabinet_columns: Optional[int] = Field(default=None, ge=0)
    cabinet_rows: Optional[int] = Field(default=None, ge=0)
    controller: Optional[str] = None
    structure_price: Optional[float] = None
    installation_price: Optional[float] = None
    installation_mode: str = "fixed"
    discount_type: Optional[str] = None
    discount_percent: Optional[float] = None

    def to_display_request(self) -> DisplayRequest:
        grid = None
        if self.cabinet_columns is not None and self.cabinet_rows is not None:
            grid = CabinetGrid(self.cabinet_columns, self.cabinet_rows)
        override = None
        if self.structure_price is not None or self.installation_price is not None:
            override = PricingOverride(
                structure_price=self.structure_price,
                installation_price=self.installation_price,
                installation_mode=self.installation_mode,
            )
        return DisplayRequest(
            width_mm=self.width_mm,
            height_mm=self.height_mm,
            buyer_tier=self.buyer_tier,
            cabinet_grid=grid,
            controller=self.controller,
            override=override,
            product_id=self.product_id,
        )

    def discount(self) -> Optional[DiscountInfo]:
        if not self.discount_type:
            return None
        return DiscountInfo(kind=self.discount_type, percent=self.discount_percent or 0)


class CustomerInfo(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class QuotationCreate(QuoteRequest):
    """Request model for pricing and storing a quotation."""
    sales_person: str
    customer: CustomerInfo
    message: str = ""
    allow_degraded: bool = False


class StatusUpdate(BaseModel):
    status: str


class QuotationResponse(BaseModel):
    """Response model for a stored quotation."""
    quotation_id: str
    sales_person: str
    customer: dict
    status: str
    message: str
    created_at: str
    updated_at: Optional[str]
    request: dict
    breakdown: dict
    discount: Optional[dict] = None
