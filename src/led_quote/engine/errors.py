"""
Error taxonomy for the pricing engine.

Fatal conditions are raised and abort the computation. Soft conditions
(unresolved prices, clamped quantities) are recorded on the breakdown as
PricingIssue records instead, see models.py.
"""
from typing import Optional


UNRESOLVED_PRICE = "UnresolvedPriceError"
OUT_OF_RANGE = "OutOfRangeWarning"


class PricingError(Exception):
    """Base class for errors that stop a quotation from being priced."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingInputError(PricingError):
    """A required input (product, dimensions, buyer tier...) is absent."""


class UnknownProductError(MissingInputError):
    """The requested product id is not in the catalog snapshot."""

    def __init__(self, product_id: str):
        super().__init__(f"Unknown product id: {product_id!r}", field="product_id")
        self.product_id = product_id


class InvalidInputError(PricingError):
    """An input is present but cannot be interpreted."""
