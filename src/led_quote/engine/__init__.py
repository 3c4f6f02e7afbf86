"""Engine subpackage - quotation pricing logic."""
from .pricing_engine import PricingEngine, compute_quotation
from .models import (
    BuyerTier, CabinetGrid, DisplayRequest, PricingOverride, ProductSpec,
    QuotationBreakdown, SectionBreakdown, TierPrices,
)
from .errors import PricingError, MissingInputError, InvalidInputError, UnknownProductError

__all__ = [
    'PricingEngine', 'compute_quotation',
    'BuyerTier', 'CabinetGrid', 'DisplayRequest', 'PricingOverride', 'ProductSpec',
    'QuotationBreakdown', 'SectionBreakdown', 'TierPrices',
    'PricingError', 'MissingInputError', 'InvalidInputError', 'UnknownProductError',
]
