"""
Shared API state - the catalog store and quotation service used by the routers.

Routers reach these through the get_* dependency functions so tests can
swap them with app.dependency_overrides.
"""
from fastapi import Depends

from ..config.settings import get_settings
from ..data.catalog import CatalogStore
from ..engine.pricing_engine import PricingEngine
from ..services.quotation_service import QuotationService

settings = get_settings()

catalog_store = CatalogStore.from_files(settings.products_csv, settings.controllers_csv)
quotation_service = QuotationService(settings.quotation_store, id_prefix=settings.id_prefix)


def get_catalog_store() -> CatalogStore:
    return catalog_store


def get_quotation_service() -> QuotationService:
    return quotation_service


def get_engine(store: CatalogStore = Depends(get_catalog_store)) -> PricingEngine:
    """A fresh engine bound to the current catalog snapshot."""
    return PricingEngine(store.snapshot(), settings.constants)
