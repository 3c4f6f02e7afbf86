import logging
from dataclasses import asdict
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..data.build_catalog import validate_catalog
from ..data.catalog import CatalogStore
from ..engine.discount import apply_discount
from ..engine.errors import PricingError
from ..engine.pricing_engine import PricingEngine
from ..services.document_renderer import render_quotation
from .quotations_api import pricing_http_error, router as quotations_router
from .schemas import QuoteRequest
from .state import get_catalog_store, get_engine, get_quotation_service

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LED Quotation API",
    description="Pricing engine and quotation store for LED display quotations",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quotations_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "LED Quotation API Active"}


@app.post("/quote")
async def calculate_quote(req: QuoteRequest, engine: PricingEngine = Depends(get_engine)):
    """Price one configuration. Nothing is stored."""
    try:
        breakdown = engine.calculate(req.to_display_request())
        discount = req.discount()
        discounted = apply_discount(breakdown, discount) if discount else None
    except PricingError as e:
        raise pricing_http_error(e)

    result = breakdown.to_dict()
    result["trace"] = [asdict(step) for step in breakdown.trace]
    result["discount"] = discounted.to_dict() if discounted else None
    result["document"] = render_quotation(breakdown)
    return result


@app.get("/catalog")
async def get_catalog(search: Optional[str] = None, store: CatalogStore = Depends(get_catalog_store)):
    catalog = store.snapshot()
    products = list(catalog.products.values())
    if search:
        needle = search.lower()
        products = [p for p in products if needle in p.id.lower() or needle in p.name.lower()]

    return {
        "catalog_hash": catalog.source_hash,
        "products": [
            {
                "id": p.id,
                "name": p.name,
                "category": p.category,
                "environment": p.environment,
                "pixel_pitch": p.pixel_pitch,
                "rental": p.is_rental,
                "jumbo": p.is_jumbo,
            }
            for p in products
        ],
        "controllers": sorted(catalog.controllers),
    }


@app.get("/catalog/validation")
async def get_catalog_validation(store: CatalogStore = Depends(get_catalog_store)):
    return validate_catalog(store.snapshot())


@app.post("/catalog/reload")
async def reload_catalog(store: CatalogStore = Depends(get_catalog_store)):
    """Build a fresh snapshot from disk. In-flight requests keep the old one."""
    try:
        catalog = store.reload()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Catalog reload failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return {"catalog_hash": catalog.source_hash, "product_count": len(catalog.products)}


@app.get("/system/status")
async def get_status(store: CatalogStore = Depends(get_catalog_store),
                     service=Depends(get_quotation_service)):
    catalog = store.snapshot()
    return {
        "engine_active": True,
        "catalog_hash": catalog.source_hash,
        "product_count": len(catalog.products),
        "controller_count": len(catalog.controllers),
        "quotation_count": len(service.list_quotations()),
    }
