"""
Shared test fixtures: packaged catalog, engine, small in-memory catalog and API client.
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

# Keep the API module's default store out of the project root
os.environ["LED_QUOTE_STORE"] = os.path.join(tempfile.mkdtemp(prefix="led_quote_"), "quotations.json")

from led_quote.config.settings import PACKAGE_ROOT
from led_quote.data.catalog import build_catalog, load_catalog
from led_quote.engine import PricingEngine, ProductSpec, TierPrices
from led_quote.services.quotation_service import QuotationService

DATA_DIR = PACKAGE_ROOT / 'data'


@pytest.fixture(scope="session")
def catalog():
    """The packaged CSV catalog."""
    return load_catalog(DATA_DIR / 'products.csv', DATA_DIR / 'controllers.csv')


@pytest.fixture(scope="session")
def engine(catalog):
    return PricingEngine(catalog)


@pytest.fixture
def indoor_product():
    return ProductSpec(
        id="test-indoor", name="Test Indoor P1.5", category="Test Series", environment="indoor",
        pixel_pitch=1.5, price=27200, si_channel_price=24480, reseller_price=23120,
        cabinet_width_mm=600, cabinet_height_mm=337.5,
    )


@pytest.fixture
def outdoor_product():
    return ProductSpec(
        id="test-outdoor", name="Test Outdoor P4", category="Test Series", environment="outdoor",
        pixel_pitch=4.0, price=10300, si_channel_price=9270, reseller_price=8755,
        cabinet_width_mm=960, cabinet_height_mm=960,
    )


@pytest.fixture
def rental_product():
    return ProductSpec(
        id="test-rental", name="Test Rental P2.6", category="Rental Series", environment="indoor",
        pixel_pitch=2.6, rental_prices=TierPrices(end_user=28200, reseller=25600, channel=26400),
        cabinet_width_mm=500, cabinet_height_mm=500,
    )


@pytest.fixture
def jumbo_product():
    return ProductSpec(
        id="jumbo-test-p6", name="Test Jumbo P6", category="Jumbo Series", environment="outdoor",
        pixel_pitch=6.0, price=6600, si_channel_price=6000, reseller_price=5600,
        fixed_area_by_pitch={6.0: 34.88},
    )


@pytest.fixture
def controller_prices():
    return {
        "TB2": TierPrices(end_user=35000, reseller=29800, channel=31500),
        "VX400 Pro": TierPrices(end_user=98000, reseller=83300, channel=88200),
    }


@pytest.fixture
def small_catalog(indoor_product, outdoor_product, rental_product, jumbo_product, controller_prices):
    """In-memory catalog built from the product fixtures."""
    return build_catalog(
        [indoor_product, outdoor_product, rental_product, jumbo_product],
        controller_prices,
    )


@pytest.fixture
def service(tmp_path):
    return QuotationService(tmp_path / "quotations.json")


@pytest.fixture
def client(catalog, tmp_path):
    """FastAPI test client bound to the packaged catalog and a temporary store."""
    from fastapi.testclient import TestClient

    from led_quote.api.main import app
    from led_quote.api.state import get_catalog_store, get_quotation_service
    from led_quote.data.catalog import CatalogStore

    store = CatalogStore(lambda: catalog)
    quotations = QuotationService(Path(tmp_path) / "api_quotations.json")
    app.dependency_overrides[get_catalog_store] = lambda: store
    app.dependency_overrides[get_quotation_service] = lambda: quotations
    yield TestClient(app)
    app.dependency_overrides.clear()
