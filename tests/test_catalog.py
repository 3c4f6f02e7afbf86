"""Catalog loading, snapshots and validation report."""
import pytest

from led_quote.config.settings import get_settings
from led_quote.data.build_catalog import check_tier_ordering, validate_catalog
from led_quote.data.catalog import CatalogStore, load_catalog
from led_quote.engine import TierPrices, UnknownProductError
from led_quote.engine.unit_price import parse_price


def test_packaged_catalog_loads(catalog):
    assert len(catalog.products) == 24
    assert len(catalog.controllers) == 15
    assert catalog.source_hash


def test_product_fields(catalog):
    product = catalog.get_product("rigel-cob-p1.5")
    assert product.price == 27200
    assert product.is_indoor
    assert not product.is_rental

    rental = catalog.get_product("rental-outdoor-p3.8")
    assert rental.is_rental
    assert rental.rental_prices == TierPrices(end_user=30100, reseller=25900, channel=27500)

    jumbo = catalog.get_product("jumbo-outdoor-p4")
    assert jumbo.is_jumbo
    assert jumbo.fixed_area() == 34.64


def test_na_price_is_kept_for_resolver(catalog):
    assert catalog.get_product("orion-p15-flexible-indoor").price == "NA"


def test_unknown_product(catalog):
    with pytest.raises(UnknownProductError):
        catalog.get_product("nope")


def test_controller_lookup(catalog):
    assert catalog.get_controller_price("Nova VX400 Pro").end_user == 98000
    assert catalog.get_controller_price("tu4k PRO").channel == 261450
    assert catalog.get_controller_price("Foo9000") is None
    assert catalog.get_controller_price("") is None


def test_catalog_is_read_only(catalog):
    with pytest.raises(TypeError):
        catalog.products["new"] = None


def test_tier_ordering_over_fixture_catalog(catalog):
    """reseller <= channel <= end user wherever all three prices exist."""
    for product in catalog.products.values():
        prices = product.rental_prices if product.is_rental else TierPrices(
            end_user=product.price, reseller=product.reseller_price, channel=product.si_channel_price,
        )
        values = [parse_price(p) for p in (prices.reseller, prices.channel, prices.end_user)]
        if None not in values:
            assert values[0] <= values[1] <= values[2], product.id
    for name, prices in catalog.controllers.items():
        assert prices.reseller <= prices.channel <= prices.end_user, name


def test_check_tier_ordering():
    assert check_tier_ordering(TierPrices(end_user=100, reseller=80, channel=90)) is None
    assert check_tier_ordering(TierPrices(end_user=100, reseller=95, channel=90)) is not None
    assert check_tier_ordering(TierPrices(end_user="NA", reseller=95, channel=90)) is None


def test_validate_catalog_report(catalog, tmp_path):
    output = tmp_path / "report.json"
    report = validate_catalog(catalog, output_path=output)

    assert report["status"] == "success"
    assert report["metrics"]["product_count"] == 24
    assert report["metrics"]["controller_count"] == 15
    assert report["metrics"]["tier_ordering_violations"] == []
    assert "orion-p15-flexible-indoor.end_user" in report["metrics"]["missing_tier_prices"]
    assert output.exists()


def test_missing_file():
    from pathlib import Path
    with pytest.raises(FileNotFoundError):
        load_catalog(Path("/nonexistent/products.csv"), Path("/nonexistent/controllers.csv"))


def test_unpriced_controller_is_skipped(tmp_path, caplog):
    products = get_settings().products_csv
    controllers = tmp_path / "controllers.csv"
    controllers.write_text("name,end_user,reseller,channel\nTB2,35000,29800,31500\nBAD,NA,1,1\n")

    loaded = load_catalog(products, controllers)

    assert "TB2" in loaded.controllers
    assert "BAD" not in loaded.controllers
    assert "BAD" in caplog.text


def test_store_reload_swaps_snapshot(catalog, small_catalog):
    snapshots = iter([catalog, small_catalog])
    store = CatalogStore(lambda: next(snapshots))

    held = store.snapshot()
    store.reload()

    assert held is catalog
    assert store.snapshot() is small_catalog
    assert "rigel-cob-p1.5" in held.products
