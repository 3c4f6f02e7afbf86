"""Unit price resolution per buyer tier."""
from dataclasses import replace

import pytest

from led_quote.engine.errors import InvalidInputError, UNRESOLVED_PRICE
from led_quote.engine.models import BuyerTier
from led_quote.engine.unit_price import parse_price, resolve_unit_price


@pytest.mark.parametrize("tier,expected,source", [
    (BuyerTier.END_USER, 27200, "price"),
    (BuyerTier.CHANNEL, 24480, "si_channel_price"),
    (BuyerTier.RESELLER, 23120, "reseller_price"),
])
def test_standard_tiers(indoor_product, tier, expected, source):
    result = resolve_unit_price(indoor_product, tier)
    assert result.price == expected
    assert result.source_field == source
    assert result.issue is None


@pytest.mark.parametrize("tier,expected", [
    (BuyerTier.END_USER, 28200),
    (BuyerTier.CHANNEL, 26400),
    (BuyerTier.RESELLER, 25600),
])
def test_rental_tiers(rental_product, tier, expected):
    assert resolve_unit_price(rental_product, tier).price == expected


@pytest.mark.parametrize("raw", ["NA", "n/a", "", None, "call us", -5])
def test_unusable_price_falls_back_to_default(indoor_product, raw):
    product = replace(indoor_product, reseller_price=raw)
    result = resolve_unit_price(product, BuyerTier.RESELLER)
    assert result.price == 5300
    assert result.issue.kind == UNRESOLVED_PRICE
    assert result.issue.field == "reseller_price"


def test_rental_missing_tier_names_rental_field(rental_product):
    product = replace(rental_product, rental_prices=replace(rental_product.rental_prices, channel="NA"))
    result = resolve_unit_price(product, BuyerTier.CHANNEL)
    assert result.price == 5300
    assert result.issue.field == "rental_prices.channel"


def test_parse_price():
    assert parse_price("27,200") == 27200.0
    assert parse_price(" 8800 ") == 8800.0
    assert parse_price(0) == 0.0
    assert parse_price(True) is None
    assert parse_price(float("nan")) is None


@pytest.mark.parametrize("label,tier", [
    ("endUser", BuyerTier.END_USER),
    ("End User", BuyerTier.END_USER),
    ("end_customer", BuyerTier.END_USER),
    ("Reseller", BuyerTier.RESELLER),
    ("siChannel", BuyerTier.CHANNEL),
    ("Channel", BuyerTier.CHANNEL),
    (BuyerTier.CHANNEL, BuyerTier.CHANNEL),
])
def test_buyer_tier_parse(label, tier):
    assert BuyerTier.parse(label) is tier


def test_buyer_tier_parse_rejects_unknown():
    with pytest.raises(InvalidInputError) as exc:
        BuyerTier.parse("wholesale")
    assert exc.value.field == "buyer_tier"
