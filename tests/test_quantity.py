"""Quantity calculator: square feet, cabinets, fixed jumbo areas and clamping."""
import math
from dataclasses import replace

import pytest

from led_quote.engine.errors import MissingInputError, OUT_OF_RANGE
from led_quote.engine.models import CabinetGrid
from led_quote.engine.quantity import (
    UNIT_CABINETS, UNIT_SQFT, calculate_quantity, mm_to_feet, screen_area_sqft,
)


def test_mm_to_feet():
    assert mm_to_feet(1000) == pytest.approx(3.2808399)


def test_area_is_rounded_to_two_decimals(indoor_product):
    result = calculate_quantity(indoor_product, 1000, 1000)
    assert result.quantity == 10.76
    assert result.unit == UNIT_SQFT
    assert result.issues == []


def test_area_of_small_indoor_screen(indoor_product):
    # 3.937 ft × 1.107 ft
    result = calculate_quantity(indoor_product, 1200, 337.5)
    assert result.quantity == 4.36


def test_rental_uses_cabinet_count(rental_product):
    result = calculate_quantity(rental_product, 1000, 500, CabinetGrid(2, 1))
    assert result.quantity == 2
    assert result.unit == UNIT_CABINETS


def test_rental_grid_with_non_positive_side_clamps_to_one(rental_product):
    # -2 × -1 would otherwise count as 2 cabinets
    result = calculate_quantity(rental_product, 1000, 500, CabinetGrid(-2, -1))
    assert result.quantity == 1.0
    assert [i.kind for i in result.issues] == [OUT_OF_RANGE]


def test_rental_without_grid_is_missing_input(rental_product):
    with pytest.raises(MissingInputError) as exc:
        calculate_quantity(rental_product, 1000, 500)
    assert exc.value.field == "cabinet_grid"


def test_jumbo_uses_fixed_area_regardless_of_size(jumbo_product):
    small = calculate_quantity(jumbo_product, 500, 500)
    large = calculate_quantity(jumbo_product, 9000, 4000)
    assert small.quantity == large.quantity == 34.88


def test_jumbo_without_fixed_area_falls_back_to_area(jumbo_product):
    product = replace(jumbo_product, fixed_area_by_pitch={})
    assert calculate_quantity(product, 1000, 1000).quantity == 10.76


@pytest.mark.parametrize("width,height", [
    (0, 0), (0, 1000), (-500, 1000), (float("nan"), 1000), (-1000, -1000),
])
def test_non_positive_area_clamps_to_one(indoor_product, width, height):
    result = calculate_quantity(indoor_product, width, height)
    assert result.quantity == 1.0
    assert len(result.issues) == 1
    assert result.issues[0].kind == OUT_OF_RANGE


def test_tiny_area_clamps_to_minimum(indoor_product):
    # 1 mm × 1 mm rounds to 0.00 sq ft
    result = calculate_quantity(indoor_product, 1, 1)
    assert result.quantity == 1.0


def test_huge_area_clamps_to_maximum(indoor_product):
    result = calculate_quantity(indoor_product, 100000, 100000)
    assert result.quantity == 10000
    assert result.issues[0].kind == OUT_OF_RANGE


def test_screen_area_never_negative():
    assert screen_area_sqft(-1000, 1000) == 0.0
    assert screen_area_sqft(float("inf"), 1000) == 0.0
    assert not math.isnan(screen_area_sqft(float("nan"), 1000))
