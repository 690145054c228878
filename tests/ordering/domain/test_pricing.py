"""Tests for line item pricing and amount formatting."""

import pytest
from ordering.pricing import TOPPING_UNIT_PRICE, format_vnd, order_total, price_line_item


class TestPriceLineItem:
    @pytest.mark.parametrize("quantity", [1, 2, 5, 12])
    def test_plain_price_is_base_times_quantity(self, quantity):
        assert price_line_item(15000, quantity, False) == 15000 * quantity

    @pytest.mark.parametrize("quantity", [1, 2, 5, 12])
    def test_topping_adds_surcharge_per_unit(self, quantity):
        assert price_line_item(25000, quantity, True) == 25000 * quantity + TOPPING_UNIT_PRICE * quantity

    def test_topping_unit_price(self):
        assert TOPPING_UNIT_PRICE == 5000

    def test_customized_tra_chanh_scenario(self):
        assert price_line_item(25000, 2, True) == 60000

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_is_rejected(self, quantity):
        with pytest.raises(ValueError, match="quantity"):
            price_line_item(25000, quantity, False)


class _Priced:
    def __init__(self, total_price):
        self.total_price = total_price


class TestOrderTotal:
    def test_empty_is_zero(self):
        assert order_total([]) == 0

    def test_sums_item_totals(self):
        assert order_total([_Priced(60000), _Priced(15000)]) == 75000


class TestFormatVnd:
    def test_thousands_use_dots(self):
        assert format_vnd(60000) == "60.000 VNĐ"

    def test_millions(self):
        assert format_vnd(1250000) == "1.250.000 VNĐ"

    def test_small_amounts(self):
        assert format_vnd(0) == "0 VNĐ"
