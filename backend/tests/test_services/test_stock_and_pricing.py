"""
Unit tests for stock adjustment and pricing helpers

These tests use plain objects and need no database.
"""
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from app.services.pricing import (
    deal_original_price,
    effective_price,
    is_deal_live,
    is_discount_live,
    prorate_deal,
    shipping_fee_for,
)
from app.services.stock_service import adjust_stock, available_stock, matrix_total


def _product(**kwargs):
    defaults = dict(id=1, name="Scrub Top", price=Decimal("1000"), sale_price=None, stock=0, color_size_stock=None)
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestStockMatrix:
    """Test matrix-aware stock adjustment"""

    def test_matrix_total_sums_every_cell(self):
        assert matrix_total({"Navy": {"M": 4, "L": 2}, "Teal": {"S": 1}}) == 7
        assert matrix_total(None) == 0

    def test_adjusts_cell_and_mirrors_aggregate(self):
        """Selling one Navy M lowers the cell and keeps stock equal to the matrix sum"""
        # Arrange
        product = _product(stock=6, color_size_stock={"Navy": {"M": 4, "L": 2}})

        # Act
        new_stock = adjust_stock(product, -1, size="M", color="Navy")

        # Assert
        assert product.color_size_stock == {"Navy": {"M": 3, "L": 2}}
        assert new_stock == 5
        assert product.stock == 5

    def test_adjustment_never_goes_below_zero(self):
        product = _product(stock=6, color_size_stock={"Navy": {"M": 4, "L": 2}})

        adjust_stock(product, -10, size="L", color="Navy")

        assert product.color_size_stock["Navy"]["L"] == 0
        assert product.stock == 4

    def test_unknown_cell_falls_back_to_aggregate(self):
        product = _product(stock=6, color_size_stock={"Navy": {"M": 4, "L": 2}})

        adjust_stock(product, -2, size="XL", color="Navy")

        assert product.stock == 4
        assert product.color_size_stock == {"Navy": {"M": 4, "L": 2}}

    def test_plain_product_clamps_at_zero(self):
        product = _product(stock=1)

        adjust_stock(product, -3)

        assert product.stock == 0

    def test_available_stock_reads_cell_when_present(self):
        product = _product(stock=6, color_size_stock={"Navy": {"M": 4, "L": 2}})

        assert available_stock(product, "L", "Navy") == 2
        assert available_stock(product) == 6


class TestPricing:
    """Test effective prices, discount windows and deal proration"""

    def test_sale_price_wins_without_global_discount(self):
        product = _product(price=Decimal("1000"), sale_price=Decimal("800"))

        assert effective_price(product) == Decimal("800.00")

    def test_global_discount_applies_to_list_price(self):
        """The global discount overrides the sale price"""
        product = _product(price=Decimal("1000"), sale_price=Decimal("800"))

        assert effective_price(product, 10) == Decimal("900.00")

    def test_discount_window(self):
        now = datetime(2025, 6, 10, 12, 0)
        discount = SimpleNamespace(
            is_active=True,
            percentage=15,
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=1),
        )

        assert is_discount_live(discount, now) is True
        assert is_discount_live(discount, now + timedelta(days=2)) is False
        assert is_discount_live(None, now) is False

        discount.is_active = False
        assert is_discount_live(discount, now) is False

    def test_prorate_deal_adds_up_to_deal_price(self):
        """Unit prices follow list prices and the lines sum to the deal price"""
        # Arrange
        cheap = _product(id=1, price=Decimal("1000"))
        dear = _product(id=2, price=Decimal("3000"))
        deal = SimpleNamespace(
            deal_price=Decimal("3000"),
            items=[
                SimpleNamespace(product_id=1, product=cheap, quantity=1),
                SimpleNamespace(product_id=2, product=dear, quantity=1),
            ],
        )

        # Act
        prices = prorate_deal(deal)

        # Assert
        assert prices == {1: Decimal("750.00"), 2: Decimal("2250.00")}
        assert sum(prices.values()) == Decimal("3000.00")

    def test_deal_original_price_uses_effective_prices(self):
        pairs = [
            (_product(price=Decimal("1000"), sale_price=Decimal("900")), 2),
            (_product(price=Decimal("500")), 1),
        ]

        assert deal_original_price(pairs) == Decimal("2300.00")

    def test_deal_outside_window_is_not_live(self):
        now = datetime(2025, 6, 10)
        deal = SimpleNamespace(is_active=True, start_date=now + timedelta(days=1), end_date=None)

        assert is_deal_live(deal, now) is False
        deal.start_date = None
        assert is_deal_live(deal, now) is True

    def test_free_shipping_from_minimum(self):
        assert shipping_fee_for(Decimal("5000"), Decimal("5000"), Decimal("500")) == Decimal("0.00")
        assert shipping_fee_for(Decimal("4999"), Decimal("5000"), Decimal("500")) == Decimal("500.00")
