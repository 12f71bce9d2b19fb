"""Unit tests for the Product aggregate."""

import pytest

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.product import Category, Product
from storefront.domain.model.value_objects import Count, Money, ProductId, StockLevel
from tests.fakes import make_product


class TestProductCreation:

    def test_create_is_active(self):
        product = Product.create(ProductId(1), " Kettle ", Money(3000), StockLevel(5), Category.HOME)
        assert product.name == "Kettle"
        assert product.is_active
        assert product.is_available_for_sale()

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            make_product(name="   ")

    def test_category_parse(self):
        assert Category.parse(" Books ") is Category.BOOKS
        assert Category.FOOD.label == "Food & Beverages"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError, match="Invalid category"):
            Category.parse("toys")


class TestProductStock:

    def test_decrease_more_than_stock_rejected(self):
        product = make_product(stock=5)
        with pytest.raises(InsufficientStockError, match="requested 6, available 5"):
            product.decrease_stock(Count(6))

    def test_decrease_all_stock_leaves_product_unsellable(self):
        product = make_product(stock=5).decrease_stock(Count(5))
        assert product.stock == StockLevel(0)
        assert product.is_out_of_stock()
        assert not product.is_available_for_sale()

    def test_decrease_inactive_rejected(self):
        product = make_product(is_active=False)
        with pytest.raises(InsufficientStockError, match="not available for sale"):
            product.decrease_stock(Count(1))

    def test_increase(self):
        assert make_product(stock=0).increase_stock(Count(3)).stock == StockLevel(3)

    def test_original_unchanged(self):
        product = make_product(stock=5)
        product.decrease_stock(Count(2))
        assert product.stock == StockLevel(5)


class TestProductInfo:

    def test_update_price(self):
        product = make_product(price=1000).update_info(price=Money(1200))
        assert product.price == Money(1200)

    def test_deactivate_and_activate(self):
        product = make_product().deactivate()
        assert not product.is_available_for_sale()
        assert product.deactivate() is product
        assert product.activate().is_active
