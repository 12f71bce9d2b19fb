"""Unit tests for the Cart aggregate."""

import pytest

from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Count, Money, ProductId
from tests.fakes import make_cart, make_cart_line, make_product


class TestCartAddItem:

    def test_merges_same_product(self):
        cart = Cart.create("session-1")
        cart = cart.add_item(make_cart_line(1, product_id=1, quantity=2))
        cart = cart.add_item(make_cart_line(2, product_id=1, quantity=3))
        assert cart.item_count == 1
        assert cart.lines[0].quantity == Count(5)
        assert cart.lines[0].id == 1

    def test_distinct_products_get_lines(self):
        cart = make_cart((1, 1), (2, 4))
        assert cart.item_count == 2
        assert cart.total_quantity() == 5
        assert cart.product_ids() == frozenset({ProductId(1), ProductId(2)})

    def test_other_session_rejected(self):
        with pytest.raises(ValidationError, match="session"):
            Cart.create("session-1").add_item(make_cart_line(session_id="session-2"))

    def test_padded_session_id_rejected(self):
        with pytest.raises(ValidationError, match="whitespace"):
            Cart.create(" session-1")
        with pytest.raises(ValidationError, match="whitespace"):
            make_cart_line(session_id="session-1 ")

    def test_duplicate_product_lines_rejected(self):
        with pytest.raises(ValidationError, match="only one cart line"):
            Cart.restore("session-1", [make_cart_line(1, 1), make_cart_line(2, 1)])


class TestCartChanges:

    def test_update_item(self):
        cart = make_cart((1, 1)).update_item(1, Count(7))
        assert cart.lines[0].quantity == Count(7)

    def test_remove_item(self):
        cart = make_cart((1, 1), (2, 1)).remove_item(1)
        assert [line.product_id for line in cart.lines] == [ProductId(2)]

    def test_remove_unknown_line_rejected(self):
        with pytest.raises(NotFoundError, match="Cart line 9 not found"):
            make_cart((1, 1)).remove_item(9)

    def test_clear(self):
        assert make_cart((1, 1)).clear().is_empty()


class TestCartTotals:

    def test_total_amount(self):
        cart = make_cart((1, 2), (2, 3))
        products = [make_product(1, price=1000), make_product(2, price=500)]
        assert cart.total_amount(products) == Money(3500)

    def test_missing_product_rejected(self):
        with pytest.raises(NotFoundError):
            make_cart((1, 2)).total_amount([])

    def test_unavailable_items(self):
        cart = make_cart((1, 6))
        assert cart.has_unavailable_items([make_product(1, stock=5)])
        assert cart.is_all_items_available([make_product(1, stock=6)])
