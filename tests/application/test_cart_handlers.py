"""Integration tests for the cart use cases."""

import pytest

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.show_cart import ShowCartHandler
from storefront.application.update_cart import RemoveCartItemHandler, UpdateCartItemHandler
from storefront.domain.exceptions import BusinessRuleError, NotFoundError, ValidationError
from tests.fakes import in_memory_container, make_product

SESSION = "web-42"


def _setup(*products):
    container = in_memory_container()
    for product in products or (make_product(1, price=1200, stock=10), make_product(2, price=800)):
        container.products.save(product)
    return container


def _add(container, product_id: int, quantity: int, session: str = SESSION):
    handler = AddToCartHandler(container.carts, container.products, container.cart_rules())
    return handler.handle(session, product_id, quantity)


class TestAddToCart:

    def test_add_then_merge(self):
        container = _setup()
        _add(container, 1, 2)
        dto = _add(container, 1, 3)
        assert len(dto.lines) == 1
        assert dto.lines[0].quantity == 5
        assert dto.total == "¥6,000"
        assert container.carts.get_total_quantity(SESSION) == 5

    def test_sessions_are_separate(self):
        container = _setup()
        _add(container, 1, 2)
        _add(container, 2, 1, session="other")
        assert container.carts.get_item_count(SESSION) == 1
        assert container.carts.exists_item("other", make_product(2).id)

    def test_padded_session_leaves_stored_cart_alone(self):
        container = _setup()
        _add(container, 1, 3)
        with pytest.raises(ValidationError, match="whitespace"):
            _add(container, 2, 1, session=f" {SESSION}")
        cart = container.carts.get_by_session(SESSION)
        assert [(line.product_id.value, line.quantity.value) for line in cart.lines] == [(1, 3)]

    def test_rejected_addition_leaves_cart_untouched(self):
        container = _setup()
        _add(container, 1, 8)
        with pytest.raises(BusinessRuleError):
            _add(container, 1, 3)
        assert container.carts.get_total_quantity(SESSION) == 8


class TestUpdateAndRemove:

    def test_update_quantity(self):
        container = _setup()
        line_id = _add(container, 1, 2).lines[0].line_id
        handler = UpdateCartItemHandler(container.carts, container.products, container.cart_rules())
        dto = handler.handle(SESSION, line_id, 4)
        assert dto.lines[0].quantity == 4

    def test_update_line_of_other_session(self):
        container = _setup()
        line_id = _add(container, 1, 2, session="other").lines[0].line_id
        handler = UpdateCartItemHandler(container.carts, container.products, container.cart_rules())
        with pytest.raises(NotFoundError):
            handler.handle(SESSION, line_id, 1)

    def test_remove(self):
        container = _setup()
        _add(container, 1, 2)
        line_id = _add(container, 2, 1).lines[1].line_id
        dto = RemoveCartItemHandler(container.carts, container.products).handle(SESSION, line_id)
        assert [line.product_id for line in dto.lines] == [1]

    def test_remove_unknown_line(self):
        container = _setup()
        with pytest.raises(NotFoundError):
            RemoveCartItemHandler(container.carts, container.products).handle(SESSION, 77)


class TestShowCart:

    def test_empty_cart(self):
        container = _setup()
        dto = ShowCartHandler(container.carts, container.products, container.cart_rules()).handle(SESSION)
        assert dto.lines == []
        assert not dto.can_checkout

    def test_flags_products_that_sold_out(self):
        container = _setup()
        _add(container, 1, 2)
        container.products.save(make_product(1, price=1200, stock=1))
        dto = ShowCartHandler(container.carts, container.products, container.cart_rules()).handle(SESSION)
        assert not dto.lines[0].available
        assert not dto.can_checkout
        assert any("Reduce quantity" in s for s in dto.suggestions)
