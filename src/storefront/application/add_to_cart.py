"""Application service: Add To Cart use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import CartDTO
from storefront.application.mappers import cart_to_dto
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Count, ProductId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_rules import CartRules

logger = structlog.get_logger(__name__)


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        cart_rules: CartRules,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart_rules = cart_rules

    def handle(self, session_id: str, product_id: int, quantity: int) -> CartDTO:
        """Add *quantity* units of a product, merging with an existing line."""
        pid = ProductId(product_id)
        count = Count(quantity)
        self._cart_rules.validate_cart_item_addition(session_id, pid, count)

        cart = self._cart_repo.get_by_session(session_id)
        line = CartLine.create(self._cart_repo.next_line_id(), cart.session_id, pid, count)
        cart = cart.add_item(line)
        self._cart_repo.save(cart)

        logger.info(
            "cart_item_added",
            session_id=cart.session_id,
            product_id=product_id,
            quantity=quantity,
        )
        return cart_to_dto(cart, self._product_repo.get_by_ids(cart.product_ids()))
