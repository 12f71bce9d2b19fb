"""Application services: change or remove a cart line."""

from __future__ import annotations

import structlog

from storefront.application.dto import CartDTO
from storefront.application.mappers import cart_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.value_objects import Count
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_rules import CartRules

logger = structlog.get_logger(__name__)


class UpdateCartItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        cart_rules: CartRules,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart_rules = cart_rules

    def handle(self, session_id: str, line_id: int, quantity: int) -> CartDTO:
        # a line id from another session is reported as missing
        line = self._cart_repo.get_line(line_id)
        if line is None or not line.is_for_session(session_id):
            raise NotFoundError(f"Cart line {line_id} not found in this cart")

        count = Count(quantity)
        self._cart_rules.validate_cart_item_quantity_update(line_id, count)

        cart = self._cart_repo.get_by_session(session_id).update_item(line_id, count)
        self._cart_repo.save(cart)
        logger.info("cart_item_updated", session_id=session_id, line_id=line_id, quantity=quantity)
        return cart_to_dto(cart, self._product_repo.get_by_ids(cart.product_ids()))


class RemoveCartItemHandler:

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(self, session_id: str, line_id: int) -> CartDTO:
        cart = self._cart_repo.get_by_session(session_id).remove_item(line_id)
        self._cart_repo.save(cart)
        logger.info("cart_item_removed", session_id=session_id, line_id=line_id)
        return cart_to_dto(cart, self._product_repo.get_by_ids(cart.product_ids()))
