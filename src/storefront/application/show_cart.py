"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from storefront.application.dto import CartDTO
from storefront.application.mappers import cart_to_dto
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_rules import CartRules


class ShowCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        cart_rules: CartRules,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart_rules = cart_rules

    def handle(self, session_id: str) -> CartDTO:
        cart = self._cart_repo.get_by_session(session_id)
        if cart.is_empty():
            return cart_to_dto(cart, [])

        products = self._product_repo.get_by_ids(cart.product_ids())
        advice = self._cart_rules.suggest_optimizations(cart, products)
        return cart_to_dto(cart, products, advice.suggestions)
