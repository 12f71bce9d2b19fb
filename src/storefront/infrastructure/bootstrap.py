"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.clock import Clock, utc_now
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.cart_rules import CartRules
from storefront.domain.service.order_rules import OrderRules
from storefront.domain.service.product_rules import ProductRules
from storefront.domain.service.user_rules import UserRules
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository
from storefront.infrastructure.persistence.json_user_repository import JsonUserRepository
from storefront.infrastructure.settings import Settings


@dataclass(frozen=True)
class Container:
    """Repositories and rule services sharing one set of stores."""

    users: UserRepository
    products: ProductRepository
    carts: CartRepository
    orders: OrderRepository
    clock: Clock = utc_now

    def user_rules(self) -> UserRules:
        return UserRules(self.users, clock=self.clock)

    def product_rules(self) -> ProductRules:
        return ProductRules(self.products)

    def cart_rules(self) -> CartRules:
        return CartRules(self.carts, self.products, self.product_rules(), clock=self.clock)

    def order_rules(self) -> OrderRules:
        return OrderRules(self.orders, self.product_rules(), clock=self.clock)


def build_container(settings: Settings) -> Container:
    return Container(
        users=JsonUserRepository(settings.users_file),
        products=JsonProductRepository(settings.products_file),
        carts=JsonCartRepository(settings.carts_file),
        orders=JsonOrderRepository(settings.orders_file),
    )
