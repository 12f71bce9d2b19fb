"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
This is the only place that turns a cart into an order, so it is the
one that coordinates users, carts, products and orders.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import BusinessRuleError, NotFoundError
from storefront.domain.model.order import Order, OrderLine
from storefront.domain.model.value_objects import UserId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.order_rules import OrderRules

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        order_rules: OrderRules,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._user_repo = user_repo
        self._order_rules = order_rules

    def handle(
        self,
        user_id: int,
        session_id: str,
        shipping_address: str,
        shipping_phone: str,
        notes: str | None = None,
        force: bool = False,
    ) -> OrderDTO:
        """Place an order for everything in the session's cart.

        Steps:
        1. Run the order rules against the user, cart and current catalog.
        2. Refuse a likely double submission unless *force* is set.
        3. Build OrderLines with *current* prices (snapshot).
        4. Take the quantities out of stock, persist, and empty the cart.
        """
        user = self._user_repo.get_by_id(UserId(user_id))
        if user is None:
            raise NotFoundError(f"User #{user_id} not found")

        cart = self._cart_repo.get_by_session(session_id)
        products = self._product_repo.get_by_ids(cart.product_ids())
        self._order_rules.validate_order_creation(user, cart, products)

        if not force and self._order_rules.detect_duplicate_order(user, cart):
            raise BusinessRuleError(
                "An order with the same products was placed within the last hour. "
                "Place it again with force to confirm."
            )

        catalog = {p.id: p for p in products}
        order_id = self._order_repo.next_id()
        lines = [
            OrderLine.from_cart_line(
                self._order_repo.next_line_id(), order_id, line, catalog[line.product_id]
            )
            for line in cart.lines
        ]
        order = Order.create(
            id=order_id,
            user_id=user.id,
            total_amount=cart.total_amount(products),
            shipping_address=shipping_address,
            shipping_phone=shipping_phone,
            lines=lines,
            notes=notes,
        )
        # all stock changes are computed before anything is written
        depleted = [catalog[line.product_id].decrease_stock(line.quantity) for line in cart.lines]

        self._order_repo.save(order)
        for product in depleted:
            self._product_repo.save(product)
        self._cart_repo.clear(cart.session_id)

        logger.info(
            "order_placed",
            order_id=order.id.value,
            user_id=user_id,
            total=order.total_amount.amount,
            lines=order.item_count,
        )
        return order_to_dto(order, depleted)
