"""Application service: Change Order Status use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import OrderId, UserId
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.order_rules import OrderRules

logger = structlog.get_logger(__name__)


class ChangeOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        order_rules: OrderRules,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._user_repo = user_repo
        self._order_rules = order_rules

    def handle(self, actor_id: int, order_id: int, status: str) -> OrderDTO:
        """Move an order to *status*; cancelling puts its units back in stock."""
        actor = self._user_repo.get_by_id(UserId(actor_id))
        if actor is None:
            raise NotFoundError(f"User #{actor_id} not found")
        order = self._order_repo.get_by_id(OrderId(order_id))
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")

        target = OrderStatus.parse(status)
        self._order_rules.validate_status_change(order, target, actor)
        updated = order.update_status(target)

        products = self._product_repo.get_by_ids(order.product_ids())
        restocked: list[Product] = []
        if target is OrderStatus.CANCELLED:
            # computed before anything is written
            restocked = self._order_rules.process_order_cancellation(order, products)

        self._order_repo.save(updated)
        for product in restocked:
            self._product_repo.save(product)

        logger.info(
            "order_status_changed",
            order_id=order_id,
            previous=order.status.value,
            status=target.value,
            by=actor_id,
        )
        return order_to_dto(updated, products)
