"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.value_objects import OrderId
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository, product_repo: ProductRepository) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(OrderId(order_id))
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order, self._product_repo.get_by_ids(order.product_ids()))
