"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import OrderId, UserId
from storefront.domain.repository.criteria import OrderCriteria, SalesStatistics


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> OrderId:
        """Generate the next unique order ID."""

    @abstractmethod
    def next_line_id(self) -> int:
        """Generate the next unique order line ID."""

    @abstractmethod
    def get_by_id(self, order_id: OrderId) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def find_by_criteria(self, criteria: OrderCriteria) -> list[Order]:
        """Return one page of orders matching *criteria*."""

    @abstractmethod
    def count_by_criteria(self, criteria: OrderCriteria) -> int:
        """Number of orders matching *criteria*, ignoring paging."""

    @abstractmethod
    def list_by_user(self, user_id: UserId, limit: int = 20, offset: int = 0) -> list[Order]:
        """Return a page of the user's orders, newest first."""

    @abstractmethod
    def find_latest_by_user(self, user_id: UserId) -> Order | None:
        """Return the user's most recent order, or None."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""

    @abstractmethod
    def delete(self, order_id: OrderId) -> None:
        """Remove an order; unknown IDs are ignored."""

    @abstractmethod
    def exists_by_id(self, order_id: OrderId) -> bool:
        """True if an order with this ID exists."""

    @abstractmethod
    def count(self) -> int:
        """Number of orders."""

    @abstractmethod
    def get_sales_statistics(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> SalesStatistics:
        """Sales totals of non-cancelled orders created in ``[start, end]``."""
