"""Abstract repository for the Cart aggregate, keyed by session ID."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import ProductId
from storefront.domain.repository.criteria import CartStatistics


class CartRepository(ABC):

    @abstractmethod
    def next_line_id(self) -> int:
        """Generate the next unique cart line ID."""

    @abstractmethod
    def get_by_session(self, session_id: str) -> Cart:
        """Return the session's cart; an empty cart if it has none."""

    @abstractmethod
    def get_line(self, line_id: int) -> CartLine | None:
        """Return a cart line from any session, or None."""

    @abstractmethod
    def get_line_for_product(self, session_id: str, product_id: ProductId) -> CartLine | None:
        """Return the session's line for *product_id*, or None."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Replace the stored lines of the cart's session."""

    @abstractmethod
    def clear(self, session_id: str) -> None:
        """Remove every line of the session."""

    @abstractmethod
    def get_item_count(self, session_id: str) -> int:
        """Number of distinct products in the session's cart."""

    @abstractmethod
    def get_total_quantity(self, session_id: str) -> int:
        """Sum of line quantities in the session's cart."""

    @abstractmethod
    def exists_item(self, session_id: str, product_id: ProductId) -> bool:
        """True if the session's cart holds *product_id*."""

    @abstractmethod
    def get_statistics(self) -> CartStatistics:
        """Aggregate figures across all sessions."""
