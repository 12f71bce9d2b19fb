"""Cart aggregate: one session's in-progress selection.

The Cart owns its CartLines.  It guarantees that every line belongs to
the cart's session and that no product appears on more than one line:
adding a product that is already in the cart merges the quantities.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.model.clock import utc_now
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Count, Money, ProductId


@dataclass(frozen=True)
class CartLine:
    id: int
    session_id: str
    product_id: ProductId
    quantity: Count
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise ValidationError("Cart line ID must be a positive integer")
        _check_session_id(self.session_id)

    @staticmethod
    def create(id: int, session_id: str, product_id: ProductId, quantity: Count) -> CartLine:
        now = utc_now()
        return CartLine(id, session_id, product_id, quantity, now, now)

    @staticmethod
    def restore(
        id: int,
        session_id: str,
        product_id: ProductId,
        quantity: Count,
        created_at: datetime,
        updated_at: datetime,
    ) -> CartLine:
        return CartLine(id, session_id, product_id, quantity, created_at, updated_at)

    def is_for_product(self, product_id: ProductId) -> bool:
        return self.product_id == product_id

    def is_for_session(self, session_id: str) -> bool:
        return self.session_id == session_id

    def subtotal(self, product: Product) -> Money:
        return Money(self.subtotal_yen(product))

    def subtotal_yen(self, product: Product) -> int:
        """Like ``subtotal`` but unbounded by the Money ceiling."""
        if product.id != self.product_id:
            raise ValidationError(
                f"Product #{product.id} does not match cart line product #{self.product_id}"
            )
        return product.price.amount * self.quantity.value

    def is_available(self, product: Product) -> bool:
        """True if *product* can currently supply this line in full."""
        if product.id != self.product_id:
            return False
        return product.is_available_for_sale() and product.has_enough_stock(self.quantity)

    def update_quantity(self, quantity: Count) -> CartLine:
        return replace(self, quantity=quantity, updated_at=utc_now())

    def increase_quantity(self, amount: Count) -> CartLine:
        return self.update_quantity(self.quantity + amount)

    def decrease_quantity(self, amount: Count) -> CartLine:
        return self.update_quantity(self.quantity - amount)


@dataclass(frozen=True)
class Cart:
    """Aggregate root for a session's cart.

    ``lines`` is a tuple so the cart can be shared freely; every
    mutation builds a new Cart.
    """

    session_id: str
    lines: tuple[CartLine, ...] = ()

    def __post_init__(self) -> None:
        _check_session_id(self.session_id)
        if any(not line.is_for_session(self.session_id) for line in self.lines):
            raise ValidationError("All cart lines must belong to the cart's session")
        product_ids = [line.product_id for line in self.lines]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError("A product may appear on only one cart line")

    @staticmethod
    def create(session_id: str) -> Cart:
        return Cart(session_id)

    @staticmethod
    def restore(session_id: str, lines: Iterable[CartLine]) -> Cart:
        return Cart(session_id, tuple(lines))

    # --- Queries --------------------------------------------------------------

    @property
    def item_count(self) -> int:
        """Number of distinct products in the cart."""
        return len(self.lines)

    def is_empty(self) -> bool:
        return not self.lines

    def total_quantity(self) -> int:
        return sum(line.quantity.value for line in self.lines)

    def product_ids(self) -> frozenset[ProductId]:
        return frozenset(line.product_id for line in self.lines)

    def has_product(self, product_id: ProductId) -> bool:
        return self.line_for_product(product_id) is not None

    def line_for_product(self, product_id: ProductId) -> CartLine | None:
        for line in self.lines:
            if line.is_for_product(product_id):
                return line
        return None

    def total_amount(self, products: Iterable[Product]) -> Money:
        """Sum ``price × quantity`` over all lines against a catalog snapshot.

        Nothing is cached: the caller decides how fresh *products* is.
        """
        return Money(self.total_yen(products))

    def total_yen(self, products: Iterable[Product]) -> int:
        """Raw yen total; carts may hold more than a single Money can."""
        catalog = {p.id: p for p in products}
        total = 0
        for line in self.lines:
            product = catalog.get(line.product_id)
            if product is None:
                raise NotFoundError(f"Product #{line.product_id} not found for cart line {line.id}")
            total += line.subtotal_yen(product)
        return total

    def is_all_items_available(self, products: Iterable[Product]) -> bool:
        catalog = {p.id: p for p in products}
        return all(
            line.product_id in catalog and line.is_available(catalog[line.product_id])
            for line in self.lines
        )

    def has_unavailable_items(self, products: Iterable[Product]) -> bool:
        return not self.is_all_items_available(products)

    # --- Mutations (copy-on-write) --------------------------------------------

    def add_item(self, new_line: CartLine) -> Cart:
        """Add a line, merging with an existing line for the same product."""
        if not new_line.is_for_session(self.session_id):
            raise ValidationError("Cart line session ID does not match the cart")

        lines = list(self.lines)
        for index, line in enumerate(lines):
            if line.is_for_product(new_line.product_id):
                lines[index] = line.increase_quantity(new_line.quantity)
                break
        else:
            lines.append(new_line)
        return replace(self, lines=tuple(lines))

    def update_item(self, line_id: int, quantity: Count) -> Cart:
        index = self._index_of(line_id)
        lines = list(self.lines)
        lines[index] = lines[index].update_quantity(quantity)
        return replace(self, lines=tuple(lines))

    def remove_item(self, line_id: int) -> Cart:
        index = self._index_of(line_id)
        return replace(self, lines=self.lines[:index] + self.lines[index + 1:])

    def remove_item_by_product(self, product_id: ProductId) -> Cart:
        return replace(
            self,
            lines=tuple(line for line in self.lines if not line.is_for_product(product_id)),
        )

    def clear(self) -> Cart:
        return replace(self, lines=())

    # --- Internal helpers -----------------------------------------------------

    def _index_of(self, line_id: int) -> int:
        for index, line in enumerate(self.lines):
            if line.id == line_id:
                return index
        raise NotFoundError(f"Cart line {line_id} not found in this cart")


def _check_session_id(session_id: str) -> None:
    # used verbatim as the storage key
    if not isinstance(session_id, str) or not session_id.strip():
        raise ValidationError("Session ID is required")
    if session_id != session_id.strip():
        raise ValidationError("Session ID must not have leading or trailing whitespace")
