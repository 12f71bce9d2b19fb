"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.  Line items
carry the product price at purchase time, so later catalog price changes
never alter an existing order.  Status changes follow a fixed transition
table and, like every other change, return a new Order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import InvalidTransitionError, ValidationError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.clock import utc_now
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import (
    Count,
    Money,
    OrderId,
    ProductId,
    UserId,
    optional_text,
)

MAX_ADDRESS_LENGTH = 500
MAX_PHONE_LENGTH = 20
MAX_NOTES_LENGTH = 1000


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def valid_transitions(self) -> tuple[OrderStatus, ...]:
        return _TRANSITIONS[self]

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    @property
    def is_open(self) -> bool:
        """Placed but not yet delivered or cancelled."""
        return not self.is_terminal

    @staticmethod
    def parse(text: str) -> OrderStatus:
        normalised = (text or "").strip().lower()
        try:
            return OrderStatus(normalised)
        except ValueError:
            valid = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Invalid status: {text!r}. Valid statuses are: {valid}"
            ) from None


_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

OPEN_STATUSES = frozenset(s for s in OrderStatus if s.is_open)


@dataclass(frozen=True)
class OrderLine:
    """Captures the price snapshot of a product at order-creation time."""

    id: int
    order_id: OrderId
    product_id: ProductId
    quantity: Count
    price_at_purchase: Money  # locked at order-creation time
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise ValidationError("Order line ID must be a positive integer")

    @staticmethod
    def create(
        id: int,
        order_id: OrderId,
        product_id: ProductId,
        quantity: Count,
        price_at_purchase: Money,
    ) -> OrderLine:
        return OrderLine(id, order_id, product_id, quantity, price_at_purchase, utc_now())

    @staticmethod
    def from_cart_line(id: int, order_id: OrderId, line: CartLine, product: Product) -> OrderLine:
        if product.id != line.product_id:
            raise ValidationError(
                f"Product #{product.id} does not match cart line product #{line.product_id}"
            )
        return OrderLine.create(id, order_id, line.product_id, line.quantity, product.price)

    @staticmethod
    def restore(
        id: int,
        order_id: OrderId,
        product_id: ProductId,
        quantity: Count,
        price_at_purchase: Money,
        created_at: datetime,
    ) -> OrderLine:
        return OrderLine(id, order_id, product_id, quantity, price_at_purchase, created_at)

    def subtotal(self) -> Money:
        return self.price_at_purchase * self.quantity

    def price_difference(self, current: Product) -> Money:
        """Absolute gap between the purchase price and *current*'s price."""
        self._assert_same_product(current)
        return Money(abs(current.price.amount - self.price_at_purchase.amount))

    def purchased_at_higher_price(self, current: Product) -> bool:
        self._assert_same_product(current)
        return self.price_at_purchase > current.price

    def purchased_at_lower_price(self, current: Product) -> bool:
        self._assert_same_product(current)
        return self.price_at_purchase < current.price

    def _assert_same_product(self, product: Product) -> None:
        if product.id != self.product_id:
            raise ValidationError(
                f"Product #{product.id} does not match order line product #{self.product_id}"
            )


@dataclass(frozen=True)
class Order:
    """Aggregate root for purchase orders.

    Use ``Order.create()`` for new orders (status PENDING, fresh
    timestamps) and ``Order.restore()`` when loading from storage.
    ``total_amount`` is stored as given; ``recalculate_total_amount()``
    derives it from the lines so drift can be detected.
    """

    id: OrderId
    user_id: UserId
    total_amount: Money
    status: OrderStatus
    shipping_address: str
    shipping_phone: str
    lines: tuple[OrderLine, ...] = ()
    notes: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.shipping_address or not self.shipping_address.strip():
            raise ValidationError("Shipping address is required")
        if not self.shipping_phone or not self.shipping_phone.strip():
            raise ValidationError("Shipping phone is required")
        if len(self.shipping_address) > MAX_ADDRESS_LENGTH:
            raise ValidationError(
                f"Shipping address must be {MAX_ADDRESS_LENGTH} characters or less"
            )
        if len(self.shipping_phone) > MAX_PHONE_LENGTH:
            raise ValidationError(
                f"Shipping phone must be {MAX_PHONE_LENGTH} characters or less"
            )
        if self.notes is not None and len(self.notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Notes must be {MAX_NOTES_LENGTH} characters or less")
        if any(line.order_id != self.id for line in self.lines):
            raise ValidationError("All order lines must belong to the same order")
        product_ids = [line.product_id for line in self.lines]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError("A product may appear on only one order line")

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create(
        id: OrderId,
        user_id: UserId,
        total_amount: Money,
        shipping_address: str,
        shipping_phone: str,
        lines: Iterable[OrderLine] = (),
        notes: str | None = None,
    ) -> Order:
        now = utc_now()
        return Order(
            id=id,
            user_id=user_id,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            shipping_address=(shipping_address or "").strip(),
            shipping_phone=(shipping_phone or "").strip(),
            lines=tuple(lines),
            notes=optional_text(notes),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def restore(
        id: OrderId,
        user_id: UserId,
        total_amount: Money,
        status: OrderStatus,
        shipping_address: str,
        shipping_phone: str,
        created_at: datetime,
        updated_at: datetime,
        lines: Iterable[OrderLine] = (),
        notes: str | None = None,
    ) -> Order:
        return Order(
            id=id,
            user_id=user_id,
            total_amount=total_amount,
            status=status,
            shipping_address=shipping_address,
            shipping_phone=shipping_phone,
            lines=tuple(lines),
            notes=notes,
            created_at=created_at,
            updated_at=updated_at,
        )

    # --- State transitions ----------------------------------------------------

    def update_status(self, target: OrderStatus) -> Order:
        """Move to *target* if the transition table allows it.

        A "transition" to the current status is not in any state's table
        and is rejected like any other illegal edge.
        """
        if not self.status.can_transition_to(target):
            raise InvalidTransitionError(self.status, target, self.status.valid_transitions())
        return replace(self, status=target, updated_at=utc_now())

    def confirm(self) -> Order:
        return self.update_status(OrderStatus.CONFIRMED)

    def ship(self) -> Order:
        return self.update_status(OrderStatus.SHIPPED)

    def deliver(self) -> Order:
        return self.update_status(OrderStatus.DELIVERED)

    def cancel(self) -> Order:
        return self.update_status(OrderStatus.CANCELLED)

    def update_shipping_info(
        self,
        address: str | None = None,
        phone: str | None = None,
        notes: str | None = None,
    ) -> Order:
        return replace(
            self,
            shipping_address=address.strip() if address and address.strip() else self.shipping_address,
            shipping_phone=phone.strip() if phone and phone.strip() else self.shipping_phone,
            notes=self.notes if notes is None else optional_text(notes),
            updated_at=utc_now(),
        )

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return len(self.lines)

    def has_items(self) -> bool:
        return bool(self.lines)

    def total_quantity(self) -> int:
        return sum(line.quantity.value for line in self.lines)

    def product_ids(self) -> frozenset[ProductId]:
        return frozenset(line.product_id for line in self.lines)

    def is_for_user(self, user_id: UserId) -> bool:
        return self.user_id == user_id

    def recalculate_total_amount(self) -> Money:
        total = Money.zero()
        for line in self.lines:
            total = total + line.subtotal()
        return total

    def has_total_drift(self) -> bool:
        """True if the stored total disagrees with the line-derived total."""
        return self.recalculate_total_amount() != self.total_amount
