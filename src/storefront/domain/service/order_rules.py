"""Domain service: order rules.

Coordinates the checks that an order needs beyond its own transition
table: per-user ceilings on recent and open orders, product availability
and stock across the whole cart, the order amount window, who may change
a status and until when, and duplicate-submission detection.

The ceiling checks count existing orders and then let the caller create
the new one.  That read-then-act sequence is only safe if the caller
serialises order placement per user.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

import structlog

from storefront.domain.exceptions import (
    BusinessRuleError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.clock import Clock, utc_now
from storefront.domain.model.order import OPEN_STATUSES, Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Money, ProductId
from storefront.domain.repository.criteria import MAX_LIMIT, OrderCriteria
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.product_rules import ProductRules

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_DAILY_ORDERS = 5
DAILY_WINDOW = timedelta(days=1)
MAX_OPEN_ORDERS = 10
MIN_ORDER_TOTAL = Money(100)
MAX_ORDER_TOTAL = Money(1_000_000)
DELIVERY_CONFIRMATION_WINDOW = timedelta(days=30)
CONFIRMED_CANCELLATION_WINDOW = timedelta(hours=24)
DUPLICATE_ORDER_WINDOW = timedelta(hours=1)


class OrderSize(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"

    @staticmethod
    def for_amount(amount: Money) -> OrderSize:
        if amount.amount < 5_000:
            return OrderSize.SMALL
        if amount.amount < 20_000:
            return OrderSize.MEDIUM
        if amount.amount < 100_000:
            return OrderSize.LARGE
        return OrderSize.ENTERPRISE


@dataclass(frozen=True)
class OrderValueAnalysis:
    total_amount: Money
    average_line_price: Money
    average_quantity_per_line: int
    size: OrderSize
    profitability_score: int  # 0-100


class OrderRules:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_rules: ProductRules,
        clock: Clock = utc_now,
    ) -> None:
        self._order_repo = order_repo
        self._product_rules = product_rules
        self._clock = clock

    # --- Order creation -------------------------------------------------------

    def validate_order_creation(self, user: User, cart: Cart, products: Iterable[Product]) -> None:
        """Check that *user* may turn *cart* into an order right now.

        Chain: cart not empty, per-user ceilings, availability of every
        line, stock for every line, then the amount window.
        """
        if cart.is_empty():
            raise BusinessRuleError("Cannot create order with empty cart")

        self._validate_user_order_limits(user)

        catalog = {p.id: p for p in products}
        for line in cart.lines:
            product = self._find(catalog, line.product_id)
            if not product.is_available_for_sale():
                raise BusinessRuleError(f"Product {product.name!r} is not available for sale")

        for line in cart.lines:
            self._product_rules.validate_stock_decrease(catalog[line.product_id], line.quantity)

        total = cart.total_yen(catalog.values())
        if total < MIN_ORDER_TOTAL.amount:
            raise BusinessRuleError(f"Minimum order amount is {MIN_ORDER_TOTAL}")
        if total > MAX_ORDER_TOTAL.amount:
            raise BusinessRuleError(f"Maximum order amount is {MAX_ORDER_TOTAL}")

    def _validate_user_order_limits(self, user: User) -> None:
        """Daily ceiling for customers, then the open-order ceiling for everyone.

        Open means pending, confirmed or shipped, not pending alone.
        """
        if not user.is_admin:
            recent = self._order_repo.count_by_criteria(
                OrderCriteria(user_id=user.id, start_date=self._clock() - DAILY_WINDOW)
            )
            if recent >= MAX_DAILY_ORDERS:
                logger.info("daily_order_limit_reached", user_id=user.id.value, recent_orders=recent)
                raise BusinessRuleError(
                    f"Daily order limit exceeded ({MAX_DAILY_ORDERS} orders per day)"
                )

        open_orders = self._order_repo.count_by_criteria(
            OrderCriteria(user_id=user.id, statuses=OPEN_STATUSES)
        )
        if open_orders >= MAX_OPEN_ORDERS:
            logger.info("open_order_limit_reached", user_id=user.id.value, open_orders=open_orders)
            raise BusinessRuleError(
                f"Too many open orders (maximum {MAX_OPEN_ORDERS}). "
                "Please complete or cancel existing orders."
            )

    # --- Status changes -------------------------------------------------------

    def validate_status_change(self, order: Order, target: OrderStatus, actor: User) -> None:
        """Check transition legality, then permission, then the time boxes."""
        if not order.status.can_transition_to(target):
            raise InvalidTransitionError(order.status, target, order.status.valid_transitions())

        # owners may cancel their own orders; everything else is admin-only
        own_cancellation = target is OrderStatus.CANCELLED and order.is_for_user(actor.id)
        if not own_cancellation and not actor.is_admin:
            raise PermissionDeniedError("Only administrators can change order status")

        age = self._clock() - order.updated_at
        if order.status is OrderStatus.SHIPPED and target is OrderStatus.DELIVERED:
            if age > DELIVERY_CONFIRMATION_WINDOW:
                raise BusinessRuleError("Cannot mark as delivered after 30 days from shipment")
        if order.status is OrderStatus.CONFIRMED and target is OrderStatus.CANCELLED:
            if age > CONFIRMED_CANCELLATION_WINDOW:
                raise BusinessRuleError("Cannot cancel confirmed order after 24 hours")

    # --- Stock effects --------------------------------------------------------

    def process_order_cancellation(self, order: Order, products: Iterable[Product]) -> list[Product]:
        """Return the products with the order's quantities put back in stock.

        Products that no longer exist are skipped with a warning.
        """
        catalog = {p.id: p for p in products}
        restored: list[Product] = []
        for line in order.lines:
            product = catalog.get(line.product_id)
            if product is None:
                logger.warning(
                    "restock_product_missing",
                    order_id=order.id.value,
                    product_id=line.product_id.value,
                )
                continue
            restored.append(product.increase_stock(line.quantity))
        return restored

    def process_order_completion(self, order: Order, products: Iterable[Product]) -> list[Product]:
        """Return the products with the order's quantities taken out of stock."""
        catalog = {p.id: p for p in products}
        return [
            self._find(catalog, line.product_id).decrease_stock(line.quantity)
            for line in order.lines
        ]

    # --- Analysis -------------------------------------------------------------

    def calculate_order_value(self, order: Order) -> OrderValueAnalysis:
        total = order.total_amount
        lines = order.item_count
        if not lines:
            return OrderValueAnalysis(total, Money.zero(), 0, OrderSize.for_amount(total), 0)

        amount_score = min(total.amount / 1000, 50)
        line_score = min(lines * 10, 50)
        return OrderValueAnalysis(
            total_amount=total,
            average_line_price=Money(total.amount // lines),
            average_quantity_per_line=order.total_quantity() // lines,
            size=OrderSize.for_amount(total),
            profitability_score=int(amount_score + line_score),
        )

    def detect_duplicate_order(
        self,
        user: User,
        cart: Cart,
        window: timedelta = DUPLICATE_ORDER_WINDOW,
    ) -> bool:
        """True if the user placed an order for exactly the cart's products recently.

        Compares product-id sets, so line order and quantities do not matter.
        """
        if cart.is_empty():
            return False
        recent = self._order_repo.find_by_criteria(
            OrderCriteria(user_id=user.id, start_date=self._clock() - window, limit=MAX_LIMIT)
        )
        cart_products = cart.product_ids()
        for order in recent:
            if order.product_ids() == cart_products:
                logger.info(
                    "duplicate_order_suspected",
                    user_id=user.id.value,
                    order_id=order.id.value,
                )
                return True
        return False

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _find(catalog: dict[ProductId, Product], product_id: ProductId) -> Product:
        product = catalog.get(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        return product
