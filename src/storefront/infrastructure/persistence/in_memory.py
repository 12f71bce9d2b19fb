"""In-memory implementations of the domain repositories.

Entities are immutable, so the stores hold them directly without
copying.  Every write goes through ``_on_change()``, which the JSON
repositories override to flush the store to disk.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Category, Product
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import EmailAddress, OrderId, ProductId, UserId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.criteria import (
    CartStatistics,
    DailySales,
    OrderCriteria,
    OrderSortField,
    ProductCriteria,
    ProductSortField,
    SalesStatistics,
    SortOrder,
)
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository

T = TypeVar("T")

POPULAR_PRODUCTS_SHOWN = 5

_PRODUCT_SORT_KEYS: dict[ProductSortField, Callable[[Product], Any]] = {
    ProductSortField.ID: lambda p: p.id.value,
    ProductSortField.NAME: lambda p: p.name.lower(),
    ProductSortField.PRICE: lambda p: p.price.amount,
    ProductSortField.STOCK: lambda p: p.stock.value,
    ProductSortField.CATEGORY: lambda p: p.category.value,
    ProductSortField.CREATED_AT: lambda p: p.created_at,
    ProductSortField.UPDATED_AT: lambda p: p.updated_at,
}

_ORDER_SORT_KEYS: dict[OrderSortField, Callable[[Order], Any]] = {
    OrderSortField.ID: lambda o: o.id.value,
    OrderSortField.USER_ID: lambda o: o.user_id.value,
    OrderSortField.TOTAL_AMOUNT: lambda o: o.total_amount.amount,
    OrderSortField.STATUS: lambda o: o.status.value,
    OrderSortField.CREATED_AT: lambda o: o.created_at,
    OrderSortField.UPDATED_AT: lambda o: o.updated_at,
}


def _page(items: Iterable[T], key: Callable[[T], Any], order: SortOrder, limit: int, offset: int) -> list[T]:
    ordered = sorted(items, key=key, reverse=order is SortOrder.DESC)
    return ordered[offset:offset + limit]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class InMemoryUserRepository(UserRepository):

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._store: dict[UserId, User] = {}
        self._last_id = 0
        for user in users:
            self._put(user)

    def next_id(self) -> UserId:
        self._last_id += 1
        return UserId(self._last_id)

    def get_by_id(self, user_id: UserId) -> User | None:
        return self._store.get(user_id)

    def get_by_email(self, email: EmailAddress) -> User | None:
        for user in self._store.values():
            if user.email == email:
                return user
        return None

    def list_all(self, limit: int = 20, offset: int = 0) -> list[User]:
        return _page(self._store.values(), lambda u: u.id.value, SortOrder.ASC, limit, offset)

    def list_admins(self) -> list[User]:
        return [u for u in self._store.values() if u.is_admin]

    def save(self, user: User) -> None:
        self._put(user)
        self._on_change()

    def delete(self, user_id: UserId) -> None:
        if self._store.pop(user_id, None) is not None:
            self._on_change()

    def exists_by_id(self, user_id: UserId) -> bool:
        return user_id in self._store

    def exists_by_email(self, email: EmailAddress, exclude_user_id: UserId | None = None) -> bool:
        return any(
            u.email == email and u.id != exclude_user_id for u in self._store.values()
        )

    def count(self) -> int:
        return len(self._store)

    def count_admins(self) -> int:
        return len(self.list_admins())

    def find_created_after(self, moment: datetime) -> list[User]:
        return [u for u in self._store.values() if u.created_at > moment]

    def _put(self, user: User) -> None:
        self._store[user.id] = user
        self._last_id = max(self._last_id, user.id.value)

    def _on_change(self) -> None:
        """Hook called after every write."""


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class InMemoryProductRepository(ProductRepository):

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._store: dict[ProductId, Product] = {}
        self._last_id = 0
        for product in products:
            self._put(product)

    def next_id(self) -> ProductId:
        self._last_id += 1
        return ProductId(self._last_id)

    def get_by_id(self, product_id: ProductId) -> Product | None:
        return self._store.get(product_id)

    def get_by_ids(self, product_ids: Iterable[ProductId]) -> list[Product]:
        return [self._store[pid] for pid in dict.fromkeys(product_ids) if pid in self._store]

    def get_by_name(self, name: str) -> Product | None:
        wanted = name.strip().lower()
        for product in self._store.values():
            if product.name.lower() == wanted:
                return product
        return None

    def find_by_criteria(self, criteria: ProductCriteria) -> list[Product]:
        return _page(
            self._matching(criteria),
            _PRODUCT_SORT_KEYS[criteria.sort_by],
            criteria.sort_order,
            criteria.limit,
            criteria.offset,
        )

    def count_by_criteria(self, criteria: ProductCriteria) -> int:
        return len(self._matching(criteria))

    def list_all(self) -> list[Product]:
        return sorted(self._store.values(), key=lambda p: p.id.value)

    def save(self, product: Product) -> None:
        self._put(product)
        self._on_change()

    def delete(self, product_id: ProductId) -> None:
        if self._store.pop(product_id, None) is not None:
            self._on_change()

    def exists_by_id(self, product_id: ProductId) -> bool:
        return product_id in self._store

    def exists_by_name(self, name: str, exclude_product_id: ProductId | None = None) -> bool:
        found = self.get_by_name(name)
        return found is not None and found.id != exclude_product_id

    def count(self) -> int:
        return len(self._store)

    def count_active(self) -> int:
        return sum(1 for p in self._store.values() if p.is_active)

    def count_in_stock(self) -> int:
        return sum(1 for p in self._store.values() if not p.is_out_of_stock())

    def count_by_category(self, category: Category) -> int:
        return sum(1 for p in self._store.values() if p.category is category)

    def _matching(self, c: ProductCriteria) -> list[Product]:
        needle = c.name.strip().lower() if c.name else None
        return [
            p for p in self._store.values()
            if (needle is None or needle in p.name.lower())
            and (c.category is None or p.category is c.category)
            and (c.min_price is None or p.price >= c.min_price)
            and (c.max_price is None or p.price <= c.max_price)
            and (not c.active_only or p.is_active)
            and (not c.in_stock_only or not p.is_out_of_stock())
        ]

    def _put(self, product: Product) -> None:
        self._store[product.id] = product
        self._last_id = max(self._last_id, product.id.value)

    def _on_change(self) -> None:
        """Hook called after every write."""


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------


class InMemoryCartRepository(CartRepository):

    def __init__(self, carts: Iterable[Cart] = ()) -> None:
        self._store: dict[str, Cart] = {}
        self._last_line_id = 0
        for cart in carts:
            self._put(cart)

    def next_line_id(self) -> int:
        self._last_line_id += 1
        return self._last_line_id

    def get_by_session(self, session_id: str) -> Cart:
        return self._store.get(session_id) or Cart.create(session_id)

    def get_line(self, line_id: int) -> CartLine | None:
        for cart in self._store.values():
            for line in cart.lines:
                if line.id == line_id:
                    return line
        return None

    def get_line_for_product(self, session_id: str, product_id: ProductId) -> CartLine | None:
        return self.get_by_session(session_id).line_for_product(product_id)

    def save(self, cart: Cart) -> None:
        self._put(cart)
        self._on_change()

    def clear(self, session_id: str) -> None:
        if self._store.pop(session_id, None) is not None:
            self._on_change()

    def get_item_count(self, session_id: str) -> int:
        return self.get_by_session(session_id).item_count

    def get_total_quantity(self, session_id: str) -> int:
        return self.get_by_session(session_id).total_quantity()

    def exists_item(self, session_id: str, product_id: ProductId) -> bool:
        return self.get_by_session(session_id).has_product(product_id)

    def get_statistics(self) -> CartStatistics:
        carts = [c for c in self._store.values() if not c.is_empty()]
        total_items = sum(c.item_count for c in carts)
        popularity = Counter(pid for c in carts for pid in c.product_ids())
        return CartStatistics(
            total_sessions=len(carts),
            total_items=total_items,
            average_items_per_cart=total_items / len(carts) if carts else 0.0,
            most_popular_product_ids=tuple(
                pid for pid, _ in popularity.most_common(POPULAR_PRODUCTS_SHOWN)
            ),
        )

    def _put(self, cart: Cart) -> None:
        if cart.is_empty():
            self._store.pop(cart.session_id, None)
        else:
            self._store[cart.session_id] = cart
        for line in cart.lines:
            self._last_line_id = max(self._last_line_id, line.id)

    def _on_change(self) -> None:
        """Hook called after every write."""


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class InMemoryOrderRepository(OrderRepository):

    def __init__(self, orders: Iterable[Order] = ()) -> None:
        self._store: dict[OrderId, Order] = {}
        self._last_id = 0
        self._last_line_id = 0
        for order in orders:
            self._put(order)

    def next_id(self) -> OrderId:
        self._last_id += 1
        return OrderId(self._last_id)

    def next_line_id(self) -> int:
        self._last_line_id += 1
        return self._last_line_id

    def get_by_id(self, order_id: OrderId) -> Order | None:
        return self._store.get(order_id)

    def find_by_criteria(self, criteria: OrderCriteria) -> list[Order]:
        return _page(
            self._matching(criteria),
            _ORDER_SORT_KEYS[criteria.sort_by],
            criteria.sort_order,
            criteria.limit,
            criteria.offset,
        )

    def count_by_criteria(self, criteria: OrderCriteria) -> int:
        return len(self._matching(criteria))

    def list_by_user(self, user_id: UserId, limit: int = 20, offset: int = 0) -> list[Order]:
        return self.find_by_criteria(OrderCriteria(user_id=user_id, limit=limit, offset=offset))

    def find_latest_by_user(self, user_id: UserId) -> Order | None:
        latest = self.list_by_user(user_id, limit=1)
        return latest[0] if latest else None

    def save(self, order: Order) -> None:
        self._put(order)
        self._on_change()

    def delete(self, order_id: OrderId) -> None:
        if self._store.pop(order_id, None) is not None:
            self._on_change()

    def exists_by_id(self, order_id: OrderId) -> bool:
        return order_id in self._store

    def count(self) -> int:
        return len(self._store)

    def get_sales_statistics(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> SalesStatistics:
        orders = [
            o for o in self._store.values()
            if o.status is not OrderStatus.CANCELLED
            and (start is None or o.created_at >= start)
            and (end is None or o.created_at <= end)
        ]
        by_day: dict[str, list[Order]] = defaultdict(list)
        for order in orders:
            by_day[order.created_at.date().isoformat()].append(order)

        daily = tuple(
            DailySales(
                date=day,
                sales=sum(o.total_amount.amount for o in day_orders),
                order_count=len(day_orders),
            )
            for day, day_orders in sorted(by_day.items())
        )
        return SalesStatistics(
            total_sales=sum(o.total_amount.amount for o in orders),
            order_count=len(orders),
            daily_sales=daily,
        )

    def _matching(self, c: OrderCriteria) -> list[Order]:
        return [
            o for o in self._store.values()
            if (c.user_id is None or o.user_id == c.user_id)
            and (not c.statuses or o.status in c.statuses)
            and (c.start_date is None or o.created_at >= c.start_date)
            and (c.end_date is None or o.created_at <= c.end_date)
            and (c.min_amount is None or o.total_amount >= c.min_amount)
            and (c.max_amount is None or o.total_amount <= c.max_amount)
        ]

    def _put(self, order: Order) -> None:
        self._store[order.id] = order
        self._last_id = max(self._last_id, order.id.value)
        for line in order.lines:
            self._last_line_id = max(self._last_line_id, line.id)

    def _on_change(self) -> None:
        """Hook called after every write."""
