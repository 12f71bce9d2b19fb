"""Search criteria and aggregate result types shared by repositories.

Defined in the domain layer next to the abstract repositories so that
rule services can express queries without knowing the storage technology.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.product import Category
from storefront.domain.model.value_objects import Money, ProductId, UserId

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


class ProductSortField(Enum):
    ID = "id"
    NAME = "name"
    PRICE = "price"
    STOCK = "stock"
    CATEGORY = "category"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class OrderSortField(Enum):
    ID = "id"
    USER_ID = "user_id"
    TOTAL_AMOUNT = "total_amount"
    STATUS = "status"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


def _check_paging(limit: int, offset: int) -> None:
    if not 1 <= limit <= MAX_LIMIT:
        raise ValidationError(f"Limit must be between 1 and {MAX_LIMIT}")
    if offset < 0:
        raise ValidationError("Offset cannot be negative")


@dataclass(frozen=True)
class ProductCriteria:
    name: str | None = None  # case-insensitive substring
    category: Category | None = None
    min_price: Money | None = None
    max_price: Money | None = None
    active_only: bool = False
    in_stock_only: bool = False
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort_by: ProductSortField = ProductSortField.ID
    sort_order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        _check_paging(self.limit, self.offset)
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValidationError("Minimum price cannot exceed maximum price")


@dataclass(frozen=True)
class OrderCriteria:
    user_id: UserId | None = None
    statuses: frozenset[OrderStatus] = frozenset()  # empty means any status
    start_date: datetime | None = None  # inclusive, on created_at
    end_date: datetime | None = None  # inclusive, on created_at
    min_amount: Money | None = None
    max_amount: Money | None = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort_by: OrderSortField = OrderSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    def __post_init__(self) -> None:
        _check_paging(self.limit, self.offset)
        if self.start_date is not None and self.end_date is not None and self.start_date > self.end_date:
            raise ValidationError("Start date cannot be after end date")
        if self.min_amount is not None and self.max_amount is not None and self.min_amount > self.max_amount:
            raise ValidationError("Minimum amount cannot exceed maximum amount")


# ---------------------------------------------------------------------------
# Aggregate query results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CartStatistics:
    total_sessions: int
    total_items: int
    average_items_per_cart: float
    most_popular_product_ids: tuple[ProductId, ...]


@dataclass(frozen=True)
class DailySales:
    date: str  # YYYY-MM-DD
    sales: int  # yen; may exceed the Money ceiling
    order_count: int

    @property
    def average_order_value(self) -> int:
        if not self.order_count:
            return 0
        return self.sales // self.order_count


@dataclass(frozen=True)
class SalesStatistics:
    total_sales: int
    order_count: int
    daily_sales: tuple[DailySales, ...] = field(default_factory=tuple)

    @property
    def average_order_value(self) -> int:
        if not self.order_count:
            return 0
        return self.total_sales // self.order_count

    @property
    def top_sales_day(self) -> DailySales | None:
        if not self.daily_sales:
            return None
        return max(self.daily_sales, key=lambda d: d.sales)
