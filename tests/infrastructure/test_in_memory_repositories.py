"""Query surface of the in-memory repositories."""

from datetime import timedelta

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.product import Category
from storefront.domain.model.value_objects import Money, OrderId, ProductId, UserId
from storefront.domain.repository.criteria import OrderCriteria, OrderSortField, ProductCriteria, SortOrder
from storefront.infrastructure.persistence.in_memory import (
    InMemoryCartRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
    InMemoryUserRepository,
)
from tests.fakes import T0, make_cart, make_order, make_product, make_user


class TestUserQueries:

    def test_find_created_after(self):
        repo = InMemoryUserRepository([
            make_user(1, created_at=T0 - timedelta(days=40)),
            make_user(2, created_at=T0 - timedelta(days=2)),
        ])
        assert [u.id for u in repo.find_created_after(T0 - timedelta(days=7))] == [UserId(2)]

    def test_exists_by_email_excluding_self(self):
        repo = InMemoryUserRepository([make_user(1, email="a@example.com")])
        email = make_user(1, email="a@example.com").email
        assert repo.exists_by_email(email)
        assert not repo.exists_by_email(email, exclude_user_id=UserId(1))


class TestProductQueries:

    def _repo(self):
        return InMemoryProductRepository([
            make_product(1, price=1500, stock=0),
            make_product(2, price=900, category=Category.FOOD),
            make_product(3, price=3000, is_active=False),
        ])

    def test_counts(self):
        repo = self._repo()
        assert repo.count_active() == 2
        assert repo.count_in_stock() == 2
        assert repo.count_by_category(Category.BOOKS) == 2

    def test_price_range(self):
        criteria = ProductCriteria(min_price=Money(1000), max_price=Money(2000))
        assert [p.id for p in self._repo().find_by_criteria(criteria)] == [ProductId(1)]

    def test_inverted_price_range_rejected(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            ProductCriteria(min_price=Money(2000), max_price=Money(1000))

    def test_limit_bounds(self):
        with pytest.raises(ValidationError, match="between 1 and 100"):
            ProductCriteria(limit=101)


class TestCartQueries:

    def test_statistics(self):
        repo = InMemoryCartRepository([
            make_cart((1, 1), (2, 1), session_id="a"),
            make_cart((1, 3), session_id="b"),
        ])
        stats = repo.get_statistics()
        assert stats.total_sessions == 2
        assert stats.total_items == 3
        assert stats.average_items_per_cart == 1.5
        assert stats.most_popular_product_ids[0] == ProductId(1)

    def test_empty_store(self):
        stats = InMemoryCartRepository().get_statistics()
        assert stats.total_sessions == 0
        assert stats.average_items_per_cart == 0.0


class TestOrderQueries:

    def _repo(self):
        return InMemoryOrderRepository([
            make_order(1, user_id=1, items=((1, 1, 1000),), created_at=T0),
            make_order(2, user_id=1, items=((1, 3, 1000),), created_at=T0 + timedelta(hours=1)),
            make_order(3, user_id=2, items=((2, 1, 5000),), created_at=T0 + timedelta(days=1)),
            make_order(
                4, user_id=2, items=((2, 1, 9000),),
                status=OrderStatus.CANCELLED, created_at=T0 + timedelta(days=1),
            ),
        ])

    def test_latest_by_user(self):
        assert self._repo().find_latest_by_user(UserId(1)).id == OrderId(2)
        assert self._repo().find_latest_by_user(UserId(9)) is None

    def test_status_filter_and_sort(self):
        criteria = OrderCriteria(
            statuses=frozenset({OrderStatus.PENDING}),
            sort_by=OrderSortField.TOTAL_AMOUNT,
            sort_order=SortOrder.ASC,
        )
        assert [o.id.value for o in self._repo().find_by_criteria(criteria)] == [1, 2, 3]

    def test_sales_statistics_skip_cancelled(self):
        stats = self._repo().get_sales_statistics()
        assert stats.total_sales == 9000
        assert stats.order_count == 3
        assert stats.average_order_value == 3000
        assert [(d.date, d.sales) for d in stats.daily_sales] == [
            ("2024-06-01", 4000),
            ("2024-06-02", 5000),
        ]
        assert stats.top_sales_day.date == "2024-06-02"

    def test_sales_statistics_date_range(self):
        stats = self._repo().get_sales_statistics(start=T0 + timedelta(minutes=30))
        assert stats.total_sales == 8000
        assert stats.daily_sales[0].average_order_value == 3000
