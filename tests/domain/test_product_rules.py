"""Unit tests for the ProductRules domain service."""

import pytest

from storefront.domain.exceptions import BusinessRuleError, InsufficientStockError
from storefront.domain.model.product import Category
from storefront.domain.model.value_objects import Count, Money, StockLevel
from storefront.domain.service.product_rules import PricePosition, ProductRules
from storefront.infrastructure.persistence.in_memory import InMemoryProductRepository
from tests.fakes import make_product


def _rules(*products) -> ProductRules:
    return ProductRules(InMemoryProductRepository(products))


class TestRegistration:

    def test_duplicate_name_rejected_case_insensitively(self):
        rules = _rules(make_product(1, name="Green Tea"))
        with pytest.raises(BusinessRuleError, match="already in use"):
            rules.validate_registration("green tea", Money(500), StockLevel(1), Category.FOOD)

    def test_price_floor_per_category(self):
        with pytest.raises(BusinessRuleError, match="Electronics & Gadgets category must be at least ¥1,000"):
            _rules().validate_price(Money(999), Category.ELECTRONICS)
        _rules().validate_price(Money(100), Category.FOOD)

    @pytest.mark.parametrize("name, message", [
        ("Tea<script>", "prohibited characters"),
        ("ab", "at least 3 characters"),
        ("Sample Mug", "prohibited word: sample"),
    ])
    def test_name_policy(self, name, message):
        with pytest.raises(BusinessRuleError, match=message):
            _rules().validate_name(name)

    def test_warnings_do_not_block(self):
        warnings = _rules().validate_registration(
            "Grand Piano", Money(2_000_000), StockLevel(1500), Category.HOME
        )
        assert warnings == ["High-value product: ¥2,000,000", "Large stock quantity: 1500 units"]

    def test_plain_registration_has_no_warnings(self):
        assert _rules().validate_registration("Novel", Money(1500), StockLevel(3), Category.BOOKS) == []


class TestStock:

    def test_stock_decrease_beyond_available(self):
        with pytest.raises(InsufficientStockError, match="Available: 5, Required: 6"):
            _rules().validate_stock_decrease(make_product(stock=5), Count(6))

    def test_stock_decrease_of_inactive_product(self):
        with pytest.raises(InsufficientStockError, match="not available for sale"):
            _rules().validate_stock_decrease(make_product(is_active=False), Count(1))

    def test_exact_stock_accepted(self):
        _rules().validate_stock_decrease(make_product(stock=5), Count(5))

    def test_can_sell_all(self):
        rules = _rules()
        assert rules.can_sell_all([(make_product(1, stock=2), Count(2))])
        assert not rules.can_sell_all([
            (make_product(1, stock=2), Count(2)),
            (make_product(2, stock=0), Count(1)),
        ])

    def test_low_and_out_of_stock(self):
        rules = _rules(
            make_product(1, stock=3),
            make_product(2, stock=0),
            make_product(3, stock=100),
            make_product(4, stock=2, is_active=False),
        )
        assert [p.id.value for p in rules.find_low_stock_products()] == [1]
        assert [p.id.value for p in rules.find_out_of_stock_products()] == [2]


class TestPricingAnalysis:

    def _catalog(self, target_price: int) -> ProductRules:
        return _rules(
            make_product(1, price=target_price, category=Category.BOOKS),
            make_product(2, price=1000, category=Category.BOOKS),
            make_product(3, price=1000, category=Category.BOOKS),
            make_product(4, price=50_000, category=Category.ELECTRONICS),
        )

    def test_no_peers_is_unknown(self):
        product = make_product(1)
        assert _rules().analyze_pricing(product).position is PricePosition.UNKNOWN

    def test_high_price(self):
        # average of 3000, 1000, 1000 is 1666; 3000 > 1.2x
        rules = self._catalog(3000)
        analysis = rules.analyze_pricing(make_product(1, price=3000))
        assert analysis.position is PricePosition.HIGH
        assert analysis.peer_count == 3
        assert not analysis.is_competitive

    def test_low_price(self):
        rules = self._catalog(100)
        assert rules.analyze_pricing(make_product(1, price=100)).position is PricePosition.LOW

    def test_average_price(self):
        rules = self._catalog(1000)
        assert rules.analyze_pricing(make_product(1, price=1000)).position is PricePosition.AVERAGE


class TestStatistics:

    def test_counts(self):
        stats = _rules(
            make_product(1, stock=0),
            make_product(2, is_active=False),
            make_product(3, category=Category.FOOD),
        ).generate_statistics()
        assert stats.total_products == 3
        assert stats.active_products == 2
        assert stats.in_stock_products == 2
        assert stats.category_distribution[Category.BOOKS] == 2
        assert stats.category_distribution[Category.FOOD] == 1
