"""Domain service: product rules.

Catalog-wide checks for products: unique names, the naming policy,
per-category price floors, stock sufficiency and a simple competitive
pricing analysis against same-category products.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from storefront.domain.exceptions import BusinessRuleError, InsufficientStockError
from storefront.domain.model.product import Category, Product
from storefront.domain.model.value_objects import Count, Money, ProductId, StockLevel
from storefront.domain.repository.criteria import ProductCriteria
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MIN_NAME_LENGTH = 3
PROHIBITED_NAME_WORDS = ("test", "sample", "dummy", "fake")
MINIMUM_PRICES = {
    Category.ELECTRONICS: Money(1000),
    Category.FASHION: Money(500),
    Category.BOOKS: Money(100),
    Category.HOME: Money(300),
    Category.SPORTS: Money(500),
    Category.FOOD: Money(100),
}
HIGH_VALUE_THRESHOLD = Money(1_000_000)
LARGE_STOCK_THRESHOLD = 1000
PRICING_SAMPLE_SIZE = 100
LOW_STOCK_THRESHOLD = 10

_PROHIBITED_CHARS = re.compile(r"[<>\"'&]")


class PricePosition(Enum):
    LOW = "low"
    AVERAGE = "average"
    HIGH = "high"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PricingAnalysis:
    position: PricePosition
    average_price: Money
    peer_count: int
    recommendation: str

    @property
    def is_competitive(self) -> bool:
        return self.position is not PricePosition.HIGH


@dataclass(frozen=True)
class ProductStatistics:
    total_products: int
    active_products: int
    in_stock_products: int
    category_distribution: dict[Category, int]

    @property
    def inactive_products(self) -> int:
        return self.total_products - self.active_products

    @property
    def out_of_stock_products(self) -> int:
        return self.total_products - self.in_stock_products

    @property
    def stock_rate(self) -> float:
        return self.in_stock_products / self.total_products * 100 if self.total_products else 0.0

    @property
    def active_rate(self) -> float:
        return self.active_products / self.total_products * 100 if self.total_products else 0.0


class ProductRules:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    # --- Registration ---------------------------------------------------------

    def validate_name_uniqueness(
        self, name: str, exclude_product_id: ProductId | None = None
    ) -> None:
        if self._product_repo.exists_by_name(name, exclude_product_id):
            raise BusinessRuleError(f"Product name {name!r} is already in use")

    def validate_registration(
        self,
        name: str,
        price: Money,
        stock: StockLevel,
        category: Category,
    ) -> list[str]:
        """Check a new product against the catalog rules.

        Returns the non-fatal warnings (very high price, very large stock);
        they are logged but never block the registration.
        """
        self.validate_name_uniqueness(name)
        self.validate_name(name)
        self.validate_price(price, category)

        warnings: list[str] = []
        if price >= HIGH_VALUE_THRESHOLD:
            warnings.append(f"High-value product: {price}")
        if stock.value >= LARGE_STOCK_THRESHOLD:
            warnings.append(f"Large stock quantity: {stock.value} units")
        for warning in warnings:
            logger.warning("product_registration_warning", name=name, warning=warning)
        return warnings

    def validate_name(self, name: str) -> None:
        if _PROHIBITED_CHARS.search(name):
            raise BusinessRuleError("Product name contains prohibited characters")
        if len(name.strip()) < MIN_NAME_LENGTH:
            raise BusinessRuleError(
                f"Product name must be at least {MIN_NAME_LENGTH} characters long"
            )
        lowered = name.lower()
        for word in PROHIBITED_NAME_WORDS:
            if word in lowered:
                raise BusinessRuleError(f"Product name cannot contain prohibited word: {word}")

    def validate_price(self, price: Money, category: Category) -> None:
        minimum = MINIMUM_PRICES[category]
        if price < minimum:
            raise BusinessRuleError(
                f"Price for the {category.label} category must be at least {minimum}"
            )

    # --- Stock ----------------------------------------------------------------

    def validate_stock_decrease(self, product: Product, count: Count) -> None:
        self.validate_units_available(product, count.value)

    def validate_units_available(self, product: Product, units: int) -> None:
        """Like ``validate_stock_decrease`` for a raw unit total.

        Merged cart lines can exceed what a single Count may hold.
        """
        if units > product.stock.value:
            raise InsufficientStockError(
                f"Insufficient stock for {product.name!r}. "
                f"Available: {product.stock.value}, Required: {units}"
            )
        if not product.is_available_for_sale():
            raise InsufficientStockError(f"Product {product.name!r} is not available for sale")

    def can_sell(self, product: Product, count: Count) -> bool:
        return product.is_available_for_sale() and product.has_enough_stock(count)

    def can_sell_all(self, pairs: Iterable[tuple[Product, Count]]) -> bool:
        return all(self.can_sell(product, count) for product, count in pairs)

    def find_low_stock_products(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
        """Active products that still have stock but no more than *threshold*."""
        return [
            p for p in self._product_repo.list_all()
            if p.is_active and 0 < p.stock.value <= threshold
        ]

    def find_out_of_stock_products(self) -> list[Product]:
        return [p for p in self._product_repo.list_all() if p.is_out_of_stock()]

    # --- Analysis -------------------------------------------------------------

    def analyze_pricing(self, product: Product) -> PricingAnalysis:
        """Place *product*'s price against the mean of active peers.

        Below 80% of the mean is LOW, above 120% is HIGH.
        """
        peers = self._product_repo.find_by_criteria(
            ProductCriteria(
                category=product.category,
                active_only=True,
                limit=PRICING_SAMPLE_SIZE,
            )
        )
        if not peers:
            return PricingAnalysis(
                position=PricePosition.UNKNOWN,
                average_price=product.price,
                peer_count=0,
                recommendation="No competitor data available",
            )

        average = Money(sum(p.price.amount for p in peers) // len(peers))
        # integer comparison against 0.8x / 1.2x of the average
        if product.price.amount * 10 < average.amount * 8:
            position = PricePosition.LOW
            recommendation = "Price is below market average. Consider increasing for better margins."
        elif product.price.amount * 10 > average.amount * 12:
            position = PricePosition.HIGH
            recommendation = (
                f"Price is above market average ({average}). "
                "Consider reducing for competitiveness."
            )
        else:
            position = PricePosition.AVERAGE
            recommendation = "Price is competitive with market average."

        return PricingAnalysis(position, average, len(peers), recommendation)

    def generate_statistics(self) -> ProductStatistics:
        return ProductStatistics(
            total_products=self._product_repo.count(),
            active_products=self._product_repo.count_active(),
            in_stock_products=self._product_repo.count_in_stock(),
            category_distribution={
                category: self._product_repo.count_by_category(category)
                for category in Category
            },
        )
