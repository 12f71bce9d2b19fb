"""Domain service: cart rules.

Checks that need more than one Cart can see: the product catalog, the
stored state of the session's cart, and the cart ceilings.  Every
ceiling is checked against the value the cart WOULD have after the
change, never the current value.

Like the other ceiling checks these read then validate; concurrent
additions for one session must be serialised by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

import structlog

from storefront.domain.exceptions import BusinessRuleError, NotFoundError
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.clock import Clock, utc_now
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Count, Money, ProductId, StockLevel
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.product_rules import ProductRules

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_DISTINCT_PRODUCTS = 20
MAX_UNITS_PER_PRODUCT = 99
MAX_UNITS_PER_CART = 200
FREE_SHIPPING_THRESHOLD = Money(10_000)

LONG_SESSION = timedelta(minutes=30)
MANY_LINES = 10
RISK_LONG_SESSION = 30
RISK_EMPTY_CART = 50
RISK_SINGLE_UNIT = 20
RISK_MANY_LINES = 25

FACTOR_LONG_SESSION = "Extended session duration"
FACTOR_EMPTY_CART = "Empty cart"
FACTOR_SINGLE_UNIT = "Single item in cart"
FACTOR_MANY_LINES = "High number of items (decision fatigue)"


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @staticmethod
    def from_score(score: int) -> RiskLevel:
        if score < 30:
            return RiskLevel.LOW
        if score < 70:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH


@dataclass(frozen=True)
class CartAbandonmentAnalysis:
    risk_score: int  # 0-100
    risk_level: RiskLevel
    risk_factors: tuple[str, ...]
    session_minutes: int
    recommendations: tuple[str, ...]


@dataclass(frozen=True)
class PriceInconsistency:
    line_id: int
    product_id: ProductId
    issue: str
    current_price: Money | None = None
    available_stock: StockLevel | None = None


@dataclass(frozen=True)
class CartPricingValidation:
    inconsistencies: tuple[PriceInconsistency, ...]
    calculated_total: int  # yen; may exceed the Money ceiling

    @property
    def is_valid(self) -> bool:
        return not self.inconsistencies


@dataclass(frozen=True)
class CartOptimizationSuggestions:
    suggestions: tuple[str, ...]
    unavailable_lines: tuple[CartLine, ...]
    unavailable_ratio: float  # percent of lines that cannot be bought

    @property
    def can_proceed_to_checkout(self) -> bool:
        return not self.unavailable_lines


class CartRules:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        product_rules: ProductRules,
        clock: Clock = utc_now,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._product_rules = product_rules
        self._clock = clock

    # --- Validation -----------------------------------------------------------

    def validate_cart_item_addition(
        self, session_id: str, product_id: ProductId, count: Count
    ) -> Product:
        """Check that *count* units of a product may be added to the cart.

        Chain: product exists, is for sale, has stock for the merged line,
        then the three ceilings.  Returns the product for the caller's use.
        """
        product = self._load_sellable_product(product_id)

        existing = self._cart_repo.get_line_for_product(session_id, product_id)
        line_quantity = count.value + (existing.quantity.value if existing else 0)
        self._product_rules.validate_units_available(product, line_quantity)

        if existing is None and self._cart_repo.get_item_count(session_id) + 1 > MAX_DISTINCT_PRODUCTS:
            raise self._ceiling(
                f"Cart item limit exceeded (maximum {MAX_DISTINCT_PRODUCTS} different products)",
                session_id,
            )

        if line_quantity > MAX_UNITS_PER_PRODUCT:
            raise self._ceiling(
                f"Product quantity limit exceeded (maximum {MAX_UNITS_PER_PRODUCT} per product)",
                session_id,
            )

        cart_total = self._cart_repo.get_total_quantity(session_id) + count.value
        if cart_total > MAX_UNITS_PER_CART:
            raise self._ceiling(
                f"Cart total quantity limit exceeded (maximum {MAX_UNITS_PER_CART} items)",
                session_id,
            )
        return product

    def validate_cart_item_quantity_update(self, line_id: int, count: Count) -> Product:
        """Check that an existing line may be set to *count* units."""
        line = self._cart_repo.get_line(line_id)
        if line is None:
            raise NotFoundError(f"Cart line {line_id} not found")

        product = self._load_sellable_product(line.product_id)
        self._product_rules.validate_stock_decrease(product, count)

        if count.value > MAX_UNITS_PER_PRODUCT:
            raise self._ceiling(
                f"Product quantity limit exceeded (maximum {MAX_UNITS_PER_PRODUCT} per product)",
                line.session_id,
            )

        cart_total = (
            self._cart_repo.get_total_quantity(line.session_id)
            - line.quantity.value
            + count.value
        )
        if cart_total > MAX_UNITS_PER_CART:
            raise self._ceiling(
                f"Cart total quantity limit exceeded (maximum {MAX_UNITS_PER_CART} items)",
                line.session_id,
            )
        return product

    # --- Analysis -------------------------------------------------------------

    def validate_cart_pricing(self, cart: Cart, products: Iterable[Product]) -> CartPricingValidation:
        """List lines whose product is missing or cannot supply the quantity."""
        catalog = {p.id: p for p in products}
        issues: list[PriceInconsistency] = []
        total = 0

        for line in cart.lines:
            product = catalog.get(line.product_id)
            if product is None:
                issues.append(PriceInconsistency(line.id, line.product_id, "Product not found"))
                continue
            total += line.subtotal_yen(product)
            if not line.is_available(product):
                issues.append(
                    PriceInconsistency(
                        line.id,
                        line.product_id,
                        "Product not available or insufficient stock",
                        current_price=product.price,
                        available_stock=product.stock,
                    )
                )
        return CartPricingValidation(tuple(issues), total)

    def suggest_optimizations(
        self, cart: Cart, products: Iterable[Product]
    ) -> CartOptimizationSuggestions:
        catalog = {p.id: p for p in products}
        suggestions: list[str] = []
        unavailable: list[CartLine] = []
        total = 0

        for line in cart.lines:
            product = catalog.get(line.product_id)
            if product is None:
                unavailable.append(line)
                suggestions.append(f"Remove unavailable product (ID: {line.product_id})")
                continue
            if line.is_available(product):
                total += line.subtotal_yen(product)
                continue
            unavailable.append(line)
            if product.is_out_of_stock():
                suggestions.append(f"{product.name!r} is out of stock - remove or find alternative")
            elif not product.is_active:
                suggestions.append(f"{product.name!r} is no longer available - remove from cart")
            else:
                suggestions.append(
                    f"Reduce quantity of {product.name!r} to available stock ({product.stock.value})"
                )

        if total < FREE_SHIPPING_THRESHOLD.amount:
            shortfall = Money(FREE_SHIPPING_THRESHOLD.amount - total)
            suggestions.append(f"Add {shortfall} more for free shipping")

        ratio = len(unavailable) / cart.item_count * 100 if cart.item_count else 0.0
        return CartOptimizationSuggestions(tuple(suggestions), tuple(unavailable), ratio)

    def analyze_cart_abandonment_risk(
        self, cart: Cart, session_started_at: datetime
    ) -> CartAbandonmentAnalysis:
        """Heuristic 0-100 score of how likely the session ends without an order."""
        elapsed = self._clock() - session_started_at
        score = 0
        factors: list[str] = []

        if elapsed > LONG_SESSION:
            score += RISK_LONG_SESSION
            factors.append(FACTOR_LONG_SESSION)

        if cart.is_empty():
            score += RISK_EMPTY_CART
            factors.append(FACTOR_EMPTY_CART)
        elif cart.total_quantity() == 1:
            score += RISK_SINGLE_UNIT
            factors.append(FACTOR_SINGLE_UNIT)

        if cart.item_count > MANY_LINES:
            score += RISK_MANY_LINES
            factors.append(FACTOR_MANY_LINES)

        score = min(score, 100)
        level = RiskLevel.from_score(score)
        return CartAbandonmentAnalysis(
            risk_score=score,
            risk_level=level,
            risk_factors=tuple(factors),
            session_minutes=max(int(elapsed.total_seconds() // 60), 0),
            recommendations=tuple(_recommendations(level, factors)),
        )

    # --- Internal helpers -----------------------------------------------------

    def _load_sellable_product(self, product_id: ProductId) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        if not product.is_available_for_sale():
            raise BusinessRuleError(f"Product {product.name!r} is not available for sale")
        return product

    @staticmethod
    def _ceiling(message: str, session_id: str) -> BusinessRuleError:
        logger.info("cart_ceiling_reached", session_id=session_id, reason=message)
        return BusinessRuleError(message)


def _recommendations(level: RiskLevel, factors: list[str]) -> list[str]:
    recommendations: list[str] = []
    if level is RiskLevel.HIGH:
        recommendations += [
            "Show limited-time discount offer",
            "Display free shipping reminder",
            "Suggest popular alternatives",
        ]
    if FACTOR_LONG_SESSION in factors:
        recommendations.append("Offer assistance via chat")
    if FACTOR_MANY_LINES in factors:
        recommendations += ["Suggest creating wishlist", "Highlight best sellers"]
    return recommendations
