"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves, products are listed and delisted.  Every
change returns a new Product; orders keep their own price snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.clock import utc_now
from storefront.domain.model.value_objects import Count, Money, ProductId, StockLevel, optional_text

MAX_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_IMAGE_URL_LENGTH = 500


class Category(Enum):
    ELECTRONICS = "electronics"
    FASHION = "fashion"
    BOOKS = "books"
    HOME = "home"
    SPORTS = "sports"
    FOOD = "food"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @staticmethod
    def parse(text: str) -> Category:
        normalised = (text or "").strip().lower()
        try:
            return Category(normalised)
        except ValueError:
            valid = ", ".join(c.value for c in Category)
            raise ValidationError(
                f"Invalid category: {text!r}. Valid categories are: {valid}"
            ) from None


_CATEGORY_LABELS = {
    Category.ELECTRONICS: "Electronics & Gadgets",
    Category.FASHION: "Fashion",
    Category.BOOKS: "Books",
    Category.HOME: "Home & Kitchen",
    Category.SPORTS: "Sports & Outdoors",
    Category.FOOD: "Food & Beverages",
}


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    Invariant: ``is_available_for_sale()`` holds exactly when the product
    is active and has stock left.
    """

    id: ProductId
    name: str
    price: Money
    stock: StockLevel
    category: Category
    is_active: bool = True
    description: str | None = None
    image_url: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")
        if len(self.name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Product name must be {MAX_NAME_LENGTH} characters or less"
            )
        if self.description is not None and len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Product description must be {MAX_DESCRIPTION_LENGTH} characters or less"
            )
        if self.image_url is not None and len(self.image_url) > MAX_IMAGE_URL_LENGTH:
            raise ValidationError(
                f"Image URL must be {MAX_IMAGE_URL_LENGTH} characters or less"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create(
        id: ProductId,
        name: str,
        price: Money,
        stock: StockLevel,
        category: Category,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Product:
        now = utc_now()
        return Product(
            id=id,
            name=name.strip(),
            price=price,
            stock=stock,
            category=category,
            is_active=True,
            description=optional_text(description),
            image_url=optional_text(image_url),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def restore(
        id: ProductId,
        name: str,
        price: Money,
        stock: StockLevel,
        category: Category,
        is_active: bool,
        created_at: datetime,
        updated_at: datetime,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Product:
        """Rehydrate a persisted product, keeping its original timestamps."""
        return Product(
            id=id,
            name=name,
            price=price,
            stock=stock,
            category=category,
            is_active=is_active,
            description=description,
            image_url=image_url,
            created_at=created_at,
            updated_at=updated_at,
        )

    # --- Queries --------------------------------------------------------------

    def is_out_of_stock(self) -> bool:
        return self.stock.is_empty

    def has_enough_stock(self, count: Count) -> bool:
        return self.stock.covers(count)

    def is_available_for_sale(self) -> bool:
        return self.is_active and not self.is_out_of_stock()

    # --- Mutations (copy-on-write) --------------------------------------------

    def update_info(
        self,
        name: str | None = None,
        description: str | None = None,
        price: Money | None = None,
        category: Category | None = None,
        image_url: str | None = None,
    ) -> Product:
        """Return a copy with catalog details changed.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        return replace(
            self,
            name=name.strip() if name and name.strip() else self.name,
            description=self.description if description is None else optional_text(description),
            price=price or self.price,
            category=category or self.category,
            image_url=self.image_url if image_url is None else optional_text(image_url),
            updated_at=utc_now(),
        )

    def update_stock(self, level: StockLevel) -> Product:
        return replace(self, stock=level, updated_at=utc_now())

    def decrease_stock(self, count: Count) -> Product:
        if not self.is_available_for_sale():
            raise InsufficientStockError(f"Product {self.name!r} is not available for sale")
        if not self.has_enough_stock(count):
            raise InsufficientStockError(
                f"Insufficient stock for {self.name!r} "
                f"(requested {count.value}, available {self.stock.value})"
            )
        return self.update_stock(self.stock.decrease(count))

    def increase_stock(self, count: Count) -> Product:
        return self.update_stock(self.stock.increase(count))

    def activate(self) -> Product:
        if self.is_active:
            return self
        return replace(self, is_active=True, updated_at=utc_now())

    def deactivate(self) -> Product:
        if not self.is_active:
            return self
        return replace(self, is_active=False, updated_at=utc_now())
