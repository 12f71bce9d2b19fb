"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (in-memory, JSON)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from storefront.domain.model.product import Category, Product
from storefront.domain.model.value_objects import ProductId
from storefront.domain.repository.criteria import ProductCriteria


class ProductRepository(ABC):

    @abstractmethod
    def next_id(self) -> ProductId:
        """Generate the next unique product ID."""

    @abstractmethod
    def get_by_id(self, product_id: ProductId) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_ids(self, product_ids: Iterable[ProductId]) -> list[Product]:
        """Return the products that exist among *product_ids*."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name (case-insensitive), or None."""

    @abstractmethod
    def find_by_criteria(self, criteria: ProductCriteria) -> list[Product]:
        """Return one page of products matching *criteria*."""

    @abstractmethod
    def count_by_criteria(self, criteria: ProductCriteria) -> int:
        """Number of products matching *criteria*, ignoring paging."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def delete(self, product_id: ProductId) -> None:
        """Remove a product; unknown IDs are ignored."""

    @abstractmethod
    def exists_by_id(self, product_id: ProductId) -> bool:
        """True if a product with this ID exists."""

    @abstractmethod
    def exists_by_name(self, name: str, exclude_product_id: ProductId | None = None) -> bool:
        """True if another product (not *exclude_product_id*) uses *name*."""

    @abstractmethod
    def count(self) -> int:
        """Number of products."""

    @abstractmethod
    def count_active(self) -> int:
        """Number of active products."""

    @abstractmethod
    def count_in_stock(self) -> int:
        """Number of products with stock left."""

    @abstractmethod
    def count_by_category(self, category: Category) -> int:
        """Number of products in *category*."""
