"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.product import Category, Product
from storefront.domain.model.value_objects import Money, ProductId, StockLevel
from storefront.infrastructure.persistence.in_memory import InMemoryProductRepository
from storefront.infrastructure.persistence.json_file import JsonFile, dump_time, load_time


class JsonProductRepository(InMemoryProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        super().__init__(self._to_domain(raw) for raw in self._file.load())

    def _on_change(self) -> None:
        self._file.persist([self._to_raw(p) for p in self.list_all()])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id.value,
            "name": product.name,
            "price": product.price.amount,
            "stock": product.stock.value,
            "category": product.category.value,
            "is_active": product.is_active,
            "description": product.description,
            "image_url": product.image_url,
            "created_at": dump_time(product.created_at),
            "updated_at": dump_time(product.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product.restore(
            id=ProductId(raw["id"]),
            name=raw["name"],
            price=Money(raw["price"]),
            stock=StockLevel(raw["stock"]),
            category=Category(raw["category"]),
            is_active=raw.get("is_active", True),
            created_at=load_time(raw["created_at"]),
            updated_at=load_time(raw["updated_at"]),
            description=raw.get("description"),
            image_url=raw.get("image_url"),
        )
