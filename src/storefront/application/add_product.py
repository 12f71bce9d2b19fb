"""Application service: Add Product use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import ProductDTO
from storefront.application.mappers import product_to_dto
from storefront.domain.model.product import Category, Product
from storefront.domain.model.value_objects import Money, StockLevel
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.product_rules import ProductRules

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository, product_rules: ProductRules) -> None:
        self._product_repo = product_repo
        self._product_rules = product_rules

    def handle(
        self,
        name: str,
        price: str | int,
        stock: int,
        category: str,
        description: str | None = None,
        image_url: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog.

        Registration warnings are returned on the DTO; they never block.
        """
        money = Money.of(price)
        level = StockLevel(stock)
        parsed_category = Category.parse(category)
        warnings = self._product_rules.validate_registration(
            name, money, level, parsed_category
        )

        product = Product.create(
            id=self._product_repo.next_id(),
            name=name,
            price=money,
            stock=level,
            category=parsed_category,
            description=description,
            image_url=image_url,
        )
        self._product_repo.save(product)
        logger.info("product_added", product_id=product.id.value, name=product.name)
        return product_to_dto(product, warnings)
