"""Application service: Update Product use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import ProductDTO
from storefront.application.mappers import product_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.value_objects import Money, ProductId, StockLevel
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.product_rules import ProductRules

logger = structlog.get_logger(__name__)


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository, product_rules: ProductRules) -> None:
        self._product_repo = product_repo
        self._product_rules = product_rules

    def handle(
        self,
        product_id: int,
        name: str | None = None,
        price: str | int | None = None,
        stock: int | None = None,
        active: bool | None = None,
        description: str | None = None,
    ) -> ProductDTO:
        """Change catalog details, stock level or activation.

        This does NOT affect any existing orders; they captured a
        price snapshot at creation time.
        """
        pid = ProductId(product_id)
        product = self._product_repo.get_by_id(pid)
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")

        if name is not None:
            self._product_rules.validate_name_uniqueness(name, exclude_product_id=pid)
            self._product_rules.validate_name(name)
        new_price = Money.of(price) if price is not None else None
        if new_price is not None:
            self._product_rules.validate_price(new_price, product.category)

        product = product.update_info(name=name, description=description, price=new_price)
        if stock is not None:
            product = product.update_stock(StockLevel(stock))
        if active is True:
            product = product.activate()
        elif active is False:
            product = product.deactivate()

        self._product_repo.save(product)
        logger.info("product_updated", product_id=product_id)
        return product_to_dto(product)
