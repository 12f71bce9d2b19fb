"""Application services: catalog queries (list, pricing analysis)."""

from __future__ import annotations

from storefront.application.dto import PricingDTO, ProductDTO
from storefront.application.mappers import product_to_dto
from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.model.product import Category
from storefront.domain.model.value_objects import ProductId
from storefront.domain.repository.criteria import (
    DEFAULT_LIMIT,
    ProductCriteria,
    ProductSortField,
    SortOrder,
)
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.product_rules import ProductRules


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str | None = None,
        category: str | None = None,
        active_only: bool = False,
        in_stock_only: bool = False,
        sort_by: str = "id",
        descending: bool = False,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> list[ProductDTO]:
        try:
            sort_field = ProductSortField(sort_by)
        except ValueError:
            valid = ", ".join(f.value for f in ProductSortField)
            raise ValidationError(f"Invalid sort field: {sort_by!r}. Valid fields are: {valid}") from None

        criteria = ProductCriteria(
            name=name,
            category=Category.parse(category) if category else None,
            active_only=active_only,
            in_stock_only=in_stock_only,
            limit=limit,
            offset=offset,
            sort_by=sort_field,
            sort_order=SortOrder.DESC if descending else SortOrder.ASC,
        )
        return [product_to_dto(p) for p in self._product_repo.find_by_criteria(criteria)]


class AnalyzePricingHandler:

    def __init__(self, product_repo: ProductRepository, product_rules: ProductRules) -> None:
        self._product_repo = product_repo
        self._product_rules = product_rules

    def handle(self, product_id: int) -> PricingDTO:
        product = self._product_repo.get_by_id(ProductId(product_id))
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")

        analysis = self._product_rules.analyze_pricing(product)
        return PricingDTO(
            product_id=product_id,
            product_name=product.name,
            price=str(product.price),
            position=analysis.position.value,
            average_price=str(analysis.average_price),
            peer_count=analysis.peer_count,
            recommendation=analysis.recommendation,
        )
