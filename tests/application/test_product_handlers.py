"""Integration tests for the catalog use cases."""

import pytest

from storefront.application.add_product import AddProductHandler
from storefront.application.browse_products import AnalyzePricingHandler, ListProductsHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import BusinessRuleError, NotFoundError, ValidationError
from storefront.domain.model.value_objects import Money, ProductId
from tests.fakes import in_memory_container


def _add(container, name: str, price="1500", stock: int = 10, category: str = "books"):
    handler = AddProductHandler(container.products, container.product_rules())
    return handler.handle(name=name, price=price, stock=stock, category=category)


class TestAddProduct:

    def test_adds_with_generated_id(self):
        container = in_memory_container()
        first = _add(container, "Haiku Anthology")
        second = _add(container, "Green Tea", price="¥800", category="Food")
        assert (first.id, second.id) == (1, 2)
        assert second.price == "¥800"
        assert second.category == "Food & Beverages"
        assert container.products.count() == 2

    def test_warnings_returned(self):
        dto = _add(in_memory_container(), "Grand Piano", price="2000000", stock=5, category="home")
        assert dto.warnings == ("High-value product: ¥2,000,000",)

    def test_price_floor(self):
        with pytest.raises(BusinessRuleError, match="at least ¥1,000"):
            _add(in_memory_container(), "Cheap Cable", price="500", category="electronics")

    def test_unknown_category(self):
        with pytest.raises(ValidationError, match="Invalid category"):
            _add(in_memory_container(), "Puzzle Box", category="toys")


class TestUpdateProduct:

    def test_price_and_stock(self):
        container = in_memory_container()
        _add(container, "Haiku Anthology")
        handler = UpdateProductHandler(container.products, container.product_rules())
        dto = handler.handle(1, price="1800", stock=0)
        assert dto.price == "¥1,800"
        stored = container.products.get_by_id(ProductId(1))
        assert stored.price == Money(1800)
        assert not stored.is_available_for_sale()

    def test_deactivate(self):
        container = in_memory_container()
        _add(container, "Haiku Anthology")
        dto = UpdateProductHandler(container.products, container.product_rules()).handle(1, active=False)
        assert not dto.is_active

    def test_rename_to_taken_name_rejected(self):
        container = in_memory_container()
        _add(container, "Haiku Anthology")
        _add(container, "Tanka Anthology")
        handler = UpdateProductHandler(container.products, container.product_rules())
        with pytest.raises(BusinessRuleError, match="already in use"):
            handler.handle(2, name="haiku anthology")

    def test_unknown_product(self):
        container = in_memory_container()
        handler = UpdateProductHandler(container.products, container.product_rules())
        with pytest.raises(NotFoundError):
            handler.handle(5, price="100")


class TestBrowseProducts:

    def _catalog(self):
        container = in_memory_container()
        _add(container, "Haiku Anthology", price="1500")
        _add(container, "Tanka Anthology", price="2100", stock=0)
        _add(container, "Green Tea", price="800", category="food")
        return container

    def test_filters(self):
        handler = ListProductsHandler(self._catalog().products)
        assert [p.name for p in handler.handle(name="anthology", in_stock_only=True)] == ["Haiku Anthology"]
        assert [p.name for p in handler.handle(category="food")] == ["Green Tea"]

    def test_sort_and_page(self):
        handler = ListProductsHandler(self._catalog().products)
        names = [p.name for p in handler.handle(sort_by="price", descending=True, limit=2)]
        assert names == ["Tanka Anthology", "Haiku Anthology"]
        assert [p.id for p in handler.handle(offset=2)] == [3]

    def test_bad_sort_field(self):
        with pytest.raises(ValidationError, match="Invalid sort field"):
            ListProductsHandler(self._catalog().products).handle(sort_by="colour")

    def test_pricing_analysis(self):
        container = self._catalog()
        dto = AnalyzePricingHandler(container.products, container.product_rules()).handle(2)
        # books average (1500 + 2100) / 2 = 1800; 2100 is within 120%
        assert dto.position == "average"
        assert dto.peer_count == 2
        assert dto.average_price == "¥1,800"
