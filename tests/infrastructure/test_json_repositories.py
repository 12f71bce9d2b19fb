"""JSON-backed repositories: write, reload from disk, keep generating ids."""

import json

from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import EmailAddress, OrderId, ProductId, UserId
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository
from storefront.infrastructure.persistence.json_user_repository import JsonUserRepository
from tests.fakes import make_cart, make_order, make_product, make_user


class TestJsonFile:

    def test_missing_file_created_empty(self, tmp_path):
        path = tmp_path / "nested" / "users.json"
        repo = JsonUserRepository(path)
        assert path.read_text(encoding="utf-8") == "[]"
        assert repo.count() == 0

    def test_existing_file_loaded(self, tmp_path):
        path = tmp_path / "users.json"
        JsonUserRepository(path).save(make_user(4, email="saved@example.com"))
        reloaded = JsonUserRepository(path)
        assert reloaded.get_by_email(EmailAddress("saved@example.com")).id == UserId(4)


class TestJsonUserRepository:

    def test_round_trip(self, tmp_path):
        path = tmp_path / "users.json"
        user = make_user(1, is_admin=True)
        JsonUserRepository(path).save(user)
        assert JsonUserRepository(path).get_by_id(UserId(1)) == user

    def test_ids_continue_after_reload(self, tmp_path):
        path = tmp_path / "users.json"
        repo = JsonUserRepository(path)
        repo.save(make_user(1))
        repo.save(make_user(2))
        assert JsonUserRepository(path).next_id() == UserId(3)

    def test_delete_rewrites_file(self, tmp_path):
        path = tmp_path / "users.json"
        repo = JsonUserRepository(path)
        repo.save(make_user(1))
        repo.save(make_user(2))
        repo.delete(UserId(1))
        assert [raw["id"] for raw in json.loads(path.read_text(encoding="utf-8"))] == [2]


class TestJsonProductRepository:

    def test_round_trip_with_japanese_name(self, tmp_path):
        path = tmp_path / "products.json"
        product = make_product(3, name="抹茶セット", price=3200, stock=7)
        JsonProductRepository(path).save(product)
        assert "抹茶セット" in path.read_text(encoding="utf-8")
        assert JsonProductRepository(path).get_by_id(ProductId(3)) == product

    def test_file_sorted_by_id(self, tmp_path):
        path = tmp_path / "products.json"
        repo = JsonProductRepository(path)
        repo.save(make_product(2))
        repo.save(make_product(1))
        assert [raw["id"] for raw in json.loads(path.read_text(encoding="utf-8"))] == [1, 2]


class TestJsonCartRepository:

    def test_lines_regrouped_by_session(self, tmp_path):
        path = tmp_path / "carts.json"
        repo = JsonCartRepository(path)
        repo.save(make_cart((1, 2), (2, 1), session_id="a"))
        repo.save(make_cart((3, 4), session_id="b"))
        reloaded = JsonCartRepository(path)
        assert reloaded.get_total_quantity("a") == 3
        assert reloaded.get_total_quantity("b") == 4
        assert reloaded.get_by_session("c").is_empty()

    def test_clear_removes_lines_from_file(self, tmp_path):
        path = tmp_path / "carts.json"
        repo = JsonCartRepository(path)
        repo.save(make_cart((1, 2), session_id="a"))
        repo.clear("a")
        assert json.loads(path.read_text(encoding="utf-8")) == []

    def test_line_ids_continue_after_reload(self, tmp_path):
        path = tmp_path / "carts.json"
        JsonCartRepository(path).save(make_cart((1, 1), (2, 1), session_id="a"))
        assert JsonCartRepository(path).next_line_id() == 3


class TestJsonOrderRepository:

    def test_round_trip_with_lines(self, tmp_path):
        path = tmp_path / "orders.json"
        order = make_order(1, user_id=2, items=((1, 2, 1000), (2, 1, 500)), status=OrderStatus.SHIPPED)
        JsonOrderRepository(path).save(order)
        loaded = JsonOrderRepository(path).get_by_id(OrderId(1))
        assert loaded == order
        assert not loaded.has_total_drift()

    def test_order_and_line_ids_continue(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path).save(make_order(4, items=((1, 1, 1000), (2, 1, 1000))))
        reloaded = JsonOrderRepository(path)
        assert reloaded.next_id() == OrderId(5)
        assert reloaded.next_line_id() == 403
