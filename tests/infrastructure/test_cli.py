"""End-to-end CLI runs against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), *args])

    return _run


@pytest.fixture
def shop(run):
    """Admin #1, customer #2 and two products."""
    run("user", "register", "--email", "owner@example.com", "--first-name", "Aiko", "--last-name", "Tanaka")
    run("user", "register", "--email", "kenji@example.com", "--first-name", "Kenji", "--last-name", "Ito")
    run("product", "add", "--name", "Haiku Anthology", "--price", "1500", "--stock", "10", "--category", "books")
    run("product", "add", "--name", "Green Tea", "--price", "800", "--stock", "3", "--category", "food")
    return run


class TestUserCommands:

    def test_register_writes_file(self, run, tmp_path):
        result = run("user", "register", "--email", "owner@example.com", "--first-name", "Aiko", "--last-name", "Tanaka")
        assert result.exit_code == 0
        assert "(admin)" in result.output
        users = json.loads((tmp_path / "users.json").read_text(encoding="utf-8"))
        assert users[0]["email"] == "owner@example.com"

    def test_bad_email_exits_with_validation_code(self, run):
        result = run("user", "register", "--email", "nobody", "--first-name", "A", "--last-name", "B")
        assert result.exit_code == 3
        assert "Error:" in result.output

    def test_customer_cannot_promote(self, shop):
        result = shop("user", "promote", "--as", "2", "--id", "2")
        assert result.exit_code == 6


class TestProductCommands:

    def test_list_filtered(self, shop):
        result = shop("product", "list", "--category", "food")
        assert result.exit_code == 0
        assert "Green Tea" in result.output
        assert "Haiku Anthology" not in result.output

    def test_update_unknown_product(self, shop):
        result = shop("product", "update", "--id", "99", "--stock", "5")
        assert result.exit_code == 7

    def test_price_below_floor(self, shop):
        result = shop("product", "add", "--name", "Cheap Cable", "--price", "500", "--stock", "1", "--category", "electronics")
        assert result.exit_code == 4
        assert "¥1,000" in result.output


class TestCartAndOrderCommands:

    def test_checkout_flow(self, shop, tmp_path):
        assert shop("cart", "add", "--session", "s1", "--product", "1", "--qty", "2").exit_code == 0
        assert shop("cart", "add", "--session", "s1", "--product", "2").exit_code == 0

        shown = shop("cart", "show", "--session", "s1")
        assert "¥3,800" in shown.output

        placed = shop("order", "place", "--user", "2", "--session", "s1", "--address", "Osaka", "--phone", "06-1111-2222")
        assert placed.exit_code == 0
        assert "Order #1 placed." in placed.output

        products = json.loads((tmp_path / "products.json").read_text(encoding="utf-8"))
        assert [p["stock"] for p in products] == [8, 2]
        assert json.loads((tmp_path / "carts.json").read_text(encoding="utf-8")) == []

    def test_insufficient_stock(self, shop):
        result = shop("cart", "add", "--session", "s1", "--product", "2", "--qty", "4")
        assert result.exit_code == 4

    def test_status_changes(self, shop):
        shop("cart", "add", "--session", "s1", "--product", "1")
        shop("order", "place", "--user", "2", "--session", "s1", "--address", "Osaka", "--phone", "06-1111-2222")

        assert shop("order", "status", "--as", "2", "--id", "1", "--to", "confirmed").exit_code == 6
        assert shop("order", "status", "--as", "1", "--id", "1", "--to", "delivered").exit_code == 5

        confirmed = shop("order", "status", "--as", "1", "--id", "1", "--to", "confirmed")
        assert confirmed.exit_code == 0
        assert "Confirmed" in confirmed.output

    def test_show_missing_order(self, shop):
        assert shop("order", "show", "--id", "3").exit_code == 7
