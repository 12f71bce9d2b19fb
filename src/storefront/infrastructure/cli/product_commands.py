"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.browse_products import AnalyzePricingHandler, ListProductsHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import Category
from storefront.domain.repository.criteria import DEFAULT_LIMIT, MAX_LIMIT, ProductSortField
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_failure

_CATEGORIES = click.Choice([c.value for c in Category], case_sensitive=False)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price in whole yen (e.g. 1500).")
@click.option("--stock", required=True, type=int, help="Units on hand.")
@click.option("--category", required=True, type=_CATEGORIES, help="Catalog category.")
@click.option("--description", default=None, help="Free-text description.")
@click.pass_obj
def product_add(
    container: Container,
    name: str,
    price: str,
    stock: int,
    category: str,
    description: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(container.products, container.product_rules())

    try:
        dto = handler.handle(
            name=name, price=price, stock=stock, category=category, description=description
        )
    except DomainException as exc:
        raise domain_failure(exc)

    click.echo(f"Product #{dto.id} '{dto.name}' added at {dto.price} ({dto.stock} in stock)")
    for warning in dto.warnings:
        click.echo(f"Warning: {warning}")


@click.command("list")
@click.option("--name", default=None, help="Case-insensitive name filter.")
@click.option("--category", default=None, type=_CATEGORIES, help="Only this category.")
@click.option("--active-only", is_flag=True, default=False, help="Hide inactive products.")
@click.option("--in-stock-only", is_flag=True, default=False, help="Hide sold-out products.")
@click.option(
    "--sort",
    "sort_by",
    default=ProductSortField.ID.value,
    type=click.Choice([f.value for f in ProductSortField]),
    help="Sort field.",
)
@click.option("--desc", "descending", is_flag=True, default=False, help="Sort descending.")
@click.option("--limit", default=DEFAULT_LIMIT, type=click.IntRange(1, MAX_LIMIT), help="Page size.")
@click.option("--offset", default=0, type=click.IntRange(min=0), help="Rows to skip.")
@click.pass_obj
def product_list(
    container: Container,
    name: str | None,
    category: str | None,
    active_only: bool,
    in_stock_only: bool,
    sort_by: str,
    descending: bool,
    limit: int,
    offset: int,
) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(container.products)

    try:
        products = handler.handle(
            name=name,
            category=category,
            active_only=active_only,
            in_stock_only=in_stock_only,
            sort_by=sort_by,
            descending=descending,
            limit=limit,
            offset=offset,
        )
    except DomainException as exc:
        raise domain_failure(exc)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<12} {'Price':>12} {'Stock':>7}  Status")
    click.echo("-" * 72)
    for p in products:
        status = "active" if p.is_active else "inactive"
        click.echo(f"{p.id:<6} {p.name:<24} {p.category:<12} {p.price:>12} {p.stock:>7}  {status}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price in whole yen.")
@click.option("--stock", default=None, type=int, help="New stock level.")
@click.option("--description", default=None, help="New description.")
@click.option("--activate/--deactivate", "active", default=None, help="Put on or take off sale.")
@click.pass_obj
def product_update(
    container: Container,
    product_id: int,
    name: str | None,
    price: str | None,
    stock: int | None,
    description: str | None,
    active: bool | None,
) -> None:
    """Update a product's details, stock or availability."""
    handler = UpdateProductHandler(container.products, container.product_rules())

    try:
        dto = handler.handle(
            product_id=product_id,
            name=name,
            price=price,
            stock=stock,
            active=active,
            description=description,
        )
    except DomainException as exc:
        raise domain_failure(exc)

    status = "active" if dto.is_active else "inactive"
    click.echo(f"Product #{dto.id} '{dto.name}' now {dto.price}, {dto.stock} in stock ({status})")


@click.command("pricing")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.pass_obj
def product_pricing(container: Container, product_id: int) -> None:
    """Compare a product's price with its category."""
    handler = AnalyzePricingHandler(container.products, container.product_rules())

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise domain_failure(exc)

    click.echo(f"{dto.product_name}: {dto.price}")
    click.echo(f"Category average: {dto.average_price} over {dto.peer_count} products")
    click.echo(f"Position: {dto.position}")
    click.echo(dto.recommendation)
