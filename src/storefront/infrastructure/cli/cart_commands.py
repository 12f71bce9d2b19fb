"""CLI commands for the session cart."""

from __future__ import annotations

import click

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.dto import CartDTO
from storefront.application.show_cart import ShowCartHandler
from storefront.application.update_cart import RemoveCartItemHandler, UpdateCartItemHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_failure

_session_option = click.option("--session", "session_id", required=True, help="Cart session ID.")


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    if not dto.lines:
        click.echo(f"Cart '{dto.session_id}' is empty.")
        return

    click.echo(f"Cart '{dto.session_id}'")
    click.echo()
    click.echo(f"  {'Line':>4}  {'Product':<24} {'Qty':>5} {'Price':>12} {'Subtotal':>12}")
    click.echo(f"  {'-'*61}")
    for line in dto.lines:
        flag = "" if line.available else "  (unavailable)"
        click.echo(
            f"  {line.line_id:>4}  {line.product_name:<24} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.subtotal:>12}{flag}"
        )
    click.echo(f"  {'-'*61}")
    click.echo(f"  {'Total':<30} {dto.total_quantity:>5} {dto.total:>25}")

    for suggestion in dto.suggestions:
        click.echo(f"  * {suggestion}")


@click.command("add")
@_session_option
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.pass_obj
def cart_add(container: Container, session_id: str, product_id: int, quantity: int) -> None:
    """Put a product in the cart."""
    handler = AddToCartHandler(container.carts, container.products, container.cart_rules())

    try:
        dto = handler.handle(session_id=session_id, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_cart(dto)


@click.command("show")
@_session_option
@click.pass_obj
def cart_show(container: Container, session_id: str) -> None:
    """Show the cart with checkout suggestions."""
    handler = ShowCartHandler(container.carts, container.products, container.cart_rules())

    try:
        dto = handler.handle(session_id)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_cart(dto)


@click.command("update")
@_session_option
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity.")
@click.pass_obj
def cart_update(container: Container, session_id: str, line_id: int, quantity: int) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartItemHandler(container.carts, container.products, container.cart_rules())

    try:
        dto = handler.handle(session_id=session_id, line_id=line_id, quantity=quantity)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_cart(dto)


@click.command("remove")
@_session_option
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
@click.pass_obj
def cart_remove(container: Container, session_id: str, line_id: int) -> None:
    """Remove a line from the cart."""
    handler = RemoveCartItemHandler(container.carts, container.products)

    try:
        dto = handler.handle(session_id=session_id, line_id=line_id)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_cart(dto)
