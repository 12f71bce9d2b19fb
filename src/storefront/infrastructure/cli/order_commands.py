"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.change_order_status import ChangeOrderStatusHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderDTO
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_failure


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     #{dto.user_id}")
    click.echo(f"Ship to:  {dto.shipping_address}  tel. {dto.shipping_phone}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*55}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<24} {line.quantity:>5} {line.unit_price:>12} {line.line_total:>12}"
        )
    click.echo(f"  {'-'*55}")
    click.echo(f"  {'Order Total':<30} {dto.total:>25}")


@click.command("place")
@click.option("--user", "user_id", required=True, type=int, help="Ordering user ID.")
@click.option("--session", "session_id", required=True, help="Cart session ID.")
@click.option("--address", required=True, help="Shipping address.")
@click.option("--phone", required=True, help="Shipping phone number.")
@click.option("--notes", default=None, help="Delivery notes.")
@click.option("--force", is_flag=True, default=False, help="Place even if it looks like a duplicate.")
@click.pass_obj
def order_place(
    container: Container,
    user_id: int,
    session_id: str,
    address: str,
    phone: str,
    notes: str | None,
    force: bool,
) -> None:
    """Turn the session's cart into an order."""
    handler = CreateOrderHandler(
        order_repo=container.orders,
        cart_repo=container.carts,
        product_repo=container.products,
        user_repo=container.users,
        order_rules=container.order_rules(),
    )

    try:
        dto = handler.handle(
            user_id=user_id,
            session_id=session_id,
            shipping_address=address,
            shipping_phone=phone,
            notes=notes,
            force=force,
        )
    except DomainException as exc:
        raise domain_failure(exc)

    click.echo(f"Order #{dto.id} placed.")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(container.orders, container.products)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_order(dto)


@click.command("status")
@click.option("--as", "actor_id", required=True, type=int, help="ID of the acting user.")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--to",
    "status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="Target status.",
)
@click.pass_obj
def order_status(container: Container, actor_id: int, order_id: int, status: str) -> None:
    """Move an order along its lifecycle (cancelling restocks its products)."""
    handler = ChangeOrderStatusHandler(
        order_repo=container.orders,
        product_repo=container.products,
        user_repo=container.users,
        order_rules=container.order_rules(),
    )

    try:
        dto = handler.handle(actor_id=actor_id, order_id=order_id, status=status)
    except DomainException as exc:
        raise domain_failure(exc)

    click.echo(f"Order #{dto.id} is now {dto.status}.")
