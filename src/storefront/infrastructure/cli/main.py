from pathlib import Path

import click

from storefront.infrastructure.bootstrap import build_container
from storefront.infrastructure.cli.cart_commands import cart_add, cart_remove, cart_show, cart_update
from storefront.infrastructure.cli.order_commands import order_place, order_show, order_status
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_pricing,
    product_update,
)
from storefront.infrastructure.cli.user_commands import user_demote, user_promote, user_register
from storefront.infrastructure.logging import setup_logging
from storefront.infrastructure.settings import load_settings


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the JSON data files.",
)
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
@click.option("--log-format", type=click.Choice(["console", "json"]), default=None)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, log_level: str | None, log_format: str | None) -> None:
    """Storefront: users, catalog, carts and orders."""
    settings = load_settings(
        {"data_dir": data_dir, "log_level": log_level, "log_format": log_format}
    )
    setup_logging(settings.log_level, settings.log_format)
    ctx.obj = build_container(settings)


@cli.group()
def user() -> None:
    """Manage users and administrators."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def cart() -> None:
    """Manage a session cart."""


@cli.group()
def order() -> None:
    """Place and manage orders."""


# Register subcommands
user.add_command(user_register)
user.add_command(user_promote)
user.add_command(user_demote)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
product.add_command(product_pricing)
cart.add_command(cart_add)
cart.add_command(cart_show)
cart.add_command(cart_update)
cart.add_command(cart_remove)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_status)
