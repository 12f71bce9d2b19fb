"""CLI commands for users and administrators."""

from __future__ import annotations

import click

from storefront.application.dto import UserDTO
from storefront.application.manage_admins import DemoteUserHandler, PromoteUserHandler
from storefront.application.register_user import RegisterUserHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_failure


def _display_user(dto: UserDTO) -> None:
    role = "admin" if dto.is_admin else "customer"
    click.echo(f"User #{dto.id}  {dto.full_name} <{dto.email}>  ({role})")


@click.command("register")
@click.option("--email", required=True, help="E-mail address.")
@click.option("--first-name", required=True, help="First name.")
@click.option("--last-name", required=True, help="Last name.")
@click.option("--phone", default=None, help="Phone number.")
@click.pass_obj
def user_register(
    container: Container, email: str, first_name: str, last_name: str, phone: str | None
) -> None:
    """Register a new user (the first user becomes the administrator)."""
    handler = RegisterUserHandler(container.users, container.user_rules())

    try:
        dto = handler.handle(email=email, first_name=first_name, last_name=last_name, phone=phone)
    except DomainException as exc:
        raise domain_failure(exc)

    click.echo("Registered:")
    _display_user(dto)


@click.command("promote")
@click.option("--as", "actor_id", required=True, type=int, help="ID of the acting administrator.")
@click.option("--id", "user_id", required=True, type=int, help="User ID to promote.")
@click.pass_obj
def user_promote(container: Container, actor_id: int, user_id: int) -> None:
    """Grant administrator rights to a user."""
    handler = PromoteUserHandler(container.users, container.user_rules())

    try:
        dto = handler.handle(actor_id=actor_id, target_id=user_id)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_user(dto)


@click.command("demote")
@click.option("--as", "actor_id", required=True, type=int, help="ID of the acting administrator.")
@click.option("--id", "user_id", required=True, type=int, help="User ID to demote.")
@click.pass_obj
def user_demote(container: Container, actor_id: int, user_id: int) -> None:
    """Revoke administrator rights from a user."""
    handler = DemoteUserHandler(container.users, container.user_rules())

    try:
        dto = handler.handle(actor_id=actor_id, target_id=user_id)
    except DomainException as exc:
        raise domain_failure(exc)

    _display_user(dto)
