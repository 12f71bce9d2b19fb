"""Application service: Register User use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import UserDTO
from storefront.application.mappers import user_to_dto
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import EmailAddress
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.user_rules import UserRules

logger = structlog.get_logger(__name__)


class RegisterUserHandler:

    def __init__(self, user_repo: UserRepository, user_rules: UserRules) -> None:
        self._user_repo = user_repo
        self._user_rules = user_rules

    def handle(
        self,
        email: str,
        first_name: str,
        last_name: str,
        phone: str | None = None,
    ) -> UserDTO:
        """Register a new customer.

        The very first user of an empty store becomes its administrator;
        without one nobody could ever be promoted.
        """
        address = EmailAddress.of(email)
        self._user_rules.validate_registration(address, first_name, last_name)

        user = User.create(
            id=self._user_repo.next_id(),
            email=address,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            is_admin=self._user_repo.count() == 0,
        )
        self._user_repo.save(user)
        logger.info("user_registered", user_id=user.id.value, is_admin=user.is_admin)
        return user_to_dto(user)
