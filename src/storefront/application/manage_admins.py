"""Application services: promote and demote administrators."""

from __future__ import annotations

import structlog

from storefront.application.dto import UserDTO
from storefront.application.mappers import user_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import UserId
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.user_rules import UserRules

logger = structlog.get_logger(__name__)


def _load_user(user_repo: UserRepository, user_id: int) -> User:
    user = user_repo.get_by_id(UserId(user_id))
    if user is None:
        raise NotFoundError(f"User #{user_id} not found")
    return user


class PromoteUserHandler:

    def __init__(self, user_repo: UserRepository, user_rules: UserRules) -> None:
        self._user_repo = user_repo
        self._user_rules = user_rules

    def handle(self, actor_id: int, target_id: int) -> UserDTO:
        actor = _load_user(self._user_repo, actor_id)
        target = _load_user(self._user_repo, target_id)
        self._user_rules.validate_admin_promotion(actor, target)

        promoted = target.promote_to_admin()
        self._user_repo.save(promoted)
        logger.info("user_promoted", user_id=target_id, by=actor_id)
        return user_to_dto(promoted)


class DemoteUserHandler:

    def __init__(self, user_repo: UserRepository, user_rules: UserRules) -> None:
        self._user_repo = user_repo
        self._user_rules = user_rules

    def handle(self, actor_id: int, target_id: int) -> UserDTO:
        actor = _load_user(self._user_repo, actor_id)
        target = _load_user(self._user_repo, target_id)
        self._user_rules.validate_admin_demotion(actor, target)

        demoted = target.demote_from_admin()
        self._user_repo.save(demoted)
        logger.info("user_demoted", user_id=target_id, by=actor_id)
        return user_to_dto(demoted)
