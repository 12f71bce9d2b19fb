"""Domain service: user rules.

Rules about users that a single User cannot check on its own: e-mail
uniqueness across the user base, the administrator ceiling, and never
leaving the system without an administrator.

The admin-count checks read the current count and then let the caller
act; two concurrent promotions can both pass.  Callers must serialise
admin changes if the ceiling has to hold strictly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta

import structlog

from storefront.domain.exceptions import BusinessRuleError, PermissionDeniedError
from storefront.domain.model.clock import Clock, utc_now
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import EmailAddress, UserId
from storefront.domain.repository.user_repository import UserRepository

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_ADMINS = 10
NEW_USER_PERIOD = timedelta(days=7)
RECENT_USER_PERIOD = timedelta(days=30)
RESERVED_NAME_WORDS = ("admin", "administrator", "root", "system", "null", "undefined")

_PROHIBITED_CHARS = re.compile(r"[<>\"'&]")
_ONLY_DIGITS = re.compile(r"^\d+$")


@dataclass(frozen=True)
class UserStatistics:
    total_users: int
    admin_users: int
    new_users: int
    recent_users: int

    @property
    def regular_users(self) -> int:
        return self.total_users - self.admin_users

    @property
    def admin_percentage(self) -> float:
        if not self.total_users:
            return 0.0
        return self.admin_users / self.total_users * 100


class UserRules:

    def __init__(self, user_repo: UserRepository, clock: Clock = utc_now) -> None:
        self._user_repo = user_repo
        self._clock = clock

    # --- Registration ---------------------------------------------------------

    def validate_email_uniqueness(
        self, email: EmailAddress, exclude_user_id: UserId | None = None
    ) -> None:
        if self._user_repo.exists_by_email(email, exclude_user_id):
            raise BusinessRuleError(f"Email address {email} is already in use")

    def validate_registration(self, email: EmailAddress, first_name: str, last_name: str) -> None:
        """Check a prospective user against uniqueness and the name policy."""
        self.validate_email_uniqueness(email)
        self.validate_name(first_name, last_name)

    def validate_name(self, first_name: str, last_name: str) -> None:
        """Name policy: no markup characters, not purely numeric, no reserved words."""
        for name in (first_name, last_name):
            if _PROHIBITED_CHARS.search(name):
                raise BusinessRuleError("Name contains prohibited characters")
            if _ONLY_DIGITS.match(name.strip()):
                raise BusinessRuleError("Name cannot contain only numbers")

        full_name = f"{first_name} {last_name}".lower()
        for reserved in RESERVED_NAME_WORDS:
            if reserved in full_name:
                raise BusinessRuleError(f"Name cannot contain reserved word: {reserved}")

    # --- Administrator management ---------------------------------------------

    def validate_admin_promotion(self, promoter: User, target: User) -> None:
        if not promoter.is_admin:
            raise PermissionDeniedError("Only administrators can promote users to admin")
        if promoter.same_identity_as(target):
            raise BusinessRuleError("Cannot promote yourself")
        if target.is_admin:
            raise BusinessRuleError(f"User #{target.id} is already an administrator")

        admin_count = self._user_repo.count_admins()
        if admin_count >= MAX_ADMINS:
            logger.info("admin_promotion_rejected", target_id=target.id.value, admin_count=admin_count)
            raise BusinessRuleError(
                f"Maximum number of administrators reached ({MAX_ADMINS})"
            )

    def validate_admin_demotion(self, demoter: User, target: User) -> None:
        if not demoter.is_admin:
            raise PermissionDeniedError("Only administrators can demote admin users")
        if demoter.same_identity_as(target):
            raise BusinessRuleError("Cannot demote yourself")
        if not target.is_admin:
            raise BusinessRuleError(f"User #{target.id} is not an administrator")

        if self._user_repo.count_admins() <= 1:
            raise BusinessRuleError("Cannot demote the last administrator")

    def validate_user_deletion(self, actor: User, target: User) -> None:
        if not actor.is_admin:
            raise PermissionDeniedError("Only administrators can delete users")
        if actor.same_identity_as(target):
            raise BusinessRuleError("Cannot delete yourself")
        if target.is_admin and self._user_repo.count_admins() <= 1:
            raise BusinessRuleError("Cannot delete the last administrator")

    # --- Classification -------------------------------------------------------

    def is_new_user(self, user: User) -> bool:
        return user.created_at > self._clock() - NEW_USER_PERIOD

    def is_recent_user(self, user: User) -> bool:
        return user.created_at > self._clock() - RECENT_USER_PERIOD

    def generate_statistics(self) -> UserStatistics:
        now = self._clock()
        return UserStatistics(
            total_users=self._user_repo.count(),
            admin_users=self._user_repo.count_admins(),
            new_users=len(self._user_repo.find_created_after(now - NEW_USER_PERIOD)),
            recent_users=len(self._user_repo.find_created_after(now - RECENT_USER_PERIOD)),
        )
