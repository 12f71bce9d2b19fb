"""User aggregate.

Users are immutable: profile edits and admin promotion return a new
instance and leave the original untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.clock import utc_now
from storefront.domain.model.value_objects import EmailAddress, UserId, optional_text

MAX_NAME_LENGTH = 50
MAX_PHONE_LENGTH = 20


@dataclass(frozen=True)
class User:
    """A registered customer or administrator."""

    id: UserId
    email: EmailAddress
    first_name: str
    last_name: str
    phone: str | None = None
    is_admin: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        for label, value in (("First name", self.first_name), ("Last name", self.last_name)):
            if not value or not value.strip():
                raise ValidationError(f"{label} is required")
            if len(value) > MAX_NAME_LENGTH:
                raise ValidationError(
                    f"{label} must be {MAX_NAME_LENGTH} characters or less"
                )
        if self.phone is not None and len(self.phone) > MAX_PHONE_LENGTH:
            raise ValidationError(
                f"Phone number must be {MAX_PHONE_LENGTH} characters or less"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create(
        id: UserId,
        email: EmailAddress,
        first_name: str,
        last_name: str,
        phone: str | None = None,
        is_admin: bool = False,
    ) -> User:
        now = utc_now()
        return User(
            id=id,
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            phone=optional_text(phone),
            is_admin=is_admin,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def restore(
        id: UserId,
        email: EmailAddress,
        first_name: str,
        last_name: str,
        is_admin: bool,
        created_at: datetime,
        updated_at: datetime,
        phone: str | None = None,
    ) -> User:
        """Rehydrate a persisted user, keeping its original timestamps."""
        return User(
            id=id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            is_admin=is_admin,
            created_at=created_at,
            updated_at=updated_at,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def same_identity_as(self, other: User) -> bool:
        return self.id == other.id

    # --- Mutations (copy-on-write) --------------------------------------------

    def update_profile(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> User:
        """Return a copy with the given fields changed.

        Blank names keep the current value; ``phone=""`` clears the phone.
        """
        return replace(
            self,
            first_name=first_name.strip() if first_name and first_name.strip() else self.first_name,
            last_name=last_name.strip() if last_name and last_name.strip() else self.last_name,
            phone=self.phone if phone is None else optional_text(phone),
            updated_at=utc_now(),
        )

    def promote_to_admin(self) -> User:
        if self.is_admin:
            return self
        return replace(self, is_admin=True, updated_at=utc_now())

    def demote_from_admin(self) -> User:
        if not self.is_admin:
            return self
        return replace(self, is_admin=False, updated_at=utc_now())
