"""Abstract repository for the User aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storefront.domain.model.user import User
from storefront.domain.model.value_objects import EmailAddress, UserId


class UserRepository(ABC):

    @abstractmethod
    def next_id(self) -> UserId:
        """Generate the next unique user ID."""

    @abstractmethod
    def get_by_id(self, user_id: UserId) -> User | None:
        """Return a user by ID, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: EmailAddress) -> User | None:
        """Return the user registered under *email*, or None."""

    @abstractmethod
    def list_all(self, limit: int = 20, offset: int = 0) -> list[User]:
        """Return a page of users ordered by ID."""

    @abstractmethod
    def list_admins(self) -> list[User]:
        """Return every administrator."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist a new or updated user."""

    @abstractmethod
    def delete(self, user_id: UserId) -> None:
        """Remove a user; unknown IDs are ignored."""

    @abstractmethod
    def exists_by_id(self, user_id: UserId) -> bool:
        """True if a user with this ID exists."""

    @abstractmethod
    def exists_by_email(self, email: EmailAddress, exclude_user_id: UserId | None = None) -> bool:
        """True if another user (not *exclude_user_id*) holds *email*."""

    @abstractmethod
    def count(self) -> int:
        """Number of users."""

    @abstractmethod
    def count_admins(self) -> int:
        """Number of administrators."""

    @abstractmethod
    def find_created_after(self, moment: datetime) -> list[User]:
        """Users whose ``created_at`` is later than *moment*."""
