"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.user import User
from storefront.domain.model.value_objects import EmailAddress, UserId
from storefront.infrastructure.persistence.in_memory import InMemoryUserRepository
from storefront.infrastructure.persistence.json_file import JsonFile, dump_time, load_time


class JsonUserRepository(InMemoryUserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        super().__init__(self._to_domain(raw) for raw in self._file.load())

    def _on_change(self) -> None:
        users = sorted(self._store.values(), key=lambda u: u.id.value)
        self._file.persist([self._to_raw(u) for u in users])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(user: User) -> dict:
        return {
            "id": user.id.value,
            "email": user.email.value,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "phone": user.phone,
            "is_admin": user.is_admin,
            "created_at": dump_time(user.created_at),
            "updated_at": dump_time(user.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User.restore(
            id=UserId(raw["id"]),
            email=EmailAddress(raw["email"]),
            first_name=raw["first_name"],
            last_name=raw["last_name"],
            is_admin=raw.get("is_admin", False),
            created_at=load_time(raw["created_at"]),
            updated_at=load_time(raw["updated_at"]),
            phone=raw.get("phone"),
        )
