"""JSON-file-backed implementation of CartRepository.

The file holds a flat list of cart lines; carts are regrouped by session
on load.
"""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import Count, ProductId
from storefront.infrastructure.persistence.in_memory import InMemoryCartRepository
from storefront.infrastructure.persistence.json_file import JsonFile, dump_time, load_time


class JsonCartRepository(InMemoryCartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        sessions: dict[str, list[CartLine]] = defaultdict(list)
        for raw in self._file.load():
            line = self._to_domain(raw)
            sessions[line.session_id].append(line)
        super().__init__(Cart.restore(sid, lines) for sid, lines in sessions.items())

    def _on_change(self) -> None:
        self._file.persist([
            self._to_raw(line)
            for cart in self._store.values()
            for line in cart.lines
        ])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        return {
            "id": line.id,
            "session_id": line.session_id,
            "product_id": line.product_id.value,
            "quantity": line.quantity.value,
            "created_at": dump_time(line.created_at),
            "updated_at": dump_time(line.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        return CartLine.restore(
            id=raw["id"],
            session_id=raw["session_id"],
            product_id=ProductId(raw["product_id"]),
            quantity=Count(raw["quantity"]),
            created_at=load_time(raw["created_at"]),
            updated_at=load_time(raw["updated_at"]),
        )
