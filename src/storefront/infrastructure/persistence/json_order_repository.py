"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.order import Order, OrderLine, OrderStatus
from storefront.domain.model.value_objects import Count, Money, OrderId, ProductId, UserId
from storefront.infrastructure.persistence.in_memory import InMemoryOrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile, dump_time, load_time


class JsonOrderRepository(InMemoryOrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        super().__init__(self._to_domain(raw) for raw in self._file.load())

    def _on_change(self) -> None:
        orders = sorted(self._store.values(), key=lambda o: o.id.value)
        self._file.persist([self._to_raw(o) for o in orders])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id.value,
            "user_id": order.user_id.value,
            "total_amount": order.total_amount.amount,
            "status": order.status.value,
            "shipping_address": order.shipping_address,
            "shipping_phone": order.shipping_phone,
            "notes": order.notes,
            "created_at": dump_time(order.created_at),
            "updated_at": dump_time(order.updated_at),
            "lines": [
                {
                    "id": line.id,
                    "product_id": line.product_id.value,
                    "quantity": line.quantity.value,
                    "price_at_purchase": line.price_at_purchase.amount,
                    "created_at": dump_time(line.created_at),
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        order_id = OrderId(raw["id"])
        lines = [
            OrderLine.restore(
                id=item["id"],
                order_id=order_id,
                product_id=ProductId(item["product_id"]),
                quantity=Count(item["quantity"]),
                price_at_purchase=Money(item["price_at_purchase"]),
                created_at=load_time(item["created_at"]),
            )
            for item in raw.get("lines", [])
        ]
        return Order.restore(
            id=order_id,
            user_id=UserId(raw["user_id"]),
            total_amount=Money(raw["total_amount"]),
            status=OrderStatus(raw["status"]),
            shipping_address=raw["shipping_address"],
            shipping_phone=raw["shipping_phone"],
            created_at=load_time(raw["created_at"]),
            updated_at=load_time(raw["updated_at"]),
            lines=lines,
            notes=raw.get("notes"),
        )
