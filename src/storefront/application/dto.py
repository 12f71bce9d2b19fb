"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Money is pre-formatted
for display; ids are plain integers.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserDTO:
    id: int
    email: str
    full_name: str
    phone: str | None
    is_admin: bool
    created_at: str


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    price: str  # formatted, e.g. "¥1,500"
    stock: int
    category: str
    is_active: bool
    description: str | None = None
    warnings: tuple[str, ...] = ()  # non-fatal registration warnings


@dataclass(frozen=True)
class PricingDTO:
    product_id: int
    product_name: str
    price: str
    position: str
    average_price: str
    peer_count: int
    recommendation: str


@dataclass(frozen=True)
class CartLineDTO:
    line_id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: str
    subtotal: str
    available: bool


@dataclass(frozen=True)
class CartDTO:
    session_id: str
    lines: list[CartLineDTO]
    total_quantity: int
    total: str
    can_checkout: bool
    suggestions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # price at purchase
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: int
    status: str
    lines: list[OrderLineDTO]
    total: str
    shipping_address: str
    shipping_phone: str
    notes: str | None
    created_at: str
