"""Domain entity → DTO mapping shared by the handlers."""

from __future__ import annotations

from collections.abc import Iterable

from storefront.application.dto import (
    CartDTO,
    CartLineDTO,
    OrderDTO,
    OrderLineDTO,
    ProductDTO,
    UserDTO,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.model.user import User

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def user_to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id.value,
        email=user.email.value,
        full_name=user.full_name,
        phone=user.phone,
        is_admin=user.is_admin,
        created_at=user.created_at.strftime(TIMESTAMP_FORMAT),
    )


def product_to_dto(product: Product, warnings: Iterable[str] = ()) -> ProductDTO:
    return ProductDTO(
        id=product.id.value,
        name=product.name,
        price=str(product.price),
        stock=product.stock.value,
        category=product.category.label,
        is_active=product.is_active,
        description=product.description,
        warnings=tuple(warnings),
    )


def cart_to_dto(cart: Cart, products: Iterable[Product], suggestions: Iterable[str] = ()) -> CartDTO:
    """Lines whose product has vanished are shown as unavailable and left out of the total."""
    catalog = {p.id: p for p in products}
    lines: list[CartLineDTO] = []
    total = 0
    for line in cart.lines:
        product = catalog.get(line.product_id)
        if product is None:
            lines.append(CartLineDTO(
                line_id=line.id,
                product_id=line.product_id.value,
                product_name="(removed product)",
                quantity=line.quantity.value,
                unit_price="-",
                subtotal="-",
                available=False,
            ))
            continue
        subtotal = line.subtotal_yen(product)
        total += subtotal
        lines.append(CartLineDTO(
            line_id=line.id,
            product_id=product.id.value,
            product_name=product.name,
            quantity=line.quantity.value,
            unit_price=str(product.price),
            subtotal=f"¥{subtotal:,}",
            available=line.is_available(product),
        ))
    return CartDTO(
        session_id=cart.session_id,
        lines=lines,
        total_quantity=cart.total_quantity(),
        total=f"¥{total:,}",
        can_checkout=not cart.is_empty() and all(line.available for line in lines),
        suggestions=list(suggestions),
    )


def order_to_dto(order: Order, products: Iterable[Product] = ()) -> OrderDTO:
    """*products* only supplies display names; orders never depend on current prices."""
    names = {p.id: p.name for p in products}
    return OrderDTO(
        id=order.id.value,
        user_id=order.user_id.value,
        status=order.status.label,
        lines=[
            OrderLineDTO(
                product_id=line.product_id.value,
                product_name=names.get(line.product_id, f"Product #{line.product_id}"),
                quantity=line.quantity.value,
                unit_price=str(line.price_at_purchase),
                line_total=str(line.subtotal()),
            )
            for line in order.lines
        ],
        total=str(order.total_amount),
        shipping_address=order.shipping_address,
        shipping_phone=order.shipping_phone,
        notes=order.notes,
        created_at=order.created_at.strftime(TIMESTAMP_FORMAT),
    )
