"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries a ``code`` so callers can map the kind of failure to a
result without inspecting messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.domain.model.order import OrderStatus


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "domain_error"


class ValidationError(DomainException):
    """Malformed input to a value type or entity."""

    code = "validation"


class BusinessRuleError(DomainException):
    """A rule service check failed."""

    code = "business_rule"


class InsufficientStockError(BusinessRuleError):
    """Requested quantity exceeds stock, or the product is not for sale."""

    code = "insufficient_stock"


class InvalidTransitionError(DomainException):
    """An order status change that the transition table does not allow."""

    code = "invalid_transition"

    def __init__(
        self,
        current: OrderStatus,
        target: OrderStatus,
        allowed: tuple[OrderStatus, ...],
    ) -> None:
        self.current = current
        self.target = target
        self.allowed = allowed
        valid = ", ".join(s.value for s in allowed) or "none"
        super().__init__(
            f"Cannot transition from {current.value} to {target.value}. "
            f"Valid transitions: {valid}"
        )


class PermissionDeniedError(DomainException):
    """The acting user lacks the authority for the requested change."""

    code = "permission_denied"


class NotFoundError(DomainException):
    """A referenced id, product or line is absent."""

    code = "not_found"
