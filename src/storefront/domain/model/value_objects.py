"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError


def _require_int(value: object, label: str) -> None:
    # bool is an int subclass; True must not sneak in as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{label} must be an integer, got {type(value).__name__}"
        )


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Identifier:
    """Positive integer identity.

    Subclasses are distinct nominal types: dataclass equality requires the
    same class, so ``UserId(1) != ProductId(1)``.
    """

    value: int

    def __post_init__(self) -> None:
        label = type(self).__name__
        _require_int(self.value, label)
        if self.value <= 0:
            raise ValidationError(f"{label} must be a positive integer")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(_Identifier):
    pass


@dataclass(frozen=True)
class ProductId(_Identifier):
    pass


@dataclass(frozen=True)
class OrderId(_Identifier):
    pass


# ---------------------------------------------------------------------------
# Count
# ---------------------------------------------------------------------------

MAX_COUNT = 999


@dataclass(frozen=True)
class Count:
    """A quantity of units in a cart or order line: 1 to 999."""

    value: int

    def __post_init__(self) -> None:
        _require_int(self.value, "Count")
        if self.value <= 0:
            raise ValidationError("Count must be positive")
        if self.value > MAX_COUNT:
            raise ValidationError(
                f"Count exceeds maximum allowed value ({MAX_COUNT})"
            )

    def __add__(self, other: Count) -> Count:
        return Count(self.value + other.value)

    def __sub__(self, other: Count) -> Count:
        result = self.value - other.value
        if result <= 0:
            raise ValidationError("Count subtraction must leave a positive count")
        return Count(result)

    def __lt__(self, other: Count) -> bool:
        return self.value < other.value

    def __le__(self, other: Count) -> bool:
        return self.value <= other.value

    def __gt__(self, other: Count) -> bool:
        return self.value > other.value

    def __ge__(self, other: Count) -> bool:
        return self.value >= other.value

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

MAX_MONEY = 10_000_000


@dataclass(frozen=True)
class Money:
    """A yen amount held as an integer number of minor units.

    Arithmetic never clamps: any result outside ``[0, MAX_MONEY]`` raises.
    """

    amount: int

    def __post_init__(self) -> None:
        _require_int(self.amount, "Money amount")
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if self.amount > MAX_MONEY:
            raise ValidationError(
                f"Money amount exceeds maximum allowed value (¥{MAX_MONEY:,})"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def __sub__(self, other: Money) -> Money:
        result = self.amount - other.amount
        if result < 0:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result)

    def __mul__(self, factor: int | Count) -> Money:
        if isinstance(factor, Count):
            factor = factor.value
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(
                f"Can only multiply Money by int or Count, got {type(factor).__name__}"
            )
        if factor < 0:
            raise ValidationError("Money multiplier must be non-negative")
        return Money(self.amount * factor)

    def with_markup(self, rate: Decimal | str | float) -> Money:
        """Return the amount increased by *rate* (``0.1`` for 10%), floored."""
        try:
            rate = Decimal(str(rate))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid markup rate: {rate!r}") from exc
        if rate < 0 or rate > 1:
            raise ValidationError("Markup rate must be between 0 and 1")
        raised = (Decimal(self.amount) * (1 + rate)).to_integral_value(ROUND_FLOOR)
        return Money(int(raised))

    def __lt__(self, other: Money) -> bool:
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"¥{self.amount:,}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(0)

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        """Convenient factory that coerces whole-yen input safely."""
        try:
            value = Decimal(str(amount).replace(",", "").lstrip("¥"))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite() or value != value.to_integral_value():
            raise ValidationError(f"Money must be a whole yen amount, got {amount!r}")
        return Money(int(value))


# ---------------------------------------------------------------------------
# StockLevel
# ---------------------------------------------------------------------------

MAX_STOCK = 99_999


@dataclass(frozen=True)
class StockLevel:
    """Units on hand for a product. Unlike ``Count`` it may be zero."""

    value: int

    def __post_init__(self) -> None:
        _require_int(self.value, "Stock level")
        if self.value < 0:
            raise ValidationError("Stock level cannot be negative")
        if self.value > MAX_STOCK:
            raise ValidationError(
                f"Stock level exceeds maximum allowed value ({MAX_STOCK})"
            )

    @property
    def is_empty(self) -> bool:
        return self.value == 0

    def covers(self, count: Count) -> bool:
        return self.value >= count.value

    def decrease(self, count: Count) -> StockLevel:
        if not self.covers(count):
            raise ValidationError(
                f"Cannot remove {count.value} units from a stock of {self.value}"
            )
        return StockLevel(self.value - count.value)

    def increase(self, count: Count) -> StockLevel:
        return StockLevel(self.value + count.value)

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# EmailAddress
# ---------------------------------------------------------------------------

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MAX_EMAIL_LENGTH = 254


@dataclass(frozen=True)
class EmailAddress:
    """Normalised (trimmed, lower-cased) e-mail address."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise ValidationError("Email address must be a non-empty string")
        if self.value != self.value.strip().lower():
            raise ValidationError("Email address must be normalised; use EmailAddress.of()")
        if len(self.value) > MAX_EMAIL_LENGTH:
            raise ValidationError(
                f"Email address is too long (max {MAX_EMAIL_LENGTH} characters)"
            )
        if not _EMAIL_RE.match(self.value):
            raise ValidationError(f"Invalid email format: {self.value!r}")

    @staticmethod
    def of(raw: str) -> EmailAddress:
        if not isinstance(raw, str):
            raise ValidationError("Email address must be a non-empty string")
        return EmailAddress(raw.strip().lower())

    @property
    def local_part(self) -> str:
        return self.value.split("@", 1)[0]

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Free text
# ---------------------------------------------------------------------------


def optional_text(text: str | None) -> str | None:
    """Trim optional free text; blank becomes ``None``."""
    if text is None:
        return None
    text = text.strip()
    return text or None
