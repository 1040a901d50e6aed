"""Pure price arithmetic and validation helpers.

Amounts are handled as :class:`~decimal.Decimal` and rounded half-up to
cents. Naive datetimes (as returned by SQLite) are treated as UTC.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Literal, Protocol

CENT = Decimal("0.01")
# Largest amount a Numeric(12, 2) column holds
MAX_PRICE = Decimal("9999999999.99")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

PriceNumber = Decimal | int | float | str


class PriceLike(Protocol):
    price: Decimal
    currency: str
    is_active: bool
    effective_from: datetime
    effective_until: datetime | None


@dataclass(frozen=True)
class EffectivePrice:
    price: Decimal
    currency: str
    price_type: Literal["default", "private"]


def to_decimal(value: PriceNumber) -> Decimal:
    """Convert ``value`` to Decimal without float representation noise."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def quantize(value: PriceNumber) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def price_from_discount(base_price: PriceNumber, discount_percentage: PriceNumber) -> Decimal:
    """Apply a percentage discount to ``base_price``.

    A negative discount raises the price.

    Example:
        >>> price_from_discount(100, "15.5")
        Decimal('84.50')
    """
    base = to_decimal(base_price)
    pct = to_decimal(discount_percentage)
    return quantize(base * (1 - pct / 100))


def discount_from_price(base_price: PriceNumber, price: PriceNumber) -> Decimal:
    base = to_decimal(base_price)
    if base <= 0:
        raise ValueError("Base price must be greater than zero")
    return quantize((base - to_decimal(price)) / base * 100)


def is_valid_discount(discount_percentage: PriceNumber) -> bool:
    return Decimal(0) <= to_decimal(discount_percentage) <= Decimal(100)


def is_valid_price(price: PriceNumber) -> bool:
    return to_decimal(price) > 0


def is_within_price_limit(price: PriceNumber) -> bool:
    return to_decimal(price) <= MAX_PRICE


def has_valid_decimal_places(price: PriceNumber, max_decimals: int = 2) -> bool:
    """True when ``price`` carries at most ``max_decimals`` significant decimals.

    Trailing zeros do not count, so ``100.50`` has one decimal place.
    """
    exponent = to_decimal(price).normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        # NaN / Infinity
        return False
    return -exponent <= max_decimals


def is_valid_currency(currency: str) -> bool:
    return bool(CURRENCY_PATTERN.fullmatch(currency or ""))


def is_valid_date_range(effective_from: datetime, effective_until: datetime | None) -> bool:
    if effective_until is None:
        return True
    return as_utc(effective_from) <= as_utc(effective_until)


def prices_equal(a: PriceNumber, b: PriceNumber, tolerance: PriceNumber = "0.01") -> bool:
    return abs(to_decimal(a) - to_decimal(b)) < to_decimal(tolerance)


def is_effective(price: PriceLike | None, at: datetime | None = None) -> bool:
    """Whether ``price`` is active and inside its validity window at ``at``."""
    if price is None or not price.is_active:
        return False
    moment = as_utc(at or datetime.now(UTC))
    if as_utc(price.effective_from) > moment:
        return False
    return price.effective_until is None or moment <= as_utc(price.effective_until)


def resolve_effective_price(
    default_price: PriceLike | None,
    private_price: PriceLike | None,
    at: datetime | None = None,
) -> EffectivePrice | None:
    """Pick the price a company actually pays.

    An effective private price always wins over the default price.
    """
    if private_price is not None and is_effective(private_price, at):
        return EffectivePrice(quantize(private_price.price), private_price.currency, "private")
    if default_price is not None and is_effective(default_price, at):
        return EffectivePrice(quantize(default_price.price), default_price.currency, "default")
    return None
