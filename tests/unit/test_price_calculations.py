"""Unit tests for price arithmetic and effective price resolution."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from src.pricehub.core.services.pricing import (
    MAX_PRICE,
    discount_from_price,
    has_valid_decimal_places,
    is_effective,
    is_valid_currency,
    is_valid_date_range,
    is_valid_discount,
    is_valid_price,
    is_within_price_limit,
    price_from_discount,
    prices_equal,
    quantize,
    resolve_effective_price,
)


@dataclass
class FakePrice:
    price: Decimal
    currency: str = "USD"
    is_active: bool = True
    effective_from: datetime = datetime(2020, 1, 1, tzinfo=UTC)
    effective_until: datetime | None = None


class TestDiscountArithmetic:
    """Converting between discounts and prices."""

    @pytest.mark.parametrize(
        ("base", "discount", "expected"),
        [
            ("100", "10", "90.00"),
            ("100", "15.5", "84.50"),
            ("25.99", "0", "25.99"),
            ("25.99", "100", "0.00"),
            ("10", "33.333", "6.67"),
        ],
    )
    def test_price_from_discount(self, base, discount, expected):
        assert price_from_discount(base, discount) == Decimal(expected)

    def test_negative_discount_raises_price(self):
        assert price_from_discount(100, -10) == Decimal("110.00")

    def test_discount_from_price(self):
        assert discount_from_price("200", "150") == Decimal("25.00")

    def test_discount_from_price_rejects_zero_base(self):
        with pytest.raises(ValueError):
            discount_from_price(0, 10)

    def test_quantize_rounds_half_up(self):
        assert quantize("2.345") == Decimal("2.35")
        assert quantize(2.675) == Decimal("2.68")


class TestValidation:
    """Amount, discount, currency and date range checks."""

    @pytest.mark.parametrize("value", ["0", "50", "100", "99.99"])
    def test_valid_discounts(self, value):
        assert is_valid_discount(value)

    @pytest.mark.parametrize("value", ["-0.01", "100.01", "150"])
    def test_invalid_discounts(self, value):
        assert not is_valid_discount(value)

    def test_price_must_be_positive(self):
        assert is_valid_price("0.01")
        assert not is_valid_price(0)
        assert not is_valid_price("-5")

    def test_price_limit_matches_storage_precision(self):
        assert is_within_price_limit(MAX_PRICE)
        assert not is_within_price_limit(MAX_PRICE + Decimal("0.01"))
        assert not is_within_price_limit("1000000000000")

    @pytest.mark.parametrize("value", ["10", "10.5", "10.50", "100.500", "0.01"])
    def test_decimal_places_within_limit(self, value):
        assert has_valid_decimal_places(value)

    @pytest.mark.parametrize("value", ["10.555", "0.001"])
    def test_too_many_decimal_places(self, value):
        assert not has_valid_decimal_places(value)

    def test_nan_has_no_valid_decimal_places(self):
        assert not has_valid_decimal_places(Decimal("NaN"))

    def test_currency_codes(self):
        assert is_valid_currency("USD")
        assert is_valid_currency("EUR")
        assert not is_valid_currency("usd")
        assert not is_valid_currency("US")
        assert not is_valid_currency("USDX")
        assert not is_valid_currency("")

    def test_date_range(self):
        start = datetime(2024, 1, 1, tzinfo=UTC)
        assert is_valid_date_range(start, None)
        assert is_valid_date_range(start, start)
        assert is_valid_date_range(start, start + timedelta(days=1))
        assert not is_valid_date_range(start, start - timedelta(seconds=1))

    def test_date_range_treats_naive_as_utc(self):
        start = datetime(2024, 1, 1, 12, 0)
        assert is_valid_date_range(start, datetime(2024, 1, 1, 12, 0, tzinfo=UTC))

    def test_prices_equal_within_tolerance(self):
        assert prices_equal("10.00", "10.005")
        assert not prices_equal("10.00", "10.01")


class TestEffectivePrice:
    """Choosing between default and private prices."""

    def test_inactive_price_is_not_effective(self):
        assert not is_effective(FakePrice(Decimal("10"), is_active=False))

    def test_future_price_is_not_effective(self):
        future = datetime.now(UTC) + timedelta(days=1)
        assert not is_effective(FakePrice(Decimal("10"), effective_from=future))

    def test_expired_price_is_not_effective(self):
        past = datetime.now(UTC) - timedelta(days=1)
        assert not is_effective(FakePrice(Decimal("10"), effective_until=past))

    def test_naive_window_is_compared_as_utc(self):
        price = FakePrice(
            Decimal("10"),
            effective_from=datetime(2024, 1, 1),
            effective_until=datetime(2024, 2, 1),
        )
        assert is_effective(price, at=datetime(2024, 1, 15, tzinfo=UTC))
        assert not is_effective(price, at=datetime(2024, 3, 1, tzinfo=UTC))

    def test_private_price_wins(self):
        result = resolve_effective_price(
            FakePrice(Decimal("25.99")), FakePrice(Decimal("22.5"))
        )
        assert result is not None
        assert result.price == Decimal("22.50")
        assert result.price_type == "private"

    def test_falls_back_to_default(self):
        result = resolve_effective_price(
            FakePrice(Decimal("25.99")), FakePrice(Decimal("22.5"), is_active=False)
        )
        assert result is not None
        assert result.price == Decimal("25.99")
        assert result.price_type == "default"

    def test_no_price(self):
        assert resolve_effective_price(None, None) is None

    def test_default_only(self):
        result = resolve_effective_price(FakePrice(Decimal("25.99")), None)
        assert result is not None
        assert result.price_type == "default"

    def test_private_only(self):
        result = resolve_effective_price(None, FakePrice(Decimal("22.50")))
        assert result is not None
        assert result.price_type == "private"
