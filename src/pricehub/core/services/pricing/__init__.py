from .calculations import (
    MAX_PRICE,
    EffectivePrice,
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

__all__ = [
    "MAX_PRICE",
    "EffectivePrice",
    "discount_from_price",
    "has_valid_decimal_places",
    "is_effective",
    "is_valid_currency",
    "is_valid_date_range",
    "is_valid_discount",
    "is_valid_price",
    "is_within_price_limit",
    "price_from_discount",
    "prices_equal",
    "quantize",
    "resolve_effective_price",
]
