"""
Rounding policy for every figure the engine reports.

Currency: half-up at 2 decimals. Weight: half-up at 3 decimals (kg), single
board grams at 2. Values go through their shortest repr so 2.675 rounds to
2.68, not to the 2.67 that binary float rounding gives.
"""

from decimal import ROUND_HALF_UP, Decimal

MONEY_PLACES = 2
WEIGHT_PLACES = 3


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(repr(float(value)))


def round_half_up(value, places: int) -> float:
    exponent = Decimal(1).scaleb(-places)
    return float(to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def round_money(value) -> float:
    return round_half_up(value, MONEY_PLACES)


def round_weight(value) -> float:
    return round_half_up(value, WEIGHT_PLACES)
