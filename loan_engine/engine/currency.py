"""Rounding and clamping helpers shared by every engine module.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
EPSILON = Decimal("0.000001")


def finite_or_zero(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal. Non-finite or junk becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip().replace(",", ""))
        except (InvalidOperation, ValueError):
            return ZERO
    if not result.is_finite():
        return ZERO
    return result


def round_currency(value: Decimal) -> Decimal:
    """Round to the cent, half up."""
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def non_negative(value: Decimal) -> Decimal:
    return value if value > 0 else ZERO


def clamp_percent(value: Decimal) -> Decimal:
    """Clamp a percentage into [0, 100]."""
    return min(max(value, ZERO), Decimal("100"))


def clamp_day(value) -> int:
    """Truncate toward zero and clamp into [1, 31]."""
    return min(max(int(finite_or_zero(value)), 1), 31)


def clamp_positive_int(value) -> int:
    """Truncate toward zero, floor at 1."""
    return max(int(finite_or_zero(value)), 1)


def is_effectively_zero(value: Decimal) -> bool:
    return value <= EPSILON
