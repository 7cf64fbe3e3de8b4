"""Cadence to monthly-occurrence normalization.

Pure functions. No I/O.
"""

import logging
from decimal import Decimal

from loan_engine.models.records import Cadence, CustomCadenceUnit

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal("365.2425")  # Gregorian mean

_FIXED_OCCURRENCES: dict[Cadence, Decimal] = {
    Cadence.WEEKLY: Decimal("52") / Decimal("12"),
    Cadence.BIWEEKLY: Decimal("26") / Decimal("12"),
    Cadence.MONTHLY: Decimal("1"),
    Cadence.QUARTERLY: Decimal("1") / Decimal("3"),
    Cadence.YEARLY: Decimal("1") / Decimal("12"),
    Cadence.ONE_TIME: Decimal("0"),
}


def _custom_occurrences(interval: int | None, unit: CustomCadenceUnit | None) -> Decimal:
    if not interval or interval <= 0 or unit is None:
        logger.warning("Custom cadence without a usable interval/unit (%s %s); treating as 0/month", interval, unit)
        return Decimal("0")

    n = Decimal(interval)
    if unit == CustomCadenceUnit.DAYS:
        return DAYS_PER_YEAR / (n * 12)
    if unit == CustomCadenceUnit.WEEKS:
        return DAYS_PER_YEAR / (n * 7 * 12)
    if unit == CustomCadenceUnit.MONTHS:
        return 1 / n
    return 1 / (n * 12)


def monthly_occurrences(
    cadence: Cadence,
    custom_interval: int | None = None,
    custom_unit: CustomCadenceUnit | None = None,
) -> Decimal:
    """How many cadence occurrences fall in an average month.

    weekly 52/12, biweekly 26/12, monthly 1, quarterly 1/3, yearly 1/12,
    one-time 0. Custom cadences derive the rate from interval + unit.
    """
    if cadence == Cadence.CUSTOM:
        return _custom_occurrences(custom_interval, custom_unit)
    return _FIXED_OCCURRENCES.get(cadence, Decimal("0"))


def to_monthly_amount(
    amount: Decimal,
    cadence: Cadence,
    custom_interval: int | None = None,
    custom_unit: CustomCadenceUnit | None = None,
) -> Decimal:
    """Scale a per-occurrence amount to its monthly equivalent."""
    return amount * monthly_occurrences(cadence, custom_interval, custom_unit)
