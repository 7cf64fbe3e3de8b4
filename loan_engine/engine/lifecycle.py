"""Monthly cycle catch-up: roll a stored balance forward over elapsed cycles.

Pure functions. No I/O.
"""

import logging
from datetime import date

from loan_engine.engine.balances import resolve_record_balances
from loan_engine.engine.cadence import to_monthly_amount
from loan_engine.engine.currency import ZERO, non_negative, round_currency
from loan_engine.engine.dates import add_months_keeping_day
from loan_engine.engine.simulator import monthly_rate_for
from loan_engine.models.records import LoanRecord
from loan_engine.models.results import LifecycleResult

logger = logging.getLogger(__name__)

MAX_CYCLES = 600


def count_completed_monthly_cycles(start: date, today: date) -> int:
    """Whole monthly cycles between ``start`` and ``today``.

    Each cycle steps one month from the previous cycle's date, so a day
    clamped at a month end (Jan 31 -> Feb 28) carries forward (Mar 28).
    """
    marker = start
    cycles = 0
    for _ in range(MAX_CYCLES):
        next_marker = add_months_keeping_day(marker, 1, marker.day)
        if next_marker > today:
            break
        marker = next_marker
        cycles += 1
    return cycles


def apply_loan_monthly_lifecycle(record: LoanRecord, cycles: int) -> LifecycleResult:
    """Accrue interest then apply the monthly minimum payment, ``cycles`` times.

    Works on the loan's total balance; extras and subscriptions are not applied.
    """
    balance = resolve_record_balances(record).balance
    monthly_payment = round_currency(
        to_monthly_amount(non_negative(record.minimum_payment), record.cadence,
                          record.custom_interval, record.custom_unit)
    )
    rate = monthly_rate_for(record.interest_rate)
    interest_total = ZERO
    payments_total = ZERO

    for _ in range(max(cycles, 0)):
        interest = round_currency(balance * rate)
        balance = round_currency(balance + interest)
        interest_total += interest
        payment = min(balance, monthly_payment)
        balance = round_currency(balance - payment)
        payments_total += payment

    logger.debug("Rolled loan %s forward %d cycles to %s", record.id, cycles, balance)
    return LifecycleResult(
        balance=round_currency(non_negative(balance)),
        interest_accrued=round_currency(interest_total),
        payments_applied=round_currency(payments_total),
    )
