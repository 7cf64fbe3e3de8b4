"""Payment-consistency trend: logged payments vs the expected monthly payment.

Pure functions. ``today`` is always passed in.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from loan_engine.config import settings
from loan_engine.engine.currency import ONE, ZERO, non_negative, round_currency
from loan_engine.engine.dates import month_key, month_key_offset
from loan_engine.models.records import LoanEvent
from loan_engine.models.results import ConsistencyPoint

FOUR_PLACES = Decimal("0.0001")
MAX_SCORE = Decimal("140")


def payments_by_month(loan_id: str, events: Iterable[LoanEvent]) -> dict[str, Decimal]:
    """Sum this loan's payment events per "YYYY-MM" month key."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for event in events:
        if event.loan_id != loan_id or not event.is_payment:
            continue
        key = month_key(event.occurred_at.date())
        totals[key] = round_currency(totals[key] + non_negative(event.amount))
    return dict(totals)


def build_consistency_trend(
    loan_id: str,
    events: Iterable[LoanEvent],
    expected_monthly_payment: Decimal,
    today: date,
) -> tuple[list[ConsistencyPoint], Decimal]:
    """Trailing-months trend (oldest first) and the 0-140 consistency score.

    A month with nothing expected or nothing logged counts as on track
    (ratio 1). Ratios are capped at ``consistency_ratio_cap`` before averaging.
    """
    paid_by_month = payments_by_month(loan_id, events)
    expected = round_currency(non_negative(expected_monthly_payment))
    months = max(settings.consistency_months, 1)

    trend: list[ConsistencyPoint] = []
    capped_total = ZERO
    cap = settings.consistency_ratio_cap
    for offset in range(-(months - 1), 1):
        key = month_key_offset(offset, today)
        paid = round_currency(paid_by_month.get(key, ZERO))
        if expected > 0 and paid > 0:
            ratio = paid / expected
        else:
            ratio = ONE
        capped_total += min(max(ratio, ZERO), cap)
        trend.append(ConsistencyPoint(
            month_key=key,
            paid=paid,
            expected=expected,
            ratio=ratio.quantize(FOUR_PLACES, ROUND_HALF_UP),
        ))

    score = capped_total / len(trend) * 100
    return trend, round_currency(min(max(score, ZERO), MAX_SCORE))
