"""Projection model builder: simulation + payoff date + horizons + consistency.

Pure computation. No I/O. LoanRecord in, LoanProjectionModel out.
"""

from collections.abc import Iterable
from datetime import date

from loan_engine.config import settings
from loan_engine.engine.consistency import build_consistency_trend
from loan_engine.engine.currency import ZERO, round_currency
from loan_engine.engine.dates import add_months_keeping_day
from loan_engine.engine.simulator import simulate_loan
from loan_engine.models.records import LoanEvent, LoanRecord
from loan_engine.models.results import HORIZONS, LoanProjectionModel, ProjectionRow, ProjectionSummary
from loan_engine.models.scenarios import ProjectionOverrides


def summarize_rows(rows: list[ProjectionRow], months: int) -> ProjectionSummary:
    """Totals over the first ``months`` rows. Truncates, never re-simulates."""
    bounded = rows[:months]
    return ProjectionSummary(
        months=months,
        ending_outstanding=round_currency(bounded[-1].ending_outstanding if bounded else ZERO),
        total_interest=round_currency(sum((r.interest_accrued for r in bounded), ZERO)),
        total_principal_paid=round_currency(sum((r.payment_to_principal for r in bounded), ZERO)),
        total_loan_payment=round_currency(sum((r.planned_loan_payment for r in bounded), ZERO)),
        total_subscription_paid=round_currency(sum((r.subscription_due for r in bounded), ZERO)),
        total_payment=round_currency(sum((r.total_payment for r in bounded), ZERO)),
    )


def payoff_date(today: date, payoff_months: int | None, due_day: int) -> date | None:
    if payoff_months is None:
        return None
    return add_months_keeping_day(today, payoff_months, due_day)


def build_projection_model(
    record: LoanRecord,
    overrides: ProjectionOverrides | None = None,
    max_months: int | None = None,
    events: Iterable[LoanEvent] | None = None,
    today: date | None = None,
) -> LoanProjectionModel:
    """Build the projection model for one loan.

    Args:
        record: Loan record
        overrides: Optional scenario deltas
        max_months: Rows retained in the model (never fewer than the longest
            horizon)
        events: Historical loan events; only this loan's payments are used
        today: Anchor for the payoff date and the consistency trend
    """
    today = today or date.today()
    retained = max(max_months or settings.default_max_months, max(HORIZONS))
    simulation = simulate_loan(record, max(retained, settings.simulation_months), overrides)
    rows = simulation.rows[:retained]

    horizons = {months: summarize_rows(rows, months) for months in HORIZONS}

    expected_payment = rows[0].total_payment if rows else ZERO
    trend, score = build_consistency_trend(record.id, events or (), expected_payment, today)

    return LoanProjectionModel(
        loan_id=record.id,
        name=record.name,
        apr=simulation.apr,
        cadence=record.cadence,
        due_day=simulation.due_day,
        custom_interval=record.custom_interval,
        custom_unit=record.custom_unit,
        subscription_cost=simulation.subscription_cost,
        subscription_payments_remaining=simulation.subscription_payments_remaining,
        current_principal=simulation.current_principal,
        current_interest=simulation.current_interest,
        current_loan_balance=simulation.current_loan_balance,
        current_subscription_outstanding=simulation.current_subscription_outstanding,
        current_outstanding=simulation.current_outstanding,
        projected_next_month_interest=round_currency(rows[0].interest_accrued if rows else ZERO),
        projected_annual_interest=horizons[12].total_interest,
        projected_24_month_interest=horizons[24].total_interest,
        projected_36_month_interest=horizons[36].total_interest,
        projected_payoff_months=simulation.payoff_month,
        projected_payoff_date=payoff_date(today, simulation.payoff_month, simulation.due_day),
        payment_consistency_score=score,
        payment_consistency_trend=trend,
        rows=rows,
        horizons=horizons,
    )
