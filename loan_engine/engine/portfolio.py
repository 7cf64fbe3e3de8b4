"""Portfolio aggregator: one projection model per loan, summed headline figures.

Each loan is simulated independently. Pure computation. No I/O.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from decimal import Decimal

from loan_engine.engine.currency import ZERO, round_currency
from loan_engine.engine.projection import build_projection_model
from loan_engine.models.records import LoanEvent, LoanRecord
from loan_engine.models.results import LoanPortfolioProjection
from loan_engine.models.scenarios import ProjectionOverrides

logger = logging.getLogger(__name__)

NEUTRAL_CONSISTENCY_SCORE = Decimal("100")


def build_portfolio_projection(
    loans: Sequence[LoanRecord],
    per_loan_overrides: Mapping[str, ProjectionOverrides] | None = None,
    max_months: int | None = None,
    events: Iterable[LoanEvent] | None = None,
    today: date | None = None,
) -> LoanPortfolioProjection:
    """Project every loan and sum the portfolio-level figures."""
    today = today or date.today()
    overrides = per_loan_overrides or {}
    event_list = tuple(events or ())

    models = [
        build_projection_model(
            loan,
            overrides=overrides.get(loan.id),
            max_months=max_months,
            events=event_list,
            today=today,
        )
        for loan in loans
    ]

    if models:
        average_score = round_currency(
            sum((m.payment_consistency_score for m in models), ZERO) / len(models)
        )
    else:
        average_score = NEUTRAL_CONSISTENCY_SCORE

    projection = LoanPortfolioProjection(
        total_outstanding=round_currency(sum((m.current_outstanding for m in models), ZERO)),
        projected_next_month_interest=round_currency(
            sum((m.projected_next_month_interest for m in models), ZERO)
        ),
        projected_annual_interest=round_currency(sum((m.horizons[12].total_interest for m in models), ZERO)),
        projected_24_month_interest=round_currency(sum((m.horizons[24].total_interest for m in models), ZERO)),
        projected_36_month_interest=round_currency(sum((m.horizons[36].total_interest for m in models), ZERO)),
        projected_annual_payments=round_currency(sum((m.horizons[12].total_payment for m in models), ZERO)),
        average_payment_consistency_score=average_score,
        models=models,
    )
    logger.debug(
        "Projected %d loans: outstanding=%s annual_interest=%s",
        len(models), projection.total_outstanding, projection.projected_annual_interest,
    )
    return projection
