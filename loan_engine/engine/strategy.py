"""Payoff strategy selection: avalanche (highest APR) vs snowball (smallest balance).

For each strategy the whole monthly overpay budget goes to a single target
loan; the portfolio is re-projected and the 12-month interest saving compared
against the baseline.

Pure computation. No I/O.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from loan_engine.config import settings
from loan_engine.engine.currency import ZERO, finite_or_zero, non_negative, round_currency
from loan_engine.engine.portfolio import build_portfolio_projection
from loan_engine.models.records import LoanEvent, LoanRecord
from loan_engine.models.results import LoanProjectionModel, StrategyCandidate, StrategyResult
from loan_engine.models.scenarios import ProjectionOverrides

logger = logging.getLogger(__name__)

AVALANCHE = "avalanche"
SNOWBALL = "snowball"


def avalanche_target(candidates: Sequence[LoanProjectionModel]) -> LoanProjectionModel | None:
    """Highest APR; ties go to the larger outstanding, then name."""
    if not candidates:
        return None
    return min(candidates, key=lambda m: (-m.apr, -m.current_outstanding, m.name.casefold()))


def snowball_target(candidates: Sequence[LoanProjectionModel]) -> LoanProjectionModel | None:
    """Smallest outstanding; ties go to the higher APR, then name."""
    if not candidates:
        return None
    return min(candidates, key=lambda m: (m.current_outstanding, -m.apr, m.name.casefold()))


def _candidate(model: LoanProjectionModel, savings: Decimal) -> StrategyCandidate:
    return StrategyCandidate(
        loan_id=model.loan_id,
        name=model.name,
        balance=model.current_outstanding,
        apr=model.apr,
        next_month_interest=model.projected_next_month_interest,
        annual_interest=model.projected_annual_interest,
        annual_interest_savings=round_currency(non_negative(savings)),
    )


def annual_interest_with_focused_overpay(
    loans: Sequence[LoanRecord],
    events: Sequence[LoanEvent],
    target_loan_id: str,
    monthly_overpay_budget: Decimal,
    today: date,
) -> Decimal:
    """Portfolio 12-month interest with the whole budget sent to one loan."""
    projection = build_portfolio_projection(
        loans,
        per_loan_overrides={
            target_loan_id: ProjectionOverrides(extra_payment_delta=non_negative(monthly_overpay_budget)),
        },
        events=events,
        today=today,
    )
    return projection.projected_annual_interest


def build_strategy(
    loans: Sequence[LoanRecord],
    events: Iterable[LoanEvent] | None,
    monthly_overpay_budget: Decimal,
    today: date | None = None,
) -> StrategyResult:
    """Compare avalanche and snowball targets for a fixed monthly overpay budget.

    Savings are floored at 0. The recommendation is whichever strategy saves
    more; ties (and a portfolio with nothing outstanding) favor avalanche.
    """
    today = today or date.today()
    event_list = tuple(events or ())
    budget = round_currency(non_negative(finite_or_zero(monthly_overpay_budget)))

    baseline = build_portfolio_projection(loans, events=event_list, today=today)
    baseline_interest = baseline.projected_annual_interest
    candidates = [m for m in baseline.models if m.current_outstanding > settings.strategy_min_outstanding]

    if not candidates:
        logger.debug("No loans with an outstanding balance; strategy defaults to avalanche")
        return StrategyResult(
            monthly_overpay_budget=budget,
            portfolio_annual_interest_baseline=baseline_interest,
            portfolio_annual_interest_with_avalanche=baseline_interest,
            portfolio_annual_interest_with_snowball=baseline_interest,
            recommended_mode=AVALANCHE,
        )

    avalanche_model = avalanche_target(candidates)
    snowball_model = snowball_target(candidates)

    avalanche_interest = annual_interest_with_focused_overpay(
        loans, event_list, avalanche_model.loan_id, budget, today
    )
    snowball_interest = annual_interest_with_focused_overpay(
        loans, event_list, snowball_model.loan_id, budget, today
    )

    avalanche = _candidate(avalanche_model, baseline_interest - avalanche_interest)
    snowball = _candidate(snowball_model, baseline_interest - snowball_interest)

    if avalanche.annual_interest_savings >= snowball.annual_interest_savings:
        mode, recommended = AVALANCHE, avalanche
    else:
        mode, recommended = SNOWBALL, snowball

    logger.debug(
        "Strategy budget=%s avalanche=%s (saves %s) snowball=%s (saves %s) -> %s",
        budget, avalanche.loan_id, avalanche.annual_interest_savings,
        snowball.loan_id, snowball.annual_interest_savings, mode,
    )

    return StrategyResult(
        monthly_overpay_budget=budget,
        portfolio_annual_interest_baseline=baseline_interest,
        portfolio_annual_interest_with_avalanche=round_currency(avalanche_interest),
        portfolio_annual_interest_with_snowball=round_currency(snowball_interest),
        recommended_mode=mode,
        recommended_target=recommended,
        avalanche_target=avalanche,
        snowball_target=snowball,
    )
