"""Refinance analysis: fixed-term amortized offer vs the current trajectory.

Uses scipy for the break-even APR search. No I/O.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from scipy.optimize import brentq

from loan_engine.engine.currency import (
    EPSILON,
    ZERO,
    clamp_positive_int,
    finite_or_zero,
    non_negative,
    round_currency,
)
from loan_engine.engine.simulator import monthly_rate_for
from loan_engine.models.results import LoanProjectionModel, RefinanceResult
from loan_engine.models.scenarios import RefinanceOffer

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
MAX_SEARCH_APR = 100.0


def amortized_payment(principal: Decimal, apr: Decimal, term_months: int) -> Decimal:
    """Level monthly payment that retires ``principal`` over ``term_months``.

    M = P * r / (1 - (1 + r)^-n); with a zero rate this reduces to P / n.
    Returned unrounded.
    """
    principal = non_negative(principal)
    n = clamp_positive_int(term_months)
    r = monthly_rate_for(apr)
    if r <= 0:
        return principal / n

    denominator = 1 - (1 + r) ** -n
    if denominator <= 0:
        return principal / n
    return principal * r / denominator


def analyze_refinance(model: LoanProjectionModel, offer: RefinanceOffer) -> RefinanceResult:
    """Compare refinancing the loan balance against staying on the current path.

    Both paths are walked month by month over the offer term. Each refinance
    month also carries the current path's subscription due. Final totals add
    whatever balance is still outstanding at the end of the term on each path.

    The model's rows should cover the offer term; months beyond them count
    as zero cost on the current path.
    """
    term = clamp_positive_int(offer.term_months)
    offer_apr = non_negative(finite_or_zero(offer.apr))
    fees = round_currency(non_negative(finite_or_zero(offer.fees)))
    principal = non_negative(model.current_loan_balance)
    monthly_payment = round_currency(amortized_payment(principal, offer_apr, term))
    rate = monthly_rate_for(offer_apr)

    if term > len(model.rows):
        logger.debug("Refinance term %d exceeds the %d projected rows", term, len(model.rows))

    current_rows = model.rows[:term]
    current_subscription_total = sum((r.subscription_due for r in current_rows), ZERO)
    current_cost_through_term = sum((r.total_payment for r in current_rows), ZERO)
    remaining_current = current_rows[-1].ending_outstanding if current_rows else model.current_outstanding

    balance = principal
    interest_total = ZERO
    refinance_cost = fees
    cumulative_current = ZERO
    cumulative_refinance = fees
    break_even_month: int | None = None

    for month in range(1, term + 1):
        interest = round_currency(balance * rate)
        interest_total += interest
        due = round_currency(balance + interest)
        payment = min(due, monthly_payment)
        balance = round_currency(non_negative(due - payment))
        refinance_cost += payment

        row = current_rows[month - 1] if month <= len(current_rows) else None
        cumulative_current += row.total_payment if row else ZERO
        cumulative_refinance += payment + (row.subscription_due if row else ZERO)

        if break_even_month is None and cumulative_refinance <= cumulative_current + EPSILON:
            break_even_month = month

    total_refinance_cost = round_currency(refinance_cost + current_subscription_total + balance)
    total_current_cost = round_currency(current_cost_through_term + remaining_current)

    return RefinanceResult(
        monthly_payment=monthly_payment,
        total_refinance_interest=round_currency(interest_total),
        total_refinance_cost=total_refinance_cost,
        total_current_cost=total_current_cost,
        total_cost_delta=round_currency(total_refinance_cost - total_current_cost),
        break_even_month=break_even_month,
        remaining_current_outstanding_at_term=round_currency(remaining_current),
    )


def break_even_apr(model: LoanProjectionModel, fees: Decimal, term_months: int) -> Decimal | None:
    """Offer APR (percent) at which refinancing and staying put cost the same.

    Uses Brent's method on the total cost delta over [0%, 100%]. Returns None
    when the delta doesn't change sign in that range (refinancing never pays
    off, or pays off at any rate).
    """
    def cost_delta(apr: float) -> float:
        offer = RefinanceOffer(apr=Decimal(str(apr)), fees=fees, term_months=term_months)
        return float(analyze_refinance(model, offer).total_cost_delta)

    try:
        apr = brentq(cost_delta, 0.0, MAX_SEARCH_APR, xtol=1e-6, maxiter=1000)
    except ValueError:
        logger.debug("No break-even APR in [0, %s] for loan %s", MAX_SEARCH_APR, model.loan_id)
        return None
    return Decimal(str(apr)).quantize(TWO_PLACES, ROUND_HALF_UP)
