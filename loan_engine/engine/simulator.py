"""Single-loan month-by-month amortization simulator.

Each month: interest accrues on the opening loan balance, the minimum due is
derived from the payment rule, extra payment is added on top, and the planned
payment is applied interest first, then principal. Subscription fees are paid
down alongside. Every figure is rounded to the cent as it is produced.

Pure functions: LoanRecord in, Simulation out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from loan_engine.engine.balances import (
    resolve_record_balances,
    resolve_subscription_outstanding,
    subscription_payments_remaining,
)
from loan_engine.engine.cadence import monthly_occurrences
from loan_engine.engine.currency import (
    ONE,
    ZERO,
    clamp_day,
    clamp_percent,
    clamp_positive_int,
    finite_or_zero,
    is_effectively_zero,
    non_negative,
    round_currency,
)
from loan_engine.models.records import LoanRecord, MinimumPaymentType
from loan_engine.models.results import ProjectionRow
from loan_engine.models.scenarios import ProjectionOverrides

FOUR_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class Simulation:
    rows: list[ProjectionRow]
    payoff_month: int | None

    current_principal: Decimal
    current_interest: Decimal
    current_loan_balance: Decimal
    current_subscription_outstanding: Decimal
    current_outstanding: Decimal

    apr: Decimal  # Effective, after overrides
    due_day: int  # Effective, after overrides
    subscription_cost: Decimal  # Effective, after overrides
    subscription_payments_remaining: int


def monthly_rate_for(apr: Decimal) -> Decimal:
    """APR percent -> monthly decimal rate. Negative APRs are floored at 0."""
    return non_negative(apr) / 100 / 12


def _zero_row(month_index: int, principal, interest, subscription, outstanding) -> ProjectionRow:
    return ProjectionRow(
        month_index=month_index,
        opening_principal=principal,
        opening_interest=interest,
        opening_subscription=subscription,
        opening_outstanding=outstanding,
        interest_accrued=round_currency(ZERO),
        minimum_due=round_currency(ZERO),
        planned_loan_payment=round_currency(ZERO),
        payment_to_interest=round_currency(ZERO),
        payment_to_principal=round_currency(ZERO),
        subscription_due=round_currency(ZERO),
        total_payment=round_currency(ZERO),
        ending_principal=round_currency(ZERO),
        ending_interest=round_currency(ZERO),
        ending_subscription=round_currency(ZERO),
        ending_loan_balance=round_currency(ZERO),
        ending_outstanding=round_currency(ZERO),
        payment_consistency_ratio=ONE,
    )


def simulate_loan(
    record: LoanRecord,
    months: int,
    overrides: ProjectionOverrides | None = None,
) -> Simulation:
    """Simulate ``months`` months of amortization for one loan.

    Args:
        record: Loan record
        months: Months to simulate (floored at 1)
        overrides: Optional deltas for extra payment, APR, subscription cost
            and due day
    """
    months = clamp_positive_int(months)
    overrides = overrides or ProjectionOverrides()

    working = resolve_record_balances(record)
    apr = non_negative(record.interest_rate + finite_or_zero(overrides.apr_delta))
    monthly_rate = monthly_rate_for(apr)

    occurrences = monthly_occurrences(record.cadence, record.custom_interval, record.custom_unit)
    percent_rule = record.minimum_payment_type == MinimumPaymentType.PERCENT_PLUS_INTEREST
    minimum_percent = clamp_percent(record.minimum_payment_percent)
    monthly_fixed_minimum = non_negative(record.minimum_payment) * occurrences
    extra_payment = non_negative(
        non_negative(record.extra_payment) + finite_or_zero(overrides.extra_payment_delta)
    )
    monthly_extra = extra_payment * occurrences

    subscription_cost = round_currency(
        non_negative(non_negative(record.subscription_cost) + finite_or_zero(overrides.subscription_delta))
    )
    due_day = clamp_day(record.due_day + int(finite_or_zero(overrides.due_day_shift)))

    principal = working.principal
    accrued_interest = working.accrued_interest
    starting_subscription = resolve_subscription_outstanding(record)
    subscription_outstanding = starting_subscription
    current_loan_balance = round_currency(principal + accrued_interest)
    current_outstanding = round_currency(current_loan_balance + subscription_outstanding)

    rows: list[ProjectionRow] = []
    payoff_month: int | None = None

    for month_index in range(1, months + 1):
        opening_principal = round_currency(non_negative(principal))
        opening_interest = round_currency(non_negative(accrued_interest))
        opening_loan_balance = round_currency(opening_principal + opening_interest)
        opening_subscription = round_currency(non_negative(subscription_outstanding))
        opening_outstanding = round_currency(opening_loan_balance + opening_subscription)

        # Paid off: emit zero rows for the rest of the window
        if is_effectively_zero(opening_outstanding):
            rows.append(_zero_row(
                month_index, opening_principal, opening_interest,
                opening_subscription, opening_outstanding,
            ))
            if payoff_month is None:
                payoff_month = month_index
            continue

        interest_accrued = round_currency(opening_loan_balance * monthly_rate)
        accrued_interest = round_currency(accrued_interest + interest_accrued)

        due_balance = round_currency(principal + accrued_interest)
        if percent_rule:
            minimum_raw = principal * (minimum_percent / 100) * occurrences + accrued_interest
        else:
            minimum_raw = monthly_fixed_minimum
        minimum_due = round_currency(min(due_balance, non_negative(minimum_raw)))
        planned_payment = round_currency(min(due_balance, minimum_due + monthly_extra))

        # Interest first, then principal; nothing carries past the balance
        payment_to_interest = round_currency(min(accrued_interest, planned_payment))
        accrued_interest = round_currency(non_negative(accrued_interest - payment_to_interest))
        remaining_payment = round_currency(planned_payment - payment_to_interest)
        payment_to_principal = round_currency(min(principal, remaining_payment))
        principal = round_currency(non_negative(principal - payment_to_principal))

        if subscription_cost > 0:
            subscription_due = round_currency(min(subscription_outstanding, subscription_cost))
        else:
            subscription_due = round_currency(subscription_outstanding)
        subscription_outstanding = round_currency(non_negative(subscription_outstanding - subscription_due))

        ending_principal = round_currency(non_negative(principal))
        ending_interest = round_currency(non_negative(accrued_interest))
        ending_loan_balance = round_currency(ending_principal + ending_interest)
        ending_subscription = round_currency(non_negative(subscription_outstanding))
        ending_outstanding = round_currency(ending_loan_balance + ending_subscription)

        if minimum_due > 0:
            ratio = (planned_payment / minimum_due).quantize(FOUR_PLACES, ROUND_HALF_UP)
        else:
            ratio = ONE

        rows.append(ProjectionRow(
            month_index=month_index,
            opening_principal=opening_principal,
            opening_interest=opening_interest,
            opening_subscription=opening_subscription,
            opening_outstanding=opening_outstanding,
            interest_accrued=interest_accrued,
            minimum_due=minimum_due,
            planned_loan_payment=planned_payment,
            payment_to_interest=payment_to_interest,
            payment_to_principal=payment_to_principal,
            subscription_due=subscription_due,
            total_payment=round_currency(planned_payment + subscription_due),
            ending_principal=ending_principal,
            ending_interest=ending_interest,
            ending_subscription=ending_subscription,
            ending_loan_balance=ending_loan_balance,
            ending_outstanding=ending_outstanding,
            payment_consistency_ratio=ratio,
        ))

        if payoff_month is None and is_effectively_zero(ending_outstanding):
            payoff_month = month_index

    return Simulation(
        rows=rows,
        payoff_month=payoff_month,
        current_principal=working.principal,
        current_interest=working.accrued_interest,
        current_loan_balance=current_loan_balance,
        current_subscription_outstanding=starting_subscription,
        current_outstanding=current_outstanding,
        apr=round_currency(apr),
        due_day=due_day,
        subscription_cost=subscription_cost,
        subscription_payments_remaining=subscription_payments_remaining(
            subscription_cost, starting_subscription
        ),
    )
