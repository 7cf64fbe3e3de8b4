from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_engine.models.records import Cadence, CustomCadenceUnit
from loan_engine.models.scenarios import WhatIfInput

HORIZONS = (12, 24, 36)


@dataclass(frozen=True)
class ProjectionRow:
    """One simulated month for one loan."""
    month_index: int  # 1-based

    opening_principal: Decimal = Decimal("0")
    opening_interest: Decimal = Decimal("0")
    opening_subscription: Decimal = Decimal("0")
    opening_outstanding: Decimal = Decimal("0")

    interest_accrued: Decimal = Decimal("0")
    minimum_due: Decimal = Decimal("0")
    planned_loan_payment: Decimal = Decimal("0")
    payment_to_interest: Decimal = Decimal("0")
    payment_to_principal: Decimal = Decimal("0")
    subscription_due: Decimal = Decimal("0")
    total_payment: Decimal = Decimal("0")  # Loan + subscription

    ending_principal: Decimal = Decimal("0")
    ending_interest: Decimal = Decimal("0")
    ending_subscription: Decimal = Decimal("0")
    ending_loan_balance: Decimal = Decimal("0")
    ending_outstanding: Decimal = Decimal("0")

    payment_consistency_ratio: Decimal = Decimal("1")

    @property
    def opening_loan_balance(self) -> Decimal:
        return self.opening_principal + self.opening_interest

    @property
    def is_zero_row(self) -> bool:
        return self.opening_outstanding == 0 and self.ending_outstanding == 0

    @property
    def payment_below_interest(self) -> bool:
        """Negative amortization: the planned payment doesn't cover this month's interest."""
        return self.planned_loan_payment < self.interest_accrued


@dataclass(frozen=True)
class ProjectionSummary:
    """Totals over the first ``months`` rows of a projection."""
    months: int
    ending_outstanding: Decimal = Decimal("0")
    total_interest: Decimal = Decimal("0")
    total_principal_paid: Decimal = Decimal("0")
    total_loan_payment: Decimal = Decimal("0")
    total_subscription_paid: Decimal = Decimal("0")
    total_payment: Decimal = Decimal("0")


@dataclass(frozen=True)
class ConsistencyPoint:
    month_key: str  # "YYYY-MM"
    paid: Decimal
    expected: Decimal
    ratio: Decimal


@dataclass(frozen=True)
class LoanProjectionModel:
    loan_id: str
    name: str
    apr: Decimal  # Effective, after overrides
    cadence: Cadence
    due_day: int  # Effective, after overrides
    custom_interval: int | None = None
    custom_unit: CustomCadenceUnit | None = None

    subscription_cost: Decimal = Decimal("0")
    subscription_payments_remaining: int = 0

    current_principal: Decimal = Decimal("0")
    current_interest: Decimal = Decimal("0")
    current_loan_balance: Decimal = Decimal("0")
    current_subscription_outstanding: Decimal = Decimal("0")
    current_outstanding: Decimal = Decimal("0")

    projected_next_month_interest: Decimal = Decimal("0")
    projected_annual_interest: Decimal = Decimal("0")
    projected_24_month_interest: Decimal = Decimal("0")
    projected_36_month_interest: Decimal = Decimal("0")

    projected_payoff_months: int | None = None
    projected_payoff_date: date | None = None

    payment_consistency_score: Decimal = Decimal("100")  # 0-140
    payment_consistency_trend: list[ConsistencyPoint] = field(default_factory=list)

    rows: list[ProjectionRow] = field(default_factory=list)
    horizons: dict[int, ProjectionSummary] = field(default_factory=dict)


@dataclass(frozen=True)
class LoanPortfolioProjection:
    total_outstanding: Decimal = Decimal("0")
    projected_next_month_interest: Decimal = Decimal("0")
    projected_annual_interest: Decimal = Decimal("0")
    projected_24_month_interest: Decimal = Decimal("0")
    projected_36_month_interest: Decimal = Decimal("0")
    projected_annual_payments: Decimal = Decimal("0")
    average_payment_consistency_score: Decimal = Decimal("100")
    models: list[LoanProjectionModel] = field(default_factory=list)

    def model_for(self, loan_id: str) -> LoanProjectionModel | None:
        return next((m for m in self.models if m.loan_id == loan_id), None)


@dataclass(frozen=True)
class StrategyCandidate:
    loan_id: str
    name: str
    balance: Decimal  # Current outstanding
    apr: Decimal
    next_month_interest: Decimal
    annual_interest: Decimal
    annual_interest_savings: Decimal  # Portfolio-wide, floored at 0


@dataclass(frozen=True)
class StrategyResult:
    monthly_overpay_budget: Decimal
    portfolio_annual_interest_baseline: Decimal
    portfolio_annual_interest_with_avalanche: Decimal
    portfolio_annual_interest_with_snowball: Decimal
    recommended_mode: str = "avalanche"  # "avalanche" or "snowball"
    recommended_target: StrategyCandidate | None = None
    avalanche_target: StrategyCandidate | None = None
    snowball_target: StrategyCandidate | None = None


@dataclass(frozen=True)
class WhatIfDelta:
    """Scenario minus baseline."""
    next_month_interest: Decimal = Decimal("0")
    annual_interest: Decimal = Decimal("0")
    annual_payments: Decimal = Decimal("0")
    total_outstanding: Decimal = Decimal("0")


@dataclass(frozen=True)
class WhatIfResult:
    input: WhatIfInput
    baseline: LoanPortfolioProjection
    scenario: LoanPortfolioProjection
    delta: WhatIfDelta


@dataclass(frozen=True)
class RefinanceResult:
    monthly_payment: Decimal
    total_refinance_interest: Decimal
    total_refinance_cost: Decimal
    total_current_cost: Decimal
    total_cost_delta: Decimal  # Negative = refinance is cheaper
    break_even_month: int | None
    remaining_current_outstanding_at_term: Decimal


@dataclass(frozen=True)
class LifecycleResult:
    balance: Decimal
    interest_accrued: Decimal
    payments_applied: Decimal
