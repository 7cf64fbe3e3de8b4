"""Scenario inputs: per-loan overrides, what-if deltas and refinance offers."""

from dataclasses import dataclass
from decimal import Decimal

ALL_LOANS = "all"


@dataclass(frozen=True)
class ProjectionOverrides:
    """Deltas layered on top of a loan record for one simulation."""
    extra_payment_delta: Decimal = Decimal("0")  # Per cadence occurrence
    apr_delta: Decimal = Decimal("0")  # Percentage points
    subscription_delta: Decimal = Decimal("0")  # Per month
    due_day_shift: int = 0


@dataclass(frozen=True)
class WhatIfInput:
    loan_id: str = ALL_LOANS  # A loan id, or "all"
    extra_payment_delta: Decimal = Decimal("0")
    apr_delta: Decimal = Decimal("0")
    subscription_delta: Decimal = Decimal("0")
    due_day_shift: int = 0

    def applies_to(self, loan_id: str) -> bool:
        return self.loan_id == ALL_LOANS or self.loan_id == loan_id

    def overrides(self) -> ProjectionOverrides:
        return ProjectionOverrides(
            extra_payment_delta=self.extra_payment_delta,
            apr_delta=self.apr_delta,
            subscription_delta=self.subscription_delta,
            due_day_shift=self.due_day_shift,
        )


@dataclass(frozen=True)
class RefinanceOffer:
    apr: Decimal  # Percent
    fees: Decimal = Decimal("0")  # Up-front
    term_months: int = 12
