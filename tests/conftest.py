"""Canonical test fixtures used across all engine tests.

Reference loan: $1,200.00 principal, 12% APR, monthly, $100.00 fixed minimum,
due on the 15th. Dates are anchored to 2026-10-18.
"""

from datetime import date
from decimal import Decimal

import pytest

from loan_engine.models.records import LoanRecord

TODAY = date(2026, 10, 18)


def make_loan(**fields) -> LoanRecord:
    """LoanRecord with sensible defaults; keyword args override."""
    data = {
        "id": "loan_test",
        "name": "Test loan",
        "interest_rate": Decimal("0"),
        "cadence": "monthly",
        "due_day": 12,
        "balance": Decimal("1000"),
        "minimum_payment": Decimal("100"),
    }
    data.update(fields)
    return LoanRecord(**data)


@pytest.fixture
def loan_factory():
    return make_loan


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def reference_loan() -> LoanRecord:
    """$1,200 at 12% with a $100 fixed minimum."""
    return make_loan(
        id="reference",
        name="Reference",
        balance=Decimal("1200"),
        principal_balance=Decimal("1200"),
        accrued_interest=Decimal("0"),
        interest_rate=Decimal("12"),
        minimum_payment=Decimal("100"),
        due_day=15,
    )


@pytest.fixture
def legacy_loan() -> LoanRecord:
    """Older record shape: single balance, no split fields."""
    return make_loan(id="legacy", name="Legacy", balance=Decimal("500"), interest_rate=Decimal("6"),
                     minimum_payment=Decimal("50"))


@pytest.fixture
def subscription_only_loan() -> LoanRecord:
    return make_loan(
        id="subscription",
        name="Subscription only",
        balance=Decimal("0"),
        principal_balance=Decimal("0"),
        accrued_interest=Decimal("0"),
        minimum_payment=Decimal("0"),
        subscription_cost=Decimal("14"),
        subscription_payment_count=3,
        subscription_outstanding=Decimal("42"),
    )


@pytest.fixture
def high_apr_loan() -> LoanRecord:
    """Minimum payment far below monthly interest (negative amortization)."""
    return make_loan(
        id="high_apr",
        name="High APR",
        balance=Decimal("1000"),
        principal_balance=Decimal("1000"),
        accrued_interest=Decimal("0"),
        interest_rate=Decimal("60"),
        minimum_payment=Decimal("5"),
        minimum_payment_type="fixed",
    )


@pytest.fixture
def portfolio() -> list[LoanRecord]:
    """Card at 24%, small car loan at 6%, personal loan at 18%."""
    return [
        make_loan(id="card", name="Card", balance=Decimal("5000"), interest_rate=Decimal("24"),
                  minimum_payment=Decimal("200")),
        make_loan(id="car", name="Car", balance=Decimal("800"), interest_rate=Decimal("6"),
                  minimum_payment=Decimal("50")),
        make_loan(id="personal", name="Personal", balance=Decimal("3000"), interest_rate=Decimal("18"),
                  minimum_payment=Decimal("120")),
    ]
