from decimal import Decimal

import pytest

from loan_engine.engine.simulator import monthly_rate_for, simulate_loan
from loan_engine.models.scenarios import ProjectionOverrides


class TestReferenceLoan:
    def test_first_month(self, reference_loan):
        """$1,200 at 12%: $12.00 interest, $88.00 to principal."""
        first = simulate_loan(reference_loan, 12).rows[0]
        assert first.interest_accrued == Decimal("12.00")
        assert first.minimum_due == Decimal("100.00")
        assert first.planned_loan_payment == Decimal("100.00")
        assert first.payment_to_interest == Decimal("12.00")
        assert first.payment_to_principal == Decimal("88.00")
        assert first.ending_principal == Decimal("1112.00")
        assert first.ending_interest == Decimal("0.00")
        assert first.ending_outstanding == Decimal("1112.00")
        assert first.payment_consistency_ratio == Decimal("1")

    def test_second_month(self, reference_loan):
        second = simulate_loan(reference_loan, 12).rows[1]
        assert second.opening_principal == Decimal("1112.00")
        assert second.interest_accrued == Decimal("11.12")
        assert second.ending_principal == Decimal("1023.12")

    def test_row_count(self, reference_loan):
        assert len(simulate_loan(reference_loan, 24).rows) == 24

    def test_months_floored_at_one(self, reference_loan):
        assert len(simulate_loan(reference_loan, 0).rows) == 1

    def test_current_balances(self, reference_loan):
        sim = simulate_loan(reference_loan, 1)
        assert sim.current_principal == Decimal("1200.00")
        assert sim.current_loan_balance == Decimal("1200.00")
        assert sim.current_outstanding == Decimal("1200.00")
        assert sim.apr == Decimal("12.00")
        assert sim.due_day == 15


class TestRowInvariants:
    @pytest.fixture
    def loans(self, reference_loan, legacy_loan, subscription_only_loan, high_apr_loan, loan_factory):
        return [
            reference_loan,
            legacy_loan,
            subscription_only_loan,
            high_apr_loan,
            loan_factory(
                balance=Decimal("2500"), interest_rate=Decimal("19.9"), minimum_payment=Decimal("75"),
                extra_payment=Decimal("10"), subscription_cost=Decimal("4.99"), cadence="biweekly",
            ),
            loan_factory(
                principal_balance=Decimal("1800"), accrued_interest=Decimal("37.40"),
                interest_rate=Decimal("22.5"), minimum_payment_type="percent_plus_interest",
                minimum_payment_percent=Decimal("3"),
            ),
        ]

    def test_components_sum_exactly(self, loans):
        for loan in loans:
            for row in simulate_loan(loan, 120).rows:
                assert row.ending_principal + row.ending_interest == row.ending_loan_balance
                assert row.ending_loan_balance + row.ending_subscription == row.ending_outstanding

    def test_total_payment_is_loan_plus_subscription(self, loans):
        for loan in loans:
            for row in simulate_loan(loan, 60).rows:
                assert row.total_payment == row.planned_loan_payment + row.subscription_due
                assert row.planned_loan_payment == row.payment_to_interest + row.payment_to_principal

    def test_no_negative_balances(self, loans):
        for loan in loans:
            for row in simulate_loan(loan, 360).rows:
                assert row.ending_principal >= 0
                assert row.ending_interest >= 0
                assert row.ending_subscription >= 0

    def test_outstanding_strictly_decreasing_until_payoff(self, reference_loan, legacy_loan, loan_factory):
        """Positive APR, minimum >= monthly interest, no extras."""
        loans = [
            reference_loan,
            legacy_loan,
            loan_factory(balance=Decimal("15000"), interest_rate=Decimal("7.5"), minimum_payment=Decimal("300")),
        ]
        for loan in loans:
            sim = simulate_loan(loan, 360)
            assert sim.payoff_month is not None
            for row in sim.rows[:sim.payoff_month]:
                assert row.interest_accrued <= row.minimum_due
                assert row.ending_outstanding < row.opening_outstanding


class TestPayoff:
    def test_payoff_detected_once(self, reference_loan):
        sim = simulate_loan(reference_loan, 36)
        assert sim.payoff_month == 13
        payoff_row = sim.rows[sim.payoff_month - 1]
        assert payoff_row.ending_outstanding == 0
        assert sim.rows[sim.payoff_month - 2].ending_outstanding > 0

    def test_zero_rows_after_payoff(self, reference_loan):
        sim = simulate_loan(reference_loan, 36)
        for row in sim.rows[sim.payoff_month:]:
            assert row.is_zero_row
            assert row.total_payment == 0
            assert row.interest_accrued == 0
            assert row.payment_consistency_ratio == 1

    def test_final_payment_capped_at_due_balance(self, loan_factory):
        loan = loan_factory(balance=Decimal("50"), interest_rate=Decimal("12"), minimum_payment=Decimal("100"))
        sim = simulate_loan(loan, 3)
        first = sim.rows[0]
        assert first.minimum_due == Decimal("50.50")
        assert first.planned_loan_payment == Decimal("50.50")
        assert first.ending_outstanding == 0
        assert sim.payoff_month == 1
        assert sim.rows[1].is_zero_row

    def test_already_paid_off(self, loan_factory):
        sim = simulate_loan(loan_factory(balance=Decimal("0")), 12)
        assert sim.payoff_month == 1
        assert all(row.is_zero_row for row in sim.rows)

    def test_never_paid_off(self, high_apr_loan):
        sim = simulate_loan(high_apr_loan, 360)
        assert sim.payoff_month is None

    def test_subscription_only(self, subscription_only_loan):
        sim = simulate_loan(subscription_only_loan, 12)
        assert sim.rows[0].planned_loan_payment == 0
        assert sim.rows[0].subscription_due == Decimal("14.00")
        assert sim.payoff_month == 3
        assert sim.subscription_payments_remaining == 3


class TestMinimumPaymentRules:
    def test_percent_plus_interest(self, loan_factory):
        loan = loan_factory(
            balance=Decimal("1000"), interest_rate=Decimal("12"),
            minimum_payment_type="percent_plus_interest", minimum_payment_percent=Decimal("2"),
        )
        first = simulate_loan(loan, 1).rows[0]
        assert first.interest_accrued == Decimal("10.00")
        assert first.minimum_due == Decimal("30.00")
        assert first.payment_to_principal == Decimal("20.00")

    def test_percent_clamped_to_hundred(self, loan_factory):
        loan = loan_factory(
            balance=Decimal("1000"), interest_rate=Decimal("12"),
            minimum_payment_type="percent_plus_interest", minimum_payment_percent=Decimal("250"),
        )
        first = simulate_loan(loan, 1).rows[0]
        assert first.minimum_due == Decimal("1010.00")
        assert first.ending_outstanding == 0

    def test_weekly_cadence_scales_minimum(self, loan_factory):
        loan = loan_factory(balance=Decimal("5000"), cadence="weekly", minimum_payment=Decimal("25"))
        assert simulate_loan(loan, 1).rows[0].minimum_due == Decimal("108.33")

    def test_quarterly_minimum_spread_over_months(self, loan_factory):
        loan = loan_factory(balance=Decimal("5000"), cadence="quarterly", minimum_payment=Decimal("300"))
        assert simulate_loan(loan, 1).rows[0].minimum_due == Decimal("100.00")

    def test_one_time_has_no_recurring_minimum(self, loan_factory):
        loan = loan_factory(balance=Decimal("5000"), cadence="one_time", minimum_payment=Decimal("300"))
        first = simulate_loan(loan, 1).rows[0]
        assert first.minimum_due == 0
        assert first.planned_loan_payment == 0

    def test_extra_payment_on_top_of_minimum(self, reference_loan):
        loan = reference_loan.model_copy(update={"extra_payment": Decimal("50")})
        first = simulate_loan(loan, 1).rows[0]
        assert first.planned_loan_payment == Decimal("150.00")
        assert first.payment_consistency_ratio == Decimal("1.5000")

    def test_payment_below_interest_flagged(self, high_apr_loan):
        first = simulate_loan(high_apr_loan, 1).rows[0]
        assert first.interest_accrued == Decimal("50.00")
        assert first.payment_below_interest
        assert first.ending_interest == Decimal("45.00")

    def test_zero_minimum_ratio_is_one(self, loan_factory):
        loan = loan_factory(minimum_payment=Decimal("0"), interest_rate=Decimal("5"))
        first = simulate_loan(loan, 1).rows[0]
        assert first.minimum_due == 0
        assert first.payment_consistency_ratio == 1


class TestOverrides:
    def test_apr_floored_at_zero(self, reference_loan):
        sim = simulate_loan(reference_loan, 1, ProjectionOverrides(apr_delta=Decimal("-20")))
        assert sim.apr == 0
        assert sim.rows[0].interest_accrued == 0

    def test_apr_delta_applied(self, reference_loan):
        sim = simulate_loan(reference_loan, 1, ProjectionOverrides(apr_delta=Decimal("12")))
        assert sim.rows[0].interest_accrued == Decimal("24.00")

    def test_extra_payment_delta(self, reference_loan):
        sim = simulate_loan(reference_loan, 1, ProjectionOverrides(extra_payment_delta=Decimal("25")))
        assert sim.rows[0].planned_loan_payment == Decimal("125.00")

    def test_negative_extra_never_below_minimum(self, reference_loan):
        sim = simulate_loan(reference_loan, 1, ProjectionOverrides(extra_payment_delta=Decimal("-500")))
        assert sim.rows[0].planned_loan_payment == Decimal("100.00")

    def test_due_day_shift_clamped(self, reference_loan):
        assert simulate_loan(reference_loan, 1, ProjectionOverrides(due_day_shift=20)).due_day == 31
        assert simulate_loan(reference_loan, 1, ProjectionOverrides(due_day_shift=-30)).due_day == 1
        assert simulate_loan(reference_loan, 1, ProjectionOverrides(due_day_shift=3)).due_day == 18

    def test_subscription_delta(self, subscription_only_loan):
        sim = simulate_loan(
            subscription_only_loan, 12, ProjectionOverrides(subscription_delta=Decimal("7"))
        )
        assert sim.subscription_cost == Decimal("21.00")
        assert sim.rows[0].subscription_due == Decimal("21.00")
        assert sim.rows[1].subscription_due == Decimal("21.00")
        assert sim.payoff_month == 2


class TestMonthlyRate:
    def test_rate(self):
        assert monthly_rate_for(Decimal("12")) == Decimal("0.01")

    def test_negative_apr(self):
        assert monthly_rate_for(Decimal("-3")) == 0
