"""What-if scenarios: apply deltas to one loan (or all) and diff against baseline.

Pure computation. No I/O.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from loan_engine.engine.currency import round_currency
from loan_engine.engine.portfolio import build_portfolio_projection
from loan_engine.models.records import LoanEvent, LoanRecord
from loan_engine.models.results import WhatIfDelta, WhatIfResult
from loan_engine.models.scenarios import ProjectionOverrides, WhatIfInput

logger = logging.getLogger(__name__)


def build_scenario_overrides(
    loans: Sequence[LoanRecord], what_if: WhatIfInput
) -> dict[str, ProjectionOverrides]:
    overrides = what_if.overrides()
    return {loan.id: overrides for loan in loans if what_if.applies_to(loan.id)}


def run_what_if(
    loans: Sequence[LoanRecord],
    events: Iterable[LoanEvent] | None,
    what_if: WhatIfInput,
    today: date | None = None,
) -> WhatIfResult:
    today = today or date.today()
    event_list = tuple(events or ())

    scenario_overrides = build_scenario_overrides(loans, what_if)
    if not scenario_overrides:
        logger.warning("What-if target %r matches no loan; scenario equals baseline", what_if.loan_id)

    baseline = build_portfolio_projection(loans, events=event_list, today=today)
    scenario = build_portfolio_projection(
        loans, per_loan_overrides=scenario_overrides, events=event_list, today=today
    )

    return WhatIfResult(
        input=what_if,
        baseline=baseline,
        scenario=scenario,
        delta=WhatIfDelta(
            next_month_interest=round_currency(
                scenario.projected_next_month_interest - baseline.projected_next_month_interest
            ),
            annual_interest=round_currency(
                scenario.projected_annual_interest - baseline.projected_annual_interest
            ),
            annual_payments=round_currency(
                scenario.projected_annual_payments - baseline.projected_annual_payments
            ),
            total_outstanding=round_currency(scenario.total_outstanding - baseline.total_outstanding),
        ),
    )
