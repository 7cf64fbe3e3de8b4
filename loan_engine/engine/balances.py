"""Balance resolution: legacy single-balance vs split principal/interest records.

A record's balance fields are resolved once into a canonical
(principal, accrued_interest) pair; nothing downstream looks at the raw fields.

Pure functions. No I/O.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from loan_engine.config import settings
from loan_engine.engine.currency import EPSILON, ZERO, non_negative, round_currency
from loan_engine.models.records import LoanRecord


@dataclass(frozen=True)
class LegacyBalance:
    """Older records carry a single balance, all of it principal."""
    balance: Decimal


@dataclass(frozen=True)
class SplitBalance:
    principal: Decimal | None
    accrued_interest: Decimal | None


BalanceSource = LegacyBalance | SplitBalance


@dataclass(frozen=True)
class ResolvedBalances:
    principal: Decimal
    accrued_interest: Decimal
    balance: Decimal  # principal + accrued_interest


def balance_source(record: LoanRecord) -> BalanceSource:
    """Either split field being present makes the split authoritative."""
    if record.has_split_balance:
        return SplitBalance(record.principal_balance, record.accrued_interest)
    return LegacyBalance(record.balance)


def resolve_balances(source: BalanceSource) -> ResolvedBalances:
    if isinstance(source, SplitBalance):
        principal = non_negative(source.principal or ZERO)
        accrued = non_negative(source.accrued_interest or ZERO)
        return ResolvedBalances(
            principal=round_currency(principal),
            accrued_interest=round_currency(accrued),
            balance=round_currency(principal + accrued),
        )

    balance = round_currency(non_negative(source.balance))
    return ResolvedBalances(principal=balance, accrued_interest=round_currency(ZERO), balance=balance)


def resolve_record_balances(record: LoanRecord) -> ResolvedBalances:
    return resolve_balances(balance_source(record))


def resolve_subscription_outstanding(record: LoanRecord) -> Decimal:
    """Outstanding subscription fees still owed on the loan.

    An explicit outstanding at or below a single payment, with no configured
    payment count, is read as a stale record and reset to a fresh cycle of
    ``default_subscription_payment_count`` payments.
    """
    cost = round_currency(non_negative(record.subscription_cost))
    if cost <= 0:
        return round_currency(ZERO)

    count = record.subscription_payment_count
    if record.subscription_outstanding is not None:
        outstanding = round_currency(non_negative(record.subscription_outstanding))
        if count is None and outstanding <= cost + EPSILON:
            return round_currency(cost * settings.default_subscription_payment_count)
        return outstanding

    return round_currency(cost * (count or settings.default_subscription_payment_count))


def subscription_payments_remaining(cost: Decimal, outstanding: Decimal) -> int:
    if cost <= 0 or outstanding <= 0:
        return 0
    return max(1, math.ceil(outstanding / cost - EPSILON))
