"""Pydantic schemas for the loan records and payment events supplied by the host app.

Records may come from two schema generations: a legacy single ``balance`` or an
explicit ``principalBalance`` + ``accruedInterest`` pair. Both are accepted
as-is; normalization of malformed numbers happens here, once.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from loan_engine.engine.currency import finite_or_zero


class Cadence(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"
    ONE_TIME = "one_time"


class CustomCadenceUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


class MinimumPaymentType(str, Enum):
    FIXED = "fixed"
    PERCENT_PLUS_INTEREST = "percent_plus_interest"


def _money(value):
    return finite_or_zero(value)


def _optional_money(value):
    if value is None:
        return None
    return finite_or_zero(value)


def _positive_int_or_none(value):
    if value is None:
        return None
    number = finite_or_zero(value)
    if number <= 0 or number != number.to_integral_value():
        return None
    return int(number)


def _cadence(value):
    try:
        return Cadence(value)
    except ValueError:
        return Cadence.ONE_TIME


def _custom_unit(value):
    try:
        return CustomCadenceUnit(value)
    except ValueError:
        return None


def _minimum_payment_type(value):
    if value == MinimumPaymentType.PERCENT_PLUS_INTEREST.value:
        return MinimumPaymentType.PERCENT_PLUS_INTEREST
    return MinimumPaymentType.FIXED


def _due_day(value):
    return int(finite_or_zero(value))


Money = Annotated[Decimal, BeforeValidator(_money)]
OptionalMoney = Annotated[Decimal | None, BeforeValidator(_optional_money)]
OptionalCount = Annotated[int | None, BeforeValidator(_positive_int_or_none)]
Identifier = Annotated[str, BeforeValidator(str)]


class LoanRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: Identifier = Field(alias="_id")
    name: str = ""
    interest_rate: Money = Decimal("0")  # APR, percent
    cadence: Annotated[Cadence, BeforeValidator(_cadence)] = Cadence.MONTHLY
    custom_interval: OptionalCount = None
    custom_unit: Annotated[CustomCadenceUnit | None, BeforeValidator(_custom_unit)] = None
    due_day: Annotated[int, BeforeValidator(_due_day)] = 1

    # Legacy single balance, or the explicit split
    balance: Money = Decimal("0")
    principal_balance: OptionalMoney = None
    accrued_interest: OptionalMoney = None

    minimum_payment_type: Annotated[
        MinimumPaymentType, BeforeValidator(_minimum_payment_type)
    ] = MinimumPaymentType.FIXED
    minimum_payment: Money = Decimal("0")  # Per cadence occurrence
    minimum_payment_percent: Money = Decimal("0")
    extra_payment: Money = Decimal("0")  # Per cadence occurrence

    # Recurring monthly fee bundled with the loan
    subscription_cost: Money = Decimal("0")
    subscription_outstanding: OptionalMoney = None
    subscription_payment_count: OptionalCount = None

    @property
    def has_split_balance(self) -> bool:
        return self.principal_balance is not None or self.accrued_interest is not None


class LoanEvent(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    loan_id: Identifier
    event_type: str
    amount: Money = Decimal("0")
    occurred_at: datetime = Field(
        validation_alias=AliasChoices("occurredAt", "occurred_at", "createdAt", "created_at"),
    )

    @property
    def is_payment(self) -> bool:
        return self.event_type == "payment"
