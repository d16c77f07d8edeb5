"""Data contracts for the comprehensive wealth projection."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wealthplan.schemas.accrual import SubAccountSpec
from wealthplan.schemas.assumptions import RateSet

CASH = "cash"
INVESTMENTS = "investments"
RETIREMENT = "retirement"


class RetirementSumTransfer(BaseModel):
    """
    At ``age``, move up to the required retirement sum from ``sources`` (in
    order) into ``target``. The sum is quoted in today's dollars and grows at
    ``sum_growth`` per year until ``age``. Whatever is left in ``closed_accounts``
    afterwards moves into ``closed_into``.
    """

    model_config = ConfigDict(extra="forbid")

    age: int = Field(default=55, ge=0, le=120)
    target: str = "ra"
    sources: List[str] = Field(default_factory=lambda: ["sa", "oa"])
    required_sum: float = Field(default=205800.0, ge=0)
    sum_growth: float = Field(default=0.035, ge=-1)
    closed_accounts: List[str] = Field(default_factory=lambda: ["sa"])
    closed_into: Optional[str] = "oa"


class LifeAnnuity(BaseModel):
    """At ``payout_age`` the ``sources`` balances buy a level lifetime payout."""

    model_config = ConfigDict(extra="forbid")

    payout_age: int = Field(default=65, ge=0, le=120)
    sources: List[str] = Field(default_factory=lambda: ["ra"])
    # roughly $1,700 a month for a $205,800 premium
    monthly_payout_per_dollar: float = Field(default=1700.0 / 205800.0, ge=0)


class BalanceCap(BaseModel):
    """
    Ceiling on one sub-account, such as MediSave's Basic Healthcare Sum.

    The limit grows at ``limit_growth`` a year from the current age until
    ``limit_fixed_from_age`` and stays level after. Anything above it spills
    into ``overflow_to``, or into ``overflow_to_after`` from ``switch_age`` on.
    """

    model_config = ConfigDict(extra="forbid")

    account: str = "ma"
    limit: float = Field(default=75500.0, ge=0)
    limit_growth: float = Field(default=0.04, ge=-1)
    limit_fixed_from_age: int = Field(default=65, ge=0, le=120)
    overflow_to: str = "sa"
    switch_age: int = Field(default=55, ge=0, le=120)
    overflow_to_after: str = "ra"


class WealthInputs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    current_age: int = Field(ge=0, le=120)
    retirement_age: int = Field(ge=0, le=120)
    horizon_age: int = Field(default=95, ge=0, le=120)

    retirement_accounts: List[SubAccountSpec] = Field(default_factory=list)
    retirement_balances: Dict[str, float] = Field(default_factory=dict)
    cash: float = 0.0
    investments: float = 0.0

    monthly_income: float = Field(default=0.0, ge=0)
    # monthly_savings is the total saved; monthly_investment is the part of it invested
    monthly_savings: float = Field(default=0.0, ge=0)
    monthly_investment: float = Field(default=0.0, ge=0)
    monthly_expenses_today: float = Field(default=0.0, ge=0)

    rates: RateSet = Field(default_factory=RateSet)
    withdrawal_order: List[str] = Field(
        default_factory=lambda: [CASH, INVESTMENTS, RETIREMENT]
    )
    transfer: Optional[RetirementSumTransfer] = None
    annuity: Optional[LifeAnnuity] = None
    balance_cap: Optional[BalanceCap] = None

    @model_validator(mode="after")
    def check_account_names(self) -> "WealthInputs":
        names = [spec.name for spec in self.retirement_accounts]
        errors: List[str] = []
        if len(names) != len(set(names)):
            errors.append("retirement account names must be unique")

        reserved = {CASH, INVESTMENTS, RETIREMENT}
        clashes = sorted(reserved.intersection(names))
        if clashes:
            errors.append(f"reserved account names used: {', '.join(clashes)}")

        known = set(names)
        referenced: List[str] = []
        if self.transfer:
            referenced.extend([self.transfer.target, *self.transfer.sources, *self.transfer.closed_accounts])
            if self.transfer.closed_into:
                referenced.append(self.transfer.closed_into)
        if self.annuity:
            referenced.extend(self.annuity.sources)
        if self.balance_cap:
            cap = self.balance_cap
            referenced.extend([cap.account, cap.overflow_to, cap.overflow_to_after])
        referenced.extend(
            spec.redirect_after_cutoff
            for spec in self.retirement_accounts
            if spec.redirect_after_cutoff
        )
        referenced.extend(
            pot for pot in self.withdrawal_order if pot not in reserved
        )
        missing = sorted(set(referenced) - known)
        if missing:
            errors.append(f"unknown retirement accounts: {', '.join(missing)}")

        if errors:
            raise ValueError("; ".join(errors))
        return self


class WealthRow(BaseModel):
    """
    Closing position for the year lived at ``age``.

    Balances are taken at the end of that year, after its growth, inflows and
    spending; they are the balances on reaching ``age + 1``. The first row
    therefore already carries one year of growth. This is one year later than
    an ``AccrualPoint``, which holds the balances on reaching its ``age``.

    ``annual_expense`` is the inflation-adjusted cost of living for that age,
    reported every year; it is only drawn down once ``is_retired``.
    ``shortfall`` is the part of the expense nothing could fund.
    """

    age: int
    year_index: int
    retirement_balances: Dict[str, float]
    retirement_total: float
    cash: float
    investments: float
    liquid_wealth: float
    total_net_worth: float
    annual_expense: float
    annuity_payout: float
    withdrawn: float
    shortfall: float
    is_retired: bool


class WealthProjection(BaseModel):
    rows: List[WealthRow]
    has_shortfall: bool
    first_shortfall_age: Optional[int] = None
    total_shortfall: float = 0.0
