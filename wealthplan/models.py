"""Client snapshot records as they arrive from storage or the UI.

Everything is tolerant here: money fields accept free text ("$1,200"),
blank or junk text becomes the field default, and dates accept ISO strings.
``to_*`` methods turn a snapshot into fully typed engine inputs so the
calculators never deal with missing fields.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from wealthplan.core.accrual import fixed_allocation
from wealthplan.core.ages import age_on, parse_date
from wealthplan.core.coverage import monthly_take_home
from wealthplan.core.cpf import cpf_allocation_rule, cpf_sub_accounts, reverse_compute_cpf
from wealthplan.core.money import parse_money, to_amount
from wealthplan.core.projection import base_retirement_expense
from wealthplan.schemas.accrual import AllocationRule, SubAccountSpec
from wealthplan.schemas.assumptions import AssumptionSet, EducationAssumptions
from wealthplan.schemas.common import Unavailable
from wealthplan.schemas.coverage import MortgageTerms, PolicyEntry
from wealthplan.schemas.education import Child
from wealthplan.schemas.portfolio import ContributionSchedule, Frequency, Holding
from wealthplan.schemas.projection import (
    BalanceCap,
    LifeAnnuity,
    RetirementSumTransfer,
    WealthInputs,
)
from wealthplan.schemas.replacement import ExistingPlan, PlanDescriptor


class SnapshotError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def _optional_amount(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = parse_money(value, default=-1)
    return None if parsed < 0 else float(parsed)


def _whole_number(value: Any) -> Any:
    if isinstance(value, str):
        parsed = parse_money(value, default=-1)
        return int(parsed) if parsed >= 0 else None
    return value


def _frequency(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_").replace(" ", "_")
    return value


Money = Annotated[float, BeforeValidator(to_amount)]
OptionalMoney = Annotated[Optional[float], BeforeValidator(_optional_amount)]
OptionalAge = Annotated[Optional[int], BeforeValidator(_whole_number), Field(ge=0, le=120)]
DateText = Annotated[Optional[date], BeforeValidator(parse_date)]


def _validated(errors: ValidationError) -> SnapshotError:
    return SnapshotError(
        [f"{'.'.join(str(part) for part in err['loc']) or 'snapshot'}: {err['msg']}" for err in errors.errors()]
    )


class Profile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    dob: DateText = None
    gender: Literal["male", "female"] = "male"
    grossSalary: Money = 0.0
    takeHome: Money = 0.0
    retirementAge: OptionalAge = 65
    customRetirementExpense: Money = 0.0
    monthlyExpenses: Money = 0.0
    cashflowExpenses: Money = 0.0
    monthlySavings: Money = 0.0
    monthlyInvestment: Money = 0.0

    def age(self, as_of: Optional[date] = None, fallback: Optional[int] = None) -> Optional[int]:
        """Age from the birth date; an explicitly supplied age is only used without one."""
        computed = age_on(self.dob, as_of)
        return computed if computed is not None else fallback

    def gross_salary(self, age: int, wage_ceiling: float = 7400.0) -> float:
        """Declared gross pay, or an estimate worked back from take-home pay."""
        if self.grossSalary > 0:
            return self.grossSalary
        if self.takeHome > 0:
            return reverse_compute_cpf(self.takeHome, age, wage_ceiling)
        return 0.0

    def take_home(self, assumptions: AssumptionSet) -> float:
        return monthly_take_home(self.takeHome, self.grossSalary, assumptions.take_home_ratio)

    def retirement_expense(self, assumptions: AssumptionSet) -> float:
        return base_retirement_expense(
            self.customRetirementExpense,
            self.monthlyExpenses,
            self.cashflowExpenses,
            self.take_home(assumptions),
            assumptions.retirement_expense_ratio,
        )


class CpfBalances(BaseModel):
    model_config = ConfigDict(extra="forbid")

    oa: Money = 0.0
    sa: Money = 0.0
    ma: Money = 0.0
    ra: Money = 0.0


class WealthRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile: Profile = Field(default_factory=Profile)
    currentAge: OptionalAge = None
    horizonAge: OptionalAge = None
    cpf: CpfBalances = Field(default_factory=CpfBalances)
    cash: Money = 0.0
    investments: Money = 0.0
    saCutoffAge: OptionalAge = 55
    includeCpfEvents: bool = True
    assumptions: AssumptionSet = Field(default_factory=AssumptionSet)

    def to_inputs(self, as_of: Optional[date] = None) -> Union[WealthInputs, Unavailable]:
        age = self.profile.age(as_of, fallback=self.currentAge)
        if age is None:
            return Unavailable(reason="birth date required for a wealth projection")

        rates = self.assumptions.rates
        retirement_age = self.profile.retirementAge if self.profile.retirementAge is not None else 65
        try:
            return WealthInputs(
                current_age=age,
                retirement_age=retirement_age,
                horizon_age=self.horizonAge if self.horizonAge is not None else self.assumptions.life_expectancy,
                retirement_accounts=cpf_sub_accounts(rates, self.saCutoffAge),
                retirement_balances=self.cpf.model_dump(),
                cash=self.cash,
                investments=self.investments,
                monthly_income=self.profile.gross_salary(age, self.assumptions.cpf_wage_ceiling),
                monthly_savings=self.profile.monthlySavings,
                monthly_investment=self.profile.monthlyInvestment,
                monthly_expenses_today=self.profile.retirement_expense(self.assumptions),
                rates=rates,
                withdrawal_order=self.assumptions.withdrawal_order,
                transfer=RetirementSumTransfer() if self.includeCpfEvents else None,
                annuity=LifeAnnuity() if self.includeCpfEvents else None,
                balance_cap=self._healthcare_cap() if self.includeCpfEvents else None,
            )
        except ValidationError as exc:
            raise _validated(exc) from exc

    def _healthcare_cap(self) -> BalanceCap:
        return BalanceCap(
            limit=self.assumptions.healthcare_sum,
            limit_growth=self.assumptions.healthcare_sum_growth,
        )

    def allocation(self) -> AllocationRule:
        return cpf_allocation_rule(self.assumptions.cpf_wage_ceiling)


class SubAccount(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    balance: Money = 0.0
    rate: float = Field(ge=-1)
    contributionCutoffAge: OptionalAge = None
    withdrawable: bool = True
    redirectAfterCutoff: Optional[str] = None


class AccrualRequest(BaseModel):
    """Either fixed ``annualContributions`` per account, or CPF rules on ``monthlyIncome``."""

    model_config = ConfigDict(extra="forbid")

    currentAge: int = Field(ge=0, le=120)
    horizonAge: int = Field(ge=0, le=120)
    accounts: List[SubAccount]
    monthlyIncome: Money = 0.0
    annualContributions: Optional[Dict[str, Money]] = None
    wageCeiling: Money = 7400.0

    def specs(self) -> List[SubAccountSpec]:
        names = [account.name for account in self.accounts]
        if len(names) != len(set(names)):
            raise SnapshotError(["account names must be unique"])
        unknown = sorted(
            {account.redirectAfterCutoff for account in self.accounts if account.redirectAfterCutoff}
            - set(names)
        )
        if unknown:
            raise SnapshotError([f"unknown redirect accounts: {', '.join(unknown)}"])
        return [
            SubAccountSpec(
                name=account.name,
                rate=account.rate,
                contribution_cutoff_age=account.contributionCutoffAge,
                withdrawable=account.withdrawable,
                redirect_after_cutoff=account.redirectAfterCutoff,
            )
            for account in self.accounts
        ]

    def balances(self) -> Dict[str, float]:
        return {account.name: account.balance for account in self.accounts}

    def allocation(self) -> AllocationRule:
        if self.annualContributions is not None:
            return fixed_allocation(self.annualContributions)
        return cpf_allocation_rule(self.wageCeiling)


class PortfolioItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    plan: str = ""
    insurer: str = ""
    premium: Money = 0.0
    frequency: Annotated[Frequency, BeforeValidator(_frequency)] = Frequency.MONTHLY
    inceptionDate: DateText = None
    currentValue: Money = 0.0
    totalInvested: OptionalMoney = None

    def to_holding(self) -> Holding:
        return Holding(
            name=self.plan,
            provider=self.insurer,
            schedule=ContributionSchedule(
                amount=max(self.premium, 0.0),
                frequency=self.frequency,
                start_date=self.inceptionDate,
            ),
            current_value=self.currentValue,
            invested_override=self.totalInvested,
        )


class PortfolioRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    holdings: List[PortfolioItem] = Field(default_factory=list)


class InsurancePolicy(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    type: str = "term"
    deathCoverage: Money = 0.0
    tpdCoverage: Money = 0.0
    earlyCiCoverage: Money = 0.0
    lateCiCoverage: Money = 0.0
    cashPremium: Money = 0.0
    cpfPremium: Money = 0.0
    expiryAge: OptionalAge = 99

    def to_entry(self) -> PolicyEntry:
        return PolicyEntry(
            name=self.name,
            policy_type=self.type,
            death=self.deathCoverage,
            disability=self.tpdCoverage,
            ci_early=self.earlyCiCoverage,
            ci_late=self.lateCiCoverage,
            cash_premium=self.cashPremium,
            cpf_premium=self.cpfPremium,
            expiry_age=self.expiryAge if self.expiryAge is not None else 99,
        )


class Mortgage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    propertyPrice: Money = 0.0
    downPaymentPercent: Money = 0.0
    loanTenure: OptionalAge = 25

    def to_terms(self) -> MortgageTerms:
        return MortgageTerms(
            property_price=max(self.propertyPrice, 0.0),
            down_payment_percent=min(max(self.downPaymentPercent, 0.0), 100.0),
            tenure_years=self.loanTenure if self.loanTenure is not None else 25,
        )


class CoverageRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile: Profile = Field(default_factory=Profile)
    currentAge: OptionalAge = None
    policies: List[InsurancePolicy] = Field(default_factory=list)
    mortgage: Optional[Mortgage] = None
    assumptions: AssumptionSet = Field(default_factory=AssumptionSet)

    def ledger(self) -> List[PolicyEntry]:
        return [policy.to_entry() for policy in self.policies]


class ReplacementPlan(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    premium: Money = 0.0
    paymentTermAge: OptionalAge = 0
    deathCov: Money = 0.0
    tpdCov: Money = 0.0
    ciCov: Money = 0.0
    surrenderValue: Money = 0.0

    @field_validator("premium", "surrenderValue")
    @classmethod
    def not_negative(cls, value: float) -> float:
        return max(value, 0.0)

    def _fields(self) -> dict:
        return dict(
            name=self.name,
            annual_premium=self.premium,
            payment_term_age=self.paymentTermAge or 0,
            death=self.deathCov,
            disability=self.tpdCov,
            critical_illness=self.ciCov,
        )

    def to_existing(self) -> ExistingPlan:
        return ExistingPlan(surrender_value=self.surrenderValue, **self._fields())

    def to_proposed(self) -> PlanDescriptor:
        return PlanDescriptor(**self._fields())


class ReplacementRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile: Profile = Field(default_factory=Profile)
    currentAge: OptionalAge = None
    oldPlan: ReplacementPlan
    newPlan: ReplacementPlan


class ChildRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    dobISO: DateText = None
    gender: Literal["male", "female"] = "male"
    existingFunds: Money = 0.0
    monthlyContribution: Money = 0.0

    def to_child(self) -> Child:
        return Child(
            name=self.name,
            birth_date=self.dobISO,
            gender=self.gender,
            existing_funds=max(self.existingFunds, 0.0),
            monthly_contribution=max(self.monthlyContribution, 0.0),
        )


class EducationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    parentDob: DateText = None
    children: List[ChildRecord] = Field(default_factory=list)
    settings: EducationAssumptions = Field(default_factory=EducationAssumptions)


class CpfRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    grossSalary: Money = 0.0
    takeHome: Money = 0.0
    dob: DateText = None
    age: OptionalAge = None
    wageCeiling: Money = 7400.0
