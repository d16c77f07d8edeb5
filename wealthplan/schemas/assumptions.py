"""Named, overridable assumptions behind every number the engine produces."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class RateSet(BaseModel):
    """Annual growth rates as decimal fractions. ``0.0`` is a real rate, not "unset"."""

    model_config = ConfigDict(extra="forbid")

    cash: float = Field(default=0.005, ge=-1)
    cpf_oa: float = Field(default=0.025, ge=-1)
    cpf_sa: float = Field(default=0.04, ge=-1)
    cpf_ma: float = Field(default=0.04, ge=-1)
    cpf_ra: float = Field(default=0.04, ge=-1)
    investments: float = Field(default=0.05, ge=-1)
    inflation: float = Field(default=0.03, ge=-1)


class IncomeReplacementYears(BaseModel):
    """Years of annual take-home income each protection category should replace."""

    model_config = ConfigDict(extra="forbid")

    death: float = Field(default=10, ge=0)
    disability: float = Field(default=10, ge=0)
    critical_illness: float = Field(default=5, ge=0)


class Milestone(BaseModel):
    label: str
    age: int = Field(ge=0)


class EducationAssumptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    inflation_rate: float = Field(default=0.03, ge=-1)
    monthly_school_cost: float = Field(default=800.0, ge=0)
    school_start_age: int = Field(default=7, ge=0)
    school_duration: int = Field(default=10, ge=0)
    university_cost_per_year: float = Field(default=8750.0, ge=0)
    university_duration: int = Field(default=4, ge=0)
    university_fund_target: float = Field(default=40000.0, ge=0)
    funding_rate: float = Field(default=0.04, ge=-1)
    # male students enter after National Service
    university_start_age: Dict[str, int] = Field(
        default_factory=lambda: {"male": 21, "female": 19}
    )
    milestones: List[Milestone] = Field(
        default_factory=lambda: [
            Milestone(label="P1 Entry", age=7),
            Milestone(label="Sec 1", age=13),
        ]
    )

    def university_start_for(self, gender: str) -> int:
        """Start age for ``gender``; unknown genders use the earliest listed age."""
        if gender in self.university_start_age:
            return self.university_start_age[gender]
        return min(self.university_start_age.values(), default=19)


class AssumptionSet(BaseModel):
    """Every policy constant a report depends on, with documented defaults."""

    model_config = ConfigDict(extra="forbid")

    rates: RateSet = Field(default_factory=RateSet)
    income_replacement_years: IncomeReplacementYears = Field(
        default_factory=IncomeReplacementYears
    )
    take_home_ratio: float = Field(default=0.8, ge=0, le=1)
    retirement_expense_ratio: float = Field(default=0.7, ge=0)
    life_expectancy: int = Field(default=95, ge=1, le=120)
    cpf_wage_ceiling: float = Field(default=7400.0, ge=0)
    # MediSave Basic Healthcare Sum (2025) and its yearly growth until 65
    healthcare_sum: float = Field(default=75500.0, ge=0)
    healthcare_sum_growth: float = Field(default=0.04, ge=-1)
    withdrawal_order: List[str] = Field(
        default_factory=lambda: ["cash", "investments", "retirement"]
    )
    education: EducationAssumptions = Field(default_factory=EducationAssumptions)


__all__ = [
    "AssumptionSet",
    "EducationAssumptions",
    "IncomeReplacementYears",
    "Milestone",
    "RateSet",
]
