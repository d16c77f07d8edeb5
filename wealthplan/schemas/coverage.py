"""Insurance ledger entries and coverage gap results."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class CoverageCategory(str, Enum):
    DEATH = "death"
    DISABILITY = "disability"
    CRITICAL_ILLNESS = "critical_illness"


class PolicyEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    policy_type: str = "term"
    death: float = 0.0
    disability: float = 0.0
    ci_early: float = 0.0
    ci_late: float = 0.0
    cash_premium: float = 0.0
    cpf_premium: float = 0.0
    expiry_age: int = Field(default=99, ge=0, le=120)


class CoverageTotals(BaseModel):
    death: float = 0.0
    disability: float = 0.0
    ci_early: float = 0.0
    ci_late: float = 0.0
    cash_premium: float = 0.0
    cpf_premium: float = 0.0

    @computed_field
    @property
    def critical_illness(self) -> float:
        return self.ci_early + self.ci_late

    def for_category(self, category: CoverageCategory) -> float:
        if category == CoverageCategory.CRITICAL_ILLNESS:
            return self.critical_illness
        return getattr(self, category.value)


class CategoryGap(BaseModel):
    """``gap`` is signed: negative means coverage exceeds the requirement."""

    category: CoverageCategory
    current: float
    required: float
    is_met: bool
    gap: float

    @computed_field
    @property
    def shortfall(self) -> float:
        return max(0.0, self.gap)


class CoverageReport(BaseModel):
    monthly_income: float
    totals: CoverageTotals
    categories: List[CategoryGap]

    def category(self, category: CoverageCategory) -> CategoryGap:
        return next(gap for gap in self.categories if gap.category == category)


class MortgageTerms(BaseModel):
    model_config = ConfigDict(extra="forbid")

    property_price: float = Field(default=0.0, ge=0)
    down_payment_percent: float = Field(default=0.0, ge=0, le=100)
    tenure_years: int = Field(default=25, ge=0)

    @property
    def loan_amount(self) -> float:
        return self.property_price * (1 - self.down_payment_percent / 100)


class TimelinePoint(BaseModel):
    age: int
    income_liability: float
    mortgage_liability: float
    liability: float
    death_coverage: float
    ci_coverage: float
    # death coverage minus liability; negative is uncovered
    gap: float


class CoverageTimeline(BaseModel):
    points: List[TimelinePoint]
    first_uncovered_age: Optional[int] = None
