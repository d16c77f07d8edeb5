"""Existing-vs-proposed policy comparison contracts."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field

from wealthplan.schemas.coverage import CoverageCategory


class PlanDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    annual_premium: float = Field(default=0.0, ge=0)
    payment_term_age: int = Field(default=0, ge=0, le=120)
    death: float = 0.0
    disability: float = 0.0
    critical_illness: float = 0.0

    def coverage(self, category: CoverageCategory) -> float:
        return getattr(self, category.value)


class ExistingPlan(PlanDescriptor):
    surrender_value: float = Field(default=0.0, ge=0)


class CoverageDelta(BaseModel):
    category: CoverageCategory
    existing: float
    proposed: float
    # proposed - existing; negative is a coverage reduction
    delta: float

    @computed_field
    @property
    def is_reduction(self) -> bool:
        return self.delta < 0


class ReplacementComparison(BaseModel):
    years_remaining_existing: int
    years_remaining_proposed: int
    total_cost_existing: float
    total_cost_proposed: float
    annual_premium_savings: float
    # remaining-premium saving and the one-off surrender unlock, kept apart
    premium_savings: float
    surrender_value: float
    net_savings: float
    premium_free_years: float
    coverage_deltas: List[CoverageDelta]
    reduced_categories: List[CoverageCategory]
    is_net_favorable: bool

    @computed_field
    @property
    def has_coverage_reduction(self) -> bool:
        return bool(self.reduced_categories)
