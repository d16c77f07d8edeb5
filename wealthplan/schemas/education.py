"""Children and their education funding outlook."""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Child(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    birth_date: Optional[date] = None
    gender: Literal["male", "female"] = "male"
    existing_funds: float = Field(default=0.0, ge=0)
    monthly_contribution: float = Field(default=0.0, ge=0)


class MilestoneAge(BaseModel):
    label: str
    child_age: int
    # None when the parent's birth date is unknown
    parent_age: Optional[int] = None
    is_major: bool = False


class ChildEducationPlan(BaseModel):
    name: str
    current_age: int
    university_start_age: int
    years_to_university: int
    future_university_cost: float
    projected_funds: float
    # signed; negative means the fund is ahead of the cost
    shortfall: float
    funding_ratio: float
    education_cost_total: float
    milestones: List[MilestoneAge]
