"""Education funding for children: future costs, projected funds and milestones."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from wealthplan.core.ages import age_on
from wealthplan.core.compounding import future_value_annuity, future_value_lump_sum
from wealthplan.schemas.assumptions import EducationAssumptions
from wealthplan.schemas.common import Unavailable
from wealthplan.schemas.education import Child, ChildEducationPlan, MilestoneAge


def education_cost_total(
    current_age: int,
    university_start_age: int,
    settings: EducationAssumptions,
) -> float:
    """
    Inflation-adjusted cost of every school and university year still ahead.

    Each stage runs from its start age to its end age inclusive; years already
    behind the child are skipped, and the cost for a year ``n`` years from now
    is inflated ``n`` times.
    """
    stages = [
        (
            settings.school_start_age,
            settings.school_start_age + settings.school_duration - 1,
            settings.monthly_school_cost * 12,
        ),
        (
            university_start_age,
            university_start_age + settings.university_duration - 1,
            settings.university_cost_per_year,
        ),
    ]

    total = 0.0
    for start, end, yearly_cost in stages:
        if current_age > end:
            continue
        years_until_start = max(0, start - current_age)
        duration = end - max(start, current_age) + 1
        for year in range(duration):
            total += future_value_lump_sum(
                yearly_cost, settings.inflation_rate, years_until_start + year
            )
    return total


def plan_child_education(
    child: Child,
    settings: Optional[EducationAssumptions] = None,
    parent_birth_date: Optional[date] = None,
    as_of: Optional[date] = None,
) -> Union[ChildEducationPlan, Unavailable]:
    settings = settings or EducationAssumptions()
    as_of = as_of or date.today()

    current_age = age_on(child.birth_date, as_of)
    if current_age is None:
        return Unavailable(reason="child birth date required")

    uni_start = settings.university_start_for(child.gender)
    years_to_uni = max(0, uni_start - current_age)

    future_cost = future_value_lump_sum(
        settings.university_fund_target, settings.inflation_rate, years_to_uni
    )
    projected = future_value_lump_sum(
        child.existing_funds, settings.funding_rate, years_to_uni
    ) + future_value_annuity(child.monthly_contribution * 12, settings.funding_rate, years_to_uni)

    funding_ratio = min(100.0, projected / future_cost * 100) if future_cost > 0 else 0.0

    parent_age = age_on(parent_birth_date, as_of)
    milestones: List[MilestoneAge] = [
        MilestoneAge(
            label=milestone.label,
            child_age=milestone.age,
            parent_age=_parent_age_at(parent_age, milestone.age - current_age),
        )
        for milestone in settings.milestones
    ]
    milestones.append(
        MilestoneAge(
            label="University",
            child_age=uni_start,
            parent_age=_parent_age_at(parent_age, uni_start - current_age),
            is_major=True,
        )
    )

    return ChildEducationPlan(
        name=child.name,
        current_age=current_age,
        university_start_age=uni_start,
        years_to_university=years_to_uni,
        future_university_cost=future_cost,
        projected_funds=projected,
        shortfall=future_cost - projected,
        funding_ratio=funding_ratio,
        education_cost_total=education_cost_total(current_age, uni_start, settings),
        milestones=milestones,
    )


def _parent_age_at(parent_age: Optional[int], years_from_now: int) -> Optional[int]:
    if parent_age is None:
        return None
    return parent_age + years_from_now
