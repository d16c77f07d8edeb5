"""Protection coverage: aggregation, required thresholds and gap reporting."""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog

from wealthplan.core.ages import MAX_AGE, clamp_age
from wealthplan.schemas.assumptions import AssumptionSet, IncomeReplacementYears
from wealthplan.schemas.coverage import (
    CategoryGap,
    CoverageCategory,
    CoverageReport,
    CoverageTimeline,
    CoverageTotals,
    MortgageTerms,
    PolicyEntry,
    TimelinePoint,
)

logger = structlog.get_logger(__name__)

TIMELINE_END_AGE = 85


def monthly_take_home(take_home: float, gross_salary: float, take_home_ratio: float = 0.8) -> float:
    """Declared take-home pay, or ``take_home_ratio`` of gross when none is declared."""
    if take_home > 0:
        return take_home
    return gross_salary * take_home_ratio


def aggregate_coverage(ledger: Iterable[PolicyEntry]) -> CoverageTotals:
    totals = CoverageTotals()
    for policy in ledger:
        totals.death += policy.death
        totals.disability += policy.disability
        totals.ci_early += policy.ci_early
        totals.ci_late += policy.ci_late
        totals.cash_premium += policy.cash_premium
        totals.cpf_premium += policy.cpf_premium
    return totals


def required_coverage(
    monthly_income: float, replacement_years: IncomeReplacementYears
) -> dict:
    annual = monthly_income * 12
    return {
        CoverageCategory.DEATH: annual * replacement_years.death,
        CoverageCategory.DISABILITY: annual * replacement_years.disability,
        CoverageCategory.CRITICAL_ILLNESS: annual * replacement_years.critical_illness,
    }


def evaluate_coverage(
    ledger: Iterable[PolicyEntry],
    monthly_income: float,
    assumptions: Optional[AssumptionSet] = None,
) -> CoverageReport:
    """Compare summed coverage with income-replacement requirements, per category."""
    assumptions = assumptions or AssumptionSet()
    totals = aggregate_coverage(ledger)
    required = required_coverage(monthly_income, assumptions.income_replacement_years)

    categories: List[CategoryGap] = []
    for category in CoverageCategory:
        current = totals.for_category(category)
        target = required[category]
        categories.append(
            CategoryGap(
                category=category,
                current=current,
                required=target,
                is_met=current >= target,
                gap=target - current,
            )
        )

    unmet = [gap.category.value for gap in categories if not gap.is_met]
    if unmet:
        logger.debug("coverage_gaps_found", categories=unmet)

    return CoverageReport(monthly_income=monthly_income, totals=totals, categories=categories)


def coverage_timeline(
    ledger: Iterable[PolicyEntry],
    current_age: int,
    retirement_age: int,
    monthly_income: float,
    mortgage: Optional[MortgageTerms] = None,
    end_age: int = TIMELINE_END_AGE,
    max_age: int = MAX_AGE,
) -> CoverageTimeline:
    """
    Liabilities against coverage in force, age by age.

    Income liability is the take-home still to be earned before retirement;
    the mortgage is paid down linearly over its tenure. A policy counts while
    the age is at or below its expiry age.
    """
    policies = list(ledger)
    end_age = clamp_age(end_age, max_age)
    loan = mortgage.loan_amount if mortgage else 0.0
    tenure = mortgage.tenure_years if mortgage else 0

    points: List[TimelinePoint] = []
    first_uncovered: Optional[int] = None
    for age in range(current_age, max(end_age, current_age) + 1):
        years_from_now = age - current_age

        income_liability = (
            monthly_income * 12 * max(0, retirement_age - age) if age < retirement_age else 0.0
        )
        mortgage_liability = 0.0
        if tenure > 0 and years_from_now < tenure:
            mortgage_liability = max(0.0, loan * (1 - years_from_now / tenure))

        in_force = [policy for policy in policies if age <= policy.expiry_age]
        death = sum(policy.death for policy in in_force)
        ci = sum(policy.ci_early + policy.ci_late for policy in in_force)
        liability = income_liability + mortgage_liability
        gap = death - liability

        if gap < 0 and first_uncovered is None:
            first_uncovered = age
        points.append(
            TimelinePoint(
                age=age,
                income_liability=income_liability,
                mortgage_liability=mortgage_liability,
                liability=liability,
                death_coverage=death,
                ci_coverage=ci,
                gap=gap,
            )
        )

    return CoverageTimeline(points=points, first_uncovered_age=first_uncovered)
