"""Is swapping an existing policy for a proposed one worth it?"""

from __future__ import annotations

import structlog

from wealthplan.schemas.coverage import CoverageCategory
from wealthplan.schemas.replacement import (
    CoverageDelta,
    ExistingPlan,
    PlanDescriptor,
    ReplacementComparison,
)

logger = structlog.get_logger(__name__)


def years_remaining(payment_term_age: int, current_age: int) -> int:
    return max(0, payment_term_age - current_age)


def premium_free_years(surrender_value: float, proposed_premium: float) -> float:
    """Years of the new premium the surrender value pays for; 0 for a free plan."""
    if proposed_premium <= 0:
        return 0.0
    return surrender_value / proposed_premium


def compare_replacement(
    existing: ExistingPlan,
    proposed: PlanDescriptor,
    current_age: int,
) -> ReplacementComparison:
    """
    Headline ``net_savings`` is the premium still owed on the existing plan,
    less what the proposed plan will cost, plus the surrender value released
    today. Both parts stay on the result for display, and every coverage
    category reports a signed delta so reductions are visible.
    """
    existing_years = years_remaining(existing.payment_term_age, current_age)
    proposed_years = years_remaining(proposed.payment_term_age, current_age)

    existing_cost = existing.annual_premium * existing_years
    proposed_cost = proposed.annual_premium * proposed_years
    premium_savings = existing_cost - proposed_cost
    net_savings = premium_savings + existing.surrender_value

    deltas = []
    for category in CoverageCategory:
        before = existing.coverage(category)
        after = proposed.coverage(category)
        deltas.append(
            CoverageDelta(category=category, existing=before, proposed=after, delta=after - before)
        )
    reduced = [delta.category for delta in deltas if delta.is_reduction]
    if reduced:
        logger.info(
            "replacement_reduces_coverage",
            categories=[category.value for category in reduced],
        )

    return ReplacementComparison(
        years_remaining_existing=existing_years,
        years_remaining_proposed=proposed_years,
        total_cost_existing=existing_cost,
        total_cost_proposed=proposed_cost,
        annual_premium_savings=existing.annual_premium - proposed.annual_premium,
        premium_savings=premium_savings,
        surrender_value=existing.surrender_value,
        net_savings=net_savings,
        premium_free_years=premium_free_years(existing.surrender_value, proposed.annual_premium),
        coverage_deltas=deltas,
        reduced_categories=reduced,
        is_net_favorable=net_savings > 0,
    )
