from __future__ import annotations

from wealthplan.core.replacement import compare_replacement, premium_free_years, years_remaining
from wealthplan.schemas.coverage import CoverageCategory
from wealthplan.schemas.replacement import ExistingPlan, PlanDescriptor

EXISTING = ExistingPlan(
    name="Old whole life",
    annual_premium=3000,
    payment_term_age=65,
    death=500000,
    critical_illness=200000,
    surrender_value=10000,
)
PROPOSED = PlanDescriptor(
    name="New term",
    annual_premium=2000,
    payment_term_age=60,
    death=500000,
    critical_illness=150000,
)


def test_years_remaining_never_negative():
    assert years_remaining(65, 40) == 25
    assert years_remaining(65, 70) == 0


def test_net_savings_include_surrender_value():
    comparison = compare_replacement(EXISTING, PROPOSED, 40)

    assert comparison.total_cost_existing == 75000
    assert comparison.total_cost_proposed == 40000
    assert comparison.annual_premium_savings == 1000
    assert comparison.premium_savings == 35000
    assert comparison.surrender_value == 10000
    assert comparison.net_savings == 45000
    assert comparison.premium_free_years == 5
    assert comparison.is_net_favorable


def test_coverage_reduction_is_flagged_even_when_cheaper():
    comparison = compare_replacement(EXISTING, PROPOSED, 40)

    deltas = {delta.category: delta for delta in comparison.coverage_deltas}
    assert deltas[CoverageCategory.CRITICAL_ILLNESS].delta == -50000
    assert deltas[CoverageCategory.CRITICAL_ILLNESS].is_reduction
    assert not deltas[CoverageCategory.DEATH].is_reduction
    assert comparison.reduced_categories == [CoverageCategory.CRITICAL_ILLNESS]
    assert comparison.has_coverage_reduction


def test_free_proposed_plan_has_no_premium_free_years():
    assert premium_free_years(10000, 0) == 0


def test_replacement_after_payment_terms_end():
    comparison = compare_replacement(EXISTING, PROPOSED, 70)
    assert comparison.premium_savings == 0
    assert comparison.net_savings == 10000
