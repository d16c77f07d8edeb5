from __future__ import annotations

from math import isclose

from wealthplan.core.accrual import (
    advance_year,
    eligible_contributions,
    fixed_allocation,
    no_allocation,
    simulate_accrual,
)
from wealthplan.schemas.accrual import SubAccountSpec


def special_account(cutoff=55):
    return [SubAccountSpec(name="sa", rate=0.025, contribution_cutoff_age=cutoff)]


def test_current_age_at_horizon_returns_input_unchanged():
    balances = {"oa": 12000.0, "sa": 8000.0}
    specs = [SubAccountSpec(name="oa", rate=0.025), SubAccountSpec(name="sa", rate=0.04)]

    series = simulate_accrual(balances, specs, fixed_allocation({"oa": 999.0}), 5000.0, 40, 40)

    assert len(series.points) == 1
    assert series.terminal.balances == balances
    assert series.terminal.age == 40


def test_current_age_past_horizon_also_degrades_to_single_point():
    series = simulate_accrual({"sa": 100.0}, special_account(), no_allocation, 0.0, 70, 65)
    assert [point.age for point in series.points] == [70]
    assert series.terminal.balances == {"sa": 100.0}


def test_contributions_stop_at_cutoff_and_compounding_continues():
    """
    Age 30 to 65 with $500/month into a 2.5% sub-account that stops taking
    contributions at 55: the last ten years are pure compounding.
    """
    series = simulate_accrual(
        {"sa": 50000.0}, special_account(55), fixed_allocation({"sa": 6000.0}), 0.0, 30, 65
    )

    assert len(series.points) == 36
    assert series.points[0].balances["sa"] == 50000.0

    growth = 1.025 ** 25
    at_55 = 50000.0 * growth + 6000.0 * (growth - 1) / 0.025
    at_65 = at_55 * 1.025 ** 10

    by_age = {point.age: point for point in series.points}
    assert isclose(by_age[55].balances["sa"], at_55, rel_tol=1e-6)
    assert isclose(series.terminal.balances["sa"], at_65, rel_tol=1e-6)

    for age in range(56, 66):
        assert by_age[age].contributions["sa"] == 0.0
        assert isclose(by_age[age].balances["sa"], by_age[age - 1].balances["sa"] * 1.025, rel_tol=1e-12)


def test_each_sub_account_uses_its_own_rate():
    specs = [SubAccountSpec(name="oa", rate=0.025), SubAccountSpec(name="sa", rate=0.04)]
    series = simulate_accrual({"oa": 1000.0, "sa": 1000.0}, specs, no_allocation, 0.0, 50, 52)

    assert isclose(series.terminal.balances["oa"], 1000.0 * 1.025 ** 2)
    assert isclose(series.terminal.balances["sa"], 1000.0 * 1.04 ** 2)
    assert isclose(series.terminal.total, 1000.0 * 1.025 ** 2 + 1000.0 * 1.04 ** 2)


def test_allocation_receives_income_and_age():
    seen = []

    def allocation(monthly_income, age):
        seen.append((monthly_income, age))
        return {"oa": monthly_income * 12 * 0.1}

    specs = [SubAccountSpec(name="oa", rate=0.0)]
    series = simulate_accrual({}, specs, allocation, 4000.0, 30, 33)

    assert seen == [(4000.0, 30), (4000.0, 31), (4000.0, 32)]
    assert isclose(series.terminal.balances["oa"], 3 * 4800.0)


def test_unknown_accounts_from_allocation_are_ignored():
    specs = [SubAccountSpec(name="oa", rate=0.0)]
    inflow = eligible_contributions(specs, fixed_allocation({"oa": 10.0, "xx": 99.0}), 1.0, 30)
    assert inflow == {"oa": 10.0}


def test_advance_year_does_not_mutate_input():
    balances = {"oa": 100.0}
    specs = [SubAccountSpec(name="oa", rate=0.1)]

    stepped = advance_year(balances, specs, {"oa": 5.0})

    assert balances == {"oa": 100.0}
    assert isclose(stepped["oa"], 115.0)


def test_allocation_past_cutoff_follows_redirect():
    specs = [
        SubAccountSpec(name="sa", rate=0.0, contribution_cutoff_age=55, redirect_after_cutoff="ra"),
        SubAccountSpec(name="ra", rate=0.0),
    ]
    allocation = fixed_allocation({"sa": 1000.0, "ra": 50.0})

    assert eligible_contributions(specs, allocation, 0.0, 54) == {"sa": 1000.0, "ra": 50.0}
    assert eligible_contributions(specs, allocation, 0.0, 55) == {"sa": 0.0, "ra": 1050.0}


def test_redirect_to_unknown_account_is_dropped():
    specs = [SubAccountSpec(name="sa", rate=0.0, contribution_cutoff_age=55, redirect_after_cutoff="xx")]
    assert eligible_contributions(specs, fixed_allocation({"sa": 1000.0}), 0.0, 60) == {"sa": 0.0}


def test_horizon_is_bounded_by_max_age():
    series = simulate_accrual({"sa": 1.0}, special_account(), no_allocation, 0.0, 70, 95, max_age=80)
    assert series.terminal.age == 80
