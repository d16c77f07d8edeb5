from __future__ import annotations

from math import isclose

from wealthplan.core.accrual import eligible_contributions, simulate_accrual
from wealthplan.core.cpf import (
    compute_cpf,
    cpf_allocation_rule,
    cpf_sub_accounts,
    reverse_compute_cpf,
)
from wealthplan.schemas.assumptions import RateSet


def test_contribution_below_wage_ceiling():
    cpf = compute_cpf(5000, 30)

    assert isclose(cpf.employee, 1000.0)
    assert isclose(cpf.employer, 850.0)
    assert isclose(cpf.total, 1850.0)
    assert isclose(cpf.oa + cpf.sa + cpf.ma, cpf.total, rel_tol=1e-3)
    assert isclose(cpf.take_home, 4000.0)
    assert cpf.excess_salary == 0.0


def test_salary_above_ceiling_only_contributes_on_capped_part():
    cpf = compute_cpf("$10,000", 30)

    assert cpf.cpfable_salary == 7400.0
    assert cpf.excess_salary == 2600.0
    assert isclose(cpf.employee, 1480.0)
    assert isclose(cpf.take_home, 8520.0)


def test_rates_step_down_after_55():
    at_55 = compute_cpf(4000, 55)
    at_56 = compute_cpf(4000, 56)

    assert isclose(at_55.employee, 800.0)
    assert isclose(at_56.employee, 680.0)
    assert at_56.total < at_55.total


def test_custom_ceiling():
    assert compute_cpf(8000, 30, wage_ceiling=8000).cpfable_salary == 8000.0


def test_junk_salary_is_zero():
    cpf = compute_cpf("n/a", 30)
    assert cpf.total == 0.0 and cpf.take_home == 0.0


def test_allocation_rule_is_annual():
    monthly = compute_cpf(5000, 40)
    annual = cpf_allocation_rule()(5000, 40)

    assert isclose(annual["oa"], monthly.oa * 12)
    assert isclose(annual["sa"], monthly.sa * 12)
    assert isclose(annual["ma"], monthly.ma * 12)


def test_cpf_rules_drive_the_accrual_engine():
    specs = cpf_sub_accounts(RateSet(), sa_cutoff_age=55)
    series = simulate_accrual({}, specs, cpf_allocation_rule(), 5000, 54, 56)

    by_age = {point.age: point for point in series.points}
    assert by_age[55].contributions["sa"] > 0
    assert by_age[56].contributions["sa"] == 0.0
    assert by_age[56].contributions["oa"] > 0
    assert by_age[56].contributions["ra"] > 0


def test_special_account_share_goes_to_retirement_account_after_closure():
    specs = cpf_sub_accounts(RateSet(), sa_cutoff_age=55)
    paid = cpf_allocation_rule()(5000.0, 56)

    credited = eligible_contributions(specs, cpf_allocation_rule(), 5000.0, 56)

    assert credited["sa"] == 0.0
    assert isclose(credited["ra"], paid["sa"])
    assert isclose(sum(credited.values()), sum(paid.values()))
    assert isclose(sum(credited.values()), compute_cpf(5000.0, 56).total * 12, rel_tol=1e-3)


def test_reverse_compute_below_ceiling():
    assert isclose(reverse_compute_cpf(4000, 30), 5000.0)
    assert isclose(reverse_compute_cpf(compute_cpf(3000, 58).take_home, 58), 3000.0)


def test_reverse_compute_above_ceiling_adds_capped_employee_share():
    assert isclose(reverse_compute_cpf("8,520", 30), 10000.0)
    assert isclose(reverse_compute_cpf(compute_cpf(12000, 30).take_home, 30), 12000.0)


def test_reverse_compute_at_the_threshold():
    threshold = 7400 * (1 - 0.20)
    assert isclose(reverse_compute_cpf(threshold, 30), 7400.0)
    assert reverse_compute_cpf("n/a", 30) == 0.0
