"""Singapore CPF contribution rules (2025 tables) and the default segmented account."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from wealthplan.core.money import to_amount
from wealthplan.schemas.accrual import AllocationRule, SubAccountSpec
from wealthplan.schemas.assumptions import RateSet
from wealthplan.schemas.cpf import CpfContribution

CPF_WAGE_CEILING = 7400.0
OA, SA, MA, RA = "oa", "sa", "ma", "ra"


@dataclass(frozen=True)
class Bracket:
    """Applies to ages up to and including ``max_age`` (None = no upper bound)."""

    max_age: Optional[int]
    values: Tuple[float, ...]


# (employee, employer) share of the CPF-able wage
CONTRIBUTION_RATES: List[Bracket] = [
    Bracket(55, (0.20, 0.17)),
    Bracket(60, (0.17, 0.155)),
    Bracket(65, (0.115, 0.12)),
    Bracket(70, (0.075, 0.09)),
    Bracket(None, (0.05, 0.075)),
]

# (oa, sa, ma) share of the total contribution
ALLOCATION_SHARES: List[Bracket] = [
    Bracket(35, (0.6216, 0.1622, 0.2162)),
    Bracket(45, (0.5676, 0.1892, 0.2432)),
    Bracket(50, (0.5135, 0.2162, 0.2703)),
    Bracket(55, (0.4324, 0.2703, 0.2973)),
    Bracket(60, (0.2973, 0.3514, 0.3514)),
    Bracket(65, (0.1362, 0.3915, 0.4723)),
    Bracket(70, (0.1212, 0.3030, 0.5758)),
    Bracket(None, (0.08, 0.265, 0.655)),
]


def active_bracket(brackets: Sequence[Bracket], age: int) -> Tuple[float, ...]:
    for bracket in brackets:
        if bracket.max_age is None or age <= bracket.max_age:
            return bracket.values
    return brackets[-1].values


def compute_cpf(gross_salary, age: int, wage_ceiling: float = CPF_WAGE_CEILING) -> CpfContribution:
    """Monthly CPF contribution for ``gross_salary`` at ``age``.

    Only the salary up to ``wage_ceiling`` attracts CPF; take-home is the full
    gross less the employee share.
    """
    gross = max(0.0, to_amount(gross_salary, 0))
    cpfable = min(gross, wage_ceiling)

    employee_rate, employer_rate = active_bracket(CONTRIBUTION_RATES, age)
    oa_share, sa_share, ma_share = active_bracket(ALLOCATION_SHARES, age)

    employee = cpfable * employee_rate
    employer = cpfable * employer_rate
    total = employee + employer

    return CpfContribution(
        employee=employee,
        employer=employer,
        total=total,
        oa=total * oa_share,
        sa=total * sa_share,
        ma=total * ma_share,
        take_home=gross - employee,
        cpfable_salary=cpfable,
        excess_salary=max(0.0, gross - wage_ceiling),
    )


def reverse_compute_cpf(take_home, age: int, wage_ceiling: float = CPF_WAGE_CEILING) -> float:
    """Estimate the monthly gross salary behind a take-home figure.

    Below the ceiling take-home is a fixed fraction of gross. Above it the
    employee share is capped, so it is added back as a flat amount.
    """
    net = max(0.0, to_amount(take_home, 0))
    employee_rate, _ = active_bracket(CONTRIBUTION_RATES, age)

    if net <= wage_ceiling * (1 - employee_rate):
        return net / (1 - employee_rate)
    return net + wage_ceiling * employee_rate


def cpf_allocation_rule(wage_ceiling: float = CPF_WAGE_CEILING) -> AllocationRule:
    """AllocationRule paying twelve months of CPF into OA, SA and MA."""

    def rule(monthly_income: float, age: int) -> Mapping[str, float]:
        cpf = compute_cpf(monthly_income, age, wage_ceiling)
        return {OA: cpf.oa * 12, SA: cpf.sa * 12, MA: cpf.ma * 12}

    return rule


def cpf_sub_accounts(rates: RateSet, sa_cutoff_age: Optional[int] = None) -> List[SubAccountSpec]:
    """OA/SA/MA/RA with rates from ``rates``. Only OA and SA fund retirement spending.

    Once SA closes at ``sa_cutoff_age`` its share of each contribution goes to RA.
    """
    return [
        SubAccountSpec(name=OA, rate=rates.cpf_oa),
        SubAccountSpec(
            name=SA,
            rate=rates.cpf_sa,
            contribution_cutoff_age=sa_cutoff_age,
            redirect_after_cutoff=RA,
        ),
        SubAccountSpec(name=MA, rate=rates.cpf_ma, withdrawable=False),
        SubAccountSpec(name=RA, rate=rates.cpf_ra, withdrawable=False),
    ]
