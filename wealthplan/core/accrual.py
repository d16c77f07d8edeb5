"""Year-by-year accrual of a segmented retirement account."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

import structlog

from wealthplan.core.ages import MAX_AGE, clamp_age
from wealthplan.schemas.accrual import (
    AccrualPoint,
    AccrualSeries,
    AllocationRule,
    SubAccountSpec,
)

logger = structlog.get_logger(__name__)


def fixed_allocation(annual_amounts: Mapping[str, float]) -> AllocationRule:
    """Allocation that pays the same annual amount per sub-account at every age."""
    amounts = dict(annual_amounts)

    def rule(monthly_income: float, age: int) -> Mapping[str, float]:
        return amounts

    return rule


def no_allocation(monthly_income: float, age: int) -> Mapping[str, float]:
    return {}


def eligible_contributions(
    specs: Sequence[SubAccountSpec],
    allocation: AllocationRule,
    monthly_income: float,
    age: int,
) -> Dict[str, float]:
    """Annual inflow per sub-account for ``age``, honouring contribution cutoffs.

    A sub-account past its cutoff passes its allocation on to its
    ``redirect_after_cutoff`` target.
    """
    proposed = allocation(monthly_income, age)
    known = {spec.name for spec in specs}
    unknown = sorted(set(proposed) - known)
    if unknown:
        logger.debug("allocation_ignored_accounts", accounts=unknown, age=age)

    contributions: Dict[str, float] = {spec.name: 0.0 for spec in specs}
    for spec in specs:
        amount = float(proposed.get(spec.name, 0.0))
        if spec.accepts_contributions(age):
            contributions[spec.name] += amount
        elif spec.redirect_after_cutoff in known:
            contributions[spec.redirect_after_cutoff] += amount
        elif amount:
            logger.debug("allocation_dropped_after_cutoff", account=spec.name, amount=amount, age=age)
    return contributions


def advance_year(
    balances: Mapping[str, float],
    specs: Sequence[SubAccountSpec],
    contributions: Mapping[str, float],
) -> Dict[str, float]:
    """Return next year's balances: grow each balance at its rate, then add its inflow.

    ``balances`` is left untouched.
    """
    return {
        spec.name: balances.get(spec.name, 0.0) * (1.0 + spec.rate)
        + contributions.get(spec.name, 0.0)
        for spec in specs
    }


def simulate_accrual(
    balances: Mapping[str, float],
    specs: Sequence[SubAccountSpec],
    allocation: AllocationRule,
    monthly_income: float,
    current_age: int,
    horizon_age: int,
    max_age: int = MAX_AGE,
) -> AccrualSeries:
    """
    Step the account from ``current_age`` to ``horizon_age`` one year at a time.

    The first point is the input snapshot at ``current_age``; the point for
    age ``a + 1`` is the result of growing the balances at age ``a`` and adding
    the contributions eligible at age ``a``. When ``current_age`` is already at
    or past the horizon the series is that single snapshot. The horizon never
    goes past ``max_age``.
    """
    horizon = clamp_age(horizon_age, max_age)
    if horizon != horizon_age:
        logger.info("accrual_horizon_clamped", requested=horizon_age, horizon=horizon)

    state = {spec.name: float(balances.get(spec.name, 0.0)) for spec in specs}
    points: List[AccrualPoint] = [
        AccrualPoint(
            age=current_age,
            balances=dict(state),
            contributions={spec.name: 0.0 for spec in specs},
            total=sum(state.values()),
        )
    ]

    for age in range(current_age, horizon):
        inflow = eligible_contributions(specs, allocation, monthly_income, age)
        state = advance_year(state, specs, inflow)
        points.append(
            AccrualPoint(
                age=age + 1,
                balances=dict(state),
                contributions=inflow,
                total=sum(state.values()),
            )
        )

    return AccrualSeries(points=points)
