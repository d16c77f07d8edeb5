from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import structlog

from wealthplan.core.accrual import advance_year, eligible_contributions, no_allocation
from wealthplan.core.ages import MAX_AGE, clamp_age
from wealthplan.core.compounding import future_value_lump_sum
from wealthplan.schemas.accrual import AllocationRule, SubAccountSpec
from wealthplan.schemas.projection import (
    CASH,
    INVESTMENTS,
    RETIREMENT,
    BalanceCap,
    LifeAnnuity,
    RetirementSumTransfer,
    WealthInputs,
    WealthProjection,
    WealthRow,
)

logger = structlog.get_logger(__name__)


def base_retirement_expense(
    custom_expense: float,
    total_monthly_expenses: float,
    cashflow_expenses: float,
    take_home: float,
    expense_ratio: float = 0.7,
) -> float:
    """
    Monthly spending to carry into retirement, first non-zero source wins:
    the client's own figure, today's itemised expenses, then ``expense_ratio``
    of cashflow expenses or of take-home pay.
    """
    if custom_expense > 0:
        return custom_expense
    if total_monthly_expenses > 0:
        return total_monthly_expenses
    if cashflow_expenses > 0:
        return cashflow_expenses * expense_ratio
    if take_home > 0:
        return take_home * expense_ratio
    return 0.0


def resolve_horizon(inputs: WealthInputs, max_age: int = MAX_AGE) -> int:
    """Projection end age: at least retirement age, never past ``max_age``."""
    horizon = clamp_age(max(inputs.horizon_age, inputs.retirement_age), max_age)
    if horizon != inputs.horizon_age:
        logger.debug(
            "projection_horizon_adjusted",
            requested=inputs.horizon_age,
            horizon=horizon,
        )
    return horizon


def apply_transfer(
    balances: Dict[str, float],
    rule: RetirementSumTransfer,
    current_age: int,
) -> Dict[str, float]:
    """
    Fill ``rule.target`` up to the grown required sum, draining sources in
    order, then empty ``rule.closed_accounts`` into ``rule.closed_into``.
    """
    required = future_value_lump_sum(
        rule.required_sum, rule.sum_growth, rule.age - current_age
    )
    moved = dict(balances)
    transferred = 0.0
    for source in rule.sources:
        if transferred >= required:
            break
        take = min(max(moved.get(source, 0.0), 0.0), required - transferred)
        moved[source] = moved.get(source, 0.0) - take
        transferred += take
    moved[rule.target] = moved.get(rule.target, 0.0) + transferred

    if rule.closed_into:
        for closed in rule.closed_accounts:
            if closed == rule.closed_into:
                continue
            remainder = moved.get(closed, 0.0)
            moved[closed] = 0.0
            moved[rule.closed_into] = moved.get(rule.closed_into, 0.0) + remainder
    logger.debug("retirement_sum_transferred", required=required, transferred=transferred)
    return moved


def apply_balance_cap(
    balances: Dict[str, float],
    cap: BalanceCap,
    age: int,
    current_age: int,
) -> Dict[str, float]:
    """Trim ``cap.account`` to its limit for ``age`` and move the excess on."""
    years_of_growth = max(0, min(age, cap.limit_fixed_from_age) - current_age)
    limit = future_value_lump_sum(cap.limit, cap.limit_growth, years_of_growth)

    capped = dict(balances)
    excess = capped.get(cap.account, 0.0) - limit
    if excess <= 0:
        return capped

    target = cap.overflow_to if age < cap.switch_age else cap.overflow_to_after
    capped[cap.account] = limit
    capped[target] = capped.get(target, 0.0) + excess
    logger.debug("balance_cap_overflow", account=cap.account, target=target, excess=excess, age=age)
    return capped


def annuitise(balances: Dict[str, float], rule: LifeAnnuity) -> Tuple[Dict[str, float], float]:
    """Convert the source balances into an annual payout; the sources are emptied."""
    converted = dict(balances)
    premium = 0.0
    for source in rule.sources:
        premium += max(converted.get(source, 0.0), 0.0)
        converted[source] = 0.0
    return converted, premium * rule.monthly_payout_per_dollar * 12


def expand_withdrawal_order(
    order: List[str], accounts: List[SubAccountSpec]
) -> List[str]:
    """Replace the ``retirement`` placeholder by withdrawable sub-accounts in declaration order."""
    pots: List[str] = []
    for pot in order:
        if pot == RETIREMENT:
            pots.extend(spec.name for spec in accounts if spec.withdrawable)
        else:
            pots.append(pot)

    seen = set()
    return [pot for pot in pots if not (pot in seen or seen.add(pot))]


def draw_down(pots: Dict[str, float], order: List[str], need: float) -> Tuple[Dict[str, float], float]:
    """Take ``need`` from ``pots`` in ``order``; returns new pots and the unfunded remainder."""
    remaining = need
    drawn = dict(pots)
    for pot in order:
        if remaining <= 0:
            break
        available = max(drawn.get(pot, 0.0), 0.0)
        take = min(available, remaining)
        drawn[pot] = drawn.get(pot, 0.0) - take
        remaining -= take
    return drawn, max(remaining, 0.0)


def project_wealth(
    inputs: WealthInputs,
    allocation: AllocationRule,
    max_age: int = MAX_AGE,
) -> WealthProjection:
    """
    Age-indexed projection of retirement accounts, cash and investments.

    Order of operations for each age from current age to the horizon:
      1) Retirement accounts grow at their own rates, then receive the
         allocation's eligible contributions (none once retired). A
         ``balance_cap`` then moves any excess over its limit to its
         overflow account.
      2) Cash and investments grow, then receive twelve months of savings
         (cash gets savings not already invested). Inflows stop at retirement.
      3) Events: the retirement-sum transfer and the annuity purchase fire
         in the year their age is reached.
      4) From retirement age, the inflated annual expense is met by the
         annuity payout, then cash, investments and withdrawable retirement
         accounts in ``withdrawal_order``. What cannot be funded is recorded
         as ``shortfall``; balances never go below zero.

    If the current age is already at or past the horizon, the result is a
    single row holding the input balances with no growth applied. The
    horizon never goes past ``max_age``.
    """
    horizon = resolve_horizon(inputs, max_age)
    accounts = inputs.retirement_accounts
    rates = inputs.rates
    order = expand_withdrawal_order(inputs.withdrawal_order, accounts)

    retirement = {spec.name: float(inputs.retirement_balances.get(spec.name, 0.0)) for spec in accounts}
    cash = float(inputs.cash)
    investments = float(inputs.investments)

    if inputs.current_age >= horizon:
        return WealthProjection(
            rows=[
                _row(
                    inputs.current_age,
                    0,
                    accounts,
                    retirement,
                    cash,
                    investments,
                    annual_expense=inputs.monthly_expenses_today * 12,
                    annuity_payout=0.0,
                    withdrawn=0.0,
                    shortfall=0.0,
                    is_retired=inputs.current_age >= inputs.retirement_age,
                )
            ],
            has_shortfall=False,
        )

    annual_cash_saving = max(0.0, inputs.monthly_savings - inputs.monthly_investment) * 12
    annual_investment = inputs.monthly_investment * 12
    annuity_payout = 0.0

    rows: List[WealthRow] = []
    first_shortfall_age: Optional[int] = None
    total_shortfall = 0.0

    for year_index, age in enumerate(range(inputs.current_age, horizon + 1)):
        retired = age >= inputs.retirement_age

        # ---------- Retirement accounts ----------
        rule = no_allocation if retired else allocation
        inflow = eligible_contributions(accounts, rule, inputs.monthly_income, age)
        retirement = advance_year(retirement, accounts, inflow)
        if inputs.balance_cap:
            retirement = apply_balance_cap(
                retirement, inputs.balance_cap, age, inputs.current_age
            )

        # ---------- Cash & investments ----------
        cash *= 1 + rates.cash
        investments *= 1 + rates.investments
        if not retired:
            cash += annual_cash_saving
            investments += annual_investment

        # ---------- Events ----------
        if inputs.transfer and age == inputs.transfer.age:
            retirement = apply_transfer(retirement, inputs.transfer, inputs.current_age)
        if inputs.annuity and age == inputs.annuity.payout_age:
            retirement, annuity_payout = annuitise(retirement, inputs.annuity)
            logger.debug("annuity_started", age=age, annual_payout=annuity_payout)

        # ---------- Spending ----------
        annual_expense = future_value_lump_sum(
            inputs.monthly_expenses_today * 12, rates.inflation, age - inputs.current_age
        )
        withdrawn = 0.0
        shortfall = 0.0
        if retired:
            from_annuity = min(annuity_payout, annual_expense)
            cash += annuity_payout - from_annuity
            need = annual_expense - from_annuity

            pots = {CASH: cash, INVESTMENTS: investments, **retirement}
            pots, shortfall = draw_down(pots, order, need)
            cash, investments = pots.pop(CASH), pots.pop(INVESTMENTS)
            retirement = {spec.name: pots[spec.name] for spec in accounts}
            withdrawn = need - shortfall
        else:
            cash += annuity_payout

        if shortfall > 0:
            total_shortfall += shortfall
            if first_shortfall_age is None:
                first_shortfall_age = age
                logger.info("projection_shortfall", age=age, shortfall=shortfall)

        rows.append(
            _row(
                age,
                year_index,
                accounts,
                retirement,
                cash,
                investments,
                annual_expense=annual_expense,
                annuity_payout=annuity_payout,
                withdrawn=withdrawn,
                shortfall=shortfall,
                is_retired=retired,
            )
        )

    return WealthProjection(
        rows=rows,
        has_shortfall=first_shortfall_age is not None,
        first_shortfall_age=first_shortfall_age,
        total_shortfall=total_shortfall,
    )


def _row(
    age: int,
    year_index: int,
    accounts: List[SubAccountSpec],
    retirement: Dict[str, float],
    cash: float,
    investments: float,
    **flows,
) -> WealthRow:
    retirement_total = sum(retirement.values())
    withdrawable = sum(retirement[spec.name] for spec in accounts if spec.withdrawable)
    return WealthRow(
        age=age,
        year_index=year_index,
        retirement_balances=dict(retirement),
        retirement_total=retirement_total,
        cash=cash,
        investments=investments,
        liquid_wealth=withdrawable + cash + investments,
        total_net_worth=retirement_total + cash + investments,
        **flows,
    )


__all__ = [
    "annuitise",
    "apply_balance_cap",
    "apply_transfer",
    "base_retirement_expense",
    "draw_down",
    "expand_withdrawal_order",
    "project_wealth",
    "resolve_horizon",
]
