"""Cost-basis reconciliation and performance of investment holdings."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

import structlog

from wealthplan.core.ages import months_between
from wealthplan.schemas.common import Unavailable
from wealthplan.schemas.portfolio import (
    ContributionSchedule,
    Frequency,
    Holding,
    Performance,
    PortfolioSummary,
)

logger = structlog.get_logger(__name__)

DAYS_PER_YEAR = 365.25

_MONTHS_PER_PERIOD = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.HALF_YEARLY: 6,
    Frequency.YEARLY: 12,
}


def contribution_count(frequency: Frequency, elapsed_months: int) -> int:
    """Contributions made so far, counting the one paid in the inception month."""
    if frequency == Frequency.LUMP_SUM:
        return 1
    return max(0, elapsed_months) // _MONTHS_PER_PERIOD[frequency] + 1


def invested_capital(
    schedule: ContributionSchedule,
    override: Optional[float] = None,
    as_of: Optional[date] = None,
) -> Optional[float]:
    """
    Total capital put in. A positive ``override`` always wins; otherwise the
    schedule is replayed from its start date. Returns None when a recurring
    schedule has no start date to count from.
    """
    if override is not None and override > 0:
        return float(override)
    if schedule.frequency == Frequency.LUMP_SUM:
        return schedule.amount
    if schedule.start_date is None:
        return None

    months = months_between(schedule.start_date, as_of or date.today())
    return schedule.amount * contribution_count(schedule.frequency, months)


def profit_loss_percent(profit_loss: float, invested: float) -> float:
    if invested <= 0:
        return 0.0
    return profit_loss / invested * 100


def compound_annual_growth(
    invested: float,
    current_value: float,
    inception: Optional[date],
    as_of: Optional[date] = None,
) -> Optional[float]:
    """
    CAGR in percent. Under a year it falls back to the simple return, and it is
    0 whenever invested or current value is not positive. None without an
    inception date.
    """
    if inception is None:
        return None
    if invested <= 0 or current_value <= 0:
        return 0.0

    elapsed_days = abs(((as_of or date.today()) - inception).days)
    years = elapsed_days / DAYS_PER_YEAR
    if years < 1:
        return (current_value - invested) / invested * 100
    return ((current_value / invested) ** (1 / years) - 1) * 100


def reconcile(holding: Holding, as_of: Optional[date] = None) -> Union[Performance, Unavailable]:
    as_of = as_of or date.today()
    invested = invested_capital(holding.schedule, holding.invested_override, as_of)
    if invested is None:
        return Unavailable(reason="inception date required to derive invested capital")

    from_override = holding.invested_override is not None and holding.invested_override > 0
    if from_override:
        logger.debug("cost_basis_override_applied", holding=holding.name, invested=invested)

    profit_loss = holding.current_value - invested
    return Performance(
        name=holding.name,
        provider=holding.provider,
        frequency=holding.schedule.frequency,
        invested=invested,
        invested_from_override=from_override,
        current_value=holding.current_value,
        profit_loss=profit_loss,
        profit_loss_percent=profit_loss_percent(profit_loss, invested),
        cagr=compound_annual_growth(
            invested, holding.current_value, holding.schedule.start_date, as_of
        ),
    )


def summarize_portfolio(holdings: List[Holding], as_of: Optional[date] = None) -> PortfolioSummary:
    """Reconcile every holding; rows are ordered by current value, largest first."""
    rows: List[Performance] = []
    unavailable: List[str] = []
    for holding in holdings:
        result = reconcile(holding, as_of)
        if isinstance(result, Unavailable):
            unavailable.append(holding.name)
            continue
        rows.append(result)

    total_value = sum(row.current_value for row in rows)
    total_invested = sum(row.invested for row in rows)
    profit_loss = total_value - total_invested

    return PortfolioSummary(
        rows=sorted(rows, key=lambda row: row.current_value, reverse=True),
        total_current_value=total_value,
        total_invested=total_invested,
        profit_loss=profit_loss,
        overall_return_percent=profit_loss_percent(profit_loss, total_invested),
        unavailable=unavailable,
    )
