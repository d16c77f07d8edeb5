from __future__ import annotations

from datetime import date
from math import isclose

from wealthplan.core.portfolio import (
    compound_annual_growth,
    contribution_count,
    invested_capital,
    reconcile,
    summarize_portfolio,
)
from wealthplan.schemas.common import Unavailable
from wealthplan.schemas.portfolio import ContributionSchedule, Frequency, Holding


def monthly(amount, start):
    return ContributionSchedule(amount=amount, frequency=Frequency.MONTHLY, start_date=start)


def test_contribution_count_includes_inception_month():
    assert contribution_count(Frequency.MONTHLY, 0) == 1
    assert contribution_count(Frequency.MONTHLY, 17) == 18
    assert contribution_count(Frequency.QUARTERLY, 4) == 2
    assert contribution_count(Frequency.HALF_YEARLY, 12) == 3
    assert contribution_count(Frequency.YEARLY, 11) == 1
    assert contribution_count(Frequency.LUMP_SUM, 60) == 1


def test_monthly_schedule_is_replayed_to_valuation_date(as_of):
    assert invested_capital(monthly(100, date(2024, 1, 15)), as_of=as_of) == 1800.0


def test_partial_month_does_not_count(as_of):
    schedule = ContributionSchedule(
        amount=500, frequency=Frequency.QUARTERLY, start_date=date(2025, 1, 20)
    )
    assert invested_capital(schedule, as_of=as_of) == 1000.0


def test_lump_sum_needs_no_start_date():
    schedule = ContributionSchedule(amount=5000, frequency=Frequency.LUMP_SUM)
    assert invested_capital(schedule) == 5000.0


def test_positive_override_wins(as_of):
    schedule = monthly(100, date(2024, 1, 15))
    assert invested_capital(schedule, override=3000, as_of=as_of) == 3000.0
    assert invested_capital(schedule, override=0, as_of=as_of) == 1800.0


def test_recurring_schedule_without_start_date_is_unknown():
    assert invested_capital(monthly(100, None)) is None


def test_cagr_uses_simple_return_under_a_year(as_of):
    inception = date(2025, 1, 1)
    assert isclose(compound_annual_growth(1000, 1100, inception, as_of), 10.0)


def test_cagr_over_several_years(as_of):
    inception = date(2022, 6, 15)
    years = (as_of - inception).days / 365.25
    expected = ((1331 / 1000) ** (1 / years) - 1) * 100
    assert isclose(compound_annual_growth(1000, 1331, inception, as_of), expected)
    assert 9.9 < expected < 10.1


def test_cagr_edge_cases(as_of):
    assert compound_annual_growth(1000, 1200, None, as_of) is None
    assert compound_annual_growth(0, 1200, date(2020, 1, 1), as_of) == 0.0
    assert compound_annual_growth(1000, 0, date(2020, 1, 1), as_of) == 0.0


def test_reconcile_reports_profit_and_override_flag(as_of):
    holding = Holding(
        name="Growth Fund",
        provider="Acme Life",
        schedule=monthly(100, date(2024, 1, 15)),
        current_value=2000,
    )
    performance = reconcile(holding, as_of)

    assert performance.invested == 1800.0
    assert isclose(performance.profit_loss, 200.0)
    assert isclose(performance.profit_loss_percent, 200 / 1800 * 100)
    assert not performance.invested_from_override

    overridden = reconcile(holding.model_copy(update={"invested_override": 2500.0}), as_of)
    assert overridden.invested_from_override
    assert isclose(overridden.profit_loss, -500.0)


def test_summary_sorts_by_value_and_lists_unavailable(as_of):
    holdings = [
        Holding(name="small", schedule=monthly(50, date(2025, 5, 15)), current_value=120),
        Holding(name="big", schedule=ContributionSchedule(amount=10000, frequency=Frequency.LUMP_SUM), current_value=12000),
        Holding(name="undated", schedule=monthly(100, None), current_value=999),
    ]

    summary = summarize_portfolio(holdings, as_of)

    assert [row.name for row in summary.rows] == ["big", "small"]
    assert summary.unavailable == ["undated"]
    assert summary.total_current_value == 12120.0
    assert summary.total_invested == 10100.0
    assert isclose(summary.profit_loss, 2020.0)
    assert isclose(summary.overall_return_percent, 2020 / 10100 * 100)


def test_unavailable_marker_carries_reason(as_of):
    result = reconcile(Holding(name="x", schedule=monthly(100, None)), as_of)
    assert isinstance(result, Unavailable)
    assert result.status == "unavailable"
