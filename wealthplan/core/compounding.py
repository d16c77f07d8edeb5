"""Closed-form compounding used by every higher-level calculator."""

from __future__ import annotations


def future_value_lump_sum(principal: float, annual_rate: float, years: float) -> float:
    """Grow ``principal`` at ``annual_rate`` for ``years`` (annual compounding).

    Non-positive horizons return the principal unchanged.
    """
    if years <= 0:
        return principal
    return principal * (1.0 + annual_rate) ** years


def future_value_annuity(annual_contribution: float, annual_rate: float, years: float) -> float:
    """Value of an ordinary annuity: ``annual_contribution`` paid at each year end.

    A zero rate degrades to plain summation instead of dividing by the rate.
    """
    if years <= 0:
        return 0.0
    if annual_rate == 0:
        return annual_contribution * years
    growth = (1.0 + annual_rate) ** years
    return annual_contribution * (growth - 1.0) / annual_rate
