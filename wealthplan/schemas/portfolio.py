"""Contribution schedules, holdings and their reconciled performance."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Frequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"
    LUMP_SUM = "lump_sum"


class ContributionSchedule(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: float = Field(ge=0)
    frequency: Frequency = Frequency.MONTHLY
    start_date: Optional[date] = None


class Holding(BaseModel):
    """
    One investment line. ``invested_override`` is a manually entered cost
    basis; when positive it replaces the schedule-derived figure everywhere.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    provider: str = ""
    schedule: ContributionSchedule
    current_value: float = 0.0
    invested_override: Optional[float] = None


class Performance(BaseModel):
    name: str
    provider: str
    frequency: Frequency
    invested: float
    invested_from_override: bool
    current_value: float
    profit_loss: float
    profit_loss_percent: float
    # None when the inception date is unknown
    cagr: Optional[float] = None


class PortfolioSummary(BaseModel):
    rows: List[Performance]
    total_current_value: float
    total_invested: float
    profit_loss: float
    overall_return_percent: float
    # holdings whose cost basis could not be worked out
    unavailable: List[str] = Field(default_factory=list)
