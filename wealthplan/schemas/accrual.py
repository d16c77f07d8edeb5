"""Data contracts for the segmented retirement-account simulation."""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

# (monthly income, age) -> annual contribution per sub-account name
AllocationRule = Callable[[float, int], Mapping[str, float]]


class SubAccountSpec(BaseModel):
    """One sub-account of a segmented account.

    Contributions stop once the simulated age reaches
    ``contribution_cutoff_age``; growth continues regardless. From then on
    the allocation for this sub-account is paid into ``redirect_after_cutoff``
    instead, or dropped when no redirect is named.
    ``withdrawable`` marks balances that may fund retirement spending.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    rate: float = Field(ge=-1)
    contribution_cutoff_age: Optional[int] = Field(default=None, ge=0, le=120)
    withdrawable: bool = True
    redirect_after_cutoff: Optional[str] = None

    def accepts_contributions(self, age: int) -> bool:
        return self.contribution_cutoff_age is None or age < self.contribution_cutoff_age


class AccrualPoint(BaseModel):
    """Balances on reaching ``age``, plus what was paid in during the year before."""

    age: int
    balances: Dict[str, float]
    contributions: Dict[str, float]
    total: float


class AccrualSeries(BaseModel):
    points: List[AccrualPoint]

    @property
    def terminal(self) -> AccrualPoint:
        return self.points[-1]
