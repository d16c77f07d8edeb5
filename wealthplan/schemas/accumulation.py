"""Data contracts for the monthly accumulation schedule."""

from typing import List

from pydantic import BaseModel, Field


class AccumulationRequest(BaseModel):
    """Inputs required to compute an accumulation schedule."""

    initial_amount: float = Field(0.0, ge=0, description="Balance at year 0.")
    monthly_contribution: float = Field(
        0.0,
        ge=0,
        description="Contribution added at the end of every month.",
    )
    annual_return: float = Field(
        ...,
        ge=-1,
        description="Annual return as a decimal (e.g. 0.05 for 5%), compounded monthly.",
    )
    years: int = Field(..., ge=0, le=120, description="Number of years to project.")


class AccumulationPoint(BaseModel):
    """Position at the end of one whole year."""

    year: int = Field(..., ge=0)
    balance: float
    contributions: float
    gains: float


class AccumulationResponse(BaseModel):
    """Projected accumulation schedule."""

    schedule: List[AccumulationPoint]
    final_balance: float
