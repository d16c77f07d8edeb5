"""Monthly-compounding accumulation of a single retirement pot."""

from typing import List

from wealthplan.schemas.accumulation import (
    AccumulationPoint,
    AccumulationRequest,
    AccumulationResponse,
)


def calculate_accumulation_schedule(request: AccumulationRequest) -> AccumulationResponse:
    """Compound monthly at ``annual_return / 12`` and report each year end.

    The initial amount counts as a contribution; ``gains`` is whatever the
    balance holds beyond money paid in.
    """
    monthly_rate = request.annual_return / 12
    balance = request.initial_amount
    paid_in = request.initial_amount

    schedule: List[AccumulationPoint] = [
        AccumulationPoint(year=0, balance=balance, contributions=paid_in, gains=0.0)
    ]
    for month in range(1, request.years * 12 + 1):
        balance = balance * (1 + monthly_rate) + request.monthly_contribution
        paid_in += request.monthly_contribution
        if month % 12 == 0:
            schedule.append(
                AccumulationPoint(
                    year=month // 12,
                    balance=balance,
                    contributions=paid_in,
                    gains=balance - paid_in,
                )
            )

    return AccumulationResponse(schedule=schedule, final_balance=schedule[-1].balance)
