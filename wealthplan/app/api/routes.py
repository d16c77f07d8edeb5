"""HTTP routes for the Flask API.

Each route validates its payload, normalizes it into engine inputs and calls
one calculator. Results that need a missing date come back as
``{"status": "unavailable", ...}`` with a 200, not as errors.
"""

from datetime import date
from http import HTTPStatus
from typing import Any, Dict

import structlog
from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from wealthplan.core.accrual import simulate_accrual
from wealthplan.core.accumulation import calculate_accumulation_schedule
from wealthplan.core.ages import age_on, parse_date
from wealthplan.core.coverage import coverage_timeline, evaluate_coverage
from wealthplan.core.cpf import compute_cpf, reverse_compute_cpf
from wealthplan.core.education import plan_child_education
from wealthplan.core.health import get_health
from wealthplan.core.portfolio import summarize_portfolio
from wealthplan.core.projection import project_wealth
from wealthplan.core.replacement import compare_replacement
from wealthplan.models import (
    AccrualRequest,
    CoverageRequest,
    CpfRequest,
    EducationRequest,
    PortfolioRequest,
    ReplacementRequest,
    SnapshotError,
    WealthRequest,
)
from wealthplan.schemas.accumulation import AccumulationRequest
from wealthplan.schemas.common import Unavailable

api_bp = Blueprint("api", __name__)
logger = structlog.get_logger(__name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    errors = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": errors}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(SnapshotError)
def _handle_snapshot_error(exc: SnapshotError):
    logger.info("snapshot_rejected", errors=exc.errors, path=request.path)
    return jsonify({"error": exc.errors}), HTTPStatus.BAD_REQUEST


def _payload() -> Dict[str, Any]:
    return request.get_json(force=True, silent=False) or {}


def _as_of() -> date:
    """Valuation date from ``?asOf=YYYY-MM-DD``, today otherwise."""
    return parse_date(request.args.get("asOf")) or date.today()


def _max_age() -> int:
    """Upper bound on any simulated age, from the service settings."""
    return current_app.config["WEALTHPLAN_SETTINGS"].max_simulation_age


def _respond(result: BaseModel):
    return jsonify(result.model_dump(mode="json"))


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    return _respond(get_health())


@api_bp.post("/calc/accumulation")
def accumulation() -> Any:
    payload = AccumulationRequest.model_validate(_payload())
    return _respond(calculate_accumulation_schedule(payload))


@api_bp.post("/cpf/contribution")
def cpf_contribution() -> Any:
    payload = CpfRequest.model_validate(_payload())
    age = age_on(payload.dob, _as_of())
    if age is None:
        age = payload.age
    if age is None:
        return _respond(Unavailable(reason="age or birth date required"))
    gross = payload.grossSalary
    if gross <= 0 and payload.takeHome > 0:
        gross = reverse_compute_cpf(payload.takeHome, age, payload.wageCeiling)
    return _respond(compute_cpf(gross, age, payload.wageCeiling))


@api_bp.post("/projection/accrual")
def accrual() -> Any:
    payload = AccrualRequest.model_validate(_payload())
    series = simulate_accrual(
        payload.balances(),
        payload.specs(),
        payload.allocation(),
        payload.monthlyIncome,
        payload.currentAge,
        payload.horizonAge,
        max_age=_max_age(),
    )
    return _respond(series)


@api_bp.post("/projection/wealth")
def wealth() -> Any:
    payload = WealthRequest.model_validate(_payload())
    inputs = payload.to_inputs(_as_of())
    if isinstance(inputs, Unavailable):
        return _respond(inputs)
    return _respond(project_wealth(inputs, payload.allocation(), max_age=_max_age()))


@api_bp.post("/portfolio/reconcile")
def portfolio() -> Any:
    payload = PortfolioRequest.model_validate(_payload())
    holdings = [item.to_holding() for item in payload.holdings]
    return _respond(summarize_portfolio(holdings, _as_of()))


@api_bp.post("/coverage/gaps")
def coverage_gaps() -> Any:
    payload = CoverageRequest.model_validate(_payload())
    income = payload.profile.take_home(payload.assumptions)
    return _respond(evaluate_coverage(payload.ledger(), income, payload.assumptions))


@api_bp.post("/coverage/timeline")
def coverage_over_time() -> Any:
    payload = CoverageRequest.model_validate(_payload())
    age = payload.profile.age(_as_of(), fallback=payload.currentAge)
    if age is None:
        return _respond(Unavailable(reason="birth date required for a coverage timeline"))

    retirement_age = payload.profile.retirementAge
    timeline = coverage_timeline(
        payload.ledger(),
        current_age=age,
        retirement_age=retirement_age if retirement_age is not None else 65,
        monthly_income=payload.profile.take_home(payload.assumptions),
        mortgage=payload.mortgage.to_terms() if payload.mortgage else None,
        max_age=_max_age(),
    )
    return _respond(timeline)


@api_bp.post("/replacement/compare")
def replacement() -> Any:
    payload = ReplacementRequest.model_validate(_payload())
    age = payload.profile.age(_as_of(), fallback=payload.currentAge)
    if age is None:
        return _respond(Unavailable(reason="birth date required to compare remaining premiums"))

    comparison = compare_replacement(
        payload.oldPlan.to_existing(), payload.newPlan.to_proposed(), age
    )
    return _respond(comparison)


@api_bp.post("/education/plan")
def education() -> Any:
    payload = EducationRequest.model_validate(_payload())
    as_of = _as_of()
    plans = [
        plan_child_education(
            record.to_child(), payload.settings, payload.parentDob, as_of
        ).model_dump(mode="json")
        for record in payload.children
    ]
    return jsonify({"children": plans})
