"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from sipswp.core import (
    analyze_sequence_risk,
    build_survival_grid,
    ledger_to_csv,
    required_initial_contribution,
    reverse_goal,
    simulate,
    summarize_ledger,
)
from sipswp.core.ping import get_ping_message
from sipswp.domain.models import ConfigError
from sipswp.schemas.common import ErrorResponse, PingResponse
from sipswp.schemas.goal import GoalRequest, RequiredContributionRequest
from sipswp.schemas.risk import SequenceRiskRequest, SurvivalGridRequest
from sipswp.schemas.simulation import SimulationRequest, SimulationResponse

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


def _payload() -> Dict[str, Any]:
    # an empty or non-JSON body means "use every default"
    return request.get_json(force=True, silent=True) or {}


def _config_error(result: ConfigError):
    current_app.logger.info("rejected %s: %s", request.path, result.message)
    return jsonify(ErrorResponse(error=result.errors).model_dump()), HTTPStatus.BAD_REQUEST


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify(PingResponse(message=get_ping_message()).model_dump())


@api_bp.post("/calc/simulation")
def simulation() -> Any:
    """Year-by-year SIP then SWP ledger plus totals."""
    payload = SimulationRequest.model_validate(_payload())
    result = simulate(payload.to_config())
    if isinstance(result, ConfigError):
        return _config_error(result)

    response = SimulationResponse(ledger=result, summary=summarize_ledger(result))
    return jsonify(response.model_dump(by_alias=True))


@api_bp.post("/calc/simulation/csv")
def simulation_csv() -> Any:
    """Same ledger as /calc/simulation, as a CSV download."""
    payload = SimulationRequest.model_validate(_payload())
    result = simulate(payload.to_config())
    if isinstance(result, ConfigError):
        return _config_error(result)

    filename = current_app.config["CSV_FILENAME"]
    return Response(
        ledger_to_csv(result, include_withdrawals=payload.enableSwp),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@api_bp.post("/calc/goal")
def goal() -> Any:
    """Step-up needed to reach a target; {"error": "unachievable"} is a normal answer."""
    payload = GoalRequest.model_validate(_payload())
    result = reverse_goal(
        target=payload.target,
        initial_contribution=payload.initialContribution,
        years=payload.years,
        annual_return_percent=payload.returnRate,
    )
    if isinstance(result, ConfigError):
        return _config_error(result)
    return jsonify(result.model_dump(by_alias=True))


@api_bp.post("/calc/required-contribution")
def required_contribution() -> Any:
    payload = RequiredContributionRequest.model_validate(_payload())
    result = required_initial_contribution(
        target=payload.targetAmount,
        years=payload.investmentPeriod,
        annual_return_percent=payload.returnRate,
        step_up_percent=payload.stepUpRate,
    )
    if isinstance(result, ConfigError):
        return _config_error(result)
    return jsonify(result.model_dump(by_alias=True))


@api_bp.post("/calc/sequence-risk")
def sequence_risk() -> Any:
    payload = SequenceRiskRequest.model_validate(_payload())
    result = analyze_sequence_risk(
        initial_corpus=payload.initialCorpus,
        monthly_withdrawal=payload.monthlyWithdrawal,
        years=payload.withdrawalPeriod,
        withdrawal_increase_percent=payload.withdrawalIncrease,
        avg_return=payload.avgReturn,
        bear_return=payload.bearReturn,
        bull_return=payload.bullReturn,
    )
    if isinstance(result, ConfigError):
        return _config_error(result)
    return jsonify(result.model_dump(by_alias=True))


@api_bp.post("/calc/survival-grid")
def survival_grid() -> Any:
    payload = SurvivalGridRequest.model_validate(_payload())
    result = build_survival_grid(
        corpus=payload.corpus,
        return_rate=payload.returnRate,
        inflation_rate=payload.inflation,
        rates=payload.rates,
        durations=payload.durations,
    )
    if isinstance(result, ConfigError):
        return _config_error(result)
    return jsonify(result.model_dump(by_alias=True))
