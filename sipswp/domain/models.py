from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    # snake_case in Python, camelCase on the wire (model_dump(by_alias=True))
    model_config = ConfigDict(extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True)


class SimulationConfig(EngineModel):
    """Contribution phase followed by a withdrawal phase.

    Values are not range-checked here; ``simulate`` reports bad input as a
    ``ConfigError`` instead of raising.
    """

    base_contribution: float
    contribution_years: int
    annual_return_percent: float
    contribution_step_up_percent: float = 0.0
    base_withdrawal: float = 0.0
    withdrawal_step_up_percent: float = 0.0
    withdrawal_years: int = 0


class YearRecord(EngineModel):
    year: int
    begin_balance: float
    monthly_contribution: Optional[float]
    annual_contribution: float
    cumulative_contributed: float
    monthly_withdrawal: Optional[float]
    annual_withdrawal: Optional[float]
    cumulative_withdrawn: float
    interest_earned: float
    end_balance: float


class LedgerSummary(EngineModel):
    total_contributed: float
    total_withdrawn: float
    total_interest: float
    final_balance: float


class ConfigError(EngineModel):
    errors: List[str]

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


class GoalResult(EngineModel):
    step_up_percent: float


class UnachievableGoal(EngineModel):
    error: Literal["unachievable"] = "unachievable"


class StaircaseStep(EngineModel):
    year: int
    amount: float


class RequiredContribution(EngineModel):
    initial_contribution: float
    staircase: List[StaircaseStep]


class ScenarioResult(EngineModel):
    labels: List[int]
    bear: List[float]
    flat: List[float]
    bull: List[float]


class SurvivalCell(EngineModel):
    withdrawal_rate_percent: float
    duration_years: int
    final_balance: float
    survived: bool


class SurvivalGrid(EngineModel):
    rates: List[float]
    durations: List[int]
    # one row per withdrawal rate, one cell per duration
    cells: List[List[SurvivalCell]]
