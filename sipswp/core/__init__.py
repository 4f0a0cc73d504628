"""Projection engine: pure functions, no I/O, no shared state."""

from sipswp.core.engine import (
    RateConvention,
    apply_growth,
    effective_period_rate,
    monthly_rate,
    nominal_monthly_rate,
    scheduled_amount,
)
from sipswp.core.export import format_inr, ledger_to_csv, summarize_ledger
from sipswp.core.goal import (
    GoalSearchSettings,
    future_value,
    required_initial_contribution,
    reverse_goal,
)
from sipswp.core.ping import get_ping_message
from sipswp.core.sequence import analyze_sequence_risk
from sipswp.core.simulation import simulate
from sipswp.core.survival import build_survival_grid

__all__ = [
    "RateConvention",
    "apply_growth",
    "effective_period_rate",
    "monthly_rate",
    "nominal_monthly_rate",
    "scheduled_amount",
    "format_inr",
    "ledger_to_csv",
    "summarize_ledger",
    "GoalSearchSettings",
    "future_value",
    "required_initial_contribution",
    "reverse_goal",
    "get_ping_message",
    "analyze_sequence_risk",
    "simulate",
    "build_survival_grid",
]
