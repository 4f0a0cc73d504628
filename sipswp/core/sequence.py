"""Sequence-of-returns risk: same average return, different first two years."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Sequence, Union

from sipswp.core.engine import (
    RateConvention,
    monthly_rate,
    negative_errors,
    non_finite_errors,
    round_half_up,
    run_year,
)
from sipswp.domain.models import ConfigError, ScenarioResult

logger = logging.getLogger(__name__)

# number of opening years whose return is overridden
SHOCK_YEARS = 2


class MarketStart(str, Enum):
    BEAR = "bear"
    FLAT = "flat"
    BULL = "bull"


def return_schedule(years: int, avg_return: float, opening_return: float) -> List[float]:
    schedule = [avg_return] * years
    for index in range(min(SHOCK_YEARS, years)):
        schedule[index] = opening_return
    return schedule


def schedules_for_scenarios(
    years: int, avg_return: float, bear_return: float, bull_return: float
) -> Dict[MarketStart, List[float]]:
    return {
        MarketStart.BEAR: return_schedule(years, avg_return, bear_return),
        MarketStart.FLAT: return_schedule(years, avg_return, avg_return),
        MarketStart.BULL: return_schedule(years, avg_return, bull_return),
    }


def simulate_drawdown(
    initial_corpus: float,
    monthly_withdrawal: float,
    withdrawal_increase_percent: float,
    schedule: Sequence[float],
) -> List[float]:
    """
    End-of-year balances for a withdrawal-only portfolio, index 0 being the
    starting corpus.

    Each year uses the effective monthly rate of that year's return. The
    withdrawal is taken at the start of each month and raised once a year.
    A depleted portfolio stays at zero for the remaining years.
    """
    balance = initial_corpus
    balances: List[float] = [initial_corpus]
    withdrawal = monthly_withdrawal

    for year, annual_return in enumerate(schedule, start=1):
        rate = monthly_rate(annual_return, RateConvention.EFFECTIVE_MONTHLY)
        balance = run_year(balance, rate, monthly_withdrawal=withdrawal, floor_at_zero=True).end_balance
        withdrawal *= 1 + withdrawal_increase_percent / 100
        balances.append(round_half_up(balance))

        if balance == 0:
            logger.debug("portfolio depleted in year %d of %d", year, len(schedule))
            balances.extend([0] * (len(schedule) - year))
            break

    return balances


def analyze_sequence_risk(
    initial_corpus: float,
    monthly_withdrawal: float,
    years: int,
    withdrawal_increase_percent: float,
    avg_return: float,
    bear_return: float,
    bull_return: float,
) -> Union[ScenarioResult, ConfigError]:
    errors = non_finite_errors(
        initial_corpus=initial_corpus,
        monthly_withdrawal=monthly_withdrawal,
        withdrawal_increase_percent=withdrawal_increase_percent,
        avg_return=avg_return,
        bear_return=bear_return,
        bull_return=bull_return,
    )
    if errors:
        return ConfigError(errors=errors)

    errors.extend(
        negative_errors(
            initial_corpus=initial_corpus,
            monthly_withdrawal=monthly_withdrawal,
            withdrawal_increase_percent=withdrawal_increase_percent,
        )
    )
    if years < 1:
        errors.append("years must be at least 1")
    for name, value in (("avg_return", avg_return), ("bear_return", bear_return), ("bull_return", bull_return)):
        if value <= -100:
            errors.append(f"{name} must be greater than -100")
    if errors:
        return ConfigError(errors=errors)

    schedules = schedules_for_scenarios(years, avg_return, bear_return, bull_return)
    balances = {
        scenario: simulate_drawdown(initial_corpus, monthly_withdrawal, withdrawal_increase_percent, schedule)
        for scenario, schedule in schedules.items()
    }

    return ScenarioResult(
        labels=list(range(years + 1)),
        bear=balances[MarketStart.BEAR],
        flat=balances[MarketStart.FLAT],
        bull=balances[MarketStart.BULL],
    )
