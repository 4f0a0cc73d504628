"""Goal planning: reverse-solve the step-up rate, or the starting SIP, for a target corpus."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Union

from sipswp.core.engine import (
    OVERFLOW_ERROR,
    RateConvention,
    apply_growth,
    monthly_rate,
    negative_errors,
    non_finite_errors,
    round_half_up,
    run_year,
    scheduled_amount,
)
from sipswp.domain.models import (
    ConfigError,
    GoalResult,
    RequiredContribution,
    StaircaseStep,
    UnachievableGoal,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalSearchSettings:
    """Bounds and stopping rules for the step-up bisection (percent units)."""

    lower_percent: float = 0.0
    upper_percent: float = 100.0
    precision: float = 0.01
    max_iterations: int = 100


def future_value(
    initial_contribution: float,
    years: int,
    annual_return_percent: float,
    step_up_percent: float,
) -> float:
    """Corpus after ``years`` of monthly SIPs that step up once per completed year."""
    rate = monthly_rate(annual_return_percent, RateConvention.NOMINAL_MONTHLY)
    balance = 0.0
    contribution = initial_contribution
    for _ in range(years):
        balance = run_year(balance, rate, monthly_contribution=contribution).end_balance
        contribution *= 1 + step_up_percent / 100
    return balance


def _validate(years: int, annual_return_percent: float, **amounts: float) -> List[str]:
    errors = non_finite_errors(annual_return_percent=annual_return_percent, **amounts)
    if years < 1:
        errors.append("years must be at least 1")
    if not errors and monthly_rate(annual_return_percent, RateConvention.NOMINAL_MONTHLY) <= -1:
        errors.append("annual_return_percent must be greater than -1200")
    return errors


def reverse_goal(
    target: float,
    initial_contribution: float,
    years: int,
    annual_return_percent: float,
    settings: Optional[GoalSearchSettings] = None,
) -> Union[GoalResult, UnachievableGoal, ConfigError]:
    """
    Smallest annual step-up (percent) that lets a SIP starting at
    ``initial_contribution`` reach ``target`` after ``years``.

    Precondition: future_value must be non-decreasing in the step-up. That
    holds for non-negative contributions and a monthly rate above -100%, but
    the search does not prove it; with assertions enabled each probe is
    checked against the current bracket.
    """
    settings = settings or GoalSearchSettings()

    errors = _validate(years, annual_return_percent, target=target, initial_contribution=initial_contribution)
    errors.extend(negative_errors(initial_contribution=initial_contribution))
    if errors:
        return ConfigError(errors=errors)

    lo, hi = settings.lower_percent, settings.upper_percent
    fv_hi = future_value(initial_contribution, years, annual_return_percent, hi)
    if fv_hi < target:
        return UnachievableGoal()

    fv_lo = future_value(initial_contribution, years, annual_return_percent, lo)
    if fv_lo > target:
        return GoalResult(step_up_percent=lo)

    iterations = 0
    while iterations < settings.max_iterations and hi - lo >= settings.precision:
        mid = (lo + hi) / 2
        fv_mid = future_value(initial_contribution, years, annual_return_percent, mid)
        assert fv_lo <= fv_mid <= fv_hi, "future value is not monotonic in step-up"
        if fv_mid < target:
            lo, fv_lo = mid, fv_mid
        else:
            hi, fv_hi = mid, fv_mid
        iterations += 1

    logger.debug("step-up search stopped after %d iterations at [%.6f, %.6f]", iterations, lo, hi)
    return GoalResult(step_up_percent=(lo + hi) / 2)


def required_initial_contribution(
    target: float,
    years: int,
    annual_return_percent: float,
    step_up_percent: float,
) -> Union[RequiredContribution, ConfigError]:
    """
    Starting monthly SIP needed to reach ``target`` with a fixed step-up.

    Each year's twelve deposits accumulate at the nominal monthly rate, then
    ride to the horizon at the annual rate. The result is ``target`` divided
    by the total factor for a SIP of 1.
    """
    errors = _validate(years, annual_return_percent, target=target, step_up_percent=step_up_percent)
    if errors:
        return ConfigError(errors=errors)

    try:
        return _solve_required_contribution(target, years, annual_return_percent, step_up_percent)
    except OverflowError:
        logger.info("required contribution overflowed for %d years at %.2f%% step-up", years, step_up_percent)
        return ConfigError(errors=[OVERFLOW_ERROR])


def _solve_required_contribution(
    target: float,
    years: int,
    annual_return_percent: float,
    step_up_percent: float,
) -> RequiredContribution:
    factor = 0.0
    if annual_return_percent > -100:
        rate = monthly_rate(annual_return_percent, RateConvention.NOMINAL_MONTHLY)
        year_factor = run_year(0.0, rate, monthly_contribution=1.0).end_balance
        for year in range(years):
            carried = apply_growth(1.0, annual_return_percent / 100) ** (years - (year + 1))
            factor += year_factor * carried * scheduled_amount(1.0, step_up_percent, year)

    initial = target / factor if factor else 0.0

    staircase: List[StaircaseStep] = []
    for year in range(1, years + 1):
        amount = scheduled_amount(initial, step_up_percent, year - 1)
        if not math.isfinite(amount):
            raise OverflowError("staircase amount is not finite")
        staircase.append(StaircaseStep(year=year, amount=round_half_up(amount)))

    return RequiredContribution(initial_contribution=round_half_up(initial), staircase=staircase)
