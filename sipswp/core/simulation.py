"""Year-by-year SIP/SWP ledger simulation."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Union

from sipswp.core.engine import (
    OVERFLOW_ERROR,
    RateConvention,
    monthly_rate,
    negative_errors,
    non_finite_errors,
    round_half_up,
    run_year,
    scheduled_amount,
)
from sipswp.domain.models import ConfigError, SimulationConfig, YearRecord

logger = logging.getLogger(__name__)


def validate_config(config: SimulationConfig) -> List[str]:
    errors = non_finite_errors(
        base_contribution=config.base_contribution,
        annual_return_percent=config.annual_return_percent,
        contribution_step_up_percent=config.contribution_step_up_percent,
        base_withdrawal=config.base_withdrawal,
        withdrawal_step_up_percent=config.withdrawal_step_up_percent,
    )
    if errors:
        return errors

    errors.extend(
        negative_errors(
            base_contribution=config.base_contribution,
            contribution_years=config.contribution_years,
            contribution_step_up_percent=config.contribution_step_up_percent,
            base_withdrawal=config.base_withdrawal,
            withdrawal_step_up_percent=config.withdrawal_step_up_percent,
            withdrawal_years=config.withdrawal_years,
        )
    )
    if config.contribution_years + config.withdrawal_years < 1:
        errors.append("contribution_years + withdrawal_years must be at least 1")
    if monthly_rate(config.annual_return_percent, RateConvention.NOMINAL_MONTHLY) <= -1:
        errors.append("annual_return_percent must be greater than -1200")
    return errors


def simulate(config: SimulationConfig) -> Union[List[YearRecord], ConfigError]:
    """
    Build the ledger for a contribution phase followed directly by a withdrawal phase.

    Years 1..contribution_years contribute; the following withdrawal_years
    withdraw. Monthly amounts are fixed per year (step-up compounds annually)
    and the balance compounds monthly at the nominal rate (annual / 12).

    Begin/end/interest columns are rounded to whole units, flow columns keep
    two decimals. The carried balance itself is never rounded.
    """
    errors = validate_config(config)
    if errors:
        return ConfigError(errors=errors)

    try:
        return _build_ledger(config)
    except OverflowError:
        logger.info("simulation overflowed for %r", config)
        return ConfigError(errors=[OVERFLOW_ERROR])


def _build_ledger(config: SimulationConfig) -> List[YearRecord]:
    rate = monthly_rate(config.annual_return_percent, RateConvention.NOMINAL_MONTHLY)
    withdrawal_start = config.contribution_years + 1
    horizon = config.contribution_years + config.withdrawal_years

    balance = 0.0
    cumulative_contributed = 0.0
    cumulative_withdrawn = 0.0
    ledger: List[YearRecord] = []

    for year in range(1, horizon + 1):
        contributing = year <= config.contribution_years
        withdrawing = year >= withdrawal_start

        monthly_contribution: Optional[float] = None
        if contributing:
            monthly_contribution = round_half_up(
                scheduled_amount(config.base_contribution, config.contribution_step_up_percent, year - 1),
                2,
            )
        annual_contribution = monthly_contribution * 12 if monthly_contribution is not None else 0.0

        desired_withdrawal = 0.0
        if withdrawing:
            desired_withdrawal = round_half_up(
                scheduled_amount(
                    config.base_withdrawal,
                    config.withdrawal_step_up_percent,
                    year - withdrawal_start,
                ),
                2,
            )

        begin = balance
        flow = run_year(
            balance,
            rate,
            monthly_contribution=monthly_contribution or 0.0,
            monthly_withdrawal=desired_withdrawal if withdrawing else None,
        )
        balance = flow.end_balance
        if not math.isfinite(balance):
            raise OverflowError(f"balance is not finite in year {year}")

        if withdrawing and flow.withdrawn < desired_withdrawal * 12:
            logger.debug(
                "year %d: withdrew %.2f of %.2f requested", year, flow.withdrawn, desired_withdrawal * 12
            )

        interest = balance - (begin + annual_contribution - flow.withdrawn)
        cumulative_contributed += annual_contribution
        if withdrawing:
            cumulative_withdrawn += flow.withdrawn

        ledger.append(
            YearRecord(
                year=year,
                begin_balance=round_half_up(begin),
                monthly_contribution=monthly_contribution,
                annual_contribution=annual_contribution,
                cumulative_contributed=cumulative_contributed,
                # a zero scheduled withdrawal is shown as not applicable
                monthly_withdrawal=desired_withdrawal if withdrawing and desired_withdrawal > 0 else None,
                annual_withdrawal=flow.withdrawn if withdrawing else None,
                cumulative_withdrawn=cumulative_withdrawn,
                interest_earned=round_half_up(interest),
                end_balance=round_half_up(balance),
            )
        )

    return ledger


def contribution_only_final_balance(
    initial_contribution: float,
    years: int,
    annual_return_percent: float,
    step_up_percent: float,
) -> Optional[float]:
    """Final (rounded) ledger balance of a run with no withdrawal phase, or None if invalid."""
    result = simulate(
        SimulationConfig(
            base_contribution=initial_contribution,
            contribution_years=years,
            annual_return_percent=annual_return_percent,
            contribution_step_up_percent=step_up_percent,
        )
    )
    if isinstance(result, ConfigError):
        return None
    return result[-1].end_balance
