"""Safe-withdrawal-rate survival grid."""

from __future__ import annotations

import logging
from typing import List, Sequence, Union

from sipswp.core.engine import OVERFLOW_ERROR, apply_growth, negative_errors, non_finite_errors
from sipswp.domain.models import ConfigError, SurvivalCell, SurvivalGrid

logger = logging.getLogger(__name__)


def simulate_survival(
    corpus: float,
    years: int,
    withdrawal_rate_percent: float,
    return_rate_percent: float,
    inflation_percent: float,
) -> float:
    """
    Final balance after ``years`` of inflation-indexed annual withdrawals.

    The first withdrawal is a fixed share of the *starting* corpus; later
    ones grow with inflation. Withdraw first, then grow whatever is left
    with one annual step. Returns 0 as soon as the portfolio runs dry.
    """
    balance = corpus
    annual_withdrawal = corpus * (withdrawal_rate_percent / 100)

    for i in range(years):
        if balance <= 0:
            return 0.0
        balance -= annual_withdrawal * (1 + inflation_percent / 100) ** i
        if balance > 0:
            balance = apply_growth(balance, return_rate_percent / 100)

    return max(balance, 0.0)


def build_survival_grid(
    corpus: float,
    return_rate: float,
    inflation_rate: float,
    rates: Sequence[float],
    durations: Sequence[int],
) -> Union[SurvivalGrid, ConfigError]:
    errors = non_finite_errors(corpus=corpus, return_rate=return_rate, inflation_rate=inflation_rate)
    errors.extend(non_finite_errors(**{f"rates[{i}]": rate for i, rate in enumerate(rates)}))
    if errors:
        return ConfigError(errors=errors)

    errors.extend(negative_errors(corpus=corpus))
    errors.extend(negative_errors(**{f"rates[{i}]": rate for i, rate in enumerate(rates)}))
    errors.extend(f"durations[{i}] must be at least 1" for i, years in enumerate(durations) if years < 1)
    if return_rate <= -100:
        errors.append("return_rate must be greater than -100")
    if not rates or not durations:
        errors.append("rates and durations must not be empty")
    if errors:
        return ConfigError(errors=errors)

    try:
        cells = _fill_cells(corpus, return_rate, inflation_rate, rates, durations)
    except OverflowError:
        logger.info("survival grid overflowed at %.2f%% inflation", inflation_rate)
        return ConfigError(errors=[OVERFLOW_ERROR])

    return SurvivalGrid(rates=list(rates), durations=list(durations), cells=cells)


def _fill_cells(
    corpus: float,
    return_rate: float,
    inflation_rate: float,
    rates: Sequence[float],
    durations: Sequence[int],
) -> List[List[SurvivalCell]]:
    cells: List[List[SurvivalCell]] = []
    for rate in rates:
        row: List[SurvivalCell] = []
        for years in durations:
            final_balance = simulate_survival(corpus, years, rate, return_rate, inflation_rate)
            row.append(
                SurvivalCell(
                    withdrawal_rate_percent=rate,
                    duration_years=years,
                    final_balance=final_balance,
                    survived=final_balance > 0,
                )
            )
        cells.append(row)
    return cells
