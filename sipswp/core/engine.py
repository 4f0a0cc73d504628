"""Compounding primitives, the step-up scheduler and the shared month loop.

Every month-by-month projection runs through ``run_year``. The features
differ only in how they turn an annual return into a monthly rate,
so both conventions are exposed as separate, named operations:

  * nominal:   annual / 100 / 12        (ledger simulation, goal search)
  * effective: (1 + annual/100)^(1/12) - 1  (sequence-of-returns analysis)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum
from typing import List, Optional

MONTHS_PER_YEAR = 12

# Tiny negatives left by float error are snapped to zero; anything more
# negative than this is a real bug and is left visible.
NEGATIVE_BALANCE_EPSILON = 1e-4

OVERFLOW_ERROR = "inputs are too large to project: the amounts overflow"

# wide enough to quantize any finite float to cents
_ROUNDING_CONTEXT = Context(prec=400)


class RateConvention(str, Enum):
    NOMINAL_MONTHLY = "nominal-monthly"
    EFFECTIVE_MONTHLY = "effective-monthly"


def nominal_monthly_rate(annual_percent: float) -> float:
    return annual_percent / 100 / MONTHS_PER_YEAR


def effective_period_rate(annual_percent: float, periods_per_year: int = MONTHS_PER_YEAR) -> float:
    """Per-period rate that compounds exactly to ``annual_percent`` over a year."""
    return (1 + annual_percent / 100) ** (1 / periods_per_year) - 1


def monthly_rate(annual_percent: float, convention: RateConvention) -> float:
    if convention == RateConvention.EFFECTIVE_MONTHLY:
        return effective_period_rate(annual_percent, MONTHS_PER_YEAR)
    return nominal_monthly_rate(annual_percent)


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero on the decimal text of ``value`` (1.005 -> 1.01, -2.5 -> -3)."""
    if not math.isfinite(value):
        return value
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT))


def apply_growth(balance: float, rate: float) -> float:
    return balance * (1 + rate)


def scheduled_amount(base: float, step_up_percent: float, elapsed_periods: int) -> float:
    """Amount for a period under annual step-up; ``elapsed_periods`` is 0 for the first."""
    return base * (1 + step_up_percent / 100) ** elapsed_periods


@dataclass
class YearFlow:
    end_balance: float
    contributed: float
    withdrawn: float


def run_year(
    balance: float,
    rate: float,
    monthly_contribution: float = 0.0,
    monthly_withdrawal: Optional[float] = None,
    floor_at_zero: bool = False,
) -> YearFlow:
    """
    Run twelve months with a flat contribution and withdrawal.

    Per month:
      1) contribution arrives,
      2) withdrawal is capped at what is available (never below zero),
      3) the remainder grows by ``rate``.

    With ``floor_at_zero`` every negative balance is floored after growth;
    otherwise only float noise within NEGATIVE_BALANCE_EPSILON is snapped.
    """
    contributed = 0.0
    withdrawn = 0.0

    for _ in range(MONTHS_PER_YEAR):
        available = balance + monthly_contribution
        contributed += monthly_contribution

        withdrawal = 0.0
        if monthly_withdrawal:
            withdrawal = max(0.0, min(monthly_withdrawal, available))
        withdrawn += withdrawal

        balance = apply_growth(available - withdrawal, rate)

        if floor_at_zero:
            balance = max(balance, 0.0)
        elif -NEGATIVE_BALANCE_EPSILON < balance < 0:
            balance = 0.0

    return YearFlow(end_balance=balance, contributed=contributed, withdrawn=withdrawn)


def non_finite_errors(**values: float) -> List[str]:
    return [f"{name} must be a finite number" for name, value in values.items() if not math.isfinite(value)]


def negative_errors(**values: float) -> List[str]:
    return [f"{name} must not be negative" for name, value in values.items() if value < 0]
