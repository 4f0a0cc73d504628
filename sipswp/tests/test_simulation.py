from __future__ import annotations

from math import isclose

import pytest

from sipswp.core.engine import OVERFLOW_ERROR
from sipswp.core.simulation import simulate
from sipswp.domain.models import ConfigError, SimulationConfig, YearRecord


def example_config(**overrides) -> SimulationConfig:
    values = {
        "base_contribution": 1000,
        "contribution_years": 10,
        "annual_return_percent": 12,
        "contribution_step_up_percent": 10,
        "base_withdrawal": 10000,
        "withdrawal_step_up_percent": 10,
        "withdrawal_years": 20,
    }
    values.update(overrides)
    return SimulationConfig(**values)


def run(config: SimulationConfig) -> list[YearRecord]:
    ledger = simulate(config)
    assert not isinstance(ledger, ConfigError), ledger
    return ledger


def test_example_ledger_phases():
    ledger = run(example_config())

    assert len(ledger) == 30

    first = ledger[0]
    assert first.monthly_contribution == 1000.00
    assert first.annual_contribution == 12000.00
    assert first.monthly_withdrawal is None
    assert first.annual_withdrawal is None
    assert first.cumulative_withdrawn == 0.0
    assert first.begin_balance == 0

    assert ledger[1].monthly_contribution == 1100.00
    assert ledger[9].monthly_contribution == 2357.95  # 1000 * 1.1^9, two decimals

    first_withdrawal_year = ledger[10]
    assert first_withdrawal_year.year == 11
    assert first_withdrawal_year.monthly_contribution is None
    assert first_withdrawal_year.annual_contribution == 0.0
    assert first_withdrawal_year.monthly_withdrawal == 10000.00
    assert ledger[11].monthly_withdrawal == 11000.00


def test_ledger_years_are_contiguous_and_contributions_never_shrink():
    ledger = run(example_config())

    assert [row.year for row in ledger] == list(range(1, 31))
    totals = [row.cumulative_contributed for row in ledger]
    assert totals == sorted(totals)
    for prev, row in zip(ledger, ledger[1:]):
        # begin/end are rounded separately from the same carried balance
        assert abs(row.begin_balance - prev.end_balance) <= 1


def test_withdrawals_never_exceed_available_funds():
    """Without growth, a year can only pay out what it started with plus what came in."""
    ledger = run(example_config(annual_return_percent=0, base_withdrawal=50000, withdrawal_step_up_percent=0))

    for row in ledger:
        if row.annual_withdrawal is not None:
            assert row.annual_withdrawal <= row.begin_balance + row.annual_contribution + 1
        assert row.end_balance >= 0


def test_zero_growth_balances_are_cash_flows_only():
    """
    With no return the balance is contributions minus withdrawals and interest stays zero.
    """
    ledger = run(
        SimulationConfig(
            base_contribution=1000,
            contribution_years=2,
            annual_return_percent=0,
            base_withdrawal=500,
            withdrawal_years=2,
        )
    )

    assert [row.end_balance for row in ledger] == [12000, 24000, 18000, 12000]
    assert [row.interest_earned for row in ledger] == [0, 0, 0, 0]
    assert [row.cumulative_withdrawn for row in ledger] == [0.0, 0.0, 6000.0, 12000.0]
    assert ledger[-1].cumulative_contributed == 24000.0


def test_shortfall_is_capped_not_reported():
    ledger = run(
        SimulationConfig(
            base_contribution=100,
            contribution_years=1,
            annual_return_percent=0,
            base_withdrawal=1000,
            withdrawal_years=2,
        )
    )

    year_two, year_three = ledger[1], ledger[2]
    assert year_two.monthly_withdrawal == 1000.0
    assert year_two.annual_withdrawal == 1200.0
    assert year_two.end_balance == 0
    # the phase is still active, so zero withdrawn is a number, not "not applicable"
    assert year_three.annual_withdrawal == 0.0
    assert year_three.cumulative_withdrawn == 1200.0


def test_contribution_only_run_has_no_withdrawal_values():
    ledger = run(example_config(withdrawal_years=0))

    assert len(ledger) == 10
    for row in ledger:
        assert row.monthly_withdrawal is None
        assert row.annual_withdrawal is None
        assert row.cumulative_withdrawn == 0.0


def test_withdrawal_only_run_starts_in_year_one():
    ledger = run(example_config(contribution_years=0, withdrawal_years=3))

    assert ledger[0].monthly_contribution is None
    assert ledger[0].monthly_withdrawal == 10000.0
    # nothing to withdraw from an empty account
    assert all(row.annual_withdrawal == 0.0 for row in ledger)


def test_interest_is_the_residual_of_the_year():
    ledger = run(example_config())

    for row in ledger:
        withdrawn = row.annual_withdrawal or 0.0
        residual = row.end_balance - (row.begin_balance + row.annual_contribution - withdrawn)
        assert isclose(row.interest_earned, residual, abs_tol=2)


def test_balances_are_whole_units_and_flows_keep_cents():
    ledger = run(example_config(base_contribution=1234.5678))

    assert ledger[0].monthly_contribution == 1234.57
    for row in ledger:
        assert row.end_balance == int(row.end_balance)
        assert row.interest_earned == int(row.interest_earned)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"contribution_years": -1}, "contribution_years must not be negative"),
        ({"contribution_years": 0, "withdrawal_years": 0}, "must be at least 1"),
        ({"annual_return_percent": float("nan")}, "annual_return_percent must be a finite number"),
        ({"base_withdrawal": float("inf")}, "base_withdrawal must be a finite number"),
        ({"contribution_step_up_percent": -5}, "contribution_step_up_percent must not be negative"),
        ({"annual_return_percent": -1200}, "annual_return_percent must be greater than -1200"),
    ],
)
def test_invalid_config_returns_config_error(overrides, message):
    result = simulate(example_config(**overrides))

    assert isinstance(result, ConfigError)
    assert any(message in error for error in result.errors)


def test_balance_never_negative_with_growth_and_heavy_withdrawals():
    ledger = run(example_config(base_withdrawal=50000))

    assert ledger[-1].end_balance == 0
    for row in ledger:
        assert row.end_balance >= 0


def test_monthly_contribution_ties_round_up_to_the_cent():
    ledger = run(example_config(base_contribution=0.125, contribution_years=1, withdrawal_years=0))

    assert ledger[0].monthly_contribution == 0.13


def test_runaway_step_up_is_a_config_error():
    """A doubling SIP over 1100 years overflows a float instead of crashing."""
    result = simulate(
        SimulationConfig(
            base_contribution=0,
            contribution_years=1100,
            annual_return_percent=0,
            contribution_step_up_percent=100,
        )
    )

    assert isinstance(result, ConfigError)
    assert result.errors == [OVERFLOW_ERROR]


def test_overflowing_balance_is_a_config_error():
    result = simulate(example_config(base_contribution=1e307, withdrawal_years=0))

    assert isinstance(result, ConfigError)
    assert result.errors == [OVERFLOW_ERROR]
