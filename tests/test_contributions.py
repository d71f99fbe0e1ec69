import numpy as np
import pandas as pd
import pytest

from src.services.portfolio_simulator.contributions import ContributionScheduler


def test_monthly_contributions_over_a_year_of_trading_days():
    dates = pd.bdate_range("2024-01-02", periods=252)
    scheduler = ContributionScheduler(contribution_period=21, personal_contribution_amount=500.0)

    events = scheduler.get_events(dates)

    assert [e.index for e in events] == list(range(21, 252, 21))
    assert len(events) == 11
    assert all(e.amount == 500.0 for e in events)
    assert events[0].date == dates[21]


def test_day_zero_never_receives_a_contribution():
    scheduler = ContributionScheduler(contribution_period=1, personal_contribution_amount=10.0)

    assert scheduler.get_contribution(0, pd.Timestamp("2024-01-02")) is None
    assert scheduler.get_contribution(1, pd.Timestamp("2024-01-03")).amount == 10.0


@pytest.mark.parametrize("period, amount", [(0, 500.0), (None, 500.0), (21, 0.0)])
def test_disabled_schedules_fire_nothing(period, amount):
    scheduler = ContributionScheduler(contribution_period=period, personal_contribution_amount=amount)

    assert not scheduler.is_enabled
    assert scheduler.get_events(pd.bdate_range("2024-01-02", periods=100)) == []


def test_negative_inputs_are_rejected():
    with pytest.raises(ValueError):
        ContributionScheduler(contribution_period=-1, personal_contribution_amount=10.0)
    with pytest.raises(ValueError):
        ContributionScheduler(contribution_period=5, personal_contribution_amount=-10.0)


def test_distribution_follows_current_value_not_original_fraction():
    shares = np.array([10.0, 10.0])
    prices = np.array([30.0, 10.0])  # worth 300 and 100

    bought = ContributionScheduler.distribute(400.0, shares, prices, np.array([0.5, 0.5]))

    np.testing.assert_allclose(bought * prices, [300.0, 100.0])


def test_distribution_falls_back_to_allocation_when_worthless():
    bought = ContributionScheduler.distribute(
        100.0, np.array([0.0, 0.0]), np.array([10.0, 20.0]), np.array([0.25, 0.75])
    )
    np.testing.assert_allclose(bought, [2.5, 3.75])
