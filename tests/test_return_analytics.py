import numpy as np
import pandas as pd
import pytest

from src.services.portfolio_simulator.return_analytics_mixin import ReturnAnalyticsMixin


def returns_frame(total_values, contributions=None):
    n = len(total_values)
    return pd.DataFrame(
        {
            "Total Value": np.asarray(total_values, dtype=np.float64),
            "Contribution": np.asarray(contributions if contributions is not None else np.zeros(n), dtype=np.float64),
        },
        index=pd.bdate_range("2024-01-02", periods=n)
    )


@pytest.fixture
def analytics():
    return ReturnAnalyticsMixin()


def test_flat_portfolio_has_zero_annualized_return(analytics):
    assert analytics.get_annualized_return(returns_frame([100.0] * 252)) == 0.0


def test_contributions_do_not_count_as_returns(analytics):
    # Flat prices, 500 added at the close of days 2 and 4
    returns = returns_frame([1000.0, 1000.0, 1500.0, 1500.0, 2000.0], [0, 0, 500.0, 0, 500.0])

    np.testing.assert_allclose(analytics.get_daily_returns(returns), [0.0, 0.0, 0.0, 0.0])
    assert analytics.get_annualized_return(returns) == pytest.approx(0.0)


def test_sub_period_returns_are_chain_linked(analytics):
    # +10% then a contribution, then +10% on the larger base
    returns = returns_frame([100.0, 110.0, 1210.0], [0.0, 0.0, 1089.0])

    np.testing.assert_allclose(analytics.get_daily_returns(returns), [0.10, 0.10])
    expected = 1.21 ** (252 / 2) - 1.0
    assert analytics.get_annualized_return(returns) == pytest.approx(expected)


def test_annualization_uses_elapsed_trading_days(analytics):
    # 253 closes are 252 elapsed days: one full year
    values = 100.0 * 1.1 ** (np.arange(253) / 252)

    assert analytics.get_annualized_return(returns_frame(values)) == pytest.approx(0.10)


def test_single_day_has_no_return_or_sharpe(analytics):
    returns = returns_frame([100.0])

    assert analytics.get_annualized_return(returns) == 0.0
    assert analytics.get_sharpe_ratio(returns, 0.045) == 0.0


def test_total_loss_annualizes_to_minus_one(analytics):
    assert analytics.get_annualized_return(returns_frame([100.0, 0.0])) == -1.0


def test_sharpe_matches_the_daily_formula(analytics):
    values = [100.0, 101.0, 100.5, 102.0, 101.0, 103.0]
    daily = np.diff(values) / values[:-1]
    expected = (np.mean(daily) - 0.045 / 252) / np.std(daily, ddof=1) * np.sqrt(252)

    assert analytics.get_sharpe_ratio(returns_frame(values), 0.045) == pytest.approx(expected)


@pytest.mark.parametrize("growth", [0.0, 0.001])
def test_sharpe_is_zero_without_volatility(analytics, growth):
    values = 100.0 * (1.0 + growth) ** np.arange(60)

    sharpe = analytics.get_sharpe_ratio(returns_frame(values), 0.045)

    assert sharpe == 0.0
    assert np.isfinite(sharpe)


def test_final_value_is_the_last_total_value(analytics):
    assert analytics.get_final_value(returns_frame([100.0, 90.0, 125.5])) == 125.5


def test_projected_income_uses_the_trailing_year(analytics):
    dates = pd.bdate_range("2024-01-02", periods=400)
    dividends = pd.DataFrame(0.0, index=dates, columns=["A", "B"])
    dividends.iloc[[10, 100, 200, 300, 390], 0] = 1.0  # 10 and 100 fall before the trailing year
    dividends.iloc[[250, 350], 1] = 0.5
    final_shares = pd.Series({"A": 10.0, "B": 4.0})

    income = analytics.get_projected_annual_dividend_income(dividends, final_shares, include_dividends=True)

    assert income == pytest.approx(3 * 1.0 * 10.0 + 2 * 0.5 * 4.0)


def test_projected_income_annualizes_short_windows(analytics):
    dates = pd.bdate_range("2024-01-02", periods=63)
    dividends = pd.DataFrame({"A": 0.0}, index=dates)
    dividends.iloc[30, 0] = 0.25

    income = analytics.get_projected_annual_dividend_income(
        dividends, pd.Series({"A": 100.0}), include_dividends=True
    )

    assert income == pytest.approx(0.25 * 100.0 * 4)


def test_projected_income_is_zero_when_dividends_are_excluded(analytics):
    dividends = pd.DataFrame({"A": [0.0, 1.0]}, index=pd.bdate_range("2024-01-02", periods=2))

    assert analytics.get_projected_annual_dividend_income(
        dividends, pd.Series({"A": 10.0}), include_dividends=False
    ) == 0.0
