import numpy as np
import pandas as pd

from typing import List


class ReturnAnalyticsMixin():
    """
    Performance statistics over a simulated returns DataFrame.

    Expects `returns` frames with a 'Total Value' column and a 'Contribution' column holding
    the personal contribution invested at each day's close (0 when none).
    """

    YEARLY_MARKET_DAYS: int = 252
    RETURNS_COLUMNS: List[str] = ['Share Price', 'Shares', 'Total Value', 'Accumulated Dividends', 'Contribution']
    # Below this the daily returns are treated as constant
    MIN_RETURN_STD: float = 1e-12

    def get_daily_returns(self, returns: pd.DataFrame) -> np.ndarray:
        """
        Contribution-neutral daily returns.

        Contributions are invested at the close, so the value just before day i's contribution
        is V[i] - C[i]; the sub-period return is that over the previous close's value V[i-1].
        """
        total_values = returns["Total Value"].to_numpy(dtype=np.float64)
        contributions = returns["Contribution"].to_numpy(dtype=np.float64)
        if len(total_values) < 2:
            return np.empty(0, dtype=np.float64)

        value_before = total_values[1:] - contributions[1:]
        value_prev = total_values[:-1]

        daily_returns = np.zeros(len(value_prev), dtype=np.float64)
        valid = value_prev > 0
        daily_returns[valid] = value_before[valid] / value_prev[valid] - 1.0
        return daily_returns

    def get_annualized_return(self, returns: pd.DataFrame) -> float:
        """
        Time-Weighted Return (TWR) annualized over the simulated days.

        TWR isolates investment performance from the impact of cash flows (contributions).
        Sub-period returns between cash flows are chain-linked, then annualized with
        (1 + TWR) ** (252 / elapsed_days) - 1 where elapsed_days is the number of daily returns.
        A single-day simulation has no elapsed time and returns 0. A total loss returns -1.
        """
        daily_returns = self.get_daily_returns(returns)
        elapsed_days = len(daily_returns)
        if elapsed_days == 0:
            return 0.0

        cumulative_twr = float(np.prod(1.0 + daily_returns))
        if cumulative_twr <= 0:
            return -1.0

        return cumulative_twr ** (self.YEARLY_MARKET_DAYS / elapsed_days) - 1.0

    def get_sharpe_ratio(self, returns: pd.DataFrame, annual_risk_free_return: float) -> float:
        """
        Sharpe ratio using contribution-adjusted daily returns, annualized by sqrt(252).
        Returns 0 when volatility is zero or there are fewer than two daily returns.
        """
        daily_returns = self.get_daily_returns(returns)
        if len(daily_returns) < 2:
            return 0.0

        daily_risk_free = annual_risk_free_return / self.YEARLY_MARKET_DAYS
        excess_daily_returns = daily_returns - daily_risk_free

        mean_excess = np.mean(excess_daily_returns)
        std_returns = np.std(daily_returns, ddof=1)

        if not np.isfinite(std_returns) or std_returns < self.MIN_RETURN_STD:
            return 0.0

        daily_sharpe = mean_excess / std_returns
        annualized_sharpe = float(daily_sharpe * np.sqrt(self.YEARLY_MARKET_DAYS))
        return annualized_sharpe if np.isfinite(annualized_sharpe) else 0.0

    def get_final_value(self, returns: pd.DataFrame) -> float:
        return float(returns["Total Value"].iloc[-1])

    def get_projected_annual_dividend_income(
        self,
        dividends: pd.DataFrame,
        final_shares: pd.Series,
        include_dividends: bool
    ) -> float:
        """
        Calculate projected annual dividend income at end of study period.

        Trailing-year dividend per share of each ticker times the final share count, summed.
        Windows shorter than a year are annualized by 252 / num_days.
        """
        if not include_dividends or dividends.empty:
            return 0.0

        num_days = len(dividends)
        lookback_days = min(self.YEARLY_MARKET_DAYS, num_days)
        trailing_dividends = dividends.iloc[num_days - lookback_days:].clip(lower=0.0).sum()

        annualization_factor = self.YEARLY_MARKET_DAYS / lookback_days
        income = (trailing_dividends * final_shares.reindex(trailing_dividends.index).fillna(0.0)).sum()
        return float(income * annualization_factor)
