import logging

import numpy as np
import pandas as pd

from typing import Dict, Sequence, Optional

from src.services.portfolio_simulator.allocation import normalize_allocations
from src.services.portfolio_simulator.contributions import ContributionScheduler
from src.services.portfolio_simulator.errors import InvalidAllocation
from src.services.portfolio_simulator.models.PortfolioSimulationResult import PortfolioSimulationResult
from src.services.portfolio_simulator.models.PortfolioState import SimulationResult
from src.services.portfolio_simulator.return_analytics_mixin import ReturnAnalyticsMixin
from src.services.portfolio_simulator.SimulationEngine import SimulationEngine
from src.services.price_history.provider import (
    PriceHistoryProvider,
    get_price_history,
    get_price_history_provider,
)

logger = logging.getLogger(__name__)


class Portfolio(ReturnAnalyticsMixin):

    def __init__(
        self,
        tickers: Sequence[str],
        allocations: Sequence[float],
        starting_portfolio_value: float,
        provider: Optional[PriceHistoryProvider] = None
    ):
        self.tickers, self.allocations = normalize_allocations(tickers, allocations)
        if not (starting_portfolio_value > 0):
            raise InvalidAllocation(
                f"Starting value must be greater than 0, got {starting_portfolio_value}"
            )

        self.starting_portfolio_value: float = float(starting_portfolio_value)
        self.provider: PriceHistoryProvider = provider or get_price_history_provider()

    def get_historical_data(self, period: str) -> Dict[str, pd.DataFrame]:
        """Close and Dividends history per ticker, fetched fresh for every simulation."""
        return get_price_history(self.provider, self.tickers, period)

    def get_engine(
        self,
        period: str,
        personal_contributions: float,
        contribution_period: int,
        include_dividends: bool,
        is_drip_active: bool
    ) -> SimulationEngine:
        return SimulationEngine(
            tickers=self.tickers,
            allocation_fractions=self.allocations,
            starting_value=self.starting_portfolio_value,
            histories=self.get_historical_data(period),
            scheduler=ContributionScheduler(contribution_period, personal_contributions),
            include_dividends=include_dividends,
            is_drip_active=is_drip_active
        )

    def get_returns(self, engine: SimulationEngine) -> pd.DataFrame:
        """
        Run the engine and tabulate its daily states.

        Returns DataFrame with columns: Share Price, Shares, Total Value, Accumulated Dividends, Contribution
        - Share Price: price of one synthetic portfolio unit (the ticker close for single-ticker portfolios)
        - Shares: units held, i.e. invested value (cash dividends excluded) / Share Price
        - Total Value: total portfolio value in dollars, cash dividends included
        - Accumulated Dividends: dividends held as cash (always 0 with DRIP or dividends excluded)
        - Contribution: personal contribution invested at that close
        """
        states = engine.run()
        share_prices = engine.get_unit_prices()
        invested_values = np.array([s.invested_value for s in states], dtype=np.float64)

        return pd.DataFrame(
            {
                self.RETURNS_COLUMNS[0]: share_prices,
                self.RETURNS_COLUMNS[1]: invested_values / share_prices,
                self.RETURNS_COLUMNS[2]: [s.total_value for s in states],
                self.RETURNS_COLUMNS[3]: [s.cash_dividends_accrued for s in states],
                self.RETURNS_COLUMNS[4]: [s.contribution for s in states],
            },
            index=engine.dates
        )

    def simulate(
        self,
        period: str,
        personal_contributions: float,
        contribution_period: int,
        include_dividends: bool,
        is_drip_active: bool,
        annual_risk_free_return: float
    ) -> SimulationResult:
        logger.info(
            "Simulating %s over %s (contributions %.2f every %s days, dividends=%s, drip=%s)",
            dict(zip(self.tickers, self.allocations.tolist())), period, personal_contributions,
            contribution_period, include_dividends, is_drip_active
        )
        engine = self.get_engine(
            period=period,
            personal_contributions=personal_contributions,
            contribution_period=contribution_period,
            include_dividends=include_dividends,
            is_drip_active=is_drip_active
        )
        returns_df = self.get_returns(engine)

        final_shares = pd.Series(
            {h.ticker: h.shares for h in engine.states[-1].holdings}, dtype=np.float64
        )
        result = SimulationResult(
            states=engine.states,
            returns=returns_df,
            annualized_return=self.get_annualized_return(returns_df),
            sharpe_ratio=self.get_sharpe_ratio(returns_df, annual_risk_free_return),
            final_value=self.get_final_value(returns_df),
            projected_annual_dividend_income=self.get_projected_annual_dividend_income(
                dividends=engine.get_dividend_history(),
                final_shares=final_shares,
                include_dividends=include_dividends
            )
        )
        logger.info(
            "Simulated %d days: final value %.2f, annualized return %.4f, sharpe %.4f",
            len(returns_df), result.final_value, result.annualized_return, result.sharpe_ratio
        )
        return result

    def get_returns_result(
        self,
        period: str,
        personal_contributions: float,
        contribution_period: int,
        include_dividends: bool,
        is_drip_active: bool,
        annual_risk_free_return: float,
        max_data_points: Optional[int] = None
    ) -> PortfolioSimulationResult:
        """
        Get complete simulation results including returns data and performance metrics.
        """
        result = self.simulate(
            period=period,
            personal_contributions=personal_contributions,
            contribution_period=contribution_period,
            include_dividends=include_dividends,
            is_drip_active=is_drip_active,
            annual_risk_free_return=annual_risk_free_return
        )

        return PortfolioSimulationResult.from_dataframe_with_metrics(
            result.returns,
            result.annualized_return,
            result.sharpe_ratio,
            result.final_value,
            result.projected_annual_dividend_income,
            max_data_points=max_data_points or 0
        )
