import logging

import numpy as np
import pandas as pd

from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from src.services.portfolio_simulator.allocation import get_initial_shares
from src.services.portfolio_simulator.contributions import ContributionScheduler
from src.services.portfolio_simulator.errors import DataGapError
from src.services.portfolio_simulator.models.PortfolioState import Holding, PortfolioState

logger = logging.getLogger(__name__)


def align_price_histories(
    tickers: Sequence[str],
    histories: Dict[str, pd.DataFrame]
) -> Tuple[pd.DatetimeIndex, np.ndarray, np.ndarray]:
    """
    Build the joint trading calendar for all tickers.

    The window runs from the latest first date to the earliest last date. Inside it,
    every ticker must have a positive close on every date any ticker traded.

    Returns (dates, close_prices, dividends) with arrays of shape (num_tickers, num_days).
    """
    start = max(histories[t].index[0] for t in tickers)
    end = min(histories[t].index[-1] for t in tickers)
    if start > end:
        raise DataGapError(
            f"Price histories for {', '.join(tickers)} don't overlap in the requested period."
        )

    windows = {t: histories[t].loc[start:end] for t in tickers}
    calendar = windows[tickers[0]].index
    for t in tickers[1:]:
        calendar = calendar.union(windows[t].index)

    close_rows: List[np.ndarray] = []
    dividend_rows: List[np.ndarray] = []
    for t in tickers:
        history = windows[t].reindex(calendar)
        closes = history['Close'].to_numpy(dtype=np.float64)
        missing = ~np.isfinite(closes) | (closes <= 0)
        if missing.any():
            first_missing = calendar[int(np.argmax(missing))]
            raise DataGapError(f"{t} has no price on {first_missing.date()}")
        close_rows.append(closes)
        dividend_rows.append(history['Dividends'].fillna(0.0).to_numpy(dtype=np.float64))

    return calendar, np.vstack(close_rows), np.vstack(dividend_rows)


class SimulationStatus(str, Enum):
    INITIALIZED = "initialized"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class SimulationEngine():
    """
    Day-by-day replay of a portfolio over its joint trading calendar.

    Each trading day after the first is processed in a fixed order:
      1. close prices for every holding
      2. dividends: DRIP buys more of the paying ticker at that close, otherwise cash accrues
      3. scheduled personal contribution, split by current value weight
      4. snapshot of the day's PortfolioState
    Day 0 only opens the positions. An engine runs once; failures are not resumable.
    """

    def __init__(
        self,
        tickers: Sequence[str],
        allocation_fractions: np.ndarray,
        starting_value: float,
        histories: Dict[str, pd.DataFrame],
        scheduler: ContributionScheduler,
        include_dividends: bool,
        is_drip_active: bool
    ):
        self.tickers: List[str] = list(tickers)
        self.allocation_fractions: np.ndarray = np.asarray(allocation_fractions, dtype=np.float64)
        self.starting_value: float = float(starting_value)
        self.scheduler: ContributionScheduler = scheduler
        self.include_dividends: bool = include_dividends
        self.is_drip_active: bool = include_dividends and is_drip_active

        self.dates, self.close_prices, self.dividends = align_price_histories(self.tickers, histories)
        self.initial_shares: Optional[np.ndarray] = None
        self.states: Tuple[PortfolioState, ...] = ()
        self.status: SimulationStatus = SimulationStatus.INITIALIZED

    @property
    def num_days(self) -> int:
        return len(self.dates)

    def run(self) -> Tuple[PortfolioState, ...]:
        if self.status != SimulationStatus.INITIALIZED:
            raise RuntimeError(f"Simulation already {self.status.value}; create a new engine to rerun it.")

        self.status = SimulationStatus.RUNNING
        try:
            self.states = tuple(self._walk())
        except Exception:
            self.status = SimulationStatus.FAILED
            raise
        self.status = SimulationStatus.COMPLETED
        return self.states

    def _walk(self) -> List[PortfolioState]:
        self.initial_shares = get_initial_shares(
            self.starting_value, self.allocation_fractions, self._get_closes(0)
        )
        shares: np.ndarray = self.initial_shares.copy()
        cash_dividends: float = 0.0

        states: List[PortfolioState] = [self._snapshot(0, shares, cash_dividends, 0.0)]

        for i in range(1, self.num_days):
            closes = self._get_closes(i)

            if self.include_dividends:
                dividend_ps = self.dividends[:, i]
                if np.any(dividend_ps > 0.0):
                    dividend_cash = shares * np.maximum(dividend_ps, 0.0)
                    if self.is_drip_active:
                        # Reinvested at the same close that paid the dividend
                        shares = shares + dividend_cash / closes
                    else:
                        cash_dividends += float(dividend_cash.sum())
                    logger.debug("Day %d: dividends of %.4f received", i, dividend_cash.sum())

            contribution: float = 0.0
            event = self.scheduler.get_contribution(i, self.dates[i])
            if event is not None:
                shares = shares + self.scheduler.distribute(
                    event.amount, shares, closes, self.allocation_fractions
                )
                contribution = event.amount
                logger.debug("Day %d: contribution of %.2f invested", i, contribution)

            states.append(self._snapshot(i, shares, cash_dividends, contribution))

        return states

    def _get_closes(self, i: int) -> np.ndarray:
        closes = self.close_prices[:, i]
        if np.any(~np.isfinite(closes)) or np.any(closes <= 0):
            raise DataGapError(f"Missing close price on {self.dates[i].date()}")
        return closes

    def _snapshot(
        self,
        i: int,
        shares: np.ndarray,
        cash_dividends: float,
        contribution: float
    ) -> PortfolioState:
        closes = self.close_prices[:, i]
        holdings = tuple(
            Holding(ticker=t, shares=float(s), allocation_fraction=float(f))
            for t, s, f in zip(self.tickers, shares, self.allocation_fractions)
        )
        return PortfolioState(
            date=self.dates[i],
            holdings=holdings,
            prices=tuple((t, float(p)) for t, p in zip(self.tickers, closes)),
            cash_dividends_accrued=cash_dividends,
            total_value=float(shares @ closes) + cash_dividends,
            contribution=contribution,
        )

    def get_unit_prices(self) -> np.ndarray:
        """
        Price of one synthetic portfolio unit per day.

        The unit tracks the buy-and-hold basket opened on day 0, scaled so its first price is
        the allocation-weighted first close. For a single ticker it is exactly that ticker's close.
        """
        if self.initial_shares is None:
            raise RuntimeError("Simulation has not run yet.")
        initial_price = float(self.allocation_fractions @ self.close_prices[:, 0])
        initial_units = self.starting_value / initial_price
        return (self.initial_shares @ self.close_prices) / initial_units

    def get_dividend_history(self) -> pd.DataFrame:
        return pd.DataFrame(self.dividends.T, index=self.dates, columns=self.tickers)
