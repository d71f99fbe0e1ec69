import pandas as pd

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Holding:
    ticker: str
    shares: float
    allocation_fraction: float


@dataclass(frozen=True)
class ContributionEvent:
    index: int
    date: pd.Timestamp
    amount: float


@dataclass(frozen=True)
class PortfolioState:
    """Snapshot of the portfolio at the close of one trading day."""

    date: pd.Timestamp
    holdings: Tuple[Holding, ...]
    # (ticker, close) pairs
    prices: Tuple[Tuple[str, float], ...]
    cash_dividends_accrued: float
    total_value: float
    # Personal contribution invested at this close (0 when none fired)
    contribution: float = 0.0

    @property
    def invested_value(self) -> float:
        prices = dict(self.prices)
        return sum(h.shares * prices[h.ticker] for h in self.holdings)

    def get_price(self, ticker: str) -> float:
        return dict(self.prices)[ticker]

    def get_shares(self, ticker: str) -> float:
        for holding in self.holdings:
            if holding.ticker == ticker:
                return holding.shares
        raise KeyError(ticker)


@dataclass(frozen=True)
class SimulationResult:
    states: Tuple[PortfolioState, ...]
    returns: pd.DataFrame = field(repr=False, compare=False)
    annualized_return: float
    sharpe_ratio: float
    final_value: float
    projected_annual_dividend_income: float
