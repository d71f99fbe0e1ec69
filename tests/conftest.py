import numpy as np
import pandas as pd
import pytest

from fastapi.testclient import TestClient
from typing import Dict, Optional, Sequence

from src.main import app
from src.services.portfolio_simulator.errors import UnknownTicker, UpstreamUnavailable
from src.services.price_history.provider import PriceHistoryProvider, get_price_history_provider


def make_history(
    closes: Sequence[float],
    dividends: Optional[Dict[int, float]] = None,
    start: str = "2024-01-02"
) -> pd.DataFrame:
    dates = pd.bdate_range(start, periods=len(closes))
    dividend_column = np.zeros(len(closes), dtype=np.float64)
    for i, amount in (dividends or {}).items():
        dividend_column[i] = amount
    return pd.DataFrame(
        {"Close": np.asarray(closes, dtype=np.float64), "Dividends": dividend_column},
        index=dates
    )


def random_walk(n: int, start_price: float, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return start_price * np.cumprod(1.0 + rng.normal(0.0004, 0.01, n))


class StaticPriceHistoryProvider(PriceHistoryProvider):
    """Serves fixed histories; tickers listed in `failing` raise UpstreamUnavailable."""

    def __init__(self, histories: Dict[str, pd.DataFrame], failing: Sequence[str] = ()):
        self.histories = histories
        self.failing = set(failing)
        self.requests = []

    def get_history(self, ticker: str, period: str) -> pd.DataFrame:
        self.requests.append((ticker, period))
        if ticker in self.failing:
            raise UpstreamUnavailable(f"Price provider failed for '{ticker}'")
        if ticker not in self.histories:
            raise UnknownTicker(ticker)
        return self.clean_history(self.histories[ticker])


@pytest.fixture
def histories() -> Dict[str, pd.DataFrame]:
    quarterly = {i: 1.75 for i in range(40, 252, 63)}
    gap = make_history(np.full(252, 30.0))
    gap = gap.drop(gap.index[100])
    return {
        "SPY": make_history(random_walk(252, 470.0, seed=1), dividends=quarterly),
        "QQQ": make_history(random_walk(252, 400.0, seed=2)),
        "SCHD": make_history(random_walk(252, 75.0, seed=3), dividends={i: 0.6 for i in range(50, 252, 63)}),
        "FLAT": make_history(np.full(252, 100.0)),
        "LONG": make_history(random_walk(1000, 50.0, seed=4)),
        "GAPPY": gap,
        "HOLEY": make_history(np.r_[np.full(100, 20.0), np.nan, np.full(151, 20.0)]),
    }


@pytest.fixture
def provider(histories) -> StaticPriceHistoryProvider:
    return StaticPriceHistoryProvider(histories, failing=["DOWN"])


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_price_history_provider] = lambda: provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
