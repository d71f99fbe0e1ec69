import logging

import pandas as pd
import yfinance as yf

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from src.services.portfolio_simulator.errors import UnknownTicker, UpstreamUnavailable

logger = logging.getLogger(__name__)


class PriceHistoryProvider(ABC):
    """
    Source of daily price history for a single ticker.

    Implementations return a DataFrame indexed by naive trading dates (strictly
    increasing) with at least the columns in `HISTORY_COLUMNS`. `Dividends` holds
    the dividend per share paid on that date, 0 otherwise.
    """

    HISTORY_COLUMNS: List[str] = ['Close', 'Dividends']

    @abstractmethod
    def get_history(self, ticker: str, period: str) -> pd.DataFrame:
        raise NotImplementedError

    @classmethod
    def clean_history(cls, history: pd.DataFrame) -> pd.DataFrame:
        """
        Keep the history columns, strip timezones and drop duplicated dates.

        Rows with no close outside the first/last priced dates are dropped: yfinance adds them
        for dividends dated beyond the price range (e.g. an ex-date today with no close yet),
        and they are not trading days. Missing closes between priced dates are kept as gaps.
        """
        history = history.copy()
        if 'Dividends' not in history.columns:
            history['Dividends'] = 0.0
        history = history[cls.HISTORY_COLUMNS].copy()
        history['Dividends'] = history['Dividends'].fillna(0.0)

        index = pd.DatetimeIndex(history.index)
        if index.tz is not None:
            index = index.tz_localize(None)
        history.index = index.normalize()
        history = history[~history.index.duplicated(keep='last')].sort_index()

        priced_dates = history.index[history['Close'].notna()]
        if len(priced_dates) == 0:
            return history.iloc[0:0]
        out_of_range = (history.index < priced_dates[0]) | (history.index > priced_dates[-1])
        if out_of_range.any():
            logger.debug("Dropping %d unpriced rows outside the price range", int(out_of_range.sum()))
        return history[~out_of_range]


class YFinancePriceHistoryProvider(PriceHistoryProvider):

    def get_history(self, ticker: str, period: str) -> pd.DataFrame:
        # Raw closes: adjusted closes already price dividends in
        try:
            history: pd.DataFrame = yf.Ticker(ticker).history(period=period, auto_adjust=False)
        except Exception as e:
            logger.warning("yfinance history failed for %s (%s): %s", ticker, period, e)
            raise UpstreamUnavailable(f"Price provider failed for '{ticker}': {e}") from e

        if history is None or history.empty:
            raise UnknownTicker(ticker)

        return self.clean_history(history)


def get_price_history(
    provider: PriceHistoryProvider,
    tickers: Sequence[str],
    period: str
) -> Dict[str, pd.DataFrame]:
    """
    Fetch every ticker's history before the simulation starts.
    Raises on the first ticker that fails; nothing partial is returned.
    """
    histories: Dict[str, pd.DataFrame] = {}
    for ticker in tickers:
        history = provider.get_history(ticker, period)
        if history is None or history.empty:
            raise UnknownTicker(ticker)
        histories[ticker] = history
        logger.debug("Fetched %d rows of %s history for %s", len(history), period, ticker)
    return histories


_default_provider: PriceHistoryProvider = YFinancePriceHistoryProvider()


def get_price_history_provider() -> PriceHistoryProvider:
    return _default_provider
