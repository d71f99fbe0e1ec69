class SimulationError(Exception):
    """Base class for every error that aborts a portfolio simulation."""


class InvalidAllocation(SimulationError, ValueError):
    """Tickers/allocations or starting value don't describe a valid portfolio."""


class UnknownTicker(SimulationError, ValueError):
    """The price history provider has no data for a ticker."""

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(f"No price data found for ticker '{ticker}'.")


class DataGapError(SimulationError):
    """A ticker is missing a usable price inside the simulation window."""


class UpstreamUnavailable(SimulationError):
    """The price history provider failed. Callers may retry the request."""
