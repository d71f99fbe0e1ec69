import math

import numpy as np

from typing import List, Sequence, Tuple

from src import config
from src.services.portfolio_simulator.errors import DataGapError, InvalidAllocation


def normalize_allocations(
    tickers: Sequence[str],
    allocations: Sequence[float]
) -> Tuple[List[str], np.ndarray]:
    """
    Validate (ticker, allocation %) pairs and convert the percentages to fractions.

    Allocations must sum to 100 (within `config.ALLOCATION_TOLERANCE`); they are
    never rescaled, so [40, 40] is rejected rather than treated as [50, 50].
    """
    if len(tickers) == 0:
        raise InvalidAllocation("Portfolio must contain at least one ticker.")
    if len(tickers) != len(allocations):
        raise InvalidAllocation("Length of tickers and allocations must match.")

    normalized_tickers: List[str] = [str(t).strip().upper() for t in tickers]
    if any(t == "" for t in normalized_tickers):
        raise InvalidAllocation("Tickers must not be blank.")

    duplicates = sorted({t for t in normalized_tickers if normalized_tickers.count(t) > 1})
    if duplicates:
        raise InvalidAllocation(f"Duplicate tickers in portfolio: {', '.join(duplicates)}")

    for ticker, allocation in zip(normalized_tickers, allocations):
        if not math.isfinite(allocation):
            raise InvalidAllocation(f"Allocation for {ticker} must be a finite number.")
        if allocation < 0:
            raise InvalidAllocation(f"Allocation for {ticker} must be non-negative, got {allocation}%")

    # Validate allocations sum to ~100%
    total_allocation = float(sum(allocations))
    if abs(total_allocation - 100.0) > config.ALLOCATION_TOLERANCE:
        raise InvalidAllocation(f"Allocations must sum to 100%, got {total_allocation}%")

    fractions = np.array(allocations, dtype=np.float64) / 100.0  # Convert to decimal
    return normalized_tickers, fractions


def get_initial_shares(
    starting_value: float,
    allocation_fractions: np.ndarray,
    first_closes: np.ndarray
) -> np.ndarray:
    """Shares bought per ticker at the first close: starting_value * fraction / price."""
    if not (starting_value > 0):
        raise InvalidAllocation(f"Starting value must be greater than 0, got {starting_value}")
    if np.any(~np.isfinite(first_closes)) or np.any(first_closes <= 0):
        raise DataGapError("First trading day has no usable close price for every ticker.")

    # Calculate dollar allocation for each position
    dollar_allocations = float(starting_value) * allocation_fractions
    return dollar_allocations / first_closes
