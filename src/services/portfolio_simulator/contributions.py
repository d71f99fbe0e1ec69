import numpy as np
import pandas as pd

from typing import List, Optional, Sequence

from src.services.portfolio_simulator.models.PortfolioState import ContributionEvent


class ContributionScheduler():
    """
    Periodic personal contributions, counted in trading days rather than calendar days.

    A contribution fires on trading-day index i when i > 0 and i % contribution_period == 0.
    Day 0 is covered by the starting value.
    """

    def __init__(self, contribution_period: Optional[int], personal_contribution_amount: float):
        if contribution_period is not None and contribution_period < 0:
            raise ValueError(f"Contribution period must be >= 0, got {contribution_period}")
        if personal_contribution_amount < 0:
            raise ValueError(f"Personal contributions must be >= 0, got {personal_contribution_amount}")

        self.contribution_period: int = int(contribution_period or 0)
        self.personal_contribution_amount: float = float(personal_contribution_amount)

    @property
    def is_enabled(self) -> bool:
        return self.contribution_period > 0 and self.personal_contribution_amount > 0

    def is_contribution_day(self, i: int) -> bool:
        return self.contribution_period > 0 and i > 0 and i % self.contribution_period == 0

    def get_contribution(self, i: int, date: pd.Timestamp) -> Optional[ContributionEvent]:
        if not self.is_enabled or not self.is_contribution_day(i):
            return None
        return ContributionEvent(index=i, date=date, amount=self.personal_contribution_amount)

    def get_events(self, dates: Sequence[pd.Timestamp]) -> List[ContributionEvent]:
        events = (self.get_contribution(i, date) for i, date in enumerate(dates))
        return [event for event in events if event is not None]

    @staticmethod
    def distribute(
        amount: float,
        shares: np.ndarray,
        prices: np.ndarray,
        fallback_fractions: np.ndarray
    ) -> np.ndarray:
        """
        Shares to buy per holding so `amount` is split by each holding's current value weight.
        If the holdings are worth nothing, the original allocation fractions are used instead.
        """
        values = shares * prices
        total = values.sum()
        weights = values / total if total > 0 else fallback_fractions
        return amount * weights / prices
