from typing import List
from datetime import date
from pydantic import BaseModel

from src.services.portfolio_simulator.models.PortfolioSimulationResult import PortfolioSimulationResult


class BenchmarkSimulationResult(BaseModel):
    ticker: str
    dates: List[date]
    total_values: List[float]
    annualized_return: float
    sharpe_ratio: float
    final_value: float
    projected_annual_dividend_income: float

    @classmethod
    def from_portfolio_result(
        cls,
        ticker: str,
        result: PortfolioSimulationResult
    ) -> "BenchmarkSimulationResult":
        return cls(
            ticker=ticker,
            dates=result.dates,
            total_values=result.total_values,
            annualized_return=result.annualized_return,
            sharpe_ratio=result.sharpe_ratio,
            final_value=result.final_value,
            projected_annual_dividend_income=result.projected_annual_dividend_income
        )
