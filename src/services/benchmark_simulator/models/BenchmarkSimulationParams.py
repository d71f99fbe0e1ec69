from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src import config
from src.services.portfolio_simulator.models.PortfolioSimulationParams import Period


class BenchmarkSimulationParams(BaseModel):
    """Request body for Benchmark simulation endpoint. The benchmark is held as a 100% position."""

    ticker: str = Field(..., description="Benchmark ETF ticker")
    starting_value: float = Field(1000, gt=0, description="Starting value in USD")
    period: Period = Field("1y", description="Historical data period")
    personal_contributions: float = Field(0.0, ge=0, description="Amount of personal contributions made periodically")
    contribution_period: int = Field(0, ge=0, description="Number of market days between contributions (0 for no contributions)")
    include_dividends: bool = Field(True, description="Whether to include dividends in returns")
    is_drip_active: bool = Field(False, description="Whether dividend reinvestment plan (DRIP) is active")
    annual_risk_free_return: float = Field(config.DEFAULT_ANNUAL_RISK_FREE_RETURN, description="Annual risk-free return rate for Sharpe ratio calculation")
    max_data_points: Optional[int] = Field(None, ge=1, description="Maximum points returned per series (omit for the server default)")

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, ticker: str) -> str:
        return ticker.strip().upper()

    class Config:
        extra = "forbid"
