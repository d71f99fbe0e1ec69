from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from src import config

Period = Literal["1mo", "3mo", "6mo", "1y", "2y", "5y", "10y", "15y", "20y"]


class PortfolioSimulationParams(BaseModel):
    """Request body for Portfolio simulation endpoint."""
    
    tickers: List[str] = Field(..., description="List of ETF tickers")
    allocations: List[float] = Field(..., description="List of allocations (percent) corresponding to each ticker")
    starting_value: float = Field(1000, gt=0, description="Portfolio starting value in USD")
    period: Period = Field("1y", description="Historical data period")
    personal_contributions: float = Field(0.0, ge=0, description="Amount of personal contributions made periodically")
    contribution_period: int = Field(0, ge=0, description="Number of market days between contributions (0 for no contributions)")
    include_dividends: bool = Field(True, description="Whether to include dividends in returns")
    is_drip_active: bool = Field(False, description="Whether dividend reinvestment plan (DRIP) is active")
    annual_risk_free_return: float = Field(config.DEFAULT_ANNUAL_RISK_FREE_RETURN, description="Annual risk-free return rate for Sharpe ratio calculation")
    max_data_points: Optional[int] = Field(None, ge=1, description="Maximum points returned per series (omit for the server default)")

    @field_validator("tickers")
    @classmethod
    def normalize_tickers(cls, tickers: List[str]) -> List[str]:
        return [ticker.strip().upper() for ticker in tickers]

    class Config:
        extra = "forbid"
