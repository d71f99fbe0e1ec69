import logging

from fastapi import APIRouter, Depends, HTTPException

from src import config
from src.services.portfolio_simulator.errors import DataGapError, UpstreamUnavailable
from src.services.portfolio_simulator.models.PortfolioSimulationParams import PortfolioSimulationParams
from src.services.portfolio_simulator.models.PortfolioSimulationResult import PortfolioSimulationResult
from src.services.portfolio_simulator.Portfolio import Portfolio
from src.services.price_history.provider import PriceHistoryProvider, get_price_history_provider

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/portfolio-simulator", response_model=PortfolioSimulationResult)
def simulate_portfolio(
    params: PortfolioSimulationParams,
    provider: PriceHistoryProvider = Depends(get_price_history_provider)
) -> PortfolioSimulationResult:
    """
    Simulate a portfolio based on provided parameters.
    
    :param params: Portfolio simulation input parameters
    :type params: PortfolioSimulationParams
    :return: Portfolio simulation results
    :rtype: PortfolioSimulationResult
    """
    try:
        # Create portfolio with tickers, allocations, and starting value
        portfolio = Portfolio(
            tickers=params.tickers,
            allocations=params.allocations,
            starting_portfolio_value=params.starting_value,
            provider=provider
        )

        # Get simulation results
        return portfolio.get_returns_result(
            period=params.period,
            personal_contributions=params.personal_contributions,
            contribution_period=params.contribution_period,
            include_dividends=params.include_dividends,
            is_drip_active=params.is_drip_active,
            annual_risk_free_return=params.annual_risk_free_return,
            max_data_points=params.max_data_points or config.DEFAULT_MAX_DATA_POINTS
        )
    except ValueError as e:
        logger.warning("Rejected portfolio simulation for %s: %s", params.tickers, e)
        raise HTTPException(status_code=400, detail=str(e))
    except DataGapError as e:
        logger.warning("Portfolio simulation for %s hit a data gap: %s", params.tickers, e)
        raise HTTPException(status_code=422, detail=str(e))
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Portfolio simulation failed for %s", params.tickers)
        raise HTTPException(status_code=500, detail=str(e))
