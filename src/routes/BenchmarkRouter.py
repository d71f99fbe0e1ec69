import logging

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from src import config
from src.services.benchmark_simulator.benchmarks import AVAILABLE_BENCHMARKS, BenchmarkETF
from src.services.benchmark_simulator.models.BenchmarkSimulationParams import BenchmarkSimulationParams
from src.services.benchmark_simulator.models.BenchmarkSimulationResult import BenchmarkSimulationResult
from src.services.portfolio_simulator.errors import DataGapError, UpstreamUnavailable
from src.services.portfolio_simulator.Portfolio import Portfolio
from src.services.price_history.provider import PriceHistoryProvider, get_price_history_provider

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/benchmarks", response_model=List[BenchmarkETF])
def list_benchmarks() -> List[BenchmarkETF]:
    """Benchmark ETFs a portfolio can be compared against."""
    return AVAILABLE_BENCHMARKS


@router.post("/benchmark-simulator", response_model=BenchmarkSimulationResult)
def simulate_benchmark(
    params: BenchmarkSimulationParams,
    provider: PriceHistoryProvider = Depends(get_price_history_provider)
) -> BenchmarkSimulationResult:
    """
    Simulate a single benchmark ticker under the same assumptions as a portfolio.

    Each benchmark is an independent simulation; a failure here says nothing about
    other benchmarks requested by the same client.
    """
    try:
        benchmark = Portfolio(
            tickers=[params.ticker],
            allocations=[100.0],
            starting_portfolio_value=params.starting_value,
            provider=provider
        )
        returns_result = benchmark.get_returns_result(
            period=params.period,
            personal_contributions=params.personal_contributions,
            contribution_period=params.contribution_period,
            include_dividends=params.include_dividends,
            is_drip_active=params.is_drip_active,
            annual_risk_free_return=params.annual_risk_free_return,
            max_data_points=params.max_data_points or config.DEFAULT_MAX_DATA_POINTS
        )
        return BenchmarkSimulationResult.from_portfolio_result(benchmark.tickers[0], returns_result)
    except ValueError as e:
        logger.warning("Rejected benchmark simulation for %s: %s", params.ticker, e)
        raise HTTPException(status_code=400, detail=str(e))
    except DataGapError as e:
        logger.warning("Benchmark simulation for %s hit a data gap: %s", params.ticker, e)
        raise HTTPException(status_code=422, detail=str(e))
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Benchmark simulation failed for %s", params.ticker)
        raise HTTPException(status_code=500, detail=str(e))
