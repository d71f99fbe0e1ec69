from typing import List

from pydantic import BaseModel


class BenchmarkETF(BaseModel):
    ticker: str
    name: str
    color: str


AVAILABLE_BENCHMARKS: List[BenchmarkETF] = [
    BenchmarkETF(ticker='SPY', name='S&P 500', color='#ef4444'),
    BenchmarkETF(ticker='SCHG', name='Schwab US Large-Cap Growth', color='#f97316'),
    BenchmarkETF(ticker='QQQ', name='Nasdaq 100', color='#eab308'),
    BenchmarkETF(ticker='VTI', name='Total Stock Market', color='#22c55e'),
    BenchmarkETF(ticker='SCHD', name='Schwab US Dividend Equity', color='#a855f7'),
]
