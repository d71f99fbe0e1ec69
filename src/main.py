import logging

from fastapi import FastAPI
from mangum import Mangum

from src import config
from src.routes import BenchmarkRouter, PortfolioSimulationRouter

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="Portfolio Simulator Backend")

app.include_router(PortfolioSimulationRouter.router, prefix="/tools", tags=["Portfolio Simulator"])
app.include_router(BenchmarkRouter.router, prefix="/tools", tags=["Benchmarks"])

@app.get("/")
def read_root():
    return {"Health": "OK"}

handler = Mangum(app)
