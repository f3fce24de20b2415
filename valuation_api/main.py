"""FastAPI application entrypoint."""

from dotenv import load_dotenv
from fastapi import FastAPI

from valuation_api import __version__
from valuation_api.routes import health, metrics, root

load_dotenv()

app = FastAPI(
    title="Valuation API",
    description="Valuation metrics from Alpha Vantage fundamentals",
    version=__version__,
)

app.include_router(root.router)
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(metrics.router, prefix="/metrics", tags=["metrics"])
