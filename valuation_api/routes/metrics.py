"""Valuation metrics endpoint."""

import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from valuation_api.core.config import ProviderSettings, load_settings
from valuation_api.core.fundamentals import MetricsAggregator, build_aggregator
from valuation_api.domain.entities.fundamentals import FinancialMetrics
from valuation_api.domain.exceptions import (
    AuthError,
    DataValidationError,
    DecodeError,
    ProviderError,
    RateLimitError,
    RequiredFieldError,
    TransportError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Response models
# ============================================================================


class MetricsResponse(BaseModel):
    """Valuation metrics for one symbol.

    JSON has no infinity, so an undefined PEG (zero revenue growth) is
    returned as null with ``peg_ratio_defined`` false.
    """

    symbol: str
    price: float
    market_cap: float
    beta: float
    eps: float
    book_value: float
    pe_ratio: float
    peg_ratio: float | None
    peg_ratio_defined: bool
    enterprise_value: float
    ev_ebit: float
    ev_ebitda: float
    total_debt: float
    total_assets: float
    total_shareholder_equity: float
    current_debt: float
    current_long_term_debt: float
    goodwill: float | None = Field(None, description="Not reported by every issuer")
    net_income: float
    ebit: float
    ebitda: float
    cost_of_revenue: float
    roe: float
    debt_to_equity: float
    revenue_growth: float
    fcf: float
    fcf_yield: float
    dividend_yield: float


def metrics_to_response(metrics: FinancialMetrics) -> MetricsResponse:
    """Convert internal FinancialMetrics to API response."""
    data = metrics.to_dict()
    peg_defined = math.isfinite(metrics.peg_ratio)
    data["peg_ratio"] = metrics.peg_ratio if peg_defined else None
    return MetricsResponse(peg_ratio_defined=peg_defined, **data)


# ============================================================================
# Dependency injection
# ============================================================================


def get_provider_settings() -> ProviderSettings:
    """Get provider settings from environment."""
    return load_settings()


def get_metrics_aggregator(
    settings: Annotated[ProviderSettings, Depends(get_provider_settings)],
) -> MetricsAggregator:
    """Get the metrics aggregator with injected settings."""
    if not settings.has_credential:
        raise HTTPException(
            status_code=503,
            detail="ALPHA_VANTAGE_API_KEY is not configured",
        )
    return build_aggregator(settings)


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/{symbol}", response_model=MetricsResponse)
def get_symbol_metrics(
    symbol: str,
    aggregator: Annotated[MetricsAggregator, Depends(get_metrics_aggregator)],
    timeout: Annotated[float | None, Query(gt=0, le=300)] = None,
) -> MetricsResponse:
    """Get valuation metrics for a symbol.

    Data source: Alpha Vantage (GLOBAL_QUOTE + INCOME_STATEMENT +
    BALANCE_SHEET + OVERVIEW), four API calls per request.
    """
    try:
        metrics = aggregator.aggregate(symbol, timeout=timeout)
    except DataValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except RequiredFieldError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "field": e.field, "report": e.report},
        ) from None
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None
    except RateLimitError as e:
        raise HTTPException(status_code=429, detail=str(e)) from None
    except (ProviderError, DecodeError) as e:
        logger.error(f"[Metrics] Provider failure for {symbol}: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from None
    except TransportError as e:
        logger.error(f"[Metrics] Transport failure for {symbol}: {e}")
        raise HTTPException(status_code=504, detail=str(e)) from None

    return metrics_to_response(metrics)
