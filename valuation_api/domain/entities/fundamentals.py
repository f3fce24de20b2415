"""Fundamentals domain entities."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class RawFinancials:
    """Typed raw values merged from the four provider reports.

    Best-effort fields hold 0.0 when the provider lacks them. ``eps`` and
    ``provider_pe_ratio`` are None when Overview does not report them, so the
    derivation step can tell "not reported" from "reported as zero".
    """

    symbol: str

    # Quote
    price: float

    # Income statement (latest annual report)
    net_income: float
    ebit: float = 0.0
    ebitda: float = 0.0
    depreciation_and_amortization: float = 0.0
    total_revenue: float = 0.0
    cost_of_revenue: float = 0.0
    previous_total_revenue: float = 0.0  # annualReports[1]

    # Balance sheet (latest annual report)
    total_debt: float = 0.0  # totalLiabilities
    property_plant_equipment: float = 0.0
    total_assets: float = 0.0
    total_shareholder_equity: float = 0.0
    current_debt: float = 0.0
    current_long_term_debt: float = 0.0
    goodwill: float | None = None

    # Overview
    eps: float | None = None
    shares_outstanding: float = 0.0
    market_cap: float = 0.0
    beta: float = 0.0
    dividend_yield: float = 0.0
    book_value: float = 0.0
    provider_pe_ratio: float | None = None


@dataclass(frozen=True)
class FinancialMetrics:
    """Valuation snapshot for one symbol, built once per aggregation.

    Every numeric field is populated (0.0 when not meaningful) except
    ``goodwill``, which some issuers legitimately do not report.
    ``peg_ratio`` is +inf when revenue growth is zero.
    """

    symbol: str

    # Market data
    price: float
    market_cap: float
    beta: float

    # Per-share
    eps: float
    book_value: float

    # Valuation
    pe_ratio: float
    peg_ratio: float
    enterprise_value: float
    ev_ebit: float
    ev_ebitda: float

    # Balance sheet
    total_debt: float
    total_assets: float
    total_shareholder_equity: float
    current_debt: float
    current_long_term_debt: float
    goodwill: float | None

    # Income statement
    net_income: float
    ebit: float
    ebitda: float
    cost_of_revenue: float

    # Derived
    roe: float
    debt_to_equity: float
    revenue_growth: float
    fcf: float
    fcf_yield: float
    dividend_yield: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
