"""Domain services - pure business logic with no external dependencies.

These services contain the core algorithms and business logic.
They depend only on domain entities and standard library types.
"""

from valuation_api.domain.services.valuation_computation import (
    compute_debt_to_equity,
    compute_enterprise_value,
    compute_eps,
    compute_ev_multiple,
    compute_fcf,
    compute_fcf_yield,
    compute_pe_ratio,
    compute_peg_ratio,
    compute_revenue_growth,
    compute_roe,
    derive_metrics,
    safe_divide,
)

__all__ = [
    "safe_divide",
    # Per-share and growth
    "compute_eps",
    "compute_pe_ratio",
    "compute_revenue_growth",
    "compute_peg_ratio",
    # Cash flow
    "compute_fcf",
    "compute_fcf_yield",
    # Enterprise value
    "compute_enterprise_value",
    "compute_ev_multiple",
    # Balance sheet
    "compute_debt_to_equity",
    "compute_roe",
    "derive_metrics",
]
