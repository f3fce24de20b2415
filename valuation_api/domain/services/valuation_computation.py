"""Valuation computation domain service.

Pure functions that turn merged raw fundamentals into valuation ratios.

Every ratio has an explicit zero-denominator policy: the result is 0.0
("not meaningful"), except the PEG ratio, which is +inf when revenue growth
is zero. Downstream consumers rely on that asymmetry.
"""

import math

from valuation_api.domain.entities.fundamentals import FinancialMetrics, RawFinancials


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def compute_eps(
    provider_eps: float | None,
    net_income: float,
    shares_outstanding: float,
) -> float:
    """Earnings per share.

    The provider's EPS wins when reported; otherwise it is computed as
    net income over shares outstanding.
    """
    if provider_eps is not None:
        return provider_eps
    return safe_divide(net_income, shares_outstanding)


def compute_pe_ratio(price: float, eps: float) -> float:
    """Price to earnings."""
    return safe_divide(price, eps)


def compute_revenue_growth(current_revenue: float, previous_revenue: float) -> float:
    """Year-over-year revenue growth as a fraction (0.1 == 10%)."""
    return safe_divide(current_revenue - previous_revenue, previous_revenue)


def compute_peg_ratio(pe_ratio: float, revenue_growth: float) -> float:
    """P/E divided by growth expressed in percent.

    Zero growth yields +inf: PEG is undefined there and consumers treat
    infinity as "cannot compute", not as an error.
    """
    return safe_divide(pe_ratio, revenue_growth * 100, default=math.inf)


def compute_fcf(
    net_income: float,
    depreciation_and_amortization: float,
    property_plant_equipment: float,
) -> float:
    """Free cash flow proxy from income and balance-sheet figures.

    Uses the PP&E balance in place of capital expenditure since the cash
    flow statement is not fetched. This is not operating-cash-flow FCF.
    """
    return net_income + depreciation_and_amortization - property_plant_equipment


def compute_fcf_yield(fcf: float, market_cap: float) -> float:
    """FCF as a percentage of market capitalization."""
    return safe_divide(fcf, market_cap) * 100


def compute_enterprise_value(market_cap: float, total_debt: float, price: float) -> float:
    """Enterprise value as market cap plus debt minus share price.

    NOTE: textbook EV subtracts cash and equivalents, not the per-share
    price. Kept as-is until the intended formula is confirmed; the price
    term is negligible against market cap for any listed issuer.
    """
    return market_cap + total_debt - price


def compute_ev_multiple(enterprise_value: float, earnings: float) -> float:
    """EV over an earnings measure (EBIT or EBITDA)."""
    return safe_divide(enterprise_value, earnings)


def compute_debt_to_equity(total_debt: float, total_shareholder_equity: float) -> float:
    """Leverage: total debt over shareholder equity."""
    return safe_divide(total_debt, total_shareholder_equity)


def compute_roe(net_income: float, total_shareholder_equity: float) -> float:
    """Return on equity as a fraction."""
    return safe_divide(net_income, total_shareholder_equity)


def derive_metrics(raw: RawFinancials) -> FinancialMetrics:
    """Compute all ratios from one set of raw fundamentals.

    Args:
        raw: Values merged from quote, income statement, balance sheet and overview

    Returns:
        FinancialMetrics built from ``raw`` only
    """
    eps = compute_eps(raw.eps, raw.net_income, raw.shares_outstanding)
    pe_ratio = compute_pe_ratio(raw.price, eps)
    revenue_growth = compute_revenue_growth(raw.total_revenue, raw.previous_total_revenue)
    fcf = compute_fcf(
        raw.net_income, raw.depreciation_and_amortization, raw.property_plant_equipment
    )
    enterprise_value = compute_enterprise_value(raw.market_cap, raw.total_debt, raw.price)

    return FinancialMetrics(
        symbol=raw.symbol,
        price=raw.price,
        market_cap=raw.market_cap,
        beta=raw.beta,
        eps=eps,
        book_value=raw.book_value,
        pe_ratio=pe_ratio,
        peg_ratio=compute_peg_ratio(pe_ratio, revenue_growth),
        enterprise_value=enterprise_value,
        ev_ebit=compute_ev_multiple(enterprise_value, raw.ebit),
        ev_ebitda=compute_ev_multiple(enterprise_value, raw.ebitda),
        total_debt=raw.total_debt,
        total_assets=raw.total_assets,
        total_shareholder_equity=raw.total_shareholder_equity,
        current_debt=raw.current_debt,
        current_long_term_debt=raw.current_long_term_debt,
        goodwill=raw.goodwill,
        net_income=raw.net_income,
        ebit=raw.ebit,
        ebitda=raw.ebitda,
        cost_of_revenue=raw.cost_of_revenue,
        roe=compute_roe(raw.net_income, raw.total_shareholder_equity),
        debt_to_equity=compute_debt_to_equity(raw.total_debt, raw.total_shareholder_equity),
        revenue_growth=revenue_growth,
        fcf=fcf,
        fcf_yield=compute_fcf_yield(fcf, raw.market_cap),
        dividend_yield=raw.dividend_yield,
    )
