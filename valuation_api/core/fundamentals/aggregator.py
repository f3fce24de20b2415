"""Metrics aggregation: four provider reports in, one FinancialMetrics out."""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import replace

from valuation_api.core.config import ProviderSettings, load_settings
from valuation_api.core.fundamentals.client import RealAlphaVantageClient
from valuation_api.core.fundamentals.extractor import FieldPath, extract
from valuation_api.core.fundamentals.fetcher import ReportFetcher
from valuation_api.core.fundamentals.models import FieldKind, RawFinancialReport, ReportType
from valuation_api.core.fundamentals.sinks import JsonSnapshotSink, ReportSink
from valuation_api.domain.entities.fundamentals import FinancialMetrics, RawFinancials
from valuation_api.domain.exceptions import (
    DataValidationError,
    ExtractError,
    FieldUnparseableError,
    RequiredFieldError,
)
from valuation_api.domain.services.valuation_computation import derive_metrics

logger = logging.getLogger(__name__)

# ============================================================================
# Provider field mapping
# ============================================================================

# "05. price" contains a dot, so this path is given as segments
QUOTE_PRICE_PATH = ("Global Quote", "05. price")
NET_INCOME_PATH = "annualReports[0].netIncome"
TOTAL_DEBT_PATH = "annualReports[0].totalLiabilities"

# Best-effort fields: RawFinancials attribute -> path; default 0.0
INCOME_FIELDS: dict[str, FieldPath] = {
    "ebit": "annualReports[0].ebit",
    "ebitda": "annualReports[0].ebitda",
    "depreciation_and_amortization": "annualReports[0].depreciationAndAmortization",
    "total_revenue": "annualReports[0].totalRevenue",
    "cost_of_revenue": "annualReports[0].costOfRevenue",
    "previous_total_revenue": "annualReports[1].totalRevenue",
}

BALANCE_SHEET_FIELDS: dict[str, FieldPath] = {
    "property_plant_equipment": "annualReports[0].propertyPlantEquipment",
    "total_assets": "annualReports[0].totalAssets",
    "total_shareholder_equity": "annualReports[0].totalShareholderEquity",
    "current_debt": "annualReports[0].currentDebt",
    "current_long_term_debt": "annualReports[0].currentLongTermDebt",
}

OVERVIEW_FIELDS: dict[str, FieldPath] = {
    "shares_outstanding": "SharesOutstanding",
    "market_cap": "MarketCapitalization",
    "beta": "Beta",
    "dividend_yield": "DividendYield",
    "book_value": "BookValue",
}

GOODWILL_PATH = "annualReports[0].goodwill"
OVERVIEW_EPS_PATH = "EPS"
OVERVIEW_PE_PATH = "PERatio"


def normalize_symbol(symbol: str) -> str:
    """Strip and uppercase a ticker.

    Raises:
        DataValidationError: If the symbol is empty
    """
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise DataValidationError("Symbol must not be empty", field="symbol", value=symbol)
    return normalized


# ============================================================================
# Report batches
# ============================================================================


class _SequentialReports:
    """Fetch each report when it is first asked for."""

    def __init__(self, fetcher: ReportFetcher, symbol: str, timeout: float | None):
        self.fetcher = fetcher
        self.symbol = symbol
        self.timeout = timeout

    def get(self, report_type: ReportType) -> RawFinancialReport:
        return self.fetcher.fetch_report(report_type, self.symbol, timeout=self.timeout)

    def close(self) -> None:
        pass


class _ConcurrentReports:
    """Fetch all four reports in parallel; results are read in caller order."""

    def __init__(self, fetcher: ReportFetcher, symbol: str, timeout: float | None):
        self._pool = concurrent.futures.ThreadPoolExecutor(
            max_workers=len(ReportType),
            thread_name_prefix=f"fundamentals-{symbol}",
        )
        self._futures = {
            report_type: self._pool.submit(
                fetcher.fetch_report, report_type, symbol, timeout
            )
            for report_type in ReportType
        }

    def get(self, report_type: ReportType) -> RawFinancialReport:
        return self._futures[report_type].result()

    def close(self) -> None:
        # Abandon siblings still in flight once the outcome is decided
        self._pool.shutdown(wait=False, cancel_futures=True)


# ============================================================================
# Aggregator
# ============================================================================


class MetricsAggregator:
    """Fetch the four Alpha Vantage reports and derive valuation metrics.

    Usage:
        aggregator = MetricsAggregator(ReportFetcher(client))
        metrics = aggregator.aggregate("AAPL")

    Only price, net income and total debt are required. Every other field
    falls back to 0.0 (goodwill and overview EPS to None), so small issuers
    without dividends or goodwill still get a full record.
    """

    def __init__(
        self,
        fetcher: ReportFetcher,
        concurrent: bool = True,
        report_sink: ReportSink | None = None,
    ):
        """Initialize the aggregator.

        Args:
            fetcher: Report fetcher
            concurrent: Issue the four fetches in parallel
            report_sink: Receives each finished record
        """
        self.fetcher = fetcher
        self.concurrent = concurrent
        self.report_sink = report_sink

    def aggregate(self, symbol: str, timeout: float | None = None) -> FinancialMetrics:
        """Build a FinancialMetrics record for one symbol.

        Args:
            symbol: Stock ticker (normalized to uppercase)
            timeout: Per-fetch timeout in seconds

        Returns:
            Fully populated FinancialMetrics

        Raises:
            DataValidationError: Empty symbol
            RequiredFieldError: price, net_income or total_debt unavailable
            FetchError: Any of the four fetches failed
        """
        symbol = normalize_symbol(symbol)
        logger.info(f"[Fundamentals] Aggregating metrics for {symbol}")

        batch_cls = _ConcurrentReports if self.concurrent else _SequentialReports
        reports = batch_cls(self.fetcher, symbol, timeout)
        try:
            quote = reports.get(ReportType.QUOTE)
            price = _required(quote, QUOTE_PRICE_PATH, "price", ReportType.QUOTE)

            income = reports.get(ReportType.INCOME_STATEMENT)
            net_income = _required(
                income, NET_INCOME_PATH, "net_income", ReportType.INCOME_STATEMENT
            )

            balance = reports.get(ReportType.BALANCE_SHEET)
            total_debt = _required(
                balance, TOTAL_DEBT_PATH, "total_debt", ReportType.BALANCE_SHEET
            )

            overview = reports.get(ReportType.OVERVIEW)
        finally:
            reports.close()

        raw = RawFinancials(
            symbol=symbol,
            price=price,
            net_income=net_income,
            total_debt=total_debt,
            goodwill=_optional(balance, GOODWILL_PATH, symbol),
            eps=_optional(overview, OVERVIEW_EPS_PATH, symbol),
            provider_pe_ratio=_optional(overview, OVERVIEW_PE_PATH, symbol),
            **_best_effort(income, INCOME_FIELDS, symbol),
            **_best_effort(balance, BALANCE_SHEET_FIELDS, symbol),
            **_best_effort(overview, OVERVIEW_FIELDS, symbol),
        )

        metrics = derive_metrics(raw)
        logger.info(
            f"[Fundamentals] {symbol}: price={metrics.price:.2f} "
            f"eps={metrics.eps:.2f} pe={metrics.pe_ratio:.2f}"
        )

        if self.report_sink is not None:
            self.report_sink.publish(metrics)
        return metrics


def _required(
    document: RawFinancialReport,
    path: FieldPath,
    field: str,
    report_type: ReportType,
) -> float:
    try:
        return extract(document, path, FieldKind.STRING_AS_FLOAT)
    except ExtractError as e:
        raise RequiredFieldError(field, report_type.endpoint, cause=e) from e


def _best_effort(
    document: RawFinancialReport,
    fields: dict[str, FieldPath],
    symbol: str,
) -> dict[str, float]:
    values = {}
    for name, path in fields.items():
        try:
            values[name] = extract(document, path, FieldKind.STRING_AS_FLOAT)
        except ExtractError as e:
            logger.debug(f"[Fundamentals] {symbol}: {name} defaulted to 0.0 ({e})")
            values[name] = 0.0
    return values


def _optional(document: RawFinancialReport, path: FieldPath, symbol: str) -> float | None:
    try:
        return extract(document, path, FieldKind.OPTIONAL_STRING_AS_FLOAT)
    except FieldUnparseableError as e:
        logger.debug(f"[Fundamentals] {symbol}: ignoring {e}")
        return None


# ============================================================================
# Entry points
# ============================================================================


def build_aggregator(
    settings: ProviderSettings,
    report_sink: ReportSink | None = None,
) -> MetricsAggregator:
    """Wire client, fetcher and aggregator from settings."""
    client = RealAlphaVantageClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )
    snapshot_sink = (
        JsonSnapshotSink(settings.snapshot_dir) if settings.snapshot_dir is not None else None
    )
    return MetricsAggregator(
        ReportFetcher(client, snapshot_sink=snapshot_sink),
        concurrent=settings.concurrent,
        report_sink=report_sink,
    )


def get_metrics(
    symbol: str,
    credential: str,
    settings: ProviderSettings | None = None,
    timeout: float | None = None,
) -> FinancialMetrics:
    """Fetch and derive valuation metrics for one symbol.

    Args:
        symbol: Stock ticker
        credential: Alpha Vantage API key
        settings: Provider settings (environment defaults if None); its
            api_key is replaced by ``credential``
        timeout: Per-fetch timeout in seconds

    Returns:
        FinancialMetrics
    """
    base = settings if settings is not None else load_settings()
    aggregator = build_aggregator(replace(base, api_key=credential))
    return aggregator.aggregate(symbol, timeout=timeout)
