"""Fundamentals module for Alpha Vantage data fetching and valuation metrics.

This module fetches four Alpha Vantage reports for a symbol (GLOBAL_QUOTE,
INCOME_STATEMENT, BALANCE_SHEET, OVERVIEW), extracts typed fields from the
raw JSON and derives valuation ratios.

Snapshot strategy (optional, debug only):
- Raw JSON files: the complete API response per report
  Location: {snapshot_dir}/raw/fundamentals/{symbol}/{endpoint}.json
  e.g.      data/raw/fundamentals/AAPL/balance_sheet.json
"""

# Aggregator
from valuation_api.core.fundamentals.aggregator import (
    MetricsAggregator,
    build_aggregator,
    get_metrics,
    normalize_symbol,
)

# Client
from valuation_api.core.fundamentals.client import (
    AlphaVantageClient,
    RealAlphaVantageClient,
)

# Extractor
from valuation_api.core.fundamentals.extractor import extract, parse_path

# Fetcher
from valuation_api.core.fundamentals.fetcher import ReportFetcher

# Models
from valuation_api.core.fundamentals.models import (
    FieldKind,
    RawFinancialReport,
    ReportType,
)

# Sinks
from valuation_api.core.fundamentals.sinks import (
    ConsoleReportSink,
    JsonSnapshotSink,
    MemoryReportSink,
    ReportSink,
    SnapshotSink,
)

# Storage
from valuation_api.core.fundamentals.storage import (
    get_fundamentals_dir,
    load_raw_response,
    save_raw_response,
)

__all__ = [
    # Client
    "AlphaVantageClient",
    "RealAlphaVantageClient",
    # Sinks
    "ConsoleReportSink",
    "JsonSnapshotSink",
    "MemoryReportSink",
    "ReportSink",
    "SnapshotSink",
    # Models
    "FieldKind",
    "RawFinancialReport",
    "ReportType",
    # Aggregator
    "MetricsAggregator",
    "build_aggregator",
    "get_metrics",
    "normalize_symbol",
    # Fetcher
    "ReportFetcher",
    # Extractor
    "extract",
    "parse_path",
    # Storage
    "get_fundamentals_dir",
    "load_raw_response",
    "save_raw_response",
]
