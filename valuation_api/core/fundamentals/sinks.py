"""Sinks for raw snapshots and finished metrics records."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.table import Table

from valuation_api.core.fundamentals.models import RawFinancialReport, ReportType
from valuation_api.core.fundamentals.storage import save_raw_response
from valuation_api.domain.entities.fundamentals import FinancialMetrics


class SnapshotSink(Protocol):
    """Receives every raw report the fetcher decodes."""

    def save(self, symbol: str, report_type: ReportType, document: RawFinancialReport) -> None:
        ...


class ReportSink(Protocol):
    """Receives the finished metrics record."""

    def publish(self, metrics: FinancialMetrics) -> None:
        ...


class JsonSnapshotSink:
    """Write each raw report to ``{base_path}/raw/fundamentals/{symbol}/{endpoint}.json``."""

    def __init__(self, base_path: Path):
        self.base_path = base_path

    def save(self, symbol: str, report_type: ReportType, document: RawFinancialReport) -> None:
        save_raw_response(self.base_path, symbol, report_type.endpoint, document)


class MemoryReportSink:
    """Keep published records in a list (tests, embedding in other jobs)."""

    def __init__(self) -> None:
        self.records: list[FinancialMetrics] = []

    def publish(self, metrics: FinancialMetrics) -> None:
        self.records.append(metrics)


# (label, attribute, format) rows for console output
_TABLE_ROWS = [
    ("Price", "price", "money"),
    ("Market Cap", "market_cap", "money"),
    ("Beta", "beta", "ratio"),
    ("EPS", "eps", "money"),
    ("Book Value / Share", "book_value", "money"),
    ("P/E", "pe_ratio", "ratio"),
    ("PEG", "peg_ratio", "ratio"),
    ("Enterprise Value", "enterprise_value", "money"),
    ("EV/EBIT", "ev_ebit", "ratio"),
    ("EV/EBITDA", "ev_ebitda", "ratio"),
    ("Net Income", "net_income", "money"),
    ("EBIT", "ebit", "money"),
    ("EBITDA", "ebitda", "money"),
    ("Cost of Revenue", "cost_of_revenue", "money"),
    ("Total Debt", "total_debt", "money"),
    ("Total Assets", "total_assets", "money"),
    ("Shareholder Equity", "total_shareholder_equity", "money"),
    ("Current Debt", "current_debt", "money"),
    ("Current Long-Term Debt", "current_long_term_debt", "money"),
    ("Goodwill", "goodwill", "money"),
    ("FCF", "fcf", "money"),
    ("FCF Yield", "fcf_yield", "percent"),
    ("Revenue Growth", "revenue_growth", "fraction"),
    ("ROE", "roe", "fraction"),
    ("Debt / Equity", "debt_to_equity", "ratio"),
    ("Dividend Yield", "dividend_yield", "fraction"),
]


def format_value(value: float | None, style: str) -> str:
    """Human-readable cell text."""
    if value is None:
        return "n/a"
    if math.isinf(value):
        return "undefined"
    if style == "money":
        return f"{value:,.2f}"
    if style == "percent":
        return f"{value:.2f}%"
    if style == "fraction":
        return f"{value * 100:.2f}%"
    return f"{value:.2f}"


class ConsoleReportSink:
    """Print metrics as a rich table, or as JSON."""

    def __init__(self, console: Console | None = None, as_json: bool = False):
        self.console = console or Console()
        self.as_json = as_json

    def publish(self, metrics: FinancialMetrics) -> None:
        if self.as_json:
            data = metrics.to_dict()
            data["peg_ratio_defined"] = math.isfinite(metrics.peg_ratio)
            if not data["peg_ratio_defined"]:
                data["peg_ratio"] = None
            self.console.print_json(json.dumps(data))
            return

        table = Table(title=f"Fundamentals: {metrics.symbol}")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")
        for label, attr, style in _TABLE_ROWS:
            table.add_row(label, format_value(getattr(metrics, attr), style))
        self.console.print(table)
