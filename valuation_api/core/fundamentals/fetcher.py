"""Report fetcher: one provider call per report, plus optional snapshot."""

from __future__ import annotations

import logging

from valuation_api.core.fundamentals.client import AlphaVantageClient
from valuation_api.core.fundamentals.models import RawFinancialReport, ReportType
from valuation_api.core.fundamentals.sinks import SnapshotSink

logger = logging.getLogger(__name__)


class ReportFetcher:
    """Fetch raw reports from Alpha Vantage.

    Usage:
        fetcher = ReportFetcher(RealAlphaVantageClient(api_key="..."))
        quote = fetcher.fetch_report(ReportType.QUOTE, "AAPL")
    """

    def __init__(
        self,
        client: AlphaVantageClient,
        snapshot_sink: SnapshotSink | None = None,
    ):
        """Initialize the fetcher.

        Args:
            client: Alpha Vantage client (real or fake)
            snapshot_sink: Where to write raw responses; None disables snapshots
        """
        self.client = client
        self.snapshot_sink = snapshot_sink

    def fetch_report(
        self,
        report_type: ReportType,
        symbol: str,
        timeout: float | None = None,
    ) -> RawFinancialReport:
        """Fetch a single report for a symbol.

        Args:
            report_type: Report to fetch
            symbol: Stock ticker
            timeout: Per-call timeout in seconds (client default if None)

        Returns:
            Decoded provider document

        Raises:
            FetchError: Any transport, auth, provider or decode failure
        """
        logger.info(f"[AlphaVantage] Fetching {report_type.endpoint} for {symbol}")
        document = self.client.fetch_report(report_type, symbol, timeout=timeout)

        if self.snapshot_sink is not None:
            self._write_snapshot(symbol, report_type, document)

        return document

    def _write_snapshot(
        self,
        symbol: str,
        report_type: ReportType,
        document: RawFinancialReport,
    ) -> None:
        # A snapshot is debug output; it must never fail the fetch
        try:
            self.snapshot_sink.save(symbol, report_type, document)
        except Exception as e:
            logger.warning(
                f"[AlphaVantage] Could not snapshot {report_type.endpoint} for {symbol}: {e}"
            )
