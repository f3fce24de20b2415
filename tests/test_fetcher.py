"""Tests for ReportFetcher and raw snapshot storage."""

import tempfile
from pathlib import Path

import pytest

from valuation_api.core.fundamentals.fetcher import ReportFetcher
from valuation_api.core.fundamentals.models import ReportType
from valuation_api.core.fundamentals.sinks import JsonSnapshotSink
from valuation_api.core.fundamentals.storage import (
    get_fundamentals_dir,
    load_raw_response,
    save_raw_response,
)
from valuation_api.domain.exceptions import DecodeError, StorageWriteError

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def temp_data_path():
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class RecordingSnapshotSink:
    def __init__(self):
        self.saved: list[tuple] = []

    def save(self, symbol, report_type, document):
        self.saved.append((symbol, report_type, document))


class BrokenSnapshotSink:
    def save(self, symbol, report_type, document):
        raise StorageWriteError("disk full", path="/nowhere")


# ============================================================================
# Storage
# ============================================================================


class TestStorage:
    """Tests for snapshot save/load helpers."""

    def test_snapshot_path_layout(self, temp_data_path: Path) -> None:
        assert get_fundamentals_dir(temp_data_path, "AAPL") == (
            temp_data_path / "raw" / "fundamentals" / "AAPL"
        )

    def test_save_and_load(self, temp_data_path: Path) -> None:
        data = {"annualReports": [{"netIncome": "100"}]}
        file_path = save_raw_response(temp_data_path, "AAPL", "income_statement", data)

        assert file_path == temp_data_path / "raw" / "fundamentals" / "AAPL" / "income_statement.json"
        loaded = load_raw_response(temp_data_path, "AAPL", "income_statement")
        assert loaded["symbol"] == "AAPL"
        assert loaded["endpoint"] == "income_statement"
        assert loaded["response"] == data
        assert "fetched_at" in loaded

    def test_load_missing_returns_none(self, temp_data_path: Path) -> None:
        assert load_raw_response(temp_data_path, "AAPL", "overview") is None

    def test_write_failure_raises_storage_error(self, temp_data_path: Path) -> None:
        blocker = temp_data_path / "raw"
        blocker.write_text("not a directory")

        with pytest.raises(StorageWriteError):
            save_raw_response(temp_data_path, "AAPL", "quote", {})


# ============================================================================
# Fetcher
# ============================================================================


class TestReportFetcher:
    """Tests for ReportFetcher.fetch_report."""

    def test_returns_client_document(self, make_client, sample_reports) -> None:
        client = make_client(sample_reports)
        fetcher = ReportFetcher(client)

        document = fetcher.fetch_report(ReportType.OVERVIEW, "TEST", timeout=3.0)

        assert document["EPS"] == "6.00"
        assert client.calls == [(ReportType.OVERVIEW, "TEST", 3.0)]

    def test_snapshot_written_per_report(self, make_client, sample_reports) -> None:
        sink = RecordingSnapshotSink()
        fetcher = ReportFetcher(make_client(sample_reports), snapshot_sink=sink)

        fetcher.fetch_report(ReportType.QUOTE, "TEST")
        fetcher.fetch_report(ReportType.BALANCE_SHEET, "TEST")

        assert [(s, r) for s, r, _ in sink.saved] == [
            ("TEST", ReportType.QUOTE),
            ("TEST", ReportType.BALANCE_SHEET),
        ]

    def test_snapshot_failure_does_not_abort_fetch(self, make_client, sample_reports) -> None:
        fetcher = ReportFetcher(make_client(sample_reports), snapshot_sink=BrokenSnapshotSink())

        document = fetcher.fetch_report(ReportType.QUOTE, "TEST")

        assert document["Global Quote"]["05. price"] == "150.0000"

    def test_json_snapshot_sink_writes_file(
        self, make_client, sample_reports, temp_data_path: Path
    ) -> None:
        fetcher = ReportFetcher(
            make_client(sample_reports), snapshot_sink=JsonSnapshotSink(temp_data_path)
        )

        fetcher.fetch_report(ReportType.INCOME_STATEMENT, "TEST")

        saved = load_raw_response(temp_data_path, "TEST", "income_statement")
        assert saved["response"]["annualReports"][0]["netIncome"] == "1000000"

    def test_fetch_error_propagates_without_snapshot(self, make_client, sample_reports) -> None:
        error = DecodeError("bad body", "alpha_vantage", symbol="TEST", report="quote")
        sink = RecordingSnapshotSink()
        fetcher = ReportFetcher(
            make_client(sample_reports, errors={ReportType.QUOTE: error}), snapshot_sink=sink
        )

        with pytest.raises(DecodeError):
            fetcher.fetch_report(ReportType.QUOTE, "TEST")
        assert sink.saved == []
