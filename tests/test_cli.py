"""Tests for the command-line entrypoint."""

import math
import os
from unittest.mock import patch

from rich.console import Console

from valuation_api import cli
from valuation_api.core.fundamentals import MetricsAggregator, ReportFetcher, ReportType
from valuation_api.core.fundamentals.sinks import ConsoleReportSink, format_value


def _run(argv, make_client, documents, errors=None):
    """Run the CLI against a fake client, capturing console output."""
    fake = make_client(documents, errors=errors)
    console = Console(record=True, width=120)
    built = {}

    def fake_build(settings, report_sink=None):
        built["settings"] = settings
        return MetricsAggregator(
            ReportFetcher(fake), concurrent=settings.concurrent, report_sink=report_sink
        )

    with (
        patch.dict(os.environ, {"ALPHA_VANTAGE_API_KEY": "test-key"}),
        patch.object(cli, "console", console),
        patch.object(cli, "build_aggregator", side_effect=fake_build),
        patch.object(cli, "load_dotenv"),
    ):
        code = cli.main(argv)

    return code, console.export_text(), built.get("settings"), fake


class TestMain:
    """Tests for cli.main."""

    def test_prints_table(self, make_client, sample_reports) -> None:
        code, output, _, _ = _run(["test"], make_client, sample_reports)

        assert code == cli.EXIT_OK
        assert "Fundamentals: TEST" in output
        assert "P/E" in output
        assert "25.00" in output

    def test_json_output(self, make_client, sample_reports) -> None:
        code, output, _, _ = _run(["TEST", "--json"], make_client, sample_reports)

        assert code == cli.EXIT_OK
        assert '"pe_ratio": 25.0' in output
        assert '"peg_ratio_defined": true' in output

    def test_flags_reach_settings(self, make_client, sample_reports, tmp_path) -> None:
        code, _, settings, fake = _run(
            ["TEST", "--sequential", "--snapshot-dir", str(tmp_path), "--timeout", "9"],
            make_client,
            sample_reports,
        )

        assert code == cli.EXIT_OK
        assert settings.concurrent is False
        assert settings.snapshot_dir == tmp_path
        assert {call[2] for call in fake.calls} == {9.0}

    def test_pipeline_error_exit_code(self, make_client, sample_reports) -> None:
        sample_reports[ReportType.QUOTE] = {"Global Quote": {}}

        code, output, _, _ = _run(["TEST", "--sequential"], make_client, sample_reports)

        assert code == cli.EXIT_PIPELINE_ERROR
        assert "price" in output

    def test_missing_credential_exit_code(self) -> None:
        console = Console(record=True)
        with patch.object(cli, "console", console), patch.object(cli, "load_dotenv"):
            code = cli.main(["TEST"])

        assert code == cli.EXIT_CONFIG_ERROR
        assert "ALPHA_VANTAGE_API_KEY" in console.export_text()


class TestConsoleFormatting:
    """Tests for console sink formatting."""

    def test_format_value_styles(self) -> None:
        assert format_value(None, "money") == "n/a"
        assert format_value(math.inf, "ratio") == "undefined"
        assert format_value(1234567.891, "money") == "1,234,567.89"
        assert format_value(1.5, "percent") == "1.50%"
        assert format_value(0.125, "fraction") == "12.50%"
        assert format_value(25.0, "ratio") == "25.00"

    def test_json_output_nulls_infinite_peg(self, make_client, sample_reports) -> None:
        reports = sample_reports[ReportType.INCOME_STATEMENT]["annualReports"]
        sample_reports[ReportType.INCOME_STATEMENT]["annualReports"] = reports[:1]
        console = Console(record=True, width=120)
        aggregator = MetricsAggregator(
            ReportFetcher(make_client(sample_reports)),
            concurrent=False,
            report_sink=ConsoleReportSink(console=console, as_json=True),
        )

        aggregator.aggregate("TEST")

        output = console.export_text()
        assert '"peg_ratio": null' in output
        assert '"peg_ratio_defined": false' in output
