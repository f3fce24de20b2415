"""Pytest configuration and fixtures for all tests.

This module ensures tests run in isolation from the developer's Alpha Vantage
environment and provides sample provider payloads plus a fake client.
"""

import copy
import os
import threading

import pytest

from valuation_api.core.fundamentals.models import ReportType

# Environment variables that should not affect tests
PROVIDER_ENV_VARS = [
    "ALPHA_VANTAGE_API_KEY",
    "ALPHA_VANTAGE_BASE_URL",
    "ALPHA_VANTAGE_TIMEOUT",
    "FUNDAMENTALS_SNAPSHOT_DIR",
    "FUNDAMENTALS_CONCURRENT_FETCH",
]


@pytest.fixture(autouse=True)
def isolate_from_env():
    """Clear provider env vars before each test to prevent real API calls.

    This fixture runs automatically for every test (autouse=True).
    It saves original values, clears them for the test, then restores after.
    """
    original_values = {}
    for var in PROVIDER_ENV_VARS:
        if var in os.environ:
            original_values[var] = os.environ.pop(var)

    yield

    for var in PROVIDER_ENV_VARS:
        os.environ.pop(var, None)
    for var, value in original_values.items():
        os.environ[var] = value


# ============================================================================
# Sample API responses (shaped like real Alpha Vantage output)
# ============================================================================

SAMPLE_QUOTE = {
    "Global Quote": {
        "01. symbol": "TEST",
        "02. open": "148.5000",
        "05. price": "150.0000",
        "07. latest trading day": "2024-12-31",
        "10. change percent": "0.4500%",
    }
}

SAMPLE_INCOME_STATEMENT = {
    "symbol": "TEST",
    "annualReports": [
        {
            "fiscalDateEnding": "2024-12-31",
            "reportedCurrency": "USD",
            "totalRevenue": "10000000",
            "costOfRevenue": "6000000",
            "ebit": "1500000",
            "ebitda": "1800000",
            "depreciationAndAmortization": "300000",
            "netIncome": "1000000",
        },
        {
            "fiscalDateEnding": "2023-12-31",
            "reportedCurrency": "USD",
            "totalRevenue": "8000000",
            "costOfRevenue": "5000000",
            "ebit": "1200000",
            "ebitda": "1400000",
            "depreciationAndAmortization": "200000",
            "netIncome": "800000",
        },
    ],
    "quarterlyReports": [],
}

SAMPLE_BALANCE_SHEET = {
    "symbol": "TEST",
    "annualReports": [
        {
            "fiscalDateEnding": "2024-12-31",
            "reportedCurrency": "USD",
            "totalAssets": "12000000",
            "totalLiabilities": "4000000",
            "totalShareholderEquity": "8000000",
            "propertyPlantEquipment": "500000",
            "currentDebt": "200000",
            "currentLongTermDebt": "100000",
            "goodwill": "250000",
        }
    ],
    "quarterlyReports": [],
}

SAMPLE_OVERVIEW = {
    "Symbol": "TEST",
    "Name": "Test Corp",
    "EPS": "6.00",
    "SharesOutstanding": "500000",
    "MarketCapitalization": "75000000",
    "Beta": "1.2",
    "DividendYield": "0.015",
    "BookValue": "16.00",
    "PERatio": "24.5",
}


@pytest.fixture
def sample_reports() -> dict:
    """Fresh copy of the four sample reports, keyed by ReportType."""
    return copy.deepcopy(
        {
            ReportType.QUOTE: SAMPLE_QUOTE,
            ReportType.INCOME_STATEMENT: SAMPLE_INCOME_STATEMENT,
            ReportType.BALANCE_SHEET: SAMPLE_BALANCE_SHEET,
            ReportType.OVERVIEW: SAMPLE_OVERVIEW,
        }
    )


# ============================================================================
# Fake client
# ============================================================================


class FakeAlphaVantageClient:
    """In-memory AlphaVantageClient that records calls."""

    def __init__(self, documents: dict, errors: dict | None = None):
        self.documents = documents
        self.errors = errors or {}
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def fetch_report(self, report_type, symbol, timeout=None):
        with self._lock:
            self.calls.append((report_type, symbol, timeout))
        if report_type in self.errors:
            raise self.errors[report_type]
        return copy.deepcopy(self.documents[report_type])

    @property
    def requested(self) -> list:
        return [call[0] for call in self.calls]


@pytest.fixture
def make_client():
    """Factory for FakeAlphaVantageClient."""
    return FakeAlphaVantageClient
