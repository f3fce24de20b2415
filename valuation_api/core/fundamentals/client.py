"""Alpha Vantage API client."""

from __future__ import annotations

import json
import logging
from typing import Protocol

import httpx

from valuation_api.core.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from valuation_api.core.fundamentals.models import RawFinancialReport, ReportType
from valuation_api.domain.exceptions import (
    AuthError,
    DecodeError,
    ProviderError,
    RateLimitError,
    TransportError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "alpha_vantage"

# Keys Alpha Vantage uses for error payloads returned with HTTP 200
ERROR_KEY = "Error Message"
RATE_LIMIT_KEYS = ("Note", "Information")


class AlphaVantageClient(Protocol):
    """Protocol for Alpha Vantage API client."""

    def fetch_report(
        self,
        report_type: ReportType,
        symbol: str,
        timeout: float | None = None,
    ) -> RawFinancialReport:
        """Fetch one report for a symbol."""
        ...


def check_provider_payload(
    data: RawFinancialReport,
    symbol: str,
    report_type: ReportType,
) -> None:
    """Raise if a decoded 200 response is actually a provider error.

    Args:
        data: Decoded JSON object
        symbol: Stock ticker (for error context)
        report_type: Report requested (for error context)

    Raises:
        AuthError: Error payload complains about the apikey parameter
        RateLimitError: "Note" or "Information" throttle notice
        ProviderError: Any other "Error Message"
    """
    endpoint = report_type.endpoint

    if ERROR_KEY in data:
        message = str(data[ERROR_KEY])
        if "apikey" in message.lower():
            raise AuthError(
                f"Alpha Vantage rejected the API key for {endpoint}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            )
        raise ProviderError(
            f"Alpha Vantage error for {symbol} {endpoint}: {message}",
            SERVICE_NAME,
            symbol=symbol,
            report=endpoint,
            provider_message=message,
        )

    for key in RATE_LIMIT_KEYS:
        if key in data:
            message = str(data[key])
            raise RateLimitError(
                f"Alpha Vantage rate limit for {symbol} {endpoint}: {message}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
                provider_message=message,
            )


class RealAlphaVantageClient:
    """Real Alpha Vantage API client over httpx."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Alpha Vantage API key
            base_url: Query endpoint URL
            timeout: Default request timeout in seconds
            http_client: Shared httpx client; a short-lived one is opened per
                request when omitted
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._http_client = http_client

    def _get(self, params: dict[str, str], timeout: float) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.get(self.base_url, params=params, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.get(self.base_url, params=params)

    def fetch_report(
        self,
        report_type: ReportType,
        symbol: str,
        timeout: float | None = None,
    ) -> RawFinancialReport:
        """Fetch one report from Alpha Vantage.

        Args:
            report_type: Which report (API function) to request
            symbol: Stock ticker
            timeout: Per-call timeout override in seconds

        Returns:
            Decoded JSON object

        Raises:
            AuthError: Missing or rejected credential
            TransportError: Network failure, timeout or HTTP error status
            DecodeError: Body cannot be decoded or is not a JSON object
            ProviderError: Error payload in a 200 response
        """
        endpoint = report_type.endpoint

        if not self.api_key:
            raise AuthError(
                "No Alpha Vantage API key configured",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            )

        params = {
            "function": report_type.value,
            "symbol": symbol,
            "apikey": self.api_key,
        }

        try:
            response = self._get(params, timeout if timeout is not None else self.timeout)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Timed out fetching {endpoint} for {symbol}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            ) from e
        except httpx.DecodingError as e:
            raise DecodeError(
                f"Undecodable {endpoint} response body for {symbol}: {e}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Network error fetching {endpoint} for {symbol}: {e}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            ) from e

        if response.status_code in (401, 403):
            raise AuthError(
                f"Alpha Vantage returned HTTP {response.status_code} for {endpoint}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            )
        if response.is_error:
            raise TransportError(
                f"Alpha Vantage returned HTTP {response.status_code} for {endpoint}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Invalid JSON in {endpoint} response for {symbol}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            ) from e

        if not isinstance(data, dict):
            raise DecodeError(
                f"Expected a JSON object in {endpoint} response for {symbol}, "
                f"got {type(data).__name__}",
                SERVICE_NAME,
                symbol=symbol,
                report=endpoint,
            )

        check_provider_payload(data, symbol, report_type)
        return data
