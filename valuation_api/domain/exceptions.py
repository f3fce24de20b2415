"""Custom exceptions for valuation_api domain.

This module defines the error taxonomy of the fundamentals pipeline so callers
can tell a transient provider hiccup from a bad credential or a schema change.
"""

from typing import Any


class ValuationAPIError(Exception):
    """Base exception for all valuation_api errors."""

    pass


# ============================================================================
# Data errors
# ============================================================================


class DataError(ValuationAPIError):
    """Base class for data-related errors."""

    pass


class DataValidationError(DataError):
    """Raised when input data fails validation.

    Examples:
    - Empty ticker symbol
    - Out-of-range timeout
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class ExtractError(DataError):
    """Base class for field extraction failures on a provider document."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


class FieldMissingError(ExtractError):
    """Raised when a path does not resolve in a document.

    Examples:
    - Absent key ("goodwill" not reported)
    - Short array (no prior-year annual report)
    - Provider "None" sentinel in place of a number
    """

    def __init__(self, field: str):
        super().__init__(f"Field not found: {field}", field=field)


class FieldUnparseableError(ExtractError):
    """Raised when a field is present but cannot be converted to the requested kind."""

    def __init__(self, field: str, value: Any, kind: str):
        super().__init__(f"Field {field} has unparseable {kind} value {value!r}", field=field)
        self.value = value
        self.kind = kind


# ============================================================================
# External service errors
# ============================================================================


class ExternalServiceError(ValuationAPIError):
    """Base class for external service errors."""

    pass


class FetchError(ExternalServiceError):
    """Raised when fetching a report from the provider fails.

    Every fetch error names the report it was raised for, so a failed
    aggregation can be traced back to one of the four provider calls.
    """

    def __init__(
        self,
        message: str,
        service: str,
        symbol: str | None = None,
        report: str | None = None,
    ):
        super().__init__(message)
        self.service = service
        self.symbol = symbol
        self.report = report


class TransportError(FetchError):
    """Raised on network failures, timeouts and non-auth HTTP error statuses.

    Potentially transient; the caller may retry.
    """

    def __init__(
        self,
        message: str,
        service: str,
        symbol: str | None = None,
        report: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, service, symbol=symbol, report=report)
        self.status_code = status_code


class AuthError(FetchError):
    """Raised when the credential is missing or rejected by the provider."""

    pass


class ProviderError(FetchError):
    """Raised when a 200 response body encodes a provider-side error.

    Examples:
    - "Error Message": invalid symbol or function
    """

    def __init__(
        self,
        message: str,
        service: str,
        symbol: str | None = None,
        report: str | None = None,
        provider_message: str | None = None,
    ):
        super().__init__(message, service, symbol=symbol, report=report)
        self.provider_message = provider_message


class RateLimitError(ProviderError):
    """Raised when the provider reports throttling.

    Examples:
    - Alpha Vantage "Note" (5 calls/minute exceeded)
    - Alpha Vantage "Information" (daily quota or premium-only endpoint)
    """

    pass


class DecodeError(FetchError):
    """Raised when a response body is not a JSON object."""

    pass


# ============================================================================
# Aggregation errors
# ============================================================================


class AggregationError(ValuationAPIError):
    """Base class for failures assembling a metrics record."""

    pass


class RequiredFieldError(AggregationError):
    """Raised when a field with no fallback cannot be extracted.

    Only price, net_income and total_debt are required; everything else
    degrades to a default.
    """

    def __init__(self, field: str, report: str, cause: ExtractError | None = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Required field '{field}' unavailable in {report}{detail}")
        self.field = field
        self.report = report
        self.cause = cause


# ============================================================================
# Storage errors
# ============================================================================


class StorageError(ValuationAPIError):
    """Base class for storage-related errors."""

    pass


class StorageWriteError(StorageError):
    """Raised when writing a snapshot fails."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
