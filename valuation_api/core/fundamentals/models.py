"""Data models for fundamentals module."""

from enum import Enum
from typing import Any

# A provider response: untyped JSON object, discarded after extraction
RawFinancialReport = dict[str, Any]


class ReportType(str, Enum):
    """Alpha Vantage report types; the value is the API ``function`` parameter."""

    QUOTE = "GLOBAL_QUOTE"
    INCOME_STATEMENT = "INCOME_STATEMENT"
    BALANCE_SHEET = "BALANCE_SHEET"
    OVERVIEW = "OVERVIEW"

    @property
    def endpoint(self) -> str:
        """Snake-case name used for snapshot files and error messages."""
        return self.name.lower()


class FieldKind(str, Enum):
    """How a leaf value is converted by the field extractor."""

    STRING_AS_FLOAT = "string_as_float"
    STRING = "string"
    FLOAT = "float"
    OPTIONAL_STRING_AS_FLOAT = "optional_string_as_float"
