"""Path-based typed field extraction from provider documents.

Alpha Vantage returns every number as a decimal string inside loosely
structured JSON, and reports absent data as the literal string "None".
``extract`` centralizes the distinction between a field that is missing
and one that is present but unparseable.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any

from valuation_api.core.fundamentals.models import FieldKind
from valuation_api.domain.exceptions import FieldMissingError, FieldUnparseableError

PathSegment = str | int
FieldPath = str | Sequence[PathSegment]

# Leaf values the provider uses in place of "no data", compared lowercased
MISSING_SENTINELS = frozenset({"", "none", "-", "n/a"})

_SEGMENT_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def parse_path(path: FieldPath) -> tuple[PathSegment, ...]:
    """Split a path like ``"annualReports[0].netIncome"`` into segments.

    Sequences are passed through as tuples. Keys may contain spaces and
    dots are separators, so ``"Global Quote.05. price"`` is ambiguous; use
    a sequence for keys containing dots.

    Raises:
        ValueError: If the path string is empty or malformed
    """
    if not isinstance(path, str):
        parts = tuple(path)
        if not parts:
            raise ValueError("Empty field path")
        return parts

    segments: list[PathSegment] = []
    pos = 0
    expect_key = True
    while pos < len(path):
        if path[pos] == "." and not expect_key:
            pos += 1
            expect_key = True
            continue
        match = _SEGMENT_RE.match(path, pos)
        if match is None or (match.group(1) is not None and not expect_key):
            raise ValueError(f"Malformed field path: {path!r}")
        if match.group(1) is not None:
            segments.append(match.group(1))
        else:
            segments.append(int(match.group(2)))
        expect_key = False
        pos = match.end()

    if not segments or expect_key:
        raise ValueError(f"Malformed field path: {path!r}")
    return tuple(segments)


def format_path(segments: Sequence[PathSegment]) -> str:
    """Render segments back to ``a[0].b`` form for error messages."""
    out = ""
    for segment in segments:
        if isinstance(segment, int):
            out += f"[{segment}]"
        else:
            out += f".{segment}" if out else segment
    return out


def _resolve(document: Any, segments: Sequence[PathSegment]) -> Any:
    node = document
    for segment in segments:
        if isinstance(segment, int):
            if not isinstance(node, list) or segment < 0 or segment >= len(node):
                raise FieldMissingError(format_path(segments))
            node = node[segment]
        else:
            if not isinstance(node, dict) or segment not in node:
                raise FieldMissingError(format_path(segments))
            node = node[segment]
    return node


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in MISSING_SENTINELS


def _to_float(value: Any, field: str, kind: FieldKind, allow_string: bool) -> float:
    if isinstance(value, bool):
        raise FieldUnparseableError(field, value, kind.value)

    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str) and allow_string:
        try:
            result = float(value.strip())
        except ValueError:
            raise FieldUnparseableError(field, value, kind.value) from None
    else:
        raise FieldUnparseableError(field, value, kind.value)

    if not math.isfinite(result):
        raise FieldUnparseableError(field, value, kind.value)
    return result


def extract(document: Any, path: FieldPath, kind: FieldKind) -> float | str | None:
    """Extract a typed scalar from a nested document.

    Args:
        document: Parsed JSON (dicts and lists)
        path: Dotted path with bracketed indices, or a sequence of keys/indices
        kind: Conversion to apply to the leaf

    Returns:
        float for numeric kinds, str for STRING, None for a missing
        OPTIONAL_STRING_AS_FLOAT

    Raises:
        FieldMissingError: Path does not resolve or leaf is a "None" sentinel
        FieldUnparseableError: Leaf present but not convertible to ``kind``
    """
    segments = parse_path(path)
    field = format_path(segments)

    try:
        value = _resolve(document, segments)
        if _is_missing(value):
            raise FieldMissingError(field)
    except FieldMissingError:
        if kind is FieldKind.OPTIONAL_STRING_AS_FLOAT:
            return None
        raise

    if kind is FieldKind.STRING:
        if not isinstance(value, str):
            raise FieldUnparseableError(field, value, kind.value)
        return value.strip()

    if kind is FieldKind.FLOAT:
        return _to_float(value, field, kind, allow_string=False)

    return _to_float(value, field, kind, allow_string=True)
