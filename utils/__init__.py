"""Shared utilities for the archery journal."""

from __future__ import annotations

from .parse_input import (
    ParseInputError,
    ParseInputErrorCode,
    clean_text,
    format_timestamp,
    parse_count,
    parse_date,
    parse_number,
    parse_optional_date,
    parse_timestamp,
)

__all__ = [
    "ParseInputError",
    "ParseInputErrorCode",
    "clean_text",
    "fmt_distance",
    "format_timestamp",
    "parse_count",
    "parse_date",
    "parse_number",
    "parse_optional_date",
    "parse_timestamp",
]


def fmt_distance(metres: float) -> str:
    """Format a distance in full, dropping a trailing ``.0``.

    >>> fmt_distance(18.0)
    '18'
    >>> fmt_distance(12.3456789)
    '12.3456789'
    """

    value = float(metres)
    if value.is_integer():
        return str(int(value))
    return repr(value)
