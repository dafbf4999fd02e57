"""Helpers for coercing raw form and storage values."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping

__all__ = [
    "ParseInputError",
    "ParseInputErrorCode",
    "clean_text",
    "format_timestamp",
    "parse_count",
    "parse_date",
    "parse_number",
    "parse_optional_date",
    "parse_timestamp",
]

_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y")


class ParseInputErrorCode(str, Enum):
    """Translation keys for input parsing errors."""

    INVALID_NUMBER = "error.invalid_number"
    INVALID_DATE = "error.invalid_date"
    INVALID_INPUT = "error.invalid_input"


class ParseInputError(ValueError):
    """Exception that carries a translation key for parse failures."""

    def __init__(
        self,
        code: ParseInputErrorCode,
        *,
        context: Mapping[str, object] | None = None,
    ) -> None:
        self.code = code
        self.context: Mapping[str, object] = dict(context or {})
        super().__init__(code.value)


def parse_number(raw: Any) -> float:
    """Parse a finite number from ``int``, ``float`` or a decimal string."""

    if isinstance(raw, bool):
        raise ParseInputError(ParseInputErrorCode.INVALID_INPUT, context={"value": raw})
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip().replace(",", ".")
        if not text:
            raise ParseInputError(
                ParseInputErrorCode.INVALID_NUMBER, context={"value": raw}
            )
        try:
            value = float(text)
        except ValueError as exc:
            raise ParseInputError(
                ParseInputErrorCode.INVALID_NUMBER, context={"value": raw}
            ) from exc
    else:
        raise ParseInputError(ParseInputErrorCode.INVALID_INPUT, context={"value": raw})

    if not math.isfinite(value):
        raise ParseInputError(ParseInputErrorCode.INVALID_NUMBER, context={"value": raw})
    return value


def parse_count(raw: Any, *, minimum: int = 1) -> int:
    """Return ``raw`` truncated toward zero and raised to at least ``minimum``.

    Unparseable and non-finite input collapses to ``minimum``.

    >>> parse_count(7.9)
    7
    >>> parse_count("-3")
    1
    >>> parse_count("abc")
    1
    """

    try:
        value = parse_number(raw)
    except ParseInputError:
        return minimum
    return max(minimum, int(value))


def parse_date(raw: Any) -> date:
    """Parse a calendar date, accepting ISO and a couple of local formats."""

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise ParseInputError(ParseInputErrorCode.INVALID_DATE, context={"value": raw})

    text = raw.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ParseInputError(ParseInputErrorCode.INVALID_DATE, context={"value": raw})


def parse_optional_date(raw: Any) -> date | None:
    """Lenient variant of :func:`parse_date` returning ``None`` on failure."""

    if raw in (None, ""):
        return None
    try:
        return parse_date(raw)
    except ParseInputError:
        return None


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into aware UTC."""

    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as UTC ISO-8601 with milliseconds and ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def clean_text(raw: Any) -> str | None:
    """Return stripped text or ``None`` when blank."""

    if raw is None:
        return None
    text = str(raw).strip()
    return text or None
