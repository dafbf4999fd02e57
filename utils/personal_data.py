"""Helpers for anonymising participant details in logs."""

from __future__ import annotations

import hashlib
from typing import Any

__all__ = [
    "mask_identifier",
    "mask_name",
    "scrub_sensitive_mapping",
]

_DIGEST_SIZE = 10
_NAME_KEYS = {"name", "first_name", "last_name", "full_name", "firstname", "lastname"}
_DATE_KEYS = {"birth_date", "birthdate"}
_SENSITIVE_KEYS = _NAME_KEYS | _DATE_KEYS


def _stable_digest(value: str) -> str:
    normalised = value.strip().encode("utf-8", "ignore")
    return hashlib.blake2b(normalised, digest_size=_DIGEST_SIZE).hexdigest()


def mask_identifier(value: int | str, *, prefix: str = "id") -> str:
    """Return an anonymised representation of ``value`` suitable for logs."""

    raw = str(value)
    digest = _stable_digest(f"{prefix}:{raw}")
    return f"{prefix}-{digest[:6]}...{digest[-4:]}"


def mask_name(name: str) -> str:
    """Mask a participant name while keeping it traceable across events."""

    cleaned = " ".join(name.split())
    if not cleaned:
        return "person-anon"
    digest = _stable_digest(f"name:{cleaned.casefold()}")
    return f"person-{digest[:8]}"


def _scrub_value(value: Any, *, key: str | None = None) -> Any:
    if value is None:
        return None
    lowered = key.lower() if isinstance(key, str) else None

    if lowered in _NAME_KEYS and isinstance(value, str):
        return mask_name(value)
    if lowered in _DATE_KEYS:
        return mask_identifier(value, prefix="dob")

    if isinstance(value, dict):
        return scrub_sensitive_mapping(value)
    if isinstance(value, list):
        return [_scrub_value(item, key=key) for item in value]
    if isinstance(value, tuple):
        return tuple(_scrub_value(item, key=key) for item in value)
    return value


def scrub_sensitive_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    """Recursively mask names and birth dates inside ``mapping`` in-place."""

    for key, value in list(mapping.items()):
        if isinstance(key, str) and key.lower() in _SENSITIVE_KEYS:
            mapping[key] = _scrub_value(value, key=key)
        elif isinstance(value, (dict, list, tuple)):
            mapping[key] = _scrub_value(
                value, key=key if isinstance(key, str) else None
            )
    return mapping
