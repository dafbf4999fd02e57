"""Locale catalogue for the journal: YAML files per language and ``t()``."""

from __future__ import annotations

from contextvars import ContextVar, Token
from pathlib import Path
from typing import Any, Dict, Tuple

DEFAULT_LANGUAGE = "en"

_LOCALE_DATA: Dict[str, Dict[str, str]] = {}
_LANGUAGE_CONTEXT: ContextVar[str] = ContextVar("language", default=DEFAULT_LANGUAGE)


def _strip_quotes(value: str) -> str:
    if (value.startswith('"') and value.endswith('"')) or (
        value.startswith("'") and value.endswith("'")
    ):
        return value[1:-1]
    return value


def _parse_simple_yaml(content: str) -> Dict[str, Any]:
    """Parse the nested ``key: value`` subset of YAML used by locale files."""
    root: Dict[str, Any] = {}
    stack: list[Tuple[int, Dict[str, Any]]] = [(-1, root)]

    for raw_line in content.splitlines():
        if not raw_line.strip() or raw_line.lstrip().startswith("#"):
            continue

        indent = len(raw_line) - len(raw_line.lstrip(" "))
        line = raw_line.strip()
        if ":" not in line:
            raise ValueError(f"Invalid line in translation file: {raw_line!r}")

        key_part, value_part = line.split(":", 1)
        key = key_part.strip()
        value = value_part.strip()

        while stack and indent <= stack[-1][0]:
            stack.pop()
        parent = stack[-1][1]

        if value == "":
            nested: Dict[str, Any] = {}
            parent[key] = nested
            stack.append((indent, nested))
            continue

        parent[key] = _strip_quotes(value)

    return root


def _flatten_mapping(data: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    flattened: Dict[str, str] = {}
    for key, value in data.items():
        composite_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flattened.update(_flatten_mapping(value, composite_key))
        else:
            flattened[composite_key] = str(value)
    return flattened


def _load_translations() -> Dict[str, Dict[str, str]]:
    """Load every ``<lang>.yaml`` placed next to this module."""
    package_dir = Path(__file__).resolve().parent
    translations: Dict[str, Dict[str, str]] = {}

    for path in sorted(package_dir.glob("*.yaml")):
        content = path.read_text(encoding="utf-8")
        translations[path.stem] = _flatten_mapping(_parse_simple_yaml(content))
    return translations


_LOCALE_DATA = _load_translations()


def supported_languages() -> tuple[str, ...]:
    """Return language codes with a locale file, default language first."""

    others = sorted(code for code in _LOCALE_DATA if code != DEFAULT_LANGUAGE)
    return (DEFAULT_LANGUAGE, *others)


def resolve_language(raw: str | None) -> str:
    """Map an arbitrary language code to a supported one.

    >>> resolve_language("RU")
    'ru'
    >>> resolve_language("de")
    'en'
    """

    code = (raw or "").strip().lower()
    if code in _LOCALE_DATA:
        return code
    return DEFAULT_LANGUAGE


def set_context_language(lang: str) -> Token[str]:
    """Push language value to the context stack."""

    return _LANGUAGE_CONTEXT.set(resolve_language(lang))


def reset_context_language(token: Token[str]) -> None:
    _LANGUAGE_CONTEXT.reset(token)


def get_current_language() -> str:
    return _LANGUAGE_CONTEXT.get()


def t(key: str, *, lang: str | None = None, **kwargs: Any) -> str:
    """Return a translated string, falling back to the default language."""

    language = resolve_language(lang) if lang else get_current_language()
    template = _LOCALE_DATA.get(language, {}).get(key)
    if template is None:
        template = _LOCALE_DATA.get(DEFAULT_LANGUAGE, {}).get(key)
    if template is None:
        raise KeyError(f"Missing translation for '{key}' in '{language}'")

    if kwargs:
        return template.format(**kwargs)
    return template


__all__ = [
    "DEFAULT_LANGUAGE",
    "t",
    "get_current_language",
    "reset_context_language",
    "resolve_language",
    "set_context_language",
    "supported_languages",
]
