"""Structured logging utilities for the archery journal."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from utils.personal_data import scrub_sensitive_mapping

__all__ = ["get_logger"]

LOG_DIR = Path("logs")
LOG_FILE_NAME = "journal.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

# Storage context passed through ``extra=``; always present, ``None`` when unset.
CONTEXT_FIELDS = ("slot", "entity_id", "op")
_ROLE_ATTR = "_journal_handler_role"


class JsonLogFormatter(logging.Formatter):
    """Format log records as single-line JSON with storage context."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited doc
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            payload[name] = getattr(record, name, None)
        details = getattr(record, "details", None)
        if isinstance(details, dict):
            payload["details"] = dict(details)
        return json.dumps(scrub_sensitive_mapping(payload), ensure_ascii=False)


def _file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        LOG_DIR / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def _attach(logger: logging.Logger, role: str, level: int) -> None:
    if any(getattr(handler, _ROLE_ATTR, None) == role for handler in logger.handlers):
        return
    handler = _file_handler() if role == "file" else logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _ROLE_ATTR, role)
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return logger writing JSON to stderr (warnings) and ``logs/journal.log``."""

    logger = logging.getLogger(name)
    _attach(logger, "stream", logging.WARNING)
    _attach(logger, "file", logging.INFO)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger
