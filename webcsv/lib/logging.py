"""Logging setup for the WebCSV CLI and service.

Console output by default; ``json_format=True`` writes one JSON object per
line for log aggregation. Payload rejections are logged by
``webcsv.lib.records`` at WARNING, so the default INFO level shows them.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from webcsv.lib.errors import WebCSVError

__all__ = [
    "setup_logging",
    "JSONFormatter",
    "CONSOLE_FORMAT",
]

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Loggers that are chatty at INFO and above
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON.

    A :class:`WebCSVError` passed through ``exc_info`` is rendered with its
    ``to_dict()`` under ``"error"`` so details and suggestions stay
    machine-readable. Attributes given through ``extra=`` land under
    ``"extra"``.

    Example output:
        {"timestamp": "2025-01-15T10:30:00.123456Z", "level": "WARNING",
         "logger": "webcsv.lib.records", "message": "Payload rejected: ..."}
    """

    def __init__(self, static_fields: Optional[Dict[str, Any]] = None):
        """
        Args:
            static_fields: Fields added to every record (e.g. service name)
        """
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(self.static_fields)

        if record.exc_info:
            error = record.exc_info[1]
            if isinstance(error, WebCSVError):
                entry["error"] = error.to_dict()
            entry["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


def _resolve_level(verbose: bool, level: Optional[str]) -> int:
    if verbose:
        return logging.DEBUG
    resolved = logging.getLevelName((level or "INFO").upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
    level: Optional[str] = None,
    static_fields: Optional[Dict[str, Any]] = None,
) -> None:
    """Configure the root logger, replacing any handlers already installed.

    Args:
        verbose: Log at DEBUG regardless of ``level``
        json_format: Use :class:`JSONFormatter` instead of the console format
        log_file: Also write to this file
        level: Level name used when not verbose (default INFO)
        static_fields: Extra fields for every JSON record
    """
    log_level = _resolve_level(verbose, level)

    formatter: logging.Formatter
    if json_format:
        formatter = JSONFormatter(static_fields)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(log_level)

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
