"""Logging setup for the server and the injected component loggers."""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path

from order_ledger.config import Settings, load_settings

# Parents of every logger handed to a record component or the seeder.
AUDIT_LOGGERS = ("order_ledger.store", "order_ledger.seed")

_logging_configured = False
_logging_lock = threading.Lock()

_logger = logging.getLogger(__name__)

_FORMATTER = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)


def _handlers(log_file: str | None) -> list[logging.Handler]:
    # stdout carries the MCP stdio protocol.
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(_FORMATTER)
    handlers: list[logging.Handler] = [stream_handler]
    if not log_file:
        return handlers
    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as exc:
        _logger.warning("Failed to open log file %s: %s", log_file, exc)
        return handlers
    file_handler.setFormatter(_FORMATTER)
    handlers.append(file_handler)
    return handlers


def configure_logging(settings: Settings | None = None) -> None:
    """Install the server handlers and set the audit logger levels.

    The audit loggers take ``logging.audit_level`` when it is set and the
    root level otherwise.
    """
    global _logging_configured

    settings = settings or load_settings()
    levels = logging.getLevelNamesMapping()
    level = levels[settings.logging.level]
    audit_level = levels[settings.logging.audit_level or settings.logging.level]

    logging.basicConfig(level=level, handlers=_handlers(settings.logging.file), force=True)
    for name in AUDIT_LOGGERS:
        logging.getLogger(name).setLevel(audit_level)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    if not _logging_configured:
        with _logging_lock:
            if not _logging_configured:
                configure_logging()
    return logging.getLogger(name)
