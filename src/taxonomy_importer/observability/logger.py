"""Structured logging for import runs.

Levels, by the events the importer emits:
- INFO: import_started, term_created, import_complete (default)
- WARNING: parent_unresolved, term_create_failed, read_stopped
- ERROR: csv_open_failed, import_failed
- DEBUG: term_exists, blank_name, parent_resolved, term_inserted
"""

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import structlog

_import_context: ContextVar[dict[str, Any]] = ContextVar("import_context", default={})

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LogContext:
    """
    Bind fields to every log line emitted inside the block.

    Usage:
        with LogContext(import_session="1a2b3c4d", taxonomy="category"):
            logger.info("import_started")
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self.token = None

    def __enter__(self) -> "LogContext":
        merged = {**_import_context.get(), **self.fields}
        self.token = _import_context.set(merged)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.token:
            _import_context.reset(self.token)


def _context_processor(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the active LogContext fields."""
    for key, value in _import_context.get().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_log_level(level: str) -> int:
    """
    Get numeric log level from its name.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL (any case)

    Returns:
        Numeric log level (INFO for unknown names)
    """
    name = level.upper()
    if name not in LOG_LEVELS:
        return logging.INFO
    return logging.getLevelName(name)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Logging level name
        json_logs: Whether to output logs in JSON format
        log_file: Optional path to write logs to file
    """
    log_level = get_log_level(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_path))

    logging.basicConfig(format="%(message)s", level=log_level, handlers=handlers, force=True)

    processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        _context_processor,
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False),
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
