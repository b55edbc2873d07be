"""
Centralized logging configuration for Tunnelpour.

The engine modules only ever call ``logging.getLogger(__name__)``; the host
application calls ``setup_logging`` once to decide where records go.
"""

import json
import logging
import logging.handlers
import sys
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from tunnelpour.core.config import Settings, settings as default_settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEV_CONSOLE_FORMAT = "%(levelname)s | %(asctime)s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(asctime)s - %(name)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s:%(lineno)d - %(message)s"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes of a bare LogRecord; anything else on a record came from ``extra``
# or from a LogContext
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record for log aggregation.

    Fields passed via ``extra`` (``duration_ms``, ``entry_id``, ...) are
    included at the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name (development only)."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.COLORS.get(plain)
        if color is None:
            return super().format(record)

        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The record is shared with the other handlers
            record.levelname = plain


_context_fields: ContextVar[Mapping[str, Any]] = ContextVar("tunnelpour_log_context", default={})


class ContextFilter(logging.Filter):
    """Stamp the fields of the active LogContext on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context_fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def get_log_level(level_name: str) -> int:
    """
    Convert a level name to its logging constant.

    Args:
        level_name: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)

    Returns:
        Logging level constant, INFO for unknown names
    """
    return _LEVELS.get(level_name.upper(), logging.INFO)


def _console_handler(level: int, environment: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    if environment == "development":
        handler.setFormatter(ColoredFormatter(DEV_CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(path: Path, level: int, json_logs: bool) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    json_logs: Optional[bool] = None,
    enable_console: bool = True,
    config: Optional[Settings] = None,
) -> None:
    """
    Configure the root logger for the host application.

    Arguments left as None are taken from ``config``. Without a configured
    level, development logs at DEBUG and other environments at INFO.
    Existing root handlers are replaced.

    Args:
        log_level: Level name
        log_file: Rotating log file path
        json_logs: Write the log file as JSON lines
        enable_console: Log to stdout
        config: Settings to read defaults from (global settings if omitted)
    """
    config = config or default_settings

    log_level = log_level or config.log_level
    if log_level is None:
        log_level = "DEBUG" if config.environment == "development" else "INFO"
    log_file = log_file or config.log_file
    json_logs = config.json_logs if json_logs is None else json_logs

    level = get_log_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if enable_console:
        root.addHandler(_console_handler(level, config.environment))
    if log_file:
        root.addHandler(_file_handler(Path(log_file), level, json_logs))

    root.info(
        f"Logging initialized: level={log_level}, environment={config.environment}, "
        f"console={enable_console}, file={log_file}, json_logs={json_logs}"
    )


class LogContext:
    """
    Extra fields for records logged inside a ``with`` block.

    The fields live in a context variable, so threads and asyncio tasks
    each see only their own context. Handlers pick them up through
    ContextFilter, which setup_logging attaches.

    Usage:
        with LogContext(batch="night shift"):
            calculator.build_entry(draft)
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "LogContext":
        merged = {**_context_fields.get(), **self.fields}
        self._token = _context_fields.set(merged)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _context_fields.reset(self._token)
            self._token = None


def add_log_context(**fields: Any) -> LogContext:
    """Create a LogContext for the given fields."""
    return LogContext(**fields)
