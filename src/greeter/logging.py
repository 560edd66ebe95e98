"""Structured logging for greeter.

The banner itself is written with rich; logging is diagnostic output on
stderr, quiet (WARNING) by default and raised with ``GREETER_LOG_LEVEL``.

Usage:
    from greeter.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", format="json")
    logger = get_logger("todos.storage")
    logger.info("todos_saved", path=str(path), count=3)
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import IO, Any, Literal
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "RequestLog",
    "RequestLogger",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "sanitize_url",
]

ROOT_LOGGER_NAME = "greeter"

LogFormat = Literal["human", "json"]

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

_SENSITIVE_PARAMS = frozenset({"key", "api_key", "apikey", "token", "access_token"})


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_extra_fields(record))

        if record.levelno >= logging.ERROR:
            data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


class HumanFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message key=value``"""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{stamp} {record.levelname:<7} {record.name}: {record.getMessage()}"

        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# =============================================================================
# Logger wrapper
# =============================================================================


class StructuredLogger:
    """Thin wrapper over ``logging.Logger`` that takes keyword fields.

    ``logger.info("todos_loaded", count=3)`` is the same as
    ``logging.getLogger(name).info("todos_loaded", extra={"count": 3})``.
    """

    def __init__(self, name: str):
        self.name = name
        self._logger = logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(self, level: int, msg: str, *args: Any, exc_info: Any = None, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=fields or None, stacklevel=3)

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, msg, *args, **fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.WARNING, msg, *args, **fields)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, msg, *args, **fields)

    def exception(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=True, **fields)


def get_logger(name: str) -> StructuredLogger:
    """Get a logger in the ``greeter`` namespace.

    Args:
        name: Dotted component name, e.g. ``"todos.storage"``. Names that
            already start with ``greeter`` are used as-is.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return StructuredLogger(name)


def configure_logging(
    level: str | int = "WARNING",
    format: LogFormat = "human",
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Install a single handler on the ``greeter`` logger.

    Calling it again replaces the previous handler, so the CLI and tests
    can reconfigure freely.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_greeter_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if format == "json" else HumanFormatter())
    handler._greeter_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = True
    return logger


# =============================================================================
# HTTP request logging
# =============================================================================


def sanitize_url(url: str) -> str:
    """Replace credential-looking query parameters with ``[REDACTED]``."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (k, "[REDACTED]" if k.lower() in _SENSITIVE_PARAMS else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass
class RequestLog:
    """One outbound HTTP request."""

    method: str
    url: str
    status_code: int | None = None
    response_size: int | None = None
    latency_ms: float | None = None
    error: str | None = None
    _started: float = field(default_factory=time.perf_counter, repr=False)

    def complete(
        self,
        status_code: int | None = None,
        response_size: int | None = None,
        error: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.response_size = response_size
        self.error = error
        self.latency_ms = round((time.perf_counter() - self._started) * 1000, 2)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "status_code": self.status_code,
            "latency_ms": self.latency_ms,
        }
        if self.response_size is not None:
            data["response_size"] = self.response_size
        if self.error is not None:
            data["error"] = self.error
        return data


class RequestLogger:
    """Logs outbound HTTP requests with secrets stripped from the URL."""

    def __init__(self, name: str = "http"):
        self._logger = get_logger(name)

    def log_request(self, method: str, url: str) -> RequestLog:
        log = RequestLog(method=method.upper(), url=sanitize_url(url))
        self._logger.debug("http_request", method=log.method, url=log.url)
        return log

    def log_response(self, log: RequestLog) -> None:
        if log.error is not None or (log.status_code or 0) >= 400:
            self._logger.warning("http_response", **log.to_dict())
        else:
            self._logger.debug("http_response", **log.to_dict())
