"""Error hierarchy for greeter.

Every fallible step in the package raises a subclass of :class:`GreeterError`.
The CLI driver is the only place that turns these into exit codes; the
codec, processor, menu and collaborators never terminate the process.

Hierarchy:
    GreeterError
    ├── ConfigurationError
    ├── TodoStorageError
    │   ├── TodoNotFoundError
    │   ├── TodoDecodeError
    │   ├── TodoReadError
    │   └── TodoWriteError
    ├── EditError
    │   ├── IndexOutOfRangeError
    │   ├── InvalidArgumentError
    │   └── UnknownVerbError
    ├── EditorError
    │   ├── EditorFailedError
    │   └── EditorSpawnError
    ├── TelemetryError
    └── WeatherError
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

__all__ = [
    "ConfigurationError",
    "EditError",
    "EditorError",
    "EditorFailedError",
    "EditorSpawnError",
    "GreeterError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "TelemetryError",
    "TodoDecodeError",
    "TodoNotFoundError",
    "TodoReadError",
    "TodoStorageError",
    "TodoWriteError",
    "UnknownVerbError",
    "WeatherError",
    "log_exception",
]


def log_exception(
    logger: logging.Logger | Any,
    message: str,
    exc: BaseException,
    level: Literal["debug", "info", "warning", "error"] = "warning",
    include_traceback: bool = True,
) -> None:
    """Log a caught exception in a uniform format.

    Args:
        logger: A stdlib logger or a ``StructuredLogger``.
        message: What was being attempted.
        exc: The exception that was caught.
        level: Log level name.
        include_traceback: Attach ``exc_info`` to the record.
    """
    log_fn = getattr(logger, level)
    text = f"{message}: {type(exc).__name__}: {exc}"
    if include_traceback:
        log_fn(text, exc_info=exc)
    else:
        log_fn(text)


# =============================================================================
# Base
# =============================================================================


class GreeterError(Exception):
    """Base class for all greeter errors.

    Attributes:
        message: Human-readable description.
        details: Structured context for logging.
        hint: Optional suggestion shown to the user.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.details = details or {}
        self.hint = hint
        super().__init__(self._format())

    def _format(self) -> str:
        if self.hint:
            return f"{self.message}\n  Hint: {self.hint}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ConfigurationError(GreeterError):
    """Invalid value in the environment or ``.env`` file."""

    def __init__(self, message: str, *, setting: str | None = None, hint: str | None = None):
        details = {"setting": setting} if setting else {}
        super().__init__(message, details=details, hint=hint)
        self.setting = setting


# =============================================================================
# Storage
# =============================================================================


class TodoStorageError(GreeterError):
    """Failure reading or writing the todos file."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ):
        details = dict(details or {})
        if path is not None:
            details["path"] = str(path)
        super().__init__(message, details=details, hint=hint)
        self.path = Path(path) if path is not None else None


class TodoNotFoundError(TodoStorageError):
    """The todos file does not exist."""

    def __init__(self, path: Path | str):
        super().__init__(
            f"no todos file at {path}",
            path=path,
            hint="Run `greeter edit add <text>` to create one",
        )


class TodoDecodeError(TodoStorageError):
    """The todos file is not valid UTF-8."""

    def __init__(self, path: Path | str | None, line_number: int):
        super().__init__(
            f"line {line_number} of the todos file is not valid UTF-8",
            path=path,
            details={"line_number": line_number},
        )
        self.line_number = line_number


class TodoReadError(TodoStorageError):
    """The todos file exists but could not be read."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"couldn't read your todos file: {reason}", path=path)
        self.reason = reason


class TodoWriteError(TodoStorageError):
    """The todos file could not be created or written."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"couldn't update your todos file: {reason}", path=path)
        self.reason = reason


# =============================================================================
# Editing
# =============================================================================


class EditError(GreeterError):
    """An edit command was rejected. The list is left unchanged."""


class IndexOutOfRangeError(EditError):
    """A 1-based index does not name an item in the list."""

    def __init__(self, index: int, length: int):
        if length == 0:
            hint = "The list is empty"
        else:
            hint = f"Choose a number between 1 and {length}"
        super().__init__(
            f"{index} is not a number in the list",
            details={"index": index, "length": length},
            hint=hint,
        )
        self.index = index
        self.length = length


class InvalidArgumentError(EditError):
    """An argument could not be parsed, e.g. a non-integer index."""

    def __init__(self, message: str, *, argument: str | None = None, hint: str | None = None):
        details = {"argument": argument} if argument is not None else {}
        super().__init__(message, details=details, hint=hint)
        self.argument = argument


class UnknownVerbError(EditError):
    """The edit verb is not one of add, done, check or fix."""

    def __init__(self, verb: str):
        super().__init__(
            f"unknown verb '{verb}'",
            details={"verb": verb},
            hint="Valid verbs: add, done, check, fix",
        )
        self.verb = verb


# =============================================================================
# External editor
# =============================================================================


class EditorError(GreeterError):
    """The external editor could not be used. Nothing is persisted."""

    def __init__(self, message: str, *, editor: str | None = None, hint: str | None = None):
        details = {"editor": editor} if editor else {}
        super().__init__(message, details=details, hint=hint)
        self.editor = editor


class EditorFailedError(EditorError):
    """The editor exited with a non-zero status."""

    def __init__(self, status: int, *, editor: str | None = None):
        super().__init__(f"editor exited with non-zero status code {status}", editor=editor)
        self.status = status
        self.details["status"] = status


class EditorSpawnError(EditorError):
    """The editor process could not be started."""

    def __init__(self, editor: str, reason: str):
        super().__init__(
            f"failed to execute editor '{editor}': {reason}",
            editor=editor,
            hint="Set GREETER_EDITOR or EDITOR to an installed editor",
        )
        self.reason = reason


# =============================================================================
# Collaborators
# =============================================================================


class TelemetryError(GreeterError):
    """A host telemetry value could not be read or parsed."""

    def __init__(self, field: str, message: str):
        super().__init__(message, details={"field": field})
        self.field = field


class WeatherError(GreeterError):
    """The weather lookup failed (network, HTTP status or response body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        location: str | None = None,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if location is not None:
            details["location"] = location

        hint = None
        if status_code in (401, 403):
            hint = "Check GREETER_WEATHER_API_KEY"
        elif status_code == 400:
            hint = "Check GREETER_WEATHER_LOCATION"

        super().__init__(message, details=details, hint=hint)
        self.status_code = status_code
        self.location = location
