"""Tests for the greeter error hierarchy."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from greeter.errors import (
    ConfigurationError,
    EditError,
    EditorError,
    EditorFailedError,
    EditorSpawnError,
    GreeterError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    TelemetryError,
    TodoDecodeError,
    TodoNotFoundError,
    TodoReadError,
    TodoStorageError,
    TodoWriteError,
    UnknownVerbError,
    WeatherError,
    log_exception,
)

# =============================================================================
# log_exception
# =============================================================================


class TestLogException:
    """Tests for log_exception helper."""

    def test_log_exception_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test logging at the default warning level."""
        logger = logging.getLogger("greeter.test")

        with caplog.at_level(logging.WARNING, logger="greeter.test"):
            log_exception(logger, "Saving failed", ValueError("boom"))

        assert "Saving failed: ValueError: boom" in caplog.text
        assert caplog.records[0].exc_info is not None

    def test_log_exception_without_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that the traceback can be left out."""
        logger = logging.getLogger("greeter.test")

        with caplog.at_level(logging.DEBUG, logger="greeter.test"):
            log_exception(logger, "Lookup", KeyError("x"), level="debug", include_traceback=False)

        assert caplog.records[0].levelno == logging.DEBUG
        assert caplog.records[0].exc_info is None


# =============================================================================
# Base class
# =============================================================================


class TestGreeterError:
    """Tests for GreeterError."""

    def test_basic_creation(self) -> None:
        error = GreeterError("Something failed")

        assert error.message == "Something failed"
        assert error.details == {}
        assert error.hint is None
        assert str(error) == "Something failed"

    def test_with_hint(self) -> None:
        error = GreeterError("Something failed", hint="Try again")

        assert str(error) == "Something failed\n  Hint: Try again"

    def test_repr(self) -> None:
        assert repr(GreeterError("oops")) == "GreeterError('oops')"
        assert repr(UnknownVerbError("zap")) == "UnknownVerbError(\"unknown verb 'zap'\")"

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("bad"),
            TodoNotFoundError("/tmp/t"),
            IndexOutOfRangeError(3, 2),
            EditorFailedError(1),
            TelemetryError("uptime", "bad"),
            WeatherError("down"),
        ],
    )
    def test_all_errors_share_base(self, error: GreeterError) -> None:
        assert isinstance(error, GreeterError)


# =============================================================================
# Storage errors
# =============================================================================


class TestStorageErrors:
    """Tests for the todos file errors."""

    def test_not_found(self) -> None:
        error = TodoNotFoundError(Path("/tmp/todos"))

        assert isinstance(error, TodoStorageError)
        assert error.path == Path("/tmp/todos")
        assert error.details["path"] == "/tmp/todos"
        assert "greeter edit add" in (error.hint or "")

    def test_decode_error_line_number(self) -> None:
        error = TodoDecodeError("/tmp/todos", 4)

        assert error.line_number == 4
        assert error.details["line_number"] == 4
        assert error.message == "line 4 of the todos file is not valid UTF-8"

    def test_read_and_write_errors(self) -> None:
        assert "Permission denied" in TodoReadError("/t", "Permission denied").message
        assert TodoWriteError("/t", "No space").message == (
            "couldn't update your todos file: No space"
        )


# =============================================================================
# Edit errors
# =============================================================================


class TestEditErrors:
    """Tests for edit command errors."""

    def test_index_out_of_range(self) -> None:
        error = IndexOutOfRangeError(5, 2)

        assert isinstance(error, EditError)
        assert error.message == "5 is not a number in the list"
        assert error.hint == "Choose a number between 1 and 2"
        assert error.details == {"index": 5, "length": 2}

    def test_index_out_of_range_empty_list(self) -> None:
        assert IndexOutOfRangeError(1, 0).hint == "The list is empty"

    def test_invalid_argument(self) -> None:
        error = InvalidArgumentError("'x' is not a todo number", argument="x")

        assert isinstance(error, EditError)
        assert error.argument == "x"

    def test_unknown_verb(self) -> None:
        error = UnknownVerbError("zap")

        assert error.message == "unknown verb 'zap'"
        assert error.hint == "Valid verbs: add, done, check, fix"


# =============================================================================
# Editor and collaborator errors
# =============================================================================


class TestEditorErrors:
    """Tests for external editor errors."""

    def test_failed(self) -> None:
        error = EditorFailedError(3, editor="vim")

        assert isinstance(error, EditorError)
        assert error.status == 3
        assert error.details == {"editor": "vim", "status": 3}

    def test_spawn(self) -> None:
        error = EditorSpawnError("nvim", "No such file or directory")

        assert error.message == "failed to execute editor 'nvim': No such file or directory"
        assert error.editor == "nvim"


class TestWeatherError:
    """Tests for WeatherError hints."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_hint(self, status: int) -> None:
        assert WeatherError("no", status_code=status).hint == "Check GREETER_WEATHER_API_KEY"

    def test_location_hint(self) -> None:
        assert WeatherError("no", status_code=400).hint == "Check GREETER_WEATHER_LOCATION"

    def test_no_hint_for_server_errors(self) -> None:
        error = WeatherError("no", status_code=503, location="Brighton")

        assert error.hint is None
        assert error.details == {"status_code": 503, "location": "Brighton"}
