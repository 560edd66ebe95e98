"""Tests for the greeter command line and run_greeter driver."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from greeter import __version__
from greeter.cli import EditRequest, app, run_greeter
from greeter.config import GreeterConfig
from greeter.errors import WeatherError
from greeter.telemetry import TelemetrySnapshot
from greeter.todos.storage import load_todos, save_todos
from greeter.weather import WeatherReading

runner = CliRunner()


@pytest.fixture(autouse=True)
def fixed_telemetry():
    """Keep the banner independent of the machine running the tests."""
    snapshot = TelemetrySnapshot(
        user="sam",
        hostname="workstation",
        uptime=(1, 2),
        memory=(1024, 2048),
        kernel="6.8.0",
        cpu_temp=40.0,
    )
    with patch("greeter.cli.collect", return_value=snapshot) as mock_collect:
        yield mock_collect


@pytest.fixture
def cli_env(todos_path: Path) -> dict[str, str]:
    return {"GREETER_TODOS_PATH": str(todos_path), "NO_COLOR": "1"}


# =============================================================================
# Banner
# =============================================================================


class TestBanner:
    """Tests for the bare `greeter` invocation."""

    def test_banner_with_todos(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["Buy milk", "Call Sam"])

        result = runner.invoke(app, [], env=cli_env)

        assert result.exit_code == 0
        assert "sam@workstation" in result.output
        assert "Uptime: 1h 2m" in result.output
        assert "  1. Buy milk\n  2. Call Sam" in result.output

    def test_missing_file_is_shown_not_fatal(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, [], env=cli_env)

        assert result.exit_code == 0
        assert "Todos: no todos file at" in result.output

    def test_banner_does_not_create_file(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        runner.invoke(app, [], env=cli_env)

        assert not todos_path.exists()

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"greeter {__version__}"

    def test_bad_configuration(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, [], env={**cli_env, "GREETER_LOG_FORMAT": "xml"})

        assert result.exit_code == 1
        assert "invalid log format" in result.output


# =============================================================================
# One-shot verbs
# =============================================================================


class TestEditVerbs:
    """Tests for `greeter edit <verb> ...`."""

    def test_add_creates_file(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["edit", "add", "Get", "bagels"], env=cli_env)

        assert result.exit_code == 0
        assert load_todos(todos_path) == ["Get bagels"]
        assert "  1. Get bagels" in result.output

    def test_done_several(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["a", "b", "c", "d"])

        result = runner.invoke(app, ["edit", "done", "1,3"], env=cli_env)

        assert result.exit_code == 0
        assert load_todos(todos_path) == ["b", "d"]

    def test_check_is_done(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["a", "b"])

        runner.invoke(app, ["edit", "check", "2"], env=cli_env)

        assert load_todos(todos_path) == ["a"]

    def test_fix(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["Buy milk"])

        result = runner.invoke(app, ["edit", "fix", "1", "Buy", "oat", "milk"], env=cli_env)

        assert result.exit_code == 0
        assert load_todos(todos_path) == ["Buy oat milk"]

    def test_text_starting_with_dash(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["edit", "add", "-", "call", "back"], env=cli_env)

        assert result.exit_code == 0
        assert load_todos(todos_path) == ["- call back"]

    def test_out_of_range_reports_and_keeps_list(
        self, todos_path: Path, cli_env: dict[str, str]
    ) -> None:
        save_todos(todos_path, ["a", "b"])

        result = runner.invoke(app, ["edit", "done", "5"], env=cli_env)

        assert result.exit_code == 1
        assert "greeter: error: 5 is not a number in the list" in result.output
        assert "  1. a\n  2. b" in result.output
        assert load_todos(todos_path) == ["a", "b"]

    def test_add_with_newline_keeps_file_intact(
        self, todos_path: Path, cli_env: dict[str, str]
    ) -> None:
        save_todos(todos_path, ["keep"])

        result = runner.invoke(app, ["edit", "add", "two\nlines"], env=cli_env)

        assert result.exit_code == 1
        assert "a todo can't contain a line break" in result.output
        assert "  1. keep" in result.output
        assert "  2." not in result.output
        assert load_todos(todos_path) == ["keep"]

    def test_fix_with_newline_keeps_file_intact(
        self, todos_path: Path, cli_env: dict[str, str]
    ) -> None:
        save_todos(todos_path, ["keep"])

        result = runner.invoke(app, ["edit", "fix", "1", "a\nb"], env=cli_env)

        assert result.exit_code == 1
        assert load_todos(todos_path) == ["keep"]

    def test_unknown_verb(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["edit", "zap", "1"], env=cli_env)

        assert result.exit_code == 1
        assert "unknown verb 'zap'" in result.output

    def test_done_without_number(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["a"])

        result = runner.invoke(app, ["edit", "done"], env=cli_env)

        assert result.exit_code == 1
        assert "you should supply a number to mark as done" in result.output

    def test_undecodable_file_never_overwritten(
        self, todos_path: Path, cli_env: dict[str, str]
    ) -> None:
        todos_path.parent.mkdir(parents=True)
        todos_path.write_bytes(b"# ok\n# \xfe\n")

        result = runner.invoke(app, ["edit", "add", "x"], env=cli_env)

        assert result.exit_code == 1
        assert "line 2 of the todos file is not valid UTF-8" in result.output
        assert todos_path.read_bytes() == b"# ok\n# \xfe\n"

    def test_menu_with_verb_is_usage_error(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["edit", "--menu", "add", "x"], env=cli_env)

        assert result.exit_code == 2


# =============================================================================
# Menu and external editor
# =============================================================================


class TestEditMenu:
    """Tests for `greeter edit --menu`."""

    def test_menu_session_saved(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["Buy milk"])

        result = runner.invoke(
            app, ["edit", "--menu"], input="#Get bagels\n-1\n!\n", env=cli_env
        )

        assert result.exit_code == 0
        assert "Added 'Get bagels'" in result.output
        assert load_todos(todos_path) == ["Get bagels"]

    def test_add_then_remove_leaves_empty(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["edit", "-i"], input="#Get bagels\n-1\n!\n", env=cli_env)

        assert result.exit_code == 0
        assert load_todos(todos_path) == []
        assert "Todos: none!" in result.output

    def test_end_of_input_keeps_list(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["Buy milk", "Call Sam"])

        result = runner.invoke(app, ["edit", "--menu"], input="", env=cli_env)

        assert result.exit_code == 0
        assert load_todos(todos_path) == ["Buy milk", "Call Sam"]


class TestEditExternal:
    """Tests for `greeter edit` with the external editor."""

    def test_editor_changes_are_shown(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        def fake_editor(command, check):
            Path(command[-1]).write_text("# written in vim\n")
            return MagicMock(returncode=0)

        with patch("subprocess.run", side_effect=fake_editor) as mock_run:
            result = runner.invoke(app, ["edit"], env={**cli_env, "EDITOR": "vim"})

        assert result.exit_code == 0
        assert mock_run.call_args.args[0] == ["vim", str(todos_path)]
        assert "  1. written in vim" in result.output

    def test_greeter_editor_overrides_editor(self, cli_env: dict[str, str]) -> None:
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            runner.invoke(
                app, ["edit"], env={**cli_env, "EDITOR": "vim", "GREETER_EDITOR": "nano -w"}
            )

        assert mock_run.call_args.args[0][:2] == ["nano", "-w"]

    def test_editor_failure(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["keep"])

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1)
            result = runner.invoke(app, ["edit"], env=cli_env)

        assert result.exit_code == 1
        assert "editor exited with non-zero status code 1" in result.output
        assert "  1. keep" in result.output
        assert load_todos(todos_path) == ["keep"]

    def test_unparseable_editor_reported(self, todos_path: Path, cli_env: dict[str, str]) -> None:
        save_todos(todos_path, ["keep"])

        with patch("subprocess.run") as mock_run:
            result = runner.invoke(
                app, ["edit"], env={**cli_env, "GREETER_EDITOR": 'vim "unterminated'}
            )

        mock_run.assert_not_called()
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "can't parse editor command" in result.output
        assert "  1. keep" in result.output
        assert load_todos(todos_path) == ["keep"]


# =============================================================================
# run_greeter
# =============================================================================


class TestRunGreeter:
    """Tests for run_greeter called directly."""

    def test_verb_request(
        self, config: GreeterConfig, todos_path: Path, console: Console, read_console
    ) -> None:
        code = run_greeter(config, EditRequest(mode="verb", verb="add", args=["x"]), console)

        assert code == 0
        assert load_todos(todos_path) == ["x"]
        assert "  1. x" in read_console(console)

    def test_weather_shown(self, config: GreeterConfig, console: Console, read_console) -> None:
        config.weather_api_key = "k"
        reading = WeatherReading(temp_c=9.5, condition_text="Sunny", place_name="Brighton")

        with patch("greeter.cli.fetch_weather", AsyncMock(return_value=reading)):
            code = run_greeter(config, console=console)

        assert code == 0
        assert "Weather: 9.5°C and sunny in Brighton 🌤️" in read_console(console)

    def test_weather_failure_is_not_fatal(
        self, config: GreeterConfig, console: Console, read_console
    ) -> None:
        config.weather_api_key = "k"
        failure = AsyncMock(side_effect=WeatherError("weather API returned 500"))

        with patch("greeter.cli.fetch_weather", failure):
            code = run_greeter(config, console=console)

        assert code == 0
        assert "Weather: weather API returned 500" in read_console(console)

    def test_enabled_without_key_warns(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, [], env={**cli_env, "GREETER_WEATHER_ENABLED": "1"})

        assert result.exit_code == 0
        assert "greeter: warning: weather is enabled but no API key is configured" in (
            result.output
        )
        assert "Weather:" not in result.output

    def test_weather_skipped_without_key(self, config: GreeterConfig, console: Console) -> None:
        with patch("greeter.cli.fetch_weather") as mock_fetch:
            run_greeter(config, console=console)

        mock_fetch.assert_not_called()
