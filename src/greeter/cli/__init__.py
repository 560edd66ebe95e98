"""greeter command line.

Usage:
    greeter                          # Print the banner
    greeter edit                     # Open the todos file in $EDITOR
    greeter edit --menu              # Interactive add/remove menu
    greeter edit add Get bagels      # Append a todo
    greeter edit done 2              # Remove todo 2 (done/check, "1,3" for several)
    greeter edit fix 1 Buy oat milk  # Replace todo 1
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from typing import Annotated, Literal

import typer
from rich.console import Console

from greeter import __version__
from greeter.cli.console import get_console
from greeter.cli.output import print_banner, print_cli_error, print_cli_warning, print_todos
from greeter.config import GreeterConfig
from greeter.errors import (
    ConfigurationError,
    EditError,
    EditorError,
    GreeterError,
    TodoNotFoundError,
    TodoStorageError,
    WeatherError,
    log_exception,
)
from greeter.logging import configure_logging, get_logger
from greeter.telemetry import collect
from greeter.todos.commands import apply_command, parse_command
from greeter.todos.editor import edit_via_external_process, resolve_editor
from greeter.todos.menu import run_menu
from greeter.todos.models import TodoList
from greeter.todos.storage import load_todos, save_todos
from greeter.weather import WeatherReading, fetch_weather

__all__ = ["EditRequest", "app", "main", "run_greeter"]

logger = get_logger("cli")

EditMode = Literal["editor", "menu", "verb"]


@dataclass
class EditRequest:
    """Which editing path the invocation asked for."""

    mode: EditMode
    verb: str | None = None
    args: list[str] = field(default_factory=list)


# =============================================================================
# Driver
# =============================================================================


def _report(error: GreeterError) -> None:
    print_cli_error(error.message, hint=error.hint)


def _load(config: GreeterConfig) -> TodoList | TodoStorageError:
    try:
        return load_todos(config.todos_path)
    except TodoStorageError as e:
        log_exception(logger, "Loading todos failed", e, level="debug", include_traceback=False)
        return e


def _fetch_weather(config: GreeterConfig) -> WeatherReading | WeatherError | None:
    if not config.weather_active:
        return None
    try:
        return asyncio.run(fetch_weather(config.weather_api_key or "", config.weather_location))
    except WeatherError as e:
        log_exception(logger, "Weather lookup failed", e, include_traceback=False)
        return e


def _edit_with_editor(config: GreeterConfig, todos: TodoList | TodoStorageError):
    """Run the external editor. On failure the file was not ours to save."""
    try:
        command = resolve_editor(config.editor, config.environ)
        edit_via_external_process(config.todos_path, command)
    except EditorError as e:
        _report(e)
        return todos, 1
    return _load(config), 0


def _edit_in_process(
    config: GreeterConfig,
    todos: TodoList | TodoStorageError,
    request: EditRequest,
    console: Console,
):
    """Apply a verb or run the menu, then save."""
    if isinstance(todos, TodoNotFoundError):
        todos = []
    elif isinstance(todos, TodoStorageError):
        # Never overwrite a file we could not read.
        _report(todos)
        return todos, 1

    exit_code = 0
    if request.mode == "menu":
        todos = run_menu(
            todos,
            render=lambda items: print_todos(items, console),
            console=console,
            stream=sys.stdin,
        )
    else:
        try:
            command = parse_command(request.verb or "", request.args)
            apply_command(todos, command)
        except EditError as e:
            _report(e)
            exit_code = 1

    try:
        save_todos(config.todos_path, todos)
    except GreeterError as e:
        _report(e)
        exit_code = 1
    return todos, exit_code


def run_greeter(
    config: GreeterConfig,
    edit: EditRequest | None = None,
    console: Console | None = None,
) -> int:
    """Run one invocation and return its exit status.

    Loads the list, applies at most one edit path, saves, and renders the
    banner. Errors are reported on stderr; the banner is always printed.
    """
    console = console or get_console()
    exit_code = 0

    for problem in config.validate():
        print_cli_warning(problem.message)

    weather = _fetch_weather(config)
    todos = _load(config)

    if edit is not None:
        if edit.mode == "editor":
            todos, exit_code = _edit_with_editor(config, todos)
        else:
            todos, exit_code = _edit_in_process(config, todos, edit, console)

    print_banner(collect(config), todos, weather, console)
    return exit_code


# =============================================================================
# Typer app
# =============================================================================


_TYPER_HELP = """Login banner with host stats, weather and a todo list.

**Editing todos:**

* `greeter edit`: open the todos file in your editor
* `greeter edit --menu`: interactive menu
* `greeter edit add|done|check|fix ...`: one-shot edits
"""

app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=False,
    add_completion=False,
    help=_TYPER_HELP,
    rich_markup_mode="markdown",
)


def _load_config() -> GreeterConfig:
    try:
        config = GreeterConfig.from_env()
    except ConfigurationError as e:
        _report(e)
        raise typer.Exit(1)
    configure_logging(level=config.log_level, format=config.log_format)
    return config


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        typer.echo(f"greeter {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
):
    """Print the login banner."""
    if ctx.invoked_subcommand is None:
        raise typer.Exit(run_greeter(_load_config()))


@app.command(
    "edit",
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
)
def edit_cmd(
    words: Annotated[
        list[str] | None,
        typer.Argument(
            metavar="[VERB] [ARGS]...",
            help="add <text> | done <n[,n...]> | check <n[,n...]> | fix <n> <text>",
            show_default=False,
        ),
    ] = None,
    menu: Annotated[
        bool,
        typer.Option("--menu", "-i", help="Edit with the interactive menu"),
    ] = False,
):
    """Edit the todo list, then print the banner."""
    words = words or []
    if menu and words:
        print_cli_error("--menu does not take a verb", hint="Use either `edit --menu` or `edit <verb>`")
        raise typer.Exit(2)

    if menu:
        request = EditRequest(mode="menu")
    elif words:
        request = EditRequest(mode="verb", verb=words[0], args=words[1:])
    else:
        request = EditRequest(mode="editor")

    raise typer.Exit(run_greeter(_load_config(), request))


def main():
    app()


if __name__ == "__main__":
    main()
