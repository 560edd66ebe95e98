"""Banner and status-line rendering.

Everything here is presentation only: it takes already-collected values
(or the errors that replaced them) and prints them.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from greeter.cli.console import get_console, get_error_console
from greeter.errors import GreeterError
from greeter.telemetry import TelemetrySnapshot
from greeter.todos.models import TodoList
from greeter.weather import WeatherReading, condition_emoji

__all__ = [
    "print_banner",
    "print_cli_error",
    "print_cli_warning",
    "print_field",
    "print_todos",
]


def _field_error(label: str, error: BaseException) -> Text:
    message = error.message if isinstance(error, GreeterError) else str(error)
    return Text.assemble((label, "error.label"), ": ", (message, "error"))


def print_field(
    label: str,
    value: object,
    console: Console | None = None,
) -> None:
    """Print ``Label: value``, or ``Label: error`` in red if value is an error."""
    console = console or get_console()
    if isinstance(value, BaseException):
        console.print(_field_error(label, value))
    else:
        console.print(Text.assemble((label, "label"), ": ", str(value)))


def print_todos(
    todos: TodoList | GreeterError,
    console: Console | None = None,
) -> None:
    """Print the numbered todo list."""
    console = console or get_console()
    if isinstance(todos, GreeterError):
        console.print(_field_error("Todos", todos))
        return
    if not todos:
        console.print(Text.assemble(("Todos", "label"), ": none!"))
        return
    console.print(Text.assemble(("Todos", "label"), ":"))
    for number, todo in enumerate(todos, 1):
        console.print(Text(f"  {number}. {todo}"))


def _format_weather(reading: WeatherReading) -> str:
    condition = reading.condition_text.lower()
    return (
        f"{reading.temp_c:g}°C and {condition} in {reading.place_name} "
        f"{condition_emoji(condition)}"
    )


def print_banner(
    snapshot: TelemetrySnapshot,
    todos: TodoList | GreeterError,
    weather: WeatherReading | GreeterError | None = None,
    console: Console | None = None,
) -> None:
    """Print the full login banner.

    Args:
        snapshot: Telemetry values or their errors.
        todos: The todo list, or the error that prevented loading it.
        weather: ``None`` when weather was not requested.
        console: Defaults to the shared stdout console.
    """
    console = console or get_console()

    host = snapshot.hostname if isinstance(snapshot.hostname, str) else "unknown"
    header = f"{snapshot.user}@{host}"

    console.print()
    console.print(Text.assemble((snapshot.user, "user"), f"@{host}"))
    console.print(Text("-" * len(header), style="rule"))

    uptime = snapshot.uptime
    if not isinstance(uptime, BaseException):
        uptime = f"{uptime[0]}h {uptime[1]}m"
    print_field("Uptime", uptime, console)

    memory = snapshot.memory
    if not isinstance(memory, BaseException):
        memory = f"{memory[0] // 1024} MiB / {memory[1] // 1024} MiB"
    print_field("Memory", memory, console)

    kernel = snapshot.kernel
    if not isinstance(kernel, BaseException):
        kernel = f"Linux {kernel}"
    print_field("Kernel", kernel, console)

    cpu_temp = snapshot.cpu_temp
    if not isinstance(cpu_temp, BaseException):
        cpu_temp = f"{cpu_temp:.1f}°C"
    print_field("CPU temp", cpu_temp, console)

    if weather is not None:
        if isinstance(weather, WeatherReading):
            print_field("Weather", _format_weather(weather), console)
        else:
            print_field("Weather", weather, console)

    print_todos(todos, console)
    console.print()


# =============================================================================
# Status lines
# =============================================================================


def print_cli_error(message: str, hint: str | None = None, console: Console | None = None) -> None:
    """``greeter: error: message`` on stderr."""
    console = console or get_error_console()
    console.print(Text.assemble(("greeter: error: ", "error.label"), (message, "error")))
    if hint:
        console.print(Text(f"  {hint}", style="muted"))


def print_cli_warning(message: str, console: Console | None = None) -> None:
    console = console or get_error_console()
    console.print(Text.assemble(("greeter: warning: ", "warning"), message))
