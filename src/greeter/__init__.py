import os

from dotenv import find_dotenv, load_dotenv

if not os.environ.get("GREETER_ENV_LOADED"):
    load_dotenv(find_dotenv(usecwd=True))
    os.environ["GREETER_ENV_LOADED"] = "1"

__version__ = "0.3.0"

from greeter.config import GreeterConfig
from greeter.errors import (
    ConfigurationError,
    EditError,
    EditorError,
    GreeterError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    TelemetryError,
    TodoStorageError,
    UnknownVerbError,
    WeatherError,
)
from greeter.logging import configure_logging, get_logger
from greeter.todos import (
    AddCommand,
    EditCommand,
    RemoveManyCommand,
    ReplaceCommand,
    apply_command,
    load_todos,
    parse_command,
    run_menu,
    save_todos,
)

__all__ = [
    "AddCommand",
    "ConfigurationError",
    "EditCommand",
    "EditError",
    "EditorError",
    "GreeterConfig",
    "GreeterError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "RemoveManyCommand",
    "ReplaceCommand",
    "TelemetryError",
    "TodoStorageError",
    "UnknownVerbError",
    "WeatherError",
    "__version__",
    "apply_command",
    "configure_logging",
    "get_logger",
    "load_todos",
    "parse_command",
    "run_menu",
    "save_todos",
]
