"""Runtime configuration.

All settings are read once, from the process environment (after
python-dotenv has merged a ``.env`` file into it), and passed explicitly to
the components that need them.

Example:
    ```python
    from greeter.config import GreeterConfig

    config = GreeterConfig.from_env()
    print(config.todos_path)

    # Tests build configs directly or from a fake environment
    config = GreeterConfig.from_env({"GREETER_TODOS_PATH": "/tmp/todos"})
    ```
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from greeter.errors import ConfigurationError

__all__ = [
    "DEFAULT_CPU_TEMP_PATH",
    "DEFAULT_WEATHER_LOCATION",
    "ENV_PREFIX",
    "GreeterConfig",
    "default_todos_path",
    "parse_bool",
]

ENV_PREFIX = "GREETER_"

DEFAULT_CPU_TEMP_PATH = Path("/sys/class/hwmon/hwmon1/temp2_input")
DEFAULT_WEATHER_LOCATION = "Brighton"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "human"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: str, setting: str) -> bool:
    """Parse a boolean environment value.

    Raises:
        ConfigurationError: If the value is not a recognised boolean.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"invalid boolean for {ENV_PREFIX}{setting.upper()}: {value!r}",
        setting=setting,
        hint="Use one of: 1/0, true/false, yes/no, on/off",
    )


def default_todos_path(environ: Mapping[str, str]) -> Path:
    """``$XDG_DATA_HOME/greeter/todos``, falling back to ``~/.local/share``."""
    data_home = environ.get("XDG_DATA_HOME")
    if data_home:
        base = Path(data_home)
    else:
        home = environ.get("HOME")
        base = (Path(home) if home else Path.home()) / ".local" / "share"
    return base / "greeter" / "todos"


@dataclass
class GreeterConfig:
    """Resolved settings for one invocation.

    Attributes:
        todos_path: Storage file for the todo list.
        editor: Editor command override. ``None`` defers to $VISUAL/$EDITOR.
        weather_api_key: Weather API key; weather is off without one.
        weather_location: Query string for the weather lookup.
        weather_enabled: Explicit on/off override. ``None`` means "on when a
            key is configured".
        cpu_temp_path: Sensor file holding millidegrees Celsius.
        log_level: Level name for the ``greeter`` logger.
        log_format: ``human`` or ``json``.
        environ: The environment the config was resolved from. Kept so
            editor resolution and user lookup stay explicit.
    """

    todos_path: Path
    editor: str | None = None
    weather_api_key: str | None = None
    weather_location: str = DEFAULT_WEATHER_LOCATION
    weather_enabled: bool | None = None
    cpu_temp_path: Path = DEFAULT_CPU_TEMP_PATH
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    environ: Mapping[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GreeterConfig:
        """Build a config from ``GREETER_*`` variables.

        Args:
            environ: Mapping to read; defaults to ``os.environ``.

        Raises:
            ConfigurationError: On a malformed boolean or log format.
        """
        env = dict(os.environ if environ is None else environ)

        def get(name: str) -> str | None:
            value = env.get(ENV_PREFIX + name.upper())
            if value is None or not value.strip():
                return None
            return value.strip()

        weather_enabled = None
        raw_enabled = get("weather_enabled")
        if raw_enabled is not None:
            weather_enabled = parse_bool(raw_enabled, "weather_enabled")

        log_format = (get("log_format") or DEFAULT_LOG_FORMAT).lower()
        if log_format not in ("human", "json"):
            raise ConfigurationError(
                f"invalid log format {log_format!r}",
                setting="log_format",
                hint="Use 'human' or 'json'",
            )

        todos_path = get("todos_path")
        cpu_temp_path = get("cpu_temp_path")

        return cls(
            todos_path=Path(todos_path).expanduser() if todos_path else default_todos_path(env),
            editor=get("editor"),
            weather_api_key=get("weather_api_key"),
            weather_location=get("weather_location") or DEFAULT_WEATHER_LOCATION,
            weather_enabled=weather_enabled,
            cpu_temp_path=Path(cpu_temp_path) if cpu_temp_path else DEFAULT_CPU_TEMP_PATH,
            log_level=(get("log_level") or DEFAULT_LOG_LEVEL).upper(),
            log_format=log_format,
            environ=env,
        )

    @property
    def weather_active(self) -> bool:
        """Whether the weather lookup should run."""
        if self.weather_enabled is False:
            return False
        return bool(self.weather_api_key)

    def validate(self) -> list[ConfigurationError]:
        """Non-fatal problems worth reporting to the user."""
        problems = []
        if self.weather_enabled and not self.weather_api_key:
            problems.append(
                ConfigurationError(
                    "weather is enabled but no API key is configured",
                    setting="weather_api_key",
                    hint="Set GREETER_WEATHER_API_KEY",
                )
            )
        return problems

    def to_dict(self) -> dict[str, Any]:
        """Settings as a dict with the API key masked."""
        return {
            "todos_path": str(self.todos_path),
            "editor": self.editor,
            "weather_api_key": "***" if self.weather_api_key else None,
            "weather_location": self.weather_location,
            "weather_enabled": self.weather_enabled,
            "cpu_temp_path": str(self.cpu_temp_path),
            "log_level": self.log_level,
            "log_format": self.log_format,
        }
