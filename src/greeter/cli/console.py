"""Shared rich consoles and the greeter colour theme."""

from __future__ import annotations

import os
from collections.abc import Mapping

from rich.console import Console
from rich.theme import Theme

__all__ = [
    "GREETER_THEME",
    "color_disabled",
    "get_console",
    "get_error_console",
    "reset_console",
]

GREETER_THEME = Theme(
    {
        "label": "bold bright_blue",
        "user": "bold bright_magenta",
        "error": "red",
        "error.label": "bold red",
        "success": "green",
        "warning": "yellow",
        "muted": "dim",
        "rule": "dim",
    }
)

_console: Console | None = None
_error_console: Console | None = None


def color_disabled(environ: Mapping[str, str] | None = None) -> bool:
    """True when ``NO_COLOR`` is set to any non-empty value."""
    environ = os.environ if environ is None else environ
    return bool(environ.get("NO_COLOR"))


def get_console() -> Console:
    """Process-wide stdout console with the greeter theme."""
    global _console
    if _console is None:
        _console = Console(theme=GREETER_THEME, no_color=color_disabled(), highlight=False)
    return _console


def get_error_console() -> Console:
    """Process-wide stderr console with the greeter theme."""
    global _error_console
    if _error_console is None:
        _error_console = Console(
            theme=GREETER_THEME,
            stderr=True,
            no_color=color_disabled(),
            highlight=False,
        )
    return _error_console


def reset_console() -> None:
    """Forget the cached consoles (tests swap stdout underneath them)."""
    global _console, _error_console
    _console = None
    _error_console = None
