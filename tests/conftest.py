"""
Root conftest.py for greeter tests.

This file provides:
1. Environment isolation (no GREETER_* leakage from the developer's shell)
2. A throwaway todos file and config
3. A fake /proc tree for telemetry
4. A recording rich console
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path

import pytest
from rich.console import Console

from greeter.cli.console import GREETER_THEME, reset_console
from greeter.config import GreeterConfig

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/integration/" in norm:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Strip greeter and editor settings from the environment.

    Also undoes any configure_logging() call so handlers never outlive the
    stream they were bound to.
    """
    for name in list(os.environ):
        if name.startswith("GREETER_") and name != "GREETER_ENV_LOADED":
            monkeypatch.delenv(name, raising=False)
    for name in ("VISUAL", "EDITOR", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)

    greeter_logger = logging.getLogger("greeter")
    handlers, level = list(greeter_logger.handlers), greeter_logger.level
    reset_console()
    yield
    reset_console()
    greeter_logger.handlers = handlers
    greeter_logger.setLevel(level)


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def todos_path(tmp_path: Path) -> Path:
    """Path for a todos file that does not exist yet."""
    return tmp_path / "share" / "greeter" / "todos"


@pytest.fixture
def fake_proc(tmp_path: Path) -> Path:
    """Minimal /proc tree with healthy values."""
    proc = tmp_path / "proc"
    (proc / "sys" / "kernel").mkdir(parents=True)
    (proc / "uptime").write_text("97380.52 381234.10\n")
    (proc / "meminfo").write_text(
        "MemTotal:       16318456 kB\n"
        "MemFree:         1203376 kB\n"
        "MemAvailable:    8159228 kB\n"
        "Buffers:          512000 kB\n"
    )
    (proc / "version").write_text(
        "Linux version 6.8.0-45-generic (buildd@lcy02-amd64-075) (gcc 13.2.0) #45-Ubuntu SMP\n"
    )
    (proc / "sys" / "kernel" / "hostname").write_text("workstation\n")
    return proc


@pytest.fixture
def cpu_temp_file(tmp_path: Path) -> Path:
    path = tmp_path / "temp2_input"
    path.write_text("47250\n")
    return path


@pytest.fixture
def config(todos_path: Path, cpu_temp_file: Path) -> GreeterConfig:
    """Config pointing at temporary files, weather off."""
    return GreeterConfig(
        todos_path=todos_path,
        cpu_temp_path=cpu_temp_file,
        environ={"USER": "sam"},
    )


# =============================================================================
# CONSOLE FIXTURES
# =============================================================================


@pytest.fixture
def console() -> Console:
    """Themed console writing to a buffer, no colour codes."""
    return Console(
        file=io.StringIO(),
        theme=GREETER_THEME,
        no_color=True,
        width=100,
        highlight=False,
    )


def console_text(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


@pytest.fixture
def read_console():
    """Return a helper reading back what a buffered console printed."""
    return console_text
