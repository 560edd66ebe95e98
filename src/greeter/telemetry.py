"""Host telemetry read from /proc and /sys.

Every reader is independent and raises :class:`TelemetryError` on its own
failure. :func:`collect` runs them all and keeps each result or error, so the
banner can show whatever is available.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from greeter.config import GreeterConfig
from greeter.errors import TelemetryError
from greeter.logging import get_logger

__all__ = [
    "PROC_ROOT",
    "TelemetrySnapshot",
    "collect",
    "cpu_temperature",
    "current_user",
    "hostname",
    "kernel_version",
    "memory",
    "uptime",
]

logger = get_logger("telemetry")

PROC_ROOT = Path("/proc")

T = TypeVar("T")


def _read(path: Path, field: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise TelemetryError(field, f"cannot read {path}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise TelemetryError(field, f"invalid data in {path}") from e


def uptime(proc_root: Path = PROC_ROOT) -> tuple[int, int]:
    """``(hours, minutes)`` since boot."""
    contents = _read(proc_root / "uptime", "uptime").split()
    if not contents:
        raise TelemetryError("uptime", "invalid uptime data")
    try:
        seconds = int(float(contents[0]))
    except ValueError:
        raise TelemetryError("uptime", "invalid uptime data") from None
    return seconds // 3600, (seconds % 3600) // 60


def memory(proc_root: Path = PROC_ROOT) -> tuple[int, int]:
    """``(used_kib, total_kib)`` where used is ``MemTotal - MemAvailable``."""
    values: dict[str, int] = {}
    for line in _read(proc_root / "meminfo", "memory").splitlines():
        key, sep, rest = line.partition(":")
        if not sep or key.strip() not in ("MemTotal", "MemAvailable"):
            continue
        number = rest.split()
        try:
            values[key.strip()] = int(number[0])
        except (IndexError, ValueError):
            raise TelemetryError("memory", f"invalid memory data for {key.strip()}") from None

    if "MemTotal" not in values or "MemAvailable" not in values:
        raise TelemetryError("memory", "MemTotal/MemAvailable missing from meminfo")
    total = values["MemTotal"]
    return total - values["MemAvailable"], total


def kernel_version(proc_root: Path = PROC_ROOT) -> str:
    """Third word of /proc/version, e.g. ``6.8.0-45-generic``."""
    words = _read(proc_root / "version", "kernel").split()
    if len(words) < 3:
        raise TelemetryError("kernel", "invalid kernel version")
    return words[2]


def hostname(proc_root: Path = PROC_ROOT) -> str:
    name = _read(proc_root / "sys" / "kernel" / "hostname", "hostname").strip()
    if not name:
        raise TelemetryError("hostname", "empty hostname")
    return name


def cpu_temperature(path: Path) -> float:
    """Degrees Celsius from a hwmon file holding millidegrees."""
    raw = _read(Path(path), "cpu_temp").strip()
    try:
        return int(raw) / 1000.0
    except ValueError:
        raise TelemetryError("cpu_temp", "invalid temperature data") from None


def current_user(environ: Mapping[str, str]) -> str | None:
    """``$LOGNAME``, falling back to ``$USER``."""
    return environ.get("LOGNAME") or environ.get("USER") or None


# =============================================================================
# Snapshot
# =============================================================================


@dataclass
class TelemetrySnapshot:
    """One reading of every field; failed fields hold their error."""

    user: str
    hostname: str | TelemetryError
    uptime: tuple[int, int] | TelemetryError
    memory: tuple[int, int] | TelemetryError
    kernel: str | TelemetryError
    cpu_temp: float | TelemetryError

    @property
    def errors(self) -> list[TelemetryError]:
        values = (self.hostname, self.uptime, self.memory, self.kernel, self.cpu_temp)
        return [v for v in values if isinstance(v, TelemetryError)]


def _capture(reader: Callable[[], T]) -> T | TelemetryError:
    try:
        return reader()
    except TelemetryError as e:
        logger.debug("telemetry_failed", field=e.field, error=e.message)
        return e


def collect(config: GreeterConfig, proc_root: Path = PROC_ROOT) -> TelemetrySnapshot:
    """Read every telemetry field."""
    return TelemetrySnapshot(
        user=current_user(config.environ) or "unknown",
        hostname=_capture(lambda: hostname(proc_root)),
        uptime=_capture(lambda: uptime(proc_root)),
        memory=_capture(lambda: memory(proc_root)),
        kernel=_capture(lambda: kernel_version(proc_root)),
        cpu_temp=_capture(lambda: cpu_temperature(config.cpu_temp_path)),
    )
