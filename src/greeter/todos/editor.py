"""Open the todos file in an external editor.

The editor owns the file while it runs; this module only starts it and
waits. The caller reloads the list afterwards.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from greeter.errors import EditorError, EditorFailedError, EditorSpawnError
from greeter.logging import get_logger

__all__ = [
    "DEFAULT_EDITOR",
    "edit_via_external_process",
    "resolve_editor",
]

logger = get_logger("todos.editor")

DEFAULT_EDITOR = "vi"


def resolve_editor(
    configured: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[str]:
    """Pick the editor command line.

    Precedence: ``configured`` (GREETER_EDITOR), ``$VISUAL``, ``$EDITOR``,
    then ``vi``. Values are split shell-style, so ``"code --wait"`` works.

    Raises:
        EditorError: The chosen value is not valid shell syntax, e.g. an
            unbalanced quote.
    """
    environ = environ or {}
    for candidate in (configured, environ.get("VISUAL"), environ.get("EDITOR")):
        if candidate and candidate.strip():
            try:
                return shlex.split(candidate)
            except ValueError as e:
                raise EditorError(
                    f"can't parse editor command {candidate!r}: {e}",
                    editor=candidate,
                    hint="Check the quoting in GREETER_EDITOR, VISUAL or EDITOR",
                ) from e
    return [DEFAULT_EDITOR]


def edit_via_external_process(path: Path | str, editor_command: Sequence[str]) -> None:
    """Run the editor on ``path`` and wait for it to exit.

    There is no timeout: the call returns when the user closes the editor.

    Raises:
        EditorSpawnError: The editor could not be started.
        EditorFailedError: The editor exited with a non-zero status.
    """
    path = Path(path)
    if not editor_command:
        raise EditorSpawnError("", "empty editor command")
    command = [*editor_command, str(path)]
    editor = editor_command[0]

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EditorSpawnError(editor, f"cannot create {path.parent}: {e.strerror or e}") from e

    logger.debug("editor_started", command=" ".join(command))
    try:
        result = subprocess.run(command, check=False)
    except OSError as e:
        raise EditorSpawnError(editor, e.strerror or str(e)) from e

    if result.returncode != 0:
        raise EditorFailedError(result.returncode, editor=editor)
    logger.debug("editor_finished", editor=editor)
