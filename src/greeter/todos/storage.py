"""On-disk todo list codec.

File format (UTF-8, line-oriented)::

    # Buy oat milk
    # Wash car

    anything after the block is kept but not parsed

- Every line of the todo block starts with the ``#`` marker. The item text is
  the rest of the line minus at most one space after the marker.
- A line that is exactly ``#`` is an empty marker and is skipped.
- The first line that does not start with ``#`` (usually a blank line) ends
  the block. It and everything after it form the trailer, which ``save_todos``
  writes back untouched.
- Each item is written as ``# <text>\\n``, so an empty item is ``# \\n`` and
  an empty list is an empty block.
"""

from __future__ import annotations

from pathlib import Path

from greeter.errors import (
    InvalidArgumentError,
    TodoDecodeError,
    TodoNotFoundError,
    TodoReadError,
    TodoWriteError,
)
from greeter.logging import get_logger
from greeter.todos.models import TodoDocument, TodoList

__all__ = [
    "MARKER",
    "decode_document",
    "decode_todos",
    "encode_todos",
    "load_document",
    "load_todos",
    "save_todos",
]

logger = get_logger("todos.storage")

MARKER = "#"


# =============================================================================
# Pure codec
# =============================================================================


def decode_document(text: str) -> TodoDocument:
    """Split file content into the todo block and the trailer."""
    items: TodoList = []
    pos = 0
    while pos < len(text):
        end = text.find("\n", pos)
        next_pos = len(text) if end == -1 else end + 1
        line = text[pos:next_pos].rstrip("\n")
        if line.endswith("\r"):
            line = line[:-1]

        if not line.startswith(MARKER):
            return TodoDocument(items=items, trailer=text[pos:])

        if line != MARKER:
            body = line[len(MARKER) :]
            if body.startswith(" "):
                body = body[1:]
            items.append(body)
        pos = next_pos

    return TodoDocument(items=items)


def decode_todos(text: str) -> TodoList:
    """Decode the todo block of ``text``, ignoring any trailer."""
    return decode_document(text).items


def encode_todos(todos: TodoList) -> str:
    """Encode items as marker-prefixed, newline-terminated lines.

    Raises:
        InvalidArgumentError: If an item contains a line break.
    """
    for position, item in enumerate(todos, 1):
        if "\n" in item or "\r" in item:
            raise InvalidArgumentError(
                f"todo {position} contains a line break",
                argument=item,
                hint="Each todo must fit on one line",
            )
    return "".join(f"{MARKER} {item}\n" for item in todos)


def _decode_bytes(data: bytes, path: Path | None) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_number = data.count(b"\n", 0, e.start) + 1
        raise TodoDecodeError(path, line_number) from e


# =============================================================================
# File I/O
# =============================================================================


def load_document(path: Path | str) -> TodoDocument:
    """Read and decode the whole todos file.

    Raises:
        TodoNotFoundError: The file does not exist.
        TodoDecodeError: The file is not valid UTF-8.
        TodoReadError: Any other OS error.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise TodoNotFoundError(path) from e
    except OSError as e:
        raise TodoReadError(path, e.strerror or str(e)) from e

    document = decode_document(_decode_bytes(data, path))
    logger.debug("todos_loaded", path=str(path), count=len(document.items))
    return document


def load_todos(path: Path | str) -> TodoList:
    """Read the todo list from ``path``. See :func:`load_document`."""
    return load_document(path).items


def save_todos(path: Path | str, todos: TodoList) -> None:
    """Overwrite ``path`` with ``todos``, keeping any existing trailer.

    Missing parent directories are created. The whole file is rewritten, so
    a failure part-way through can lose the previous content.

    Raises:
        InvalidArgumentError: An item contains a line break. Nothing is
            written.
        TodoDecodeError: The existing file is not valid UTF-8. Nothing is
            written, so an unreadable file is never clobbered.
        TodoReadError: The existing file could not be read.
        TodoWriteError: The file could not be created or written.
    """
    path = Path(path)
    block = encode_todos(todos)

    try:
        trailer = load_document(path).trailer
    except TodoNotFoundError:
        trailer = ""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes((block + trailer).encode("utf-8"))
    except OSError as e:
        raise TodoWriteError(path, e.strerror or str(e)) from e

    logger.info("todos_saved", path=str(path), count=len(todos))
