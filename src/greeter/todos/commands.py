"""Edit command processor.

``apply_command`` is the only code that mutates a todo list. It validates
before it touches anything, so a rejected command always leaves the list
exactly as it was.

``parse_command`` adapts command-line verbs to commands::

    greeter edit add Get bagels      -> AddCommand("Get bagels")
    greeter edit done 2              -> RemoveManyCommand((2,))
    greeter edit check 1,3           -> RemoveManyCommand((1, 3))
    greeter edit fix 1 Buy oat milk  -> ReplaceCommand(1, "Buy oat milk")
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from greeter.errors import IndexOutOfRangeError, InvalidArgumentError, UnknownVerbError
from greeter.logging import get_logger
from greeter.todos.models import (
    AddCommand,
    EditCommand,
    RemoveManyCommand,
    ReplaceCommand,
    TodoList,
)

__all__ = [
    "REMOVE_VERBS",
    "VERBS",
    "apply_command",
    "describe_command",
    "parse_command",
    "parse_index",
    "parse_indices",
    "parse_todo_text",
]

logger = get_logger("todos.commands")

REMOVE_VERBS = ("done", "check")
VERBS = ("add", *REMOVE_VERBS, "fix")

_INDEX_SEPARATOR = re.compile(r"[,\s]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")


# =============================================================================
# Argument parsing
# =============================================================================


def parse_index(raw: str) -> int:
    """Parse one 1-based index. Range is checked later, against the list."""
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        raise InvalidArgumentError(
            f"'{text}' is not a todo number",
            argument=raw,
            hint="Give the number shown next to the todo",
        )
    return int(text)


def parse_indices(raw: str) -> tuple[int, ...]:
    """Parse ``"1,3"``, ``"1 3"`` or ``"1, 3"`` into a tuple of indices."""
    parts = [p for p in _INDEX_SEPARATOR.split(raw.strip()) if p]
    if not parts:
        raise InvalidArgumentError(
            "you should supply a number to mark as done",
            argument=raw,
            hint="e.g. `greeter edit done 2` or `greeter edit done 1,3`",
        )
    return tuple(parse_index(p) for p in parts)


def parse_todo_text(words: Sequence[str]) -> str:
    """Join words into one todo's text.

    Raises:
        InvalidArgumentError: The text contains a line break.
    """
    text = " ".join(words)
    if "\n" in text or "\r" in text:
        raise InvalidArgumentError(
            "a todo can't contain a line break",
            argument=text,
            hint="Each todo must fit on one line",
        )
    return text


def parse_command(verb: str, args: Sequence[str]) -> EditCommand:
    """Build an edit command from a verb and its positional arguments.

    Raises:
        UnknownVerbError: ``verb`` is not add, done, check or fix.
        InvalidArgumentError: An index is missing or not an integer, or the
            text contains a line break.
    """
    name = verb.strip().lower()

    if name == "add":
        return AddCommand(parse_todo_text(args))

    if name in REMOVE_VERBS:
        return RemoveManyCommand(parse_indices(" ".join(args)))

    if name == "fix":
        if not args:
            raise InvalidArgumentError(
                "please give a todo number to fix",
                hint="e.g. `greeter edit fix 2 Buy oat milk`",
            )
        return ReplaceCommand(parse_index(args[0]), parse_todo_text(args[1:]))

    raise UnknownVerbError(verb)


# =============================================================================
# Application
# =============================================================================


def _check_index(index: int, length: int) -> None:
    if index < 1 or index > length:
        raise IndexOutOfRangeError(index, length)


def apply_command(todos: TodoList, command: EditCommand) -> None:
    """Apply ``command`` to ``todos`` in place.

    Raises:
        IndexOutOfRangeError: An index is outside ``1..len(todos)``. The list
            is unchanged.
        InvalidArgumentError: A removal with no indices.
    """
    if isinstance(command, AddCommand):
        todos.append(command.text)

    elif isinstance(command, RemoveManyCommand):
        if not command.indices:
            raise InvalidArgumentError("no todo numbers given")
        length = len(todos)
        for index in command.indices:
            _check_index(index, length)
        # Highest first, so each deletion leaves the lower positions intact.
        for index in sorted(set(command.indices), reverse=True):
            del todos[index - 1]

    elif isinstance(command, ReplaceCommand):
        _check_index(command.index, len(todos))
        todos[command.index - 1] = command.text

    else:
        raise TypeError(f"unsupported edit command: {command!r}")

    logger.debug("command_applied", command=describe_command(command), count=len(todos))


def describe_command(command: EditCommand) -> str:
    """One-line summary for logs and menu feedback."""
    if isinstance(command, AddCommand):
        return f"added '{command.text}'"
    if isinstance(command, RemoveManyCommand):
        numbers = ", ".join(str(i) for i in sorted(set(command.indices)))
        return f"removed {numbers}"
    if isinstance(command, ReplaceCommand):
        return f"replaced {command.index} with '{command.text}'"
    return repr(command)
