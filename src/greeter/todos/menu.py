"""Interactive line menu for editing todos.

Each turn shows the list, prompts, and reads one line:

    #<text>     add a todo
    -<n>        remove todo n (``-1,3`` removes several)
    !           quit (so does any line containing "quit" or "exit")

End of input behaves like quit. Bad input is reported and the loop carries
on; nothing typed here can crash the session.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.text import Text

from greeter.errors import EditError, InvalidArgumentError
from greeter.logging import get_logger
from greeter.todos.commands import (
    apply_command,
    describe_command,
    parse_indices,
    parse_todo_text,
)
from greeter.todos.models import AddCommand, EditCommand, RemoveManyCommand, TodoList
from greeter.todos.storage import MARKER

__all__ = [
    "MENU_HELP",
    "MenuSession",
    "MenuSignal",
    "interpret_line",
    "run_menu",
]

logger = get_logger("todos.menu")

PROMPT = "> "
REMOVE_SIGIL = "-"
EXIT_SIGIL = "!"
EXIT_WORDS = ("quit", "exit")

MENU_HELP = "#<text> to add, -<number> to remove, ! to quit"


class MenuSignal(str, Enum):
    """Non-edit outcomes of a menu line."""

    EXIT = "exit"
    BLANK = "blank"


def _strip_marker(line: str, marker: str) -> str:
    body = line[len(marker) :]
    if body.startswith(" "):
        body = body[1:]
    return body


def interpret_line(line: str) -> EditCommand | MenuSignal:
    """Classify one line of menu input.

    Sigil lines are checked before the exit words, so ``#quit smoking``
    adds a todo instead of leaving the menu.

    Only the line ending and leading blanks are dropped from an added
    todo; trailing spaces are kept as typed, the same as a verb add.

    Raises:
        InvalidArgumentError: Unrecognised input, a bad index after ``-``, or
            todo text containing a line break.
    """
    raw = line.rstrip("\r\n").lstrip()
    text = raw.rstrip()

    if not text:
        return MenuSignal.BLANK

    if raw.startswith(MARKER):
        return AddCommand(parse_todo_text([_strip_marker(raw, MARKER)]))

    if text.startswith(REMOVE_SIGIL):
        return RemoveManyCommand(parse_indices(text[len(REMOVE_SIGIL) :]))

    lowered = text.lower()
    if text == EXIT_SIGIL or any(word in lowered for word in EXIT_WORDS):
        return MenuSignal.EXIT

    raise InvalidArgumentError(f"'{text}' is not a menu command", argument=text, hint=MENU_HELP)


@dataclass
class MenuSession:
    """State of one menu run.

    Attributes:
        todos: Working copy of the list; becomes the list to save.
        running: Cleared when the user quits or input ends.
        applied: Commands that changed the list.
        rejected: Lines that produced an error.
    """

    todos: TodoList = field(default_factory=list)
    running: bool = True
    applied: int = 0
    rejected: int = 0

    def handle_line(self, line: str) -> str | None:
        """Process one line, returning feedback for the user (if any).

        Raises:
            EditError: The line was rejected; the list is unchanged.
        """
        try:
            action = interpret_line(line)
            if action is MenuSignal.EXIT:
                self.running = False
                return None
            if action is MenuSignal.BLANK:
                return None
            apply_command(self.todos, action)
        except EditError:
            self.rejected += 1
            raise

        self.applied += 1
        summary = describe_command(action)
        return summary[:1].upper() + summary[1:]

    def stop(self) -> None:
        self.running = False


def run_menu(
    todos: TodoList,
    *,
    render: Callable[[TodoList], None],
    console: Console,
    stream: TextIO | None = None,
) -> TodoList:
    """Run the menu until quit or end of input.

    Args:
        todos: Starting list. Not mutated.
        render: Draws the current list at the start of each turn.
        console: Where prompts and feedback are drawn.
        stream: Where lines are read from; defaults to stdin.

    Returns:
        The edited list, for the caller to save.
    """
    stream = stream if stream is not None else sys.stdin
    session = MenuSession(todos=list(todos))

    console.print(Text(MENU_HELP, style="muted"))
    while session.running:
        console.print()
        render(session.todos)
        console.print(Text(PROMPT), end="")

        try:
            line = stream.readline()
        except KeyboardInterrupt:
            line = ""
        if line == "":
            console.print()
            session.stop()
            break

        try:
            feedback = session.handle_line(line)
        except EditError as e:
            console.print(Text(e.message, style="error"))
            if e.hint:
                console.print(Text(f"  {e.hint}", style="muted"))
            continue

        if feedback:
            console.print(Text(feedback, style="success"))

    logger.debug(
        "menu_finished",
        applied=session.applied,
        rejected=session.rejected,
        count=len(session.todos),
    )
    return session.todos
