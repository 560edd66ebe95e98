"""Todo list value types.

A todo list is a plain ``list[str]``: position is the only identity an item
has, and positions shown to the user are 1-based. Edits are expressed as
one of three command dataclasses so every editing front-end (verbs, menu)
funnels through the same processor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

__all__ = [
    "AddCommand",
    "EditCommand",
    "RemoveManyCommand",
    "ReplaceCommand",
    "TodoDocument",
    "TodoList",
]

TodoList: TypeAlias = list[str]


@dataclass(frozen=True)
class AddCommand:
    """Append ``text`` as the new last item."""

    text: str


@dataclass(frozen=True)
class RemoveManyCommand:
    """Remove the items at the given 1-based positions."""

    indices: tuple[int, ...]


@dataclass(frozen=True)
class ReplaceCommand:
    """Overwrite the item at 1-based ``index`` with ``text``."""

    index: int
    text: str


EditCommand: TypeAlias = AddCommand | RemoveManyCommand | ReplaceCommand


@dataclass
class TodoDocument:
    """A decoded todos file.

    Attributes:
        items: The todo block, in file order.
        trailer: Everything from the first non-marker line to the end of the
            file, kept verbatim so saving never drops it.
    """

    items: TodoList
    trailer: str = ""
