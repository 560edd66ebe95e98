"""Todo list persistence and editing."""

from greeter.todos.commands import apply_command, describe_command, parse_command
from greeter.todos.editor import edit_via_external_process, resolve_editor
from greeter.todos.menu import MenuSession, run_menu
from greeter.todos.models import (
    AddCommand,
    EditCommand,
    RemoveManyCommand,
    ReplaceCommand,
    TodoDocument,
    TodoList,
)
from greeter.todos.storage import decode_todos, encode_todos, load_todos, save_todos

__all__ = [
    "AddCommand",
    "EditCommand",
    "MenuSession",
    "RemoveManyCommand",
    "ReplaceCommand",
    "TodoDocument",
    "TodoList",
    "apply_command",
    "decode_todos",
    "describe_command",
    "edit_via_external_process",
    "encode_todos",
    "load_todos",
    "parse_command",
    "resolve_editor",
    "run_menu",
    "save_todos",
]
