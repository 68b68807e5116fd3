"""Rendering helpers shared by the CLI and the selector."""

from __future__ import annotations

from typing import Any, Dict

from rich.console import Console
from rich.markup import escape

from .models import TodoItem

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def format_todo_markup(number: int, todo: TodoItem) -> str:
    """``N. body  #id`` as rich markup; completed todos are struck through."""
    line = f"{number}. {escape(todo.body)}"
    if todo.done:
        line = f"[strike]{line}[/strike]"
    return f"{line}  [dim]#{todo.id}[/dim]"


def format_todo_json(todo: TodoItem) -> Dict[str, Any]:
    return {"id": todo.id, "body": todo.body, "done": todo.done}
