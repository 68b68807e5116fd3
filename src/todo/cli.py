#!/usr/bin/env python3
"""
todo - a small personal task list backed by SQLite

Usage:
    todo add [TEXT ...] [--format json|text]
    todo list [--incomplete] [--format json|text]
    todo toggle [--id ID ...] [--format json|text]
    todo edit [--id ID] [--body TEXT] [--format json|text]
    todo rm [--id ID ...] [--format json|text]

Without --id, toggle/edit/rm ask which todo(s) to act on. Without TEXT or
--body, add/edit open $EDITOR.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.markup import escape

from . import __version__
from .config import Config
from .display import console, err_console, format_todo_json, format_todo_markup
from .editor import edit_text
from .exceptions import (
    ConfigurationError,
    InvalidInputError,
    NotFoundError,
    StorageError,
)
from .logger import setup_logger
from .models import ListFilter, TodoItem
from .repository import TodoRepository
from .selector import TodoSelector

logger = logging.getLogger(__name__)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False))


def _candidates(repo: TodoRepository) -> List[TodoItem]:
    todos = repo.list()
    if not todos:
        raise NotFoundError("No todos.")
    return todos


def cmd_list(repo: TodoRepository, incomplete: bool, output_format: str) -> int:
    """Print todos in creation order"""
    items = repo.list(ListFilter.INCOMPLETE if incomplete else ListFilter.ALL)
    if output_format == "json":
        _print_json([format_todo_json(item) for item in items])
    elif not items:
        console.print("No todos.")
    else:
        for number, item in enumerate(items, start=1):
            console.print(format_todo_markup(number, item))
    return 0


def cmd_add(
    repo: TodoRepository,
    bodies: Sequence[str],
    output_format: str,
    editor: Optional[str] = None,
) -> int:
    """Add one todo per argument, or one from the editor"""
    if not bodies:
        body = edit_text("", editor)
        if body is None:
            console.print("Nothing added.")
            return 0
        bodies = [body]

    created = repo.add_many(bodies)
    if output_format == "json":
        _print_json([format_todo_json(item) for item in created])
    else:
        for item in created:
            console.print(f"Added: {escape(item.body)}")
    return 0


def cmd_toggle(
    repo: TodoRepository,
    ids: Optional[Sequence[int]],
    output_format: str,
    selector: TodoSelector,
) -> int:
    """Flip done/undone"""
    if not ids:
        chosen = selector.choose_many(_candidates(repo), "Which ones to toggle?")
        ids = [todo.id for todo in chosen]
    if not ids:
        console.print("Nothing selected.")
        return 0

    toggled = repo.toggle_many(ids)
    if output_format == "json":
        _print_json([format_todo_json(item) for item in toggled])
    else:
        for item in toggled:
            console.print(f"Toggled: {escape(item.body)}")
    return 0


def cmd_edit(
    repo: TodoRepository,
    todo_id: Optional[int],
    body: Optional[str],
    output_format: str,
    selector: TodoSelector,
    editor: Optional[str] = None,
) -> int:
    """Replace a todo's text"""
    if todo_id is None:
        target = selector.choose_one(_candidates(repo), "Which one to edit?")
    else:
        target = repo.get(todo_id)

    if body is None:
        body = edit_text(target.body, editor)
        if body is None:
            raise InvalidInputError("Empty todo is not acceptable.")

    updated = repo.edit(target.id, body)
    if output_format == "json":
        _print_json(format_todo_json(updated))
    else:
        console.print(f"Updated to: {escape(updated.body)}")
    return 0


def cmd_rm(
    repo: TodoRepository,
    ids: Optional[Sequence[int]],
    output_format: str,
    selector: TodoSelector,
) -> int:
    """Delete todos"""
    if not ids:
        chosen = selector.choose_many(_candidates(repo), "Which ones to remove?")
        ids = [todo.id for todo in chosen]
    if not ids:
        console.print("Nothing selected.")
        return 0

    removed = repo.remove_many(ids)
    if output_format == "json":
        _print_json({"deleted": [item.id for item in removed]})
    else:
        for item in removed:
            console.print(f"Removed todo: {escape(item.body)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo",
        description="Simple todo app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db-path", type=str, help="SQLite database file (default: todos.db)")
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level (default: WARNING)",
    )

    # --format is shared by every subcommand
    fmt = argparse.ArgumentParser(add_help=False)
    fmt.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    parser_add = subparsers.add_parser("add", parents=[fmt], help="Add todo")
    parser_add.add_argument("todos", nargs="*", help="The todo(s) to add; opens $EDITOR if omitted")

    parser_rm = subparsers.add_parser("rm", parents=[fmt], help="Remove todo")
    parser_rm.add_argument("--id", dest="ids", type=int, action="append", help="Todo ID (repeatable)")

    parser_edit = subparsers.add_parser("edit", parents=[fmt], help="Edit todo")
    parser_edit.add_argument("--id", dest="todo_id", type=int, help="Todo ID")
    parser_edit.add_argument("--body", help="New text; opens $EDITOR if omitted")

    parser_toggle = subparsers.add_parser("toggle", parents=[fmt], help="Check or uncheck todo")
    parser_toggle.add_argument("--id", dest="ids", type=int, action="append", help="Todo ID (repeatable)")

    parser_list = subparsers.add_parser("list", parents=[fmt], help="List todos")
    parser_list.add_argument(
        "-i", "--incomplete", action="store_true", help="Show only incomplete items"
    )

    return parser


def _dispatch(args: argparse.Namespace, repo: TodoRepository, config: Config) -> int:
    selector = TodoSelector()
    if args.command == "list":
        return cmd_list(repo, args.incomplete, args.format)
    elif args.command == "add":
        return cmd_add(repo, args.todos, args.format, config.editor)
    elif args.command == "toggle":
        return cmd_toggle(repo, args.ids, args.format, selector)
    elif args.command == "edit":
        return cmd_edit(repo, args.todo_id, args.body, args.format, selector, config.editor)
    return cmd_rm(repo, args.ids, args.format, selector)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point"""
    args = build_parser().parse_args(argv)

    try:
        config = Config.load(args.config)
        if args.db_path:
            config.db_path = args.db_path
        if args.log_level:
            config.log_level = args.log_level
        setup_logger(log_level=config.log_level, log_file=config.log_file)
    except (OSError, ConfigurationError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    try:
        repo = TodoRepository(db_path=config.db_path)
        return _dispatch(args, repo, config)
    except StorageError as exc:
        logger.debug("Storage failure", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1
    except (NotFoundError, InvalidInputError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1
    except (KeyboardInterrupt, EOFError):
        err_console.print("Cancelled.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
