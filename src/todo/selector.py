"""
Interactive selection of existing todos.

Prompts show the current list with 1-based positions. Answers are resolved
to ``TodoItem`` objects; callers pass the resulting ids back to the
repository, which re-checks that they still exist.
"""

from __future__ import annotations

import difflib
import re
from typing import Optional, Sequence, TextIO

from rich.console import Console
from rich.prompt import Prompt

from .display import console as default_console
from .display import format_todo_markup
from .exceptions import InvalidInputError, NotFoundError
from .models import TodoItem

_RANGE = re.compile(r"(\d+)-(\d+)", re.ASCII)


def fuzzy_match(query: str, todos: Sequence[TodoItem], cutoff: float = 0.5) -> list[TodoItem]:
    """Rank todos against ``query``.

    Case-insensitive substring hits come first, then bodies whose
    ``difflib`` similarity ratio reaches ``cutoff``. Ties keep list order.
    """
    needle = query.strip().casefold()
    if not needle:
        return []

    scored: list[tuple[float, int, TodoItem]] = []
    for position, todo in enumerate(todos):
        haystack = todo.body.casefold()
        ratio = difflib.SequenceMatcher(None, needle, haystack).ratio()
        if needle in haystack:
            score = 1.0 + ratio
        elif ratio >= cutoff:
            score = ratio
        else:
            continue
        scored.append((score, position, todo))

    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [todo for _, _, todo in scored]


def _check_position(position: int, count: int) -> int:
    if position < 1 or position > count:
        raise NotFoundError(f"No todo at position {position}.")
    return position - 1


def parse_selection(text: str, count: int) -> list[int]:
    """Turn ``"1,3 5-7"`` into zero-based indexes, first mention first."""
    indexes: dict[int, None] = {}
    for token in re.split(r"[,\s]+", text.strip()):
        if not token:
            continue
        match = _RANGE.fullmatch(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            if start > end:
                raise InvalidInputError(f"Invalid range: {token}")
            for position in range(start, end + 1):
                indexes.setdefault(_check_position(position, count), None)
        elif token.isdecimal():
            indexes.setdefault(_check_position(int(token), count), None)
        else:
            raise InvalidInputError(f"Invalid selection: {token}")
    return list(indexes)


class TodoSelector:
    """rich-based prompts for picking one or many todos."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.console = console or default_console
        self.stream = stream

    def _show(self, todos: Sequence[TodoItem]) -> None:
        if not todos:
            raise NotFoundError("No todos.")
        for number, todo in enumerate(todos, start=1):
            self.console.print(format_todo_markup(number, todo))

    def _ask(self, prompt: str) -> str:
        return Prompt.ask(prompt, console=self.console, stream=self.stream).strip()

    def choose_one(self, todos: Sequence[TodoItem], prompt: str = "Which one?") -> TodoItem:
        """Pick a single todo by position or by fuzzy text match."""
        self._show(todos)
        answer = self._ask(prompt)
        if not answer:
            raise InvalidInputError("Nothing selected.")

        if answer.isdecimal():
            return todos[_check_position(int(answer), len(todos))]

        matches = fuzzy_match(answer, todos)
        if not matches:
            raise NotFoundError(f"No todo matches '{answer}'.")
        return matches[0]

    def choose_many(
        self, todos: Sequence[TodoItem], prompt: str = "Which ones? (e.g. 1,3 5-7)"
    ) -> list[TodoItem]:
        """Pick any number of todos by position and range."""
        self._show(todos)
        answer = self._ask(prompt)
        return [todos[index] for index in parse_selection(answer, len(todos))]
