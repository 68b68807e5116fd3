from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ListFilter(str, Enum):
    """Which todos ``TodoRepository.list`` returns."""

    ALL = "all"
    INCOMPLETE = "incomplete"


@dataclass(slots=True)
class TodoItem:
    """A persisted todo."""

    id: int
    body: str
    done: bool = False
