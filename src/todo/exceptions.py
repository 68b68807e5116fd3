"""Exceptions raised by the todo package.

The CLI maps each of these to a message on stderr and a non-zero exit code.
"""

from __future__ import annotations

from typing import Iterable


class TodoError(Exception):
    """Base exception for the todo package"""

    pass


class StorageError(TodoError):
    """The database could not be opened, read or written"""

    pass


class NotFoundError(TodoError):
    """A referenced todo does not exist"""

    def __init__(self, message: str, ids: Iterable[int] = ()) -> None:
        super().__init__(message)
        self.ids = tuple(ids)

    @classmethod
    def for_ids(cls, ids: Iterable[int]) -> "NotFoundError":
        missing = tuple(ids)
        label = ", ".join(str(todo_id) for todo_id in missing)
        noun = "todo" if len(missing) == 1 else "todos"
        return cls(f"No {noun} with ID {label}.", missing)


class InvalidInputError(TodoError):
    """User input was rejected (empty body, unparseable selection, ...)"""

    pass


class ConfigurationError(TodoError):
    """Malformed configuration file"""

    pass
