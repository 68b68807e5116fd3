"""Personal todo list stored in a local SQLite file."""

__version__ = "0.1.0"

from .exceptions import (  # noqa: E402
    ConfigurationError,
    InvalidInputError,
    NotFoundError,
    StorageError,
    TodoError,
)
from .models import ListFilter, TodoItem  # noqa: E402
from .repository import TodoRepository  # noqa: E402

__all__ = [
    "ConfigurationError",
    "InvalidInputError",
    "ListFilter",
    "NotFoundError",
    "StorageError",
    "TodoError",
    "TodoItem",
    "TodoRepository",
]
