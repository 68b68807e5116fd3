from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Union

from .exceptions import InvalidInputError, NotFoundError, StorageError
from .models import ListFilter, TodoItem

logger = logging.getLogger(__name__)


def _unique(ids: Iterable[int]) -> list[int]:
    seen: dict[int, None] = {}
    for todo_id in ids:
        seen.setdefault(int(todo_id), None)
    return list(seen)


def _clean_body(body: str) -> str:
    cleaned = (body or "").strip()
    if not cleaned:
        raise InvalidInputError("Empty todo is not acceptable.")
    return cleaned


class TodoRepository:
    """SQLite-backed todo store.

    Every public method opens its own connection and closes it before
    returning, so a repository instance holds no open handles between calls.
    ``sqlite3.Error`` is re-raised as ``StorageError``.
    """

    def __init__(self, db_path: Union[str, Path] = "todos.db"):
        self.db_path = Path(db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create directory for {self.db_path}: {exc}") from exc
        self._initialize()
        logger.debug("TodoRepository ready db=%s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                conn.row_factory = sqlite3.Row
                # commit on success, rollback on any exception
                with conn:
                    yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"Database error ({self.db_path}): {exc}") from exc

    def _initialize(self) -> None:
        """Create the todos table if it does not exist yet."""
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    body TEXT NOT NULL,
                    incomplete BOOLEAN
                )
                """
            )

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> TodoItem:
        incomplete = row["incomplete"]
        return TodoItem(
            id=int(row["id"]),
            body=row["body"],
            # NULL is treated as incomplete
            done=incomplete is not None and not incomplete,
        )

    @staticmethod
    def _fetch(conn: sqlite3.Connection, ids: list[int]) -> dict[int, TodoItem]:
        if not ids:
            return {}
        placeholders = ",".join("?" for _ in ids)
        rows = conn.execute(
            f"SELECT id, body, incomplete FROM todos WHERE id IN ({placeholders})", ids
        ).fetchall()
        items = (TodoRepository._row_to_item(row) for row in rows)
        return {item.id: item for item in items}

    def _require(self, conn: sqlite3.Connection, ids: list[int]) -> dict[int, TodoItem]:
        found = self._fetch(conn, ids)
        missing = [todo_id for todo_id in ids if todo_id not in found]
        if missing:
            raise NotFoundError.for_ids(missing)
        return found

    def count(self) -> int:
        with self._connect() as conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
        return int(total)

    def list(self, filter: ListFilter = ListFilter.ALL) -> list[TodoItem]:
        query = "SELECT id, body, incomplete FROM todos"
        if ListFilter(filter) is ListFilter.INCOMPLETE:
            query += " WHERE incomplete OR incomplete IS NULL"
        query += " ORDER BY id"
        with self._connect() as conn:
            rows = conn.execute(query).fetchall()
        return [self._row_to_item(row) for row in rows]

    def get(self, todo_id: int) -> TodoItem:
        with self._connect() as conn:
            return self._require(conn, [int(todo_id)])[int(todo_id)]

    def add(self, body: str) -> TodoItem:
        return self.add_many([body])[0]

    def add_many(self, bodies: Iterable[str]) -> list[TodoItem]:
        """Insert several todos; all bodies are validated before any insert."""
        cleaned = [_clean_body(body) for body in bodies]
        created: list[TodoItem] = []
        with self._connect() as conn:
            for body in cleaned:
                cursor = conn.execute(
                    "INSERT INTO todos (body, incomplete) VALUES (?, ?)", (body, True)
                )
                created.append(TodoItem(id=int(cursor.lastrowid), body=body, done=False))
        for item in created:
            logger.info("Added todo id=%s", item.id)
        return created

    def toggle(self, todo_id: int) -> TodoItem:
        return self.toggle_many([todo_id])[0]

    def toggle_many(self, ids: Iterable[int]) -> list[TodoItem]:
        """Flip ``done`` on each id. Nothing changes if any id is missing."""
        wanted = _unique(ids)
        with self._connect() as conn:
            found = self._require(conn, wanted)
            toggled: list[TodoItem] = []
            for todo_id in wanted:
                item = found[todo_id]
                done = not item.done
                conn.execute(
                    "UPDATE todos SET incomplete = ? WHERE id = ?", (not done, todo_id)
                )
                toggled.append(TodoItem(id=item.id, body=item.body, done=done))
        for item in toggled:
            logger.info("Toggled todo id=%s done=%s", item.id, item.done)
        return toggled

    def edit(self, todo_id: int, new_body: str) -> TodoItem:
        body = _clean_body(new_body)
        todo_id = int(todo_id)
        with self._connect() as conn:
            item = self._require(conn, [todo_id])[todo_id]
            conn.execute("UPDATE todos SET body = ? WHERE id = ?", (body, todo_id))
        logger.info("Edited todo id=%s", todo_id)
        return TodoItem(id=item.id, body=body, done=item.done)

    def remove(self, todo_id: int) -> TodoItem:
        return self.remove_many([todo_id])[0]

    def remove_many(self, ids: Iterable[int]) -> list[TodoItem]:
        """Delete each id and return the removed todos. Nothing is deleted if any id is missing."""
        wanted = _unique(ids)
        with self._connect() as conn:
            found = self._require(conn, wanted)
            conn.executemany("DELETE FROM todos WHERE id = ?", [(todo_id,) for todo_id in wanted])
        removed = [found[todo_id] for todo_id in wanted]
        for item in removed:
            logger.info("Removed todo id=%s", item.id)
        return removed
