import sqlite3

import pytest

from todo import InvalidInputError, ListFilter, NotFoundError, StorageError, TodoItem
from todo.repository import TodoRepository


@pytest.fixture
def repo(tmp_path) -> TodoRepository:
    return TodoRepository(db_path=tmp_path / "todo.db")


def test_todo_repository_crud_cycle(repo):
    created = repo.add("Write report")
    assert created.body == "Write report"
    assert created.done is False

    items = repo.list()
    assert len(items) == 1

    toggled = repo.toggle(created.id)
    assert toggled.done is True

    edited = repo.edit(created.id, "Write and send report")
    assert edited.body == "Write and send report"
    assert edited.done is True

    removed = repo.remove(created.id)
    assert removed.id == created.id
    assert repo.list() == []


def test_add_then_list_keeps_insertion_order(repo):
    bodies = ["first", "second", "third", "fourth"]
    for body in bodies:
        repo.add(body)

    items = repo.list(ListFilter.ALL)
    assert [item.body for item in items] == bodies
    assert all(item.done is False for item in items)
    assert [item.id for item in items] == sorted(item.id for item in items)


def test_milk_and_carl(repo):
    assert repo.add("Milk") == TodoItem(id=1, body="Milk", done=False)
    assert repo.add("Carl").id == 2

    repo.remove(1)

    assert repo.list() == [TodoItem(id=2, body="Carl", done=False)]


def test_ids_are_not_reused(repo):
    first = repo.add("one")
    second = repo.add("two")
    repo.remove(second.id)

    third = repo.add("three")
    assert third.id > second.id > first.id


def test_toggle_twice_restores_state(repo):
    item = repo.add("Water plants")
    repo.toggle(item.id)
    again = repo.toggle(item.id)
    assert again.done is False
    assert repo.get(item.id).done is False


def test_edit_changes_only_body(repo):
    item = repo.add("Buy mlik")
    repo.toggle(item.id)

    edited = repo.edit(item.id, "  Buy milk  ")

    assert edited == TodoItem(id=item.id, body="Buy milk", done=True)
    assert repo.get(item.id) == edited


def test_list_incomplete_returns_undone_subset(repo):
    a = repo.add("a")
    b = repo.add("b")
    c = repo.add("c")
    repo.toggle(b.id)

    incomplete = repo.list(ListFilter.INCOMPLETE)
    assert [item.id for item in incomplete] == [a.id, c.id]
    assert repo.list("incomplete") == incomplete
    assert len(repo.list()) == 3


def test_removed_id_is_not_found_everywhere(repo):
    item = repo.add("Temporary")
    repo.remove(item.id)

    assert repo.list() == []
    with pytest.raises(NotFoundError):
        repo.toggle(item.id)
    with pytest.raises(NotFoundError):
        repo.edit(item.id, "new text")
    with pytest.raises(NotFoundError):
        repo.remove(item.id)
    with pytest.raises(NotFoundError):
        repo.get(item.id)


def test_empty_bodies_are_rejected(repo):
    with pytest.raises(InvalidInputError):
        repo.add("   ")

    item = repo.add("keep me")
    with pytest.raises(InvalidInputError):
        repo.edit(item.id, "")
    assert repo.get(item.id).body == "keep me"


def test_add_many_validates_before_inserting(repo):
    with pytest.raises(InvalidInputError):
        repo.add_many(["ok", ""])
    assert repo.count() == 0

    created = repo.add_many(["Milk", "Eggs"])
    assert [item.body for item in created] == ["Milk", "Eggs"]
    assert repo.count() == 2


def test_toggle_many_is_all_or_nothing(repo):
    a = repo.add("a")
    b = repo.add("b")

    with pytest.raises(NotFoundError) as excinfo:
        repo.toggle_many([a.id, 999, 1000])
    assert excinfo.value.ids == (999, 1000)
    assert repo.get(a.id).done is False

    toggled = repo.toggle_many([b.id, a.id, b.id])
    assert [item.id for item in toggled] == [b.id, a.id]
    assert all(item.done for item in repo.list())


def test_remove_many(repo):
    a = repo.add("a")
    b = repo.add("b")
    c = repo.add("c")

    with pytest.raises(NotFoundError):
        repo.remove_many([a.id, 42])
    assert repo.count() == 3

    removed = repo.remove_many([c.id, a.id])
    assert [item.body for item in removed] == ["c", "a"]
    assert repo.list() == [TodoItem(id=b.id, body="b", done=False)]


def test_bootstrap_is_idempotent(tmp_path):
    db_path = tmp_path / "nested" / "todo.db"
    first = TodoRepository(db_path=db_path)
    first.add("persisted")

    second = TodoRepository(db_path=db_path)
    assert [item.body for item in second.list()] == ["persisted"]


def test_reads_database_without_autoincrement(tmp_path):
    db_path = tmp_path / "legacy.db"
    conn = sqlite3.connect(db_path)
    conn.execute(
        "CREATE TABLE todos (id INTEGER PRIMARY KEY, body TEXT NOT NULL, incomplete BOOL)"
    )
    conn.executemany(
        "INSERT INTO todos (body, incomplete) VALUES (?, ?)",
        [("open", 1), ("finished", 0), ("unknown", None)],
    )
    conn.commit()
    conn.close()

    repo = TodoRepository(db_path=db_path)
    assert [(item.body, item.done) for item in repo.list()] == [
        ("open", False),
        ("finished", True),
        ("unknown", False),
    ]
    assert [item.body for item in repo.list(ListFilter.INCOMPLETE)] == ["open", "unknown"]


def test_unopenable_database_raises_storage_error(tmp_path):
    # a directory cannot be opened as a database file
    with pytest.raises(StorageError):
        TodoRepository(db_path=tmp_path)


def test_corrupt_database_raises_storage_error(tmp_path):
    db_path = tmp_path / "broken.db"
    db_path.write_bytes(b"this is not a sqlite database" * 100)
    with pytest.raises(StorageError):
        TodoRepository(db_path=db_path)
