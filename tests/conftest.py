import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() calls setup_logger(); drop the handlers it installs after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user config and TODO_* variables out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("TODO_CONFIG", "TODO_DB_PATH", "TODO_LOG_LEVEL", "TODO_LOG_FILE", "TODO_EDITOR"):
        monkeypatch.delenv(name, raising=False)
