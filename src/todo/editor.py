"""Multi-line todo input through the user's text editor."""

from __future__ import annotations

import contextlib
import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def resolve_editor(editor: Optional[str] = None) -> str:
    """Explicit command first, then $VISUAL, $EDITOR and finally vi."""
    return editor or os.getenv("VISUAL") or os.getenv("EDITOR") or "vi"


def edit_text(initial: str = "", editor: Optional[str] = None) -> Optional[str]:
    """
    Open ``initial`` in an editor and return what the user saved.

    Returns None when the saved text is blank.

    Raises:
        InvalidInputError: the editor is missing or exited with an error
    """
    command = shlex.split(resolve_editor(editor))
    fd, path = tempfile.mkstemp(prefix="todo-", suffix=".md")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(initial)

        logger.debug("Running editor: %s %s", command, path)
        try:
            result = subprocess.run([*command, path], check=False)
        except FileNotFoundError as exc:
            raise InvalidInputError(f"Editor not found: {command[0]}") from exc

        if result.returncode != 0:
            raise InvalidInputError(f"Editor exited with status {result.returncode}.")

        text = Path(path).read_text(encoding="utf-8")
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(path)

    return text.strip() or None
