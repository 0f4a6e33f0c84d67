"""Directory listing for list pages."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from greenhorn.exceptions import ContentReadError

if TYPE_CHECKING:
    from pathlib import Path


def list_files(path: Path) -> list[str]:
    """Return the names of the files directly inside ``path``.

    Sub-directories are skipped and never descended into. A symlink counts as
    whatever it points at. Names come back in the order the filesystem yields
    them; callers must not rely on any particular ordering.
    """
    try:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries if entry.is_file()]
    except OSError as exc:
        raise ContentReadError(path, exc.strerror or str(exc)) from exc


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, converting failures to ``ContentReadError``."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ContentReadError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise ContentReadError(path, f"not valid UTF-8 ({exc.reason})") from exc
