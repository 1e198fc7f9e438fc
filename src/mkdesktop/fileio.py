"""Atomic file output for entry files."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

TEMP_SUFFIX = ".tmp"


def temp_path_for(path: Path) -> Path:
    """Temporary sibling used while ``path`` is being written."""
    return path.with_suffix(path.suffix + TEMP_SUFFIX)


@contextmanager
def atomic_write(path: Path, encoding: str = "utf-8") -> Generator:
    """Write to a text file atomically.

    Writes to a temporary sibling then renames it over the target, so readers
    see either the old file or the complete new one.

    Args:
        path: Target file path
        encoding: Text encoding

    Yields:
        File handle for writing
    """
    tmp_path = temp_path_for(path)

    try:
        with open(tmp_path, "w", encoding=encoding, newline="\n") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, path)

    except Exception:
        # Clean up temp file on failure
        if tmp_path.exists():
            tmp_path.unlink()
        raise
