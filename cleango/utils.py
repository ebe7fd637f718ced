"""Utility functions for reading and writing generated files.

This module provides atomic file writes and tolerant reads used by the
template materializer and the artifact store.
"""

import os
from pathlib import Path
from typing import Optional

from .logging_config import get_logger

logger = get_logger(__name__)


class FileWriteError(Exception):
    """Custom exception for file writing errors."""

    pass


def atomic_write(path: str | Path, content: str) -> Path:
    """Write text to a file atomically (temp file + rename).

    The target is either fully replaced or left untouched. Parent
    directories are created as needed.

    Args:
        path: Destination file.
        content: Full file content.

    Returns:
        The destination path.

    Raises:
        FileWriteError: If the file cannot be written.
    """
    path = Path(path)
    tmp = path.with_name(f".{path.name}.tmp.{os.getpid()}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp, path)
    except OSError as e:
        logger.error(f"Error writing file {path}: {e}", exc_info=True)
        if tmp.exists():
            tmp.unlink()
        raise FileWriteError(f"Error writing file {path}: {e}") from e

    logger.debug(f"Wrote {len(content)} bytes to {path}")
    return path


def read_text(path: str | Path) -> Optional[str]:
    """Read a text file, returning None when it does not exist.

    Args:
        path: File to read.

    Returns:
        File content, or None if the file is missing.
    """
    path = Path(path)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")
