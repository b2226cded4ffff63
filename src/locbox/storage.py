#!/usr/bin/env python3
"""Atomic File Store - Crash-safe reads and writes of the vault file.

A write goes to a sibling temporary file which is flushed to disk and then
renamed over the destination. The rename is the only change to the
destination path, so readers see either the old or the new contents.

There is no cross-process locking; concurrent writers race and the last
rename wins.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .errors import VaultIOError

logger = logging.getLogger("locbox.storage")

FILE_MODE = 0o600


def set_permissions(path, mode=FILE_MODE):
    """Set file permissions."""
    os.chmod(path, mode)


def read_bytes(path) -> Optional[bytes]:
    """Read the vault file.

    Returns:
        File contents, or None if the file does not exist

    Raises:
        VaultIOError: On any other read failure

    """
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise VaultIOError(f"Cannot read {path}: {e}") from e


def write_atomic(path, data: bytes) -> None:
    """Replace path with data atomically.

    Raises:
        VaultIOError: If the temp file cannot be written or renamed; path
            is left untouched

    """
    path = Path(path)
    directory = path.parent

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise VaultIOError(f"Cannot create temporary file next to {path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        set_permissions(tmp_name)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise VaultIOError(f"Cannot write {path}: {e}") from e

    _fsync_directory(directory)
    logger.debug("Wrote %d bytes to %s", len(data), path)


def _fsync_directory(directory: Path) -> None:
    """Persist the rename itself where the platform allows it."""
    if not hasattr(os, "O_DIRECTORY"):
        return
    try:
        fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.debug("Directory fsync failed for %s: %s", directory, e)
    finally:
        os.close(fd)
