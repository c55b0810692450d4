"""Local scratch storage for uploads in flight."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from ..errors import StagingError
from .keys import staging_name

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


def staging_path(staging_dir: str | Path) -> Path:
    """Pick a fresh random path under ``staging_dir``. Nothing is created."""
    return Path(staging_dir) / staging_name()


def write_upload(source: BinaryIO, path: str | Path) -> Path:
    """
    Stream an upload to ``path``, which must not exist yet.

    The source is copied in chunks so large videos never sit in memory.
    On failure any partial file is removed before raising.

    Raises:
        StagingError: If the file cannot be written.
    """
    path = Path(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        out = open(path, "xb")
    except OSError as e:
        raise StagingError(diagnostic=f"Failed to create {path}: {e}") from e

    try:
        with out:
            shutil.copyfileobj(source, out, COPY_CHUNK_SIZE)
    except OSError as e:
        discard(path)
        raise StagingError(diagnostic=f"Failed to write {path}: {e}") from e

    logger.debug(f"Staged upload at {path}")
    return path


def discard(path: str | Path | None) -> bool:
    """
    Delete a staged file. Best effort: failures are logged, never raised.

    Returns True if a file was removed.
    """
    if path is None:
        return False
    try:
        Path(path).unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Failed to remove staged file {path}: {e}")
        return False
