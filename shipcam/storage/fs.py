"""Filesystem helpers for crash-safe writes."""

from __future__ import annotations

import os
import uuid
from pathlib import Path


TEMP_PREFIX = ".tmp-"


def fsync_dir(path: Path) -> None:
    if os.name == "nt":
        return
    fd = os.open(str(path), os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def temp_path_for(destination: Path) -> Path:
    return destination.with_name(f"{TEMP_PREFIX}{destination.name}-{uuid.uuid4().hex}")


def atomic_write_bytes(destination: Path, data: bytes) -> None:
    """Write data so that destination holds either the old or the new content.

    The bytes go to a hidden sibling temp file which is fsynced and then
    renamed over destination. Raises OSError; the temp file never survives
    a failed call.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    temp_path = temp_path_for(destination)
    try:
        with temp_path.open("wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, destination)
        fsync_dir(destination.parent)
    finally:
        temp_path.unlink(missing_ok=True)
