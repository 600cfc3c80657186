"""Artifact and index persistence."""

from .artifacts import ArtifactStore
from .exceptions import ArtifactWriteError, IndexCorruptError, IndexWriteError, StorageError
from .index import CaptureIndex
from .models import CaptureRecord, IndexSnapshot, from_epoch_ms, to_epoch_ms
from .retention import RETENTION_DAYS, prune_expired, retention_cutoff

__all__ = [
    "ArtifactStore",
    "ArtifactWriteError",
    "CaptureIndex",
    "CaptureRecord",
    "IndexCorruptError",
    "IndexSnapshot",
    "IndexWriteError",
    "RETENTION_DAYS",
    "StorageError",
    "from_epoch_ms",
    "prune_expired",
    "retention_cutoff",
    "to_epoch_ms",
]
