"""JSON-file capture index with retention on save."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable
import json
import logging
import threading

from .exceptions import IndexCorruptError, IndexWriteError, StorageError
from .fs import atomic_write_bytes
from .models import CaptureRecord, IndexSnapshot
from .retention import prune_expired


LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CaptureIndex:
    """Sole owner of the index file.

    Every write prunes expired records and replaces the file atomically.
    ``append_and_prune`` is the only mutation path for callers and runs its
    read-modify-write under a process-wide lock, so concurrent captures
    never lose each other's records.
    """

    def __init__(self, path: str | Path, clock: Callable[[], datetime] = _utcnow) -> None:
        self.path = Path(path).expanduser()
        self._clock = clock
        self._lock = threading.Lock()

    def load(self) -> IndexSnapshot:
        """Read the index, creating an empty one if the file is absent."""
        with self._lock:
            if not self.path.exists():
                snapshot = IndexSnapshot()
                self._write(snapshot)
                LOGGER.info("Created empty capture index at %s", self.path)
                return snapshot
            return self._read()

    def snapshot(self) -> IndexSnapshot:
        """Current persisted state; an absent file reads as empty."""
        if not self.path.exists():
            return IndexSnapshot()
        return self._read()

    @staticmethod
    def append(snapshot: IndexSnapshot, record: CaptureRecord) -> IndexSnapshot:
        return IndexSnapshot(items=snapshot.items + (record,))

    @staticmethod
    def prune(snapshot: IndexSnapshot, now: datetime) -> IndexSnapshot:
        return IndexSnapshot(items=prune_expired(snapshot.items, now))

    def save(self, snapshot: IndexSnapshot) -> IndexSnapshot:
        """Prune against the current time and persist; returns what was written."""
        with self._lock:
            return self._save(snapshot)

    def append_and_prune(self, record: CaptureRecord) -> IndexSnapshot:
        """Append one record, prune, and save as a single serialized step."""
        with self._lock:
            try:
                current = self.snapshot()
            except StorageError as exc:
                raise IndexWriteError(f"could not read index before appending {record.artifact_name}: {exc}") from exc
            saved = self._save(self.append(current, record))
            pruned = len(current) + 1 - len(saved)
            if pruned:
                LOGGER.info("Pruned %d expired capture(s) from index", pruned)
            return saved

    def _save(self, snapshot: IndexSnapshot) -> IndexSnapshot:
        pruned = self.prune(snapshot, self._clock())
        self._write(pruned)
        return pruned

    def _read(self) -> IndexSnapshot:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageError(f"could not read index {self.path}: {exc}") from exc
        try:
            return IndexSnapshot.from_dict(json.loads(raw.decode("utf-8")))
        except ValueError as exc:
            raise IndexCorruptError(f"index {self.path} is not valid capture JSON: {exc}") from exc

    def _write(self, snapshot: IndexSnapshot) -> None:
        payload = json.dumps(snapshot.to_dict()).encode("utf-8")
        try:
            atomic_write_bytes(self.path, payload)
        except OSError as exc:
            raise IndexWriteError(f"could not write index {self.path}: {exc}") from exc
