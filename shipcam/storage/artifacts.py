"""Append-only artifact directory."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable
import logging
import threading

from .exceptions import ArtifactWriteError
from .fs import TEMP_PREFIX, atomic_write_bytes
from .models import to_epoch_ms


LOGGER = logging.getLogger(__name__)
DEFAULT_EXTENSION = ".jpg"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArtifactStore:
    """Stores raw capture bytes under unique, time-derived names.

    Names are ``<epoch ms><extension>``; a capture landing on an already
    used millisecond gets ``<epoch ms>-<n><extension>``. The store never
    deletes or rewrites an artifact.
    """

    def __init__(
        self,
        directory: str | Path,
        extension: str = DEFAULT_EXTENSION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.directory = Path(directory).expanduser()
        self.extension = extension
        self._clock = clock
        self._lock = threading.Lock()
        self._reserved: set[str] = set()
        self.directory.mkdir(parents=True, exist_ok=True)

    def store(self, data: bytes, captured_at: datetime | None = None) -> str:
        """Durably write data and return its artifact name."""
        when = captured_at if captured_at is not None else self._clock()
        name = self._reserve_name(str(to_epoch_ms(when)))
        try:
            atomic_write_bytes(self.directory / name, data)
        except OSError as exc:
            raise ArtifactWriteError(f"could not write artifact {name}: {exc}") from exc
        finally:
            with self._lock:
                self._reserved.discard(name)
        LOGGER.info("Stored artifact %s (%d bytes)", name, len(data))
        return name

    def path_for(self, name: str) -> Path | None:
        """Resolve an artifact name to its path, or None for names that are not plain artifact names."""
        if not name or name != Path(name).name or name.startswith(".") or "\\" in name:
            return None
        return self.directory / name

    def exists(self, name: str) -> bool:
        path = self.path_for(name)
        return path is not None and path.is_file()

    def list_names(self) -> list[str]:
        """Names of all stored artifacts, skipping in-flight temp files."""
        if not self.directory.is_dir():
            return []
        return sorted(
            path.name
            for path in self.directory.iterdir()
            if path.is_file() and not path.name.startswith(TEMP_PREFIX) and not path.name.startswith(".")
        )

    def _reserve_name(self, stem: str) -> str:
        with self._lock:
            candidate = f"{stem}{self.extension}"
            suffix = 0
            while candidate in self._reserved or (self.directory / candidate).exists():
                suffix += 1
                candidate = f"{stem}-{suffix}{self.extension}"
            self._reserved.add(candidate)
            return candidate
