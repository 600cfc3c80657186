"""Custom exceptions for artifact and index persistence."""


class StorageError(Exception):
    """Base exception for persistence failures."""


class ArtifactWriteError(StorageError):
    """Raised when captured image bytes cannot be durably stored."""


class IndexWriteError(StorageError):
    """Raised when the capture index cannot be updated.

    The artifact referenced by the failed update stays on disk without an
    index record (an orphaned artifact).
    """


class IndexCorruptError(StorageError):
    """Raised when the index file is not valid capture index JSON."""
