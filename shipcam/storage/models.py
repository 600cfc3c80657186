"""Capture records and their JSON wire format."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MS = timedelta(milliseconds=1)


def to_epoch_ms(value: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware or UTC-naive datetime."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // ONE_MS


def from_epoch_ms(value: int) -> datetime:
    return EPOCH + timedelta(milliseconds=value)


def truncate_to_ms(value: datetime) -> datetime:
    return from_epoch_ms(to_epoch_ms(value))


@dataclass(frozen=True)
class CaptureRecord:
    """Metadata for one stored capture."""

    artifact_name: str
    captured_at: datetime
    overlay: str
    key: str

    @property
    def timestamp_ms(self) -> int:
        return to_epoch_ms(self.captured_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.artifact_name,
            "timeStamp": self.timestamp_ms,
            "overlay": self.overlay,
            "key": self.key,
        }

    @classmethod
    def from_dict(cls, data: Any) -> CaptureRecord:
        """Build a record from its JSON form; raises ValueError on bad shape."""
        if not isinstance(data, dict):
            raise ValueError(f"capture item must be an object, got {type(data).__name__}")

        file_name = data.get("fileName")
        if not isinstance(file_name, str) or not file_name:
            raise ValueError("capture item has no fileName")

        timestamp = data.get("timeStamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError(f"capture item {file_name} has no numeric timeStamp")

        overlay = data.get("overlay")
        key = data.get("key")
        if not isinstance(overlay, str) or not isinstance(key, str):
            raise ValueError(f"capture item {file_name} has non-string overlay or key")

        try:
            captured_at = from_epoch_ms(int(timestamp))
        except (OverflowError, ValueError) as exc:
            raise ValueError(f"capture item {file_name} has out-of-range timeStamp {timestamp!r}") from exc

        return cls(
            artifact_name=file_name,
            captured_at=captured_at,
            overlay=overlay,
            key=key,
        )


@dataclass(frozen=True)
class IndexSnapshot:
    """Immutable view of the full capture index, oldest capture first."""

    items: tuple[CaptureRecord, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: Any) -> IndexSnapshot:
        if not isinstance(data, dict):
            raise ValueError(f"index root must be an object, got {type(data).__name__}")
        items = data.get("items")
        if not isinstance(items, list):
            raise ValueError("index root has no items list")
        return cls(items=tuple(CaptureRecord.from_dict(item) for item in items))
