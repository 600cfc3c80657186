"""Capture retention rules."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Final, Iterable

from .models import CaptureRecord


RETENTION_DAYS: Final[int] = 10


def retention_cutoff(now: datetime) -> datetime:
    return now - timedelta(days=RETENTION_DAYS)


def prune_expired(records: Iterable[CaptureRecord], now: datetime) -> tuple[CaptureRecord, ...]:
    """Keep records strictly newer than the retention cutoff, in order."""
    cutoff = retention_cutoff(now)
    return tuple(record for record in records if record.captured_at > cutoff)
