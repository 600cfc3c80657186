"""Trigger payloads and intake outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from shipcam.storage.models import CaptureRecord

from .exceptions import InvalidPayload


class TriggerPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    key: StrictStr = Field(min_length=1)
    description: StrictStr = Field(min_length=1)


def validate_payload(raw: Any) -> TriggerPayload:
    """Parse a decoded JSON body; raises InvalidPayload without side effects."""
    if not isinstance(raw, dict):
        raise InvalidPayload("payload must be a JSON object")
    try:
        return TriggerPayload.model_validate(raw)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise InvalidPayload(f"invalid or missing field(s): {', '.join(fields)}") from exc


@dataclass(frozen=True)
class PendingCapture:
    """A captured frame that is not yet persisted."""

    payload: TriggerPayload
    image: bytes
    captured_at: datetime


@dataclass(frozen=True)
class Accepted:
    record: CaptureRecord


@dataclass(frozen=True)
class Rejected:
    error: InvalidPayload


@dataclass(frozen=True)
class Failed:
    """A terminal failure after validation.

    ``artifact_name`` is set when the artifact was written but the index
    update failed, leaving it orphaned.
    """

    error: Exception
    artifact_name: str | None = None


Outcome: TypeAlias = Union[Accepted, Rejected, Failed]
