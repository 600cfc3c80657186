"""Trigger → capture → artifact → index flow."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable
import asyncio
import logging

from shipcam.camera import CaptureDevice, CaptureDeviceError, FrameCaptureError
from shipcam.storage import ArtifactStore, ArtifactWriteError, CaptureIndex, CaptureRecord, IndexWriteError
from shipcam.storage.models import truncate_to_ms

from .exceptions import InvalidPayload
from .models import Accepted, Failed, Outcome, PendingCapture, Rejected, validate_payload


LOGGER = logging.getLogger(__name__)
DEFAULT_CAPTURE_TIMEOUT_SEC = 30.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IntakeCoordinator:
    """Runs one trigger through validation, capture and persistence.

    ``capture`` and ``complete`` are the two halves of ``handle_trigger``;
    the HTTP layer can acknowledge a trigger after ``capture`` and leave
    ``complete`` to a background task.
    """

    def __init__(
        self,
        camera: CaptureDevice,
        artifacts: ArtifactStore,
        index: CaptureIndex,
        capture_timeout_sec: float = DEFAULT_CAPTURE_TIMEOUT_SEC,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.camera = camera
        self.artifacts = artifacts
        self.index = index
        self.capture_timeout_sec = capture_timeout_sec
        self._clock = clock

    async def capture(self, raw: Any) -> PendingCapture:
        """Validate and grab one frame. Raises InvalidPayload or CaptureDeviceError."""
        try:
            payload = validate_payload(raw)
        except InvalidPayload as exc:
            LOGGER.warning("Rejected trigger payload: %s", exc)
            raise

        try:
            image = await asyncio.wait_for(self.camera.begin_capture(), timeout=self.capture_timeout_sec)
        except asyncio.TimeoutError as exc:
            LOGGER.warning("Capture for %s timed out after %ss", payload.key, self.capture_timeout_sec)
            raise FrameCaptureError(f"capture did not complete within {self.capture_timeout_sec}s") from exc
        except CaptureDeviceError as exc:
            LOGGER.warning("Capture for %s failed: %s", payload.key, exc)
            raise

        return PendingCapture(payload=payload, image=image, captured_at=truncate_to_ms(self._clock()))

    def complete(self, pending: PendingCapture) -> Outcome:
        """Persist a captured frame and record it in the index. Never raises."""
        try:
            artifact_name = self.artifacts.store(pending.image, pending.captured_at)
        except ArtifactWriteError as exc:
            LOGGER.exception("Could not store image for %s", pending.payload.key)
            return Failed(error=exc)

        record = CaptureRecord(
            artifact_name=artifact_name,
            captured_at=pending.captured_at,
            overlay=pending.payload.description,
            key=pending.payload.key,
        )
        try:
            self.index.append_and_prune(record)
        except IndexWriteError as exc:
            LOGGER.exception(
                "Index update failed; artifact %s is orphaned (key=%s)",
                artifact_name,
                pending.payload.key,
            )
            return Failed(error=exc, artifact_name=artifact_name)

        LOGGER.info("Recorded capture %s for %s", artifact_name, record.key)
        return Accepted(record=record)

    async def handle_trigger(self, raw: Any) -> Outcome:
        """Run the whole flow and report the outcome once the index is saved."""
        try:
            pending = await self.capture(raw)
        except InvalidPayload as exc:
            return Rejected(error=exc)
        except CaptureDeviceError as exc:
            return Failed(error=exc)
        return await asyncio.to_thread(self.complete, pending)
