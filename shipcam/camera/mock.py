"""Mock camera serving a fixed image, for development and tests."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .base import CaptureDevice
from .exceptions import FrameCaptureError


LOGGER = logging.getLogger(__name__)

# JPEG start/end-of-image markers only; enough for anything that sniffs the header.
PLACEHOLDER_JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


class MockCamera(CaptureDevice):
    def __init__(self, image_path: str | None = None, delay_sec: float = 0.0) -> None:
        self._image_path = Path(image_path).expanduser() if image_path else None
        self._delay_sec = delay_sec

    async def begin_capture(self) -> bytes:
        if self._delay_sec > 0:
            await asyncio.sleep(self._delay_sec)
        if self._image_path is None:
            LOGGER.debug("mock camera: serving placeholder frame")
            return PLACEHOLDER_JPEG
        try:
            data = await asyncio.to_thread(self._image_path.read_bytes)
        except OSError as exc:
            raise FrameCaptureError(f"mock image not readable: {self._image_path}") from exc
        LOGGER.debug("mock camera: serving %s", self._image_path.name)
        return data
