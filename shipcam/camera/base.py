"""Capture device interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CaptureDevice(ABC):
    """One attached capture device.

    Implementations perform exactly one capture attempt per call and keep
    no state between calls. Overlapping calls are not serialized.
    """

    @abstractmethod
    async def begin_capture(self) -> bytes:
        """Capture one frame and return the raw image bytes.

        Raises CaptureDeviceError (or a subclass) when the device fails.
        """
