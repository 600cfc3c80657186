"""Pick a capture device from settings."""

from __future__ import annotations

from shipcam.config import AppSettings

from .base import CaptureDevice
from .ffmpeg import FfmpegCamera
from .mock import MockCamera


def build_camera(settings: AppSettings) -> CaptureDevice:
    """Return the capture device selected by CAMERA_ADAPTER."""
    if settings.camera_adapter == "mock":
        return MockCamera(image_path=settings.mock_image_path)
    if settings.camera_adapter == "ffmpeg":
        return FfmpegCamera(
            device=settings.camera_device,
            input_format=settings.camera_input_format,
            ffmpeg_bin=settings.ffmpeg_bin,
            timeout_sec=settings.capture_timeout_seconds,
            jpeg_quality=settings.jpeg_quality,
        )
    raise RuntimeError(f"Unknown camera adapter: {settings.camera_adapter}")
