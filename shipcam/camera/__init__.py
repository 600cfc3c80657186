"""Capture device adapters."""

from .base import CaptureDevice
from .exceptions import (
    CameraModuleError,
    CaptureDeviceError,
    DependencyMissingError,
    FrameCaptureError,
)
from .factory import build_camera
from .ffmpeg import (
    DEFAULT_DEVICE,
    DEFAULT_INPUT_FORMAT,
    CaptureResult,
    FfmpegCamera,
    capture_frame_bytes,
    capture_frame_to_file,
)
from .mock import MockCamera

__all__ = [
    "CameraModuleError",
    "CaptureDevice",
    "CaptureDeviceError",
    "CaptureResult",
    "DEFAULT_DEVICE",
    "DEFAULT_INPUT_FORMAT",
    "DependencyMissingError",
    "FfmpegCamera",
    "FrameCaptureError",
    "MockCamera",
    "build_camera",
    "capture_frame_bytes",
    "capture_frame_to_file",
]
