"""Custom exceptions for capture device handling."""


class CameraModuleError(Exception):
    """Base exception for camera-related failures."""


class CaptureDeviceError(CameraModuleError):
    """Raised when the capture device signals a failed capture."""


class FrameCaptureError(CaptureDeviceError):
    """Raised when a frame cannot be grabbed from the device."""


class DependencyMissingError(CaptureDeviceError):
    """Raised when required external tools are missing."""
