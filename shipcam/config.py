"""Runtime configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
import os


ACK_MODES = ("captured", "persisted")
CAMERA_ADAPTERS = ("ffmpeg", "mock")


@dataclass(frozen=True)
class AppSettings:
    """Environment-backed settings for the intake service."""

    captures_dir: str
    index_path: str
    camera_adapter: str
    camera_device: str
    camera_input_format: str
    ffmpeg_bin: str
    mock_image_path: str | None
    capture_timeout_seconds: float
    jpeg_quality: int
    ack_mode: str
    host: str
    port: int
    gallery_slide_seconds: int
    gallery_reload_seconds: int
    log_level: str


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for {name}: {value}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float for {name}: {value}") from exc


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in choices:
        raise RuntimeError(f"Invalid value for {name}: {value} (expected one of: {', '.join(choices)})")
    return value


def load_settings() -> AppSettings:
    """Load all app settings from the environment."""
    return AppSettings(
        captures_dir=os.getenv("CAPTURES_DIR", "captures"),
        index_path=os.getenv("CAPTURES_INDEX_PATH", "captures.json"),
        camera_adapter=_env_choice("CAMERA_ADAPTER", "ffmpeg", CAMERA_ADAPTERS),
        camera_device=os.getenv("CAMERA_DEVICE", "/dev/video0"),
        camera_input_format=os.getenv("CAMERA_INPUT_FORMAT", "v4l2"),
        ffmpeg_bin=os.getenv("FFMPEG_BIN", "ffmpeg"),
        mock_image_path=os.getenv("MOCK_IMAGE_PATH") or None,
        capture_timeout_seconds=_env_float("CAPTURE_TIMEOUT_SECONDS", 30.0),
        jpeg_quality=_env_int("JPEG_QUALITY", 2),
        ack_mode=_env_choice("ACK_MODE", "captured", ACK_MODES),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 8082),
        gallery_slide_seconds=_env_int("GALLERY_SLIDE_SECONDS", 2),
        gallery_reload_seconds=_env_int("GALLERY_RELOAD_SECONDS", 60),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
