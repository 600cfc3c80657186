"""Grab single JPEG frames from a local video device with ffmpeg."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Final
import shutil
import subprocess

from .base import CaptureDevice
from .exceptions import DependencyMissingError, FrameCaptureError


DEFAULT_DEVICE: Final[str] = "/dev/video0"
DEFAULT_INPUT_FORMAT: Final[str] = "v4l2"


@dataclass(frozen=True, slots=True)
class CaptureResult:
    """Metadata for a completed frame capture."""

    output_path: str
    width: int | None
    height: int | None
    device: str
    captured_at_utc: datetime


def capture_frame_to_file(
    output_path: str,
    device: str = DEFAULT_DEVICE,
    input_format: str = DEFAULT_INPUT_FORMAT,
    ffmpeg_bin: str = "ffmpeg",
    timeout_sec: float = 30.0,
    jpeg_quality: int = 2,
) -> CaptureResult:
    """Capture one frame from the device and save it as JPEG."""
    target = Path(output_path).expanduser()
    _grab_frame(
        target=target,
        device=device,
        input_format=input_format,
        ffmpeg_bin=ffmpeg_bin,
        timeout_sec=timeout_sec,
        jpeg_quality=jpeg_quality,
    )

    width, height = _probe_dimensions(target)
    return CaptureResult(
        output_path=str(target),
        width=width,
        height=height,
        device=device,
        captured_at_utc=datetime.now(timezone.utc),
    )


def capture_frame_bytes(
    device: str = DEFAULT_DEVICE,
    input_format: str = DEFAULT_INPUT_FORMAT,
    ffmpeg_bin: str = "ffmpeg",
    timeout_sec: float = 30.0,
    jpeg_quality: int = 2,
) -> bytes:
    """Capture one frame and return JPEG bytes."""
    try:
        temp_file = NamedTemporaryFile(suffix=".jpg", delete=False)
    except OSError as exc:
        raise FrameCaptureError(f"Could not create temp file for frame: {exc}") from exc
    temp_path = Path(temp_file.name)
    temp_file.close()

    try:
        _grab_frame(
            target=temp_path,
            device=device,
            input_format=input_format,
            ffmpeg_bin=ffmpeg_bin,
            timeout_sec=timeout_sec,
            jpeg_quality=jpeg_quality,
        )
        try:
            return temp_path.read_bytes()
        except OSError as exc:
            raise FrameCaptureError(f"Could not read captured frame: {exc}") from exc
    finally:
        temp_path.unlink(missing_ok=True)


def _grab_frame(
    target: Path,
    device: str,
    input_format: str,
    ffmpeg_bin: str,
    timeout_sec: float,
    jpeg_quality: int,
) -> None:
    if shutil.which(ffmpeg_bin) is None:
        raise DependencyMissingError(f"Required binary not found in PATH: {ffmpeg_bin}")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FrameCaptureError(f"Could not create output directory {target.parent}: {exc}") from exc

    try:
        _run_ffmpeg_capture(
            device=device,
            input_format=input_format,
            output_path=target,
            ffmpeg_bin=ffmpeg_bin,
            timeout_sec=timeout_sec,
            jpeg_quality=jpeg_quality,
        )
    except FrameCaptureError:
        target.unlink(missing_ok=True)
        raise


class FfmpegCamera(CaptureDevice):
    """Capture device backed by an ffmpeg subprocess run in a worker thread."""

    def __init__(
        self,
        device: str = DEFAULT_DEVICE,
        input_format: str = DEFAULT_INPUT_FORMAT,
        ffmpeg_bin: str = "ffmpeg",
        timeout_sec: float = 30.0,
        jpeg_quality: int = 2,
    ) -> None:
        self.device = device
        self.input_format = input_format
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout_sec = timeout_sec
        self.jpeg_quality = jpeg_quality

    async def begin_capture(self) -> bytes:
        return await asyncio.to_thread(
            capture_frame_bytes,
            device=self.device,
            input_format=self.input_format,
            ffmpeg_bin=self.ffmpeg_bin,
            timeout_sec=self.timeout_sec,
            jpeg_quality=self.jpeg_quality,
        )


def _build_command(
    device: str,
    input_format: str,
    output_path: Path,
    ffmpeg_bin: str,
    jpeg_quality: int,
) -> list[str]:
    command = [ffmpeg_bin, "-hide_banner", "-loglevel", "error", "-y"]
    if input_format:
        command += ["-f", input_format]
    command += [
        "-i",
        device,
        "-frames:v",
        "1",
        "-q:v",
        str(jpeg_quality),
        str(output_path),
    ]
    return command


def _run_ffmpeg_capture(
    device: str,
    input_format: str,
    output_path: Path,
    ffmpeg_bin: str,
    timeout_sec: float,
    jpeg_quality: int,
) -> None:
    command = _build_command(
        device=device,
        input_format=input_format,
        output_path=output_path,
        ffmpeg_bin=ffmpeg_bin,
        jpeg_quality=jpeg_quality,
    )

    try:
        subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
            timeout=timeout_sec,
        )
    except FileNotFoundError as exc:
        raise DependencyMissingError(f"Required binary not found in PATH: {ffmpeg_bin}") from exc
    except subprocess.TimeoutExpired as exc:
        raise FrameCaptureError("ffmpeg timed out while capturing frame.") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise FrameCaptureError(f"ffmpeg failed: {stderr}") from exc

    if not output_path.exists() or output_path.stat().st_size == 0:
        raise FrameCaptureError("ffmpeg completed but output JPEG was not created.")


def _probe_dimensions(image_path: Path) -> tuple[int | None, int | None]:
    ffprobe_bin = shutil.which("ffprobe")
    if ffprobe_bin is None:
        return None, None

    command = [
        ffprobe_bin,
        "-v",
        "error",
        "-select_streams",
        "v:0",
        "-show_entries",
        "stream=width,height",
        "-of",
        "csv=p=0:s=x",
        str(image_path),
    ]

    try:
        proc = subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
            timeout=10.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None, None

    output = proc.stdout.strip()
    if "x" not in output:
        return None, None

    width_str, height_str = output.split("x", 1)
    if not (width_str.isdigit() and height_str.isdigit()):
        return None, None
    return int(width_str), int(height_str)
