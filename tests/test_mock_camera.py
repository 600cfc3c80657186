from __future__ import annotations

from dataclasses import replace
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from shipcam.camera import FfmpegCamera, FrameCaptureError, MockCamera, build_camera
from shipcam.camera.mock import PLACEHOLDER_JPEG
from shipcam.config import AppSettings


BASE_SETTINGS = AppSettings(
    captures_dir="captures",
    index_path="captures.json",
    camera_adapter="ffmpeg",
    camera_device="/dev/video5",
    camera_input_format="v4l2",
    ffmpeg_bin="ffmpeg",
    mock_image_path=None,
    capture_timeout_seconds=12.0,
    jpeg_quality=4,
    ack_mode="captured",
    host="127.0.0.1",
    port=8082,
    gallery_slide_seconds=2,
    gallery_reload_seconds=60,
    log_level="INFO",
)


class MockCameraTests(unittest.IsolatedAsyncioTestCase):
    async def test_placeholder_frame_without_image(self) -> None:
        data = await MockCamera().begin_capture()

        self.assertEqual(data, PLACEHOLDER_JPEG)
        self.assertTrue(data.startswith(b"\xff\xd8"))

    async def test_serves_configured_image(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            image_path = Path(tmpdir) / "shipped.jpg"
            image_path.write_bytes(b"\xff\xd8shipped\xff\xd9")

            data = await MockCamera(image_path=str(image_path)).begin_capture()

        self.assertEqual(data, b"\xff\xd8shipped\xff\xd9")

    async def test_image_read_runs_off_the_event_loop(self) -> None:
        image_path = Path("/srv/shipcam/shipped.jpg")

        with patch("shipcam.camera.mock.asyncio.to_thread", new_callable=AsyncMock) as mock_to_thread:
            mock_to_thread.return_value = b"\xff\xd8threaded\xff\xd9"
            data = await MockCamera(image_path=str(image_path)).begin_capture()

        self.assertEqual(data, b"\xff\xd8threaded\xff\xd9")
        mock_to_thread.assert_awaited_once_with(image_path.read_bytes)

    async def test_missing_image_is_capture_error(self) -> None:
        camera = MockCamera(image_path="/nonexistent/shipcam/frame.jpg")

        with self.assertRaises(FrameCaptureError):
            await camera.begin_capture()


class BuildCameraTests(unittest.TestCase):
    def test_builds_ffmpeg_camera_from_settings(self) -> None:
        camera = build_camera(BASE_SETTINGS)

        self.assertIsInstance(camera, FfmpegCamera)
        self.assertEqual(camera.device, "/dev/video5")
        self.assertEqual(camera.timeout_sec, 12.0)
        self.assertEqual(camera.jpeg_quality, 4)

    def test_builds_mock_camera_from_settings(self) -> None:
        camera = build_camera(replace(BASE_SETTINGS, camera_adapter="mock"))

        self.assertIsInstance(camera, MockCamera)

    def test_unknown_adapter_raises(self) -> None:
        with self.assertRaises(RuntimeError):
            build_camera(replace(BASE_SETTINGS, camera_adapter="webcam"))


if __name__ == "__main__":
    unittest.main()
