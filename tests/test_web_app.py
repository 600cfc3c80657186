from __future__ import annotations

from dataclasses import replace
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from shipcam.camera import CaptureDevice, FrameCaptureError
from shipcam.config import AppSettings
from shipcam.storage import IndexCorruptError, IndexWriteError
from shipcam.web import create_app


FRAME = b"\xff\xd8frame\xff\xd9"


class _FakeCamera(CaptureDevice):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls = 0

    async def begin_capture(self) -> bytes:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return FRAME


class WebAppTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        root = Path(self._tmpdir.name)
        self.captures_dir = root / "captures"
        self.index_path = root / "captures.json"
        self.settings = AppSettings(
            captures_dir=str(self.captures_dir),
            index_path=str(self.index_path),
            camera_adapter="mock",
            camera_device="/dev/video0",
            camera_input_format="v4l2",
            ffmpeg_bin="ffmpeg",
            mock_image_path=None,
            capture_timeout_seconds=5.0,
            jpeg_quality=2,
            ack_mode="captured",
            host="127.0.0.1",
            port=8082,
            gallery_slide_seconds=2,
            gallery_reload_seconds=60,
            log_level="INFO",
        )

    def _client(self, camera: CaptureDevice | None = None, **overrides) -> TestClient:
        settings = replace(self.settings, **overrides)
        self.app = create_app(settings, camera=camera or _FakeCamera())
        return TestClient(self.app)

    def _index_items(self) -> list[dict]:
        return json.loads(self.index_path.read_text(encoding="utf-8"))["items"]

    def test_startup_creates_empty_index(self) -> None:
        self._client()

        self.assertEqual(self._index_items(), [])
        self.assertTrue(self.captures_dir.is_dir())

    def test_startup_refuses_corrupt_index(self) -> None:
        self.index_path.write_text("{broken", encoding="utf-8")

        with self.assertRaises(IndexCorruptError):
            create_app(self.settings, camera=_FakeCamera())

    def test_trigger_then_gallery_and_artifact(self) -> None:
        client = self._client()

        response = client.post("/jiraShipped", json={"key": "ABC-1", "description": "Shipped!"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "OK")
        items = self._index_items()
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["key"], "ABC-1")
        self.assertEqual(items[0]["overlay"], "Shipped!")
        self.assertEqual(items[0]["fileName"], f"{items[0]['timeStamp']}.jpg")

        artifact = client.get(f"/captures/{items[0]['fileName']}")
        self.assertEqual(artifact.status_code, 200)
        self.assertEqual(artifact.content, FRAME)

        gallery = client.get("/")
        self.assertEqual(gallery.status_code, 200)
        self.assertIn("Shipped!", gallery.text)
        self.assertIn("ABC-1", gallery.text)
        self.assertIn(f"/captures/{items[0]['fileName']}", gallery.text)

    def test_invalid_payload_is_rejected(self) -> None:
        camera = _FakeCamera()
        client = self._client(camera)

        for body in ({"key": "", "description": "x"}, {"description": "x"}):
            with self.subTest(body=body):
                response = client.post("/jiraShipped", json=body)
                self.assertEqual(response.status_code, 500)
                self.assertEqual(response.text, "Invalid Payload")

        self.assertEqual(camera.calls, 0)
        self.assertEqual(list(self.captures_dir.iterdir()), [])
        self.assertEqual(self._index_items(), [])

    def test_non_json_body_is_rejected(self) -> None:
        client = self._client()

        response = client.post(
            "/jiraShipped",
            content=b"key=ABC-1",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, "Invalid Payload")

    def test_device_failure_returns_500(self) -> None:
        client = self._client(_FakeCamera(error=FrameCaptureError("device busy")))

        response = client.post("/jiraShipped", json={"key": "ABC-1", "description": "Shipped!"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, "Capturing picture failed")
        self.assertEqual(self._index_items(), [])

    def test_captured_ack_mode_answers_ok_even_if_index_write_fails(self) -> None:
        client = self._client()

        with patch.object(
            self.app.state.coordinator.index,
            "append_and_prune",
            side_effect=IndexWriteError("read-only file system"),
        ):
            response = client.post("/jiraShipped", json={"key": "ABC-1", "description": "Shipped!"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(list(self.captures_dir.iterdir())), 1)
        self.assertEqual(self._index_items(), [])

    def test_persisted_ack_mode_reports_store_failure(self) -> None:
        client = self._client(ack_mode="persisted")

        with patch.object(
            self.app.state.coordinator.index,
            "append_and_prune",
            side_effect=IndexWriteError("read-only file system"),
        ):
            response = client.post("/jiraShipped", json={"key": "ABC-1", "description": "Shipped!"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, "Could not store image")

    def test_persisted_ack_mode_success(self) -> None:
        client = self._client(ack_mode="persisted")

        response = client.post("/jiraShipped", json={"key": "ABC-1", "description": "Shipped!"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "OK")
        self.assertEqual(len(self._index_items()), 1)

    def test_missing_artifact_is_404(self) -> None:
        client = self._client()

        self.assertEqual(client.get("/captures/1234.jpg").status_code, 404)
        self.assertEqual(client.get("/captures/.hidden").status_code, 404)

    def test_gallery_escapes_payload_text(self) -> None:
        client = self._client()
        client.post("/jiraShipped", json={"key": "ABC-1", "description": "<script>alert(1)</script>"})

        gallery = client.get("/")

        self.assertNotIn("<script>alert(1)</script>", gallery.text)
        self.assertIn("&lt;script&gt;", gallery.text)

    def test_gallery_on_corrupt_index_returns_500(self) -> None:
        client = self._client()
        self.index_path.write_text("nope", encoding="utf-8")

        response = client.get("/")

        self.assertEqual(response.status_code, 500)

    def test_healthz(self) -> None:
        client = self._client()

        self.assertEqual(client.get("/healthz").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
