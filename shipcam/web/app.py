"""FastAPI app for trigger intake and the capture gallery."""

from __future__ import annotations

from pathlib import Path
import logging

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response
from fastapi.templating import Jinja2Templates

from shipcam.camera import CaptureDevice, CaptureDeviceError, build_camera
from shipcam.config import AppSettings, load_settings
from shipcam.service import Accepted, Failed, InvalidPayload, IntakeCoordinator, Outcome, Rejected
from shipcam.storage import ArtifactStore, CaptureIndex, IndexCorruptError, StorageError


APP_ROOT = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(APP_ROOT / "templates"))
LOGGER = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid Payload"
CAPTURE_FAILED_MESSAGE = "Capturing picture failed"
STORE_FAILED_MESSAGE = "Could not store image"


def _outcome_response(outcome: Outcome) -> PlainTextResponse:
    if isinstance(outcome, Accepted):
        return PlainTextResponse("OK")
    if isinstance(outcome, Rejected):
        return PlainTextResponse(INVALID_PAYLOAD_MESSAGE, status_code=500)
    if isinstance(outcome, Failed) and isinstance(outcome.error, CaptureDeviceError):
        return PlainTextResponse(CAPTURE_FAILED_MESSAGE, status_code=500)
    return PlainTextResponse(STORE_FAILED_MESSAGE, status_code=500)


def create_app(settings: AppSettings | None = None, camera: CaptureDevice | None = None) -> FastAPI:
    """Build the app; loads (or creates) the capture index up front.

    Raises IndexCorruptError when the existing index file cannot be parsed.
    """
    settings = settings or load_settings()
    artifacts = ArtifactStore(settings.captures_dir)
    index = CaptureIndex(settings.index_path)
    loaded = index.load()
    LOGGER.info("Loaded capture index %s with %d item(s)", index.path, len(loaded))

    coordinator = IntakeCoordinator(
        camera=camera if camera is not None else build_camera(settings),
        artifacts=artifacts,
        index=index,
        capture_timeout_sec=settings.capture_timeout_seconds,
    )

    app = FastAPI(title="shipcam")
    app.state.settings = settings
    app.state.coordinator = coordinator

    @app.get("/", response_class=HTMLResponse)
    def gallery(request: Request) -> Response:
        try:
            snapshot = index.snapshot()
        except IndexCorruptError:
            LOGGER.exception("Cannot render gallery")
            return PlainTextResponse("Capture index is corrupt", status_code=500)
        except StorageError:
            LOGGER.exception("Cannot render gallery")
            return PlainTextResponse("Capture index is unreadable", status_code=500)
        return templates.TemplateResponse(
            request,
            "gallery.html",
            {
                "captures": snapshot.items,
                "slide_ms": settings.gallery_slide_seconds * 1000,
                "reload_ms": settings.gallery_reload_seconds * 1000,
            },
        )

    @app.get("/captures/{artifact_name}")
    def capture_artifact(artifact_name: str) -> FileResponse:
        path = artifacts.path_for(artifact_name)
        if path is None or not path.is_file():
            raise HTTPException(status_code=404, detail="Capture not found")
        return FileResponse(path)

    @app.post("/jiraShipped", response_class=PlainTextResponse)
    async def jira_shipped(request: Request, background_tasks: BackgroundTasks) -> PlainTextResponse:
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        LOGGER.info("Received trigger: %s", payload)

        if settings.ack_mode == "persisted":
            return _outcome_response(await coordinator.handle_trigger(payload))

        # Acknowledge once the device has delivered the frame; the artifact
        # and index writes finish after the response is sent.
        try:
            pending = await coordinator.capture(payload)
        except InvalidPayload:
            return PlainTextResponse(INVALID_PAYLOAD_MESSAGE, status_code=500)
        except CaptureDeviceError:
            return PlainTextResponse(CAPTURE_FAILED_MESSAGE, status_code=500)
        background_tasks.add_task(coordinator.complete, pending)
        return PlainTextResponse("OK")

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
