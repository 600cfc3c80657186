"""Process entrypoint for the intake service."""

from __future__ import annotations

import logging

import uvicorn

from shipcam.config import load_settings
from shipcam.web.app import create_app


LOGGER = logging.getLogger("shipcam.web.main")


def run() -> None:
    """Serve the webhook and gallery until interrupted."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    LOGGER.info(
        "Starting shipcam on %s:%s camera=%s ack_mode=%s",
        settings.host,
        settings.port,
        settings.camera_adapter,
        settings.ack_mode,
    )
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
