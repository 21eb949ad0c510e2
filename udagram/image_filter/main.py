"""Entrypoint for the image filter service."""

import logging

import httpx
import uvicorn
from fastapi import FastAPI

from udagram import ServiceConfig, create_app

from .config import Settings, settings
from .processor import INDEX_TEXT, ImageFilterProcessor

logger = logging.getLogger(__name__)


def build_app(
    service_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the filter app; transport replaces the outbound HTTP transport (tests)."""
    service_settings = service_settings or settings
    processor = ImageFilterProcessor(service_settings, transport=transport)
    return create_app(
        processor,
        ServiceConfig(
            description="Downloads a public image and returns a greyscale thumbnail.",
            index_text=INDEX_TEXT,
        ),
    )


app: FastAPI = build_app()


def run() -> None:
    logger.info("server running http://localhost:%s", settings.port)
    logger.info("press CTRL+C to stop server")
    uvicorn.run(
        "udagram.image_filter.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    run()
