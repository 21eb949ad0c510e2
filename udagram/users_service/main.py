"""Main entrypoint for the users service."""

import logging

import uvicorn

from .api import create_users_app
from .config import settings

logger = logging.getLogger(__name__)

app = create_users_app(settings)


def run() -> None:
    logger.info("server running http://localhost:%s", settings.port)
    logger.info("press CTRL+C to stop server")
    uvicorn.run(
        "udagram.users_service.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    run()
