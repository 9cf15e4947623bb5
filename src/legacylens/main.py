r"""Entry point serving the analysis API with uvicorn."""

from __future__ import annotations

__all__ = ["run"]

import logging

import uvicorn

from legacylens.settings import Settings
from legacylens.utils.structured_logging import configure_logging
from legacylens.web.app import create_app

logger: logging.Logger = logging.getLogger(__name__)


def run() -> None:
    """Configure logging from the settings and serve the API."""
    settings = Settings()
    configure_logging(settings.log_level, structured=settings.structured_logs)
    app = create_app(settings)
    logger.info(f"API listening on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":  # pragma: no cover
    run()
