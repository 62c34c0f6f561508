"""Command-line entry point: ``python -m synthmetrics`` or ``synthmetrics``."""

import logging

import uvicorn

from synthmetrics.app import create_app
from synthmetrics.config import Settings


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(message)s")
    logging.getLogger(__name__).info("Server running on port %d", settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
