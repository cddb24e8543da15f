"""Console entry point: configure logging and serve the app with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from readme_generator.infrastructure.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    logging.getLogger("readme_generator").info(
        "Serving README generator on %s:%d", settings.host, settings.port
    )
    uvicorn.run(
        "readme_generator.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
