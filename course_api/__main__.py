"""Run the API with uvicorn: python -m course_api"""
from __future__ import annotations

import logging

import uvicorn

from course_api.app import create_app
from course_api.core.config import get_settings
from course_api.core.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("course_api")
    logger.info(
        "Server running on port %s (env=%s, storage=%s)",
        settings.port,
        settings.app_env,
        settings.storage_backend,
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
