import logging

import uvicorn

from todo_api.core.config import get_settings
from todo_api.core.logging import setup_logging
from todo_api.main import create_app

logger = logging.getLogger("todo_api")


def run() -> None:
    """Start the API server; uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown."""
    settings = get_settings()
    setup_logging(settings.effective_log_level)

    logger.info("Starting Todo API (%s) on %s:%d", settings.environment, settings.host, settings.port)
    logger.info("API docs available at http://localhost:%d/docs", settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
