"""Main application entry point for the FastAPI application.

Run with ``uvicorn sessionauth.main:app``.
"""

import uvicorn

from sessionauth.core.application import create_application
from sessionauth.core.config.settings import settings
from sessionauth.core.initialization import initialize_application

initialize_application()

app = create_application()


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    uvicorn.run(
        "sessionauth.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
