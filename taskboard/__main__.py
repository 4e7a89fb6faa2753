"""Run the task board with uvicorn."""

import uvicorn

from .deps import get_settings


def main() -> None:
    """Serve the application on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "taskboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
