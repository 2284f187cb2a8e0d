"""
Main entry point for pomocal
"""

import sys

import uvicorn

from pomocal import __version__
from pomocal.api import create_app
from pomocal.config import get_settings
from pomocal.utils import get_logger, setup_logging


def main() -> None:
    """Main application entry point."""
    setup_logging()
    logger = get_logger("main")
    settings = get_settings()

    logger.info(
        "Starting pomocal",
        version=__version__,
        host=settings.api_host,
        port=settings.api_port,
    )

    try:
        app = create_app(settings=settings)
        # log_config=None keeps uvicorn on the handlers set up above
        uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)
    except Exception as exc:  # pragma: no cover - defensive
        logger.error("Failed to start server", error=str(exc), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
