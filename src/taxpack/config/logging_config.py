"""Logging configuration."""

import logging
import sys

from taxpack.config.settings import get_settings

APP_LOGGER = "taxpack"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> logging.Logger:
    """
    Configure logging for the taxpack loggers.

    The taxpack namespace logs at the configured level; everything else
    stays at WARNING unless listed below. Returns the namespace logger.
    """
    settings = get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)

    # SQL statements only when debugging the app itself
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level <= logging.DEBUG else logging.WARNING
    )
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    app_logger.debug("Logging configured at %s", logging.getLevelName(level))
    return app_logger
