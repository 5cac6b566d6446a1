"""Logging configuration."""

import logging

from echotrail.shared.config import Settings, get_settings


def setup_logging(settings: Settings | None = None, verbose: bool = False) -> None:
    """Configure application logging.

    Sets up structured JSON logging for production
    and human-readable format for development.

    Args:
        settings: Settings to read the level and environment from
        verbose: Force DEBUG level regardless of settings
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if verbose:
        log_level = logging.DEBUG

    if settings.is_production:
        # JSON format for production (easier to parse in log aggregators)
        log_format = (
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "message": "%(message)s"}'
        )
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    # Request logs from the weather client are noise outside debugging
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )
