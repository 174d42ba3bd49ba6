"""Application-wide logging configuration."""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup.

    Logs stream to stderr, where uvicorn and the Celery worker pick them up.
    Every module keeps its own ``logger = logging.getLogger(__name__)``.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger(__name__).info(f"Logging initialized with level {level}")
