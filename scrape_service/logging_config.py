"""JSON structured logging for the scrape service."""

import logging
import sys
from typing import TextIO

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "scrape-service"

# Per-request chatter from the HTTP client stack
_QUIET_LOGGERS = ("httpx", "httpcore")
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def build_formatter() -> JsonFormatter:
    """One JSON object per record, tagged with the service name."""
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        static_fields={"service": SERVICE_NAME},
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def setup_logging(log_level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Route root and uvicorn logs through a single JSON handler.

    Vendor call failures, retry backoffs and batch failure reports carry their
    ``extra`` fields (``url``, ``attempt``, ``delay_ms``, ``failed_count``)
    as top-level JSON keys. Returns the installed handler.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(build_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    for name in _UVICORN_LOGGERS:
        uv_logger = logging.getLogger(name)
        uv_logger.handlers[:] = [handler]
        uv_logger.propagate = False

    return handler
