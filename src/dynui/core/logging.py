"""Logging configuration for the dynamic UI agent."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "dynui"

# LLM client stack; request-level chatter stays at WARNING
CLIENT_LOGGERS = ("openai", "httpx", "httpcore")


def configure_logging(level: Optional[int] = None, quiet: bool = False) -> None:
    """Configure logging for the agent, API and CLI.

    Args:
        level: Log level for dynui loggers. If None, uses DYNUI_LOG_LEVEL.
        quiet: If True, only show warnings and errors (CLI output stays clean)
    """
    if quiet:
        level = logging.WARNING
    elif level is None:
        from .config import get_settings
        level = get_settings().log_level_int

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )

    # basicConfig does nothing when the host (uvicorn, pytest) already
    # installed handlers, so the package level is set directly too
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)

    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
