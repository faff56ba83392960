"""Logging setup shared by the API server and the demo client.

Both entrypoints call `configure_logging` once; every other module only
asks `get_logger(__name__)` for its logger.
"""

import logging
import sys
from functools import lru_cache

PACKAGE_LOGGER = "mailinglist"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty dependencies, kept at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")


def configure_logging(debug: bool = False) -> None:
    """Send all records to stdout and set the package and dependency levels.

    Replaces any handlers installed before, so calling it again (for
    example from tests) is safe.

    Args:
        debug: Log the mailinglist package at DEBUG instead of INFO
    """
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger(PACKAGE_LOGGER).setLevel(
        logging.DEBUG if debug else logging.INFO
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module; repeated names share one instance."""
    return logging.getLogger(name)
