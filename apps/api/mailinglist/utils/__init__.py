"""Utility modules for the application."""

from mailinglist.utils.addr import parse_api_addr
from mailinglist.utils.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger", "parse_api_addr"]
