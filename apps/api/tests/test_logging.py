"""Tests for logging setup."""

import logging

from mailinglist.utils.logging import (
    PACKAGE_LOGGER,
    QUIET_LOGGERS,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """configure_logging level tests."""

    def test_package_logs_at_info_by_default(self) -> None:
        """The mailinglist logger should be at INFO without debug."""
        configure_logging()

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO

    def test_debug_lowers_package_level(self) -> None:
        """debug=True should lower only the package logger to DEBUG."""
        configure_logging(debug=True)

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
        assert logging.getLogger().level == logging.INFO

        configure_logging()

    def test_dependencies_are_quieted(self) -> None:
        """Third-party loggers should only pass warnings."""
        configure_logging()

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_reconfiguring_keeps_a_single_handler(self) -> None:
        """Calling configure_logging twice should replace, not stack, handlers."""
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1


class TestGetLogger:
    """get_logger tests."""

    def test_returns_named_logger(self) -> None:
        """The logger should carry the module name it was asked for."""
        logger = get_logger("mailinglist.routers.emails")

        assert logger.name == "mailinglist.routers.emails"

    def test_repeated_calls_share_instance(self) -> None:
        """The same name should give back the same logger."""
        assert get_logger("mailinglist.client") is get_logger("mailinglist.client")
