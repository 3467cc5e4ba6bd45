"""Tests for structlog configuration."""

import logging

import structlog

from hubox.observability.logging import QUIET_LOGGERS, bind_context, clear_context, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_quiets_library_loggers(self):
        setup_logging(level="DEBUG")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_bound_context_is_merged_and_cleared(self):
        clear_context()
        bind_context(command="sync", notification_id="42")

        assert structlog.contextvars.get_contextvars() == {"command": "sync", "notification_id": "42"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
