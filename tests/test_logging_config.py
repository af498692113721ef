"""Tests for the console logging setup."""

from __future__ import annotations

import logging

import pytest

from neatobridge.core.logging_config import LOG_FORMAT, configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_sets_level_and_format(self) -> None:
        root = configure_logging("debug")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == LOG_FORMAT

    def test_repeated_calls_do_not_duplicate_handlers(self) -> None:
        configure_logging("INFO")
        root = configure_logging("WARNING")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert configure_logging("chatty").level == logging.INFO
