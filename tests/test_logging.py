"""Tests for the logging configuration."""

import logging

from src.playlistcleaner.logging_config import (
    DATE_FORMAT,
    LOG_FORMAT,
    configure_logging,
    get_logger,
)


def test_configure_logging_default():
    """Test the default logging configuration."""
    configure_logging()

    root = logging.getLogger()
    assert root.level == logging.INFO
    assert len(root.handlers) == 1
    formatter = root.handlers[0].formatter
    assert formatter._fmt == LOG_FORMAT
    assert formatter.datefmt == DATE_FORMAT


def test_configure_logging_debug():
    """Test enabling debug logging replaces existing handlers."""
    configure_logging()
    configure_logging(debug=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_get_logger():
    """Test getting a named logger."""
    logger = get_logger("playlistcleaner.test")
    assert logger.name == "playlistcleaner.test"
    assert logger is logging.getLogger("playlistcleaner.test")
