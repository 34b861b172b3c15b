"""Tests for logging setup."""

import logging

from shortlist_bridge.logging_setup import LOGGER_NAME, configure_logging


def test_single_handler_and_level():
    logger = configure_logging("debug")
    configure_logging("debug")

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_unknown_level_defaults_to_info():
    assert configure_logging("chatty").level == logging.INFO
