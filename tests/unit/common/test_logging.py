# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for logging setup and redaction."""

import logging

from collections.abc import Iterator

import pytest

from rich.logging import RichHandler

from forage.common.logging import REDACTED, redact, setup_logger, setup_logger_from_settings
from forage.config.settings import ForageSettings


pytestmark = [pytest.mark.unit]


@pytest.fixture
def logger_name() -> Iterator[str]:
    name = "forage.tests.logging"
    yield name
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_rich_handler_is_installed_once(logger_name: str):
    setup_logger(logger_name, level="debug")
    logger = setup_logger(logger_name, level="INFO")

    assert logger.level == logging.INFO
    assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1


def test_host_handlers_are_kept(logger_name: str):
    host_handler = logging.NullHandler()
    logging.getLogger(logger_name).addHandler(host_handler)

    logger = setup_logger(logger_name, rich=False)

    assert logger.handlers == [host_handler]


def test_unknown_level_name_falls_back_to_warning(logger_name: str):
    assert setup_logger(logger_name, level="chatty", rich=False).level == logging.WARNING


def test_setup_from_settings():
    settings = ForageSettings(log_level="ERROR", rich_logging=False)

    logger = setup_logger_from_settings(settings)

    try:
        assert logger.name == "forage"
        assert logger.level == logging.ERROR
    finally:
        logger.setLevel(logging.NOTSET)


def test_redact():
    assert redact("hunter2", secret=True) == REDACTED
    assert redact("jdbc:h2:mem:x", secret=False) == "jdbc:h2:mem:x"
    assert redact(None, secret=True) is None
