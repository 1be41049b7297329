"""Shared fixtures for the spamtree test suite."""

from __future__ import annotations

from collections.abc import Generator
from typing import NamedTuple

import loguru
import pytest
from loguru import logger

from spamtree.config import get_settings
from spamtree.logging import PACKAGE_NAME
from spamtree.text_block import TextBlock


class LogSink(NamedTuple):
    """Log sink with records list and handler ID for cleanup.

    Attributes:
        records (list[loguru.Record]): List that accumulates log record dictionaries.
        handler_id (int): Logger handler ID for cleanup.
    """

    records: list[loguru.Record]
    handler_id: int


@pytest.fixture
def log_sink() -> Generator[LogSink]:
    """Create a sink that captures spamtree log records for testing.

    Yields:
        Generator[LogSink]: Named tuple with records list and handler_id for cleanup.
    """
    captured_records: list[loguru.Record] = []

    def sink(message: loguru.Message) -> None:
        """Capture record dict from each log message.

        Args:
            message (loguru.Message): Log message with record attribute containing log details.
        """
        captured_records.append(message.record)

    handler_id = logger.add(sink, level="TRACE")
    logger.enable(PACKAGE_NAME)

    yield LogSink(records=captured_records, handler_id=handler_id)

    logger.disable(PACKAGE_NAME)
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None]:
    """Clear the cached settings so environment patches take effect per test.

    Yields:
        None: Nothing; used only for setup/teardown side effects.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ham_sample() -> TextBlock:
    """A long message with no links.

    Returns:
        TextBlock: Vector with `wordCount=10`, `linkCount=0`.
    """
    return TextBlock(features={"wordCount": 10, "linkCount": 0})


@pytest.fixture
def spam_sample() -> TextBlock:
    """A short message full of links.

    Returns:
        TextBlock: Vector with `wordCount=2`, `linkCount=5`.
    """
    return TextBlock(features={"wordCount": 2, "linkCount": 5})
