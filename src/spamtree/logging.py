"""Logging utilities for spamtree.

This module provides a custom SPLIT log level, emitted whenever insertion turns
a leaf into a decision node, and a handle for enabling/disabling spamtree
logging with loguru.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) so
    that ``enable_logging()`` output is not duplicated. If handler 0 was
    already removed by the application, the removal is a no-op.
"""

from __future__ import annotations

import contextlib
import sys
import threading
import warnings
from typing import TYPE_CHECKING, ClassVar, Final, Literal

from loguru import logger

from spamtree.config import get_settings

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

# SPLIT sits between INFO (20) and WARNING (30)
SPLIT_LEVEL: Final[str] = "SPLIT"
SPLIT_LEVEL_NUMBER: Final[int] = 25


def _register_split_level() -> None:
    """Register the SPLIT custom log level with loguru.

    Registers the level when missing. If it already exists with a different
    numeric value, emits a UserWarning because loguru does not permit changing
    the numeric value of an existing level.
    """
    try:
        existing_level = logger.level(SPLIT_LEVEL)
    except ValueError:
        logger.level(SPLIT_LEVEL, no=SPLIT_LEVEL_NUMBER, icon="🌿")
    else:
        if existing_level.no != SPLIT_LEVEL_NUMBER:
            msg = (
                f"SPLIT level already registered with numeric value {existing_level.no},"
                f" expected {SPLIT_LEVEL_NUMBER}"
            )
            warnings.warn(msg, stacklevel=2)


_register_split_level()

type LogLevel = Literal[
    "TRACE",
    "DEBUG",
    "INFO",
    "SPLIT",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

type LogFormat = Literal["short", "full"]

_FORMATS: Final[dict[str, str]] = {
    "short": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
        "<cyan>{function}</cyan> - "
        "<level>{message}</level> {extra}"
    ),
    "full": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level> {extra}"
    ),
}


class LoggingHandle:
    """Handle for managing spamtree logging lifecycle.

    Stores the handler ID from logger.add() and removes it via disable() or on
    leaving a ``with`` block.

    Examples:
        >>> with enable_logging():  # doctest: +SKIP
        ...     tree = DecisionTree.from_examples(samples, labels)

        >>> handle = enable_logging(level="DEBUG")  # doctest: +SKIP
        >>> handle.disable()  # doctest: +SKIP
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        """Initialize the logging handle.

        Args:
            handler_id (int): The loguru handler ID from logger.add().
        """
        self.handler_id: int | None = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        """Remove the handler associated with this logging handle.

        When this is the last active handle, ``logger.disable("spamtree")`` is
        called to suppress spamtree log messages again. Calling disable twice
        is a no-op.
        """
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        """Enter context manager.

        Returns:
            LoggingHandle: This handle instance.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager and disable logging.

        Args:
            exc_type (type[BaseException] | None): The exception type, if raised.
            exc_val (BaseException | None): The exception instance, if raised.
            exc_tb (TracebackType | None): The traceback, if raised.
        """
        self.disable()


def enable_logging(
    *,
    level: LogLevel | None = None,
    log_format: LogFormat | None = None,
) -> LoggingHandle:
    """Enable spamtree logging on stderr.

    Each call returns an independent handle that manages its own handler.

    Args:
        level (LogLevel | None): Minimum log level to display. Defaults to the
            configured ``log_level`` setting ("SPLIT" unless overridden), which
            shows every leaf split made during training. Use "DEBUG" to also
            see parsing and evaluation details.
        log_format (LogFormat | None): "short" shows only the function name;
            "full" adds module and line number. Defaults to the configured
            ``log_format`` setting.

    Returns:
        LoggingHandle: Independent handle for managing the logging handler.

    Note:
        Disabling the last active handle calls ``logger.disable("spamtree")``,
        which also silences any handler the application attached to spamtree
        records on its own.
    """
    settings = get_settings()
    effective_level = level or settings.log_level
    effective_format = log_format or settings.log_format

    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sys.stderr,
        level=effective_level,
        filter=_is_spamtree_record,
        format=_FORMATS[effective_format],
    )
    return LoggingHandle(handler_id)


def _is_spamtree_record(record: Record) -> bool:
    """Filter to pass all spamtree module records.

    Args:
        record (Record): The loguru Record object to filter.

    Returns:
        bool: True if the record comes from the spamtree package.
    """
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
