"""spamtree: An incremental decision tree for labelling text samples."""

from loguru import logger

from spamtree.classifier import AccuracyReport, DecisionTree
from spamtree.exceptions import InvalidArgumentError
from spamtree.logging import PACKAGE_NAME, enable_logging
from spamtree.text_block import TextBlock

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the spamtree module by default

__all__ = [
    "AccuracyReport",
    "DecisionTree",
    "InvalidArgumentError",
    "TextBlock",
    "enable_logging",
]
