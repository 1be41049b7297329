"""Text ingestion: vocabulary building, vectorization, and labeled dataset loading."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import polars as pl
from loguru import logger

from spamtree.config import SpamTreeSettings, get_settings
from spamtree.exceptions import ColumnsNotFoundError, LengthMismatchError
from spamtree.text_block import TextBlock, tokenize

__all__ = [
    "LabeledDataset",
    "build_vocabulary",
    "dataset_from_frame",
    "load_dataset",
    "tokenize",
    "vectorize",
]


@dataclass(frozen=True)
class LabeledDataset:
    """Feature vectors with their expected labels, sharing one vocabulary.

    Attributes:
        samples (list[TextBlock]): One feature vector per row.
        labels (list[str]): Expected label per row, parallel to `samples`.
        vocabulary (list[str]): Feature names every sample carries.
    """

    samples: list[TextBlock]
    labels: list[str]
    vocabulary: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Reject datasets whose samples and labels are not parallel.

        Raises:
            LengthMismatchError: If `samples` and `labels` differ in length.
        """
        if len(self.samples) != len(self.labels):
            raise LengthMismatchError(len(self.samples), len(self.labels))

    def __len__(self) -> int:
        """Number of labeled samples."""
        return len(self.samples)


# ---------------------------------------------------------------------------
# Public interface -- Vectorization
# ---------------------------------------------------------------------------


def build_vocabulary(texts: Iterable[str], *, settings: SpamTreeSettings | None = None) -> list[str]:
    """Collect the sorted set of tokens across all texts.

    Args:
        texts (Iterable[str]): Raw texts to scan.
        settings (SpamTreeSettings | None): Tokenizer settings. Defaults to the
            process-wide settings.

    Returns:
        list[str]: Distinct tokens in sorted order.

    Examples:
        >>> build_vocabulary(["free offer", "meeting at noon", "free lunch"])
        ['at', 'free', 'lunch', 'meeting', 'noon', 'offer']
    """
    vocabulary: set[str] = set()
    for text in texts:
        vocabulary.update(tokenize(text, settings=settings))
    return sorted(vocabulary)


def vectorize(
    texts: Sequence[str],
    *,
    vocabulary: Sequence[str] | None = None,
    settings: SpamTreeSettings | None = None,
) -> list[TextBlock]:
    """Turn raw texts into word-frequency vectors over a shared vocabulary.

    Sharing the vocabulary guarantees every vector carries the same features,
    which the decision tree needs to compare and route samples.

    Args:
        texts (Sequence[str]): Raw texts, one per sample.
        vocabulary (Sequence[str] | None): Feature words. Built from `texts`
            when None; pass the training vocabulary when vectorizing test data.
        settings (SpamTreeSettings | None): Tokenizer settings.

    Returns:
        list[TextBlock]: One vector per text, in input order.
    """
    words = list(vocabulary) if vocabulary is not None else build_vocabulary(texts, settings=settings)
    return [TextBlock.from_text(text, vocabulary=words, settings=settings) for text in texts]


# ---------------------------------------------------------------------------
# Public interface -- Dataset loading
# ---------------------------------------------------------------------------


def dataset_from_frame(
    df: pl.DataFrame,
    *,
    vocabulary: Sequence[str] | None = None,
    settings: SpamTreeSettings | None = None,
) -> LabeledDataset:
    """Build a labeled dataset from a DataFrame of texts and labels.

    Rows whose text or label is null are dropped. Labels are cast to strings
    and stripped of surrounding whitespace so they can be saved with a tree.

    Args:
        df (pl.DataFrame): Frame holding the configured text and label columns.
        vocabulary (Sequence[str] | None): Feature words. Built from the
            frame's texts when None.
        settings (SpamTreeSettings | None): Column names and tokenizer
            settings. Defaults to the process-wide settings.

    Returns:
        LabeledDataset: The vectorized samples with their labels.

    Raises:
        ColumnsNotFoundError: If the text or label column is missing.
    """
    settings = settings or get_settings()
    required = [settings.text_column, settings.label_column]
    missing = [col for col in required if col not in df.columns]
    if missing:
        logger.warning("Dataset is missing required columns", missing=missing, available=df.columns)
        raise ColumnsNotFoundError(missing_columns=missing, available_columns=df.columns)

    clean = df.select(
        pl.col(settings.text_column).cast(pl.String),
        pl.col(settings.label_column).cast(pl.String).str.strip_chars(),
    ).drop_nulls()
    dropped = df.height - clean.height
    if dropped:
        logger.info("Dropped rows with null text or label", dropped=dropped)

    texts = clean[settings.text_column].to_list()
    labels = clean[settings.label_column].to_list()
    words = list(vocabulary) if vocabulary is not None else build_vocabulary(texts, settings=settings)
    samples = vectorize(texts, vocabulary=words, settings=settings)
    logger.debug("Dataset vectorized", rows=len(samples), vocabulary_size=len(words))
    return LabeledDataset(samples=samples, labels=labels, vocabulary=words)


def load_dataset(
    path: str | Path,
    *,
    vocabulary: Sequence[str] | None = None,
    settings: SpamTreeSettings | None = None,
) -> LabeledDataset:
    """Read a labeled CSV file and vectorize it.

    Args:
        path (str | Path): CSV file with a header row.
        vocabulary (Sequence[str] | None): Feature words. Built from the
            file's texts when None.
        settings (SpamTreeSettings | None): Column names and tokenizer settings.

    Returns:
        LabeledDataset: The vectorized samples with their labels.

    Raises:
        ColumnsNotFoundError: If the text or label column is missing.
    """
    df = pl.read_csv(path, infer_schema=False)
    logger.info("Dataset loaded", path=str(path), rows=df.height)
    return dataset_from_frame(df, vocabulary=vocabulary, settings=settings)
