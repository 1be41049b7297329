"""Accuracy reporting for trained classifiers."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Final, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from spamtree.exceptions import InvalidArgumentError, LengthMismatchError
from spamtree.text_block import TextBlock

__all__ = ["OVERALL_KEY", "AccuracyReport", "SupportsClassify", "evaluate"]

OVERALL_KEY: Final[str] = "Overall"


class SupportsClassify(Protocol):
    """Anything that maps a feature vector to a label."""

    def classify(self, sample: TextBlock) -> str:
        """Return the predicted label for a sample."""
        ...


class AccuracyReport(BaseModel):
    """Classification accuracy per label and across all samples.

    Labels that were never predicted correctly do not appear in `per_label`.

    Attributes:
        per_label (dict[str, float]): Expected label to accuracy, for every
            label predicted correctly at least once.
        overall (float): Correct predictions over all samples; 0.0 when no
            samples were evaluated.
        total (int): Number of samples evaluated.
        correct (int): Number of correct predictions.

    Examples:
        >>> report = AccuracyReport(per_label={"Ham": 1.0}, overall=0.5, total=2, correct=1)
        >>> report.to_mapping()
        {'Ham': 1.0, 'Overall': 0.5}
    """

    model_config = ConfigDict(frozen=True)

    per_label: dict[str, float] = Field(
        default_factory=dict,
        description="Expected label to accuracy, for labels predicted correctly at least once.",
    )
    overall: float = Field(ge=0.0, le=1.0, description="Correct predictions over all samples.")
    total: int = Field(ge=0, description="Number of samples evaluated.")
    correct: int = Field(ge=0, description="Number of correct predictions.")

    @field_validator("per_label", mode="after")
    @classmethod
    def _validate_accuracies_in_unit_interval(cls, value: dict[str, float]) -> dict[str, float]:
        """Validate that every per-label accuracy lies in [0, 1].

        Args:
            value (dict[str, float]): The per-label accuracies.

        Returns:
            dict[str, float]: The validated mapping, unchanged.

        Raises:
            ValueError: If any accuracy is outside [0, 1].
        """
        out_of_range = {label: acc for label, acc in value.items() if not 0.0 <= acc <= 1.0}
        if out_of_range:
            raise ValueError(f"Accuracies must lie in [0, 1], got {out_of_range}")
        return value

    @model_validator(mode="after")
    def _validate_correct_not_above_total(self) -> AccuracyReport:
        """Validate that correct predictions never exceed evaluated samples.

        Returns:
            AccuracyReport: The validated model instance.

        Raises:
            ValueError: If `correct` is greater than `total`.
        """
        if self.correct > self.total:
            raise ValueError(f"correct ({self.correct}) cannot exceed total ({self.total})")
        return self

    def to_mapping(self) -> dict[str, float]:
        """Flatten the report into one mapping with an ``"Overall"`` entry.

        A real label named ``"Overall"`` is shadowed by the overall accuracy
        here; it remains available in `per_label`.

        Returns:
            dict[str, float]: Per-label accuracies plus the overall accuracy.
        """
        if OVERALL_KEY in self.per_label:
            logger.warning("Label collides with the overall accuracy key", label=OVERALL_KEY)
        return {**self.per_label, OVERALL_KEY: self.overall}


def evaluate(
    classifier: SupportsClassify,
    samples: Sequence[TextBlock],
    labels: Sequence[str],
) -> AccuracyReport:
    """Measure how often a classifier predicts the expected labels.

    Args:
        classifier (SupportsClassify): The trained classifier.
        samples (Sequence[TextBlock]): Vectors to classify.
        labels (Sequence[str]): Expected label per vector, parallel to `samples`.

    Returns:
        AccuracyReport: Per-label and overall accuracy.

    Raises:
        InvalidArgumentError: If either sequence is None.
        LengthMismatchError: If the sequences differ in length.
    """
    if samples is None or labels is None:
        raise InvalidArgumentError("Samples and labels are required for evaluation")
    if len(samples) != len(labels):
        logger.warning("Evaluation rejected", samples=len(samples), labels=len(labels))
        raise LengthMismatchError(len(samples), len(labels))

    label_totals: Counter[str] = Counter()
    label_correct: Counter[str] = Counter()
    for sample, expected in zip(samples, labels, strict=True):
        predicted = classifier.classify(sample)
        label_totals[expected] += 1
        if predicted == expected:
            label_correct[predicted] += 1

    total = len(labels)
    correct = sum(label_correct.values())
    report = AccuracyReport(
        per_label={label: hits / label_totals[label] for label, hits in label_correct.items()},
        overall=correct / total if total else 0.0,
        total=total,
        correct=correct,
    )
    logger.debug("Evaluation finished", total=total, correct=correct, overall=report.overall)
    return report
