"""Tests for custom exceptions.

This module tests the exception classes raised by the classifier and its
collaborators, ensuring proper inheritance, attribute storage, and messages.
"""

from __future__ import annotations

import pytest
from pytest_check import check

from spamtree.exceptions import (
    ColumnsNotFoundError,
    DisjointFeaturesError,
    EmptyTrainingSetError,
    FeatureNotFoundError,
    InvalidArgumentError,
    LengthMismatchError,
    MalformedTreeError,
    UnsplittableLeafError,
)


class TestInvalidArgumentErrorHierarchy:
    """Tests for the InvalidArgumentError family."""

    @pytest.mark.parametrize(
        "error",
        [
            LengthMismatchError(samples_count=3, labels_count=2),
            EmptyTrainingSetError(),
            MalformedTreeError("bad threshold", line_number=2, line="Threshold: x"),
            UnsplittableLeafError("Ham", "Spam"),
            DisjointFeaturesError(["a"], ["b"]),
        ],
        ids=["length-mismatch", "empty-training-set", "malformed-tree", "unsplittable-leaf", "disjoint-features"],
    )
    def test_subclasses_are_caught_as_invalid_argument(self, error: InvalidArgumentError) -> None:
        """Verify every contract violation can be caught as InvalidArgumentError and ValueError.

        Args:
            error (InvalidArgumentError): The exception instance under test.
        """
        with pytest.raises(InvalidArgumentError):
            raise error

        with check:
            assert isinstance(error, ValueError), "Should also be a ValueError"


class TestLengthMismatchError:
    """Tests for LengthMismatchError."""

    def test_stores_counts_and_formats_message(self) -> None:
        """Verify both lengths are stored and appear in the message."""
        error = LengthMismatchError(samples_count=3, labels_count=2)

        with check:
            assert error.samples_count == 3
        with check:
            assert error.labels_count == 2
        with check:
            assert str(error) == "Length of provided samples [3] does not match provided labels [2]"

    def test_repr_includes_counts(self) -> None:
        """Verify repr shows the class name and both counts."""
        error = LengthMismatchError(samples_count=0, labels_count=4)

        assert repr(error) == "LengthMismatchError(samples_count=0, labels_count=4)"


class TestMalformedTreeError:
    """Tests for MalformedTreeError."""

    def test_location_defaults_to_none(self) -> None:
        """Verify line number and line text are optional."""
        error = MalformedTreeError("stream ended")

        with check:
            assert error.line_number is None
        with check:
            assert error.line is None
        with check:
            assert str(error) == "stream ended"

    def test_repr_includes_location(self) -> None:
        """Verify repr shows the message and the offending line."""
        error = MalformedTreeError("bad threshold", line_number=7, line="Threshold: high")

        assert repr(error) == (
            "MalformedTreeError(message='bad threshold', line_number=7, line='Threshold: high')"
        )


class TestUnsplittableLeafError:
    """Tests for UnsplittableLeafError."""

    def test_stores_both_labels(self) -> None:
        """Verify the leaf label and the conflicting label are kept and named in the message."""
        error = UnsplittableLeafError("Ham", "Spam")

        with check:
            assert (error.label, error.new_label) == ("Ham", "Spam")
        with check:
            assert "'Ham'" in str(error) and "'Spam'" in str(error)


class TestFeatureNotFoundError:
    """Tests for FeatureNotFoundError."""

    def test_is_a_key_error_with_readable_message(self) -> None:
        """Verify the error is catchable as KeyError and prints an unquoted sentence."""
        error = FeatureNotFoundError("viagra", available_features=["free", "offer"])

        with pytest.raises(KeyError):
            raise error

        with check:
            assert not isinstance(error, InvalidArgumentError)
        with check:
            assert str(error) == "Feature 'viagra' not found in feature vector"
        with check:
            assert error.available_features == ["free", "offer"]


class TestColumnsNotFoundError:
    """Tests for ColumnsNotFoundError."""

    def test_message_lists_sorted_missing_columns(self) -> None:
        """Verify the message lists missing columns in sorted order."""
        error = ColumnsNotFoundError(missing_columns=["text", "label"], available_columns=["body"])

        with check:
            assert str(error) == "Columns not found in dataset: ['label', 'text']"
        with check:
            assert error.missing_columns == ["text", "label"]
        with check:
            assert error.available_columns == ["body"]
        with check:
            assert isinstance(error, ValueError)
