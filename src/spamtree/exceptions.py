"""Custom exceptions for the spamtree classifier.

Every contract violation raised by the classifier is an ``InvalidArgumentError``
(a ``ValueError``); catch it to handle any bad input at once. Subclasses carry
extra context for the specific failure:

- LengthMismatchError: Parallel sample and label lists differ in length.
- EmptyTrainingSetError: Training was requested with no examples.
- MalformedTreeError: A serialized tree does not follow the line grammar.
- UnsplittableLeafError: A conflicting label reached a leaf that has no
  stored sample to split against.
- DisjointFeaturesError: Two feature vectors share no feature names.

Collaborator exceptions:

- FeatureNotFoundError (subclass KeyError): A feature vector was asked for a
  feature it does not have.
- ColumnsNotFoundError (subclass ValueError): A dataset is missing the
  configured text or label column.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Base exception for all classifier contract violations.

    Raised for absent required inputs, mismatched or empty training lists, and
    malformed serialized trees.
    """


class LengthMismatchError(InvalidArgumentError):
    """Raised when parallel sample and label lists have different lengths.

    Attributes:
        samples_count (int): Number of samples provided.
        labels_count (int): Number of labels provided.

    Examples:
        >>> err = LengthMismatchError(samples_count=3, labels_count=2)
        >>> str(err)
        'Length of provided samples [3] does not match provided labels [2]'
    """

    samples_count: int
    labels_count: int

    def __init__(self, samples_count: int, labels_count: int) -> None:
        """Initialize LengthMismatchError.

        Args:
            samples_count (int): Number of samples provided.
            labels_count (int): Number of labels provided.
        """
        super().__init__(
            f"Length of provided samples [{samples_count}] does not match provided labels [{labels_count}]"
        )
        self.samples_count = samples_count
        self.labels_count = labels_count

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including both list lengths.
        """
        return (
            f"{self.__class__.__name__}(samples_count={self.samples_count!r}, labels_count={self.labels_count!r})"
        )


class EmptyTrainingSetError(InvalidArgumentError):
    """Raised when a tree is trained from zero examples."""

    def __init__(self) -> None:
        """Initialize EmptyTrainingSetError."""
        super().__init__("Cannot build a decision tree from an empty training set")


class MalformedTreeError(InvalidArgumentError):
    """Raised when a serialized tree does not follow the line grammar.

    Attributes:
        line_number (int | None): 1-based number of the offending line, or
            None when the stream ended before the expected line.
        line (str | None): The offending line text (stripped), if any.

    Examples:
        >>> err = MalformedTreeError("Expected a 'Threshold: ' line", line_number=2, line="Ham")
        >>> err.line_number
        2
    """

    line_number: int | None
    line: str | None

    def __init__(self, message: str, *, line_number: int | None = None, line: str | None = None) -> None:
        """Initialize MalformedTreeError.

        Args:
            message (str): Description of the format violation.
            line_number (int | None): 1-based number of the offending line.
            line (str | None): The offending line text.
        """
        super().__init__(message)
        self.line_number = line_number
        self.line = line

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including message, line number, and line text.
        """
        return (
            f"{self.__class__.__name__}("
            f"message={str(self)!r}, line_number={self.line_number!r}, line={self.line!r})"
        )


class UnsplittableLeafError(InvalidArgumentError):
    """Raised when a leaf without a stored sample must be split.

    Leaves parsed from a serialized tree do not keep the training vector that
    produced them, so there is nothing to compute a split point against.

    Attributes:
        label (str): Label of the leaf that could not be split.
        new_label (str): Label of the conflicting insertion.
    """

    label: str
    new_label: str

    def __init__(self, label: str, new_label: str) -> None:
        """Initialize UnsplittableLeafError.

        Args:
            label (str): Label of the leaf that could not be split.
            new_label (str): Label of the conflicting insertion.
        """
        super().__init__(
            f"Leaf labelled '{label}' has no stored sample and cannot be split for label '{new_label}'"
        )
        self.label = label
        self.new_label = new_label


class DisjointFeaturesError(InvalidArgumentError):
    """Raised when two feature vectors share no feature names.

    Attributes:
        left_features (list[str]): Feature names of the first vector.
        right_features (list[str]): Feature names of the second vector.
    """

    left_features: list[str]
    right_features: list[str]

    def __init__(self, left_features: list[str], right_features: list[str]) -> None:
        """Initialize DisjointFeaturesError.

        Args:
            left_features (list[str]): Feature names of the first vector.
            right_features (list[str]): Feature names of the second vector.
        """
        super().__init__("Feature vectors share no features to compare")
        self.left_features = left_features
        self.right_features = right_features


class FeatureNotFoundError(KeyError):
    """Raised when a feature vector is asked for a feature it does not have.

    Attributes:
        feature (str): The requested feature name.
        available_features (list[str]): Feature names present in the vector.

    Examples:
        >>> err = FeatureNotFoundError("viagra", available_features=["free", "offer"])
        >>> err.feature
        'viagra'
    """

    feature: str
    available_features: list[str]

    def __init__(self, feature: str, available_features: list[str]) -> None:
        """Initialize FeatureNotFoundError.

        Args:
            feature (str): The requested feature name.
            available_features (list[str]): Feature names present in the vector.
        """
        super().__init__(feature)
        self.feature = feature
        self.available_features = available_features

    def __str__(self) -> str:
        """Return a readable message instead of KeyError's quoted key.

        Returns:
            str: Human-readable description of the missing feature.
        """
        return f"Feature '{self.feature}' not found in feature vector"


class ColumnsNotFoundError(ValueError):
    """Raised when requested columns do not exist in a dataset.

    Attributes:
        missing_columns (list[str]): Column names that were not found.
        available_columns (list[str]): Column names present in the dataset.

    Examples:
        >>> err = ColumnsNotFoundError(
        ...     missing_columns=["text"],
        ...     available_columns=["body", "label"],
        ... )
        >>> err.missing_columns
        ['text']
    """

    missing_columns: list[str]
    available_columns: list[str]

    def __init__(
        self,
        missing_columns: list[str],
        available_columns: list[str],
    ) -> None:
        """Initialize ColumnsNotFoundError.

        Args:
            missing_columns (list[str]): Column names not found in the dataset.
            available_columns (list[str]): Column names present in the dataset.
        """
        super().__init__(f"Columns not found in dataset: {sorted(missing_columns)}")
        self.missing_columns = missing_columns
        self.available_columns = available_columns
