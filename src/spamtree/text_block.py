"""Feature vectors built from text samples."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Mapping, Sequence
from types import MappingProxyType

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from spamtree.config import SpamTreeSettings, get_settings
from spamtree.exceptions import DisjointFeaturesError, FeatureNotFoundError

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9']+")


def tokenize(text: str, *, settings: SpamTreeSettings | None = None) -> list[str]:
    """Split text into word tokens.

    Tokens are runs of letters, digits, and apostrophes. Tokens shorter than
    `settings.min_token_length` are dropped.

    Args:
        text (str): Raw text to split.
        settings (SpamTreeSettings | None): Tokenizer settings. Defaults to the
            process-wide settings.

    Returns:
        list[str]: Tokens in order of appearance.

    Examples:
        >>> tokenize("Win a FREE prize, don't wait!")
        ['win', 'a', 'free', 'prize', "don't", 'wait']
    """
    settings = settings or get_settings()
    if settings.lowercase:
        text = text.lower()
    return [token for token in _TOKEN_PATTERN.findall(text) if len(token) >= settings.min_token_length]


class TextBlock(BaseModel):
    """An immutable mapping of feature names to numeric values.

    A text block usually holds the relative frequency of each vocabulary word
    in one text sample, but any named numeric features can be used.

    Attributes:
        features (Mapping[str, float]): Read-only feature name to value, in
            insertion order. The order decides ties in `largest_difference`.

    Examples:
        >>> ham = TextBlock(features={"wordCount": 10, "linkCount": 0})
        >>> spam = TextBlock(features={"wordCount": 2, "linkCount": 5})
        >>> ham.get("wordCount")
        10.0
        >>> ham.largest_difference(spam)
        'wordCount'
    """

    model_config = ConfigDict(frozen=True)

    features: Mapping[str, float] = Field(
        default_factory=dict,
        validate_default=True,
        description="Feature name to numeric value.",
    )

    @field_validator("features", mode="after")
    @classmethod
    def _freeze_features(cls, value: Mapping[str, float]) -> Mapping[str, float]:
        """Copy the validated features into a read-only view.

        Later changes to the caller's dict do not reach the vector, and the
        view rejects item assignment.

        Args:
            value (Mapping[str, float]): The validated feature mapping.

        Returns:
            Mapping[str, float]: A read-only view over a private copy.
        """
        return MappingProxyType(dict(value))

    @field_serializer("features")
    def _serialize_features(self, value: Mapping[str, float]) -> dict[str, float]:
        """Dump the read-only view as a plain dict."""
        return dict(value)

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        vocabulary: Sequence[str] | None = None,
        settings: SpamTreeSettings | None = None,
    ) -> TextBlock:
        """Build a word-frequency vector from raw text.

        Each feature is a word and its value is the word's share of all
        tokens in the text.

        Args:
            text (str): Raw text to tokenize.
            vocabulary (Sequence[str] | None): When given, exactly these words
                become features (0.0 for words missing from the text) and
                out-of-vocabulary tokens are ignored. When None, the features
                are the distinct tokens of the text in first-seen order.
            settings (SpamTreeSettings | None): Tokenizer settings. Defaults to
                the process-wide settings.

        Returns:
            TextBlock: The frequency vector.

        Examples:
            >>> dict(TextBlock.from_text("free free offer").features)
            {'free': 0.6666666666666666, 'offer': 0.3333333333333333}
        """
        tokens = tokenize(text, settings=settings)
        counts = Counter(tokens)
        total = len(tokens)
        names = list(counts) if vocabulary is None else list(vocabulary)
        return cls(features={name: (counts[name] / total if total else 0.0) for name in names})

    @property
    def feature_names(self) -> list[str]:
        """Feature names in insertion order."""
        return list(self.features)

    def get(self, name: str) -> float:
        """Return the value of a feature.

        Args:
            name (str): Feature name to look up.

        Returns:
            float: The feature value.

        Raises:
            FeatureNotFoundError: If the feature is not in this vector.
        """
        try:
            return self.features[name]
        except KeyError:
            raise FeatureNotFoundError(name, available_features=self.feature_names) from None

    def largest_difference(self, other: TextBlock) -> str:
        """Return the shared feature whose values differ the most.

        Only features present in both vectors are compared. Ties resolve to
        the earliest feature in this vector's order.

        Args:
            other (TextBlock): The vector to compare against.

        Returns:
            str: Name of the feature maximizing ``|self.get(f) - other.get(f)|``.

        Raises:
            DisjointFeaturesError: If the vectors have no feature in common.
        """
        shared = [name for name in self.features if name in other.features]
        if not shared:
            raise DisjointFeaturesError(self.feature_names, other.feature_names)
        mine = np.fromiter((self.features[name] for name in shared), dtype=np.float64, count=len(shared))
        theirs = np.fromiter((other.features[name] for name in shared), dtype=np.float64, count=len(shared))
        # argmax returns the first maximum, which keeps tie-breaking in feature order.
        return shared[int(np.argmax(np.abs(mine - theirs)))]

    def __contains__(self, name: object) -> bool:
        """Whether the vector has a feature with this name."""
        return name in self.features

    def __len__(self) -> int:
        """Number of features in the vector."""
        return len(self.features)
