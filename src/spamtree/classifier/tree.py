"""Decision tree classifier trained by incremental insertion.

The tree keeps one representative training sample in each leaf. When a sample
with a different label lands on a leaf, the leaf splits on the feature where
the two samples differ most, at the midpoint of their values, so both samples
are routed to leaves carrying their own label. Same-label samples landing on a
leaf are discarded.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from loguru import logger

from spamtree.classifier.evaluation import AccuracyReport, evaluate
from spamtree.classifier.nodes import Decision, Leaf, Side, TreeNode
from spamtree.classifier.serialization import TextSink, check_feature_name, check_label, parse_tree, write_tree
from spamtree.exceptions import (
    EmptyTrainingSetError,
    InvalidArgumentError,
    LengthMismatchError,
    UnsplittableLeafError,
)
from spamtree.logging import SPLIT_LEVEL
from spamtree.text_block import TextBlock

__all__ = ["MISSING_NODE_LABEL", "DecisionTree", "midpoint"]

# Returned by classify when the walk reaches an empty child slot.
MISSING_NODE_LABEL: Final[str] = "null"


def midpoint(one: float, two: float) -> float:
    """Return the value halfway between two numbers.

    Args:
        one (float): First value.
        two (float): Second value.

    Returns:
        float: ``min(one, two) + |one - two| / 2``.

    Examples:
        >>> midpoint(10.0, 2.0)
        6.0
    """
    return min(one, two) + abs(one - two) / 2.0


class DecisionTree:
    """A binary decision tree over named numeric features.

    Build one with `from_examples` (training) or `from_stream` / `load`
    (a previously saved tree). Further training samples can be added at any
    time with `insert`.

    Examples:
        >>> ham = TextBlock(features={"wordCount": 10, "linkCount": 0})
        >>> spam = TextBlock(features={"wordCount": 2, "linkCount": 5})
        >>> tree = DecisionTree.from_examples([ham, spam], ["Ham", "Spam"])
        >>> tree.classify(spam)
        'Spam'
        >>> print(tree.dumps(), end="")
        Feature: wordCount
        Threshold: 6.0
        Spam
        Ham
    """

    def __init__(self, root: TreeNode) -> None:
        """Wrap an existing root node.

        Args:
            root (TreeNode): Root of the tree.

        Raises:
            InvalidArgumentError: If `root` is None.
        """
        if root is None:
            raise InvalidArgumentError("A decision tree needs a root node")
        self._root: TreeNode = root

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_stream(cls, lines: Iterable[str] | str) -> DecisionTree:
        """Build a tree from its serialized text form.

        Args:
            lines (Iterable[str] | str): Lines of a saved tree, e.g. an open
                file. A single string is split into lines first.

        Returns:
            DecisionTree: The parsed tree. Its leaves carry no samples.

        Raises:
            InvalidArgumentError: If `lines` is None, empty, or bytes.
            MalformedTreeError: If a `Feature:` line is not followed by a
                valid `Threshold:` line.
        """
        if lines is None:
            raise InvalidArgumentError("A line stream is required to load a tree")
        tree = cls(parse_tree(lines))
        logger.debug("Tree parsed", nodes=tree.node_count, depth=tree.depth)
        return tree

    @classmethod
    def loads(cls, text: str) -> DecisionTree:
        """Build a tree from the string returned by `dumps`.

        Args:
            text (str): Serialized tree text.

        Returns:
            DecisionTree: The parsed tree.

        Raises:
            InvalidArgumentError: If `text` is not a non-empty string.
            MalformedTreeError: If the text does not follow the line format.

        Examples:
            >>> DecisionTree.loads("Feature: wordCount\\nThreshold: 6.0\\nSpam\\nHam\\n")
            DecisionTree(nodes=3, leaves=2, depth=1)
        """
        if not isinstance(text, str):
            raise InvalidArgumentError(f"Serialized tree text must be a str, got {type(text).__name__}")
        return cls.from_stream(text.splitlines())

    @classmethod
    def load(cls, path: str | Path) -> DecisionTree:
        """Read a saved tree from a UTF-8 text file.

        Args:
            path (str | Path): File written by `dump` or `save`.

        Returns:
            DecisionTree: The parsed tree.
        """
        with Path(path).open(encoding="utf-8") as handle:
            return cls.from_stream(handle)

    @classmethod
    def from_examples(cls, samples: Sequence[TextBlock], labels: Sequence[str]) -> DecisionTree:
        """Train a tree by inserting labeled samples in order.

        The first sample becomes a single leaf; each later sample is inserted
        with `insert`.

        Args:
            samples (Sequence[TextBlock]): Training vectors.
            labels (Sequence[str]): Label per vector, parallel to `samples`.

        Returns:
            DecisionTree: The trained tree.

        Raises:
            InvalidArgumentError: If either sequence is None, or a label
                cannot be written in the saved-tree format.
            LengthMismatchError: If the sequences differ in length.
            EmptyTrainingSetError: If there are no samples.
        """
        if samples is None or labels is None:
            raise InvalidArgumentError("Samples and labels are required to train a tree")
        if len(samples) != len(labels):
            logger.warning("Training rejected", samples=len(samples), labels=len(labels))
            raise LengthMismatchError(len(samples), len(labels))
        if not samples:
            raise EmptyTrainingSetError()
        for label in labels:
            check_label(label)

        _require_sample(samples[0])
        tree = cls(Leaf(labels[0], samples[0]))
        for sample, label in zip(samples[1:], labels[1:], strict=True):
            tree.insert(sample, label)
        logger.info("Tree trained", samples=len(samples), leaves=tree.leaf_count, depth=tree.depth)
        return tree

    def insert(self, sample: TextBlock, label: str) -> None:
        """Add one labeled training sample to the tree.

        The sample follows the decision nodes down to a leaf or an empty slot.
        An empty slot gets a new leaf; a leaf with the same label is kept as
        is; a leaf with a different label is split between the two samples.

        Args:
            sample (TextBlock): Training vector.
            label (str): Its label.

        Raises:
            InvalidArgumentError: If `sample` is None, or `label` or the chosen
                split feature cannot be written in the saved-tree format.
            UnsplittableLeafError: If the sample must split a leaf that has no
                stored sample (a leaf loaded from a saved tree).
        """
        _require_sample(sample)
        check_label(label)
        parent: Decision | None = None
        side: Side = "left"
        node: TreeNode | None = self._root
        while isinstance(node, Decision):
            parent = node
            side = "right" if node.routes_right(sample) else "left"
            node = node.child(side)

        replacement = _absorb(node, sample, label)
        if replacement is node:
            return
        if parent is None:
            self._root = replacement
        else:
            parent.set_child(side, replacement)

    # ------------------------------------------------------------------
    # Prediction and persistence
    # ------------------------------------------------------------------

    def classify(self, sample: TextBlock) -> str:
        """Predict the label of a sample.

        At each decision node the sample goes left when its feature value is
        below the threshold and right otherwise.

        Args:
            sample (TextBlock): The vector to classify.

        Returns:
            str: The label of the leaf reached, or `MISSING_NODE_LABEL` if the
                walk reaches an empty child slot.

        Raises:
            InvalidArgumentError: If `sample` is None.
            FeatureNotFoundError: If the sample lacks a feature the tree tests.
        """
        _require_sample(sample)
        node: TreeNode | None = self._root
        while isinstance(node, Decision):
            node = node.left if sample.get(node.feature) < node.threshold else node.right
        if node is None:
            return MISSING_NODE_LABEL
        return node.label

    def evaluate(self, samples: Sequence[TextBlock], labels: Sequence[str]) -> AccuracyReport:
        """Measure accuracy against expected labels.

        See `spamtree.classifier.evaluation.evaluate`.

        Args:
            samples (Sequence[TextBlock]): Vectors to classify.
            labels (Sequence[str]): Expected labels, parallel to `samples`.

        Returns:
            AccuracyReport: Per-label and overall accuracy.
        """
        return evaluate(self, samples, labels)

    def save(self, output: TextSink) -> None:
        """Write the tree in its serialized text form.

        Args:
            output (TextSink): Destination with a ``write`` method.

        Raises:
            InvalidArgumentError: If `output` is None.
        """
        if output is None:
            raise InvalidArgumentError("An output stream is required to save a tree")
        write_tree(self._root, output)

    def dumps(self) -> str:
        """Return the serialized text form of the tree.

        Returns:
            str: One line per leaf, two per decision node.
        """
        buffer = io.StringIO()
        self.save(buffer)
        return buffer.getvalue()

    def dump(self, path: str | Path) -> None:
        """Write the serialized tree to a UTF-8 text file.

        Args:
            path (str | Path): Destination file; overwritten if it exists.
        """
        with Path(path).open("w", encoding="utf-8") as handle:
            self.save(handle)
        logger.info("Tree saved", path=str(path), nodes=self.node_count)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def root(self) -> TreeNode:
        """The root node."""
        return self._root

    @property
    def node_count(self) -> int:
        """Number of nodes, decision nodes and leaves together."""
        return sum(1 for _ in self._walk())

    @property
    def leaf_count(self) -> int:
        """Number of leaves."""
        return sum(1 for node, _ in self._walk() if isinstance(node, Leaf))

    @property
    def depth(self) -> int:
        """Number of decision nodes on the longest root-to-leaf path."""
        return max(level for _, level in self._walk())

    def _walk(self) -> Iterable[tuple[TreeNode, int]]:
        """Yield every present node with its level, root at level 0, in pre-order."""
        stack: list[tuple[TreeNode | None, int]] = [(self._root, 0)]
        while stack:
            node, level = stack.pop()
            if node is None:
                continue
            yield node, level
            if isinstance(node, Decision):
                stack.append((node.right, level + 1))
                stack.append((node.left, level + 1))

    def __repr__(self) -> str:
        """Return a short summary of the tree shape.

        Returns:
            str: Node, leaf, and depth counts.
        """
        return f"{self.__class__.__name__}(nodes={self.node_count}, leaves={self.leaf_count}, depth={self.depth})"


# Private helpers


def _require_sample(sample: TextBlock | None) -> None:
    """Raise `InvalidArgumentError` when a sample is missing.

    Args:
        sample (TextBlock | None): The sample to check.

    Raises:
        InvalidArgumentError: If `sample` is None.
    """
    if sample is None:
        raise InvalidArgumentError("A feature vector is required")


def _absorb(node: Leaf | None, sample: TextBlock, label: str) -> TreeNode:
    """Return the subtree that replaces `node` once the sample is added.

    Args:
        node (Leaf | None): The leaf reached, or None for an empty slot.
        sample (TextBlock): The new training vector.
        label (str): Its label.

    Returns:
        TreeNode: A new leaf, `node` itself for a matching label, or a new
            decision node separating the two samples.

    Raises:
        UnsplittableLeafError: If `node` has a different label and no sample.
    """
    if node is None:
        return Leaf(label, sample)
    if node.label == label:
        return node
    if node.sample is None:
        logger.warning("Cannot split a leaf without a stored sample", label=node.label, new_label=label)
        raise UnsplittableLeafError(node.label, label)

    feature = check_feature_name(node.sample.largest_difference(sample))
    threshold = midpoint(node.sample.get(feature), sample.get(feature))
    new_leaf = Leaf(label, sample)
    if sample.get(feature) >= threshold:
        split = Decision(feature, threshold, left=node, right=new_leaf)
    else:
        split = Decision(feature, threshold, left=new_leaf, right=node)
    logger.log(
        SPLIT_LEVEL,
        "Leaf split",
        feature=feature,
        threshold=threshold,
        existing_label=node.label,
        new_label=label,
    )
    return split
