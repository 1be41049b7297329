"""Line-oriented text format for decision trees.

A tree is written in pre-order, one node per entry:

    Feature: <feature-name>
    Threshold: <floating-point value>
    <left subtree>
    <right subtree>

A leaf is a single line holding its label, so labels must read back unchanged
after stripping and must not start with ``Feature: ``. Node counts are never
written; the structure follows from the grammar alone. Both directions walk
the tree with an explicit stack, so tree height is not limited by the
interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Final, Protocol

from loguru import logger

from spamtree.classifier.nodes import Decision, Leaf, Side, TreeNode
from spamtree.exceptions import InvalidArgumentError, MalformedTreeError

__all__ = [
    "FEATURE_PREFIX",
    "THRESHOLD_PREFIX",
    "TextSink",
    "check_feature_name",
    "check_label",
    "format_threshold",
    "parse_tree",
    "write_tree",
]

FEATURE_PREFIX: Final[str] = "Feature: "
THRESHOLD_PREFIX: Final[str] = "Threshold: "


class TextSink(Protocol):
    """Anything with a ``write(str)`` method, such as an open text file."""

    def write(self, text: str, /) -> object:
        """Write text to the sink."""
        ...


def parse_tree(lines: Iterable[str] | str) -> TreeNode:
    """Parse a serialized tree.

    Lines are stripped before matching. A decision node's left subtree is read
    before its right subtree. If the stream runs out while children are still
    expected, those child slots stay empty. Lines after the complete tree are
    ignored.

    Args:
        lines (Iterable[str] | str): Lines of the serialized tree, e.g. an open
            file, or the whole serialized text as one string.

    Returns:
        TreeNode: The root node.

    Raises:
        InvalidArgumentError: If the stream holds no lines or is bytes.
        MalformedTreeError: If a `Feature:` line is not followed by a valid
            `Threshold:` line.

    Examples:
        >>> root = parse_tree(["Feature: wordCount", "Threshold: 6.0", "Spam", "Ham"])
        >>> root.feature, root.threshold, root.left.label, root.right.label
        ('wordCount', 6.0, 'Spam', 'Ham')
        >>> parse_tree("Feature: wordCount\\nThreshold: 6.0\\nSpam\\nHam\\n").right.label
        'Ham'
    """
    if isinstance(lines, bytes | bytearray):
        raise InvalidArgumentError("Serialized tree must be text, not bytes; decode it first")
    if isinstance(lines, str):
        lines = lines.splitlines()
    numbered = enumerate(lines, start=1)
    first = next(numbered, None)
    if first is None:
        raise InvalidArgumentError("Serialized tree is empty")

    root = _parse_node(*first, numbered)
    # Slots still waiting for a subtree; the top of the stack is filled next.
    pending: list[tuple[Decision, Side]] = []
    _push_children(root, pending)
    while pending:
        entry = next(numbered, None)
        if entry is None:
            logger.warning("Serialized tree ended before all children were read", missing_children=len(pending))
            break
        node = _parse_node(*entry, numbered)
        parent, side = pending.pop()
        parent.set_child(side, node)
        _push_children(node, pending)

    leftover = sum(1 for _ in numbered)
    if leftover:
        logger.warning("Ignoring lines after the end of the serialized tree", ignored_lines=leftover)
    return root


def write_tree(root: TreeNode | None, output: TextSink) -> None:
    """Write a tree in pre-order using the line format.

    Stored training samples are never written. Empty child slots write nothing.

    Args:
        root (TreeNode | None): Root of the tree to write.
        output (TextSink): Destination with a ``write`` method.

    Raises:
        InvalidArgumentError: If a label or feature name cannot be read back
            unchanged (see `check_label` and `check_feature_name`). Nothing
            is written in that case.
    """
    lines: list[str] = []
    stack: list[TreeNode | None] = [root]
    while stack:
        node = stack.pop()
        if node is None:
            continue
        if isinstance(node, Leaf):
            lines.append(f"{check_label(node.label)}\n")
            continue
        lines.append(f"{FEATURE_PREFIX}{check_feature_name(node.feature)}\n")
        lines.append(f"{THRESHOLD_PREFIX}{format_threshold(node.threshold)}\n")
        stack.append(node.right)
        stack.append(node.left)
    for line in lines:
        output.write(line)


def check_label(label: str) -> str:
    """Validate that a leaf label survives a write-then-parse round trip.

    A label is one line with no surrounding whitespace that does not start
    with ``"Feature: "``; otherwise the parser would strip it or read it as a
    decision node.

    Args:
        label (str): The leaf label.

    Returns:
        str: The label, unchanged.

    Raises:
        InvalidArgumentError: If the label cannot be stored in the line format.

    Examples:
        >>> check_label("Spam")
        'Spam'
        >>> check_label("Feature: x")
        Traceback (most recent call last):
        ...
        spamtree.exceptions.InvalidArgumentError: Label 'Feature: x' must not start with 'Feature: '
    """
    _check_line_text("Label", label)
    if label.startswith(FEATURE_PREFIX):
        raise InvalidArgumentError(f"Label {label!r} must not start with {FEATURE_PREFIX!r}")
    return label


def check_feature_name(feature: str) -> str:
    """Validate that a feature name survives a write-then-parse round trip.

    Args:
        feature (str): The feature name tested by a decision node.

    Returns:
        str: The feature name, unchanged.

    Raises:
        InvalidArgumentError: If the name is empty, spans lines, or has
            surrounding whitespace.
    """
    if not feature:
        raise InvalidArgumentError("Feature name must not be empty")
    _check_line_text("Feature name", feature)
    return feature


def format_threshold(threshold: float) -> str:
    """Format a threshold so that parsing it gives back the same float.

    Args:
        threshold (float): The threshold value.

    Returns:
        str: Shortest round-tripping decimal representation, e.g. `"6.0"`.
    """
    return repr(float(threshold))


# Private helpers


def _parse_node(line_number: int, raw_line: str, numbered: Iterator[tuple[int, str]]) -> TreeNode:
    """Parse one node, consuming its threshold line when it is a decision node.

    Args:
        line_number (int): 1-based number of `raw_line`.
        raw_line (str): The line opening this node.
        numbered (Iterator[tuple[int, str]]): The remaining numbered lines.

    Returns:
        TreeNode: A childless decision node or a leaf.

    Raises:
        MalformedTreeError: If the threshold line is missing or invalid.
    """
    line = raw_line.strip()
    if not line.startswith(FEATURE_PREFIX):
        return Leaf(line)

    feature = line.removeprefix(FEATURE_PREFIX)
    entry = next(numbered, None)
    if entry is None:
        raise MalformedTreeError(
            f"Expected a '{THRESHOLD_PREFIX}' line after feature '{feature}', but the stream ended",
            line_number=line_number + 1,
        )
    threshold_number, raw_threshold = entry
    threshold_line = raw_threshold.strip()
    if not threshold_line.startswith(THRESHOLD_PREFIX):
        raise MalformedTreeError(
            f"Expected a '{THRESHOLD_PREFIX}' line after feature '{feature}'",
            line_number=threshold_number,
            line=threshold_line,
        )
    try:
        threshold = float(threshold_line.removeprefix(THRESHOLD_PREFIX))
    except ValueError:
        raise MalformedTreeError(
            f"Threshold for feature '{feature}' is not a number",
            line_number=threshold_number,
            line=threshold_line,
        ) from None
    return Decision(feature, threshold)


def _push_children(node: TreeNode, pending: list[tuple[Decision, Side]]) -> None:
    """Queue a decision node's child slots so the left one is filled first.

    Args:
        node (TreeNode): The node just parsed.
        pending (list[tuple[Decision, Side]]): Stack of slots awaiting a subtree.
    """
    if isinstance(node, Decision):
        pending.append((node, "right"))
        pending.append((node, "left"))


def _check_line_text(kind: str, text: str) -> None:
    """Reject text that the parser would split across lines or strip.

    Args:
        kind (str): What the text is, for the error message.
        text (str): Label or feature name to check.

    Raises:
        InvalidArgumentError: If `text` contains a line break or has
            leading or trailing whitespace.
    """
    if text and text.splitlines() != [text]:
        raise InvalidArgumentError(f"{kind} {text!r} must not contain line breaks")
    if text != text.strip():
        raise InvalidArgumentError(f"{kind} {text!r} must not have leading or trailing whitespace")
