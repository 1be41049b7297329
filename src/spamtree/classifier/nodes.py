"""Tree node variants: decision nodes and leaves."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from spamtree.text_block import TextBlock

type Side = Literal["left", "right"]


@dataclass(frozen=True, slots=True)
class Leaf:
    """A terminal node holding a label.

    Attributes:
        label (str): Label returned for samples reaching this leaf.
        sample (TextBlock | None): The training vector that created this leaf.
            Present only for leaves built by insertion; leaves parsed from a
            serialized tree have none.

    Examples:
        >>> Leaf("Ham").is_leaf
        True
    """

    label: str
    sample: TextBlock | None = field(default=None, compare=False)

    @property
    def is_leaf(self) -> Literal[True]:
        """Always True for leaves."""
        return True


@dataclass(slots=True)
class Decision:
    """An internal node testing one feature against a threshold.

    Samples with ``get(feature) >= threshold`` go right, all others go left.
    Child slots are mutable so insertion can rewrite them in place; a slot is
    None only in a parsed tree whose stream ended before the child.

    Attributes:
        feature (str): Name of the feature tested at this node.
        threshold (float): Split point for the feature.
        left (TreeNode | None): Subtree for values below the threshold.
        right (TreeNode | None): Subtree for values at or above the threshold.

    Examples:
        >>> node = Decision("wordCount", 6.0, Leaf("Spam"), Leaf("Ham"))
        >>> node.routes_right(TextBlock(features={"wordCount": 10}))
        True
    """

    feature: str
    threshold: float
    left: TreeNode | None = None
    right: TreeNode | None = None

    @property
    def is_leaf(self) -> Literal[False]:
        """Always False for decision nodes."""
        return False

    def routes_right(self, sample: TextBlock) -> bool:
        """Whether a sample belongs in the right subtree.

        Args:
            sample (TextBlock): The vector being routed.

        Returns:
            bool: True when the sample's feature value is at or above the threshold.
        """
        return sample.get(self.feature) >= self.threshold

    def child(self, side: Side) -> TreeNode | None:
        """Return the child in the given slot.

        Args:
            side (Side): `"left"` or `"right"`.

        Returns:
            TreeNode | None: The child, or None for an absent slot.
        """
        return self.left if side == "left" else self.right

    def set_child(self, side: Side, node: TreeNode | None) -> None:
        """Replace the child in the given slot.

        Args:
            side (Side): `"left"` or `"right"`.
            node (TreeNode | None): The new child.
        """
        if side == "left":
            self.left = node
        else:
            self.right = node


type TreeNode = Decision | Leaf
