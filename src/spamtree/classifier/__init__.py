"""Decision tree classifier sub-package: nodes, serialization, training, and evaluation."""

from __future__ import annotations

from spamtree.classifier.evaluation import OVERALL_KEY, AccuracyReport, evaluate
from spamtree.classifier.nodes import Decision, Leaf, TreeNode
from spamtree.classifier.serialization import parse_tree, write_tree
from spamtree.classifier.tree import MISSING_NODE_LABEL, DecisionTree, midpoint

__all__ = [
    "MISSING_NODE_LABEL",
    "OVERALL_KEY",
    "AccuracyReport",
    "Decision",
    "DecisionTree",
    "Leaf",
    "TreeNode",
    "evaluate",
    "midpoint",
    "parse_tree",
    "write_tree",
]
