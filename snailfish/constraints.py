from __future__ import annotations

from dataclasses import dataclass

from snailfish.rewrite import EXPLODE_DEPTH, SPLIT_THRESHOLD
from snailfish.terms import Element, walk_leaves


@dataclass(frozen=True)
class StructuralMetrics:
    """Shape of a snailfish number.

    ``max_depth`` counts the pairs enclosing the deepest leaf, so any pair
    sitting inside four others shows up as a depth of at least 5.
    """

    pairs: int
    leaves: int
    max_depth: int
    max_leaf: int


@dataclass(frozen=True)
class StructuralConstraints:
    max_depth: int | None = None
    max_leaf: int | None = None


REDUCED = StructuralConstraints(max_depth=EXPLODE_DEPTH, max_leaf=SPLIT_THRESHOLD - 1)


def measure_structure(root: Element) -> StructuralMetrics:
    """Count pairs and leaves and find the deepest leaf and largest value."""

    leaves = 0
    max_depth = 0
    max_leaf = 0
    for leaf, depth in walk_leaves(root):
        leaves += 1
        max_depth = max(max_depth, depth)
        max_leaf = max(max_leaf, leaf.value)

    # A full binary tree has exactly one fewer pair than leaves.
    return StructuralMetrics(pairs=leaves - 1, leaves=leaves, max_depth=max_depth, max_leaf=max_leaf)


def validate_structure(root: Element, constraints: StructuralConstraints) -> list[str]:
    """Return human-readable violations of the provided constraints."""

    metrics = measure_structure(root)
    violations: list[str] = []

    if constraints.max_depth is not None and metrics.max_depth > constraints.max_depth:
        violations.append(f"max_depth={metrics.max_depth} exceeds max_depth={constraints.max_depth}")
    if constraints.max_leaf is not None and metrics.max_leaf > constraints.max_leaf:
        violations.append(f"max_leaf={metrics.max_leaf} exceeds max_leaf={constraints.max_leaf}")

    return violations


def is_reduced(root: Element) -> bool:
    return not validate_structure(root, REDUCED)
