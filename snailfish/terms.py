from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union


@dataclass(frozen=True)
class Leaf:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Pair:
    """Internal node of a snailfish number.

    Each pair exclusively owns its two children. Instances are frozen, so
    reducing or adding numbers always builds new trees and the operands stay
    reusable.
    """

    left: "Element"
    right: "Element"

    def __str__(self) -> str:
        return f"[{self.left},{self.right}]"


Element = Union[Leaf, Pair]
Number = Element


def pair(left: Element | int, right: Element | int) -> Pair:
    """Build a pair, promoting plain ints to leaves."""

    return Pair(_coerce(left), _coerce(right))


def _coerce(value: Element | int) -> Element:
    if isinstance(value, (Leaf, Pair)):
        return value
    return Leaf(int(value))


def magnitude(element: Element) -> int:
    """Weighted fold: a leaf is its value, a pair is ``3*left + 2*right``."""

    if isinstance(element, Leaf):
        return element.value
    return 3 * magnitude(element.left) + 2 * magnitude(element.right)


def walk_leaves(element: Element) -> Iterator[Tuple[Leaf, int]]:
    """Yield ``(leaf, depth)`` left to right.

    Depth counts the pairs enclosing the leaf, so a leaf directly inside the
    root pair has depth 1.
    """

    stack: List[Tuple[Element, int]] = [(element, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            yield node, depth
            continue
        stack.append((node.right, depth + 1))
        stack.append((node.left, depth + 1))


def leaves(element: Element) -> List[int]:
    return [leaf.value for leaf, _ in walk_leaves(element)]
