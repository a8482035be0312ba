from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from snailfish.tokens import CLOSE, COMMA, OPEN, Token, Tokens, render_tokens

EXPLODE_DEPTH = 4
SPLIT_THRESHOLD = 10


@dataclass(frozen=True)
class Rewrite:
    """Outcome of trying one rule against a token sequence.

    ``tokens`` is the rewritten sequence when ``fired`` is true and the
    untouched input otherwise. ``position`` is the index in the input where
    the rewrite happened.
    """

    fired: bool
    tokens: Tokens
    position: Optional[int] = None


@dataclass(frozen=True)
class Rule:
    name: str
    apply: Callable[[Sequence[Token]], Rewrite]


class ReductionInvariantViolation(RuntimeError):
    """Raised when reduction keeps firing rules past its step limit."""

    def __init__(self, steps: int, limit: int, tokens: Sequence[Token]):
        rendered = render_tokens(tokens)
        super().__init__(f"reduction did not reach normal form after {steps} steps (limit {limit}): {rendered}")
        self.steps = steps
        self.limit = limit
        self.tokens = rendered
        self._sequence = tuple(tokens)

    def __reduce__(self):
        # Keeps the error intact when it crosses a process pool boundary.
        return self.__class__, (self.steps, self.limit, self._sequence)


def _is_leaf_pair_at(tokens: Sequence[Token], i: int) -> bool:
    # tokens[i] is the left leaf of a pair whose elements are both leaves.
    return (
        i >= 1
        and i + 3 < len(tokens)
        and tokens[i - 1] == OPEN
        and tokens[i + 1] == COMMA
        and tokens[i + 2].is_num
        and tokens[i + 3] == CLOSE
    )


def _add_to_nearest(tokens: List[Token], amount: int, indices: range) -> None:
    for j in indices:
        token = tokens[j]
        if token.is_num:
            tokens[j] = Token.num(token.value + amount)
            return


def explode(tokens: Sequence[Token]) -> Rewrite:
    """Explode the leftmost leaf pair nested inside more than four pairs.

    The pair's left value is added to the nearest leaf before it and its
    right value to the nearest leaf after it, when those exist. The pair
    itself becomes the leaf ``0``.
    """

    depth = 0
    for i, token in enumerate(tokens):
        kind = token.kind
        if kind == "open":
            depth += 1
            continue
        if kind == "close":
            depth -= 1
            continue
        if kind != "num" or depth <= EXPLODE_DEPTH or not _is_leaf_pair_at(tokens, i):
            continue

        left, right = token.value, tokens[i + 2].value
        head = list(tokens[: i - 1])
        tail = list(tokens[i + 4 :])
        _add_to_nearest(head, left, range(len(head) - 1, -1, -1))
        _add_to_nearest(tail, right, range(len(tail)))
        return Rewrite(True, tuple(head + [Token.num(0)] + tail), position=i - 1)

    return Rewrite(False, tuple(tokens))


def split_value(n: int) -> Tuple[int, int]:
    """Halve a leaf value, rounding the left half down and the right half up."""

    half = n // 2
    return half, n - half


def split(tokens: Sequence[Token]) -> Rewrite:
    """Replace the leftmost leaf of value 10 or more with a pair of its halves."""

    for i, token in enumerate(tokens):
        if not token.is_num or token.value < SPLIT_THRESHOLD:
            continue
        left, right = split_value(token.value)
        rewritten = (*tokens[:i], OPEN, Token.num(left), COMMA, Token.num(right), CLOSE, *tokens[i + 1 :])
        return Rewrite(True, tuple(rewritten), position=i)

    return Rewrite(False, tuple(tokens))


EXPLODE_RULE = Rule(name="explode", apply=explode)
SPLIT_RULE = Rule(name="split", apply=split)

# Priority order: a split is only attempted when nothing can explode.
DEFAULT_RULES: Tuple[Rule, ...] = (EXPLODE_RULE, SPLIT_RULE)


def first_firing(rules: Sequence[Rule], tokens: Sequence[Token]) -> Tuple[Optional[Rule], Rewrite]:
    """Try rules in priority order and return the first that rewrites."""

    for rule in rules:
        rewrite = rule.apply(tokens)
        if rewrite.fired:
            return rule, rewrite
    return None, Rewrite(False, tuple(tokens))
