"""Homework solver: fold a list of numbers and search for the best pair."""

from __future__ import annotations

import concurrent.futures
import pickle
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from snailfish.arithmetic import add_tokens
from snailfish.parser import parse_homework
from snailfish.rewrite import Rule
from snailfish.runtime import Reducer
from snailfish.terms import Element, magnitude
from snailfish.tokens import Tokens, term_from_tokens, tokens_from_term


@dataclass(frozen=True)
class PairwiseMaximum:
    """Largest magnitude found and the (left, right) indices that produced it."""

    magnitude: int
    left: int
    right: int

    def beats(self, other: Optional["PairwiseMaximum"]) -> bool:
        if other is None:
            return True
        if self.magnitude != other.magnitude:
            return self.magnitude > other.magnitude
        return (self.left, self.right) < (other.left, other.right)


@dataclass(frozen=True)
class HomeworkReport:
    count: int
    total: Element
    magnitude: int
    best: PairwiseMaximum

    def to_record(self) -> Dict[str, object]:
        return {
            "numbers": self.count,
            "sum": str(self.total),
            "magnitude": self.magnitude,
            "max_pairwise_magnitude": self.best.magnitude,
            "best_pair": [self.best.left, self.best.right],
        }


def sum_all(numbers: Sequence[Element], reducer: Optional[Reducer] = None) -> Element:
    """Left-fold the numbers with addition, reducing after every step."""

    if not numbers:
        raise ValueError("Cannot sum an empty list of numbers")

    reducer = reducer if reducer is not None else Reducer()
    total = tokens_from_term(numbers[0])
    for number in numbers[1:]:
        total = add_tokens(total, tokens_from_term(number), reducer=reducer)
    return term_from_tokens(total)


def _row_maximum(
    reducer: Reducer,
    row: int,
    flat: Sequence[Tokens],
    include_self: bool,
) -> Optional[PairwiseMaximum]:
    best: Optional[PairwiseMaximum] = None
    for col, other in enumerate(flat):
        if col == row and not include_self:
            continue
        value = magnitude(term_from_tokens(add_tokens(flat[row], other, reducer=reducer)))
        candidate = PairwiseMaximum(value, row, col)
        if candidate.beats(best):
            best = candidate
    return best


def _pool_rules(reducer: Reducer) -> Tuple[Rule, ...]:
    rules = tuple(reducer.rules)
    try:
        pickle.dumps(rules)
    except (pickle.PicklingError, AttributeError, TypeError) as exc:
        names = [rule.name for rule in rules]
        raise ValueError(
            f"Reducer rules {names} must be picklable to run with workers > 1; "
            "define rule functions at module level"
        ) from exc
    return rules


def _row_maximum_task(
    row: int,
    flat: Sequence[Tokens],
    include_self: bool,
    rules: Tuple[Rule, ...],
    step_factor: int,
    min_steps: int,
) -> Optional[PairwiseMaximum]:
    reducer = Reducer(rules=rules, step_factor=step_factor, min_steps=min_steps)
    return _row_maximum(reducer, row, flat, include_self)


def max_pairwise(
    numbers: Sequence[Element],
    *,
    include_self: bool = True,
    workers: Optional[int] = None,
    reducer: Optional[Reducer] = None,
) -> PairwiseMaximum:
    """Search every ordered pair ``(i, j)`` for the largest sum magnitude.

    Both ``(i, j)`` and ``(j, i)`` are tried since addition is not
    commutative. Self pairs are included unless ``include_self`` is false.
    With ``workers`` above one, rows of the cross product run in a process
    pool; event hooks on ``reducer`` only see the serial path.
    """

    if workers is not None and workers <= 0:
        raise ValueError("workers must be positive when provided")
    if not numbers or (len(numbers) < 2 and not include_self):
        raise ValueError("Need at least one pair of numbers to compare")

    reducer = reducer if reducer is not None else Reducer()
    flat = [tokens_from_term(number) for number in numbers]

    best: Optional[PairwiseMaximum] = None
    if workers is None or workers == 1:
        for row in range(len(flat)):
            candidate = _row_maximum(reducer, row, flat, include_self)
            if candidate is not None and candidate.beats(best):
                best = candidate
    else:
        rules = _pool_rules(reducer)
        with concurrent.futures.ProcessPoolExecutor(max_workers=workers) as pool:
            futures: List[concurrent.futures.Future] = [
                pool.submit(
                    _row_maximum_task,
                    row,
                    flat,
                    include_self,
                    rules,
                    reducer.step_factor,
                    reducer.min_steps,
                )
                for row in range(len(flat))
            ]
            for future in concurrent.futures.as_completed(futures):
                candidate = future.result()
                if candidate is not None and candidate.beats(best):
                    best = candidate

    if best is None:
        raise RuntimeError("Pairwise search produced no candidates")
    return best


def max_pairwise_magnitude(numbers: Sequence[Element], **options) -> int:
    return max_pairwise(numbers, **options).magnitude


def solve(
    text: str,
    *,
    include_self: bool = True,
    workers: Optional[int] = None,
    reducer: Optional[Reducer] = None,
) -> HomeworkReport:
    numbers = parse_homework(text)
    reducer = reducer if reducer is not None else Reducer()
    total = sum_all(numbers, reducer=reducer)
    best = max_pairwise(numbers, include_self=include_self, workers=workers, reducer=reducer)
    return HomeworkReport(count=len(numbers), total=total, magnitude=magnitude(total), best=best)
