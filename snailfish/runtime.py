from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from snailfish.rewrite import DEFAULT_RULES, ReductionInvariantViolation, Rule, first_firing
from snailfish.terms import Element
from snailfish.tokens import Token, Tokens, render_tokens, term_from_tokens, tokens_from_term

DEFAULT_STEP_FACTOR = 32
DEFAULT_MIN_STEPS = 256


@dataclass
class Event:
    reduction: int
    step: int
    rule: str
    position: int
    before: Tokens
    after: Tokens

    def to_record(self) -> Dict[str, object]:
        """JSON-ready event representation for tracing."""

        return {
            "reduction": self.reduction,
            "step": self.step,
            "rule": self.rule,
            "position": self.position,
            "before": render_tokens(self.before),
            "after": render_tokens(self.after),
        }


class Reducer:
    """Drives the rewrite rules on a token sequence until none applies.

    Rules are tried in priority order and the scan restarts from the first
    rule after every firing, so an explode always beats a split. Each call
    to ``reduce`` may fire at most
    ``max(min_steps, step_factor * (len(tokens) + sum of leaf values))``
    rules before ``ReductionInvariantViolation`` is raised.
    """

    def __init__(
        self,
        rules: Optional[Sequence[Rule]] = None,
        event_hooks: Optional[List[Callable[[Event], None]]] = None,
        step_factor: int = DEFAULT_STEP_FACTOR,
        min_steps: int = DEFAULT_MIN_STEPS,
        record_events: bool = False,
    ):
        if step_factor <= 0:
            raise ValueError("step_factor must be positive")
        if min_steps <= 0:
            raise ValueError("min_steps must be positive")
        rules = tuple(rules) if rules is not None else DEFAULT_RULES
        names = [rule.name for rule in rules]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate rule names: {names}")

        self.rules = rules
        self.event_hooks: List[Callable[[Event], None]] = event_hooks or []
        self.step_factor = step_factor
        self.min_steps = min_steps
        self.record_events = record_events
        self.events: List[Event] = []
        self.rule_counts: Dict[str, int] = {}
        self.reductions = 0
        self.steps = 0
        self.max_steps_seen = 0

    def step_limit(self, tokens: Sequence[Token]) -> int:
        # Large leaves split and explode many times before settling, so the
        # budget grows with the leaf values as well as the sequence length.
        weight = len(tokens) + sum(token.value for token in tokens if token.is_num)
        return max(self.min_steps, self.step_factor * weight)

    def reduce(self, tokens: Sequence[Token]) -> Tokens:
        current = tuple(tokens)
        limit = self.step_limit(current)
        steps = 0
        while True:
            rule, rewrite = first_firing(self.rules, current)
            if rule is None:
                break
            steps += 1
            if steps > limit:
                raise ReductionInvariantViolation(steps - 1, limit, current)
            self.rule_counts[rule.name] = self.rule_counts.get(rule.name, 0) + 1
            if self.record_events or self.event_hooks:
                self._emit(
                    Event(
                        reduction=self.reductions + 1,
                        step=steps,
                        rule=rule.name,
                        position=rewrite.position,
                        before=current,
                        after=rewrite.tokens,
                    )
                )
            current = rewrite.tokens

        self.reductions += 1
        self.steps += steps
        self.max_steps_seen = max(self.max_steps_seen, steps)
        return current

    def reduce_number(self, element: Element) -> Element:
        return term_from_tokens(self.reduce(tokens_from_term(element)))

    def is_normal_form(self, tokens: Sequence[Token]) -> bool:
        rule, _ = first_firing(self.rules, tokens)
        return rule is None

    def _emit(self, event: Event) -> None:
        if self.record_events:
            self.events.append(event)
        for hook in self.event_hooks:
            hook(event)

    def stats(self) -> Dict[str, object]:
        """Summaries of reduction activity so far."""

        return {
            "reductions": self.reductions,
            "steps": self.steps,
            "rule_counts": dict(self.rule_counts),
            "max_steps_seen": self.max_steps_seen,
        }


def reduce_tokens(tokens: Sequence[Token], **options) -> Tokens:
    return Reducer(**options).reduce(tokens)


def reduce_number(element: Element, **options) -> Element:
    return Reducer(**options).reduce_number(element)


def is_normal_form(tokens: Sequence[Token]) -> bool:
    return Reducer().is_normal_form(tokens)
