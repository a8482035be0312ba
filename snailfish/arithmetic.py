from __future__ import annotations

from typing import Optional, Sequence

from snailfish.runtime import Reducer
from snailfish.terms import Element
from snailfish.tokens import CLOSE, COMMA, OPEN, Token, Tokens, term_from_tokens, tokens_from_term


def add_tokens(a: Sequence[Token], b: Sequence[Token], reducer: Optional[Reducer] = None) -> Tokens:
    """Pair two numbers in flat form and reduce the result.

    Order matters: explode hands values to the nearest leaf on each side,
    so ``add_tokens(a, b)`` and ``add_tokens(b, a)`` can differ.
    """

    reducer = reducer if reducer is not None else Reducer()
    return reducer.reduce((OPEN, *a, COMMA, *b, CLOSE))


def add(a: Element, b: Element, reducer: Optional[Reducer] = None) -> Element:
    return term_from_tokens(add_tokens(tokens_from_term(a), tokens_from_term(b), reducer=reducer))
