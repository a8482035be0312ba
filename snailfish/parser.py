from __future__ import annotations

from typing import List, Tuple

from snailfish.terms import Element
from snailfish.tokens import CLOSE, COMMA, OPEN, ParseError, Token, Tokens, term_from_tokens

__all__ = ["ParseError", "parse_homework", "parse_number", "parse_tokens", "tokenize"]

_PUNCTUATION = {"[": OPEN, "]": CLOSE, ",": COMMA}


def _lex(text: str) -> Tuple[List[Token], List[int]]:
    """Split text into tokens, remembering the column each token starts at."""

    tokens: List[Token] = []
    offsets: List[int] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _PUNCTUATION:
            tokens.append(_PUNCTUATION[ch])
            offsets.append(i)
            i += 1
            continue
        if ch.isdigit() and ch.isascii():
            start = i
            while i < len(text) and text[i].isdigit() and text[i].isascii():
                i += 1
            tokens.append(Token.num(int(text[start:i])))
            offsets.append(start)
            continue
        raise ParseError(f"unexpected character {ch!r}", position=i)
    return tokens, offsets


def tokenize(text: str) -> Tokens:
    """Lex text into tokens without checking the grammar."""

    tokens, _ = _lex(text)
    return tuple(tokens)


def _parse(text: str) -> Tuple[Tokens, Element]:
    tokens, offsets = _lex(text)
    element = term_from_tokens(tokens, offsets=offsets, end=len(text))
    return tuple(tokens), element


def parse_tokens(text: str) -> Tokens:
    """Parse one number straight into its flat form."""

    tokens, _ = _parse(text)
    return tokens


def parse_number(text: str) -> Element:
    """Parse one number into its tree form.

    Grammar: ``Number := Leaf | '[' Number ',' Number ']'`` where a leaf is
    one or more decimal digits. Nothing is returned on failure; any
    malformed input raises ``ParseError``.
    """

    _, element = _parse(text)
    return element


def parse_homework(text: str) -> List[Element]:
    """Parse a listing with one number per line.

    Blank lines are skipped. A malformed line fails the whole batch and the
    error carries its 1-based line number.
    """

    numbers: List[Element] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            numbers.append(parse_number(line))
        except ParseError as exc:
            indent = len(raw) - len(raw.lstrip())
            position = exc.position + indent if exc.position is not None else None
            raise ParseError(exc.reason, position=position, line=lineno) from exc
    return numbers
