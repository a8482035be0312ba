from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from snailfish.terms import Element, Leaf, Pair


@dataclass(frozen=True)
class Token:
    """One structural symbol of the flat representation.

    ``kind`` is one of ``open``, ``close``, ``comma`` or ``num``; only
    ``num`` tokens carry a value.
    """

    kind: str
    value: Optional[int] = None

    @staticmethod
    def num(value: int) -> "Token":
        return Token("num", value)

    @property
    def is_num(self) -> bool:
        return self.kind == "num"

    def __str__(self) -> str:
        if self.kind == "num":
            return str(self.value)
        return _SYMBOLS[self.kind]


OPEN = Token("open")
CLOSE = Token("close")
COMMA = Token("comma")

_SYMBOLS = {"open": "[", "close": "]", "comma": ","}

Tokens = Tuple[Token, ...]


class ParseError(ValueError):
    """Malformed snailfish text or token sequence.

    ``position`` is a character column for text input and a token index for
    token input. ``line`` is set when the error comes from a multi-line
    homework listing.
    """

    def __init__(self, message: str, position: Optional[int] = None, line: Optional[int] = None):
        location = []
        if line is not None:
            location.append(f"line {line}")
        if position is not None:
            location.append(f"position {position}")
        suffix = f" ({', '.join(location)})" if location else ""
        super().__init__(f"{message}{suffix}")
        self.reason = message
        self.position = position
        self.line = line


def render_tokens(tokens: Iterable[Token]) -> str:
    return "".join(str(token) for token in tokens)


def tokens_from_term(element: Element) -> Tokens:
    """Flatten a tree in order: ``[``, left, ``,``, right, ``]``."""

    out: List[Token] = []
    # Pending work is either a subtree or an already-built token.
    stack: List[object] = [element]
    while stack:
        item = stack.pop()
        if isinstance(item, Token):
            out.append(item)
        elif isinstance(item, Leaf):
            out.append(Token.num(item.value))
        else:
            stack.extend((CLOSE, item.right, COMMA, item.left))
            out.append(OPEN)
    return tuple(out)


class _Reader:
    """Recursive descent over a token sequence.

    ``offsets`` maps token indices back to character columns so errors on
    text input point at the source text.
    """

    def __init__(self, tokens: Sequence[Token], offsets: Optional[Sequence[int]] = None, end: Optional[int] = None):
        self.tokens = tokens
        self.offsets = offsets
        self.end = end if end is not None else len(tokens)
        self.index = 0

    def _position(self, index: int) -> int:
        if self.offsets is None:
            return index
        if index < len(self.offsets):
            return self.offsets[index]
        return self.end

    def _fail(self, message: str) -> ParseError:
        return ParseError(message, position=self._position(self.index))

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _expect(self, expected: Token, label: str) -> None:
        token = self._peek()
        if token is None:
            raise self._fail(f"expected '{label}' but input ended")
        if token != expected:
            raise self._fail(f"expected '{label}' but found '{token}'")
        self.index += 1

    def read_element(self) -> Element:
        token = self._peek()
        if token is None:
            raise self._fail("expected a number but input ended")
        if token.is_num:
            self.index += 1
            if token.value is None or token.value < 0:
                raise self._fail(f"invalid leaf value {token.value!r}")
            return Leaf(token.value)
        if token != OPEN:
            raise self._fail(f"expected a leaf or '[' but found '{token}'")
        self.index += 1
        left = self.read_element()
        self._expect(COMMA, ",")
        right = self.read_element()
        self._expect(CLOSE, "]")
        return Pair(left, right)

    def read_number(self) -> Element:
        if not self.tokens:
            raise ParseError("empty input", position=0)
        element = self.read_element()
        if self.index != len(self.tokens):
            raise self._fail(f"unexpected trailing input '{self.tokens[self.index]}'")
        return element


def term_from_tokens(tokens: Sequence[Token], offsets: Optional[Sequence[int]] = None, end: Optional[int] = None) -> Element:
    """Rebuild the tree for a token sequence.

    Raises ``ParseError`` if the sequence is not the flattening of exactly
    one number.
    """

    return _Reader(tokens, offsets=offsets, end=end).read_number()


def validate_tokens(tokens: Sequence[Token]) -> Tokens:
    """Return ``tokens`` as a tuple after checking it is well formed."""

    term_from_tokens(tokens)
    return tuple(tokens)


def leaf_count(tokens: Iterable[Token]) -> int:
    return sum(1 for token in tokens if token.is_num)


def max_depth(tokens: Iterable[Token]) -> int:
    """Deepest bracket nesting reached while scanning left to right."""

    depth = 0
    deepest = 0
    for token in tokens:
        if token == OPEN:
            depth += 1
            deepest = max(deepest, depth)
        elif token == CLOSE:
            depth -= 1
    return deepest
