import pytest

from snailfish.parser import ParseError, parse_homework, parse_number, parse_tokens, tokenize
from snailfish.terms import Leaf, Pair
from snailfish.tokens import COMMA, OPEN, CLOSE, Token


@pytest.mark.parametrize(
    "text",
    [
        "[1,2]",
        "[[1,2],3]",
        "[9,[8,7]]",
        "[[1,9],[8,5]]",
        "[[[[1,2],[3,4]],[[5,6],[7,8]]],9]",
        "[[[9,[3,8]],[[0,9],6]],[[[3,7],[4,9]],3]]",
        "[[[[1,3],[5,3]],[[1,3],[8,7]]],[[[4,9],[6,9]],[[8,2],[7,3]]]]",
    ],
)
def test_parse_number_round_trips_text(text):
    assert str(parse_number(text)) == text


def test_parse_accepts_multi_digit_leaves():
    assert parse_number("[10,[2,123]]") == Pair(Leaf(10), Pair(Leaf(2), Leaf(123)))
    assert parse_tokens("[15,0]") == (OPEN, Token.num(15), COMMA, Token.num(0), CLOSE)
    assert parse_number("7") == Leaf(7)


def test_tokenize_does_not_check_grammar():
    assert tokenize("]],1") == (CLOSE, CLOSE, COMMA, Token.num(1))


@pytest.mark.parametrize(
    "text, position, reason",
    [
        ("[1,2", 4, "input ended"),
        ("[1[2,3]]", 2, "expected ','"),
        ("[1,2]]", 5, "trailing input"),
        ("[1,2][3,4]", 5, "trailing input"),
        ("[1, 2]", 3, "unexpected character"),
        ("[a,2]", 1, "unexpected character"),
        ("[,2]", 1, "expected a leaf"),
        ("", 0, "empty input"),
    ],
)
def test_parse_number_rejects_malformed_text(text, position, reason):
    with pytest.raises(ParseError, match=reason) as excinfo:
        parse_number(text)
    assert excinfo.value.position == position


def test_parse_homework_skips_blank_lines():
    numbers = parse_homework("[1,1]\n[2,2]\n\n[3,3]\n")
    assert [str(n) for n in numbers] == ["[1,1]", "[2,2]", "[3,3]"]


def test_parse_homework_fails_whole_batch_with_line_number():
    with pytest.raises(ParseError, match="line 3") as excinfo:
        parse_homework("[1,1]\n[2,2]\n  [3,x]\n[4,4]")
    assert excinfo.value.line == 3
    assert excinfo.value.position == 5


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_number("[1,2")
