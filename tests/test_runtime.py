import pytest

from snailfish.constraints import is_reduced
from snailfish.parser import parse_number, parse_tokens
from snailfish.rewrite import EXPLODE_RULE, ReductionInvariantViolation, Rewrite, Rule
from snailfish.runtime import Event, Reducer, is_normal_form, reduce_number, reduce_tokens
from snailfish.tokens import render_tokens, term_from_tokens


def test_reduce_single_explosions():
    assert reduce_number(parse_number("[[[[[9,8],1],2],3],4]")) == parse_number("[[[[0,9],2],3],4]")
    assert reduce_number(parse_number("[7,[6,[5,[4,[3,2]]]]]")) == parse_number("[7,[6,[5,[7,0]]]]")


def test_reduce_to_fixpoint_alternates_rules_in_priority_order():
    reducer = Reducer(record_events=True)
    result = reducer.reduce(parse_tokens("[[[[[4,3],4],4],[7,[[8,4],9]]],[1,1]]"))

    assert render_tokens(result) == "[[[[0,7],4],[[7,8],[6,0]]],[8,1]]"
    assert [e.rule for e in reducer.events] == ["explode", "explode", "split", "split", "explode"]
    assert [render_tokens(e.after) for e in reducer.events] == [
        "[[[[0,7],4],[7,[[8,4],9]]],[1,1]]",
        "[[[[0,7],4],[15,[0,13]]],[1,1]]",
        "[[[[0,7],4],[[7,8],[0,13]]],[1,1]]",
        "[[[[0,7],4],[[7,8],[0,[6,7]]]],[1,1]]",
        "[[[[0,7],4],[[7,8],[6,0]]],[8,1]]",
    ]
    assert reducer.stats() == {
        "reductions": 1,
        "steps": 5,
        "rule_counts": {"explode": 3, "split": 2},
        "max_steps_seen": 5,
    }


def test_reduce_is_idempotent_on_normal_form():
    once = reduce_tokens(parse_tokens("[[[[[4,3],4],4],[7,[[8,4],9]]],[1,1]]"))
    assert is_normal_form(once)
    assert reduce_tokens(once) == once


def test_event_hooks_receive_every_firing():
    seen: list[Event] = []
    reducer = Reducer(event_hooks=[seen.append])
    reducer.reduce(parse_tokens("[[[[[9,8],1],2],3],4]"))

    assert len(seen) == 1
    record = seen[0].to_record()
    assert record == {
        "reduction": 1,
        "step": 1,
        "rule": "explode",
        "position": 4,
        "before": "[[[[[9,8],1],2],3],4]",
        "after": "[[[[0,9],2],3],4]",
    }
    # events are only kept when asked for
    assert reducer.events == []


def test_reducer_can_run_a_subset_of_rules():
    reducer = Reducer(rules=[EXPLODE_RULE])
    result = reducer.reduce(parse_tokens("[[[[[4,3],4],4],[7,[[8,4],9]]],[1,1]]"))
    assert render_tokens(result) == "[[[[0,7],4],[15,[0,13]]],[1,1]]"


def test_step_guard_raises_instead_of_looping():
    spin = Rule(name="spin", apply=lambda tokens: Rewrite(True, tuple(tokens), 0))
    reducer = Reducer(rules=[spin], min_steps=10, step_factor=1)

    with pytest.raises(ReductionInvariantViolation) as excinfo:
        reducer.reduce(parse_tokens("[1,2]"))

    assert excinfo.value.limit == 10
    assert excinfo.value.steps == 10
    assert excinfo.value.tokens == "[1,2]"


def test_step_limit_scales_with_length_and_leaf_values():
    reducer = Reducer(step_factor=2, min_steps=5)
    assert reducer.step_limit(parse_tokens("1")) == 5
    # 5 tokens plus leaf values 1 + 2
    assert reducer.step_limit(parse_tokens("[1,2]")) == 16
    assert reducer.step_limit(parse_tokens("[999,1]")) == 2 * (5 + 1000)


@pytest.mark.parametrize("text", ["[999,1]", "[9999,1]", "[65535,1]"])
def test_large_leaves_reach_normal_form_with_default_limits(text):
    reducer = Reducer()
    result = reducer.reduce(parse_tokens(text))

    assert reducer.is_normal_form(result)
    assert is_reduced(term_from_tokens(result))
    assert reducer.stats()["max_steps_seen"] <= reducer.step_limit(parse_tokens(text))


@pytest.mark.parametrize("options", [{"step_factor": 0}, {"min_steps": -1}])
def test_reducer_rejects_non_positive_limits(options):
    with pytest.raises(ValueError):
        Reducer(**options)


def test_reducer_rejects_duplicate_rule_names():
    with pytest.raises(ValueError, match="Duplicate rule names"):
        Reducer(rules=[EXPLODE_RULE, EXPLODE_RULE])
