from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable

from snailfish.homework import max_pairwise, sum_all
from snailfish.parser import parse_homework
from snailfish.rewrite import DEFAULT_RULES
from snailfish.runtime import DEFAULT_STEP_FACTOR, Reducer
from snailfish.terms import magnitude
from snailfish.trace import JSONLTracer


def _read_homework_source(path: str) -> str:
    """Load homework text from a file path or stdin.

    Passing ``-`` reads from stdin to support piping input into the CLI.
    """

    if path == "-":
        return sys.stdin.read()

    target = Path(path)
    if not target.exists():
        raise FileNotFoundError(path)
    return target.read_text()


def _add_tracer(reducer: Reducer, destination: str, rules=None):
    sink = open(destination, "w", encoding="utf-8")
    reducer.event_hooks.append(JSONLTracer(sink, rules=rules))
    return sink


def run_cli(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sum snailfish homework and find the largest pairwise magnitude.")
    parser.add_argument("homework", help="Path to the homework listing, one number per line ('-' for stdin)")
    parser.add_argument(
        "--trace-jsonl",
        dest="trace_jsonl",
        help="Write the reduction events of the homework sum to a JSONL file",
    )
    parser.add_argument(
        "--trace-rule",
        dest="trace_rules",
        action="append",
        choices=[rule.name for rule in DEFAULT_RULES],
        help="Only trace firings of this rule (repeatable)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Spread the pairwise search over this many processes",
    )
    parser.add_argument(
        "--step-factor",
        dest="step_factor",
        type=int,
        default=DEFAULT_STEP_FACTOR,
        help="Rule firings allowed per token and per unit of leaf value before a reduction is considered stuck",
    )
    parser.add_argument(
        "--exclude-self-pairs",
        action="store_true",
        help="Skip adding a number to itself during the pairwise search",
    )
    parser.add_argument(
        "--sum-only",
        action="store_true",
        help="Only compute the homework sum and its magnitude",
    )

    args = parser.parse_args(list(argv) if argv is not None else None)

    sink = None

    try:
        numbers = parse_homework(_read_homework_source(args.homework))
        sum_reducer = Reducer(step_factor=args.step_factor)
        sink = _add_tracer(sum_reducer, args.trace_jsonl, args.trace_rules) if args.trace_jsonl else None

        total = sum_all(numbers, reducer=sum_reducer)
        summary = {
            "numbers": len(numbers),
            "sum": str(total),
            "magnitude": magnitude(total),
        }

        if not args.sum_only:
            search_reducer = Reducer(step_factor=args.step_factor)
            best = max_pairwise(
                numbers,
                include_self=not args.exclude_self_pairs,
                workers=args.workers,
                reducer=search_reducer,
            )
            summary["max_pairwise_magnitude"] = best.magnitude
            summary["best_pair"] = [best.left, best.right]

        summary["reductions"] = sum_reducer.stats()

        print(json.dumps(summary, indent=2))
        return 0
    except Exception as exc:  # pragma: no cover - defensive shell entry
        print(f"snailfish: {exc}", file=sys.stderr)
        return 1
    finally:
        if sink is not None:
            sink.close()


def main() -> int:  # pragma: no cover - thin wrapper
    return run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    sys.exit(main())
