"""JSON lines tracing of explode and split firings.

Every line is one ``Event.to_record()``: the reduction it belongs to, the
step within that reduction, the rule, and the number rendered before and
after the rewrite. A homework sum reduces once per addition, so the
``reduction`` field groups the lines by addition.
"""

from __future__ import annotations

import io
import json
from typing import Dict, Iterable, List, Optional

from snailfish.runtime import Event


class JSONLTracer:
    """Event hook that writes one JSON record per rule firing.

    ``rules`` limits output to the named rules, e.g. ``{"explode"}``.
    """

    def __init__(self, sink: io.TextIOBase, rules: Optional[Iterable[str]] = None):
        self.sink = sink
        self.rules = frozenset(rules) if rules is not None else None
        self.count = 0
        self.last_reduction = 0

    def __call__(self, event: Event) -> None:
        if self.rules is not None and event.rule not in self.rules:
            return
        self.sink.write(json.dumps(event.to_record()))
        self.sink.write("\n")
        self.sink.flush()
        self.count += 1
        self.last_reduction = event.reduction


def dump_events(events: Iterable[Event]) -> List[dict]:
    """Convert an event stream to JSON-serializable dicts."""

    return [ev.to_record() for ev in events]


def events_by_reduction(events: Iterable[Event]) -> Dict[int, List[dict]]:
    grouped: Dict[int, List[dict]] = {}
    for ev in events:
        grouped.setdefault(ev.reduction, []).append(ev.to_record())
    return grouped
