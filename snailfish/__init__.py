from snailfish.arithmetic import add, add_tokens  # noqa: F401
from snailfish.constraints import (  # noqa: F401
    REDUCED,
    StructuralConstraints,
    StructuralMetrics,
    is_reduced,
    measure_structure,
    validate_structure,
)
from snailfish.homework import (  # noqa: F401
    HomeworkReport,
    PairwiseMaximum,
    max_pairwise,
    max_pairwise_magnitude,
    solve,
    sum_all,
)
from snailfish.parser import ParseError, parse_homework, parse_number, parse_tokens, tokenize  # noqa: F401
from snailfish.rewrite import (  # noqa: F401
    DEFAULT_RULES,
    EXPLODE_RULE,
    SPLIT_RULE,
    ReductionInvariantViolation,
    Rewrite,
    Rule,
    explode,
    split,
    split_value,
)
from snailfish.runtime import Event, Reducer, is_normal_form, reduce_number, reduce_tokens  # noqa: F401
from snailfish.terms import Element, Leaf, Number, Pair, magnitude, pair  # noqa: F401
from snailfish.tokens import (  # noqa: F401
    CLOSE,
    COMMA,
    OPEN,
    Token,
    render_tokens,
    term_from_tokens,
    tokens_from_term,
)
from snailfish.trace import JSONLTracer, dump_events, events_by_reduction  # noqa: F401
