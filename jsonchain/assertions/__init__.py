"""
Assertion Chains for JSON Documents

This package provides the fluent chain used to navigate into a parsed
JSON document, narrow a set of candidate values and assert on them.

Supported operations:
    - Selectors: at, with_objects, select
    - Filters: containing, matching
    - Assertions: is_null ... is_object, is_type, is_one_of_types,
      is_empty, is_not_empty, has_size, has_element, must_be,
      must_not_be, must_contain, must_not_contain, must_begin_with,
      must_end_with, must_satisfy, must_match_regex, must_selected
    - Branching: either, or_else, end
    - Finalizers: verify, exactly, at_least, at_most

Usage:
    from jsonchain.assertions import expect

    data = {"crew": ["Dan", "Mona", "Taras"]}
    expect(data).at("/crew/-1").must_be("Taras").verify()

    (expect(data)
        .at("/crew/0")
        .either().must_be("Dan")
        .or_else().must_be("Mona")
        .end()
        .exactly(1))
"""

# Models
from .models import (
    MISSING,
    BranchTrace,
    ChainUsageError,
    JsonType,
    Step,
    StepResult,
    StepStatus,
)

# Value model and paths
from .values import classify, equals, format_value
from .paths import NOT_FOUND, PathResolution, is_absolute, resolve
from .document import JsonDocument

# Engine
from .state import EvaluationState
from .branching import BranchContext
from .chain import NOT_FINALIZED, JsonChain, expect, expect_text

__all__ = [
    # Models
    "MISSING",
    "BranchTrace",
    "ChainUsageError",
    "JsonType",
    "Step",
    "StepResult",
    "StepStatus",
    # Value model
    "classify",
    "equals",
    "format_value",
    # Paths
    "NOT_FOUND",
    "PathResolution",
    "is_absolute",
    "resolve",
    "JsonDocument",
    # Engine
    "EvaluationState",
    "BranchContext",
    "JsonChain",
    "NOT_FINALIZED",
    "expect",
    "expect_text",
]
