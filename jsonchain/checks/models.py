"""
Typed data structures for declarative check suites.

This module contains all enums and dataclasses that represent
the internal typed structure of a parsed suite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class StepOp(str, Enum):
    """Chain operations that can be written in a suite file."""
    # Selectors
    AT = "at"
    WITH_OBJECTS = "with_objects"
    SELECT = "select"
    # Filters
    CONTAINING = "containing"
    MATCHING = "matching"
    # Assertions
    IS_NULL = "is_null"
    IS_BOOL = "is_bool"
    IS_NUMBER = "is_number"
    IS_STRING = "is_string"
    IS_ARRAY = "is_array"
    IS_OBJECT = "is_object"
    IS_TYPE = "is_type"
    IS_ONE_OF_TYPES = "is_one_of_types"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    HAS_SIZE = "has_size"
    HAS_ELEMENT = "has_element"
    MUST_BE = "must_be"
    MUST_NOT_BE = "must_not_be"
    MUST_CONTAIN = "must_contain"
    MUST_NOT_CONTAIN = "must_not_contain"
    MUST_BEGIN_WITH = "must_begin_with"
    MUST_END_WITH = "must_end_with"
    MUST_MATCH_REGEX = "must_match_regex"
    MUST_SELECTED = "must_selected"
    # Branching
    EITHER = "either"
    OR_ELSE = "or_else"
    END = "end"
    # Finalizers
    VERIFY = "verify"
    EXACTLY = "exactly"
    AT_LEAST = "at_least"
    AT_MOST = "at_most"


NO_ARG_OPS = {
    StepOp.WITH_OBJECTS,
    StepOp.IS_NULL,
    StepOp.IS_BOOL,
    StepOp.IS_NUMBER,
    StepOp.IS_STRING,
    StepOp.IS_ARRAY,
    StepOp.IS_OBJECT,
    StepOp.IS_EMPTY,
    StepOp.IS_NOT_EMPTY,
    StepOp.EITHER,
    StepOp.OR_ELSE,
    StepOp.END,
    StepOp.VERIFY,
}

# Ops whose list/mapping argument spreads into several parameters
MULTI_ARG_OPS = {
    StepOp.CONTAINING,
    StepOp.MUST_CONTAIN,
    StepOp.MUST_NOT_CONTAIN,
}

COUNT_OPS = {
    StepOp.HAS_SIZE,
    StepOp.MUST_SELECTED,
    StepOp.EXACTLY,
    StepOp.AT_LEAST,
    StepOp.AT_MOST,
}

STRING_OPS = {
    StepOp.AT,
    StepOp.SELECT,
    StepOp.MUST_BEGIN_WITH,
    StepOp.MUST_END_WITH,
    StepOp.MUST_MATCH_REGEX,
}

FINALIZER_OPS = {
    StepOp.VERIFY,
    StepOp.EXACTLY,
    StepOp.AT_LEAST,
    StepOp.AT_MOST,
}


# ─────────────────────────────────────────────────────────────────────────────
# Defaults
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Defaults:
    """Default settings applied to every chain in a suite."""
    max_value_length: int = 100


# ─────────────────────────────────────────────────────────────────────────────
# Checks
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class OpCall:
    """One chain call: the op plus the arguments it is invoked with."""
    op: StepOp
    args: list[Any] = field(default_factory=list)
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def is_finalizer(self) -> bool:
        return self.op in FINALIZER_OPS

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "args": self.args, "kwargs": self.kwargs}


@dataclass
class CheckCase:
    """
    A single check: a document source plus the chain of ops to run on it.

    Exactly one of document, document_text and document_file is set.
    """
    id: str
    steps: list[OpCall] = field(default_factory=list)
    description: str | None = None
    document: Any = None
    document_text: str | None = None
    document_file: Path | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Suite
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class CheckSuite:
    """Fully parsed and validated check suite."""
    version: int
    name: str
    defaults: Defaults = field(default_factory=Defaults)
    checks: list[CheckCase] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, used for hashing."""
        return {
            "version": self.version,
            "name": self.name,
            "defaults": {"max_value_length": self.defaults.max_value_length},
            "checks": [
                {
                    "id": check.id,
                    "description": check.description,
                    "document": check.document,
                    "document_text": check.document_text,
                    "document_file": str(check.document_file) if check.document_file else None,
                    "steps": [step.to_dict() for step in check.steps],
                }
                for check in self.checks
            ],
        }
