"""
Fluent assertion chain over a JSON document.

Each chain call queues a step; nothing runs until a finalizer (verify,
exactly, at_least, at_most) executes the queue and reports one outcome
to the chain's result sink.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Mapping

from ..reporting import ChainOutcome, RaisingSink, ResultSink
from . import operations as ops
from .branching import BranchContext, branch_step
from .document import JsonDocument
from .models import MISSING, ChainUsageError, JsonType, Step
from .state import EvaluationState
from .values import format_value

logger = logging.getLogger(__name__)

NOT_FINALIZED = "assertion chain was not finalized"


class JsonChain:
    """
    Query-and-assert chain over a parsed JSON value.

    The chain starts with the document root as its only candidate.
    Selectors (at, with_objects, select) navigate, filters (containing,
    matching) narrow, assertions check every remaining candidate, and
    either/or_else/end combine alternative expectations.

    Example:
        doc = {"crew": [{"name": "Dan", "role": "engineer"}]}
        (JsonChain(doc)
            .at("/crew").with_objects()
            .containing("role", "engineer")
            .must_contain("name", "Dan")
            .exactly(1))

    A chain must be finalized. Use it as a context manager, or call
    close(), to have a forgotten finalizer reported as a failure.
    """

    def __init__(
        self,
        document: Any = None,
        *,
        description: str = "json document",
        sink: ResultSink | None = None,
        max_value_length: int = 100,
    ):
        self._setup(
            JsonDocument.from_value(document),
            description=description,
            sink=sink or RaisingSink(),
            max_value_length=max_value_length,
            parent=None,
        )

    @classmethod
    def from_text(cls, text: str | bytes, **kwargs: Any) -> JsonChain:
        """Build a chain from JSON text; malformed text is reported at finalization."""
        chain = cls(**kwargs)
        chain._document = JsonDocument.from_text(text)
        chain.state.candidates = [chain._document.root] if chain._document.is_valid else []
        return chain

    def _setup(
        self,
        document: JsonDocument,
        description: str,
        sink: ResultSink,
        max_value_length: int,
        parent: JsonChain | None,
    ) -> None:
        self._document = document
        self.description = description
        self.sink = sink
        self.max_value_length = max_value_length
        self._parent = parent
        self.depth = parent.depth + 1 if parent else 0
        self.state = EvaluationState([document.root] if parent is None and document.is_valid else [])
        self._contexts: list[BranchContext] = []
        self._misuse: list[str] = []
        self._finalized = False

    def _fork(self) -> JsonChain:
        """New branch chain sharing this chain's document, with an empty step queue."""
        branch = object.__new__(type(self))
        branch._setup(
            self._document,
            description=self.description,
            sink=self.sink,
            max_value_length=self.max_value_length,
            parent=self,
        )
        logger.debug(f"Forked branch at depth {branch.depth}")
        return branch

    @property
    def origin(self) -> JsonChain:
        """The outermost chain this one was forked from (itself if not a branch)."""
        chain = self
        while chain._parent is not None:
            chain = chain._parent
        return chain

    @property
    def is_branch(self) -> bool:
        return self._parent is not None

    @property
    def root(self) -> Any:
        return self._document.root

    @property
    def candidates(self) -> list[Any]:
        return self.state.candidates

    @property
    def finalized(self) -> bool:
        return self.origin._finalized

    def _enqueue(self, step: Step) -> JsonChain:
        logger.debug(f"Queued step: {step.description}")
        self.state.add(step)
        return self

    def __repr__(self) -> str:
        kind = "branch" if self.is_branch else "chain"
        return f"<JsonChain {kind} {self.description!r} steps={len(self.state.steps)} depth={self.depth}>"

    # ─────────────────────────────────────────────────────────────────────
    # Selectors
    # ─────────────────────────────────────────────────────────────────────

    def at(self, path: str) -> JsonChain:
        return self._enqueue(ops.at(path, self.root))

    def with_objects(self) -> JsonChain:
        return self._enqueue(ops.with_objects())

    def select(self, expression: str) -> JsonChain:
        """Select with a JSONPath expression evaluated against each candidate."""
        return self._enqueue(ops.select(expression))

    # ─────────────────────────────────────────────────────────────────────
    # Filters
    # ─────────────────────────────────────────────────────────────────────

    def containing(self, key: str, value: Any) -> JsonChain:
        return self._enqueue(ops.containing(key, value))

    def matching(self, criteria: Mapping[str, Any] | None = None, **kwargs: Any) -> JsonChain:
        """Keep objects containing every key/value pair, e.g. matching(role="engineer")."""
        return self._enqueue(ops.matching({**(criteria or {}), **kwargs}))

    # ─────────────────────────────────────────────────────────────────────
    # Assertions
    # ─────────────────────────────────────────────────────────────────────

    def is_type(self, json_type: JsonType | str) -> JsonChain:
        return self._enqueue(ops.is_type(JsonType(json_type)))

    def is_null(self) -> JsonChain:
        return self.is_type(JsonType.NULL)

    def is_bool(self) -> JsonChain:
        return self.is_type(JsonType.BOOL)

    def is_number(self) -> JsonChain:
        return self.is_type(JsonType.NUMBER)

    def is_string(self) -> JsonChain:
        return self.is_type(JsonType.STRING)

    def is_array(self) -> JsonChain:
        return self.is_type(JsonType.ARRAY)

    def is_object(self) -> JsonChain:
        return self.is_type(JsonType.OBJECT)

    def is_one_of_types(self, types: Iterable[JsonType | str]) -> JsonChain:
        return self._enqueue(ops.is_one_of_types(types))

    def is_empty(self) -> JsonChain:
        return self._enqueue(ops.is_empty())

    def is_not_empty(self) -> JsonChain:
        return self._enqueue(ops.is_not_empty())

    def has_size(self, n: int) -> JsonChain:
        return self._enqueue(ops.has_size(n))

    def has_element(self, element: Any) -> JsonChain:
        return self._enqueue(ops.has_element(element, self.max_value_length))

    def must_be(self, expected: Any) -> JsonChain:
        return self._enqueue(ops.must_be(expected, self.max_value_length))

    def must_not_be(self, unexpected: Any) -> JsonChain:
        return self._enqueue(ops.must_not_be(unexpected, self.max_value_length))

    def must_contain(self, path: str, value: Any = MISSING) -> JsonChain:
        """
        Every candidate must resolve `path`.

        If `value` is given (including None, 0 or False) the resolved value
        must also equal it.
        """
        return self._enqueue(ops.must_contain(path, value, self.root, self.max_value_length))

    def must_not_contain(self, path: str, value: Any = MISSING) -> JsonChain:
        return self._enqueue(ops.must_not_contain(path, value, self.root, self.max_value_length))

    def must_begin_with(self, prefix: str) -> JsonChain:
        return self._enqueue(ops.must_begin_with(prefix))

    def must_end_with(self, suffix: str) -> JsonChain:
        return self._enqueue(ops.must_end_with(suffix))

    def must_satisfy(self, description: str, predicate: Callable[[Any], bool]) -> JsonChain:
        return self._enqueue(ops.must_satisfy(description, predicate))

    def must_match_regex(self, pattern: str | re.Pattern) -> JsonChain:
        return self._enqueue(ops.must_match_regex(pattern))

    def must_selected(self, n: int) -> JsonChain:
        """Check the candidate count without finalizing the chain."""
        return self._enqueue(ops.count("exactly", n))

    # ─────────────────────────────────────────────────────────────────────
    # Branching
    # ─────────────────────────────────────────────────────────────────────

    def either(self) -> JsonChain:
        """Open a branch block; following calls apply to the first branch."""
        context = BranchContext(owner=self)
        branch = self._fork()
        context.branches.append(branch)
        self.origin._contexts.append(context)
        return branch

    def or_else(self) -> JsonChain:
        """Start the next alternative of the innermost open branch block."""
        origin = self.origin
        if not origin._contexts:
            origin._record_misuse("or_else() without either()")
            return self
        context = origin._contexts[-1]
        branch = context.owner._fork()
        context.branches.append(branch)
        return branch

    def end(self) -> JsonChain:
        """Close the innermost branch block and continue on the chain that opened it."""
        origin = self.origin
        if not origin._contexts:
            origin._record_misuse("end() without either()")
            return self
        context = origin._contexts.pop()
        return context.owner._enqueue(branch_step(context))

    def _record_misuse(self, message: str) -> None:
        logger.warning(f"Invalid chain usage: {message}")
        self._misuse.append(message)

    # ─────────────────────────────────────────────────────────────────────
    # Finalizers
    # ─────────────────────────────────────────────────────────────────────

    def verify(self) -> bool:
        """Run every queued step and report the outcome; returns whether it passed."""
        return self.origin._finalize()

    def exactly(self, n: int) -> bool:
        self._enqueue(ops.count("exactly", n))
        return self.verify()

    def at_least(self, n: int) -> bool:
        self._enqueue(ops.count("at_least", n))
        return self.verify()

    def at_most(self, n: int) -> bool:
        self._enqueue(ops.count("at_most", n))
        return self.verify()

    def _finalize(self) -> bool:
        if self._finalized:
            raise ChainUsageError(f"{self.description} was already finalized")
        self._finalized = True

        outcome = self._evaluate()
        if outcome.passed:
            logger.info(f"Chain passed: {self.description}")
        else:
            logger.info(f"Chain failed: {self.description}: {outcome.reason}")
        self.sink.report(outcome)
        return outcome.passed

    def _evaluate(self) -> ChainOutcome:
        if not self._document.is_valid:
            return ChainOutcome(
                description=self.description,
                passed=False,
                reason=f"invalid JSON: {self._document.error}",
            )

        passed = self.state.apply_all()
        problems = list(self._misuse)
        if self._contexts:
            problems.append(f"{len(self._contexts)} either() without end()")

        reason = ""
        if problems:
            passed = False
            reason = "; ".join(problems)
        elif not passed:
            step, result = self.state.failed_steps()[0]
            reason = f"{step.description}: {result.message}"

        return ChainOutcome(
            description=self.description,
            passed=passed,
            reason=reason,
            trace=self.state.pretty_trace(),
            candidates=[format_value(c, self.max_value_length) for c in self.state.candidates],
        )

    def trace(self) -> str:
        """The evaluated step trace as text (empty before finalization)."""
        return "\n".join(self.state.pretty_trace())

    def close(self) -> None:
        """Report a failure if the chain was never finalized."""
        origin = self.origin
        if origin._finalized:
            return
        origin._finalized = True
        logger.warning(f"{NOT_FINALIZED}: {origin.description}")
        origin.sink.report(
            ChainOutcome(description=origin.description, passed=False, reason=NOT_FINALIZED)
        )

    def __enter__(self) -> JsonChain:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # Don't mask an exception already on its way out
        if exc_type is None:
            self.close()


def expect(value: Any, **kwargs: Any) -> JsonChain:
    """Start a chain over an already-parsed JSON value."""
    return JsonChain(value, **kwargs)


def expect_text(text: str | bytes, **kwargs: Any) -> JsonChain:
    """Start a chain over JSON text."""
    return JsonChain.from_text(text, **kwargs)
