"""
Operation library.

Every function here builds a Step; nothing is evaluated until the chain
runs its queue. Selectors replace the candidate set, filters narrow it
and never fail, assertions only read it.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from .models import MISSING, JsonType, Step, StepResult
from .paths import is_absolute, resolve, resolve_from
from .state import EvaluationState
from .values import classify, equals, format_value, size_of

EMPTY_MESSAGE = "expected at least 1 candidate, got 0"

# Per-candidate check: returns None when the candidate is fine, else a problem description
CandidateCheck = Callable[[Any], "str | None"]


def _check_all(state: EvaluationState, check: CandidateCheck, ok_message: str) -> StepResult:
    """Run a check against every candidate; fail if there are none or any check fails."""
    if not state.candidates:
        return StepResult.failed_result(EMPTY_MESSAGE)

    problems = []
    for index, candidate in enumerate(state.candidates):
        problem = check(candidate)
        if problem is not None:
            problems.append(f"[{index}] {problem}")

    if problems:
        return StepResult.failed_result("; ".join(problems))
    return StepResult.passed_result(ok_message)


def _count(n: int) -> str:
    return f"{n} candidate" if n == 1 else f"{n} candidates"


# ─────────────────────────────────────────────────────────────────────────────
# Selectors
# ─────────────────────────────────────────────────────────────────────────────

def at(path: str, root: Any) -> Step:
    """Navigate every candidate (or the root, for absolute paths) to `path`."""

    def run(state: EvaluationState) -> StepResult:
        examined = [root] if is_absolute(path) else state.candidates
        resolved = []
        for candidate in examined:
            resolution = resolve(candidate, path)
            if resolution.found:
                resolved.append(resolution.value)

        if len(resolved) != len(examined):
            missing = len(examined) - len(resolved)
            state.candidates = []
            return StepResult.failed_result(
                f"path not found for {missing} of {_count(len(examined))}"
            )

        state.candidates = resolved
        return StepResult.passed_result(f"selected {_count(len(resolved))}")

    return Step(f"at {path}", run)


def with_objects() -> Step:
    """Replace array candidates with their object elements."""

    def run(state: EvaluationState) -> StepResult:
        if not state.candidates:
            return StepResult.failed_result(EMPTY_MESSAGE)

        objects = []
        for index, candidate in enumerate(state.candidates):
            actual = classify(candidate)
            if actual != JsonType.ARRAY:
                state.candidates = []
                return StepResult.failed_result(
                    f"[{index}] expected array, got {actual.value}"
                )
            objects.extend(v for v in candidate if classify(v) == JsonType.OBJECT)

        state.candidates = objects
        return StepResult.passed_result(f"selected {_count(len(objects))}")

    return Step("with_objects", run)


def select(expression: str) -> Step:
    """Replace every candidate with the matches of a JSONPath expression."""

    def run(state: EvaluationState) -> StepResult:
        if not state.candidates:
            return StepResult.failed_result(EMPTY_MESSAGE)

        try:
            jsonpath_expr = parse_jsonpath(expression)
        except (JsonPathParserError, JsonPathLexerError) as e:
            state.candidates = []
            return StepResult.failed_result(f"invalid JSONPath expression: {e}")

        matches = []
        for candidate in state.candidates:
            matches.extend(match.value for match in jsonpath_expr.find(candidate))

        state.candidates = matches
        return StepResult.passed_result(f"selected {_count(len(matches))}")

    return Step(f"select {expression}", run)


# ─────────────────────────────────────────────────────────────────────────────
# Filters
# ─────────────────────────────────────────────────────────────────────────────

def _has_entry(candidate: Any, key: str, value: Any) -> bool:
    return (
        classify(candidate) == JsonType.OBJECT
        and key in candidate
        and equals(candidate[key], value)
    )


def containing(key: str, value: Any) -> Step:
    """Keep object candidates whose `key` equals `value`."""

    def run(state: EvaluationState) -> StepResult:
        before = len(state.candidates)
        state.candidates = [c for c in state.candidates if _has_entry(c, key, value)]
        return StepResult.passed_result(f"kept {len(state.candidates)} of {before}")

    return Step(f"containing {key}={format_value(value)}", run)


def matching(criteria: Mapping[str, Any]) -> Step:
    """Keep object candidates that contain every key/value pair in `criteria`."""
    criteria = dict(criteria)

    def run(state: EvaluationState) -> StepResult:
        before = len(state.candidates)
        kept = state.candidates
        for key, value in criteria.items():
            kept = [c for c in kept if _has_entry(c, key, value)]
        state.candidates = kept
        return StepResult.passed_result(f"kept {len(kept)} of {before}")

    return Step(f"matching {format_value(criteria)}", run)


# ─────────────────────────────────────────────────────────────────────────────
# Assertions
# ─────────────────────────────────────────────────────────────────────────────

def is_type(expected: JsonType) -> Step:
    expected = JsonType(expected)

    def check(candidate: Any) -> str | None:
        actual = classify(candidate)
        if actual != expected:
            return f"expected {expected.value}, got {actual.value}"
        return None

    return Step(
        f"is_{expected.value}",
        lambda state: _check_all(state, check, f"all {expected.value}"),
    )


def is_one_of_types(types: Iterable[JsonType]) -> Step:
    allowed = [JsonType(t) for t in types]
    names = ", ".join(t.value for t in allowed)

    def check(candidate: Any) -> str | None:
        actual = classify(candidate)
        if actual not in allowed:
            return f"expected one of [{names}], got {actual.value}"
        return None

    return Step(f"is_one_of_types [{names}]", lambda state: _check_all(state, check, "types ok"))


def _sized(candidate: Any) -> tuple[int | None, str | None]:
    size = size_of(candidate)
    if size is None:
        return None, f"expected array, object or string, got {classify(candidate).value}"
    return size, None


def is_empty() -> Step:
    def check(candidate: Any) -> str | None:
        size, problem = _sized(candidate)
        if problem:
            return problem
        return None if size == 0 else f"expected empty, got size {size}"

    return Step("is_empty", lambda state: _check_all(state, check, "all empty"))


def is_not_empty() -> Step:
    def check(candidate: Any) -> str | None:
        size, problem = _sized(candidate)
        if problem:
            return problem
        return None if size > 0 else "expected non-empty, got size 0"

    return Step("is_not_empty", lambda state: _check_all(state, check, "all non-empty"))


def has_size(n: int) -> Step:
    def check(candidate: Any) -> str | None:
        size, problem = _sized(candidate)
        if problem:
            return problem
        return None if size == n else f"expected size {n}, got {size}"

    return Step(f"has_size {n}", lambda state: _check_all(state, check, f"all of size {n}"))


def has_element(element: Any, max_length: int = 100) -> Step:
    shown = format_value(element, max_length)

    def check(candidate: Any) -> str | None:
        actual = classify(candidate)
        if actual == JsonType.ARRAY:
            if any(equals(item, element) for item in candidate):
                return None
            return f"array does not contain {shown}"
        if actual == JsonType.STRING:
            if not isinstance(element, str):
                return f"cannot look for non-string {shown} in a string"
            if element in candidate:
                return None
            return f"{format_value(candidate, max_length)} does not contain {shown}"
        return f"expected array or string, got {actual.value}"

    return Step(f"has_element {shown}", lambda state: _check_all(state, check, "element present"))


def must_be(expected: Any, max_length: int = 100) -> Step:
    shown = format_value(expected, max_length)

    def check(candidate: Any) -> str | None:
        if equals(candidate, expected):
            return None
        return f"expected {shown}, got {format_value(candidate, max_length)}"

    return Step(f"must_be {shown}", lambda state: _check_all(state, check, "equal"))


def must_not_be(unexpected: Any, max_length: int = 100) -> Step:
    shown = format_value(unexpected, max_length)

    def check(candidate: Any) -> str | None:
        if equals(candidate, unexpected):
            return f"expected anything but {shown}"
        return None

    return Step(f"must_not_be {shown}", lambda state: _check_all(state, check, "not equal"))


def must_contain(path: str, value: Any, root: Any, max_length: int = 100) -> Step:
    """
    Every candidate must resolve `path`; when `value` is supplied the
    resolved value must equal it. A supplied None means "exists and is null".
    """
    description = f"must_contain {path}"
    if value is not MISSING:
        description += f"={format_value(value, max_length)}"

    def check(candidate: Any) -> str | None:
        resolution = resolve_from(candidate, root, path)
        if not resolution.found:
            return f"path {path} not found"
        if value is not MISSING and not equals(resolution.value, value):
            return (
                f"expected {format_value(value, max_length)} at {path}, "
                f"got {format_value(resolution.value, max_length)}"
            )
        return None

    return Step(description, lambda state: _check_all(state, check, "contained"))


def must_not_contain(path: str, value: Any, root: Any, max_length: int = 100) -> Step:
    """No candidate may resolve `path` (to `value`, when supplied)."""
    description = f"must_not_contain {path}"
    if value is not MISSING:
        description += f"={format_value(value, max_length)}"

    def check(candidate: Any) -> str | None:
        resolution = resolve_from(candidate, root, path)
        if not resolution.found:
            return None
        if value is MISSING:
            return f"path {path} exists"
        if equals(resolution.value, value):
            return f"found {format_value(value, max_length)} at {path}"
        return None

    return Step(description, lambda state: _check_all(state, check, "not contained"))


def _string_check(test: Callable[[str], bool], problem: str) -> CandidateCheck:
    def check(candidate: Any) -> str | None:
        actual = classify(candidate)
        if actual != JsonType.STRING:
            return f"expected string, got {actual.value}"
        return None if test(candidate) else f"{format_value(candidate)} {problem}"

    return check


def must_begin_with(prefix: str) -> Step:
    check = _string_check(lambda s: s.startswith(prefix), f"does not begin with {format_value(prefix)}")
    return Step(f"must_begin_with {format_value(prefix)}", lambda state: _check_all(state, check, "prefix ok"))


def must_end_with(suffix: str) -> Step:
    check = _string_check(lambda s: s.endswith(suffix), f"does not end with {format_value(suffix)}")
    return Step(f"must_end_with {format_value(suffix)}", lambda state: _check_all(state, check, "suffix ok"))


def must_satisfy(description: str, predicate: Callable[[Any], bool]) -> Step:
    def check(candidate: Any) -> str | None:
        try:
            satisfied = predicate(candidate)
        except Exception as e:
            return f"predicate raised {type(e).__name__}: {e}"
        return None if satisfied else f"{format_value(candidate)} does not satisfy {description}"

    return Step(f"must_satisfy {description}", lambda state: _check_all(state, check, "satisfied"))


def must_match_regex(pattern: str | re.Pattern) -> Step:
    """Every candidate must be a string fully matching `pattern`."""
    source = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
    compiled: re.Pattern | None = None
    compile_error: str | None = None
    try:
        compiled = re.compile(pattern)
    except (re.error, TypeError) as e:
        compile_error = str(e)

    def run(state: EvaluationState) -> StepResult:
        if compiled is None:
            return StepResult.failed_result(f"invalid regular expression: {compile_error}")
        check = _string_check(lambda s: compiled.fullmatch(s) is not None, f"does not match /{source}/")
        return _check_all(state, check, "matched")

    return Step(f"must_match_regex /{source}/", run)


# ─────────────────────────────────────────────────────────────────────────────
# Cardinality
# ─────────────────────────────────────────────────────────────────────────────

def count(op: str, n: int) -> Step:
    """Check the number of candidates: op is "exactly", "at_least" or "at_most"."""
    tests = {
        "exactly": lambda size: size == n,
        "at_least": lambda size: size >= n,
        "at_most": lambda size: size <= n,
    }
    test = tests[op]

    def run(state: EvaluationState) -> StepResult:
        size = len(state.candidates)
        if test(size):
            return StepResult.passed_result(f"{_count(size)} selected")
        return StepResult.failed_result(f"expected {op.replace('_', ' ')} {n}, got {size}")

    return Step(f"{op} {n}", run)
