"""
Schema validation for check suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..assertions import JsonType
from .models import (
    COUNT_OPS,
    FINALIZER_OPS,
    MULTI_ARG_OPS,
    NO_ARG_OPS,
    STRING_OPS,
    StepOp,
)


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "checks[0].steps[2]"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Schema Validator
# ─────────────────────────────────────────────────────────────────────────────

class SchemaValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"version", "name", "checks"}
    OPTIONAL_TOP_LEVEL = {"defaults"}
    DOCUMENT_SOURCES = ("document", "document_text", "document_file")
    CHECK_FIELDS = {"id", "description", "steps", *DOCUMENT_SOURCES}
    VALID_OPS = {op.value for op in StepOp}
    VALID_TYPES = {t.value for t in JsonType}
    MIN_VALUE_LENGTH = 10

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.check_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_name()
        self._validate_defaults()
        self._validate_checks()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown):
            self.result.add_error(
                key,
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_defaults(self) -> None:
        defaults = self.data.get("defaults")
        if defaults is None:
            return
        if not isinstance(defaults, dict):
            self.result.add_error(
                "defaults",
                "Must be an object",
                value=defaults
            )
            return

        for key in sorted(set(defaults) - {"max_value_length"}):
            self.result.add_error(
                f"defaults.{key}",
                "Unknown defaults field",
                suggestion="Valid fields are: max_value_length"
            )

        if "max_value_length" in defaults:
            length = defaults["max_value_length"]
            if not _is_int(length) or length < self.MIN_VALUE_LENGTH:
                self.result.add_error(
                    "defaults.max_value_length",
                    f"Must be an integer >= {self.MIN_VALUE_LENGTH}",
                    value=length
                )

    def _validate_checks(self) -> None:
        checks = self.data.get("checks")
        if not isinstance(checks, list):
            self.result.add_error(
                "checks",
                "Must be a list",
                value=checks
            )
            return

        if not checks:
            self.result.add_error(
                "checks",
                "Must contain at least one check",
                suggestion="Add a check with an id, a document and steps"
            )
            return

        for i, check in enumerate(checks):
            self._validate_check(check, f"checks[{i}]")

    def _validate_check(self, check: Any, path: str) -> None:
        if not isinstance(check, dict):
            self.result.add_error(path, "Must be an object", value=check)
            return

        for key in sorted(set(check) - self.CHECK_FIELDS):
            self.result.add_error(
                f"{path}.{key}",
                f"Unknown check field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.CHECK_FIELDS))}"
            )

        check_id = check.get("id")
        if not isinstance(check_id, str) or not check_id.strip():
            self.result.add_error(
                f"{path}.id",
                "Must be a non-empty string",
                value=check_id
            )
        elif check_id in self.check_ids:
            self.result.add_error(
                f"{path}.id",
                f"Duplicate check id '{check_id}'",
                suggestion="Check ids must be unique within a suite"
            )
        else:
            self.check_ids.add(check_id)

        description = check.get("description")
        if description is not None and not isinstance(description, str):
            self.result.add_error(f"{path}.description", "Must be a string", value=description)

        sources = [key for key in self.DOCUMENT_SOURCES if key in check]
        if len(sources) != 1:
            self.result.add_error(
                path,
                f"Exactly one document source is required, got {len(sources)}",
                value=sources or None,
                suggestion=f"Use one of: {', '.join(self.DOCUMENT_SOURCES)}"
            )
        for key in ("document_text", "document_file"):
            if key in check and not isinstance(check[key], str):
                self.result.add_error(f"{path}.{key}", "Must be a string", value=check[key])

        steps = check.get("steps")
        if not isinstance(steps, list) or not steps:
            self.result.add_error(
                f"{path}.steps",
                "Must be a non-empty list",
                value=steps
            )
            return

        self._validate_steps(steps, f"{path}.steps")

    def _validate_steps(self, steps: list[Any], path: str) -> None:
        depth = 0
        for i, step in enumerate(steps):
            step_path = f"{path}[{i}]"
            op = self._validate_step(step, step_path)
            if op is None:
                continue

            if op == StepOp.EITHER:
                depth += 1
            elif op in (StepOp.OR_ELSE, StepOp.END):
                if depth == 0:
                    self.result.add_error(
                        step_path,
                        f"'{op.value}' without a preceding 'either'",
                    )
                elif op == StepOp.END:
                    depth -= 1

            if op in FINALIZER_OPS and i != len(steps) - 1:
                self.result.add_error(
                    step_path,
                    f"Finalizer '{op.value}' must be the last step",
                    suggestion="Use 'must_selected' to check counts mid-chain"
                )

        if depth:
            self.result.add_error(
                path,
                f"{depth} 'either' block(s) not closed with 'end'",
            )

    def _validate_step(self, step: Any, path: str) -> StepOp | None:
        """Validate one step entry and return its op, or None if unusable."""
        if isinstance(step, str):
            name, value, bare = step, None, True
        elif isinstance(step, dict) and len(step) == 1:
            name, value = next(iter(step.items()))
            bare = False
        else:
            self.result.add_error(
                path,
                "Must be an op name or a single-key mapping",
                value=step,
                suggestion="e.g. '- is_string' or '- at: /crew'"
            )
            return None

        if name not in self.VALID_OPS:
            self.result.add_error(
                path,
                f"Unknown op '{name}'",
                suggestion=f"Valid ops: {', '.join(sorted(self.VALID_OPS))}"
            )
            return None

        op = StepOp(name)
        if op in NO_ARG_OPS:
            if value is not None:
                self.result.add_error(path, f"'{name}' takes no arguments", value=value)
        elif bare:
            self.result.add_error(
                path,
                f"'{name}' requires an argument",
                suggestion=f"Write it as '{name}: <value>'"
            )
        else:
            self._validate_args(op, value, path)
        return op

    def _validate_args(self, op: StepOp, value: Any, path: str) -> None:
        if op in COUNT_OPS:
            if not _is_int(value) or value < 0:
                self.result.add_error(path, "Must be a non-negative integer", value=value)

        elif op in STRING_OPS:
            if not isinstance(value, str):
                self.result.add_error(path, "Must be a string", value=value)

        elif op == StepOp.IS_TYPE:
            if value not in self.VALID_TYPES:
                self.result.add_error(
                    path,
                    "Invalid JSON type",
                    value=value,
                    suggestion=f"Valid types: {', '.join(sorted(self.VALID_TYPES))}"
                )

        elif op == StepOp.IS_ONE_OF_TYPES:
            if not isinstance(value, list) or not value or any(t not in self.VALID_TYPES for t in value):
                self.result.add_error(
                    path,
                    "Must be a non-empty list of JSON types",
                    value=value,
                    suggestion=f"Valid types: {', '.join(sorted(self.VALID_TYPES))}"
                )

        elif op == StepOp.MATCHING:
            if not isinstance(value, dict) or not value:
                self.result.add_error(path, "Must be a non-empty mapping of key: value", value=value)

        elif op in MULTI_ARG_OPS:
            self._validate_multi_args(op, value, path)

    def _validate_multi_args(self, op: StepOp, value: Any, path: str) -> None:
        first = "key" if op == StepOp.CONTAINING else "path"
        required = 2 if op == StepOp.CONTAINING else 1

        if isinstance(value, list):
            if not required <= len(value) <= 2:
                self.result.add_error(
                    path,
                    f"Expected [{first}, value]" if required == 2 else f"Expected [{first}] or [{first}, value]",
                    value=value
                )
            elif not isinstance(value[0], str):
                self.result.add_error(path, f"'{first}' must be a string", value=value[0])

        elif isinstance(value, dict):
            unknown = set(value) - {first, "value"}
            if unknown:
                self.result.add_error(
                    path,
                    f"Unknown argument(s): {', '.join(sorted(unknown))}",
                    suggestion=f"Valid arguments: {first}, value"
                )
            if not isinstance(value.get(first), str):
                self.result.add_error(path, f"'{first}' must be a string", value=value.get(first))
            if required == 2 and "value" not in value:
                self.result.add_error(path, "'value' is required")

        elif required == 2 or not isinstance(value, str):
            self.result.add_error(
                path,
                f"Must be a list or a mapping with '{first}'",
                value=value
            )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
