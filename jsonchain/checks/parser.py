"""
Schema parser for check suites.

This module converts validated YAML data into typed CheckSuite structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .models import (
    MULTI_ARG_OPS,
    NO_ARG_OPS,
    CheckCase,
    CheckSuite,
    Defaults,
    OpCall,
    StepOp,
)


class SchemaParser:
    """Parses and converts validated YAML to typed CheckSuite structure."""

    def __init__(self, data: dict[str, Any], base_dir: str | Path | None = None):
        self.data = data
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def parse(self) -> CheckSuite:
        """Convert validated data to typed CheckSuite."""
        return CheckSuite(
            version=self.data["version"],
            name=self.data["name"],
            defaults=self._parse_defaults(),
            checks=[self._parse_check(check) for check in self.data["checks"]],
        )

    def _parse_defaults(self) -> Defaults:
        defaults = self.data.get("defaults") or {}
        return Defaults(
            max_value_length=defaults.get("max_value_length", 100),
        )

    def _parse_check(self, check: dict) -> CheckCase:
        document_file = check.get("document_file")
        if document_file is not None:
            document_file = Path(document_file)
            if self.base_dir is not None and not document_file.is_absolute():
                document_file = self.base_dir / document_file

        return CheckCase(
            id=check["id"],
            description=check.get("description"),
            document=check.get("document"),
            document_text=check.get("document_text"),
            document_file=document_file,
            steps=[self._parse_step(step) for step in check["steps"]],
        )

    def _parse_step(self, step: str | dict) -> OpCall:
        if isinstance(step, str):
            return OpCall(op=StepOp(step))

        name, value = next(iter(step.items()))
        op = StepOp(name)

        if op in NO_ARG_OPS:
            return OpCall(op=op)

        if op in MULTI_ARG_OPS:
            if isinstance(value, list):
                return OpCall(op=op, args=list(value))
            if isinstance(value, dict):
                return OpCall(op=op, kwargs=dict(value))

        return OpCall(op=op, args=[value])
