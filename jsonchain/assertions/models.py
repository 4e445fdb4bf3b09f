"""
Core data models for assertion chains.

This module defines the JSON type tags, the deferred step type and the
per-step results that an evaluation produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .state import EvaluationState


class JsonType(str, Enum):
    """Type tag of a JSON value."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class StepStatus(str, Enum):
    """Outcome of a single evaluated step."""
    PASSED = "passed"
    FAILED = "failed"


class _Missing:
    """Marker for an optional expected value that was not supplied."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Step:
    """
    A named, deferred unit of work.

    Attributes:
        description: Short label shown in traces, e.g. "at /crew"
        run: Function evaluated against the live state when the chain runs
    """
    description: str
    run: Callable[[EvaluationState], StepResult]


@dataclass
class BranchTrace:
    """Evaluation record of one branch inside an either/or_else block."""
    label: str
    passed: bool
    state: EvaluationState


@dataclass
class StepResult:
    """
    Result of running one step.

    Passing steps still carry a message so the trace reads well.
    Branch steps additionally carry the trace of every branch they ran.
    """
    status: StepStatus
    message: str
    branches: list[BranchTrace] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == StepStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == StepStatus.FAILED

    @property
    def icon(self) -> str:
        return "✅" if self.passed else "❌"

    def __str__(self) -> str:
        return f"{self.icon} {self.status.value.upper()}: {self.message}"

    @classmethod
    def passed_result(cls, message: str) -> StepResult:
        """Create a passing result."""
        return cls(status=StepStatus.PASSED, message=message)

    @classmethod
    def failed_result(cls, message: str) -> StepResult:
        """Create a failing result."""
        return cls(status=StepStatus.FAILED, message=message)


class ChainUsageError(RuntimeError):
    """Raised when a chain is driven in a way that cannot be reported as an outcome."""
