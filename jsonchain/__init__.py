"""
jsonchain - Fluent Query-and-Assertion Chains for JSON Documents

This package provides components for checking the structure and content
of parsed JSON inside tests.

Subpackages:
    - assertions: Path resolution, value model and the assertion chain
    - reporting: Result sinks and run reports
    - checks: Declarative YAML check suites

Usage:
    from jsonchain import expect, expect_text

    doc = {"crew": [{"name": "Dan", "role": "engineer"}]}
    (expect(doc)
        .at("/crew").with_objects()
        .containing("role", "engineer")
        .must_contain("name", "Dan")
        .exactly(1))

    # Chains over JSON text report malformed input at finalization
    expect_text('{"status": "ok"}').at("/status").must_be("ok").verify()
"""

__version__ = "0.1.0"

# Re-export assertions for convenience
from .assertions import (
    # Models
    MISSING,
    ChainUsageError,
    JsonType,
    Step,
    StepResult,
    StepStatus,
    # Value model and paths
    classify,
    equals,
    NOT_FOUND,
    PathResolution,
    resolve,
    # Engine
    EvaluationState,
    JsonChain,
    expect,
    expect_text,
)

# Re-export reporting for convenience
from .reporting import (
    ChainAssertionError,
    ChainOutcome,
    RaisingSink,
    Reporter,
    ResultSink,
    RunReport,
    RunStatus,
)

# Re-export checks for convenience
from .checks import (
    CheckSuite,
    StepOp,
    ValidationResult,
    load_suite,
    run_suite,
    validate_suite_yaml,
)

__all__ = [
    # Package info
    "__version__",
    # Assertions - Models
    "MISSING",
    "ChainUsageError",
    "JsonType",
    "Step",
    "StepResult",
    "StepStatus",
    # Assertions - Value model and paths
    "classify",
    "equals",
    "NOT_FOUND",
    "PathResolution",
    "resolve",
    # Assertions - Engine
    "EvaluationState",
    "JsonChain",
    "expect",
    "expect_text",
    # Reporting
    "ChainAssertionError",
    "ChainOutcome",
    "RaisingSink",
    "Reporter",
    "ResultSink",
    "RunReport",
    "RunStatus",
    # Checks
    "CheckSuite",
    "StepOp",
    "ValidationResult",
    "load_suite",
    "run_suite",
    "validate_suite_yaml",
]
