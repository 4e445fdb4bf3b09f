"""
Declarative Check Suites

This package loads YAML suites describing assertion chains, validates
them and runs them against their documents.

Usage:
    from jsonchain.checks import load_suite, run_suite

    suite, result = load_suite("checks/crew.yaml")
    if not result.is_valid:
        print(result)

    reporter = run_suite(suite)
    print(reporter.get_summary())
"""

# Public API
from .loader import load_suite, validate_suite_yaml
from .runner import build_chain, run_check, run_suite

# Models (for type hints and isinstance checks)
from .models import (
    CheckCase,
    CheckSuite,
    Defaults,
    OpCall,
    StepOp,
)

# Validation (for custom validation if needed)
from .validation import SchemaValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "validate_suite_yaml",
    # Runner
    "build_chain",
    "run_check",
    "run_suite",
    # Models
    "CheckCase",
    "CheckSuite",
    "Defaults",
    "OpCall",
    "StepOp",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
]
