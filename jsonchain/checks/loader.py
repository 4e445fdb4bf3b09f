"""
Suite loader for declarative check suites.

This module provides the public API for loading and validating
suite files from disk or YAML strings.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from .models import CheckSuite
from .parser import SchemaParser
from .validation import SchemaValidator, ValidationResult


def load_suite(path: str | Path) -> tuple[CheckSuite | None, ValidationResult]:
    """
    Load and validate a check suite from a YAML file.

    Relative document_file entries are resolved against the suite's directory.

    Returns:
        Tuple of (CheckSuite or None, ValidationResult)
        If validation fails, CheckSuite will be None.

    Example:
        suite, result = load_suite("checks/crew.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
    """
    path = Path(path)

    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    return _validate_and_parse(data, str(path), base_dir=path.parent)


def validate_suite_yaml(
    yaml_string: str,
    base_dir: str | Path | None = None,
) -> tuple[CheckSuite | None, ValidationResult]:
    """
    Validate a check suite from a YAML string (useful for testing).

    Returns:
        Tuple of (CheckSuite or None, ValidationResult)
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error("yaml", f"Invalid YAML syntax: {e}")
        return None, result

    return _validate_and_parse(data, "yaml", base_dir=base_dir)


def _validate_and_parse(
    data: object,
    source: str,
    base_dir: str | Path | None,
) -> tuple[CheckSuite | None, ValidationResult]:
    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Content must be a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    validator = SchemaValidator(data)
    result = validator.validate()

    if not result.is_valid:
        return None, result

    return SchemaParser(data, base_dir=base_dir).parse(), result
