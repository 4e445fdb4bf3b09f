"""
JSON value model.

Type classification and structural equality for plain Python JSON trees
(None, bool, int, float, str, list, dict).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .models import JsonType


def classify(value: Any) -> JsonType:
    """
    Return the JSON type tag of a value.

    bool is checked before int because bool is an int subclass in Python.

    Raises:
        TypeError: If the value is not part of a well-formed JSON tree
    """
    if value is None:
        return JsonType.NULL
    if isinstance(value, bool):
        return JsonType.BOOL
    if isinstance(value, (int, float)):
        return JsonType.NUMBER
    if isinstance(value, str):
        return JsonType.STRING
    if isinstance(value, (list, tuple)):
        return JsonType.ARRAY
    if isinstance(value, Mapping):
        return JsonType.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def equals(a: Any, b: Any) -> bool:
    """
    Compare two JSON values structurally.

    Numbers are compared as floats, so 2 == 2.0; integers too large for a
    float are compared exactly. Objects compare by key set and values
    regardless of key order; arrays compare element-wise in order.
    """
    type_a = classify(a)
    type_b = classify(b)
    if type_a != type_b:
        return False

    if type_a == JsonType.NUMBER:
        try:
            return float(a) == float(b)
        except OverflowError:
            # ints beyond float range compare exactly
            return a == b

    if type_a == JsonType.OBJECT:
        if set(a.keys()) != set(b.keys()):
            return False
        return all(equals(a[key], b[key]) for key in a)

    if type_a == JsonType.ARRAY:
        if len(a) != len(b):
            return False
        return all(equals(x, y) for x, y in zip(a, b))

    return a == b


def size_of(value: Any) -> int | None:
    """Size of an array, object or string; None for other types."""
    if classify(value) in (JsonType.ARRAY, JsonType.OBJECT, JsonType.STRING):
        return len(value)
    return None


def format_value(value: Any, max_length: int = 100) -> str:
    """Format a value for display as compact JSON, truncating if too long."""
    try:
        formatted = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        formatted = repr(value)

    if len(formatted) > max_length:
        return formatted[: max_length - 3] + "..."

    return formatted
