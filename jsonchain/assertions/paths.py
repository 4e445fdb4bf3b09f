"""
Slash-delimited path resolution.

Paths look like "/crew/0/name". A leading slash anchors the path at the
document root; otherwise it is resolved against the value at hand.
Repeated and trailing slashes are ignored, and array segments accept
negative indexes counted from the end.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

INDEX_PATTERN = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class PathResolution:
    """Outcome of resolving a path: either a found value (possibly None) or not found."""
    found: bool
    value: Any = None

    @classmethod
    def hit(cls, value: Any) -> PathResolution:
        return cls(found=True, value=value)


NOT_FOUND = PathResolution(found=False)


def is_absolute(path: str) -> bool:
    return path.startswith("/")


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty segments."""
    return [segment for segment in path.strip("/").split("/") if segment]


def resolve(value: Any, path: str) -> PathResolution:
    """
    Resolve a path against a value.

    Never raises: any segment that cannot be applied yields NOT_FOUND.

    Example:
        resolve({"crew": ["Dan", "Mona"]}, "crew/-1")  # -> PathResolution.hit("Mona")
    """
    current = value
    for segment in split_path(path):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        elif isinstance(current, (list, tuple)) and INDEX_PATTERN.fullmatch(segment):
            index = int(segment)
            if not -len(current) <= index < len(current):
                return NOT_FOUND
            current = current[index]
        else:
            return NOT_FOUND
    return PathResolution.hit(current)


def resolve_from(candidate: Any, root: Any, path: str) -> PathResolution:
    """Resolve from the document root for absolute paths, else from the candidate."""
    return resolve(root if is_absolute(path) else candidate, path)
