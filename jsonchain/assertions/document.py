"""
Document loading.

Wraps the parsed root of a JSON document together with any parse error,
so that malformed input becomes a reportable condition instead of an
exception at construction time.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JsonDocument:
    """A parsed JSON document shared by a chain and all of its branches."""
    root: Any = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @classmethod
    def from_value(cls, value: Any) -> JsonDocument:
        return cls(root=value)

    @classmethod
    def from_text(cls, text: str | bytes) -> JsonDocument:
        """
        Parse JSON text.

        NaN and Infinity literals are rejected; they are not JSON.
        """
        try:
            root = json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            logger.warning(f"Invalid JSON document: {e}")
            return cls(error=str(e))
        return cls(root=root)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {name}")
