"""
Outcome and report data models.

This module defines the record a finalized chain hands to its result sink,
and the run report that aggregates outcomes across a check suite.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class ChainOutcome:
    """
    Terminal outcome of one assertion chain.

    Attributes:
        description: What was being checked, e.g. "response body"
        passed: Whether every step passed
        reason: One-line cause of failure (empty when passed)
        trace: One line per evaluated step, branches nested below their step
        candidates: Final surviving candidates rendered as text
        check_id: Suite check id, when the chain came from a YAML suite
    """
    description: str
    passed: bool
    reason: str = ""
    trace: list[str] = field(default_factory=list)
    candidates: list[str] = field(default_factory=list)
    check_id: str | None = None

    def __str__(self) -> str:
        """Format as a multi-line diagnostic."""
        if self.passed:
            return f"✅ PASS: {self.description}"

        lines = [f"❌ FAIL: {self.description}"]
        if self.reason:
            lines.append(f"   Reason: {self.reason}")
        if self.trace:
            lines.append("   Trace:")
            lines.extend(f"     {line}" for line in self.trace)
        lines.append(f"   Candidates ({len(self.candidates)}):")
        lines.extend(f"     {c}" for c in self.candidates)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "check_id": self.check_id,
            "description": self.description,
            "passed": self.passed,
            "reason": self.reason,
            "trace": self.trace,
            "candidates": self.candidates,
        }


class ChainAssertionError(AssertionError):
    """Raised by the default sink when a chain fails; carries the outcome."""

    def __init__(self, outcome: ChainOutcome):
        super().__init__(str(outcome))
        self.outcome = outcome


@dataclass
class RunReport:
    """
    Complete record of a check suite run.

    Contains metadata about the run, the suite being checked,
    and the outcome of each chain.
    """
    # Run identification
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Suite info
    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""

    status: RunStatus = RunStatus.PENDING
    outcomes: list[ChainOutcome] = field(default_factory=list)

    # Summary stats
    total_checks: int = 0
    passed_checks: int = 0
    failed_checks: int = 0

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000

        self.total_checks = len(self.outcomes)
        self.passed_checks = sum(1 for o in self.outcomes if o.passed)
        self.failed_checks = self.total_checks - self.passed_checks
        self.status = RunStatus.FAILED if self.failed_checks else RunStatus.PASSED

    def add_outcome(self, outcome: ChainOutcome) -> None:
        self.outcomes.append(outcome)

    def get_outcome(self, check_id: str) -> ChainOutcome | None:
        for outcome in self.outcomes:
            if outcome.check_id == check_id:
                return outcome
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "suite_name": self.suite_name,
            "suite_version": self.suite_version,
            "suite_hash": self.suite_hash,
            "status": self.status.value,
            "summary": {
                "total": self.total_checks,
                "passed": self.passed_checks,
                "failed": self.failed_checks,
            },
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str, ensure_ascii=False)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "═══════════════════════════════════════════════════════════",
            f"  Run Report: {self.suite_name}",
            "═══════════════════════════════════════════════════════════",
            f"  Run ID:     {self.run_id}",
            f"  Status:     {_status_icon(self.status)} {self.status.value.upper()}",
            f"  Duration:   {self.duration_ms:.0f}ms" if self.duration_ms else "  Duration:   N/A",
            "───────────────────────────────────────────────────────────",
            f"  Checks: {self.passed_checks} passed, {self.failed_checks} failed",
            "───────────────────────────────────────────────────────────",
        ]

        for outcome in self.outcomes:
            icon = "✅" if outcome.passed else "❌"
            label = outcome.check_id or outcome.description
            lines.append(f"  {icon} [{label}] {outcome.description}")
            if not outcome.passed:
                lines.append(f"      └─ {outcome.reason}")
                lines.extend(f"         {line}" for line in outcome.trace)

        lines.append("═══════════════════════════════════════════════════════════")
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a hash of the suite for tracking/versioning.

    Returns:
        SHA-256 hash (first 12 chars)
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()[:12]


def _status_icon(status: RunStatus) -> str:
    return {
        RunStatus.PENDING: "⏳",
        RunStatus.RUNNING: "🔄",
        RunStatus.PASSED: "✅",
        RunStatus.FAILED: "❌",
    }.get(status, "❓")
