"""
Evaluation state for a chain.

Holds the live candidate set, the queued steps and the results produced
by running them.
"""

from __future__ import annotations

from typing import Any

from .models import Step, StepResult

INDENT = "  "


class EvaluationState:
    """
    Ordered step queue plus the candidate set the steps operate on.

    Steps run in insertion order against the live candidate set; a step may
    replace the candidates for the steps after it. Every step runs even when
    an earlier one failed, so the trace is always complete.
    """

    def __init__(self, candidates: list[Any] | None = None):
        self.candidates: list[Any] = list(candidates or [])
        self.steps: list[Step] = []
        self.results: list[StepResult] = []

    def add(self, step: Step) -> None:
        self.steps.append(step)

    def apply_all(self) -> bool:
        """Run every queued step and return True iff all of them passed."""
        self.results = []
        for step in self.steps:
            self.results.append(step.run(self))
        return self.passed

    @property
    def passed(self) -> bool:
        return len(self.results) == len(self.steps) and all(r.passed for r in self.results)

    def failed_steps(self) -> list[tuple[Step, StepResult]]:
        return [(s, r) for s, r in zip(self.steps, self.results) if not r.passed]

    def pretty_trace(self, level: int = 0) -> list[str]:
        """Render one line per step, nesting branch traces below their step."""
        lines: list[str] = []
        pad = INDENT * level
        for step, result in zip(self.steps, self.results):
            lines.append(f"{pad}{result.icon} {step.description}: {result.message}")
            for branch in result.branches:
                icon = "✅" if branch.passed else "❌"
                lines.append(f"{INDENT * (level + 1)}{icon} {branch.label}")
                lines.extend(branch.state.pretty_trace(level + 2))
        return lines
