"""
Either / or_else / end branching.

A branch context groups alternative sub-chains forked from one owner chain.
When the owner runs, every branch is evaluated against its own copy of the
owner's candidates; the block passes if at least one branch passes, and the
owner continues with the union of the passing branches' candidates.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .models import BranchTrace, Step, StepResult
from .state import EvaluationState
from .values import equals

if TYPE_CHECKING:
    from .chain import JsonChain

logger = logging.getLogger(__name__)


@dataclass
class BranchContext:
    """An open either/or_else block: the chain it forked from and its branches so far."""
    owner: JsonChain
    branches: list[JsonChain] = field(default_factory=list)


def union_candidates(groups: list[list[Any]]) -> list[Any]:
    """
    Concatenate candidate lists, keeping the first occurrence of each candidate.

    Arrays and objects are the same candidate when they are the same node of
    the document. Scalars carry no node identity, so they are the same
    candidate when they are equal JSON values.
    """
    seen_nodes: set[int] = set()
    seen_scalars: list[Any] = []
    merged = []
    for group in groups:
        for value in group:
            if isinstance(value, (list, tuple, Mapping)):
                if id(value) in seen_nodes:
                    continue
                seen_nodes.add(id(value))
            else:
                if any(equals(value, other) for other in seen_scalars):
                    continue
                seen_scalars.append(value)
            merged.append(value)
    return merged


def branch_step(context: BranchContext) -> Step:
    """Build the step that evaluates every branch of a closed context."""

    def run(state: EvaluationState) -> StepResult:
        snapshot = list(state.candidates)
        traces = []
        survivors = []

        for index, branch in enumerate(context.branches):
            branch_state = branch.state
            branch_state.candidates = list(snapshot)
            passed = branch_state.apply_all()
            label = "either" if index == 0 else "or_else"
            logger.debug(f"Branch {index} ({label}) {'passed' if passed else 'failed'}")
            traces.append(BranchTrace(label=label, passed=passed, state=branch_state))
            if passed:
                survivors.append(branch_state.candidates)

        total = len(context.branches)
        if survivors:
            state.candidates = union_candidates(survivors)
            result = StepResult.passed_result(f"{len(survivors)} of {total} branches passed")
        else:
            result = StepResult.failed_result(f"none of {total} branches passed")
        result.branches = traces
        return result

    return Step("either", run)
