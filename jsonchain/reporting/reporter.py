"""
Result sinks.

A finalized chain reports exactly one ChainOutcome to a sink. The default
sink raises on failure so chains work inside plain test functions; the
Reporter sink collects outcomes into a RunReport instead.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from .models import ChainAssertionError, ChainOutcome, RunReport, compute_suite_hash

if TYPE_CHECKING:
    from ..checks import CheckSuite

logger = logging.getLogger(__name__)


class ResultSink(ABC):
    """Receives the terminal outcome of every finalized chain."""

    @abstractmethod
    def report(self, outcome: ChainOutcome) -> None:
        pass


class RaisingSink(ResultSink):
    """Raise ChainAssertionError for failed outcomes; ignore passing ones."""

    def report(self, outcome: ChainOutcome) -> None:
        if not outcome.passed:
            raise ChainAssertionError(outcome)


class Reporter(ResultSink):
    """
    Collects chain outcomes into a run report.

    Example:
        reporter = Reporter.from_suite(suite)
        reporter.start_run()

        JsonChain({"x": 1}, sink=reporter).at("/x").must_be(1).verify()

        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: RunReport | None = None):
        self.report_data = report or RunReport()
        self._current_check: str | None = None

    @classmethod
    def from_suite(cls, suite: CheckSuite, run_id: str | None = None) -> Reporter:
        """Create a Reporter for a parsed check suite."""
        report = RunReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(suite.to_dict()),
        )
        if run_id:
            report.run_id = run_id
        return cls(report)

    def start_run(self) -> None:
        self.report_data.start()

    def finish_run(self) -> RunReport:
        """Mark the run as completed and return the final report."""
        self.report_data.complete()
        return self.report_data

    def begin_check(self, check_id: str | None) -> None:
        """Attribute the next reported outcomes to a suite check."""
        self._current_check = check_id

    def report(self, outcome: ChainOutcome) -> None:
        if outcome.check_id is None:
            outcome.check_id = self._current_check
        logger.debug(f"Recorded outcome for {outcome.check_id or outcome.description}: {outcome.passed}")
        self.report_data.add_outcome(outcome)

    @property
    def outcomes(self) -> list[ChainOutcome]:
        return self.report_data.outcomes

    def save_json(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report_data.to_json())

    def get_summary(self) -> str:
        return self.report_data.summary()
