"""
Result Reporting for Assertion Chains

This package provides the sinks that receive finalized chain outcomes,
and the run report used when checking a whole suite.

Usage:
    from jsonchain.reporting import Reporter

    reporter = Reporter()
    reporter.start_run()
    JsonChain(data, sink=reporter).at("/items").is_not_empty().verify()
    report = reporter.finish_run()
    print(report.summary())
"""

from .models import (
    ChainAssertionError,
    ChainOutcome,
    RunReport,
    RunStatus,
    compute_suite_hash,
)
from .reporter import RaisingSink, Reporter, ResultSink

__all__ = [
    # Models
    "ChainAssertionError",
    "ChainOutcome",
    "RunReport",
    "RunStatus",
    "compute_suite_hash",
    # Sinks
    "ResultSink",
    "RaisingSink",
    "Reporter",
]
