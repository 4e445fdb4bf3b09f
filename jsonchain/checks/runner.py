"""
Suite runner.

Builds one assertion chain per check, replays its ops and records every
outcome in a Reporter.
"""

from __future__ import annotations

import logging

from ..assertions import JsonChain
from ..reporting import ChainOutcome, Reporter
from .models import CheckCase, CheckSuite

logger = logging.getLogger(__name__)


def build_chain(check: CheckCase, suite: CheckSuite, reporter: Reporter) -> JsonChain:
    """Create the chain for a check from whichever document source it names."""
    options = {
        "description": check.description or check.id,
        "sink": reporter,
        "max_value_length": suite.defaults.max_value_length,
    }
    if check.document_file is not None:
        return JsonChain.from_text(check.document_file.read_bytes(), **options)
    if check.document_text is not None:
        return JsonChain.from_text(check.document_text, **options)
    return JsonChain(check.document, **options)


def run_check(check: CheckCase, suite: CheckSuite, reporter: Reporter) -> None:
    """Run a single check, reporting its outcome to the reporter."""
    reporter.begin_check(check.id)
    try:
        chain = build_chain(check, suite, reporter)
    except OSError as e:
        logger.error(f"Cannot read document for check {check.id}: {e}")
        reporter.report(ChainOutcome(
            description=check.description or check.id,
            passed=False,
            reason=f"cannot read document file: {e}",
        ))
        return

    current = chain
    for call in check.steps:
        logger.debug(f"[{check.id}] {call.op.value} {call.args or ''}{call.kwargs or ''}")
        result = getattr(current, call.op.value)(*call.args, **call.kwargs)
        if call.is_finalizer:
            return
        current = result

    current.verify()


def run_suite(suite: CheckSuite, reporter: Reporter | None = None) -> Reporter:
    """Run every check in a suite and return the reporter with the results."""
    reporter = reporter or Reporter.from_suite(suite)
    reporter.start_run()

    for check in suite.checks:
        try:
            run_check(check, suite, reporter)
        except Exception as e:
            logger.exception(f"Check {check.id} raised")
            reporter.report(ChainOutcome(
                description=check.description or check.id,
                passed=False,
                reason=f"{type(e).__name__}: {e}",
            ))

    reporter.begin_check(None)
    reporter.finish_run()
    return reporter
