"""
pytest integration.

Install with the ``pytest`` extra (``pip install jsonchain[pytest]``) and
enable it with ``pytest_plugins = ["jsonchain.pytest_plugin"]`` in a
top-level conftest.py. The ``expect_json`` fixture builds chains and closes
every one of them at teardown, so a chain that was never finalized fails
the test that created it.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import pytest

from .assertions import JsonChain
from .reporting import ChainAssertionError


def close_all(chains: list[JsonChain]) -> None:
    """
    Close every chain, then fail once for all chains that were never finalized.
    """
    failures: list[ChainAssertionError] = []
    for chain in chains:
        try:
            chain.close()
        except ChainAssertionError as e:
            failures.append(e)

    if failures:
        pytest.fail("\n\n".join(str(e) for e in failures), pytrace=False)


@pytest.fixture
def expect_json() -> Iterator[Callable[..., JsonChain]]:
    """
    Factory fixture for assertion chains.

    Example:
        def test_status(expect_json):
            expect_json({"status": "ok"}).at("/status").must_be("ok").verify()

            expect_json('{"status": "ok"}', text=True).at("/status").is_string().verify()
    """
    chains: list[JsonChain] = []

    def _make(document: Any, *, text: bool = False, **kwargs: Any) -> JsonChain:
        chain = JsonChain.from_text(document, **kwargs) if text else JsonChain(document, **kwargs)
        chains.append(chain)
        return chain

    yield _make

    close_all(chains)
