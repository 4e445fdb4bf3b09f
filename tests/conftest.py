from __future__ import annotations

import pytest

from jsonchain import JsonChain, Reporter
from jsonchain.pytest_plugin import expect_json  # noqa: F401


CREW = {
    "crew": [
        {"name": "Dan", "role": "engineer", "age": 41},
        {"name": "Mona", "role": "pilot", "age": 35},
        {"name": "Taras", "role": "engineer", "age": 29},
    ],
    "ship": {"name": "Aurora", "decks": 3, "active": True, "captain": None},
}


@pytest.fixture
def reporter() -> Reporter:
    return Reporter()


@pytest.fixture
def chain(reporter):
    """Chain factory whose outcomes land in the `reporter` fixture instead of raising."""

    def _make(document=CREW, **kwargs) -> JsonChain:
        return JsonChain(document, sink=reporter, **kwargs)

    return _make
