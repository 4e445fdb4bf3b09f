from __future__ import annotations

import json

import pytest

from jsonchain.assertions.branching import union_candidates

ITEMS = {
    "items": [
        {"id": "A", "g": 1},
        {"id": "B", "g": 1, "h": 1},
        {"id": "C", "h": 1},
    ]
}


def _ids(candidates):
    return [c["id"] for c in candidates]


def test_union_dedups_nodes_in_first_seen_order():
    a, b, c = {"id": "A"}, {"id": "B"}, {"id": "C"}
    assert union_candidates([[a, b], [b, c]]) == [a, b, c]
    assert union_candidates([[b, c], [a, b]]) == [b, c, a]


def test_union_keeps_equal_but_distinct_nodes():
    first, second = {"x": 1}, {"x": 1}
    assert len(union_candidates([[first], [second]])) == 2


def test_union_dedups_scalars_by_value():
    assert union_candidates([["A", "B"], ["B", "C"]]) == ["A", "B", "C"]
    assert union_candidates([[1, 2.0], [1.0, 2, True]]) == [1, 2.0, True]


@pytest.mark.parametrize("value", [1, 100000, 10**30, None, True, "x" * 50])
def test_scalar_union_does_not_depend_on_object_identity(chain, value):
    document = json.loads(json.dumps({"a": [{"v": value}, {"v": value}]}))
    c = chain(document)
    assert (
        c.at("/a").with_objects().at("v").must_selected(2)
        .either().must_be(value).end()
        .exactly(1)
    )


def test_passing_branches_are_unioned(chain):
    c = chain(ITEMS)
    assert (
        c.at("/items").with_objects()
        .either().containing("g", 1)
        .or_else().containing("h", 1)
        .end()
        .exactly(3)
    )
    assert _ids(c.candidates) == ["A", "B", "C"]


def test_failed_branch_candidates_are_excluded(chain):
    c = chain(ITEMS)
    assert (
        c.at("/items").with_objects()
        .either().containing("g", 1).must_selected(5)
        .or_else().containing("h", 1)
        .end()
        .exactly(2)
    )
    assert _ids(c.candidates) == ["B", "C"]


def test_one_passing_branch_is_enough(chain, reporter):
    c = chain({"role": "user"})
    assert c.at("/role").either().must_be("admin").or_else().must_be("user").end().verify()

    trace = reporter.outcomes[0].trace
    assert "✅ either: 1 of 2 branches passed" in trace
    assert "  ❌ either" in trace
    assert "  ✅ or_else" in trace


def test_all_branches_failing_fails_the_chain(chain, reporter):
    c = chain({"role": "guest"})
    assert c.at("/role").either().must_be("admin").or_else().must_be("user").end().verify() is False

    outcome = reporter.outcomes[0]
    assert outcome.reason == "either: none of 2 branches passed"
    assert outcome.trace == [
        "✅ at /role: selected 1 candidate",
        "❌ either: none of 2 branches passed",
        "  ❌ either",
        '    ❌ must_be "admin": [0] expected "admin", got "guest"',
        "  ❌ or_else",
        '    ❌ must_be "user": [0] expected "user", got "guest"',
    ]
    # Left untouched for diagnostics
    assert outcome.candidates == ['"guest"']


def test_branches_see_a_snapshot_of_the_owner(chain):
    c = chain({"user": {"name": "Dan", "tags": ["a", "b"]}})
    assert (
        c.at("/user")
        .either().at("tags").has_size(2)
        .or_else().at("name").must_be("Mona")
        .end()
        .is_array()
        .exactly(1)
    )
    assert c.candidates == [["a", "b"]]


def test_absolute_paths_inside_branches_use_document_root(chain):
    c = chain({"a": {"b": 1}, "flag": True})
    assert c.at("/a").either().at("/flag").must_be(True).end().is_bool().exactly(1)


def test_nested_branches(chain, reporter):
    doc = {"user": {"role": "admin", "level": 3}}
    c = chain(doc)
    passed = (
        c.at("/user")
        .either()
            .at("role").must_be("guest")
        .or_else()
            .either().must_contain("level", 1)
            .or_else().must_contain("level", 3)
            .end()
            .must_contain("role", "admin")
        .end()
        .exactly(1)
    )
    assert passed
    assert c.candidates == [doc["user"]]

    trace = reporter.outcomes[0].trace
    assert "    ✅ either: 1 of 2 branches passed" in trace
    assert "        ✅ must_contain level=3: contained" in trace


def test_or_else_without_either_is_reported(chain, reporter):
    c = chain({"a": 1})
    assert c.at("/a").or_else().must_be(1).verify() is False
    assert "or_else() without either()" in reporter.outcomes[0].reason


def test_end_without_either_is_reported(chain, reporter):
    assert chain({"a": 1}).end().verify() is False
    assert "end() without either()" in reporter.outcomes[0].reason


def test_unclosed_either_fails_finalization(chain, reporter):
    c = chain({"a": 1})
    assert c.at("/a").either().must_be(1).verify() is False
    assert reporter.outcomes[0].reason == "1 either() without end()"


def test_branch_chains_know_their_origin(chain):
    c = chain({"a": 1})
    branch = c.either()
    nested = branch.either()
    assert branch.is_branch and nested.is_branch
    assert nested.origin is c
    assert (branch.depth, nested.depth) == (1, 2)
    nested.end().end().verify()
