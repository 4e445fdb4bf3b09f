from __future__ import annotations

import pytest

from jsonchain import ChainAssertionError, ChainUsageError, JsonChain, expect, expect_text
from jsonchain.assertions import NOT_FINALIZED
from jsonchain.pytest_plugin import close_all


def test_scenario_engineer_named_dan(chain):
    doc = {"crew": [{"name": "Dan", "role": "engineer"}]}
    assert (
        chain(doc)
        .at("/crew").with_objects()
        .containing("role", "engineer")
        .must_contain("name", "Dan")
        .exactly(1)
    )


def test_steps_are_deferred_until_finalization(chain, reporter):
    c = chain({"x": 1}).at("/y").must_be(2)
    assert c.state.results == []
    assert c.candidates == [{"x": 1}]
    c.verify()
    assert len(c.state.results) == 2


def test_every_step_runs_after_failure(chain, reporter):
    chain({"x": 1}).at("/y").is_number().at("/x").must_be(1).verify()
    trace = reporter.outcomes[0].trace
    assert len(trace) == 4
    assert trace[0].startswith("❌ at /y")
    assert trace[1].startswith("❌ is_number")
    assert trace[3].startswith("✅ must_be 1")


def test_chain_reports_exactly_one_outcome(chain, reporter):
    chain().at("/crew").exactly(1)
    assert len(reporter.outcomes) == 1
    assert reporter.outcomes[0].passed


def test_finalizing_twice_is_a_usage_error(chain):
    c = chain({"x": 1})
    c.verify()
    with pytest.raises(ChainUsageError):
        c.verify()


def test_invalid_text_fails_without_running_steps(reporter):
    c = JsonChain.from_text('{"x": ', sink=reporter)
    assert c.at("/x").must_be(1).verify() is False

    outcome = reporter.outcomes[0]
    assert outcome.reason.startswith("invalid JSON")
    assert outcome.trace == []
    assert c.state.results == []


def test_null_text_is_valid(reporter):
    assert JsonChain.from_text("null", sink=reporter).is_null().exactly(1)


def test_nan_is_not_json(reporter):
    assert JsonChain.from_text("NaN", sink=reporter).verify() is False
    assert reporter.outcomes[0].reason.startswith("invalid JSON")


def test_bytes_input(reporter):
    assert JsonChain.from_text(b'{"a": [1, 2]}', sink=reporter).at("/a/-1").must_be(2).verify()


def test_close_reports_unfinalized_chain(chain, reporter):
    c = chain({"x": 1}).at("/x")
    c.close()
    assert reporter.outcomes[0].passed is False
    assert reporter.outcomes[0].reason == NOT_FINALIZED


def test_close_after_finalization_is_silent(chain, reporter):
    c = chain({"x": 1})
    c.verify()
    c.close()
    assert len(reporter.outcomes) == 1


def test_context_manager_catches_missing_finalizer(reporter):
    with JsonChain({"x": 1}, sink=reporter) as c:
        c.at("/x").must_be(1)
    assert reporter.outcomes[0].reason == NOT_FINALIZED


def test_context_manager_with_finalizer(reporter):
    with JsonChain({"x": 1}, sink=reporter) as c:
        c.at("/x").must_be(1).verify()
    assert [o.passed for o in reporter.outcomes] == [True]


def test_default_sink_raises_on_failure():
    with pytest.raises(ChainAssertionError) as excinfo:
        expect({"x": 1}, description="payload").at("/y").verify()
    assert excinfo.value.outcome.description == "payload"
    assert "at /y" in str(excinfo.value)


def test_default_sink_is_silent_on_success():
    assert expect_text('{"x": 1}').at("/x").must_be(1.0).verify() is True


def test_unfinalized_chain_raises_with_default_sink():
    c = expect({"x": 1})
    with pytest.raises(ChainAssertionError, match=NOT_FINALIZED):
        c.close()


def test_failure_diagnostic_lists_candidates(chain, reporter):
    chain().at("/crew").with_objects().containing("role", "pilot").must_contain("age", 99).verify()
    outcome = reporter.outcomes[0]
    text = str(outcome)
    assert "Reason: must_contain age=99" in text
    assert "Candidates (1):" in text
    assert '"name":"Mona"' in text


def test_max_value_length_truncates_diagnostics(chain, reporter):
    chain({"text": "x" * 500}, max_value_length=20).at("/text").must_be("y").verify()
    assert all(len(c) <= 20 for c in reporter.outcomes[0].candidates)


def test_fixture_chains_are_finalized(expect_json):
    expect_json({"status": "ok"}).at("/status").must_be("ok").verify()
    expect_json('{"status": "ok"}', text=True).at("/status").is_string().exactly(1)


def test_teardown_closes_every_chain_before_failing():
    first = expect({"x": 1}, description="first")
    second = expect({"x": 2}, description="second")
    done = expect({"x": 3})
    done.at("/x").must_be(3).verify()

    with pytest.raises(pytest.fail.Exception) as excinfo:
        close_all([first, second, done])

    assert first.finalized and second.finalized
    message = str(excinfo.value)
    assert "first" in message and "second" in message
    assert message.count(NOT_FINALIZED) == 2
