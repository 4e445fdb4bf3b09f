from __future__ import annotations

import json
import textwrap

from jsonchain.checks import (
    OpCall,
    StepOp,
    load_suite,
    run_suite,
    validate_suite_yaml,
)
from jsonchain.reporting import RunStatus

SUITE = textwrap.dedent(
    """
    version: 1
    name: crew api
    defaults:
      max_value_length: 60
    checks:
      - id: engineer
        description: Dan is the only engineer
        document:
          crew:
            - {name: Dan, role: engineer}
            - {name: Mona, role: pilot}
        steps:
          - at: /crew
          - with_objects
          - containing: [role, engineer]
          - must_contain: {path: name, value: Dan}
          - exactly: 1
      - id: role
        document_text: '{"role": "guest"}'
        steps:
          - at: /role
          - either
          - must_be: admin
          - or_else
          - must_be: user
          - end
      - id: types
        document: {tags: [a, null]}
        steps:
          - at: tags
          - select: "$[*]"
          - is_one_of_types: [string, "null"]
          - at_least: 2
    """
)


def _errors(yaml_text):
    suite, result = validate_suite_yaml(textwrap.dedent(yaml_text))
    assert suite is None
    return [str(e) for e in result.errors]


def test_valid_suite_parses():
    suite, result = validate_suite_yaml(SUITE)
    assert result.is_valid, str(result)
    assert suite.name == "crew api"
    assert suite.defaults.max_value_length == 60
    assert [c.id for c in suite.checks] == ["engineer", "role", "types"]

    steps = suite.checks[0].steps
    assert steps[0] == OpCall(op=StepOp.AT, args=["/crew"])
    assert steps[1] == OpCall(op=StepOp.WITH_OBJECTS)
    assert steps[2] == OpCall(op=StepOp.CONTAINING, args=["role", "engineer"])
    assert steps[3] == OpCall(op=StepOp.MUST_CONTAIN, kwargs={"path": "name", "value": "Dan"})
    assert steps[4].is_finalizer
    assert suite.checks[2].steps[2] == OpCall(op=StepOp.IS_ONE_OF_TYPES, args=[["string", "null"]])


def test_run_suite_records_each_check():
    suite, _ = validate_suite_yaml(SUITE)
    reporter = run_suite(suite)
    report = reporter.report_data

    assert [o.check_id for o in report.outcomes] == ["engineer", "role", "types"]
    assert [o.passed for o in report.outcomes] == [True, False, True]
    assert report.status == RunStatus.FAILED
    assert report.outcomes[0].description == "Dan is the only engineer"
    assert report.outcomes[1].reason == "either: none of 2 branches passed"


def test_missing_top_level_fields():
    errors = _errors("version: 1\nname: x\n")
    assert any("Required field 'checks' is missing" in e for e in errors)


def test_unknown_op_is_rejected():
    errors = _errors(
        """
        version: 1
        name: x
        checks:
          - id: a
            document: {}
            steps: [must_frobnicate]
        """
    )
    assert any("Unknown op 'must_frobnicate'" in e for e in errors)


def test_finalizer_must_be_last():
    errors = _errors(
        """
        version: 1
        name: x
        checks:
          - id: a
            document: {}
            steps: [verify, is_object]
        """
    )
    assert any("Finalizer 'verify' must be the last step" in e for e in errors)


def test_unbalanced_branches_are_rejected():
    errors = _errors(
        """
        version: 1
        name: x
        checks:
          - id: a
            document: {}
            steps: [or_else, either, is_object]
        """
    )
    assert any("'or_else' without a preceding 'either'" in e for e in errors)
    assert any("1 'either' block(s) not closed with 'end'" in e for e in errors)


def test_check_level_errors():
    errors = _errors(
        """
        version: 1
        name: x
        checks:
          - id: a
            document: {}
            document_text: "{}"
            steps: [is_object]
          - id: a
            steps:
              - has_size: -1
              - at: 3
              - is_type: integer
              - containing: [role]
              - with_objects: yes
              - must_be
        """
    )
    joined = "\n".join(errors)
    assert "Exactly one document source is required, got 2" in joined
    assert "Exactly one document source is required, got 0" in joined
    assert "Duplicate check id 'a'" in joined
    assert "Must be a non-negative integer" in joined
    assert "Must be a string" in joined
    assert "Invalid JSON type" in joined
    assert "Expected [key, value]" in joined
    assert "'with_objects' takes no arguments" in joined
    assert "'must_be' requires an argument" in joined


def test_defaults_are_validated():
    errors = _errors(
        """
        version: 1
        name: x
        defaults: {max_value_length: 3, colour: red}
        checks:
          - id: a
            document: {}
            steps: [is_object]
        """
    )
    joined = "\n".join(errors)
    assert "Must be an integer >= 10" in joined
    assert "Unknown defaults field" in joined


def test_non_mapping_yaml_is_rejected():
    suite, result = validate_suite_yaml("- just\n- a list\n")
    assert suite is None
    assert not result.is_valid


def test_load_suite_resolves_document_file(tmp_path):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "ship.json").write_text(json.dumps({"ship": {"decks": 3}}))
    suite_file = tmp_path / "suite.yaml"
    suite_file.write_text(
        textwrap.dedent(
            """
            version: 1
            name: files
            checks:
              - id: decks
                document_file: data/ship.json
                steps:
                  - at: /ship/decks
                  - must_be: 3.0
              - id: missing
                document_file: data/nope.json
                steps: [is_object]
            """
        )
    )

    suite, result = load_suite(suite_file)
    assert result.is_valid, str(result)
    assert suite.checks[0].document_file == tmp_path / "data" / "ship.json"

    report = run_suite(suite).report_data
    assert report.outcomes[0].passed
    assert not report.outcomes[1].passed
    assert report.outcomes[1].reason.startswith("cannot read document file")


def test_load_suite_missing_file(tmp_path):
    suite, result = load_suite(tmp_path / "absent.yaml")
    assert suite is None
    assert "File not found" in str(result)


def test_invalid_document_text_fails_check():
    suite, _ = validate_suite_yaml(textwrap.dedent(
        """
        version: 1
        name: x
        checks:
          - id: broken
            document_text: '{"a": '
            steps: [is_object]
        """
    ))
    outcome = run_suite(suite).report_data.outcomes[0]
    assert not outcome.passed
    assert outcome.reason.startswith("invalid JSON")
