from __future__ import annotations

import json

import pytest

from jsonchain.assertions import JsonType, classify, equals, format_value


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, JsonType.NULL),
        (True, JsonType.BOOL),
        (False, JsonType.BOOL),
        (0, JsonType.NUMBER),
        (2.5, JsonType.NUMBER),
        ("", JsonType.STRING),
        ([], JsonType.ARRAY),
        ((1, 2), JsonType.ARRAY),
        ({}, JsonType.OBJECT),
    ],
)
def test_classify(value, expected):
    assert classify(value) == expected


def test_classify_rejects_non_json_values():
    with pytest.raises(TypeError):
        classify({1, 2})


def test_numbers_compare_as_floats():
    assert equals(200000, 200000.0)
    assert equals(2, 2.0)
    assert not equals(2, 2.5)


def test_integers_beyond_float_range_compare_exactly():
    huge = int("9" * 400)
    assert equals(huge, huge)
    assert not equals(huge, huge - 1)
    assert not equals(huge, 1)
    assert not equals(1.5, huge)


def test_huge_integer_document_is_a_step_failure(chain, reporter):
    document = json.loads('{"n": ' + "9" * 400 + "}")
    assert chain(document).at("/n").must_be(1).verify() is False
    assert chain(document).at("/n").must_be(int("9" * 400)).verify()
    assert len(reporter.outcomes) == 2


def test_numeric_string_is_not_a_number():
    assert not equals("200000", 200000)


def test_bool_is_not_a_number():
    assert not equals(True, 1)
    assert not equals(0, False)


def test_null_only_equals_null():
    assert equals(None, None)
    assert not equals(None, 0)
    assert not equals(None, "")


def test_objects_ignore_key_order():
    assert equals({"a": 1, "b": [1, 2]}, {"b": [1.0, 2], "a": 1.0})
    assert not equals({"a": 1}, {"a": 1, "b": 2})
    assert not equals({"a": 1}, {"b": 1})


def test_arrays_compare_in_order():
    assert equals([1, {"x": None}], [1.0, {"x": None}])
    assert not equals([1, 2], [2, 1])
    assert not equals([1, 2], [1, 2, 3])


def test_format_value_is_compact_json():
    assert format_value({"a": [1, None, True]}) == '{"a":[1,null,true]}'
    assert format_value("Dan") == '"Dan"'


def test_format_value_truncates():
    formatted = format_value("x" * 200, max_length=20)
    assert len(formatted) == 20
    assert formatted.endswith("...")
