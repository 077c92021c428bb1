"""Unit tests for length, array and null constraints."""

from __future__ import annotations

from typing import Any

import pytest

from jsonv8n.constraints import (
    ArrayDistinctProperty,
    ArrayOf,
    ArrayUnique,
    Constraint,
    IsNotNull,
    IsNull,
    Length,
    LengthExact,
    NotEmpty,
    StringNotEmpty,
)
from jsonv8n.context import ValidatorContext
from jsonv8n.schema import ObjectValidator, PropertyValidator
from jsonv8n.validation import validate
from jsonv8n.values import JsonNumber


def _check(constraint: Constraint, value: Any) -> tuple[bool, str]:
    return constraint.check(value, ValidatorContext({"value": value}))


@pytest.mark.parametrize(
    ("constraint", "value", "message"),
    [
        (Length(minimum=2), [1], "Value length must be at least 2"),
        (
            Length(minimum=2, exclusive_min=True),
            {"a": 1, "b": 2},
            "Value length must be greater than 2",
        ),
        (
            Length(minimum=1, maximum=2),
            "abc",
            "Value length must be between 1 (inclusive) and 2 (inclusive)",
        ),
        (
            Length(minimum=1, maximum=2, exclusive_max=True),
            [1, 2],
            "Value length must be between 1 (inclusive) and 2 (exclusive)",
        ),
        (LengthExact(value=3), [1, 2], "Value length must be 3"),
        (NotEmpty(), {}, "Value must not be empty"),
        (NotEmpty(), "", "Value must not be empty"),
        (IsNull(), 0, "Value must be null"),
        (IsNotNull(), None, "Value cannot be null"),
    ],
)
def test_failures_report_default_message(constraint: Constraint, value: Any, message: str) -> None:
    assert _check(constraint, value) == (False, message)


@pytest.mark.parametrize("constraint", [Length(minimum=5), LengthExact(value=5), NotEmpty()])
def test_length_constraints_ignore_values_without_length(constraint: Constraint) -> None:
    assert _check(constraint, 12) == (True, "")
    assert _check(constraint, None) == (True, "")


def test_array_of_checks_element_kinds() -> None:
    assert _check(ArrayOf(type="string"), ["a", "b"]) == (True, "")
    assert _check(ArrayOf(type="string"), ["a", 1]) == (
        False,
        "Array elements must be of type string",
    )
    assert _check(ArrayOf(type="integer"), [1, None]) == (
        False,
        "Array elements must be of type integer",
    )
    assert _check(ArrayOf(type="integer", allow_null_element=True), [1, None, 2.0]) == (True, "")
    assert _check(ArrayOf(type="integer", allow_null_element=True), [1.5]) == (
        False,
        "Array elements must be of type integer or null",
    )
    assert _check(ArrayOf(type="string"), "not an array") == (True, "")


def test_array_of_element_constraints_report_indexed_paths() -> None:
    validator = ObjectValidator(
        properties={
            "tags": PropertyValidator(
                constraints=[ArrayOf(type="string", constraints=[StringNotEmpty()])]
            )
        }
    )

    ok, violations = validate(validator, {"tags": ["a", "", "c", ""]})

    assert not ok
    assert [(item.path, item.property, item.message) for item in violations] == [
        ("tags[1]", "", "String value must not be an empty string"),
        ("tags[3]", "", "String value must not be an empty string"),
    ]


def test_array_unique_compares_json_values() -> None:
    assert _check(ArrayUnique(), [1, 1.0]) == (False, "Array elements must be unique")
    assert _check(ArrayUnique(), [1, JsonNumber("1e0")]) == (False, "Array elements must be unique")
    assert _check(ArrayUnique(), [{"a": [1]}, {"a": [1]}]) == (
        False,
        "Array elements must be unique",
    )
    assert _check(ArrayUnique(), ["a", "A"]) == (True, "")
    assert _check(ArrayUnique(ignore_case=True), ["a", "A"]) == (
        False,
        "Array elements must be unique",
    )
    assert _check(ArrayUnique(), [None, None]) == (False, "Array elements must be unique")
    assert _check(ArrayUnique(ignore_nulls=True), [None, None, 1]) == (True, "")


def test_array_distinct_property() -> None:
    constraint = ArrayDistinctProperty(property_name="id")

    assert _check(constraint, [{"id": 1}, {"id": 2}, "skipped"]) == (True, "")
    assert _check(constraint, [{"id": 1}, {"id": 1}]) == (
        False,
        "Array elements must have distinct values for property 'id'",
    )
    assert _check(constraint, [{}, {"id": None}]) == (
        False,
        "Array elements must have distinct values for property 'id'",
    )
    constraint.ignore_nulls = True
    assert _check(constraint, [{}, {"id": None}]) == (True, "")
