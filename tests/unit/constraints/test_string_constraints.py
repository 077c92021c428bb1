"""Unit tests for string constraints and their default messages."""

from __future__ import annotations

import re
from typing import Any

import pytest

from jsonv8n.constraints import (
    Constraint,
    StringCharacters,
    StringContains,
    StringEndsWith,
    StringExactLength,
    StringGreaterThan,
    StringGreaterThanOrEqual,
    StringLength,
    StringLessThan,
    StringLessThanOrEqual,
    StringLowercase,
    StringMaxLength,
    StringMinLength,
    StringNoControlCharacters,
    StringNormalizeUnicode,
    StringNotBlank,
    StringNotEmpty,
    StringPattern,
    StringPresetPattern,
    StringStartsWith,
    StringTrim,
    StringUppercase,
    StringValidCardNumber,
    StringValidEmail,
    StringValidISODate,
    StringValidISODatetime,
    StringValidJson,
    StringValidToken,
    StringValidUnicodeNormalization,
    StringValidUuid,
)
from jsonv8n.context import ValidatorContext
from jsonv8n.schema import ObjectValidator, PropertyValidator
from jsonv8n.validation import validate

_INVALID_CHARACTERS = "String value must not have invalid characters"


def _check(constraint: Constraint, value: Any) -> tuple[bool, str]:
    return constraint.check(value, ValidatorContext({"value": value}))


@pytest.mark.parametrize(
    ("constraint", "value", "message"),
    [
        (StringNotEmpty(), "", "String value must not be an empty string"),
        (StringNotBlank(), " \t\n", "String value must not be a blank string"),
        (StringNoControlCharacters(), "a\x00", "String value must not contain control characters"),
        (StringPattern(regexp=re.compile(r"^a")), "ba", "String value must have valid pattern"),
        (StringValidToken(tokens=["a", "b"]), "c", 'String value must be valid token - "a","b"'),
        (
            StringLength(minimum=1, maximum=255),
            "",
            "String value length must be between 1 (inclusive) and 255 (inclusive)",
        ),
        (StringLength(minimum=3), "ab", "String value length must be at least 3 characters"),
        (
            StringLength(minimum=3, exclusive_min=True),
            "abc",
            "String value length must be greater than 3 characters",
        ),
        (
            StringLength(minimum=1, maximum=3, exclusive_max=True),
            "abc",
            "String value length must be between 1 (inclusive) and 3 (exclusive)",
        ),
        (StringMinLength(value=2), "a", "String value length must be at least 2 characters"),
        (StringMaxLength(value=3), "abcd", "String value length must not exceed 3 characters"),
        (
            StringMaxLength(value=3, exclusive_max=True),
            "abc",
            "String value length must be less than 3 characters",
        ),
        (StringExactLength(value=2), "abc", "String value length must be 2 characters"),
        (StringLowercase(), "aB", "String value must contain only lowercase letters"),
        (StringUppercase(), "Ab", "String value must contain only uppercase letters"),
        (StringValidJson(), "{", "String value must be valid JSON"),
        (StringValidJson(disallow_array=True), "[1]", "String value must be valid JSON"),
        (StringContains(value="x"), "abc", "String must contain 'x'"),
        (StringContains(value="x", not_=True), "xa", "String must not contain 'x'"),
        (StringStartsWith(values=["a", "b"]), "cat", "String value must start with 'a','b'"),
        (StringEndsWith(value=".json"), "a.yaml", "String value must end with '.json'"),
        (StringValidUuid(), "not-a-uuid", "Value must be a valid UUID"),
        (
            StringValidUuid(specific_version=1),
            "0b9c7a3e-4f7b-4d3b-9c1e-6f1f6c2a9e10",
            "Value must be a valid UUID (version 1)",
        ),
        (
            StringValidUuid(min_version=5),
            "0b9c7a3e-4f7b-4d3b-9c1e-6f1f6c2a9e10",
            "Value must be a valid UUID (minimum version 5)",
        ),
        (StringValidEmail(), "me@localhost", "Value must be an email address"),
        (StringValidEmail(), "a..b@example.com", "Value must be an email address"),
        (
            StringValidISODate(),
            "2024-02-30",
            "Value must be a valid date string (format: YYYY-MM-DD)",
        ),
        (
            StringValidISODatetime(no_millis=True),
            "2024-02-29T10:00:00.123Z",
            "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss[Z|+-hh:mm])",
        ),
        (StringCharacters(allow_ranges=["a-z"]), "abC", _INVALID_CHARACTERS),
        (StringCharacters(disallow_ranges=["Nd"]), "a1", _INVALID_CHARACTERS),
    ],
)
def test_failures_report_default_message(constraint: Constraint, value: str, message: str) -> None:
    assert _check(constraint, value) == (False, message)


@pytest.mark.parametrize(
    ("constraint", "value"),
    [
        (StringNotEmpty(), "x"),
        (StringValidToken(tokens=["tea"], ignore_case=True), "TEA"),
        (StringLength(minimum=1, maximum=3), "abc"),
        (StringMinLength(value=2, exclusive_min=True), "abc"),
        (StringValidJson(disallow_array=True), '{"a": 1}'),
        (StringContains(values=["x", "b"], case_insensitive=True), "aBc"),
        (StringValidUuid(min_version=4), "0b9c7a3e-4f7b-4d3b-9c1e-6f1f6c2a9e10"),
        (StringValidEmail(), "me@example.com"),
        (StringValidEmail(allow_local=True), "me@localhost"),
        (StringValidEmail(allow_ip_address=True), "me@[127.0.0.1]"),
        (StringValidISODate(), "2024-02-29"),
        (StringValidISODatetime(), "2024-02-29T10:00:00.123Z"),
        (StringValidISODatetime(no_offset=True, no_millis=True), "2024-02-29T10:00:00"),
        (StringCharacters(allow_ranges=["L", "_"]), "é_a"),
    ],
)
def test_acceptable_values_pass(constraint: Constraint, value: str) -> None:
    assert _check(constraint, value) == (True, "")


def test_non_string_values_pass_unless_strict() -> None:
    assert _check(StringNotEmpty(), 5) == (True, "")
    assert _check(StringNotEmpty(strict=True), 5) == (
        False,
        "String value must not be an empty string",
    )


def test_custom_message_replaces_default() -> None:
    assert _check(StringNotEmpty(message="name required"), "") == (False, "name required")


def test_preset_patterns() -> None:
    assert _check(StringPresetPattern(preset="EAN13"), "4006381333931") == (True, "")
    assert _check(StringPresetPattern(preset="EAN13"), "4006381333932") == (
        False,
        "Value must be a valid EAN-13 code",
    )
    assert _check(StringPresetPattern(preset="nope"), "x") == (
        False,
        "Unknown preset pattern 'nope'",
    )


def test_trim_rewrites_working_value_only() -> None:
    data = {"code": "  abc "}
    validator = ObjectValidator(
        properties={
            "code": PropertyValidator(constraints=[StringTrim(), StringExactLength(value=3)])
        }
    )

    ok, violations = validate(validator, data)

    assert ok, violations
    assert data == {"code": "  abc "}


@pytest.mark.parametrize(
    ("constraint", "value", "ok"),
    [
        (StringValidCardNumber(), "4111111111111111", True),
        (StringValidCardNumber(), "4111111111111112", False),
        (StringValidCardNumber(), "0000000000", True),
        (StringValidCardNumber(), "000000000", False),
        (StringValidCardNumber(), "41111111111111110000", False),
        (StringValidCardNumber(), "4111-1111-1111-1111", False),
        (StringValidCardNumber(), "4111 1111 1111 1111", False),
        (StringValidCardNumber(allow_spaces=True), "4111 1111 1111 1111", True),
        (StringValidCardNumber(allow_spaces=True), "41111 111 1111 1111", False),
        (StringValidCardNumber(allow_spaces=True), "4111 1111 1111 1111 ", False),
    ],
)
def test_card_numbers(constraint: Constraint, value: str, ok: bool) -> None:
    assert _check(constraint, value)[0] is ok


def test_card_number_message_is_default_argument() -> None:
    assert _check(StringValidCardNumber(), "12") == (False, "Value must be a valid card number")
    assert _check(StringValidCardNumber(message="bad card"), "12") == (False, "bad card")


def test_unicode_normalization_forms() -> None:
    composed = "\u00e9"
    decomposed = "e\u0301"

    assert _check(StringValidUnicodeNormalization(), composed) == (True, "")
    assert _check(StringValidUnicodeNormalization(), decomposed) == (
        False,
        "String value must be correct normalization form NFC",
    )
    assert _check(StringValidUnicodeNormalization(form="nfd"), decomposed) == (True, "")
    assert _check(StringValidUnicodeNormalization(form="NFKD"), composed) == (
        False,
        "String value must be correct normalization form NFKD",
    )
    assert _check(StringValidUnicodeNormalization(form="bogus"), composed) == (True, "")


def test_normalize_unicode_rewrites_working_value_only() -> None:
    data = {"name": "e\u0301"}
    validator = ObjectValidator(
        properties={
            "name": PropertyValidator(
                constraints=[StringNormalizeUnicode(), StringExactLength(value=1)]
            )
        }
    )

    ok, violations = validate(validator, data)

    assert ok, violations
    assert data == {"name": "e\u0301"}


@pytest.mark.parametrize(
    ("constraint", "value", "ok"),
    [
        (StringGreaterThan(value="b"), "c", True),
        (StringGreaterThan(value="b"), "b", False),
        (StringGreaterThanOrEqual(value="b"), "b", True),
        (StringLessThan(value="b"), "a", True),
        (StringLessThan(value="b"), "C", True),
        (StringLessThan(value="b", case_insensitive=True), "C", False),
        (StringLessThanOrEqual(value="b", case_insensitive=True), "B", True),
        (StringGreaterThan(value="b"), 5, False),
    ],
)
def test_string_ordering(constraint: Constraint, value: Any, ok: bool) -> None:
    assert _check(constraint, value)[0] is ok


def test_string_ordering_messages() -> None:
    assert _check(StringGreaterThan(value="m"), "a") == (False, "Value must be greater than 'm'")
    assert _check(StringLessThanOrEqual(value="m"), "z") == (
        False,
        "Value must be less than or equal to 'm'",
    )
