"""Unit tests for constraint literals, lenient field matching and value coercion."""

from __future__ import annotations

import re
from typing import Any

import pytest

from jsonv8n.constraints import (
    ConditionalConstraint,
    ConstraintSet,
    Range,
    StringLength,
    StringNotEmpty,
    StringUppercase,
    StringValidCardNumber,
    StringValidToken,
    StringValidUnicodeNormalization,
)
from jsonv8n.errors import CompileError
from jsonv8n.expressions import PresenceExpression
from jsonv8n.tags.literals import abbreviate, build_constraint, coerce_value, match_field


def test_positional_arguments_fill_fields_in_order() -> None:
    constraint = build_constraint("&StringLength{1, 255}")

    assert constraint == StringLength(minimum=1, maximum=255)


def test_abbreviated_names_build_registered_constraints() -> None:
    assert build_constraint("&strvcn{allowSpaces}") == StringValidCardNumber(allow_spaces=True)
    assert build_constraint("&strvcn{'bad card'}") == StringValidCardNumber(message="bad card")
    assert build_constraint("&struninorm{'NFD'}") == StringValidUnicodeNormalization(form="NFD")


def test_named_arguments_match_leniently() -> None:
    constraint = build_constraint("&StringLength{min:2, max:5, excMax, msg:'too long'}")

    assert constraint == StringLength(
        minimum=2, maximum=5, exclusive_max=True, message="too long"
    )


def test_single_argument_goes_to_default_field_or_flag() -> None:
    assert build_constraint("&StringValidToken{['a','b']}") == StringValidToken(tokens=["a", "b"])
    assert build_constraint("&StringNotEmpty{strict}") == StringNotEmpty(strict=True)
    assert build_constraint("&StringNotEmpty{'custom'}") == StringNotEmpty(message="custom")


def test_abbreviated_constraint_names_resolve() -> None:
    assert build_constraint("&strne{}") == StringNotEmpty()
    assert isinstance(build_constraint("&range{1, 5}"), Range)


def test_conditional_forms_wrap_constraint() -> None:
    by_token = build_constraint("&[tea, coffee]StringNotEmpty{}")
    by_expression = build_constraint("&<a && !b>StringNotEmpty{}")

    assert isinstance(by_token, ConditionalConstraint)
    assert by_token.when == ["tea", "coffee"]
    assert by_token.constraint == StringNotEmpty()
    assert isinstance(by_expression, ConditionalConstraint)
    assert str(by_expression.others) == "a && !b"


def test_nested_constraint_lists() -> None:
    constraint = build_constraint(
        "&ConstraintSet{constraints:[&StringNotEmpty{}, &StringUppercase{}], message:'code'}"
    )

    assert constraint == ConstraintSet(
        constraints=[StringNotEmpty(), StringUppercase()], message="code"
    )


@pytest.mark.parametrize(
    ("literal", "message"),
    [
        ("&Nope{}", "tag v8n - contains unknown constraint 'Nope'"),
        (
            "&StringLength{foo:1}",
            "tag v8n - constraint 'StringLength{}' field 'foo' is unknown or not assignable",
        ),
        (
            "&StringLength{min:'x'}",
            "tag v8n - constraint 'StringLength{}' field 'min' cannot be assigned with value "
            "specified",
        ),
        (
            "&StringNotEmpty{message:unquoted}",
            "tag v8n - constraint 'StringNotEmpty{}' field 'message' cannot be assigned with value "
            "specified",
        ),
        ("&StringLength{1", "tag v8n - must specify constraints in the format '&name{}'"),
        ("&[a StringNotEmpty{}", "tag v8n - must specify conditional constraints in the format"),
        ("&<a & b>StringNotEmpty{}", 'tag v8n - invalid other properties expression "a & b"'),
        ("&StringLength{'x}", "tag v8n - constraint 'StringLength{}' - args parsing error"),
    ],
)
def test_literal_errors(literal: str, message: str) -> None:
    with pytest.raises(CompileError) as excinfo:
        build_constraint(literal)

    assert str(excinfo.value).startswith(message)


def test_match_field() -> None:
    fields = ["message", "stop", "strict", "exclusive_min", "exclusive_max", "ignore_case"]

    assert abbreviate("message") == "msg"
    assert match_field("msg", fields) == "message"
    assert match_field("Message", fields) == "message"
    assert match_field("ignoreCase", fields) == "ignore_case"
    assert match_field("excMax", fields) == "exclusive_max"
    assert match_field("exclusive", fields) is None
    assert match_field("st", fields) is None
    assert match_field("unknown", fields) is None


@pytest.mark.parametrize(
    ("text", "annotation", "expected"),
    [
        ("'it''s'", str, "it's"),
        ("42", int, 42),
        ("1.5", float, 1.5),
        ("T", bool, True),
        ("0", bool, False),
        ("null", int | None, None),
        ("[1, 2]", list[int], [1, 2]),
        ("['a', b]", list[str], ["a", "b"]),
        (
            "{'Coca Cola':coke, Fanta:'fanta'}",
            dict[str, str],
            {"Coca Cola": "coke", "Fanta": "fanta"},
        ),
        ('{"a": [1, true]}', Any, {"a": [1, True]}),
        ("'quoted'", Any, "quoted"),
    ],
)
def test_coerce_value(text: str, annotation: Any, expected: object) -> None:
    assert coerce_value(text, annotation) == expected


def test_coerce_pattern_and_expression() -> None:
    pattern = coerce_value("'^[A-Z]+$'", re.Pattern[str])
    expression = coerce_value("'a || b'", PresenceExpression)

    assert isinstance(pattern, re.Pattern)
    assert pattern.pattern == "^[A-Z]+$"
    assert isinstance(expression, PresenceExpression)
    assert expression.evaluate({"b": 1})
