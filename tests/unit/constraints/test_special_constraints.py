"""Unit tests for constraint sets, conditional constraints and condition setters."""

from __future__ import annotations

from typing import Any

from jsonv8n.constraints import (
    ArrayOf,
    ConditionalConstraint,
    ConstraintSet,
    CustomConstraint,
    FailingConstraint,
    FailWhen,
    Negative,
    SetConditionFrom,
    SetConditionIf,
    StringNotEmpty,
    StringUppercase,
)
from jsonv8n.context import ValidatorContext
from jsonv8n.expressions import parse_expression
from jsonv8n.schema import ObjectValidator, PropertyValidator
from jsonv8n.tags.parser import parse_tag
from jsonv8n.validation import validate


def _messages(validator: ObjectValidator, value: Any) -> list[tuple[str, str]]:
    _, violations = validate(validator, value)
    return [(item.property, item.message) for item in violations]


def _never(value: Any, ctx: ValidatorContext) -> tuple[bool, str]:
    return False, ""


def test_constraint_set_reports_first_failing_child_message() -> None:
    constraint = ConstraintSet(constraints=[StringNotEmpty(), StringUppercase()])

    assert constraint.check("ABC", ValidatorContext("ABC")) == (True, "")
    assert constraint.check("abc", ValidatorContext("abc")) == (
        False,
        "String value must contain only uppercase letters",
    )


def test_constraint_set_falls_back_to_undisclosed_message() -> None:
    constraint = ConstraintSet(constraints=[StringNotEmpty(), CustomConstraint(_never)])

    assert constraint.check("x", ValidatorContext("x")) == (
        False,
        "Constraint set must pass all of 2 undisclosed validations",
    )


def test_constraint_set_one_of() -> None:
    constraint = ConstraintSet(constraints=[StringNotEmpty(), Negative()], one_of=True)

    assert constraint.check("x", ValidatorContext("x")) == (True, "")
    assert constraint.check("", ValidatorContext("")) == (True, "")
    constraint = ConstraintSet(
        constraints=[StringUppercase(), FailingConstraint()], one_of=True
    )
    assert constraint.check("x", ValidatorContext("x")) == (
        False,
        "Constraint set must pass one of 2 undisclosed validations",
    )
    assert ConstraintSet(one_of=True).check(1, ValidatorContext(1)) == (True, "")


def test_custom_constraint_messages() -> None:
    assert CustomConstraint(_never).check(1, ValidatorContext(1)) == (False, "")
    assert CustomConstraint(_never, message="nope").check(1, ValidatorContext(1)) == (
        False,
        "nope",
    )
    assert CustomConstraint(lambda value, ctx: (value > 0, "too small")).check(
        0, ValidatorContext(0)
    ) == (False, "too small")


def test_silent_custom_constraint_reports_generic_failure_when_walked() -> None:
    validator = ObjectValidator(
        properties={
            "a": PropertyValidator(constraints=[CustomConstraint(_never)]),
            "b": PropertyValidator(
                constraints=[ArrayOf(type="number", constraints=[CustomConstraint(_never)])]
            ),
            "c": PropertyValidator(
                constraints=[ConstraintSet(constraints=[CustomConstraint(_never)])]
            ),
        }
    )

    assert _messages(validator, {"a": 1, "b": [2], "c": 3}) == [
        ("a", "Validation failed"),
        ("", "Validation failed"),
        ("c", "Constraint set must pass all of 1 undisclosed validations"),
    ]


def test_conditional_constraint_applies_only_when_token_set() -> None:
    validator = ObjectValidator(
        properties={
            "kind": PropertyValidator(constraints=[SetConditionFrom()]),
            "amount": PropertyValidator(
                constraints=[ConditionalConstraint(when=["refund"], constraint=Negative())]
            ),
        }
    )

    assert _messages(validator, {"kind": "refund", "amount": 5}) == [
        ("amount", "Value must be negative")
    ]
    assert _messages(validator, {"kind": "sale", "amount": 5}) == []


def test_conditional_constraint_with_others_expression() -> None:
    validator = ObjectValidator(
        properties={
            "discount": PropertyValidator(),
            "price": PropertyValidator(
                constraints=[
                    ConditionalConstraint(
                        others=parse_expression("discount"), constraint=Negative()
                    )
                ]
            ),
        }
    )

    assert _messages(validator, {"price": 5}) == []
    assert _messages(validator, {"price": 5, "discount": 1}) == [
        ("price", "Value must be negative")
    ]


def test_fail_when_condition_holds() -> None:
    validator = ObjectValidator(
        properties={
            "flag": PropertyValidator(constraints=[SetConditionFrom()]),
            "x": PropertyValidator(constraints=[FailWhen(conditions=["bad"])]),
        }
    )

    assert _messages(validator, {"flag": "bad", "x": 1}) == [("x", "Validation failed")]
    assert _messages(validator, {"flag": "good", "x": 1}) == []


def test_failing_constraint_stop_all_halts_validation() -> None:
    validator = ObjectValidator(
        properties={
            "a": PropertyValidator(constraints=[FailingConstraint(message="a", stop_all=True)]),
            "b": PropertyValidator(constraints=[FailingConstraint(message="b")]),
        }
    )

    assert _messages(validator, {"a": 1, "b": 2}) == [("a", "a")]


def test_set_condition_from_maps_booleans_and_prefixes() -> None:
    validator = ObjectValidator(
        properties={
            "enabled": PropertyValidator(
                constraints=[SetConditionFrom(prefix="enabled_", mapping={"true": "on"})]
            ),
            "target": parse_tag("mandatory:enabled_on"),
            "reason": parse_tag("mandatory:enabled_false"),
        }
    )

    assert _messages(validator, {"enabled": True}) == [("target", "Missing property")]
    assert _messages(validator, {"enabled": False}) == [("reason", "Missing property")]
    assert _messages(validator, {"enabled": 1}) == []


def test_set_condition_if_runs_before_properties() -> None:
    validator = ObjectValidator(
        properties={
            "a": PropertyValidator(),
            "b": PropertyValidator(),
            "c": parse_tag("mandatory:both"),
        },
        constraints=[SetConditionIf(set_condition="both", others=parse_expression("a && b"))],
    )

    assert _messages(validator, {"a": 1, "b": 2}) == [("c", "Missing property")]
    assert _messages(validator, {"a": 1}) == []


def test_set_condition_if_when_tokens() -> None:
    validator = ObjectValidator(
        properties={"c": parse_tag("mandatory:derived")},
        constraints=[
            SetConditionIf(set_condition="base"),
            SetConditionIf(set_condition="derived", when=["base"]),
        ],
    )

    assert _messages(validator, {}) == [("c", "Missing property")]
