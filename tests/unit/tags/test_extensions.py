"""Unit tests for tag aliases and custom tag tokens."""

from __future__ import annotations

import pytest

from jsonv8n.constraints import StringNotEmpty
from jsonv8n.errors import CompileError, TagSyntaxError
from jsonv8n.schema import PropertyValidator
from jsonv8n.tags.extensions import (
    register_custom_tag_token,
    register_tag_token_alias,
    register_tag_token_aliases,
    tag_aliases,
)
from jsonv8n.tags.parser import parse_tag
from jsonv8n.values import JsonKind


def test_alias_expands_in_place_and_nests() -> None:
    register_tag_token_aliases({"$req": "mandatory, notNull", "name": "$req, type:string"})

    pv = parse_tag("$name, &StringNotEmpty{}")

    assert tag_aliases.has("req")
    assert pv.mandatory
    assert pv.not_null
    assert pv.type is JsonKind.STRING
    assert pv.constraints == [StringNotEmpty()]


def test_alias_errors() -> None:
    register_tag_token_alias("a", "$b")
    register_tag_token_alias("b", "$a")
    register_tag_token_alias("broken", "when:[x")

    with pytest.raises(CompileError, match=r"cyclic tag alias reference '\$a'"):
        parse_tag("$a")
    with pytest.raises(CompileError, match=r"unknown tag alias reference '\$nope'"):
        parse_tag("$nope")
    with pytest.raises(TagSyntaxError, match=r"error parsing resolved tag alias '\$broken'"):
        parse_tag("$broken")


def test_custom_token_receives_token_details() -> None:
    calls: list[tuple[str, bool, str, str, str]] = []

    def handler(
        token: str,
        has_value: bool,
        value: str,
        pv: PropertyValidator,
        property_name: str,
        field_name: str,
    ) -> None:
        calls.append((token, has_value, value, property_name, field_name))
        pv.order = 7

    register_custom_tag_token("my_order", handler)

    pv = parse_tag("my_order:x", property_name="prop", field_name="field")

    assert pv.order == 7
    assert calls == [("my_order", True, "x", "prop", "field")]


def test_custom_token_may_replace_property_validator() -> None:
    replacement = PropertyValidator(mandatory=True)
    register_custom_tag_token("swap", lambda *args: replacement)

    assert parse_tag("swap, notNull") is replacement
    assert replacement.not_null


def test_custom_token_handler_must_be_callable() -> None:
    with pytest.raises(TypeError, match="not callable"):
        register_custom_tag_token("bad", "nope")  # type: ignore[arg-type]


def test_builtin_tokens_take_precedence_over_custom_ones() -> None:
    register_custom_tag_token("mandatory", lambda *args: PropertyValidator(order=99))

    pv = parse_tag("mandatory")

    assert pv.mandatory
    assert pv.order == 0
