"""Unit tests for CLI rendering helpers."""

from __future__ import annotations

import io
import json
import re

import pytest

from jsonv8n.constraints import StringLength, StringPattern, StringValidToken
from jsonv8n.render import (
    CLIRenderer,
    color_allowed,
    describe_constraint,
    describe_property,
    emit_json,
)
from jsonv8n.schema import ObjectValidator, PropertyValidator
from jsonv8n.tags.parser import parse_tag
from jsonv8n.values import JsonKind
from jsonv8n.violations import Violation


class _TTY(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_color_allowed_respects_flag_env_and_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)

    assert color_allowed(False, _TTY())
    assert not color_allowed(True, _TTY())
    assert not color_allowed(False, io.StringIO())

    monkeypatch.setenv("NO_COLOR", "1")
    assert not color_allowed(False, _TTY())


def test_violations_table_and_verdict() -> None:
    stream = io.StringIO()
    renderer = CLIRenderer(no_color=True, stream=stream)

    renderer.violations(
        [
            Violation(property="id", path="", message="Missing property"),
            Violation(property="", path="lines[0]", message="Value must be an object"),
        ]
    )

    assert stream.getvalue().splitlines() == [
        "  PATH      PROPERTY  MESSAGE",
        "  --------  --------  -----------------------",
        "  /         id        Missing property",
        "  lines[0]  -         Value must be an object",
        "  FAIL  2 violations",
    ]


def test_ok_line_is_painted_only_with_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    colored = _TTY()
    CLIRenderer(stream=colored).violations([])
    plain = io.StringIO()
    CLIRenderer(stream=plain).violations([])

    assert colored.getvalue() == "  \033[32mOK\033[0m  valid\n"
    assert plain.getvalue() == "  OK  valid\n"


def test_emit_json_is_compact_and_sorted() -> None:
    stream = io.StringIO()

    emit_json({"b": 1, "a": ["é"]}, stream)

    assert stream.getvalue() == '{"a":["é"],"b":1}\n'


@pytest.mark.parametrize(
    ("constraint", "expected"),
    [
        (StringLength(minimum=2), "StringLength{minimum:2}"),
        (StringLength(message="too long", maximum=5), 'StringLength{message:"too long",maximum:5}'),
        (StringPattern(regexp=re.compile(r"^\d+$")), 'StringPattern{regexp:"^\\\\d+$"}'),
        (StringValidToken(tokens=["a", "b"]), 'StringValidToken{tokens:["a","b"]}'),
    ],
)
def test_describe_constraint_lists_non_default_fields(constraint: object, expected: str) -> None:
    assert describe_constraint(constraint) == expected  # type: ignore[arg-type]


def test_describe_property_includes_nested_objects() -> None:
    inner = ObjectValidator(properties={"sku": parse_tag("mandatory")})
    inner.allow_array = True
    pv = PropertyValidator(type=JsonKind.ARRAY, order=3, object_validator=inner)
    pv.when_conditions.append("full")

    summary = describe_property(pv)

    assert summary == {
        "type": "array",
        "order": 3,
        "when_conditions": ["full"],
        "object": {"allow_array": True, "properties": {"sku": {"type": "any", "mandatory": True}}},
    }
    assert json.loads(json.dumps(summary)) == summary
