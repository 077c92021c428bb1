"""Unit tests for request body validation adapters."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

import pytest

from jsonv8n.http import request_body, validate_request, validate_request_into
from jsonv8n.schema import ObjectValidator
from jsonv8n.tags.parser import parse_tag


@dataclass
class _BodyRequest:
    body: Any


class _FlaskLikeRequest:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def get_data(self) -> bytes:
        return self._data


class _FailingStream:
    def read(self) -> bytes:
        raise OSError("client went away")


@dataclass
class Greeting:
    name: str = ""


def _validator() -> ObjectValidator:
    return ObjectValidator(properties={"name": parse_tag("mandatory, type:string")})


@pytest.mark.parametrize(
    "request_",
    [
        _BodyRequest(b'{"name": "x"}'),
        _BodyRequest('{"name": "x"}'),
        _BodyRequest(io.BytesIO(b'{"name": "x"}')),
        _FlaskLikeRequest(b'{"name": "x"}'),
        io.BytesIO(b'{"name": "x"}'),
    ],
)
def test_request_body_shapes(request_: Any) -> None:
    ok, violations, value = validate_request(_validator(), request_)

    assert ok, violations
    assert value == {"name": "x"}


@pytest.mark.parametrize("body", [None, b"", ""])
def test_empty_body_is_reported(body: Any) -> None:
    ok, violations, value = validate_request(_validator(), _BodyRequest(body))

    assert not ok
    assert value is None
    assert [item.message for item in violations] == ["Request body is empty"]


def test_request_wording_for_root_problems() -> None:
    def messages(text: str) -> list[str]:
        _, violations, _ = validate_request(_validator(), _BodyRequest(text))
        return [item.message for item in violations]

    assert messages("{") == ["Unable to decode request body as JSON"]
    assert messages("null") == ["Request body must not be JSON null"]
    assert messages("[]") == ["Request body must not be JSON array"]
    assert messages('"x"') == ["Request body expected to be JSON object"]


def test_read_failure_is_reported() -> None:
    ok, violations, _ = validate_request(_validator(), _BodyRequest(_FailingStream()))

    assert not ok
    assert [item.message for item in violations] == ["Unexpected error reading reader"]


def test_validate_request_into_binds_record() -> None:
    ok, violations, record = validate_request_into(
        _validator(), _BodyRequest(b'{"name": "Ada"}'), Greeting
    )

    assert ok, violations
    assert record == Greeting(name="Ada")


def test_objects_without_body_are_rejected() -> None:
    with pytest.raises(TypeError, match="does not expose a request body"):
        request_body(object())
