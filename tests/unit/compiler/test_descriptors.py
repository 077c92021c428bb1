"""Unit tests for record descriptors from dataclasses and YAML documents."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any

import pytest

from jsonv8n.compiler import compile_validator
from jsonv8n.descriptors import describe, descriptors_from_mapping, load_descriptors
from jsonv8n.errors import CompileError
from jsonv8n.validation import validate
from jsonv8n.values import JsonKind, JsonNumber

PEOPLE_YAML = """\
root: Person
records:
  Person:
    fields:
      name: {type: string, v8n: "mandatory, notNull"}
      age: {type: integer, v8n: "&PositiveOrZero{}"}
      address: {type: "Address?", json: addr}
      pets: {type: "[]Pet"}
      nicknames: "list[string]"
      extra:
  Address:
    fields:
      street: {type: string, v8n: mandatory}
  Pet:
    fields:
      kind: string
"""


@dataclass
class Sample:
    flag: bool = False
    when: datetime | None = None
    day: date | None = None
    amount: Decimal = Decimal(0)
    token: JsonNumber | None = None
    ratio: Annotated[float, "unit"] = 0.0
    either: int | str = 0
    anything: Any = None
    items: tuple[int, ...] = ()
    tag: str = field(default="", metadata={"json": "label", "v8n": "notNull", "v8n_as": "x"})


def test_describe_maps_annotations_to_kinds() -> None:
    descriptor = describe(Sample)

    kinds = {item.name: (item.kind, item.nullable) for item in descriptor.fields}
    assert kinds == {
        "flag": (JsonKind.BOOLEAN, False),
        "when": (JsonKind.DATETIME, True),
        "day": (JsonKind.DATETIME, True),
        "amount": (JsonKind.NUMBER, False),
        "token": (JsonKind.NUMBER, True),
        "ratio": (JsonKind.NUMBER, False),
        "either": (JsonKind.ANY, False),
        "anything": (JsonKind.ANY, True),
        "items": (JsonKind.ARRAY, False),
        "tag": (JsonKind.STRING, False),
    }
    tag = descriptor.fields[-1]
    assert (tag.json_name, tag.tag, tag.v8n_as) == ("label", "notNull", "x")
    assert descriptor.record_type is Sample


def test_load_yaml_file_and_compile_root(tmp_path: Path) -> None:
    path = tmp_path / "people.yaml"
    path.write_text(PEOPLE_YAML, encoding="utf-8")

    records, root = load_descriptors(path)

    assert root == "Person"
    assert sorted(records) == ["Address", "Person", "Pet"]
    person = {item.name: item for item in records["Person"].fields}
    assert person["address"].json_name == "addr"
    assert person["address"].nullable
    assert person["address"].record is records["Address"]
    assert person["pets"].kind is JsonKind.ARRAY
    assert person["pets"].record is records["Pet"]
    assert person["nicknames"].kind is JsonKind.ARRAY
    assert person["nicknames"].record is None
    assert (person["extra"].kind, person["extra"].nullable) == (JsonKind.ANY, True)

    validator = compile_validator(records[root])
    _, violations = validate(
        validator, {"name": "x", "age": -1, "addr": {}, "pets": [{"kind": 1}], "extra": None}
    )
    assert [(item.path, item.property, item.message) for item in violations] == [
        ("", "age", "Value must be positive or zero"),
        ("addr", "street", "Missing property"),
        ("pets[0]", "kind", "Value expected to be of type string"),
    ]


def test_load_from_stream_defaults_root_to_first_record() -> None:
    stream = io.StringIO("records:\n  Pet:\n    fields:\n      kind: string\n")

    records, root = load_descriptors(stream)

    assert root == "Pet"
    assert [item.name for item in records["Pet"].fields] == ["kind"]


def test_nullable_type_names_in_block_and_quoted_flow_style() -> None:
    stream = io.StringIO(
        "records:\n"
        "  Pet:\n"
        "    fields:\n"
        "      nickname: string?\n"
        '      owner: {type: "string?", json: ownerName}\n'
    )

    records, _ = load_descriptors(stream)

    fields = {item.name: item for item in records["Pet"].fields}
    assert (fields["nickname"].kind, fields["nickname"].nullable) == (JsonKind.STRING, True)
    assert (fields["owner"].kind, fields["owner"].nullable) == (JsonKind.STRING, True)
    assert fields["owner"].json_name == "ownerName"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (["a"], "descriptor document must be a mapping"),
        ({"records": {}}, "descriptor document must define a non-empty 'records' mapping"),
        ({"records": {"A": {}}}, "A: record must define a 'fields' mapping"),
        ({"records": {"A": {"fields": {"x": 3}}}}, "A: field 'x' must be a mapping or a type name"),
        (
            {"records": {"A": {"fields": {"x": {"type": "string", "bogus": 1}}}}},
            "A: field 'x' has unknown keys ['bogus']",
        ),
        ({"records": {"A": {"fields": {"x": "colour"}}}}, "A: unknown field type 'colour'"),
        ({"root": "B", "records": {"A": {"fields": {}}}}, "root record 'B' is not defined"),
    ],
)
def test_invalid_documents(payload: Any, message: str) -> None:
    with pytest.raises(CompileError) as info:
        descriptors_from_mapping(payload)

    assert str(info.value) == message


def test_unreadable_and_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(CompileError, match="unable to read descriptor file"):
        load_descriptors(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("records: [\n", encoding="utf-8")
    with pytest.raises(CompileError, match="invalid descriptor YAML"):
        load_descriptors(broken)
