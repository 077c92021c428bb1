"""Record descriptors: the compiler's view of a record (field names, kinds and tags).

Descriptors come from dataclass introspection (:func:`describe`) or from a YAML document
(:func:`load_descriptors`). A YAML document looks like::

    root: Person
    records:
      Person:
        fields:
          name: {type: string, v8n: "mandatory, notNull"}
          age: {type: integer, v8n: "&PositiveOrZero{}"}
          address: {type: "Address?", json: addr}
          pets: {type: "[]Pet"}

A type names a JSON kind or a record (``[]Name`` / ``list[Name]`` for arrays of records); a
trailing ``?`` marks the field optional (nullable).
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Final, Union

import yaml

from jsonv8n.binding import json_name
from jsonv8n.constants import TAG_NAME_V8N, TAG_NAME_V8N_AS
from jsonv8n.errors import CompileError
from jsonv8n.values import JsonKind, JsonNumber

_FIELD_KEYS: Final[frozenset[str]] = frozenset({"type", "json", "v8n", "v8n_as", "optional"})
_ARRAY_PREFIXES: Final[tuple[str, ...]] = ("[]",)
_LIST_WRAPPER: Final[tuple[str, str]] = ("list[", "]")


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One record field.

    ``record`` is the nested record of an object field, or the element record of an array
    field.
    """

    name: str
    json_name: str
    kind: JsonKind = JsonKind.ANY
    nullable: bool = True
    tag: str = ""
    v8n_as: str | None = None
    record: RecordDescriptor | None = None


@dataclass(eq=False, slots=True)
class RecordDescriptor:
    name: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    record_type: type[Any] | None = None


def describe(record_type: type[Any]) -> RecordDescriptor:
    """Introspect a dataclass type (and every dataclass it references)."""

    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise CompileError(message=f"cannot compile validator for non-dataclass {record_type!r}")
    return _describe(record_type, {})


def _describe(record_type: type[Any], seen: dict[type[Any], RecordDescriptor]) -> RecordDescriptor:
    existing = seen.get(record_type)
    if existing is not None:
        return existing
    descriptor = RecordDescriptor(name=record_type.__name__, record_type=record_type)
    seen[record_type] = descriptor
    try:
        hints = typing.get_type_hints(record_type)
    except NameError as exc:
        raise CompileError(
            message=f"unresolvable annotation ({exc})", record=descriptor.name
        ) from exc
    for item in dataclasses.fields(record_type):
        if not item.init:
            continue
        kind, nullable, nested = _kind_of_annotation(hints.get(item.name, Any))
        v8n_as = item.metadata.get(TAG_NAME_V8N_AS)
        descriptor.fields.append(
            FieldDescriptor(
                name=item.name,
                json_name=json_name(item),
                kind=kind,
                nullable=nullable,
                tag=str(item.metadata.get(TAG_NAME_V8N, "")),
                v8n_as=None if v8n_as is None else str(v8n_as),
                record=None if nested is None else _describe(nested, seen),
            )
        )
    return descriptor


def _kind_of_annotation(annotation: Any) -> tuple[JsonKind, bool, type[Any] | None]:
    """``(kind, nullable, nested dataclass)`` for a field annotation."""

    if annotation is Any or annotation is object:
        return JsonKind.ANY, True, None
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        nullable = len(args) != len(typing.get_args(annotation))
        if len(args) == 1:
            kind, inner_nullable, nested = _kind_of_annotation(args[0])
            return kind, nullable or inner_nullable, nested
        return JsonKind.ANY, nullable, None
    if origin is typing.Annotated:
        return _kind_of_annotation(typing.get_args(annotation)[0])
    if origin in (list, tuple, set, frozenset) or annotation in (list, tuple, set, frozenset):
        args = typing.get_args(annotation)
        element = args[0] if args else None
        nested = element if _is_dataclass_type(element) else None
        return JsonKind.ARRAY, False, nested
    if origin is dict or annotation is dict or origin is Mapping:
        return JsonKind.OBJECT, False, None
    if _is_dataclass_type(annotation):
        return JsonKind.OBJECT, False, annotation
    return _scalar_kind(annotation), False, None


def _scalar_kind(annotation: Any) -> JsonKind:
    if not isinstance(annotation, type):
        return JsonKind.ANY
    if issubclass(annotation, bool):
        return JsonKind.BOOLEAN
    if issubclass(annotation, datetime | date):
        return JsonKind.DATETIME
    if issubclass(annotation, str):
        return JsonKind.STRING
    if issubclass(annotation, int):
        return JsonKind.INTEGER
    if issubclass(annotation, float | Decimal | JsonNumber):
        return JsonKind.NUMBER
    return JsonKind.ANY


def _is_dataclass_type(candidate: Any) -> bool:
    # JsonNumber is a dataclass but binds as a scalar
    if candidate is JsonNumber:
        return False
    return isinstance(candidate, type) and dataclasses.is_dataclass(candidate)


# YAML descriptors


def load_descriptors(source: str | Path | IO[str]) -> tuple[dict[str, RecordDescriptor], str]:
    """Load record descriptors from a YAML file path or stream.

    Returns ``(records, root_name)``; the root is the ``root`` key or the first record.
    """

    try:
        if isinstance(source, str | Path):
            with Path(source).open(encoding="utf-8") as handle:
                payload = yaml.safe_load(handle)
        else:
            payload = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        raise CompileError(message=f"invalid descriptor YAML ({exc})") from exc
    except OSError as exc:
        raise CompileError(message=f"unable to read descriptor file {source} ({exc})") from exc
    return descriptors_from_mapping(payload)


def descriptors_from_mapping(payload: Any) -> tuple[dict[str, RecordDescriptor], str]:
    if not isinstance(payload, Mapping):
        raise CompileError(message="descriptor document must be a mapping")
    raw_records = payload.get("records")
    if not isinstance(raw_records, Mapping) or not raw_records:
        raise CompileError(message="descriptor document must define a non-empty 'records' mapping")
    records = {str(name): RecordDescriptor(name=str(name)) for name in raw_records}
    for name, body in raw_records.items():
        record = records[str(name)]
        raw_fields = body.get("fields") if isinstance(body, Mapping) else None
        if not isinstance(raw_fields, Mapping):
            raise CompileError(message="record must define a 'fields' mapping", record=record.name)
        for field_name, spec in raw_fields.items():
            record.fields.append(_field_from_yaml(str(field_name), spec, records, record.name))
    root = payload.get("root", next(iter(records)))
    if root not in records:
        raise CompileError(message=f"root record '{root}' is not defined")
    return records, str(root)


def _field_from_yaml(
    name: str, spec: Any, records: Mapping[str, RecordDescriptor], record_name: str
) -> FieldDescriptor:
    if isinstance(spec, str):
        spec = {"type": spec}
    elif spec is None:
        spec = {}
    if not isinstance(spec, Mapping):
        raise CompileError(
            message=f"field '{name}' must be a mapping or a type name", record=record_name
        )
    unknown = sorted(str(key) for key in spec if key not in _FIELD_KEYS)
    if unknown:
        raise CompileError(message=f"field '{name}' has unknown keys {unknown}", record=record_name)
    kind, nullable, nested = _parse_type_text(str(spec.get("type", "any")), records, record_name)
    if "optional" in spec:
        nullable = bool(spec["optional"])
    v8n_as = spec.get("v8n_as")
    return FieldDescriptor(
        name=name,
        json_name=str(spec.get("json") or name),
        kind=kind,
        nullable=nullable,
        tag=str(spec.get("v8n") or ""),
        v8n_as=None if v8n_as is None else str(v8n_as),
        record=nested,
    )


def _parse_type_text(
    text: str, records: Mapping[str, RecordDescriptor], record_name: str
) -> tuple[JsonKind, bool, RecordDescriptor | None]:
    text = text.strip()
    nullable = text.endswith("?")
    if nullable:
        text = text[:-1].strip()
    element = _array_element(text)
    if element is not None:
        return JsonKind.ARRAY, nullable, records.get(element)
    if text in records:
        return JsonKind.OBJECT, nullable, records[text]
    try:
        kind = JsonKind.parse(text)
    except ValueError as exc:
        raise CompileError(message=f"unknown field type '{text}'", record=record_name) from exc
    return kind, nullable or kind is JsonKind.ANY, None


def _array_element(text: str) -> str | None:
    for prefix in _ARRAY_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix) :].strip()
    opening, closing = _LIST_WRAPPER
    if text.startswith(opening) and text.endswith(closing):
        return text[len(opening) : -len(closing)].strip()
    return None


__all__ = [
    "FieldDescriptor",
    "RecordDescriptor",
    "describe",
    "descriptors_from_mapping",
    "load_descriptors",
]
