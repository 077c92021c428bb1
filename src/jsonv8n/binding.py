"""Second pass of ``*_into`` validation: assign accepted JSON into dataclass records."""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, TypeVar, Union

from jsonv8n.constants import TAG_NAME_JSON
from jsonv8n.errors import DecodeError
from jsonv8n.values import JsonNumber, is_integral, is_number, parse_datetime, to_decimal, to_plain

T = TypeVar("T")


def json_name(item: dataclasses.Field[Any]) -> str:
    """JSON property name of a dataclass field (``metadata={"json": ...}`` or the field name)."""

    name = item.metadata.get(TAG_NAME_JSON)
    return name if isinstance(name, str) and name else item.name


def bind(target: type[T] | T, value: Any, *, ignore_unknown: bool = True) -> T:
    """Assign ``value`` into ``target``.

    ``target`` is a dataclass type (a new instance is built) or an instance (fields present in
    ``value`` are overwritten). Raises :class:`DecodeError` on any incompatibility.
    """

    if isinstance(target, type):
        built = _coerce(value, target, target.__name__, ignore_unknown)
        return built  # type: ignore[no-any-return]
    where = type(target).__name__
    if not dataclasses.is_dataclass(target):
        raise DecodeError(message=f"cannot bind into {where}", target=where)
    if not isinstance(value, Mapping):
        raise DecodeError(message="expected a JSON object", target=where)
    for name, item in _assignments(type(target), value, where, ignore_unknown).items():
        setattr(target, name, item)
    return target


def _assignments(
    record: type[Any], value: Mapping[str, Any], where: str, ignore_unknown: bool
) -> dict[str, Any]:
    hints = typing.get_type_hints(record)
    by_json = {json_name(item): item for item in dataclasses.fields(record) if item.init}
    if not ignore_unknown:
        unknown = [key for key in value if key not in by_json]
        if unknown:
            raise DecodeError(message=f"unknown field {unknown[0]!r}", target=where)
    assigned: dict[str, Any] = {}
    for key, item in by_json.items():
        if key in value:
            annotation = hints.get(item.name, Any)
            assigned[item.name] = _coerce(value[key], annotation, f"{where}.{key}", ignore_unknown)
    return assigned


def _build(record: type[T], value: Any, where: str, ignore_unknown: bool) -> T:
    if not isinstance(value, Mapping):
        raise DecodeError(message="expected a JSON object", target=where)
    kwargs = _assignments(record, value, where, ignore_unknown)
    try:
        return record(**kwargs)
    except TypeError as exc:
        raise DecodeError(message=str(exc), target=where) from exc


def _coerce(value: Any, annotation: Any, where: str, ignore_unknown: bool) -> Any:
    if annotation is Any or annotation is object:
        return to_plain(value)
    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin is Union or origin is types.UnionType:
        if value is None and type(None) in args:
            return None
        candidates = [arg for arg in args if arg is not type(None)]
        errors: list[DecodeError] = []
        for candidate in candidates:
            try:
                return _coerce(value, candidate, where, ignore_unknown)
            except DecodeError as exc:
                errors.append(exc)
        raise errors[0] if errors else DecodeError(message="no value allowed", target=where)
    if origin in (list, tuple, set, frozenset) or annotation in (list, tuple):
        if not isinstance(value, list):
            raise DecodeError(message="expected a JSON array", target=where)
        element = args[0] if args else Any
        items = [
            _coerce(item, element, f"{where}[{index}]", ignore_unknown)
            for index, item in enumerate(value)
        ]
        container = origin or annotation
        return items if container is list else container(items)
    if origin is dict or annotation is dict:
        if not isinstance(value, dict):
            raise DecodeError(message="expected a JSON object", target=where)
        element = args[1] if len(args) == 2 else Any
        return {
            key: _coerce(item, element, f"{where}.{key}", ignore_unknown)
            for key, item in value.items()
        }
    if value is None:
        raise DecodeError(message="null is not allowed", target=where)
    if annotation is JsonNumber:
        return _coerce_scalar(value, annotation, where)
    if dataclasses.is_dataclass(annotation) and isinstance(annotation, type):
        return _build(annotation, value, where, ignore_unknown)
    return _coerce_scalar(value, annotation, where)


def _coerce_scalar(value: Any, annotation: Any, where: str) -> Any:
    if annotation is bool:
        if isinstance(value, bool):
            return value
    elif annotation is str:
        if isinstance(value, str):
            return value
    elif annotation is int:
        if is_integral(value):
            return int(to_decimal(value))  # type: ignore[arg-type]
    elif annotation is float:
        if is_number(value):
            return float(to_decimal(value))  # type: ignore[arg-type]
    elif annotation is Decimal:
        if is_number(value):
            return to_decimal(value)
    elif annotation is JsonNumber:
        if is_number(value):
            return value if isinstance(value, JsonNumber) else JsonNumber(str(to_decimal(value)))
    elif annotation is datetime:
        if isinstance(value, str) and (parsed := parse_datetime(value)) is not None:
            return parsed
    elif annotation is date:
        if isinstance(value, str) and (parsed := parse_datetime(value)) is not None:
            return parsed.date()
    elif isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        try:
            return annotation(to_plain(value))
        except ValueError:
            pass
    else:
        return to_plain(value)
    expected = getattr(annotation, "__name__", annotation)
    raise DecodeError(
        message=f"cannot assign {type(value).__name__} value to {expected}", target=where
    )


__all__ = ["bind", "json_name"]
