"""Value model: JSON kinds, decimal-preserving number tokens and decode helpers."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any, Final, TypeAlias

from jsonv8n.errors import DecodeError

JSONScalar: TypeAlias = "str | int | float | bool | Decimal | JsonNumber | None"
JSONValue: TypeAlias = "JSONScalar | list[Any] | dict[str, Any]"

_NON_FINITE_LITERALS: Final[frozenset[str]] = frozenset({"NaN", "Infinity", "-Infinity"})


class JsonKind(StrEnum):
    """Declared kind of a property value."""

    ANY = "any"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"
    DATETIME = "datetime"

    @classmethod
    def parse(cls, text: str) -> JsonKind:
        """Case-insensitive lookup; raises ``ValueError`` for unknown names."""

        normalized = text.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"unknown JSON kind {text!r}")


@dataclass(frozen=True, slots=True)
class JsonNumber:
    """Raw JSON number token, converted only on demand."""

    token: str

    def __post_init__(self) -> None:
        try:
            parsed = Decimal(self.token)
        except InvalidOperation as exc:
            raise ValueError(f"invalid JSON number token {self.token!r}") from exc
        if not parsed.is_finite():
            raise ValueError(f"invalid JSON number token {self.token!r}")

    def as_decimal(self) -> Decimal:
        return Decimal(self.token)

    def as_float(self) -> float:
        return float(self.token)

    def as_int(self) -> int:
        """Integer value; raises ``ValueError`` when the token does not net to an integer."""

        parsed = self.as_decimal()
        if parsed != parsed.to_integral_value():
            raise ValueError(f"JSON number {self.token!r} is not an integer")
        return int(parsed)

    def is_integer(self) -> bool:
        parsed = self.as_decimal()
        return parsed == parsed.to_integral_value()

    def __str__(self) -> str:
        return self.token


def decode_json(data: str | bytes | bytearray, *, use_number: bool = False) -> JSONValue:
    """Decode JSON text into plain Python values.

    Objects become insertion-ordered ``dict``; arrays become ``list``. With ``use_number``
    every number is carried as a :class:`JsonNumber`. ``NaN``/``Infinity`` are rejected, as are
    floats too large to represent unless ``use_number`` keeps their exact token.
    """

    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise DecodeError(message=f"input is not valid UTF-8: {exc.reason}") from exc
    else:
        text = data

    try:
        if use_number:
            return json.loads(
                text,
                parse_float=JsonNumber,
                parse_int=JsonNumber,
                parse_constant=_reject_constant,
            )
        return json.loads(text, parse_float=_finite_float, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise DecodeError(message=exc.msg, position=exc.pos) from exc


def _finite_float(token: str) -> float:
    parsed = float(token)
    if not math.isfinite(parsed):
        raise DecodeError(message=f"number {token} is out of range for a float")
    return parsed


def _reject_constant(literal: str) -> object:
    if literal in _NON_FINITE_LITERALS:
        raise DecodeError(message=f"non-finite number literal {literal} is not valid JSON")
    raise DecodeError(message=f"unexpected literal {literal}")


def is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int | JsonNumber):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False


def to_decimal(value: object) -> Decimal | None:
    """Exact decimal view of a numeric value, ``None`` for non-numbers."""

    if not is_number(value):
        return None
    if isinstance(value, JsonNumber):
        return value.as_decimal()
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, Decimal):
        return value
    return Decimal(int(value))  # type: ignore[call-overload]


def is_integral(value: object) -> bool:
    """True when ``value`` is a number with no fractional part (``1e2`` and ``3.0`` count)."""

    parsed = to_decimal(value)
    if parsed is None:
        return False
    return parsed == parsed.to_integral_value()


def parse_datetime(text: str) -> datetime | None:
    """Parse an ISO-8601 date or date-time, returning ``None`` when it is not one."""

    candidate = text.strip()
    if len(candidate) < 10:
        return None
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return parsed


def as_aware(value: datetime) -> datetime:
    """Treat naive date-times as UTC so they compare with aware ones."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def kind_of(value: object) -> JsonKind:
    """Concrete kind of a decoded value (never ``ANY``/``DATETIME``)."""

    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list | tuple):
        return JsonKind.ARRAY
    if is_number(value):
        return JsonKind.INTEGER if is_integral(value) else JsonKind.NUMBER
    raise TypeError(f"value of type {type(value).__name__} is not a JSON value")


def matches_kind(value: object, kind: JsonKind) -> bool:
    """Whether a non-null ``value`` satisfies the declared ``kind``."""

    if kind is JsonKind.ANY:
        return True
    if kind is JsonKind.STRING:
        return isinstance(value, str)
    if kind is JsonKind.BOOLEAN:
        return isinstance(value, bool)
    if kind is JsonKind.NUMBER:
        return is_number(value)
    if kind is JsonKind.INTEGER:
        return is_integral(value)
    if kind is JsonKind.OBJECT:
        return isinstance(value, dict)
    if kind is JsonKind.ARRAY:
        return isinstance(value, list | tuple)
    if kind is JsonKind.NULL:
        return value is None
    if kind is JsonKind.DATETIME:
        return isinstance(value, str) and parse_datetime(value) is not None
    return False


def length_of(value: object) -> int | None:
    if isinstance(value, str | list | tuple | dict):
        return len(value)
    return None


def json_equal(left: object, right: object) -> bool:
    """Structural JSON equality where numbers compare by value regardless of encoding."""

    left_number = to_decimal(left)
    right_number = to_decimal(right)
    if left_number is not None or right_number is not None:
        return left_number is not None and left_number == right_number
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[key], right[key]) for key in left)
    if isinstance(left, list | tuple) and isinstance(right, list | tuple):
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    return left == right


def to_plain(value: object) -> Any:
    """Render a decoded value with plain Python numbers (for printing and binding)."""

    if isinstance(value, JsonNumber):
        if value.is_integer() and _looks_integral(value.token):
            return value.as_int()
        return value.as_float()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [to_plain(item) for item in value]
    return value


def _looks_integral(token: str) -> bool:
    return not any(marker in token for marker in (".", "e", "E"))


__all__ = [
    "JSONScalar",
    "JSONValue",
    "JsonKind",
    "JsonNumber",
    "as_aware",
    "decode_json",
    "is_integral",
    "is_number",
    "json_equal",
    "kind_of",
    "length_of",
    "matches_kind",
    "parse_datetime",
    "to_decimal",
    "to_plain",
]
