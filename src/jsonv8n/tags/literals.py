"""Constraint literals: ``&Name{field:value,...}`` and the conditional forms.

``&[tok,...]Name{}`` and ``&<expr>Name{}`` wrap the constraint in a
:class:`~jsonv8n.constraints.special.ConditionalConstraint`. Field names in the argument list
are matched leniently (case/underscore insensitive, unique prefix, vowel-stripped abbreviation
or word-wise prefix) and values are coerced by the field's annotation.
"""

from __future__ import annotations

import dataclasses
import functools
import json
import re
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Final, Union

from jsonv8n.constants import (
    FMT_CONDITIONAL_CONSTRAINTS_FORMAT,
    FMT_CONDITIONAL_EXPR,
    FMT_CONSTRAINT_ARGS_PARSE_ERROR,
    FMT_CONSTRAINT_FIELD_INVALID_VALUE,
    FMT_CONSTRAINT_FIELD_UNKNOWN,
    FMT_CONSTRAINTS_FORMAT,
    FMT_UNKNOWN_CONSTRAINT,
)
from jsonv8n.constraints.base import (
    COMMON_FIELDS,
    Constraint,
    constraint_fields,
    default_field,
    positional_fields,
)
from jsonv8n.constraints.registry import constraint_registry
from jsonv8n.constraints.special import ConditionalConstraint
from jsonv8n.errors import CompileError, TagSyntaxError
from jsonv8n.expressions import PresenceExpression, parse_expression
from jsonv8n.schema import ObjectValidator
from jsonv8n.tags.lexer import (
    bracketed_items,
    first_valid_colon_at,
    is_bracketed,
    parse_commas,
    split_token,
    unquote,
)

CONSTRAINT_PREFIX: Final[str] = "&"

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"1", "t", "true"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"0", "f", "false"})
_VOWELS = re.compile(r"[aeiou]")
_REPEATS = re.compile(r"(.)\1+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_ANNOTATION_NAMES: Final[dict[str, Any]] = {
    "Constraint": Constraint,
    "ObjectValidator": ObjectValidator,
    "PresenceExpression": PresenceExpression,
}


class _Unassignable(Exception):
    """Internal signal: a value cannot be coerced to a field's type."""


@dataclass(frozen=True, slots=True)
class _Arg:
    name: str
    value: str
    has_value: bool


def build_constraint(text: str) -> Constraint:
    """Build a constraint from a literal such as ``&StringLength{1, 255}``.

    Raises :class:`CompileError` for unknown constraints, unknown fields or bad values.
    """

    body = text.strip()
    if body.startswith(CONSTRAINT_PREFIX):
        body = body[len(CONSTRAINT_PREFIX) :].strip()
    when: list[str] = []
    others: PresenceExpression | None = None
    conditional = False
    if body.startswith("["):
        conditional = True
        close_at = body.find("]")
        if close_at == -1:
            raise CompileError(message=FMT_CONDITIONAL_CONSTRAINTS_FORMAT.format(text))
        when = bracketed_items(body[: close_at + 1])
        body = body[close_at + 1 :].strip()
    elif body.startswith("<"):
        conditional = True
        close_at = body.find(">")
        if close_at == -1:
            raise CompileError(message=FMT_CONDITIONAL_CONSTRAINTS_FORMAT.format(text))
        source = body[1:close_at]
        try:
            others = parse_expression(source)
        except CompileError as exc:
            raise CompileError(message=FMT_CONDITIONAL_EXPR.format(source, exc.message)) from exc
        body = body[close_at + 1 :].strip()

    name, args_text = body, ""
    open_at = body.find("{")
    if open_at != -1:
        if not body.endswith("}"):
            raise CompileError(message=FMT_CONSTRAINTS_FORMAT.format(text))
        name, args_text = body[:open_at].strip(), body[open_at + 1 : -1].strip()
    constraint = constraint_registry.get(name)
    if constraint is None:
        raise CompileError(message=FMT_UNKNOWN_CONSTRAINT.format(name))
    if args_text:
        assign_args(name, constraint, args_text)
    if conditional:
        return ConditionalConstraint(when=when, others=others, constraint=constraint)
    return constraint


def assign_args(name: str, constraint: Constraint, args_text: str) -> None:
    """Assign ``field:value`` (and positional) arguments onto a fresh constraint instance."""

    try:
        raw_args = parse_commas(args_text)
    except TagSyntaxError as exc:
        message = FMT_CONSTRAINT_ARGS_PARSE_ERROR.format(name, exc.message)
        raise CompileError(message=message) from exc
    args = [_split_arg(raw) for raw in raw_args if raw != ""]
    constraint_type = type(constraint)
    fields = [item.name for item in constraint_fields(constraint_type)]
    field_types = annotations_of(constraint_type)
    positional = list(positional_fields(constraint_type))
    if len(args) == 1 and not args[0].has_value:
        _assign_single(name, constraint, args[0], fields, field_types)
        return
    assigned: set[str] = set()
    for arg in args:
        target = match_field(arg.name, fields) if arg.has_value or _is_word(arg.name) else None
        if arg.has_value:
            if target is None:
                raise CompileError(message=FMT_CONSTRAINT_FIELD_UNKNOWN.format(name, arg.name))
            _assign(name, constraint, target, arg.value, True, field_types, arg.name)
        elif target is not None and _is_flag(field_types.get(target)):
            _assign(name, constraint, target, "", False, field_types, arg.name)
        else:
            pending = [item for item in positional if item not in assigned]
            if not pending:
                raise CompileError(message=FMT_CONSTRAINT_FIELD_UNKNOWN.format(name, arg.name))
            target = pending[0]
            _assign(name, constraint, target, arg.name, True, field_types, target)
        assigned.add(target)


def _assign_single(
    name: str,
    constraint: Constraint,
    arg: _Arg,
    fields: list[str],
    field_types: dict[str, Any],
) -> None:
    target = match_field(arg.name, fields) if _is_word(arg.name) else None
    if target is not None and _is_flag(field_types.get(target)):
        _assign(name, constraint, target, "", False, field_types, arg.name)
        return
    positional = positional_fields(type(constraint))
    default = default_field(type(constraint)) or (positional[0] if positional else None)
    if default is not None:
        _assign(name, constraint, default, arg.name, True, field_types, default)
        return
    if target is None:
        raise CompileError(message=FMT_CONSTRAINT_FIELD_UNKNOWN.format(name, arg.name))
    _assign(name, constraint, target, "", False, field_types, arg.name)


def _assign(
    name: str,
    constraint: Constraint,
    field_name: str,
    text: str,
    has_value: bool,
    field_types: dict[str, Any],
    reported: str,
) -> None:
    try:
        value = coerce_value(text, field_types.get(field_name, Any), has_value=has_value)
    except _Unassignable as exc:
        message = FMT_CONSTRAINT_FIELD_INVALID_VALUE.format(name, reported)
        raise CompileError(message=message) from exc
    setattr(constraint, field_name, value)


def _split_arg(raw: str) -> _Arg:
    if first_valid_colon_at(raw) == -1:
        return _Arg(raw.strip(), "", False)
    token, value, _ = split_token(raw)
    return _Arg(token, value, True)


def _is_word(text: str) -> bool:
    return bool(text) and (text[0].isalpha() or text[0] == "_") and all(
        ch.isalnum() or ch == "_" for ch in text
    )


def _is_flag(annotation: Any) -> bool:
    return _strip_optional(annotation) is bool


# field matching


def abbreviate(name: str) -> str:
    """``message`` -> ``msg``: drop vowels after the first letter, then collapse repeats."""

    if not name:
        return name
    return _REPEATS.sub(r"\1", name[0] + _VOWELS.sub("", name[1:]))


def _words(name: str) -> list[str]:
    spaced = _CAMEL_BOUNDARY.sub("_", name)
    return [word.lower() for word in spaced.split("_") if word]


def _normalized(name: str) -> str:
    return name.replace("_", "").lower()


def match_field(name: str, fields: list[str]) -> str | None:
    """Resolve an argument name to a field name, or ``None`` when ambiguous or unknown."""

    if name in fields:
        return name
    wanted = _normalized(name)
    if not wanted:
        return None
    for field_name in fields:
        if _normalized(field_name) == wanted:
            return field_name
    prefixed = [item for item in fields if _normalized(item).startswith(wanted)]
    if len(prefixed) == 1:
        return prefixed[0]
    if prefixed:
        own = [item for item in prefixed if item not in COMMON_FIELDS]
        return own[0] if len(own) == 1 else None
    for field_name in fields:
        if abbreviate(_normalized(field_name)) == wanted:
            return field_name
    wanted_words = _words(name)
    if len(wanted_words) > 1:
        for field_name in fields:
            field_words = _words(field_name)
            if len(field_words) == len(wanted_words) and all(
                have.startswith(want) or abbreviate(have) == want
                for have, want in zip(field_words, wanted_words, strict=True)
            ):
                return field_name
    return None


# value coercion


def annotations_of(constraint_type: type[Any]) -> dict[str, Any]:
    """Resolved field annotations of a constraint dataclass."""

    return dict(_resolved_annotations(constraint_type))


@functools.lru_cache(maxsize=256)
def _resolved_annotations(constraint_type: type[Any]) -> tuple[tuple[str, Any], ...]:
    try:
        hints = typing.get_type_hints(constraint_type, localns=_ANNOTATION_NAMES)
    except (NameError, TypeError):
        hints = {}
        for item in dataclasses.fields(constraint_type):
            hints[item.name] = _evaluate(constraint_type, item)
    return tuple(hints.items())


def _evaluate(constraint_type: type[Any], item: dataclasses.Field[Any]) -> Any:
    if not isinstance(item.type, str):
        return item.type
    for owner in constraint_type.__mro__:
        if item.name in owner.__dict__.get("__annotations__", {}):
            module = sys.modules.get(owner.__module__)
            namespace = dict(vars(module)) if module is not None else {}
            try:
                return eval(item.type, namespace, dict(_ANNOTATION_NAMES))  # noqa: S307
            except (NameError, SyntaxError, TypeError):
                return Any
    return Any


def _strip_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def coerce_value(text: str, annotation: Any, *, has_value: bool = True) -> Any:
    """Convert argument text to a value for a field annotated ``annotation``."""

    optional = annotation is not _strip_optional(annotation)
    annotation = _strip_optional(annotation)
    text = text.strip()
    if optional and text == "null":
        return None
    origin = typing.get_origin(annotation)
    if annotation is bool:
        return _to_bool(text, has_value)
    if not has_value:
        raise _Unassignable(text)
    if annotation is str:
        unquoted = unquote(text)
        if unquoted is None:
            raise _Unassignable(text)
        return unquoted
    if annotation is int:
        return _to_int(text)
    if annotation is float:
        try:
            return float(text)
        except ValueError as exc:
            raise _Unassignable(text) from exc
    if annotation is re.Pattern or origin is re.Pattern:
        unquoted = unquote(text)
        if unquoted is None:
            raise _Unassignable(text)
        try:
            return re.compile(unquoted)
        except re.error as exc:
            raise _Unassignable(text) from exc
    if annotation is PresenceExpression:
        source = unquote(text)
        try:
            return parse_expression(text if source is None else source)
        except CompileError as exc:
            raise _Unassignable(text) from exc
    if isinstance(annotation, type) and issubclass(annotation, Constraint):
        return _to_constraint(text)
    if origin is list:
        (element,) = typing.get_args(annotation) or (Any,)
        return _to_list(text, element)
    if origin is dict:
        return _to_mapping(text)
    if annotation is Any:
        return _to_any(text)
    raise _Unassignable(text)


def _to_bool(text: str, has_value: bool) -> bool:
    if not has_value:
        return text != "false"
    lowered = text.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise _Unassignable(text)


def _to_int(text: str) -> int:
    try:
        return int(text, 10)
    except ValueError as exc:
        raise _Unassignable(text) from exc


def _to_constraint(text: str) -> Constraint:
    try:
        return build_constraint(text)
    except CompileError as exc:
        raise _Unassignable(text) from exc


def _items(text: str) -> list[str]:
    if not is_bracketed(text, allow_curly=True):
        raise _Unassignable(text)
    try:
        return [item for item in parse_commas(text[1:-1]) if item != ""]
    except TagSyntaxError as exc:
        raise _Unassignable(text) from exc


def _to_list(text: str, element: Any) -> list[Any]:
    items = _items(text)
    element = _strip_optional(element)
    if element is Constraint or (isinstance(element, type) and issubclass(element, Constraint)):
        return [_to_constraint(item) for item in items]
    if element is str:
        return [_unquote_or_self(item) for item in items]
    if element in (int, float, bool):
        return [coerce_value(item, element) for item in items]
    return [_to_any(item) for item in items]


def _to_mapping(text: str) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for item in _items(text):
        key, value, has_colon = split_token(item)
        if not has_colon:
            key, value, has_colon = _split_quoted_key(item)
        if not has_colon:
            raise _Unassignable(text)
        mapping[_unquote_or_self(key)] = _unquote_or_self(value)
    return mapping


def _split_quoted_key(item: str) -> tuple[str, str, bool]:
    # "Coca Cola":coke - the colon follows a quoted key
    if item[:1] in ("'", '"'):
        close_at = item.find(item[0], 1)
        while close_at != -1 and item[close_at + 1 : close_at + 2] == item[0]:
            close_at = item.find(item[0], close_at + 2)
        if close_at != -1:
            rest = item[close_at + 1 :].lstrip(" ")
            if rest.startswith(":"):
                return item[: close_at + 1], rest[1:].strip(" "), True
    return item, "", False


def _unquote_or_self(text: str) -> str:
    unquoted = unquote(text)
    return text if unquoted is None else unquoted


def _to_any(text: str) -> Any:
    unquoted = unquote(text)
    if unquoted is not None:
        return unquoted
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise _Unassignable(text) from exc


__all__ = [
    "CONSTRAINT_PREFIX",
    "abbreviate",
    "annotations_of",
    "assign_args",
    "build_constraint",
    "coerce_value",
    "match_field",
]
