"""The ``v8n`` tag parser: comma items applied one by one to a :class:`PropertyValidator`."""

from __future__ import annotations

from collections.abc import Callable
from typing import Final, TypeAlias

from jsonv8n.constants import (
    FMT_EXPECTED_COLON,
    FMT_PROPERTY_NOT_OBJECT,
    FMT_UNEXPECTED_COLON,
    FMT_UNKNOWN_PROPERTY_TYPE,
    FMT_UNKNOWN_TAG_VALUE,
    FMT_UNKNOWN_TOKEN,
)
from jsonv8n.errors import CompileError
from jsonv8n.expressions import PresenceExpression, parse_expression
from jsonv8n.schema import ObjectValidator, PropertyValidator
from jsonv8n.tags.extensions import custom_tag_tokens, tag_aliases
from jsonv8n.tags.lexer import bracketed_items, is_bracketed, parse_commas, split_token, unquote
from jsonv8n.tags.literals import CONSTRAINT_PREFIX, build_constraint
from jsonv8n.values import JsonKind

TokenOperation: TypeAlias = Callable[[PropertyValidator, bool, str], None]

TOKEN_CONSTRAINTS_PREFIX: Final[str] = "constraints:"

_BOOLEAN_WORDS: Final[dict[str, bool]] = {
    "true": True,
    "t": True,
    "1": True,
    "false": False,
    "f": False,
    "0": False,
}


def add_conditions(conditions: list[str], value: str, *, allow_curly: bool = True) -> None:
    """Append ``tok``, ``'tok'`` or every item of ``[a, b]`` to ``conditions``."""

    if is_bracketed(value, allow_curly=allow_curly):
        conditions.extend(bracketed_items(value))
    else:
        unquoted = unquote(value)
        conditions.append(value if unquoted is None else unquoted)


def _message(value: str) -> str:
    unquoted = unquote(value)
    return value if unquoted is None else unquoted


def _extend(existing: PresenceExpression | None, value: str) -> PresenceExpression:
    parsed = parse_expression(value)
    if existing is None:
        return parsed
    return PresenceExpression(existing.items + parsed.items)


def _object_validator(pv: PropertyValidator, token: str) -> ObjectValidator:
    if pv.object_validator is None:
        raise CompileError(message=FMT_PROPERTY_NOT_OBJECT.format(token))
    return pv.object_validator


# token operations


def _not_null(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.not_null = True


def _nullable(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.not_null = False


def _mandatory(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.mandatory = True
    if has_colon:
        add_conditions(pv.mandatory_when, value)


def _optional(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.mandatory = False


def _stop_on_first(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.stop_on_first = True


def _only(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.only = True
    if has_colon:
        add_conditions(pv.only_conditions, value)


def _only_msg(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.only_message = _message(value)


def _type(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    try:
        pv.type = JsonKind.parse(value)
    except ValueError as exc:
        raise CompileError(message=FMT_UNKNOWN_PROPERTY_TYPE.format(value)) from exc


def _order(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    try:
        pv.order = int(value, 10)
    except ValueError as exc:
        raise CompileError(message=FMT_UNKNOWN_TAG_VALUE.format("order", "int", value)) from exc


def _constraint(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.constraints.append(build_constraint(value))


def _when(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    add_conditions(pv.when_conditions, value)


def _unwanted(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    add_conditions(pv.unwanted_conditions, value)


def _unwanted_msg(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.unwanted_message = _message(value)


def _required_with(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.required_with = _extend(pv.required_with, value)


def _required_with_msg(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.required_with_message = _message(value)


def _unwanted_with(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.unwanted_with = _extend(pv.unwanted_with, value)


def _unwanted_with_msg(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.unwanted_with_message = _message(value)


def _only_with(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.only_with = _extend(pv.only_with, value)


def _only_with_msg(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.only_with_message = _message(value)


def _obj_ignore_unknown(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    _object_validator(pv, "obj.ignoreUnknownProperties").ignore_unknown_properties = True


def _obj_unknown_properties(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    validator = _object_validator(pv, "obj.unknownProperties")
    allowed = _BOOLEAN_WORDS.get(value.lower())
    if allowed is None:
        raise CompileError(
            message=FMT_UNKNOWN_TAG_VALUE.format("obj.unknownProperties", "boolean", value)
        )
    validator.ignore_unknown_properties = allowed


def _obj_constraint(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    _object_validator(pv, "obj.constraint").constraints.append(build_constraint(value))


def _obj_ordered(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    _object_validator(pv, "obj.ordered").ordered_property_checks = True


def _obj_when(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    add_conditions(_object_validator(pv, "obj.when").when_conditions, value)


def _obj_no(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    pv.object_validator = None


def _arr_allow_nulls(pv: PropertyValidator, has_colon: bool, value: str) -> None:
    _object_validator(pv, "arr.allowNulls").allow_null_items = True


TOKEN_OPERATIONS: Final[dict[str, TokenOperation]] = {
    "notNull": _not_null,
    "nullable": _nullable,
    "mandatory": _mandatory,
    "required": _mandatory,
    "optional": _optional,
    "stop_on_first": _stop_on_first,
    "stop1st": _stop_on_first,
    "only": _only,
    "only_msg": _only_msg,
    "type": _type,
    "order": _order,
    "constraint": _constraint,
    "when": _when,
    "unwanted": _unwanted,
    "unwanted_msg": _unwanted_msg,
    "required_with": _required_with,
    "+": _required_with,
    "required_with_msg": _required_with_msg,
    "+msg": _required_with_msg,
    "unwanted_with": _unwanted_with,
    "-": _unwanted_with,
    "unwanted_with_msg": _unwanted_with_msg,
    "-msg": _unwanted_with_msg,
    "only_with": _only_with,
    "only_with_msg": _only_with_msg,
    "obj.ignoreUnknownProperties": _obj_ignore_unknown,
    "obj.unknownProperties": _obj_unknown_properties,
    "obj.constraint": _obj_constraint,
    "obj.ordered": _obj_ordered,
    "obj.when": _obj_when,
    "obj.no": _obj_no,
    "arr.allowNulls": _arr_allow_nulls,
}

# True: a value is required; False: no value allowed; absent: either.
EXPECTS_COLON: Final[dict[str, bool]] = {
    "notNull": False,
    "nullable": False,
    "optional": False,
    "stop_on_first": False,
    "stop1st": False,
    "only_msg": True,
    "type": True,
    "order": True,
    "constraint": True,
    "when": True,
    "unwanted": True,
    "unwanted_msg": True,
    "required_with": True,
    "+": True,
    "required_with_msg": True,
    "+msg": True,
    "unwanted_with": True,
    "-": True,
    "unwanted_with_msg": True,
    "-msg": True,
    "only_with": True,
    "only_with_msg": True,
    "obj.ignoreUnknownProperties": False,
    "obj.unknownProperties": True,
    "obj.constraint": True,
    "obj.ordered": False,
    "obj.when": True,
    "obj.no": False,
    "arr.allowNulls": False,
}


def parse_tag(
    tag: str,
    pv: PropertyValidator | None = None,
    *,
    property_name: str = "",
    field_name: str = "",
) -> PropertyValidator:
    """Apply every item of ``tag`` to ``pv`` (a new node when omitted) and return it.

    Raises :class:`CompileError` (unlocated; the compiler attaches the field) on any error.
    """

    if pv is None:
        pv = PropertyValidator()
    items = tag_aliases.resolve(parse_commas(tag))
    for item in items:
        if item:
            pv = apply_tag_item(pv, item, property_name=property_name, field_name=field_name)
    return pv


def apply_tag_item(
    pv: PropertyValidator, item: str, *, property_name: str = "", field_name: str = ""
) -> PropertyValidator:
    if item.startswith(TOKEN_CONSTRAINTS_PREFIX):
        value = item[len(TOKEN_CONSTRAINTS_PREFIX) :].strip(" ")
        literals = parse_commas(value[1:-1]) if is_bracketed(value, allow_curly=True) else [value]
        pv.constraints.extend(build_constraint(literal) for literal in literals if literal)
        return pv
    token, value, has_colon = split_token(item)
    expects = EXPECTS_COLON.get(token)
    if expects is True and not has_colon:
        raise CompileError(message=FMT_EXPECTED_COLON.format(token))
    if expects is False and has_colon:
        raise CompileError(message=FMT_UNEXPECTED_COLON.format(token))
    operation = TOKEN_OPERATIONS.get(token)
    if operation is not None:
        operation(pv, has_colon, value)
        return pv
    if item.startswith(CONSTRAINT_PREFIX):
        pv.constraints.append(build_constraint(item))
        return pv
    handler = custom_tag_tokens.get(token)
    if handler is None:
        raise CompileError(message=FMT_UNKNOWN_TOKEN.format(token))
    replaced = handler(token, has_colon, value, pv, property_name, field_name)
    return pv if replaced is None else replaced


__all__ = [
    "EXPECTS_COLON",
    "TOKEN_OPERATIONS",
    "add_conditions",
    "apply_tag_item",
    "parse_tag",
]
