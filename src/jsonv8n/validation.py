"""Validation entry points over decoded values, strings and byte readers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Protocol, TypeVar

import structlog

from jsonv8n.constants import (
    MSG_ERROR_READING,
    MSG_ERROR_UNMARSHALLING,
    MSG_EXPECTED_JSON_ARRAY,
    MSG_EXPECTED_JSON_OBJECT,
    MSG_NOT_JSON_ARRAY,
    MSG_NOT_JSON_NULL,
    MSG_NOT_JSON_OBJECT,
    MSG_REQUEST_BODY_EXPECTED_JSON_ARRAY,
    MSG_REQUEST_BODY_EXPECTED_JSON_OBJECT,
    MSG_REQUEST_BODY_NOT_JSON_ARRAY,
    MSG_REQUEST_BODY_NOT_JSON_NULL,
    MSG_REQUEST_BODY_NOT_JSON_OBJECT,
    MSG_UNABLE_TO_DECODE,
    MSG_UNABLE_TO_DECODE_REQUEST,
)
from jsonv8n.context import ValidatorContext
from jsonv8n.engine import walk_array, walk_object
from jsonv8n.errors import DecodeError
from jsonv8n.messages import format_message
from jsonv8n.values import decode_json
from jsonv8n.violations import Violation, ViolationCode

if TYPE_CHECKING:
    from jsonv8n.schema import ObjectValidator

T = TypeVar("T")

_logger = structlog.get_logger(__name__)


class Reader(Protocol):
    def read(self) -> bytes | str: ...


@dataclass(frozen=True, slots=True)
class RootMessages:
    """Messages for a root value of the wrong shape; readers and requests word them differently."""

    unable_to_decode: str
    not_null: str
    not_array: str
    not_object: str
    expected_array: str
    expected_object: str


JSON_MESSAGES: Final[RootMessages] = RootMessages(
    unable_to_decode=MSG_UNABLE_TO_DECODE,
    not_null=MSG_NOT_JSON_NULL,
    not_array=MSG_NOT_JSON_ARRAY,
    not_object=MSG_NOT_JSON_OBJECT,
    expected_array=MSG_EXPECTED_JSON_ARRAY,
    expected_object=MSG_EXPECTED_JSON_OBJECT,
)
REQUEST_MESSAGES: Final[RootMessages] = RootMessages(
    unable_to_decode=MSG_UNABLE_TO_DECODE_REQUEST,
    not_null=MSG_REQUEST_BODY_NOT_JSON_NULL,
    not_array=MSG_REQUEST_BODY_NOT_JSON_ARRAY,
    not_object=MSG_REQUEST_BODY_NOT_JSON_OBJECT,
    expected_array=MSG_REQUEST_BODY_EXPECTED_JSON_ARRAY,
    expected_object=MSG_REQUEST_BODY_EXPECTED_JSON_OBJECT,
)


def root_violation(
    message: str, *, bad_request: bool, code: ViolationCode | None = None
) -> Violation:
    """A violation about the input as a whole (empty property and path)."""

    return Violation(
        property="", path="", message=format_message(message), bad_request=bad_request, code=code
    )


def check_root(
    validator: ObjectValidator,
    value: Any,
    ctx: ValidatorContext,
    messages: RootMessages = JSON_MESSAGES,
) -> None:
    """Dispatch a decoded root value on its shape, then walk it."""

    if value is None:
        if not validator.allow_null_json:
            ctx.add_violation(root_violation(messages.not_null, bad_request=True))
    elif isinstance(value, list):
        if validator.allow_array:
            walk_array(validator, value, ctx)
        else:
            ctx.add_violation(root_violation(messages.not_array, bad_request=False))
    elif isinstance(value, dict):
        if validator.disallow_object and validator.allow_array:
            ctx.add_violation(root_violation(messages.expected_array, bad_request=False))
        elif validator.disallow_object:
            ctx.add_violation(root_violation(messages.not_object, bad_request=False))
        else:
            walk_object(validator, value, ctx)
    else:
        ctx.add_violation(root_violation(messages.expected_object, bad_request=True))


def _run(validator: ObjectValidator, value: Any, messages: RootMessages) -> ValidatorContext:
    ctx = ValidatorContext(value, stop_on_first=validator.stop_on_first)
    check_root(validator, value, ctx, messages)
    _logger.debug("validation_completed", ok=ctx.ok, violations=len(ctx.violations))
    return ctx


def validate(validator: ObjectValidator, value: Any) -> tuple[bool, list[Violation]]:
    """Validate an already decoded JSON value (``dict``, ``list`` or scalar)."""

    ctx = _run(validator, value, JSON_MESSAGES)
    return ctx.ok, ctx.violations


def validate_into(
    validator: ObjectValidator, value: Any, target: type[T] | T
) -> tuple[bool, list[Violation], T | None]:
    """Validate ``value`` and, when valid, bind it into ``target``.

    ``target`` is a dataclass type (a new instance is built) or a dataclass instance (assigned
    in place). Binding failures raise :class:`DecodeError`.
    """

    # deferred: binding pulls in dataclass introspection only callers of *_into need
    from jsonv8n.binding import bind

    ok, violations = validate(validator, value)
    if not ok:
        return False, violations, None
    try:
        record = bind(target, value, ignore_unknown=validator.ignore_unknown_properties)
    except DecodeError as exc:
        _logger.warning("record_binding_failed", error=str(exc))
        raise
    return True, violations, record


def read_all(reader: Reader) -> bytes | str:
    return reader.read()


def decode_for(
    validator: ObjectValidator, data: bytes | str, messages: RootMessages = JSON_MESSAGES
) -> tuple[bool, Any, list[Violation]]:
    """Decode input bytes for ``validator``; failures come back as a single violation."""

    try:
        value = decode_json(data, use_number=validator.use_number)
    except DecodeError as exc:
        _logger.warning("json_decode_failed", error=str(exc), position=exc.position)
        return False, None, [
            root_violation(messages.unable_to_decode, bad_request=True, code=ViolationCode.DECODE)
        ]
    return True, value, []


def validate_bytes(
    validator: ObjectValidator, data: bytes | str, messages: RootMessages = JSON_MESSAGES
) -> tuple[bool, list[Violation], Any]:
    decoded, value, violations = decode_for(validator, data, messages)
    if not decoded:
        return False, violations, None
    ctx = _run(validator, value, messages)
    return ctx.ok, ctx.violations, value


def validate_bytes_into(
    validator: ObjectValidator,
    data: bytes | str,
    target: type[T] | T,
    messages: RootMessages = JSON_MESSAGES,
) -> tuple[bool, list[Violation], T | None]:
    """Decode, validate and bind; a binding failure is reported as a violation."""

    from jsonv8n.binding import bind

    ok, violations, value = validate_bytes(validator, data, messages)
    if not ok:
        return False, violations, None
    try:
        record = bind(target, value, ignore_unknown=validator.ignore_unknown_properties)
    except DecodeError as exc:
        _logger.warning("record_binding_failed", error=str(exc))
        return False, [
            *violations,
            root_violation(MSG_ERROR_UNMARSHALLING, bad_request=True, code=ViolationCode.DECODE),
        ], None
    return True, violations, record


def _read(reader: Reader) -> tuple[bytes | str | None, list[Violation]]:
    try:
        return read_all(reader), []
    except OSError as exc:
        _logger.warning("reader_failed", error=str(exc))
        violation = root_violation(MSG_ERROR_READING, bad_request=True, code=ViolationCode.DECODE)
        return None, [violation]


def validate_reader(
    validator: ObjectValidator, reader: Reader
) -> tuple[bool, list[Violation], Any]:
    """Read, decode and validate; returns ``(ok, violations, decoded_value)``."""

    data, violations = _read(reader)
    if data is None:
        return False, violations, None
    return validate_bytes(validator, data)


def validate_reader_into(
    validator: ObjectValidator, reader: Reader, target: type[T] | T
) -> tuple[bool, list[Violation], T | None]:
    data, violations = _read(reader)
    if data is None:
        return False, violations, None
    return validate_bytes_into(validator, data, target)


def validate_string(validator: ObjectValidator, text: str) -> tuple[bool, list[Violation], Any]:
    return validate_bytes(validator, text)


def validate_string_into(
    validator: ObjectValidator, text: str, target: type[T] | T
) -> tuple[bool, list[Violation], T | None]:
    return validate_bytes_into(validator, text, target)


__all__ = [
    "JSON_MESSAGES",
    "REQUEST_MESSAGES",
    "Reader",
    "RootMessages",
    "check_root",
    "decode_for",
    "root_violation",
    "validate",
    "validate_bytes",
    "validate_bytes_into",
    "validate_into",
    "validate_reader",
    "validate_reader_into",
    "validate_string",
    "validate_string_into",
]
