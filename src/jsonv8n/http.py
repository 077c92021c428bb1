"""Request body adapters.

Any request-like object works: one exposing ``body`` (bytes, text, ``None`` or a readable
stream), a ``get_data()`` method, or a ``read()`` method. Root violations use the
"Request body" wording.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from jsonv8n.constants import MSG_ERROR_READING, MSG_REQUEST_BODY_EMPTY
from jsonv8n.validation import REQUEST_MESSAGES, root_violation, validate_bytes, validate_bytes_into
from jsonv8n.violations import Violation, ViolationCode

if TYPE_CHECKING:
    from jsonv8n.schema import ObjectValidator

T = TypeVar("T")

_logger = structlog.get_logger(__name__)


def request_body(request: Any) -> bytes | str | None:
    """Raw body of ``request``; ``None`` when the request carries no body."""

    if hasattr(request, "body"):
        body = request.body
        if body is not None and callable(getattr(body, "read", None)):
            body = body.read()
    elif callable(getattr(request, "get_data", None)):
        body = request.get_data()
    elif callable(getattr(request, "read", None)):
        body = request.read()
    else:
        raise TypeError(f"{type(request).__name__} does not expose a request body")
    return body if body is not None and body != b"" and body != "" else None


def _body_or_violations(request: Any) -> tuple[bytes | str | None, list[Violation]]:
    try:
        body = request_body(request)
    except OSError as exc:
        _logger.warning("request_body_read_failed", error=str(exc))
        return None, [_decode_violation(MSG_ERROR_READING)]
    if body is None:
        return None, [_decode_violation(MSG_REQUEST_BODY_EMPTY)]
    return body, []


def _decode_violation(message: str) -> Violation:
    return root_violation(message, bad_request=True, code=ViolationCode.DECODE)


def validate_request(validator: ObjectValidator, request: Any) -> tuple[bool, list[Violation], Any]:
    """Validate the JSON body of ``request``; returns ``(ok, violations, decoded_body)``."""

    body, violations = _body_or_violations(request)
    if body is None:
        return False, violations, None
    return validate_bytes(validator, body, REQUEST_MESSAGES)


def validate_request_into(
    validator: ObjectValidator, request: Any, target: type[T] | T
) -> tuple[bool, list[Violation], T | None]:
    body, violations = _body_or_violations(request)
    if body is None:
        return False, violations, None
    return validate_bytes_into(validator, body, target, REQUEST_MESSAGES)


__all__ = ["request_body", "validate_request", "validate_request_into"]
