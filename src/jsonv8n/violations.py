"""Violation records produced by the validation walk."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ViolationCode(StrEnum):
    MISSING_PROPERTY = "missing_property"
    UNKNOWN_PROPERTY = "unknown_property"
    INVALID_PROPERTY = "invalid_property"
    UNWANTED_PROPERTY = "unwanted_property"
    ONLY_PROPERTY = "only_property"
    NULL_VALUE = "null_value"
    WRONG_TYPE = "wrong_type"
    CONSTRAINT = "constraint"
    DECODE = "decode"


@dataclass(frozen=True, slots=True)
class Violation:
    """One structured validation failure; never raised."""

    property: str
    path: str
    message: str
    bad_request: bool = True
    code: ViolationCode | None = None
    batch: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "property": self.property,
            "path": self.path,
            "message": self.message,
            "bad_request": self.bad_request,
        }
        if self.code is not None:
            payload["code"] = self.code.value
        if self.batch:
            payload["batch"] = self.batch
        return payload


def sort_violations(violations: Iterable[Violation]) -> list[Violation]:
    """Stable sort by ``(path, property, message)``."""

    return sorted(violations, key=lambda item: (item.path, item.property, item.message))


__all__ = ["Violation", "ViolationCode", "sort_violations"]
