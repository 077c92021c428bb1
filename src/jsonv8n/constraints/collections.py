"""Array, object and length constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from jsonv8n.constants import (
    FMT_ARRAY_DISTINCT_PROPERTY,
    FMT_ARRAY_ELEMENT_TYPE,
    FMT_ARRAY_ELEMENT_TYPE_OR_NULL,
    FMT_EXACT_LEN,
    FMT_MIN_LEN,
    FMT_MIN_LEN_EXC,
    FMT_MIN_MAX_LEN,
    MSG_ARRAY_UNIQUE,
    MSG_NOT_EMPTY,
    MSG_NULL,
    MSG_VALUE_CANNOT_BE_NULL,
)
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.constraints.strings import inclusive_exclusive
from jsonv8n.messages import format_message
from jsonv8n.values import JsonKind, json_equal, length_of, matches_kind

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext


@dataclass
class Length(Constraint):
    """Length of a string, array or object (property count)."""

    minimum: int = 0
    maximum: int = 0
    exclusive_min: bool = False
    exclusive_max: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        length = length_of(value)
        if length is None:
            return self.passed()
        if length < self.minimum or (self.exclusive_min and length == self.minimum):
            return self.failed(ctx)
        if self.maximum > 0 and (
            length > self.maximum or (self.exclusive_max and length == self.maximum)
        ):
            return self.failed(ctx)
        return self.passed()

    def default_message(self) -> str:
        if self.maximum > 0:
            return format_message(
                FMT_MIN_MAX_LEN,
                self.minimum,
                inclusive_exclusive(self.exclusive_min),
                self.maximum,
                inclusive_exclusive(self.exclusive_max),
            )
        if self.exclusive_min:
            return format_message(FMT_MIN_LEN_EXC, self.minimum)
        return format_message(FMT_MIN_LEN, self.minimum)


@dataclass
class LengthExact(Constraint):
    value: int = 0

    default_template: ClassVar[str] = FMT_EXACT_LEN

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        length = length_of(value)
        return self.outcome(length is None or length == self.value, ctx)

    def template_args(self) -> tuple[object, ...]:
        return (self.value,)


@dataclass
class NotEmpty(Constraint):
    default_template: ClassVar[str] = MSG_NOT_EMPTY

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        return self.outcome(length_of(value) != 0, ctx)


@dataclass
class ArrayOf(Constraint):
    """Every element has the given kind; optional constraints run per element."""

    type: str = field(default="any", metadata={"default": True})
    allow_null_element: bool = False
    constraints: list[Constraint] = field(default_factory=list)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, list):
            return self.passed()
        kind = JsonKind.parse(self.type)
        for index, element in enumerate(value):
            if element is None:
                if not self.allow_null_element:
                    return self.failed(ctx)
                continue
            if not matches_kind(element, kind):
                return self.failed(ctx)
            self._check_element(index, element, ctx)
            if ctx.ceased:
                break
        return self.passed()

    def _check_element(self, index: int, element: Any, ctx: ValidatorContext) -> None:
        with ctx.index_frame(index, element):
            for constraint in self.constraints:
                ok, message = constraint.check(ctx.current_value, ctx)
                if not ok:
                    ctx.add_violation_for_current(message or constraint.get_message())
                if ctx.ceased:
                    return

    def default_message(self) -> str:
        template = FMT_ARRAY_ELEMENT_TYPE
        if self.allow_null_element:
            template = FMT_ARRAY_ELEMENT_TYPE_OR_NULL
        return format_message(template, self.type)


def _unique_key(value: Any, ignore_case: bool) -> Any:
    if ignore_case and isinstance(value, str):
        return value.lower()
    return value


def _all_distinct(values: list[Any], ignore_case: bool) -> bool:
    seen: list[Any] = []
    for item in values:
        key = _unique_key(item, ignore_case)
        if any(json_equal(key, other) for other in seen):
            return False
        seen.append(key)
    return True


@dataclass
class ArrayUnique(Constraint):
    ignore_nulls: bool = field(default=False, metadata={"default": True})
    ignore_case: bool = False

    default_template: ClassVar[str] = MSG_ARRAY_UNIQUE

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, list):
            return self.passed()
        items = [item for item in value if not (item is None and self.ignore_nulls)]
        return self.outcome(_all_distinct(items, self.ignore_case), ctx)


@dataclass
class ArrayDistinctProperty(Constraint):
    property_name: str = field(default="", metadata={"default": True})
    ignore_nulls: bool = False
    ignore_case: bool = False

    default_template: ClassVar[str] = FMT_ARRAY_DISTINCT_PROPERTY

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, list):
            return self.passed()
        items = [
            element.get(self.property_name)
            for element in value
            if isinstance(element, dict)
        ]
        if self.ignore_nulls:
            items = [item for item in items if item is not None]
        return self.outcome(_all_distinct(items, self.ignore_case), ctx)

    def template_args(self) -> tuple[object, ...]:
        return (self.property_name,)


@dataclass
class IsNull(Constraint):
    default_template: ClassVar[str] = MSG_NULL

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        return self.outcome(value is None, ctx)


@dataclass
class IsNotNull(Constraint):
    default_template: ClassVar[str] = MSG_VALUE_CANNOT_BE_NULL

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        return self.outcome(value is not None, ctx)


__all__ = [
    "ArrayDistinctProperty",
    "ArrayOf",
    "ArrayUnique",
    "IsNotNull",
    "IsNull",
    "Length",
    "LengthExact",
    "NotEmpty",
]
