"""Numeric constraints.

Sign and bound constraints (``Positive``, ``Minimum``, ``Range`` ...) ignore values that are
not numbers. The comparison constraints (``GreaterThan`` ...) are stricter and fail them.
Comparison is exact: every number is viewed as a ``Decimal``, so ``use_number`` tokens and
plain floats behave the same.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

from jsonv8n.constants import (
    FMT_GT,
    FMT_GTE,
    FMT_LT,
    FMT_LTE,
    FMT_MULTIPLE_OF,
    FMT_RANGE,
    MSG_NEGATIVE,
    MSG_NEGATIVE_OR_ZERO,
    MSG_POSITIVE,
    MSG_POSITIVE_OR_ZERO,
)
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.constraints.strings import inclusive_exclusive
from jsonv8n.messages import format_message
from jsonv8n.values import is_integral, is_number, to_decimal

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext


def format_number(value: float | int | Decimal) -> str:
    """Render a bound the way messages show it: ``10`` rather than ``10.0``."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def compare_numbers(bound: object, value: object) -> int | None:
    """``-1``/``0``/``1`` for ``bound`` versus ``value``; ``None`` unless both are numbers."""

    left = to_decimal(bound)
    right = to_decimal(value)
    if left is None or right is None:
        return None
    if left < right:
        return -1
    return 1 if left > right else 0


@dataclass
class _SignConstraint(Constraint):
    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        number = to_decimal(value)
        if number is None:
            return self.passed()
        return self.outcome(self.accepts(number), ctx)

    def accepts(self, number: Decimal) -> bool:
        raise NotImplementedError


@dataclass
class Positive(_SignConstraint):
    default_template: ClassVar[str] = MSG_POSITIVE

    def accepts(self, number: Decimal) -> bool:
        return number > 0


@dataclass
class PositiveOrZero(_SignConstraint):
    default_template: ClassVar[str] = MSG_POSITIVE_OR_ZERO

    def accepts(self, number: Decimal) -> bool:
        return number >= 0


@dataclass
class Negative(_SignConstraint):
    default_template: ClassVar[str] = MSG_NEGATIVE

    def accepts(self, number: Decimal) -> bool:
        return number < 0


@dataclass
class NegativeOrZero(_SignConstraint):
    default_template: ClassVar[str] = MSG_NEGATIVE_OR_ZERO

    def accepts(self, number: Decimal) -> bool:
        return number <= 0


@dataclass
class Minimum(Constraint):
    value: float = field(default=0.0, metadata={"default": True})
    exclusive_min: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        comparison = compare_numbers(self.value, value)
        if comparison is None:
            return self.passed()
        return self.outcome(comparison < 0 or (comparison == 0 and not self.exclusive_min), ctx)

    def default_message(self) -> str:
        template = FMT_GT if self.exclusive_min else FMT_GTE
        return format_message(template, format_number(self.value))


@dataclass
class Maximum(Constraint):
    value: float = field(default=0.0, metadata={"default": True})
    exclusive_max: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        comparison = compare_numbers(self.value, value)
        if comparison is None:
            return self.passed()
        return self.outcome(comparison > 0 or (comparison == 0 and not self.exclusive_max), ctx)

    def default_message(self) -> str:
        template = FMT_LT if self.exclusive_max else FMT_LTE
        return format_message(template, format_number(self.value))


@dataclass
class Range(Constraint):
    minimum: float = 0.0
    maximum: float = 0.0
    exclusive_min: bool = False
    exclusive_max: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        low = compare_numbers(self.minimum, value)
        high = compare_numbers(self.maximum, value)
        if low is None or high is None:
            return self.passed()
        above = low < 0 or (low == 0 and not self.exclusive_min)
        below = high > 0 or (high == 0 and not self.exclusive_max)
        return self.outcome(above and below, ctx)

    def default_message(self) -> str:
        return format_message(
            FMT_RANGE,
            format_number(self.minimum),
            inclusive_exclusive(self.exclusive_min),
            format_number(self.maximum),
            inclusive_exclusive(self.exclusive_max),
        )


@dataclass
class MinimumInt(Minimum):
    """``Minimum`` for whole numbers; a number with a fractional part fails."""

    value: int = field(default=0, metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and not is_integral(value):
            return self.failed(ctx)
        return super().check(value, ctx)


@dataclass
class MaximumInt(Maximum):
    """``Maximum`` for whole numbers; a number with a fractional part fails."""

    value: int = field(default=0, metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and not is_integral(value):
            return self.failed(ctx)
        return super().check(value, ctx)


@dataclass
class RangeInt(Range):
    minimum: int = 0
    maximum: int = 0

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and not is_integral(value):
            return self.failed(ctx)
        return super().check(value, ctx)


@dataclass
class MultipleOf(Constraint):
    value: int = 1

    default_template: ClassVar[str] = FMT_MULTIPLE_OF

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        number = to_decimal(value)
        if number is None:
            return self.passed()
        if self.value == 0:
            return self.failed(ctx)
        return self.outcome(number % Decimal(self.value) == 0, ctx)

    def template_args(self) -> tuple[object, ...]:
        return (self.value,)


@dataclass
class _ComparisonConstraint(Constraint):
    value: float = field(default=0.0, metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        comparison = compare_numbers(self.value, value)
        return self.outcome(comparison is not None and self.accepts(comparison), ctx)

    def accepts(self, comparison: int) -> bool:
        raise NotImplementedError

    def template_args(self) -> tuple[object, ...]:
        return (format_number(self.value),)


@dataclass
class GreaterThan(_ComparisonConstraint):
    default_template: ClassVar[str] = FMT_GT

    def accepts(self, comparison: int) -> bool:
        return comparison < 0


@dataclass
class GreaterThanOrEqual(_ComparisonConstraint):
    default_template: ClassVar[str] = FMT_GTE

    def accepts(self, comparison: int) -> bool:
        return comparison <= 0


@dataclass
class LessThan(_ComparisonConstraint):
    default_template: ClassVar[str] = FMT_LT

    def accepts(self, comparison: int) -> bool:
        return comparison > 0


@dataclass
class LessThanOrEqual(_ComparisonConstraint):
    default_template: ClassVar[str] = FMT_LTE

    def accepts(self, comparison: int) -> bool:
        return comparison >= 0


__all__ = [
    "GreaterThan",
    "GreaterThanOrEqual",
    "LessThan",
    "LessThanOrEqual",
    "Maximum",
    "MaximumInt",
    "Minimum",
    "MinimumInt",
    "MultipleOf",
    "Negative",
    "NegativeOrZero",
    "Positive",
    "PositiveOrZero",
    "Range",
    "RangeInt",
    "compare_numbers",
    "format_number",
]
