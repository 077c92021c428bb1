"""Cross-property comparisons.

The other property is named relative to the object holding the current property: a plain
name is a sibling, ``a.b`` walks down and leading dots walk up to enclosing objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

from jsonv8n.constants import (
    FMT_EQUALS_OTHER,
    FMT_GT_OTHER,
    FMT_GTE_OTHER,
    FMT_LT_OTHER,
    FMT_LTE_OTHER,
    FMT_NOT_EQUALS_OTHER,
)
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.constraints.datetimes import as_moment
from jsonv8n.constraints.numbers import compare_numbers
from jsonv8n.constraints.strings import compare_strings
from jsonv8n.values import json_equal

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext


@dataclass
class _OtherPropertyConstraint(Constraint):
    property_name: str = field(default="", metadata={"default": True})

    def template_args(self) -> tuple[object, ...]:
        return (self.property_name,)


@dataclass
class EqualsOther(_OtherPropertyConstraint):
    default_template: ClassVar[str] = FMT_EQUALS_OTHER

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        found, other = ctx.lookup_other(self.property_name)
        return self.outcome(found and json_equal(value, other), ctx)


@dataclass
class NotEqualsOther(_OtherPropertyConstraint):
    """Fails when the other property holds an equal value; a missing one fails only if strict."""

    strict: bool = False

    default_template: ClassVar[str] = FMT_NOT_EQUALS_OTHER

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        found, other = ctx.lookup_other(self.property_name)
        if not found:
            return self.outcome(not self.strict, ctx)
        return self.outcome(not json_equal(value, other), ctx)


@dataclass
class _NumericOtherConstraint(_OtherPropertyConstraint):
    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        found, other = ctx.lookup_other(self.property_name)
        comparison = compare_numbers(other, value) if found else None
        return self.outcome(comparison is not None and self.accepts(comparison), ctx)

    def accepts(self, comparison: int) -> bool:
        raise NotImplementedError


@dataclass
class GreaterThanOther(_NumericOtherConstraint):
    default_template: ClassVar[str] = FMT_GT_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison < 0


@dataclass
class GreaterThanOrEqualOther(_NumericOtherConstraint):
    default_template: ClassVar[str] = FMT_GTE_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison <= 0


@dataclass
class LessThanOther(_NumericOtherConstraint):
    default_template: ClassVar[str] = FMT_LT_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison > 0


@dataclass
class LessThanOrEqualOther(_NumericOtherConstraint):
    default_template: ClassVar[str] = FMT_LTE_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison >= 0


@dataclass
class _DatetimeOtherConstraint(_OtherPropertyConstraint):
    """Both values must be ISO date/times; naive values are taken as UTC."""

    exc_time: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        found, other = ctx.lookup_other(self.property_name)
        moment = as_moment(value, self.exc_time)
        bound = as_moment(other, self.exc_time) if found else None
        if moment is None or bound is None:
            return self.failed(ctx)
        return self.outcome(self.accepts(moment, bound), ctx)

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        raise NotImplementedError


@dataclass
class DatetimeGreaterThanOther(_DatetimeOtherConstraint):
    default_template: ClassVar[str] = FMT_GT_OTHER

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment > bound


@dataclass
class DatetimeGreaterThanOrEqualOther(_DatetimeOtherConstraint):
    default_template: ClassVar[str] = FMT_GTE_OTHER

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment >= bound


@dataclass
class DatetimeLessThanOther(_DatetimeOtherConstraint):
    default_template: ClassVar[str] = FMT_LT_OTHER

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment < bound


@dataclass
class DatetimeLessThanOrEqualOther(_DatetimeOtherConstraint):
    default_template: ClassVar[str] = FMT_LTE_OTHER

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment <= bound


@dataclass
class _StringOtherConstraint(_OtherPropertyConstraint):
    """Both values must be strings."""

    case_insensitive: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        found, other = ctx.lookup_other(self.property_name)
        if not (found and isinstance(value, str) and isinstance(other, str)):
            return self.failed(ctx)
        comparison = compare_strings(value, other, self.case_insensitive)
        return self.outcome(self.accepts(comparison), ctx)

    def accepts(self, comparison: int) -> bool:
        raise NotImplementedError


@dataclass
class StringGreaterThanOther(_StringOtherConstraint):
    default_template: ClassVar[str] = FMT_GT_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison > 0


@dataclass
class StringGreaterThanOrEqualOther(_StringOtherConstraint):
    default_template: ClassVar[str] = FMT_GTE_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison >= 0


@dataclass
class StringLessThanOther(_StringOtherConstraint):
    default_template: ClassVar[str] = FMT_LT_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison < 0


@dataclass
class StringLessThanOrEqualOther(_StringOtherConstraint):
    default_template: ClassVar[str] = FMT_LTE_OTHER

    def accepts(self, comparison: int) -> bool:
        return comparison <= 0


__all__ = [
    "DatetimeGreaterThanOrEqualOther",
    "DatetimeGreaterThanOther",
    "DatetimeLessThanOrEqualOther",
    "DatetimeLessThanOther",
    "EqualsOther",
    "GreaterThanOrEqualOther",
    "GreaterThanOther",
    "LessThanOrEqualOther",
    "LessThanOther",
    "NotEqualsOther",
    "StringGreaterThanOrEqualOther",
    "StringGreaterThanOther",
    "StringLessThanOrEqualOther",
    "StringLessThanOther",
]
