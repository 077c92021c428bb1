"""Date/time constraints over ISO-8601 strings.

Naive values are taken as UTC. With ``exc_time`` only the date part is compared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar

from jsonv8n.constants import (
    FMT_DT_GT,
    FMT_DT_GTE,
    FMT_DT_LT,
    FMT_DT_LTE,
    FMT_RANGE,
    MSG_DATETIME_DAY_OF_WEEK,
    MSG_DATETIME_FUTURE,
    MSG_DATETIME_FUTURE_OR_PRESENT,
    MSG_DATETIME_PAST,
    MSG_DATETIME_PAST_OR_PRESENT,
    MSG_VALID_ISO_DATETIME,
)
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.constraints.strings import inclusive_exclusive
from jsonv8n.messages import format_message
from jsonv8n.values import as_aware, parse_datetime

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext


def as_moment(value: Any, exc_time: bool) -> datetime | None:
    """Aware datetime for a string or ``datetime`` value; ``exc_time`` truncates to midnight."""

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is None:
            return None
        moment = parsed
    else:
        return None
    moment = as_aware(moment)
    if exc_time:
        moment = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return moment


def now_moment(exc_time: bool) -> datetime:
    moment = datetime.now(UTC)
    if exc_time:
        moment = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return moment


@dataclass
class _RelativeToNow(Constraint):
    exc_time: bool = field(default=False, metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        moment = as_moment(value, self.exc_time)
        if moment is None:
            return self.failed(ctx)
        return self.outcome(self.accepts(moment, now_moment(self.exc_time)), ctx)

    def accepts(self, moment: datetime, now: datetime) -> bool:
        raise NotImplementedError


@dataclass
class DatetimeFuture(_RelativeToNow):
    default_template: ClassVar[str] = MSG_DATETIME_FUTURE

    def accepts(self, moment: datetime, now: datetime) -> bool:
        return moment > now


@dataclass
class DatetimeFutureOrPresent(_RelativeToNow):
    default_template: ClassVar[str] = MSG_DATETIME_FUTURE_OR_PRESENT

    def accepts(self, moment: datetime, now: datetime) -> bool:
        return moment >= now


@dataclass
class DatetimePast(_RelativeToNow):
    default_template: ClassVar[str] = MSG_DATETIME_PAST

    def accepts(self, moment: datetime, now: datetime) -> bool:
        return moment < now


@dataclass
class DatetimePastOrPresent(_RelativeToNow):
    default_template: ClassVar[str] = MSG_DATETIME_PAST_OR_PRESENT

    def accepts(self, moment: datetime, now: datetime) -> bool:
        return moment <= now


@dataclass
class _RelativeToValue(Constraint):
    value: str = field(default="", metadata={"default": True})
    exc_time: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        moment = as_moment(value, self.exc_time)
        bound = as_moment(self.value, self.exc_time)
        if moment is None or bound is None:
            return self.failed(ctx)
        return self.outcome(self.accepts(moment, bound), ctx)

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        raise NotImplementedError

    def template_args(self) -> tuple[object, ...]:
        return (self.value,)


@dataclass
class DatetimeGreaterThan(_RelativeToValue):
    default_template: ClassVar[str] = FMT_DT_GT

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment > bound


@dataclass
class DatetimeGreaterThanOrEqual(_RelativeToValue):
    default_template: ClassVar[str] = FMT_DT_GTE

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment >= bound


@dataclass
class DatetimeLessThan(_RelativeToValue):
    default_template: ClassVar[str] = FMT_DT_LT

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment < bound


@dataclass
class DatetimeLessThanOrEqual(_RelativeToValue):
    default_template: ClassVar[str] = FMT_DT_LTE

    def accepts(self, moment: datetime, bound: datetime) -> bool:
        return moment <= bound


@dataclass
class DatetimeRange(Constraint):
    """Bounds are ISO strings; an empty bound is not checked."""

    minimum: str = ""
    maximum: str = ""
    exc_time: bool = False
    exclusive_min: bool = False
    exclusive_max: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        moment = as_moment(value, self.exc_time)
        if moment is None:
            return self.failed(ctx)
        return self.outcome(self._above_min(moment) and self._below_max(moment), ctx)

    def _above_min(self, moment: datetime) -> bool:
        if not self.minimum:
            return True
        bound = as_moment(self.minimum, self.exc_time)
        if bound is None:
            return False
        return moment > bound or (not self.exclusive_min and moment == bound)

    def _below_max(self, moment: datetime) -> bool:
        if not self.maximum:
            return True
        bound = as_moment(self.maximum, self.exc_time)
        if bound is None:
            return False
        return moment < bound or (not self.exclusive_max and moment == bound)

    def default_message(self) -> str:
        if self.minimum and self.maximum:
            return format_message(
                FMT_RANGE,
                self.minimum,
                inclusive_exclusive(self.exclusive_min),
                self.maximum,
                inclusive_exclusive(self.exclusive_max),
            )
        if self.minimum:
            return format_message(FMT_DT_GT if self.exclusive_min else FMT_DT_GTE, self.minimum)
        if self.maximum:
            return format_message(FMT_DT_LT if self.exclusive_max else FMT_DT_LTE, self.maximum)
        return format_message(MSG_VALID_ISO_DATETIME)


@dataclass
class DatetimeDayOfWeek(Constraint):
    """``days`` lists the allowed week day digits, ``0`` being Sunday (``"12345"`` for weekdays)."""

    days: str = field(default="", metadata={"default": True})

    default_template: ClassVar[str] = MSG_DATETIME_DAY_OF_WEEK

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        moment = as_moment(value, False)
        if moment is None:
            return self.failed(ctx)
        return self.outcome(str(moment.isoweekday() % 7) in self.days, ctx)


__all__ = [
    "DatetimeDayOfWeek",
    "DatetimeFuture",
    "DatetimeFutureOrPresent",
    "DatetimeGreaterThan",
    "DatetimeGreaterThanOrEqual",
    "DatetimeLessThan",
    "DatetimeLessThanOrEqual",
    "DatetimePast",
    "DatetimePastOrPresent",
    "DatetimeRange",
    "as_moment",
]
