"""Composite, conditional and condition-setting constraints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from jsonv8n.constants import (
    FMT_CONSTRAINT_SET_ALL_OF,
    FMT_CONSTRAINT_SET_ONE_OF,
    MSG_INVALID_PROPERTY_NAME,
    MSG_PROPERTY_VALUE_MUST_BE_OBJECT,
    MSG_VALUE_CANNOT_BE_NULL,
)
from jsonv8n.conditions import all_conditions_met
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.expressions import PresenceExpression
from jsonv8n.messages import format_message
from jsonv8n.values import JsonKind, kind_of
from jsonv8n.violations import ViolationCode

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext
    from jsonv8n.schema import ObjectValidator

TYPE_CONDITION_PREFIX = "type_"


@dataclass
class ConstraintSet(Constraint):
    """Several constraints reported as one.

    All children must pass (or, with ``one_of``, any child). Only a single violation is
    produced: the set's own message, else the first failing child's message.
    """

    constraints: list[Constraint] = field(default_factory=list, metadata={"default": True})
    one_of: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.one_of:
            return self._check_one_of(ctx)
        for constraint in self.constraints:
            ok, message = constraint.check(ctx.current_value, ctx)
            if not ok:
                ctx.cease_if(self.stop)
                return False, self.message or message or self.default_message()
            if ctx.ceased:
                break
        return self.passed()

    def _check_one_of(self, ctx: ValidatorContext) -> CheckResult:
        if not self.constraints:
            return self.passed()
        for constraint in self.constraints:
            ok, _ = constraint.check(ctx.current_value, ctx)
            if ok:
                return self.passed()
        return self.failed(ctx)

    def default_message(self) -> str:
        template = FMT_CONSTRAINT_SET_ONE_OF if self.one_of else FMT_CONSTRAINT_SET_ALL_OF
        return format_message(template, len(self.constraints))


@dataclass
class ConditionalConstraint(Constraint):
    """Run ``constraint`` only when the condition tokens hold and ``others`` is true."""

    when: list[str] = field(default_factory=list)
    others: PresenceExpression | None = None
    constraint: Constraint | None = field(default=None, metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.constraint is None or not self.applies(ctx):
            return self.passed()
        return self.constraint.check(value, ctx)

    def applies(self, ctx: ValidatorContext) -> bool:
        if not all_conditions_met(ctx.conditions, self.when):
            return False
        return self.others is None or ctx.presence_holds(self.others)

    @property
    def pre_check(self) -> bool:  # type: ignore[override]
        return self.constraint is not None and self.constraint.pre_check


@dataclass
class FailingConstraint(Constraint):
    stop_all: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.stop_all:
            ctx.stop()
        return self.failed(ctx)


@dataclass
class FailWhen(Constraint):
    conditions: list[str] = field(default_factory=list, metadata={"default": True})
    stop_all: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not all_conditions_met(ctx.conditions, self.conditions):
            return self.passed()
        if self.stop_all:
            ctx.stop()
        return self.failed(ctx)


def _condition_token(raw: Any, prefix: str, mapping: Mapping[str, str]) -> str | None:
    if isinstance(raw, bool):
        text = "true" if raw else "false"
    elif isinstance(raw, str):
        text = raw
    else:
        return None
    return prefix + mapping.get(text, text)


@dataclass
class SetConditionFrom(Constraint):
    """Set a condition token from the property's own string (or boolean) value."""

    parent: bool = False
    global_: bool = False
    prefix: str = ""
    mapping: dict[str, str] = field(default_factory=dict)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        token = _condition_token(value, self.prefix, self.mapping)
        if token is not None:
            ctx.set_condition(token, parent=self.parent, global_=self.global_)
        return self.passed()


@dataclass
class SetConditionProperty(Constraint):
    """Set a condition token from the value of a named property.

    On an object validator the property is read from the object being checked; on a property
    it is looked up relative to the enclosing object.
    """

    property_name: str = field(default="", metadata={"default": True})
    prefix: str = ""
    mapping: dict[str, str] = field(default_factory=dict)
    parent: bool = False

    pre_check: ClassVar[bool] = True

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, dict) and value is ctx.current_object:
            found, raw = self.property_name in value, value.get(self.property_name)
        else:
            found, raw = ctx.lookup_other(self.property_name)
        if found:
            token = _condition_token(raw, self.prefix, self.mapping)
            if token is not None:
                ctx.set_condition(token, parent=self.parent)
        return self.passed()


@dataclass
class SetConditionIf(Constraint):
    """Set ``set_condition`` when ``others`` holds, or when ``when`` tokens are all set."""

    set_condition: str = field(default="", metadata={"default": True})
    others: PresenceExpression | None = None
    when: list[str] = field(default_factory=list)
    parent: bool = False
    global_: bool = False

    pre_check: ClassVar[bool] = True

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not self.set_condition:
            return self.passed()
        holds = all_conditions_met(ctx.conditions, self.when)
        if holds and self.others is not None:
            holds = ctx.presence_holds(self.others)
        if holds:
            ctx.set_condition(self.set_condition, parent=self.parent, global_=self.global_)
        return self.passed()


@dataclass
class SetConditionOnType(Constraint):
    """Set ``type_<kind>`` from the kind of the value; integers also set ``type_number``."""

    parent: bool = False
    global_: bool = False

    pre_check: ClassVar[bool] = True

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        try:
            kind = kind_of(value)
        except TypeError:
            return self.passed()
        kinds = [kind, JsonKind.NUMBER] if kind is JsonKind.INTEGER else [kind]
        for item in kinds:
            ctx.set_condition(
                TYPE_CONDITION_PREFIX + item.value, parent=self.parent, global_=self.global_
            )
        return self.passed()


@dataclass
class VariablePropertyConstraint(Constraint):
    """Validate every property of an object whose names are not known in advance.

    Names are checked against ``name_constraints``; values are walked with ``object_validator``.
    The owning object validator will usually set ``ignore_unknown_properties``.
    """

    name_constraints: list[Constraint] = field(default_factory=list)
    object_validator: ObjectValidator | None = None
    allow_null: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, dict):
            return self.passed()
        # deferred: the engine imports the constraint catalogue
        from jsonv8n.engine import walk_object

        for name, item in value.items():
            if not self._name_ok(name, ctx):
                continue
            if item is None:
                if not self.allow_null:
                    message = format_message(MSG_VALUE_CANNOT_BE_NULL)
                    ctx.add_violation_for_property(name, message, code=ViolationCode.NULL_VALUE)
            elif self.object_validator is not None:
                with ctx.property_frame(name, item):
                    if isinstance(item, dict):
                        walk_object(self.object_validator, item, ctx)
                    else:
                        ctx.add_violation_for_current(
                            format_message(MSG_PROPERTY_VALUE_MUST_BE_OBJECT),
                            code=ViolationCode.WRONG_TYPE,
                        )
            if not ctx.continues:
                break
        return self.passed()

    def _name_ok(self, name: str, ctx: ValidatorContext) -> bool:
        for constraint in self.name_constraints:
            ok, message = constraint.check(name, ctx)
            if not ok:
                ctx.add_violation_for_property(
                    name,
                    message or format_message(MSG_INVALID_PROPERTY_NAME),
                    code=ViolationCode.INVALID_PROPERTY,
                )
                return False
        return True


__all__ = [
    "ConditionalConstraint",
    "ConstraintSet",
    "FailWhen",
    "FailingConstraint",
    "SetConditionFrom",
    "SetConditionIf",
    "SetConditionOnType",
    "SetConditionProperty",
    "VariablePropertyConstraint",
]
