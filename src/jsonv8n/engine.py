"""Depth-first validation walk.

The walk for one object re-resolves the active schema (base properties plus every conditional
variant whose guard currently holds) before each property is checked, because checking a
property may set condition tokens that activate further variants. Each property of the merged
schema is visited exactly once per object.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from jsonv8n.conditions import all_conditions_met, any_condition_met
from jsonv8n.constants import (
    FMT_ARRAY_ELEMENT_MUST_BE_OBJECT,
    FMT_VALUE_EXPECTED_TYPE,
    MSG_INVALID_PROPERTY,
    MSG_MISSING_PROPERTY,
    MSG_ONLY_PROPERTY,
    MSG_UNKNOWN_PROPERTY,
    MSG_UNWANTED_PROPERTY,
    MSG_VALUE_CANNOT_BE_NULL,
    MSG_VALUE_MUST_BE_ARRAY,
    MSG_VALUE_MUST_BE_OBJECT,
    MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY,
)
from jsonv8n.messages import format_message
from jsonv8n.values import matches_kind
from jsonv8n.violations import ViolationCode

if TYPE_CHECKING:
    from jsonv8n.conditions import ConditionSet
    from jsonv8n.constraints.base import Constraint
    from jsonv8n.context import ValidatorContext
    from jsonv8n.schema import ConditionalVariant, ObjectValidator, PropertyValidator


@dataclass(slots=True)
class ActiveSchema:
    """Base schema merged with the variants active under a condition set."""

    properties: dict[str, PropertyValidator] = field(default_factory=dict)
    constraints: list[Constraint] = field(default_factory=list)
    variants: list[ConditionalVariant] = field(default_factory=list)

    def ordered_names(self, ordered: bool) -> list[str]:
        names = list(self.properties)
        if not ordered and not any(pv.order for pv in self.properties.values()):
            return names
        position = {name: index for index, name in enumerate(names)}
        return sorted(names, key=lambda name: (self.properties[name].order, position[name]))


def resolve_schema(validator: ObjectValidator, conditions: ConditionSet) -> ActiveSchema:
    """Merge active variants depth-first; a variant property replaces a base one in place."""

    active = ActiveSchema(dict(validator.properties), list(validator.constraints))
    _merge_variants(validator.conditional_variants, conditions, active)
    return active


def _merge_variants(
    variants: Iterable[ConditionalVariant], conditions: ConditionSet, active: ActiveSchema
) -> None:
    for variant in variants:
        if not all_conditions_met(conditions, variant.when_conditions):
            continue
        active.variants.append(variant)
        active.properties.update(variant.properties)
        active.constraints.extend(variant.constraints)
        _merge_variants(variant.conditional_variants, conditions, active)


def walk_object(validator: ObjectValidator, obj: dict[str, Any], ctx: ValidatorContext) -> None:
    """Validate ``obj`` in a new object activation of ``ctx``."""

    if not all_conditions_met(ctx.conditions, validator.when_conditions):
        return
    with ctx.object_scope(obj):
        _ObjectWalk(validator, obj, ctx).run()


def walk_array(validator: ObjectValidator, items: list[Any], ctx: ValidatorContext) -> None:
    """Validate every element of ``items`` as an object."""

    for index, item in enumerate(items):
        if isinstance(item, dict):
            with ctx.index_frame(index, item):
                walk_object(validator, item, ctx)
        elif not (item is None and validator.allow_null_items):
            _shape_violation(ctx, FMT_ARRAY_ELEMENT_MUST_BE_OBJECT, index)
        if not ctx.continues:
            return


def descend(validator: ObjectValidator, value: Any, ctx: ValidatorContext) -> None:
    """Recurse into a property value with its object validator, checking its shape first."""

    accepts_object = not validator.disallow_object
    accepts_array = validator.allow_array or validator.disallow_object
    if accepts_object and isinstance(value, dict):
        walk_object(validator, value, ctx)
    elif accepts_array and isinstance(value, list):
        walk_array(validator, value, ctx)
    elif accepts_object and accepts_array:
        _shape_violation(ctx, MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY)
    elif accepts_object:
        _shape_violation(ctx, MSG_VALUE_MUST_BE_OBJECT)
    else:
        _shape_violation(ctx, MSG_VALUE_MUST_BE_ARRAY)


def _shape_violation(ctx: ValidatorContext, template: str, *args: object) -> None:
    ctx.add_violation_for_current(format_message(template, *args), code=ViolationCode.WRONG_TYPE)


def check_property_value(pv: PropertyValidator, value: Any, ctx: ValidatorContext) -> None:
    """Null, type and constraint checks for a present property (inside its path frame)."""

    if value is None:
        if pv.not_null:
            ctx.add_violation_for_current(
                format_message(MSG_VALUE_CANNOT_BE_NULL), code=ViolationCode.NULL_VALUE
            )
        return
    if not matches_kind(value, pv.type):
        ctx.add_violation_for_current(
            format_message(FMT_VALUE_EXPECTED_TYPE, pv.type.value), code=ViolationCode.WRONG_TYPE
        )
        return
    with ctx.held_conditions() as commit:
        passed = run_constraints(pv.constraints, ctx, stop_on_first=pv.stop_on_first)
        if passed:
            commit()
    if passed and pv.object_validator is not None and ctx.continues:
        descend(pv.object_validator, ctx.current_value, ctx)


def run_constraints(
    constraints: Iterable[Constraint], ctx: ValidatorContext, *, stop_on_first: bool = False
) -> bool:
    """Check each constraint against the (possibly rewritten) current value."""

    passed = True
    ctx.reset_ceased()
    try:
        for constraint in constraints:
            ok, message = constraint.check(ctx.current_value, ctx)
            if not ok:
                passed = False
                ctx.add_violation_for_current(message or constraint.get_message())
                if stop_on_first:
                    break
            if ctx.ceased:
                break
    finally:
        ctx.reset_ceased()
    return passed


class _ObjectWalk:
    __slots__ = ("_activated", "_ctx", "_obj", "_validator", "_visited")

    def __init__(
        self, validator: ObjectValidator, obj: dict[str, Any], ctx: ValidatorContext
    ) -> None:
        self._validator = validator
        self._obj = obj
        self._ctx = ctx
        self._activated: set[int] = set()
        self._visited: set[str] = set()

    def run(self) -> None:
        ctx = self._ctx
        self._pre_check(self._validator.constraints)
        active = self._resolve()
        while ctx.continues:
            name = self._next_pending(active)
            if name is None:
                break
            self._visited.add(name)
            self._check_property(name, active)
            active = self._resolve()
        if ctx.continues:
            run_constraints((c for c in active.constraints if not c.pre_check), ctx)
        if ctx.continues:
            self._check_keys(active)

    def _resolve(self) -> ActiveSchema:
        # Pre-checks of a newly active variant may set tokens that activate further variants.
        while True:
            active = resolve_schema(self._validator, self._ctx.conditions)
            fresh = [variant for variant in active.variants if id(variant) not in self._activated]
            if not fresh:
                return active
            for variant in fresh:
                self._activated.add(id(variant))
                self._pre_check(variant.constraints)

    def _pre_check(self, constraints: Iterable[Constraint]) -> None:
        pre = [constraint for constraint in constraints if constraint.pre_check]
        if pre and self._ctx.continues:
            run_constraints(pre, self._ctx)

    def _next_pending(self, active: ActiveSchema) -> str | None:
        ordered = self._validator.ordered_property_checks
        for name in active.ordered_names(ordered):
            if name not in self._visited:
                return name
        return None

    def _check_property(self, name: str, active: ActiveSchema) -> None:
        ctx = self._ctx
        pv = active.properties[name]
        if not all_conditions_met(ctx.conditions, pv.when_conditions):
            return
        present = name in self._obj
        if pv.unwanted_conditions and any_condition_met(ctx.conditions, pv.unwanted_conditions):
            if present:
                self._property_violation(
                    name,
                    pv.unwanted_message,
                    MSG_UNWANTED_PROPERTY,
                    ViolationCode.UNWANTED_PROPERTY,
                )
            return
        if not present:
            if self._required(pv) and not self._other_only_present(name, active):
                message = pv.required_with_message if pv.required_with is not None else ""
                self._property_violation(
                    name, message, MSG_MISSING_PROPERTY, ViolationCode.MISSING_PROPERTY
                )
            return
        if pv.unwanted_with is not None and ctx.presence_holds(pv.unwanted_with):
            self._property_violation(
                name,
                pv.unwanted_with_message,
                MSG_UNWANTED_PROPERTY,
                ViolationCode.UNWANTED_PROPERTY,
            )
            return
        if pv.only_with is not None and not ctx.presence_holds(pv.only_with):
            self._property_violation(
                name,
                pv.only_with_message,
                MSG_UNWANTED_PROPERTY,
                ViolationCode.UNWANTED_PROPERTY,
            )
            return
        if self._only_applies(pv) and self._other_only_present(name, active):
            self._property_violation(
                name, pv.only_message, MSG_ONLY_PROPERTY, ViolationCode.ONLY_PROPERTY
            )
            return
        value = self._obj[name]
        with ctx.property_frame(name, value):
            check_property_value(pv, value, ctx)

    def _required(self, pv: PropertyValidator) -> bool:
        # mandatory_when gates mandatory: required only while one of its tokens holds
        if pv.mandatory or pv.mandatory_when:
            if not pv.mandatory_when or any_condition_met(self._ctx.conditions, pv.mandatory_when):
                return True
        return pv.required_with is not None and self._ctx.presence_holds(pv.required_with)

    def _only_applies(self, pv: PropertyValidator) -> bool:
        return pv.only and all_conditions_met(self._ctx.conditions, pv.only_conditions)

    def _other_only_present(self, name: str, active: ActiveSchema) -> bool:
        if not self._only_applies(active.properties[name]):
            return False
        return any(
            other != name and other in self._obj and self._only_applies(pv)
            for other, pv in active.properties.items()
        )

    def _property_violation(
        self, name: str, override: str, template: str, code: ViolationCode
    ) -> None:
        self._ctx.add_violation_for_property(name, override or format_message(template), code=code)

    def _check_keys(self, active: ActiveSchema) -> None:
        ctx = self._ctx
        declared: set[str] | None = None
        for key in self._obj:
            if key in active.properties:
                continue
            if declared is None:
                declared = self._validator.declared_names()
            if key in declared:
                self._property_violation(
                    key, "", MSG_INVALID_PROPERTY, ViolationCode.INVALID_PROPERTY
                )
            elif not self._validator.ignore_unknown_properties:
                self._property_violation(
                    key, "", MSG_UNKNOWN_PROPERTY, ViolationCode.UNKNOWN_PROPERTY
                )
            if not ctx.continues:
                return


__all__ = [
    "ActiveSchema",
    "check_property_value",
    "descend",
    "resolve_schema",
    "run_constraints",
    "walk_array",
    "walk_object",
]
