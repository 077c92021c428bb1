"""Schema model: property validators, object validators and conditional variants.

Nodes are plain mutable dataclasses while a schema is being built (by hand, by the tag parser
or by the compiler). Once handed to the engine they are only read.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jsonv8n.values import JsonKind

if TYPE_CHECKING:
    from jsonv8n.constraints.base import Constraint
    from jsonv8n.expressions import PresenceExpression


@dataclass
class PropertyValidator:
    """Validation rules for one named property of an object."""

    type: JsonKind = JsonKind.ANY
    not_null: bool = False
    mandatory: bool = False
    order: int = 0
    constraints: list[Constraint] = field(default_factory=list)
    when_conditions: list[str] = field(default_factory=list)
    unwanted_conditions: list[str] = field(default_factory=list)
    unwanted_message: str = ""
    mandatory_when: list[str] = field(default_factory=list)
    object_validator: ObjectValidator | None = None
    required_with: PresenceExpression | None = None
    required_with_message: str = ""
    unwanted_with: PresenceExpression | None = None
    unwanted_with_message: str = ""
    only_with: PresenceExpression | None = None
    only_with_message: str = ""
    only: bool = False
    only_conditions: list[str] = field(default_factory=list)
    only_message: str = ""
    stop_on_first: bool = False

    def ensure_object_validator(self) -> ObjectValidator:
        if self.object_validator is None:
            self.object_validator = ObjectValidator()
        return self.object_validator

    def clone(self) -> PropertyValidator:
        return copy.deepcopy(self)


@dataclass
class ConditionalVariant:
    """Overlay merged into its object validator while all ``when_conditions`` hold."""

    when_conditions: list[str] = field(default_factory=list)
    properties: dict[str, PropertyValidator] = field(default_factory=dict)
    constraints: list[Constraint] = field(default_factory=list)
    conditional_variants: list[ConditionalVariant] = field(default_factory=list)

    def declared_names(self) -> set[str]:
        names = set(self.properties)
        for variant in self.conditional_variants:
            names |= variant.declared_names()
        return names


@dataclass
class ObjectValidator:
    """Validator for a JSON object (or, with ``allow_array``, an array of objects)."""

    properties: dict[str, PropertyValidator] = field(default_factory=dict)
    constraints: list[Constraint] = field(default_factory=list)
    ignore_unknown_properties: bool = False
    ordered_property_checks: bool = False
    when_conditions: list[str] = field(default_factory=list)
    conditional_variants: list[ConditionalVariant] = field(default_factory=list)
    allow_array: bool = False
    disallow_object: bool = False
    allow_null_json: bool = False
    allow_null_items: bool = False
    stop_on_first: bool = False
    use_number: bool = False

    def declared_names(self) -> set[str]:
        """Every property name declared on the base schema or any variant."""

        names = set(self.properties)
        for variant in self.conditional_variants:
            names |= variant.declared_names()
        return names

    def clone(self) -> ObjectValidator:
        return copy.deepcopy(self)


__all__ = ["ConditionalVariant", "ObjectValidator", "PropertyValidator"]
