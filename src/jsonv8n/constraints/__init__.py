"""Constraint base class, built-in catalogue and the process-wide registry."""

from jsonv8n.constraints.base import (
    COMMON_FIELDS,
    CheckResult,
    Constraint,
    CustomConstraint,
    constraint_fields,
    constraint_name,
    default_field,
    positional_fields,
)
from jsonv8n.constraints.collections import (
    ArrayDistinctProperty,
    ArrayOf,
    ArrayUnique,
    IsNotNull,
    IsNull,
    Length,
    LengthExact,
    NotEmpty,
)
from jsonv8n.constraints.compare import (
    DatetimeGreaterThanOrEqualOther,
    DatetimeGreaterThanOther,
    DatetimeLessThanOrEqualOther,
    DatetimeLessThanOther,
    EqualsOther,
    GreaterThanOrEqualOther,
    GreaterThanOther,
    LessThanOrEqualOther,
    LessThanOther,
    NotEqualsOther,
    StringGreaterThanOrEqualOther,
    StringGreaterThanOther,
    StringLessThanOrEqualOther,
    StringLessThanOther,
)
from jsonv8n.constraints.datetimes import (
    DatetimeDayOfWeek,
    DatetimeFuture,
    DatetimeFutureOrPresent,
    DatetimeGreaterThan,
    DatetimeGreaterThanOrEqual,
    DatetimeLessThan,
    DatetimeLessThanOrEqual,
    DatetimePast,
    DatetimePastOrPresent,
    DatetimeRange,
)
from jsonv8n.constraints.network import NetIsCIDR, NetIsHostname, NetIsIP, NetIsURL
from jsonv8n.constraints.numbers import (
    GreaterThan,
    GreaterThanOrEqual,
    LessThan,
    LessThanOrEqual,
    Maximum,
    MaximumInt,
    Minimum,
    MinimumInt,
    MultipleOf,
    Negative,
    NegativeOrZero,
    Positive,
    PositiveOrZero,
    Range,
    RangeInt,
)
from jsonv8n.constraints.presets import Preset, presets, register_preset_pattern
from jsonv8n.constraints.registry import (
    constraint_registry,
    get_registered_constraint,
    register_constraint,
    register_constraints,
    register_named_constraint,
    register_named_constraints,
    registry_has,
    registry_reset,
)
from jsonv8n.constraints.special import (
    ConditionalConstraint,
    ConstraintSet,
    FailingConstraint,
    FailWhen,
    SetConditionFrom,
    SetConditionIf,
    SetConditionOnType,
    SetConditionProperty,
    VariablePropertyConstraint,
)
from jsonv8n.constraints.strings import (
    StringCharacters,
    StringContains,
    StringEndsWith,
    StringExactLength,
    StringGreaterThan,
    StringGreaterThanOrEqual,
    StringLength,
    StringLessThan,
    StringLessThanOrEqual,
    StringLowercase,
    StringMaxLength,
    StringMinLength,
    StringNoControlCharacters,
    StringNormalizeUnicode,
    StringNotBlank,
    StringNotEmpty,
    StringPattern,
    StringPresetPattern,
    StringStartsWith,
    StringTrim,
    StringUppercase,
    StringValidCardNumber,
    StringValidEmail,
    StringValidISODate,
    StringValidISODatetime,
    StringValidJson,
    StringValidToken,
    StringValidUnicodeNormalization,
    StringValidUuid,
)

__all__ = [
    "COMMON_FIELDS",
    "ArrayDistinctProperty",
    "ArrayOf",
    "ArrayUnique",
    "CheckResult",
    "ConditionalConstraint",
    "Constraint",
    "ConstraintSet",
    "CustomConstraint",
    "DatetimeDayOfWeek",
    "DatetimeFuture",
    "DatetimeFutureOrPresent",
    "DatetimeGreaterThan",
    "DatetimeGreaterThanOrEqual",
    "DatetimeGreaterThanOrEqualOther",
    "DatetimeGreaterThanOther",
    "DatetimeLessThan",
    "DatetimeLessThanOrEqual",
    "DatetimeLessThanOrEqualOther",
    "DatetimeLessThanOther",
    "DatetimePast",
    "DatetimePastOrPresent",
    "DatetimeRange",
    "EqualsOther",
    "FailWhen",
    "FailingConstraint",
    "GreaterThan",
    "GreaterThanOrEqual",
    "GreaterThanOrEqualOther",
    "GreaterThanOther",
    "IsNotNull",
    "IsNull",
    "Length",
    "LengthExact",
    "LessThan",
    "LessThanOrEqual",
    "LessThanOrEqualOther",
    "LessThanOther",
    "Maximum",
    "MaximumInt",
    "Minimum",
    "MinimumInt",
    "MultipleOf",
    "Negative",
    "NegativeOrZero",
    "NetIsCIDR",
    "NetIsHostname",
    "NetIsIP",
    "NetIsURL",
    "NotEmpty",
    "NotEqualsOther",
    "Positive",
    "PositiveOrZero",
    "Preset",
    "Range",
    "RangeInt",
    "SetConditionFrom",
    "SetConditionIf",
    "SetConditionOnType",
    "SetConditionProperty",
    "StringCharacters",
    "StringContains",
    "StringEndsWith",
    "StringExactLength",
    "StringGreaterThan",
    "StringGreaterThanOrEqual",
    "StringGreaterThanOrEqualOther",
    "StringGreaterThanOther",
    "StringLength",
    "StringLessThan",
    "StringLessThanOrEqual",
    "StringLessThanOrEqualOther",
    "StringLessThanOther",
    "StringLowercase",
    "StringMaxLength",
    "StringMinLength",
    "StringNoControlCharacters",
    "StringNormalizeUnicode",
    "StringNotBlank",
    "StringNotEmpty",
    "StringPattern",
    "StringPresetPattern",
    "StringStartsWith",
    "StringTrim",
    "StringUppercase",
    "StringValidCardNumber",
    "StringValidEmail",
    "StringValidISODate",
    "StringValidISODatetime",
    "StringValidJson",
    "StringValidToken",
    "StringValidUnicodeNormalization",
    "StringValidUuid",
    "VariablePropertyConstraint",
    "constraint_fields",
    "constraint_name",
    "constraint_registry",
    "default_field",
    "get_registered_constraint",
    "positional_fields",
    "presets",
    "register_constraint",
    "register_constraints",
    "register_named_constraint",
    "register_named_constraints",
    "register_preset_pattern",
    "registry_has",
    "registry_reset",
]
