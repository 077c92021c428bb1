"""Process-wide constraint registry used by the tag DSL.

Lookups hand out deep copies of the registered prototype, so the DSL can assign fields on the
result without touching the prototype.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable, Mapping
from typing import Final

import structlog

from jsonv8n.constants import FMT_CONSTRAINT_EXISTS
from jsonv8n.constraints import collections as collection_constraints
from jsonv8n.constraints import compare, datetimes, network, numbers, special, strings
from jsonv8n.constraints.base import Constraint, constraint_name
from jsonv8n.constraints.presets import presets
from jsonv8n.errors import RegistryError

_logger = structlog.get_logger(__name__)

BUILTIN_CONSTRAINTS: Final[tuple[type[Constraint], ...]] = (
    strings.StringNotEmpty,
    strings.StringNotBlank,
    strings.StringNoControlCharacters,
    strings.StringPattern,
    strings.StringPresetPattern,
    strings.StringValidToken,
    strings.StringCharacters,
    strings.StringLength,
    strings.StringMinLength,
    strings.StringMaxLength,
    strings.StringExactLength,
    strings.StringLowercase,
    strings.StringUppercase,
    strings.StringValidJson,
    strings.StringContains,
    strings.StringStartsWith,
    strings.StringEndsWith,
    strings.StringValidUuid,
    strings.StringValidEmail,
    strings.StringValidISODate,
    strings.StringValidISODatetime,
    strings.StringTrim,
    strings.StringNormalizeUnicode,
    strings.StringValidUnicodeNormalization,
    strings.StringValidCardNumber,
    strings.StringGreaterThan,
    strings.StringGreaterThanOrEqual,
    strings.StringLessThan,
    strings.StringLessThanOrEqual,
    numbers.Positive,
    numbers.PositiveOrZero,
    numbers.Negative,
    numbers.NegativeOrZero,
    numbers.Minimum,
    numbers.Maximum,
    numbers.Range,
    numbers.MinimumInt,
    numbers.MaximumInt,
    numbers.RangeInt,
    numbers.MultipleOf,
    numbers.GreaterThan,
    numbers.GreaterThanOrEqual,
    numbers.LessThan,
    numbers.LessThanOrEqual,
    collection_constraints.Length,
    collection_constraints.LengthExact,
    collection_constraints.NotEmpty,
    collection_constraints.ArrayOf,
    collection_constraints.ArrayUnique,
    collection_constraints.ArrayDistinctProperty,
    collection_constraints.IsNull,
    collection_constraints.IsNotNull,
    compare.EqualsOther,
    compare.NotEqualsOther,
    compare.GreaterThanOther,
    compare.GreaterThanOrEqualOther,
    compare.LessThanOther,
    compare.LessThanOrEqualOther,
    compare.StringGreaterThanOther,
    compare.StringGreaterThanOrEqualOther,
    compare.StringLessThanOther,
    compare.StringLessThanOrEqualOther,
    compare.DatetimeGreaterThanOther,
    compare.DatetimeGreaterThanOrEqualOther,
    compare.DatetimeLessThanOther,
    compare.DatetimeLessThanOrEqualOther,
    datetimes.DatetimeFuture,
    datetimes.DatetimeFutureOrPresent,
    datetimes.DatetimePast,
    datetimes.DatetimePastOrPresent,
    datetimes.DatetimeGreaterThan,
    datetimes.DatetimeGreaterThanOrEqual,
    datetimes.DatetimeLessThan,
    datetimes.DatetimeLessThanOrEqual,
    datetimes.DatetimeRange,
    datetimes.DatetimeDayOfWeek,
    network.NetIsIP,
    network.NetIsCIDR,
    network.NetIsHostname,
    network.NetIsURL,
    special.ConstraintSet,
    special.ConditionalConstraint,
    special.FailingConstraint,
    special.FailWhen,
    special.SetConditionFrom,
    special.SetConditionProperty,
    special.SetConditionIf,
    special.SetConditionOnType,
    special.VariablePropertyConstraint,
)

ABBREVIATIONS: Final[dict[str, str]] = {
    "strne": "StringNotEmpty",
    "strnb": "StringNotBlank",
    "strnocc": "StringNoControlCharacters",
    "strpatt": "StringPattern",
    "strpreset": "StringPresetPattern",
    "strtoken": "StringValidToken",
    "strchars": "StringCharacters",
    "strlen": "StringLength",
    "strmin": "StringMinLength",
    "strmax": "StringMaxLength",
    "strxlen": "StringExactLength",
    "strlower": "StringLowercase",
    "strupper": "StringUppercase",
    "strjson": "StringValidJson",
    "contains": "StringContains",
    "starts": "StringStartsWith",
    "ends": "StringEndsWith",
    "struuid": "StringValidUuid",
    "stremail": "StringValidEmail",
    "strisod": "StringValidISODate",
    "strisodt": "StringValidISODatetime",
    "strtrim": "StringTrim",
    "struninorm": "StringValidUnicodeNormalization",
    "strvcn": "StringValidCardNumber",
    "strgt": "StringGreaterThan",
    "strgte": "StringGreaterThanOrEqual",
    "strlt": "StringLessThan",
    "strlte": "StringLessThanOrEqual",
    "pos": "Positive",
    "posz": "PositiveOrZero",
    "neg": "Negative",
    "negz": "NegativeOrZero",
    "min": "Minimum",
    "max": "Maximum",
    "range": "Range",
    "mini": "MinimumInt",
    "maxi": "MaximumInt",
    "rangei": "RangeInt",
    "xof": "MultipleOf",
    "gt": "GreaterThan",
    "gte": "GreaterThanOrEqual",
    "lt": "LessThan",
    "lte": "LessThanOrEqual",
    "len": "Length",
    "lenx": "LengthExact",
    "notempty": "NotEmpty",
    "aof": "ArrayOf",
    "aunique": "ArrayUnique",
    "adistinctp": "ArrayDistinctProperty",
    "null": "IsNull",
    "notnull": "IsNotNull",
    "eqo": "EqualsOther",
    "neqo": "NotEqualsOther",
    "gto": "GreaterThanOther",
    "gteo": "GreaterThanOrEqualOther",
    "lto": "LessThanOther",
    "lteo": "LessThanOrEqualOther",
    "strgto": "StringGreaterThanOther",
    "strgteo": "StringGreaterThanOrEqualOther",
    "strlto": "StringLessThanOther",
    "strlteo": "StringLessThanOrEqualOther",
    "dtgto": "DatetimeGreaterThanOther",
    "dtgteo": "DatetimeGreaterThanOrEqualOther",
    "dtlto": "DatetimeLessThanOther",
    "dtlteo": "DatetimeLessThanOrEqualOther",
    "dtfuture": "DatetimeFuture",
    "dtfuturep": "DatetimeFutureOrPresent",
    "dtpast": "DatetimePast",
    "dtpastp": "DatetimePastOrPresent",
    "dtgt": "DatetimeGreaterThan",
    "dtgte": "DatetimeGreaterThanOrEqual",
    "dtlt": "DatetimeLessThan",
    "dtlte": "DatetimeLessThanOrEqual",
    "dtrange": "DatetimeRange",
    "dtdow": "DatetimeDayOfWeek",
    "ip": "NetIsIP",
    "cidr": "NetIsCIDR",
    "hostname": "NetIsHostname",
    "url": "NetIsURL",
    "set": "ConstraintSet",
    "cond": "ConditionalConstraint",
    "fail": "FailingConstraint",
    "failw": "FailWhen",
    "cfrom": "SetConditionFrom",
    "cpty": "SetConditionProperty",
    "cif": "SetConditionIf",
    "ctype": "SetConditionOnType",
    "varprops": "VariablePropertyConstraint",
}


def _builtin_entries() -> dict[str, Constraint]:
    entries: dict[str, Constraint] = {}
    for constraint_type in BUILTIN_CONSTRAINTS:
        entries[constraint_type.__name__] = constraint_type()
    for abbreviation, name in ABBREVIATIONS.items():
        entries[abbreviation] = entries[name]
    for preset_name in presets.names():
        entries.setdefault(preset_name, strings.StringPresetPattern(preset=preset_name))
    return entries


class ConstraintRegistry:
    """Name to prototype mapping; built-ins are re-seeded on ``reset``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[str, Constraint] = _builtin_entries()

    def register(self, name: str, constraint: Constraint, *, overwrite: bool = False) -> None:
        if not isinstance(constraint, Constraint):
            raise TypeError(f"cannot register {type(constraint).__name__} as a constraint")
        with self._lock:
            if not overwrite and name in self._entries:
                raise RegistryError(FMT_CONSTRAINT_EXISTS.format(name))
            self._entries[name] = constraint
        _logger.debug("constraint_registered", name=name, constraint=constraint_name(constraint))

    def get(self, name: str) -> Constraint | None:
        """Fresh copy of the prototype registered under ``name``."""

        with self._lock:
            prototype = self._entries.get(name)
        if prototype is None:
            return None
        return copy.deepcopy(prototype)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def reset(self) -> None:
        with self._lock:
            self._entries = _builtin_entries()
        _logger.debug("registry_reset", registry="constraints")


constraint_registry: Final[ConstraintRegistry] = ConstraintRegistry()


def register_constraint(constraint: Constraint, *, overwrite: bool = False) -> None:
    """Register ``constraint`` under its class name."""

    constraint_registry.register(constraint_name(constraint), constraint, overwrite=overwrite)


def register_constraints(constraints: Iterable[Constraint], *, overwrite: bool = False) -> None:
    for constraint in constraints:
        register_constraint(constraint, overwrite=overwrite)


def register_named_constraint(
    name: str, constraint: Constraint, *, overwrite: bool = False
) -> None:
    constraint_registry.register(name, constraint, overwrite=overwrite)


def register_named_constraints(
    constraints: Mapping[str, Constraint], *, overwrite: bool = False
) -> None:
    for name, constraint in constraints.items():
        register_named_constraint(name, constraint, overwrite=overwrite)


def get_registered_constraint(name: str) -> Constraint | None:
    return constraint_registry.get(name)


def registry_has(name: str) -> bool:
    return constraint_registry.has(name)


def registry_reset() -> None:
    constraint_registry.reset()


__all__ = [
    "ABBREVIATIONS",
    "BUILTIN_CONSTRAINTS",
    "ConstraintRegistry",
    "constraint_registry",
    "get_registered_constraint",
    "register_constraint",
    "register_constraints",
    "register_named_constraint",
    "register_named_constraints",
    "registry_has",
    "registry_reset",
]
