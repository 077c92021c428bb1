"""Reflective compiler: record descriptors (or dataclass types) to object validators."""

from __future__ import annotations

import copy
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

import structlog

from jsonv8n.constants import FMT_INCOMPATIBLE_PROPERTY_TYPE, FMT_PROPERTY_NOT_IN_REPO
from jsonv8n.descriptors import FieldDescriptor, RecordDescriptor, describe
from jsonv8n.errors import CompileError
from jsonv8n.schema import ObjectValidator, PropertyValidator
from jsonv8n.tags.parser import parse_tag
from jsonv8n.values import JsonKind

if TYPE_CHECKING:
    from jsonv8n.constraints.base import Constraint

_logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CompileOptions:
    """Root flags and root constraints of a compiled validator."""

    ignore_unknown_properties: bool = False
    constraints: tuple[Constraint, ...] = ()
    allow_null_json: bool = False
    allow_array: bool = False
    disallow_object: bool = False
    stop_on_first: bool = False
    use_number: bool = False
    ordered_property_checks: bool = False


DEFAULT_OPTIONS: Final[CompileOptions] = CompileOptions()


class PropertyRepository:
    """Named property validators reused by fields carrying ``v8n_as`` metadata."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._properties: dict[str, PropertyValidator] = {}

    def register(self, name: str, pv: PropertyValidator | None = None) -> None:
        with self._lock:
            self._properties[name] = pv if pv is not None else PropertyValidator()
        _logger.debug("property_registered", property=name)

    def register_many(self, properties: Mapping[str, PropertyValidator | None]) -> None:
        for name, pv in properties.items():
            self.register(name, pv)

    def get(self, name: str) -> PropertyValidator | None:
        """A clone of the named property, or ``None``."""

        with self._lock:
            pv = self._properties.get(name)
            return None if pv is None else pv.clone()

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._properties

    def reset(self) -> None:
        with self._lock:
            self._properties.clear()
        _logger.debug("registry_reset", registry="properties")


property_repository: Final[PropertyRepository] = PropertyRepository()


def register_property(name: str, pv: PropertyValidator | None = None) -> None:
    property_repository.register(name, pv)


def register_properties(properties: Mapping[str, PropertyValidator | None]) -> None:
    property_repository.register_many(properties)


def properties_repo_reset() -> None:
    property_repository.reset()


@dataclass(slots=True)
class _CacheEntry:
    record: type[Any] | RecordDescriptor
    options: CompileOptions
    validator: ObjectValidator


class _CompileCache:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: list[_CacheEntry] = []

    def get(
        self, record: type[Any] | RecordDescriptor, options: CompileOptions
    ) -> ObjectValidator | None:
        with self._lock:
            for entry in self._entries:
                if entry.record is record and entry.options == options:
                    return entry.validator.clone()
        return None

    def put(
        self,
        record: type[Any] | RecordDescriptor,
        options: CompileOptions,
        validator: ObjectValidator,
    ) -> None:
        with self._lock:
            self._entries.append(_CacheEntry(record, options, validator.clone()))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_compile_cache = _CompileCache()


def clear_compile_cache() -> None:
    _compile_cache.clear()


def compile_validator(
    record: type[Any] | RecordDescriptor,
    options: CompileOptions | None = None,
    *,
    cache: bool = False,
) -> ObjectValidator:
    """Build an :class:`ObjectValidator` for a dataclass type or a record descriptor.

    Tag errors fail fast as :class:`CompileError` located at the offending field. With
    ``cache=True`` a copy of the validator already compiled for the same record and options
    is returned, so callers may adjust it without affecting later lookups.
    """

    options = options or DEFAULT_OPTIONS
    if cache:
        cached = _compile_cache.get(record, options)
        if cached is not None:
            return cached
    descriptor = record if isinstance(record, RecordDescriptor) else None
    try:
        if descriptor is None:
            descriptor = describe(record)  # type: ignore[arg-type]
        properties = _RecordCompiler().properties_for(descriptor)
    except CompileError as exc:
        _logger.warning(
            "validator_compile_failed",
            record=getattr(record, "name", getattr(record, "__name__", repr(record))),
            error=str(exc),
        )
        raise
    validator = ObjectValidator(
        properties=properties,
        constraints=copy.deepcopy(list(options.constraints)),
        ignore_unknown_properties=options.ignore_unknown_properties,
        ordered_property_checks=options.ordered_property_checks,
        allow_array=options.allow_array,
        disallow_object=options.disallow_object,
        allow_null_json=options.allow_null_json,
        stop_on_first=options.stop_on_first,
        use_number=options.use_number,
    )
    _logger.debug("validator_compiled", record=descriptor.name, properties=len(properties))
    if cache:
        _compile_cache.put(record, options, validator)
    return validator


class _RecordCompiler:
    """One compilation; records referencing themselves share the in-progress property map."""

    __slots__ = ("_building",)

    def __init__(self) -> None:
        self._building: dict[int, dict[str, PropertyValidator]] = {}

    def properties_for(self, record: RecordDescriptor) -> dict[str, PropertyValidator]:
        building = self._building.get(id(record))
        if building is not None:
            return building
        properties: dict[str, PropertyValidator] = {}
        self._building[id(record)] = properties
        try:
            for item in record.fields:
                try:
                    properties[item.json_name] = self._property_for(item)
                except CompileError as exc:
                    raise exc.located(
                        field_name=item.name, property_name=item.json_name, record=record.name
                    ) from exc
        finally:
            del self._building[id(record)]
        return properties

    def _property_for(self, item: FieldDescriptor) -> PropertyValidator:
        pv = _initial_property(item)
        pv = parse_tag(item.tag, pv, property_name=item.json_name, field_name=item.name)
        nested = pv.object_validator
        if nested is not None and not self._attach_nested(item, pv, nested):
            pv.object_validator = None
        return pv

    def _attach_nested(
        self, item: FieldDescriptor, pv: PropertyValidator, validator: ObjectValidator
    ) -> bool:
        if item.record is None:
            return False
        if pv.type is JsonKind.OBJECT and item.kind is JsonKind.OBJECT:
            as_array = False
        elif pv.type is JsonKind.ARRAY and item.kind is JsonKind.ARRAY:
            as_array = True
        else:
            return False
        in_progress = id(item.record) in self._building
        properties = self.properties_for(item.record)
        if not properties and not in_progress:
            return False
        validator.properties = properties
        validator.allow_array = as_array
        validator.disallow_object = as_array
        return True


def _initial_property(item: FieldDescriptor) -> PropertyValidator:
    if item.v8n_as is None:
        pv = PropertyValidator(type=item.kind, not_null=not item.nullable)
        pv.ensure_object_validator()
        return pv
    name = item.v8n_as or item.json_name
    pv = property_repository.get(name)
    if pv is None:
        raise CompileError(message=FMT_PROPERTY_NOT_IN_REPO.format(name))
    if pv.type is not JsonKind.ANY and pv.type is not item.kind:
        raise CompileError(message=FMT_INCOMPATIBLE_PROPERTY_TYPE.format(name))
    pv.type = item.kind
    pv.ensure_object_validator()
    return pv


def compile_records(
    records: Sequence[RecordDescriptor], options: CompileOptions | None = None
) -> dict[str, ObjectValidator]:
    """Compile several records (for example every record of a YAML document) by name."""

    return {record.name: compile_validator(record, options) for record in records}


__all__ = [
    "DEFAULT_OPTIONS",
    "CompileOptions",
    "PropertyRepository",
    "clear_compile_cache",
    "compile_records",
    "compile_validator",
    "properties_repo_reset",
    "property_repository",
    "register_properties",
    "register_property",
]
