"""Runtime configuration defaults and strict validation.

Validation returns structured issues (dotted key path plus message) instead of failing on the
first problem, so a bad ``jsonv8n.toml`` is reported in one go.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

PATH_FIELDS: Final[tuple[tuple[str, ...], ...]] = (("logging", "file"),)

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS: Final[tuple[str, ...]] = ("console", "json")


class ValidationConfig(TypedDict):
    stop_on_first: bool
    use_number: bool
    ignore_unknown_properties: bool
    allow_null_json: bool
    ordered_property_checks: bool


class LoggingSettings(TypedDict):
    level: str
    format: Literal["console", "json"]
    file: str


class JsonV8nConfig(TypedDict):
    validation: ValidationConfig
    logging: LoggingSettings
    messages: dict[str, str]
    aliases: dict[str, str]


DEFAULT_CONFIG: Final[JsonV8nConfig] = {
    "validation": {
        "stop_on_first": False,
        "use_number": False,
        "ignore_unknown_properties": False,
        "allow_null_json": False,
        "ordered_property_checks": False,
    },
    "logging": {
        "level": "WARNING",
        "format": "console",
        "file": "",
    },
    "messages": {},
    "aliases": {},
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_config() -> JsonV8nConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto ``base``."""

    merged = copy.deepcopy(dict(base))
    _merge_into(merged, overlay)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    issues = _IssueCollector()
    root = _as_object(config, "<root>", issues)
    if root is None:
        return ConfigValidationResult(config=None, issues=issues.items())

    _reject_unknown_keys(root, set(DEFAULT_CONFIG), "", issues)
    normalized: dict[str, Any] = {}
    validation = _section(root, "validation", issues)
    if validation is not None:
        normalized["validation"] = _validate_validation(validation, "validation", issues)
    logging_section = _section(root, "logging", issues)
    if logging_section is not None:
        normalized["logging"] = _validate_logging(logging_section, "logging", issues)
    for name in ("messages", "aliases"):
        table = _section(root, name, issues)
        if table is not None:
            normalized[name] = _validate_string_table(table, name, issues)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _section(
    root: Mapping[str, object], name: str, issues: _IssueCollector
) -> dict[str, object] | None:
    if name not in root:
        issues.add(name, "missing required section")
        return None
    return _as_object(root[name], name, issues)


def _validate_validation(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = set(DEFAULT_CONFIG["validation"])
    _reject_unknown_keys(payload, allowed, path, issues)
    out: dict[str, Any] = {}
    for key in sorted(allowed):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")
            continue
        parsed = _as_bool(payload[key], _join(path, key), issues)
        if parsed is not None:
            out[key] = parsed
    return out


def _validate_logging(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"level", "format", "file"}, path, issues)
    out: dict[str, Any] = {}

    if "level" in payload:
        raw_level = payload["level"]
        level = raw_level.upper() if isinstance(raw_level, str) else raw_level
        parsed_level = _as_enum(level, _join(path, "level"), issues, allowed_values=LOG_LEVELS)
        if parsed_level is not None:
            out["level"] = parsed_level

    if "format" in payload:
        parsed_format = _as_enum(
            payload["format"], _join(path, "format"), issues, allowed_values=LOG_FORMATS
        )
        if parsed_format is not None:
            out["format"] = parsed_format

    if "file" in payload:
        raw_file = payload["file"]
        if not isinstance(raw_file, str):
            issues.add(_join(path, "file"), f"expected string, got {type(raw_file).__name__}")
        elif "\x00" in raw_file:
            issues.add(_join(path, "file"), "must not contain NUL bytes")
        else:
            out["file"] = raw_file.strip()

    for key in ("level", "format", "file"):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")
    return out


def _validate_string_table(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, str]:
    out: dict[str, str] = {}
    for key in sorted(payload):
        value = payload[key]
        if not isinstance(value, str):
            issues.add(_join(path, key), f"expected string, got {type(value).__name__}")
            continue
        out[key] = value
    return out


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            if isinstance(existing, dict):
                _merge_into(existing, value)
            else:
                nested: dict[str, Any] = {}
                _merge_into(nested, value)
                target[key] = nested
        else:
            target[key] = copy.deepcopy(value)


__all__ = [
    "DEFAULT_CONFIG",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "JsonV8nConfig",
    "LoggingSettings",
    "ValidationConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "validate_config",
]
