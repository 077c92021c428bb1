"""Runtime config loader.

Precedence: CLI > env (``JSONV8N_``) > ``jsonv8n.toml`` > defaults. Only scalar settings are
bound to environment variables; the ``messages`` and ``aliases`` tables come from the file.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

import structlog

from jsonv8n.compiler import CompileOptions
from jsonv8n.config.schema import PATH_FIELDS, assert_valid_config, default_config, merge_config
from jsonv8n.constants import DEFAULT_CONFIG_FILE, ENV_PREFIX
from jsonv8n.messages import MappingMessageSource, reset_message_source, set_message_source
from jsonv8n.observability.logging import LoggingConfig
from jsonv8n.tags.extensions import register_tag_token_aliases

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

_logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _Binding:
    path: tuple[str, ...]
    value_type: Literal["str", "bool"]


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load the effective config: CLI > env > file > defaults.

    ``cli_overrides`` keys are dotted paths (``"validation.stop_on_first"``); ``None`` values
    are skipped so unset command line flags do not override anything.
    """

    resolved_path = _resolve_config_path(config_path)
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_toml_file(resolved_path, required=config_path is not None)
    merged = assert_valid_config(merge_config(default_config(), file_payload))
    merged = merge_config(merged, _collect_env_overrides(merged, env_map))
    merged = merge_config(merged, _materialize_cli_overrides(cli_overrides or {}))
    merged = assert_valid_config(merged)
    return normalize_paths(merged, base_dir=resolved_path.parent)


def normalize_paths(config: Mapping[str, object], *, base_dir: Path) -> dict[str, Any]:
    """Resolve non-empty path settings relative to ``base_dir``."""

    materialized = merge_config({}, config)
    for field_path in PATH_FIELDS:
        value = _get_nested(materialized, field_path)
        if isinstance(value, str) and value:
            candidate = Path(os.path.expandvars(value)).expanduser()
            if not candidate.is_absolute():
                candidate = base_dir / candidate
            _set_nested(materialized, field_path, Path(os.path.normpath(candidate)).as_posix())
    return materialized


def apply_config(config: Mapping[str, Any]) -> None:
    """Install the configured message overrides and tag aliases process-wide."""

    messages = config.get("messages") or {}
    if messages:
        set_message_source(MappingMessageSource(messages))
    else:
        reset_message_source()
    aliases = config.get("aliases") or {}
    if aliases:
        register_tag_token_aliases(aliases)
    _logger.debug("config_applied", messages=len(messages), aliases=len(aliases))


def compile_options_from_config(config: Mapping[str, Any]) -> CompileOptions:
    validation = config["validation"]
    return CompileOptions(
        ignore_unknown_properties=validation["ignore_unknown_properties"],
        allow_null_json=validation["allow_null_json"],
        stop_on_first=validation["stop_on_first"],
        use_number=validation["use_number"],
        ordered_property_checks=validation["ordered_property_checks"],
    )


def logging_config_from_config(config: Mapping[str, Any], *, colors: bool = True) -> LoggingConfig:
    settings = config["logging"]
    return LoggingConfig(
        level=settings["level"],
        format=settings["format"],
        file=settings["file"] or None,
        colors=colors,
    )


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}
    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc
    return parsed


def _collect_env_overrides(
    config: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    bindings = _build_bindings(config)
    overrides: dict[str, Any] = {}
    for env_name in sorted(bindings):
        raw = environ.get(env_name)
        if raw is None:
            continue
        binding = bindings[env_name]
        _set_nested(overrides, binding.path, _coerce_env(raw, binding, env_name))
    return overrides


def _build_bindings(config: Mapping[str, object]) -> dict[str, _Binding]:
    bindings: dict[str, _Binding] = {}
    for section in ("validation", "logging"):
        payload = config.get(section)
        if not isinstance(payload, Mapping):
            continue
        for key in sorted(payload):
            value = payload[key]
            kind: Literal["str", "bool"] = "bool" if isinstance(value, bool) else "str"
            path = (section, key)
            bindings[_env_name_for_path(path)] = _Binding(path=path, value_type=kind)
    return bindings


def _coerce_env(raw: str, binding: _Binding, env_name: str) -> object:
    value = raw.strip()
    if binding.value_type == "str":
        return value
    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(
        f"{env_name} -> {'.'.join(binding.path)} must be a boolean (true/false/1/0/yes/no/on/off)"
    )


def _materialize_cli_overrides(cli_overrides: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in sorted(cli_overrides):
        value = cli_overrides[key]
        if value is None:
            continue
        path = tuple(part for part in key.split(".") if part)
        if not path:
            raise ConfigLoadError(f"invalid CLI override key {key!r}")
        _set_nested(payload, path, value)
    return payload


def _set_nested(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


def _get_nested(payload: Mapping[str, object], path: tuple[str, ...]) -> object | None:
    cursor: object = payload
    for part in path:
        if not isinstance(cursor, Mapping) or part not in cursor:
            return None
        cursor = cursor[part]
    return cursor


def _env_name_for_path(path: tuple[str, ...]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in path)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "ConfigLoadError",
    "apply_config",
    "compile_options_from_config",
    "load_config",
    "logging_config_from_config",
    "normalize_paths",
]
