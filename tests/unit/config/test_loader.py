"""
jsonv8n - unit tests for the runtime config loader

File: tests/unit/config/test_loader.py

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Env var path mapping and boolean coercion.
- Path normalization relative to the config file.
- Installing configured messages and tag aliases.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from jsonv8n.compiler import CompileOptions
from jsonv8n.config import (
    ConfigLoadError,
    ConfigValidationError,
    apply_config,
    compile_options_from_config,
    load_config,
    logging_config_from_config,
)
from jsonv8n.schema import ObjectValidator
from jsonv8n.tags.parser import parse_tag
from jsonv8n.validation import validate


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "jsonv8n.toml"
    default_path = tmp_path / "empty.toml"
    _write_config(default_path, "")
    _write_config(config_path, "[validation]\nstop_on_first = true\n")

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env = {"JSONV8N_VALIDATION_STOP_ON_FIRST": "off"}
    env_loaded = load_config(config_path, environ=env)
    cli_loaded = load_config(
        config_path, environ=env, cli_overrides={"validation.stop_on_first": True}
    )

    assert default_loaded["validation"]["stop_on_first"] is False
    assert file_loaded["validation"]["stop_on_first"] is True
    assert env_loaded["validation"]["stop_on_first"] is False
    assert cli_loaded["validation"]["stop_on_first"] is True


def test_unset_cli_overrides_are_skipped(tmp_path: Path) -> None:
    config_path = tmp_path / "jsonv8n.toml"
    _write_config(config_path, '[logging]\nlevel = "error"\n')

    loaded = load_config(config_path, environ={}, cli_overrides={"logging.level": None})

    assert loaded["logging"]["level"] == "ERROR"


def test_env_strings_and_invalid_booleans(tmp_path: Path) -> None:
    config_path = tmp_path / "jsonv8n.toml"
    _write_config(config_path, "")

    loaded = load_config(
        config_path,
        environ={"JSONV8N_LOGGING_LEVEL": " debug ", "JSONV8N_LOGGING_FORMAT": "json"},
    )
    assert loaded["logging"]["level"] == "DEBUG"
    assert loaded["logging"]["format"] == "json"

    with pytest.raises(ConfigLoadError, match="validation.use_number must be a boolean"):
        load_config(config_path, environ={"JSONV8N_VALIDATION_USE_NUMBER": "maybe"})


def test_log_file_is_resolved_relative_to_config(tmp_path: Path) -> None:
    config_path = tmp_path / "conf" / "jsonv8n.toml"
    _write_config(config_path, '[logging]\nfile = "logs/run.log"\n')

    loaded = load_config(config_path, environ={})

    expected = (tmp_path / "conf" / "logs" / "run.log").resolve()
    assert loaded["logging"]["file"] == expected.as_posix()


def test_missing_and_malformed_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})

    broken = tmp_path / "broken.toml"
    _write_config(broken, "[validation\n")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(broken, environ={})

    unknown = tmp_path / "unknown.toml"
    _write_config(unknown, "[validation]\nfast = true\n")
    with pytest.raises(ConfigValidationError, match="validation.fast: unknown field"):
        load_config(unknown, environ={})

    monkeypatch.chdir(tmp_path)
    assert load_config(environ={})["logging"]["level"] == "WARNING"


def test_config_maps_to_compile_and_logging_options(tmp_path: Path) -> None:
    config_path = tmp_path / "jsonv8n.toml"
    _write_config(
        config_path,
        "[validation]\nuse_number = true\nignore_unknown_properties = true\n"
        '[logging]\nformat = "json"\n',
    )
    loaded = load_config(config_path, environ={})

    assert compile_options_from_config(loaded) == CompileOptions(
        ignore_unknown_properties=True, use_number=True
    )
    logging_config = logging_config_from_config(loaded, colors=False)
    assert logging_config.format == "json"
    assert logging_config.file is None
    assert logging_config.colors is False


def test_apply_config_installs_messages_and_aliases(tmp_path: Path) -> None:
    config_path = tmp_path / "jsonv8n.toml"
    _write_config(
        config_path,
        '[messages]\n"Missing property" = "Required"\n'
        '[aliases]\nreq = "mandatory, notNull"\n',
    )

    apply_config(load_config(config_path, environ={}))

    validator = ObjectValidator(properties={"name": parse_tag("$req")})
    _, violations = validate(validator, {})
    assert [item.message for item in violations] == ["Required"]
