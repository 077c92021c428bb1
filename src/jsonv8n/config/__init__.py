"""Runtime configuration: ``jsonv8n.toml`` plus ``JSONV8N_`` environment overrides."""

from jsonv8n.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    apply_config,
    compile_options_from_config,
    load_config,
    logging_config_from_config,
    normalize_paths,
)
from jsonv8n.config.schema import (
    DEFAULT_CONFIG,
    PATH_FIELDS,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    JsonV8nConfig,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "PATH_FIELDS",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "JsonV8nConfig",
    "apply_config",
    "assert_valid_config",
    "compile_options_from_config",
    "default_config",
    "load_config",
    "logging_config_from_config",
    "merge_config",
    "normalize_paths",
    "validate_config",
]
