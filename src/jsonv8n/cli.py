"""Command-line interface router for jsonv8n.

Exit codes: 0 valid, 1 violations found, 2 compile, decode or configuration error.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from jsonv8n.compiler import compile_validator
from jsonv8n.config import (
    ConfigLoadError,
    ConfigValidationError,
    apply_config,
    compile_options_from_config,
    load_config,
    logging_config_from_config,
)
from jsonv8n.constraints.registry import constraint_registry
from jsonv8n.descriptors import load_descriptors
from jsonv8n.errors import CompileError, DecodeError
from jsonv8n.observability.logging import setup_logging, shutdown_logging
from jsonv8n.render import CLIRenderer, color_allowed, create_renderer, describe_property, emit_json
from jsonv8n.schema import PropertyValidator
from jsonv8n.tags.parser import parse_tag
from jsonv8n.validation import validate_bytes
from jsonv8n.violations import sort_violations

EXIT_OK: Final[int] = 0
EXIT_VIOLATIONS: Final[int] = 1
EXIT_ERROR: Final[int] = 2
STDIN_MARKER: Final[str] = "-"


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = EXIT_ERROR

    def __str__(self) -> str:
        return self.message


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="jsonv8n",
        description=(
            "jsonv8n - declarative JSON validation.\n\n"
            "Common workflows:\n"
            "  jsonv8n validate --schema schema.yaml input.json\n"
            "  jsonv8n check-tag 'mandatory, notNull, &StringNotEmpty{}'\n"
            "  jsonv8n constraints\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to TOML config (default: ./jsonv8n.toml if present).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a JSON document against a YAML record schema.",
    )
    validate_parser.add_argument(
        "--schema", required=True, help="YAML record descriptor document."
    )
    validate_parser.add_argument(
        "--record", default=None, help="Record to validate against (default: the document root)."
    )
    validate_parser.add_argument(
        "--stop-on-first",
        action="store_const",
        const=True,
        default=None,
        help="Stop at the first violation.",
    )
    validate_parser.add_argument(
        "--use-number",
        action="store_const",
        const=True,
        default=None,
        help="Keep JSON numbers as exact tokens while validating.",
    )
    validate_parser.add_argument(
        "--json", action="store_true", default=False, help="Emit machine-readable JSON."
    )
    validate_parser.add_argument("input", help=f"JSON input file, or '{STDIN_MARKER}' for stdin.")
    validate_parser.set_defaults(handler=_cmd_validate)

    check_tag_parser = subparsers.add_parser(
        "check-tag",
        help="Parse a v8n tag and print the resulting property validator.",
    )
    check_tag_parser.add_argument("tag", help="The v8n tag body.")
    check_tag_parser.set_defaults(handler=_cmd_check_tag)

    constraints_parser = subparsers.add_parser(
        "constraints",
        help="List registered constraint names.",
    )
    constraints_parser.add_argument(
        "--json", action="store_true", default=False, help="Emit machine-readable JSON."
    )
    constraints_parser.set_defaults(handler=_cmd_constraints)
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return EXIT_ERROR

    try:
        config = _load_effective_config(namespace)
        setup_logging(
            logging_config_from_config(config, colors=color_allowed(namespace.no_color, sys.stderr))
        )
        try:
            apply_config(config)
            return int(handler(namespace, config))
        finally:
            shutdown_logging()
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    except (CompileError, DecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


def main(argv: Sequence[str] | None = None) -> int:
    return run_cli(argv)


def cli_entrypoint() -> None:
    """Console-script entrypoint."""

    raise SystemExit(run_cli())


def _cmd_validate(args: argparse.Namespace, config: dict[str, Any]) -> int:
    records, root = load_descriptors(args.schema)
    name = args.record or root
    record = records.get(name)
    if record is None:
        raise CLIError(f"record '{name}' is not defined in {args.schema}")
    validator = compile_validator(record, compile_options_from_config(config))

    data = _read_input(args.input)
    ok, violations, _ = validate_bytes(validator, data)
    ordered = sort_violations(violations)
    if args.json:
        emit_json({"ok": ok, "violations": [item.to_dict() for item in ordered]})
    else:
        _get_renderer(args).violations(ordered)
    return EXIT_OK if ok else EXIT_VIOLATIONS


def _cmd_check_tag(args: argparse.Namespace, config: dict[str, Any]) -> int:
    pv = PropertyValidator()
    pv.ensure_object_validator()
    pv = parse_tag(args.tag, pv)
    emit_json(describe_property(pv))
    return EXIT_OK


def _cmd_constraints(args: argparse.Namespace, config: dict[str, Any]) -> int:
    names = constraint_registry.names()
    if args.json:
        emit_json(list(names))
        return EXIT_OK
    _get_renderer(args).items(names, prefix="")
    return EXIT_OK


def _read_input(source: str) -> bytes:
    try:
        if source == STDIN_MARKER:
            return sys.stdin.buffer.read()
        return Path(source).read_bytes()
    except OSError as exc:
        raise CLIError(f"unable to read input {source}: {exc}") from exc


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {
        "logging.level": args.log_level.upper() if args.log_level else None,
        "validation.stop_on_first": getattr(args, "stop_on_first", None),
        "validation.use_number": getattr(args, "use_number", None),
    }
    try:
        return load_config(args.config_path, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=EXIT_ERROR) from exc


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(no_color=bool(getattr(args, "no_color", False)))


__all__ = ["CLIError", "build_parser", "cli_entrypoint", "main", "run_cli"]
