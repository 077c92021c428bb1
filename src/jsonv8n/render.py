"""Output rendering for the command line front end.

Respects the ``NO_COLOR`` environment variable and the ``--no-color`` flag; plain text is
always available.
"""

from __future__ import annotations

import dataclasses
import json
import os
import sys
from typing import TYPE_CHECKING, Any, TextIO

from jsonv8n.schema import ObjectValidator, PropertyValidator

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from jsonv8n.constraints.base import Constraint
    from jsonv8n.violations import Violation

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"


def color_allowed(no_color_flag: bool, stream: TextIO | None = None) -> bool:
    """Check whether color output should be attempted."""

    if no_color_flag:
        return False
    if os.environ.get("NO_COLOR", ""):
        return False
    target = stream if stream is not None else sys.stdout
    return hasattr(target, "isatty") and target.isatty()


class CLIRenderer:
    """Thin CLI output renderer producing deterministic plain text."""

    def __init__(self, *, no_color: bool = False, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._color = color_allowed(no_color, stream)

    @property
    def color(self) -> bool:
        return self._color

    def text(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout)

    def kv(self, key: str, value: object) -> None:
        self.text(f"{key}: {value}")

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        for entry in entries:
            self.text(f"  {prefix}{entry}")

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print a formatted ASCII table."""

        if not rows:
            return
        widths = [len(header) for header in headers]
        for row in rows:
            for index, cell in enumerate(row[: len(headers)]):
                widths[index] = max(widths[index], len(cell))

        def _pad(cells: Sequence[str]) -> str:
            return "  ".join(cell.ljust(widths[index]) for index, cell in enumerate(cells)).rstrip()

        self.text(f"  {_pad(headers)}")
        self.text(f"  {'  '.join('-' * width for width in widths)}")
        for row in rows:
            self.text(f"  {_pad(row)}")

    def ok(self, label: str) -> None:
        self.text(f"  {self._paint('OK', _GREEN)}  {label}")

    def fail(self, label: str) -> None:
        self.text(f"  {self._paint('FAIL', _RED)}  {label}")

    def violations(self, violations: Sequence[Violation]) -> None:
        """Print violations as a path/property/message table followed by a verdict line."""

        if not violations:
            self.ok("valid")
            return
        self.table(
            ("PATH", "PROPERTY", "MESSAGE"),
            [(item.path or "/", item.property or "-", item.message) for item in violations],
        )
        noun = "violation" if len(violations) == 1 else "violations"
        self.fail(f"{len(violations)} {noun}")

    def _paint(self, label: str, color: str) -> str:
        return f"{color}{label}{_RESET}" if self._color else label


def create_renderer(*, no_color: bool = False) -> CLIRenderer:
    return CLIRenderer(no_color=no_color)


def emit_json(payload: Mapping[str, object] | list[object], stream: TextIO | None = None) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
        file=stream or sys.stdout,
    )


def describe_constraint(constraint: Constraint) -> str:
    """``Name{field:value,...}`` listing only the fields that differ from their defaults."""

    args: list[str] = []
    for item in dataclasses.fields(constraint):
        value = getattr(constraint, item.name)
        if item.default is not dataclasses.MISSING and value == item.default:
            continue
        if item.default_factory is not dataclasses.MISSING and value == item.default_factory():
            continue
        args.append(f"{item.name}:{_literal(value)}")
    return f"{type(constraint).__name__}{{{','.join(args)}}}"


def describe_property(pv: PropertyValidator) -> dict[str, Any]:
    """JSON-ready summary of a property node (non-default settings only)."""

    summary: dict[str, Any] = {"type": pv.type.value}
    defaults = PropertyValidator()
    for item in dataclasses.fields(pv):
        if item.name in ("type", "constraints", "object_validator"):
            continue
        value = getattr(pv, item.name)
        if value != getattr(defaults, item.name):
            plain = isinstance(value, bool | int | str | list)
            summary[item.name] = value if plain else _literal(value)
    if pv.constraints:
        summary["constraints"] = [describe_constraint(c) for c in pv.constraints]
    if pv.object_validator is not None:
        described = _describe_object(pv.object_validator)
        if described:
            summary["object"] = described
    return summary


def _describe_object(validator: ObjectValidator) -> dict[str, Any]:
    summary: dict[str, Any] = {}
    defaults = ObjectValidator()
    for name in (
        "ignore_unknown_properties",
        "ordered_property_checks",
        "allow_array",
        "disallow_object",
        "allow_null_items",
        "when_conditions",
    ):
        value = getattr(validator, name)
        if value != getattr(defaults, name):
            summary[name] = value
    if validator.constraints:
        summary["constraints"] = [describe_constraint(c) for c in validator.constraints]
    if validator.properties:
        summary["properties"] = {
            name: describe_property(pv) for name, pv in validator.properties.items()
        }
    return summary


def _literal(value: object) -> str:
    pattern = getattr(value, "pattern", None)
    if isinstance(pattern, str):
        return json.dumps(pattern)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, "check"):
            return describe_constraint(value)  # type: ignore[arg-type]
        return str(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, list | tuple):
        return "[" + ",".join(_literal(item) for item in value) + "]"
    if isinstance(value, dict):
        return "{" + ",".join(f"{json.dumps(str(k))}:{_literal(v)}" for k, v in value.items()) + "}"
    return str(value)


__all__ = [
    "CLIRenderer",
    "color_allowed",
    "create_renderer",
    "describe_constraint",
    "describe_property",
    "emit_json",
]
