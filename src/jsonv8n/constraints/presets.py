"""Named string patterns used by ``StringPresetPattern`` and registered as constraints."""

from __future__ import annotations

import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from jsonv8n.constants import (
    FMT_PRESET_UUID_VERSION,
    MSG_PRESET_ALPHA,
    MSG_PRESET_ALPHA_NUMERIC,
    MSG_PRESET_BASE64,
    MSG_PRESET_BASE64_URL,
    MSG_PRESET_E164,
    MSG_PRESET_EAN13,
    MSG_PRESET_HEXADECIMAL,
    MSG_PRESET_HTML_COLOR,
    MSG_PRESET_INTEGER,
    MSG_PRESET_NUMERIC,
    MSG_PRESET_ULID,
    MSG_PRESET_UUID,
)

PostCheck = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class Preset:
    """A compiled pattern plus an optional checksum-style post check."""

    pattern: re.Pattern[str]
    message: str
    post_check: PostCheck | None = None

    def check(self, text: str) -> bool:
        if self.pattern.fullmatch(text) is None:
            return False
        return self.post_check is None or self.post_check(text)


def _ean_checksum(text: str) -> bool:
    digits = [int(ch) for ch in text]
    total = sum(digit * (3 if index % 2 else 1) for index, digit in enumerate(digits[:-1]))
    return (10 - total % 10) % 10 == digits[-1]


_UUID_VERSIONED: Final[str] = (
    "[0-9a-fA-F]{{8}}-[0-9a-fA-F]{{4}}-{0}[0-9a-fA-F]{{3}}-{1}[0-9a-fA-F]{{3}}-[0-9a-fA-F]{{12}}"
)


def _uuid_version(version: int) -> Preset:
    variant = "[89abAB]" if version >= 4 else "[0-9a-fA-F]"
    return Preset(
        re.compile(_UUID_VERSIONED.format(version, variant)),
        FMT_PRESET_UUID_VERSION.format(version),
    )


def _builtin_presets() -> dict[str, Preset]:
    table = {
        "alpha": Preset(re.compile(r"[a-zA-Z]+"), MSG_PRESET_ALPHA),
        "alphaNumeric": Preset(re.compile(r"[a-zA-Z0-9]+"), MSG_PRESET_ALPHA_NUMERIC),
        "base64": Preset(
            re.compile(
                r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{4})"
            ),
            MSG_PRESET_BASE64,
        ),
        "base64URL": Preset(
            re.compile(
                r"(?:[A-Za-z0-9\-_]{4})*"
                r"(?:[A-Za-z0-9\-_]{2}==|[A-Za-z0-9\-_]{3}=|[A-Za-z0-9\-_]{4})"
            ),
            MSG_PRESET_BASE64_URL,
        ),
        "e164": Preset(re.compile(r"\+[1-9]?[0-9]{7,14}"), MSG_PRESET_E164),
        "EAN13": Preset(re.compile(r"[0-9]{13}"), MSG_PRESET_EAN13, _ean_checksum),
        "hexadecimal": Preset(re.compile(r"(0[xX])?[0-9a-fA-F]+"), MSG_PRESET_HEXADECIMAL),
        "htmlColor": Preset(
            re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})"),
            MSG_PRESET_HTML_COLOR,
        ),
        "integer": Preset(re.compile(r"[0-9]+"), MSG_PRESET_INTEGER),
        "numeric": Preset(re.compile(r"[-+]?[0-9]*(?:\.[0-9]+)?"), MSG_PRESET_NUMERIC),
        "numeric+e": Preset(
            re.compile(r"([-+]?[0-9]*(?:\.[0-9]+)?)|([+-]?\d*\.?\d+[eE][-+]?\d+)"),
            MSG_PRESET_NUMERIC,
        ),
        "ULID": Preset(re.compile(r"[0-7][0-9A-HJKMNP-TV-Z]{25}"), MSG_PRESET_ULID),
        "UUID": Preset(
            re.compile(
                r"[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}"
            ),
            MSG_PRESET_UUID,
        ),
    }
    for version in range(1, 6):
        table[f"UUID{version}"] = _uuid_version(version)
    return table


class PresetRegistry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._presets: dict[str, Preset] = _builtin_presets()

    def register(self, name: str, preset: Preset) -> None:
        with self._lock:
            self._presets[name] = preset

    def get(self, name: str) -> Preset | None:
        with self._lock:
            return self._presets.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._presets)

    def reset(self) -> None:
        with self._lock:
            self._presets = _builtin_presets()


presets: Final[PresetRegistry] = PresetRegistry()


def register_preset_pattern(
    name: str,
    pattern: str | re.Pattern[str],
    message: str,
    post_check: PostCheck | None = None,
    *,
    as_constraint: bool = True,
) -> None:
    """Add a preset; with ``as_constraint`` it is also usable as ``&name{}`` in tags."""

    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    presets.register(name, Preset(compiled, message, post_check))
    if as_constraint:
        # local import: the registry seeds itself from this module
        from jsonv8n.constraints.registry import register_named_constraint
        from jsonv8n.constraints.strings import StringPresetPattern

        register_named_constraint(name, StringPresetPattern(preset=name), overwrite=True)


__all__ = ["Preset", "PresetRegistry", "presets", "register_preset_pattern"]
