"""String constraints.

Every constraint here passes values that are not strings unless ``strict`` is set, so a
property declared ``type:any`` can carry them without failing numbers or booleans. Lengths
count characters, not encoded bytes.
"""

from __future__ import annotations

import ipaddress
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Final

from jsonv8n.constants import (
    FMT_STR_GT,
    FMT_STR_GTE,
    FMT_STR_LT,
    FMT_STR_LTE,
    FMT_STRING_CONTAINS,
    FMT_STRING_ENDS_WITH,
    FMT_STRING_EXACT_LEN,
    FMT_STRING_MAX_LEN,
    FMT_STRING_MAX_LEN_EXC,
    FMT_STRING_MIN_LEN,
    FMT_STRING_MIN_LEN_EXC,
    FMT_STRING_MIN_MAX_LEN,
    FMT_STRING_NOT_CONTAINS,
    FMT_STRING_NOT_ENDS_WITH,
    FMT_STRING_NOT_STARTS_WITH,
    FMT_STRING_STARTS_WITH,
    FMT_UNKNOWN_PRESET_PATTERN,
    FMT_UUID_CORRECT_VERSION,
    FMT_UUID_MIN_VERSION,
    FMT_VALID_TOKEN,
    MSG_INVALID_CHARACTERS,
    MSG_NO_CONTROL_CHARS,
    MSG_NOT_BLANK_STRING,
    MSG_NOT_EMPTY_STRING,
    MSG_STRING_LOWERCASE,
    MSG_STRING_UPPERCASE,
    MSG_STRING_VALID_JSON,
    MSG_UNICODE_NORMALIZATION_NFC,
    MSG_UNICODE_NORMALIZATION_NFD,
    MSG_UNICODE_NORMALIZATION_NFKC,
    MSG_UNICODE_NORMALIZATION_NFKD,
    MSG_VALID_CARD_NUMBER,
    MSG_VALID_EMAIL,
    MSG_VALID_ISO_DATE,
    MSG_VALID_ISO_DATETIME,
    MSG_VALID_ISO_DATETIME_MIN,
    MSG_VALID_ISO_DATETIME_NO_MILLIS,
    MSG_VALID_ISO_DATETIME_NO_OFFSET,
    MSG_VALID_PATTERN,
    MSG_VALID_UUID,
    TOKEN_EXCLUSIVE,
    TOKEN_INCLUSIVE,
)
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.constraints.presets import presets
from jsonv8n.errors import DecodeError
from jsonv8n.messages import format_message, translate
from jsonv8n.values import decode_json

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext

_UUID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}"
)
_ISO_DATE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\d{4}-\d{2}-\d{2}")
_ISO_DATETIME_PATTERNS: Final[dict[tuple[bool, bool], re.Pattern[str]]] = {
    (False, False): re.compile(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(([+-]\d{2}:\d{2})|Z)?"
    ),
    (True, False): re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?"),
    (False, True): re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(([+-]\d{2}:\d{2})|Z)?"),
    (True, True): re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"),
}
_ISO_DATETIME_MESSAGES: Final[dict[tuple[bool, bool], str]] = {
    (False, False): MSG_VALID_ISO_DATETIME,
    (True, False): MSG_VALID_ISO_DATETIME_NO_OFFSET,
    (False, True): MSG_VALID_ISO_DATETIME_NO_MILLIS,
    (True, True): MSG_VALID_ISO_DATETIME_MIN,
}
_EMAIL_LOCAL: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]{1,64}")
_DOMAIN_LABEL: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?")
_BLANK_CHARS: Final[str] = " \t\n\r"
_DEFAULT_CUTSET: Final[str] = " \t"
_NORMALIZATION_MESSAGES: Final[dict[str, str]] = {
    "NFC": MSG_UNICODE_NORMALIZATION_NFC,
    "NFD": MSG_UNICODE_NORMALIZATION_NFD,
    "NFKC": MSG_UNICODE_NORMALIZATION_NFKC,
    "NFKD": MSG_UNICODE_NORMALIZATION_NFKD,
}


def inclusive_exclusive(exclusive: bool) -> str:
    return translate(TOKEN_EXCLUSIVE if exclusive else TOKEN_INCLUSIVE)


@dataclass
class StringConstraint(Constraint):
    """Base for constraints that only examine string values."""

    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, str):
            return self.wrong_kind(ctx)
        return self.outcome(self.check_string(value), ctx)

    def check_string(self, text: str) -> bool:
        raise NotImplementedError


@dataclass
class StringNotEmpty(StringConstraint):
    default_template: ClassVar[str] = MSG_NOT_EMPTY_STRING

    def check_string(self, text: str) -> bool:
        return len(text) > 0


@dataclass
class StringNotBlank(StringConstraint):
    default_template: ClassVar[str] = MSG_NOT_BLANK_STRING

    def check_string(self, text: str) -> bool:
        return len(text.strip(_BLANK_CHARS)) > 0


@dataclass
class StringNoControlCharacters(StringConstraint):
    default_template: ClassVar[str] = MSG_NO_CONTROL_CHARS

    def check_string(self, text: str) -> bool:
        return all(ord(ch) >= 32 for ch in text)


@dataclass
class StringPattern(StringConstraint):
    regexp: re.Pattern[str] | None = None

    default_template: ClassVar[str] = MSG_VALID_PATTERN

    def check_string(self, text: str) -> bool:
        return self.regexp is None or self.regexp.search(text) is not None


@dataclass
class StringPresetPattern(StringConstraint):
    preset: str = ""

    default_template: ClassVar[str] = MSG_VALID_PATTERN

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        preset = presets.get(self.preset)
        if not isinstance(value, str) and not self.strict:
            return self.passed()
        ctx.cease_if(self.stop)
        if preset is None:
            return False, format_message(FMT_UNKNOWN_PRESET_PATTERN, self.preset)
        if isinstance(value, str) and preset.check(value):
            return self.passed()
        return False, self.get_message()

    def default_message(self) -> str:
        preset = presets.get(self.preset)
        if preset is not None and preset.message:
            return translate(preset.message)
        return super().default_message()


@dataclass
class StringValidToken(StringConstraint):
    tokens: list[str] = field(default_factory=list, metadata={"default": True})
    ignore_case: bool = False

    default_template: ClassVar[str] = FMT_VALID_TOKEN

    def check_string(self, text: str) -> bool:
        if text in self.tokens:
            return True
        if self.ignore_case:
            lowered = text.lower()
            return any(lowered == token.lower() for token in self.tokens)
        return False

    def template_args(self) -> tuple[object, ...]:
        return ('","'.join(self.tokens),)


def _in_ranges(ch: str, ranges: list[str]) -> bool:
    for entry in ranges:
        if len(entry) == 3 and entry[1] == "-":
            if entry[0] <= ch <= entry[2]:
                return True
        elif len(entry) == 1 and not entry.isalpha():
            if ch == entry:
                return True
        elif unicodedata.category(ch).startswith(entry):
            return True
    return False


@dataclass
class StringCharacters(StringConstraint):
    """Each character must fall in an allowed range and in no disallowed range.

    A range is either ``a-z`` style, a single non-letter character, or a Unicode general
    category prefix such as ``L`` or ``Nd``.
    """

    allow_ranges: list[str] = field(default_factory=list)
    disallow_ranges: list[str] = field(default_factory=list)

    default_template: ClassVar[str] = MSG_INVALID_CHARACTERS

    def check_string(self, text: str) -> bool:
        for ch in text:
            if _in_ranges(ch, self.disallow_ranges):
                return False
            if self.allow_ranges and not _in_ranges(ch, self.allow_ranges):
                return False
        return True


@dataclass
class StringLength(StringConstraint):
    minimum: int = 0
    maximum: int = 0
    exclusive_min: bool = False
    exclusive_max: bool = False

    def check_string(self, text: str) -> bool:
        length = len(text)
        above = length > self.minimum or (not self.exclusive_min and length == self.minimum)
        below = (
            self.maximum <= 0
            or length < self.maximum
            or (not self.exclusive_max and length == self.maximum)
        )
        return above and below

    def default_message(self) -> str:
        if self.maximum > 0:
            return format_message(
                FMT_STRING_MIN_MAX_LEN,
                self.minimum,
                inclusive_exclusive(self.exclusive_min),
                self.maximum,
                inclusive_exclusive(self.exclusive_max),
            )
        if self.exclusive_min:
            return format_message(FMT_STRING_MIN_LEN_EXC, self.minimum)
        return format_message(FMT_STRING_MIN_LEN, self.minimum)


@dataclass
class StringMinLength(StringConstraint):
    value: int = field(default=0, metadata={"default": True})
    exclusive_min: bool = False

    def check_string(self, text: str) -> bool:
        return len(text) > self.value or (not self.exclusive_min and len(text) == self.value)

    def default_message(self) -> str:
        template = FMT_STRING_MIN_LEN_EXC if self.exclusive_min else FMT_STRING_MIN_LEN
        return format_message(template, self.value)


@dataclass
class StringMaxLength(StringConstraint):
    value: int = field(default=0, metadata={"default": True})
    exclusive_max: bool = False

    def check_string(self, text: str) -> bool:
        return len(text) < self.value or (not self.exclusive_max and len(text) == self.value)

    def default_message(self) -> str:
        template = FMT_STRING_MAX_LEN_EXC if self.exclusive_max else FMT_STRING_MAX_LEN
        return format_message(template, self.value)


@dataclass
class StringExactLength(StringConstraint):
    value: int = 0

    default_template: ClassVar[str] = FMT_STRING_EXACT_LEN

    def check_string(self, text: str) -> bool:
        return len(text) == self.value

    def template_args(self) -> tuple[object, ...]:
        return (self.value,)


@dataclass
class StringLowercase(StringConstraint):
    default_template: ClassVar[str] = MSG_STRING_LOWERCASE

    def check_string(self, text: str) -> bool:
        return text == text.lower()


@dataclass
class StringUppercase(StringConstraint):
    default_template: ClassVar[str] = MSG_STRING_UPPERCASE

    def check_string(self, text: str) -> bool:
        return text == text.upper()


@dataclass
class StringValidJson(StringConstraint):
    message: str = field(default="", metadata={"default": True})
    disallow_null_json: bool = False
    disallow_value: bool = False
    disallow_array: bool = False
    disallow_object: bool = False

    default_template: ClassVar[str] = MSG_STRING_VALID_JSON

    def check_string(self, text: str) -> bool:
        try:
            decoded = decode_json(text)
        except DecodeError:
            return False
        if isinstance(decoded, dict):
            return not self.disallow_object
        if isinstance(decoded, list):
            return not self.disallow_array
        if decoded is None:
            return not self.disallow_null_json
        return not self.disallow_value


@dataclass
class _AffixConstraint(StringConstraint):
    value: str = field(default="", metadata={"default": True})
    values: list[str] = field(default_factory=list)
    case_insensitive: bool = False
    not_: bool = False

    negated_template: ClassVar[str] = ""

    def check_string(self, text: str) -> bool:
        subject = text.lower() if self.case_insensitive else text
        found = False
        for candidate in self._candidates():
            needle = candidate.lower() if self.case_insensitive else candidate
            if self.matches(subject, needle):
                found = True
                break
        return found != self.not_

    def matches(self, subject: str, needle: str) -> bool:
        raise NotImplementedError

    def _candidates(self) -> list[str]:
        return [item for item in [self.value, *self.values] if item]

    def default_message(self) -> str:
        possibles = ",".join(f"'{item}'" for item in self._candidates())
        template = self.negated_template if self.not_ else self.default_template
        return format_message(template, possibles)


@dataclass
class StringContains(_AffixConstraint):
    default_template: ClassVar[str] = FMT_STRING_CONTAINS
    negated_template: ClassVar[str] = FMT_STRING_NOT_CONTAINS

    def matches(self, subject: str, needle: str) -> bool:
        return needle in subject


@dataclass
class StringStartsWith(_AffixConstraint):
    default_template: ClassVar[str] = FMT_STRING_STARTS_WITH
    negated_template: ClassVar[str] = FMT_STRING_NOT_STARTS_WITH

    def matches(self, subject: str, needle: str) -> bool:
        return subject.startswith(needle)


@dataclass
class StringEndsWith(_AffixConstraint):
    default_template: ClassVar[str] = FMT_STRING_ENDS_WITH
    negated_template: ClassVar[str] = FMT_STRING_NOT_ENDS_WITH

    def matches(self, subject: str, needle: str) -> bool:
        return subject.endswith(needle)


@dataclass
class StringValidUuid(StringConstraint):
    message: str = field(default="", metadata={"default": True})
    min_version: int = 0
    specific_version: int = 0

    def check_string(self, text: str) -> bool:
        if _UUID_PATTERN.fullmatch(text) is None:
            return False
        version = int(text[14], 16)
        if self.min_version > 0 and version < self.min_version:
            return False
        return not (self.specific_version > 0 and version != self.specific_version)

    def default_message(self) -> str:
        if self.specific_version > 0:
            return format_message(FMT_UUID_CORRECT_VERSION, self.specific_version)
        if self.min_version > 0:
            return format_message(FMT_UUID_MIN_VERSION, self.min_version)
        return format_message(MSG_VALID_UUID)


@dataclass
class StringValidEmail(StringConstraint):
    message: str = field(default="", metadata={"default": True})
    allow_ip_address: bool = False
    allow_local: bool = False

    default_template: ClassVar[str] = MSG_VALID_EMAIL

    def check_string(self, text: str) -> bool:
        local, at, domain = text.rpartition("@")
        if not at or _EMAIL_LOCAL.fullmatch(local) is None:
            return False
        if local.startswith(".") or local.endswith(".") or ".." in local:
            return False
        if domain.startswith("[") and domain.endswith("]"):
            return self.allow_ip_address and _is_ip(domain[1:-1])
        if self.allow_ip_address and _is_ip(domain):
            return True
        return valid_hostname(domain, allow_local=self.allow_local)


def _is_ip(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def valid_hostname(text: str, *, allow_local: bool = False) -> bool:
    """DNS host name check: labels of letters, digits and inner hyphens, alphabetic TLD."""

    if not text or len(text) > 253:
        return False
    labels = text.rstrip(".").split(".")
    if len(labels) < 2 and not allow_local:
        return False
    if not all(_DOMAIN_LABEL.fullmatch(label) for label in labels):
        return False
    return len(labels) < 2 or labels[-1].isalpha()


@dataclass
class StringValidISODate(StringConstraint):
    default_template: ClassVar[str] = MSG_VALID_ISO_DATE

    def check_string(self, text: str) -> bool:
        if _ISO_DATE_PATTERN.fullmatch(text) is None:
            return False
        try:
            date.fromisoformat(text)
        except ValueError:
            return False
        return True


@dataclass
class StringValidISODatetime(StringConstraint):
    message: str = field(default="", metadata={"default": True})
    no_offset: bool = False
    no_millis: bool = False

    def check_string(self, text: str) -> bool:
        pattern = _ISO_DATETIME_PATTERNS[(self.no_offset, self.no_millis)]
        if pattern.fullmatch(text) is None:
            return False
        try:
            datetime.fromisoformat(text)
        except ValueError:
            return False
        return True

    def default_message(self) -> str:
        return format_message(_ISO_DATETIME_MESSAGES[(self.no_offset, self.no_millis)])


@dataclass
class StringTrim(Constraint):
    """Trim the working value for the constraints that follow; the input is not modified."""

    cutset: str = ""

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            ctx.current_value = value.strip(self.cutset or _DEFAULT_CUTSET)
        return self.passed()


def normal_form(form: str) -> str:
    """Upper-cased Unicode normalization form name; unknown names mean ``NFC``."""

    name = form.strip().upper()
    return name if name in _NORMALIZATION_MESSAGES else "NFC"


@dataclass
class StringNormalizeUnicode(Constraint):
    """Normalize the working value for the constraints that follow."""

    form: str = field(default="NFC", metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            form = normal_form(self.form)
            ctx.current_value = unicodedata.normalize(form, value)  # type: ignore[arg-type]
        return self.passed()


@dataclass
class StringValidUnicodeNormalization(StringConstraint):
    form: str = field(default="NFC", metadata={"default": True})

    def check_string(self, text: str) -> bool:
        return unicodedata.is_normalized(normal_form(self.form), text)  # type: ignore[arg-type]

    def default_message(self) -> str:
        return format_message(_NORMALIZATION_MESSAGES[normal_form(self.form)])


@dataclass
class StringValidCardNumber(StringConstraint):
    """Luhn checksum over 10 to 19 digits.

    With ``allow_spaces`` the digits may be grouped in fours separated by single spaces.
    """

    message: str = field(default="", metadata={"default": True})
    allow_spaces: bool = False

    default_template: ClassVar[str] = MSG_VALID_CARD_NUMBER

    def check_string(self, text: str) -> bool:
        if self.allow_spaces:
            for index, ch in enumerate(text):
                if ch == " " and ((index + 1) % 5 != 0 or index + 1 == len(text)):
                    return False
            text = text.replace(" ", "")
        if not 10 <= len(text) <= 19 or not all("0" <= ch <= "9" for ch in text):
            return False
        checksum = 0
        for position, ch in enumerate(reversed(text)):
            digit = ord(ch) - ord("0")
            if position % 2 == 1:
                digit = digit * 2 - 9 if digit > 4 else digit * 2
            checksum += digit
        return checksum % 10 == 0


@dataclass
class _StringCompare(Constraint):
    """Ordering against a fixed string; values that are not strings always fail."""

    value: str = field(default="", metadata={"default": True})
    case_insensitive: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, str):
            return self.failed(ctx)
        comparison = compare_strings(value, self.value, self.case_insensitive)
        return self.outcome(self.accepts(comparison), ctx)

    def accepts(self, comparison: int) -> bool:
        raise NotImplementedError

    def template_args(self) -> tuple[object, ...]:
        return (self.value,)


def compare_strings(left: str, right: str, case_insensitive: bool) -> int:
    if case_insensitive:
        left, right = left.lower(), right.lower()
    return (left > right) - (left < right)


@dataclass
class StringGreaterThan(_StringCompare):
    default_template: ClassVar[str] = FMT_STR_GT

    def accepts(self, comparison: int) -> bool:
        return comparison > 0


@dataclass
class StringGreaterThanOrEqual(_StringCompare):
    default_template: ClassVar[str] = FMT_STR_GTE

    def accepts(self, comparison: int) -> bool:
        return comparison >= 0


@dataclass
class StringLessThan(_StringCompare):
    default_template: ClassVar[str] = FMT_STR_LT

    def accepts(self, comparison: int) -> bool:
        return comparison < 0


@dataclass
class StringLessThanOrEqual(_StringCompare):
    default_template: ClassVar[str] = FMT_STR_LTE

    def accepts(self, comparison: int) -> bool:
        return comparison <= 0


__all__ = [
    "StringCharacters",
    "StringConstraint",
    "StringContains",
    "StringEndsWith",
    "StringExactLength",
    "StringGreaterThan",
    "StringGreaterThanOrEqual",
    "StringLength",
    "StringLessThan",
    "StringLessThanOrEqual",
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
    "compare_strings",
    "inclusive_exclusive",
    "normal_form",
    "valid_hostname",
]
