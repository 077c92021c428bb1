"""Low-level tag text handling: comma splitting, colon detection and quoting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from jsonv8n.constants import FMT_UNCLOSED, FMT_UNOPENED
from jsonv8n.errors import TagSyntaxError

_QUOTES: Final[frozenset[str]] = frozenset({'"', "'"})
_OPENERS: Final[frozenset[str]] = frozenset({"(", "[", "{"})
_CLOSERS: Final[dict[str, str]] = {")": "(", "]": "[", "}": "{"}
_COLON_PREFIX_PUNCTUATION: Final[frozenset[str]] = frozenset({" ", "_", ".", "+", "-"})


@dataclass(slots=True)
class _Delimiter:
    opener: str
    position: int

    @property
    def is_quote(self) -> bool:
        return self.opener in _QUOTES


class _DelimiterStack:
    __slots__ = ("_stack",)

    def __init__(self) -> None:
        self._stack: list[_Delimiter] = []

    @property
    def current(self) -> _Delimiter | None:
        return self._stack[-1] if self._stack else None

    def in_any(self) -> bool:
        return bool(self._stack)

    def in_quote(self) -> bool:
        current = self.current
        return current is not None and current.is_quote

    def feed(self, ch: str, position: int) -> None:
        if ch in _QUOTES:
            current = self.current
            if current is not None and current.opener == ch:
                self._stack.pop()
            elif not self.in_quote():
                self._stack.append(_Delimiter(ch, position))
        elif ch in _OPENERS:
            if not self.in_quote():
                self._stack.append(_Delimiter(ch, position))
        elif ch in _CLOSERS and not self.in_quote():
            current = self.current
            if current is None or current.opener != _CLOSERS[ch]:
                raise TagSyntaxError(message=FMT_UNOPENED.format(position), position=position)
            self._stack.pop()


def parse_commas(text: str) -> list[str]:
    """Split on commas that sit outside quotes and brackets; each item is space-trimmed.

    Raises :class:`TagSyntaxError` for unbalanced quotes or brackets.
    """

    items: list[str] = []
    stack = _DelimiterStack()
    last_item_at = 0
    for position, ch in enumerate(text):
        if ch == ",":
            if not stack.in_any():
                items.append(text[last_item_at:position].strip(" "))
                last_item_at = position + 1
        elif ch in _QUOTES or ch in _OPENERS or ch in _CLOSERS:
            stack.feed(ch, position)
    current = stack.current
    if current is not None:
        raise TagSyntaxError(
            message=FMT_UNCLOSED.format(current.position), position=current.position
        )
    if last_item_at < len(text):
        items.append(text[last_item_at:].strip(" "))
    return items


def first_valid_colon_at(text: str) -> int:
    """Index of the first ``:`` preceded only by name characters, or ``-1``."""

    for position, ch in enumerate(text):
        if ch == ":":
            return position
        if not (ch.isascii() and (ch.isalnum() or ch in _COLON_PREFIX_PUNCTUATION)):
            break
    return -1


def split_token(item: str) -> tuple[str, str, bool]:
    """Split ``token:value`` into ``(token, value, has_colon)``."""

    colon_at = first_valid_colon_at(item)
    if colon_at == -1:
        return item, "", False
    return item[:colon_at].strip(" "), item[colon_at + 1 :].strip(" "), True


def unquote(text: str) -> str | None:
    """Unquoted body of a quoted string (doubled quotes unescaped), ``None`` if unquoted."""

    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        quote = text[0]
        return text[1:-1].replace(quote * 2, quote)
    return None


def unquote_or_self(text: str) -> str:
    unquoted = unquote(text)
    return text if unquoted is None else unquoted


def is_bracketed(text: str, *, allow_curly: bool = False) -> bool:
    if len(text) < 2:
        return False
    if text[0] == "[" and text[-1] == "]":
        return True
    return allow_curly and text[0] == "{" and text[-1] == "}"


def bracketed_items(text: str) -> list[str]:
    """Comma items of ``[a, b]``/``{a, b}`` with quoted items unquoted."""

    return [unquote_or_self(item) for item in parse_commas(text[1:-1]) if item != ""]


__all__ = [
    "bracketed_items",
    "first_valid_colon_at",
    "is_bracketed",
    "parse_commas",
    "split_token",
    "unquote",
    "unquote_or_self",
]
