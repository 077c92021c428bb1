"""Pluggable translation of default violation messages."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class MessageSource(Protocol):
    def translate(self, message: str) -> str: ...

    def format(self, template: str, *args: object) -> str: ...


class DefaultMessageSource:
    """Identity source: templates are used as written."""

    def translate(self, message: str) -> str:
        return message

    def format(self, template: str, *args: object) -> str:
        return self.translate(template).format(*args)


class MappingMessageSource(DefaultMessageSource):
    """Overrides message templates by their default text.

    Replacement templates use the same positional ``{0}`` placeholders as the default.
    """

    def __init__(self, overrides: Mapping[str, str]) -> None:
        self._overrides = dict(overrides)

    def translate(self, message: str) -> str:
        return self._overrides.get(message, message)


_LOCK = threading.RLock()
_DEFAULT_SOURCE = DefaultMessageSource()
_source: MessageSource = _DEFAULT_SOURCE


def get_message_source() -> MessageSource:
    with _LOCK:
        return _source


def set_message_source(source: MessageSource) -> None:
    global _source
    if not isinstance(source, MessageSource):
        raise TypeError("message source must provide translate() and format()")
    with _LOCK:
        _source = source


def reset_message_source() -> None:
    global _source
    with _LOCK:
        _source = _DEFAULT_SOURCE


def translate(message: str) -> str:
    return get_message_source().translate(message)


def format_message(template: str, *args: object) -> str:
    return get_message_source().format(template, *args)


__all__ = [
    "DefaultMessageSource",
    "MappingMessageSource",
    "MessageSource",
    "format_message",
    "get_message_source",
    "reset_message_source",
    "set_message_source",
    "translate",
]
