"""Process-wide tag extension registries: ``$alias`` bodies and custom tag tokens."""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Final, TypeAlias

import structlog

from jsonv8n.constants import FMT_ALIAS_PARSE, FMT_CYCLIC_TAG_ALIAS, FMT_UNKNOWN_TAG_ALIAS
from jsonv8n.errors import CompileError, TagSyntaxError
from jsonv8n.tags.lexer import parse_commas

if TYPE_CHECKING:
    from collections.abc import Callable

    from jsonv8n.schema import PropertyValidator

ALIAS_PREFIX: Final[str] = "$"

# handler(token, has_value, value, property_validator, property_name, field_name)
CustomTokenHandler: TypeAlias = (
    "Callable[[str, bool, str, PropertyValidator, str, str], PropertyValidator | None]"
)

_logger = structlog.get_logger(__name__)


class TagAliasRegistry:
    """Named tag bodies substituted for ``$name`` items before token processing."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._aliases: dict[str, str] = {}

    def register(self, name: str, body: str) -> None:
        key = name[len(ALIAS_PREFIX) :] if name.startswith(ALIAS_PREFIX) else name
        with self._lock:
            self._aliases[key] = body
        _logger.debug("tag_alias_registered", alias=key)

    def register_many(self, aliases: Mapping[str, str]) -> None:
        for name, body in aliases.items():
            self.register(name, body)

    def reset(self) -> None:
        with self._lock:
            self._aliases.clear()

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._aliases

    def resolve(self, items: Sequence[str]) -> list[str]:
        """Expand every ``$alias`` item in place, recursively."""

        if not any(item.startswith(ALIAS_PREFIX) for item in items):
            return list(items)
        with self._lock:
            return self._resolve_items(items, ())

    def _resolve_items(self, items: Sequence[str], chain: tuple[str, ...]) -> list[str]:
        resolved: list[str] = []
        for item in items:
            if item.startswith(ALIAS_PREFIX):
                resolved.extend(self._resolve_alias(item[len(ALIAS_PREFIX) :], chain))
            else:
                resolved.append(item)
        return resolved

    def _resolve_alias(self, name: str, chain: tuple[str, ...]) -> list[str]:
        if name in chain:
            raise CompileError(message=FMT_CYCLIC_TAG_ALIAS.format(name))
        body = self._aliases.get(name)
        if body is None:
            raise CompileError(message=FMT_UNKNOWN_TAG_ALIAS.format(name))
        try:
            items = parse_commas(body)
        except TagSyntaxError as exc:
            raise TagSyntaxError(
                message=FMT_ALIAS_PARSE.format(name, exc.message), position=exc.position
            ) from exc
        return self._resolve_items(items, (*chain, name))


class CustomTokenRegistry:
    """Handlers for tag tokens unknown to the built-in token table."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._handlers: dict[str, CustomTokenHandler] = {}

    def register(self, token: str, handler: CustomTokenHandler) -> None:
        if not callable(handler):
            raise TypeError(f"custom tag token handler for {token!r} is not callable")
        with self._lock:
            self._handlers[token] = handler
        _logger.debug("custom_tag_token_registered", token=token)

    def reset(self) -> None:
        with self._lock:
            self._handlers.clear()

    def get(self, token: str) -> CustomTokenHandler | None:
        with self._lock:
            return self._handlers.get(token)

    def has(self, token: str) -> bool:
        return self.get(token) is not None


tag_aliases: Final[TagAliasRegistry] = TagAliasRegistry()
custom_tag_tokens: Final[CustomTokenRegistry] = CustomTokenRegistry()


def register_tag_token_alias(name: str, body: str) -> None:
    """Register ``$name`` as shorthand for the tag ``body``."""

    tag_aliases.register(name, body)


def register_tag_token_aliases(aliases: Mapping[str, str]) -> None:
    tag_aliases.register_many(aliases)


def clear_tag_token_aliases() -> None:
    tag_aliases.reset()


def register_custom_tag_token(token: str, handler: CustomTokenHandler) -> None:
    """Register ``handler`` for ``token``.

    The handler receives ``(token, has_value, value, property_validator, property_name,
    field_name)``. It may mutate the property validator in place and return ``None``, or
    return a replacement property validator.
    """

    custom_tag_tokens.register(token, handler)


def clear_custom_tag_tokens() -> None:
    custom_tag_tokens.reset()


__all__ = [
    "ALIAS_PREFIX",
    "CustomTokenHandler",
    "CustomTokenRegistry",
    "TagAliasRegistry",
    "clear_custom_tag_tokens",
    "clear_tag_token_aliases",
    "custom_tag_tokens",
    "register_custom_tag_token",
    "register_tag_token_alias",
    "register_tag_token_aliases",
    "tag_aliases",
]
