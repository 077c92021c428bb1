"""Hierarchical condition token sets.

Each object activation gets a fresh :class:`ConditionSet` linked to its parent. Reads walk
towards the root and the nearest explicit entry (set or cleared) decides; writes land on the
current level unless redirected to the parent or the root.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

NEGATION_PREFIX = "!"
ALTERNATIVE_SEPARATOR = ","


class ConditionSet:
    __slots__ = ("_entries", "_parent")

    def __init__(self, parent: ConditionSet | None = None) -> None:
        self._parent = parent
        self._entries: dict[str, bool] | None = None

    @property
    def parent(self) -> ConditionSet | None:
        return self._parent

    @property
    def root(self) -> ConditionSet:
        level = self
        while level._parent is not None:
            level = level._parent
        return level

    def child(self) -> ConditionSet:
        return ConditionSet(self)

    def has(self, token: str) -> bool:
        """Whether ``token`` holds; a leading ``!`` inverts the answer."""

        token = token.strip()
        negated = False
        while token.startswith(NEGATION_PREFIX):
            negated = not negated
            token = token[1:]
        return self._lookup(token) != negated

    def _lookup(self, token: str) -> bool:
        level: ConditionSet | None = self
        while level is not None:
            if level._entries is not None and token in level._entries:
                return level._entries[token]
            level = level._parent
        return False

    def set(self, token: str, *, parent: bool = False, global_: bool = False) -> None:
        self._target(parent=parent, global_=global_)._write(token, True)

    def clear(self, token: str, *, parent: bool = False, global_: bool = False) -> None:
        self._target(parent=parent, global_=global_)._write(token, False)

    def _target(self, *, parent: bool, global_: bool) -> ConditionSet:
        if global_:
            return self.root
        if parent and self._parent is not None:
            return self._parent
        return self

    def _write(self, token: str, value: bool) -> None:
        token = token.strip()
        if not token:
            return
        if token.startswith(NEGATION_PREFIX):
            token = token[1:]
            value = not value
        if self._entries is None:
            self._entries = {}
        self._entries[token] = value

    def tokens(self) -> frozenset[str]:
        """Every token currently holding, as seen from this level."""

        resolved: dict[str, bool] = {}
        for level in reversed(list(self._chain())):
            if level._entries:
                resolved.update(level._entries)
        return frozenset(token for token, present in resolved.items() if present)

    def _chain(self) -> Iterator[ConditionSet]:
        level: ConditionSet | None = self
        while level is not None:
            yield level
            level = level._parent

    def __repr__(self) -> str:
        return f"ConditionSet({sorted(self.tokens())!r})"


def condition_holds(conditions: ConditionSet, entry: str) -> bool:
    """One list element: comma-separated alternatives, any of which may hold."""

    if ALTERNATIVE_SEPARATOR in entry:
        return any(
            conditions.has(alternative)
            for alternative in entry.split(ALTERNATIVE_SEPARATOR)
            if alternative.strip()
        )
    return conditions.has(entry)


def all_conditions_met(conditions: ConditionSet, tokens: Iterable[str]) -> bool:
    return all(condition_holds(conditions, token) for token in tokens)


def any_condition_met(conditions: ConditionSet, tokens: Iterable[str]) -> bool:
    return any(condition_holds(conditions, token) for token in tokens)


__all__ = [
    "ConditionSet",
    "all_conditions_met",
    "any_condition_met",
    "condition_holds",
]
