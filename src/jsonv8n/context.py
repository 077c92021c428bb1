"""Per-call validation state: path frames, condition chain, violation buffer and stop flags."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from jsonv8n.conditions import ConditionSet
from jsonv8n.expressions import PresenceExpression, lookup_path
from jsonv8n.messages import format_message
from jsonv8n.violations import Violation, ViolationCode


@dataclass(slots=True)
class _Frame:
    property: str
    path: str
    value: Any


@dataclass(frozen=True, slots=True)
class _ConditionWrite:
    token: str
    value: bool
    parent: bool
    global_: bool

    def apply(self, conditions: ConditionSet) -> None:
        if self.value:
            conditions.set(self.token, parent=self.parent, global_=self.global_)
        else:
            conditions.clear(self.token, parent=self.parent, global_=self.global_)


def _joined(frame: _Frame) -> str:
    if frame.path and frame.property:
        return f"{frame.path}.{frame.property}"
    return frame.property or frame.path


class ValidatorContext:
    """Mutable state for exactly one validation call; never shared between calls."""

    def __init__(self, root: Any, *, stop_on_first: bool = False) -> None:
        self._root = root
        self._frames: list[_Frame] = [_Frame("", "", root)]
        self._objects: list[Any] = []
        self._stop_on_first = stop_on_first
        self._continues = True
        self._ceased = False
        self.conditions = ConditionSet()
        self.violations: list[Violation] = []
        self._pending: list[tuple[ConditionSet, list[_ConditionWrite]]] = []

    @property
    def root_value(self) -> Any:
        return self._root

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def continues(self) -> bool:
        """False once the whole walk has been stopped."""

        return self._continues

    @property
    def ceased(self) -> bool:
        """True when remaining checks on the current property should be skipped."""

        return self._ceased or not self._continues

    @property
    def property_name(self) -> str:
        return self._frames[-1].property

    @property
    def path(self) -> str:
        return self._frames[-1].path

    @property
    def current_value(self) -> Any:
        return self._frames[-1].value

    @current_value.setter
    def current_value(self, value: Any) -> None:
        # Only the working copy changes; the decoded input is left untouched.
        self._frames[-1].value = value

    # violations

    def add_violation(self, violation: Violation) -> None:
        self.violations.append(violation)
        if self._stop_on_first:
            self._continues = False

    def add_violation_for_current(
        self,
        message: str,
        *,
        code: ViolationCode | None = ViolationCode.CONSTRAINT,
        bad_request: bool = True,
    ) -> None:
        frame = self._frames[-1]
        self.add_violation(
            Violation(
                property=frame.property,
                path=frame.path,
                message=message,
                bad_request=bad_request,
                code=code,
            )
        )

    def add_default_violation_for_current(
        self, template: str, *args: object, code: ViolationCode | None = None
    ) -> None:
        """Record a built-in message, translated through the active message source."""

        self.add_violation_for_current(format_message(template, *args), code=code)

    def add_violation_for_property(
        self,
        property_name: str,
        message: str,
        *,
        code: ViolationCode | None = None,
    ) -> None:
        """Record a violation for a child of the current frame (e.g. an object key)."""

        self.add_violation(
            Violation(
                property=property_name,
                path=_joined(self._frames[-1]),
                message=message,
                code=code,
            )
        )

    def stop(self) -> None:
        self._continues = False

    def cease(self) -> None:
        self._ceased = True

    def cease_if(self, condition: bool) -> None:
        if condition:
            self._ceased = True

    def reset_ceased(self) -> None:
        self._ceased = False

    # path frames

    def push_property(self, name: str, value: Any) -> None:
        self._frames.append(_Frame(name, _joined(self._frames[-1]), value))

    def push_index(self, index: int, value: Any) -> None:
        self._frames.append(_Frame("", f"{_joined(self._frames[-1])}[{index}]", value))

    def pop(self) -> None:
        if len(self._frames) > 1:
            self._frames.pop()

    @contextmanager
    def property_frame(self, name: str, value: Any) -> Iterator[None]:
        self.push_property(name, value)
        try:
            yield
        finally:
            self.pop()

    @contextmanager
    def index_frame(self, index: int, value: Any) -> Iterator[None]:
        self.push_index(index, value)
        try:
            yield
        finally:
            self.pop()

    # object activations

    @contextmanager
    def object_scope(self, obj: Any) -> Iterator[None]:
        """Enter an object: new condition level and ancestry entry."""

        self._objects.append(obj)
        self.conditions = self.conditions.child()
        try:
            yield
        finally:
            parent = self.conditions.parent
            if parent is not None:
                self.conditions = parent
            self._objects.pop()

    @property
    def current_object(self) -> Any:
        return self._objects[-1] if self._objects else None

    def ancestor_objects(self) -> list[Any]:
        """Objects enclosing the current object, nearest first."""

        return list(reversed(self._objects[:-1]))

    def lookup_other(self, name: str) -> tuple[bool, Any]:
        """Find a sibling (or dotted relative) property of the current property."""

        current = self.current_object
        if not isinstance(current, dict):
            current = None
        return lookup_path(name, current, self.ancestor_objects())

    def presence_holds(self, expression: PresenceExpression) -> bool:
        current = self.current_object
        return expression.evaluate(
            current if isinstance(current, dict) else None,
            self.ancestor_objects(),
            self.conditions,
        )

    # conditions

    def set_condition(self, token: str, *, parent: bool = False, global_: bool = False) -> None:
        self._write_condition(_ConditionWrite(token, True, parent, global_))

    def clear_condition(self, token: str, *, parent: bool = False, global_: bool = False) -> None:
        self._write_condition(_ConditionWrite(token, False, parent, global_))

    def _write_condition(self, write: _ConditionWrite) -> None:
        if self._pending and self._pending[-1][0] is self.conditions:
            self._pending[-1][1].append(write)
        else:
            write.apply(self.conditions)

    @contextmanager
    def held_conditions(self) -> Iterator[Callable[[], None]]:
        """Hold condition writes made at the current level until the yielded commit is called.

        Writes made inside nested object activations are not held.
        """

        writes: list[_ConditionWrite] = []
        level = self.conditions
        self._pending.append((level, writes))

        def commit() -> None:
            for write in writes:
                write.apply(level)
            writes.clear()

        try:
            yield commit
        finally:
            self._pending.pop()

    def is_condition(self, token: str) -> bool:
        return self.conditions.has(token)


__all__ = ["ValidatorContext"]
