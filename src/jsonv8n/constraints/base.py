"""Constraint protocol and the dataclass base every built-in constraint derives from."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Final

from jsonv8n.constants import MSG_FAILURE
from jsonv8n.messages import format_message

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext

# Fields present on most constraints; never treated as the lone default argument.
COMMON_FIELDS: Final[frozenset[str]] = frozenset({"message", "stop", "strict"})
DEFAULT_FIELD_MARKER: Final[str] = "default"

CheckResult = tuple[bool, str]


@dataclass
class Constraint:
    """Base constraint.

    Subclasses are dataclasses whose public fields are the keyed arguments accepted by the tag
    DSL. ``check`` returns ``(passed, message)``; the message is only meaningful on failure.
    """

    message: str = ""
    stop: bool = False

    # Object-level constraints with ``pre_check`` run when their layer activates, before
    # properties are walked.
    pre_check: ClassVar[bool] = False
    default_template: ClassVar[str] = MSG_FAILURE

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        raise NotImplementedError

    def template_args(self) -> tuple[object, ...]:
        return ()

    def default_message(self) -> str:
        return format_message(self.default_template, *self.template_args())

    def get_message(self) -> str:
        return self.message or self.default_message()

    def passed(self) -> CheckResult:
        return True, ""

    def failed(self, ctx: ValidatorContext) -> CheckResult:
        ctx.cease_if(self.stop)
        return False, self.get_message()

    def outcome(self, ok: bool, ctx: ValidatorContext) -> CheckResult:
        return self.passed() if ok else self.failed(ctx)

    def wrong_kind(self, ctx: ValidatorContext) -> CheckResult:
        """Result for a value the constraint does not apply to."""

        if getattr(self, "strict", False):
            return self.failed(ctx)
        return self.passed()


class CustomConstraint(Constraint):
    """Wrap a plain callable ``(value, ctx) -> (ok, message)`` as a constraint."""

    def __init__(
        self,
        func: Callable[[Any, ValidatorContext], CheckResult],
        *,
        message: str = "",
        stop: bool = False,
    ) -> None:
        super().__init__(message=message, stop=stop)
        self.func = func

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        ok, message = self.func(value, ctx)
        if ok:
            return self.passed()
        ctx.cease_if(self.stop)
        # empty text lets an enclosing set or the walk pick the fallback message
        return False, self.message or message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomConstraint):
            return NotImplemented
        return self.func is other.func and self.message == other.message and self.stop == other.stop

    def __hash__(self) -> int:
        return hash((id(self.func), self.message, self.stop))

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"CustomConstraint({name}, message={self.message!r}, stop={self.stop!r})"


def constraint_fields(constraint_type: type[Constraint]) -> tuple[dataclasses.Field[Any], ...]:
    """Assignable dataclass fields of a constraint type, in declaration order."""

    if not dataclasses.is_dataclass(constraint_type):
        return ()
    return tuple(item for item in dataclasses.fields(constraint_type) if item.init)


def default_field(constraint_type: type[Constraint]) -> str | None:
    """Name of the field a single unnamed DSL argument is assigned to."""

    fields = constraint_fields(constraint_type)
    for item in fields:
        if item.metadata.get(DEFAULT_FIELD_MARKER):
            return item.name
    own = [item.name for item in fields if item.name not in COMMON_FIELDS]
    if len(own) == 1:
        return own[0]
    if not own and any(item.name == "message" for item in fields):
        return "message"
    return None


def positional_fields(constraint_type: type[Constraint]) -> tuple[str, ...]:
    """Fields filled by successive unnamed arguments: the default field, then the rest."""

    first = default_field(constraint_type)
    rest = [
        item.name
        for item in constraint_fields(constraint_type)
        if item.name not in COMMON_FIELDS and item.name != first
    ]
    return tuple([first, *rest]) if first is not None else tuple(rest)


def constraint_name(constraint: Constraint | type[Constraint]) -> str:
    constraint_type = constraint if isinstance(constraint, type) else type(constraint)
    return constraint_type.__name__


__all__ = [
    "COMMON_FIELDS",
    "CheckResult",
    "Constraint",
    "CustomConstraint",
    "constraint_fields",
    "constraint_name",
    "default_field",
    "positional_fields",
]
