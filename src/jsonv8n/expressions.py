"""Presence expressions over sibling, ancestor and descendant property names.

Used by ``required_with``, ``unwanted_with`` and ``only_with``. Grammar::

    expr     = item (op item)*
    item     = "!"* (name | "(" expr ")")
    op       = "&&" | "||" | "^^"
    name     = bare-name | quoted-name | "~" condition-token

Operators have no precedence; items fold left to right. A name containing dots walks the
object tree: ``a.b`` descends and each leading dot climbs one ancestor (a lone ``.name`` stays
on the current object). ``/.`` starts at the root and ``\\.`` is a literal dot inside a name.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from jsonv8n.errors import TagSyntaxError
from jsonv8n.tags.lexer import unquote

if TYPE_CHECKING:
    from jsonv8n.conditions import ConditionSet

CONDITION_PREFIX: Final[str] = "~"
_ESCAPED_DOT = re.compile(r"\\\.")


class BooleanOperator(IntEnum):
    AND = 0
    OR = 1
    XOR = 2

    @property
    def symbol(self) -> str:
        return _OPERATOR_SYMBOLS[self]


_OPERATOR_SYMBOLS: Final[dict[BooleanOperator, str]] = {
    BooleanOperator.AND: "&&",
    BooleanOperator.OR: "||",
    BooleanOperator.XOR: "^^",
}
_OPERATOR_CHARS: Final[dict[str, BooleanOperator]] = {
    "&": BooleanOperator.AND,
    "|": BooleanOperator.OR,
    "^": BooleanOperator.XOR,
}


def _is_name_char(ch: str) -> bool:
    return (
        ch == "$"
        or "-" <= ch <= "9"
        or "@" <= ch <= "Z"
        or ch == "_"
        or "a" <= ch <= "z"
        or ch == "~"
    )


def _fold(operator: BooleanOperator, left: bool, right: bool) -> bool:
    if operator is BooleanOperator.OR:
        return left or right
    if operator is BooleanOperator.XOR:
        return left != right
    return left and right


@dataclass(frozen=True, slots=True)
class PropertyRef:
    """Presence (or negated presence) of one named property or condition token."""

    name: str
    negated: bool = False
    operator: BooleanOperator = BooleanOperator.AND
    up: int = field(default=0, init=False, compare=False)
    down: tuple[str, ...] = field(default=(), init=False, compare=False)
    plain: str = field(default="", init=False, compare=False)

    def __post_init__(self) -> None:
        up, down, plain = _split_path(self.name)
        object.__setattr__(self, "up", up)
        object.__setattr__(self, "down", down)
        object.__setattr__(self, "plain", plain)

    def evaluate(
        self,
        current: Mapping[str, Any] | None,
        ancestors: Sequence[Any],
        conditions: ConditionSet | None,
    ) -> bool:
        if self.name.startswith(CONDITION_PREFIX):
            found = conditions is not None and conditions.has(self.name[1:])
            return found != self.negated
        if self.up or self.down:
            found, _ = _walk(self.up, self.down, current, ancestors)
        elif not self.plain:
            found = current is not None
        else:
            found = current is not None and self.plain in current
        return found != self.negated

    def __str__(self) -> str:
        text = self.name
        if any(not _is_name_char(ch) for ch in text):
            quote = '"' if "'" in text else "'"
            text = f"{quote}{text}{quote}"
        return ("!" if self.negated else "") + text


@dataclass(frozen=True, slots=True)
class Group:
    items: tuple[ExpressionItem, ...]
    negated: bool = False
    operator: BooleanOperator = BooleanOperator.AND

    def evaluate(
        self,
        current: Mapping[str, Any] | None,
        ancestors: Sequence[Any],
        conditions: ConditionSet | None,
    ) -> bool:
        return _evaluate_items(self.items, current, ancestors, conditions) != self.negated

    def __str__(self) -> str:
        return ("!" if self.negated else "") + "(" + _render_items(self.items) + ")"


ExpressionItem: TypeAlias = "PropertyRef | Group"


@dataclass(frozen=True, slots=True)
class PresenceExpression:
    """A parsed expression; an empty one evaluates true."""

    items: tuple[ExpressionItem, ...] = ()

    def evaluate(
        self,
        current: Mapping[str, Any] | None,
        ancestors: Sequence[Any] = (),
        conditions: ConditionSet | None = None,
    ) -> bool:
        return _evaluate_items(self.items, current, ancestors, conditions)

    def __bool__(self) -> bool:
        return bool(self.items)

    def __str__(self) -> str:
        return _render_items(self.items)


def _evaluate_items(
    items: Sequence[ExpressionItem],
    current: Mapping[str, Any] | None,
    ancestors: Sequence[Any],
    conditions: ConditionSet | None,
) -> bool:
    if not items:
        return True
    result = False
    for index, item in enumerate(items):
        outcome = item.evaluate(current, ancestors, conditions)
        result = outcome if index == 0 else _fold(item.operator, result, outcome)
    return result


def _render_items(items: Sequence[ExpressionItem]) -> str:
    parts: list[str] = []
    for index, item in enumerate(items):
        if index:
            parts.append(f" {item.operator.symbol} ")
        parts.append(str(item))
    return "".join(parts)


def lookup_path(
    name: str,
    current: Mapping[str, Any] | None,
    ancestors: Sequence[Any] = (),
) -> tuple[bool, Any]:
    """Resolve a (possibly dotted) property name to ``(found, value)``."""

    up, down, plain = _split_path(name)
    if up or down:
        return _walk(up, down, current, ancestors)
    if current is None or not plain or plain not in current:
        return False, None
    return True, current[plain]


def _walk(
    up: int,
    down: tuple[str, ...],
    current: Mapping[str, Any] | None,
    ancestors: Sequence[Any],
) -> tuple[bool, Any]:
    start: Any
    if up == -1:
        start = ancestors[-1] if ancestors else current
    elif up > 0:
        if up - 1 >= len(ancestors):
            return False, None
        start = ancestors[up - 1]
    else:
        start = current
    if not down:
        return isinstance(start, Mapping), start
    node = start
    for part in down:
        if not isinstance(node, Mapping) or part not in node:
            return False, None
        node = node[part]
    return True, node


def _split_path(name: str) -> tuple[int, tuple[str, ...], str]:
    if name in ("", "."):
        return 0, (), ""
    if "." not in name:
        return 0, (), name
    if name.startswith(".") and "." not in name[1:]:
        return 0, (), name[1:]

    up = 0
    down: list[str] = []
    past_leading_dots = False
    previous = " "
    last_dot = -1
    for index, ch in enumerate(name):
        if ch == "." and previous != "\\":
            if index == 1 and previous == "/":
                up = -1
            elif past_leading_dots:
                part = name[last_dot + 1 : index]
                if part:
                    down.append(_ESCAPED_DOT.sub(".", part))
            elif up >= 0:
                up += 1
            last_dot = index
        else:
            past_leading_dots = True
        previous = ch
    if last_dot < len(name) - 1:
        down.append(_ESCAPED_DOT.sub(".", name[last_dot + 1 :]))
    if up == 0 and not down:
        return 0, (), ""
    return up, tuple(down), ""


class _Kind(Enum):
    START = auto()
    WHITESPACE = auto()
    OPERATOR = auto()
    NOT = auto()
    NAME = auto()
    GROUP_START = auto()
    GROUP_END = auto()
    END = auto()


_FOLLOWERS: Final[dict[_Kind, frozenset[_Kind]]] = {
    _Kind.START: frozenset({_Kind.GROUP_START, _Kind.NOT, _Kind.NAME}),
    _Kind.WHITESPACE: frozenset(
        {_Kind.OPERATOR, _Kind.NOT, _Kind.NAME, _Kind.GROUP_START, _Kind.GROUP_END}
    ),
    _Kind.OPERATOR: frozenset({_Kind.WHITESPACE, _Kind.NOT, _Kind.NAME, _Kind.GROUP_START}),
    _Kind.NOT: frozenset({_Kind.NOT, _Kind.NAME, _Kind.GROUP_START}),
    _Kind.NAME: frozenset({_Kind.WHITESPACE, _Kind.OPERATOR, _Kind.GROUP_END, _Kind.END}),
    _Kind.GROUP_START: frozenset({_Kind.WHITESPACE, _Kind.NOT, _Kind.GROUP_START, _Kind.NAME}),
    _Kind.GROUP_END: frozenset({_Kind.WHITESPACE, _Kind.GROUP_END, _Kind.OPERATOR, _Kind.END}),
    _Kind.END: frozenset(),
}
_ITEM_OPENERS: Final[frozenset[_Kind]] = frozenset({_Kind.OPERATOR, _Kind.GROUP_START, _Kind.START})


@dataclass(slots=True)
class _Token:
    kind: _Kind
    start: int
    end: int
    operator: BooleanOperator = BooleanOperator.AND
    name: str = ""


def parse_expression(text: str) -> PresenceExpression:
    """Parse ``text`` into a :class:`PresenceExpression`.

    Raises :class:`TagSyntaxError` with a positioned message on malformed input.
    """

    if not text.strip(" \t\n"):
        return PresenceExpression()
    tokens = _tokenize(text)
    _check_sequence(tokens, text)
    return PresenceExpression(_build(tokens))


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    last = len(text) - 1
    in_quote = False
    quote_char = ""
    group_starts = group_ends = groups_open = 0

    def start(index: int, kind: _Kind) -> _Token:
        token = _Token(kind, index, index)
        tokens.append(token)
        return token

    current = start(0, _Kind.START)
    index = 0
    while index <= last:
        ch = text[index]
        if in_quote:
            if ch == quote_char:
                in_quote = False
                current.end = index + 1
                current = start(index, _Kind.WHITESPACE)
            index += 1
            continue
        current.end = index
        if ch in ("'", '"'):
            in_quote = True
            quote_char = ch
            current = start(index, _Kind.NAME)
        elif ch in (" ", "\t", "\n"):
            if current.kind not in (_Kind.WHITESPACE, _Kind.START):
                current = start(index, _Kind.WHITESPACE)
        elif ch == "!":
            current = start(index, _Kind.NOT)
        elif ch in _OPERATOR_CHARS:
            if index < last and text[index + 1] == ch:
                current = start(index, _Kind.OPERATOR)
                current.operator = _OPERATOR_CHARS[ch]
                index += 1
                current.end = index + 1
            else:
                raise TagSyntaxError(
                    message=f"invalid operator character '{ch}' (at position {index})",
                    position=index,
                )
        elif ch == "(":
            current = start(index, _Kind.GROUP_START)
            group_starts += 1
            groups_open += 1
        elif ch == ")":
            current = start(index, _Kind.GROUP_END)
            group_ends += 1
            groups_open -= 1
            if groups_open < 0:
                raise TagSyntaxError(
                    message=f"unexpected group close character '{ch}' (at position {index})",
                    position=index,
                )
        else:
            _check_name_char(index, ch)
            if current.kind is not _Kind.NAME:
                current = start(index, _Kind.NAME)
        index += 1

    if group_starts != group_ends:
        raise TagSyntaxError(
            message=f"unbalanced grouping parentheses (at position {last})", position=last
        )
    if in_quote:
        raise TagSyntaxError(
            message=f"unclosed quote (started at position {current.start})",
            position=current.start,
        )
    current.end = last + 1
    if current.kind is _Kind.WHITESPACE:
        current.kind = _Kind.END
    else:
        start(last, _Kind.END)
    return tokens


def _check_name_char(index: int, ch: str) -> None:
    code = ord(ch)
    if code < 32 or code > 127:
        raise TagSyntaxError(
            message=(
                f"unexpected non-naming character code {code} (at position {index})"
                " - use enclosing quotes if necessary"
            ),
            position=index,
        )
    if not _is_name_char(ch):
        raise TagSyntaxError(
            message=(
                f"unexpected non-naming character '{ch}' (at position {index})"
                " - use enclosing quotes if necessary"
            ),
            position=index,
        )


def _check_sequence(tokens: list[_Token], text: str) -> None:
    last = len(tokens) - 1
    for index, token in enumerate(tokens):
        if index < last and tokens[index + 1].kind not in _FOLLOWERS[token.kind]:
            position = tokens[index + 1].start
            raise TagSyntaxError(
                message=f"unexpected character '{text[position]}' (at position {position})",
                position=position,
            )
        if token.kind is _Kind.NOT:
            if not _preceded_by_opener(tokens, index, skip={_Kind.WHITESPACE}):
                raise TagSyntaxError(
                    message=f"unexpected not operator (at position {token.start})",
                    position=token.start,
                )
        elif token.kind is _Kind.NAME:
            if not _preceded_by_opener(tokens, index, skip={_Kind.WHITESPACE, _Kind.NOT}):
                raise TagSyntaxError(
                    message=f"unexpected property name start (at position {token.start})",
                    position=token.start,
                )
            raw = text[token.start : token.end]
            unquoted = unquote(raw)
            token.name = raw if unquoted is None else unquoted


def _preceded_by_opener(tokens: list[_Token], index: int, *, skip: set[_Kind]) -> bool:
    for previous in reversed(tokens[:index]):
        if previous.kind in _ITEM_OPENERS:
            return True
        if previous.kind not in skip:
            return False
    return False


def _build(tokens: list[_Token]) -> tuple[ExpressionItem, ...]:
    # Groups are built as mutable lists and frozen once closed.
    root: list[Any] = []
    stack: list[tuple[list[Any], bool, BooleanOperator]] = []
    items = root
    negate_next = False
    next_operator = BooleanOperator.AND
    for token in tokens:
        if token.kind is _Kind.NOT:
            negate_next = not negate_next
        elif token.kind is _Kind.OPERATOR:
            next_operator = token.operator
        elif token.kind is _Kind.NAME:
            items.append(PropertyRef(token.name, negated=negate_next, operator=next_operator))
            negate_next = False
            next_operator = BooleanOperator.AND
        elif token.kind is _Kind.GROUP_START:
            stack.append((items, negate_next, next_operator))
            items = []
            negate_next = False
            next_operator = BooleanOperator.AND
        elif token.kind is _Kind.GROUP_END:
            outer, negated, operator = stack.pop()
            outer.append(Group(tuple(items), negated=negated, operator=operator))
            items = outer
    return tuple(root)


__all__ = [
    "BooleanOperator",
    "Group",
    "PresenceExpression",
    "PropertyRef",
    "lookup_path",
    "parse_expression",
]
