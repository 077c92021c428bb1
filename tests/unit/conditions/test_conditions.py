"""Unit tests for hierarchical condition token sets."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from jsonv8n.conditions import (
    ConditionSet,
    all_conditions_met,
    any_condition_met,
    condition_holds,
)


def test_set_and_negated_reads() -> None:
    conditions = ConditionSet()
    conditions.set("tea")

    assert conditions.has("tea")
    assert not conditions.has("!tea")
    assert conditions.has("!coffee")
    assert conditions.has("!!tea")


def test_child_reads_through_to_parent_until_cleared() -> None:
    root = ConditionSet()
    root.set("shared")
    child = root.child()

    assert child.has("shared")
    child.clear("shared")
    assert not child.has("shared")
    assert root.has("shared")


def test_writes_can_target_parent_or_root() -> None:
    root = ConditionSet()
    middle = root.child()
    leaf = middle.child()

    leaf.set("up", parent=True)
    leaf.set("top", global_=True)

    assert middle.has("up")
    assert not root.has("up")
    assert root.has("top")
    assert leaf.tokens() == frozenset({"up", "top"})


def test_negated_write_clears_token() -> None:
    conditions = ConditionSet()
    conditions.set("x")
    conditions.set("!x")

    assert not conditions.has("x")
    assert conditions.tokens() == frozenset()


def test_comma_entries_are_alternatives() -> None:
    conditions = ConditionSet()
    conditions.set("b")

    assert condition_holds(conditions, "a,b")
    assert not condition_holds(conditions, "a,c")
    assert all_conditions_met(conditions, ["a,b", "!c"])
    assert not all_conditions_met(conditions, ["a,b", "c"])
    assert any_condition_met(conditions, ["a", "b"])
    assert not any_condition_met(conditions, [])
    assert all_conditions_met(conditions, [])


@given(
    present=st.sets(st.sampled_from(["a", "b", "c", "d"])),
    token=st.sampled_from(["a", "b", "c", "d"]),
)
@settings(max_examples=50, derandomize=True, deadline=None)
def test_negation_inverts_every_read(present: set[str], token: str) -> None:
    conditions = ConditionSet()
    for item in present:
        conditions.set(item)

    assert conditions.has(token) is (token in present)
    assert conditions.has("!" + token) is not conditions.has(token)
