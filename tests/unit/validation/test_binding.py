"""Unit tests for binding accepted JSON into dataclass records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from jsonv8n.binding import bind
from jsonv8n.errors import DecodeError
from jsonv8n.values import JsonNumber


class Colour(enum.Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Address:
    street: str = ""
    postcode: str | None = None


@dataclass
class Customer:
    name: str = field(default="", metadata={"json": "fullName"})
    age: int = 0
    score: float = 0.0
    balance: Decimal = Decimal(0)
    raw: JsonNumber | None = None
    joined: datetime | None = None
    birthday: date | None = None
    colour: Colour = Colour.RED
    address: Address | None = None
    tags: tuple[str, ...] = ()
    extras: dict[str, int] = field(default_factory=dict)
    anything: Any = None


def test_bind_builds_nested_records() -> None:
    record = bind(
        Customer,
        {
            "fullName": "Ada",
            "age": JsonNumber("36"),
            "score": 1,
            "balance": JsonNumber("10.50"),
            "raw": 2,
            "joined": "2024-01-02T03:04:05Z",
            "birthday": "1815-12-10",
            "colour": "blue",
            "address": {"street": "Main", "postcode": None},
            "tags": ["a", "b"],
            "extras": {"x": 1},
            "anything": JsonNumber("1.5"),
        },
    )

    assert record == Customer(
        name="Ada",
        age=36,
        score=1.0,
        balance=Decimal("10.50"),
        raw=JsonNumber("2"),
        joined=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        birthday=date(1815, 12, 10),
        colour=Colour.BLUE,
        address=Address(street="Main"),
        tags=("a", "b"),
        extras={"x": 1},
        anything=1.5,
    )


def test_bind_into_instance_keeps_absent_fields() -> None:
    existing = Customer(name="old", age=5)

    assert bind(existing, {"age": 6}) is existing
    assert existing.name == "old"
    assert existing.age == 6


@pytest.mark.parametrize(
    ("value", "where"),
    [
        ({"age": 1.5}, "Customer.age"),
        ({"age": "1"}, "Customer.age"),
        ({"age": None}, "Customer.age"),
        ({"colour": "green"}, "Customer.colour"),
        ({"tags": "a"}, "Customer.tags"),
        ({"address": {"street": 1}}, "Customer.address.street"),
        ({"extras": {"x": "y"}}, "Customer.extras.x"),
    ],
)
def test_bind_reports_location_of_incompatible_value(value: dict[str, Any], where: str) -> None:
    with pytest.raises(DecodeError) as info:
        bind(Customer, value)

    assert info.value.target == where


def test_bind_unknown_fields_only_rejected_when_not_ignored() -> None:
    assert bind(Address, {"street": "x", "city": "y"}) == Address(street="x")
    with pytest.raises(DecodeError, match="unknown field 'city'"):
        bind(Address, {"street": "x", "city": "y"}, ignore_unknown=False)


def test_bind_rejects_non_dataclass_instances_and_non_objects() -> None:
    with pytest.raises(DecodeError, match="cannot bind into list"):
        bind([], {})
    with pytest.raises(DecodeError, match="expected a JSON object"):
        bind(Address, [1])
