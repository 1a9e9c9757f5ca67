"""Tests for yamlbridge.structured (encode/decode against declared types)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import pytest

from yamlbridge.errors import DecodeError, EncodeError
from yamlbridge.fields import FieldShape, register
from yamlbridge.shapes import INT, STRING, MapShape, SequenceShape, StructShape
from yamlbridge.structured import decode, encode, zero_value


@dataclass
class Person:
    name: str = field(metadata={"json": "name"})
    age: int = field(metadata={"json": "age"})


@dataclass
class Service:
    name: str
    ports: list[int] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    owner: Optional[Person] = None
    note: str = field(default="", metadata={"json": "note,omitempty"})
    weight: float = 1.0


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class Stamp:
    def __init__(self, text):
        self.text = text

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, str):
            raise TypeError("stamp must be a string")
        return cls(data)

    def to_json(self):
        return self.text


@dataclass
class Event:
    title: str
    when: Stamp


@dataclass
class Computed:
    base: int = 0
    doubled: int = field(init=False, default=0)


class Point:
    def __init__(self, x=0, y=0):
        self.x = x
        self.y = y


register(Point, [FieldShape("X", attr="x", shape=INT), FieldShape("Y", attr="y", shape=INT)])


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------

class TestEncode:
    def test_declaration_order(self):
        out = encode(Person("John", 30))
        assert out == {"name": "John", "age": 30}
        assert list(out) == ["name", "age"]

    def test_nested(self):
        svc = Service("web", ports=[80], labels={"b": "2", "a": "1"}, owner=Person("Ann", 40))
        out = encode(svc)
        assert out == {
            "name": "web",
            "ports": [80],
            "labels": {"a": "1", "b": "2"},
            "owner": {"name": "Ann", "age": 40},
            "weight": 1.0,
        }
        assert list(out["labels"]) == ["a", "b"]

    def test_omitempty(self):
        assert "note" not in encode(Service("web"))
        assert encode(Service("web", note="hi"))["note"] == "hi"

    def test_none_field(self):
        assert encode(Service("web"))["owner"] is None

    def test_to_json_hook(self):
        assert encode(Event("launch", Stamp("2024-01-15"))) == {"title": "launch", "when": "2024-01-15"}

    def test_enum(self):
        assert encode([Color.RED, Color.BLUE]) == ["red", "blue"]

    def test_int_map_keys(self):
        assert encode({2: "b", 1: "a"}) == {"1": "a", "2": "b"}

    def test_tuple_and_set(self):
        assert encode((1, 2)) == [1, 2]
        assert encode(frozenset()) == []

    def test_registered_type(self):
        assert encode(Point(1, 2)) == {"X": 1, "Y": 2}

    def test_shape_argument_reads_attributes(self):
        class Loose:
            name = "John"
            age = 30

        assert encode(Loose(), StructShape(Person)) == {"name": "John", "age": 30}

    def test_unsupported_key(self):
        with pytest.raises(EncodeError, match="map key"):
            encode({1.5: "x"})

    def test_unsupported_value(self):
        with pytest.raises(EncodeError, match=r"\$\.a"):
            encode({"a": object()})


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------

class TestDecode:
    def test_struct(self):
        assert decode({"name": "John", "age": 30}, Person) == Person("John", 30)

    def test_case_insensitive(self):
        assert decode({"NAME": "John", "Age": 30}, Person) == Person("John", 30)

    def test_missing_required_gets_zero(self):
        assert decode({"name": "John"}, Person) == Person("John", 0)

    def test_defaults_kept(self):
        svc = decode({"name": "web"}, Service)
        assert svc == Service("web")

    def test_nested(self):
        data = {
            "name": "web",
            "ports": [80, 443],
            "labels": {"app": "web"},
            "owner": {"name": "Ann", "age": 40},
            "weight": 2,
        }
        svc = decode(data, Service)
        assert svc.owner == Person("Ann", 40)
        assert svc.ports == [80, 443]
        assert svc.weight == 2.0
        assert isinstance(svc.weight, float)

    def test_unknown_field_ignored(self):
        assert decode({"name": "x", "age": 1, "extra": True}, Person) == Person("x", 1)

    def test_unknown_field_strict(self):
        with pytest.raises(DecodeError, match="unknown field 'extra'"):
            decode({"name": "x", "extra": True}, Person, strict=True)

    def test_type_mismatch_names_path(self):
        with pytest.raises(DecodeError) as info:
            decode({"name": "x", "age": "thirty"}, Person)
        assert info.value.path == "$.age"
        assert "cannot decode string into int" in str(info.value)

    def test_number_into_string_fails(self):
        with pytest.raises(DecodeError):
            decode({"name": 42}, Person)

    def test_bool_is_not_int(self):
        with pytest.raises(DecodeError):
            decode(True, INT)

    def test_custom_decode(self):
        ev = decode({"title": "t", "when": "2024-01-15"}, Event)
        assert isinstance(ev.when, Stamp)
        assert ev.when.text == "2024-01-15"

    def test_custom_decode_failure(self):
        with pytest.raises(DecodeError, match="stamp must be a string"):
            decode({"title": "t", "when": 5}, Event)

    def test_null(self):
        assert decode(None, Person) is None
        assert decode({"name": None, "age": 3}, Person) == Person(None, 3)

    def test_sequence_and_map_shapes(self):
        assert decode(["a"], SequenceShape(STRING)) == ["a"]
        assert decode({"1": 2}, dict[int, int]) == {1: 2}
        with pytest.raises(DecodeError):
            decode({"a": 1}, SequenceShape(STRING))
        with pytest.raises(DecodeError):
            decode(["a"], MapShape(STRING))

    def test_bad_int_key(self):
        with pytest.raises(DecodeError):
            decode({"x": 1}, dict[int, int])

    def test_init_false_field(self):
        obj = decode({"base": 2, "doubled": 4}, Computed)
        assert obj.base == 2
        assert obj.doubled == 4

    def test_registered_type(self):
        p = decode({"x": 3, "Y": 4}, Point)
        assert (p.x, p.y) == (3, 4)

    def test_unknown_shape_passthrough(self):
        data = {"a": [1, {"b": None}]}
        assert decode(data, None) is data


def test_zero_values():
    assert zero_value(STRING) == ""
    assert zero_value(INT) == 0
    assert zero_value(SequenceShape(INT)) == []
    assert zero_value(MapShape(INT)) == {}
    assert zero_value(StructShape(Person)) is None


def test_struct_shape_ignored_for_plain_dict():
    assert encode({"b": 1, "a": 2}, StructShape(Person)) == {"a": 2, "b": 1}
