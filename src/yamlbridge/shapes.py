"""Target shapes: the expected destination of a conversion."""

from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Union


# ---------------------------------------------------------------------------
# Unknown — singleton for "no guidance"
# ---------------------------------------------------------------------------

class _UnknownType:
    """Shape of a position nothing is known about."""

    _instance: _UnknownType | None = None

    def __new__(cls) -> _UnknownType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Unknown"


Unknown = _UnknownType()


# ---------------------------------------------------------------------------
# ScalarKind
# ---------------------------------------------------------------------------

class ScalarKind(Enum):
    STRING = auto()
    INT = auto()
    FLOAT = auto()
    BOOL = auto()


# ---------------------------------------------------------------------------
# Shape variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ScalarShape:
    kind: ScalarKind


@dataclass(frozen=True, slots=True)
class SequenceShape:
    element: Shape = Unknown


@dataclass(frozen=True, slots=True)
class MapShape:
    element: Shape = Unknown
    key: type = str


@dataclass(frozen=True, slots=True)
class StructShape:
    """A record type. Its fields are resolved lazily through the cache."""

    cls: type


@dataclass(frozen=True, slots=True)
class CustomShape:
    """A type that decodes itself through a ``from_json`` classmethod."""

    cls: type


Shape = Union[ScalarShape, SequenceShape, MapShape, StructShape, CustomShape, _UnknownType]

STRING = ScalarShape(ScalarKind.STRING)
INT = ScalarShape(ScalarKind.INT)
FLOAT = ScalarShape(ScalarKind.FLOAT)
BOOL = ScalarShape(ScalarKind.BOOL)

_SHAPE_TYPES = (ScalarShape, SequenceShape, MapShape, StructShape, CustomShape, _UnknownType)

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
)
_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def has_custom_decode(tp: Any) -> bool:
    return isinstance(tp, type) and callable(getattr(tp, "from_json", None))


def shape_of(tp: Any) -> Shape:
    """Derive the Shape of a type annotation.

    - ``None`` / ``Any`` / unsupported types → ``Unknown``
    - ``Optional[X]`` → shape of ``X``
    - ``bool``, ``int``, ``float``, ``str`` (and subclasses) → ``ScalarShape``
    - ``list[X]``, ``tuple[X, ...]``, ``set[X]`` → ``SequenceShape``
    - ``dict[K, V]`` → ``MapShape``
    - types with ``from_json`` → ``CustomShape``
    - dataclasses and registered types → ``StructShape``
    """
    from .fields import is_registered

    if isinstance(tp, _SHAPE_TYPES):
        return tp
    if tp is None or tp is Any:
        return Unknown

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            return shape_of(members[0])
        return Unknown

    if origin is not None:
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return SequenceShape(shape_of(args[0]))
            return SequenceShape(Unknown)
        if origin in _SEQUENCE_ORIGINS:
            return SequenceShape(shape_of(args[0]) if args else Unknown)
        if origin in _MAP_ORIGINS:
            if len(args) == 2:
                return MapShape(shape_of(args[1]), key=args[0] if isinstance(args[0], type) else str)
            return MapShape(Unknown)
        return Unknown

    if not isinstance(tp, type):
        return Unknown

    if has_custom_decode(tp):
        return CustomShape(tp)
    if issubclass(tp, bool):
        return BOOL
    if issubclass(tp, str):
        return STRING
    if issubclass(tp, int):
        return INT
    if issubclass(tp, float):
        return FLOAT
    if dataclasses.is_dataclass(tp) or is_registered(tp):
        return StructShape(tp)
    if issubclass(tp, (list, tuple, set, frozenset)):
        return SequenceShape(Unknown)
    if issubclass(tp, dict):
        return MapShape(Unknown)
    return Unknown
