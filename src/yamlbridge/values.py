"""Generic value model: the tagged union a parsed document lives in."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1


# ---------------------------------------------------------------------------
# Null — singleton
# ---------------------------------------------------------------------------

class _NullType:
    """Sentinel for the YAML/JSON null."""

    _instance: _NullType | None = None

    def __new__(cls) -> _NullType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Null"

    def __bool__(self) -> bool:
        return False


Null = _NullType()


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VBool:
    value: bool


@dataclass(slots=True)
class VInt:
    value: int  # fits in a signed 64-bit integer


@dataclass(slots=True)
class VUInt:
    value: int  # above INT64_MAX, fits in an unsigned 64-bit integer


@dataclass(slots=True)
class VFloat:
    value: float


@dataclass(slots=True)
class VStr:
    value: str


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VSeq:
    items: list[Value] = field(default_factory=list)


@dataclass(slots=True)
class VMap:
    """Ordered mapping. Keys may be any Value until normalized."""

    entries: list[tuple[Value, Value]] = field(default_factory=list)

    def get(self, key: str) -> Value | None:
        for k, v in self.entries:
            if isinstance(k, VStr) and k.value == key:
                return v
        return None


Value = Union[VBool, VInt, VUInt, VFloat, VStr, VSeq, VMap, _NullType]


def integer(n: int) -> Value:
    """Pick the narrowest integer variant for *n*.

    Integers outside the 64-bit range degrade to a float, the same way a
    YAML decoder with fixed-width integers falls back.
    """
    if INT64_MIN <= n <= INT64_MAX:
        return VInt(n)
    if INT64_MAX < n <= UINT64_MAX:
        return VUInt(n)
    return VFloat(float(n))


def to_python(value: Value) -> Any:
    """Convert a Value into plain Python objects for the json/yaml emitters."""
    if value is Null:
        return None
    if isinstance(value, (VBool, VInt, VUInt, VFloat, VStr)):
        return value.value
    if isinstance(value, VSeq):
        return [to_python(v) for v in value.items]
    if isinstance(value, VMap):
        return {to_python(k): to_python(v) for k, v in value.entries}
    raise TypeError(f"not a generic value: {value!r}")
