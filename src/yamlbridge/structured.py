"""Structured encode/decode driven by declared external field names."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .errors import DecodeError, EncodeError
from .fields import FieldTable, is_registered, resolve
from .shapes import (
    CustomShape,
    MapShape,
    ScalarKind,
    ScalarShape,
    SequenceShape,
    Shape,
    StructShape,
    Unknown,
    shape_of,
)


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------

def encode(obj: Any, shape: Shape | None = None) -> Any:
    """Turn *obj* into JSON-ready data.

    Struct fields come out in declaration order under their external names;
    plain dicts come out with sorted keys.
    """
    return _encode(obj, shape if shape is not None else Unknown, "$")


def _encode(obj: Any, shape: Shape, path: str) -> Any:
    if obj is None:
        return None

    hook = getattr(obj, "to_json", None)
    if callable(hook) and not isinstance(obj, type):
        return _encode(hook(), Unknown, path)

    if (isinstance(shape, StructShape) and not isinstance(obj, Mapping)) or _is_struct(obj):
        table = resolve(shape if isinstance(shape, StructShape) else type(obj))
        return _encode_struct(obj, table, path)

    if isinstance(obj, Enum):
        return _encode(obj.value, Unknown, path)
    if isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, Mapping):
        child = shape.element if isinstance(shape, MapShape) else Unknown
        out: dict[str, Any] = {}
        for key in sorted(obj, key=lambda k: _map_key(k, path)):
            name = _map_key(key, path)
            out[name] = _encode(obj[key], child, f"{path}.{name}")
        return out

    if isinstance(obj, (list, tuple, set, frozenset)):
        child = shape.element if isinstance(shape, SequenceShape) else Unknown
        return [_encode(v, child, f"{path}[{i}]") for i, v in enumerate(obj)]

    raise EncodeError(f"json: unsupported type: {type(obj).__name__} (at {path})")


def _encode_struct(obj: Any, table: FieldTable, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in table:
        value = getattr(obj, f.attr)
        if f.omitempty and _is_empty(value):
            continue
        out[f.name] = _encode(value, f.shape, f"{path}.{f.name}")
    return out


def _is_struct(obj: Any) -> bool:
    cls = type(obj)
    return dataclasses.is_dataclass(cls) or is_registered(cls)


def _map_key(key: Any, path: str) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise EncodeError(f"json: unsupported map key type: {type(key).__name__} (at {path})")


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def decode(data: Any, target: Any, *, strict: bool = False) -> Any:
    """Bind JSON-ready *data* to *target* (a type or a Shape).

    With *strict*, object keys that match no declared field are an error.
    """
    return _decode(data, shape_of(target), strict, "$")


def _decode(data: Any, shape: Shape, strict: bool, path: str) -> Any:
    if data is None:
        return None

    if isinstance(shape, CustomShape):
        try:
            return shape.cls.from_json(data)
        except (TypeError, ValueError) as exc:
            raise DecodeError(str(exc), path) from exc

    if isinstance(shape, ScalarShape):
        return _decode_scalar(data, shape.kind, path)

    if isinstance(shape, SequenceShape):
        if not isinstance(data, list):
            raise _mismatch(data, "array", path)
        return [
            _decode(v, shape.element, strict, f"{path}[{i}]") for i, v in enumerate(data)
        ]

    if isinstance(shape, MapShape):
        if not isinstance(data, dict):
            raise _mismatch(data, "map", path)
        return {
            _decode_key(k, shape.key, path): _decode(v, shape.element, strict, f"{path}.{k}")
            for k, v in data.items()
        }

    if isinstance(shape, StructShape):
        if not isinstance(data, dict):
            raise _mismatch(data, shape.cls.__name__, path)
        return _decode_struct(data, shape.cls, strict, path)

    return data


def _decode_scalar(data: Any, kind: ScalarKind, path: str) -> Any:
    if kind is ScalarKind.STRING:
        if isinstance(data, str):
            return data
        raise _mismatch(data, "string", path)
    if kind is ScalarKind.BOOL:
        if isinstance(data, bool):
            return data
        raise _mismatch(data, "bool", path)
    if kind is ScalarKind.INT:
        if isinstance(data, int) and not isinstance(data, bool):
            return data
        raise _mismatch(data, "int", path)
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return float(data)
    raise _mismatch(data, "float", path)


def _decode_key(key: str, key_type: type, path: str) -> Any:
    if key_type is int:
        try:
            return int(key)
        except ValueError as exc:
            raise DecodeError(f"cannot decode map key {key!r} into int", path) from exc
    return key


def _decode_struct(data: dict, cls: type, strict: bool, path: str) -> Any:
    table = resolve(cls)
    values: dict[str, Any] = {}
    for key, item in data.items():
        f = table.lookup(key)
        if f is None:
            if strict:
                raise DecodeError(f"unknown field {key!r}", path)
            continue
        values[f.attr] = _decode(item, f.shape, strict, f"{path}.{f.name}")

    if not dataclasses.is_dataclass(cls):
        return cls(**values)

    by_attr = {f.attr: f for f in table}
    init: dict[str, Any] = {}
    late: dict[str, Any] = {}
    for fld in dataclasses.fields(cls):
        if fld.name in values:
            (init if fld.init else late)[fld.name] = values[fld.name]
        elif fld.init and fld.default is dataclasses.MISSING and fld.default_factory is dataclasses.MISSING:
            declared = by_attr.get(fld.name)
            init[fld.name] = zero_value(declared.shape if declared else Unknown)

    obj = cls(**init)
    for name, value in late.items():
        object.__setattr__(obj, name, value)
    return obj


def zero_value(shape: Shape) -> Any:
    """The value an absent field takes when it declares no default."""
    if isinstance(shape, ScalarShape):
        return {
            ScalarKind.STRING: "",
            ScalarKind.INT: 0,
            ScalarKind.FLOAT: 0.0,
            ScalarKind.BOOL: False,
        }[shape.kind]
    if isinstance(shape, SequenceShape):
        return []
    if isinstance(shape, MapShape):
        return {}
    return None


def _mismatch(data: Any, expected: str, path: str) -> DecodeError:
    return DecodeError(f"cannot decode {_json_kind(data)} into {expected}", path)


def _json_kind(data: Any) -> str:
    if isinstance(data, bool):
        return "bool"
    if isinstance(data, (int, float)):
        return "number"
    if isinstance(data, str):
        return "string"
    if isinstance(data, list):
        return "array"
    if isinstance(data, dict):
        return "object"
    return type(data).__name__
