"""Normalizer: generic YAML value → JSON-safe generic value.

YAML mappings may have integer, float or boolean keys and YAML scalars are
typed more loosely than a declared destination expects. ``convert`` walks a
value alongside an optional target shape, turning every key into a string
and rendering numbers and booleans as strings wherever the shape asks for a
string.
"""

from __future__ import annotations

import math
from decimal import Decimal

from .errors import UnsupportedKeyType
from .fields import resolve
from .shapes import (
    CustomShape,
    MapShape,
    ScalarKind,
    ScalarShape,
    SequenceShape,
    Shape,
    StructShape,
    Unknown,
)
from .values import (
    Null,
    Value,
    VBool,
    VFloat,
    VInt,
    VMap,
    VSeq,
    VStr,
    VUInt,
    _NullType,
)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def convert(value: Value, shape: Shape | None = None) -> Value:
    """Return *value* with string-only mapping keys, coerced toward *shape*.

    Raises ``UnsupportedKeyType`` for a mapping key with no string form.
    """
    if shape is None or isinstance(shape, CustomShape):
        shape = Unknown

    if isinstance(value, VMap):
        return _convert_map(value, shape)
    if isinstance(value, VSeq):
        return _convert_seq(value, shape)
    if isinstance(value, (VBool, VInt, VUInt, VFloat, VStr, _NullType)):
        return _convert_scalar(value, shape)
    raise TypeError(f"not a generic value: {value!r}")


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

def _convert_map(value: VMap, shape: Shape) -> VMap:
    table = resolve(shape) if isinstance(shape, StructShape) else None

    out: dict[str, Value] = {}
    for k, v in value.entries:
        key = key_string(k, v)

        if table is not None:
            f = table.lookup(key)
            child = f.shape if f is not None else Unknown
        elif isinstance(shape, MapShape):
            child = shape.element
        else:
            child = Unknown

        # Coerced keys may collide ("1" and 1); the later entry wins.
        out[key] = convert(v, child)

    return VMap([(VStr(k), v) for k, v in out.items()])


def _convert_seq(value: VSeq, shape: Shape) -> VSeq:
    child = shape.element if isinstance(shape, SequenceShape) else Unknown
    return VSeq([convert(v, child) for v in value.items])


def _convert_scalar(value: Value, shape: Shape) -> Value:
    if not (isinstance(shape, ScalarShape) and shape.kind is ScalarKind.STRING):
        return value
    if isinstance(value, VBool):
        return VStr("true" if value.value else "false")
    if isinstance(value, (VInt, VUInt)):
        return VStr(str(value.value))
    if isinstance(value, VFloat):
        return VStr(format_float(value.value))
    return value


# ---------------------------------------------------------------------------
# Key coercion
# ---------------------------------------------------------------------------

_KEY_FLOAT_TOKENS = {"+Inf": ".inf", "-Inf": "-.inf", "NaN": ".nan"}


def key_string(key: Value, value: Value = Null) -> str:
    """Render a mapping key as the string a JSON object would use."""
    if isinstance(key, VStr):
        return key.value
    if isinstance(key, VBool):
        return "true" if key.value else "false"
    if isinstance(key, VInt):
        return str(key.value)
    if isinstance(key, VFloat):
        s = format_float(key.value)
        return _KEY_FLOAT_TOKENS.get(s, s)
    raise UnsupportedKeyType(key, value)


# ---------------------------------------------------------------------------
# Float rendering
# ---------------------------------------------------------------------------

def format_float(f: float) -> str:
    """Shortest round-trip decimal form of *f* in ``%g`` layout.

    Exponent form is used when the decimal exponent is below -4 or at
    least 6, with a sign and at least two exponent digits (``1e+06``).
    Non-finite values render as ``+Inf``, ``-Inf`` and ``NaN``.
    """
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "+Inf" if f > 0 else "-Inf"

    sign, digits, exponent = Decimal(repr(f)).normalize().as_tuple()
    mantissa = "".join(str(d) for d in digits)
    neg = "-" if sign else ""
    nd = len(mantissa)
    point = nd + exponent  # position of the decimal point within mantissa
    exp = point - 1

    if exp < -4 or exp >= 6:
        frac = "." + mantissa[1:] if nd > 1 else ""
        return f"{neg}{mantissa[0]}{frac}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        return f"{neg}0.{'0' * -point}{mantissa}"
    if point >= nd:
        return f"{neg}{mantissa}{'0' * (point - nd)}"
    return f"{neg}{mantissa[:point]}.{mantissa[point:]}"
