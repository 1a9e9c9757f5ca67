"""Conversions between YAML, JSON and declared Python types."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from . import reader, structured, writer
from .errors import ConversionError, EncodeError, ParseError
from .normalizer import convert
from .shapes import Shape, shape_of

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# YAML → JSON
# ---------------------------------------------------------------------------

def yaml_to_json(data: bytes | str, shape: Any = None) -> bytes:
    """Convert YAML to JSON.

    Valid JSON is valid YAML, so JSON input comes back as equivalent JSON.
    *shape* (a type or a Shape) selects which scalars become strings.
    """
    return _yaml_to_json(data, _target(shape), strict=False)


def yaml_to_json_strict(data: bytes | str, shape: Any = None) -> bytes:
    """Like ``yaml_to_json`` but a repeated mapping key is a ``ParseError``."""
    return _yaml_to_json(data, _target(shape), strict=True)


def _yaml_to_json(data: bytes | str, shape: Shape | None, *, strict: bool) -> bytes:
    value = reader.read(data, strict=strict)
    out = writer.to_json(convert(value, shape))
    logger.debug("yaml->json %d -> %d bytes (shape=%r, strict=%s)", len(data), len(out), shape, strict)
    return out


# ---------------------------------------------------------------------------
# JSON → YAML
# ---------------------------------------------------------------------------

def json_to_yaml(data: bytes | str) -> bytes:
    """Convert JSON to YAML.

    The text is read with the YAML reader rather than ``json.loads`` so that
    ``1`` stays an integer and ``1.0`` stays a float.
    """
    out = writer.to_yaml(reader.read(data))
    logger.debug("json->yaml %d -> %d bytes", len(data), len(out))
    return out


# ---------------------------------------------------------------------------
# Python objects
# ---------------------------------------------------------------------------

def marshal(value: Any, shape: Any = None) -> bytes:
    """Encode *value* as YAML whose keys mirror its declared JSON field names."""
    try:
        j = writer.dump_json(structured.encode(value, _target(shape)), sort_keys=False)
    except ConversionError as exc:
        raise EncodeError(f"error marshaling into JSON: {exc}") from exc

    try:
        return json_to_yaml(j)
    except ConversionError as exc:
        raise EncodeError(f"error converting JSON to YAML: {exc}") from exc


def unmarshal(data: bytes | str, cls: type[T]) -> T:
    """Decode YAML into an instance of *cls*."""
    return _unmarshal(data, cls, strict=False)


def unmarshal_strict(data: bytes | str, cls: type[T]) -> T:
    """Like ``unmarshal`` but repeated YAML keys and unknown fields are errors."""
    return _unmarshal(data, cls, strict=True)


def _unmarshal(data: bytes | str, cls: Any, *, strict: bool) -> Any:
    shape = shape_of(cls)
    j = _yaml_to_json(data, shape, strict=strict)
    try:
        obj = json.loads(j)
    except json.JSONDecodeError as exc:
        raise ParseError(str(exc)) from exc
    return structured.decode(obj, shape, strict=strict)


def _target(shape: Any) -> Shape | None:
    return shape_of(shape) if shape is not None else None
