"""yamlbridge — convert YAML to JSON and back through one normalized value model."""

import logging

from .conversions import (
    json_to_yaml,
    marshal,
    unmarshal,
    unmarshal_strict,
    yaml_to_json,
    yaml_to_json_strict,
)
from .errors import (
    ConversionError,
    DecodeError,
    EncodeError,
    ParseError,
    UnsupportedKeyType,
)
from .fields import FieldShape, FieldTable, register, resolve
from .normalizer import convert
from .shapes import (
    CustomShape,
    MapShape,
    ScalarKind,
    ScalarShape,
    SequenceShape,
    StructShape,
    Unknown,
    shape_of,
)
from .values import Null, Value, VBool, VFloat, VInt, VMap, VSeq, VStr, VUInt

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "yaml_to_json",
    "yaml_to_json_strict",
    "json_to_yaml",
    "marshal",
    "unmarshal",
    "unmarshal_strict",
    "convert",
    "shape_of",
    "resolve",
    "register",
    "FieldShape",
    "FieldTable",
    "CustomShape",
    "MapShape",
    "ScalarKind",
    "ScalarShape",
    "SequenceShape",
    "StructShape",
    "Unknown",
    "Null",
    "Value",
    "VBool",
    "VFloat",
    "VInt",
    "VMap",
    "VSeq",
    "VStr",
    "VUInt",
    "ConversionError",
    "DecodeError",
    "EncodeError",
    "ParseError",
    "UnsupportedKeyType",
]
