"""Writer layer: Values and JSON-ready data → JSON or YAML bytes."""

from __future__ import annotations

import json
from typing import Any

import yaml

from .errors import EncodeError
from .reader import EXPONENT_FLOAT, EXPONENT_FLOAT_FIRST, TAG_FLOAT
from .values import Value, to_python

_DOCUMENT_END = "\n...\n"


class ValueDumper(yaml.SafeDumper):
    """SafeDumper that resolves scalars the way ``ValueLoader`` reads them.

    Strings such as ``"1e5"`` are quoted so they read back as strings.
    """


ValueDumper.add_implicit_resolver(TAG_FLOAT, EXPONENT_FLOAT, EXPONENT_FLOAT_FIRST)


def dump_json(data: Any, *, sort_keys: bool = True) -> bytes:
    """Compact UTF-8 JSON. NaN and infinities are rejected."""
    try:
        text = json.dumps(
            data,
            sort_keys=sort_keys,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
        return text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"json: {exc}") from exc


def to_json(value: Value) -> bytes:
    """Encode a normalized Value; object keys come out sorted."""
    return dump_json(to_python(value))


def to_yaml(value: Value) -> bytes:
    """Encode a Value as a block-style YAML document, keys in insertion order."""
    try:
        text = yaml.dump(
            to_python(value),
            Dumper=ValueDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        # A bare top-level scalar gets an explicit document end marker.
        if text.endswith(_DOCUMENT_END):
            text = text[: -len(_DOCUMENT_END) + 1]
        return text.encode("utf-8")
    except (yaml.YAMLError, TypeError, UnicodeEncodeError) as exc:
        raise EncodeError(f"yaml: {exc}") from exc
