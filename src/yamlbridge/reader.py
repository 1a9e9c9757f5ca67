"""Reader layer: YAML (or JSON) text → generic Value."""

from __future__ import annotations

import logging
import re

import yaml
from yaml.constructor import ConstructorError
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .errors import ParseError
from .values import Null, Value, VBool, VFloat, VMap, VSeq, VStr, integer

logger = logging.getLogger(__name__)

TAG_NULL = "tag:yaml.org,2002:null"
TAG_BOOL = "tag:yaml.org,2002:bool"
TAG_INT = "tag:yaml.org,2002:int"
TAG_FLOAT = "tag:yaml.org,2002:float"
TAG_BINARY = "tag:yaml.org,2002:binary"

# Exponent floats without a dot, which YAML 1.1 leaves as strings.
EXPONENT_FLOAT = re.compile(r"^[-+]?[0-9][0-9_]*(?:\.[0-9_]*)?[eE][-+]?[0-9]+$")
EXPONENT_FLOAT_FIRST = list("-+0123456789")

_SURROGATE = re.compile("[\ud800-\udfff]")


class ValueLoader(yaml.SafeLoader):
    """SafeLoader that also resolves exponent floats without a dot (``1e5``).

    JSON numbers such as ``1e5`` or ``2E-3`` are plain strings to a YAML 1.1
    resolver; reading them as floats keeps JSON input numeric.
    """


ValueLoader.add_implicit_resolver(TAG_FLOAT, EXPONENT_FLOAT, EXPONENT_FLOAT_FIRST)


def read(data: bytes | str, *, strict: bool = False) -> Value:
    """Parse a single YAML document into a Value.

    With *strict*, a mapping that repeats a key is a ``ParseError``;
    otherwise both entries are kept and the later one wins downstream.
    An empty document reads as ``Null``.
    """
    try:
        loader = ValueLoader(data)
    except yaml.YAMLError as exc:
        raise ParseError(str(exc)) from exc
    try:
        node = loader.get_single_node()
        if node is None:
            return Null
        return _Builder(loader, strict).build(node)
    except yaml.YAMLError as exc:
        raise ParseError(str(exc)) from exc
    finally:
        loader.dispose()


# ---------------------------------------------------------------------------
# Node → Value
# ---------------------------------------------------------------------------

class _Builder:
    """Turns composed nodes into Values, using the loader's scalar constructors."""

    def __init__(self, loader: ValueLoader, strict: bool) -> None:
        self.loader = loader
        self.strict = strict
        self._built: dict[int, Value] = {}  # aliases share their anchor's node

    def build(self, node: Node) -> Value:
        cached = self._built.get(id(node))
        if cached is not None:
            return cached

        if isinstance(node, ScalarNode):
            value = self._scalar(node)
        elif isinstance(node, SequenceNode):
            value = VSeq([self.build(child) for child in node.value])
        elif isinstance(node, MappingNode):
            value = self._mapping(node)
        else:
            raise ConstructorError(None, None, f"unexpected node {node!r}", node.start_mark)

        self._built[id(node)] = value
        return value

    def _scalar(self, node: ScalarNode) -> Value:
        tag = node.tag
        if tag == TAG_NULL:
            return Null
        try:
            if tag == TAG_BOOL:
                return VBool(self.loader.construct_yaml_bool(node))
            if tag == TAG_INT:
                return integer(self.loader.construct_yaml_int(node))
            if tag == TAG_FLOAT:
                return VFloat(self.loader.construct_yaml_float(node))
        except (KeyError, ValueError) as exc:
            # Only reachable through an explicit tag such as "!!int abc".
            raise ConstructorError(
                None, None, f"invalid {tag} scalar {node.value!r}", node.start_mark
            ) from exc
        if tag == TAG_BINARY:
            raw = self.loader.construct_yaml_binary(node)
            return VStr(raw.decode("utf-8", errors="replace"))
        # Strings, timestamps and unrecognised tags keep their source text.
        return VStr(_text(node))

    def _mapping(self, node: MappingNode) -> VMap:
        self.loader.flatten_mapping(node)  # resolves "<<" merge keys in place

        entries: list[tuple[Value, Value]] = []
        seen: set[tuple[type, object]] = set()
        for key_node, value_node in node.value:
            key = self.build(key_node)
            if self.strict:
                marker = _key_marker(key)
                if marker is not None:
                    if marker in seen:
                        logger.debug("duplicate key %r rejected", key_node.value)
                        raise ConstructorError(
                            "while constructing a mapping",
                            node.start_mark,
                            f"found duplicate key {key_node.value!r}",
                            key_node.start_mark,
                        )
                    seen.add(marker)
            entries.append((key, self.build(value_node)))
        return VMap(entries)


def _text(node: ScalarNode) -> str:
    """Scalar text with escaped UTF-16 surrogate pairs (``"\\ud83d\\ude00"``) joined."""
    text = node.value
    if _SURROGATE.search(text) is None:
        return text
    try:
        return text.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError as exc:
        raise ConstructorError(
            None, None, f"invalid Unicode surrogate in {text!r}", node.start_mark
        ) from exc


def _key_marker(key: Value) -> tuple[type, object] | None:
    if isinstance(key, (VSeq, VMap)) or key is Null:
        return None
    return (type(key), key.value)
