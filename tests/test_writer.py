"""Tests for yamlbridge.writer."""

import math

import pytest

from yamlbridge.errors import EncodeError
from yamlbridge.values import Null, VBool, VFloat, VInt, VMap, VSeq, VStr
from yamlbridge.writer import dump_json, to_json, to_yaml


class TestJson:
    def test_sorted_compact(self):
        v = VMap([(VStr("name"), VStr("John")), (VStr("age"), VInt(30))])
        assert to_json(v) == b'{"age":30,"name":"John"}'

    def test_unicode_not_escaped(self):
        assert to_json(VStr("café")) == '"café"'.encode("utf-8")

    def test_nan_rejected(self):
        with pytest.raises(EncodeError):
            to_json(VSeq([VFloat(math.nan)]))

    def test_keep_order(self):
        assert dump_json({"b": 1, "a": 2}, sort_keys=False) == b'{"b":1,"a":2}'

    def test_unencodable(self):
        with pytest.raises(EncodeError):
            dump_json({"a": object()})


class TestYaml:
    def test_mapping_in_insertion_order(self):
        v = VMap([(VStr("name"), VStr("John")), (VStr("age"), VInt(30))])
        assert to_yaml(v) == b"name: John\nage: 30\n"

    def test_nested(self):
        v = VMap([
            (VStr("ports"), VSeq([VInt(80), VInt(443)])),
            (VStr("labels"), VMap([(VStr("app"), VStr("web"))])),
        ])
        assert to_yaml(v) == b"ports:\n- 80\n- 443\nlabels:\n  app: web\n"

    def test_top_level_scalar_has_no_document_end(self):
        assert to_yaml(VInt(5)) == b"5\n"
        assert to_yaml(Null) == b"null\n"

    def test_ambiguous_string_quoted(self):
        assert to_yaml(VMap([(VStr("v"), VStr("true"))])) == b"v: 'true'\n"

    def test_exponent_string_quoted(self):
        v = VMap([(VStr("a"), VStr("1e5")), (VStr("b"), VStr("-2E-3"))])
        assert to_yaml(v) == b"a: '1e5'\nb: '-2E-3'\n"

    def test_float_and_bool(self):
        v = VMap([(VStr("f"), VFloat(1.0)), (VStr("b"), VBool(False))])
        assert to_yaml(v) == b"f: 1.0\nb: false\n"

    def test_empty_mapping(self):
        assert to_yaml(VMap()) == b"{}\n"
