"""Tests for jsreprint.serialization: ESTree dicts and JSON round-trip."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest

from jsreprint import (
    File,
    Identifier,
    Literal,
    Program,
    get_original,
    pretty_print,
)
from jsreprint.errors import ReprintError
from jsreprint.location import Position
from jsreprint.serialization import from_dict, from_json, to_dict, to_json

ParseJs = Callable[..., File]


class TestToDict:
    def test_estree_names(self, parse_js: ParseJs) -> None:
        data = to_dict(parse_js("let a = 1;").program)
        assert data["type"] == "Program"
        assert data["sourceType"] == "module"
        assert data["body"][0]["type"] == "VariableDeclaration"
        assert data["body"][0]["kind"] == "let"

    def test_async_flag_name(self, parse_js: ParseJs) -> None:
        data = to_dict(parse_js("async function f() {}").program.body[0])
        assert data["async"] is True
        assert "is_async" not in data

    def test_location(self, parse_js: ParseJs) -> None:
        data = to_dict(parse_js("a;").program.body[0])
        assert data["loc"] == {
            "start": {"line": 1, "column": 0},
            "end": {"line": 1, "column": 2},
        }

    def test_fresh_node_has_no_location(self) -> None:
        assert to_dict(Identifier(name="x")) == {"type": "Identifier", "name": "x"}

    def test_comments_serialized(self, parse_js: ParseJs) -> None:
        data = to_dict(parse_js("// c\na;").program.body[0])
        assert data["comments"][0]["type"] == "Line"
        assert data["comments"][0]["value"] == " c"


class TestFromDict:
    def test_builds_typed_nodes(self) -> None:
        node = from_dict({"type": "Literal", "value": 1, "raw": "1"})
        assert isinstance(node, Literal)
        assert node.value == 1
        assert node.loc is None

    def test_location_restored(self) -> None:
        node = from_dict(
            {
                "type": "Identifier",
                "name": "x",
                "loc": {"start": {"line": 2, "column": 1}, "end": {"line": 2, "column": 2}},
            }
        )
        assert node.loc.start == Position(2, 1)

    def test_regex_literal_value_dropped(self) -> None:
        node = from_dict(
            {"type": "Literal", "value": {}, "raw": "/a/g", "regex": {"pattern": "a", "flags": "g"}}
        )
        assert node.value is None
        assert node.regex == {"pattern": "a", "flags": "g"}

    def test_unknown_type(self) -> None:
        with pytest.raises(ReprintError, match="unknown node type"):
            from_dict({"type": "Frobnicate"})

    def test_missing_type(self) -> None:
        with pytest.raises(ReprintError, match="missing 'type'"):
            from_dict({"name": "x"})


class TestJson:
    def test_round_trip(self, parse_js: ParseJs) -> None:
        program = parse_js("let a = [1, 'two', null];").program
        restored = from_json(to_json(program))
        assert isinstance(restored, Program)
        assert to_dict(restored) == to_dict(program)

    def test_restored_tree_prints_from_scratch(self, parse_js: ParseJs) -> None:
        restored = from_json(to_json(parse_js("let   a=1").program))
        assert get_original(restored) is None
        assert pretty_print(restored).code == "let a = 1;"

    def test_deterministic(self, parse_js: ParseJs) -> None:
        program = parse_js("f(a, b);").program
        assert to_json(program) == to_json(program)
        keys = list(json.loads(to_json(program)).keys())
        assert keys == sorted(keys)

    def test_indent(self) -> None:
        assert "\n" in to_json(Identifier(name="x"), indent=2)

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ReprintError, match="expected a JSON object"):
            from_json("[1, 2]")
