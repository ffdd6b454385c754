"""Tests for jsreprint.path: cursor navigation and parenthesization."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jsreprint import (
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    ExpressionStatement,
    File,
    Identifier,
    LogicalExpression,
    ObjectPattern,
    PathCursor,
    SequenceExpression,
)

ParseJs = Callable[..., File]


def _ident(name: str) -> Identifier:
    return Identifier(name=name)


class TestNavigation:
    def test_call_restores_stack(self) -> None:
        stmt = ExpressionStatement(expression=_ident("a"))
        path = PathCursor.from_node(stmt)
        assert path.call(lambda p: p.get_value(), "expression").name == "a"
        assert path.get_value() is stmt
        assert len(path.stack) == 1

    def test_each_visits_with_index(self) -> None:
        seq = SequenceExpression(expressions=[_ident("a"), _ident("b")])
        path = PathCursor.from_node(seq)
        seen: list[tuple[int, str | int | None]] = []
        path.each(lambda p, i: seen.append((i, p.get_name())), "expressions")
        assert seen == [(0, 0), (1, 1)]

    def test_map_collects_results(self) -> None:
        seq = SequenceExpression(expressions=[_ident("a"), _ident("b")])
        path = PathCursor.from_node(seq)
        assert path.map(lambda p, _i: p.get_value().name, "expressions") == ["a", "b"]

    def test_parent_node_skips_lists(self) -> None:
        seq = SequenceExpression(expressions=[_ident("a")])
        path = PathCursor.from_node(seq)
        assert path.call(lambda p: p.get_parent_node(), "expressions", 0) is seq

    def test_copy_is_independent(self) -> None:
        stmt = ExpressionStatement(expression=_ident("a"))
        path = PathCursor.from_node(stmt)
        branch = path.copy()
        branch.stack += ["expression", stmt.expression]
        assert len(path.stack) == 1


def _needs_parens(root: object, *names: str | int) -> bool:
    return PathCursor.from_node(root).call(lambda p: p.needs_parens(), *names)


class TestNeedsParens:
    @pytest.mark.parametrize(
        ("outer", "inner", "side", "expected"),
        [
            ("*", "+", "left", True),
            ("+", "*", "left", False),
            ("-", "-", "right", True),
            ("-", "-", "left", False),
            ("**", "*", "right", True),
            ("<", "+", "left", False),
        ],
    )
    def test_binary_precedence(self, outer: str, inner: str, side: str, expected: bool) -> None:
        child = BinaryExpression(operator=inner, left=_ident("a"), right=_ident("b"))
        other = _ident("c")
        parent = BinaryExpression(
            operator=outer,
            left=child if side == "left" else other,
            right=child if side == "right" else other,
        )
        assert _needs_parens(parent, side) is expected

    def test_nullish_mixed_with_logical(self) -> None:
        child = LogicalExpression(operator="||", left=_ident("a"), right=_ident("b"))
        parent = LogicalExpression(operator="??", left=child, right=_ident("c"))
        assert _needs_parens(parent, "left")

    def test_binary_as_callee(self) -> None:
        callee = BinaryExpression(operator="+", left=_ident("a"), right=_ident("b"))
        assert _needs_parens(CallExpression(callee=callee), "callee")

    def test_sequence_in_call_arguments(self) -> None:
        seq = SequenceExpression(expressions=[_ident("a"), _ident("b")])
        assert _needs_parens(CallExpression(callee=_ident("f"), arguments=[seq]), "arguments", 0)

    def test_sequence_as_statement_expression(self) -> None:
        seq = SequenceExpression(expressions=[_ident("a"), _ident("b")])
        assert not _needs_parens(ExpressionStatement(expression=seq), "expression")

    def test_object_pattern_assignment(self) -> None:
        assign = AssignmentExpression(left=ObjectPattern(), right=_ident("o"))
        assert _needs_parens(ExpressionStatement(expression=assign), "expression")

    def test_identifiers_never_need_parens(self) -> None:
        assert not _needs_parens(CallExpression(callee=_ident("f")), "callee")

    def test_root_never_needs_parens(self) -> None:
        assert not PathCursor.from_node(SequenceExpression()).needs_parens()


class TestHasParens:
    def test_detects_original_parens(self, parse_js: ParseJs) -> None:
        tree = parse_js("x = (a + b) * c;")
        path = PathCursor.from_node(tree)
        result = path.call(
            lambda p: p.has_parens(), "program", "body", 0, "expression", "right", "left"
        )
        assert result

    def test_no_parens(self, parse_js: ParseJs) -> None:
        tree = parse_js("x = a + b;")
        path = PathCursor.from_node(tree)
        assert not path.call(lambda p: p.has_parens(), "program", "body", 0, "expression", "right")


class TestFirstInStatement:
    def test_callee_of_statement_expression(self) -> None:
        call = CallExpression(callee=_ident("f"))
        stmt = ExpressionStatement(expression=call)
        assert PathCursor.from_node(stmt).call(lambda p: p.first_in_statement(), "expression", "callee")

    def test_argument_is_not_first(self) -> None:
        call = CallExpression(callee=_ident("f"), arguments=[_ident("a")])
        stmt = ExpressionStatement(expression=call)
        path = PathCursor.from_node(stmt)
        assert not path.call(lambda p: p.first_in_statement(), "expression", "arguments", 0)
