"""Tests for the generic (from scratch) printer."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jsreprint import (
    ArrayExpression,
    ArrowFunctionExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    File,
    FunctionExpression,
    Identifier,
    Literal,
    MemberExpression,
    ObjectExpression,
    PrintResult,
    Printer,
    Program,
    ReprintConfig,
    UnaryExpression,
    VariableDeclaration,
    VariableDeclarator,
    pretty_print,
)
from jsreprint.printer import format_number, quote_string, raw_denotes_value

ParseJs = Callable[..., File]


def _print(node: object, **options: object) -> str:
    return Printer(**options).print(node).code


def _stmt(expression: object) -> ExpressionStatement:
    return ExpressionStatement(expression=expression)


class TestFreshTrees:
    def test_variable_declaration(self) -> None:
        decl = VariableDeclaration(
            kind="let",
            declarations=[VariableDeclarator(id=Identifier(name="a"), init=Literal(value=1))],
        )
        assert _print(decl) == "let a = 1;"

    def test_program_statements_one_per_line(self) -> None:
        program = Program(
            body=[
                _stmt(CallExpression(callee=Identifier(name="a"))),
                _stmt(CallExpression(callee=Identifier(name="b"))),
            ]
        )
        assert _print(program) == "a();\nb();"

    def test_empty_block(self) -> None:
        assert _print(BlockStatement()) == "{}"

    def test_print_result_str_is_code(self) -> None:
        result = Printer().print(Identifier(name="x"))
        assert isinstance(result, PrintResult)
        assert str(result) == "x"
        assert result.map is None

    def test_none_prints_empty(self) -> None:
        assert Printer().print(None).code == ""


class TestParens:
    def test_lower_precedence_child(self) -> None:
        expr = BinaryExpression(
            operator="*",
            left=BinaryExpression(operator="+", left=Identifier(name="a"), right=Identifier(name="b")),
            right=Identifier(name="c"),
        )
        assert _print(_stmt(expr)) == "(a + b) * c;"

    def test_same_precedence_on_the_right(self) -> None:
        expr = BinaryExpression(
            operator="-",
            left=Identifier(name="a"),
            right=BinaryExpression(operator="-", left=Identifier(name="b"), right=Identifier(name="c")),
        )
        assert _print(_stmt(expr)) == "a - (b - c);"

    def test_same_precedence_on_the_left(self) -> None:
        expr = BinaryExpression(
            operator="-",
            left=BinaryExpression(operator="-", left=Identifier(name="a"), right=Identifier(name="b")),
            right=Identifier(name="c"),
        )
        assert _print(_stmt(expr)) == "a - b - c;"

    def test_object_arrow_body(self) -> None:
        arrow = ArrowFunctionExpression(params=[], body=ObjectExpression())
        assert _print(_stmt(arrow)) == "() => ({});"

    def test_function_expression_opening_statement(self) -> None:
        call = CallExpression(callee=FunctionExpression(params=[], body=BlockStatement()))
        assert _print(_stmt(call)) == "(function() {})();"

    def test_number_member_object(self) -> None:
        member = MemberExpression(object=Literal(value=1), property=Identifier(name="toString"))
        assert _print(_stmt(member)) == "(1).toString;"

    def test_unary_operators_do_not_fuse(self) -> None:
        inner = UnaryExpression(operator="-", argument=Identifier(name="x"))
        assert _print(_stmt(UnaryExpression(operator="-", argument=inner))) == "- -x;"
        assert _print(_stmt(UnaryExpression(operator="typeof", argument=Identifier(name="x")))) == "typeof x;"


class TestWrapping:
    def test_long_argument_list_breaks(self) -> None:
        names = ["a" * 30, "b" * 30, "c" * 30]
        call = CallExpression(callee=Identifier(name="f"), arguments=[Identifier(name=n) for n in names])
        expected = "f(\n    " + ",\n    ".join(names) + "\n);"
        assert _print(_stmt(call)) == expected

    def test_wrap_column_option(self) -> None:
        call = CallExpression(callee=Identifier(name="f"), arguments=[Identifier(name="a"), Identifier(name="b")])
        assert _print(_stmt(call), wrap_column=3, tab_width=2) == "f(\n  a,\n  b\n);"

    def test_long_array_breaks_with_trailing_comma(self) -> None:
        array = ArrayExpression(elements=[Identifier(name="x" * 40), Identifier(name="y" * 40)])
        expected = "[\n    " + "x" * 40 + ",\n    " + "y" * 40 + ",\n];"
        assert _print(_stmt(array), trailing_comma=True) == expected

    def test_array_bracket_spacing(self) -> None:
        array = ArrayExpression(elements=[Literal(value=1), None, Literal(value=2)])
        assert _print(_stmt(array)) == "[1,, 2];"
        assert _print(_stmt(array), array_bracket_spacing=True) == "[ 1,, 2 ];"


class TestPrettyPrint:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("var  a=1,b=2", "var a = 1, b = 2;"),
            ("if(a)b();else c()", "if (a)\n    b();\nelse\n    c();"),
            ("if (a) { b() } else { c() }", "if (a) {\n    b();\n} else {\n    c();\n}"),
            ("x={a:1,b:2}", "x = {\n    a: 1,\n    b: 2\n};"),
            ("f=x=>x", "f = x => x;"),
            ("f=(a,b)=>a", "f = (a, b) => a;"),
            ("for(var i=0;i<n;i++){}", "for (var i = 0; i < n; i++) {}"),
            ("for(;;){}", "for (; ; ) {}"),
            ("for (const k of o) {}", "for (const k of o) {}"),
            ("while(a){b()}", "while (a) {\n    b();\n}"),
            ("do{a()}while(b)", "do {\n    a();\n} while (b);"),
            ("try{a()}catch(e){}finally{}", "try {\n    a();\n} catch (e) {} finally {}"),
            ("switch(a){case 1:b();break;default:}", "switch (a) {\ncase 1:\n    b();\n    break;\ndefault:\n}"),
            ("x=a?b:c", "x = a ? b : c;"),
            ("new Foo(a)", "new Foo(a);"),
            ("a.b[c]", "a.b[c];"),
            ("x=`a${b}c`", "x = `a${b}c`;"),
            ("async function g(){await b}", "async function g() {\n    await b;\n}"),
            ("function* g(){yield* a; yield}", "function* g() {\n    yield* a;\n    yield;\n}"),
            ("class A extends B{static m(){}get x(){}}", "class A extends B {\n    static m() {}\n    get x() {}\n}"),
            ("import a,{b as c,d} from 'm'", "import a, { b as c, d } from 'm';"),
            ("import * as ns from 'm'", "import * as ns from 'm';"),
            ("export {a as b}", "export { a as b };"),
            ("export default function(){}", "export default function() {}"),
            ("export * from 'm'", "export * from 'm';"),
            ("let {a,b:c}=o", "let { a, b: c } = o;"),
            ("let [a,...b]=o", "let [a, ...b] = o;"),
            ("x=a=>({a})", "x = a => ({\n    a\n});"),
            ("x = -(-y)", "x = - -y;"),
            ("label:for(;;)break label", "label:\nfor (; ; )\n    break label;"),
        ],
    )
    def test_pretty_print(self, parse_js: ParseJs, source: str, expected: str) -> None:
        assert pretty_print(parse_js(source)).code == expected

    def test_original_literal_spelling_is_kept(self, parse_js: ParseJs) -> None:
        assert pretty_print(parse_js("x=[0x10,'a',1e3]")).code == "x = [0x10, 'a', 1e3];"

    def test_pretty_print_has_no_source_map(self, parse_js: ParseJs) -> None:
        tree = parse_js("a()", source_file_name="in.js")
        assert pretty_print(tree, source_map_name="out.js").map is None

    def test_dangling_comment_in_empty_block(self, parse_js: ParseJs) -> None:
        assert pretty_print(parse_js("function f() { /* todo */ }")).code == "function f() {\n    /* todo */\n}"

    def test_jsx(self, parse_js: ParseJs) -> None:
        tree = parse_js('x = <a href="b" {...c}>hi {d}</a>', jsx=True)
        assert pretty_print(tree).code == 'x = <a href="b" {...c}>hi{d}</a>;'


class TestLiteralHelpers:
    def test_quote_auto_prefers_double(self) -> None:
        assert quote_string("a") == '"a"'
        assert quote_string("it's") == '"it\'s"'

    def test_quote_auto_avoids_escapes(self) -> None:
        assert quote_string('say "hi"') == "'say \"hi\"'"

    def test_quote_forced(self) -> None:
        assert quote_string("a", "single") == "'a'"
        assert quote_string('"', "double") == '"\\""'

    def test_quote_escapes_line_separators(self) -> None:
        assert quote_string("a\u2028b") == '"a\\u2028b"'

    def test_new_string_literal_uses_quote_option(self) -> None:
        assert _print(_stmt(Literal(value="a")), quote="single") == "'a';"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(3, "3"), (1.0, "1"), (0.5, "0.5"), (1e21, "1e+21"), (1e-7, "1e-7"), (float("inf"), "Infinity")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        assert format_number(value) == expected

    @pytest.mark.parametrize(
        ("raw", "value", "expected"),
        [
            ("0x10", 16, True),
            ("1_000", 1000, True),
            ("1e3", 1000, True),
            ("010", 8, True),
            ("1", 2, False),
            ("'a'", "a", True),
            ('"a\\nb"', "a\nb", True),
            ("'a'", "b", False),
            ("true", True, True),
            ("null", None, True),
            (None, 1, False),
        ],
    )
    def test_raw_denotes_value(self, raw: str | None, value: object, expected: bool) -> None:
        assert raw_denotes_value(raw, value) is expected

    def test_stale_raw_is_not_reused(self, parse_js: ParseJs) -> None:
        tree = parse_js("x = 0x10;")
        tree.program.body[0].expression.right.value = 17
        assert pretty_print(tree).code == "x = 17;"


class TestConfigEffects:
    def test_use_tabs(self) -> None:
        block = BlockStatement(body=[_stmt(CallExpression(callee=Identifier(name="a")))])
        assert _print(block, use_tabs=True) == "{\n\ta();\n}"

    def test_tab_width(self) -> None:
        block = BlockStatement(body=[_stmt(CallExpression(callee=Identifier(name="a")))])
        assert _print(block, tab_width=2) == "{\n  a();\n}"

    def test_explicit_config_object(self) -> None:
        block = BlockStatement(body=[_stmt(CallExpression(callee=Identifier(name="a")))])
        assert Printer(ReprintConfig(tab_width=3)).print(block).code == "{\n   a();\n}"

    def test_arrow_parens_always(self) -> None:
        arrow = ArrowFunctionExpression(params=[Identifier(name="x")], body=Identifier(name="x"))
        assert _print(_stmt(arrow), arrow_parens_always=True) == "(x) => x;"
