"""End-to-end tests: parse, edit, reprint."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jsreprint import (
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    File,
    Identifier,
    IfStatement,
    Literal,
    TemplateElement,
    TemplateLiteral,
    mark_as_new,
    reprint,
)
from jsreprint.profiling import profiled_print

ParseJs = Callable[..., File]

IDENTITY_SOURCES = [
    "",
    "const x = 1 + 2;",
    "const x = 1 + 2;\n",
    "a();\n\n\nb();\n",
    "function  f ( a,b ){return a+b}\n",
    "if (a) {\n\tb();\n}\n",
    "// leading\nfoo(); /* trailing */\n",
    "a();\n// note\n\nb();\n",
    "x = `a${b}c${ d }e`;\n",
    "class A extends B {\n  static m() { return (1, 2); }\n  get x() {}\n}\n",
    "let {a, b: [c, ...d]} = obj;\r\nlet e = (f) => ({g});\r\n",
    "import x, {y as z} from 'mod';\nexport default function () {}\n",
    "label: for (var i = 0; i < 10; i++) { if (i) continue label; }\n",
    "var re = /ab+c/gi, n = 0x1F, s = 'it\\'s';\n",
]


class TestIdentity:
    @pytest.mark.parametrize("source", IDENTITY_SOURCES)
    def test_unmodified_tree_prints_original_text(self, parse_js: ParseJs, source: str) -> None:
        assert reprint(parse_js(source)).code == source

    def test_identity_uses_no_generic_printing(self, parse_js: ParseJs) -> None:
        tree = parse_js("const x = 1 + 2; // note\n")
        with profiled_print() as acc:
            reprint(tree)
        assert acc.generic_prints == 0
        assert acc.reprinted_nodes == 0


class TestMinimalEdits:
    def test_replace_literal(self, parse_js: ParseJs) -> None:
        tree = parse_js("const x = 1 + 2;")
        tree.program.body[0].declarations[0].init.right = Literal(value=3)
        with profiled_print() as acc:
            code = reprint(tree).code
        assert code == "const x = 1 + 3;"
        assert acc.reprinted_nodes == 1

    def test_edit_keeps_surrounding_formatting(self, parse_js: ParseJs) -> None:
        source = "foo(  a ,\n     b  );  // keep me\n"
        tree = parse_js(source)
        tree.program.body[0].expression.arguments[1] = Identifier(name="c")
        assert reprint(tree).code == "foo(  a ,\n     c  );  // keep me\n"

    def test_rename_identifier_in_place(self, parse_js: ParseJs) -> None:
        tree = parse_js("function   foo()   {}\n")
        tree.program.body[0].id.name = "bar"
        assert reprint(tree).code == "function   bar()   {}\n"

    def test_changed_operator_regenerates_only_that_node(self, parse_js: ParseJs) -> None:
        tree = parse_js("x   =   a+b;")
        tree.program.body[0].expression.right.operator = "-"
        assert reprint(tree).code == "x   =   a - b;"

    def test_throw_argument_edit_is_local(self, parse_js: ParseJs) -> None:
        source = 'function f() {\n  throw   new Error("a");\n}\n'
        tree = parse_js(source)
        throw = tree.program.body[0].body.body[0]
        throw.argument.arguments[0] = Literal(value="b")
        assert reprint(tree).code == 'function f() {\n  throw   new Error("b");\n}\n'

    def test_return_argument_edit_reprints_statement(self, parse_js: ParseJs) -> None:
        tree = parse_js("function f() {\n  return   a;\n}\n")
        tree.program.body[0].body.body[0].argument = Identifier(name="b")
        assert reprint(tree).code == "function f() {\n  return b;\n}\n"

    def test_fresh_template_literal(self, parse_js: ParseJs) -> None:
        tree = parse_js("x = y;")
        tree.program.body[0].expression.right = TemplateLiteral(
            quasis=[
                TemplateElement(value={"raw": "a", "cooked": "a"}),
                TemplateElement(value={"raw": "c", "cooked": "c"}, tail=True),
            ],
            expressions=[Identifier(name="b")],
        )
        assert reprint(tree).code == "x = `a${b}c`;"

    def test_template_inside_regenerated_parent(self, parse_js: ParseJs) -> None:
        tree = parse_js("f(`a${b}c`);")
        tree.program.body[0].expression.callee.name = "g"
        mark_as_new(tree.program.body[0].expression)
        assert reprint(tree).code == "g(`a${b}c`);"

    def test_mark_as_new_forces_regeneration(self, parse_js: ParseJs) -> None:
        tree = parse_js("x   =   a+b;")
        mark_as_new(tree.program.body[0].expression.right)
        assert reprint(tree).code == "x   =   a + b;"


class TestSpacingSafety:
    def test_leading_space_after_keyword(self, parse_js: ParseJs) -> None:
        tree = parse_js('x = typeof"a";')
        tree.program.body[0].expression.right.argument = Identifier(name="y")
        assert reprint(tree).code == "x = typeof y;"

    def test_trailing_space_before_keyword(self, parse_js: ParseJs) -> None:
        tree = parse_js('x = "a"in b;')
        tree.program.body[0].expression.right.left = Identifier(name="y")
        assert reprint(tree).code == "x = y in b;"

    def test_no_space_when_punctuation_separates(self, parse_js: ParseJs) -> None:
        tree = parse_js('x = "a"+"b";')
        tree.program.body[0].expression.right.right = Identifier(name="y")
        assert reprint(tree).code == 'x = "a"+y;'


class TestParentheses:
    def test_replacement_gets_parens_it_needs(self, parse_js: ParseJs) -> None:
        tree = parse_js("x = a * b;")
        binary = tree.program.body[0].expression.right
        binary.left = BinaryExpression(operator="+", left=binary.left, right=Identifier(name="c"))
        assert reprint(tree).code == "x = (a + c) * b;"

    def test_existing_parens_are_not_doubled(self, parse_js: ParseJs) -> None:
        tree = parse_js("x = (a + b) * c;")
        tree.program.body[0].expression.right.left.right = Identifier(name="d")
        assert reprint(tree).code == "x = (a + d) * c;"


class TestIndentation:
    def test_new_statement_indented_to_its_block(self, parse_js: ParseJs) -> None:
        source = "function f() {\n  if (a) {\n    b();\n  }\n}\n"
        tree = parse_js(source)
        block = tree.program.body[0].body.body[0].consequent
        block.body[0] = IfStatement(
            test=Identifier(name="b"),
            consequent=BlockStatement(
                body=[ExpressionStatement(expression=CallExpression(callee=Identifier(name="c")))]
            ),
        )
        assert reprint(tree).code == (
            "function f() {\n  if (a) {\n    if (b) {\n      c();\n    }\n  }\n}\n"
        )

    def test_tab_indented_source_round_trips_after_edit(self, parse_js: ParseJs) -> None:
        source = "if (a) {\n\tb(1);\n}\n"
        tree = parse_js(source)
        tree.program.body[0].consequent.body[0].expression.arguments[0] = Literal(value=2)
        assert reprint(tree).code == "if (a) {\n\tb(2);\n}\n"


class TestStatementLists:
    def test_appended_statement_keeps_blank_lines(self, parse_js: ParseJs) -> None:
        tree = parse_js("a();\n\nb();\n")
        tree.program.body.append(
            ExpressionStatement(expression=CallExpression(callee=Identifier(name="c")))
        )
        assert reprint(tree).code == "a();\n\nb();\nc();\n"

    def test_removed_statement(self, parse_js: ParseJs) -> None:
        tree = parse_js("a();\nb();\nc();\n")
        del tree.program.body[1]
        assert reprint(tree).code == "a();\nc();\n"

    def test_crlf_terminator_is_preserved(self, parse_js: ParseJs) -> None:
        tree = parse_js("a();\r\nb();\r\n")
        tree.program.body.append(
            ExpressionStatement(expression=CallExpression(callee=Identifier(name="c")))
        )
        assert reprint(tree).code == "a();\r\nb();\r\nc();\r\n"
