"""Printer: turn a (possibly edited) tree back into source text.

``Printer.print`` reuses original text wherever it can. For every node it
asks ``get_reprinter`` whether the node's original text can be patched;
only the nodes that cannot are printed from scratch by ``GenericPrinter``,
whose children again go through the reuse check. An untouched tree prints
back byte for byte.

``Printer.print_generically`` ignores the original text and pretty-prints
the whole tree.

Example:
    >>> tree = parse("const x = 1 + 2;")
    >>> tree.program.body[0].declarations[0].init.right = Literal(value=3)
    >>> reprint(tree).code
    'const x = 1 + 3;'

Thread Safety:
    A Printer holds only its frozen configuration and may be shared.
    Each print call builds its own state.

"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, replace
from typing import Any

from jsreprint.comments import print_comments
from jsreprint.config import ReprintConfig, normalize_options
from jsreprint.lines import EMPTY_LINES, Lines, concat, from_string
from jsreprint.nodes import (
    ArrayExpression,
    ArrayPattern,
    ArrowFunctionExpression,
    AssignmentExpression,
    AssignmentPattern,
    AwaitExpression,
    BinaryExpression,
    Block,
    BlockStatement,
    BreakStatement,
    CallExpression,
    CatchClause,
    ClassBody,
    ClassDeclaration,
    ClassExpression,
    ConditionalExpression,
    ContinueStatement,
    DebuggerStatement,
    DoWhileStatement,
    EmptyStatement,
    ExportAllDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExportSpecifier,
    ExpressionStatement,
    File,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    IfStatement,
    Import,
    ImportDeclaration,
    ImportDefaultSpecifier,
    ImportNamespaceSpecifier,
    ImportSpecifier,
    JSXAttribute,
    JSXClosingElement,
    JSXElement,
    JSXEmptyExpression,
    JSXExpressionContainer,
    JSXIdentifier,
    JSXMemberExpression,
    JSXNamespacedName,
    JSXOpeningElement,
    JSXSpreadAttribute,
    JSXText,
    LabeledStatement,
    Line,
    Literal,
    LogicalExpression,
    MemberExpression,
    MetaProperty,
    MethodDefinition,
    NewExpression,
    Node,
    ObjectExpression,
    ObjectPattern,
    Program,
    Property,
    RestElement,
    ReturnStatement,
    SequenceExpression,
    SpreadElement,
    Super,
    SwitchCase,
    SwitchStatement,
    TaggedTemplateExpression,
    TemplateElement,
    TemplateLiteral,
    ThisExpression,
    ThrowStatement,
    TryStatement,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    VariableDeclarator,
    WhileStatement,
    WithStatement,
    YieldExpression,
)
from jsreprint.patcher import get_reprinter
from jsreprint.path import PathCursor
from jsreprint.profiling import get_print_accumulator
from jsreprint.sourcemap import compose_source_maps
from jsreprint.util import get_true_loc
from jsreprint.utils.logger import get_logger

logger = get_logger(__name__)

_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")
_WORD_OPERATOR_RE = re.compile(r"[a-z]$")
_NON_SPACE_RE = re.compile(r"\S")


@dataclass(frozen=True, slots=True)
class PrintResult:
    """Printed code plus its source map.

    Attributes:
        code: The printed source text
        map: Source Map V3 dict, or None when no ``source_map_name`` was
            configured (or the tree was printed generically)

    """

    code: str
    map: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.code


# =============================================================================
# Literal helpers
# =============================================================================


def _swap_quotes(text: str) -> str:
    return text.translate(str.maketrans({"'": '"', '"': "'"}))


def quote_string(value: str, quote: str = "auto") -> str:
    """Quote ``value`` as a JavaScript string literal.

    ``auto`` picks double quotes unless single quotes need fewer escapes.
    """
    double = json.dumps(value, ensure_ascii=False)
    if quote != "double":
        single = _swap_quotes(json.dumps(_swap_quotes(value), ensure_ascii=False))
        if quote == "single" or len(double) > len(single):
            double = single
    # Both are line terminators to the Lines buffer.
    return double.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


def format_number(value: int | float) -> str:
    """Shortest JavaScript spelling of a numeric value."""
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return _EXPONENT_RE.sub(r"e\1\2", repr(value))


def _parse_number(raw: str) -> int | float | None:
    text = raw.replace("_", "").lower()
    if text.endswith("n"):
        return None
    try:
        if text.startswith(("0x", "0o", "0b")):
            return int(text, 0)
        if len(text) > 1 and text[0] == "0" and text.isdigit():
            # Legacy octal, unless a digit rules it out.
            return int(text, 8) if set(text) <= set("01234567") else int(text, 10)
        return float(text)
    except ValueError:
        return None


def _parse_string(raw: str) -> str | None:
    if len(raw) < 2 or raw[0] not in "'\"" or raw[-1] != raw[0]:
        return None
    body = raw[1:-1]
    if "\\" not in body:
        return body
    if raw[0] == '"':
        try:
            return json.loads(raw)
        except ValueError:
            return None
    return None


def raw_denotes_value(raw: str | None, value: Any) -> bool:
    """True if the source spelling ``raw`` still evaluates to ``value``."""
    if not raw:
        return False
    if isinstance(value, bool):
        return raw == ("true" if value else "false")
    if value is None:
        return raw == "null"
    if isinstance(value, int | float):
        parsed = _parse_number(raw)
        return parsed is not None and parsed == value
    if isinstance(value, str):
        return _parse_string(raw) == value
    return False


def _last_non_space_char(lines: Lines) -> str:
    text = lines.to_string().rstrip()
    return text[-1] if text else ""


def _ends_with_brace(lines: Lines) -> bool:
    return _last_non_space_char(lines) == "}"


def _max_space(first: str | None, second: str | None) -> Lines:
    if not first and not second:
        return EMPTY_LINES
    if not first:
        return from_string(second)
    if not second:
        return from_string(first)
    first_lines = from_string(first)
    second_lines = from_string(second)
    return second_lines if len(second_lines) > len(first_lines) else first_lines


# =============================================================================
# Generic printer
# =============================================================================


class GenericPrinter:
    """Pretty-printer for every node kind, used where no original text can
    be reused.

    Children are printed through the owning print context, so an unchanged
    child of a regenerated node still keeps its original text.
    """

    def __init__(self, context: _PrintContext) -> None:
        self._context = context

    @property
    def config(self) -> ReprintConfig:
        return self._context.config

    @property
    def tab_width(self) -> int:
        return self._context.tab_width

    def _child(self, path: PathCursor) -> Lines:
        return self._context.print(path, include_comments=True)

    def _call(self, path: PathCursor, *names: str | int) -> Lines:
        return path.call(self._child, *names)

    def _map(self, path: PathCursor, name: str) -> list[Lines]:
        return path.map(lambda p, _i: self._child(p), name)

    def _text(self, text: str) -> Lines:
        return from_string(text, self.tab_width)

    def print(self, path: PathCursor, *, avoid_root_parens: bool = False) -> Lines:
        node = path.get_value()
        accumulator = get_print_accumulator()
        if accumulator is not None:
            accumulator.record_generic_print(type(node).__name__)
        if isinstance(node, Node) and node.loc is not None:
            logger.debug("printing %s at %s from scratch", node.type, node.loc.start)

        printed = self.print_no_parens(path)
        if not isinstance(node, Node) or printed.is_empty():
            return printed
        if not avoid_root_parens and path.needs_parens():
            return concat(["(", printed, ")"])
        return printed

    def print_no_parens(self, path: PathCursor) -> Lines:
        node = path.get_value()
        match node:
            case None:
                return EMPTY_LINES
            case str():
                return self._text(node)
            case File():
                return self._call(path, "program")
            case Program():
                return self._print_program(path, node)
            case Line():
                return self._text("//" + node.value)
            case Block():
                return concat(["/*", self._text(node.value), "*/"])

            # Statements
            case EmptyStatement():
                return EMPTY_LINES
            case ExpressionStatement():
                return concat([self._call(path, "expression"), ";"])
            case BlockStatement():
                return self._print_block(path, node)
            case ReturnStatement():
                return self._print_return(path, node)
            case ThrowStatement():
                return concat(["throw ", self._call(path, "argument"), ";"])
            case BreakStatement() | ContinueStatement():
                keyword = "break" if isinstance(node, BreakStatement) else "continue"
                if node.label is not None:
                    return concat([keyword, " ", self._call(path, "label"), ";"])
                return from_string(keyword + ";")
            case DebuggerStatement():
                return from_string("debugger;")
            case LabeledStatement():
                return concat([self._call(path, "label"), ":\n", self._call(path, "body")])
            case IfStatement():
                return self._print_if(path, node)
            case SwitchStatement():
                return self._print_switch(path, node)
            case SwitchCase():
                return self._print_switch_case(path, node)
            case TryStatement():
                return self._print_try(path, node)
            case CatchClause():
                if node.param is None:
                    return concat(["catch ", self._call(path, "body")])
                return concat(["catch (", self._call(path, "param"), ") ", self._call(path, "body")])
            case WhileStatement():
                return concat(
                    ["while (", self._call(path, "test"), ")", self._adjust_clause(self._call(path, "body"))]
                )
            case DoWhileStatement():
                body = concat(["do", self._adjust_clause(self._call(path, "body"))])
                separator = " while" if _ends_with_brace(body) else "\nwhile"
                return concat([body, separator, " (", self._call(path, "test"), ");"])
            case ForStatement():
                return self._print_for(path)
            case ForInStatement() | ForOfStatement():
                keyword = " in " if isinstance(node, ForInStatement) else " of "
                return concat(
                    [
                        "for (",
                        self._call(path, "left"),
                        keyword,
                        self._call(path, "right"),
                        ")",
                        self._adjust_clause(self._call(path, "body")),
                    ]
                )
            case WithStatement():
                return concat(["with (", self._call(path, "object"), ") ", self._call(path, "body")])

            # Declarations
            case VariableDeclaration():
                return self._print_variable_declaration(path, node)
            case VariableDeclarator():
                if node.init is None:
                    return self._call(path, "id")
                return concat([self._call(path, "id"), " = ", self._call(path, "init")])
            case FunctionDeclaration() | FunctionExpression():
                return self._print_function(path, node)
            case ArrowFunctionExpression():
                return self._print_arrow(path, node)
            case ClassDeclaration() | ClassExpression():
                return self._print_class(path, node)
            case ClassBody():
                if not node.body:
                    return self._print_empty_braces(path)
                body = path.call(self._print_statement_sequence, "body")
                return concat(["{\n", body.indent(self.tab_width), "\n}"])
            case MethodDefinition():
                method = self._print_method(path, node)
                return concat(["static ", method]) if node.static else method

            # Expressions
            case Identifier():
                return from_string(node.name)
            case Literal():
                return self._print_literal(node)
            case ThisExpression():
                return from_string("this")
            case Super():
                return from_string("super")
            case Import():
                return from_string("import")
            case ArrayExpression() | ArrayPattern():
                return self._print_array(path, node)
            case ObjectExpression() | ObjectPattern():
                return self._print_object(path, node)
            case Property():
                return self._print_property(path, node)
            case SpreadElement() | RestElement():
                return concat(["...", self._call(path, "argument")])
            case TemplateLiteral():
                return self._print_template_literal(path, node)
            case TemplateElement():
                return self._text(node.value.get("raw") or "").lock_indent_tail()
            case TaggedTemplateExpression():
                return concat([self._call(path, "tag"), self._call(path, "quasi")])
            case UnaryExpression():
                return self._print_unary(path, node)
            case UpdateExpression():
                argument = self._call(path, "argument")
                return concat([node.operator, argument] if node.prefix else [argument, node.operator])
            case BinaryExpression() | LogicalExpression() | AssignmentExpression():
                return concat([self._call(path, "left"), f" {node.operator} ", self._call(path, "right")])
            case AssignmentPattern():
                return concat([self._call(path, "left"), " = ", self._call(path, "right")])
            case ConditionalExpression():
                return concat(
                    [
                        self._call(path, "test"),
                        " ? ",
                        self._call(path, "consequent"),
                        " : ",
                        self._call(path, "alternate"),
                    ]
                )
            case CallExpression():
                return concat([self._call(path, "callee"), self._print_arguments(path)])
            case NewExpression():
                return concat(["new ", self._call(path, "callee"), self._print_arguments(path)])
            case MemberExpression():
                if node.computed:
                    return concat([self._call(path, "object"), "[", self._call(path, "property"), "]"])
                return concat([self._call(path, "object"), ".", self._call(path, "property")])
            case SequenceExpression():
                return from_string(", ").join(self._map(path, "expressions"))
            case YieldExpression():
                parts: list[Lines | str] = ["yield*" if node.delegate else "yield"]
                if node.argument is not None:
                    parts += [" ", self._call(path, "argument")]
                return concat(parts)
            case AwaitExpression():
                return concat(["await ", self._call(path, "argument")])
            case MetaProperty():
                return concat([self._call(path, "meta"), ".", self._call(path, "property")])

            # Modules
            case ImportDeclaration():
                return self._print_import(path, node)
            case ImportSpecifier():
                if node.local is not None and node.local.name != node.imported.name:
                    return concat([self._call(path, "imported"), " as ", self._call(path, "local")])
                return self._call(path, "imported")
            case ImportDefaultSpecifier():
                return self._call(path, "local")
            case ImportNamespaceSpecifier():
                return concat(["* as ", self._call(path, "local")])
            case ExportSpecifier():
                if node.exported is not None and node.exported.name != node.local.name:
                    return concat([self._call(path, "local"), " as ", self._call(path, "exported")])
                return self._call(path, "local")
            case ExportNamedDeclaration() | ExportDefaultDeclaration():
                return self._print_export(path, node)
            case ExportAllDeclaration():
                return concat(["export * from ", self._call(path, "source"), ";"])

            # JSX
            case JSXIdentifier():
                return from_string(node.name)
            case JSXNamespacedName():
                return concat([self._call(path, "namespace"), ":", self._call(path, "name")])
            case JSXMemberExpression():
                return concat([self._call(path, "object"), ".", self._call(path, "property")])
            case JSXAttribute():
                if node.value is None:
                    return self._call(path, "name")
                return concat([self._call(path, "name"), "=", self._call(path, "value")])
            case JSXSpreadAttribute():
                return concat(["{...", self._call(path, "argument"), "}"])
            case JSXExpressionContainer():
                return concat(["{", self._call(path, "expression"), "}"])
            case JSXEmptyExpression():
                return EMPTY_LINES
            case JSXText():
                return self._text(node.value)
            case JSXElement():
                return self._print_jsx_element(path, node)
            case JSXOpeningElement():
                return self._print_jsx_opening(path, node)
            case JSXClosingElement():
                return concat(["</", self._call(path, "name"), ">"])

        raise TypeError(f"cannot print {type(node).__name__}")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _print_program(self, path: PathCursor, node: Program) -> Lines:
        body = path.call(self._print_statement_sequence, "body")
        if body.is_empty():
            return self._print_dangling_comments(path)
        return body

    def _print_statement_sequence(self, path: PathCursor) -> Lines:
        """Print the statements of the list at ``path``, one per line.

        With ``reuse_whitespace`` the blank lines around each original
        statement are kept; new statements get a blank line around them
        only when they span several lines.
        """
        printed: list[tuple[Any, Lines]] = []

        def visit(stmt_path: PathCursor, _index: int) -> None:
            stmt = stmt_path.get_value()
            if stmt is None:
                return
            if isinstance(stmt, EmptyStatement) and not stmt.comments:
                return
            printed.append((stmt, self._child(stmt_path)))

        path.each(visit)

        parts: list[Lines | str] = []
        prev_trailing_space: str | None = None
        last = len(printed) - 1
        for i, (stmt, lines) in enumerate(printed):
            multi_line = len(lines) > 1
            loc = getattr(stmt, "loc", None)
            original = loc.lines if loc is not None else None
            true_loc = (
                get_true_loc(stmt, original)
                if original is not None and self.config.reuse_whitespace
                else None
            )

            leading_space = ""
            if i > 0:
                if true_loc is not None:
                    before = original.skip_spaces(true_loc.start, backward=True)
                    gap = true_loc.start.line - (before.line if before is not None else 1)
                    leading_space = "\n" * gap
                else:
                    leading_space = "\n\n" if multi_line else "\n"

            trailing_space = ""
            if i < last:
                if true_loc is not None:
                    after = original.skip_spaces(true_loc.end)
                    gap = (after.line if after is not None else len(original)) - true_loc.end.line
                    trailing_space = "\n" * gap
                else:
                    trailing_space = "\n\n" if multi_line else "\n"

            parts.append(_max_space(prev_trailing_space, leading_space))
            parts.append(lines)
            if i < last:
                prev_trailing_space = trailing_space
            elif trailing_space:
                parts.append(trailing_space)

        return concat(parts)

    def _print_dangling_comments(self, path: PathCursor) -> Lines:
        node = path.get_value()
        parts: list[Lines] = []

        def visit(comment_path: PathCursor, _index: int) -> None:
            comment = comment_path.get_value()
            if not comment.leading and not comment.trailing:
                parts.append(self._child(comment_path))

        if isinstance(node, Node) and node.comments:
            path.each(visit, "comments")
        return from_string("\n").join(parts)

    def _print_empty_braces(self, path: PathCursor) -> Lines:
        dangling = self._print_dangling_comments(path)
        if dangling.is_empty():
            return from_string("{}")
        return concat(["{\n", dangling.indent(self.tab_width), "\n}"])

    def _print_block(self, path: PathCursor, node: BlockStatement) -> Lines:
        body = path.call(self._print_statement_sequence, "body")
        if body.is_empty():
            return self._print_empty_braces(path)
        return concat(["{\n", body.indent(self.tab_width), "\n}"])

    def _print_return(self, path: PathCursor, node: ReturnStatement) -> Lines:
        if node.argument is None:
            return from_string("return;")
        argument = self._call(path, "argument")
        if argument.starts_with_comment() or (len(argument) > 1 and isinstance(node.argument, JSXElement)):
            return concat(["return (\n", argument.indent(self.tab_width), "\n);"])
        return concat(["return ", argument, ";"])

    def _adjust_clause(self, clause: Lines) -> Lines:
        if len(clause) > 1 or clause.char_at(clause.first_pos()) == "{":
            return concat([" ", clause])
        if _last_non_space_char(clause) not in ("}", ";"):
            clause = concat([clause, ";"])
        return concat(["\n", clause.indent(self.tab_width)])

    def _print_if(self, path: PathCursor, node: IfStatement) -> Lines:
        consequent = self._adjust_clause(self._call(path, "consequent"))
        parts: list[Lines | str] = ["if (", self._call(path, "test"), ")", consequent]
        if node.alternate is not None:
            parts.append(" else" if _ends_with_brace(consequent) else "\nelse")
            parts.append(self._adjust_clause(self._call(path, "alternate")))
        return concat(parts)

    def _print_switch(self, path: PathCursor, node: SwitchStatement) -> Lines:
        head = concat(["switch (", self._call(path, "discriminant"), ") "])
        if not node.cases:
            return concat([head, "{}"])
        cases = from_string("\n").join(self._map(path, "cases"))
        return concat([head, "{\n", cases, "\n}"])

    def _print_switch_case(self, path: PathCursor, node: SwitchCase) -> Lines:
        if node.test is not None:
            parts: list[Lines | str] = ["case ", self._call(path, "test"), ":"]
        else:
            parts = ["default:"]
        if node.consequent:
            body = path.call(self._print_statement_sequence, "consequent")
            parts += ["\n", body.indent(self.tab_width)]
        return concat(parts)

    def _print_try(self, path: PathCursor, node: TryStatement) -> Lines:
        parts: list[Lines | str] = ["try ", self._call(path, "block")]
        if node.handler is not None:
            parts += [" ", self._call(path, "handler")]
        if node.finalizer is not None:
            parts += [" finally ", self._call(path, "finalizer")]
        return concat(parts)

    def _print_for(self, path: PathCursor) -> Lines:
        init = self._call(path, "init")
        separator = ";\n" if len(init) > 1 else "; "
        head_open = "for ("
        inner = from_string(separator).join([init, self._call(path, "test"), self._call(path, "update")])
        head = concat([head_open, inner.indent_tail(len(head_open)), ")"])
        clause = self._adjust_clause(self._call(path, "body"))
        if len(head) > 1:
            return concat([head, "\n", clause.trim_left()])
        return concat([head, clause])

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _print_variable_declaration(self, path: PathCursor, node: VariableDeclaration) -> Lines:
        declarations = self._map(path, "declarations")
        if all(len(lines) == 1 for lines in declarations):
            joined = from_string(", ").join(declarations)
        else:
            joined = from_string(",\n").join(declarations).indent_tail(len(node.kind) + 1)

        parts: list[Lines | str] = [node.kind, " ", joined]
        # No terminator inside a for-loop head.
        if not isinstance(path.get_parent_node(), ForStatement | ForInStatement | ForOfStatement):
            parts.append(";")
        return concat(parts)

    def _print_params(self, path: PathCursor) -> Lines:
        """Parameter list of the function at ``path``, without parentheses."""
        function = path.get_value()
        printed = self._map(path, "params")
        joined = from_string(", ").join(printed)
        if len(joined) > 1 or joined.get_line_length(1) > self.config.wrap_column:
            joined = from_string(",\n").join(printed)
            last_is_rest = bool(function.params) and isinstance(function.params[-1], RestElement)
            closer = ",\n" if self.config.trailing_comma and not last_is_rest else "\n"
            return concat(["\n", concat([joined, closer]).indent(self.tab_width)])
        return joined

    def _print_function(self, path: PathCursor, node: FunctionDeclaration | FunctionExpression) -> Lines:
        parts: list[Lines | str] = []
        if node.is_async:
            parts.append("async ")
        parts.append("function*" if node.generator else "function")
        if node.id is not None:
            parts += [" ", self._call(path, "id")]
        parts += ["(", self._print_params(path), ")"]
        if node.body is not None:
            parts += [" ", self._call(path, "body")]
        return concat(parts)

    def _print_arrow(self, path: PathCursor, node: ArrowFunctionExpression) -> Lines:
        parts: list[Lines | str] = []
        if node.is_async:
            parts.append("async ")
        if (
            not self.config.arrow_parens_always
            and len(node.params) == 1
            and isinstance(node.params[0], Identifier)
        ):
            parts.append(self._call(path, "params", 0))
        else:
            parts += ["(", self._print_params(path), ")"]
        parts += [" => ", self._call(path, "body")]
        return concat(parts)

    def _print_class(self, path: PathCursor, node: ClassDeclaration | ClassExpression) -> Lines:
        parts: list[Lines | str] = ["class"]
        if node.id is not None:
            parts += [" ", self._call(path, "id")]
        if node.super_class is not None:
            parts += [" extends ", self._call(path, "super_class")]
        parts += [" ", self._call(path, "body")]
        return concat(parts)

    def _print_method(self, path: PathCursor, node: MethodDefinition | Property) -> Lines:
        """Shared by class methods and object-literal methods/accessors."""
        function = node.value
        parts: list[Lines | str] = []
        if isinstance(function, FunctionExpression):
            if function.is_async:
                parts.append("async ")
            if function.generator:
                parts.append("*")
        if node.kind in ("get", "set"):
            parts += [node.kind, " "]

        key = self._call(path, "key")
        parts.append(concat(["[", key, "]"]) if node.computed else key)

        if isinstance(function, FunctionExpression):
            parts += ["(", path.call(self._print_params, "value"), ")"]
            if function.body is not None:
                parts += [" ", self._call(path, "value", "body")]
            else:
                parts.append(";")
        return concat(parts)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _print_literal(self, node: Literal) -> Lines:
        if node.regex:
            pattern = f"/{node.regex.get('pattern', '')}/{node.regex.get('flags', '')}"
            return self._text(node.raw if node.raw == pattern else pattern)
        if raw_denotes_value(node.raw, node.value):
            return self._text(node.raw)

        value = node.value
        if isinstance(value, str):
            return self._text(quote_string(value, self.config.quote))
        if value is None:
            return from_string("null")
        if isinstance(value, bool):
            return from_string("true" if value else "false")
        if isinstance(value, int | float):
            return from_string(format_number(value))
        raise TypeError(f"unsupported literal value {value!r}")

    def _print_unary(self, path: PathCursor, node: UnaryExpression) -> Lines:
        argument = self._call(path, "argument")
        separator = ""
        if _WORD_OPERATOR_RE.search(node.operator):
            separator = " "
        elif isinstance(node.argument, UnaryExpression | UpdateExpression) and node.argument.prefix:
            # `- -x` and `+ ++x` must not fuse into `--x` and `+++x`.
            if node.argument.operator[:1] == node.operator[:1]:
                separator = " "
        return concat([node.operator, separator, argument])

    def _print_arguments(self, path: PathCursor) -> Lines:
        printed = self._map(path, "arguments")
        joined = from_string(", ").join(printed)
        if joined.get_line_length(1) > self.config.wrap_column:
            joined = from_string(",\n").join(printed)
            closer = ",\n)" if self.config.trailing_comma else "\n)"
            return concat(["(\n", joined.indent(self.tab_width), closer])
        return concat(["(", joined, ")"])

    def _print_array(self, path: PathCursor, node: ArrayExpression | ArrayPattern) -> Lines:
        if not node.elements:
            return self._print_empty_brackets(path)
        printed = self._map(path, "elements")
        one_line = from_string(", ").join(printed).get_line_length(1) <= self.config.wrap_column
        last = len(node.elements) - 1

        parts: list[Lines | str] = []
        if one_line:
            parts.append("[ " if self.config.array_bracket_spacing else "[")
        else:
            parts.append("[\n")

        for i, element in enumerate(node.elements):
            if element is None:
                # A hole.
                parts.append(",")
                continue
            lines = printed[i]
            if one_line:
                if i > 0:
                    parts.append(" ")
            else:
                lines = lines.indent(self.tab_width)
            parts.append(lines)
            if i < last or (not one_line and self.config.trailing_comma):
                parts.append(",")
            if not one_line:
                parts.append("\n")

        parts.append(" ]" if one_line and self.config.array_bracket_spacing else "]")
        return concat(parts)

    def _print_empty_brackets(self, path: PathCursor) -> Lines:
        dangling = self._print_dangling_comments(path)
        if dangling.is_empty():
            return from_string("[]")
        return concat(["[\n", dangling.indent(self.tab_width), "\n]"])

    def _print_object(self, path: PathCursor, node: ObjectExpression | ObjectPattern) -> Lines:
        if not node.properties:
            return self._print_empty_braces(path)

        printed = self._map(path, "properties")
        inline = from_string(", ").join(printed)
        if (
            isinstance(node, ObjectPattern)
            and len(inline) == 1
            and inline.get_line_length(1) <= self.config.wrap_column
        ):
            if self.config.object_curly_spacing:
                return concat(["{ ", inline, " }"])
            return concat(["{", inline, "}"])

        parts: list[Lines | str] = ["{\n"]
        last = len(printed) - 1
        allow_break = False
        for i, lines in enumerate(printed):
            lines = lines.indent(self.tab_width)
            multi_line = len(lines) > 1
            if multi_line and allow_break:
                parts.append("\n")
            parts.append(lines)
            if i < last:
                parts.append(",\n\n" if multi_line else ",\n")
                allow_break = not multi_line
            elif self.config.trailing_comma and not isinstance(node.properties[i], RestElement):
                parts.append(",")
        parts.append("\n}")
        return concat(parts)

    def _print_property(self, path: PathCursor, node: Property) -> Lines:
        if node.method or node.kind in ("get", "set"):
            return self._print_method(path, node)
        if node.shorthand and isinstance(node.value, AssignmentPattern):
            return self._call(path, "value")

        key = self._call(path, "key")
        parts: list[Lines | str] = [concat(["[", key, "]"]) if node.computed else key]
        same_name = (
            isinstance(node.key, Identifier)
            and isinstance(node.value, Identifier)
            and node.key.name == node.value.name
        )
        if not (node.shorthand and same_name):
            parts += [": ", self._call(path, "value")]
        return concat(parts)

    def _print_template_literal(self, path: PathCursor, node: TemplateLiteral) -> Lines:
        expressions = self._map(path, "expressions")
        parts: list[Lines | str] = ["`"]

        def visit(quasi_path: PathCursor, i: int) -> None:
            parts.append(self._child(quasi_path))
            if i < len(expressions):
                parts.extend(["${", expressions[i], "}"])

        path.each(visit, "quasis")
        parts.append("`")
        return concat(parts).lock_indent_tail()

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def _braced_list(self, items: list[Lines]) -> Lines:
        joined = from_string(", ").join(items)
        if joined.get_line_length(1) > self.config.wrap_column:
            joined = concat([from_string(",\n").join(items).indent(self.tab_width), ","])
        if len(joined) > 1:
            return concat(["{\n", joined, "\n}"])
        if self.config.object_curly_spacing:
            return concat(["{ ", joined, " }"])
        return concat(["{", joined, "}"])

    def _print_import(self, path: PathCursor, node: ImportDeclaration) -> Lines:
        parts: list[Lines | str] = ["import "]
        if node.specifiers:
            unbraced: list[Lines] = []
            braced: list[Lines] = []

            def visit(specifier_path: PathCursor, _index: int) -> None:
                specifier = specifier_path.get_value()
                target = braced if isinstance(specifier, ImportSpecifier) else unbraced
                target.append(self._child(specifier_path))

            path.each(visit, "specifiers")
            for i, lines in enumerate(unbraced):
                if i > 0:
                    parts.append(", ")
                parts.append(lines)
            if braced:
                if unbraced:
                    parts.append(", ")
                parts.append(self._braced_list(braced))
            parts.append(" from ")
        parts += [self._call(path, "source"), ";"]
        return concat(parts)

    def _print_export(self, path: PathCursor, node: ExportNamedDeclaration | ExportDefaultDeclaration) -> Lines:
        parts: list[Lines | str] = ["export "]
        if isinstance(node, ExportDefaultDeclaration):
            parts.append("default ")

        declaration = node.declaration
        if declaration is not None:
            parts.append(self._call(path, "declaration"))
        else:
            specifiers = self._map(path, "specifiers")
            if not specifiers:
                parts.append("{}")
            elif self.config.object_curly_spacing:
                parts += ["{ ", from_string(", ").join(specifiers), " }"]
            else:
                parts += ["{", from_string(", ").join(specifiers), "}"]
            if node.source is not None:
                parts += [" from ", self._call(path, "source")]

        lines = concat(parts)
        if _last_non_space_char(lines) != ";" and not isinstance(
            declaration, FunctionDeclaration | ClassDeclaration
        ):
            lines = concat([lines, ";"])
        return lines

    # ------------------------------------------------------------------
    # JSX
    # ------------------------------------------------------------------

    def _print_jsx_element(self, path: PathCursor, node: JSXElement) -> Lines:
        opening = self._call(path, "opening_element")
        if node.opening_element.self_closing:
            return opening

        def print_child(child_path: PathCursor, _index: int) -> Lines | str:
            child = child_path.get_value()
            if isinstance(child, JSXText):
                if _NON_SPACE_RE.search(child.value):
                    return self._text(child.value.strip())
                if "\n" in child.value:
                    return "\n"
            return self._child(child_path)

        children = concat(path.map(print_child, "children")).indent_tail(self.tab_width)
        return concat([opening, children, self._call(path, "closing_element")])

    def _print_jsx_opening(self, path: PathCursor, node: JSXOpeningElement) -> Lines:
        attributes: list[Lines | str] = []
        path.each(lambda p, _i: attributes.extend([" ", self._child(p)]), "attributes")
        attribute_lines = concat(attributes)
        if len(attribute_lines) > 1 or attribute_lines.get_line_length(1) > self.config.wrap_column:
            attributes = ["\n" if part == " " else part for part in attributes]
            attribute_lines = concat(attributes).indent_tail(self.tab_width)
        closer = " />" if node.self_closing else ">"
        return concat(["<", self._call(path, "name"), attribute_lines, closer])


# =============================================================================
# Orchestration
# =============================================================================


class _PrintContext:
    """State of one top-level print call."""

    __slots__ = ("config", "generic", "reuse", "tab_width")

    def __init__(self, config: ReprintConfig, *, reuse: bool) -> None:
        self.config = config
        self.reuse = reuse
        self.tab_width = config.effective_tab_width
        self.generic = GenericPrinter(self)

    def print(
        self,
        path: PathCursor,
        *,
        include_comments: bool = False,
        avoid_root_parens: bool = False,
    ) -> Lines:
        if path.get_value() is None:
            return EMPTY_LINES
        if include_comments:
            return print_comments(
                path,
                lambda p: self.print(p, avoid_root_parens=avoid_root_parens),
            )

        if not self.reuse:
            return self.generic.print(path, avoid_root_parens=avoid_root_parens)

        old_tab_width = self.tab_width
        if self.config.tab_width is None:
            node = path.get_node()
            loc = node.loc if node is not None else None
            if loc is not None and loc.lines is not None:
                self.tab_width = loc.lines.guess_tab_width()
        try:
            reprinter = get_reprinter(path)
            if reprinter is not None:
                return reprinter(self.print)
            return self.generic.print(path, avoid_root_parens=avoid_root_parens)
        finally:
            self.tab_width = old_tab_width


class Printer:
    """Prints trees, reusing original source text where possible.

    Example:
        >>> printer = Printer(ReprintConfig(quote="single"))
        >>> printer.print(tree).code
        "const s = 'x';"

    """

    def __init__(self, config: ReprintConfig | None = None, **overrides: Any) -> None:
        self.config = normalize_options(config, **overrides)

    def print(self, node: Any) -> PrintResult:
        """Print ``node``, patching its original text wherever the tree
        still matches it.

        Returns:
            PrintResult with the code and, when ``source_map_name`` is
            configured, a source map composed with ``input_source_map``
        """
        if node is None:
            return PrintResult("")
        context = _PrintContext(self.config, reuse=True)
        lines = context.print(PathCursor.from_node(node), include_comments=True)
        code = self._to_string(lines, node, self.config)
        source_map = compose_source_maps(
            self.config.input_source_map,
            lines.get_source_map(self.config.source_map_name, self.config.source_root),
        )
        self._record(code)
        return PrintResult(code, source_map)

    def print_generically(self, node: Any) -> PrintResult:
        """Pretty-print ``node`` from scratch, ignoring original text."""
        if node is None:
            return PrintResult("")
        config = replace(self.config, reuse_whitespace=False)
        context = _PrintContext(config, reuse=False)
        lines = context.print(PathCursor.from_node(node), include_comments=True)
        code = self._to_string(lines, node, config)
        self._record(code)
        return PrintResult(code)

    @staticmethod
    def _to_string(lines: Lines, node: Any, config: ReprintConfig) -> str:
        terminator = config.line_terminator
        if terminator is None:
            loc = getattr(node, "loc", None)
            original = loc.lines if loc is not None else None
            terminator = (original.terminator if original is not None else None) or "\n"
        return lines.to_string(
            tab_width=config.effective_tab_width,
            use_tabs=config.use_tabs,
            reuse_whitespace=config.reuse_whitespace,
            line_terminator=terminator,
        )

    @staticmethod
    def _record(code: str) -> None:
        accumulator = get_print_accumulator()
        if accumulator is not None:
            accumulator.record_print(len(code))


def reprint(node: Any, config: ReprintConfig | None = None, **overrides: Any) -> PrintResult:
    """Print ``node`` reusing original text (see ``Printer.print``)."""
    return Printer(config, **overrides).print(node)


def pretty_print(node: Any, config: ReprintConfig | None = None, **overrides: Any) -> PrintResult:
    """Print ``node`` from scratch (see ``Printer.print_generically``)."""
    return Printer(config, **overrides).print_generically(node)


__all__ = [
    "GenericPrinter",
    "PrintResult",
    "Printer",
    "format_number",
    "pretty_print",
    "quote_string",
    "raw_denotes_value",
    "reprint",
]
