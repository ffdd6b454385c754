"""
jsreprint: lossless JavaScript reprinting for Python

Parse JavaScript into a typed, mutable ESTree-shaped tree, edit the tree,
and print it back. Every part of the output the edit did not touch is
copied verbatim from the original source: indentation, comments, quotes,
parentheses and blank lines survive. Only the edited nodes are printed
from scratch, and a source map can be produced alongside the code.

Quick Start:
    >>> from jsreprint import parse, reprint, Literal
    >>> tree = parse("const x = 1 + 2; // sum")
    >>> tree.program.body[0].declarations[0].init.right = Literal(value=3)
    >>> reprint(tree).code
    'const x = 1 + 3; // sum'

    >>> # Pretty-print from scratch instead
    >>> from jsreprint import pretty_print
    >>> pretty_print(tree).code
    'const x = 1 + 3; // sum'

Configuration:
    >>> from jsreprint import ReprintConfig, config_context
    >>> with config_context(ReprintConfig(quote="single", tab_width=2)):
    ...     code = reprint(tree).code

Source Maps:
    >>> tree = parse(source, source_file_name="in.js")
    >>> result = reprint(tree, source_map_name="out.js")
    >>> result.map["sources"]
    ['in.js']

Installation:
    pip install jsreprint
"""

from jsreprint.config import (
    ReprintConfig,
    config_context,
    get_config,
    reset_config,
    set_config,
)
from jsreprint.differ import Reprint, find_reprints
from jsreprint.errors import (
    ConfigurationError,
    LocationIntegrityError,
    ParseError,
    ReprintError,
)
from jsreprint.lines import EMPTY_LINES, Lines, concat, from_string
from jsreprint.location import Position, SourceLocation
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
    Comment,
    ConditionalExpression,
    ContinueStatement,
    DebuggerStatement,
    Declaration,
    DoWhileStatement,
    EmptyStatement,
    ExportAllDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExportSpecifier,
    Expression,
    ExpressionStatement,
    File,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    Function,
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
    Pattern,
    Printable,
    Program,
    Property,
    RestElement,
    ReturnStatement,
    SequenceExpression,
    SpreadElement,
    Statement,
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
from jsreprint.original import get_original, mark_as_new
from jsreprint.parser import parse
from jsreprint.patcher import Patcher, get_reprinter
from jsreprint.path import PathCursor
from jsreprint.printer import Printer, PrintResult, pretty_print, reprint
from jsreprint.profiling import PrintAccumulator, profiled_print
from jsreprint.serialization import from_dict, from_json, to_dict, to_json

__version__ = "0.1.0"

__all__ = [
    "EMPTY_LINES",
    "ArrayExpression",
    "ArrayPattern",
    "ArrowFunctionExpression",
    "AssignmentExpression",
    "AssignmentPattern",
    "AwaitExpression",
    "BinaryExpression",
    "Block",
    "BlockStatement",
    "BreakStatement",
    "CallExpression",
    "CatchClause",
    "ClassBody",
    "ClassDeclaration",
    "ClassExpression",
    "Comment",
    "ConditionalExpression",
    "ConfigurationError",
    "ContinueStatement",
    "DebuggerStatement",
    "Declaration",
    "DoWhileStatement",
    "EmptyStatement",
    "ExportAllDeclaration",
    "ExportDefaultDeclaration",
    "ExportNamedDeclaration",
    "ExportSpecifier",
    "Expression",
    "ExpressionStatement",
    "File",
    "ForInStatement",
    "ForOfStatement",
    "ForStatement",
    "Function",
    "FunctionDeclaration",
    "FunctionExpression",
    "Identifier",
    "IfStatement",
    "Import",
    "ImportDeclaration",
    "ImportDefaultSpecifier",
    "ImportNamespaceSpecifier",
    "ImportSpecifier",
    "JSXAttribute",
    "JSXClosingElement",
    "JSXElement",
    "JSXEmptyExpression",
    "JSXExpressionContainer",
    "JSXIdentifier",
    "JSXMemberExpression",
    "JSXNamespacedName",
    "JSXOpeningElement",
    "JSXSpreadAttribute",
    "JSXText",
    "LabeledStatement",
    "Line",
    "Lines",
    "Literal",
    "LocationIntegrityError",
    "LogicalExpression",
    "MemberExpression",
    "MetaProperty",
    "MethodDefinition",
    "NewExpression",
    "Node",
    "ObjectExpression",
    "ObjectPattern",
    "ParseError",
    "PathCursor",
    "Patcher",
    "Pattern",
    "Position",
    "PrintAccumulator",
    "PrintResult",
    "Printable",
    "Printer",
    "Program",
    "Property",
    "Reprint",
    "ReprintConfig",
    "ReprintError",
    "RestElement",
    "ReturnStatement",
    "SequenceExpression",
    "SourceLocation",
    "SpreadElement",
    "Statement",
    "Super",
    "SwitchCase",
    "SwitchStatement",
    "TaggedTemplateExpression",
    "TemplateElement",
    "TemplateLiteral",
    "ThisExpression",
    "ThrowStatement",
    "TryStatement",
    "UnaryExpression",
    "UpdateExpression",
    "VariableDeclaration",
    "VariableDeclarator",
    "WhileStatement",
    "WithStatement",
    "YieldExpression",
    "__version__",
    "concat",
    "config_context",
    "find_reprints",
    "from_dict",
    "from_json",
    "from_string",
    "get_config",
    "get_original",
    "get_reprinter",
    "mark_as_new",
    "parse",
    "pretty_print",
    "profiled_print",
    "reprint",
    "reset_config",
    "set_config",
    "to_dict",
    "to_json",
]
