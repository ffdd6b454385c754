"""Typed ESTree node classes.

Every syntactic construct is a dataclass; its ``type`` tag is the class
name. Supertype relationships ("every FunctionDeclaration is a Statement")
are ordinary Python inheritance, so ``isinstance`` answers the capability
questions the differ and the path cursor ask (see ``schema.is_kind``).

Field conventions:
    - Python names are snake_case; fields whose ESTree spelling differs
      declare it in ``metadata["estree"]`` (``super_class`` <-> ``superClass``,
      ``is_async`` <-> ``async``).
    - ``loc`` and ``range`` are hidden: they never take part in structural
      comparison or generic traversal.
    - ``comments`` is hidden from generic traversal but compared by the
      differ.
    - Fields with a default are optional; absent and default compare equal.

Nodes are mutable so callers can edit a parsed copy in place, and compare
by identity (``eq=False``) since two structurally equal subtrees at
different places are different nodes.

Example:
    >>> lit = Literal(value=3)
    >>> lit.type
    'Literal'
    >>> isinstance(lit, Expression)
    True

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsreprint.location import SourceLocation


def _estree(name: str, **kwargs: Any) -> Any:
    return field(metadata={"estree": name}, **kwargs)


def _hidden() -> Any:
    return field(default=None, repr=False, metadata={"hidden": True})


def _nodes() -> Any:
    return field(default_factory=list)


# =============================================================================
# Bases
# =============================================================================


@dataclass(eq=False, kw_only=True)
class Printable:
    """Anything that can occupy a location in source text."""

    _abstract = True

    loc: SourceLocation | None = _hidden()
    range: tuple[int, int] | None = _hidden()

    @property
    def type(self) -> str:
        return type(self).__name__


@dataclass(eq=False, kw_only=True)
class Node(Printable):
    _abstract = True

    comments: list[Comment] = field(
        default_factory=list, repr=False, metadata={"hidden": True, "diffed": True}
    )


@dataclass(eq=False, kw_only=True)
class Statement(Node):
    _abstract = True


@dataclass(eq=False, kw_only=True)
class Expression(Node):
    _abstract = True


@dataclass(eq=False, kw_only=True)
class Pattern(Node):
    _abstract = True


@dataclass(eq=False, kw_only=True)
class Declaration(Statement):
    _abstract = True


@dataclass(eq=False, kw_only=True)
class Function(Node):
    _abstract = True

    id: Identifier | None = None
    params: list[Pattern] = _nodes()
    body: BlockStatement | Expression | None = None
    generator: bool = False
    is_async: bool = _estree("async", default=False)
    expression: bool = False


# =============================================================================
# Comments
# =============================================================================


@dataclass(eq=False, kw_only=True)
class Comment(Printable):
    """A comment attached to a node.

    ``leading``/``trailing`` say on which side of the owning node the
    comment appears; both False means dangling (inside an empty node).
    """

    _abstract = True

    value: str = ""
    leading: bool = False
    trailing: bool = False


@dataclass(eq=False, kw_only=True)
class Line(Comment):
    pass


@dataclass(eq=False, kw_only=True)
class Block(Comment):
    pass


# =============================================================================
# Programs
# =============================================================================


@dataclass(eq=False, kw_only=True)
class File(Node):
    """Root wrapper produced by ``parse``; its loc spans the whole buffer."""

    program: Program
    name: str | None = None
    tokens: list[Any] | None = _hidden()


@dataclass(eq=False, kw_only=True)
class Program(Node):
    body: list[Statement] = _nodes()
    source_type: str = _estree("sourceType", default="script")


# =============================================================================
# Identifiers and literals
# =============================================================================


@dataclass(eq=False, kw_only=True)
class Identifier(Expression, Pattern):
    name: str


@dataclass(eq=False, kw_only=True)
class Literal(Expression):
    """String, number, boolean, null or regular expression literal.

    For regular expressions ``value`` is None and ``regex`` holds
    ``{"pattern": ..., "flags": ...}``.
    """

    value: str | bool | int | float | None = None
    raw: str | None = None
    regex: dict[str, str] | None = None


# =============================================================================
# Statements
# =============================================================================


@dataclass(eq=False, kw_only=True)
class ExpressionStatement(Statement):
    expression: Expression
    directive: str | None = None


@dataclass(eq=False, kw_only=True)
class BlockStatement(Statement):
    body: list[Statement] = _nodes()


@dataclass(eq=False, kw_only=True)
class EmptyStatement(Statement):
    pass


@dataclass(eq=False, kw_only=True)
class DebuggerStatement(Statement):
    pass


@dataclass(eq=False, kw_only=True)
class WithStatement(Statement):
    object: Expression
    body: Statement


@dataclass(eq=False, kw_only=True)
class ReturnStatement(Statement):
    argument: Expression | None = None


@dataclass(eq=False, kw_only=True)
class LabeledStatement(Statement):
    label: Identifier
    body: Statement


@dataclass(eq=False, kw_only=True)
class BreakStatement(Statement):
    label: Identifier | None = None


@dataclass(eq=False, kw_only=True)
class ContinueStatement(Statement):
    label: Identifier | None = None


@dataclass(eq=False, kw_only=True)
class IfStatement(Statement):
    test: Expression
    consequent: Statement
    alternate: Statement | None = None


@dataclass(eq=False, kw_only=True)
class SwitchStatement(Statement):
    discriminant: Expression
    cases: list[SwitchCase] = _nodes()


@dataclass(eq=False, kw_only=True)
class SwitchCase(Node):
    test: Expression | None = None
    consequent: list[Statement] = _nodes()


@dataclass(eq=False, kw_only=True)
class ThrowStatement(Statement):
    argument: Expression


@dataclass(eq=False, kw_only=True)
class TryStatement(Statement):
    block: BlockStatement
    handler: CatchClause | None = None
    finalizer: BlockStatement | None = None


@dataclass(eq=False, kw_only=True)
class CatchClause(Node):
    param: Pattern | None = None
    body: BlockStatement


@dataclass(eq=False, kw_only=True)
class WhileStatement(Statement):
    test: Expression
    body: Statement


@dataclass(eq=False, kw_only=True)
class DoWhileStatement(Statement):
    body: Statement
    test: Expression


@dataclass(eq=False, kw_only=True)
class ForStatement(Statement):
    init: VariableDeclaration | Expression | None = None
    test: Expression | None = None
    update: Expression | None = None
    body: Statement


@dataclass(eq=False, kw_only=True)
class ForInStatement(Statement):
    left: VariableDeclaration | Pattern
    right: Expression
    body: Statement
    each: bool = False


@dataclass(eq=False, kw_only=True)
class ForOfStatement(Statement):
    left: VariableDeclaration | Pattern
    right: Expression
    body: Statement


# =============================================================================
# Declarations
# =============================================================================


@dataclass(eq=False, kw_only=True)
class FunctionDeclaration(Function, Declaration):
    pass


@dataclass(eq=False, kw_only=True)
class VariableDeclaration(Declaration):
    declarations: list[VariableDeclarator] = _nodes()
    kind: str = "var"


@dataclass(eq=False, kw_only=True)
class VariableDeclarator(Node):
    id: Pattern
    init: Expression | None = None


@dataclass(eq=False, kw_only=True)
class ClassDeclaration(Declaration):
    id: Identifier | None = None
    super_class: Expression | None = _estree("superClass", default=None)
    body: ClassBody


@dataclass(eq=False, kw_only=True)
class ClassBody(Node):
    body: list[MethodDefinition] = _nodes()


@dataclass(eq=False, kw_only=True)
class MethodDefinition(Node):
    key: Expression
    value: FunctionExpression
    kind: str = "method"
    computed: bool = False
    static: bool = False


# =============================================================================
# Expressions
# =============================================================================


@dataclass(eq=False, kw_only=True)
class ThisExpression(Expression):
    pass


@dataclass(eq=False, kw_only=True)
class Super(Node):
    pass


@dataclass(eq=False, kw_only=True)
class Import(Expression):
    pass


@dataclass(eq=False, kw_only=True)
class ArrayExpression(Expression):
    elements: list[Expression | SpreadElement | None] = _nodes()


@dataclass(eq=False, kw_only=True)
class ObjectExpression(Expression):
    properties: list[Property | SpreadElement] = _nodes()


@dataclass(eq=False, kw_only=True)
class Property(Node):
    key: Expression
    value: Expression | Pattern
    kind: str = "init"
    computed: bool = False
    method: bool = False
    shorthand: bool = False


@dataclass(eq=False, kw_only=True)
class FunctionExpression(Function, Expression):
    pass


@dataclass(eq=False, kw_only=True)
class ArrowFunctionExpression(Function, Expression):
    pass


@dataclass(eq=False, kw_only=True)
class ClassExpression(Expression):
    id: Identifier | None = None
    super_class: Expression | None = _estree("superClass", default=None)
    body: ClassBody


@dataclass(eq=False, kw_only=True)
class TemplateLiteral(Expression):
    quasis: list[TemplateElement] = _nodes()
    expressions: list[Expression] = _nodes()


@dataclass(eq=False, kw_only=True)
class TemplateElement(Node):
    """One static chunk of a template literal.

    ``value`` holds ``{"raw": ..., "cooked": ...}``.
    """

    value: dict[str, str | None]
    tail: bool = False


@dataclass(eq=False, kw_only=True)
class TaggedTemplateExpression(Expression):
    tag: Expression
    quasi: TemplateLiteral


@dataclass(eq=False, kw_only=True)
class UnaryExpression(Expression):
    operator: str
    argument: Expression
    prefix: bool = True


@dataclass(eq=False, kw_only=True)
class UpdateExpression(Expression):
    operator: str
    argument: Expression
    prefix: bool = False


@dataclass(eq=False, kw_only=True)
class BinaryExpression(Expression):
    operator: str
    left: Expression
    right: Expression


@dataclass(eq=False, kw_only=True)
class LogicalExpression(Expression):
    operator: str
    left: Expression
    right: Expression


@dataclass(eq=False, kw_only=True)
class AssignmentExpression(Expression):
    operator: str = "="
    left: Pattern | Expression
    right: Expression


@dataclass(eq=False, kw_only=True)
class ConditionalExpression(Expression):
    test: Expression
    consequent: Expression
    alternate: Expression


@dataclass(eq=False, kw_only=True)
class CallExpression(Expression):
    callee: Expression | Super | Import
    arguments: list[Expression | SpreadElement] = _nodes()


@dataclass(eq=False, kw_only=True)
class NewExpression(Expression):
    callee: Expression
    arguments: list[Expression | SpreadElement] = _nodes()


@dataclass(eq=False, kw_only=True)
class MemberExpression(Expression, Pattern):
    object: Expression | Super
    property: Expression
    computed: bool = False


@dataclass(eq=False, kw_only=True)
class SequenceExpression(Expression):
    expressions: list[Expression] = _nodes()


@dataclass(eq=False, kw_only=True)
class YieldExpression(Expression):
    argument: Expression | None = None
    delegate: bool = False


@dataclass(eq=False, kw_only=True)
class AwaitExpression(Expression):
    argument: Expression


@dataclass(eq=False, kw_only=True)
class MetaProperty(Expression):
    meta: Identifier
    property: Identifier


@dataclass(eq=False, kw_only=True)
class SpreadElement(Node):
    argument: Expression


# =============================================================================
# Patterns
# =============================================================================


@dataclass(eq=False, kw_only=True)
class ObjectPattern(Pattern):
    properties: list[Property | RestElement] = _nodes()


@dataclass(eq=False, kw_only=True)
class ArrayPattern(Pattern):
    elements: list[Pattern | None] = _nodes()


@dataclass(eq=False, kw_only=True)
class RestElement(Pattern):
    argument: Pattern


@dataclass(eq=False, kw_only=True)
class AssignmentPattern(Pattern):
    left: Pattern
    right: Expression


# =============================================================================
# Modules
# =============================================================================


@dataclass(eq=False, kw_only=True)
class ImportDeclaration(Declaration):
    specifiers: list[Node] = _nodes()
    source: Literal


@dataclass(eq=False, kw_only=True)
class ImportSpecifier(Node):
    local: Identifier
    imported: Identifier


@dataclass(eq=False, kw_only=True)
class ImportDefaultSpecifier(Node):
    local: Identifier


@dataclass(eq=False, kw_only=True)
class ImportNamespaceSpecifier(Node):
    local: Identifier


@dataclass(eq=False, kw_only=True)
class ExportNamedDeclaration(Declaration):
    declaration: Declaration | None = None
    specifiers: list[ExportSpecifier] = _nodes()
    source: Literal | None = None


@dataclass(eq=False, kw_only=True)
class ExportSpecifier(Node):
    local: Identifier
    exported: Identifier


@dataclass(eq=False, kw_only=True)
class ExportDefaultDeclaration(Declaration):
    declaration: Declaration | Expression


@dataclass(eq=False, kw_only=True)
class ExportAllDeclaration(Declaration):
    source: Literal


# =============================================================================
# JSX
# =============================================================================


@dataclass(eq=False, kw_only=True)
class JSXIdentifier(Node):
    name: str


@dataclass(eq=False, kw_only=True)
class JSXNamespacedName(Node):
    namespace: JSXIdentifier
    name: JSXIdentifier


@dataclass(eq=False, kw_only=True)
class JSXMemberExpression(Node):
    object: JSXIdentifier | JSXMemberExpression
    property: JSXIdentifier


@dataclass(eq=False, kw_only=True)
class JSXElement(Expression):
    opening_element: JSXOpeningElement = _estree("openingElement")
    children: list[Node] = _nodes()
    closing_element: JSXClosingElement | None = _estree("closingElement", default=None)


@dataclass(eq=False, kw_only=True)
class JSXOpeningElement(Node):
    name: Node
    attributes: list[Node] = _nodes()
    self_closing: bool = _estree("selfClosing", default=False)


@dataclass(eq=False, kw_only=True)
class JSXClosingElement(Node):
    name: Node


@dataclass(eq=False, kw_only=True)
class JSXAttribute(Node):
    name: JSXIdentifier | JSXNamespacedName
    value: Node | None = None


@dataclass(eq=False, kw_only=True)
class JSXSpreadAttribute(Node):
    argument: Expression


@dataclass(eq=False, kw_only=True)
class JSXExpressionContainer(Expression):
    expression: Expression | JSXEmptyExpression


@dataclass(eq=False, kw_only=True)
class JSXEmptyExpression(Node):
    pass


@dataclass(eq=False, kw_only=True)
class JSXText(Node):
    value: str = ""
    raw: str | None = None


__all__ = [
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
    "Literal",
    "LogicalExpression",
    "MemberExpression",
    "MetaProperty",
    "MethodDefinition",
    "NewExpression",
    "Node",
    "ObjectExpression",
    "ObjectPattern",
    "Pattern",
    "Printable",
    "Program",
    "Property",
    "RestElement",
    "ReturnStatement",
    "SequenceExpression",
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
]
