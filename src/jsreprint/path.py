"""PathCursor: a stack-based view of a node and its ancestors.

A cursor is a single list alternating values and the names that lead to
them::

    [root, "body", [stmt, ...], 0, stmt, "expression", expr]

The current value is the top of the stack and its name is the element
below it. Descending pushes a (name, value) pair and ascending pops it,
always within the scope of one ``call``/``each``/``map`` invocation, so a
callback never sees a stale cursor.

Beyond navigation the cursor answers the grammatical questions the
printer and the differ need: whether a node must be parenthesized in its
current position (``needs_parens``), whether it already is in the original
text (``has_parens``), and whether it would be the first token of a
statement (``first_in_statement``).

Thread Safety:
    A cursor is mutable and must not be shared between threads. Use
    ``copy()`` to branch.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from jsreprint.location import compare_pos
from jsreprint.nodes import (
    ArrowFunctionExpression,
    AssignmentExpression,
    AwaitExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ClassDeclaration,
    ClassExpression,
    ConditionalExpression,
    ExportDefaultDeclaration,
    ExpressionStatement,
    ForStatement,
    FunctionExpression,
    Identifier,
    Literal,
    LogicalExpression,
    MemberExpression,
    NewExpression,
    Node,
    ObjectExpression,
    ObjectPattern,
    ReturnStatement,
    SequenceExpression,
    SpreadElement,
    Statement,
    TaggedTemplateExpression,
    UnaryExpression,
    UpdateExpression,
    YieldExpression,
)
from jsreprint.schema import some_field
from jsreprint.tokens import Token

T = TypeVar("T")

# Binary operator precedence, lowest first.
PRECEDENCE: dict[str, int] = {
    op: tier
    for tier, ops in enumerate(
        [
            ["??"],
            ["||"],
            ["&&"],
            ["|"],
            ["^"],
            ["&"],
            ["==", "===", "!=", "!=="],
            ["<", ">", "<=", ">=", "in", "instanceof"],
            [">>", "<<", ">>>"],
            ["+", "-"],
            ["*", "/", "%"],
            ["**"],
        ]
    )
    for op in ops
}

# Expressions that must be wrapped when used as a class heritage.
_SUPER_CLASS_NEEDS_PARENS = (
    ArrowFunctionExpression,
    AssignmentExpression,
    AwaitExpression,
    BinaryExpression,
    ConditionalExpression,
    LogicalExpression,
    NewExpression,
    ObjectExpression,
    SequenceExpression,
    TaggedTemplateExpression,
    UnaryExpression,
    UpdateExpression,
    YieldExpression,
)


def _child(value: Any, name: str | int) -> Any:
    if isinstance(name, int):
        return value[name]
    if isinstance(value, dict):
        return value.get(name)
    return getattr(value, name)


def _is_binary(node: Any) -> bool:
    return isinstance(node, BinaryExpression | LogicalExpression)


def _contains_call_expression(value: Any) -> bool:
    if isinstance(value, CallExpression):
        return True
    if isinstance(value, list):
        return any(_contains_call_expression(item) for item in value)
    if isinstance(value, Node):
        return some_field(value, lambda _name, child: _contains_call_expression(child))
    return False


class PathCursor:
    """Ancestor-aware cursor over a tree.

    Example:
        >>> path = PathCursor.from_node(program)
        >>> path.call(lambda p: p.get_value().type, "body", 0)
        'ExpressionStatement'

    """

    __slots__ = ("stack",)

    def __init__(self, value: Any) -> None:
        self.stack: list[Any] = [value]

    @classmethod
    def from_node(cls, obj: Any) -> PathCursor:
        """Cursor rooted at ``obj``; a PathCursor argument is copied."""
        if isinstance(obj, PathCursor):
            return obj.copy()
        return cls(obj)

    def copy(self) -> PathCursor:
        clone = PathCursor.__new__(PathCursor)
        clone.stack = list(self.stack)
        return clone

    def __repr__(self) -> str:
        value = self.get_value()
        label = getattr(value, "type", type(value).__name__)
        return f"PathCursor({label} at depth {len(self.stack) // 2})"

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def get_name(self) -> str | int | None:
        """Name (field or index) of the current value in its container."""
        if len(self.stack) > 1:
            return self.stack[-2]
        return None

    def get_value(self) -> Any:
        return self.stack[-1]

    def value_is_duplicate(self) -> bool:
        """True if the current value also occurs further up the stack."""
        value = self.stack[-1]
        return any(other is value for other in self.stack[-3::-2])

    def _get_node_helper(self, count: int) -> Node | None:
        for i in range(len(self.stack) - 1, -1, -2):
            value = self.stack[i]
            if isinstance(value, Node):
                count -= 1
                if count < 0:
                    return value
        return None

    def get_node(self, count: int = 0) -> Node | None:
        """The ``count``-th enclosing typed node, starting from the current one."""
        return self._get_node_helper(count)

    def get_parent_node(self, count: int = 0) -> Node | None:
        return self._get_node_helper(count + 1)

    def get_root_value(self) -> Any:
        if len(self.stack) % 2 == 0:
            return self.stack[1]
        return self.stack[0]

    def call(self, callback: Callable[[PathCursor], T], *names: str | int) -> T:
        """Descend through ``names``, run ``callback``, then restore the stack."""
        stack = self.stack
        original_length = len(stack)
        value = stack[-1]
        for name in names:
            value = _child(value, name)
            stack.append(name)
            stack.append(value)
        try:
            return callback(self)
        finally:
            del stack[original_length:]

    def each(self, callback: Callable[[PathCursor, int], Any], *names: str | int) -> None:
        """Descend through ``names`` to a list and run ``callback`` per element."""
        stack = self.stack
        original_length = len(stack)
        value = stack[-1]
        for name in names:
            value = _child(value, name)
            stack.append(name)
            stack.append(value)
        try:
            for i, item in enumerate(value or ()):
                stack.append(i)
                stack.append(item)
                try:
                    callback(self, i)
                finally:
                    del stack[-2:]
        finally:
            del stack[original_length:]

    def map(self, callback: Callable[[PathCursor, int], T], *names: str | int) -> list[T]:
        """Like ``each`` but collect the callback results."""
        results: list[T] = []
        self.each(lambda path, i: results.append(callback(path, i)), *names)
        return results

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def get_prev_token(self, node: Node | None = None) -> Token | None:
        """Token just before ``node``, if it lies within the root node."""
        node = node or self.get_node()
        loc = node.loc if node is not None else None
        tokens = loc.tokens if loc is not None else None
        if tokens and loc.start.token is not None and loc.start.token > 0:
            token = tokens[loc.start.token - 1]
            root_loc = getattr(self.get_root_value(), "loc", None)
            if root_loc is not None and compare_pos(root_loc.start, token.loc.start) <= 0:
                return token
        return None

    def get_next_token(self, node: Node | None = None) -> Token | None:
        """Token just after ``node``, if it lies within the root node."""
        node = node or self.get_node()
        loc = node.loc if node is not None else None
        tokens = loc.tokens if loc is not None else None
        if tokens and loc.end.token is not None and loc.end.token < len(tokens):
            token = tokens[loc.end.token]
            root_loc = getattr(self.get_root_value(), "loc", None)
            if root_loc is not None and compare_pos(token.loc.end, root_loc.end) <= 0:
                return token
        return None

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def has_parens(self) -> bool:
        """True if the current node is already parenthesized in the original text."""
        node = self.get_node()
        prev_token = self.get_prev_token(node)
        if prev_token is None:
            return False
        next_token = self.get_next_token(node)
        if next_token is None:
            return False
        if prev_token.value == "(":
            if next_token.value == ")":
                return True
            # `(function () {}).call(x)`: only the opening paren is adjacent.
            if (
                not self.can_be_first_in_statement()
                and self.first_in_statement()
                and not self.needs_parens(True)
            ):
                return True
        return False

    def needs_parens(self, assume_expression_context: bool = False) -> bool:
        """True if printing the current node as-is in its position would
        change how the surrounding code parses."""
        node = self.get_node()
        if node is None or self.get_value() is not node:
            return False

        if isinstance(node, AssignmentExpression) and isinstance(node.left, ObjectPattern):
            return True

        if isinstance(node, Statement) or isinstance(node, Identifier):
            return False

        parent = self.get_parent_node()
        if parent is None:
            return False
        name = self.get_name()

        if (
            isinstance(parent, ClassDeclaration | ClassExpression)
            and parent.super_class is node
            and isinstance(node, _SUPER_CLASS_NEEDS_PARENS)
        ):
            return True

        match node:
            case UnaryExpression() | SpreadElement():
                return (
                    isinstance(parent, MemberExpression)
                    and name == "object"
                    and parent.object is node
                )

            case BinaryExpression() | LogicalExpression():
                match parent:
                    case CallExpression():
                        return name == "callee" and parent.callee is node
                    case UnaryExpression() | SpreadElement():
                        return True
                    case MemberExpression():
                        return name == "object" and parent.object is node
                    case BinaryExpression() | LogicalExpression():
                        parent_precedence = PRECEDENCE.get(parent.operator, -1)
                        node_precedence = PRECEDENCE.get(node.operator, -1)
                        if parent_precedence > node_precedence:
                            return True
                        if parent_precedence == node_precedence and name == "right":
                            return True
                        # `a ?? b || c` is a syntax error without parens.
                        operators = {parent.operator, node.operator}
                        if "??" in operators and operators & {"||", "&&"}:
                            return True
                    case _:
                        return False

            case SequenceExpression():
                match parent:
                    case ReturnStatement() | ForStatement():
                        return False
                    case ExpressionStatement():
                        return name != "expression"
                    case _:
                        return True

            case Literal():
                return (
                    isinstance(parent, MemberExpression)
                    and isinstance(node.value, int | float)
                    and not isinstance(node.value, bool)
                    and name == "object"
                    and parent.object is node
                )

            case YieldExpression() | AwaitExpression() | AssignmentExpression() | ConditionalExpression():
                match parent:
                    case UnaryExpression() | SpreadElement() | BinaryExpression() | LogicalExpression():
                        return True
                    case CallExpression() | NewExpression():
                        return name == "callee" and parent.callee is node
                    case ConditionalExpression():
                        return name == "test" and parent.test is node
                    case MemberExpression():
                        return name == "object" and parent.object is node
                    case _:
                        return False

            case ArrowFunctionExpression():
                if isinstance(parent, CallExpression) and name == "callee" and parent.callee is node:
                    return True
                if isinstance(parent, MemberExpression) and name == "object" and parent.object is node:
                    return True
                return _is_binary(parent)

            case ObjectExpression():
                if (
                    isinstance(parent, ArrowFunctionExpression)
                    and name == "body"
                    and parent.body is node
                ):
                    return True

            case CallExpression():
                if (
                    name == "declaration"
                    and isinstance(parent, ExportDefaultDeclaration)
                    and isinstance(node.callee, FunctionExpression)
                ):
                    return True

        if isinstance(parent, NewExpression) and name == "callee" and parent.callee is node:
            return _contains_call_expression(node)

        if (
            not assume_expression_context
            and not self.can_be_first_in_statement()
            and self.first_in_statement()
        ):
            return True

        return False

    def can_be_first_in_statement(self) -> bool:
        """False for nodes that would be misread as a declaration or block
        when they open a statement."""
        node = self.get_node()
        return not isinstance(node, FunctionExpression | ObjectExpression | ClassExpression)

    def first_in_statement(self) -> bool:
        """True if the current node's first token would also be the first
        token of the enclosing statement."""
        stack = self.stack
        parent_name: Any = None
        parent: Any = None
        child_name: Any = None
        child: Any = None

        for i in range(len(stack) - 1, -1, -2):
            if isinstance(stack[i], Node):
                child_name = parent_name
                child = parent
                parent_name = stack[i - 1] if i > 0 else None
                parent = stack[i]

            if parent is None or child is None:
                continue

            if isinstance(parent, BlockStatement) and parent_name == "body" and child_name == 0:
                return True
            if isinstance(parent, ExpressionStatement) and child_name == "expression":
                return True
            if isinstance(parent, AssignmentExpression) and child_name == "left":
                return True
            if isinstance(parent, ArrowFunctionExpression) and child_name == "body":
                return True
            if (
                isinstance(parent, SequenceExpression)
                and i + 1 < len(stack)
                and stack[i + 1] == "expressions"
                and child_name == 0
            ):
                continue
            if isinstance(parent, CallExpression) and child_name == "callee":
                continue
            if isinstance(parent, MemberExpression) and child_name == "object":
                continue
            if isinstance(parent, ConditionalExpression) and child_name == "test":
                continue
            if _is_binary(parent) and child_name == "left":
                continue
            if isinstance(parent, UnaryExpression) and not parent.prefix and child_name == "argument":
                continue
            return False

        return True


__all__ = ["PRECEDENCE", "PathCursor"]
