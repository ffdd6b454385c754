"""Location helpers shared by the parser, the comment attacher and the printer.

The parser's locations are close to right but not always exactly right:
some nodes report spans that include delimiters they do not own (the
backticks of a template literal, the ``;`` after a ``for`` clause), and the
location of a method's inner function covers only part of its text.
``fix_faulty_locations`` repairs them in place before anything relies on
them.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from jsreprint.lines import Lines
from jsreprint.location import Position, SourceLocation, compare_pos
from jsreprint.nodes import (
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    File,
    ForStatement,
    FunctionExpression,
    MethodDefinition,
    Printable,
    Property,
    TemplateLiteral,
)


def expand_loc(loc: SourceLocation, other: SourceLocation | None) -> SourceLocation:
    """Smallest location covering both ``loc`` and ``other``."""
    if other is None:
        return loc
    start = other.start if compare_pos(other.start, loc.start) < 0 else loc.start
    end = other.end if compare_pos(loc.end, other.end) < 0 else loc.end
    if start is loc.start and end is loc.end:
        return loc
    return replace(loc, start=start, end=end)


def get_true_loc(
    node: Printable,
    lines: Lines,
    comments: Iterable[Printable] | None = None,
) -> SourceLocation | None:
    """Location of ``node`` trimmed of surrounding whitespace and widened to
    cover its comments.

    Args:
        node: Node whose location to compute
        lines: Buffer the location refers to
        comments: Comments to cover (default: the node's own comments)

    Returns:
        The adjusted location, or None if the node has none
    """
    loc = node.loc
    if loc is None:
        return None
    if comments is None:
        comments = getattr(node, "comments", None) or ()

    start = loc.start
    end = loc.end
    if compare_pos(start, end) < 0:
        start = lines.skip_spaces(start) or start
        if compare_pos(start, end) < 0:
            end = lines.skip_spaces(end, backward=True) or end

    result = loc if start == loc.start and end == loc.end else replace(loc, start=start, end=end)
    for comment in comments:
        result = expand_loc(result, comment.loc)
    return result


def _set_end(node: Printable, end: Position) -> None:
    node.loc = replace(node.loc, end=end)


def _set_start(node: Printable, start: Position) -> None:
    node.loc = replace(node.loc, start=start)


def _fix_for_loop_head(node: ForStatement, lines: Lines) -> None:
    for child in (node.init, node.test, node.update):
        loc = child.loc if child is not None else None
        if loc is None:
            continue
        end = loc.end
        while compare_pos(loc.start, end) < 0:
            before = lines.prev_pos(end)
            if before is None or lines.char_at(before) != ";":
                break
            end = before
        if end != loc.end:
            _set_end(child, end)


def _fix_template_literal(node: TemplateLiteral, lines: Lines) -> None:
    quasis = node.quasis
    if not quasis:
        return

    if node.loc is not None:
        if lines.char_at(node.loc.start) == "`":
            after_tick = lines.next_pos(node.loc.start)
            first = quasis[0]
            if after_tick is not None and first.loc is not None and compare_pos(first.loc.start, after_tick) < 0:
                _set_start(first, after_tick)
        closing_tick = lines.prev_pos(node.loc.end)
        if closing_tick is not None and lines.char_at(closing_tick) == "`":
            last = quasis[-1]
            if last.loc is not None and compare_pos(closing_tick, last.loc.end) < 0:
                _set_end(last, closing_tick)

    for i, expression in enumerate(node.expressions):
        if expression.loc is None or i + 1 >= len(quasis):
            continue

        # Step back over `${` in front of the expression.
        brace = lines.skip_spaces(expression.loc.start, backward=True)
        brace = lines.prev_pos(brace) if brace is not None else None
        dollar = lines.prev_pos(brace) if brace is not None else None
        if (
            dollar is not None
            and lines.char_at(brace) == "{"
            and lines.char_at(dollar) == "$"
        ):
            before = quasis[i]
            if before.loc is not None and compare_pos(dollar, before.loc.end) < 0:
                _set_end(before, dollar)

        # And forward over the `}` behind it.
        close = lines.skip_spaces(expression.loc.end)
        if close is not None and lines.char_at(close) == "}":
            after_close = lines.next_pos(close)
            after = quasis[i + 1]
            if after_close is not None and after.loc is not None and compare_pos(after.loc.start, after_close) < 0:
                _set_start(after, after_close)


def fix_faulty_locations(node: Any, lines: Lines) -> None:
    """Repair the parser's locations for ``node`` in place.

    Idempotent, so it is safe to call on a node more than once.
    """
    if not isinstance(node, Printable):
        return
    loc = node.loc

    if loc is not None:
        if loc.start.line < 1 or loc.end.line < 1:
            start = Position(max(loc.start.line, 1), loc.start.column if loc.start.line >= 1 else 0)
            end = Position(max(loc.end.line, 1), loc.end.column if loc.end.line >= 1 else 0)
            node.loc = loc = replace(loc, start=start, end=end)

    if isinstance(node, File):
        node.loc = SourceLocation(
            lines.first_pos(),
            lines.last_pos(),
            lines=loc.lines if loc is not None else None,
            tokens=loc.tokens if loc is not None else None,
            indent=loc.indent if loc is not None else 0,
        )
    elif isinstance(node, ForStatement):
        _fix_for_loop_head(node, lines)
    elif isinstance(node, TemplateLiteral):
        _fix_template_literal(node, lines)
    elif isinstance(node, ExportNamedDeclaration | ExportDefaultDeclaration):
        # An exported declaration is only ever reprinted with its export.
        declaration = node.declaration
        if isinstance(declaration, Printable):
            declaration.loc = None
    elif (isinstance(node, MethodDefinition) and isinstance(node.value, FunctionExpression)) or (
        isinstance(node, Property) and node.method and isinstance(node.value, FunctionExpression)
    ):
        # The function's own location covers only its parameters and body.
        node.value.loc = None
        node.value.id = None


__all__ = ["expand_loc", "fix_faulty_locations", "get_true_loc"]
