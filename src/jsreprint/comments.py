"""Comment attachment and comment printing.

The parser reports comments as one flat list. ``attach`` hangs each of them
on the node it belongs to, marking it leading, trailing or dangling:

1. Find the smallest node enclosing the comment, and within it the
   children immediately before and after it (binary search over the
   children sorted by position).
2. A comment with only a preceding node trails it; with only a following
   node it leads it; with neither it dangles inside the enclosing node.
3. A comment between two nodes is a tie. Consecutive ties between the
   same two nodes are resolved together. A comment may trail the preceding
   node when only whitespace without a blank line (plus ``,`` or ``;``)
   separates them, and may lead the following node under the same
   condition minus the separators. When both are possible it trails,
   unless it starts its own line indented deeper than the following node.
   Comments that can do neither lead the following node.

``print_comments`` is the printing counterpart. It wraps the text printed
for a node with its comments, keeping the spacing found in the original.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from jsreprint.errors import LocationIntegrityError
from jsreprint.lines import Lines, concat, is_only_whitespace
from jsreprint.location import Position, compare_pos
from jsreprint.nodes import Block, Comment, Line, Node, Statement
from jsreprint.path import PathCursor
from jsreprint.schema import get_field_names
from jsreprint.util import fix_faulty_locations


@dataclass(slots=True)
class _Placement:
    """Where a comment sits relative to the surrounding nodes."""

    comment: Comment
    preceding: Node | None = None
    enclosing: Node | None = None
    following: Node | None = None


class _Attacher:
    """State of one ``attach`` call.

    Sorted child lists are cached here by node identity, never on the
    nodes themselves.
    """

    def __init__(self, lines: Lines) -> None:
        self.lines = lines
        self._children: dict[int, list[Node]] = {}
        self._ties: list[_Placement] = []

    def sorted_child_nodes(self, node: Any) -> list[Node]:
        cached = self._children.get(id(node))
        if cached is not None:
            return cached
        result: list[Node] = []
        self._collect(node, result, top=True)
        self._children[id(node)] = result
        return result

    def _collect(self, value: Any, result: list[Node], top: bool = False) -> None:
        if value is None:
            return
        if isinstance(value, Node):
            fix_faulty_locations(value, self.lines)
            if not top and value.loc is not None:
                # Children almost always arrive in order, so this insertion
                # is nearly always an append.
                i = len(result) - 1
                while i >= 0:
                    child = result[i]
                    if child.loc is not None and compare_pos(child.loc.end, value.loc.start) <= 0:
                        break
                    i -= 1
                result.insert(i + 1, value)
                return
            for name in get_field_names(value):
                self._collect(getattr(value, name), result)
        elif isinstance(value, list):
            for item in value:
                self._collect(item, result)

    def decorate(self, node: Node, placement: _Placement) -> None:
        comment_loc = placement.comment.loc
        children = self.sorted_child_nodes(node)
        left = 0
        right = len(children)
        while left < right:
            middle = (left + right) // 2
            child = children[middle]
            child_loc = child.loc
            if (
                compare_pos(child_loc.start, comment_loc.start) <= 0
                and compare_pos(comment_loc.end, child_loc.end) <= 0
            ):
                placement.enclosing = child
                placement.preceding = None
                placement.following = None
                self.decorate(child, placement)
                return
            if compare_pos(child_loc.end, comment_loc.start) <= 0:
                placement.preceding = child
                left = middle + 1
                continue
            if compare_pos(comment_loc.end, child_loc.start) <= 0:
                placement.following = child
                right = middle
                continue
            raise LocationIntegrityError(
                "comment location overlaps with node location",
                comment_loc.start.line,
                comment_loc.start.column,
            )

    def place(self, placement: _Placement) -> None:
        preceding = placement.preceding
        following = placement.following
        if preceding is not None and following is not None:
            if self._ties:
                last = self._ties[-1]
                if last.following is not following:
                    self.break_ties()
            self._ties.append(placement)
        elif preceding is not None:
            self.break_ties()
            _add_comment(preceding, placement.comment, leading=False, trailing=True)
        elif following is not None:
            self.break_ties()
            _add_comment(following, placement.comment, leading=True, trailing=False)
        elif placement.enclosing is not None:
            self.break_ties()
            _add_comment(placement.enclosing, placement.comment, leading=False, trailing=False)
        else:
            raise LocationIntegrityError("tree contains no nodes to attach comments to")

    def _hugs(self, start: Position, end: Position, separators: str = "") -> bool:
        """Whether only whitespace without a blank line lies between two positions.

        Characters in ``separators`` are ignored as well.
        """
        gap = self.lines.slice_string(start, end)
        for separator in separators:
            gap = gap.replace(separator, "")
        return is_only_whitespace(gap) and gap.count("\n") < 2

    def break_ties(self) -> None:
        ties = self._ties
        if not ties:
            return
        preceding = ties[0].preceding
        following = ties[0].following
        count = len(ties)

        can_trail = 0
        gap_start = preceding.loc.end
        while can_trail < count:
            comment = ties[can_trail].comment
            if not self._hugs(gap_start, comment.loc.start, ",;"):
                break
            gap_start = comment.loc.end
            can_trail += 1

        can_lead_from = count
        gap_end = following.loc.start
        while can_lead_from > 0:
            comment = ties[can_lead_from - 1].comment
            if not self._hugs(comment.loc.end, gap_end):
                break
            gap_end = comment.loc.start
            can_lead_from -= 1

        following_indent = self.lines.get_indent_at(following.loc.start.line)
        first_leading = 0
        while first_leading < can_trail:
            comment = ties[first_leading].comment
            if (
                first_leading >= can_lead_from
                and self.lines.is_preceded_only_by_whitespace(comment.loc.start)
                and self.lines.get_indent_at(comment.loc.start.line) > following_indent
            ):
                break
            first_leading += 1

        for i, placement in enumerate(ties):
            if i < first_leading:
                _add_comment(preceding, placement.comment, leading=False, trailing=True)
            else:
                _add_comment(following, placement.comment, leading=True, trailing=False)
        ties.clear()


def _add_comment(node: Node, comment: Comment, *, leading: bool, trailing: bool) -> None:
    comment.leading = leading
    comment.trailing = trailing
    node.comments.append(comment)


def attach(comments: Sequence[Comment], ast: Node, lines: Lines) -> None:
    """Attach ``comments`` to the nodes of ``ast`` in place.

    Args:
        comments: Comments in source order, each with a location
        ast: Root node (Program, or File for an empty program)
        lines: Buffer the locations refer to

    Raises:
        LocationIntegrityError: If a comment overlaps a node
    """
    attacher = _Attacher(lines)
    for comment in comments:
        if comment.loc is None:
            continue
        placement = _Placement(comment)
        attacher.decorate(ast, placement)
        attacher.place(placement)
    attacher.break_ties()


# =============================================================================
# Printing
# =============================================================================


def _print_leading_comment(comment_path: PathCursor, print_fn: Callable[[PathCursor], Lines]) -> Lines:
    comment = comment_path.get_value()
    loc = comment.loc
    lines = loc.lines if loc is not None else None
    parts: list[Lines | str] = [print_fn(comment_path)]

    if comment.trailing:
        # A trailing comment moved in front of its node; drop its old spacing.
        parts.append("\n")
    elif isinstance(lines, Lines):
        trailing_space = lines.slice(loc.end, lines.skip_spaces(loc.end) or lines.last_pos())
        if len(trailing_space) == 1:
            parts.append(trailing_space)
        else:
            parts.append("\n" * (len(trailing_space) - 1))
    else:
        parts.append("\n")

    return concat(parts)


def _print_trailing_comment(comment_path: PathCursor, print_fn: Callable[[PathCursor], Lines]) -> Lines:
    comment = comment_path.get_value()
    loc = comment.loc
    lines = loc.lines if loc is not None else None
    parts: list[Lines | str] = []

    if isinstance(lines, Lines):
        from_pos = lines.skip_spaces(loc.start, backward=True) or lines.first_pos()
        leading_space = lines.slice(from_pos, loc.start)
        if len(leading_space) == 1:
            parts.append(leading_space)
        else:
            parts.append("\n" * (len(leading_space) - 1))

    parts.append(print_fn(comment_path))
    return concat(parts)


def print_comments(path: PathCursor, print_fn: Callable[[PathCursor], Lines]) -> Lines:
    """Print the node at ``path`` surrounded by its comments.

    Leading comments keep the spacing that followed them in the original
    when it had no line break, and otherwise the same number of line
    breaks. Trailing comments get the symmetrical treatment. A trailing
    ``//`` comment on an expression is printed before it, since a line
    comment after an expression would swallow whatever follows.
    """
    value = path.get_value()
    inner = print_fn(path)
    if not isinstance(value, Node) or not value.comments:
        return inner

    leading_parts: list[Lines] = []
    trailing_parts: list[Lines] = [inner]

    def visit(comment_path: PathCursor, _index: int) -> None:
        comment = comment_path.get_value()
        if comment.leading or (
            comment.trailing and not (isinstance(value, Statement) or isinstance(comment, Block))
        ):
            leading_parts.append(_print_leading_comment(comment_path, print_fn))
        elif comment.trailing:
            trailing_parts.append(_print_trailing_comment(comment_path, print_fn))

    path.each(visit, "comments")
    return concat([*leading_parts, *trailing_parts])


__all__ = ["attach", "print_comments"]
