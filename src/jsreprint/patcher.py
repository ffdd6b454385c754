"""Patcher: splice freshly printed fragments into original text.

``Patcher`` collects pending replacements against one original ``Lines``
buffer and assembles the result in a single left-to-right pass.
``get_reprinter`` ties it to the differ: it returns a function that prints
a node by patching its original text, or None when the node has to be
printed from scratch.

Splicing never fuses tokens: if an identifier-like character would end up
directly against another one across a splice boundary, a single space is
inserted on that side (``return 1;`` edited to ``return 2;``, never
``return2;``).

"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from jsreprint.config import get_config
from jsreprint.differ import Reprint, find_array_reprints, find_reprints
from jsreprint.errors import LocationIntegrityError
from jsreprint.lines import Lines, concat, from_string
from jsreprint.location import Position, SourceLocation, compare_pos
from jsreprint.nodes import Comment, Node, Printable
from jsreprint.original import get_original
from jsreprint.path import PathCursor
from jsreprint.profiling import get_print_accumulator
from jsreprint.utils.logger import get_logger

logger = get_logger(__name__)

_RISKY_ADJOINING_CHAR_RE = re.compile(r"[0-9a-z_$]", re.IGNORECASE)


class PrintFunction(Protocol):
    """Signature of the printer callback the patcher calls back into."""

    def __call__(
        self,
        path: PathCursor,
        *,
        include_comments: bool = False,
        avoid_root_parens: bool = False,
    ) -> Lines: ...


@dataclass(frozen=True, slots=True)
class _Replacement:
    start: Position
    end: Position
    lines: Lines


def _outermost_first(replacement: _Replacement) -> tuple[int, int, int, int]:
    """Sort key: by start, and among equal starts the widest first."""
    start, end = replacement.start, replacement.end
    return (start.line, start.column, -end.line, -end.column)


class Patcher:
    """Pending replacements against one original buffer.

    Thread Safety:
        Not thread-safe. A patcher lives for one print call.
    """

    __slots__ = ("_replacements", "lines")

    def __init__(self, lines: Lines) -> None:
        self.lines = lines
        self._replacements: list[_Replacement] = []

    def __len__(self) -> int:
        return len(self._replacements)

    def replace(self, loc: SourceLocation, lines: Lines | str) -> None:
        """Schedule ``loc`` to be replaced by ``lines``.

        Raises:
            LocationIntegrityError: If ``loc`` starts after it ends
        """
        if compare_pos(loc.start, loc.end) > 0:
            raise LocationIntegrityError(
                f"replacement starts at {loc.start} after it ends at {loc.end}",
                loc.start.line,
                loc.start.column,
            )
        tab_width = get_config().effective_tab_width
        self._replacements.append(_Replacement(loc.start, loc.end, from_string(lines, tab_width)))

    def get(self, loc: SourceLocation | None = None) -> Lines:
        """Assemble the text of ``loc`` (default: whole buffer) with every
        scheduled replacement applied.

        Replacements nested inside an earlier one are dropped; only the
        outermost of an overlapping group is honored.
        """
        lines = self.lines
        start = loc.start if loc is not None else lines.first_pos()
        end = loc.end if loc is not None else lines.last_pos()

        slice_from = start
        pieces: list[Lines] = []

        def push_slice(from_pos: Position, to_pos: Position) -> None:
            if compare_pos(from_pos, to_pos) > 0:
                raise LocationIntegrityError(
                    f"patch slice from {from_pos} runs backward to {to_pos}",
                    from_pos.line,
                    from_pos.column,
                )
            pieces.append(lines.slice(from_pos, to_pos))

        for replacement in sorted(self._replacements, key=_outermost_first):
            if compare_pos(slice_from, replacement.start) > 0:
                logger.debug("dropping nested replacement at %s", replacement.start)
                continue
            push_slice(slice_from, replacement.start)
            pieces.append(replacement.lines)
            slice_from = replacement.end

        push_slice(slice_from, end)
        return concat(pieces)

    def try_to_reprint_comments(
        self,
        new_node: Printable,
        old_node: Printable,
        print_fn: PrintFunction,
    ) -> bool:
        """Patch only the leading/trailing comments of ``old_node``.

        Returns:
            True if the comment lists matched closely enough to patch (the
            code between them is left untouched); False if the node must be
            printed together with its own comments instead
        """
        new_comments = _surrounding_comments(new_node)
        old_comments = _surrounding_comments(old_node)
        if not new_comments and not old_comments:
            return True

        new_path = PathCursor.from_node(new_node)
        old_path = PathCursor.from_node(old_node)
        new_path.stack += ["comments", new_comments]
        old_path.stack += ["comments", old_comments]

        reprints: list[Reprint] = []
        able = find_array_reprints(new_path, old_path, reprints)
        if able:
            for reprint in reprints:
                old_comment = reprint.old_node
                if old_comment.loc is None:
                    raise LocationIntegrityError("comment to patch has no location")
                self.replace(
                    old_comment.loc,
                    print_fn(reprint.new_path).indent_tail(old_comment.loc.indent),
                )
        return able

    def delete_comments(self, node: Printable) -> None:
        """Schedule removal of every leading/trailing comment of ``node``,
        together with the whitespace separating it from the node."""
        comments = getattr(node, "comments", None)
        if not comments or node.loc is None or node.loc.lines is None:
            return
        lines = node.loc.lines
        for comment in comments:
            if comment.loc is None:
                continue
            if comment.leading:
                end = lines.skip_spaces(comment.loc.end) or lines.last_pos()
                self.replace(SourceLocation(comment.loc.start, end), "")
            elif comment.trailing:
                start = lines.skip_spaces(comment.loc.start, backward=True) or lines.first_pos()
                self.replace(SourceLocation(start, comment.loc.end), "")


def _surrounding_comments(node: Printable) -> list[Comment]:
    comments = getattr(node, "comments", None) or []
    return [c for c in comments if c.leading or c.trailing]


def needs_leading_space(old_lines: Lines, old_loc: SourceLocation, new_lines: Lines) -> bool:
    """True if ``new_lines`` would fuse with the character before ``old_loc``."""
    before = old_lines.prev_pos(old_loc.start)
    char_before = old_lines.char_at(before) if before is not None else ""
    new_first = new_lines.char_at(new_lines.first_pos())
    return bool(
        char_before
        and _RISKY_ADJOINING_CHAR_RE.match(char_before)
        and new_first
        and _RISKY_ADJOINING_CHAR_RE.match(new_first)
    )


def needs_trailing_space(old_lines: Lines, old_loc: SourceLocation, new_lines: Lines) -> bool:
    """True if ``new_lines`` would fuse with the character after ``old_loc``."""
    char_after = old_lines.char_at(old_loc.end)
    last = new_lines.prev_pos(new_lines.last_pos())
    new_last = new_lines.char_at(last) if last is not None else ""
    return bool(
        new_last
        and _RISKY_ADJOINING_CHAR_RE.match(new_last)
        and char_after
        and _RISKY_ADJOINING_CHAR_RE.match(char_after)
    )


def get_reprinter(path: PathCursor) -> Callable[[PrintFunction], Lines] | None:
    """Reprinter for the node at ``path``, or None if it must be printed
    from scratch.

    The returned function patches the original text of the node: every
    replacement record is printed with ``print_fn``, re-indented to the
    column of the text it replaces, padded against token fusion and
    spliced in. Parentheses are added around the result when the node
    needs them in its new position.
    """
    node = path.get_value()
    if not isinstance(node, Printable):
        return None
    original = get_original(node)
    original_loc = original.loc if original is not None else None
    lines = original_loc.lines if original_loc is not None else None
    reprints: list[Reprint] = []
    if lines is None or not find_reprints(path, reprints):
        return None

    def reprint(print_fn: PrintFunction) -> Lines:
        patcher = Patcher(lines)

        for record in reprints:
            new_node = record.new_node
            old_node = record.old_node
            if old_node.loc is None:
                raise LocationIntegrityError(f"replacement anchored at {old_node.type} with no location")

            with_comments = not patcher.try_to_reprint_comments(new_node, old_node, print_fn)
            if with_comments:
                patcher.delete_comments(old_node)

            new_lines = print_fn(
                record.new_path,
                include_comments=with_comments,
                avoid_root_parens=old_node.type == new_node.type and record.old_path.has_parens(),
            ).indent_tail(old_node.loc.indent)

            leading = needs_leading_space(lines, old_node.loc, new_lines)
            trailing = needs_trailing_space(lines, old_node.loc, new_lines)
            if leading or trailing:
                new_lines = concat([" " if leading else "", new_lines, " " if trailing else ""])

            patcher.replace(old_node.loc, new_lines)

        accumulator = get_print_accumulator()
        if accumulator is not None:
            accumulator.record_reprints(len(reprints))

        # original_loc contains every reprinted node and comment.
        patched = patcher.get(original_loc).indent_tail(-original_loc.indent)
        if isinstance(node, Node) and path.needs_parens():
            return concat(["(", patched, ")"])
        return patched

    return reprint


__all__ = [
    "Patcher",
    "PrintFunction",
    "get_reprinter",
    "needs_leading_space",
    "needs_trailing_space",
]
