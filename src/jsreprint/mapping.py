"""Mapping records linking a span of one Lines buffer to a span of another.

A ``Lines`` value assembled from fragments of other buffers keeps one
``Mapping`` per fragment. Every editing operation on the buffer (slice,
indent, join) transforms the mappings alongside the text so that a source
map can be replayed at the end.

Thread Safety:
Mappings are frozen and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jsreprint.errors import LocationIntegrityError
from jsreprint.location import Position, SourceLocation, compare_pos

if TYPE_CHECKING:
    from jsreprint.lines import Lines


@dataclass(frozen=True, slots=True)
class Mapping:
    """A correspondence between ``source_loc`` in ``source_lines`` and
    ``target_loc`` in the buffer that owns this mapping.

    Attributes:
        source_lines: Buffer the text originally came from
        source_loc: Span within ``source_lines``
        target_loc: Span within the owning buffer

    """

    source_lines: Lines
    source_loc: SourceLocation
    target_loc: SourceLocation

    @classmethod
    def identity(cls, lines: Lines) -> Mapping:
        """Map the whole of ``lines`` onto itself."""
        loc = SourceLocation(lines.first_pos(), lines.last_pos())
        return cls(lines, loc, loc)

    def slice(self, lines: Lines, start: Position, end: Position | None = None) -> Mapping | None:
        """Restrict this mapping to the ``start``-``end`` window of ``lines``.

        Returns:
            The re-based mapping, or None if it falls outside the window
        """
        if end is None:
            end = lines.last_pos()
        source_loc = self.source_loc
        target_loc = self.target_loc

        def skip(which: str) -> Position:
            if which == "start":
                return _skip_chars(
                    self.source_lines, source_loc.start, lines, target_loc.start, start
                )
            return _skip_chars(self.source_lines, source_loc.end, lines, target_loc.end, end)

        if compare_pos(start, target_loc.start) <= 0:
            if compare_pos(target_loc.end, end) <= 0:
                new_target = SourceLocation(
                    _subtract_pos(target_loc.start, start.line, start.column),
                    _subtract_pos(target_loc.end, start.line, start.column),
                )
                new_source = source_loc
            elif compare_pos(end, target_loc.start) <= 0:
                return None
            else:
                new_source = SourceLocation(source_loc.start, skip("end"))
                new_target = SourceLocation(
                    _subtract_pos(target_loc.start, start.line, start.column),
                    _subtract_pos(end, start.line, start.column),
                )
        else:
            if compare_pos(target_loc.end, start) <= 0:
                return None
            if compare_pos(target_loc.end, end) <= 0:
                new_source = SourceLocation(skip("start"), source_loc.end)
                new_target = SourceLocation(
                    Position(1, 0),
                    _subtract_pos(target_loc.end, start.line, start.column),
                )
            else:
                new_source = SourceLocation(skip("start"), skip("end"))
                new_target = SourceLocation(
                    Position(1, 0),
                    _subtract_pos(end, start.line, start.column),
                )

        return Mapping(self.source_lines, new_source, new_target)

    def add(self, line: int, column: int) -> Mapping:
        """Shift the target span as if the owning buffer were appended at
        (``line``, ``column``) of another buffer."""
        return Mapping(
            self.source_lines,
            self.source_loc,
            SourceLocation(
                _add_pos(self.target_loc.start, line, column),
                _add_pos(self.target_loc.end, line, column),
            ),
        )

    def subtract(self, line: int, column: int) -> Mapping:
        return Mapping(
            self.source_lines,
            self.source_loc,
            SourceLocation(
                _subtract_pos(self.target_loc.start, line, column),
                _subtract_pos(self.target_loc.end, line, column),
            ),
        )

    def indent(
        self,
        by: int,
        skip_first_line: bool = False,
        no_negative_columns: bool = False,
    ) -> Mapping:
        """Shift target columns by ``by`` to follow an indentation change."""
        if by == 0:
            return self
        start = self.target_loc.start
        end = self.target_loc.end
        if skip_first_line and start.line == 1 and end.line == 1:
            return self

        if not skip_first_line or start.line > 1:
            column = start.column + by
            start = Position(start.line, max(0, column) if no_negative_columns else column)
        if not skip_first_line or end.line > 1:
            column = end.column + by
            end = Position(end.line, max(0, column) if no_negative_columns else column)

        return Mapping(self.source_lines, self.source_loc, SourceLocation(start, end))


def _add_pos(to_pos: Position, line: int, column: int) -> Position:
    return Position(
        to_pos.line + line - 1,
        to_pos.column + column if to_pos.line == 1 else to_pos.column,
    )


def _subtract_pos(from_pos: Position, line: int, column: int) -> Position:
    return Position(
        from_pos.line - line + 1,
        from_pos.column - column if from_pos.line == line else from_pos.column,
    )


def _skip_chars(
    source_lines: Lines,
    source_from: Position,
    target_lines: Lines,
    target_from: Position,
    target_to: Position,
) -> Position:
    """Walk ``source_lines`` in step with ``target_lines`` from
    ``target_from`` to ``target_to``, skipping whitespace on both sides.

    Returns:
        The source position corresponding to ``target_to``

    Raises:
        LocationIntegrityError: If the two buffers disagree on a character
    """
    comparison = compare_pos(target_from, target_to)
    if comparison == 0:
        return source_from

    if comparison < 0:
        source = source_lines.skip_spaces(source_from) or source_lines.last_pos()
        target = target_lines.skip_spaces(target_from) or target_lines.last_pos()
        line_diff = target_to.line - target.line
        if line_diff > 0:
            source = Position(source.line + line_diff, 0)
            target = Position(target.line + line_diff, 0)
        elif line_diff < 0:
            return source

        while compare_pos(target, target_to) < 0:
            next_target = target_lines.next_pos(target, skip_spaces=True)
            if next_target is None:
                break
            target = next_target
            next_source = source_lines.next_pos(source, skip_spaces=True)
            if next_source is None:
                raise LocationIntegrityError("source buffer ended before target", source.line, source.column)
            source = next_source
            if source_lines.char_at(source) != target_lines.char_at(target):
                raise LocationIntegrityError("mapped characters differ", source.line, source.column)
    else:
        source = source_lines.skip_spaces(source_from, backward=True) or source_lines.first_pos()
        target = target_lines.skip_spaces(target_from, backward=True) or target_lines.first_pos()
        line_diff = target_to.line - target.line
        if line_diff < 0:
            source_line = source.line + line_diff
            target_line = target.line + line_diff
            source = Position(source_line, source_lines.get_line_length(source_line))
            target = Position(target_line, target_lines.get_line_length(target_line))
        elif line_diff > 0:
            return source

        while compare_pos(target_to, target) < 0:
            prev_target = target_lines.prev_pos(target, skip_spaces=True)
            if prev_target is None:
                break
            target = prev_target
            prev_source = source_lines.prev_pos(source, skip_spaces=True)
            if prev_source is None:
                raise LocationIntegrityError("source buffer ended before target", source.line, source.column)
            source = prev_source

    return source


__all__ = ["Mapping"]
