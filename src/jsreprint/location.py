"""Source positions and locations.

Provides the coordinate types shared by every other module: ``Position``
(1-based line, 0-based column) and ``SourceLocation`` (a start/end pair that
may also remember the ``Lines`` buffer and token array it was computed
against).

Ordering of positions is lexicographic on (line, column). The optional token
index carried by a position never takes part in comparisons.

Thread Safety:
Both types are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsreprint.lines import Lines
    from jsreprint.tokens import Token


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A line/column position in some text buffer.

    Attributes:
        line: Line number (1-indexed)
        column: Column (0-indexed, tabs in indentation expanded)
        token: Index into the originating token array (optional). For a
            location start it is the first token of the node; for a location
            end it is the first token *after* the node.

    Examples:
        >>> Position(1, 4) < Position(2, 0)
        True
        >>> Position(3, 1, token=7) == Position(3, 1)
        True

    """

    line: int
    column: int
    token: int | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    def with_token(self, token: int | None) -> Position:
        """Return a copy of this position carrying a token index."""
        return Position(self.line, self.column, token)


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Start/end span of a node in a specific ``Lines`` buffer.

    Only ``start`` and ``end`` take part in equality; the buffer, token array
    and indentation are bookkeeping attached by the parser's copy pass.

    Attributes:
        start: First position covered
        end: Position just past the last covered character
        lines: Buffer the positions refer to (optional)
        tokens: Flat token array of the buffer (optional)
        indent: Indentation of the line the node starts on, or the starting
            column for comments

    """

    start: Position
    end: Position
    lines: Lines | None = field(default=None, compare=False, repr=False)
    tokens: tuple[Token, ...] | None = field(default=None, compare=False, repr=False)
    indent: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    def contains(self, other: SourceLocation) -> bool:
        """True when ``other`` lies entirely within this location."""
        return self.start <= other.start and other.end <= self.end


def compare_pos(a: Position, b: Position) -> int:
    """Three-way comparison of two positions.

    Returns:
        Negative, zero or positive as ``a`` is before, at or after ``b``
    """
    return (a.line - b.line) or (a.column - b.column)


def position_from_dict(data: Any) -> Position:
    """Build a Position from an ESTree ``{line, column}`` mapping."""
    return Position(int(data["line"]), int(data["column"]))


def location_from_dict(data: Any) -> SourceLocation | None:
    """Build a SourceLocation from an ESTree ``{start, end}`` mapping."""
    if not data:
        return None
    return SourceLocation(
        start=position_from_dict(data["start"]),
        end=position_from_dict(data["end"]),
    )


def location_to_dict(loc: SourceLocation) -> dict[str, dict[str, int]]:
    """Convert a SourceLocation to an ESTree ``{start, end}`` mapping."""
    return {
        "start": {"line": loc.start.line, "column": loc.start.column},
        "end": {"line": loc.end.line, "column": loc.end.column},
    }


__all__ = [
    "Position",
    "SourceLocation",
    "compare_pos",
    "location_from_dict",
    "location_to_dict",
    "position_from_dict",
]
