"""Immutable, indentation-aware text buffer.

``Lines`` is the coordinate system of the whole package. A buffer is built
once from source text with ``from_string`` and never modified afterwards:
slicing, indenting, joining and trimming all return new buffers.

Each line is stored as a ``LineInfo``: the raw text of the line, the width
of its indentation (tabs expanded), and the slice of the raw text holding
the content after that indentation. Keeping the indentation as a number
lets a fragment be re-indented without touching its characters, and lets
``to_string`` either copy the original whitespace or regenerate it.

Buffers built from other buffers carry ``Mapping`` records, from which
``get_source_map`` replays a Source Map V3.

Example:
    >>> lines = from_string("if (a) {\\n    b();\\n}")
    >>> str(lines.slice(Position(2, 4), Position(2, 8)))
    'b();'
    >>> str(concat(["x", " = ", "1;"]))
    'x = 1;'

Thread Safety:
    Lines values are immutable. The lazily computed tab-width guess and
    source map are write-once caches of deterministic values, so sharing a
    buffer across threads is safe.

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any

from jsreprint.errors import ConfigurationError, LocationIntegrityError
from jsreprint.location import Position, compare_pos
from jsreprint.mapping import Mapping
from jsreprint.sourcemap import SourceMapGenerator

# Any line terminator recognized by ECMAScript.
LINE_TERMINATOR_RE = re.compile("\r\n|\r(?!\n)|\n|\u2028|\u2029")

_LEADING_SPACE_RE = re.compile(r"^[\s\ufeff]*")
_NON_SPACE_RE = re.compile(r"[^\s\ufeff]")

# Strings up to this length without tabs are memoized by from_string.
_MAX_CACHE_KEY_LEN = 10


@dataclass(frozen=True, slots=True)
class LineInfo:
    """One line of a Lines buffer.

    Attributes:
        line: Raw text of the line (no terminator)
        indent: Indentation width in columns
        locked: Indentation must not be changed by indent operations
        slice_start: Offset in ``line`` where content begins
        slice_end: Offset in ``line`` where content ends

    """

    line: str
    indent: int
    locked: bool
    slice_start: int
    slice_end: int

    @property
    def content(self) -> str:
        return self.line[self.slice_start : self.slice_end]


def is_only_whitespace(text: str) -> bool:
    return _NON_SPACE_RE.search(text) is None


def count_spaces(spaces: str, tab_width: int | None = None) -> int:
    """Width of a run of whitespace in columns.

    Tabs advance to the next multiple of ``tab_width``. Vertical tabs, form
    feeds, carriage returns and byte order marks take no room.

    Raises:
        ConfigurationError: If ``spaces`` contains a tab and no positive
            ``tab_width`` was given
    """
    count = 0
    for char in spaces:
        match char:
            case "\t":
                if not tab_width or tab_width < 1:
                    raise ConfigurationError("no tab width specified but encountered tabs")
                next_stop = -(-count // tab_width) * tab_width
                count = count + tab_width if next_stop == count else next_stop
            case "\v" | "\f" | "\r" | "\ufeff":
                pass
            case _:
                count += 1
    return count


def _slice_info(info: LineInfo, start_col: int, end_col: int | None = None) -> LineInfo:
    slice_start = info.slice_start
    slice_end = info.slice_end
    indent = max(info.indent, 0)
    line_length = indent + slice_end - slice_start

    if end_col is None:
        end_col = line_length
    start_col = max(start_col, 0)
    end_col = min(end_col, line_length)
    end_col = max(end_col, start_col)

    if end_col < indent:
        indent = end_col
        slice_end = slice_start
    else:
        slice_end -= line_length - end_col

    if start_col < indent:
        indent -= start_col
    else:
        slice_start += start_col - indent
        indent = 0

    if info.indent == indent and info.slice_start == slice_start and info.slice_end == slice_end:
        return info
    return LineInfo(info.line, indent, False, slice_start, slice_end)


class Lines:
    """An immutable sequence of LineInfo records.

    Attributes:
        name: Source file name, when the buffer was parsed from a named file
        mappings: Fragments of other buffers this buffer is made of
        terminator: Line terminator detected by ``from_string`` (or None)

    """

    __slots__ = (
        "_cached_source_map",
        "_cached_tab_width",
        "_infos",
        "mappings",
        "name",
        "terminator",
    )

    def __init__(
        self,
        infos: Iterable[LineInfo],
        source_file_name: str | None = None,
        *,
        mappings: Iterable[Mapping] = (),
        terminator: str | None = None,
    ) -> None:
        self._infos: tuple[LineInfo, ...] = tuple(infos)
        if not self._infos:
            raise ValueError("a Lines buffer needs at least one line")
        self.name = source_file_name or None
        self.terminator = terminator
        self._cached_source_map: SourceMapGenerator | None = None
        self._cached_tab_width: int | None = None
        if self.name:
            self.mappings: tuple[Mapping, ...] = (Mapping.identity(self),)
        else:
            self.mappings = tuple(mappings)

    def __len__(self) -> int:
        return len(self._infos)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        preview = self.to_string()
        if len(preview) > 40:
            preview = preview[:37] + "..."
        return f"Lines({preview!r}, lines={len(self)})"

    @property
    def infos(self) -> tuple[LineInfo, ...]:
        return self._infos

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def first_pos(self) -> Position:
        return Position(1, 0)

    def last_pos(self) -> Position:
        return Position(len(self), self.get_line_length(len(self)))

    def get_indent_at(self, line: int) -> int:
        if line < 1:
            raise LocationIntegrityError(f"no line {line} (line numbers start from 1)")
        return max(self._infos[line - 1].indent, 0)

    def get_line_length(self, line: int) -> int:
        info = self._infos[line - 1]
        return self.get_indent_at(line) + info.slice_end - info.slice_start

    def char_at(self, pos: Position) -> str:
        """Character at ``pos``.

        Indentation reads as spaces, the end of a non-final line reads as
        ``"\\n"``, anything out of range reads as ``""``.
        """
        line = pos.line
        column = pos.column
        if line < 1 or line > len(self) or column < 0:
            return ""
        info = self._infos[line - 1]
        indent = self.get_indent_at(line)
        if column < indent:
            return " "
        offset = column + info.slice_start - indent
        if offset == info.slice_end and line < len(self):
            return "\n"
        if offset >= info.slice_end:
            return ""
        return info.line[offset]

    def next_pos(self, pos: Position, skip_spaces: bool = False) -> Position | None:
        """Position after ``pos``, or None at the end of the buffer."""
        line = max(pos.line, 1)
        column = max(pos.column, 0)
        if line > len(self):
            return None
        if column < self.get_line_length(line):
            moved = Position(line, column + 1)
        elif line < len(self):
            moved = Position(line + 1, 0)
        else:
            return None
        return self.skip_spaces(moved) if skip_spaces else moved

    def prev_pos(self, pos: Position, skip_spaces: bool = False) -> Position | None:
        """Position before ``pos``, or None at the start of the buffer."""
        line = pos.line
        column = pos.column
        if column < 1:
            line -= 1
            if line < 1:
                return None
            column = self.get_line_length(line)
        else:
            column = min(column - 1, self.get_line_length(line))
        moved = Position(line, column)
        return self.skip_spaces(moved, backward=True) if skip_spaces else moved

    def skip_spaces(self, pos: Position | None = None, backward: bool = False) -> Position | None:
        """Nearest non-whitespace position from ``pos``.

        Forward, the result is the position of the next non-whitespace
        character. Backward, it is the position just after the previous
        non-whitespace character.

        Returns:
            The position, or None when only whitespace remains
        """
        if pos is None:
            pos = self.last_pos() if backward else self.first_pos()
        else:
            pos = Position(pos.line, pos.column)

        if backward:
            while True:
                prev = self.prev_pos(pos)
                if prev is None:
                    return None
                pos = prev
                if not is_only_whitespace(self.char_at(pos)):
                    after = self.next_pos(pos)
                    if after is not None:
                        return after

        while is_only_whitespace(self.char_at(pos)):
            moved = self.next_pos(pos)
            if moved is None:
                return None
            pos = moved
        return pos

    def each_pos(self, start: Position | None = None, skip_spaces: bool = False) -> Iterator[Position]:
        """Iterate positions from ``start`` (default: first) to the end."""
        pos: Position | None = start or self.first_pos()
        if skip_spaces:
            pos = self.skip_spaces(pos)
        while pos is not None:
            yield pos
            pos = self.next_pos(pos, skip_spaces)

    def is_preceded_only_by_whitespace(self, pos: Position) -> bool:
        info = self._infos[pos.line - 1]
        indent = max(info.indent, 0)
        diff = pos.column - indent
        if diff <= 0:
            return True
        start = info.slice_start
        end = min(start + diff, info.slice_end)
        return is_only_whitespace(info.line[start:end])

    def is_only_whitespace(self) -> bool:
        return is_only_whitespace(self.to_string())

    def is_empty(self) -> bool:
        return len(self) < 2 and self.get_line_length(1) < 1

    def starts_with_comment(self) -> bool:
        first = self._infos[0].content.strip()
        return not first or first[:2] in ("//", "/*")

    # ------------------------------------------------------------------
    # Indentation
    # ------------------------------------------------------------------

    def guess_tab_width(self) -> int:
        """Most common indentation step between consecutive non-blank lines.

        Defaults to 2 when the buffer has no indentation changes.
        """
        if self._cached_tab_width is not None:
            return self._cached_tab_width

        counts: dict[int, int] = {}
        last_indent = 0
        for info in self._infos:
            if is_only_whitespace(info.content):
                continue
            diff = abs(info.indent - last_indent)
            counts[diff] = counts.get(diff, 0) + 1
            last_indent = info.indent

        result = 2
        max_count = -1
        for width in sorted(counts):
            if width >= 1 and counts[width] > max_count:
                max_count = counts[width]
                result = width

        self._cached_tab_width = result
        return result

    def indent(self, by: int) -> Lines:
        """Shift the indentation of every unlocked, non-empty line."""
        if by == 0:
            return self
        infos = [
            replace(info, indent=info.indent + by) if info.line and not info.locked else info
            for info in self._infos
        ]
        return Lines(infos, mappings=[m.indent(by) for m in self.mappings])

    def indent_tail(self, by: int) -> Lines:
        """Like ``indent`` but leaves the first line alone."""
        if by == 0 or len(self) < 2:
            return self
        infos = [
            replace(info, indent=info.indent + by)
            if i > 0 and info.line and not info.locked
            else info
            for i, info in enumerate(self._infos)
        ]
        return Lines(infos, mappings=[m.indent(by, skip_first_line=True) for m in self.mappings])

    def lock_indent_tail(self) -> Lines:
        """Freeze the indentation of every line after the first."""
        if len(self) < 2:
            return self
        infos = [replace(info, locked=i > 0) for i, info in enumerate(self._infos)]
        return Lines(infos, mappings=self.mappings)

    def strip_margin(self, width: int, skip_first_line: bool = False) -> Lines:
        """Remove up to ``width`` columns of indentation from each line."""
        if width == 0:
            return self
        if width < 0:
            raise ValueError(f"negative margin: {width}")
        if skip_first_line and len(self) == 1:
            return self
        infos = [
            replace(info, indent=max(0, info.indent - width))
            if info.line and (i > 0 or not skip_first_line)
            else info
            for i, info in enumerate(self._infos)
        ]
        mappings = [m.indent(-width, skip_first_line, True) for m in self.mappings]
        return Lines(infos, mappings=mappings)

    # ------------------------------------------------------------------
    # Slicing
    # ------------------------------------------------------------------

    def slice(self, start: Position | None = None, end: Position | None = None) -> Lines:
        """Sub-buffer from ``start`` (inclusive) to ``end`` (exclusive).

        Positions outside the buffer are clamped to its bounds.

        Raises:
            LocationIntegrityError: If ``start`` comes after ``end``
        """
        if end is None:
            if start is None:
                return self
            end = self.last_pos()
        if start is None:
            raise LocationIntegrityError("cannot slice with end but not start")

        start = self._clamp(start)
        end = self._clamp(end)
        if compare_pos(start, end) > 0:
            raise LocationIntegrityError(
                f"slice start {start} is after end {end}", start.line, start.column
            )

        sliced = list(self._infos[start.line - 1 : end.line])
        if start.line == end.line:
            sliced[0] = _slice_info(sliced[0], start.column, end.column)
        else:
            sliced[0] = _slice_info(sliced[0], start.column)
            sliced[-1] = _slice_info(sliced[-1], 0, end.column)

        mappings = []
        for mapping in self.mappings:
            moved = mapping.slice(self, start, end)
            if moved is not None:
                mappings.append(moved)
        return Lines(sliced, mappings=mappings)

    def _clamp(self, pos: Position) -> Position:
        if pos.line < 1:
            return self.first_pos()
        if pos.line > len(self):
            return self.last_pos()
        return Position(pos.line, min(max(pos.column, 0), self.get_line_length(pos.line)))

    def slice_string(
        self,
        start: Position | None = None,
        end: Position | None = None,
        *,
        tab_width: int = 4,
        use_tabs: bool = False,
        reuse_whitespace: bool = True,
        line_terminator: str = "\n",
    ) -> str:
        """Text between ``start`` and ``end``.

        With ``reuse_whitespace`` the original indentation characters of a
        line are copied whenever they still produce the right width;
        otherwise indentation is regenerated from ``tab_width`` and
        ``use_tabs``.
        """
        start = self._clamp(start or self.first_pos())
        end = self._clamp(end or self.last_pos())
        parts: list[str] = []
        for line in range(start.line, end.line + 1):
            info = self._infos[line - 1]
            if line == start.line:
                if line == end.line:
                    info = _slice_info(info, start.column, end.column)
                else:
                    info = _slice_info(info, start.column)
            elif line == end.line:
                info = _slice_info(info, 0, end.column)

            indent = max(info.indent, 0)
            before = info.line[: info.slice_start]
            if (
                reuse_whitespace
                and is_only_whitespace(before)
                and count_spaces(before, tab_width) == indent
            ):
                parts.append(info.line[: info.slice_end])
                continue

            tabs = 0
            spaces = indent
            if use_tabs:
                tabs = indent // tab_width
                spaces -= tabs * tab_width
            parts.append("\t" * tabs + " " * spaces + info.content)

        return line_terminator.join(parts)

    def to_string(self, **options: Any) -> str:
        """Whole buffer as text; accepts the keyword options of ``slice_string``."""
        return self.slice_string(self.first_pos(), self.last_pos(), **options)

    def trim_left(self) -> Lines:
        pos = self.skip_spaces(self.first_pos())
        return self.slice(pos) if pos is not None else EMPTY_LINES

    def trim_right(self) -> Lines:
        pos = self.skip_spaces(self.last_pos(), backward=True)
        return self.slice(self.first_pos(), pos) if pos is not None else EMPTY_LINES

    def trim(self) -> Lines:
        start = self.skip_spaces(self.first_pos())
        if start is None:
            return EMPTY_LINES
        end = self.skip_spaces(self.last_pos(), backward=True)
        if end is None:
            return EMPTY_LINES
        return self.slice(start, end)

    # ------------------------------------------------------------------
    # Joining
    # ------------------------------------------------------------------

    def join(self, elements: Iterable[Lines | str]) -> Lines:
        """Concatenate ``elements`` with this buffer as the separator.

        When a piece does not end with a line break, the first line of the
        next piece continues that line instead of starting a new one.
        """
        separator = self
        infos: list[LineInfo] = []
        mappings: list[Mapping] = []

        def append(lines: Lines | None) -> None:
            if lines is None:
                return
            if infos:
                prev = infos[-1]
                first = lines._infos[0]
                prev_line = len(infos)
                prev_column = max(prev.indent, 0) + prev.slice_end - prev.slice_start
                if prev.slice_start == prev.slice_end and first.slice_start < first.slice_end:
                    # Keep the indentation virtual so slice_string can regenerate it.
                    infos[-1] = replace(
                        first,
                        indent=prev_column + max(first.indent, 0),
                        locked=prev.locked or first.locked,
                    )
                else:
                    text = prev.line[: prev.slice_end] + " " * first.indent + first.content
                    infos[-1] = LineInfo(
                        text,
                        prev.indent,
                        prev.locked or first.locked,
                        prev.slice_start,
                        len(text),
                    )
                mappings.extend(m.add(prev_line, prev_column) for m in lines.mappings)
                infos.extend(lines._infos[1:])
            else:
                mappings.extend(lines.mappings)
                infos.extend(lines._infos)

        pieces = []
        for element in elements:
            lines = from_string(element)
            pieces.append(None if lines.is_empty() else lines)

        if separator.is_empty():
            for piece in pieces:
                append(piece)
        else:
            for i, piece in enumerate(pieces):
                if i > 0:
                    append(separator)
                append(piece)

        if not infos:
            return EMPTY_LINES
        return Lines(infos, mappings=mappings)

    def concat(self, *others: Lines | str) -> Lines:
        return EMPTY_LINES.join([self, *others])

    # ------------------------------------------------------------------
    # Source maps
    # ------------------------------------------------------------------

    def get_source_map(
        self,
        source_map_name: str | None,
        source_root: str | None = None,
    ) -> dict[str, Any] | None:
        """Replay the buffer's mappings into a Source Map V3 dict.

        Returns:
            The map, or None when no ``source_map_name`` is given
        """
        if not source_map_name:
            return None

        def finish(result: dict[str, Any]) -> dict[str, Any]:
            result["file"] = source_map_name
            if source_root:
                result["sourceRoot"] = source_root
            return result

        if self._cached_source_map is not None:
            return finish(self._cached_source_map.to_json())

        generator = SourceMapGenerator()
        seen_sources: set[str] = set()
        for mapping in self.mappings:
            source_lines = mapping.source_lines
            source_name = source_lines.name
            if source_name is None:
                continue
            source = source_lines.skip_spaces(mapping.source_loc.start) or source_lines.last_pos()
            target = self.skip_spaces(mapping.target_loc.start) or self.last_pos()

            while (
                compare_pos(source, mapping.source_loc.end) < 0
                and compare_pos(target, mapping.target_loc.end) < 0
            ):
                if source_lines.char_at(source) != self.char_at(target):
                    raise LocationIntegrityError(
                        "source map replay found differing characters", target.line, target.column
                    )
                generator.add_mapping(source_name, source, target)
                if source_name not in seen_sources:
                    seen_sources.add(source_name)
                    generator.set_source_content(source_name, source_lines.to_string())
                next_target = self.next_pos(target, skip_spaces=True)
                next_source = source_lines.next_pos(source, skip_spaces=True)
                if next_target is None or next_source is None:
                    break
                target, source = next_target, next_source

        self._cached_source_map = generator
        return finish(generator.to_json())


def _split(text: str, tab_width: int | None) -> list[LineInfo]:
    infos = []
    for line in LINE_TERMINATOR_RE.split(text):
        spaces = _LEADING_SPACE_RE.match(line).group(0)
        infos.append(
            LineInfo(line, count_spaces(spaces, tab_width), False, len(spaces), len(line))
        )
    return infos


def _detect_terminator(text: str) -> str | None:
    found = LINE_TERMINATOR_RE.search(text)
    return found.group(0) if found else None


@lru_cache(maxsize=512)
def _cached_lines(text: str) -> Lines:
    return Lines(_split(text, None), terminator=_detect_terminator(text))


def from_string(
    text: Lines | str,
    tab_width: int | None = None,
    source_file_name: str | None = None,
) -> Lines:
    """Build a Lines buffer from text.

    Args:
        text: Source text (a Lines value is returned unchanged)
        tab_width: Columns per tab, required when ``text`` contains tabs
        source_file_name: File name used for source maps

    Raises:
        ConfigurationError: If ``text`` contains a tab and no tab width
            was given
    """
    if isinstance(text, Lines):
        return text
    text = str(text)
    tabless = "\t" not in text
    if not tab_width and not tabless:
        raise ConfigurationError("no tab width specified but encountered tabs in string")
    if tabless and tab_width is None and source_file_name is None and len(text) <= _MAX_CACHE_KEY_LEN:
        return _cached_lines(text)
    return Lines(_split(text, tab_width), source_file_name, terminator=_detect_terminator(text))


def concat(elements: Iterable[Lines | str]) -> Lines:
    """Join ``elements`` with no separator."""
    return EMPTY_LINES.join(elements)


EMPTY_LINES = from_string("")


__all__ = [
    "EMPTY_LINES",
    "LINE_TERMINATOR_RE",
    "LineInfo",
    "Lines",
    "concat",
    "count_spaces",
    "from_string",
    "is_only_whitespace",
]
