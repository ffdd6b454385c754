"""Source Map V3 emission and composition.

Provides a small Source Map V3 generator with Base64 VLQ encoding, the
matching decoder, and ``compose_source_maps`` which chains the map of a
parsed file with the map produced by reprinting it.

Positions follow the rest of the package: lines are 1-based, columns
0-based. The encoded ``mappings`` string is 0-based on both axes as the
format requires.

Example:
    >>> gen = SourceMapGenerator(file="out.js")
    >>> gen.add_mapping("in.js", Position(1, 0), Position(1, 0))
    >>> gen.to_json()["mappings"]
    'AAAA'

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any

from jsreprint.location import Position

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_INDEX = {char: index for index, char in enumerate(_BASE64)}

_VLQ_SHIFT = 5
_VLQ_BASE = 1 << _VLQ_SHIFT
_VLQ_MASK = _VLQ_BASE - 1
_VLQ_CONTINUATION = _VLQ_BASE


def encode_vlq(value: int) -> str:
    """Encode one signed integer as Base64 VLQ."""
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    encoded = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        encoded.append(_BASE64[digit])
        if not vlq:
            return "".join(encoded)


def decode_vlq(segment: str) -> list[int]:
    """Decode every Base64 VLQ integer in ``segment``.

    Raises:
        ValueError: On characters outside the Base64 alphabet or a
            truncated value
    """
    values: list[int] = []
    shift = 0
    accumulator = 0
    for char in segment:
        try:
            digit = _BASE64_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base64 VLQ character {char!r}") from None
        accumulator += (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += _VLQ_SHIFT
            continue
        negative = accumulator & 1
        accumulator >>= 1
        values.append(-accumulator if negative else accumulator)
        accumulator = 0
        shift = 0
    if shift:
        raise ValueError(f"truncated base64 VLQ segment {segment!r}")
    return values


@dataclass(frozen=True, slots=True)
class MappingSegment:
    """One decoded mapping, in package coordinates.

    Attributes:
        generated: Position in the generated file
        source: Index into ``sources`` (None for unmapped segments)
        original: Position in the source file (None for unmapped segments)
        name: Index into ``names`` (optional)

    """

    generated: Position
    source: int | None = None
    original: Position | None = None
    name: int | None = None


def decode_mappings(mappings: str) -> list[MappingSegment]:
    """Decode a V3 ``mappings`` string into absolute segments."""
    segments: list[MappingSegment] = []
    source = original_line = original_column = name = 0
    for line_index, line in enumerate(mappings.split(";")):
        generated_column = 0
        for raw in line.split(","):
            if not raw:
                continue
            fields = decode_vlq(raw)
            generated_column += fields[0]
            generated = Position(line_index + 1, generated_column)
            if len(fields) < 4:
                segments.append(MappingSegment(generated))
                continue
            source += fields[1]
            original_line += fields[2]
            original_column += fields[3]
            name_index = None
            if len(fields) > 4:
                name += fields[4]
                name_index = name
            segments.append(
                MappingSegment(
                    generated,
                    source,
                    Position(original_line + 1, original_column),
                    name_index,
                )
            )
    return segments


class SourceMapGenerator:
    """Accumulates mappings and serializes them as a Source Map V3 dict.

    Thread Safety:
        Not thread-safe. Build one generator per map.
    """

    def __init__(self, file: str | None = None, source_root: str | None = None) -> None:
        self.file = file
        self.source_root = source_root
        self._sources: list[str] = []
        self._source_index: dict[str, int] = {}
        self._names: list[str] = []
        self._name_index: dict[str, int] = {}
        self._contents: dict[str, str] = {}
        self._segments: list[MappingSegment] = []

    def _source_id(self, source: str) -> int:
        if source not in self._source_index:
            self._source_index[source] = len(self._sources)
            self._sources.append(source)
        return self._source_index[source]

    def _name_id(self, name: str) -> int:
        if name not in self._name_index:
            self._name_index[name] = len(self._names)
            self._names.append(name)
        return self._name_index[name]

    def add_mapping(
        self,
        source: str,
        original: Position,
        generated: Position,
        name: str | None = None,
    ) -> None:
        """Record that ``generated`` came from ``original`` in ``source``."""
        self._segments.append(
            MappingSegment(
                generated,
                self._source_id(source),
                original,
                self._name_id(name) if name else None,
            )
        )

    def set_source_content(self, source: str, content: str | None) -> None:
        """Embed (or with None, forget) the text of ``source``."""
        self._source_id(source)
        if content is None:
            self._contents.pop(source, None)
        else:
            self._contents[source] = content

    def serialize_mappings(self) -> str:
        ordered = sorted(
            self._segments,
            key=lambda s: (
                s.generated.line,
                s.generated.column,
                s.source if s.source is not None else -1,
                (s.original.line, s.original.column) if s.original else (0, 0),
            ),
        )
        out: list[str] = []
        line = 1
        prev_column = prev_source = prev_line = prev_original_column = prev_name = 0
        previous: MappingSegment | None = None
        for segment in ordered:
            if segment == previous:
                continue
            if segment.generated.line != line:
                out.append(";" * (segment.generated.line - line))
                line = segment.generated.line
                prev_column = 0
            elif previous is not None:
                out.append(",")
            out.append(encode_vlq(segment.generated.column - prev_column))
            prev_column = segment.generated.column
            if segment.source is not None and segment.original is not None:
                out.append(encode_vlq(segment.source - prev_source))
                prev_source = segment.source
                out.append(encode_vlq(segment.original.line - 1 - prev_line))
                prev_line = segment.original.line - 1
                out.append(encode_vlq(segment.original.column - prev_original_column))
                prev_original_column = segment.original.column
                if segment.name is not None:
                    out.append(encode_vlq(segment.name - prev_name))
                    prev_name = segment.name
            previous = segment
        return "".join(out)

    def to_json(self) -> dict[str, Any]:
        """Serialize to a Source Map V3 dict."""
        result: dict[str, Any] = {
            "version": 3,
            "sources": list(self._sources),
            "names": list(self._names),
            "mappings": self.serialize_mappings(),
        }
        if self.file is not None:
            result["file"] = self.file
        if self.source_root is not None:
            result["sourceRoot"] = self.source_root
        if self._contents:
            result["sourcesContent"] = [self._contents.get(s) for s in self._sources]
        return result


class SourceMapConsumer:
    """Read-only view of a Source Map V3 dict supporting position lookup."""

    def __init__(self, source_map: dict[str, Any]) -> None:
        if source_map.get("version", 3) != 3:
            raise ValueError(f"unsupported source map version {source_map.get('version')!r}")
        self.sources: list[str] = list(source_map.get("sources", []))
        self.names: list[str] = list(source_map.get("names", []))
        self.source_root: str | None = source_map.get("sourceRoot")
        contents = source_map.get("sourcesContent") or []
        self._contents = dict(zip(self.sources, contents, strict=False))
        self.segments = decode_mappings(source_map.get("mappings", ""))
        self._by_line: dict[int, list[MappingSegment]] = {}
        for segment in self.segments:
            self._by_line.setdefault(segment.generated.line, []).append(segment)
        self._columns = {
            line: [s.generated.column for s in segments]
            for line, segments in self._by_line.items()
        }

    def original_position_for(self, generated: Position) -> tuple[str, Position, str | None] | None:
        """Find the original position of ``generated``.

        Uses the nearest segment at or before ``generated`` on the same
        generated line.

        Returns:
            ``(source, original, name)`` or None when unmapped
        """
        segments = self._by_line.get(generated.line)
        if not segments:
            return None
        index = bisect_right(self._columns[generated.line], generated.column) - 1
        if index < 0:
            return None
        segment = segments[index]
        if segment.source is None or segment.original is None:
            return None
        name = self.names[segment.name] if segment.name is not None else None
        return self.sources[segment.source], segment.original, name

    def source_content_for(self, source: str) -> str | None:
        return self._contents.get(source)


def compose_source_maps(
    input_map: dict[str, Any] | None,
    output_map: dict[str, Any] | None,
) -> dict[str, Any] | None:
    """Chain ``input_map`` (original -> parsed) with ``output_map``
    (parsed -> printed) into a single original -> printed map.

    Output segments whose original position is not covered by
    ``input_map`` are dropped.
    """
    if input_map is None:
        return output_map
    if output_map is None:
        return input_map

    former = SourceMapConsumer(input_map)
    latter = SourceMapConsumer(output_map)
    generator = SourceMapGenerator(
        file=output_map.get("file"),
        source_root=output_map.get("sourceRoot"),
    )
    seen_contents: set[str] = set()

    for segment in latter.segments:
        if segment.original is None:
            continue
        found = former.original_position_for(segment.original)
        if found is None:
            continue
        source, original, name = found
        if name is None and segment.name is not None:
            name = latter.names[segment.name]
        generator.add_mapping(source, original, segment.generated, name)
        content = former.source_content_for(source)
        if content and source not in seen_contents:
            seen_contents.add(source)
            generator.set_source_content(source, content)

    return generator.to_json()


__all__ = [
    "MappingSegment",
    "SourceMapConsumer",
    "SourceMapGenerator",
    "compose_source_maps",
    "decode_mappings",
    "decode_vlq",
    "encode_vlq",
]
