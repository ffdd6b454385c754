"""Parse boundary: run esprima and prepare the tree for reprinting.

``parse`` turns JavaScript source into a ``File`` node ready to be edited
and handed to the printer:

1. Build the ``Lines`` buffer (tabs expanded with the configured width).
2. Run esprima on the same text with indentation regenerated as spaces,
   so every column esprima reports is a column of the buffer.
3. Convert esprima's objects into typed nodes, tokens and comments.
4. Attach comments to the nodes they belong to.
5. Return a deep copy (``TreeCopier``) whose nodes remember their
   originals. Editing the copy and printing it reuses the original text
   wherever the edit did not reach.

Example:
    >>> tree = parse("const x = 1 + 2;")
    >>> tree.program.body[0].declarations[0].init.right.value
    2

Thread Safety:
    ``parse`` is a pure function of its inputs. Configuration is read from
    the ContextVar when not passed explicitly.

"""

from __future__ import annotations

import dataclasses
from dataclasses import replace
from typing import Any

import esprima
from esprima.error_handler import Error as EsprimaError

from jsreprint.comments import attach
from jsreprint.config import ReprintConfig, normalize_options
from jsreprint.errors import LocationIntegrityError, ParseError, ReprintError
from jsreprint.lines import Lines, from_string
from jsreprint.location import SourceLocation, compare_pos
from jsreprint.nodes import Comment, File, Printable, Program
from jsreprint.original import set_original
from jsreprint.serialization import from_dict
from jsreprint.tokens import Token
from jsreprint.util import fix_faulty_locations, get_true_loc
from jsreprint.utils.logger import get_logger

logger = get_logger(__name__)

# esprima-python spells the ESTree ``async`` flag this way.
_RENAMED_KEYS = {"isAsync": "async"}


def _plain(value: Any) -> Any:
    """Convert esprima's node objects into plain dicts and lists."""
    if value is None or isinstance(value, str | bool | int | float):
        return value
    if isinstance(value, dict):
        return {_RENAMED_KEYS.get(k, k): _plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(item) for item in value]
    attributes = getattr(value, "__dict__", None)
    if attributes is None:
        # Compiled regular expressions and other host objects.
        return None
    return {
        _RENAMED_KEYS.get(k, k): _plain(v)
        for k, v in attributes.items()
        if not k.startswith("_")
    }


def _run_esprima(text: str, config: ReprintConfig) -> dict[str, Any]:
    options = {
        "loc": True,
        "range": config.range,
        "tokens": True,
        "comment": True,
        "tolerant": config.tolerant,
        "jsx": config.jsx,
    }
    parse_fn = esprima.parseModule if config.source_type == "module" else esprima.parseScript
    try:
        result = parse_fn(text, options)
    except EsprimaError as exc:
        column = getattr(exc, "column", None)
        raise ParseError(
            getattr(exc, "description", None) or str(exc),
            line=getattr(exc, "lineNumber", None),
            column=column - 1 if isinstance(column, int) else None,
            source_file=config.source_file_name,
        ) from exc
    return _plain(result)


class TreeCopier:
    """Deep copier that links every copy to its original.

    While copying it also finishes the locations the parser produced: each
    one learns its ``Lines`` buffer, the token array, the indentation of
    the node and the range of tokens the node spans. The finished location
    is shared by the original and the copy.

    Thread Safety:
        Not thread-safe. Use one copier per parse.
    """

    def __init__(self, lines: Lines, tokens: tuple[Token, ...]) -> None:
        self.lines = lines
        self.tokens = tokens
        self.indent = 0
        self.start_token_index = 0
        self.end_token_index = len(tokens)
        self._seen: dict[int, Any] = {}

    def copy(self, value: Any) -> Any:
        key = id(value)
        if key in self._seen:
            return self._seen[key]

        if isinstance(value, list):
            copied: list[Any] = []
            self._seen[key] = copied
            copied.extend(self.copy(item) for item in value)
            return copied
        if isinstance(value, dict):
            return dict(value)
        if not isinstance(value, Printable):
            return value

        return self._copy_node(value)

    def _copy_node(self, node: Printable) -> Printable:
        fix_faulty_locations(node, self.lines)

        old_indent = self.indent
        old_start = self.start_token_index
        old_end = self.end_token_index

        loc = node.loc
        if loc is not None:
            if compare_pos(loc.start, loc.end) > 0:
                raise LocationIntegrityError(
                    f"{node.type} location starts after it ends",
                    loc.start.line,
                    loc.start.column,
                )
            if isinstance(node, Comment) or self.lines.is_preceded_only_by_whitespace(loc.start):
                self.indent = loc.start.column
            start_token, end_token = self._find_token_range(loc)
            loc = SourceLocation(
                loc.start.with_token(start_token),
                loc.end.with_token(end_token),
                lines=self.lines,
                tokens=self.tokens,
                indent=self.indent,
            )
            node.loc = loc

        clone = object.__new__(type(node))
        self._seen[id(node)] = clone
        set_original(clone, node)
        for f in dataclasses.fields(node):
            value = getattr(node, f.name)
            if f.name == "loc":
                value = loc
            elif not (f.name == "tokens" and isinstance(node, File)):
                value = self.copy(value)
            setattr(clone, f.name, value)

        self.indent = old_indent
        self.start_token_index = old_start
        self.end_token_index = old_end
        return clone

    def _find_token_range(self, loc: SourceLocation) -> tuple[int, int]:
        """Half-open range of tokens inside ``loc``, found by moving the
        indices of the enclosing node."""
        tokens = self.tokens
        start = self.start_token_index
        end = self.end_token_index

        while start > 0 and (start >= len(tokens) or compare_pos(loc.start, tokens[start].loc.start) < 0):
            start -= 1
        while end < len(tokens) and compare_pos(tokens[end].loc.end, loc.end) <= 0:
            end += 1
        while start < end and compare_pos(tokens[start].loc.start, loc.start) < 0:
            start += 1
        while end > start and compare_pos(loc.end, tokens[end - 1].loc.end) < 0:
            end -= 1

        self.start_token_index = start
        self.end_token_index = end
        return start, end


def parse(source: str, config: ReprintConfig | None = None, **overrides: Any) -> File:
    """Parse JavaScript source into a reprintable ``File`` tree.

    Args:
        source: Program text
        config: Configuration (default: the ambient ContextVar config)
        **overrides: Individual options replacing those of ``config``

    Returns:
        A ``File`` node. Edit it in place and pass it to ``reprint``.

    Raises:
        ConfigurationError: If ``source`` contains tabs and no usable tab
            width, or an option is invalid
        ParseError: If esprima rejects the source
    """
    config = normalize_options(config, **overrides)
    tab_width = config.effective_tab_width

    lines = from_string(source, tab_width, config.source_file_name)
    text = lines.to_string(
        tab_width=tab_width,
        use_tabs=False,
        reuse_whitespace=False,
        line_terminator="\n",
    )

    data = _run_esprima(text, config)
    raw_tokens = data.pop("tokens", None) or []
    raw_comments = data.pop("comments", None) or []
    errors = data.pop("errors", None) or []
    if errors:
        logger.debug("parser recovered from %d errors", len(errors))

    program = from_dict(data)
    if not isinstance(program, Program):
        raise ReprintError(f"parser returned {program.type}, expected Program")

    tokens = tuple(_finish_token(Token.from_dict(raw), lines) for raw in raw_tokens)
    comments = [from_dict(raw) for raw in raw_comments]

    if program.loc is None:
        program.loc = SourceLocation(lines.first_pos(), lines.last_pos())
    # Comments outside the first and last statement still belong to the program.
    program.loc = get_true_loc(program, lines, comments)

    file = File(program=program, name=config.source_file_name)
    file.loc = SourceLocation(lines.first_pos(), lines.last_pos())
    if config.tokens:
        file.tokens = list(tokens)

    attach(comments, program if program.body else file, lines)

    logger.debug(
        "parsed %d lines: %d tokens, %d comments",
        len(lines),
        len(tokens),
        len(comments),
    )
    return TreeCopier(lines, tokens).copy(file)


def _finish_token(token: Token, lines: Lines) -> Token:
    if token.value:
        return token
    return replace(token, value=lines.slice_string(token.loc.start, token.loc.end))


__all__ = ["TreeCopier", "parse"]
