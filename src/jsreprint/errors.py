"""Exception classes for jsreprint.

Provides the error taxonomy shared by every layer of the reprinter.

"Unreprintable" subtrees are deliberately absent from this module: the tree
differ reports them as a plain ``False`` return value, never as an exception.
"""

from __future__ import annotations


class ReprintError(Exception):
    """Base exception for all jsreprint errors.

    Subclass this for specific error categories.
    """

    pass


def _format_location(
    line: int | None,
    column: int | None,
    source_file: str | None = None,
) -> str:
    location = ""
    if source_file:
        location = f"{source_file}:"
    if line is not None:
        location += f"{line}:"
        if column is not None:
            location += f"{column}:"
    if location:
        location = location.rstrip(":") + " "
    return location


class ConfigurationError(ReprintError):
    """Invalid or missing configuration.

    Raised before any text is produced, e.g. when a buffer containing tab
    characters is built without a tab width, or when an option is out of range.
    """

    pass


class LocationIntegrityError(ReprintError):
    """An internal location invariant was violated.

    Indicates a bug in an upstream producer (the parser or a malformed AST
    edit): a replacement whose start follows its end, a token range that
    disagrees with the character range of its node, a comment overlapping a
    node, and so on. Always fatal; no partial output is produced.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize integrity error with an optional position.

        Args:
            message: Description of the violated invariant
            line: Line number where the problem was detected (1-indexed)
            column: Column where the problem was detected (0-indexed)
        """
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{_format_location(line, column)}{message}")


class ParseError(ReprintError):
    """Error raised by the external parser.

    The parser's own exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            line: Line number where error occurred (1-indexed)
            column: Column where error occurred (0-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.line = line
        self.column = column
        self.source_file = source_file
        super().__init__(f"{_format_location(line, column, source_file)}{message}")


__all__ = [
    "ConfigurationError",
    "LocationIntegrityError",
    "ParseError",
    "ReprintError",
]
