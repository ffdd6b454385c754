"""Token and TokenType definitions for the flat token array.

The parser returns every lexical token of the source alongside the AST.
Nodes remember the half-open slice of this array they span, which is how
``PathCursor.has_parens`` can look at the punctuation surrounding a node.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from jsreprint.location import SourceLocation, location_from_dict


class TokenType(Enum):
    """Token categories reported by the parser."""

    BOOLEAN = "Boolean"
    EOF = "EOF"
    IDENTIFIER = "Identifier"
    KEYWORD = "Keyword"
    NULL = "Null"
    NUMERIC = "Numeric"
    PUNCTUATOR = "Punctuator"
    STRING = "String"
    REGULAR_EXPRESSION = "RegularExpression"
    TEMPLATE = "Template"
    JSX_IDENTIFIER = "JSXIdentifier"
    JSX_TEXT = "JSXText"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    Attributes:
        type: Token category
        value: Exact source text of the token
        loc: Span of the token in the parsed buffer

    """

    type: TokenType
    value: str
    loc: SourceLocation

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.loc})"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        """Build a Token from the parser's plain-dict representation.

        Unknown token categories are reported as punctuators; the reprinter
        only ever inspects token values.
        """
        try:
            kind = TokenType(data.get("type"))
        except ValueError:
            kind = TokenType.PUNCTUATOR
        loc = location_from_dict(data.get("loc"))
        if loc is None:
            raise ValueError(f"token {data.get('value')!r} has no location")
        value = data.get("value")
        return cls(type=kind, value=value if isinstance(value, str) else "", loc=loc)


__all__ = ["Token", "TokenType"]
