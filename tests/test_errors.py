"""Tests for the jsreprint error taxonomy."""

from __future__ import annotations

import pytest

from jsreprint import parse
from jsreprint.errors import (
    ConfigurationError,
    LocationIntegrityError,
    ParseError,
    ReprintError,
)
from jsreprint.lines import from_string
from jsreprint.location import Position


class TestParseErrorFormatting:
    def test_message_only(self) -> None:
        err = ParseError("unexpected token")
        assert str(err) == "unexpected token"
        assert err.line is None
        assert err.column is None

    def test_with_line(self) -> None:
        assert str(ParseError("bad syntax", line=42)) == "42 bad syntax"

    def test_with_line_and_column(self) -> None:
        assert str(ParseError("missing bracket", line=10, column=5)) == "10:5 missing bracket"

    def test_with_source_file(self) -> None:
        err = ParseError("error", line=1, column=1, source_file="test.js")
        assert str(err) == "test.js:1:1 error"
        assert err.source_file == "test.js"


class TestLocationIntegrityError:
    def test_formatting(self) -> None:
        err = LocationIntegrityError("start after end", 3, 7)
        assert str(err) == "3:7 start after end"
        assert err.message == "start after end"

    def test_raised_for_reversed_slice(self) -> None:
        lines = from_string("abc\ndef")
        with pytest.raises(LocationIntegrityError):
            lines.slice(Position(2, 1), Position(1, 0))


class TestHierarchy:
    @pytest.mark.parametrize("cls", [ConfigurationError, LocationIntegrityError, ParseError])
    def test_subclasses_reprint_error(self, cls: type[Exception]) -> None:
        assert issubclass(cls, ReprintError)

    def test_catch_all(self) -> None:
        with pytest.raises(ReprintError):
            parse("var x = ;")

    def test_tabs_without_width(self) -> None:
        with pytest.raises(ConfigurationError):
            from_string("\tx", tab_width=None)
