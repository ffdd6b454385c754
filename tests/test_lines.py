"""Tests for jsreprint.lines: the immutable text buffer."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jsreprint.errors import ConfigurationError, LocationIntegrityError
from jsreprint.lines import EMPTY_LINES, concat, count_spaces, from_string
from jsreprint.location import Position

# Tab-free text: tabs need an explicit width and are covered separately.
texts = st.text(alphabet="ab; \n", max_size=60)


class TestFromString:
    def test_single_line(self) -> None:
        lines = from_string("var a;")
        assert len(lines) == 1
        assert lines.to_string() == "var a;"

    def test_indentation_is_counted(self) -> None:
        lines = from_string("a\n    b")
        assert lines.get_indent_at(2) == 4
        assert lines.get_line_length(2) == 5

    def test_tabs_expand_to_tab_stops(self) -> None:
        lines = from_string("\tx\n \ty", tab_width=4)
        assert lines.get_indent_at(1) == 4
        assert lines.get_indent_at(2) == 4

    def test_tabs_without_width_raise(self) -> None:
        with pytest.raises(ConfigurationError):
            from_string("\tx")

    def test_detects_crlf_terminator(self) -> None:
        lines = from_string("a\r\nb")
        assert len(lines) == 2
        assert lines.terminator == "\r\n"

    def test_all_ecmascript_terminators_split(self) -> None:
        assert len(from_string("a\nb\rc\u2028d\u2029e")) == 5

    def test_lines_value_is_returned_unchanged(self) -> None:
        lines = from_string("abc")
        assert from_string(lines) is lines


class TestCountSpaces:
    def test_spaces(self) -> None:
        assert count_spaces("   ") == 3

    def test_tab_advances_to_next_stop(self) -> None:
        assert count_spaces("  \t", 4) == 4
        assert count_spaces("\t\t", 2) == 4

    def test_zero_width_characters(self) -> None:
        assert count_spaces("\v\f\ufeff ") == 1


class TestPositions:
    def test_char_at_reads_indent_as_space(self) -> None:
        lines = from_string("a\n  b")
        assert lines.char_at(Position(2, 0)) == " "
        assert lines.char_at(Position(2, 2)) == "b"

    def test_char_at_end_of_line_is_newline(self) -> None:
        lines = from_string("ab\ncd")
        assert lines.char_at(Position(1, 2)) == "\n"
        assert lines.char_at(Position(2, 2)) == ""

    def test_next_and_prev_pos_cross_lines(self) -> None:
        lines = from_string("ab\ncd")
        assert lines.next_pos(Position(1, 2)) == Position(2, 0)
        assert lines.prev_pos(Position(2, 0)) == Position(1, 2)
        assert lines.next_pos(Position(2, 2)) is None
        assert lines.prev_pos(Position(1, 0)) is None

    def test_skip_spaces_forward(self) -> None:
        lines = from_string("a   \n  b")
        assert lines.skip_spaces(Position(1, 1)) == Position(2, 2)

    def test_skip_spaces_backward_lands_after_character(self) -> None:
        lines = from_string("a   \n  b")
        assert lines.skip_spaces(Position(2, 2), backward=True) == Position(1, 1)

    def test_skip_spaces_only_whitespace_left(self) -> None:
        lines = from_string("a   ")
        assert lines.skip_spaces(Position(1, 1)) is None

    def test_preceded_only_by_whitespace(self) -> None:
        lines = from_string("  foo(bar)")
        assert lines.is_preceded_only_by_whitespace(Position(1, 2))
        assert not lines.is_preceded_only_by_whitespace(Position(1, 6))


class TestSlicing:
    def test_slice_within_line(self) -> None:
        lines = from_string("if (a) {\n    b();\n}")
        assert str(lines.slice(Position(2, 4), Position(2, 8))) == "b();"

    def test_slice_across_lines(self) -> None:
        lines = from_string("one\ntwo\nthree")
        assert lines.slice_string(Position(1, 1), Position(3, 2)) == "ne\ntwo\nth"

    def test_slice_backward_raises(self) -> None:
        lines = from_string("abc")
        with pytest.raises(LocationIntegrityError):
            lines.slice(Position(1, 2), Position(1, 1))

    def test_out_of_range_positions_clamp(self) -> None:
        lines = from_string("abc")
        assert str(lines.slice(Position(1, 1), Position(9, 9))) == "bc"

    def test_trim(self) -> None:
        assert str(from_string("  \n  x y \n ").trim()) == "x y"


class TestIndentation:
    def test_indent_every_line(self) -> None:
        lines = from_string("a\nb").indent(2)
        assert lines.to_string() == "  a\n  b"

    def test_indent_tail_leaves_first_line(self) -> None:
        lines = from_string("a\nb").indent_tail(2)
        assert lines.to_string() == "a\n  b"

    def test_locked_lines_keep_indentation(self) -> None:
        lines = from_string("`a\nb`").lock_indent_tail().indent(4)
        assert lines.to_string() == "    `a\nb`"

    def test_empty_lines_are_not_indented(self) -> None:
        lines = from_string("a\n\nb").indent(2)
        assert lines.to_string() == "  a\n\n  b"

    def test_strip_margin(self) -> None:
        lines = from_string("a\n    b\n  c").strip_margin(2, skip_first_line=True)
        assert lines.to_string() == "a\n  b\nc"

    def test_to_string_with_tabs(self) -> None:
        lines = from_string("a\n        b")
        assert lines.to_string(tab_width=4, use_tabs=True, reuse_whitespace=False) == "a\n\t\tb"

    def test_reuse_whitespace_keeps_original_tabs(self) -> None:
        lines = from_string("a\n\tb", tab_width=4)
        assert lines.to_string(tab_width=4) == "a\n\tb"
        assert lines.to_string(tab_width=4, reuse_whitespace=False) == "a\n    b"

    def test_guess_tab_width(self) -> None:
        source = "function f() {\n  if (a) {\n    b();\n  }\n}"
        assert from_string(source).guess_tab_width() == 2

    def test_guess_tab_width_defaults_to_two(self) -> None:
        assert from_string("a;\nb;").guess_tab_width() == 2

    def test_line_terminator_option(self) -> None:
        assert from_string("a\nb").to_string(line_terminator="\r\n") == "a\r\nb"


class TestJoining:
    def test_concat_continues_lines(self) -> None:
        assert str(concat(["x", " = ", "1;"])) == "x = 1;"

    def test_concat_multiline_pieces(self) -> None:
        assert str(concat(["{\n", from_string("a;").indent(2), "\n}"])) == "{\n  a;\n}"

    def test_indentation_after_line_break_stays_regenerable(self) -> None:
        block = concat(["{\n", from_string("a();").indent(4), "\n}"])
        assert block.get_indent_at(2) == 4
        options = {"tab_width": 4, "reuse_whitespace": False}
        assert block.to_string(use_tabs=True, **options) == "{\n\ta();\n}"
        assert block.to_string(tab_width=2) == "{\n    a();\n}"
        assert block.indent(2).to_string() == "  {\n      a();\n  }"

    def test_join_with_separator(self) -> None:
        assert str(from_string(", ").join(["a", "b", "c"])) == "a, b, c"

    def test_join_skips_empty_pieces_but_keeps_separators(self) -> None:
        assert str(from_string("; ").join(["", "b", ""])) == "; b; "

    def test_empty_concat(self) -> None:
        assert concat([]).is_empty()
        assert EMPTY_LINES.is_empty()


class TestLinesProperties:
    @given(text=texts)
    @settings(max_examples=200)
    def test_to_string_round_trips(self, text: str) -> None:
        assert from_string(text).to_string() == text

    @given(text=texts, data=st.data())
    @settings(max_examples=200)
    def test_slice_then_concat_round_trips(self, text: str, data: st.DataObject) -> None:
        lines = from_string(text)
        line = data.draw(st.integers(min_value=1, max_value=len(lines)))
        column = data.draw(st.integers(min_value=0, max_value=lines.get_line_length(line)))
        pos = Position(line, column)
        left = lines.slice(lines.first_pos(), pos)
        right = lines.slice(pos, lines.last_pos())
        assert concat([left, right]).to_string() == text

    @given(text=texts, by=st.integers(min_value=1, max_value=8))
    @settings(max_examples=100)
    def test_indent_is_reversible(self, text: str, by: int) -> None:
        lines = from_string(text)
        assert lines.indent(by).indent(-by).to_string() == text

    @given(text=texts)
    @settings(max_examples=100)
    def test_slice_string_matches_slice(self, text: str) -> None:
        lines = from_string(text)
        assert lines.slice_string() == str(lines.slice(lines.first_pos(), lines.last_pos()))
