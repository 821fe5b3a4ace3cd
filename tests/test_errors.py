"""Test lexer error messages, position accuracy, and context snippets."""

import pytest

from lawe.errors import LexError
from lawe.lexer import Lexer
from lawe.tokens import SourcePosition


def lex_without_fallback(source: str, filename: str = "input.lawe") -> None:
    Lexer(source, filename, fallback=None).tokenize()


class TestErrorPositions:
    def test_first_line(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("** x")
        err = exc_info.value
        assert err.position == SourcePosition(1, 4)

    def test_error_on_second_line(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("**\nq")
        err = exc_info.value
        assert err.position.line == 2
        assert err.position.column == 1


class TestErrorFormatting:
    def test_format_contains_line(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("** more text")
        formatted = exc_info.value.format()
        assert "** more text" in formatted

    def test_format_contains_carets(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("q")
        formatted = exc_info.value.format()
        assert "^" in formatted

    def test_format_contains_error_prefix(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("q")
        assert exc_info.value.format().startswith("error:")

    def test_format_contains_position(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("q")
        assert "1:1" in exc_info.value.format()

    def test_format_with_custom_filename(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("q", filename="page.lawe")
        assert "page.lawe" in exc_info.value.format("page.lawe")

    def test_single_caret_under_column(self):
        err = LexError("boom", SourcePosition(1, 3), "abcd")
        assert err.format().splitlines()[-1] == "  |   ^"

    def test_unhandled_character_underlines_one_char(self):
        err = LexError("unhandled character 'q'", SourcePosition(1, 1), "qz")
        assert err.format().splitlines()[-1] == "  | ^"

    def test_length_underlines_lexeme(self):
        err = LexError("boom", SourcePosition(1, 2), "a[[b]]", length=2)
        assert err.format().splitlines()[-1] == "  |  ^^"

    def test_length_clipped_to_line_end(self):
        err = LexError("boom", SourcePosition(1, 3), "abcd\nefgh", length=10)
        assert err.underline_length == 2
        assert err.source_line == "abcd"

    def test_multiline_error_position(self):
        with pytest.raises(LexError) as exc_info:
            lex_without_fallback("**\n**\nq")
        assert "3:1" in exc_info.value.format()
