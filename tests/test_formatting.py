"""Test inline formatting markers: ** // __"""

from lawe.lexer import Lexer
from lawe.tokens import SourcePosition, TokenKind

from tests.conftest import assert_kinds, assert_texts


class TestBold:
    def test_open_text_close(self, lex):
        tokens = lex("**bold**")
        assert_kinds(tokens, [TokenKind.BOLD_OPEN, TokenKind.TEXT, TokenKind.BOLD_CLOSE])
        assert_texts(tokens, ["**", "bold", "**"])

    def test_positions(self, lex):
        tokens = lex("**bold**")
        assert [t.position for t in tokens] == [
            SourcePosition(1, 1),
            SourcePosition(1, 3),
            SourcePosition(1, 7),
        ]

    def test_reopens_after_close(self, lex):
        tokens = lex("**a** **b**")
        kinds = [t.kind for t in tokens if t.kind != TokenKind.TEXT]
        assert kinds == [
            TokenKind.BOLD_OPEN,
            TokenKind.BOLD_CLOSE,
            TokenKind.WHITESPACE,
            TokenKind.BOLD_OPEN,
            TokenKind.BOLD_CLOSE,
        ]


class TestItalicUnderline:
    def test_italic(self, lex):
        tokens = lex("//it//")
        assert_kinds(tokens, [TokenKind.ITALIC_OPEN, TokenKind.TEXT, TokenKind.ITALIC_CLOSE])

    def test_underline(self, lex):
        tokens = lex("__u__")
        assert_kinds(
            tokens, [TokenKind.UNDERLINE_OPEN, TokenKind.TEXT, TokenKind.UNDERLINE_CLOSE]
        )


class TestNesting:
    def test_italic_inside_bold(self, lex):
        tokens = lex("**a //b// c**")
        assert_kinds(
            tokens,
            [
                TokenKind.BOLD_OPEN,
                TokenKind.TEXT,
                TokenKind.WHITESPACE,
                TokenKind.ITALIC_OPEN,
                TokenKind.TEXT,
                TokenKind.ITALIC_CLOSE,
                TokenKind.WHITESPACE,
                TokenKind.TEXT,
                TokenKind.BOLD_CLOSE,
            ],
        )

    def test_overlapping_close_removes_matching_open(self):
        lexer = Lexer("**a //b** c")
        lexer.tokenize()
        assert [t.kind for t in lexer.unclosed] == [TokenKind.ITALIC_OPEN]


class TestSingleMarkers:
    def test_lone_star_is_text(self, lex):
        tokens = lex("*")
        assert_kinds(tokens, [TokenKind.TEXT])
        assert tokens[0].text == "*"

    def test_star_inside_word(self, lex):
        tokens = lex("a*b")
        assert_texts(tokens, ["a", "*", "b"])

    def test_unclosed_bold(self):
        lexer = Lexer("**open")
        lexer.tokenize()
        assert len(lexer.unclosed) == 1
        assert lexer.unclosed[0].position == SourcePosition(1, 1)
