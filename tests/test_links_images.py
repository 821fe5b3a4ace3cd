"""Test link [[...|...]] and image {{...|...}} markers."""

from lawe.lexer import Lexer
from lawe.tokens import SourcePosition, TokenKind

from tests.conftest import assert_kinds, assert_texts


class TestLinks:
    def test_link_with_label(self, lex):
        tokens = lex("[[Page|label]]")
        assert_kinds(
            tokens,
            [
                TokenKind.LINK_OPEN,
                TokenKind.TEXT,
                TokenKind.LINK_PIPE,
                TokenKind.TEXT,
                TokenKind.LINK_CLOSE,
            ],
        )
        assert tokens[2].position == SourcePosition(1, 7)
        assert tokens[4].position == SourcePosition(1, 13)

    def test_link_without_label(self, lex):
        tokens = lex("[[Page]]")
        assert_kinds(tokens, [TokenKind.LINK_OPEN, TokenKind.TEXT, TokenKind.LINK_CLOSE])

    def test_close_without_open_is_text(self, lex):
        tokens = lex("a]]")
        assert_texts(tokens, ["a", "]", "]"])

    def test_single_bracket_is_text(self, lex):
        tokens = lex("[x]")
        assert_texts(tokens, ["[", "x", "]"])

    def test_pipe_outside_link_is_text(self, lex):
        tokens = lex("a|b")
        assert_kinds(tokens, [TokenKind.TEXT, TokenKind.TEXT, TokenKind.TEXT])

    def test_unclosed_link(self):
        lexer = Lexer("see [[Page")
        lexer.tokenize()
        assert [t.kind for t in lexer.unclosed] == [TokenKind.LINK_OPEN]
        assert lexer.unclosed[0].position == SourcePosition(1, 5)


class TestImages:
    def test_image_with_caption(self, lex):
        tokens = lex("{{img.png|Cap}}")
        assert_kinds(
            tokens,
            [
                TokenKind.IMAGE_OPEN,
                TokenKind.TEXT,
                TokenKind.IMAGE_PIPE,
                TokenKind.TEXT,
                TokenKind.IMAGE_CLOSE,
            ],
        )
        assert_texts(tokens, ["{{", "img.png", "|", "Cap", "}}"])

    def test_close_braces_without_open_are_text(self, lex):
        tokens = lex("}}")
        assert_texts(tokens, ["}", "}"])

    def test_link_pipe_wins_inside_image(self, lex):
        tokens = lex("{{a|[[b|c]]}}")
        assert_kinds(
            tokens,
            [
                TokenKind.IMAGE_OPEN,
                TokenKind.TEXT,
                TokenKind.IMAGE_PIPE,
                TokenKind.LINK_OPEN,
                TokenKind.TEXT,
                TokenKind.LINK_PIPE,
                TokenKind.TEXT,
                TokenKind.LINK_CLOSE,
                TokenKind.IMAGE_CLOSE,
            ],
        )
