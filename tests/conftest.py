"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lawe.cursor import ScanCursor
from lawe.lexer import tokenize
from lawe.tokens import SourcePosition, Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.kind != TokenKind.EOF]

    return _lex


@pytest.fixture
def consume():
    """Return a helper that advances a cursor one character per char of *text*."""

    def _consume(cursor: ScanCursor, text: str) -> None:
        for expected in text:
            assert cursor.advance() == expected

    return _consume


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def find_tokens(tokens: list[Token], kind: TokenKind) -> list[Token]:
    """Return all tokens of the given kind."""
    return [t for t in tokens if t.kind == kind]


def true_position(source: str, offset: int) -> SourcePosition:
    """Line/column of *offset* computed independently of the cursor."""
    before = source[:offset]
    line = before.count("\n") + 1
    column = offset - (before.rfind("\n") + 1) + 1
    return SourcePosition(line, column)


def token_offsets(tokens: list[Token]) -> list[int]:
    """Start offsets of each token, assuming a lossless token stream."""
    offsets = []
    pos = 0
    for t in tokens:
        offsets.append(pos)
        pos += len(t.text)
    return offsets
