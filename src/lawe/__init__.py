"""LAWE wiki markup lexer: scan cursor, token model and handlers."""

from __future__ import annotations

from lawe.cursor import NUL, Mark, ScanCursor
from lawe.errors import LexError
from lawe.lexer import Lexer, tokenize
from lawe.links import LinkTarget, LinkType, link_targets, validate_link_target
from lawe.tokens import CalloutKind, SourcePosition, Token, TokenKind

__version__ = "0.1.0"

__all__ = [
    "NUL",
    "CalloutKind",
    "LexError",
    "Lexer",
    "LinkTarget",
    "LinkType",
    "Mark",
    "ScanCursor",
    "SourcePosition",
    "Token",
    "TokenKind",
    "link_targets",
    "tokenize",
    "validate_link_target",
]
