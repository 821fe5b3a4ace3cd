"""Token kinds, callout kinds, source positions and the Token record."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType


class TokenKind(Enum):
    TEXT = auto()

    # Inline formatting
    BOLD_OPEN = auto()  # **
    BOLD_CLOSE = auto()
    ITALIC_OPEN = auto()  # //
    ITALIC_CLOSE = auto()
    UNDERLINE_OPEN = auto()  # __
    UNDERLINE_CLOSE = auto()
    HEADING_OPEN = auto()  # = at line start
    HEADING_CLOSE = auto()

    # Structural atoms
    HORIZ_RULE = auto()  # ----
    LINEBREAK = auto()  # \\ followed by space or newline
    NEWLINE = auto()
    WHITESPACE = auto()  # run of non-newline whitespace

    CALLOUT_OPEN = auto()  # <callout type="..." title="...">
    CALLOUT_CLOSE = auto()

    SUB_OPEN = auto()  # <sub>
    SUB_CLOSE = auto()
    SUP_OPEN = auto()  # <sup>
    SUP_CLOSE = auto()

    # Tables
    TABLE_OPEN = auto()
    TABLE_CLOSE = auto()
    THEAD_OPEN = auto()
    THEAD_CLOSE = auto()
    TBODY_OPEN = auto()
    TBODY_CLOSE = auto()
    TFOOT_OPEN = auto()
    TFOOT_CLOSE = auto()
    TR_OPEN = auto()
    TR_CLOSE = auto()
    TD_OPEN = auto()
    TD_CLOSE = auto()
    TH_OPEN = auto()
    TH_CLOSE = auto()

    IMAGE_OPEN = auto()  # {{
    IMAGE_PIPE = auto()  # separates file path and caption
    IMAGE_CLOSE = auto()  # }}

    LINK_OPEN = auto()  # [[
    LINK_CLOSE = auto()  # ]]
    LINK_PIPE = auto()
    FOOTNOTE_OPEN = auto()
    FOOTNOTE_CLOSE = auto()
    CITATION_NEEDED = auto()
    TRIPLE_PARENTHESES = auto()  # (((command|date)))

    BLOCKQUOTE_OPEN = auto()
    BLOCKQUOTE_CLOSE = auto()
    AFFILI = auto()

    EOF = auto()


class CalloutKind(Enum):
    DEFAULT = "default"
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """Start of a lexeme, 1-based line and column."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexeme with its kind, start position and optional metadata.

    ``attributes`` is either ``None`` or a non-empty read-only mapping; an
    empty mapping is stored as ``None``. ``callout_kind`` and
    ``callout_title`` are set together, and only on ``CALLOUT_OPEN`` tokens.
    Tokens are hashable, attributes included.
    """

    kind: TokenKind
    text: str
    position: SourcePosition
    attributes: Mapping[str, str] | None = None
    callout_kind: CalloutKind | None = None
    callout_title: str | None = None

    def __post_init__(self) -> None:
        if (self.callout_kind is None) != (self.callout_title is None):
            raise ValueError("callout_kind and callout_title must be given together")
        if self.callout_kind is not None and self.kind is not TokenKind.CALLOUT_OPEN:
            raise ValueError(f"callout metadata is only valid on CALLOUT_OPEN, not {self.kind.name}")
        if self.attributes is not None:
            attrs = MappingProxyType(dict(self.attributes)) if self.attributes else None
            object.__setattr__(self, "attributes", attrs)

    def __hash__(self) -> int:
        attrs = frozenset(self.attributes.items()) if self.attributes is not None else None
        return hash(
            (self.kind, self.text, self.position, attrs, self.callout_kind, self.callout_title)
        )

    @property
    def is_callout(self) -> bool:
        return self.callout_kind is not None

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.position})"


# Paired open/close markers tracked on the lexer's open stack
CLOSING_KIND: dict[TokenKind, TokenKind] = {
    TokenKind.BOLD_OPEN: TokenKind.BOLD_CLOSE,
    TokenKind.ITALIC_OPEN: TokenKind.ITALIC_CLOSE,
    TokenKind.UNDERLINE_OPEN: TokenKind.UNDERLINE_CLOSE,
    TokenKind.HEADING_OPEN: TokenKind.HEADING_CLOSE,
    TokenKind.CALLOUT_OPEN: TokenKind.CALLOUT_CLOSE,
    TokenKind.SUB_OPEN: TokenKind.SUB_CLOSE,
    TokenKind.SUP_OPEN: TokenKind.SUP_CLOSE,
    TokenKind.IMAGE_OPEN: TokenKind.IMAGE_CLOSE,
    TokenKind.LINK_OPEN: TokenKind.LINK_CLOSE,
}
