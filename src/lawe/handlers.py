"""Per-construct handlers and the default dispatch table.

A handler is a plain function ``handler(ctx) -> bool``. It inspects the
input with ``peek``/``match_string``; if the construct is not its own it
returns False without consuming anything. Otherwise it consumes exactly the
lexeme with ``advance``, emits the token(s) built with ``create_token`` and
returns True.

Handlers are looked up by the character at the cursor in ``DEFAULT_HANDLERS``
and tried in order; ``handle_whitespace`` covers any other whitespace and
``handle_text`` is the fallback.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from lawe.cursor import ScanCursor
from lawe.logger import get_logger
from lawe.tokens import CalloutKind, Token, TokenKind

logger = get_logger(__name__)


@dataclass(slots=True)
class LexContext:
    """Shared state handed to every handler: cursor, output and open markers."""

    cursor: ScanCursor
    tokens: list[Token] = field(default_factory=list)
    open_stack: list[Token] = field(default_factory=list)

    def emit(self, token: Token) -> Token:
        self.tokens.append(token)
        return token

    def open(self, token: Token) -> Token:
        self.open_stack.append(token)
        return self.emit(token)

    def is_open(self, kind: TokenKind) -> bool:
        return any(t.kind is kind for t in self.open_stack)

    def close(self, kind: TokenKind) -> Token | None:
        """Remove and return the most recent open marker of *kind*, if any."""
        for i in range(len(self.open_stack) - 1, -1, -1):
            if self.open_stack[i].kind is kind:
                return self.open_stack.pop(i)
        return None


Handler = Callable[[LexContext], bool]


# ----------------------------------------------------------------------
# Formatting: ** // __
# ----------------------------------------------------------------------

_FORMATTING = {
    "**": (TokenKind.BOLD_OPEN, TokenKind.BOLD_CLOSE),
    "//": (TokenKind.ITALIC_OPEN, TokenKind.ITALIC_CLOSE),
    "__": (TokenKind.UNDERLINE_OPEN, TokenKind.UNDERLINE_CLOSE),
}


def handle_formatting(ctx: LexContext) -> bool:
    c = ctx.cursor
    for delim, (open_kind, close_kind) in _FORMATTING.items():
        if not c.match_string(delim):
            continue
        start = c.mark()
        c.advance(len(delim))
        if ctx.is_open(open_kind):
            ctx.emit(c.create_token(close_kind, delim, start=start))
            ctx.close(open_kind)
        else:
            ctx.open(c.create_token(open_kind, delim, start=start))
        return True
    return False


# ----------------------------------------------------------------------
# Headings: = at line start opens, a later run of = closes
# ----------------------------------------------------------------------


def handle_heading(ctx: LexContext) -> bool:
    c = ctx.cursor
    if c.peek() != "=":
        return False

    at_line_start = c.at_line_start()
    if not at_line_start and not ctx.is_open(TokenKind.HEADING_OPEN):
        return False

    count = 0
    while c.peek(count) == "=":
        count += 1
    start = c.mark()
    c.advance(count)
    delim = "=" * count

    if at_line_start:
        ctx.open(c.create_token(TokenKind.HEADING_OPEN, delim, start=start))
    else:
        ctx.emit(c.create_token(TokenKind.HEADING_CLOSE, delim, start=start))
        ctx.close(TokenKind.HEADING_OPEN)
    return True


# ----------------------------------------------------------------------
# Line breaks and horizontal rules
# ----------------------------------------------------------------------


def handle_linebreak(ctx: LexContext) -> bool:
    c = ctx.cursor
    if not (c.match_string("\\\\") and c.peek(2) in (" ", "\n")):
        return False
    start = c.mark()
    c.advance(2)
    ctx.emit(c.create_token(TokenKind.LINEBREAK, "\\\\", start=start))
    return True


def handle_horizontal_rule(ctx: LexContext) -> bool:
    c = ctx.cursor
    if not (c.at_line_start() and c.match_string("----") and c.peek(4) != "-"):
        return False
    start = c.mark()
    c.advance(4)
    ctx.emit(c.create_token(TokenKind.HORIZ_RULE, "----", start=start))
    return True


# ----------------------------------------------------------------------
# Whitespace and text
# ----------------------------------------------------------------------


def handle_whitespace(ctx: LexContext) -> bool:
    c = ctx.cursor
    ch = c.peek()
    start = c.mark()

    if ch == "\n":
        c.advance()
        ctx.emit(c.create_token(TokenKind.NEWLINE, "\n", start=start))
        return True

    if not ch.isspace():
        return False

    chars = []
    while not c.is_at_end() and c.peek().isspace() and c.peek() != "\n":
        chars.append(c.advance())
    ctx.emit(c.create_token(TokenKind.WHITESPACE, "".join(chars), start=start))
    return True


# Characters that end a run of plain text
_TEXT_STOP = frozenset("_*/[]=\n|-`\\<{}")


def handle_text(ctx: LexContext) -> bool:
    c = ctx.cursor
    if c.is_at_end():
        return False
    start = c.mark()
    chars = []
    while not c.is_at_end():
        ch = c.peek()
        if ch.isspace() or ch in _TEXT_STOP:
            break
        chars.append(c.advance())

    if not chars:
        # A lone special character nobody else claimed
        chars.append(c.advance())
    ctx.emit(c.create_token(TokenKind.TEXT, "".join(chars), start=start))
    return True


# ----------------------------------------------------------------------
# Pseudo-HTML tags: <callout ...>, <sub>, <sup>
# ----------------------------------------------------------------------

_TAGS = {
    "callout": (TokenKind.CALLOUT_OPEN, TokenKind.CALLOUT_CLOSE),
    "sub": (TokenKind.SUB_OPEN, TokenKind.SUB_CLOSE),
    "sup": (TokenKind.SUP_OPEN, TokenKind.SUP_CLOSE),
}


def _is_tag_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _scan_tag_name(c: ScanCursor, closing: bool) -> tuple[str, int] | None:
    """Look ahead for a known tag name; return (name, chars before the name end)."""
    i = 2 if closing else 1
    begin = i
    while _is_tag_letter(c.peek(i)):
        i += 1
    end_ch = c.peek(i)
    terminators = (">", "\0") if closing else (" ", ">", "\n", "\0")
    if end_ch not in terminators:
        return None
    name = c.raw_input[c.offset + begin : c.offset + i]
    if name not in _TAGS:
        return None
    return name, i


def _parse_tag_attributes(c: ScanCursor) -> dict[str, str]:
    """Consume ``name=value`` pairs up to (not including) the closing ``>``."""
    attrs: dict[str, str] = {}
    while not c.is_at_end() and c.peek() != ">":
        while not c.is_at_end() and c.peek().isspace():
            c.advance()
        if c.peek() == ">":
            break

        name = []
        while not c.is_at_end() and _is_tag_letter(c.peek()):
            name.append(c.advance())
        if not name:
            break

        while not c.is_at_end() and (c.peek().isspace() or c.peek() == "="):
            c.advance()

        value = []
        if c.peek() == '"':
            c.advance()
            while not c.is_at_end() and c.peek() != '"':
                value.append(c.advance())
            if c.peek() == '"':
                c.advance()
        else:
            while not c.is_at_end() and not c.peek().isspace() and c.peek() != ">":
                value.append(c.advance())

        attrs["".join(name)] = "".join(value)
    return attrs


def _callout_kind(value: str | None) -> CalloutKind:
    if not value:
        return CalloutKind.DEFAULT
    try:
        return CalloutKind(value.lower())
    except ValueError:
        logger.warning("unknown callout type %r, using default", value)
        return CalloutKind.DEFAULT


def handle_pseudo_html(ctx: LexContext) -> bool:
    c = ctx.cursor
    if c.peek() != "<":
        return False
    closing = c.peek(1) == "/"
    found = _scan_tag_name(c, closing)
    if found is None:
        return False

    name, name_end = found
    open_kind, close_kind = _TAGS[name]
    start = c.mark()
    c.advance(name_end)

    attrs = _parse_tag_attributes(c) if name == "callout" and not closing else {}

    while not c.is_at_end() and c.peek() != ">":
        c.advance()
    if c.peek() == ">":
        c.advance()

    text = c.raw_input[start.offset : c.offset]
    if closing:
        ctx.emit(c.create_token(close_kind, text, start=start))
        ctx.close(open_kind)
    elif name == "callout":
        kind = _callout_kind(attrs.get("type"))
        title = attrs.get("title", "")
        ctx.open(c.create_token(open_kind, text, kind, title, start=start))
    else:
        ctx.open(c.create_token(open_kind, text, start=start))
    return True


# ----------------------------------------------------------------------
# Images {{path|caption}} and links [[target|label]]
# ----------------------------------------------------------------------


def handle_image(ctx: LexContext) -> bool:
    c = ctx.cursor
    start = c.mark()
    if c.match_string("{{"):
        c.advance(2)
        ctx.open(c.create_token(TokenKind.IMAGE_OPEN, "{{", start=start))
        return True
    if not ctx.is_open(TokenKind.IMAGE_OPEN):
        return False
    if c.match_string("}}"):
        c.advance(2)
        ctx.emit(c.create_token(TokenKind.IMAGE_CLOSE, "}}", start=start))
        ctx.close(TokenKind.IMAGE_OPEN)
        return True
    if c.peek() == "|":
        c.advance()
        ctx.emit(c.create_token(TokenKind.IMAGE_PIPE, "|", start=start))
        return True
    return False


def handle_link(ctx: LexContext) -> bool:
    c = ctx.cursor
    start = c.mark()
    if c.match_string("[["):
        c.advance(2)
        ctx.open(c.create_token(TokenKind.LINK_OPEN, "[[", start=start))
        return True
    if not ctx.is_open(TokenKind.LINK_OPEN):
        return False
    if c.match_string("]]"):
        c.advance(2)
        ctx.emit(c.create_token(TokenKind.LINK_CLOSE, "]]", start=start))
        ctx.close(TokenKind.LINK_OPEN)
        return True
    if c.peek() == "|":
        c.advance()
        ctx.emit(c.create_token(TokenKind.LINK_PIPE, "|", start=start))
        return True
    return False


# ----------------------------------------------------------------------
# Triple parentheses: (((command|date)))
# ----------------------------------------------------------------------

TRIPLE_PAREN_COMMANDS = frozenset({"unfinished", "contextwarn", "external"})

_DATE_RE = re.compile(r"[a-zA-Z0-9\-/\s:,.]+")


def parse_triple_parentheses(content: str) -> tuple[str, str] | None:
    """Split ``command|date`` and validate both parts; None if invalid."""
    parts = content.split("|")
    if len(parts) != 2:
        return None
    command, date = (p.strip() for p in parts)
    if command not in TRIPLE_PAREN_COMMANDS:
        return None
    if not date or not _DATE_RE.fullmatch(date):
        return None
    return command, date


def handle_triple_parentheses(ctx: LexContext) -> bool:
    c = ctx.cursor
    if not c.match_string("((("):
        return False
    source = c.raw_input
    close = source.find(")))", c.offset + 3)
    if close == -1:
        return False
    parsed = parse_triple_parentheses(source[c.offset + 3 : close])
    if parsed is None:
        return False

    command, date = parsed
    start = c.mark()
    c.advance(close + 3 - c.offset)
    ctx.emit(
        c.create_token(
            TokenKind.TRIPLE_PARENTHESES,
            source[start.offset : c.offset],
            start=start,
            attributes={"command": command, "date": date},
        )
    )
    return True


# ----------------------------------------------------------------------
# Dispatch table
# ----------------------------------------------------------------------

DEFAULT_HANDLERS: dict[str, tuple[Handler, ...]] = {
    "(": (handle_triple_parentheses,),
    "<": (handle_pseudo_html,),
    "*": (handle_formatting,),
    "/": (handle_formatting,),
    "_": (handle_formatting,),
    "\\": (handle_linebreak,),
    "-": (handle_horizontal_rule,),
    "=": (handle_heading,),
    "[": (handle_link,),
    "]": (handle_link,),
    "|": (handle_link, handle_image),
    "{": (handle_image,),
    "}": (handle_image,),
    "\n": (handle_whitespace,),
}

FALLBACK_HANDLER: Handler = handle_text
