"""LAWE lexer — converts markup source into a flat token stream."""

from __future__ import annotations

from lawe.cursor import Mark, ScanCursor
from lawe.errors import LexError
from lawe.handlers import (
    DEFAULT_HANDLERS,
    FALLBACK_HANDLER,
    Handler,
    LexContext,
    handle_whitespace,
)
from lawe.logger import get_logger
from lawe.tokens import Token, TokenKind

logger = get_logger(__name__)


class Lexer:
    """Tokenize LAWE source text into a list of Token objects.

    Each lexer owns one cursor and is single-use: the first ``tokenize`` call
    consumes the whole source and ends the list with one EOF token; later
    calls return that same list.
    """

    def __init__(
        self,
        source: str,
        filename: str = "input.lawe",
        *,
        fallback: Handler | None = FALLBACK_HANDLER,
    ) -> None:
        self._source = source
        self._filename = filename
        self._ctx = LexContext(ScanCursor(source))
        self._handlers: dict[str, tuple[Handler, ...]] = dict(DEFAULT_HANDLERS)
        self._fallback = fallback
        self._result: list[Token] | None = None

    @property
    def cursor(self) -> ScanCursor:
        return self._ctx.cursor

    @property
    def unclosed(self) -> list[Token]:
        """Open markers (bold, heading, link, ...) that were never closed."""
        return list(self._ctx.open_stack)

    def register(self, leading: str, handler: Handler, *, first: bool = False) -> None:
        """Add *handler* for input starting with the character *leading*.

        By default the handler runs after the existing handlers for that
        character; with ``first=True`` it runs before them. Whitespace characters
        start out with the built-in whitespace handler.
        """
        if len(leading) != 1:
            raise ValueError(f"leading must be a single character, got {leading!r}")
        default = (handle_whitespace,) if leading.isspace() else ()
        existing = self._handlers.get(leading, default)
        self._handlers[leading] = (handler, *existing) if first else (*existing, handler)

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        if self._result is not None:
            return self._result
        cursor = self._ctx.cursor
        while not cursor.is_at_end():
            self._step()

        self._ctx.emit(cursor.create_token(TokenKind.EOF, "", start=cursor.mark()))

        for token in self._ctx.open_stack:
            logger.warning(
                "%s:%s: unclosed %s %r", self._filename, token.position, token.kind.name, token.text
            )
        logger.debug("%s: %d tokens", self._filename, len(self._ctx.tokens))
        self._result = self._ctx.tokens
        return self._result

    def _candidates(self, ch: str) -> tuple[Handler, ...]:
        handlers = self._handlers.get(ch)
        if handlers is None:
            handlers = (handle_whitespace,) if ch.isspace() else ()
        if self._fallback is None:
            return handlers
        return (*handlers, self._fallback)

    def _step(self) -> None:
        cursor = self._ctx.cursor
        before = cursor.offset
        ch = cursor.peek()

        for handler in self._candidates(ch):
            if not handler(self._ctx):
                continue
            if cursor.offset <= before:
                name = getattr(handler, "__name__", repr(handler))
                raise self._error(f"handler {name} made no progress at {ch!r}", cursor.mark())
            return

        raise self._error(f"unhandled character {ch!r}", cursor.mark())

    def _error(self, message: str, mark: Mark) -> LexError:
        return LexError(message, mark.position, self._source)


def tokenize(source: str, filename: str = "input.lawe") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
