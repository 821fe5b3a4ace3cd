"""Scan cursor: position bookkeeping, lookahead, consumption and token construction.

The cursor never raises on out-of-range reads. ``peek`` and ``advance`` return
``NUL`` past either end of the input, and end of input is the boolean
``is_at_end()``, not an exception.

Token positions are produced in one of two ways:

* ``create_token(kind, text, start=mark)`` uses a ``Mark`` taken with
  ``mark()`` before the lexeme was consumed. This is exact for any lexeme,
  including ones that span newlines, and is what every bundled handler uses.
* ``create_token(kind, text)`` reconstructs the start column as
  ``column - len(text)``. Precondition: *text* was consumed by the
  immediately preceding ``advance`` calls and contains no newline. If a
  newline was consumed the column has been reset and the result is wrong
  (possibly below 1). This is a caller contract, checked only by a
  debug-mode ``assert``.

One column step is one code point; there is no Unicode width accounting.
"""

from __future__ import annotations

from dataclasses import dataclass

from lawe.tokens import CalloutKind, SourcePosition, Token, TokenKind

NUL = "\0"


@dataclass(frozen=True, slots=True)
class Mark:
    """Saved cursor state, 0-based offset with 1-based line and column."""

    offset: int
    line: int
    column: int

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(self.line, self.column)


class ScanCursor:
    """Single-pass cursor over an immutable source string.

    Not safe for concurrent use; create one per document.
    """

    __slots__ = ("_source", "_length", "_offset", "_line", "_column")

    def __init__(self, source: str) -> None:
        self._source = source
        self._length = len(source)
        self._offset = 0
        self._line = 1
        self._column = 1

    def __repr__(self) -> str:
        return f"ScanCursor(offset={self._offset}, line={self._line}, column={self._column})"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def raw_input(self) -> str:
        return self._source

    # ------------------------------------------------------------------
    # Queries (never mutate)
    # ------------------------------------------------------------------

    def is_at_end(self) -> bool:
        return self._offset >= self._length

    def peek(self, lookahead: int = 0) -> str:
        """Return the character *lookahead* places ahead, or NUL when out of range."""
        idx = self._offset + lookahead
        if 0 <= idx < self._length:
            return self._source[idx]
        return NUL

    def match_string(self, literal: str) -> bool:
        """Return True if the input at the current offset starts with *literal*."""
        if self._offset + len(literal) > self._length:
            return False
        return self._source.startswith(literal, self._offset)

    def at_line_start(self) -> bool:
        return self._offset == 0 or self._source[self._offset - 1] == "\n"

    def remaining(self) -> str:
        return self._source[self._offset :]

    def mark(self) -> Mark:
        return Mark(self._offset, self._line, self._column)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def advance(self, count: int = 1) -> str:
        """Consume *count* characters and return the first one consumed.

        At end of input this returns NUL and changes nothing. The consumed
        span is clamped to the end of input, and every newline in it is
        counted, so line and column stay exact for any *count*. A *count*
        below 1 raises ValueError.
        """
        if count < 1:
            raise ValueError(f"advance count must be at least 1, got {count}")
        if self._offset >= self._length:
            return NUL

        start = self._offset
        end = min(start + count, self._length)
        ch = self._source[start]
        self._offset = end

        if count == 1:
            if ch == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
            return ch

        newlines = self._source.count("\n", start, end)
        if newlines:
            self._line += newlines
            self._column = end - self._source.rindex("\n", start, end)
        else:
            self._column += end - start
        return ch

    def set_position(self, offset: int) -> None:
        """Move the raw offset without recomputing line or column.

        Rarely needed; prefer ``restore`` with a ``Mark``. The caller is
        responsible for keeping line and column consistent.
        """
        self._offset = offset

    def restore(self, mark: Mark) -> None:
        """Rewind (or jump) to a previously saved state."""
        self._offset = mark.offset
        self._line = mark.line
        self._column = mark.column

    # ------------------------------------------------------------------
    # Token construction
    # ------------------------------------------------------------------

    def create_token(
        self,
        kind: TokenKind,
        text: str,
        callout_kind: CalloutKind | None = None,
        callout_title: str | None = None,
        *,
        start: Mark | None = None,
        attributes: dict[str, str] | None = None,
    ) -> Token:
        """Build a token for *text*, which must be the lexeme just consumed.

        With *start*, the token takes the position saved in that mark.
        Without it, the start column is ``column - len(text)``, which is only
        correct when *text* contains no newline (see module docstring).
        """
        if start is not None:
            position = start.position
        else:
            assert len(text) <= self._column - 1, (
                f"token text {text!r} is longer than the current line allows; "
                "pass start=cursor.mark() for lexemes spanning a newline"
            )
            position = SourcePosition(self._line, self._column - len(text))
        return Token(
            kind,
            text,
            position,
            attributes=attributes,
            callout_kind=callout_kind,
            callout_title=callout_title,
        )
