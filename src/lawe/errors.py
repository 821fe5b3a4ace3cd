"""Lexer error with a caret snippet of the offending source line."""

from __future__ import annotations

from lawe.tokens import SourcePosition


class LexError(Exception):
    """Raised by the lexer loop when no handler accepts or consumes input.

    *length* is the number of characters to underline starting at
    *position*; it is clipped to the end of the line but never below one.
    """

    def __init__(
        self, message: str, position: SourcePosition, source: str, length: int = 1
    ) -> None:
        self.message = message
        self.position = position
        self.source = source
        self.length = length
        super().__init__(self.format())

    @property
    def source_line(self) -> str:
        """The line holding the error, without its line ending ("" if out of range)."""
        # Lines are counted on "\n" only, matching the cursor
        lines = self.source.split("\n")
        idx = self.position.line - 1
        return lines[idx].rstrip("\r") if 0 <= idx < len(lines) else ""

    @property
    def underline_length(self) -> int:
        available = len(self.source_line) - self.position.column + 1
        return max(1, min(self.length, available))

    def format(self, filename: str = "input.lawe") -> str:
        line, col = self.position.line, self.position.column
        width = len(str(line))
        margin = " " * width + " |"
        marker = " " * (col - 1) + "^" * self.underline_length
        return "\n".join(
            [
                f"error: {self.message}",
                f"{' ' * width} --> {filename}:{line}:{col}",
                margin,
                f"{line} | {self.source_line}",
                f"{margin} {marker}",
            ]
        )
