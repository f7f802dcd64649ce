"""Error types with formatted source context."""

from __future__ import annotations

from timeliner.tokens import Position, Span, Token


def _excerpt(
    message: str,
    filename: str,
    source: str,
    start: Position,
    underline_len: int,
) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n")
    else:
        source_line = ""

    pad = " " * col
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    # Columns are 0-based internally, shown 1-based
    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col + 1}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised when the lexer cannot classify the input at a position."""

    def __init__(self, message: str, position: Position, source: str, raw: str = "") -> None:
        self.message = message
        self.position = position
        self.source = source
        self.raw = raw
        super().__init__(self.format())

    def format(self, filename: str = "input.txt") -> str:
        return _excerpt(self.message, filename, self.source, self.position, 1)


class ParseError(Exception):
    """Raised on the first grammar violation, with the offending token."""

    def __init__(self, message: str, token: Token, source: str) -> None:
        self.message = message
        self.token = token
        self.span = token.span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.txt") -> str:
        start, end = self.span.start, self.span.end
        if end.line == start.line:
            underline_len = max(1, end.column - start.column)
        else:
            underline_len = 1
        return _excerpt(self.message, filename, self.source, start, underline_len)


class GenerationError(Exception):
    """Raised when an AST cannot be serialized."""

    def __init__(self, message: str, span: Span | None = None) -> None:
        self.message = message
        self.span = span
        super().__init__(message)
