"""Timeline lexer: produces classified tokens on demand."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from timeliner.errors import LexError
from timeliner.logtypes import NET_SYNC_LOG_TYPES
from timeliner.strings import normalize_source, unescape_string
from timeliner.tokens import KEYWORDS, Position, Span, Token, TokenType

_Rule = tuple[re.Pattern[str], TokenType, Callable[[re.Match[str]], str]]

# Character classes and word boundaries are ASCII only
_WHITESPACE_RE = re.compile(r"\s+", re.ASCII)
_COMMENT_RE = re.compile(r"#(.*)")
_PUNCTUATOR_RE = re.compile(r"[,:]")
_BRACE_RE = re.compile(r"[{}]")
_NUMERIC_RE = re.compile(r"[1-9]\d*(?:\.\d+)?|0?\.\d+|0", re.ASCII)
_STRING_RE = re.compile(r"""".*?(?<!\\)"|'.*?(?<!\\)'""")
# No leading quantifier, so "/*" never starts a pattern
_REGEX_RE = re.compile(r"/((?![*+?])(?:[^\r\n\[/\\]|\\.|\[(?:[^\r\n\]\\]|\\.)*\])+)/")
_IDENTIFIER_RE = re.compile(r"\w+", re.ASCII)


def _whole(m: re.Match[str]) -> str:
    return m.group(0)


def _first_group(m: re.Match[str]) -> str:
    return m.group(1)


def _string_value(m: re.Match[str]) -> str:
    return unescape_string(m.group(0)[1:-1])


def _build_rules(sync_types: Iterable[str]) -> list[_Rule]:
    """Ordered dispatch table; the first matching rule wins."""
    words = [*sync_types, *KEYWORDS]
    alternation = "|".join(re.escape(w) for w in words)
    keyword_re = re.compile(f"({alternation})" + r"\b", re.ASCII)
    return [
        (_WHITESPACE_RE, TokenType.WHITESPACE, _whole),
        (_COMMENT_RE, TokenType.COMMENT, _first_group),
        (_PUNCTUATOR_RE, TokenType.PUNCTUATOR, _whole),
        (_BRACE_RE, TokenType.BRACE, _whole),
        (_NUMERIC_RE, TokenType.NUMERIC_LITERAL, _whole),
        (_STRING_RE, TokenType.STRING_LITERAL, _string_value),
        (_REGEX_RE, TokenType.REGULAR_EXPRESSION, _first_group),
        (keyword_re, TokenType.KEYWORD, _whole),
        (_IDENTIFIER_RE, TokenType.IDENTIFIER, _whole),
    ]


class Lexer:
    """Tokenize timeline source text, one token at a time."""

    def __init__(self, source: str, sync_types: Iterable[str] | None = None) -> None:
        self.source = normalize_source(source)
        names = NET_SYNC_LOG_TYPES if sync_types is None else tuple(sync_types)
        self.sync_types: frozenset[str] = frozenset(names)
        self._rules = _build_rules(names)
        self.index = 0
        self.line = 1
        self.column = 0
        self._lookahead: Token | None = None

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def peek(self) -> Token:
        """Return the next non-whitespace token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._next_significant()
        return self._lookahead

    def advance(self) -> Token:
        """Consume and return the next non-whitespace token."""
        if self._lookahead is not None:
            tok, self._lookahead = self._lookahead, None
            return tok
        return self._next_significant()

    def advance_raw(self) -> Token:
        """Consume and return the next token, whitespace included."""
        if self._lookahead is not None:
            tok, self._lookahead = self._lookahead, None
            return tok
        return self._scan()

    def has_more(self) -> bool:
        if self._lookahead is not None and self._lookahead.type != TokenType.EOF:
            return True
        return self.index < len(self.source)

    def position(self) -> Position:
        return Position(self.line, self.column, self.index)

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source, whitespace included, ending with EOF."""
        if self.index != 0 or self._lookahead is not None:
            raise RuntimeError("tokenize() requires a lexer at the start of its input")
        tokens: list[Token] = []
        while True:
            tok = self.advance_raw()
            if tok.type == TokenType.UNKNOWN:
                raise LexError(
                    "unrecognized input", tok.span.start, self.source, tok.raw
                )
            tokens.append(tok)
            if tok.type == TokenType.EOF:
                return tokens

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _next_significant(self) -> Token:
        while True:
            tok = self._scan()
            if tok.type != TokenType.WHITESPACE:
                return tok

    def _scan(self) -> Token:
        start = self.position()
        if self.index >= len(self.source):
            return Token(TokenType.EOF, "", "", Span(start, start))

        for pattern, tt, decode in self._rules:
            m = pattern.match(self.source, self.index)
            if m is None:
                continue
            text = m.group(0)
            self._move(text)
            return Token(tt, decode(m), text, Span(start, self.position()))

        # Never advanced past: the parser reports it
        return Token(TokenType.UNKNOWN, "", self.source[self.index :], Span(start, start))

    def _move(self, text: str) -> None:
        self.index += len(text)
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind("\n") - 1
        else:
            self.column += len(text)


def tokenize(source: str, sync_types: Iterable[str] | None = None) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, sync_types).tokenize()
