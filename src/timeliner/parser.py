"""Timeline parser — recursive descent over the lexer's token stream."""

from __future__ import annotations

from collections.abc import Iterable

from timeliner.ast import (
    AlertAllStatement,
    BeforeClause,
    CommentLine,
    DefineStatement,
    DurationStatement,
    Entry,
    HideAllStatement,
    JumpStatement,
    NetSyncField,
    NetSyncStatement,
    Program,
    RegExpLiteral,
    SoundClause,
    Statement,
    SyncStatement,
    WindowStatement,
)
from timeliner.errors import LexError, ParseError
from timeliner.lexer import Lexer
from timeliner.tokens import Position, Span, Token, TokenType, describe

_ENTRY_CLAUSES = frozenset({"sync", "window", "jump", "duration"})
_ALERTALL_CLAUSES = frozenset({"before", "sound"})


class Parser:
    """Single-token-lookahead recursive descent parser for timelines."""

    def __init__(self, lexer: Lexer, source_file: str = "", source_type: str = "module") -> None:
        self._lexer = lexer
        self._source_file = source_file
        self._source_type = source_type
        self._tokens: list[Token] = []
        self._body: list[Statement] = []
        self._comments: list[CommentLine] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        tok = self._lexer.peek()
        if tok.type == TokenType.UNKNOWN:
            raise LexError(
                f"unrecognized input {tok.raw[:20]!r}",
                tok.span.start,
                self._lexer.source,
                tok.raw,
            )
        return tok

    def _at(self, tt: TokenType, value: str | None = None) -> bool:
        tok = self._peek()
        return tok.type == tt and (value is None or tok.value == value)

    def _advance(self) -> Token:
        self._peek()
        tok = self._lexer.advance()
        if tok.type != TokenType.EOF:
            self._tokens.append(tok)
        return tok

    def _expect(self, tt: TokenType, what: str, value: str | None = None) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._error(f"expected {what}, found {describe(tok)}", tok)
        if value is not None and tok.value != value:
            raise self._error(f"expected '{value}', found {describe(tok)}", tok)
        return self._advance()

    def _prev_end(self) -> Position:
        """End position of the previously consumed token."""
        return self._tokens[-1].span.end

    def _error(self, message: str, tok: Token) -> ParseError:
        return ParseError(message, tok, self._lexer.source)

    # ------------------------------------------------------------------
    # Program level
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        while self._lexer.has_more():
            if self._at(TokenType.EOF):
                break
            node = self._parse_statement()
            if isinstance(node, CommentLine):
                self._comments.append(node)
            else:
                self._body.append(node)

        end = self._lexer.position()
        return Program(
            body=tuple(self._body),
            comments=tuple(self._comments),
            tokens=tuple(self._tokens),
            span=Span(Position(1, 0, 0), end),
            source_file=self._source_file,
            source_type=self._source_type,
        )

    def _parse_statement(self) -> Statement | CommentLine:
        tok = self._peek()

        if tok.type == TokenType.COMMENT:
            self._advance()
            return CommentLine(tok.value, tok.raw, tok.span)

        if tok.type == TokenType.NUMERIC_LITERAL:
            return self._parse_entry()

        if tok.type == TokenType.KEYWORD:
            if tok.value == "hideall":
                return self._parse_hideall()
            if tok.value == "alertall":
                return self._parse_alertall()
            if tok.value == "define":
                return self._parse_define()

        raise self._error(f"unexpected {describe(tok)}", tok)

    # ------------------------------------------------------------------
    # Global directives
    # ------------------------------------------------------------------

    def _parse_hideall(self) -> HideAllStatement:
        start = self._advance().span.start
        name = self._expect(TokenType.STRING_LITERAL, "string after 'hideall'")
        return HideAllStatement(name.value, Span(start, name.span.end))

    def _parse_alertall(self) -> AlertAllStatement:
        start = self._advance().span.start
        name = self._expect(TokenType.STRING_LITERAL, "string after 'alertall'")

        before: BeforeClause | None = None
        sound: SoundClause | None = None
        # Other keywords end the statement and are left for the caller
        while self._at(TokenType.KEYWORD) and self._peek().value in _ALERTALL_CLAUSES:
            kw = self._advance()
            if kw.value == "before":
                num = self._expect(TokenType.NUMERIC_LITERAL, "number after 'before'")
                before = BeforeClause(float(num.value), Span(kw.span.start, num.span.end))
            else:
                file = self._expect(TokenType.STRING_LITERAL, "string after 'sound'")
                sound = SoundClause(file.value, Span(kw.span.start, file.span.end))

        return AlertAllStatement(name.value, Span(start, self._prev_end()), before, sound)

    def _parse_define(self) -> DefineStatement:
        start = self._advance().span.start
        kind = self._expect(TokenType.IDENTIFIER, "define type", "alertsound")
        name = self._expect(TokenType.STRING_LITERAL, "sound name")
        file = self._expect(TokenType.STRING_LITERAL, "sound file")
        return DefineStatement(kind.value, name.value, file.value, Span(start, file.span.end))

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def _at_entry_clause(self) -> bool:
        tok = self._peek()
        if tok.type != TokenType.KEYWORD:
            return False
        return tok.value in _ENTRY_CLAUSES or tok.value in self._lexer.sync_types

    def _parse_entry(self) -> Entry:
        time = self._expect(TokenType.NUMERIC_LITERAL, "entry time")
        name = self._expect(TokenType.STRING_LITERAL, "entry name")

        sync: SyncStatement | NetSyncStatement | None = None
        duration: DurationStatement | None = None
        window: WindowStatement | None = None
        jump: JumpStatement | None = None

        # A repeated clause replaces the earlier one
        while self._at_entry_clause():
            kw = self._peek().value
            if kw == "sync":
                sync = self._parse_sync()
            elif kw == "window":
                window = self._parse_window()
            elif kw == "jump":
                jump = self._parse_jump()
            elif kw == "duration":
                duration = self._parse_duration()
            else:
                sync = self._parse_net_sync()

        return Entry(
            float(time.value),
            name.value,
            Span(time.span.start, self._prev_end()),
            sync=sync,
            duration=duration,
            window=window,
            jump=jump,
        )

    def _parse_sync(self) -> SyncStatement:
        kw = self._advance()
        tok = self._expect(TokenType.REGULAR_EXPRESSION, "regular expression after 'sync'")
        regex = RegExpLiteral(tok.value, tok.raw, tok.span)
        return SyncStatement(regex, Span(kw.span.start, tok.span.end))

    def _parse_net_sync(self) -> NetSyncStatement:
        kw = self._advance()
        self._expect(TokenType.BRACE, f"'{{' after '{kw.value}'", "{")

        fields: list[NetSyncField] = []
        while True:
            if self._at(TokenType.IDENTIFIER):
                fields = _set_field(fields, self._parse_net_sync_field())

            tok = self._peek()
            if tok.type == TokenType.BRACE and tok.value == "}":
                self._advance()
                break
            if tok.type == TokenType.PUNCTUATOR and tok.value == ",":
                self._advance()
                continue
            raise self._error(f"expected ',' or '}}', found {describe(tok)}", tok)

        return NetSyncStatement(kw.value, tuple(fields), Span(kw.span.start, self._prev_end()))

    def _parse_net_sync_field(self) -> NetSyncField:
        key = self._advance()
        self._expect(TokenType.PUNCTUATOR, "':' after field name", ":")
        tok = self._peek()
        if tok.type not in (TokenType.STRING_LITERAL, TokenType.NUMERIC_LITERAL):
            raise self._error(f"expected string or number, found {describe(tok)}", tok)
        value = self._advance()
        return NetSyncField(
            key.value,
            value.value,
            value.type == TokenType.NUMERIC_LITERAL,
            Span(key.span.start, value.span.end),
        )

    def _parse_window(self) -> WindowStatement:
        kw = self._advance()
        before = self._expect(TokenType.NUMERIC_LITERAL, "number after 'window'")
        after: float | None = None
        if self._at(TokenType.PUNCTUATOR):
            self._expect(TokenType.PUNCTUATOR, "','", ",")
            tok = self._expect(TokenType.NUMERIC_LITERAL, "number after ','")
            after = float(tok.value)
        return WindowStatement(float(before.value), Span(kw.span.start, self._prev_end()), after)

    def _parse_jump(self) -> JumpStatement:
        kw = self._advance()
        num = self._expect(TokenType.NUMERIC_LITERAL, "number after 'jump'")
        return JumpStatement(float(num.value), Span(kw.span.start, num.span.end))

    def _parse_duration(self) -> DurationStatement:
        kw = self._advance()
        num = self._expect(TokenType.NUMERIC_LITERAL, "number after 'duration'")
        return DurationStatement(float(num.value), Span(kw.span.start, num.span.end))


def _set_field(fields: list[NetSyncField], new: NetSyncField) -> list[NetSyncField]:
    """Append a field, or replace the value of an existing key in place."""
    for i, f in enumerate(fields):
        if f.key == new.key:
            fields[i] = new
            return fields
    fields.append(new)
    return fields


def parse(
    source: str,
    sync_types: Iterable[str] | None = None,
    source_file: str = "",
) -> Program:
    """Convenience function: parse source text and return a Program AST."""
    return Parser(Lexer(source, sync_types), source_file).parse()
