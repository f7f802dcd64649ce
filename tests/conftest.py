"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from timeliner.ast import Program
from timeliner.lexer import tokenize
from timeliner.parser import parse
from timeliner.tokens import Position, Span, Token, TokenType

SPAN = Span(Position(1, 0, 0), Position(1, 0, 0))


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str, skip_ws: bool = True) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF and, by default, whitespace
        return [
            t
            for t in tokens
            if t.type != TokenType.EOF and not (skip_ws and t.type == TokenType.WHITESPACE)
        ]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Program."""

    def _parse(source: str) -> Program:
        return parse(source, source_file="test.txt")

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"
