"""Escaping rules for string literals and regex patterns."""

from __future__ import annotations

import re

_UNESCAPE = {'"': '"', "'": "'", "n": "\n", "t": "\t"}
_UNESCAPE_RE = re.compile(r"""\\(["'nt])""")

_ESCAPE = {'"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_ESCAPE_RE = re.compile(r'["\n\r\t]')

_UNESCAPED_SLASH_RE = re.compile(r"(?<!\\)((?:\\\\)*)/")


def unescape_string(body: str) -> str:
    """Decode the escapes of a string literal body (quotes already removed).

    Only \\" \\' \\n and \\t are recognised; any other backslash sequence is
    kept verbatim. Every occurrence is decoded.
    """
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPE[m.group(1)], body)


def escape_string(value: str) -> str:
    """Escape a decoded string for output inside double quotes."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPE[m.group(0)], value)


def escape_pattern(pattern: str) -> str:
    """Double every backslash, then escape every forward slash.

    After doubling, a slash is unescaped when an even run of backslashes
    precedes it.
    """
    doubled = pattern.replace("\\", "\\\\")
    return _UNESCAPED_SLASH_RE.sub(r"\1\\/", doubled)


def normalize_source(source: str) -> str:
    """Strip a leading BOM and convert all line terminators to LF."""
    if source.startswith("\ufeff"):
        source = source[1:]
    return source.replace("\r\n", "\n").replace("\r", "\n")
