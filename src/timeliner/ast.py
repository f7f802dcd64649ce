"""AST node types for parsed timelines.

Spans are excluded from equality so that two trees parsed from differently
formatted text compare equal when they mean the same thing.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from timeliner.tokens import Span, Token


@dataclass(frozen=True, slots=True)
class CommentLine:
    """Text after '#' up to the end of the line."""

    value: str
    raw: str
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class RegExpLiteral:
    """Pattern text between the slashes, escapes left as written."""

    pattern: str
    raw: str
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class SyncStatement:
    """Regex sync clause: sync /pattern/."""

    regex: RegExpLiteral
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class NetSyncField:
    """One key: value pair of a net sync clause."""

    key: str
    value: str
    numeric: bool
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class NetSyncStatement:
    """Structured sync clause: Type { key: value, ... }."""

    sync_type: str
    fields: tuple[NetSyncField, ...]
    span: Span = field(compare=False)

    def get(self, key: str) -> str | None:
        for f in self.fields:
            if f.key == key:
                return f.value
        return None


@dataclass(frozen=True, slots=True)
class WindowStatement:
    before: float
    span: Span = field(compare=False)
    after: float | None = None


@dataclass(frozen=True, slots=True)
class JumpStatement:
    time: float
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class DurationStatement:
    time: float
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class Entry:
    """Timestamped timeline event with optional trailing clauses."""

    time: float
    name: str
    span: Span = field(compare=False)
    sync: SyncStatement | NetSyncStatement | None = None
    duration: DurationStatement | None = None
    window: WindowStatement | None = None
    jump: JumpStatement | None = None


@dataclass(frozen=True, slots=True)
class HideAllStatement:
    name: str
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class BeforeClause:
    time: float
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class SoundClause:
    file: str
    span: Span = field(compare=False)


@dataclass(frozen=True, slots=True)
class AlertAllStatement:
    name: str
    span: Span = field(compare=False)
    before: BeforeClause | None = None
    sound: SoundClause | None = None


@dataclass(frozen=True, slots=True)
class DefineStatement:
    """define alertsound "name" "file"."""

    define_type: str
    name: str
    file: str
    span: Span = field(compare=False)


Statement = Entry | HideAllStatement | AlertAllStatement | DefineStatement


@dataclass(frozen=True, slots=True)
class Program:
    """Root node. Comments are kept apart from the body."""

    body: tuple[Statement, ...]
    comments: tuple[CommentLine, ...]
    tokens: tuple[Token, ...] = field(compare=False)
    span: Span = field(compare=False)
    source_file: str = ""
    source_type: str = "module"
