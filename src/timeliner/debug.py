"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from timeliner.ast import (
    AlertAllStatement,
    DefineStatement,
    Entry,
    HideAllStatement,
    NetSyncStatement,
    Program,
    SyncStatement,
)


def dump_ast(program: Program, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write(f"Program ({len(program.tokens)} tokens)\n")
    for stmt in program.body:
        if isinstance(stmt, Entry):
            _dump_entry(stmt, 1, file)
        elif isinstance(stmt, HideAllStatement):
            file.write(f"{_indent(1)}HideAll {stmt.name!r}\n")
        elif isinstance(stmt, AlertAllStatement):
            _dump_alertall(stmt, 1, file)
        elif isinstance(stmt, DefineStatement):
            file.write(f"{_indent(1)}Define {stmt.define_type} {stmt.name!r} {stmt.file!r}\n")
    for comment in program.comments:
        file.write(f"{_indent(1)}Comment {comment.value!r} @{comment.span.start.line}\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_entry(entry: Entry, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Entry {entry.time} {entry.name!r}\n")
    if isinstance(entry.sync, SyncStatement):
        f.write(f"{_indent(depth + 1)}Sync /{entry.sync.regex.pattern}/\n")
    elif isinstance(entry.sync, NetSyncStatement):
        f.write(f"{_indent(depth + 1)}NetSync {entry.sync.sync_type}\n")
        for field in entry.sync.fields:
            f.write(f"{_indent(depth + 2)}{field.key}={field.value!r}\n")
    if entry.duration is not None:
        f.write(f"{_indent(depth + 1)}Duration {entry.duration.time}\n")
    if entry.window is not None:
        f.write(f"{_indent(depth + 1)}Window {entry.window.before} {entry.window.after}\n")
    if entry.jump is not None:
        f.write(f"{_indent(depth + 1)}Jump {entry.jump.time}\n")


def _dump_alertall(stmt: AlertAllStatement, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}AlertAll {stmt.name!r}\n")
    if stmt.before is not None:
        f.write(f"{_indent(depth + 1)}Before {stmt.before.time}\n")
    if stmt.sound is not None:
        f.write(f"{_indent(depth + 1)}Sound {stmt.sound.file!r}\n")
