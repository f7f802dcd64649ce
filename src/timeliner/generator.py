"""Serialize a Program AST back to canonical timeline text."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from timeliner.ast import (
    Entry,
    HideAllStatement,
    NetSyncStatement,
    Program,
    Statement,
    SyncStatement,
    WindowStatement,
)
from timeliner.errors import GenerationError
from timeliner.strings import escape_pattern, escape_string


@dataclass(frozen=True, slots=True)
class GeneratorOptions:
    """Output options. Only the "cactbot" target exists."""

    target: str = "cactbot"


def generate(program: Program, options: GeneratorOptions | None = None) -> str:
    """Render a Program to canonical text, one statement per line.

    Comments and original whitespace are not reproduced.
    """
    if options is None:
        options = GeneratorOptions()
    if not isinstance(program, Program):
        raise GenerationError(f"invalid AST: expected Program, got {type(program).__name__}")

    return "\n".join(_generate_statement(stmt) for stmt in program.body)


def _generate_statement(stmt: Statement) -> str:
    if isinstance(stmt, Entry):
        return _generate_entry(stmt)
    if isinstance(stmt, HideAllStatement):
        return f'hideall "{escape_string(stmt.name)}"'
    raise GenerationError(
        f"unsupported statement type: {type(stmt).__name__}", getattr(stmt, "span", None)
    )


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


def _generate_entry(entry: Entry) -> str:
    # Entry time always keeps one decimal; clause numbers are simplified
    parts = [_one_decimal(entry.time), f'"{escape_string(entry.name)}"']
    if entry.sync is not None:
        parts.append(_generate_sync(entry.sync))
    if entry.duration is not None:
        parts.append(f"duration {simplify_number(entry.duration.time)}")
    if entry.window is not None:
        parts.append(_generate_window(entry.window))
    if entry.jump is not None:
        parts.append(f"jump {simplify_number(entry.jump.time)}")
    return " ".join(parts)


def _generate_sync(sync: SyncStatement | NetSyncStatement) -> str:
    if isinstance(sync, SyncStatement):
        return f"sync /{escape_pattern(sync.regex.pattern)}/"

    fields = []
    for f in sync.fields:
        value = f.value if f.numeric else f'"{escape_string(f.value)}"'
        fields.append(f"{f.key}: {value}")
    if not fields:
        return f"{sync.sync_type} {{}}"
    return f"{sync.sync_type} {{ {', '.join(fields)} }}"


def _generate_window(window: WindowStatement) -> str:
    before = simplify_number(window.before)
    if window.after is not None and window.after != window.before:
        return f"window {before},{simplify_number(window.after)}"
    return f"window {before}"


def simplify_number(value: float) -> str:
    """Integer text when the value is whole, otherwise one decimal digit."""
    if float(value).is_integer():
        return str(int(value))
    return _one_decimal(value)


def _one_decimal(value: float) -> str:
    # Ties round up on the exact binary value
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
