"""Timeline script parser and canonical generator."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timeliner.ast import Program
    from timeliner.generator import GeneratorOptions

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def parse(
    source: str,
    sync_types: Iterable[str] | None = None,
    source_file: str = "",
) -> Program:
    """Parse timeline source into a Program AST."""
    from timeliner.parser import parse as _parse

    return _parse(source, sync_types, source_file)


def generate(program: Program, options: GeneratorOptions | None = None) -> str:
    """Serialize a Program AST to canonical timeline text."""
    from timeliner.generator import generate as _generate

    return _generate(program, options)


def transform(
    source: str,
    options: GeneratorOptions | None = None,
    sync_types: Iterable[str] | None = None,
) -> str:
    """Parse then generate. Parse errors propagate before generation starts."""
    return generate(parse(source, sync_types), options)


def parse_file(path: str | Path, sync_types: Iterable[str] | None = None) -> Program:
    """Read a timeline file and parse it. I/O errors propagate unchanged."""
    path = Path(path)
    logger.debug("parsing %s", path)
    source = path.read_text(encoding="utf-8")
    return parse(source, sync_types, str(path))


def transform_file(
    path: str | Path,
    options: GeneratorOptions | None = None,
    sync_types: Iterable[str] | None = None,
) -> str:
    """Read a timeline file and return its canonical text."""
    program = parse_file(path, sync_types)
    logger.debug("parsed %d statements, %d comments", len(program.body), len(program.comments))
    return generate(program, options)


# ---------------------------------------------------------------------------
# Coroutine adapters: same result or error as the synchronous call
# ---------------------------------------------------------------------------


async def parse_async(source: str, sync_types: Iterable[str] | None = None) -> Program:
    return parse(source, sync_types)


async def generate_async(program: Program, options: GeneratorOptions | None = None) -> str:
    return generate(program, options)


async def transform_async(
    source: str,
    options: GeneratorOptions | None = None,
    sync_types: Iterable[str] | None = None,
) -> str:
    return transform(source, options, sync_types)


async def parse_file_async(path: str | Path, sync_types: Iterable[str] | None = None) -> Program:
    return parse_file(path, sync_types)


async def transform_file_async(
    path: str | Path,
    options: GeneratorOptions | None = None,
    sync_types: Iterable[str] | None = None,
) -> str:
    return transform_file(path, options, sync_types)
