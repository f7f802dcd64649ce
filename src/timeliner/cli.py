"""Command-line interface for timeliner."""

from __future__ import annotations

import argparse
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from timeliner.errors import GenerationError, LexError, ParseError
from timeliner.logtypes import NET_SYNC_LOG_TYPES

logger = logging.getLogger(__name__)

CONFIG_NAME = "timeliner.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    sync_types: list[str]
    target: str
    check: bool
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="timeliner",
        description="Rewrite a timeline file in canonical form",
    )
    p.add_argument("input", help="Input timeline file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--sync-type",
        action="append",
        default=[],
        metavar="NAME",
        help="Extra net sync log type keyword (repeatable)",
    )
    p.add_argument("--target", default=None, help="Output target (default: cactbot)")
    p.add_argument(
        "--check",
        action="store_true",
        help="Exit 1 if the file is not already canonical; write nothing",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and reformat")
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    logger.debug("loading config %s", path)
    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Sync types: defaults < config < CLI
    sync_types = list(NET_SYNC_LOG_TYPES)
    cfg_lexer = config.get("lexer")
    if isinstance(cfg_lexer, dict):
        cfg_types = cfg_lexer.get("sync_types")
        if isinstance(cfg_types, list):
            sync_types.extend(str(t) for t in cfg_types)
    sync_types.extend(args.sync_type)

    target = "cactbot"
    cfg_generator = config.get("generator")
    if isinstance(cfg_generator, dict):
        cfg_target = cfg_generator.get("target")
        if isinstance(cfg_target, str):
            target = cfg_target
    if args.target is not None:
        target = args.target

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        sync_types=sync_types,
        target=target,
        check=args.check,
        watch=args.watch,
        debug=args.debug,
    )


def format_file(options: CliOptions) -> str:
    """Read, parse, and regenerate a timeline file."""
    from timeliner.debug import dump_ast
    from timeliner.generator import GeneratorOptions, generate
    from timeliner.parser import parse

    source = options.input_file.read_text(encoding="utf-8")
    program = parse(source, options.sync_types, str(options.input_file))

    if options.debug:
        dump_ast(program)

    return generate(program, GeneratorOptions(target=options.target))


def _write(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text + "\n", encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")
        sys.stdout.flush()


def _is_canonical(options: CliOptions, text: str) -> bool:
    from timeliner.strings import normalize_source

    source = normalize_source(options.input_file.read_text(encoding="utf-8"))
    return source.rstrip("\n") == text


def _writes_in_place(options: CliOptions) -> bool:
    if options.output_file is None:
        return False
    return options.output_file.resolve() == options.input_file.resolve()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, reformat on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    text = format_file(options)
                except (LexError, ParseError) as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
                except GenerationError as exc:
                    print(f"error: {exc.message}", file=sys.stderr)
                else:
                    # An in-place write bumps the mtime and would retrigger the loop
                    if _writes_in_place(options) and _is_canonical(options, text):
                        logger.debug("%s already canonical", options.input_file)
                    else:
                        _write(options, text)
                        print(f"Formatted {options.input_file}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        text = format_file(options)
    except (LexError, ParseError) as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except GenerationError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 2

    if options.check:
        if _is_canonical(options, text):
            return 0
        print(f"would reformat {options.input_file}", file=sys.stderr)
        return 1

    _write(options, text)
    logger.debug("wrote %d bytes", len(text) + 1)
    return 0


def run() -> None:
    """Console script wrapper around main()."""
    sys.exit(main())
