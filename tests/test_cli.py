"""Tests for the CLI module: arg parsing, config, exit codes, end-to-end."""

from __future__ import annotations

from pathlib import Path

import timeliner.cli as cli
from timeliner.cli import (
    CliOptions,
    build_parser,
    format_file,
    load_config,
    main,
    resolve_options,
    watch_loop,
)
from timeliner.logtypes import NET_SYNC_LOG_TYPES

CANONICAL = '1.0 "a" sync /x/ window 2,3\nhideall "b"'

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["fight.txt"])
        assert ns.input == "fight.txt"
        assert ns.output is None
        assert ns.sync_type == []
        assert ns.target is None

    def test_output_flag(self) -> None:
        ns = build_parser().parse_args(["fight.txt", "-o", "out.txt"])
        assert ns.output == "out.txt"

    def test_sync_type_repeatable(self) -> None:
        ns = build_parser().parse_args(["fight.txt", "--sync-type", "A", "--sync-type", "B"])
        assert ns.sync_type == ["A", "B"]

    def test_flags(self) -> None:
        ns = build_parser().parse_args(["fight.txt", "--check", "--watch", "--debug", "-v"])
        assert ns.check is True
        assert ns.watch is True
        assert ns.debug is True
        assert ns.verbose is True


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    def test_missing_config_is_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_auto_discovered(self, tmp_path: Path) -> None:
        (tmp_path / "timeliner.toml").write_text('[generator]\ntarget = "cactbot"\n')
        assert load_config(None, tmp_path) == {"generator": {"target": "cactbot"}}

    def test_sync_types_merged(self, tmp_path: Path) -> None:
        (tmp_path / "timeliner.toml").write_text('[lexer]\nsync_types = ["FromConfig"]\n')
        doc = tmp_path / "fight.txt"
        args = build_parser().parse_args([str(doc), "--sync-type", "FromCli"])
        options = resolve_options(args)
        assert options.sync_types[: len(NET_SYNC_LOG_TYPES)] == list(NET_SYNC_LOG_TYPES)
        assert options.sync_types[-2:] == ["FromConfig", "FromCli"]

    def test_cli_target_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "timeliner.toml").write_text('[generator]\ntarget = "other"\n')
        doc = tmp_path / "fight.txt"
        assert resolve_options(build_parser().parse_args([str(doc)])).target == "other"
        args = build_parser().parse_args([str(doc), "--target", "cactbot"])
        assert resolve_options(args).target == "cactbot"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[lexer]\nsync_types = ["Custom"]\n')
        doc = tmp_path / "fight.txt"
        doc.write_text('1.0 "a" Custom { id: 1 }\n')
        out = tmp_path / "out.txt"
        assert main([str(doc), "--config", str(cfg), "-o", str(out)]) == 0
        assert out.read_text() == '1.0 "a" Custom { id: 1 }\n'

    def test_invalid_config_returns_2(self, tmp_path: Path) -> None:
        (tmp_path / "timeliner.toml").write_text("[lexer\n")
        doc = tmp_path / "fight.txt"
        doc.write_text('hideall "a"\n')
        assert main([str(doc)]) == 2


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success_to_stdout(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "ok.txt"
        doc.write_text('# note\n1 "a"   jump 0\n')
        assert main([str(doc)]) == 0
        assert capsys.readouterr().out == '1.0 "a" jump 0\n'

    def test_success_to_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "ok.txt"
        doc.write_text(CANONICAL)
        out = tmp_path / "out.txt"
        assert main([str(doc), "-o", str(out)]) == 0
        assert out.read_text() == CANONICAL + "\n"

    def test_syntax_error_returns_1(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "bad.txt"
        doc.write_text("hideall")
        assert main([str(doc)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("error:")
        assert "bad.txt:1:8" in err

    def test_lex_error_returns_1(self, tmp_path: Path) -> None:
        doc = tmp_path / "bad.txt"
        doc.write_text('1.0 "a" @\n')
        assert main([str(doc)]) == 1

    def test_generation_error_returns_2(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "alert.txt"
        doc.write_text('alertall "a" before 1\n')
        assert main([str(doc)]) == 2
        assert "AlertAllStatement" in capsys.readouterr().err

    def test_unknown_sync_type_without_config(self, tmp_path: Path) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text('1.0 "a" Custom { id: 1 }\n')
        assert main([str(doc)]) == 1
        assert main([str(doc), "--sync-type", "Custom"]) == 0


# ---------------------------------------------------------------------------
# --check
# ---------------------------------------------------------------------------


class TestCheck:
    def test_canonical_file(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text(CANONICAL + "\n")
        assert main([str(doc), "--check"]) == 0
        assert capsys.readouterr().out == ""

    def test_non_canonical_file(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text('1 "a"\n')
        assert main([str(doc), "--check"]) == 1
        assert "would reformat" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# format_file / --debug
# ---------------------------------------------------------------------------


class TestFormatFile:
    def _options(self, path: Path, debug: bool = False) -> CliOptions:
        return CliOptions(
            input_file=path,
            output_file=None,
            sync_types=list(NET_SYNC_LOG_TYPES),
            target="cactbot",
            check=False,
            watch=False,
            debug=debug,
        )

    def test_basic(self, tmp_path: Path) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text('hideall "x"\n')
        assert format_file(self._options(doc)) == 'hideall "x"'

    def test_debug_dumps_ast(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text('1.0 "a" jump 2\n')
        format_file(self._options(doc, debug=True))
        err = capsys.readouterr().err
        assert "Entry 1.0 'a'" in err
        assert "Jump 2.0" in err


# ---------------------------------------------------------------------------
# --watch
# ---------------------------------------------------------------------------


class TestWatch:
    def _run(self, monkeypatch, options: CliOptions, polls: int = 4) -> list[str]:
        """Run the watch loop for a few polls, returning the texts written."""
        written: list[str] = []
        real_write = cli._write

        def record(opts: CliOptions, text: str) -> None:
            written.append(text)
            real_write(opts, text)

        calls = 0

        def fake_sleep(_seconds: float) -> None:
            nonlocal calls
            calls += 1
            if calls >= polls:
                raise KeyboardInterrupt

        monkeypatch.setattr(cli, "_write", record)
        monkeypatch.setattr(cli.time, "sleep", fake_sleep)
        watch_loop(options)
        return written

    def _options(self, path: Path, output: Path | None) -> CliOptions:
        return CliOptions(
            input_file=path,
            output_file=output,
            sync_types=list(NET_SYNC_LOG_TYPES),
            target="cactbot",
            check=False,
            watch=True,
            debug=False,
        )

    def test_in_place_canonical_not_rewritten(self, tmp_path: Path, monkeypatch) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text(CANONICAL + "\n")
        written = self._run(monkeypatch, self._options(doc, tmp_path / "." / "fight.txt"))
        assert written == []
        assert doc.read_text() == CANONICAL + "\n"

    def test_in_place_written_once(self, tmp_path: Path, monkeypatch) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text('1 "a"\n')
        written = self._run(monkeypatch, self._options(doc, doc))
        assert written == ['1.0 "a"']
        assert doc.read_text() == '1.0 "a"\n'

    def test_separate_output_written(self, tmp_path: Path, monkeypatch) -> None:
        doc = tmp_path / "fight.txt"
        doc.write_text(CANONICAL + "\n")
        out = tmp_path / "out.txt"
        written = self._run(monkeypatch, self._options(doc, out))
        assert written == [CANONICAL]
        assert out.read_text() == CANONICAL + "\n"
