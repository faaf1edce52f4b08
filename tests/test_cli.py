"""Tests for the CLI module: arg parsing, exit codes, env passthrough, end-to-end."""

from __future__ import annotations

import argparse
import io
from pathlib import Path

import pytest

from uuscan.calc import INT_MAX
from uuscan.cli import CliOptions, build_parser, main, parse_env_arg, run_lines

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_env_arg_simple(self) -> None:
        assert parse_env_arg("x=3") == ("x", "3")

    def test_parse_env_arg_with_equals_in_value(self) -> None:
        assert parse_env_arg("x=a=b") == ("x", "a=b")

    def test_parse_env_arg_no_equals_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_env_arg("noequals")


class TestArgParsing:
    def test_no_args_reads_stdin(self) -> None:
        ns = build_parser().parse_args([])
        assert ns.input is None
        assert ns.output is None

    def test_flags(self) -> None:
        ns = build_parser().parse_args(
            ["in.txt", "-o", "out.txt", "-e", "a=1", "-e", "b=2", "--max-int", "99", "--debug"]
        )
        assert ns.input == "in.txt"
        assert ns.output == "out.txt"
        assert ns.env == ["a=1", "b=2"]
        assert ns.max_int == 99
        assert ns.debug is True

    def test_stop_on_error_unset_by_default(self) -> None:
        ns = build_parser().parse_args([])
        assert ns.stop_on_error is None


# ---------------------------------------------------------------------------
# Exit codes and output
# ---------------------------------------------------------------------------


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "exprs.txt"
    path.write_text(text)
    return path


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "1 + 2\n2 * 21\n")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == " = 3\n = 42\n"

    def test_error_returns_1_and_continues(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "1 +\n5\n")
        assert main([str(src)]) == 1
        captured = capsys.readouterr()
        assert captured.out == " = 5\n"
        assert captured.err == "syntax error at pos 4\n"

    def test_stop_on_error(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "1 +\n5\n")
        assert main([str(src), "--stop-on-error"]) == 1
        assert capsys.readouterr().out == ""

    def test_deep_nesting_reported_per_line(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "(" * 2000 + "1" + ")" * 2000 + "\n4\n")
        assert main([str(src)]) == 1
        captured = capsys.readouterr()
        assert captured.out == " = 4\n"
        assert captured.err == "expression too deeply nested\n"

    def test_missing_input_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.txt")]) == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_bad_env_returns_2(self, tmp_path: Path) -> None:
        src = _write(tmp_path, "1\n")
        assert main([str(src), "-e", "broken"]) == 2

    def test_stdin(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("6 / 4\n"))
        assert main([]) == 0
        assert capsys.readouterr().out == " = 1\n"


class TestOutputOptions:
    def test_output_file(self, tmp_path: Path) -> None:
        src = _write(tmp_path, "7\n")
        out = tmp_path / "out.txt"
        assert main([str(src), "-o", str(out)]) == 0
        assert out.read_text() == " = 7\n"

    def test_context(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "1\n(2\n")
        assert main([str(src), "--context"]) == 1
        err = capsys.readouterr().err
        assert "error: expected ')' at pos 3" in err
        assert f"--> {src}:2:3" in err
        assert "^" in err

    def test_debug_trace(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "1\n")
        assert main([str(src), "--debug"]) == 0
        assert "scan_term int" in capsys.readouterr().err


class TestEnvPassthrough:
    def test_env_visible(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "a + b\n")
        assert main([str(src), "-e", "a=40", "-e", "b=2"]) == 0
        assert capsys.readouterr().out == " = 42\n"

    def test_env_replaces_process_environment(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.setenv("HIDDEN", "1")
        src = _write(tmp_path, "HIDDEN\n")
        assert main([str(src), "-e", "a=1"]) == 1
        assert "HIDDEN not found in environment" in capsys.readouterr().err

    def test_process_environment_by_default(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.setenv("VISIBLE", "9")
        src = _write(tmp_path, "VISIBLE\n")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == " = 9\n"


class TestRunLines:
    def test_returns_error_count(self) -> None:
        opts = CliOptions(
            input_file=None,
            output_file=None,
            env={},
            max_int=INT_MAX,
            stop_on_error=False,
            context=False,
            debug=False,
        )
        out = io.StringIO()
        assert run_lines(opts, io.StringIO("1\nq\n)\n3\n"), out) == 2
        assert out.getvalue() == " = 1\n = 3\n"
