"""Command-line calculator: evaluate one expression per input line."""

from __future__ import annotations

import argparse
import sys
import tomllib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from uuscan.calc import INT_MAX, Calculator
from uuscan.errors import ScanError

CONFIG_NAME = "uuscan.toml"


class _StopScanning(Exception):
    """Raised from the error handler to end the input loop."""


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    output_file: Path | None
    env: dict[str, str] | None
    max_int: int
    stop_on_error: bool
    context: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="uucalc",
        description="Evaluate integer expressions, one per line",
    )
    p.add_argument("input", nargs="?", help="Input file (default: stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-e",
        "--env",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Define a variable (repeatable); replaces the process environment",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--max-int",
        type=int,
        default=None,
        metavar="N",
        help=f"Largest integer literal accepted (default: {INT_MAX})",
    )
    p.add_argument(
        "--stop-on-error",
        action="store_true",
        default=None,
        help="Stop at the first line with an error",
    )
    p.add_argument(
        "--context",
        action="store_true",
        help="Show the offending line with a caret under each error",
    )
    p.add_argument("--debug", action="store_true", help="Trace scan attempts to stderr")
    return p


def parse_env_arg(s: str) -> tuple[str, str]:
    """Parse a NAME=VALUE string into (name, value)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid env format (expected NAME=VALUE): {s}")
    name, _, value = s.partition("=")
    return name, value


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input) if args.input and args.input != "-" else None
    search_dir = input_file.parent if input_file is not None else Path(".")
    if not search_dir.parts:
        search_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, search_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from None

    # Variables: config < CLI; neither means the process environment
    env: dict[str, str] | None = None
    cfg_env = config.get("env")
    if isinstance(cfg_env, dict):
        env = {str(k): str(v) for k, v in cfg_env.items()}
    for raw in args.env:
        name, value = parse_env_arg(raw)
        if env is None:
            env = {}
        env[name] = value

    cfg_calc = config.get("calc")
    if not isinstance(cfg_calc, dict):
        cfg_calc = {}

    max_int = INT_MAX
    cfg_max = cfg_calc.get("max_int")
    if isinstance(cfg_max, int) and not isinstance(cfg_max, bool):
        max_int = cfg_max
    if args.max_int is not None:
        max_int = args.max_int
    if max_int < 1:
        raise argparse.ArgumentTypeError(f"max_int must be positive: {max_int}")

    stop_on_error = False
    cfg_stop = cfg_calc.get("stop_on_error")
    if isinstance(cfg_stop, bool):
        stop_on_error = cfg_stop
    if args.stop_on_error is not None:
        stop_on_error = args.stop_on_error

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        env=env,
        max_int=max_int,
        stop_on_error=stop_on_error,
        context=args.context,
        debug=args.debug,
    )


def run_lines(options: CliOptions, lines: TextIO, out: TextIO) -> int:
    """Evaluate every line, writing results to out. Returns the error count."""
    from uuscan.debug import Tracer

    calc = Calculator(
        options.env,
        max_int=options.max_int,
        trace=Tracer() if options.debug else None,
    )
    filename = str(options.input_file) if options.input_file else "<stdin>"
    errors = 0
    lineno = 0

    def report(exc: ScanError) -> None:
        nonlocal errors
        errors += 1
        if options.context:
            print(exc.format(filename, lineno), file=sys.stderr)
        else:
            print(exc.message, file=sys.stderr)
        if options.stop_on_error:
            raise _StopScanning

    def numbered() -> Iterator[str]:
        nonlocal lineno
        for line in lines:
            lineno += 1
            yield line

    try:
        for _, value in calc.run(numbered(), report):
            out.write(f" = {value}\n")
    except _StopScanning:
        pass
    return errors


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        src = (
            options.input_file.open(encoding="utf-8")
            if options.input_file is not None
            else sys.stdin
        )
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        if options.output_file is not None:
            with options.output_file.open("w", encoding="utf-8") as out:
                errors = run_lines(options, src, out)
        else:
            errors = run_lines(options, src, sys.stdout)
    finally:
        if src is not sys.stdin:
            src.close()

    return 1 if errors else 0
