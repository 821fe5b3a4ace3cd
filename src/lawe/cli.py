"""Command-line interface: dump the token stream of a LAWE document."""

from __future__ import annotations

import argparse
import io
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lawe.errors import LexError
from lawe.logger import configure_logging

FORMATS = ("text", "json")


class ConfigError(Exception):
    """Invalid or unreadable configuration file."""


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    format: str
    include_eof: bool
    strict: bool
    log_level: str


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lawe-lex",
        description="Tokenize LAWE wiki markup and print the token stream",
    )
    p.add_argument("input", help="Input markup file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--no-eof",
        action="store_true",
        help="Omit the trailing EOF token from the output",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any marker is left unclosed",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lawe.toml)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "lawe.toml"

    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


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

    cfg_output = config.get("output")
    if not isinstance(cfg_output, dict):
        cfg_output = {}

    # Output format: config < CLI
    fmt = "text"
    cfg_format = cfg_output.get("format")
    if cfg_format is not None:
        if cfg_format not in FORMATS:
            raise ConfigError(f"invalid output format in config: {cfg_format!r}")
        fmt = cfg_format
    if args.format is not None:
        fmt = args.format

    include_eof = True
    cfg_eof = cfg_output.get("include_eof")
    if isinstance(cfg_eof, bool):
        include_eof = cfg_eof
    if args.no_eof:
        include_eof = False

    log_level = "WARNING"
    cfg_logging = config.get("logging")
    if isinstance(cfg_logging, dict) and isinstance(cfg_logging.get("level"), str):
        log_level = cfg_logging["level"]
    if args.verbose:
        log_level = "DEBUG"

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        format=fmt,
        include_eof=include_eof,
        strict=args.strict,
        log_level=log_level,
    )


def lex_file(options: CliOptions) -> tuple[str, int]:
    """Read and tokenize a file; return (rendered output, unclosed marker count)."""
    from lawe.debug import dump_tokens, tokens_to_json
    from lawe.lexer import Lexer
    from lawe.tokens import TokenKind

    source = options.input_file.read_text(encoding="utf-8")
    lexer = Lexer(source, str(options.input_file))
    tokens = lexer.tokenize()
    if not options.include_eof:
        tokens = [t for t in tokens if t.kind is not TokenKind.EOF]

    if options.format == "json":
        rendered = tokens_to_json(tokens) + "\n"
    else:
        buf = io.StringIO()
        dump_tokens(tokens, file=buf)
        rendered = buf.getvalue()
    return rendered, len(lexer.unclosed)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
        configure_logging(options.log_level)
    except (ConfigError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        output, unclosed = lex_file(options)
    except LexError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    if options.strict and unclosed:
        print(f"error: {options.input_file}: {unclosed} unclosed marker(s)", file=sys.stderr)
        return 1
    return 0
