# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI verification harness for structure extraction."""

import argparse
import json
import logging
import sys
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from dse.entities import Field, RouteEntry
from dse.extractor import ExtractionError, Extractor
from dse.extractors import (
    HandlerExtractor,
    RecordExtractor,
    RegistrationExtractor,
    RouteExtractor,
    SettingsExtractor,
)
from dse.scanner import FileResult, ProjectScanner
from dse.source import SourceText

logger = logging.getLogger(__name__)

COMMANDS: tuple[str, ...] = ("records", "routes", "registrations", "settings", "handlers")


class _PrefixedRoutes:
    """Bind a fixed prefix to a route extractor."""

    def __init__(self, extractor: RouteExtractor, prefix: str) -> None:
        self._extractor = extractor
        self._prefix = prefix

    def extract(self, file_path: Path) -> list[RouteEntry]:
        return self._extractor.extract(file_path, prefix=self._prefix)

    def extract_source(self, source: SourceText) -> list[RouteEntry]:
        return self._extractor.extract_source(source, prefix=self._prefix)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="dse")
    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in COMMANDS:
        command_parser = subparsers.add_parser(command)
        command_parser.add_argument(
            "--path", required=True, nargs="+", help="Source file(s) to scan."
        )
        command_parser.add_argument(
            "--format",
            choices=("table", "json"),
            default="table",
            help="Output format.",
        )
        command_parser.add_argument(
            "--output",
            required=False,
            help="Optional output file path for raw JSON when --format json is used.",
        )
        command_parser.add_argument(
            "--max-workers",
            type=int,
            default=4,
            help="Number of files scanned concurrently.",
        )
        if command == "routes":
            command_parser.add_argument(
                "--prefix", default="", help="Prefix prepended to every route pattern."
            )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command not in COMMANDS:
        logger.warning(f"Unsupported command (command={args.command})")
        stderr.write(f"Unsupported command: {args.command}\n")
        return 2
    if args.max_workers <= 0:
        logger.warning(f"Invalid worker count (max_workers={args.max_workers})")
        stderr.write("max-workers must be > 0\n")
        return 2

    file_paths = [Path(path) for path in args.path]
    missing = [path for path in file_paths if not path.exists()]
    if missing:
        for path in missing:
            logger.warning(f"Path does not exist (path={path})")
            stderr.write(f"Path does not exist: {path}\n")
        return 2

    extractor = build_extractor(args)
    report = ProjectScanner(extractor, max_workers=args.max_workers).scan(file_paths)
    logger.info(
        f"Structure scan completed (command={args.command} files={len(file_paths)} "
        f"errors={len(report.errors)})"
    )
    _write_errors(errors=report.errors, stderr=stderr)
    if args.format == "json":
        if args.output:
            try:
                _write_json_file(
                    results=report.results,
                    errors=report.errors,
                    output_path=Path(args.output),
                )
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(results=report.results, errors=report.errors, stdout=stdout)
    else:
        _write_table(results=report.results, stdout=stdout)
    return 0


def build_extractor(args: argparse.Namespace) -> Extractor[Any]:
    """Create the extractor for the selected command.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Extractor instance.
    """
    if args.command == "records":
        return RecordExtractor()
    if args.command == "routes":
        return _PrefixedRoutes(RouteExtractor(), prefix=args.prefix)
    if args.command == "registrations":
        return RegistrationExtractor()
    if args.command == "settings":
        return SettingsExtractor()
    return HandlerExtractor()


def _write_errors(errors: list[ExtractionError], stderr: TextIO) -> None:
    """Write extraction errors to stderr.

    Args:
        errors: Files that could not be read.
        stderr: Standard error stream.
    """
    for error in errors:
        stderr.write(f"extraction_error: {error}\n")


def _payload(
    results: list[FileResult[Any]], errors: list[ExtractionError]
) -> dict[str, Any]:
    return {
        "results": [asdict(result) for result in results],
        "errors": [asdict(error) for error in errors],
    }


def _write_json(
    results: list[FileResult[Any]], errors: list[ExtractionError], stdout: TextIO
) -> None:
    """Write results and errors in JSON format.

    Args:
        results: Per-file extraction results.
        errors: Files that could not be read.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(_payload(results, errors), indent=2, sort_keys=True, default=str),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(
    results: list[FileResult[Any]], errors: list[ExtractionError], output_path: Path
) -> None:
    """Write raw JSON payload to an output file.

    Args:
        results: Per-file extraction results.
        errors: Files that could not be read.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(_payload(results, errors), indent=2, sort_keys=True, default=str),
        encoding="utf-8",
    )


def _write_table(results: list[FileResult[Any]], stdout: TextIO) -> None:
    """Write one table of entities per scanned file.

    Args:
        results: Per-file extraction results.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    for result in results:
        console.rule(result.file_path, style=Style(color="cyan"), characters="-")
        if not result.entities:
            console.print("(no entries)", markup=False, highlight=False)
            continue
        columns = [item.name for item in fields(result.entities[0])]
        table = Table(show_header=True, show_lines=True, expand=True)
        for column in columns:
            justify = "right" if column == "declaration_line" else "left"
            table.add_column(column, justify=justify, overflow="fold")
        for entity in result.entities:
            table.add_row(*[_cell(getattr(entity, column)) for column in columns])
        console.print(table)


def _cell(value: object) -> str:
    if isinstance(value, tuple) and all(isinstance(item, Field) for item in value):
        return "\n".join(
            f"{item.name}: {item.type_tag} (line {item.declaration_line})" for item in value
        )
    return str(value)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
