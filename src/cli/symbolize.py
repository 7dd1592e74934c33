# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line front end for symbolizing VEX V5 crash addresses."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from v5sym.address import (
    InvalidAddressError,
    find_addresses,
    format_address,
    is_user_space,
    parse_address,
)
from v5sym.config import LOG_LEVELS, SymbolizerConfig, build_symbolizer
from v5sym.debug_metadata import (
    DebugMetadataPatchError,
    apply_auto_fix,
    can_auto_fix,
    should_offer_debug_fix,
)
from v5sym.model import ResolvedSymbol
from v5sym.remote import remote_source_links
from v5sym.symbolizer import (
    AllCandidatesFailedError,
    AllReadersUnavailableError,
    NoCandidatesFoundError,
    SymbolizationError,
    Symbolizer,
)

logger = logging.getLogger(__name__)

LLVM_DOWNLOAD_URL: str = "https://github.com/llvm/llvm-project/releases/latest"
PROS_EXTENSION_ID: str = "sigbots.pros"

EXIT_OK: int = 0
EXIT_RESOLUTION_FAILED: int = 1
EXIT_USAGE: int = 2


def configure_logging(level: int = logging.WARNING) -> None:
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
    parser = argparse.ArgumentParser(prog="v5sym")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Logging threshold; overrides V5SYM_LOG_LEVEL.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve")
    resolve_parser.add_argument(
        "--path", required=True, help="Project directory containing build output."
    )
    resolve_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    resolve_parser.add_argument("address", help="Hexadecimal address to resolve.")

    scan_parser = subparsers.add_parser("scan")
    scan_parser.add_argument(
        "--path", required=True, help="Project directory containing build output."
    )
    scan_parser.add_argument(
        "--input",
        required=False,
        help="Crash log to scan for addresses; standard input when omitted.",
    )
    scan_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )

    enable_debug_parser = subparsers.add_parser("enable-debug")
    enable_debug_parser.add_argument(
        "--path", required=True, help="VEXcode project directory."
    )
    return parser


def run(
    argv: list[str],
    stdout: TextIO,
    stderr: TextIO,
    stdin: TextIO | None = None,
    symbolizer: Symbolizer | None = None,
) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.
        stdin: Standard input stream, used by ``scan`` without ``--input``.
        symbolizer: Symbolizer to use instead of one built from the environment.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return EXIT_USAGE

    try:
        config = SymbolizerConfig.from_env()
    except ValueError as exc:
        logger.warning(f"Invalid configuration (error={exc})")
        stderr.write(f"Invalid configuration: {exc}\n")
        return EXIT_USAGE
    logging.getLogger().setLevel(args.log_level or config.log_level)
    if symbolizer is None:
        symbolizer = build_symbolizer(config)

    project_root = Path(args.path)
    if not project_root.is_dir():
        logger.warning(f"Path is not a directory (path={project_root})")
        stderr.write(f"Path is not a directory: {project_root}\n")
        return EXIT_USAGE

    if args.command == "resolve":
        return _run_resolve(args, symbolizer, project_root, stdout, stderr)
    if args.command == "scan":
        return _run_scan(args, symbolizer, project_root, stdout, stderr, stdin)
    if args.command == "enable-debug":
        return _run_enable_debug(project_root, stdout, stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return EXIT_USAGE


def _run_resolve(
    args: argparse.Namespace,
    symbolizer: Symbolizer,
    project_root: Path,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run resolve command.

    Returns:
        Exit code.
    """
    try:
        address = parse_address(args.address)
    except InvalidAddressError as exc:
        stderr.write(f"{exc}\n")
        return EXIT_USAGE
    if not is_user_space(address):
        stderr.write(
            f"Address {format_address(address)} is outside of user program memory.\n"
        )
        return EXIT_USAGE

    try:
        resolved = symbolizer.resolve(address, project_root)
    except SymbolizationError as exc:
        logger.info(
            f"Failed to resolve address (address={format_address(address)} error={exc})"
        )
        _write_failure(exc, project_root, stderr)
        return EXIT_RESOLUTION_FAILED

    if args.format == "json":
        payload = {"address": format_address(address), **_symbol_payload(resolved)}
        _write_json(payload, stdout)
        return EXIT_OK

    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(describe_symbol(resolved), markup=False, highlight=False)
    for label, url in remote_source_links(resolved).items():
        console.print(f"{label}: {url}", markup=False, highlight=False)
    if should_offer_debug_fix(resolved, project_root):
        console.print(
            "No source location is available. Run `v5sym enable-debug --path "
            f"{project_root}` to enable debug metadata, then rebuild and reupload.",
            markup=False,
            highlight=False,
        )
    return EXIT_OK


def _run_scan(
    args: argparse.Namespace,
    symbolizer: Symbolizer,
    project_root: Path,
    stdout: TextIO,
    stderr: TextIO,
    stdin: TextIO | None,
) -> int:
    """Run scan command.

    Returns:
        Exit code; ``1`` when any found address could not be resolved.
    """
    if args.input:
        try:
            lines = Path(args.input).read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed to read crash log (input={args.input} error={exc})")
            stderr.write(f"Failed to read crash log: {args.input}\n")
            return EXIT_USAGE
    else:
        lines = (stdin or sys.stdin).read().splitlines()

    rows: list[dict[str, object]] = []
    failed = 0
    for line_no, line in enumerate(lines, start=1):
        for match in find_addresses(line):
            row: dict[str, object] = {
                "log_line": line_no,
                "address": format_address(match.address),
            }
            try:
                resolved = symbolizer.resolve(match.address, project_root)
            except SymbolizationError as exc:
                failed += 1
                row["error"] = str(exc)
            else:
                row.update(_symbol_payload(resolved))
            rows.append(row)

    logger.info(f"Scan completed (addresses={len(rows)} failed={failed})")
    if args.format == "json":
        _write_json({"results": rows}, stdout)
    else:
        _write_scan_table(rows, stdout)
    return EXIT_RESOLUTION_FAILED if failed else EXIT_OK


def _run_enable_debug(project_root: Path, stdout: TextIO, stderr: TextIO) -> int:
    """Run enable-debug command.

    Returns:
        Exit code.
    """
    if not can_auto_fix(project_root):
        stderr.write(
            "Debug metadata cannot be enabled automatically: the project has no "
            "unpatched VEXcode makefile.\n"
        )
        return EXIT_USAGE
    try:
        makefile_path = apply_auto_fix(project_root)
    except (DebugMetadataPatchError, OSError) as exc:
        logger.warning(
            f"Failed to enable debug metadata (path={project_root} error={exc})"
        )
        stderr.write(f"Couldn't enable debug metadata: {exc}\n")
        return EXIT_USAGE
    stdout.write(
        f"Enabled debug metadata in {makefile_path}! "
        "Clean the project and reupload it to finish.\n"
    )
    return EXIT_OK


def describe_symbol(resolved: ResolvedSymbol) -> str:
    """Describe a resolved symbol in one line.

    Args:
        resolved: Resolved symbol.

    Returns:
        ``symbol in file:line[:column] (code object)``, lines and columns 1-based.
    """
    message = resolved.symbol_name
    location = resolved.location
    if location is not None:
        message += f" in {location.source_file}:{location.line + 1}"
        if location.column is not None:
            message += f":{location.column + 1}"
    return f"{message} ({resolved.code_object.name})"


def _symbol_payload(resolved: ResolvedSymbol) -> dict[str, object]:
    """Convert a resolved symbol into JSON-compatible values with 1-based positions."""
    location = resolved.location
    return {
        "symbol": resolved.symbol_name,
        "file": str(location.source_file) if location else None,
        "line": location.line + 1 if location else None,
        "column": (
            location.column + 1 if location and location.column is not None else None
        ),
        "code_object": str(resolved.code_object),
        "links": remote_source_links(resolved),
    }


def _write_failure(exc: SymbolizationError, project_root: Path, stderr: TextIO) -> None:
    """Write a resolution failure with diagnostic detail and suggested fixes."""
    stderr.write(f"Couldn't resolve address: {exc}\n")
    if isinstance(exc, NoCandidatesFoundError):
        for attempt in exc.errors:
            stderr.write(f"  {attempt.locator_name}: {attempt.error}\n")
        stderr.write("Build the project first, then try again.\n")
    elif isinstance(exc, AllReadersUnavailableError):
        stderr.write(f"Download LLVM: {LLVM_DOWNLOAD_URL}\n")
        stderr.write(
            f"Or install the PROS toolchain through the {PROS_EXTENSION_ID} "
            "VS Code extension.\n"
        )
    elif isinstance(exc, AllCandidatesFailedError):
        for failure in exc.errors:
            stderr.write(f"  {failure.code_object}: {failure.error}\n")
        if can_auto_fix(project_root):
            stderr.write(
                "Debug metadata is disabled in this project. Run `v5sym enable-debug "
                f"--path {project_root}` to enable it.\n"
            )


def _write_json(payload: dict[str, object], stdout: TextIO) -> None:
    """Write a JSON payload to stdout."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_scan_table(rows: list[dict[str, object]], stdout: TextIO) -> None:
    """Write scan results as a table."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, expand=True)
    table.add_column("log_line", justify="right")
    table.add_column("address")
    table.add_column("symbol", ratio=3, overflow="fold")
    table.add_column("location", ratio=4, overflow="fold")
    table.add_column("code_object", ratio=2, overflow="fold")
    for row in rows:
        if "error" in row:
            table.add_row(
                str(row["log_line"]), str(row["address"]), "", str(row["error"]), ""
            )
            continue
        location = ""
        if row["file"] is not None:
            location = f"{row['file']}:{row['line']}"
            if row["column"] is not None:
                location += f":{row['column']}"
        table.add_row(
            str(row["log_line"]),
            str(row["address"]),
            str(row["symbol"]),
            location,
            Path(str(row["code_object"])).name,
        )
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
