import json
import sys
import threading
from pathlib import Path

import pytest

from v5sym.model import ResolvedLocation
from v5sym.process import ResolutionCancelledError, ToolExecutable
from v5sym.reader import (
    NoEntryForAddressError,
    NoSymbolDataError,
    ReaderParseError,
    ReaderProcessError,
    ReaderUnavailableError,
    SymbolNotFoundError,
)
from v5sym.readers import GNUBinutilsReader, LLVMReader, ProsToolchainReader
from v5sym.readers.binutils import host_system, parse_location, pros_toolchain_executable
from v5sym.readers.llvm import parse_symbolizer_output

needs_posix_shell = pytest.mark.skipif(
    sys.platform == "win32", reason="fake tools are POSIX shell scripts"
)

CODE_OBJECT = Path("/project/bin/monolith.elf")


def _fake_tool(
    tmp_path: Path, name: str, stdout: str, exit_code: int = 0, body: str = ""
) -> Path:
    """Write an executable script that records its arguments and prints ``stdout``."""
    script = tmp_path / name
    args_file = tmp_path / f"{name}.args"
    script.write_text(
        "\n".join(
            [
                "#!/bin/sh",
                'if [ "$1" = "--version" ]; then',
                f"  echo '{name} version 1.0'",
                "  exit 0",
                "fi",
                f"printf '%s\\n' \"$@\" > '{args_file}'",
                body,
                "cat <<'V5SYM_OUTPUT'",
                stdout,
                "V5SYM_OUTPUT",
                f"exit {exit_code}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    script.chmod(0o755)
    return script


def _recorded_args(tmp_path: Path, name: str) -> list[str]:
    return (tmp_path / f"{name}.args").read_text(encoding="utf-8").splitlines()


@needs_posix_shell
def test_rd_001_addr2line_resolves_symbol_and_zero_based_line(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "addr2line", "foo\n/src/x.c:42")
    reader = GNUBinutilsReader(executable=str(tool))

    resolved = reader.resolve("0x3801a24", CODE_OBJECT)

    assert resolved.symbol_name == "foo"
    assert resolved.location == ResolvedLocation(
        source_file=Path("/src/x.c"), line=41, column=None
    )
    assert resolved.code_object == CODE_OBJECT
    assert _recorded_args(tmp_path, "addr2line") == [
        "-f",
        "-C",
        "-e",
        str(CODE_OBJECT),
        "--",
        "0x3801a24",
    ]


@needs_posix_shell
def test_rd_002_addr2line_unknown_location_is_not_an_error(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "addr2line", "vexDisplayPrintf\n??")
    reader = GNUBinutilsReader(executable=str(tool))

    resolved = reader.resolve("0x3801a24", CODE_OBJECT)

    assert resolved.symbol_name == "vexDisplayPrintf"
    assert resolved.location is None


@needs_posix_shell
def test_rd_003_addr2line_without_any_symbol_data_fails(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "addr2line", "??\n??:0")
    reader = GNUBinutilsReader(executable=str(tool))

    with pytest.raises(NoSymbolDataError):
        reader.resolve("0x3801a24", CODE_OBJECT)


@needs_posix_shell
def test_rd_004_addr2line_single_line_output_is_a_parse_error(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "addr2line", "foo")
    reader = GNUBinutilsReader(executable=str(tool))

    with pytest.raises(ReaderParseError):
        reader.resolve("0x3801a24", CODE_OBJECT)


@needs_posix_shell
def test_rd_005_non_zero_exit_is_a_process_error(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "addr2line", "", exit_code=1)
    reader = GNUBinutilsReader(executable=str(tool))

    with pytest.raises(ReaderProcessError):
        reader.resolve("0x3801a24", CODE_OBJECT)


@needs_posix_shell
def test_rd_006_health_check_uses_version_flag(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "llvm-symbolizer", "[]")

    assert LLVMReader(executable=str(tool)).is_healthy() is True
    assert GNUBinutilsReader(executable=str(tool)).is_healthy() is True


def test_rd_007_missing_executable_is_unhealthy_and_unavailable(tmp_path: Path) -> None:
    missing = str(tmp_path / "does-not-exist")
    reader = LLVMReader(executable=missing)

    assert reader.is_healthy() is False
    assert GNUBinutilsReader(executable=missing).is_healthy() is False
    with pytest.raises(ReaderUnavailableError):
        reader.resolve("0x3801a24", CODE_OBJECT)


def test_rd_008_parse_location_handles_addr2line_conventions() -> None:
    assert parse_location("??") is None
    assert parse_location("??:0") is None
    assert parse_location("/src/x.c:?") is None
    assert parse_location("/src/x.c:0") is None
    assert parse_location("/src/x.c:7 (discriminator 2)") == ResolvedLocation(
        source_file=Path("/src/x.c"), line=6
    )
    assert parse_location("C:/src/x.c:12") == ResolvedLocation(
        source_file=Path("C:/src/x.c"), line=11
    )
    with pytest.raises(ReaderParseError):
        parse_location("no line number here")


def test_rd_009_pros_toolchain_path_depends_on_host_system(tmp_path: Path) -> None:
    assert pros_toolchain_executable(tmp_path, "linux") == (
        tmp_path
        / "sigbots.pros/install/pros-toolchain-linux/bin/arm-none-eabi-addr2line"
    )
    assert pros_toolchain_executable(tmp_path, "macos") == (
        tmp_path
        / "sigbots.pros/install/pros-toolchain-macos/bin/arm-none-eabi-addr2line"
    )
    assert pros_toolchain_executable(tmp_path, "windows") == (
        tmp_path
        / "sigbots.pros/install/pros-toolchain-windows/usr/bin/arm-none-eabi-addr2line"
    )
    assert host_system("win32") == "windows"
    assert host_system("darwin") == "macos"
    assert host_system("linux") == "linux"

    reader = ProsToolchainReader(tmp_path, system="linux")
    assert reader.name == "PROS Toolchain"
    assert reader.executable == str(pros_toolchain_executable(tmp_path, "linux"))
    assert reader.is_healthy() is False


@needs_posix_shell
def test_rd_010_llvm_symbolizer_resolves_zero_based_line_and_column(
    tmp_path: Path,
) -> None:
    output = json.dumps(
        [
            {
                "Address": "0x3801a24",
                "ModuleName": str(CODE_OBJECT),
                "Symbol": [
                    {
                        "FunctionName": "foo",
                        "FileName": "/src/x.c",
                        "Line": 10,
                        "Column": 3,
                    }
                ],
            }
        ]
    )
    tool = _fake_tool(tmp_path, "llvm-symbolizer", output)
    reader = LLVMReader(executable=str(tool))

    resolved = reader.resolve("0x3801a24", CODE_OBJECT)

    assert resolved.symbol_name == "foo"
    assert resolved.location == ResolvedLocation(
        source_file=Path("/src/x.c"), line=9, column=2
    )
    assert _recorded_args(tmp_path, "llvm-symbolizer") == [
        "--output-style=JSON",
        "-e",
        str(CODE_OBJECT),
        "0x3801a24",
    ]


@needs_posix_shell
def test_rd_011_llvm_symbolizer_invalid_json_is_a_parse_error(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "llvm-symbolizer", "not json")
    reader = LLVMReader(executable=str(tool))

    with pytest.raises(ReaderParseError):
        reader.resolve("0x3801a24", CODE_OBJECT)


def test_rd_012_llvm_output_edge_cases() -> None:
    with pytest.raises(NoEntryForAddressError):
        parse_symbolizer_output([], CODE_OBJECT)
    with pytest.raises(NoSymbolDataError):
        parse_symbolizer_output([{"Symbol": []}], CODE_OBJECT)
    with pytest.raises(NoSymbolDataError):
        parse_symbolizer_output([{"Address": "0x3801a24"}], CODE_OBJECT)
    with pytest.raises(SymbolNotFoundError):
        parse_symbolizer_output([{"Symbol": [{"FunctionName": ""}]}], CODE_OBJECT)
    with pytest.raises(NoEntryForAddressError, match="unsupported file format"):
        parse_symbolizer_output(
            [{"Error": {"Message": "unsupported file format"}}], CODE_OBJECT
        )
    with pytest.raises(ReaderParseError):
        parse_symbolizer_output({"Symbol": []}, CODE_OBJECT)


def test_rd_013_llvm_symbol_without_file_has_no_location() -> None:
    resolved = parse_symbolizer_output(
        [{"Symbol": [{"FunctionName": "vexSystemTimeGet", "FileName": "", "Line": 0}]}],
        CODE_OBJECT,
    )

    assert resolved.symbol_name == "vexSystemTimeGet"
    assert resolved.location is None


def test_rd_014_llvm_zero_column_means_unknown_column() -> None:
    resolved = parse_symbolizer_output(
        [
            {
                "Symbol": [
                    {"FunctionName": "foo", "FileName": "/src/x.c", "Line": 1, "Column": 0}
                ]
            }
        ],
        CODE_OBJECT,
    )

    assert resolved.location == ResolvedLocation(
        source_file=Path("/src/x.c"), line=0, column=None
    )


@needs_posix_shell
def test_rd_015_cancellation_kills_running_tool(tmp_path: Path) -> None:
    tool = _fake_tool(tmp_path, "addr2line", "foo\n/src/x.c:1", body="exec sleep 30")
    cancel = threading.Event()
    timer = threading.Timer(0.2, cancel.set)
    timer.start()
    try:
        with pytest.raises(ResolutionCancelledError):
            GNUBinutilsReader(executable=str(tool)).resolve(
                "0x3801a24", CODE_OBJECT, cancel=cancel
            )
    finally:
        timer.cancel()


def test_rd_016_already_cancelled_run_does_not_spawn(tmp_path: Path) -> None:
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(ResolutionCancelledError):
        ToolExecutable(str(tmp_path / "never-run")).run(["--help"], cancel=cancel)
