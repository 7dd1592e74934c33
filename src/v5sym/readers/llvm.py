# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Reader implementation for ``llvm-symbolizer``."""

import json
import logging
import threading
from pathlib import Path

from v5sym.model import ResolvedLocation, ResolvedSymbol
from v5sym.process import ToolExecutable
from v5sym.reader import (
    NoEntryForAddressError,
    NoSymbolDataError,
    ReaderParseError,
    SymbolNotFoundError,
)

logger = logging.getLogger(__name__)


class LLVMReader:
    """Read code objects with ``llvm-symbolizer`` JSON output."""

    def __init__(self, name: str = "LLVM", executable: str = "llvm-symbolizer") -> None:
        """Initialize reader configuration.

        Args:
            name: Display name of the tool installation.
            executable: Name or path of the executable to spawn.
        """
        self.name = name
        self.executable = executable
        self._tool = ToolExecutable(executable)

    def is_healthy(self, cancel: threading.Event | None = None) -> bool:
        logger.info(
            f"Checking llvm-symbolizer (name={self.name} executable={self.executable})"
        )
        return self._tool.is_working(cancel)

    def resolve(
        self,
        address: str,
        code_object: Path,
        cancel: threading.Event | None = None,
    ) -> ResolvedSymbol:
        """Resolve an address with ``llvm-symbolizer --output-style=JSON``.

        Raises:
            ReaderUnavailableError: If the tool cannot be started.
            ReaderProcessError: If the tool exits with an error.
            ReaderParseError: If the output is not the expected JSON.
            NoEntryForAddressError: If the tool has no entry for the address.
            NoSymbolDataError: If the entry has no symbol data.
            SymbolNotFoundError: If the symbol has no function name.
        """
        stdout = self._tool.run(
            ["--output-style=JSON", "-e", str(code_object), address], cancel=cancel
        )
        try:
            payload = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise ReaderParseError(
                f"{self.name} returned invalid JSON: {exc}"
            ) from exc
        return parse_symbolizer_output(payload, code_object)

    def __repr__(self) -> str:
        return f"LLVMReader(name={self.name!r}, executable={self.executable!r})"


def parse_symbolizer_output(payload: object, code_object: Path) -> ResolvedSymbol:
    """Build a resolved symbol from decoded ``llvm-symbolizer`` JSON.

    Args:
        payload: Decoded JSON document.
        code_object: Code object the output was produced for.

    Returns:
        Resolved symbol for the first entry's first symbol.

    Raises:
        ReaderParseError: If the document does not have the expected shape.
        NoEntryForAddressError: If there is no entry, or the entry is an error.
        NoSymbolDataError: If the entry has no symbol data.
        SymbolNotFoundError: If the symbol has no function name.
    """
    if not isinstance(payload, list):
        raise ReaderParseError(f"Expected a JSON array, got {type(payload).__name__}")
    if not payload:
        raise NoEntryForAddressError("No symbolizer entry for this address")
    entry = payload[0]
    if not isinstance(entry, dict):
        raise ReaderParseError(f"Expected a JSON object entry, got {entry!r}")

    error = entry.get("Error")
    if isinstance(error, dict):
        raise NoEntryForAddressError(
            f"No symbolizer entry for this address: {error.get('Message', error)}"
        )

    symbols = entry.get("Symbol")
    if not isinstance(symbols, list) or not symbols:
        raise NoSymbolDataError("No symbol data for this address")
    symbol = symbols[0]
    if not isinstance(symbol, dict):
        raise ReaderParseError(f"Expected a JSON object symbol, got {symbol!r}")

    function_name = symbol.get("FunctionName")
    if not function_name:
        raise SymbolNotFoundError("The symbol does not exist")

    return ResolvedSymbol(
        symbol_name=str(function_name),
        location=_symbol_location(symbol),
        code_object=code_object,
    )


def _symbol_location(symbol: dict[str, object]) -> ResolvedLocation | None:
    """Convert 1-based JSON line/column fields to a 0-based location."""
    file_name = symbol.get("FileName")
    if not file_name:
        return None
    line = symbol.get("Line")
    column = symbol.get("Column")
    if not isinstance(line, int) or line < 1:
        return None
    return ResolvedLocation(
        source_file=Path(str(file_name)),
        line=line - 1,
        column=column - 1 if isinstance(column, int) and column >= 1 else None,
    )
