# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Reader implementation for addr2line-style tools."""

import logging
import re
import sys
import threading
from pathlib import Path

from v5sym.model import ResolvedLocation, ResolvedSymbol
from v5sym.process import ToolExecutable
from v5sym.reader import NoSymbolDataError, ReaderParseError

logger = logging.getLogger(__name__)

UNKNOWN: str = "??"

# addr2line prints "path:line", optionally followed by " (discriminator N)".
_LOCATION_RE = re.compile(
    r"^(?P<path>.*):(?P<line>\d+|\?)(?:\s+\(discriminator \d+\))?$"
)


class GNUBinutilsReader:
    """Read code objects with GNU ``addr2line`` or a compatible tool."""

    def __init__(
        self, name: str = "GNU Binutils", executable: str = "addr2line"
    ) -> None:
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
            f"Checking addr2line (name={self.name} executable={self.executable})"
        )
        return self._tool.is_working(cancel)

    def resolve(
        self,
        address: str,
        code_object: Path,
        cancel: threading.Event | None = None,
    ) -> ResolvedSymbol:
        """Resolve an address with ``addr2line -f -C``.

        Raises:
            ReaderUnavailableError: If the tool cannot be started.
            ReaderProcessError: If the tool exits with an error.
            ReaderParseError: If the output is not a symbol and location line.
            NoSymbolDataError: If neither symbol nor location is known.
        """
        stdout = self._tool.run(
            ["-f", "-C", "-e", str(code_object), "--", address], cancel=cancel
        )
        lines = stdout.strip().splitlines()
        if len(lines) < 2:
            raise ReaderParseError(
                f"Expected a symbol name and a location from {self.name}, got {stdout!r}"
            )

        symbol_name = lines[0].strip()
        location = parse_location(lines[1].strip())
        if symbol_name in {"", UNKNOWN} and location is None:
            raise NoSymbolDataError(f"No symbol data for {address} in {code_object}")
        return ResolvedSymbol(
            symbol_name=symbol_name or UNKNOWN,
            location=location,
            code_object=code_object,
        )

    def __repr__(self) -> str:
        return f"GNUBinutilsReader(name={self.name!r}, executable={self.executable!r})"


def parse_location(location_string: str) -> ResolvedLocation | None:
    """Parse an addr2line ``path:line`` string.

    Args:
        location_string: Second output line of ``addr2line -f``.

    Returns:
        Location with a 0-based line, or ``None`` if the tool does not know it.

    Raises:
        ReaderParseError: If the text is not a location.
    """
    if location_string == UNKNOWN:
        return None
    match = _LOCATION_RE.match(location_string)
    if match is None:
        raise ReaderParseError(f"Cannot parse location {location_string!r}")
    path = match.group("path")
    line = match.group("line")
    if path in {"", UNKNOWN} or line == "?" or int(line) == 0:
        return None
    return ResolvedLocation(source_file=Path(path), line=int(line) - 1, column=None)


def host_system(platform: str | None = None) -> str:
    """Map a ``sys.platform`` value to the PROS toolchain system name."""
    platform = platform or sys.platform
    if platform == "win32":
        return "windows"
    if platform == "darwin":
        return "macos"
    return "linux"


def pros_toolchain_executable(toolchain_root: Path, system: str) -> Path:
    """Compute the path of the addr2line shipped with the PROS toolchain.

    Args:
        toolchain_root: Directory holding the ``sigbots.pros`` extension storage.
        system: Host system name (``windows``, ``macos`` or ``linux``).

    Returns:
        Path of ``arm-none-eabi-addr2line`` within the toolchain.
    """
    toolchain = toolchain_root / "sigbots.pros" / "install" / f"pros-toolchain-{system}"
    if system == "windows":
        toolchain = toolchain / "usr"
    return toolchain / "bin" / "arm-none-eabi-addr2line"


class ProsToolchainReader(GNUBinutilsReader):
    """Read code objects with the addr2line bundled in the PROS toolchain."""

    def __init__(self, toolchain_root: Path, system: str | None = None) -> None:
        """Initialize reader configuration.

        Args:
            toolchain_root: Directory holding the ``sigbots.pros`` extension storage.
            system: Host system name; detected from ``sys.platform`` if omitted.
        """
        executable = pros_toolchain_executable(toolchain_root, system or host_system())
        super().__init__(name="PROS Toolchain", executable=str(executable))
