# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Code object reader abstractions."""

import logging
import threading
from pathlib import Path
from typing import Protocol

from v5sym.model import ResolvedSymbol

logger = logging.getLogger(__name__)


class ReaderError(RuntimeError):
    """Represent a reader failure for one address and code object."""


class ReaderUnavailableError(ReaderError):
    """Represent a debug-info tool that cannot be started."""


class ReaderProcessError(ReaderError):
    """Represent a debug-info tool that exited with an error."""


class ReaderParseError(ReaderError):
    """Represent tool output that cannot be parsed."""


class NoEntryForAddressError(ReaderError):
    """Represent a tool reporting nothing for the requested address."""


class NoSymbolDataError(ReaderError):
    """Represent a tool entry without symbol data."""


class SymbolNotFoundError(NoSymbolDataError):
    """Represent symbol data with an empty symbol name."""


class CodeObjectReader(Protocol):
    """Read debug metadata from a code object with an external tool."""

    # Display name, shown to users when no reader works.
    name: str

    def is_healthy(self, cancel: threading.Event | None = None) -> bool:
        """Check whether the underlying tool can be used.

        Args:
            cancel: Optional cancellation signal.

        Returns:
            ``True`` if the tool runs, ``False`` otherwise.

        Raises:
            ResolutionCancelledError: If ``cancel`` is set while checking.
        """

    def resolve(
        self,
        address: str,
        code_object: Path,
        cancel: threading.Event | None = None,
    ) -> ResolvedSymbol:
        """Resolve an address to a symbol using one code object.

        Args:
            address: Hexadecimal address with ``0x`` prefix.
            code_object: Code object to read metadata from.
            cancel: Optional cancellation signal.

        Returns:
            Resolved symbol; its location is ``None`` when the object has no
            line-level metadata for the address.

        Raises:
            ReaderError: If the tool cannot help for this address and object.
            ResolutionCancelledError: If ``cancel`` is set while running.
        """
