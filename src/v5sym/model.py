# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for symbolization results."""

from dataclasses import dataclass
from pathlib import Path

CodeObjectRef = Path


@dataclass(frozen=True)
class ResolvedLocation:
    """Represent a position in a source file.

    Attributes:
        source_file: Source file path as reported by the debug-info tool.
        line: Line in the source file (0-based).
        column: Column in the source line (0-based); ``None`` when the tool
            does not report columns.
    """

    source_file: Path
    line: int
    column: int | None = None


@dataclass(frozen=True)
class ResolvedSymbol:
    """Represent metadata read for one address from one code object.

    Attributes:
        symbol_name: Human-readable (demangled) symbol name.
        location: Source location; ``None`` when the code object has no
            line-level debug metadata for the address.
        code_object: Code object the metadata was read from.
    """

    symbol_name: str
    location: ResolvedLocation | None
    code_object: CodeObjectRef

    @property
    def has_location(self) -> bool:
        return self.location is not None
