# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Code object reader implementations."""

from v5sym.readers.binutils import GNUBinutilsReader, ProsToolchainReader
from v5sym.readers.llvm import LLVMReader

__all__ = ["GNUBinutilsReader", "LLVMReader", "ProsToolchainReader"]
