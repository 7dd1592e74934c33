# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Symbolize VEX V5 crash addresses into source locations."""

from v5sym.address import InvalidAddressError, is_user_space, parse_address
from v5sym.model import ResolvedLocation, ResolvedSymbol
from v5sym.process import ResolutionCancelledError
from v5sym.symbolizer import (
    AllCandidatesFailedError,
    AllReadersUnavailableError,
    NoCandidatesFoundError,
    SymbolizationError,
    Symbolizer,
)

__all__ = [
    "AllCandidatesFailedError",
    "AllReadersUnavailableError",
    "InvalidAddressError",
    "NoCandidatesFoundError",
    "ResolutionCancelledError",
    "ResolvedLocation",
    "ResolvedSymbol",
    "SymbolizationError",
    "Symbolizer",
    "is_user_space",
    "parse_address",
]
