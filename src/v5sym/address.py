# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Address parsing and crash-report address detection."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

USER_SPACE_START: int = 0x3800000

# A crash report frame is a bare address, optionally preceded by a frame index.
_TERMINAL_ADDRESS_RE = re.compile(r"^\s*\d*:?\s*(?P<address>0x[0-9a-fA-F]+)\s*$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


class InvalidAddressError(ValueError):
    """Represent an address that is not a hexadecimal number."""


@dataclass(frozen=True)
class AddressMatch:
    """Represent an address found in a line of terminal output.

    Attributes:
        address: Parsed address value.
        start: Offset of the address text in the line.
        length: Length of the address text.
    """

    address: int
    start: int
    length: int


def parse_address(value: str | int) -> int:
    """Parse a hexadecimal address.

    Args:
        value: Address as an integer or hexadecimal text, with or without a
            ``0x`` prefix.

    Returns:
        Address value.

    Raises:
        InvalidAddressError: If the value is not a non-negative hex number.
    """
    if isinstance(value, int):
        if value < 0:
            raise InvalidAddressError(f"Address must not be negative: {value}")
        return value

    text = value.strip()
    if text[:2] in {"0x", "0X"}:
        text = text[2:]
    if not _HEX_RE.match(text):
        raise InvalidAddressError(
            f"The specified address must be a hexadecimal number: '{value}'"
        )
    return int(text, 16)


def format_address(address: int) -> str:
    """Format an address the way debug-info tools accept it."""
    return f"0x{address:x}"


def is_user_space(address: int) -> bool:
    """Check whether an address lies in the user program's memory region."""
    return address >= USER_SPACE_START


def find_addresses(line: str) -> list[AddressMatch]:
    """Find symbolizable addresses in one line of terminal output.

    Args:
        line: Terminal or crash-log line.

    Returns:
        Matches for user-space addresses; empty when the line holds none.
    """
    match = _TERMINAL_ADDRESS_RE.match(line)
    if match is None:
        return []
    address = int(match.group("address"), 16)
    if not is_user_space(address):
        logger.debug(f"Ignoring address outside user space (address={address:#x})")
        return []
    logger.debug(f"Address could possibly be symbolized (address={address:#x})")
    return [
        AddressMatch(
            address=address,
            start=match.start("address"),
            length=len(match.group("address")),
        )
    ]
