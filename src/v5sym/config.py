# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Symbolizer configuration and default wiring."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_path

from v5sym.locator import CodeObjectLocator
from v5sym.locators import (
    RecentCodeObjectLocator,
    VEXcodeLocator,
    VexideLocator,
    pros_locator,
)
from v5sym.reader import CodeObjectReader
from v5sym.readers import GNUBinutilsReader, LLVMReader, ProsToolchainReader
from v5sym.symbolizer import Symbolizer

logger = logging.getLogger(__name__)

ENV_PREFIX: str = "V5SYM_"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_pros_toolchain_root() -> Path:
    """Return the VS Code extension storage directory the PROS toolchain lives in."""
    config_dir = user_config_path("Code", appauthor=False, roaming=True)
    return config_dir / "User" / "globalStorage"


@dataclass(frozen=True)
class SymbolizerConfig:
    """Describe the tools and settings used to build a symbolizer.

    Attributes:
        llvm_symbolizer: Name or path of ``llvm-symbolizer``.
        addr2line: Name or path of the host GNU ``addr2line``.
        arm_addr2line: Name or path of the ARM embedded toolchain ``addr2line``.
        pros_toolchain_root: Directory holding the PROS toolchain install.
        log_level: Logging threshold name.
    """

    llvm_symbolizer: str = "llvm-symbolizer"
    addr2line: str = "addr2line"
    arm_addr2line: str = "arm-none-eabi-addr2line"
    pros_toolchain_root: Path = field(default_factory=default_pros_toolchain_root)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SymbolizerConfig":
        """Build configuration from ``V5SYM_*`` environment variables.

        Args:
            environ: Environment mapping; defaults to ``os.environ``.

        Returns:
            Configuration with environment overrides applied.

        Raises:
            ValueError: If ``V5SYM_LOG_LEVEL`` is not a known level.
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        log_level = environ.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unsupported log level '{log_level}'; expected one of {', '.join(LOG_LEVELS)}"
            )
        toolchain_root = environ.get(f"{ENV_PREFIX}PROS_TOOLCHAIN_ROOT")
        return cls(
            llvm_symbolizer=environ.get(
                f"{ENV_PREFIX}LLVM_SYMBOLIZER", defaults.llvm_symbolizer
            ),
            addr2line=environ.get(f"{ENV_PREFIX}ADDR2LINE", defaults.addr2line),
            arm_addr2line=environ.get(
                f"{ENV_PREFIX}ARM_ADDR2LINE", defaults.arm_addr2line
            ),
            pros_toolchain_root=(
                Path(toolchain_root) if toolchain_root else defaults.pros_toolchain_root
            ),
            log_level=log_level,
        )


def build_readers(config: SymbolizerConfig) -> list[CodeObjectReader]:
    """Create code object readers, most preferred first.

    LLVM comes first because it is the only tool that reports columns.
    """
    return [
        LLVMReader(executable=config.llvm_symbolizer),
        ProsToolchainReader(config.pros_toolchain_root),
        GNUBinutilsReader(
            name="ARM Embedded Toolchain", executable=config.arm_addr2line
        ),
        GNUBinutilsReader(executable=config.addr2line),
    ]


def build_locators() -> list[CodeObjectLocator]:
    """Create code object locators, most preferred first."""
    return [
        RecentCodeObjectLocator([pros_locator(), VEXcodeLocator(), VexideLocator()]),
    ]


def build_symbolizer(config: SymbolizerConfig) -> Symbolizer:
    """Create a symbolizer wired with the default locators and readers."""
    logger.debug(f"Building symbolizer (config={config})")
    return Symbolizer(locators=build_locators(), readers=build_readers(config))
