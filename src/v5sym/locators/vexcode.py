# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Locator for VEXcode makefile projects."""

import logging
from pathlib import Path

from v5sym.locator import LocatorFailureError, LocatorInapplicableError

logger = logging.getLogger(__name__)

VEXCODE_MAKEFILE: str = "makefile"
VEXCODE_MAKEFILE_HEADER: str = "# VEXcode makefile"
VEXCODE_BUILD_DIR: str = "build"


class VEXcodeLocator:
    """Find ELF files written by a VEXcode makefile build."""

    name = "VEXcode"

    def find_code_objects(self, project_root: Path) -> list[Path]:
        """Return ELF files in the build directory, sorted by name.

        Raises:
            LocatorInapplicableError: If there is no VEXcode makefile.
            LocatorFailureError: If the build directory cannot be listed.
        """
        makefile = project_root / VEXCODE_MAKEFILE
        try:
            with makefile.open(encoding="utf-8", errors="replace") as handle:
                header = handle.readline()
        except FileNotFoundError:
            raise LocatorInapplicableError(
                f"The folder {project_root} has no VEXcode makefile."
            ) from None
        except OSError as exc:
            raise LocatorFailureError(f"Cannot read {makefile}: {exc}") from exc
        if not header.startswith(VEXCODE_MAKEFILE_HEADER):
            raise LocatorInapplicableError(
                f"The makefile in {project_root} was not generated by VEXcode."
            )

        build_dir = project_root / VEXCODE_BUILD_DIR
        if not build_dir.is_dir():
            logger.debug(f"VEXcode project has not been built (build_dir={build_dir})")
            return []
        try:
            return sorted(path for path in build_dir.glob("*.elf") if path.is_file())
        except OSError as exc:
            raise LocatorFailureError(f"Cannot list {build_dir}: {exc}") from exc
