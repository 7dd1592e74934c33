# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Locator for build systems that write code objects to fixed paths."""

import logging
from pathlib import Path

from v5sym.locator import LocatorInapplicableError

logger = logging.getLogger(__name__)

PROS_PROJECT_MARKER: str = "project.pros"
PROS_CODE_OBJECTS: tuple[str, ...] = (
    "bin/monolith.elf",
    "bin/hot.package.elf",
    "bin/cold.package.elf",
)


class FixedPathLocator:
    """Probe a fixed list of project-relative paths in priority order."""

    def __init__(
        self,
        name: str,
        relative_paths: tuple[str, ...] | list[str],
        marker: str | None = None,
    ) -> None:
        """Initialize locator configuration.

        Args:
            name: Display name of the build convention.
            relative_paths: Candidate paths, most preferred first.
            marker: Optional project-relative file that must exist for the
                convention to apply.
        """
        self.name = name
        self._relative_paths = tuple(relative_paths)
        self._marker = marker

    def find_code_objects(self, project_root: Path) -> list[Path]:
        """Return the configured paths that exist, in configured order.

        Args:
            project_root: Project directory to search in.

        Returns:
            Existing code object paths.

        Raises:
            LocatorInapplicableError: If the marker file is missing.
        """
        if self._marker is not None:
            if not (project_root / self._marker).exists():
                logger.debug(
                    f"Project does not follow convention (locator={self.name} "
                    f"missing_marker={self._marker})"
                )
                raise LocatorInapplicableError(
                    f"The folder {project_root} is not a {self.name} project."
                )
            logger.debug(
                f"Project follows convention (locator={self.name} marker={self._marker})"
            )

        found: list[Path] = []
        for relative_path in self._relative_paths:
            candidate = project_root / relative_path
            if candidate.is_file():
                logger.debug(
                    f"Found code object (locator={self.name} path={candidate})"
                )
                found.append(candidate)
        return found

    def __repr__(self) -> str:
        return f"FixedPathLocator(name={self.name!r})"


def pros_locator() -> FixedPathLocator:
    """Build the locator for PROS projects."""
    return FixedPathLocator(
        name="PROS",
        relative_paths=PROS_CODE_OBJECTS,
        marker=PROS_PROJECT_MARKER,
    )
