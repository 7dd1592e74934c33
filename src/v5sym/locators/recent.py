# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Locator that prefers the most recently built code object."""

import logging
from dataclasses import dataclass
from pathlib import Path

from v5sym.locator import (
    CodeObjectLocator,
    LocatorFailureError,
    LocatorInapplicableError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _TimestampedFile:
    path: Path
    mtime: float


class RecentCodeObjectLocator:
    """Merge several build conventions and order their hits by build time."""

    def __init__(
        self, conventions: list[CodeObjectLocator], name: str = "Recent Build"
    ) -> None:
        """Initialize locator configuration.

        Args:
            conventions: Build conventions to probe.
            name: Display name of the locator.
        """
        self.name = name
        self._conventions = list(conventions)

    def find_code_objects(self, project_root: Path) -> list[Path]:
        """Return code objects from every matching convention, newest first.

        Args:
            project_root: Project directory to search in.

        Returns:
            Code object paths ordered by modification time, most recent first.

        Raises:
            LocatorInapplicableError: If no convention matches the project.
        """
        found: list[_TimestampedFile] = []
        seen: set[Path] = set()
        applicable = 0
        for convention in self._conventions:
            try:
                paths = convention.find_code_objects(project_root)
            except LocatorInapplicableError as exc:
                logger.debug(
                    f"Convention does not apply (convention={convention.name} reason={exc})"
                )
                continue
            except (LocatorFailureError, OSError) as exc:
                applicable += 1
                logger.warning(
                    f"Convention lookup failed (convention={convention.name} error={exc})"
                )
                continue
            applicable += 1
            for path in paths:
                if path in seen:
                    continue
                timestamped = _stat(path)
                if timestamped is not None:
                    seen.add(path)
                    found.append(timestamped)

        if applicable == 0:
            raise LocatorInapplicableError(
                f"The folder {project_root} does not match any known build convention."
            )

        found.sort(key=lambda item: item.mtime, reverse=True)
        return [item.path for item in found]


def _stat(path: Path) -> _TimestampedFile | None:
    try:
        return _TimestampedFile(path=path, mtime=path.stat().st_mtime)
    except OSError as exc:
        logger.debug(f"Code object disappeared while probing (path={path} error={exc})")
        return None
