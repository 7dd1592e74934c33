# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Code object locator abstractions."""

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class LocatorError(RuntimeError):
    """Represent a locator that produced no code objects."""


class LocatorInapplicableError(LocatorError):
    """Represent a project that does not follow the locator's convention."""


class LocatorFailureError(LocatorError):
    """Represent a failed lookup in a project that follows the convention."""


class CodeObjectLocator(Protocol):
    """Find code objects that can be used in symbolization."""

    name: str

    def find_code_objects(self, project_root: Path) -> list[Path]:
        """Find code objects in a project, most preferred first.

        Args:
            project_root: Project directory to search in.

        Returns:
            Existing code object paths; empty if the project has no build output.

        Raises:
            LocatorInapplicableError: If the project does not match the convention.
            LocatorFailureError: If the convention matched but lookup failed.
        """
