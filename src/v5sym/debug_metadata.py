# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Enable debug metadata in VEXcode makefiles."""

import logging
from pathlib import Path

from v5sym.locators.vexcode import VEXCODE_MAKEFILE, VEXCODE_MAKEFILE_HEADER
from v5sym.model import ResolvedSymbol

logger = logging.getLogger(__name__)

INSERTION_POINT: str = "include vex/mkenv.mk"
DEBUG_FLAGS_BLOCK: str = "\n\n# enable debug metadata\nCFLAGS += -g\nCXX_FLAGS += -g"
_DEBUG_FLAG: str = " -g"


class DebugMetadataPatchError(RuntimeError):
    """Represent a makefile that cannot be patched."""


def can_enable_debug_metadata(makefile_contents: str) -> bool:
    """Check whether the debug metadata patch applies to a makefile.

    Args:
        makefile_contents: Text of the project makefile.

    Returns:
        ``True`` for an unpatched VEXcode makefile with the insertion point.
    """
    if not makefile_contents.startswith(VEXCODE_MAKEFILE_HEADER):
        return False
    if INSERTION_POINT not in makefile_contents:
        return False
    # Already patched, or debug flags were added by hand.
    if _DEBUG_FLAG in makefile_contents:
        return False
    return True


def enable_debug_metadata(makefile_contents: str) -> str:
    """Add ``-g`` compiler flags after the VEXcode environment include.

    Args:
        makefile_contents: Text of the project makefile.

    Returns:
        Patched makefile text.

    Raises:
        DebugMetadataPatchError: If the makefile is not in a patchable state,
            including when the patch was already applied.
    """
    if not can_enable_debug_metadata(makefile_contents):
        raise DebugMetadataPatchError(
            "The makefile is not in a fixable state (perhaps the fix was already applied)."
        )
    return makefile_contents.replace(
        INSERTION_POINT, INSERTION_POINT + DEBUG_FLAGS_BLOCK, 1
    )


def _read_makefile(project_root: Path) -> str:
    return (project_root / VEXCODE_MAKEFILE).read_text(encoding="utf-8")


def can_auto_fix(project_root: Path) -> bool:
    """Check whether debug metadata can be enabled in a project.

    Unreadable or missing makefiles are reported as not fixable.
    """
    try:
        makefile = _read_makefile(project_root)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug(f"Makefile not readable (project_root={project_root} error={exc})")
        return False
    return can_enable_debug_metadata(makefile)


def apply_auto_fix(project_root: Path) -> Path:
    """Enable debug metadata in a project's makefile.

    Args:
        project_root: VEXcode project directory.

    Returns:
        Path of the rewritten makefile.

    Raises:
        DebugMetadataPatchError: If the makefile is not patchable.
        OSError: If the makefile cannot be read or written.
    """
    makefile_path = project_root / VEXCODE_MAKEFILE
    logger.info(f"Attempting to enable debug metadata (makefile={makefile_path})")
    patched = enable_debug_metadata(_read_makefile(project_root))
    makefile_path.write_text(patched, encoding="utf-8")
    logger.info(f"Enabled debug metadata (makefile={makefile_path})")
    return makefile_path


def should_offer_debug_fix(resolved: ResolvedSymbol, project_root: Path) -> bool:
    """Check whether enabling debug metadata could add a missing location."""
    return not resolved.has_location and can_auto_fix(project_root)
