# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Locator for vexide (Rust/Cargo) projects."""

import logging
import tomllib
from pathlib import Path

from v5sym.locator import LocatorFailureError, LocatorInapplicableError

logger = logging.getLogger(__name__)

CARGO_MANIFEST: str = "Cargo.toml"
VEXIDE_TARGET_TRIPLES: tuple[str, ...] = ("armv7a-vex-v5", "armv7a-vexos-eabi")
CARGO_PROFILES: tuple[str, ...] = ("debug", "release")


class VexideLocator:
    """Find binaries built by Cargo for the V5 target."""

    name = "vexide"

    def find_code_objects(self, project_root: Path) -> list[Path]:
        """Return built binaries named in the Cargo manifest.

        Raises:
            LocatorInapplicableError: If the project has no Cargo manifest.
            LocatorFailureError: If the manifest cannot be read or parsed.
        """
        manifest_path = project_root / CARGO_MANIFEST
        try:
            manifest = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise LocatorInapplicableError(
                f"The folder {project_root} is not a Cargo project."
            ) from None
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            logger.warning(
                f"Cargo manifest could not be read (path={manifest_path} error={exc})"
            )
            raise LocatorFailureError(f"Cannot read {manifest_path}: {exc}") from exc

        binary_names = _binary_names(manifest)
        if not binary_names:
            logger.debug(f"Cargo manifest names no binaries (path={manifest_path})")
            return []

        found: list[Path] = []
        for triple in VEXIDE_TARGET_TRIPLES:
            for profile in CARGO_PROFILES:
                output_dir = project_root / "target" / triple / profile
                for binary_name in binary_names:
                    candidate = output_dir / binary_name
                    if candidate.is_file():
                        found.append(candidate)
        return found


def _binary_names(manifest: dict[str, object]) -> list[str]:
    """Collect binary target names from a parsed Cargo manifest."""
    names: list[str] = []
    package = manifest.get("package")
    if isinstance(package, dict) and isinstance(package.get("name"), str):
        names.append(package["name"])
    bins = manifest.get("bin")
    if isinstance(bins, list):
        for entry in bins:
            if isinstance(entry, dict) and isinstance(entry.get("name"), str):
                if entry["name"] not in names:
                    names.append(entry["name"])
    return names
