# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Links to sources that are only available online."""

from v5sym.model import ResolvedSymbol

PROS_BUILD_PREFIX: str = "/home/vsts/work/1/s/"
PROS_REPOSITORY_URL: str = (
    "https://www.github.com/purduesigbots/pros/blob/develop-pros-4/"
)
PROS_LINK_LABEL: str = "Open purduesigbots/pros"


def remote_source_links(resolved: ResolvedSymbol) -> dict[str, str]:
    """Map link labels to web URLs for symbols from prebuilt libraries.

    Args:
        resolved: Resolved symbol.

    Returns:
        Label to URL mapping; empty when the source is local.
    """
    links: dict[str, str] = {}
    location = resolved.location
    if location is None:
        return links

    source_path = location.source_file.as_posix()
    if source_path.startswith(PROS_BUILD_PREFIX):
        relative = source_path[len(PROS_BUILD_PREFIX) :]
        links[PROS_LINK_LABEL] = f"{PROS_REPOSITORY_URL}{relative}#L{location.line + 1}"
    return links
