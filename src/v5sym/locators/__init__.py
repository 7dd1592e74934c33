# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Code object locator implementations."""

from v5sym.locators.fixed import FixedPathLocator, pros_locator
from v5sym.locators.recent import RecentCodeObjectLocator
from v5sym.locators.vexcode import VEXcodeLocator
from v5sym.locators.vexide import VexideLocator

__all__ = [
    "FixedPathLocator",
    "RecentCodeObjectLocator",
    "VEXcodeLocator",
    "VexideLocator",
    "pros_locator",
]
