# SPDX-License-Identifier: MIT
"""Host platform facts needed to name build artifacts."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Platform:
    """Description of the host platform.

    Attributes:
        os: Operating system name ('linux', 'darwin', 'windows', ...).
    """

    os: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def object_suffix(self) -> str:
        return ".o"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.is_windows else ""


def _detect_os() -> str:
    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


@lru_cache(maxsize=1)
def get_platform() -> Platform:
    """Return the current host platform."""
    return Platform(os=_detect_os())
