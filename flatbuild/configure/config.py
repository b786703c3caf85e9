# SPDX-License-Identifier: MIT
"""Build settings for flatbuild.

Settings come from built-in defaults, the ``CXX`` environment variable
and an optional ``flatbuild.json`` in the working directory, in
increasing order of precedence. Command-line switches are applied on top
by the caller.

Example flatbuild.json:
    {
        "cxx": "clang++",
        "std": "c++17",
        "cflags": "-Wall -Wextra",
        "display_error": "less -X"
    }
"""

from __future__ import annotations

import json
import os
import shlex
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from flatbuild.core.errors import ConfigureError

SETTINGS_FILE = "flatbuild.json"

_FLAG_KEYS = (
    "cflags",
    "ldflags",
    "cflags_optim",
    "ldflags_optim",
    "cflags_debug",
    "ldflags_debug",
)


def _default_cxx() -> str:
    return os.environ.get("CXX") or "g++"


@dataclass
class Settings:
    """Compiler selection and flags for a build.

    Attributes:
        cxx: Compiler executable, also used to link.
        std: Language standard passed as ``-std=``.
        cflags: Flags used for every compile.
        ldflags: Flags used for every link.
        cflags_optim: Extra compile flags for an optimised build.
        ldflags_optim: Extra link flags for an optimised build.
        cflags_debug: Extra compile flags for a debug build.
        ldflags_debug: Extra link flags for a debug build.
        display_error: Command run on the log file after a failure; when
            unset the log is written to stderr.
        source_suffix: Suffix identifying compilation units.
        jobs: Maximum number of concurrent compiles.
        debug: Use the debug flag set instead of the optimised one.
    """

    cxx: str = field(default_factory=_default_cxx)
    std: str = "c++20"
    cflags: list[str] = field(default_factory=lambda: ["-Wall"])
    ldflags: list[str] = field(default_factory=list)
    cflags_optim: list[str] = field(default_factory=lambda: ["-O2", "-DNDEBUG"])
    ldflags_optim: list[str] = field(default_factory=list)
    cflags_debug: list[str] = field(
        default_factory=lambda: ["-D_GLIBCXX_DEBUG", "-D_GLIBCXX_DEBUG_PEDANTIC", "-g"]
    )
    ldflags_debug: list[str] = field(default_factory=lambda: ["-g"])
    display_error: str | None = None
    source_suffix: str = ".cpp"
    jobs: int = 1
    debug: bool = False

    def effective_cflags(self) -> list[str]:
        extra = self.cflags_debug if self.debug else self.cflags_optim
        return self.cflags + extra

    def effective_ldflags(self) -> list[str]:
        extra = self.ldflags_debug if self.debug else self.ldflags_optim
        return self.ldflags + extra

    def update(self, data: dict[str, Any], origin: str = "settings") -> None:
        """Apply overrides from a mapping.

        Flag values may be given as a list or a whitespace-separated string.

        Raises:
            ConfigureError: On an unknown key or a value of the wrong type.
        """
        known = {f.name for f in fields(self)}
        for key, value in data.items():
            if key not in known:
                raise ConfigureError(f"{origin}: unknown setting '{key}'")
            if key in _FLAG_KEYS:
                value = _as_flags(key, value, origin)
            elif key == "jobs":
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    raise ConfigureError(f"{origin}: 'jobs' must be a positive integer")
            elif key == "debug":
                if not isinstance(value, bool):
                    raise ConfigureError(f"{origin}: 'debug' must be true or false")
            elif value is not None and not isinstance(value, str):
                raise ConfigureError(f"{origin}: '{key}' must be a string")
            elif value is None and key != "display_error":
                raise ConfigureError(f"{origin}: '{key}' must be a string")
            setattr(self, key, value)


def _as_flags(key: str, value: Any, origin: str) -> list[str]:
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigureError(f"{origin}: '{key}' must be a string or a list of strings")


def load_settings(
    root_dir: Path | str = ".", filename: str = SETTINGS_FILE
) -> Settings:
    """Load settings for a working directory.

    Args:
        root_dir: Directory containing the optional settings file.
        filename: Name of the settings file within root_dir.

    Returns:
        Defaults, overridden by the settings file if present.

    Raises:
        ConfigureError: If the settings file cannot be read or is invalid.
    """
    settings = Settings()
    path = Path(root_dir) / filename
    if not path.exists():
        return settings

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigureError(f"{path}: cannot read settings: {e}") from e

    if not isinstance(data, dict):
        raise ConfigureError(f"{path}: settings must be a JSON object")

    settings.update(data, origin=str(path))
    return settings
