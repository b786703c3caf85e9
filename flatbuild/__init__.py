# SPDX-License-Identifier: MIT
"""
Flatbuild: a no-frills incremental builder for small C++ projects.

Every .cpp file in the working directory that defines main() becomes an
executable of the same name. Local headers (#include "...") are scanned
recursively to find dependencies, and a header's same-named .cpp file
is compiled and linked in automatically. Rebuilds are decided by file
modification times.
"""

from __future__ import annotations

__version__ = "0.1.0"

from flatbuild.configure.config import Settings, load_settings  # noqa: E402
from flatbuild.core.errors import FlatbuildError, MissingHeaderError  # noqa: E402
from flatbuild.core.project import Project  # noqa: E402
from flatbuild.core.staleness import needs_rebuild  # noqa: E402
from flatbuild.toolchains import find_cxx_toolchain  # noqa: E402

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Core classes
    "Project",
    "Settings",
    "load_settings",
    "needs_rebuild",
    # Errors
    "FlatbuildError",
    "MissingHeaderError",
    # Toolchain discovery
    "find_cxx_toolchain",
]
