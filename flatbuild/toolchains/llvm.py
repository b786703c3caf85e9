# SPDX-License-Identifier: MIT
"""LLVM/Clang toolchain implementation.

clang++ accepts the same command lines as g++, so only the defaults
differ from the GCC toolchain.
"""

from __future__ import annotations

from pathlib import Path

from flatbuild.configure.config import Settings
from flatbuild.toolchains.gcc import GccToolchain


class LlvmToolchain(GccToolchain):
    """Build driver that invokes clang++."""

    default_cxx = "clang++"

    def __init__(
        self,
        settings: Settings | None = None,
        root_dir: Path | str = ".",
        name: str = "llvm",
    ) -> None:
        super().__init__(settings, root_dir, name=name)
