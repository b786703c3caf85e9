# SPDX-License-Identifier: MIT
"""Toolchain definitions (GCC, LLVM)."""

from __future__ import annotations

from pathlib import Path

from flatbuild.configure.config import Settings
from flatbuild.toolchains.gcc import GccToolchain
from flatbuild.toolchains.llvm import LlvmToolchain


def find_cxx_toolchain(
    settings: Settings | None = None, root_dir: Path | str = "."
) -> GccToolchain:
    """Pick the toolchain matching the configured compiler.

    A compiler whose name contains 'clang' gets the LLVM toolchain;
    anything else is driven as GCC.
    """
    settings = settings if settings is not None else Settings()
    if "clang" in Path(settings.cxx).name:
        return LlvmToolchain(settings, root_dir)
    return GccToolchain(settings, root_dir)


__all__ = [
    "GccToolchain",
    "LlvmToolchain",
    "find_cxx_toolchain",
]
