# SPDX-License-Identifier: MIT
"""Auxiliary file generators for flatbuild."""

from flatbuild.generators.compile_commands import CompileCommandsGenerator
from flatbuild.generators.generator import BaseGenerator, Generator

__all__ = [
    "BaseGenerator",
    "CompileCommandsGenerator",
    "Generator",
]
