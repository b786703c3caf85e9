# SPDX-License-Identifier: MIT
"""GCC toolchain implementation.

Compiles each unit with ``g++ -c`` and links with ``g++``. Commands run
in the working directory and use bare file names, since sources,
objects and executables all live there.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from flatbuild.configure.config import Settings
from flatbuild.core.errors import BuildCommandError, CompileError, LinkError
from flatbuild.tools.toolchain import BaseToolchain

logger = logging.getLogger(__name__)


class GccToolchain(BaseToolchain):
    """Build driver that invokes a GCC-compatible C++ compiler.

    Attributes:
        settings: Compiler and flag settings.
    """

    default_cxx = "g++"

    def __init__(
        self,
        settings: Settings | None = None,
        root_dir: Path | str = ".",
        name: str = "gcc",
    ) -> None:
        super().__init__(name, root_dir)
        if settings is None:
            settings = Settings(cxx=self.default_cxx)
        self.settings = settings

    @property
    def cxx(self) -> str:
        return self.settings.cxx

    def compile_command(self, unit: Path, obj: Path) -> list[str]:
        """Command line compiling ``unit`` to ``obj``.

        Format: <cxx> <cflags> -std=<std> -I. -c <unit> -o <obj>
        """
        return [
            self.cxx,
            *self.settings.effective_cflags(),
            f"-std={self.settings.std}",
            "-I.",
            "-c",
            Path(unit).name,
            "-o",
            Path(obj).name,
        ]

    def link_command(self, objects: Sequence[Path], executable: Path) -> list[str]:
        """Command line linking ``objects`` into ``executable``.

        Format: <cxx> <ldflags> <objects> -o <executable>
        """
        return [
            self.cxx,
            *self.settings.effective_ldflags(),
            *(Path(o).name for o in objects),
            "-o",
            Path(executable).name,
        ]

    def compile(self, unit: Path, obj: Path) -> None:
        self._run("[CC]", self.compile_command(unit, obj), CompileError)

    def link(self, objects: Sequence[Path], executable: Path) -> None:
        self._run("[LD]", self.link_command(objects, executable), LinkError)

    def _run(
        self, tag: str, command: list[str], error: type[BuildCommandError]
    ) -> None:
        self.report(tag, command)
        program = self.find_program(command[0])

        try:
            result = subprocess.run(
                [program, *command[1:]],
                cwd=self.root_dir,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            logger.error("Failed to run %s: %s", command[0], e)
            raise error(command, -1, str(e)) from e

        output = result.stderr or ""
        failed = result.returncode != 0
        logged = self.write_log(output, failed=failed)

        if failed:
            if logged:
                self._display_error(output)
            else:
                sys.stderr.write(output)
            raise error(command, result.returncode, output)
        if output:
            sys.stderr.write(output)

    def _display_error(self, output: str) -> None:
        viewer = self.settings.display_error
        if not viewer:
            sys.stderr.write(output)
            return
        try:
            subprocess.run([*shlex.split(viewer), str(self.log_file)])
        except OSError as e:
            logger.warning("Could not run '%s': %s", viewer, e)
            sys.stderr.write(output)
