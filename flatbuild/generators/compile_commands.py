# SPDX-License-Identifier: MIT
"""compile_commands.json generator for IDE integration.

Generates a JSON compilation database that clangd, clang-tidy and most
editors read for code intelligence.
"""

from __future__ import annotations

import json
import logging
import shlex
from pathlib import Path
from typing import TYPE_CHECKING, Any

from flatbuild.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from flatbuild.core.project import Project

logger = logging.getLogger(__name__)


class CompileCommandsGenerator(BaseGenerator):
    """Generator for compile_commands.json.

    Format:
        [
            {
                "directory": "/path/to/project",
                "file": "main.cpp",
                "command": "g++ -Wall -O2 -std=c++20 -I. -c main.cpp -o main.o",
                "output": "main.o"
            },
            ...
        ]

    Each unit appears once even when several targets link it.
    """

    FILENAME = "compile_commands.json"

    def __init__(self) -> None:
        super().__init__("compile_commands")

    def entries(self, project: Project) -> list[dict[str, Any]]:
        directory = str(project.root_dir.absolute())
        toolchain = project.toolchain
        seen: set[Path] = set()
        commands: list[dict[str, Any]] = []

        for target in project.targets():
            for unit in target.units:
                obj = target.object_for(unit)
                if obj in seen:
                    continue
                seen.add(obj)
                command = toolchain.compile_command(unit.path, obj)
                commands.append(
                    {
                        "directory": directory,
                        "file": unit.name,
                        "command": " ".join(shlex.quote(p) for p in command),
                        "output": obj.name,
                    }
                )
        return commands

    def _generate_impl(self, project: Project, output_dir: Path) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / self.FILENAME

        with open(output_file, "w") as f:
            json.dump(self.entries(project), f, indent=2)
            f.write("\n")

        logger.info("Wrote %s", output_file)
        return output_file
