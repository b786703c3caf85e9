# SPDX-License-Identifier: MIT
"""Generator protocol for auxiliary output files.

Generators take a Project and write files derived from its resolved
targets (e.g., a compilation database for editors).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flatbuild.core.project import Project


@runtime_checkable
class Generator(Protocol):
    """Protocol for file generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'compile_commands')."""
        ...

    def generate(self, project: Project, output_dir: Path | None = None) -> Path:
        """Write the generated file and return its path."""
        ...


class BaseGenerator:
    """Base class for generators with common functionality."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def generate(self, project: Project, output_dir: Path | None = None) -> Path:
        """Generate output into ``output_dir`` (default: the project root)."""
        return self._generate_impl(project, output_dir or project.root_dir)

    def _generate_impl(self, project: Project, output_dir: Path) -> Path:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
