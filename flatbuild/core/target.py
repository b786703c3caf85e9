# SPDX-License-Identifier: MIT
"""Target abstraction.

A Target is one executable, rooted at a compilation unit that defines
``main()``. Artifacts live next to the sources: one object file per
unit and one executable per target, named from the base names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from flatbuild.core.node import SourceNode


def object_path(unit: SourceNode, object_suffix: str = ".o") -> Path:
    """Object file produced from ``unit``."""
    return unit.path.with_name(unit.stem + object_suffix)


@dataclass
class Target:
    """A named executable and everything needed to build it.

    Attributes:
        name: Target name (root unit's base name).
        root: The unit defining the entry point.
        units: Units compiled and linked into the executable, root first.
        dependencies: Union of the dependency closures of all units.
        object_suffix: Suffix for object files.
        executable_suffix: Suffix for the executable ("" or ".exe").
    """

    name: str
    root: SourceNode
    units: tuple[SourceNode, ...] = ()
    dependencies: frozenset[SourceNode] = field(default_factory=frozenset)
    object_suffix: str = ".o"
    executable_suffix: str = ""

    @property
    def executable(self) -> Path:
        return self.root.path.with_name(self.name + self.executable_suffix)

    def object_for(self, unit: SourceNode) -> Path:
        return object_path(unit, self.object_suffix)

    @property
    def objects(self) -> list[Path]:
        return [self.object_for(unit) for unit in self.units]

    def artifacts(self) -> list[Path]:
        """Every file the build may produce for this target.

        Both the bare and the ``.exe`` executable names are listed, so a
        clean removes either one.
        """
        paths = self.objects
        for suffix in ("", ".exe"):
            path = self.root.path.with_name(self.name + suffix)
            if path not in paths:
                paths.append(path)
        return paths

    def __str__(self) -> str:
        return f"Target({self.name!r}, units=[{', '.join(u.name for u in self.units)}])"
