# SPDX-License-Identifier: MIT
"""File nodes for the include graph.

Every file the build looks at is a SourceNode tagged as either a
compilation unit or a header. Modification times are never cached:
the compiler rewrites objects during a run, so each query goes to disk.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class NodeKind(Enum):
    UNIT = "unit"
    HEADER = "header"


class SourceNode:
    """A file in the working directory, either a unit or a header.

    Nodes compare and hash by resolved path so that the same file
    reached via different spellings is only visited once.

    Attributes:
        path: Path to the file.
        kind: Whether the file is a compilation unit or a header.
    """

    __slots__ = ("path", "kind", "_key")

    def __init__(self, path: Path | str, kind: NodeKind) -> None:
        self.path = Path(path)
        self.kind = kind
        self._key = self.path.absolute()

    @classmethod
    def for_path(cls, path: Path | str, source_suffix: str) -> SourceNode:
        """Classify a path by its suffix."""
        path = Path(path)
        kind = NodeKind.UNIT if path.suffix == source_suffix else NodeKind.HEADER
        return cls(path, kind)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def is_unit(self) -> bool:
        return self.kind is NodeKind.UNIT

    @property
    def is_header(self) -> bool:
        return self.kind is NodeKind.HEADER

    def exists(self) -> bool:
        return self.path.is_file()

    def mtime_ns(self) -> int | None:
        """Current modification time, or None if the file is missing."""
        try:
            return self.path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceNode):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __lt__(self, other: SourceNode) -> bool:
        return str(self.path) < str(other.path)

    def __repr__(self) -> str:
        return f"SourceNode({str(self.path)!r}, {self.kind.value})"

    def __str__(self) -> str:
        return str(self.path)
