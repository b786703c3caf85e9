# SPDX-License-Identifier: MIT
"""Line-oriented scanning of source files.

This is textual pattern matching, not preprocessing: a local include is a
line of the form ``#include "name"`` and an entry point is a line that
looks like ``int main(...)``. Trailing ``//`` comments outside string
literals are stripped first, so directives that only appear inside a
comment are ignored. Angle-bracket includes are never inspected.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from flatbuild.core.errors import MissingHeaderError
from flatbuild.core.node import SourceNode

logger = logging.getLogger(__name__)

LINE_COMMENT = "//"
INCLUDE_RE = re.compile(r'^\s*#\s*include\s*"([^"]*)"')
ENTRY_POINT_RE = re.compile(r"\bint\s*main\s*\(.*\)")


def strip_comment(line: str) -> str:
    """Remove a trailing line comment.

    ``//`` inside a double-quoted string, such as an include name, is kept.
    """
    in_string = False
    i = 0
    while i < len(line):
        ch = line[i]
        if in_string:
            if ch == "\\":
                i += 1
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif line.startswith(LINE_COMMENT, i):
            return line[:i]
        i += 1
    return line


def read_lines(path: Path) -> list[str]:
    with open(path, encoding="utf-8", errors="replace") as f:
        return [strip_comment(line) for line in f]


def parse_local_includes(lines: list[str]) -> list[str]:
    """Header names referenced by local include directives, first occurrence order."""
    names: list[str] = []
    for line in lines:
        match = INCLUDE_RE.match(line)
        if match:
            name = match.group(1).strip()
            if name and name not in names:
                names.append(name)
    return names


def has_entry_point(lines: list[str]) -> bool:
    return any(ENTRY_POINT_RE.search(line) for line in lines)


class SourceScanner:
    """Extracts one level of local includes from units and headers.

    Results are cached per file for the lifetime of the scanner, so a
    file is read at most once per run.

    Attributes:
        root_dir: Directory that include names are resolved against.
        source_suffix: Suffix identifying compilation units.
        files_read: Number of files read from disk so far.
    """

    def __init__(self, root_dir: Path | str = ".", source_suffix: str = ".cpp") -> None:
        self.root_dir = Path(root_dir)
        self.source_suffix = source_suffix
        self.files_read = 0
        self._includes: dict[SourceNode, tuple[SourceNode, ...]] = {}

    def node(self, name: Path | str) -> SourceNode:
        """Create a node for a file name relative to the root directory."""
        return SourceNode.for_path(self.root_dir / name, self.source_suffix)

    def local_includes(self, node: SourceNode) -> tuple[SourceNode, ...]:
        """Headers directly included by ``node``.

        Raises:
            MissingHeaderError: If an included header does not exist.
        """
        cached = self._includes.get(node)
        if cached is not None:
            return cached

        self.files_read += 1
        headers: list[SourceNode] = []
        for name in parse_local_includes(read_lines(node.path)):
            header = self.node(name)
            if not header.exists():
                raise MissingHeaderError(name, node.path)
            headers.append(header)

        result = tuple(headers)
        self._includes[node] = result
        logger.debug(
            "%s includes %s", node.name, " ".join(h.name for h in result) or "nothing"
        )
        return result

    def contains_entry_point(self, node: SourceNode) -> bool:
        """Whether the file defines ``main()``."""
        return has_entry_point(read_lines(node.path))
