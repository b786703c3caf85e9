# SPDX-License-Identifier: MIT
"""Target discovery.

Every compilation unit in the top-level working directory that defines
``main()`` produces an executable of the same base name. Subdirectories
are not searched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flatbuild.core.errors import UnknownTargetError
from flatbuild.core.node import SourceNode
from flatbuild.core.scanner import SourceScanner

logger = logging.getLogger(__name__)


class TargetDiscoverer:
    """Finds the root units of the executables to build."""

    def __init__(self, scanner: SourceScanner) -> None:
        self.scanner = scanner

    def units(self) -> list[SourceNode]:
        """All compilation units directly in the root directory, sorted by name."""
        suffix = self.scanner.source_suffix
        return sorted(
            self.scanner.node(path.name)
            for path in self.scanner.root_dir.iterdir()
            if path.suffix == suffix and path.is_file()
        )

    def discover(self) -> list[SourceNode]:
        """Root units that contain an entry point.

        Finding none is not an error: a warning is logged and the
        result is empty.
        """
        roots = [
            unit for unit in self.units() if self.scanner.contains_entry_point(unit)
        ]
        if not roots:
            logger.warning(
                "main() not defined in any %s file - no executables will be generated",
                self.scanner.source_suffix,
            )
        else:
            logger.info(
                "target executables detected: %s", " ".join(r.stem for r in roots)
            )
        return roots

    def roots_for(self, names: Iterable[str] | None = None) -> list[SourceNode]:
        """Root units for explicit target names, or discovered ones if none given.

        Raises:
            UnknownTargetError: If an explicit name has no unit on disk.
        """
        if not names:
            return self.discover()

        roots: list[SourceNode] = []
        for name in names:
            root = self.scanner.node(name + self.scanner.source_suffix)
            if not root.exists():
                raise UnknownTargetError(name, self.scanner.source_suffix)
            if root not in roots:
                roots.append(root)
        return roots
