# SPDX-License-Identifier: MIT
"""Dependency resolution for compilation units and headers.

The Resolver owns all per-run memo state:
1. The transitive local-include closure of each file (itself included)
2. The set of compilation units that back each target root

Units that are only reached through a header are found by base name:
if ``util.h`` is in the closure and ``util.cpp`` exists next to it,
``util.cpp`` is part of the build.
"""

from __future__ import annotations

import logging
from collections import deque

from flatbuild.core.node import NodeKind, SourceNode
from flatbuild.core.scanner import SourceScanner

logger = logging.getLogger(__name__)


class Resolver:
    """Resolves dependency closures and the units required by a target.

    A resolver is created per run (or per test); nothing is shared
    between instances.

    Attributes:
        scanner: Scanner used to read include directives.
    """

    def __init__(self, scanner: SourceScanner) -> None:
        self.scanner = scanner
        self._closures: dict[SourceNode, frozenset[SourceNode]] = {}
        self._units: dict[SourceNode, tuple[SourceNode, ...]] = {}

    @property
    def source_suffix(self) -> str:
        return self.scanner.source_suffix

    def resolve(self, node: SourceNode) -> frozenset[SourceNode]:
        """Return ``node`` plus every file reachable through local includes.

        The walk keeps an explicit visited set, so diamond and cyclic
        include graphs terminate. Closures already computed for other
        files are reused instead of being walked again.

        Raises:
            MissingHeaderError: If any file in the closure includes a
                header that does not exist.
        """
        cached = self._closures.get(node)
        if cached is not None:
            return cached

        closure: set[SourceNode] = {node}
        pending: deque[SourceNode] = deque([node])
        while pending:
            current = pending.popleft()
            known = self._closures.get(current)
            if known is not None and current != node:
                closure |= known
                continue
            for header in self.scanner.local_includes(current):
                if header not in closure:
                    closure.add(header)
                    pending.append(header)

        result = frozenset(closure)
        self._closures[node] = result
        return result

    def sibling_unit(self, header: SourceNode) -> SourceNode | None:
        """The unit with the same base name as ``header``, if it exists."""
        candidate = SourceNode(
            header.path.with_name(header.stem + self.source_suffix), NodeKind.UNIT
        )
        if candidate.exists():
            return candidate
        return None

    def collect_units(self, root: SourceNode) -> tuple[SourceNode, ...]:
        """Compilation units that must be linked together with ``root``.

        Starting from ``root``, every unit in a unit's closure is added,
        and every header in the closure contributes its sibling unit if
        one exists on disk. Each added unit is expanded the same way.
        The result always starts with ``root`` and holds no duplicates.
        """
        cached = self._units.get(root)
        if cached is not None:
            return cached

        found: dict[SourceNode, None] = {}
        pending: deque[SourceNode] = deque([root])
        while pending:
            unit = pending.popleft()
            if unit in found:
                continue
            found[unit] = None
            for dep in sorted(self.resolve(unit)):
                candidate = dep if dep.is_unit else self.sibling_unit(dep)
                if candidate is not None and candidate not in found:
                    pending.append(candidate)

        result = tuple(found)
        self._units[root] = result
        logger.debug(
            "%s requires units: %s", root.name, " ".join(u.name for u in result)
        )
        return result

    def closure_of_units(self, units: tuple[SourceNode, ...]) -> frozenset[SourceNode]:
        """Union of the closures of several units."""
        combined: set[SourceNode] = set()
        for unit in units:
            combined |= self.resolve(unit)
        return frozenset(combined)
