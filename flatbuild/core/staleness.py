# SPDX-License-Identifier: MIT
"""Timestamp-based staleness checks.

An artifact needs rebuilding when it does not exist, or when any of its
dependencies was modified strictly after it. A dependency that does not
exist counts as newer: it is about to be produced. Modification times
are read from disk on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from flatbuild.core.node import SourceNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Staleness:
    """Outcome of a staleness check.

    Attributes:
        needed: True if the artifact must be rebuilt.
        reason: Human-readable explanation.
    """

    needed: bool
    reason: str

    def __bool__(self) -> bool:
        return self.needed


def _mtime_ns(path: Path) -> int | None:
    try:
        return path.stat().st_mtime_ns
    except FileNotFoundError:
        return None


def check_staleness(
    artifact: Path | str, dependencies: Iterable[Path | str | SourceNode]
) -> Staleness:
    """Compare ``artifact`` against ``dependencies`` and explain the result."""
    artifact = Path(artifact)
    deps = [d.path if isinstance(d, SourceNode) else Path(d) for d in dependencies]
    logger.info("%s depends on %s", artifact.name, " ".join(d.name for d in deps))

    artifact_time = _mtime_ns(artifact)
    if artifact_time is None:
        result = Staleness(True, f"{artifact.name} does not exist")
    else:
        result = Staleness(False, f"{artifact.name} is already up to date")
        for dep in deps:
            dep_time = _mtime_ns(dep)
            if dep_time is None:
                result = Staleness(True, f"dependency {dep.name} does not exist")
                break
            if dep_time > artifact_time:
                result = Staleness(
                    True, f"{artifact.name} is older than dependency {dep.name}"
                )
                break

    if result.needed:
        logger.info("- %s - needs update", result.reason)
    else:
        logger.info("- %s", result.reason)
    return result


def needs_rebuild(
    artifact: Path | str, dependencies: Iterable[Path | str | SourceNode]
) -> bool:
    """True if ``artifact`` is missing or older than any dependency."""
    return check_staleness(artifact, dependencies).needed
