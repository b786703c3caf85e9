# SPDX-License-Identifier: MIT
"""Build plans and their execution.

A BuildPlan lists the stale artifacts in the order they must be
produced: for each target, the units to compile, then the link. A unit
shared between targets is compiled at most once per plan.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path

from flatbuild.core.node import SourceNode
from flatbuild.core.target import Target
from flatbuild.tools.toolchain import Toolchain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileStep:
    """Compile one unit into its object file."""

    unit: SourceNode
    obj: Path
    reason: str

    def describe(self) -> str:
        return f"compile {self.unit.name} -> {self.obj.name} ({self.reason})"


@dataclass(frozen=True)
class LinkStep:
    """Link a target's objects into its executable."""

    target: Target
    objects: tuple[Path, ...]
    reason: str

    @property
    def executable(self) -> Path:
        return self.target.executable

    def describe(self) -> str:
        objs = " ".join(o.name for o in self.objects)
        return f"link {objs} -> {self.executable.name} ({self.reason})"


@dataclass
class TargetPlan:
    """The work for one target: compiles first, then an optional link."""

    target: Target
    compiles: list[CompileStep] = field(default_factory=list)
    link: LinkStep | None = None

    @property
    def is_up_to_date(self) -> bool:
        return not self.compiles and self.link is None


@dataclass
class BuildPlan:
    """Ordered work for a whole run."""

    targets: list[TargetPlan] = field(default_factory=list)

    @property
    def compile_steps(self) -> list[CompileStep]:
        return [step for t in self.targets for step in t.compiles]

    @property
    def link_steps(self) -> list[LinkStep]:
        return [t.link for t in self.targets if t.link is not None]

    @property
    def is_empty(self) -> bool:
        return all(t.is_up_to_date for t in self.targets)

    def steps(self) -> Iterator[CompileStep | LinkStep]:
        """All steps in execution order."""
        for target_plan in self.targets:
            yield from target_plan.compiles
            if target_plan.link is not None:
                yield target_plan.link


def _compile_all(steps: list[CompileStep], toolchain: Toolchain, jobs: int) -> None:
    if jobs <= 1 or len(steps) <= 1:
        for step in steps:
            toolchain.compile(step.unit.path, step.obj)
        return

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures: list[Future[None]] = [
            executor.submit(toolchain.compile, step.unit.path, step.obj)
            for step in steps
        ]
        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
        for future in not_done:
            future.cancel()
        for future in futures:
            if future in done:
                error = future.exception()
                if error is not None:
                    raise error


def execute_plan(plan: BuildPlan, toolchain: Toolchain, jobs: int = 1) -> None:
    """Run every step of ``plan`` with ``toolchain``.

    Units of one target may compile concurrently when ``jobs > 1``; the
    target is linked only after all of them succeeded. The first failure
    is re-raised and no further work is started.
    """
    for target_plan in plan.targets:
        _compile_all(target_plan.compiles, toolchain, jobs)
        link = target_plan.link
        if link is not None:
            toolchain.link(list(link.objects), link.executable)
        logger.info("%s is up to date", target_plan.target.name)
