# SPDX-License-Identifier: MIT
"""Project: the entry point for building a working directory.

A Project ties the pieces together for one run:
1. Find target roots (units defining main(), or explicit names)
2. Collect the units and dependency closure of each target
3. Plan which objects and executables are stale
4. Hand the plan to a toolchain, or delete artifacts when cleaning

All memo state lives in the project's Resolver, so separate Project
instances never share results.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from flatbuild.configure.config import Settings
from flatbuild.configure.platform import Platform, get_platform
from flatbuild.core.discovery import TargetDiscoverer
from flatbuild.core.plan import (
    BuildPlan,
    CompileStep,
    LinkStep,
    TargetPlan,
    execute_plan,
)
from flatbuild.core.resolver import Resolver
from flatbuild.core.scanner import SourceScanner
from flatbuild.core.staleness import check_staleness
from flatbuild.core.target import Target
from flatbuild.tools.toolchain import BUILD_LOG, Toolchain

logger = logging.getLogger(__name__)


class Project:
    """A flat directory of sources that builds into one or more executables.

    Example:
        project = Project(Path("."))
        plan = project.build()

    Attributes:
        root_dir: The working directory holding sources and artifacts.
        settings: Compiler and flag settings.
        platform: Host platform, used to name artifacts.
        scanner: Reads include directives and entry points.
        resolver: Computes closures and required units.
        discoverer: Finds target roots.
    """

    def __init__(
        self,
        root_dir: Path | str = ".",
        *,
        settings: Settings | None = None,
        toolchain: Toolchain | None = None,
        platform: Platform | None = None,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.settings = settings if settings is not None else Settings()
        self.platform = platform if platform is not None else get_platform()
        self.scanner = SourceScanner(self.root_dir, self.settings.source_suffix)
        self.resolver = Resolver(self.scanner)
        self.discoverer = TargetDiscoverer(self.scanner)
        self._toolchain = toolchain
        self._targets: dict[str, Target] = {}

    @property
    def toolchain(self) -> Toolchain:
        """The build driver, created from the settings on first use."""
        if self._toolchain is None:
            from flatbuild.toolchains import find_cxx_toolchain

            self._toolchain = find_cxx_toolchain(self.settings, self.root_dir)
        return self._toolchain

    def target(self, root_name: str) -> Target:
        """Resolve the target rooted at ``<root_name><source suffix>``."""
        cached = self._targets.get(root_name)
        if cached is not None:
            return cached

        root = self.scanner.node(root_name + self.settings.source_suffix)
        units = self.resolver.collect_units(root)
        target = Target(
            name=root.stem,
            root=root,
            units=units,
            dependencies=self.resolver.closure_of_units(units),
            object_suffix=self.platform.object_suffix,
            executable_suffix=self.platform.exe_suffix,
        )
        self._targets[root_name] = target
        return target

    def targets(self, names: Sequence[str] | None = None) -> list[Target]:
        """Resolve every requested target, or every discovered one.

        All include scanning happens here, so a missing header is
        reported before anything is compiled.
        """
        roots = self.discoverer.roots_for(names)
        return [self.target(root.stem) for root in roots]

    def plan(self, names: Sequence[str] | None = None) -> BuildPlan:
        """Work out which objects and executables must be rebuilt."""
        plan = BuildPlan()
        scheduled: set[Path] = set()

        for target in self.targets(names):
            target_plan = TargetPlan(target)
            relink_because: str | None = None

            for unit in target.units:
                obj = target.object_for(unit)
                if obj in scheduled:
                    relink_because = f"{obj.name} is being rebuilt"
                    continue
                staleness = check_staleness(obj, self.resolver.resolve(unit))
                if staleness:
                    step = CompileStep(unit, obj, staleness.reason)
                    target_plan.compiles.append(step)
                    scheduled.add(obj)
                    relink_because = f"{obj.name} is being rebuilt"

            objects = tuple(target.objects)
            staleness = check_staleness(target.executable, objects)
            if staleness:
                target_plan.link = LinkStep(target, objects, staleness.reason)
            elif relink_because is not None:
                target_plan.link = LinkStep(target, objects, relink_because)

            plan.targets.append(target_plan)

        return plan

    def build(
        self,
        names: Sequence[str] | None = None,
        *,
        jobs: int | None = None,
        dry_run: bool = False,
    ) -> BuildPlan:
        """Plan and, unless ``dry_run``, execute the build.

        Returns:
            The plan that was (or would have been) executed.

        Raises:
            FlatbuildError: On a missing header or a failed command.
        """
        plan = self.plan(names)
        for step in plan.steps():
            logger.info("%s", step.describe())
        if dry_run:
            return plan

        (self.root_dir / BUILD_LOG).unlink(missing_ok=True)
        if plan.is_empty:
            logger.info("Everything is up to date")
            return plan

        execute_plan(plan, self.toolchain, jobs or self.settings.jobs)
        return plan

    def artifacts(self, names: Sequence[str] | None = None) -> list[Path]:
        """Every file a build of the given targets could produce."""
        paths: list[Path] = []
        for target in self.targets(names):
            for path in target.artifacts():
                if path not in paths:
                    paths.append(path)
        paths.append(self.root_dir / BUILD_LOG)
        return paths

    def clean(self, names: Sequence[str] | None = None) -> list[Path]:
        """Delete generated files that exist.

        Returns:
            The paths that were removed.
        """
        removed: list[Path] = []
        for path in self.artifacts(names):
            if path.is_file():
                path.unlink()
                logger.debug("removed '%s'", path.name)
                removed.append(path)
        return removed

    def __repr__(self) -> str:
        return f"Project(root_dir={str(self.root_dir)!r})"
