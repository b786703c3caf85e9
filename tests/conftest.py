# SPDX-License-Identifier: MIT
"""Shared fixtures for flatbuild tests.

Modification times are set explicitly through a fake clock rather than
relying on wall-clock time, so staleness tests don't depend on the file
system's timestamp resolution.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import pytest

from flatbuild.core.errors import CompileError, LinkError

SOURCE_TIME = 1_000_000_000


class Clock:
    """Hands out strictly increasing timestamps (in seconds)."""

    def __init__(self, start: int = 2_000_000_000) -> None:
        self.now = start

    def tick(self) -> int:
        self.now += 10
        return self.now

    def touch(self, path: Path) -> None:
        """Give ``path`` a modification time newer than anything before."""
        t = self.tick()
        os.utime(path, (t, t))


def write_files(root: Path, files: dict[str, str], mtime: int = SOURCE_TIME) -> None:
    """Write source files with a fixed, old modification time."""
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        os.utime(path, (mtime, mtime))


class FakeToolchain:
    """Build driver that records calls and writes empty artifacts."""

    name = "fake"

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self.compiled: list[str] = []
        self.linked: list[tuple[str, list[str]]] = []
        self.fail_compile: set[str] = set()
        self.fail_link: set[str] = set()

    def compile_command(self, unit: Path, obj: Path) -> list[str]:
        return ["fake-cxx", "-c", Path(unit).name, "-o", Path(obj).name]

    def compile(self, unit: Path, obj: Path) -> None:
        unit = Path(unit)
        if unit.name in self.fail_compile:
            raise CompileError(self.compile_command(unit, obj), 1, "error: boom")
        Path(obj).write_text(f"object for {unit.name}")
        self.clock.touch(Path(obj))
        self.compiled.append(unit.name)

    def link(self, objects: Sequence[Path], executable: Path) -> None:
        executable = Path(executable)
        names = [Path(o).name for o in objects]
        if executable.name in self.fail_link:
            raise LinkError(["fake-ld", *names], 1, "undefined reference")
        executable.write_text("executable")
        self.clock.touch(executable)
        self.linked.append((executable.name, names))

    def reset(self) -> None:
        self.compiled.clear()
        self.linked.clear()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def fake_toolchain(clock: Clock) -> FakeToolchain:
    return FakeToolchain(clock)


@pytest.fixture
def make_tree(tmp_path: Path):
    """Return a function that writes source files into tmp_path."""

    def _make(files: dict[str, str]) -> Path:
        write_files(tmp_path, files)
        return tmp_path

    return _make
