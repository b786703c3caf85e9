# SPDX-License-Identifier: MIT
"""Test runner for example projects.

Discovers every project in examples/, copies it to a temporary
directory and builds it with a real compiler through the CLI:
- first build compiles and links
- the program runs and prints the expected output
- a second build does nothing
- clean removes everything that was generated
"""

from __future__ import annotations

import json
import os
import platform
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"
IS_WINDOWS = platform.system().lower() == "windows"

has_cxx = shutil.which(os.environ.get("CXX") or "g++") is not None


def get_example_dirs() -> list[Path]:
    if not EXAMPLES_DIR.exists():
        return []
    return sorted(d for d in EXAMPLES_DIR.iterdir() if (d / "expected.json").exists())


def load_expected(example_dir: Path) -> dict[str, Any]:
    with open(example_dir / "expected.json") as f:
        data: dict[str, Any] = json.load(f)
        return data


def run_flatbuild(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "flatbuild.cli", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
    )


def exe_name(name: str) -> str:
    return name + ".exe" if IS_WINDOWS else name


@pytest.mark.skipif(not has_cxx, reason="No C++ compiler available")
@pytest.mark.parametrize(
    "example_dir", get_example_dirs(), ids=lambda d: d.name
)
def test_example(example_dir: Path, tmp_path: Path) -> None:
    expected = load_expected(example_dir)
    work = tmp_path / example_dir.name
    shutil.copytree(example_dir, work)
    sources = sorted(p.name for p in work.iterdir())

    result = run_flatbuild(work)
    assert result.returncode == 0, result.stderr
    assert "[CC]" in result.stderr
    assert "[LD]" in result.stderr
    for name in expected["executables"]:
        assert (work / exe_name(name)).exists()

    program, *argv = expected["run"]
    run = subprocess.run(
        [str(work / exe_name(program)), *argv], capture_output=True, text=True
    )
    assert run.returncode == 0
    assert run.stdout.replace("\r\n", "\n") == expected["stdout"]

    again = run_flatbuild(work)
    assert again.returncode == 0, again.stderr
    assert "[CC]" not in again.stderr
    assert "[LD]" not in again.stderr

    cleaned = run_flatbuild(work, "clean")
    assert cleaned.returncode == 0, cleaned.stderr
    assert sorted(p.name for p in work.iterdir()) == sources


def test_examples_exist() -> None:
    assert len(get_example_dirs()) >= 3
