# SPDX-License-Identifier: MIT
"""Tests for flatbuild CLI."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest
from conftest import FakeToolchain, write_files

from flatbuild import __version__
from flatbuild.cli import build_parser, main, setup_logging

MAIN = "int main(int argc, char* argv[]) { return 0; }\n"


@pytest.fixture
def fake_driver(monkeypatch, fake_toolchain: FakeToolchain) -> FakeToolchain:
    """Route every Project created by the CLI to the recording toolchain."""
    monkeypatch.setattr(
        "flatbuild.toolchains.find_cxx_toolchain",
        lambda settings=None, root_dir=".": fake_toolchain,
    )
    return fake_toolchain


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_normal(self) -> None:
        setup_logging(verbose=False, trace=False)

    def test_setup_logging_verbose(self) -> None:
        setup_logging(verbose=True, trace=False)

    def test_setup_logging_trace(self) -> None:
        setup_logging(verbose=False, trace=True)


class TestParser:
    def test_default_is_build(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.func.__name__ == "cmd_build"
        assert args.targets == []

    def test_options_before_subcommand_survive(self) -> None:
        args = build_parser().parse_args(["-v", "--debug", "clean", "main"])
        assert args.verbose is True
        assert args.debug is True
        assert args.targets == ["main"]

    def test_options_after_subcommand(self) -> None:
        args = build_parser().parse_args(["build", "-j", "4", "-n", "main"])
        assert args.jobs == 4
        assert args.dry_run is True
        assert args.targets == ["main"]


class TestCLICommands:
    def test_help_flag(self) -> None:
        result = subprocess.run(
            [sys.executable, "-m", "flatbuild.cli", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "flatbuild" in result.stdout
        assert "clean" in result.stdout
        assert "info" in result.stdout

    def test_version(self) -> None:
        result = subprocess.run(
            [sys.executable, "-m", "flatbuild.cli", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert __version__ in result.stdout

    def test_help_command(self, capsys) -> None:
        assert main(["help"]) == 0
        out = capsys.readouterr().out
        assert "main()" in out
        assert "flatbuild.json" in out

    def test_build(self, tmp_path: Path, fake_driver: FakeToolchain) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})

        assert main(["-C", str(tmp_path)]) == 0

        assert fake_driver.compiled == ["main.cpp"]
        assert fake_driver.linked == [("main", ["main.o"])]

    def test_build_in_current_directory(
        self, tmp_path: Path, monkeypatch, fake_driver: FakeToolchain
    ) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})
        monkeypatch.chdir(tmp_path)

        assert main(["build"]) == 0
        assert fake_driver.compiled == ["main.cpp"]

    def test_no_targets_succeeds(
        self, tmp_path: Path, fake_driver: FakeToolchain, capsys
    ) -> None:
        write_files(tmp_path, {"lib.cpp": "void lib() {}\n"})

        assert main(["-C", str(tmp_path)]) == 0
        assert "main() not defined" in capsys.readouterr().err
        assert fake_driver.compiled == []

    def test_missing_header_fails(
        self, tmp_path: Path, fake_driver: FakeToolchain, capsys
    ) -> None:
        write_files(tmp_path, {"main.cpp": '#include "gone.h"\n' + MAIN})

        assert main(["-C", str(tmp_path)]) == 1

        err = capsys.readouterr().err
        assert "gone.h" in err
        assert "main.cpp" in err
        assert fake_driver.compiled == []

    def test_compile_failure_exit_code(
        self, tmp_path: Path, fake_driver: FakeToolchain
    ) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})
        fake_driver.fail_compile.add("main.cpp")

        assert main(["-C", str(tmp_path)]) == 1
        assert fake_driver.linked == []

    def test_unknown_target(
        self, tmp_path: Path, fake_driver: FakeToolchain, capsys
    ) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})
        assert main(["-C", str(tmp_path), "build", "nope"]) == 1
        assert "nope" in capsys.readouterr().err

    def test_dry_run(
        self, tmp_path: Path, fake_driver: FakeToolchain, capsys
    ) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})

        assert main(["-C", str(tmp_path), "-n"]) == 0

        out = capsys.readouterr().out
        assert "compile main.cpp -> main.o" in out
        assert "link main.o -> main" in out
        assert fake_driver.compiled == []

    def test_dry_run_nothing_to_do(
        self, tmp_path: Path, fake_driver: FakeToolchain, capsys
    ) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})
        main(["-C", str(tmp_path)])
        capsys.readouterr()

        assert main(["-C", str(tmp_path), "build", "-n"]) == 0
        assert "Nothing to do" in capsys.readouterr().out

    def test_clean(
        self, tmp_path: Path, fake_driver: FakeToolchain, capsys
    ) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})
        main(["-C", str(tmp_path)])
        capsys.readouterr()

        assert main(["-C", str(tmp_path), "clean"]) == 0

        out = capsys.readouterr().out
        assert "removed 'main.o'" in out
        assert "removed 'main'" in out
        assert not (tmp_path / "main.o").exists()
        assert (tmp_path / "main.cpp").exists()

    def test_info(self, tmp_path: Path, capsys) -> None:
        write_files(
            tmp_path,
            {
                "main.cpp": '#include "util.h"\n' + MAIN,
                "util.h": "",
                "util.cpp": '#include "util.h"\n',
            },
        )

        assert main(["-C", str(tmp_path), "info"]) == 0

        out = capsys.readouterr().out
        assert "main: main" in out
        assert "main.cpp -> main.o" in out
        assert "util.cpp -> util.o" in out
        assert "depends on: main.cpp util.h" in out

    def test_info_no_targets(self, tmp_path: Path, capsys) -> None:
        assert main(["-C", str(tmp_path), "info"]) == 0
        assert "No targets found" in capsys.readouterr().out

    def test_compdb(self, tmp_path: Path) -> None:
        write_files(tmp_path, {"main.cpp": MAIN})

        assert main(["-C", str(tmp_path), "--cxx", "g++", "compdb"]) == 0

        content = json.loads((tmp_path / "compile_commands.json").read_text())
        assert [e["file"] for e in content] == ["main.cpp"]

    def test_bad_settings_file(self, tmp_path: Path, capsys) -> None:
        write_files(tmp_path, {"main.cpp": MAIN, "flatbuild.json": '{"bogus": 1}'})
        assert main(["-C", str(tmp_path)]) == 1
        assert "unknown setting 'bogus'" in capsys.readouterr().err
