# SPDX-License-Identifier: MIT
"""Command-line interface for flatbuild."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from flatbuild.configure.config import SETTINGS_FILE, Settings, load_settings
from flatbuild.core.errors import FlatbuildError
from flatbuild.core.project import Project

# Set up logging
logger = logging.getLogger("flatbuild")

USAGE = """\
This is a no-frills tool to compile and link small C++ projects. It emulates
what a Makefile might do, based on simple assumptions:

- all code files have a `.cpp` suffix (no restrictions for headers).

- any code file in the top-level folder that defines a `main()` function is
  destined to produce a corresponding executable of the same name (with the
  `.cpp` suffix stripped out).

- *user* headers are `#include`d in inverted commas, while *system* headers are
  `#include`d in angled brackets, i.e. like this:

        #include "my_header.h"   // <- user header: will be inspected
        #include <iostream>      // <- system header: will be ignored

  User headers are scanned recursively to work out whether each object is up
  to date relative to the headers it depends on. If a user header has a
  `.cpp` file of the same name, that file is compiled and linked in too.

#### Invoking flatbuild

From the folder containing your code, type `flatbuild`. The default action is
to build the executables (compile the .cpp files and link the objects).

Commands:

- `build [targets]`: build all (or only the named) executables
- `clean [targets]`: remove executables, objects and the build log
- `info [targets]`:  show targets, their units and dependencies
- `compdb`:          write compile_commands.json for editors
- `help`:            print this help page

Options:

- `--debug`:   create code suitable for debugging (when switching between
               debug and regular builds, run `flatbuild clean` first).
- `-v`:        print what is being done and why each file needs updating.
- `-j N`:      compile up to N files of a target concurrently.
- `-n`:        show what would be rebuilt without running anything.

#### Customising the build

Place overrides (compiler, standard, flags) in a `flatbuild.json` file in the
working directory, e.g.

    {"cxx": "clang++", "std": "c++17", "cflags": "-Wall -Wextra"}

The `CXX` environment variable also selects the compiler.
"""


def setup_logging(verbose: bool = False, trace: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if trace:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "# %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, force=True)


def make_project(args: argparse.Namespace) -> Project:
    """Create a project from the command-line options and settings file."""
    root_dir = Path(args.directory)
    settings: Settings = load_settings(root_dir)
    if args.debug:
        settings.debug = True
    if args.cxx:
        settings.cxx = args.cxx
    if getattr(args, "jobs", None):
        settings.jobs = args.jobs
    return Project(root_dir, settings=settings)


def cmd_build(args: argparse.Namespace) -> int:
    """Build stale objects and executables."""
    project = make_project(args)
    plan = project.build(args.targets or None, dry_run=args.dry_run)

    if args.dry_run:
        for step in plan.steps():
            print(step.describe())
        if plan.is_empty:
            print("Nothing to do")
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    """Remove generated files."""
    project = make_project(args)
    for path in project.clean(args.targets or None):
        print(f"removed '{path.name}'")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show targets, the units they need and each unit's dependencies."""
    project = make_project(args)
    targets = project.targets(args.targets or None)

    if not targets:
        print("No targets found")
        return 0

    for target in targets:
        print(f"{target.name}: {target.executable.name}")
        for unit in target.units:
            deps = sorted(project.resolver.resolve(unit))
            print(f"  {unit.name} -> {target.object_for(unit).name}")
            print(f"    depends on: {' '.join(d.name for d in deps)}")
    return 0


def cmd_compdb(args: argparse.Namespace) -> int:
    """Write compile_commands.json."""
    from flatbuild.generators.compile_commands import CompileCommandsGenerator

    project = make_project(args)
    output = CompileCommandsGenerator().generate(project)
    print(f"Generated {output}")
    return 0


def cmd_help(args: argparse.Namespace) -> int:
    """Print the long help text."""
    print(USAGE)
    return 0


def _default(value: object, top_level: bool) -> object:
    # Subcommand parsers must not overwrite options given before the
    # subcommand name, so their defaults are suppressed.
    return value if top_level else argparse.SUPPRESS


def add_common_args(parser: argparse.ArgumentParser, *, top_level: bool) -> None:
    """Add common arguments to a parser."""
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=_default(False, top_level),
        help="Explain what is rebuilt and why",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=_default(False, top_level),
        help="Debug output for flatbuild itself",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_default(False, top_level),
        help="Use debug compiler and linker flags",
    )
    parser.add_argument(
        "-C",
        "--directory",
        default=_default(".", top_level),
        help="Working directory (default: current directory)",
    )
    parser.add_argument(
        "--cxx",
        metavar="PATH",
        default=_default(None, top_level),
        help=f"Compiler executable (overrides CXX and {SETTINGS_FILE})",
    )


def add_build_args(parser: argparse.ArgumentParser, *, top_level: bool) -> None:
    """Add arguments for build-related commands."""
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=_default(None, top_level),
        help="Number of concurrent compiles",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        default=_default(False, top_level),
        help="Show what would be rebuilt without running anything",
    )


def build_parser() -> argparse.ArgumentParser:
    from flatbuild import __version__

    parser = argparse.ArgumentParser(
        prog="flatbuild",
        description="Compile and link small C++ projects with no build file.",
        epilog="Run 'flatbuild help' for a description of how targets are found.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    add_common_args(parser, top_level=True)
    add_build_args(parser, top_level=True)
    parser.set_defaults(func=cmd_build, targets=[])

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # flatbuild build
    build = subparsers.add_parser("build", help="Build stale objects and executables")
    add_common_args(build, top_level=False)
    add_build_args(build, top_level=False)
    build.add_argument("targets", nargs="*", help="Targets to build (default: all)")
    build.set_defaults(func=cmd_build)

    # flatbuild clean
    clean = subparsers.add_parser("clean", help="Remove generated files")
    add_common_args(clean, top_level=False)
    clean.add_argument("targets", nargs="*", help="Targets to clean (default: all)")
    clean.set_defaults(func=cmd_clean)

    # flatbuild info
    info = subparsers.add_parser("info", help="Show targets and their dependencies")
    add_common_args(info, top_level=False)
    info.add_argument("targets", nargs="*", help="Targets to show (default: all)")
    info.set_defaults(func=cmd_info)

    # flatbuild compdb
    compdb = subparsers.add_parser("compdb", help="Write compile_commands.json")
    add_common_args(compdb, top_level=False)
    compdb.set_defaults(func=cmd_compdb)

    # flatbuild help
    help_parser = subparsers.add_parser("help", help="Print the long help page")
    help_parser.set_defaults(func=cmd_help)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the flatbuild CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.trace)

    try:
        result: int = args.func(args)
    except FlatbuildError as e:
        logger.error("%s", e)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
