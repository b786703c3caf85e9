# SPDX-License-Identifier: MIT
"""Custom exceptions for flatbuild.

All flatbuild exceptions inherit from FlatbuildError. Anything raised
from scanning or building is fatal for the run; the CLI reports the
message and exits non-zero.
"""

from __future__ import annotations

from pathlib import Path


class FlatbuildError(Exception):
    """Base class for all flatbuild exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingHeaderError(FlatbuildError):
    """A locally-included header does not exist on disk.

    Attributes:
        header: The header name as written in the include directive.
        included_from: The file containing the include directive.
    """

    def __init__(self, header: str, included_from: Path | str) -> None:
        self.header = header
        self.included_from = Path(included_from)
        super().__init__(
            f'no such header file "{header}" '
            f'(included from file "{self.included_from.name}")'
        )


class ConfigureError(FlatbuildError):
    """Invalid settings file or settings value."""


class ToolNotFoundError(ConfigureError):
    """Required tool was not found.

    Attributes:
        tool: The name of the tool that was not found.
    """

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"tool not found: {tool}")


class UnknownTargetError(FlatbuildError):
    """An explicitly requested target has no matching compilation unit.

    Attributes:
        target: The requested target name.
    """

    def __init__(self, target: str, source_suffix: str) -> None:
        self.target = target
        super().__init__(f'unknown target "{target}": no file {target}{source_suffix}')


class BuildCommandError(FlatbuildError):
    """An external compiler or linker invocation exited non-zero.

    Attributes:
        command: The command line that was run.
        returncode: Exit status of the command.
        output: Captured diagnostic output.
    """

    verb = "command"

    def __init__(self, command: list[str], returncode: int, output: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"{self.verb} failed with exit code {returncode}: {' '.join(command)}"
        )


class CompileError(BuildCommandError):
    """Compilation of a unit failed."""

    verb = "compilation"


class LinkError(BuildCommandError):
    """Linking of an executable failed."""

    verb = "link"
