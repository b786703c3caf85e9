# SPDX-License-Identifier: MIT
"""Toolchain protocol and base implementation.

A Toolchain is the Build Driver: it turns one unit into one object file
and a list of object files into one executable. The core decides what is
stale; the toolchain only runs commands.
"""

from __future__ import annotations

import shutil
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from flatbuild.core.errors import ToolNotFoundError

BUILD_LOG = "build_log.txt"


@runtime_checkable
class Toolchain(Protocol):
    """Protocol for toolchains.

    Both methods raise a BuildCommandError subclass on failure.
    """

    @property
    def name(self) -> str:
        """Toolchain name (e.g., 'gcc', 'llvm')."""
        ...

    def compile_command(self, unit: Path, obj: Path) -> list[str]:
        """Command line that compiles ``unit`` into ``obj``."""
        ...

    def compile(self, unit: Path, obj: Path) -> None:
        """Compile ``unit`` into ``obj``."""
        ...

    def link(self, objects: Sequence[Path], executable: Path) -> None:
        """Link ``objects`` into ``executable``."""
        ...


class BaseToolchain(ABC):
    """Abstract base class for command-line toolchains.

    Subclasses provide the compile and link command lines.

    Attributes:
        root_dir: Directory commands run in.
        log_file: File that captures the diagnostics of the last command,
            or of the first failed one while the file exists.
    """

    def __init__(self, name: str, root_dir: Path | str = ".") -> None:
        self._name = name
        self.root_dir = Path(root_dir)
        self.log_file = self.root_dir / BUILD_LOG
        self._log_lock = threading.Lock()
        self._failure_logged = False

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def compile_command(self, unit: Path, obj: Path) -> list[str]: ...

    @abstractmethod
    def link_command(self, objects: Sequence[Path], executable: Path) -> list[str]: ...

    @abstractmethod
    def compile(self, unit: Path, obj: Path) -> None: ...

    @abstractmethod
    def link(self, objects: Sequence[Path], executable: Path) -> None: ...

    def find_program(self, program: str) -> str:
        """Locate ``program`` on PATH.

        Raises:
            ToolNotFoundError: If it cannot be found.
        """
        found = shutil.which(program)
        if found is None:
            raise ToolNotFoundError(program)
        return found

    def write_log(self, output: str, *, failed: bool = False) -> bool:
        """Save the diagnostics of one command to the log file.

        Commands may run on several threads at once. Once a failure has
        been logged the file is left alone until it is removed, so a
        compile finishing later cannot replace the failing one's output.

        Returns:
            True if ``output`` was written.
        """
        with self._log_lock:
            if self._failure_logged and self.log_file.exists():
                return False
            self.log_file.write_text(output)
            self._failure_logged = failed
            return True

    def report(self, tag: str, command: Sequence[str]) -> None:
        print(tag, " ".join(command), file=sys.stderr)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.name!r}, "
            f"root_dir={str(self.root_dir)!r})"
        )
