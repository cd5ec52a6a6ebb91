"""Process-scoped environment mutation.

Tools installed early in a run (cargo, nvm, pyenv, Homebrew) are only usable
by later steps once their directories are on PATH or their home variables
are set. Changes made here affect the current process and every subprocess
it starts, never the user's shell configuration.
"""

import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Callable

from devinit.execution import run_command
from devinit.paths import expand_vars

_logging = logging.getLogger(__name__)


class ProcessEnvironment:
    def __init__(self, environ: MutableMapping[str, str] | None = None):
        self.environ = os.environ if environ is None else environ

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.environ.get(name, default)

    def as_dict(self) -> dict[str, str]:
        return dict(self.environ)

    def expand(self, value: str) -> str:
        return expand_vars(value, self.as_dict())

    def set(self, name: str, value: str) -> None:
        value = self.expand(value)
        if self.environ.get(name) != value:
            _logging.debug(f"Setting {name}={value}")
            self.environ[name] = value

    def path_entries(self) -> list[str]:
        current = self.environ.get("PATH", "")
        return [p for p in current.split(os.pathsep) if p]

    def prepend_path(self, directory: str) -> None:
        directory = self.expand(directory)
        entries = self.path_entries()
        if directory in entries:
            return
        _logging.debug(f"Adding {directory} to PATH for this session")
        self.environ["PATH"] = os.pathsep.join([directory] + entries)

    def apply(self, spec: dict[str, Any]) -> None:
        """Apply an ``env`` block from the manifest.

        ``PATH`` takes a directory or a list of directories to prepend; the
        last entry of the list ends up first on PATH. Every other key is set
        verbatim after expansion.
        """
        for name, value in spec.items():
            if name == "PATH":
                entries = [value] if isinstance(value, str) else list(value)
                for entry in entries:
                    self.prepend_path(entry)
            else:
                self.set(name, str(value))

    def probe_path(self, probe: str, runner: Callable = run_command) -> bool:
        """Run ``probe`` in bash and prepend the directory it prints to PATH.

        Returns False when the probe fails or its last line is not a directory.
        """
        output, returncode = runner(["bash", "-c", probe], env=self.as_dict())
        lines = output.splitlines() if returncode == 0 else []
        directory = lines[-1].strip() if lines else ""
        if directory and Path(directory).is_dir():
            self.prepend_path(directory)
            return True
        _logging.debug(f"PATH probe gave no directory: {output}")
        return False


__all__ = ["ProcessEnvironment"]
