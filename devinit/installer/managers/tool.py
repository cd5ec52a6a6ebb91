"""Generic tools described by a check command and an install command."""

import re
from pathlib import Path
from typing import Sequence, Tuple

from devinit.errors import ManagerError

from ..models import InstallTarget, Manager
from .base import PackageManager

WHICH_PATTERN = r"^which \S+$"


def _extract_binary_from_which(command: str) -> str | None:
    if re.match(WHICH_PATTERN, command):
        return command.split(maxsplit=1)[1].strip()
    return None


class ToolManager(PackageManager):
    """Installers such as rustup, nvm, pyenv, Oh My Zsh or Homebrew itself.

    Metadata:
        check: a command or list of commands that must all succeed. ``which X``
            is answered from PATH, ``dir:PATH`` and ``file:PATH`` test the
            filesystem, anything else runs through the shell.
        install: command line run through ``shell``
        shell: ``sh`` (default), ``bash`` or ``powershell``
        interactive: let the installer talk to the terminal instead of
            capturing its output (for installers that prompt)
    """

    manager = Manager.TOOL

    def _shell_command(self, command: str, shell: str) -> Sequence[str] | str:
        if shell == "bash":
            return ["bash", "-c", command]
        if shell == "powershell":
            exe = "pwsh" if self.which("pwsh") else "powershell"
            return [exe, "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", command]
        return command

    def _check_one(self, check: str, shell: str) -> bool:
        binary = _extract_binary_from_which(check)
        if binary:
            return self.which(binary) is not None
        if check.startswith("dir:"):
            return Path(self.environment.expand(check[4:])).is_dir()
        if check.startswith("file:"):
            return Path(self.environment.expand(check[5:])).is_file()
        return self.succeeds(self._shell_command(check, shell))

    def check_present(self, target: InstallTarget) -> bool:
        checks = target.metadata.get("check")
        if not checks:
            return False
        if isinstance(checks, str):
            checks = [checks]
        shell = target.metadata.get("shell", "sh")
        return all(self._check_one(check, shell) for check in checks)

    def install(self, target: InstallTarget) -> Tuple[str, int]:
        command = target.metadata.get("install")
        if not command:
            raise ManagerError(f"{target.name} has no install command")
        shell = target.metadata.get("shell", "sh")
        if target.metadata.get("interactive"):
            return self.run(self._shell_command(command, shell), capture=False)
        return self.run(self._shell_command(command, shell))


__all__ = ["ToolManager"]
