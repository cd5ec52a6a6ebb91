"""System package managers: apt, Homebrew, Homebrew Cask and Chocolatey."""

import os
from typing import Sequence

from packaging import version as pkg_version

from ..models import InstallTarget, Manager
from .base import CommandManager


def _needs_sudo() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() != 0


class AptManager(CommandManager):
    manager = Manager.APT

    def __init__(self, *args, use_sudo: bool | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_sudo = _needs_sudo() if use_sudo is None else use_sudo

    def _prefix(self) -> list[str]:
        return ["sudo"] if self.use_sudo else []

    def check_present(self, target: InstallTarget) -> bool:
        output, returncode = self.run(["dpkg", "-l", target.name])
        if returncode != 0:
            return False
        return any(line.startswith("ii") for line in output.splitlines())

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        package = target.name
        if target.version:
            package = f"{package}={target.version}"
        return self._prefix() + ["apt-get", "install", "-y", package]


class BrewManager(CommandManager):
    manager = Manager.BREW

    def _formula(self, target: InstallTarget) -> str:
        if target.version:
            return f"{target.name}@{target.version}"
        return target.name

    def check_command(self, target: InstallTarget) -> Sequence[str]:
        return ["brew", "list", self._formula(target)]

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        return ["brew", "install", self._formula(target)]


class BrewCaskManager(CommandManager):
    manager = Manager.BREW_CASK

    def check_command(self, target: InstallTarget) -> Sequence[str]:
        return ["brew", "list", "--cask", target.name]

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        return ["brew", "install", "--cask", target.name]


class ChocoManager(CommandManager):
    """Chocolatey packages.

    ``choco list`` only became local in 2.0; older releases search the
    remote feed unless ``--local-only`` is given, which 2.0 rejects.
    """

    manager = Manager.CHOCO

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._local_flag: list[str] | None = None

    def local_list_flags(self) -> list[str]:
        if self._local_flag is None:
            output, returncode = self.run(["choco", "--version"])
            try:
                legacy = returncode != 0 or pkg_version.parse(output.strip()).major < 2
            except pkg_version.InvalidVersion:
                legacy = True
            self._local_flag = ["--local-only"] if legacy else []
        return self._local_flag

    def check_present(self, target: InstallTarget) -> bool:
        output, returncode = self.run(
            ["choco", "list", *self.local_list_flags(), "--exact", target.name, "--limit-output"]
        )
        if returncode != 0:
            return False
        prefix = f"{target.name.lower()}|"
        return any(line.lower().startswith(prefix) for line in output.splitlines())

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        command = ["choco", "install", target.name, "-y", "--no-progress"]
        if target.version:
            command += ["--version", target.version]
        return command


__all__ = ["AptManager", "BrewManager", "BrewCaskManager", "ChocoManager"]
