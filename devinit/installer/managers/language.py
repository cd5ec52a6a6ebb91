"""Language toolchain managers: cargo, npm, pyenv and the PowerShell Gallery."""

import logging
import re
from typing import Sequence, Tuple

from packaging import version as pkg_version

from ..models import InstallTarget, Manager
from .base import CommandManager, PackageManager

_logging = logging.getLogger(__name__)

PYTHON_RELEASE_PATTERN = re.compile(r"^\s*(3\.\d+\.\d+)\s*$")


class CargoManager(CommandManager):
    manager = Manager.CARGO

    def check_present(self, target: InstallTarget) -> bool:
        output, returncode = self.run(["cargo", "install", "--list"])
        if returncode != 0:
            return False
        return any(
            line.startswith(f"{target.name} ") for line in output.splitlines()
        )

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        command = ["cargo", "install", target.name]
        if target.version:
            command += ["--version", target.version]
        return command


class NpmManager(CommandManager):
    manager = Manager.NPM

    def check_command(self, target: InstallTarget) -> Sequence[str]:
        return ["npm", "ls", "-g", "--depth=0", target.name]

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        package = target.name
        if target.version:
            package = f"{package}@{target.version}"
        return ["npm", "install", "-g", package]


def latest_python_release(listing: str, prefix: str | None = None) -> str | None:
    """Pick the newest final CPython 3.x release from ``pyenv install --list``.

    ``prefix`` narrows the choice to one minor series (e.g. "3.12").
    """
    candidates = []
    for line in listing.splitlines():
        match = PYTHON_RELEASE_PATTERN.match(line)
        if not match:
            continue
        release = match.group(1)
        if prefix and not (release == prefix or release.startswith(f"{prefix}.")):
            continue
        candidates.append(release)

    if not candidates:
        return None
    return max(candidates, key=pkg_version.Version)


class PyenvManager(PackageManager):
    """Installs a CPython interpreter through pyenv and makes it global."""

    manager = Manager.PYENV

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._resolved: dict[str, str] = {}

    def resolve_version(self, target: InstallTarget) -> str | None:
        requested = target.version or "latest"
        if requested in self._resolved:
            return self._resolved[requested]

        if requested == "latest" or requested.count(".") < 2:
            listing, returncode = self.run(["pyenv", "install", "--list"])
            prefix = None if requested == "latest" else requested
            resolved = latest_python_release(listing, prefix) if returncode == 0 else None
        else:
            resolved = requested

        if resolved:
            self._resolved[requested] = resolved
        return resolved

    def check_present(self, target: InstallTarget) -> bool:
        release = self.resolve_version(target)
        if not release:
            return False
        output, returncode = self.run(["pyenv", "versions", "--bare"])
        if returncode != 0:
            return False
        return release in (line.strip() for line in output.splitlines())

    def install(self, target: InstallTarget) -> Tuple[str, int]:
        release = self.resolve_version(target)
        if not release:
            return "Could not determine a Python release from pyenv", 1

        _logging.info(f"Installing Python {release} via pyenv...")
        output, returncode = self.run(["pyenv", "install", "-s", release])
        if returncode != 0:
            return output, returncode
        return self.run(["pyenv", "global", release])


class GalleryModuleManager(CommandManager):
    """PowerShell Gallery modules, installed for the current user."""

    manager = Manager.GALLERY_MODULE

    def _powershell(self) -> str:
        return "pwsh" if self.which("pwsh") else "powershell"

    def _invoke(self, script: str) -> list[str]:
        return [self._powershell(), "-NoProfile", "-NonInteractive", "-Command", script]

    def check_command(self, target: InstallTarget) -> Sequence[str]:
        return self._invoke(
            f"if (Get-Module -ListAvailable -Name '{target.name}') "
            "{ exit 0 } else { exit 1 }"
        )

    def install_command(self, target: InstallTarget) -> Sequence[str]:
        script = (
            f"Install-Module -Name '{target.name}' -Scope CurrentUser "
            "-Force -AllowClobber"
        )
        if target.version:
            script += f" -RequiredVersion '{target.version}'"
        return self._invoke(script)


__all__ = [
    "CargoManager",
    "NpmManager",
    "PyenvManager",
    "GalleryModuleManager",
    "latest_python_release",
]
