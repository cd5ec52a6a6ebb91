"""Capability interface shared by every manager adapter."""

import shutil
from abc import ABC, abstractmethod
from typing import Callable, Sequence, Tuple

from devinit.environment import ProcessEnvironment
from devinit.execution import run_command

from ..models import InstallTarget, Manager

Runner = Callable[..., Tuple[str, int]]


class PackageManager(ABC):
    """Narrow wrapper around one external installer.

    Subclasses answer exactly two questions: is the target already on the
    host, and install it once. Retrying, reporting and ordering live
    elsewhere and never look at manager-specific output.
    """

    manager: Manager

    def __init__(
        self,
        runner: Runner = run_command,
        environment: ProcessEnvironment | None = None,
    ):
        self.runner = runner
        self.environment = environment or ProcessEnvironment()

    def run(self, command: str | Sequence[str], **kwargs) -> Tuple[str, int]:
        return self.runner(command, env=self.environment.as_dict(), **kwargs)

    def succeeds(self, command: str | Sequence[str], **kwargs) -> bool:
        _, returncode = self.run(command, **kwargs)
        return returncode == 0

    def which(self, binary: str) -> str | None:
        return shutil.which(binary, path=self.environment.get("PATH"))

    @abstractmethod
    def check_present(self, target: InstallTarget) -> bool:
        """Return True when ``target`` is already satisfied. Must not raise."""

    @abstractmethod
    def install(self, target: InstallTarget) -> Tuple[str, int]:
        """Attempt one installation, returning (output, returncode)."""


class CommandManager(PackageManager):
    """Manager whose presence check and install are single command lines.

    Subclasses provide ``install_command`` and either ``check_command``
    (exit 0 means present) or their own ``check_present``.
    """

    def check_command(self, target: InstallTarget) -> Sequence[str]:
        raise NotImplementedError(
            f"{type(self).__name__} must define check_command or override check_present"
        )

    @abstractmethod
    def install_command(self, target: InstallTarget) -> Sequence[str]:
        """Argv that installs ``target`` once."""

    def check_present(self, target: InstallTarget) -> bool:
        return self.succeeds(self.check_command(target))

    def install(self, target: InstallTarget) -> Tuple[str, int]:
        return self.run(self.install_command(target))


__all__ = ["PackageManager", "CommandManager", "Runner"]
