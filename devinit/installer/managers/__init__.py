"""Manager adapters, one per external installer."""

from pathlib import Path

from devinit.environment import ProcessEnvironment
from devinit.execution import run_command
from devinit.paths import get_font_dir

from ..models import Manager, Platform
from .base import CommandManager, PackageManager, Runner
from .files import FontManager, GitCloneManager, ProfileManager
from .language import (
    CargoManager,
    GalleryModuleManager,
    NpmManager,
    PyenvManager,
    latest_python_release,
)
from .system import AptManager, BrewCaskManager, BrewManager, ChocoManager
from .tool import ToolManager


def build_managers(
    platform: Platform,
    runner: Runner = run_command,
    environment: ProcessEnvironment | None = None,
    font_dir: Path | None = None,
) -> dict[Manager, PackageManager]:
    """Instantiate every adapter sharing one runner and environment."""
    environment = environment or ProcessEnvironment()
    kwargs = {"runner": runner, "environment": environment}
    return {
        Manager.APT: AptManager(**kwargs),
        Manager.BREW: BrewManager(**kwargs),
        Manager.BREW_CASK: BrewCaskManager(**kwargs),
        Manager.CARGO: CargoManager(**kwargs),
        Manager.NPM: NpmManager(**kwargs),
        Manager.CHOCO: ChocoManager(**kwargs),
        Manager.GALLERY_MODULE: GalleryModuleManager(**kwargs),
        Manager.FONT: FontManager(
            platform=platform,
            font_dir=font_dir or get_font_dir(platform.value),
            **kwargs,
        ),
        Manager.GIT_CLONE: GitCloneManager(**kwargs),
        Manager.PYENV: PyenvManager(**kwargs),
        Manager.PROFILE: ProfileManager(**kwargs),
        Manager.TOOL: ToolManager(**kwargs),
    }


__all__ = [
    "PackageManager",
    "CommandManager",
    "Runner",
    "AptManager",
    "BrewManager",
    "BrewCaskManager",
    "ChocoManager",
    "CargoManager",
    "NpmManager",
    "PyenvManager",
    "GalleryModuleManager",
    "GitCloneManager",
    "FontManager",
    "ProfileManager",
    "ToolManager",
    "build_managers",
    "latest_python_release",
]
