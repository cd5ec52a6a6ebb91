"""Data models for the installation system."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Manager(Enum):
    APT = "apt"
    BREW = "brew"
    BREW_CASK = "brew-cask"
    CARGO = "cargo"
    NPM = "npm"
    CHOCO = "choco"
    GALLERY_MODULE = "gallery-module"
    FONT = "font"
    GIT_CLONE = "git-clone"
    PYENV = "pyenv"
    PROFILE = "profile"
    TOOL = "tool"


class Platform(Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    WSL = "wsl"
    MACOS = "macos"
    UNKNOWN = "unknown"


class InstallStatus(Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallTarget:
    name: str
    manager: Manager
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def description(self) -> str:
        return self.metadata.get("description", "")

    @property
    def version(self) -> str | None:
        return self.metadata.get("version")


@dataclass(frozen=True)
class InstallResult:
    target: InstallTarget
    status: InstallStatus
    attempts: int = 0
    output: str = ""

    @property
    def name(self) -> str:
        return self.target.name


@dataclass
class RunSummary:
    """Outcome of every target processed in one run, in processing order."""

    results: list[InstallResult] = field(default_factory=list)

    def add(self, result: InstallResult) -> None:
        self.results.append(result)

    def _names(self, status: InstallStatus) -> list[str]:
        return [r.name for r in self.results if r.status == status]

    @property
    def installed(self) -> list[str]:
        return self._names(InstallStatus.INSTALLED)

    @property
    def skipped(self) -> list[str]:
        return self._names(InstallStatus.SKIPPED)

    @property
    def failed(self) -> list[str]:
        return self._names(InstallStatus.FAILED)

    @property
    def failed_results(self) -> list[InstallResult]:
        return [r for r in self.results if r.status == InstallStatus.FAILED]

    def __len__(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 1
    backoff: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff < 0:
            raise ValueError("backoff must not be negative")


DEFAULT_RETRY_POLICIES: dict[Manager, RetryPolicy] = {
    Manager.APT: RetryPolicy(max_attempts=3),
    Manager.BREW: RetryPolicy(max_attempts=2),
    Manager.BREW_CASK: RetryPolicy(max_attempts=2),
    Manager.CARGO: RetryPolicy(max_attempts=3),
    Manager.NPM: RetryPolicy(max_attempts=3),
    Manager.CHOCO: RetryPolicy(max_attempts=3),
    Manager.GALLERY_MODULE: RetryPolicy(max_attempts=2),
    Manager.FONT: RetryPolicy(max_attempts=2),
    Manager.GIT_CLONE: RetryPolicy(max_attempts=2),
    Manager.PYENV: RetryPolicy(max_attempts=1),
    Manager.PROFILE: RetryPolicy(max_attempts=1),
    Manager.TOOL: RetryPolicy(max_attempts=1),
}


@dataclass
class SubManifest:
    name: str
    description: str
    targets: list[InstallTarget]
    prompt: str | None = None
    prerequisite: bool = False
    refresh: str | None = None
    env: dict[str, Any] = field(default_factory=dict)

    @property
    def optional(self) -> bool:
        return self.prompt is not None


@dataclass
class PlatformProfile:
    platform: Platform
    package_manager: Manager
    sub_manifests: list[SubManifest]

    def group(self, name: str) -> SubManifest | None:
        return next((g for g in self.sub_manifests if g.name == name), None)

    @property
    def targets(self) -> list[InstallTarget]:
        return [t for g in self.sub_manifests for t in g.targets]


__all__ = [
    "Manager",
    "Platform",
    "InstallStatus",
    "InstallTarget",
    "InstallResult",
    "RunSummary",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICIES",
    "SubManifest",
    "PlatformProfile",
]
