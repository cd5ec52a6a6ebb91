"""Pytest fixtures and utilities for devinit tests."""

import logging
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from devinit.data_loader import clear_cache
from devinit.environment import ProcessEnvironment
from devinit.installer.managers import PackageManager
from devinit.installer.models import (
    InstallTarget,
    Manager,
    Platform,
    PlatformProfile,
    SubManifest,
)


class StubManager(PackageManager):
    """In-memory manager: a set of present names and scripted failures.

    A successful install marks the target present, so a second run against
    the same stub sees the host as mutated by the first.
    """

    def __init__(
        self,
        manager: Manager = Manager.APT,
        present=(),
        failures: dict[str, int] | None = None,
        always_fail=(),
        raises=(),
    ):
        super().__init__(runner=_unexpected_runner, environment=ProcessEnvironment({}))
        self.manager = manager
        self.present = set(present)
        self.failures = dict(failures or {})
        self.always_fail = set(always_fail)
        self.raises = set(raises)
        self.checks: list[str] = []
        self.installs: list[str] = []

    def check_present(self, target: InstallTarget) -> bool:
        self.checks.append(target.name)
        return target.name in self.present

    def install(self, target: InstallTarget):
        self.installs.append(target.name)
        if target.name in self.raises:
            raise OSError(f"{target.name}: exec format error")
        if target.name in self.always_fail:
            return f"E: Unable to locate package {target.name}", 100
        remaining = self.failures.get(target.name, 0)
        if remaining:
            self.failures[target.name] = remaining - 1
            return "Temporary failure resolving 'archive.ubuntu.com'", 1
        self.present.add(target.name)
        return f"Setting up {target.name}", 0


def _unexpected_runner(command, **kwargs):
    raise AssertionError(f"stub manager ran a real command: {command}")


class RecordingRunner:
    """Runner double recording every command; replies from a lookup table."""

    def __init__(self, responses: dict | None = None, default=("", 0)):
        self.responses = dict(responses or {})
        self.default = default
        self.calls: list = []

    def __call__(self, command, **kwargs):
        self.calls.append(command)
        key = command if isinstance(command, str) else " ".join(command)
        return self.responses.get(key, self.default)

    @property
    def commands(self) -> list[str]:
        return [c if isinstance(c, str) else " ".join(c) for c in self.calls]


def make_target(name: str, manager: Manager = Manager.APT, **metadata) -> InstallTarget:
    return InstallTarget(name=name, manager=manager, metadata=metadata)


@pytest.fixture(autouse=True)
def _reset_state() -> Generator[None, None, None]:
    """Drop manifest cache and CLI log handlers between tests."""
    clear_cache()
    yield
    clear_cache()
    logger = logging.getLogger("devinit")
    for handler in list(logger.handlers):
        if getattr(handler, "_devinit", False):
            logger.removeHandler(handler)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sleeps() -> list[float]:
    """Collects backoff delays instead of sleeping."""
    return []


@pytest.fixture
def no_sleep(sleeps: list[float]):
    return sleeps.append


@pytest.fixture
def runner_stub() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def stub_manager():
    """Factory for StubManager instances."""
    return StubManager


@pytest.fixture
def target():
    """Factory for InstallTarget instances."""
    return make_target


@pytest.fixture
def sample_profile() -> PlatformProfile:
    """Linux-shaped profile: core packages, an optional toolchain, an optional editor."""
    return PlatformProfile(
        platform=Platform.LINUX,
        package_manager=Manager.APT,
        sub_manifests=[
            SubManifest(
                name="apt-core",
                description="dev tools via apt",
                targets=[make_target("git"), make_target("curl"), make_target("tmux")],
                refresh="sudo apt-get update -y",
            ),
            SubManifest(
                name="rust",
                description="Rust/Cargo/Neovim",
                prompt="Do you want to install Rust, Cargo, and Neovim (via bob)?",
                targets=[
                    make_target("rust", Manager.TOOL, install="rustup-init -y"),
                    make_target("bob-nvim", Manager.CARGO),
                ],
            ),
            SubManifest(
                name="nvm",
                description="NVM",
                prompt="Do you want to install NVM, Node.js, pnpm, and Yarn?",
                targets=[make_target("pnpm", Manager.NPM), make_target("yarn", Manager.NPM)],
            ),
        ],
    )


@pytest.fixture
def sample_managers(sample_profile) -> dict[Manager, StubManager]:
    managers = {m: StubManager(manager=m) for m in {t.manager for t in sample_profile.targets}}
    return managers


@pytest.fixture
def mock_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return True."""
    with patch("sys.stdin.isatty", return_value=True):
        yield


@pytest.fixture
def mock_no_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return False."""
    with patch("sys.stdin.isatty", return_value=False):
        yield


@pytest.fixture
def manifest_file(temp_dir: Path) -> Path:
    """A small valid manifest on disk."""
    path = temp_dir / "manifest.yaml"
    path.write_text(
        """
groups:
  core:
    description: core tools
    manager: apt
    refresh: apt-get update
    targets:
      - git
      - name: curl
        version: 7.88
  extras:
    description: extras
    prompt: Install extras?
    targets:
      - name: rust
        manager: tool
        check: which rustc
        install: curl https://sh.rustup.rs | sh -s -- -y
        env:
          PATH: ~/.cargo/bin
platforms:
  linux:
    package_manager: apt
    groups: [core, extras]
  wsl:
    package_manager: apt
    groups: [core]
""",
        encoding="utf-8",
    )
    return path
