"""Installer engine: manifest models, manager adapters, orchestration."""

from .managers import PackageManager, build_managers
from .models import (
    DEFAULT_RETRY_POLICIES,
    InstallResult,
    InstallStatus,
    InstallTarget,
    Manager,
    Platform,
    PlatformProfile,
    RetryPolicy,
    RunSummary,
    SubManifest,
)
from .orchestration import Orchestrator
from .reporting import remediation_command, render_summary
from .retry import install_target, is_present

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
    "PackageManager",
    "build_managers",
    "install_target",
    "is_present",
    "Orchestrator",
    "render_summary",
    "remediation_command",
]
