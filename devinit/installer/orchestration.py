"""Run a platform profile's sub-manifests in order and collect the outcome."""

import logging
import time
from typing import Callable, Iterable

from devinit.environment import ProcessEnvironment
from devinit.errors import PrerequisiteError
from devinit.execution import run_command
from devinit.tui.prompts import confirm_group

from .managers import PackageManager, Runner
from .models import (
    DEFAULT_RETRY_POLICIES,
    InstallResult,
    InstallStatus,
    InstallTarget,
    Manager,
    PlatformProfile,
    RetryPolicy,
    RunSummary,
    SubManifest,
)
from .retry import install_target

_logging = logging.getLogger(__name__)


class Orchestrator:
    """Sequential installer over one PlatformProfile.

    Each target resolves independently: a failed target never stops the
    ones after it. The only fatal outcome is a failure inside a
    prerequisite group, raised as PrerequisiteError with the partial summary.
    """

    def __init__(
        self,
        profile: PlatformProfile,
        managers: dict[Manager, PackageManager],
        policies: dict[Manager, RetryPolicy] | None = None,
        confirm: Callable[[SubManifest], bool] = confirm_group,
        environment: ProcessEnvironment | None = None,
        runner: Runner | None = None,
        sleep: Callable[[float], None] | None = None,
        exclude: Iterable[str] = (),
        only: Iterable[str] | None = None,
    ):
        self.profile = profile
        self.managers = managers
        self.policies = {**DEFAULT_RETRY_POLICIES, **(policies or {})}
        self.confirm = confirm
        self.environment = environment or ProcessEnvironment()
        self.runner = runner or run_command
        self.sleep = sleep or time.sleep
        self.exclude = set(exclude)
        self.only = set(only) if only is not None else None

    def selected_groups(self) -> list[SubManifest]:
        if self.only is None:
            return list(self.profile.sub_manifests)
        return [
            g for g in self.profile.sub_manifests
            if g.prerequisite or g.name in self.only
        ]

    def run(self, summary: RunSummary | None = None) -> RunSummary:
        summary = summary if summary is not None else RunSummary()
        for group in self.selected_groups():
            self.run_group(group, summary)
        return summary

    def run_group(self, group: SubManifest, summary: RunSummary) -> None:
        if group.optional and not self.confirm(group):
            _logging.warning(f"Skipping {group.description} setup")
            for target in group.targets:
                summary.add(InstallResult(target, InstallStatus.SKIPPED, attempts=0))
            return

        _logging.info(f"Setting up {group.description}...")
        self.environment.apply(group.env)
        if group.refresh:
            self._refresh(group)

        failed = []
        for target in group.targets:
            result = self.run_target(target)
            summary.add(result)
            if result.status == InstallStatus.FAILED:
                failed.append(target.name)

        if group.prerequisite and failed:
            raise PrerequisiteError(group.description, failed, summary)

    def run_target(self, target: InstallTarget) -> InstallResult:
        if target.name in self.exclude:
            _logging.warning(f"{target.name} excluded by settings, skipping")
            return InstallResult(target, InstallStatus.SKIPPED, attempts=0)

        manager = self.managers.get(target.manager)
        if manager is None:
            _logging.error(f"No manager available for {target.manager.value}")
            return InstallResult(
                target, InstallStatus.FAILED, attempts=0,
                output=f"No manager available for {target.manager.value}",
            )

        self.environment.apply(target.metadata.get("env", {}))
        result = install_target(
            target, manager, self.policies[target.manager], sleep=self.sleep
        )
        if result.status != InstallStatus.FAILED:
            self._probe_env(target)
        return result

    def _refresh(self, group: SubManifest) -> None:
        _logging.info(f"Updating package index for {group.description}...")
        output, returncode = self.runner(group.refresh, env=self.environment.as_dict())
        if returncode != 0:
            _logging.warning(f"Package index refresh failed: {output}")

    def _probe_env(self, target: InstallTarget) -> None:
        probe = target.metadata.get("env_probe")
        if probe and not self.environment.probe_path(probe, runner=self.runner):
            _logging.debug(f"No PATH entry added for {target.name}")


__all__ = ["Orchestrator"]
