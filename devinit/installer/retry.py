"""Presence-checked installation with bounded retries."""

import logging
import time
from typing import Callable

from devinit.log import log_success

from .managers import PackageManager
from .models import InstallResult, InstallStatus, InstallTarget, RetryPolicy

_logging = logging.getLogger(__name__)


def is_present(manager: PackageManager, target: InstallTarget) -> bool:
    """Presence check that treats any error as "not installed"."""
    try:
        return bool(manager.check_present(target))
    except Exception as e:
        _logging.debug(f"Presence check for {target.name} failed: {type(e).__name__}: {e}")
        return False


def install_target(
    target: InstallTarget,
    manager: PackageManager,
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> InstallResult:
    """Install ``target`` unless present, retrying up to ``policy.max_attempts``.

    The result is ``SKIPPED`` (zero manager installs) when already present,
    ``INSTALLED`` on the first successful attempt, and ``FAILED`` only after
    every attempt failed. Manager exceptions count as failed attempts.
    """
    if is_present(manager, target):
        _logging.warning(f"{target.name} already installed, skipping")
        return InstallResult(target, InstallStatus.SKIPPED, attempts=0)

    output = ""
    for attempt in range(1, policy.max_attempts + 1):
        _logging.info(f"Installing {target.name}...")
        try:
            output, returncode = manager.install(target)
        except Exception as e:
            output, returncode = f"{type(e).__name__}: {e}", 1

        if returncode == 0:
            log_success(_logging, f"{target.name} installed")
            return InstallResult(target, InstallStatus.INSTALLED, attempt, output)

        _logging.debug(f"{target.name} attempt {attempt} failed: {output}")
        if attempt < policy.max_attempts:
            _logging.warning(f"Failed to install {target.name}, retrying...")
            sleep(policy.backoff)

    _logging.error(f"{target.name} failed")
    return InstallResult(target, InstallStatus.FAILED, policy.max_attempts, output)


__all__ = ["install_target", "is_present"]
