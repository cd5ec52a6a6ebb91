"""Tests for presence-checked installation with retries."""

import logging

import pytest

from devinit.installer.models import InstallStatus, Manager, RetryPolicy
from devinit.installer.retry import install_target, is_present


@pytest.fixture(autouse=True)
def _capture_devinit(caplog):
    caplog.set_level(logging.DEBUG, logger="devinit")


def test_present_target_is_skipped_without_install(stub_manager, target, no_sleep, sleeps):
    manager = stub_manager(present={"git"})

    result = install_target(target("git"), manager, RetryPolicy(max_attempts=3), sleep=no_sleep)

    assert result.status == InstallStatus.SKIPPED
    assert result.attempts == 0
    assert manager.installs == []
    assert sleeps == []


def test_first_attempt_success(stub_manager, target, no_sleep, sleeps):
    manager = stub_manager()

    result = install_target(target("git"), manager, RetryPolicy(max_attempts=3), sleep=no_sleep)

    assert result.status == InstallStatus.INSTALLED
    assert result.attempts == 1
    assert result.output == "Setting up git"
    assert sleeps == []


@pytest.mark.parametrize("failures,max_attempts", [(1, 2), (1, 3), (2, 3)])
def test_transient_failures_then_success(
    stub_manager, target, no_sleep, sleeps, failures, max_attempts
):
    manager = stub_manager(failures={"git": failures})

    result = install_target(
        target("git"), manager, RetryPolicy(max_attempts=max_attempts, backoff=2.0), sleep=no_sleep
    )

    assert result.status == InstallStatus.INSTALLED
    assert result.attempts == failures + 1
    assert manager.installs == ["git"] * (failures + 1)
    assert sleeps == [2.0] * failures


def test_exhausted_attempts_fail(stub_manager, target, no_sleep, sleeps):
    manager = stub_manager(always_fail={"nosuchpkg"})

    result = install_target(
        target("nosuchpkg"), manager, RetryPolicy(max_attempts=3, backoff=0.5), sleep=no_sleep
    )

    assert result.status == InstallStatus.FAILED
    assert result.attempts == 3
    assert len(manager.installs) == 3
    # No sleep after the final attempt
    assert sleeps == [0.5, 0.5]
    assert "Unable to locate package" in result.output


def test_single_attempt_policy_never_sleeps(stub_manager, target, no_sleep, sleeps):
    manager = stub_manager(manager=Manager.TOOL, always_fail={"pyenv"})

    result = install_target(
        target("pyenv", Manager.TOOL), manager, RetryPolicy(max_attempts=1), sleep=no_sleep
    )

    assert result.status == InstallStatus.FAILED
    assert result.attempts == 1
    assert sleeps == []


def test_manager_exception_counts_as_failed_attempt(stub_manager, target, no_sleep):
    manager = stub_manager(raises={"git"})

    result = install_target(target("git"), manager, RetryPolicy(max_attempts=2), sleep=no_sleep)

    assert result.status == InstallStatus.FAILED
    assert result.attempts == 2
    assert "OSError" in result.output


def test_presence_check_error_means_not_present(stub_manager, target):
    manager = stub_manager()

    def broken(_target):
        raise RuntimeError("dpkg database locked")

    manager.check_present = broken

    assert is_present(manager, target("git")) is False


def test_log_lines(stub_manager, target, no_sleep, caplog):
    manager = stub_manager(present={"curl"}, failures={"git": 1}, always_fail={"bad"})
    policy = RetryPolicy(max_attempts=2)

    install_target(target("curl"), manager, policy, sleep=no_sleep)
    install_target(target("git"), manager, policy, sleep=no_sleep)
    install_target(target("bad"), manager, policy, sleep=no_sleep)

    messages = [r.getMessage() for r in caplog.records]
    assert "curl already installed, skipping" in messages
    assert "Installing git..." in messages
    assert "Failed to install git, retrying..." in messages
    assert "git installed" in messages
    assert "bad failed" in messages


class TestRetryPolicy:
    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError, match="max_attempts"):
            RetryPolicy(max_attempts=0)

    def test_rejects_negative_backoff(self):
        with pytest.raises(ValueError, match="backoff"):
            RetryPolicy(max_attempts=1, backoff=-1)
