"""Tests for summary rendering and remediation commands."""

import click

from devinit.installer.models import InstallResult, InstallStatus, Manager, RunSummary
from devinit.installer.reporting import remediation_command, render_summary

from tests.conftest import make_target


def _summary(*entries):
    summary = RunSummary()
    for name, status, manager in entries:
        attempts = 0 if status == InstallStatus.SKIPPED else 1
        summary.add(InstallResult(make_target(name, manager), status, attempts))
    return summary


def test_counts_and_single_remediation_line():
    summary = _summary(
        ("a", InstallStatus.INSTALLED, Manager.APT),
        ("b", InstallStatus.INSTALLED, Manager.APT),
        ("c", InstallStatus.SKIPPED, Manager.APT),
        ("d", InstallStatus.FAILED, Manager.APT),
    )

    output = render_summary(summary)

    assert "Installed (2):" in output
    assert "Skipped (1):" in output
    assert "Failed (1) - after retry:" in output
    assert "  a b" in output
    assert "To retry manually:" in output
    remediation = [line for line in output.splitlines() if "apt-get install" in line]
    assert remediation == ["  sudo apt-get install -y d"]


def test_sections_in_order():
    summary = _summary(
        ("d", InstallStatus.FAILED, Manager.BREW),
        ("c", InstallStatus.SKIPPED, Manager.BREW),
        ("a", InstallStatus.INSTALLED, Manager.BREW),
    )

    output = render_summary(summary)

    assert output.index("Installed") < output.index("Skipped") < output.index("Failed")


def test_empty_buckets_render_none():
    output = render_summary(RunSummary())

    assert output.count("(none)") == 3
    assert "Installed (0):" in output
    assert "To retry manually" not in output


def test_no_remediation_section_without_failures():
    summary = _summary(("git", InstallStatus.INSTALLED, Manager.APT))

    assert "To retry manually" not in render_summary(summary)


def test_color_output_strips_to_plain():
    summary = _summary(
        ("git", InstallStatus.INSTALLED, Manager.APT),
        ("zsh", InstallStatus.FAILED, Manager.APT),
    )

    colored = render_summary(summary, color=True)

    assert "\x1b[" in colored
    assert click.unstyle(colored) == render_summary(summary)


class TestRemediationCommand:
    def test_manager_templates(self):
        cases = {
            Manager.APT: "sudo apt-get install -y pkg",
            Manager.BREW: "brew install pkg",
            Manager.BREW_CASK: "brew install --cask pkg",
            Manager.CARGO: "cargo install pkg",
            Manager.NPM: "npm install -g pkg",
            Manager.CHOCO: "choco install pkg -y",
            Manager.GALLERY_MODULE: "Install-Module -Name pkg -Scope CurrentUser -Force",
        }
        for manager, expected in cases.items():
            assert remediation_command(make_target("pkg", manager)) == expected

    def test_explicit_remediation_wins(self):
        target = make_target("pkg", Manager.APT, remediation="sudo apt install pkg")

        assert remediation_command(target) == "sudo apt install pkg"

    def test_tool_uses_install_command(self):
        target = make_target("pyenv", Manager.TOOL, install="curl https://pyenv.run | bash")

        assert remediation_command(target) == "curl https://pyenv.run | bash"

    def test_git_clone_falls_back_to_clone_command(self):
        target = make_target(
            "lazyvim",
            Manager.GIT_CLONE,
            url="https://github.com/LazyVim/starter",
            dest="~/.config/nvim",
        )

        assert (
            remediation_command(target)
            == "git clone https://github.com/LazyVim/starter ~/.config/nvim"
        )

    def test_last_resort_is_rerun(self):
        assert remediation_command(make_target("JetBrainsMono", Manager.FONT)) == "devinit run"
