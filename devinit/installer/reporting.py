"""Render the end-of-run summary."""

import click

from .models import InstallTarget, Manager, RunSummary

REMEDIATION_TEMPLATES = {
    Manager.APT: "sudo apt-get install -y {name}",
    Manager.BREW: "brew install {name}",
    Manager.BREW_CASK: "brew install --cask {name}",
    Manager.CARGO: "cargo install {name}",
    Manager.NPM: "npm install -g {name}",
    Manager.CHOCO: "choco install {name} -y",
    Manager.GALLERY_MODULE: "Install-Module -Name {name} -Scope CurrentUser -Force",
}


def remediation_command(target: InstallTarget) -> str:
    """Command an operator can run by hand to retry ``target``."""
    override = target.metadata.get("remediation")
    if override:
        return override

    template = REMEDIATION_TEMPLATES.get(target.manager)
    if template:
        return template.format(name=target.name)

    install = target.metadata.get("install")
    if install:
        return install
    if target.manager == Manager.GIT_CLONE and target.metadata.get("url"):
        return f"git clone {target.metadata['url']} {target.metadata.get('dest', '')}".rstrip()
    # Re-running is safe: present targets are skipped.
    return "devinit run"


def _section(title: str, names: list[str], fg: str, color: bool) -> list[str]:
    header = f"{title}:"
    body = f"  {' '.join(names)}" if names else "  (none)"
    if color:
        header = click.style(header, fg=fg)
        body = click.style(body, fg="bright_black")
    return [header, body]


def render_summary(summary: RunSummary, color: bool = False) -> str:
    """Three labeled groups with counts, then one retry command per failure."""
    installed = summary.installed
    skipped = summary.skipped
    failed = summary.failed

    lines = [""]
    lines += _section(f"Installed ({len(installed)})", installed, "green", color)
    lines.append("")
    lines += _section(f"Skipped ({len(skipped)})", skipped, "yellow", color)
    lines.append("")
    lines += _section(f"Failed ({len(failed)}) - after retry", failed, "red", color)

    if failed:
        lines.append("")
        header = "To retry manually:"
        lines.append(click.style(header, fg="yellow") if color else header)
        for result in summary.failed_results:
            command = f"  {remediation_command(result.target)}"
            lines.append(click.style(command, fg="bright_black") if color else command)

    lines.append("")
    return "\n".join(lines)


__all__ = ["render_summary", "remediation_command", "REMEDIATION_TEMPLATES"]
