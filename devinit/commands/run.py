"""Run command implementation."""

import logging
import sys

import click

from devinit.errors import PrerequisiteError
from devinit.environment import ProcessEnvironment
from devinit.installer import Orchestrator, Platform, build_managers, render_summary
from devinit.log import log_success
from devinit.profile import ensure_default_shell
from devinit.tui import GroupConfirmer, select_groups_interactive

from .utils import (
    EXIT_CANCELLED,
    EXIT_PREREQUISITE_FAILED,
    PLATFORM_LABELS,
    load_profile_or_exit,
    load_settings_or_exit,
    platform_option,
    resolve_platform_or_exit,
)

_logging = logging.getLogger(__name__)

BANNER = r"""
     _            _       _ _
  __| | _____   _(_)_ __ (_) |_
 / _` |/ _ \ \ / / | '_ \| | __|
| (_| |  __/\ V /| | | | | | |_
 \__,_|\___| \_/ |_|_| |_|_|\__|
"""


def _validate_run_options(
    assume_yes: bool, no_optional: bool, select: bool
) -> None:
    """Reject contradictory answer sources.

    Raises:
        click.BadOptionUsage: If more than one of --yes, --no-optional and
            --select is given
    """
    if assume_yes and no_optional:
        raise click.BadOptionUsage(
            "--yes", "--yes and --no-optional cannot be used together"
        )
    if select and (assume_yes or no_optional):
        raise click.BadOptionUsage(
            "--select", "--select cannot be combined with --yes or --no-optional"
        )


@click.command()
@click.option(
    "--yes", "-y", "assume_yes", is_flag=True, help="Install every optional group"
)
@click.option("--no-optional", is_flag=True, help="Skip every optional group")
@platform_option
@click.option(
    "--only",
    multiple=True,
    metavar="GROUP",
    help="Run only this group (repeatable); prerequisites always run",
)
@click.option(
    "--select", is_flag=True, help="Pick optional groups from a checklist (TTY only)"
)
@click.option(
    "--no-shell-change", is_flag=True, help="Do not make zsh the login shell"
)
@click.pass_context
def run(
    ctx,
    assume_yes: bool,
    no_optional: bool,
    platform_name: str | None,
    only: tuple[str, ...],
    select: bool,
    no_shell_change: bool,
):
    """Install everything the manifest lists for this platform."""
    _validate_run_options(assume_yes, no_optional, select)
    settings = load_settings_or_exit(ctx)
    color = sys.stdout.isatty()

    click.echo(click.style(BANNER, fg="red") if color else BANNER)

    platform = resolve_platform_or_exit(platform_name)
    _logging.info(f"Detected OS: {platform.value}")
    profile = load_profile_or_exit(ctx, platform, settings)

    group_names = [g.name for g in profile.sub_manifests]
    for name in only:
        if name not in group_names:
            raise click.BadOptionUsage(
                "--only", f"Unknown group '{name}'. Available: {', '.join(group_names)}"
            )

    answers = dict(settings.answers)
    if select:
        try:
            chosen = select_groups_interactive(profile.sub_manifests)
        except RuntimeError as e:
            raise click.UsageError(str(e))
        if chosen is None:
            click.echo("Selection cancelled, nothing installed.")
            sys.exit(EXIT_CANCELLED)
        answers.update(chosen)

    assume = True if assume_yes else False if no_optional else None
    environment = ProcessEnvironment()
    orchestrator = Orchestrator(
        profile,
        build_managers(platform, environment=environment),
        policies=settings.retry,
        confirm=GroupConfirmer(answers=answers, assume=assume),
        environment=environment,
        exclude=settings.exclude,
        only=only or None,
    )

    _logging.info(f"Setting up {PLATFORM_LABELS[platform]} environment...")
    try:
        summary = orchestrator.run()
    except PrerequisiteError as e:
        click.echo(render_summary(e.summary, color=color))
        _logging.error(str(e))
        sys.exit(EXIT_PREREQUISITE_FAILED)

    click.echo(render_summary(summary, color=color))
    log_success(_logging, "Setup complete!")

    if platform != Platform.WINDOWS and not no_shell_change:
        ensure_default_shell("zsh")
