"""Check command implementation."""

import os

import click

from devinit.environment import ProcessEnvironment
from devinit.execution import run_command
from devinit.installer import build_managers, is_present

from .utils import (
    load_profile_or_exit,
    load_settings_or_exit,
    platform_option,
    resolve_platform_or_exit,
)


@click.command()
@platform_option
@click.option("--quiet", "-q", is_flag=True, help="Show only missing targets")
@click.pass_context
def check(ctx, platform_name: str | None, quiet: bool):
    """Report which targets are already present, without installing."""
    settings = load_settings_or_exit(ctx)
    platform = resolve_platform_or_exit(platform_name)
    profile = load_profile_or_exit(ctx, platform, settings)

    # Work on a copy so manifest env blocks do not leak into this process.
    environment = ProcessEnvironment(dict(os.environ))
    managers = build_managers(platform, environment=environment)

    present_count = 0
    total = 0
    for group in profile.sub_manifests:
        environment.apply(group.env)
        lines = []
        for target in group.targets:
            environment.apply(target.metadata.get("env", {}))
            total += 1
            manager = managers.get(target.manager)
            present = manager is not None and is_present(manager, target)
            if present:
                present_count += 1
                probe = target.metadata.get("env_probe")
                if probe:
                    environment.probe_path(probe, runner=run_command)
                if not quiet:
                    lines.append(f"  ✅ {target.name}")
            else:
                lines.append(f"  ⚪ {target.name}: missing")
        if lines:
            click.echo(f"{group.description}:")
            for line in lines:
                click.echo(line)

    click.echo(f"\n{present_count} of {total} target(s) present.")
