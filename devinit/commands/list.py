"""List command implementation."""

import click

from .utils import (
    load_profile_or_exit,
    load_settings_or_exit,
    platform_option,
    resolve_platform_or_exit,
)


@click.command(name="list")
@platform_option
@click.option(
    "--verbose", "-v", is_flag=True, help="Show the manager and description of each target"
)
@click.pass_context
def list_groups(ctx, platform_name: str | None, verbose: bool):
    """List the manifest groups and targets for a platform."""
    settings = load_settings_or_exit(ctx)
    platform = resolve_platform_or_exit(platform_name)
    profile = load_profile_or_exit(ctx, platform, settings)

    click.echo(f"Platform: {platform.value} (package manager: {profile.package_manager.value})\n")
    for group in profile.sub_manifests:
        tags = []
        if group.prerequisite:
            tags.append("prerequisite")
        if group.optional:
            tags.append("optional")
        suffix = f" [{', '.join(tags)}]" if tags else ""
        click.echo(f"{group.name}: {group.description}{suffix}")

        if verbose:
            for target in group.targets:
                line = f"  • {target.name} ({target.manager.value})"
                if target.description:
                    line += f" - {target.description}"
                if target.name in settings.exclude:
                    line += " [excluded]"
                click.echo(line)
            click.echo("")
        else:
            click.echo(f"  {' '.join(t.name for t in group.targets)}")
