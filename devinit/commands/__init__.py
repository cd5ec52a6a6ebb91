"""CLI command definitions for devinit."""

from pathlib import Path

import click

from devinit import __version__
from devinit.commands.check import check
from devinit.commands.detect import detect
from devinit.commands.list import list_groups as list_command
from devinit.commands.run import run
from devinit.log import setup_logging


@click.group()
@click.version_option(__version__, prog_name="devinit")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: $DEVINIT_CONFIG or ~/.config/devinit/config.yaml)",
)
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Manifest file to use instead of the bundled one",
)
@click.pass_context
def cli(ctx, debug: bool, config_path: Path | None, manifest_path: Path | None):
    """Bootstrap a developer workstation."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path
    ctx.obj["manifest_path"] = manifest_path
    setup_logging(debug)


# Register all commands
cli.add_command(run)
cli.add_command(check)
cli.add_command(list_command, name="list")
cli.add_command(detect)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
