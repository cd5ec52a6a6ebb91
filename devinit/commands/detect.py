"""Detect command implementation."""

import platform as _platform
import sys

import click

from devinit.detection import detect_platform
from devinit.installer.models import Platform

from .utils import EXIT_UNSUPPORTED_PLATFORM


@click.command()
def detect():
    """Print the detected platform."""
    detected = detect_platform()
    click.echo(detected.value)
    if detected == Platform.UNKNOWN:
        click.echo(f"Unsupported OS: {_platform.system() or 'unknown'}", err=True)
        sys.exit(EXIT_UNSUPPORTED_PLATFORM)
