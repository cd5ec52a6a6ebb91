"""Shared helpers for commands: settings, platform and manifest resolution."""

import logging
import sys
from pathlib import Path

import click

from devinit.config import ConfigError, Settings, load_settings
from devinit.data_loader import get_profile
from devinit.detection import detect_platform, require_supported
from devinit.errors import UnsupportedPlatformError, format_error
from devinit.installer.models import Platform, PlatformProfile
from devinit.paths import get_config_path

_logging = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_CANCELLED = 1
EXIT_INVALID_ARGS = 2
EXIT_UNSUPPORTED_PLATFORM = 3
EXIT_PREREQUISITE_FAILED = 4
EXIT_CONFIG_ERROR = 5

PLATFORM_CHOICES = [p.value for p in Platform if p != Platform.UNKNOWN]

PLATFORM_LABELS = {
    Platform.LINUX: "Linux",
    Platform.WSL: "WSL/Linux",
    Platform.MACOS: "MacOS",
    Platform.WINDOWS: "Windows",
}


def platform_option(f):
    """``--platform`` override shared by run, check and list."""
    return click.option(
        "--platform",
        "platform_name",
        type=click.Choice(PLATFORM_CHOICES),
        default=None,
        help="Use this platform's profile instead of detecting the host",
    )(f)


def load_settings_or_exit(ctx: click.Context) -> Settings:
    """Load settings from --config, DEVINIT_CONFIG or the default location.

    An explicitly passed --config file must exist; the default may be absent.
    """
    explicit: Path | None = ctx.obj.get("config_path")
    path = explicit or get_config_path()
    try:
        return load_settings(path, required=explicit is not None)
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(EXIT_CONFIG_ERROR)


def resolve_platform_or_exit(platform_name: str | None) -> Platform:
    """Return the requested platform, or detect the host's.

    Exits with EXIT_UNSUPPORTED_PLATFORM before anything is installed when
    the host is not one of the supported platforms.
    """
    if platform_name:
        return Platform(platform_name)
    try:
        return require_supported(detect_platform())
    except UnsupportedPlatformError as e:
        _logging.error(str(e))
        sys.exit(EXIT_UNSUPPORTED_PLATFORM)


def load_profile_or_exit(
    ctx: click.Context, platform: Platform, settings: Settings
) -> PlatformProfile:
    manifest = ctx.obj.get("manifest_path") or settings.manifest
    try:
        return get_profile(platform, manifest)
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(EXIT_CONFIG_ERROR)


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_CANCELLED",
    "EXIT_INVALID_ARGS",
    "EXIT_UNSUPPORTED_PLATFORM",
    "EXIT_PREREQUISITE_FAILED",
    "EXIT_CONFIG_ERROR",
    "PLATFORM_CHOICES",
    "PLATFORM_LABELS",
    "platform_option",
    "load_settings_or_exit",
    "resolve_platform_or_exit",
    "load_profile_or_exit",
]
