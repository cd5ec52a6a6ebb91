"""Filesystem location helpers for devinit."""

import os
import re
from pathlib import Path
from string import Template

_DEFAULTED_VAR = re.compile(r"\$\{(\w+):-([^}]*)\}")


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/devinit"""
    return Path.home() / ".config" / "devinit"


def get_packaged_manifest_path() -> Path:
    """Return path to the bundled default manifest (read-only)."""
    return Path(__file__).parent / "data" / "manifest.yaml"


def get_config_path() -> Path:
    """Return path to user settings file.

    Priority:
    1. DEVINIT_CONFIG environment variable (if set)
    2. ~/.config/devinit/config.yaml (default XDG location)
    """
    if "DEVINIT_CONFIG" in os.environ:
        return Path(os.environ["DEVINIT_CONFIG"])
    return get_config_dir() / "config.yaml"


def expand_vars(value: str, env: dict | None = None) -> str:
    """Expand ``~``, ``$VAR`` and ``${VAR:-default}`` against ``env`` (default os.environ).

    Unknown ``$VAR`` references are left in place; an unset or empty
    ``${VAR:-default}`` takes its default.
    """
    env = os.environ if env is None else env
    value = _DEFAULTED_VAR.sub(lambda m: env.get(m.group(1)) or m.group(2), value)
    expanded = Template(value).safe_substitute(env)
    if expanded.startswith("~"):
        home = env.get("HOME") or env.get("USERPROFILE") or str(Path.home())
        expanded = home + expanded[1:]
    return expanded


def expand_path(value: str, env: dict | None = None) -> Path:
    return Path(expand_vars(value, env))


def get_font_dir(platform_name: str) -> Path:
    """Return the per-user font directory for a platform value."""
    if platform_name == "macos":
        return Path.home() / "Library" / "Fonts"
    if platform_name == "windows":
        local = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(local) / "Microsoft" / "Windows" / "Fonts"
    return Path.home() / ".local" / "share" / "fonts"
