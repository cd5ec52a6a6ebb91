"""User settings loading and validation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from devinit.errors import format_field_error
from devinit.installer.models import DEFAULT_RETRY_POLICIES, Manager, RetryPolicy

_logging = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when settings or manifest loading fails."""
    pass


@dataclass
class Settings:
    """Operator preferences layered over the bundled manifest."""
    retry: dict[Manager, RetryPolicy] = field(
        default_factory=lambda: dict(DEFAULT_RETRY_POLICIES)
    )
    answers: dict[str, bool] = field(default_factory=dict)
    exclude: set[str] = field(default_factory=set)
    manifest: Path | None = None


def read_yaml(path: Path) -> object:
    """Parse a YAML file, converting every failure into ConfigError."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"File not found: {path}")
    except PermissionError:
        raise ConfigError(f"Permission denied reading {path}")
    except UnicodeDecodeError:
        raise ConfigError(f"File is not valid UTF-8: {path}")
    except OSError as e:
        raise ConfigError(f"Error reading {path}: {e}")

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            raise ConfigError(
                f"YAML syntax error in {path} at line {mark.line + 1}, "
                f"col {mark.column + 1}: {getattr(e, 'problem', e)}"
            ) from e
        raise ConfigError(f"YAML syntax error in {path}: {e}") from e


def _parse_manager(name: str) -> Manager:
    try:
        return Manager(name)
    except ValueError:
        valid = ", ".join(m.value for m in Manager)
        raise ConfigError(f"Unknown manager '{name}' in retry. Must be one of: {valid}")


def _parse_retry(data: object) -> dict[Manager, RetryPolicy]:
    policies = dict(DEFAULT_RETRY_POLICIES)
    if data is None:
        return policies
    if not isinstance(data, dict):
        raise ConfigError("retry must be a mapping of manager to policy")

    for name, raw in data.items():
        manager = _parse_manager(str(name))
        if not isinstance(raw, dict):
            raise ConfigError(f"retry.{name} must be a mapping")
        base = policies[manager]
        max_attempts = raw.get("max_attempts", base.max_attempts)
        backoff = raw.get("backoff", base.backoff)
        if not isinstance(max_attempts, int) or isinstance(max_attempts, bool):
            raise ConfigError(
                format_field_error(f"retry.{name}", "max_attempts", "must be an integer")
            )
        if not isinstance(backoff, (int, float)) or isinstance(backoff, bool):
            raise ConfigError(
                format_field_error(f"retry.{name}", "backoff", "must be a number")
            )
        try:
            policies[manager] = RetryPolicy(max_attempts=max_attempts, backoff=float(backoff))
        except ValueError as e:
            raise ConfigError(f"retry.{name}: {e}")
    return policies


def validate_settings(data: object, base_dir: Path | None = None) -> Settings:
    """Validate a raw settings mapping and convert it to Settings.

    Raises:
        ConfigError: with the offending field path
    """
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a mapping, got {type(data).__name__}")

    unknown = set(data) - {"retry", "answers", "exclude", "manifest"}
    if unknown:
        raise ConfigError(f"Unknown settings keys: {', '.join(sorted(unknown))}")

    answers = data.get("answers") or {}
    if not isinstance(answers, dict):
        raise ConfigError("answers must be a mapping of group name to yes/no")
    for group, value in answers.items():
        if not isinstance(value, bool):
            raise ConfigError(f"answers.{group} must be true or false")

    exclude = data.get("exclude") or []
    if not isinstance(exclude, list) or not all(isinstance(x, str) for x in exclude):
        raise ConfigError("exclude must be a list of target names")

    manifest = data.get("manifest")
    manifest_path = None
    if manifest is not None:
        if not isinstance(manifest, str) or not manifest.strip():
            raise ConfigError("manifest must be a non-empty path string")
        manifest_path = Path(manifest).expanduser()
        if not manifest_path.is_absolute() and base_dir is not None:
            manifest_path = base_dir / manifest_path

    return Settings(
        retry=_parse_retry(data.get("retry")),
        answers={str(k): v for k, v in answers.items()},
        exclude=set(exclude),
        manifest=manifest_path,
    )


def load_settings(path: Path, required: bool = False) -> Settings:
    """Load settings from ``path``; a missing optional file means defaults."""
    if not path.exists():
        if required:
            raise ConfigError(f"Settings file not found: {path}")
        _logging.debug(f"No settings file at {path}, using defaults")
        return Settings()
    return validate_settings(read_yaml(path), base_dir=path.parent)


__all__ = [
    "ConfigError",
    "Settings",
    "read_yaml",
    "validate_settings",
    "load_settings",
]
