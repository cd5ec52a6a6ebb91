"""Manifest loader for the bundled (or user supplied) manifest file.

The manifest declares named groups of install targets and, per platform,
the ordered list of groups to run.

Caching Strategy:
- Each manifest file is parsed once and cached by its resolved path
- Use clear_cache() to force a reload (tests do this between cases)
"""

from pathlib import Path
from typing import Any

from devinit.config import ConfigError, read_yaml
from devinit.installer.models import (
    InstallTarget,
    Manager,
    Platform,
    PlatformProfile,
    SubManifest,
)
from devinit.paths import get_packaged_manifest_path

# Module-level cache: resolved manifest path -> (groups, platform entries)
_manifest_cache: dict[Path, tuple[dict[str, SubManifest], dict[str, Any]]] = {}

_MANAGER_VALUES = {m.value for m in Manager}
_PLATFORM_VALUES = {p.value for p in Platform if p != Platform.UNKNOWN}


def _require_str_field(data: dict, field: str, entity_name: str) -> None:
    """Validate required string field.

    Raises:
        ConfigError: If field missing, not str, or empty
    """
    if field not in data:
        raise ConfigError(f"{entity_name} missing required field: {field}")
    if not isinstance(data[field], str) or not data[field].strip():
        raise ConfigError(f"{entity_name} field '{field}' must be a non-empty string")


def _optional_field(data: dict, field: str, entity_name: str, field_type: type) -> None:
    """Validate optional field with type check.

    Raises:
        ConfigError: If field present, not None, and wrong type
    """
    if field in data and data[field] is not None:
        if not isinstance(data[field], field_type):
            type_name = field_type.__name__
            raise ConfigError(
                f"{entity_name} field '{field}' must be a {type_name} or null"
            )


def _require_list_field(data: dict, field: str, entity_name: str) -> None:
    """Validate required list field.

    Raises:
        ConfigError: If field missing or not a list
    """
    if field not in data:
        raise ConfigError(f"{entity_name} missing required field: {field}")
    if not isinstance(data[field], list):
        raise ConfigError(f"{entity_name} field '{field}' must be an array")


def _require_enum_field(
    value: str, field: str, entity_name: str, allowed_values: set[str]
) -> None:
    """Validate a value against allowed enum values.

    Raises:
        ConfigError: If value not in allowed values
    """
    if value not in allowed_values:
        sorted_allowed = ", ".join(sorted(allowed_values))
        raise ConfigError(
            f"{entity_name} has invalid {field}: {value}. "
            f"Must be one of: {sorted_allowed}"
        )


def _parse_target(raw: Any, group_name: str, default_manager: str | None) -> InstallTarget:
    """Build an InstallTarget from a bare name or a mapping."""
    entity = f"Group '{group_name}' target"
    if isinstance(raw, str):
        raw = {"name": raw}
    if not isinstance(raw, dict):
        raise ConfigError(f"{entity} must be a name or an object")

    _require_str_field(raw, "name", entity)
    entity = f"Target '{raw['name']}' in group '{group_name}'"

    manager = raw.get("manager", default_manager)
    if manager is None:
        raise ConfigError(f"{entity} missing required field: manager")
    _require_enum_field(manager, "manager", entity, _MANAGER_VALUES)

    if isinstance(raw.get("version"), (int, float)) and not isinstance(raw["version"], bool):
        raw = {**raw, "version": str(raw["version"])}
    for field in ("version", "description", "install", "url", "dest", "remediation"):
        _optional_field(raw, field, entity, str)
    _optional_field(raw, "env", entity, dict)

    metadata = {k: v for k, v in raw.items() if k not in ("name", "manager")}
    return InstallTarget(name=raw["name"], manager=Manager(manager), metadata=metadata)


def _parse_group(name: str, raw: Any) -> SubManifest:
    entity = f"Group '{name}'"
    if not isinstance(raw, dict):
        raise ConfigError(f"{entity} must be an object")

    _require_str_field(raw, "description", entity)
    _require_list_field(raw, "targets", entity)
    for field in ("prompt", "refresh", "manager"):
        _optional_field(raw, field, entity, str)
    _optional_field(raw, "prerequisite", entity, bool)
    _optional_field(raw, "env", entity, dict)

    default_manager = raw.get("manager")
    if default_manager is not None:
        _require_enum_field(default_manager, "manager", entity, _MANAGER_VALUES)

    targets = [_parse_target(t, name, default_manager) for t in raw["targets"]]
    seen = set()
    for target in targets:
        if target.name in seen:
            raise ConfigError(f"{entity} lists target '{target.name}' more than once")
        seen.add(target.name)

    return SubManifest(
        name=name,
        description=raw["description"],
        targets=targets,
        prompt=raw.get("prompt"),
        prerequisite=bool(raw.get("prerequisite", False)),
        refresh=raw.get("refresh"),
        env=dict(raw.get("env") or {}),
    )


def _load_manifest(path: Path) -> tuple[dict[str, SubManifest], dict[str, Any]]:
    key = path.resolve()
    if key in _manifest_cache:
        return _manifest_cache[key]

    raw = read_yaml(path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid manifest {path}: top level must be an object")
    for section in ("groups", "platforms"):
        if section not in raw:
            raise ConfigError(f"Invalid manifest {path}: missing top-level '{section}' key")
        if not isinstance(raw[section], dict):
            raise ConfigError(f"Invalid manifest {path}: '{section}' must be an object")

    groups = {name: _parse_group(name, data) for name, data in raw["groups"].items()}

    platforms = raw["platforms"]
    for platform_name, entry in platforms.items():
        entity = f"Platform '{platform_name}'"
        _require_enum_field(platform_name, "name", entity, _PLATFORM_VALUES)
        if not isinstance(entry, dict):
            raise ConfigError(f"{entity} must be an object")
        _require_str_field(entry, "package_manager", entity)
        _require_enum_field(entry["package_manager"], "package_manager", entity, _MANAGER_VALUES)
        _require_list_field(entry, "groups", entity)
        for group_name in entry["groups"]:
            if group_name not in groups:
                raise ConfigError(f"{entity} references unknown group '{group_name}'")

    _manifest_cache[key] = (groups, platforms)
    return groups, platforms


def get_groups(path: Path | None = None) -> dict[str, SubManifest]:
    """Return every group declared in the manifest, keyed by name."""
    groups, _ = _load_manifest(path or get_packaged_manifest_path())
    return groups


def get_profile(platform: Platform, path: Path | None = None) -> PlatformProfile:
    """Build the PlatformProfile for ``platform``.

    Raises:
        ConfigError: If the manifest has no entry for the platform
    """
    groups, platforms = _load_manifest(path or get_packaged_manifest_path())
    entry = platforms.get(platform.value)
    if entry is None:
        raise ConfigError(f"Manifest has no profile for platform '{platform.value}'")
    return PlatformProfile(
        platform=platform,
        package_manager=Manager(entry["package_manager"]),
        sub_manifests=[groups[name] for name in entry["groups"]],
    )


def clear_cache() -> None:
    """Clear all cached manifests."""
    _manifest_cache.clear()


__all__ = ["get_groups", "get_profile", "clear_cache"]
