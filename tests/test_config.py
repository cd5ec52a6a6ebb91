"""Tests for user settings loading and validation."""

from pathlib import Path

import pytest

from devinit.config import ConfigError, Settings, load_settings, read_yaml, validate_settings
from devinit.installer.models import DEFAULT_RETRY_POLICIES, Manager, RetryPolicy


def test_missing_optional_file_gives_defaults(temp_dir):
    settings = load_settings(temp_dir / "config.yaml")

    assert settings == Settings()
    assert settings.retry == DEFAULT_RETRY_POLICIES


def test_missing_required_file_raises(temp_dir):
    with pytest.raises(ConfigError, match="not found"):
        load_settings(temp_dir / "config.yaml", required=True)


def test_empty_file_gives_defaults(temp_dir):
    path = temp_dir / "config.yaml"
    path.write_text("")

    assert load_settings(path) == Settings()


def test_full_settings(temp_dir):
    path = temp_dir / "config.yaml"
    path.write_text(
        """
retry:
  apt:
    max_attempts: 5
  cargo:
    backoff: 0
answers:
  rust: true
  lazyvim: false
exclude:
  - cmatrix
  - figlet
manifest: manifests/work.yaml
"""
    )

    settings = load_settings(path)

    assert settings.retry[Manager.APT] == RetryPolicy(max_attempts=5, backoff=2.0)
    assert settings.retry[Manager.CARGO] == RetryPolicy(max_attempts=3, backoff=0.0)
    assert settings.retry[Manager.BREW] == DEFAULT_RETRY_POLICIES[Manager.BREW]
    assert settings.answers == {"rust": True, "lazyvim": False}
    assert settings.exclude == {"cmatrix", "figlet"}
    assert settings.manifest == temp_dir / "manifests" / "work.yaml"


def test_defaults_not_mutated_by_overrides():
    validate_settings({"retry": {"apt": {"max_attempts": 9}}})

    assert DEFAULT_RETRY_POLICIES[Manager.APT].max_attempts == 3


@pytest.mark.parametrize(
    "data,message",
    [
        ({"retries": {}}, "Unknown settings keys: retries"),
        ({"retry": {"yum": {}}}, "Unknown manager 'yum'"),
        ({"retry": {"apt": 3}}, "retry.apt must be a mapping"),
        ({"retry": {"apt": {"max_attempts": "3"}}}, "must be an integer"),
        ({"retry": {"apt": {"max_attempts": 0}}}, "max_attempts must be at least 1"),
        ({"retry": {"apt": {"backoff": -1}}}, "backoff must not be negative"),
        ({"answers": {"rust": "yes"}}, "answers.rust must be true or false"),
        ({"exclude": "cmatrix"}, "exclude must be a list"),
        ({"manifest": ""}, "manifest must be a non-empty path"),
        (["retry"], "Settings must be a mapping"),
    ],
)
def test_invalid_settings(data, message):
    with pytest.raises(ConfigError, match=message):
        validate_settings(data)


def test_absolute_manifest_path_kept(temp_dir):
    settings = validate_settings({"manifest": str(temp_dir / "m.yaml")}, base_dir=Path("/etc"))

    assert settings.manifest == temp_dir / "m.yaml"


class TestReadYaml:
    def test_syntax_error_reports_position(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("answers:\n  rust: [true\n")

        with pytest.raises(ConfigError, match=r"YAML syntax error in .* at line \d+, col \d+"):
            read_yaml(path)

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigError, match="File not found"):
            read_yaml(temp_dir / "nope.yaml")
