"""Tests for host platform detection."""

from unittest.mock import patch

import pytest

from devinit.detection import detect_platform, require_supported
from devinit.errors import UnsupportedPlatformError
from devinit.installer.models import Platform


@pytest.mark.parametrize(
    "system,kernel,expected",
    [
        ("Windows", None, Platform.WINDOWS),
        ("Darwin", None, Platform.MACOS),
        ("Linux", "Linux version 6.5.0-14-generic (buildd@lcy02-amd64-110)", Platform.LINUX),
        ("Linux", "Linux version 5.15.133.1-microsoft-standard-WSL2", Platform.WSL),
        ("Linux", "Linux version 4.4.0-19041-Microsoft", Platform.WSL),
        ("FreeBSD", None, Platform.UNKNOWN),
        ("", None, Platform.UNKNOWN),
    ],
)
def test_detect_platform(system, kernel, expected):
    assert detect_platform(system=system, kernel_release=kernel) == expected


def test_linux_reads_proc_version_when_kernel_not_given():
    with patch(
        "devinit.detection._read_kernel_marker",
        return_value="Linux version 5.15.90.1-microsoft-standard-WSL2",
    ):
        assert detect_platform(system="Linux") == Platform.WSL


def test_kernel_marker_falls_back_to_release(temp_dir):
    with patch("devinit.detection.PROC_VERSION", temp_dir / "missing"), patch(
        "devinit.detection._platform.release", return_value="6.1.0-generic"
    ):
        assert detect_platform(system="Linux") == Platform.LINUX


def test_require_supported_passes_known_platforms():
    assert require_supported(Platform.MACOS) == Platform.MACOS


def test_require_supported_rejects_unknown():
    with pytest.raises(UnsupportedPlatformError, match="Unsupported OS: SunOS"):
        require_supported(Platform.UNKNOWN, "SunOS")
