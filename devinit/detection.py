"""Host platform detection."""

import logging
import platform as _platform
from pathlib import Path

from devinit.errors import UnsupportedPlatformError
from devinit.installer.models import Platform

_logging = logging.getLogger(__name__)

PROC_VERSION = Path("/proc/version")
WSL_MARKER = "microsoft"


def _read_kernel_marker() -> str:
    try:
        return PROC_VERSION.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return _platform.release()


def detect_platform(
    system: str | None = None, kernel_release: str | None = None
) -> Platform:
    """Classify the host. Pure apart from reading ``/proc/version`` on Linux.

    Args:
        system: OS identifier as reported by ``platform.system()``
        kernel_release: Linux kernel version string; a Microsoft marker in
            it means the Windows Subsystem for Linux
    """
    system = _platform.system() if system is None else system

    if system == "Windows":
        return Platform.WINDOWS
    if system == "Darwin":
        return Platform.MACOS
    if system == "Linux":
        marker = _read_kernel_marker() if kernel_release is None else kernel_release
        if WSL_MARKER in marker.lower():
            return Platform.WSL
        return Platform.LINUX
    return Platform.UNKNOWN


def require_supported(detected: Platform, identifier: str | None = None) -> Platform:
    """Raise UnsupportedPlatformError for ``Platform.UNKNOWN``."""
    if detected == Platform.UNKNOWN:
        raise UnsupportedPlatformError(identifier or _platform.system() or "unknown")
    return detected


__all__ = ["detect_platform", "require_supported"]
