"""devinit: bootstrap a developer workstation from a declarative manifest."""

from devinit.errors import (
    DevinitError,
    ManagerError,
    PrerequisiteError,
    UnsupportedPlatformError,
    format_error,
    format_suggestion,
)
from devinit.log import log_success, setup_logging

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "setup_logging",
    "log_success",
    "DevinitError",
    "ManagerError",
    "PrerequisiteError",
    "UnsupportedPlatformError",
    "format_error",
    "format_suggestion",
]
