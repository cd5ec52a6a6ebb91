"""Error types and formatting utilities for consistent error messages.

This module provides the exception taxonomy used by the installer and
helper functions for formatting user-facing error messages.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devinit.installer.models import RunSummary


class DevinitError(Exception):
    """Base class for fatal bootstrap errors."""


class UnsupportedPlatformError(DevinitError):
    """Raised when the host platform has no installation profile."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Unsupported OS: {identifier}")


class PrerequisiteError(DevinitError):
    """Raised when a prerequisite sub-manifest (e.g. Homebrew) fails.

    Carries the partial run summary so the caller can still report what
    happened before aborting.
    """

    def __init__(self, group: str, failed: list[str], summary: "RunSummary"):
        self.group = group
        self.failed = failed
        self.summary = summary
        super().__init__(
            f"Cannot proceed without {group}: {', '.join(failed)} failed"
        )


class ManagerError(DevinitError):
    """Raised by a manager adapter when an install cannot even be attempted."""


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Args:
        message: The error message to format

    Returns:
        Formatted error message with 'Error: ' prefix

    Examples:
        >>> format_error("manifest not found")
        'Error: manifest not found'
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Examples:
        >>> format_field_error("Group 'rust'", "targets", "must be an array")
        "Group 'rust' field 'targets' must be an array"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("group 'foo' not found", "run 'devinit list' to see groups")
        "Error: group 'foo' not found. Hint: run 'devinit list' to see groups"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


__all__ = [
    "DevinitError",
    "UnsupportedPlatformError",
    "PrerequisiteError",
    "ManagerError",
    "format_error",
    "format_field_error",
    "format_suggestion",
]
