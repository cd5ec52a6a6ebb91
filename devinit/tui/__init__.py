"""Terminal interaction helpers.

- click for line-based yes/no prompts (works in CI and over pipes)
- questionary for the optional-group checkbox (TTY only)
"""

from .prompts import (
    GroupConfirmer,
    ask_yes_no,
    confirm_group,
    parse_answer,
    select_groups_interactive,
)

__all__ = [
    "GroupConfirmer",
    "ask_yes_no",
    "confirm_group",
    "parse_answer",
    "select_groups_interactive",
]
