"""Operator prompts: yes/no confirmation and optional-group selection."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
import questionary
from prompt_toolkit.styles import Style

if TYPE_CHECKING:
    from ..installer.models import SubManifest

_logging = logging.getLogger(__name__)

YES_ANSWERS = {"y", "yes"}
NO_ANSWERS = {"n", "no"}

SELECT_STYLE = Style(
    [
        ("group", "bold"),
        ("targets", "fg:ansibrightblack"),
    ]
)


def parse_answer(value: str) -> bool | None:
    """Map a yes/no response to a bool, or None when it is neither."""
    normalized = value.strip().lower()
    if normalized in YES_ANSWERS:
        return True
    if normalized in NO_ANSWERS:
        return False
    return None


def ask_yes_no(prompt: str) -> bool:
    """Prompt until the operator answers y, yes, n or no (any case)."""
    while True:
        response = click.prompt(
            f"{prompt} [y/n]", default="", show_default=False, prompt_suffix=": "
        )
        answer = parse_answer(response)
        if answer is not None:
            return answer
        click.echo("Please answer y/yes or n/no.")


class GroupConfirmer:
    """Decides whether an optional sub-manifest runs.

    Pre-seeded answers win, then a blanket ``assume`` value (from --yes or
    --no-optional), then an interactive prompt. Without a TTY the group is
    declined rather than blocking on input.
    """

    def __init__(
        self,
        answers: dict[str, bool] | None = None,
        assume: bool | None = None,
        interactive: bool | None = None,
    ):
        self.answers = dict(answers or {})
        self.assume = assume
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def __call__(self, group: SubManifest) -> bool:
        if group.name in self.answers:
            return self.answers[group.name]
        if self.assume is not None:
            return self.assume
        if not self.interactive:
            _logging.warning(f"No TTY available, declining optional {group.name}")
            return False
        return ask_yes_no(group.prompt or f"Do you want to install {group.description}?")


def confirm_group(group: SubManifest) -> bool:
    return GroupConfirmer()(group)


def select_groups_interactive(groups: list[SubManifest]) -> dict[str, bool] | None:
    """Checkbox selection of optional groups, all pre-checked.

    Returns:
        Mapping of group name to whether it should run, or None if the
        operator cancelled.

    Raises:
        RuntimeError: If not running in a TTY
    """
    if not sys.stdin.isatty():
        raise RuntimeError("Interactive group selector requires a TTY")

    optional = [g for g in groups if g.optional]
    if not optional:
        return {}

    choices = [
        questionary.Choice(
            title=[
                ("class:group", g.description),
                ("class:targets", f"  ({', '.join(t.name for t in g.targets)})"),
            ],
            value=g.name,
            checked=True,
        )
        for g in optional
    ]

    try:
        selected = questionary.checkbox(
            "Select optional components to install:",
            choices=choices,
            instruction="Space to toggle, Enter to confirm",
            style=SELECT_STYLE,
        ).ask()
    except KeyboardInterrupt:
        return None

    if selected is None:
        return None
    return {g.name: g.name in selected for g in optional}


__all__ = [
    "YES_ANSWERS",
    "NO_ANSWERS",
    "SELECT_STYLE",
    "parse_answer",
    "ask_yes_no",
    "GroupConfirmer",
    "confirm_group",
    "select_groups_interactive",
]
